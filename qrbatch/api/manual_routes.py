from typing import List

from fastapi import APIRouter, Depends, HTTPException

from qrbatch.api.deps import get_renderer, get_settings, get_workspace
from qrbatch.api.file_routes import zip_response
from qrbatch.core.config import Settings
from qrbatch.core.errors import NothingToExportError
from qrbatch.models.common import AddResult, ExtractionMode
from qrbatch.models.tokens import ManualTokenRequest, ManualTokenResponse
from qrbatch.render import archive
from qrbatch.render.qr_renderer import QRRenderer
from qrbatch.services.workspace import TokenWorkspace

router = APIRouter()

MANUAL_ARCHIVE_SOURCE = "manual"

@router.get("/manual", response_model=List[str])
def list_manual(workspace: TokenWorkspace = Depends(get_workspace)):
    return workspace.manual.tokens

@router.post("/manual", response_model=ManualTokenResponse, status_code=201)
def add_manual(req: ManualTokenRequest, workspace: TokenWorkspace = Depends(get_workspace)):
    result = workspace.manual.add(req.token)
    if result == AddResult.invalid:
        if workspace.mode == ExtractionMode.numeric:
            detail = "Enter digits only"
        else:
            detail = "Enter a non-empty value"
        raise HTTPException(status_code=400, detail=detail)
    if result == AddResult.duplicate:
        raise HTTPException(status_code=409, detail="This value has already been added")
    return ManualTokenResponse(result=result, tokens=workspace.manual.tokens, message="Added")

@router.get("/manual/archive")
def download_manual_archive(
    workspace: TokenWorkspace = Depends(get_workspace),
    renderer: QRRenderer = Depends(get_renderer),
    cfg: Settings = Depends(get_settings),
):
    try:
        content = archive.pack(workspace.manual.tokens, renderer, max_len=cfg.archive_name_max_len)
    except NothingToExportError:
        raise HTTPException(status_code=404, detail="No QR codes available")
    return zip_response(content, archive.archive_filename(MANUAL_ARCHIVE_SOURCE))

@router.delete("/manual/{token:path}")
def delete_manual(token: str, workspace: TokenWorkspace = Depends(get_workspace)):
    workspace.manual.remove(token)
    return {"deleted": token}
