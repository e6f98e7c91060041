from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import PlainTextResponse

from qrbatch.api.deps import get_renderer, get_settings, get_workspace
from qrbatch.core.config import Settings
from qrbatch.models.tokens import ExtractRequest, ExtractResponse
from qrbatch.render import archive
from qrbatch.render.qr_renderer import QRRenderer
from qrbatch.services.token_extractor import extract
from qrbatch.services.workspace import TokenWorkspace

router = APIRouter()

def _require_known(token: str, workspace: TokenWorkspace) -> None:
    if not workspace.has_token(token):
        raise HTTPException(status_code=404, detail="QR code not found")

@router.get("/tokens/{token:path}/qr.png")
def download_qr(
    token: str,
    workspace: TokenWorkspace = Depends(get_workspace),
    renderer: QRRenderer = Depends(get_renderer),
    cfg: Settings = Depends(get_settings),
):
    _require_known(token, workspace)
    filename = archive.image_filename(token, cfg.archive_name_max_len)
    return Response(
        content=renderer.render_png(token),
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@router.get("/tokens/{token:path}/text", response_class=PlainTextResponse)
def copy_token(token: str, workspace: TokenWorkspace = Depends(get_workspace)):
    _require_known(token, workspace)
    return token

@router.post("/extract", response_model=ExtractResponse)
def extract_preview(req: ExtractRequest, workspace: TokenWorkspace = Depends(get_workspace)):
    mode = req.mode or workspace.mode
    return ExtractResponse(mode=mode, tokens=extract(req.text, mode))
