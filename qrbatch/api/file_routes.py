import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile

from qrbatch.api.deps import get_coordinator, get_renderer, get_settings, get_workspace
from qrbatch.core.config import Settings
from qrbatch.core.errors import IngestionSuperseded, NothingToExportError, SourceDecodeError
from qrbatch.models.common import ExtractionMode
from qrbatch.models.tokens import FileSummary, IngestResponse, UploadedFile, WorkspaceState
from qrbatch.render import archive
from qrbatch.render.qr_renderer import QRRenderer
from qrbatch.services.ingestion import IngestionCoordinator
from qrbatch.services.workspace import TokenWorkspace

logger = logging.getLogger(__name__)

router = APIRouter()

def zip_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

# ---------- State ----------
@router.get("/state", response_model=WorkspaceState)
def get_state(
    workspace: TokenWorkspace = Depends(get_workspace),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
):
    return workspace.snapshot(loading=coordinator.in_flight)

# ---------- Files ----------
@router.get("/files", response_model=List[FileSummary])
def list_files(workspace: TokenWorkspace = Depends(get_workspace)):
    return [f.summary(i) for i, f in enumerate(workspace.files)]

@router.post("/files", response_model=IngestResponse)
async def upload_file(
    file: UploadFile = File(...),
    mode: Optional[ExtractionMode] = Form(default=None),
    workspace: TokenWorkspace = Depends(get_workspace),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
):
    filename = file.filename or "upload.txt"
    data = await file.read()
    try:
        uploaded = await coordinator.ingest(filename, data, mode=mode)
    except SourceDecodeError as ex:
        logger.warning("%s", ex)
        raise HTTPException(status_code=422, detail="Error reading the file")
    except IngestionSuperseded as ex:
        raise HTTPException(status_code=409, detail=str(ex))

    index = workspace.active_index
    return IngestResponse(
        file=uploaded.summary(index),
        tokens=uploaded.tokens,
        message=f"{len(uploaded.tokens)} tokens found",
    )

@router.get("/files/{index}", response_model=UploadedFile)
def get_file(index: int, workspace: TokenWorkspace = Depends(get_workspace)):
    try:
        return workspace.get_file(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="file not found")

@router.delete("/files/{index}")
def delete_file(index: int, workspace: TokenWorkspace = Depends(get_workspace)):
    try:
        removed = workspace.remove_file(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="file not found")
    return {"deleted": removed.name, "active_index": workspace.active_index}

# ---------- Selection ----------
@router.post("/files/{index}/select", response_model=WorkspaceState)
def select_file(
    index: int,
    workspace: TokenWorkspace = Depends(get_workspace),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
):
    try:
        workspace.select(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="file not found")
    return workspace.snapshot(loading=coordinator.in_flight)

@router.delete("/selection", response_model=WorkspaceState)
def clear_selection(
    workspace: TokenWorkspace = Depends(get_workspace),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
):
    workspace.select(None)
    return workspace.snapshot(loading=coordinator.in_flight)

# ---------- Export ----------
@router.get("/files/{index}/archive")
def download_archive(
    index: int,
    workspace: TokenWorkspace = Depends(get_workspace),
    renderer: QRRenderer = Depends(get_renderer),
    cfg: Settings = Depends(get_settings),
):
    try:
        uf = workspace.get_file(index)
        content = archive.pack(uf.tokens, renderer, max_len=cfg.archive_name_max_len)
    except (IndexError, NothingToExportError):
        raise HTTPException(status_code=404, detail="No QR codes available")
    logger.info("Exported %d codes for %r", len(uf.tokens), uf.name)
    return zip_response(content, archive.archive_filename(uf.name))
