from fastapi import APIRouter, Depends

from qrbatch.api.deps import get_coordinator, get_workspace
from qrbatch.services.ingestion import IngestionCoordinator
from qrbatch.services.workspace import TokenWorkspace

router = APIRouter()

@router.get("/health")
def health(
    workspace: TokenWorkspace = Depends(get_workspace),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
):
    return {"status": "ok", "mode": workspace.mode.value, "loading": coordinator.in_flight}
