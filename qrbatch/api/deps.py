from fastapi import Request

from qrbatch.core.config import Settings
from qrbatch.render.qr_renderer import QRRenderer
from qrbatch.services.ingestion import IngestionCoordinator
from qrbatch.services.workspace import TokenWorkspace

# Everything lives on app.state, built once by create_app()

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_workspace(request: Request) -> TokenWorkspace:
    return request.app.state.workspace

def get_coordinator(request: Request) -> IngestionCoordinator:
    return request.app.state.coordinator

def get_renderer(request: Request) -> QRRenderer:
    return request.app.state.renderer
