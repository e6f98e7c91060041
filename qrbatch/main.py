from fastapi import FastAPI

from qrbatch.api.health_routes import router as health_router
from qrbatch.api.file_routes import router as file_router
from qrbatch.api.manual_routes import router as manual_router
from qrbatch.api.token_routes import router as token_router
from qrbatch.core.config import Settings, settings
from qrbatch.core.logging import setup_logging
from qrbatch.render.qr_renderer import QRRenderer
from qrbatch.services.ingestion import IngestionCoordinator
from qrbatch.services.storage import JsonStateStore
from qrbatch.services.workspace import TokenWorkspace


def create_app(cfg: Settings | None = None) -> FastAPI:
    cfg = cfg or settings
    setup_logging(cfg.log_level)

    app = FastAPI(
        title="QR Batch Generator",
        version="1.0.0",
    )

    workspace = TokenWorkspace(JsonStateStore(cfg.storage_dir), mode=cfg.extraction_mode)
    app.state.settings = cfg
    app.state.workspace = workspace
    app.state.coordinator = IngestionCoordinator(workspace, cfg)
    app.state.renderer = QRRenderer.from_settings(cfg)

    app.include_router(health_router)
    app.include_router(file_router, prefix="/api")
    app.include_router(token_router, prefix="/api")
    app.include_router(manual_router, prefix="/api")
    return app


app = create_app()
