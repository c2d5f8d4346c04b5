from __future__ import annotations

from fastapi import FastAPI

from reelorder.common.logging import get_logger, level_from_name
from reelorder.common.settings import get_settings
from reelorder.services.api.routers import health, playlists


def create_app() -> FastAPI:
    cfg = get_settings()
    get_logger("reelorder", level_from_name(cfg.log_level))
    app = FastAPI(
        title="Reelorder API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(playlists.router)
    return app

app = create_app()
