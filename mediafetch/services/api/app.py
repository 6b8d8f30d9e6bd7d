# mediafetch/services/api/app.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediafetch.common.logging import get_logger
from mediafetch.common.settings import get_settings
from mediafetch.services.api.deps import build_media_service
from mediafetch.services.api.errors import register_exception_handlers
from mediafetch.services.api.routers import health, media
from mediafetch.services.media.service import MediaService

cfg = get_settings()
dev = cfg.app_env.lower() == "development"
logger = get_logger()


def create_app(media_service: Optional[MediaService] = None) -> FastAPI:
    service = media_service or build_media_service()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service.cache.start()
        logger.info("%s started (cache ttl=%.0fs)", cfg.app_name, service.cache.ttl_sec)
        try:
            yield
        finally:
            service.cache.stop()

    app = FastAPI(
        title="Mediafetch API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
        lifespan=lifespan,
    )
    app.state.media_service = service

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
        expose_headers=["Content-Disposition"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(media.router)
    return app

app = create_app()
