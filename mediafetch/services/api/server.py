# mediafetch/services/api/server.py
from __future__ import annotations

import uvicorn

from mediafetch.common.settings import get_settings


def serve() -> None:
    """Console entry point: run the API under Uvicorn with configured host/port."""
    cfg = get_settings()
    uvicorn.run(
        "mediafetch.services.api.app:app",
        host=cfg.api.host,
        port=cfg.api.port,
        log_level=cfg.log_level.lower(),
        reload=cfg.api.reload,
    )


if __name__ == "__main__":
    serve()
