# mediafetch/services/api/routers/health.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from mediafetch.common.settings import get_settings
from mediafetch.services.api.deps import get_media_service
from mediafetch.services.media.service import MediaService

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz(svc: MediaService = Depends(get_media_service)):
    cfg = get_settings()
    return {
        "ok": True,
        "app": cfg.app_name,
        "env": cfg.app_env,
        "providers": sorted(p.value for p in svc.providers),
        "cached": len(svc.cache),
        "sweeper": svc.cache.sweeper_running,
    }
