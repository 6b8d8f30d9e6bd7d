# mediafetch/services/api/deps.py
from __future__ import annotations

from fastapi import Request

from mediafetch.services.cache.extraction_cache import ExtractionCache
from mediafetch.services.media.service import MediaService


def get_media_service(request: Request) -> MediaService:
    """
    Provide the application's MediaService via DI.
    Tests override this dependency to inject fakes.
    """
    return request.app.state.media_service


def build_media_service() -> MediaService:
    """Default wiring: one cache, yt-dlp backed providers."""
    return MediaService(cache=ExtractionCache())
