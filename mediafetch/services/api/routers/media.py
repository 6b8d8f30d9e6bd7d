# mediafetch/services/api/routers/media.py
from __future__ import annotations

import mimetypes
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from mediafetch.common.naming.filenames import content_disposition
from mediafetch.common.settings import get_settings
from mediafetch.domain.entities.media import DownloadHandle
from mediafetch.services.api.cancellation import run_cancellable
from mediafetch.services.api.deps import get_media_service
from mediafetch.services.mappers.media import to_media_read
from mediafetch.services.media.service import MediaService
from mediafetch.services.schemas.media import MediaRead

cfg = get_settings()
router = APIRouter(prefix=cfg.api.prefix, tags=["media"])


@router.get("/quality", response_model=MediaRead)
async def get_quality(
    request: Request,
    url: str = Query(..., min_length=1, description="Resource URL to inspect"),
    svc: MediaService = Depends(get_media_service),
) -> MediaRead:
    media = await run_cancellable(request, svc.list_formats, url, poll_sec=cfg.api.disconnect_poll_sec)
    return to_media_read(media)


def _iter_stream(handle: DownloadHandle) -> Iterator[bytes]:
    # closes (and reaps) the tool when the response ends or the client leaves
    try:
        yield from handle.stream
    finally:
        handle.stream.close()


@router.get("/download")
async def download(
    request: Request,
    url: str = Query(..., min_length=1),
    source_identifier: str = Query(..., min_length=1, description="Stable format id from /quality"),
    source: Optional[str] = Query(None, description="Provider reported by /quality"),
    container: Optional[str] = Query(None, description="Expected file extension, e.g. mp4"),
    svc: MediaService = Depends(get_media_service),
) -> StreamingResponse:
    handle: DownloadHandle = await run_cancellable(
        request,
        svc.resolve_download,
        url,
        source_identifier,
        source=source,
        container=container,
        poll_sec=cfg.api.disconnect_poll_sec,
    )
    filename = handle.filename
    media_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return StreamingResponse(
        _iter_stream(handle),
        media_type=media_type,
        headers={"Content-Disposition": content_disposition(filename)},
        background=BackgroundTask(handle.stream.close),
    )
