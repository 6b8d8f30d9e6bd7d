# mediafetch/services/api/errors.py
from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mediafetch.common.logging import get_logger
from mediafetch.domain.errors import (
    ExtractionError,
    FormatNotFound,
    MediaFetchError,
    StreamError,
    UnsupportedSource,
)

logger = get_logger()

# most specific first
STATUS_BY_ERROR = (
    (UnsupportedSource, HTTPStatus.BAD_REQUEST),
    (FormatNotFound, HTTPStatus.NOT_FOUND),
    (ExtractionError, HTTPStatus.BAD_GATEWAY),
    (StreamError, HTTPStatus.BAD_GATEWAY),
)


def status_for(exc: MediaFetchError) -> HTTPStatus:
    for cls, status in STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


async def media_error_handler(request: Request, exc: MediaFetchError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        stderr = getattr(exc, "stderr", None)
        if stderr:
            logger.debug("tool stderr: %s", stderr)
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MediaFetchError, media_error_handler)
