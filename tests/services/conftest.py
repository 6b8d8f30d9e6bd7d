# tests/services/conftest.py
from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Optional, Sequence, Union

import pytest
from starlette.testclient import TestClient

from mediafetch.common.ytdlp.ytdlp_helpers import parse_ytdlp
from mediafetch.domain.entities.extraction import ExtractionResult, RawFormat
from mediafetch.domain.enums.provider import Provider
from mediafetch.services.api.app import create_app
from mediafetch.services.cache.extraction_cache import ExtractionCache
from mediafetch.services.media.service import MediaService

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
VIMEO_URL = "https://vimeo.com/76979871"


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, sec: float) -> None:
        self.now += sec


class FakeStream:
    def __init__(self, chunks: Sequence[bytes] = (b"chunk-1", b"chunk-2")) -> None:
        self.chunks = list(chunks)
        self.closed = 0

    def __iter__(self):
        yield from self.chunks

    def close(self) -> None:
        self.closed += 1


class FakeProvider:
    """
    Scripted provider: each extract() returns (or raises) the next scripted
    item; the last one repeats. Records every call.
    """

    def __init__(
        self,
        provider: Provider,
        script: List[Union[ExtractionResult, Exception]],
        *,
        preferred_video_ext: str = "mp4",
        delay: float = 0.0,
    ) -> None:
        self.provider = provider
        self.preferred_video_ext = preferred_video_ext
        self.script = list(script)
        self.delay = delay
        self.extract_calls: List[Dict[str, Any]] = []
        self.streams: List[tuple[str, RawFormat, FakeStream]] = []
        self._lock = threading.Lock()

    def extract(self, url: str, cancel: Optional[threading.Event] = None) -> ExtractionResult:
        with self._lock:
            i = len(self.extract_calls)
            self.extract_calls.append({"url": url, "cancel": cancel})
        if self.delay:
            time.sleep(self.delay)
        item = self.script[min(i, len(self.script) - 1)]
        if isinstance(item, Exception):
            raise item
        return item

    def open_stream(self, url: str, raw_format: RawFormat) -> FakeStream:
        stream = FakeStream()
        self.streams.append((url, raw_format, stream))
        return stream


@pytest.fixture()
def fake_provider():
    """The scripted provider class, for tests that wire their own MediaService."""
    return FakeProvider


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock):
    c = ExtractionCache(ttl_sec=60, sweep_interval_sec=3600, clock=clock)
    yield c
    c.stop(timeout=5)


@pytest.fixture()
def youtube_result(ytdlp_document) -> ExtractionResult:
    return parse_ytdlp(ytdlp_document, YOUTUBE_URL)


@pytest.fixture()
def youtube(youtube_result) -> FakeProvider:
    return FakeProvider(Provider.youtube, [youtube_result])


@pytest.fixture()
def vimeo() -> FakeProvider:
    doc = {
        "title": "Vimeo clip",
        "duration": 62,
        "formats": [
            {"format_id": "http-720p", "ext": "mp4", "vcodec": "avc1", "acodec": "mp4a.40.2",
             "width": 1280, "height": 720, "fps": 30, "vbr": 2500, "abr": 128, "filesize": 20_000_000},
            {"format_id": "hls-audio", "ext": "mp4", "vcodec": "none", "acodec": "mp4a.40.2",
             "abr": 128, "filesize_approx": 1_000_000},
        ],
    }
    return FakeProvider(Provider.vimeo, [parse_ytdlp(doc, VIMEO_URL)])


@pytest.fixture()
def media_service(cache, youtube, vimeo) -> MediaService:
    return MediaService(cache=cache, providers={Provider.youtube: youtube, Provider.vimeo: vimeo})


@pytest.fixture()
def api_client(media_service):
    """
    A TestClient around an app wired to the fake-provider MediaService.
    Entering the client runs the lifespan, so the cache sweeper is live.
    """
    app = create_app(media_service=media_service)
    with TestClient(app) as client:
        yield client
