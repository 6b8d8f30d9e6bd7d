# mediafetch/services/providers/base.py
from __future__ import annotations

import threading
from typing import ClassVar, Optional

from mediafetch.common.settings import get_settings
from mediafetch.domain.entities.extraction import ExtractionResult, RawFormat
from mediafetch.domain.enums.provider import Provider
from mediafetch.domain.ports.provider import MediaStreamPort, ProviderPort
from mediafetch.services.ytdlp.ytdlp_adapter import YtDlpAdapter


class YtDlpProvider(ProviderPort):
    """
    Provider backed by yt-dlp. Subclasses only pin the provider identity;
    extraction and streaming go through the shared adapter.
    """
    provider: ClassVar[Provider]

    def __init__(self, adapter: Optional[YtDlpAdapter] = None, *, preferred_video_ext: Optional[str] = None) -> None:
        self.adapter = adapter or YtDlpAdapter()
        self.preferred_video_ext = preferred_video_ext or get_settings().preferred_video_ext

    def extract(self, url: str, cancel: Optional[threading.Event] = None) -> ExtractionResult:
        return self.adapter.extract(url, cancel)

    def open_stream(self, url: str, raw_format: RawFormat) -> MediaStreamPort:
        return self.adapter.open_stream(url, raw_format.format_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider.value!r})"
