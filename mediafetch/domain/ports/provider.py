from __future__ import annotations

import threading
from typing import Iterator, Optional, Protocol

from mediafetch.domain.entities.extraction import ExtractionResult, RawFormat
from mediafetch.domain.enums.provider import Provider


class MediaStreamPort(Protocol):
    """Pull-based byte stream for one format. Must be closed by the consumer."""
    def __iter__(self) -> Iterator[bytes]: ...
    def close(self) -> None: ...


class ProviderPort(Protocol):
    provider: Provider
    preferred_video_ext: str

    def extract(self, url: str, cancel: Optional[threading.Event] = None) -> ExtractionResult: ...
    def open_stream(self, url: str, raw_format: RawFormat) -> MediaStreamPort: ...
