# mediafetch/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class MediaFetchError(RuntimeError):
    """Base class for every failure raised by the core."""


class UnsupportedSource(MediaFetchError):
    """The resource URL does not belong to a supported provider."""

    def __init__(self, url: str, reason: str = "unsupported source") -> None:
        self.url = url
        super().__init__(f"{reason}: {url}")


class FormatNotFound(MediaFetchError):
    """The stable identifier does not resolve within the current extraction."""

    def __init__(self, url: str, source_identifier: str) -> None:
        self.url = url
        self.source_identifier = source_identifier
        super().__init__(f"format {source_identifier!r} not found for {url}")


@dataclass(eq=False)
class ExtractionError(MediaFetchError):
    """Adapter-level error for extraction tool failures."""
    message: str
    stderr: Optional[str] = None
    rc: Optional[int] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


class SpawnError(ExtractionError):
    """The extraction tool could not be started."""


class ToolError(ExtractionError):
    """The tool wrote to stderr, exited non-zero or timed out."""


class ParseError(ExtractionError):
    """The tool's stdout was not a record of the expected schema."""


class ExtractionCancelled(ExtractionError):
    """The caller cancelled the extraction; the process was terminated."""


@dataclass(eq=False)
class StreamError(MediaFetchError):
    """Byte stream for a resolved format failed to start or broke mid-transfer."""
    message: str
    stderr: Optional[str] = None
    rc: Optional[int] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)
