# mediafetch/domain/entities/extraction.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Tuple


@dataclass(frozen=True)
class RawFormat:
    """
    One provider format record as emitted by the extraction tool.
    Missing numeric fields are 0 and missing strings are "" so policies never
    need None checks.
    """
    format_id: str
    format_note: str = ""
    ext: str = ""
    filesize: int = 0
    filesize_approx: int = 0

    vcodec: str = ""
    width: int = 0
    height: int = 0
    fps: float = 0.0
    vbr: float = 0.0

    acodec: str = ""
    asr: float = 0.0
    abr: float = 0.0


@dataclass(frozen=True)
class ExtractionResult:
    """Raw output of one extraction for one resource."""
    url: str
    title: str = ""
    duration: float = 0.0
    original_url: str = ""
    formats: Tuple[RawFormat, ...] = ()
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
