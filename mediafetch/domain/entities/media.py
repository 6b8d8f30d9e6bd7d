# mediafetch/domain/entities/media.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

from mediafetch.common.naming.filenames import safe_filename
from mediafetch.domain.enums.provider import Provider

if TYPE_CHECKING:
    from mediafetch.domain.ports.provider import MediaStreamPort


@dataclass(frozen=True)
class Format:
    """
    Canonical, provider-agnostic format. Video fields are set only when
    has_video, audio fields only when has_audio.
    """
    has_video: bool
    has_audio: bool
    extension: str
    size: int
    source: Provider
    source_identifier: str

    video_codec: Optional[str] = None
    video_bitrate: Optional[float] = None
    video_width: Optional[int] = None
    video_height: Optional[int] = None
    video_fps: Optional[float] = None

    audio_codec: Optional[str] = None
    audio_bitrate: Optional[float] = None
    audio_sample_rate: Optional[float] = None

    @property
    def resolution(self) -> int:
        if not self.has_video:
            return 0
        return (self.video_width or 0) * (self.video_height or 0)

    @property
    def is_audio_only(self) -> bool:
        return self.has_audio and not self.has_video


@dataclass(frozen=True)
class Media:
    url: str
    title: str
    duration: float
    formats: Tuple[Format, ...] = ()


@dataclass(frozen=True)
class DownloadHandle:
    """Everything the transport needs to send one resolved format."""
    media: Media
    format: Format
    stream: "MediaStreamPort"

    @property
    def filename(self) -> str:
        return safe_filename(self.media.title, self.format.extension)
