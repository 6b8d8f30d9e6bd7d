# mediafetch/services/schemas/media.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mediafetch.domain.enums.provider import Provider


class FormatRead(BaseModel):
    has_video: bool
    video_codec: Optional[str] = None
    video_bitrate: Optional[float] = Field(None, ge=0)
    video_width: Optional[int] = Field(None, ge=0)
    video_height: Optional[int] = Field(None, ge=0)
    video_fps: Optional[float] = Field(None, ge=0)

    has_audio: bool
    audio_codec: Optional[str] = None
    audio_bitrate: Optional[float] = Field(None, ge=0)
    audio_sample_rate: Optional[float] = Field(None, ge=0)

    extension: str = Field(..., examples=["mp4"])
    size: int = Field(..., ge=0)
    source: Provider = Field(..., examples=["youtube"])
    source_identifier: str = Field(..., min_length=64, max_length=64)

    model_config = ConfigDict(use_enum_values=False)


class MediaRead(BaseModel):
    url: str
    title: str
    duration: float = Field(0, ge=0)
    formats: List[FormatRead] = Field(default_factory=list)
