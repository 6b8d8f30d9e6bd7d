# mediafetch/domain/policies/format_normalizer.py
from __future__ import annotations

import hashlib
from typing import Iterable, List

from mediafetch.domain.entities.extraction import RawFormat
from mediafetch.domain.entities.media import Format
from mediafetch.domain.enums.provider import Provider

CODEC_NONE = "none"
STORYBOARD_NOTE = "storyboard"


def stable_identifier(format_id: str) -> str:
    """
    SHA-256 of the provider's format id alone. Measurements such as bitrate
    are left out so repeated extractions of the same format agree.
    """
    return hashlib.sha256(str(format_id).encode("utf-8")).hexdigest()


def has_codec(codec: str | None) -> bool:
    return bool(codec) and codec.strip().lower() != CODEC_NONE


def is_storyboard(raw: RawFormat) -> bool:
    return (raw.format_note or "").strip().lower() == STORYBOARD_NOTE


def normalize_format(raw: RawFormat, source: Provider) -> Format:
    has_video = has_codec(raw.vcodec)
    has_audio = has_codec(raw.acodec)
    return Format(
        has_video=has_video,
        has_audio=has_audio,
        extension=raw.ext,
        size=max(raw.filesize, raw.filesize_approx, 0),
        source=source,
        source_identifier=stable_identifier(raw.format_id),
        video_codec=raw.vcodec if has_video else None,
        video_bitrate=raw.vbr if has_video else None,
        video_width=raw.width if has_video else None,
        video_height=raw.height if has_video else None,
        video_fps=raw.fps if has_video else None,
        audio_codec=raw.acodec if has_audio else None,
        audio_bitrate=raw.abr if has_audio else None,
        audio_sample_rate=raw.asr if has_audio else None,
    )


def normalize_formats(raws: Iterable[RawFormat], source: Provider) -> List[Format]:
    """Normalize every playable raw format, in input order. Storyboards are dropped."""
    return [normalize_format(r, source) for r in raws if not is_storyboard(r)]
