# mediafetch/domain/policies/format_ranker.py
from __future__ import annotations

from typing import Iterable, List, Tuple

from mediafetch.domain.entities.media import Format


def rank_key(f: Format) -> Tuple[int, float, float, int]:
    """
    Video-capable first (resolution, video bitrate, size; all descending),
    then audio-only (audio bitrate, size; descending).
    """
    if f.has_video:
        return (0, -f.resolution, -(f.video_bitrate or 0), -f.size)
    return (1, 0, -(f.audio_bitrate or 0), -f.size)


def rank_formats(formats: Iterable[Format]) -> List[Format]:
    # sorted() is stable: equal keys keep input order
    return sorted(formats, key=rank_key)
