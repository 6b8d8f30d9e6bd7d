# mediafetch/domain/policies/format_reducer.py
from __future__ import annotations

from typing import Callable, Dict, Hashable, List, Optional, Sequence

from mediafetch.domain.entities.media import Format

DEFAULT_PREFERRED_VIDEO_EXT = "mp4"


def is_usable(fmt: Format) -> bool:
    """
    Usable = carries media, has a measured size and at least one positive
    bitrate. Placeholder entries from providers fail one of these.
    """
    if not fmt.has_video and not fmt.has_audio:
        return False
    if fmt.size <= 0:
        return False
    vbr = fmt.video_bitrate or 0
    abr = fmt.audio_bitrate or 0
    return vbr > 0 or abr > 0


def prefilter_formats(formats: Sequence[Format]) -> List[Format]:
    return [f for f in formats if is_usable(f)]


def _keep_best(
    formats: Sequence[Format],
    *,
    key: Callable[[Format], Optional[Hashable]],
    score: Callable[[Format], float],
) -> List[Format]:
    """
    Within each partition (key != None) keep the first entry with the strictly
    highest score; entries whose key is None pass through. Input order is kept.
    """
    best: Dict[Hashable, int] = {}
    for i, f in enumerate(formats):
        k = key(f)
        if k is None:
            continue
        cur = best.get(k)
        if cur is None or score(f) > score(formats[cur]):
            best[k] = i
    winners = set(best.values())
    return [f for i, f in enumerate(formats) if key(f) is None or i in winners]


def dedupe_video(formats: Sequence[Format], preferred_ext: str = DEFAULT_PREFERRED_VIDEO_EXT) -> List[Format]:
    """Collapse preferred-container video formats sharing (width, height, fps)."""
    ext = preferred_ext.lower()

    def _key(f: Format):
        if not f.has_video or f.extension.lower() != ext:
            return None
        return (f.video_width, f.video_height, f.video_fps)

    return _keep_best(formats, key=_key, score=lambda f: f.video_bitrate or 0)


def dedupe_audio(formats: Sequence[Format]) -> List[Format]:
    """Collapse audio-only formats sharing an extension."""

    def _key(f: Format):
        return f.extension.lower() if f.is_audio_only else None

    return _keep_best(formats, key=_key, score=lambda f: f.audio_bitrate or 0)


def reduce_formats(formats: Sequence[Format], preferred_video_ext: str = DEFAULT_PREFERRED_VIDEO_EXT) -> List[Format]:
    usable = prefilter_formats(formats)
    return dedupe_audio(dedupe_video(usable, preferred_video_ext))
