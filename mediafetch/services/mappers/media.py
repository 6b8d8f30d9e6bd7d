# mediafetch/services/mappers/media.py
from __future__ import annotations

from mediafetch.domain.entities.media import Format, Media
from mediafetch.services.schemas.media import FormatRead, MediaRead


def to_format_read(f: Format) -> FormatRead:
    return FormatRead(
        has_video=f.has_video,
        video_codec=f.video_codec,
        video_bitrate=f.video_bitrate,
        video_width=f.video_width,
        video_height=f.video_height,
        video_fps=f.video_fps,
        has_audio=f.has_audio,
        audio_codec=f.audio_codec,
        audio_bitrate=f.audio_bitrate,
        audio_sample_rate=f.audio_sample_rate,
        extension=f.extension,
        size=f.size,
        source=f.source,
        source_identifier=f.source_identifier,
    )


def to_media_read(m: Media) -> MediaRead:
    return MediaRead(
        url=m.url,
        title=m.title,
        duration=m.duration,
        formats=[to_format_read(f) for f in m.formats],
    )
