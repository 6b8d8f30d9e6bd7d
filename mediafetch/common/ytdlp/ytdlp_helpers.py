# mediafetch/common/ytdlp/ytdlp_helpers.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List
import json
import math

from mediafetch.domain.entities.extraction import ExtractionResult, RawFormat
from mediafetch.domain.errors import ParseError


def build_info_cmd(
    url: str,
    *,
    bin: str = "yt-dlp",
    check_all_formats: bool = True,
    extra_args: Iterable[str] | None = None,
) -> List[str]:
    """
    Build a yt-dlp command that emits one JSON document describing every
    available format, and nothing else on stdout.
    """
    cmd = [bin, "--ignore-errors"]
    if check_all_formats:
        cmd.append("--check-all-formats")
    cmd += ["--dump-single-json", "--quiet"]
    if extra_args:
        cmd += list(extra_args)
    cmd += ["--", url]  # Stop option parsing in case of weird URLs
    return cmd


def build_stream_cmd(
    url: str,
    format_id: str,
    *,
    bin: str = "yt-dlp",
    extra_args: Iterable[str] | None = None,
) -> List[str]:
    """Build a yt-dlp command that writes exactly one format's bytes to stdout."""
    cmd = [
        bin,
        "--quiet",
        "--no-warnings",
        "--no-playlist",
        "-f", format_id,
        "-o", "-",
    ]
    if extra_args:
        cmd += list(extra_args)
    cmd += ["--", url]
    return cmd


def _maybe_float(x) -> float:
    # json.loads accepts Infinity and NaN; neither is a usable measurement
    try:
        if x is None:
            return 0.0
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


def _maybe_int(x) -> int:
    return int(_maybe_float(x))


def _maybe_str(x) -> str:
    return "" if x is None else str(x)


def parse_raw_format(entry: Any, index: int = 0) -> RawFormat:
    if not isinstance(entry, dict):
        raise ParseError(f"formats[{index}] is not an object")
    format_id = entry.get("format_id")
    if isinstance(format_id, bool) or not isinstance(format_id, (str, int)) or format_id == "":
        raise ParseError(f"formats[{index}] has no usable format_id")
    return RawFormat(
        format_id=str(format_id),
        format_note=_maybe_str(entry.get("format_note")),
        ext=_maybe_str(entry.get("ext")),
        filesize=_maybe_int(entry.get("filesize")),
        filesize_approx=_maybe_int(entry.get("filesize_approx")),
        vcodec=_maybe_str(entry.get("vcodec")),
        width=_maybe_int(entry.get("width")),
        height=_maybe_int(entry.get("height")),
        fps=_maybe_float(entry.get("fps")),
        vbr=_maybe_float(entry.get("vbr")),
        acodec=_maybe_str(entry.get("acodec")),
        asr=_maybe_float(entry.get("asr")),
        abr=_maybe_float(entry.get("abr")),
    )


def parse_ytdlp(data: Dict[str, Any], url: str) -> ExtractionResult:
    """
    Turn a yt-dlp --dump-single-json document into an ExtractionResult.
    Safe to call in unit tests with fixture JSON. Raises ParseError when the
    document does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ParseError("yt-dlp output is not a JSON object")
    formats = data.get("formats")
    if not isinstance(formats, list):
        raise ParseError("yt-dlp output has no formats list")

    return ExtractionResult(
        url=url,
        title=_maybe_str(data.get("title")),
        duration=_maybe_float(data.get("duration")),
        original_url=_maybe_str(data.get("original_url")) or url,
        formats=tuple(parse_raw_format(f, i) for i, f in enumerate(formats)),
    )


def loads_ytdlp(stdout: str, url: str) -> ExtractionResult:
    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise ParseError("yt-dlp produced invalid JSON", stderr=stdout[:2000]) from e
    return parse_ytdlp(data, url)
