# mediafetch/common/naming/filenames.py
from __future__ import annotations

import re
import unicodedata
from urllib.parse import quote

_unsafe_re = re.compile(r'[\x00-\x1f\x7f/\\:*?"<>|]+')
_space_re = re.compile(r"\s+")

DEFAULT_STEM = "download"


def safe_filename(title: str | None, ext: str | None, *, max_len: int = 180) -> str:
    """
    `{title}.{ext}` with path separators, control and shell-hostile characters
    removed. Unicode letters are kept. Falls back to 'download' for empty titles.

    Examples:
      ("My Video", "mp4") -> "My Video.mp4"
      ("a/b: c?", "webm") -> "a b c.webm"
      ("", "m4a") -> "download.m4a"
    """
    stem = unicodedata.normalize("NFKC", str(title or ""))
    stem = _unsafe_re.sub(" ", stem)
    stem = _space_re.sub(" ", stem).strip(" .")
    if max_len > 0 and len(stem) > max_len:
        stem = stem[:max_len].rstrip(" .")
    stem = stem or DEFAULT_STEM

    ext = _unsafe_re.sub("", str(ext or "")).strip(" .")
    return f"{stem}.{ext}" if ext else stem


def ascii_fallback(filename: str) -> str:
    """ASCII-only approximation for the plain `filename=` parameter."""
    value = unicodedata.normalize("NFKD", filename)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = value.replace('"', "").strip()
    if not value or value.startswith("."):
        value = DEFAULT_STEM + value
    return value


def content_disposition(filename: str) -> str:
    """Attachment header carrying both an ASCII filename and the RFC 5987 UTF-8 one."""
    fallback = ascii_fallback(filename)
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
