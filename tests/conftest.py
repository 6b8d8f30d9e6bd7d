# tests/conftest.py
from __future__ import annotations

import json
import sys
import textwrap
from pathlib import Path
from typing import Any, Dict, List

import pytest

from mediafetch.common import settings as settings_mod


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Every test sees settings built from its own environment."""
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()


_SCRIPT = """\
#!{python}
import json, os, sys, time
base = {base!r}
with open(base + ".args", "w") as f:
    json.dump(sys.argv[1:], f)
with open(base + ".pid", "w") as f:
    f.write(str(os.getpid()))
time.sleep({sleep!r})
with open(base + ".out", "rb") as f:
    sys.stdout.buffer.write(f.read())
sys.stdout.flush()
with open(base + ".err", "rb") as f:
    sys.stderr.buffer.write(f.read())
sys.stderr.flush()
time.sleep({sleep_after!r})
sys.exit({rc!r})
"""


class FakeTool:
    """Handle on a fake yt-dlp executable written by the `fake_ytdlp` fixture."""

    def __init__(self, base: Path) -> None:
        self.base = base

    @property
    def bin(self) -> str:
        return str(self.base)

    @property
    def args(self) -> List[str]:
        return json.loads(Path(f"{self.base}.args").read_text())

    @property
    def pid(self) -> int:
        return int(Path(f"{self.base}.pid").read_text())

    def started(self) -> bool:
        return Path(f"{self.base}.pid").exists()


@pytest.fixture()
def fake_ytdlp(tmp_path):
    """
    Factory for a stand-in yt-dlp executable. It records its argv and pid,
    optionally sleeps, writes the given stdout/stderr and exits with `rc`.
    """
    counter = {"n": 0}

    def _make(
        *,
        stdout: bytes | str | Dict[str, Any] = b"",
        stderr: bytes | str = b"",
        rc: int = 0,
        sleep: float = 0.0,
        sleep_after: float = 0.0,
    ) -> FakeTool:
        counter["n"] += 1
        base = tmp_path / f"yt-dlp-{counter['n']}"
        if isinstance(stdout, dict):
            stdout = json.dumps(stdout)
        if isinstance(stdout, str):
            stdout = stdout.encode("utf-8")
        if isinstance(stderr, str):
            stderr = stderr.encode("utf-8")
        Path(f"{base}.out").write_bytes(stdout)
        Path(f"{base}.err").write_bytes(stderr)
        base.write_text(textwrap.dedent(_SCRIPT).format(
            python=sys.executable,
            base=str(base),
            sleep=float(sleep),
            sleep_after=float(sleep_after),
            rc=int(rc),
        ))
        base.chmod(0o755)
        return FakeTool(base)

    return _make


@pytest.fixture()
def ytdlp_document() -> Dict[str, Any]:
    """A trimmed yt-dlp --dump-single-json document for a YouTube video."""
    return {
        "id": "dQw4w9WgXcQ",
        "title": "Never Gonna Give You Up",
        "duration": 212.0,
        "original_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "formats": [
            {"format_id": "sb0", "format_note": "storyboard", "ext": "mhtml",
             "vcodec": "none", "acodec": "none", "width": 48, "height": 27},
            {"format_id": "139", "format_note": "low", "ext": "m4a",
             "vcodec": "none", "acodec": "mp4a.40.5", "abr": 48.8, "asr": 22050,
             "filesize": 1292500},
            {"format_id": "140", "format_note": "medium", "ext": "m4a",
             "vcodec": "none", "acodec": "mp4a.40.2", "abr": 129.5, "asr": 44100,
             "filesize": 3433514},
            {"format_id": "251", "format_note": "medium", "ext": "webm",
             "vcodec": "none", "acodec": "opus", "abr": 135.9, "asr": 48000,
             "filesize": 3437753},
            {"format_id": "18", "format_note": "360p", "ext": "mp4",
             "vcodec": "avc1.42001E", "acodec": "mp4a.40.2", "width": 640, "height": 360,
             "fps": 25, "vbr": 0, "abr": 96.0, "asr": 44100, "filesize_approx": 8300000},
            {"format_id": "137", "format_note": "1080p", "ext": "mp4",
             "vcodec": "avc1.640028", "acodec": "none", "width": 1920, "height": 1080,
             "fps": 25, "vbr": 2166.6, "filesize": 57351810},
            {"format_id": "399", "format_note": "1080p", "ext": "mp4",
             "vcodec": "av01.0.08M.08", "acodec": "none", "width": 1920, "height": 1080,
             "fps": 25, "vbr": 1520.2, "filesize": 40265318},
            {"format_id": "248", "format_note": "1080p", "ext": "webm",
             "vcodec": "vp9", "acodec": "none", "width": 1920, "height": 1080,
             "fps": 25, "vbr": 1581.8, "filesize": 41882391},
            {"format_id": "136", "format_note": "720p", "ext": "mp4",
             "vcodec": "avc1.4d401f", "acodec": "none", "width": 1280, "height": 720,
             "fps": 25, "vbr": 1155.2, "filesize": 30610030},
            {"format_id": "233", "format_note": "Default", "ext": "mp4",
             "vcodec": "none", "acodec": "unknown", "abr": 0},
        ],
    }
