# mediafetch/domain/enums/provider.py
from __future__ import annotations

from enum import StrEnum


class Provider(StrEnum):
    youtube = "youtube"
    vimeo = "vimeo"
    unknown = "unknown"
