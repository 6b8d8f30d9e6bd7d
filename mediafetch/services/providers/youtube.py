from __future__ import annotations

from mediafetch.domain.enums.provider import Provider
from mediafetch.services.providers.base import YtDlpProvider


class YouTubeProvider(YtDlpProvider):
    provider = Provider.youtube
