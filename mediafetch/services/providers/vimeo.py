from __future__ import annotations

from mediafetch.domain.enums.provider import Provider
from mediafetch.services.providers.base import YtDlpProvider


class VimeoProvider(YtDlpProvider):
    provider = Provider.vimeo
