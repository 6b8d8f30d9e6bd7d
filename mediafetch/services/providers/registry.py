# mediafetch/services/providers/registry.py
from __future__ import annotations

from typing import Dict, Mapping, Optional

from mediafetch.domain.enums.provider import Provider
from mediafetch.domain.ports.provider import ProviderPort
from mediafetch.services.providers.vimeo import VimeoProvider
from mediafetch.services.providers.youtube import YouTubeProvider
from mediafetch.services.ytdlp.ytdlp_adapter import YtDlpAdapter

PROVIDER_CLASSES = (YouTubeProvider, VimeoProvider)


def build_providers(adapter: Optional[YtDlpAdapter] = None) -> Mapping[Provider, ProviderPort]:
    """One provider instance per supported Provider value, sharing one adapter."""
    adapter = adapter or YtDlpAdapter()
    providers: Dict[Provider, ProviderPort] = {}
    for cls in PROVIDER_CLASSES:
        providers[cls.provider] = cls(adapter)
    return providers
