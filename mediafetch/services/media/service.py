# mediafetch/services/media/service.py
from __future__ import annotations

import threading
from typing import Mapping, Optional, Tuple

from mediafetch.common.logging import get_logger
from mediafetch.domain.entities.extraction import ExtractionResult, RawFormat
from mediafetch.domain.entities.media import DownloadHandle, Format, Media
from mediafetch.domain.enums.provider import Provider
from mediafetch.domain.errors import FormatNotFound, UnsupportedSource
from mediafetch.domain.policies.classifier import classify
from mediafetch.domain.policies.format_normalizer import (
    is_storyboard,
    normalize_format,
    normalize_formats,
    stable_identifier,
)
from mediafetch.domain.policies.format_ranker import rank_formats
from mediafetch.domain.policies.format_reducer import reduce_formats
from mediafetch.domain.ports.provider import ProviderPort
from mediafetch.services.cache.extraction_cache import ExtractionCache
from mediafetch.services.providers.registry import build_providers

logger = get_logger()


class MediaService:
    """
    High-level orchestrator for the two public operations:
      - list_formats: classify -> cache-or-extract -> normalize -> reduce -> rank
      - resolve_download: classify -> cache-or-extract -> find format by stable id -> open stream

    Concurrent calls are independent. Two first-time calls for the same URL
    may both run the extractor; the last cache write wins.
    """

    def __init__(
        self,
        cache: ExtractionCache,
        providers: Optional[Mapping[Provider, ProviderPort]] = None,
    ) -> None:
        self.cache = cache
        self.providers: Mapping[Provider, ProviderPort] = providers if providers is not None else build_providers()

    # ---- Public API -----------------------------------------------------------
    def list_formats(self, url: str, cancel: Optional[threading.Event] = None) -> Media:
        provider = self._provider_for(url)
        result = self._extraction(provider, url, cancel)
        return self._build_media(provider, result)

    def resolve_download(
        self,
        url: str,
        source_identifier: str,
        *,
        source: Optional[Provider | str] = None,
        container: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> DownloadHandle:
        provider = self._provider_for(url, expected=source)
        result = self._extraction(provider, url, cancel)

        raw, fmt = self._find_format(provider, result, source_identifier)
        if container and fmt.extension.lower() != container.strip().lstrip(".").lower():
            logger.info("format %s is %s, not the requested %s", source_identifier[:12], fmt.extension, container)
            raise FormatNotFound(url, source_identifier)

        media = self._build_media(provider, result)
        stream = provider.open_stream(url, raw)
        logger.info("streaming %s format %s (%s) for %s", provider.provider.value, raw.format_id, fmt.extension, url)
        return DownloadHandle(media=media, format=fmt, stream=stream)

    # ---- Steps ----------------------------------------------------------------
    def _provider_for(self, url: str, expected: Optional[Provider | str] = None) -> ProviderPort:
        kind = classify(url)
        if kind is Provider.unknown:
            raise UnsupportedSource(url)
        if expected is not None and str(expected).lower() != kind.value:
            raise UnsupportedSource(url, reason=f"url does not belong to source {expected!s}")
        provider = self.providers.get(kind)
        if provider is None:
            raise UnsupportedSource(url, reason=f"no provider registered for {kind.value}")
        return provider

    def _extraction(self, provider: ProviderPort, url: str, cancel: Optional[threading.Event]) -> ExtractionResult:
        cached = self.cache.get(url)
        if cached is not None:
            return cached
        logger.info("extracting %s via %s", url, provider.provider.value)
        result = provider.extract(url, cancel)
        self.cache.set(url, result)
        return result

    def _build_media(self, provider: ProviderPort, result: ExtractionResult) -> Media:
        formats = normalize_formats(result.formats, provider.provider)
        formats = reduce_formats(formats, provider.preferred_video_ext)
        return Media(
            url=result.url,
            title=result.title,
            duration=result.duration,
            formats=tuple(rank_formats(formats)),
        )

    @staticmethod
    def _find_format(
        provider: ProviderPort, result: ExtractionResult, source_identifier: str
    ) -> Tuple[RawFormat, Format]:
        for raw in result.formats:
            if is_storyboard(raw):
                continue
            if stable_identifier(raw.format_id) == source_identifier:
                return raw, normalize_format(raw, provider.provider)
        raise FormatNotFound(result.url, source_identifier)
