# mediafetch/domain/policies/classifier.py
from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlsplit

from mediafetch.domain.enums.provider import Provider

# Exact hostnames only; regional or other subdomains not listed stay unknown.
PROVIDER_HOSTNAMES: Mapping[Provider, frozenset[str]] = {
    Provider.youtube: frozenset({
        "youtube.com",
        "youtu.be",
        "www.youtube.com",
        "www.youtu.be",
        "youtube-nocookie.com",
        "www.youtube-nocookie.com",
        "m.youtube.com",
        "music.youtube.com",
    }),
    Provider.vimeo: frozenset({
        "vimeo.com",
        "www.vimeo.com",
        "player.vimeo.com",
    }),
}


def hostname_of(url: str) -> Optional[str]:
    """Lower-cased hostname of `url`, or None if it cannot be parsed."""
    try:
        host = urlsplit(str(url).strip()).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def classify(url: str, table: Mapping[Provider, frozenset[str]] = PROVIDER_HOSTNAMES) -> Provider:
    """
    Map a resource URL to its provider. Never raises: anything unparsable or
    off the allow-lists is Provider.unknown. First matching provider wins.
    """
    host = hostname_of(url)
    if not host:
        return Provider.unknown
    for provider, hostnames in table.items():
        if host in hostnames:
            return provider
    return Provider.unknown
