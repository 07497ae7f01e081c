# File: crawl_scout/utils.py
"""crawl_scout.utils: URL normalization and comparison helpers shared by the crawler and the scraper."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence, Union
from urllib.parse import SplitResult, quote, urljoin, urlsplit, urlunsplit

from crawl_scout.logger import logger

__all__: Sequence[str] = (
    "InvalidUrlError",
    "normalize_url",
    "is_same_domain",
    "is_http_url",
    "to_absolute_url",
    "remove_duplicates",
    "clamp",
)

# Schemes that cannot be parsed without a host.
_HOST_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})
# Code points that may not appear in a host name.
_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r<>\"^`{}|\\%")
# Left as-is when percent-encoding path and query; "%" keeps existing escapes.
_SAFE_URL_CHARS = "/?:@!$&'()*+,;=-._~%[]"


class InvalidUrlError(ValueError):
    """Raised when a URL that must be absolute cannot be parsed."""


def _split(raw: str) -> Optional[SplitResult]:
    try:
        parts = urlsplit(raw.strip())
        parts.port  # raises ValueError on a malformed port
    except (ValueError, AttributeError):
        return None
    if not parts.scheme:
        return None
    if parts.scheme in _HOST_SCHEMES and not parts.hostname:
        return None
    if parts.hostname and any(ch in _FORBIDDEN_HOST_CHARS for ch in parts.hostname):
        return None
    return parts


def normalize_url(raw: str) -> Optional[str]:
    """Canonical form of an absolute URL used for deduplication.

    Drops the fragment and every trailing slash of the serialized form.
    Scheme and host are lowercased; spaces and other unsafe characters in
    path and query are percent-encoded; path case and explicit ports are kept.
    Returns ``None`` when *raw* is not an absolute URL.
    """
    if not isinstance(raw, str):
        return None
    parts = _split(raw)
    if parts is None:
        return None

    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{hostport.lower()}"
    path = quote(parts.path, safe=_SAFE_URL_CHARS)
    query = quote(parts.query, safe=_SAFE_URL_CHARS)
    normalized = urlunsplit((parts.scheme, netloc, path, query, "")).rstrip("/")
    logger.debug("Normalized URL: %s -> %s", raw, normalized)
    return normalized


def is_same_domain(url: str, origin: Union[SplitResult, str]) -> bool:
    """True iff *url* parses and its hostname equals the origin's hostname exactly."""
    if isinstance(origin, str):
        origin = urlsplit(origin)
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return False
    return host is not None and host == origin.hostname


def is_http_url(value: object) -> bool:
    """Checks that *value* is an absolute http(s) URL with a host."""
    if not isinstance(value, str):
        return False
    parts = _split(value)
    return parts is not None and parts.scheme in ("http", "https")


def to_absolute_url(href: Optional[str], base: str) -> Optional[str]:
    """Resolves *href* against *base*; ``None`` for empty or unresolvable references."""
    if not href or not href.strip():
        return None
    try:
        return urljoin(base, href.strip())
    except ValueError:
        return None


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique


def clamp(value: int, low: int, high: int) -> int:
    """Pins *value* to the closed range [low, high]."""
    return max(low, min(high, value))
