"""General-purpose helper utilities for the SEO monitor."""

from datetime import datetime
from typing import Optional
from urllib.parse import urlparse


# Schemes whose URLs must carry a host.
HOST_SCHEMES = ("http", "https", "ws", "wss", "ftp")


def extract_hostname(url: str) -> str:
    """Return the hostname of an absolute URL.

    Args:
        url: Full URL string including the scheme.

    Returns:
        Lower-cased hostname, ``www.`` prefix kept.  Empty string for an
        absolute URL whose scheme has no host part (``mailto:a@b.c``,
        ``localhost:3000``).

    Raises:
        ValueError: If the URL has no scheme, or is a web URL with no host.

    Examples:
        >>> extract_hostname("https://x.com/pricing")
        'x.com'
        >>> extract_hostname("https://WWW.Example.org:8080")
        'www.example.org'
        >>> extract_hostname("mailto:team@x.com")
        ''
    """
    parsed = urlparse(url.strip())
    if not parsed.scheme:
        raise ValueError(f"Invalid URL: {url}")
    if parsed.hostname:
        return parsed.hostname
    if parsed.scheme in HOST_SCHEMES:
        raise ValueError(f"Invalid URL: {url}")
    return ""


def format_date(value: Optional[datetime], long: bool = False) -> str:
    """Format a timestamp as ``Jan 5, 2026`` (or ``January 5, 2026``)."""
    if value is None:
        return ""
    month = value.strftime("%B" if long else "%b")
    return f"{month} {value.day}, {value.year}"


def pluralize(count: int, word: str) -> str:
    """``pluralize(1, "project") -> '1 project'``, ``pluralize(2, ...) -> '2 projects'``."""
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
