"""
URL resolution for link canonicalization.
"""
from __future__ import annotations

from urllib.parse import urljoin, urlsplit, urlunsplit


def resolve_url(base: str, href: str) -> str:
    """
    Resolve *href* against *base* into an absolute URL.

    Absolute hrefs (with a scheme) come back re-serialized, relative ones are
    resolved by RFC 3986 rules. Never raises: an href that cannot be parsed,
    or a base that cannot be used, yields *href* unchanged.
    """
    try:
        parts = urlsplit(href)
    except ValueError:
        return href
    if parts.scheme:
        return urlunsplit(parts)
    try:
        return urljoin(base, href)
    except ValueError:
        return href
