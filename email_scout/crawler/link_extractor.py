"""
Link extraction and URL normalization utilities for EmailScout.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Set
from urllib.parse import urldefrag, urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = ("extract_links", "iter_links", "normalize_url", "get_domain")

_FOLLOWED_SCHEMES = ("http", "https")


def get_domain(url: str) -> str:
    """Return the lowercase host of *url* (no port), or ``""`` if it cannot be parsed."""
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def normalize_url(url: str, base_url: str) -> Optional[str]:
    """
    Resolve *url* against *base_url* and drop the fragment.

    Scheme and host are lowercased and an empty path becomes ``/``.
    Returns ``None`` for anything that cannot be parsed.
    """
    try:
        resolved, _fragment = urldefrag(urljoin(base_url, url.strip()))
        parsed = urlparse(resolved)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    path = parsed.path or "/"
    return urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), path, parsed.params, parsed.query, ""))


def iter_links(html: str, base_url: str) -> List[str]:
    """
    Collect absolute, fragment-free HTTP(S) URLs from ``<a href>`` tags in *html*.

    Links come back deduplicated, in document order. Works on the markup as
    delivered: script-injected links are not seen. Empty and malformed hrefs,
    and non-HTTP schemes (mailto:, javascript:, tel:) are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: Dict[str, None] = {}
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str) or not href_val.strip():
            continue
        absolute = normalize_url(href_val, base_url)
        if absolute and urlparse(absolute).scheme in _FOLLOWED_SCHEMES:
            links.setdefault(absolute, None)
    return list(links)


def extract_links(html: str, base_url: str) -> Set[str]:
    """Set form of :func:`iter_links`."""
    return set(iter_links(html, base_url))
