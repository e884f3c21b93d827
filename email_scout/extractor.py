"""email_scout.extractor: text-based email extraction and normalization.

Pure functions, no I/O. The scan is regex based and works on raw HTML as well
as on plain text; it is a best-effort heuristic, not an address parser.
"""
from __future__ import annotations

import html
import re
from typing import Iterable, Iterator, Optional, Set
from urllib.parse import unquote

__all__ = ("EMAIL_RE", "normalize_email", "decode_cfemail", "extract_and_normalize_emails")

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_VALID_RE = re.compile(r"[a-z0-9._%+-]+@[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}")
_MAILTO_RE = re.compile(r"mailto:([^\"'\s<>]+)", re.IGNORECASE)
_CFEMAIL_RE = re.compile(r"(?:data-cfemail=[\"']|/email-protection#)([0-9a-fA-F]{4,})")

# Asset names such as logo@2x.png look like addresses.
_ASSET_SUFFIXES = frozenset(
    {"png", "jpg", "jpeg", "gif", "svg", "webp", "avif", "bmp", "ico", "tif", "tiff",
     "css", "js", "map", "woff", "woff2", "ttf", "eot", "mp4", "webm"}
)
_EDGE_CHARS = " \t\r\n\"'<>()[]{},;:!?"


def normalize_email(raw: str) -> Optional[str]:
    """Return the canonical lowercase form of *raw*, or ``None`` if it is not an address.

    Idempotent: ``normalize_email(normalize_email(x)) == normalize_email(x)``.
    """
    candidate = (raw or "").strip()
    if candidate.lower().startswith("mailto:"):
        candidate = candidate[len("mailto:"):]
    candidate = candidate.split("?", 1)[0].strip(_EDGE_CHARS).lower()

    local, sep, domain = candidate.partition("@")
    local = local.strip(".")
    domain = domain.strip(".-")
    if not sep or not local or not domain:
        return None
    if ".." in local or ".." in domain:
        return None

    address = f"{local}@{domain}"
    if not _VALID_RE.fullmatch(address):
        return None
    if domain.rsplit(".", 1)[-1] in _ASSET_SUFFIXES:
        return None
    return address


def decode_cfemail(encoded: str) -> Optional[str]:
    """Decode Cloudflare email obfuscation (hex string, first byte is the XOR key)."""
    try:
        key = int(encoded[:2], 16)
        return "".join(chr(int(encoded[i:i + 2], 16) ^ key) for i in range(2, len(encoded), 2))
    except ValueError:
        return None


def _candidates(text: str) -> Iterator[str]:
    decoded = html.unescape(text)
    decoded = _MAILTO_RE.sub(lambda m: "mailto:" + unquote(m.group(1)), decoded)
    yield from EMAIL_RE.findall(decoded)
    for match in _CFEMAIL_RE.finditer(text):
        plain = decode_cfemail(match.group(1))
        if plain:
            yield plain


def _normalize_all(candidates: Iterable[str]) -> Set[str]:
    emails: Set[str] = set()
    for candidate in candidates:
        normalized = normalize_email(candidate)
        if normalized:
            emails.add(normalized)
    return emails


def extract_and_normalize_emails(text: str) -> Set[str]:
    """Find every email address in *text* (raw HTML or plain text), normalized and deduplicated."""
    if not text:
        return set()
    return _normalize_all(_candidates(text))
