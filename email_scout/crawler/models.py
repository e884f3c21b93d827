"""
Data models for the EmailScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Set


@dataclass(slots=True, frozen=True)
class FrontierEntry:
    """A discovered URL waiting in the frontier, with its link-hop depth."""

    url: str
    depth: int


@dataclass(slots=True)
class PageResult:
    """What a fetch strategy hands back: emails found plus raw HTML for link discovery."""

    url: str
    html: str
    emails: Set[str] = field(default_factory=set)


@dataclass(slots=True)
class CrawlStats:
    """Counters for one crawl run. ``pages_visited`` counts budget units, failures included."""

    pages_visited: int = 0
    pages_fetched: int = 0
    errors: int = 0
    emails_found: int = 0
