# File: tests/conftest.py
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any, Callable, Dict, List, Optional, Set

import pytest
from aiohttp import ClientConnectionError, web

from email_scout.crawler.models import PageResult
from email_scout.extractor import extract_and_normalize_emails


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on 127.0.0.1:*port*, yield the base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


class StaticSiteFetcher:
    """In-memory fetch strategy: serves HTML from a dict, follows ``redirects`` and records every fetch."""

    def __init__(
        self,
        pages: Dict[str, str],
        failing: Optional[Set[str]] = None,
        redirects: Optional[Dict[str, str]] = None,
    ) -> None:
        self.pages = pages
        self.failing = failing or set()
        self.redirects = redirects or {}
        self.fetched: List[str] = []

    async def fetch(self, url: str) -> PageResult:
        self.fetched.append(url)
        if url in self.failing:
            raise ClientConnectionError(f"Cannot connect to {url}")
        final_url = self.redirects.get(url, url)
        if final_url not in self.pages:
            raise ClientConnectionError(f"No route to {final_url}")
        html = self.pages[final_url]
        return PageResult(url=final_url, html=html, emails=extract_and_normalize_emails(html))


class FakePage:
    """Stands in for a browser tab. ``dom_emails`` exist only in the rendered DOM."""

    def __init__(self, browser: "FakeBrowser") -> None:
        self.browser = browser
        self.url: Optional[str] = None
        self.closed = False
        self.goto_calls: List[Dict[str, Any]] = []

    async def goto(self, url: str, *, wait_until: str = "load", timeout: int = 30000) -> None:
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if url in self.browser.failing:
            raise TimeoutError(f"Navigation timeout of {timeout} ms exceeded")
        self.url = self.browser.redirects.get(url, url)

    async def content(self) -> str:
        return self.browser.pages.get(self.url or "", "")

    async def evaluate(self, expression: str) -> Any:
        html = self.browser.pages.get(self.url or "", "")
        extra = self.browser.dom_emails.get(self.url or "", [])
        return {
            "html": html,
            "text": " ".join(extra),
            "mailto": [f"mailto:{e}" for e in extra],
        }

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(
        self,
        pages: Dict[str, str],
        dom_emails: Optional[Dict[str, List[str]]] = None,
        failing: Optional[Set[str]] = None,
        redirects: Optional[Dict[str, str]] = None,
    ) -> None:
        self.pages = pages
        self.dom_emails = dom_emails or {}
        self.failing = failing or set()
        self.redirects = redirects or {}
        self.opened: List[FakePage] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage(self)
        self.opened.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_project_logger():
    """CLI runs reconfigure the project logger; restore the library default afterwards."""
    yield
    lg = logging.getLogger("EmailScout")
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()
    lg.setLevel(logging.NOTSET)
    lg.propagate = True


@pytest.fixture()
def static_site() -> Callable[..., StaticSiteFetcher]:
    """Factory for :class:`StaticSiteFetcher`."""
    return StaticSiteFetcher


@pytest.fixture()
def fake_browser() -> Callable[..., FakeBrowser]:
    """Factory for :class:`FakeBrowser`."""
    return FakeBrowser


@pytest.fixture()
def sample_html() -> str:
    return (
        "<html><body>"
        '<p>reach us at info@example.com</p>'
        '<a href="/contact">Contact</a>'
        "<a href='team.html#people'>Team</a>"
        '<a href="https://other.example/page">Elsewhere</a>'
        '<a href="mailto:sales@example.com">Mail</a>'
        '<a href="javascript:void(0)">JS</a>'
        "<a name='anchor-only'>No href</a>"
        "</body></html>"
    )


@pytest.fixture()
def serve_app() -> Callable[[web.Application, int], AsyncIterator[str]]:
    """``async for base in serve_app(app, port)`` runs *app* for the loop body."""
    return _serve_app
