"""Headless browser acquisition for EmailScout.

Two automation engines are supported, tried in order: Playwright (chromium)
and pyppeteer. Both are optional dependencies (``pip install email_scout[browser]``).
Whichever one launches is wrapped in :class:`BrowserHandle` / :class:`BrowserPage`
so that the rest of the package never touches engine-specific APIs.

The caller owns the returned handle and must ``await browser.close()`` exactly
once, after all crawling is done::

    browser = await create_browser()
    try:
        emails = await scrape_emails_from_website(url, use_browser=True, browser=browser)
    finally:
        await browser.close()
"""
from __future__ import annotations

import importlib
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Sequence

from email_scout.errors import BrowserLaunchError, BrowserUnavailableError
from email_scout.logger import logger

__all__ = (
    "BrowserPage",
    "BrowserHandle",
    "BrowserProvider",
    "DEFAULT_PROVIDERS",
    "create_browser",
)


class BrowserPage(Protocol):
    """A single tab of a launched browser."""

    @property
    def url(self) -> str: ...

    async def goto(self, url: str, *, wait_until: str = "load", timeout: int = 30000) -> None: ...

    async def content(self) -> str: ...

    async def evaluate(self, expression: str) -> Any: ...

    async def close(self) -> None: ...


class BrowserHandle(Protocol):
    """A launched browser engine."""

    async def new_page(self) -> BrowserPage: ...

    async def close(self) -> None: ...


# --------------------------------------------------------------------------- #
# Playwright                                                                  #
# --------------------------------------------------------------------------- #


class _PlaywrightPage:
    def __init__(self, page: Any) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str, *, wait_until: str = "load", timeout: int = 30000) -> None:
        await self._page.goto(url, wait_until=wait_until, timeout=timeout)

    async def content(self) -> str:
        return await self._page.content()

    async def evaluate(self, expression: str) -> Any:
        return await self._page.evaluate(expression)

    async def close(self) -> None:
        await self._page.close()


class _PlaywrightBrowser:
    def __init__(self, playwright: Any, browser: Any) -> None:
        self._playwright = playwright
        self._browser = browser

    async def new_page(self) -> BrowserPage:
        return _PlaywrightPage(await self._browser.new_page())

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


async def _launch_playwright(module: ModuleType) -> BrowserHandle:
    playwright = await module.async_playwright().start()
    try:
        browser = await playwright.chromium.launch(headless=True)
    except BaseException:
        await playwright.stop()
        raise
    return _PlaywrightBrowser(playwright, browser)


# --------------------------------------------------------------------------- #
# pyppeteer                                                                   #
# --------------------------------------------------------------------------- #

# pyppeteer spells "networkidle" as networkidle0 (no connections for 500 ms).
_PYPPETEER_WAIT_UNTIL: Dict[str, str] = {
    "load": "load",
    "domcontentloaded": "domcontentloaded",
    "networkidle": "networkidle0",
}


class _PyppeteerPage:
    def __init__(self, page: Any) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str, *, wait_until: str = "load", timeout: int = 30000) -> None:
        await self._page.goto(url, waitUntil=_PYPPETEER_WAIT_UNTIL.get(wait_until, wait_until), timeout=timeout)

    async def content(self) -> str:
        return await self._page.content()

    async def evaluate(self, expression: str) -> Any:
        return await self._page.evaluate(expression)

    async def close(self) -> None:
        await self._page.close()


class _PyppeteerBrowser:
    def __init__(self, browser: Any) -> None:
        self._browser = browser

    async def new_page(self) -> BrowserPage:
        return _PyppeteerPage(await self._browser.newPage())

    async def close(self) -> None:
        await self._browser.close()


async def _launch_pyppeteer(module: ModuleType) -> BrowserHandle:
    return _PyppeteerBrowser(await module.launch(headless=True))


# --------------------------------------------------------------------------- #
# Provider chain                                                              #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class BrowserProvider:
    """One candidate engine: importable module plus a coroutine that launches it."""

    name: str
    module: str
    launch: Callable[[ModuleType], Awaitable[BrowserHandle]]
    hint: str = ""

    def load(self) -> Optional[ModuleType]:
        """Import the engine module, or return ``None`` if it is not installed."""
        try:
            return importlib.import_module(self.module)
        except ImportError:
            return None


DEFAULT_PROVIDERS: Sequence[BrowserProvider] = (
    BrowserProvider(
        name="Playwright",
        module="playwright.async_api",
        launch=_launch_playwright,
        hint="Make sure Playwright browsers are installed: playwright install chromium",
    ),
    BrowserProvider(name="Pyppeteer", module="pyppeteer", launch=_launch_pyppeteer),
)

_NOT_INSTALLED_MESSAGE = (
    "No browser library found. Please install either playwright or pyppeteer:\n"
    "  pip install playwright && playwright install chromium\n"
    "  or\n"
    "  pip install pyppeteer"
)


async def create_browser(providers: Sequence[BrowserProvider] = DEFAULT_PROVIDERS) -> BrowserHandle:
    """
    Launch the first installed engine from *providers*.

    Raises :class:`BrowserLaunchError` as soon as an installed engine fails to
    start, and :class:`BrowserUnavailableError` if none is installed.
    """
    for provider in providers:
        module = provider.load()
        if module is None:
            logger.debug("%s is not installed, trying the next engine", provider.name)
            continue
        try:
            browser = await provider.launch(module)
        except Exception as exc:
            message = f"Failed to launch {provider.name} browser: {exc}"
            if provider.hint:
                message = f"{message}\n{provider.hint}"
            raise BrowserLaunchError(provider.name, message) from exc
        logger.info("Launched headless %s browser", provider.name)
        return browser
    raise BrowserUnavailableError(_NOT_INSTALLED_MESSAGE)
