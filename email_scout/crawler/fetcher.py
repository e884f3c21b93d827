# email_scout/crawler/fetcher.py
"""
Fetch strategies: plain HTTP via aiohttp, or a page rendered by a headless browser.

Both return a :class:`PageResult` so the crawler does not care which one is active.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, Set

from aiohttp import ClientSession, ClientTimeout

from email_scout.browser import BrowserHandle, BrowserPage
from email_scout.config import DEFAULT_USER_AGENT, CrawlOptions
from email_scout.crawler.models import PageResult
from email_scout.errors import ConfigurationError, PageFetchError
from email_scout.extractor import extract_and_normalize_emails
from email_scout.logger import logger

__all__ = (
    "Fetcher",
    "HttpFetcher",
    "BrowserFetcher",
    "PAGE_CONTEXT_SCRIPT",
    "extract_emails_from_page",
    "create_fetcher",
)

# Runs inside the page: sees DOM state produced by scripts, which the raw
# server HTML does not contain.
PAGE_CONTEXT_SCRIPT = """() => ({
    html: document.documentElement ? document.documentElement.outerHTML : "",
    text: document.body ? document.body.innerText : "",
    mailto: Array.from(document.querySelectorAll('a[href^="mailto:"]')).map(a => a.getAttribute("href"))
})"""


class Fetcher(Protocol):
    """A way of turning a URL into a :class:`PageResult`."""

    async def fetch(self, url: str) -> PageResult: ...


class HttpFetcher:
    """Single GET request per page; non-2xx responses are failures."""

    def __init__(
        self,
        session: ClientSession,
        *,
        timeout: Optional[float] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.session = session
        self.timeout = ClientTimeout(total=timeout) if timeout else None
        self.user_agent = user_agent

    async def fetch(self, url: str) -> PageResult:
        """
        Download *url* and extract emails from the body text.

        Redirects are followed; the returned ``url`` is the final one.

        Raises PageFetchError on a non-2xx status; aiohttp.ClientError and
        asyncio.TimeoutError pass through unchanged.
        """
        request_kwargs: dict[str, Any] = {"headers": {"User-Agent": self.user_agent}, "raise_for_status": False}
        if self.timeout is not None:
            request_kwargs["timeout"] = self.timeout
        async with self.session.get(url, **request_kwargs) as resp:
            if not 200 <= resp.status < 300:
                raise PageFetchError(url, resp.status)
            text = await resp.text(errors="replace")
        return PageResult(url=str(resp.url), html=text, emails=extract_and_normalize_emails(text))


async def extract_emails_from_page(page: BrowserPage) -> Set[str]:
    """Run email extraction inside an already loaded browser page."""
    data: Any = await page.evaluate(PAGE_CONTEXT_SCRIPT) or {}
    emails = extract_and_normalize_emails(data.get("html") or "")
    emails |= extract_and_normalize_emails(data.get("text") or "")
    emails |= extract_and_normalize_emails(" ".join(href for href in data.get("mailto") or [] if href))
    return emails


class BrowserFetcher:
    """Opens one browser page per URL and always closes it afterwards."""

    def __init__(self, browser: BrowserHandle, *, wait_until: str = "load", timeout: int = 30000) -> None:
        self.browser = browser
        self.wait_until = wait_until
        self.timeout = timeout

    async def fetch(self, url: str) -> PageResult:
        page = await self.browser.new_page()
        try:
            await page.goto(url, wait_until=self.wait_until, timeout=self.timeout)
            final_url = page.url or url
            html = await page.content()
            emails = await extract_emails_from_page(page)
        finally:
            await page.close()
        return PageResult(url=final_url, html=html, emails=emails)


def create_fetcher(
    options: CrawlOptions,
    *,
    browser: Optional[BrowserHandle] = None,
    session: Optional[ClientSession] = None,
) -> Fetcher:
    """Pick and validate the fetch strategy for a run."""
    if options.use_browser:
        if browser is None:
            raise ConfigurationError("use_browser=True requires an open browser handle")
        logger.debug("Using browser fetch strategy (wait_until=%s)", options.wait_until)
        return BrowserFetcher(browser, wait_until=options.wait_until, timeout=options.timeout)
    if session is None:
        raise ConfigurationError("HTTP fetch strategy requires a client session")
    logger.debug("Using HTTP fetch strategy")
    return HttpFetcher(session, timeout=options.timeout_seconds, user_agent=options.user_agent)
