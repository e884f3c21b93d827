"""
Single-page entry points, shared by the CLI and library callers.
"""
from __future__ import annotations

from typing import Optional, Set

from aiohttp import ClientSession

from email_scout.browser import BrowserPage
from email_scout.config import DEFAULT_USER_AGENT
from email_scout.crawler.fetcher import HttpFetcher, extract_emails_from_page
from email_scout.logger import logger

__all__ = ["scrape_emails_from_url", "scrape_emails_from_page"]


async def scrape_emails_from_url(
    url: str,
    *,
    timeout: int = 10000,
    user_agent: str = DEFAULT_USER_AGENT,
    session: Optional[ClientSession] = None,
) -> Set[str]:
    """
    Fetch *url* over HTTP and return the emails in its body.

    Parameters
    ----------
    url : str
        Page to fetch.
    timeout : int
        Request timeout in milliseconds.
    user_agent : str
        Value of the User-Agent header.
    session : ClientSession, optional
        Reuse an existing session; a temporary one is opened otherwise.

    Raises
    ------
    PageFetchError
        The server answered with a non-2xx status.
    """
    if session is not None:
        page = await HttpFetcher(session, timeout=timeout / 1000, user_agent=user_agent).fetch(url)
    else:
        async with ClientSession() as own_session:
            page = await HttpFetcher(own_session, timeout=timeout / 1000, user_agent=user_agent).fetch(url)
    logger.debug("Scraped %s: %d emails", url, len(page.emails))
    return page.emails


async def scrape_emails_from_page(
    page: BrowserPage,
    url: Optional[str] = None,
    *,
    wait_until: str = "load",
    timeout: int = 30000,
) -> Set[str]:
    """
    Return the emails visible in a browser page.

    When *url* is given the page is navigated there first; otherwise the page's
    current document is used. The page is left open for the caller to close.
    """
    if url is not None:
        await page.goto(url, wait_until=wait_until, timeout=timeout)
    emails = await extract_emails_from_page(page)
    logger.debug("Scraped %s: %d emails", url or "current page", len(emails))
    return emails
