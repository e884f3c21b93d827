from __future__ import annotations

import time
from collections import deque
from typing import Any, Callable, Deque, Optional, Set

from aiohttp import ClientSession, ClientTimeout

from email_scout.browser import BrowserHandle
from email_scout.config import CrawlOptions
from email_scout.crawler.fetcher import Fetcher, create_fetcher
from email_scout.crawler.link_extractor import get_domain, iter_links, normalize_url
from email_scout.crawler.models import CrawlStats, FrontierEntry
from email_scout.errors import ConfigurationError, PageFetchError
from email_scout.logger import logger

__all__ = ("WebsiteCrawler", "scrape_emails_from_website", "PageVisitedCallback", "ErrorCallback")

PageVisitedCallback = Callable[[str, int, int], Any]
ErrorCallback = Callable[[str, BaseException], Any]


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class WebsiteCrawler:
    """
    Breadth-first email crawler bounded by depth, page budget and domain scope.

    One page is processed at a time. A page that fails is reported through
    ``on_error`` (or logged) and the crawl moves on to the next frontier entry.
    """

    def __init__(
        self,
        options: Optional[CrawlOptions] = None,
        *,
        browser: Optional[BrowserHandle] = None,
        fetcher: Optional[Fetcher] = None,
        on_page_visited: Optional[PageVisitedCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self.options = options or CrawlOptions()
        if fetcher is None and self.options.use_browser and browser is None:
            raise ConfigurationError("use_browser=True requires an open browser handle")
        self.browser = browser
        self.on_page_visited = on_page_visited
        self.on_error = on_error
        self.session: Optional[ClientSession] = None
        self.visited: Set[str] = set()
        # final URLs reached through redirects; skipped like visited ones, no budget cost
        self.redirect_targets: Set[str] = set()
        self.stats = CrawlStats()
        self.logger = logger
        self._fetcher = fetcher

    async def __aenter__(self) -> WebsiteCrawler:
        if self._fetcher is None:
            if not self.options.use_browser:
                self.session = ClientSession(timeout=ClientTimeout(total=self.options.timeout_seconds))
            self._fetcher = create_fetcher(self.options, browser=self.browser, session=self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, start_url: str) -> Set[str]:
        """Crawl from *start_url* and return every normalized email found."""
        if self._fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with WebsiteCrawler(...)'")
        opts = self.options
        root = normalize_url(start_url, start_url) or start_url
        start_domain = get_domain(root)

        frontier: Deque[FrontierEntry] = deque([FrontierEntry(root, 0)])
        visited: Set[str] = set()
        self.visited = visited
        self.redirect_targets = set()
        self.stats = CrawlStats()
        results: Set[str] = set()

        self.logger.info(
            "Crawl started: %s (max_depth=%d, max_pages=%d, same_domain_only=%s)",
            root, opts.max_depth, opts.max_pages, opts.same_domain_only,
        )
        started = time.monotonic()

        while frontier and len(visited) < opts.max_pages:
            entry = frontier.popleft()
            if self._seen(entry.url) or entry.depth > opts.max_depth:
                continue
            if opts.same_domain_only and get_domain(entry.url) != start_domain:
                continue

            visited.add(entry.url)
            try:
                await self._process(entry, frontier, results, start_domain)
            except Exception as exc:
                self._report_error(entry.url, exc)

        self.stats.pages_visited = len(visited)
        self.stats.emails_found = len(results)
        self.logger.info(
            "Crawl finished: %d pages (%d errors), %d emails in %.2f s",
            self.stats.pages_visited, self.stats.errors, self.stats.emails_found, time.monotonic() - started,
        )
        return results

    async def _process(
        self,
        entry: FrontierEntry,
        frontier: Deque[FrontierEntry],
        results: Set[str],
        start_domain: str,
    ) -> None:
        page = await self._fetcher.fetch(entry.url)  # type: ignore[union-attr]
        final_url = normalize_url(page.url, page.url) or entry.url
        if final_url != entry.url:
            if self.options.same_domain_only and get_domain(final_url) != start_domain:
                raise PageFetchError(entry.url, message=f"Redirected outside {start_domain}: {final_url}")
            self.logger.debug("%s redirected to %s", entry.url, final_url)
            self.redirect_targets.add(final_url)
        results |= page.emails
        self.stats.pages_fetched += 1
        self.logger.debug("Visited %s (depth %d): %d emails", entry.url, entry.depth, len(page.emails))
        if self.on_page_visited is not None:
            self.on_page_visited(entry.url, entry.depth, len(page.emails))

        if entry.depth >= self.options.max_depth:
            return
        for link in iter_links(page.html, final_url):
            if self._seen(link):
                continue
            if self.options.same_domain_only and get_domain(link) != start_domain:
                continue
            frontier.append(FrontierEntry(link, entry.depth + 1))

    def _seen(self, url: str) -> bool:
        return url in self.visited or url in self.redirect_targets

    def _report_error(self, url: str, exc: BaseException) -> None:
        self.stats.errors += 1
        if self.on_error is not None:
            self.on_error(url, exc)
        else:
            self.logger.warning("Error scraping %s: %s", url, _describe(exc))


async def scrape_emails_from_website(
    start_url: str,
    options: Optional[CrawlOptions] = None,
    *,
    browser: Optional[BrowserHandle] = None,
    fetcher: Optional[Fetcher] = None,
    on_page_visited: Optional[PageVisitedCallback] = None,
    on_error: Optional[ErrorCallback] = None,
    **overrides: Any,
) -> Set[str]:
    """
    Crawl a website starting at *start_url* and return the set of emails found.

    Options come from *options*, from keyword overrides such as
    ``max_depth=1`` or ``use_browser=True``, or both (overrides win).
    """
    if options is None:
        options = CrawlOptions(**overrides)
    elif overrides:
        options = CrawlOptions(**{**options.model_dump(), **overrides})
    async with WebsiteCrawler(
        options,
        browser=browser,
        fetcher=fetcher,
        on_page_visited=on_page_visited,
        on_error=on_error,
    ) as crawler:
        return await crawler.crawl(start_url)
