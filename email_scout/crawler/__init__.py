"""email_scout.crawler: breadth-first website crawl, fetch strategies and link extraction."""
from email_scout.crawler.crawler import WebsiteCrawler, scrape_emails_from_website
from email_scout.crawler.fetcher import BrowserFetcher, Fetcher, HttpFetcher, create_fetcher
from email_scout.crawler.link_extractor import extract_links, get_domain, normalize_url
from email_scout.crawler.models import CrawlStats, FrontierEntry, PageResult

__all__ = [
    "WebsiteCrawler",
    "scrape_emails_from_website",
    "Fetcher",
    "HttpFetcher",
    "BrowserFetcher",
    "create_fetcher",
    "extract_links",
    "get_domain",
    "normalize_url",
    "CrawlStats",
    "FrontierEntry",
    "PageResult",
]
