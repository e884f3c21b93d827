# email_scout/__init__.py
"""
EmailScout package initializer.
Defines the package version and exposes the library API and CLI.
"""
__version__ = "0.1.0"

from email_scout.browser import create_browser
from email_scout.config import CrawlOptions, PageOptions
from email_scout.crawler.crawler import WebsiteCrawler, scrape_emails_from_website
from email_scout.extractor import extract_and_normalize_emails, normalize_email
from email_scout.page_scraper import scrape_emails_from_page, scrape_emails_from_url

from .cli import cli

__all__ = [
    "__version__",
    "cli",
    "create_browser",
    "CrawlOptions",
    "PageOptions",
    "WebsiteCrawler",
    "scrape_emails_from_website",
    "scrape_emails_from_url",
    "scrape_emails_from_page",
    "extract_and_normalize_emails",
    "normalize_email",
]
