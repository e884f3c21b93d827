#!/usr/bin/env python3
"""
Command-line entry point for EmailScout.

Commands:
  page URL      Scrape emails from a single webpage
  website URL   Crawl a website from URL and scrape emails from every page

Common options:
  --config PATH       YAML/JSON file with defaults for both commands
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Also write logs to this file
  --version, -v       Show the EmailScout version

Example:
  email-scout website https://example.com --max-depth 2 --max-pages 20
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Set

import click
from pydantic import ValidationError

from email_scout import __version__
from email_scout.browser import create_browser
from email_scout.config import CrawlOptions, PageOptions, ScoutConfig, load_config
from email_scout.crawler.crawler import scrape_emails_from_website
from email_scout.crawler.models import CrawlStats
from email_scout.logger import init_logging
from email_scout.page_scraper import scrape_emails_from_page, scrape_emails_from_url
from email_scout.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
WAIT_UNTIL_CHOICES = click.Choice(["load", "domcontentloaded", "networkidle"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _merge(defaults: Any, cls: Any, **overrides: Any) -> Any:
    """Build *cls* from config-file *defaults*, letting non-None CLI values win."""
    data = defaults.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return cls(**data)


def _print_emails(emails: Set[str]) -> None:
    if not emails:
        click.echo('   No emails found.')
        return
    click.echo(f'   Found {len(emails)} unique email(s):\n')
    for email in sorted(emails):
        click.echo(f'     {email}')


class _CrawlProgress:
    """Prints one line per visited page and per failed page."""

    def __init__(self, max_pages: int) -> None:
        self.max_pages = max_pages
        self.pages_visited = 0
        self.errors = 0

    def page_visited(self, url: str, depth: int, email_count: int) -> None:
        self.pages_visited += 1
        indent = '  ' * depth
        suffix = ''
        if email_count > 0:
            suffix = f" ({email_count} email{'s' if email_count != 1 else ''})"
        click.echo(f'{indent}[{self.pages_visited}/{self.max_pages}] Depth {depth}: {url}{suffix}')

    def error(self, url: str, error: BaseException) -> None:
        self.errors += 1
        click.secho(f'   Error on {url}: {error or type(error).__name__}', fg='yellow', err=True)

    def stats(self, emails: Set[str]) -> CrawlStats:
        return CrawlStats(
            pages_visited=self.pages_visited + self.errors,
            pages_fetched=self.pages_visited,
            errors=self.errors,
            emails_found=len(emails),
        )


async def _scrape_page(url: str, options: PageOptions) -> Set[str]:
    if not options.use_browser:
        click.echo(f'   Fetching: {url}...')
        return await scrape_emails_from_url(url, timeout=options.timeout, user_agent=options.user_agent)

    click.echo('   Initializing headless browser...')
    browser = await create_browser()
    click.echo('   Browser ready')
    try:
        click.echo(f'   Loading page: {url}...')
        page = await browser.new_page()
        try:
            return await scrape_emails_from_page(
                page, url, wait_until=options.wait_until, timeout=options.timeout
            )
        finally:
            await page.close()
    finally:
        click.echo('   Closing browser...')
        await browser.close()


async def _crawl_website(url: str, options: CrawlOptions, progress: _CrawlProgress) -> Set[str]:
    browser = None
    if options.use_browser:
        click.echo('   Initializing headless browser...')
        browser = await create_browser()
        click.echo('   Browser ready\n')
    try:
        return await scrape_emails_from_website(
            url,
            options,
            browser=browser,
            on_page_visited=progress.page_visited,
            on_error=progress.error,
        )
    finally:
        if browser is not None:
            click.echo('\n   Closing browser...')
            await browser.close()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='EmailScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML/JSON file with default options.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also write logs to this file'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file):
    """A CLI tool for scraping emails from webpages and websites."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    try:
        cfg = load_config(config_path) if config_path else ScoutConfig()
    except Exception as e:
        print_error(f'Failed to load config: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('page', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--timeout', '-t', type=click.IntRange(min=1), default=None,
              help='Request timeout in milliseconds [default: 10000]')
@click.option('--browser', '-b', 'use_browser', is_flag=True,
              help='Use a headless browser (Playwright/pyppeteer) instead of HTTP requests')
@click.option('--wait-until', 'wait_until', type=WAIT_UNTIL_CHOICES, default=None,
              help='Browser load event to wait for [default: load]')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Save the emails as a JSON report')
@click.pass_context
def page_command(ctx, url, timeout, use_browser, wait_until, json_output):
    """Scrape emails from a single webpage."""
    cfg: ScoutConfig = ctx.obj['config']
    try:
        options = _merge(cfg.page, PageOptions, timeout=timeout, wait_until=wait_until,
                         use_browser=True if use_browser else None)
    except ValidationError as e:
        print_error(f'Invalid options: {e}')

    click.echo(f'\nScraping emails from: {url}')
    click.echo(f"   Method: {'Headless browser' if options.use_browser else 'HTTP requests'}")
    if options.use_browser:
        click.echo(f'   Wait until: {options.wait_until}')
    click.echo(f'   Timeout: {options.timeout}ms\n')

    try:
        emails = asyncio.run(_scrape_page(url, options))
    except Exception as e:
        print_error(f'\nError: {e or type(e).__name__}')

    click.echo('\nResults:')
    _print_emails(emails)

    if json_output:
        try:
            saved = render_json(emails, json_output, source_url=url)
            click.echo(f'\nJSON report: {saved}')
        except Exception as e:
            print_error(f'Failed to save JSON report: {e}')


@cli.command('website', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-depth', '-d', type=click.IntRange(min=0), default=None,
              help='Maximum crawl depth [default: 3]')
@click.option('--max-pages', '-p', type=click.IntRange(min=1), default=None,
              help='Maximum number of pages to crawl [default: 50]')
@click.option('--cross-domain', is_flag=True, help='Allow crawling to different domains')
@click.option('--browser', '-b', 'use_browser', is_flag=True,
              help='Use a headless browser (Playwright/pyppeteer) instead of HTTP requests')
@click.option('--wait-until', 'wait_until', type=WAIT_UNTIL_CHOICES, default=None,
              help='Browser load event to wait for [default: load]')
@click.option('--timeout', '-t', type=click.IntRange(min=1), default=None,
              help='Per-page timeout in milliseconds [default: 30000]')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Save the emails and crawl counters as a JSON report')
@click.pass_context
def website_command(ctx, url, max_depth, max_pages, cross_domain, use_browser, wait_until, timeout, json_output):
    """Scrape emails from an entire website (crawls from URL)."""
    cfg: ScoutConfig = ctx.obj['config']
    overrides: Dict[str, Optional[Any]] = dict(
        max_depth=max_depth,
        max_pages=max_pages,
        same_domain_only=False if cross_domain else None,
        use_browser=True if use_browser else None,
        wait_until=wait_until,
        timeout=timeout,
    )
    try:
        options = _merge(cfg.website, CrawlOptions, **overrides)
    except ValidationError as e:
        print_error(f'Invalid options: {e}')

    click.echo(f'\nStarting website crawl from: {url}')
    click.echo(
        f'   Max depth: {options.max_depth} | Max pages: {options.max_pages} | '
        f"Cross-domain: {'No' if options.same_domain_only else 'Yes'}"
    )
    click.echo(f"   Method: {'Headless browser' if options.use_browser else 'HTTP requests'}\n")

    progress = _CrawlProgress(options.max_pages)
    try:
        emails = asyncio.run(_crawl_website(url, options, progress))
    except Exception as e:
        print_error(f'\nError: {e or type(e).__name__}')

    click.echo('\nCrawl Summary:')
    click.echo(f'   Pages visited: {progress.pages_visited}')
    click.echo(f'   Errors: {progress.errors}')
    click.echo(f'   Total unique emails found: {len(emails)}\n')
    _print_emails(emails)

    if json_output:
        try:
            saved = render_json(emails, json_output, source_url=url, stats=progress.stats(emails))
            click.echo(f'\nJSON report: {saved}')
        except Exception as e:
            print_error(f'Failed to save JSON report: {e}')


if __name__ == "__main__":
    cli()
