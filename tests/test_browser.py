# File: tests/test_browser.py
from __future__ import annotations

from types import SimpleNamespace
from typing import Any, List

import pytest

from email_scout.browser import (
    BrowserProvider,
    _launch_playwright,
    _PlaywrightBrowser,
    _PyppeteerPage,
    create_browser,
)
from email_scout.crawler.fetcher import BrowserFetcher
from email_scout.errors import BrowserLaunchError, BrowserUnavailableError

MISSING_MODULE = "email_scout_tests_no_such_engine"
PRESENT_MODULE = "json"


def provider(name: str, module: str, result: Any = None, error: Exception | None = None, calls: List[str] | None = None):
    async def launch(_module):
        if calls is not None:
            calls.append(name)
        if error is not None:
            raise error
        return result

    return BrowserProvider(name=name, module=module, launch=launch, hint=f"install {name} browsers")


@pytest.mark.asyncio()
async def test_falls_back_to_second_engine(fake_browser):
    browser = fake_browser(pages={})
    calls: List[str] = []
    got = await create_browser(
        [provider("First", MISSING_MODULE, calls=calls), provider("Second", PRESENT_MODULE, result=browser, calls=calls)]
    )
    assert got is browser
    assert calls == ["Second"]


@pytest.mark.asyncio()
async def test_installed_engine_that_fails_to_launch_short_circuits(fake_browser):
    calls: List[str] = []
    with pytest.raises(BrowserLaunchError) as exc_info:
        await create_browser(
            [
                provider("First", PRESENT_MODULE, error=OSError("chromium missing"), calls=calls),
                provider("Second", PRESENT_MODULE, result=fake_browser(pages={}), calls=calls),
            ]
        )
    assert calls == ["First"]
    assert exc_info.value.engine == "First"
    message = str(exc_info.value)
    assert "Failed to launch First browser: chromium missing" in message
    assert "install First browsers" in message


@pytest.mark.asyncio()
async def test_no_engine_installed():
    with pytest.raises(BrowserUnavailableError) as exc_info:
        await create_browser([provider("First", MISSING_MODULE), provider("Second", MISSING_MODULE)])
    assert "No browser library found" in str(exc_info.value)


def test_provider_load():
    assert provider("Missing", MISSING_MODULE).load() is None
    assert provider("Present", PRESENT_MODULE).load() is not None


class _Recorder:
    def __init__(self, fail_launch: bool = False, fail_close: bool = False) -> None:
        self.events: List[str] = []
        self.fail_launch = fail_launch
        self.fail_close = fail_close

    def module(self) -> SimpleNamespace:
        recorder = self

        class _Browser:
            async def close(self):
                recorder.events.append("browser.close")
                if recorder.fail_close:
                    raise RuntimeError("close failed")

        class _Chromium:
            async def launch(self, headless=True):
                recorder.events.append("launch")
                if recorder.fail_launch:
                    raise RuntimeError("Executable doesn't exist")
                return _Browser()

        class _Playwright:
            chromium = _Chromium()

            async def stop(self):
                recorder.events.append("stop")

        class _Manager:
            async def start(self):
                recorder.events.append("start")
                return _Playwright()

        return SimpleNamespace(async_playwright=lambda: _Manager())


@pytest.mark.asyncio()
async def test_playwright_launch_failure_stops_driver():
    rec = _Recorder(fail_launch=True)
    with pytest.raises(RuntimeError):
        await _launch_playwright(rec.module())
    assert rec.events == ["start", "launch", "stop"]


@pytest.mark.asyncio()
async def test_playwright_close_always_stops_driver():
    rec = _Recorder(fail_close=True)
    browser = await _launch_playwright(rec.module())
    assert isinstance(browser, _PlaywrightBrowser)
    with pytest.raises(RuntimeError):
        await browser.close()
    assert rec.events == ["start", "launch", "browser.close", "stop"]


@pytest.mark.asyncio()
async def test_pyppeteer_page_translates_wait_until():
    calls = []

    class _Page:
        async def goto(self, url, **kwargs):
            calls.append((url, kwargs))

    await _PyppeteerPage(_Page()).goto("https://a.example/", wait_until="networkidle", timeout=500)
    assert calls == [("https://a.example/", {"waitUntil": "networkidle0", "timeout": 500})]


@pytest.mark.asyncio()
async def test_browser_fetcher_closes_page_on_failure(fake_browser):
    browser = fake_browser(pages={}, failing={"https://a.example/"})
    fetcher = BrowserFetcher(browser, wait_until="domcontentloaded", timeout=10)
    with pytest.raises(TimeoutError):
        await fetcher.fetch("https://a.example/")
    assert len(browser.opened) == 1
    assert browser.opened[0].closed


@pytest.mark.asyncio()
async def test_browser_fetcher_merges_html_and_dom_emails(fake_browser):
    url = "https://a.example/team"
    browser = fake_browser(
        pages={url: '<p>static@a.example</p><a href="/x">x</a>'},
        dom_emails={url: ["dynamic@a.example"]},
    )
    page = await BrowserFetcher(browser).fetch(url)
    assert page.emails == {"static@a.example", "dynamic@a.example"}
    assert '<a href="/x">' in page.html
    assert browser.opened[0].closed
