"""Exception hierarchy for EmailScout."""
from __future__ import annotations

from typing import Optional

__all__ = (
    "EmailScoutError",
    "ConfigurationError",
    "PageFetchError",
    "BrowserError",
    "BrowserUnavailableError",
    "BrowserLaunchError",
)


class EmailScoutError(RuntimeError):
    """Base class for all errors raised by the package."""


class ConfigurationError(EmailScoutError):
    """Run options are inconsistent (e.g. browser mode without a browser)."""


class PageFetchError(EmailScoutError):
    """A single page could not be fetched."""

    def __init__(self, url: str, status: Optional[int] = None, message: Optional[str] = None) -> None:
        self.url = url
        self.status = status
        if message is None:
            message = f"HTTP error! status: {status}" if status is not None else f"Failed to fetch {url}"
        super().__init__(message)


class BrowserError(EmailScoutError):
    """Browser could not be acquired."""


class BrowserUnavailableError(BrowserError):
    """No supported automation engine is installed."""


class BrowserLaunchError(BrowserError):
    """An automation engine is installed but failed to launch."""

    def __init__(self, engine: str, message: str) -> None:
        self.engine = engine
        super().__init__(message)
