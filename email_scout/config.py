"""
Configuration models for EmailScout runs.
Pydantic describes the schema and validates values; ``load_config`` reads
defaults from a YAML or JSON file.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

__all__ = (
    "DEFAULT_USER_AGENT",
    "WaitUntil",
    "CrawlOptions",
    "PageOptions",
    "ScoutConfig",
    "load_config",
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

WaitUntil = Literal["load", "domcontentloaded", "networkidle"]


class CrawlOptions(BaseModel):
    """Options for one website crawl."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(3, ge=0, description="Inclusive link-hop ceiling from the start URL.")
    max_pages: int = Field(50, ge=1, description="Hard cap on pages dequeued and processed.")
    same_domain_only: bool = Field(True, description="Only follow links on the start URL host.")
    wait_until: WaitUntil = Field("load", description="Browser load condition.")
    timeout: int = Field(30000, gt=0, description="Per-page timeout (milliseconds).")
    use_browser: bool = Field(False, description="Fetch pages with a headless browser.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header for HTTP fetches.")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000


class PageOptions(BaseModel):
    """Options for scraping a single page."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: int = Field(10000, gt=0, description="Request timeout (milliseconds).")
    wait_until: WaitUntil = Field("load", description="Browser load condition.")
    use_browser: bool = Field(False, description="Load the page in a headless browser.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header for HTTP fetches.")


class ScoutConfig(BaseModel):
    """Defaults for both CLI commands, as read from a config file."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    page: PageOptions = Field(default_factory=PageOptions)
    website: CrawlOptions = Field(default_factory=CrawlOptions)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path]) -> ScoutConfig:
    """
    Read YAML or JSON and return a validated ScoutConfig.
    Raises FileNotFoundError when the file is missing.
    """
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ScoutConfig(**data)
