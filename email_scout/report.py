# email_scout/report.py

"""
JSON report for EmailScout results.

Writes the emails found for one URL, plus crawl counters when available.
"""
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from email_scout.crawler.models import CrawlStats


def build_report(emails: Iterable[str], source_url: str, stats: Optional[CrawlStats] = None) -> Dict[str, Any]:
    """Return the report as a plain dict with emails sorted lexicographically."""
    data: Dict[str, Any] = {"url": source_url, "emails": sorted(set(emails))}
    if stats is not None:
        data["stats"] = asdict(stats)
    return data


def render_json(
    emails: Iterable[str],
    output_path: Path | str,
    *,
    source_url: str,
    stats: Optional[CrawlStats] = None,
) -> Path:
    """
    Save the report as JSON at *output_path* and return the path.

    Example:
    ```python
    from email_scout.report import render_json
    report_path = render_json(emails, 'reports/emails.json', source_url='https://example.com')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(build_report(emails, source_url, stats), f, ensure_ascii=False, indent=2)

    return output
