# File: tests/test_report.py
import json

from email_scout.crawler.models import CrawlStats
from email_scout.report import build_report, render_json


def test_build_report_sorts_and_dedups():
    data = build_report(["b@x.example", "a@x.example", "b@x.example"], "https://x.example/")
    assert data == {"url": "https://x.example/", "emails": ["a@x.example", "b@x.example"]}


def test_render_json_creates_parent_dirs(tmp_path):
    out = tmp_path / "nested" / "dir" / "report.json"
    stats = CrawlStats(pages_visited=4, pages_fetched=3, errors=1, emails_found=1)
    saved = render_json({"a@x.example"}, str(out), source_url="https://x.example/", stats=stats)
    assert saved == out
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["emails"] == ["a@x.example"]
    assert data["stats"]["errors"] == 1
