# File: crawl_scout/report/__init__.py
"""crawl_scout.report: JSON and HTML crawl reports used by the CLI."""

from crawl_scout.report.html_report import render_html
from crawl_scout.report.json_report import render_json

__all__ = ["render_json", "render_html"]
