# crawl_scout/__init__.py
"""
CrawlScout package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point
from crawl_scout.cli import cli  # noqa: E402
