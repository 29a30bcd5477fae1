"""
Exceptions raised by the CrawlScout crawler.
"""
from __future__ import annotations


class CrawlScoutError(Exception):
    """Base class for crawler errors."""


class FetchError(CrawlScoutError):
    """Transport failure or non-success response for a page or image."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
