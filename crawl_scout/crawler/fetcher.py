# crawl_scout/crawler/fetcher.py
"""
Fetcher module: the page-fetch capability consumed by the crawl coordinator.

Any object with an ``async fetch(url) -> FetchedPage`` method will do; tests
plug in in-memory stubs, production uses :class:`HttpFetcher`.
"""
from __future__ import annotations

import asyncio
from typing import Protocol

from aiohttp import ClientError, ClientSession

from crawl_scout.crawler.errors import FetchError
from crawl_scout.crawler.link_extractor import extract_links
from crawl_scout.crawler.models import FetchedPage


class Fetcher(Protocol):
    async def fetch(self, url: str) -> FetchedPage:
        """Return the page body and its links, or raise FetchError."""
        ...


class HttpFetcher:
    """Fetches pages over HTTP with a shared aiohttp session."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> FetchedPage:
        """
        GET *url* and extract its links.

        Raises FetchError on transport errors, timeouts, malformed URLs and
        HTTP statuses >= 400. No retries.
        """
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if resp.status >= 400:
                    raise FetchError(url, f"HTTP {resp.status}")
                body = await resp.text(errors="replace")
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "timed out") from exc
        except (ClientError, ValueError) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        return FetchedPage(body=body, links=extract_links(body, url))
