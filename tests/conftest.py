# File: tests/conftest.py
import asyncio
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from crawl_scout.config import CrawlConfig
from crawl_scout.crawler.errors import FetchError
from crawl_scout.crawler.models import FetchedPage


class StubFetcher:
    """
    Deterministic in-memory fetcher.

    *pages* maps URL -> (body, links); URLs missing from it fail with FetchError.
    URLs listed in *hang* never return.
    """

    def __init__(self, pages: Dict[str, tuple], hang: tuple = ()) -> None:
        self.pages = pages
        self.hang = set(hang)
        self.calls: List[str] = []

    async def fetch(self, url: str) -> FetchedPage:
        self.calls.append(url)
        if url in self.hang:
            await asyncio.Event().wait()
        await asyncio.sleep(0)
        if url not in self.pages:
            raise FetchError(url, "HTTP 404")
        body, links = self.pages[url]
        return FetchedPage(body=body, links=list(links))


class FakeDownloader:
    """Records download requests instead of touching the network."""

    def __init__(self) -> None:
        self.batches: List[tuple] = []

    async def download_all(self, urls, directory):
        urls = list(urls)
        self.batches.append((urls, Path(directory)))
        return [Path(directory) / u.rsplit("/", 1)[-1] for u in urls]


@pytest.fixture()
def make_config(tmp_path):
    """
    Return a factory for CrawlConfig with test-friendly defaults.
    """

    def _make(**overrides) -> CrawlConfig:
        values = {
            "seed_url": "http://example.com",
            "max_depth": 2,
            "timeout": 2.0,
            "output_dir": tmp_path / "images",
            "image_mode": "off",
        }
        values.update(overrides)
        return CrawlConfig(**values)

    return _make


@pytest.fixture()
def fake_downloader() -> FakeDownloader:
    return FakeDownloader()


def img(src: str) -> str:
    return f'<img src="{src}">'


def page(*, images: Optional[List[str]] = None, body: str = "") -> str:
    return "<html><body>" + body + "".join(img(s) for s in images or []) + "</body></html>"
