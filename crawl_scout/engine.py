# File: crawl_scout/engine.py
"""crawl_scout.engine: orchestration layer wiring HTTP session, fetcher, downloader and coordinator."""

from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientSession, ClientTimeout

from crawl_scout.aggregator import CrawlReport
from crawl_scout.config import CrawlConfig, load_config
from crawl_scout.crawler.coordinator import CrawlCoordinator
from crawl_scout.crawler.fetcher import Fetcher, HttpFetcher
from crawl_scout.crawler.images import ImageDownloader
from crawl_scout.logger import logger

__all__ = ["Engine", "start_crawl"]


async def start_crawl(config: CrawlConfig, fetcher: Optional[Fetcher] = None) -> CrawlReport:
    """
    Run one crawl described by *config* and return its report.

    Parameters
    ----------
    config : CrawlConfig
        Crawl configuration.
    fetcher : Fetcher, optional
        Page fetch capability; an :class:`HttpFetcher` over the shared
        session is used when omitted.
    """
    timeout = ClientTimeout(total=config.request_timeout)
    async with ClientSession(timeout=timeout, headers={"User-Agent": config.user_agent}) as session:
        downloader = (
            ImageDownloader(session, concurrency=config.image_concurrency)
            if config.image_mode != "off"
            else None
        )
        coordinator = CrawlCoordinator(
            config,
            fetcher if fetcher is not None else HttpFetcher(session),
            downloader=downloader,
        )
        return await coordinator.crawl()


class Engine:
    """Facade for the CLI and tests: config loading and a synchronous crawl."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlConfig:
        """Load a YAML/JSON config or fall back to defaults."""
        return load_config(path)

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config

    def run(self) -> CrawlReport:
        """Run the crawl to completion (or to its deadline) and return the report."""
        logger.info("Starting crawl…")
        try:
            return asyncio.run(start_crawl(self.config))
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
