"""
Crawl coordinator: recursive task scheduling, result collection and deadline.

Every claimed URL gets its own asyncio task. A task fetches its page, claims
and spawns the children it is allowed to follow, then emits exactly one
outcome (a :class:`PageResult` or a :class:`CrawlFailure`). The collector
does not know the amount of work in advance: it starts expecting one outcome
(the seed) and raises the expectation by ``spawned`` for every result.
"""
from __future__ import annotations

import asyncio
import time
from contextlib import nullcontext
from pathlib import Path
from typing import Optional, Protocol, Set, Tuple

from crawl_scout.aggregator import CrawlReport
from crawl_scout.config import CrawlConfig
from crawl_scout.crawler.errors import FetchError
from crawl_scout.crawler.fetcher import Fetcher
from crawl_scout.crawler.link_extractor import extract_images, is_internal_link
from crawl_scout.crawler.models import CrawlFailure, Outcome, PageResult
from crawl_scout.crawler.registry import VisitedRegistry
from crawl_scout.logger import logger

__all__ = ("CrawlCoordinator",)


class Downloader(Protocol):
    async def download_all(self, urls, directory): ...


class CrawlCoordinator:
    """Runs one crawl over a fetcher, collecting outcomes until done or timed out."""

    def __init__(
        self,
        config: CrawlConfig,
        fetcher: Fetcher,
        downloader: Optional[Downloader] = None,
        registry: Optional[VisitedRegistry] = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.downloader = downloader
        self.registry = registry if registry is not None else VisitedRegistry()
        self.logger = logger
        self._outbox: asyncio.Queue[Outcome] = asyncio.Queue()
        self._cancelled = asyncio.Event()
        self._tasks: Set[asyncio.Task] = set()
        self._limiter: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(config.max_concurrency) if config.max_concurrency else None
        )
        if config.image_mode != "off" and downloader is None:
            raise ValueError(f"image_mode={config.image_mode!r} requires a downloader")

    async def crawl(self, seed_url: Optional[str] = None) -> CrawlReport:
        seed = seed_url or self.config.seed_url
        if not self.registry.claim_if_new(seed):
            raise RuntimeError(f"{seed} is already claimed; use a new coordinator for every crawl")
        self.logger.info("Crawl started: %s (depth %d)", seed, self.config.max_depth)
        start = time.monotonic()

        report = CrawlReport(seed_url=seed)
        self._spawn(seed, self.config.max_depth)
        try:
            await self._collect(report)
        finally:
            self._cancelled.set()
            await self._wait_tasks(cancel=report.timed_out or not report.finished)

        if self.config.image_mode == "batch" and report.image_urls:
            report.add_saved(await self.downloader.download_all(report.image_urls, self.config.output_dir))

        self.logger.info(
            "Finished in %.2f s: %d/%d outcomes, %d pages, %d errors",
            time.monotonic() - start,
            report.collected,
            report.to_collect,
            len(report.pages),
            len(report.errors),
        )
        return report

    # ------------------------------------------------------------------ #
    # Collection loop                                                    #
    # ------------------------------------------------------------------ #

    async def _collect(self, report: CrawlReport) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.timeout
        to_collect = 1
        collected = 0
        while collected < to_collect:
            remaining = deadline - loop.time()
            try:
                if remaining <= 0:
                    raise asyncio.TimeoutError
                outcome = await asyncio.wait_for(self._outbox.get(), timeout=remaining)
            except asyncio.TimeoutError:
                report.timed_out = True
                self.logger.warning("Crawling timed out after %.1f s", self.config.timeout)
                break
            collected += 1
            if isinstance(outcome, PageResult):
                to_collect += outcome.spawned
                self.logger.info("found: %s", outcome.url)
                report.add_page(outcome.url, outcome.spawned, extract_images(outcome.body, outcome.url))
                report.add_saved(outcome.saved_images)
            else:
                self.logger.error("Error crawling %s: %s", outcome.url, outcome.error)
                report.add_error(outcome.url, outcome.error)
            report.collected = collected
            report.to_collect = to_collect

    async def _wait_tasks(self, cancel: bool) -> None:
        """Wait phase: let tasks finish, or cancel whatever is still in flight."""
        pending = list(self._tasks)
        if cancel:
            for task in pending:
                task.cancel()
            if pending:
                self.logger.debug("Cancelled %d in-flight tasks", len(pending))
        await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------ #
    # Tasks                                                              #
    # ------------------------------------------------------------------ #

    def _spawn(self, url: str, depth: int) -> None:
        """Start a task for an already claimed *url*."""
        task = asyncio.create_task(self._run(url, depth), name=f"crawl:{url}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _emit(self, outcome: Outcome) -> None:
        if self._cancelled.is_set():
            self.logger.debug("Collector gone, dropping outcome for %s", outcome.url)
            return
        self._outbox.put_nowait(outcome)

    def _follows(self, source: str, link: str) -> bool:
        return self.config.follow_external or is_internal_link(source, link)

    async def _run(self, url: str, depth: int) -> None:
        if self._cancelled.is_set():
            return
        try:
            async with self._limiter or nullcontext():
                if self._cancelled.is_set():
                    return
                page = await self.fetcher.fetch(url)
        except FetchError as exc:
            self._emit(CrawlFailure(url, exc.reason))
            return
        except Exception as exc:
            self._emit(CrawlFailure(url, f"{type(exc).__name__}: {exc}"))
            return

        spawned = 0
        if depth > 1:
            for link in page.links:
                if self._follows(url, link) and self.registry.claim_if_new(link):
                    self._spawn(link, depth - 1)
                    spawned += 1

        saved: Tuple[Path, ...] = ()
        if self.config.image_mode == "inline":
            saved = await self._download_inline(url, page.body)

        self._emit(PageResult(url, page.body, spawned, saved))

    async def _download_inline(self, url: str, body: str) -> Tuple[Path, ...]:
        images = extract_images(body, url)
        if not images:
            return ()
        try:
            return tuple(await self.downloader.download_all(images, self.config.output_dir))
        except Exception as exc:
            # the page result must still be emitted
            self.logger.error("Image download for %s failed: %s", url, exc)
            return ()
