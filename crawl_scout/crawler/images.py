"""Image downloading for CrawlScout."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional, Union

from aiohttp import ClientError, ClientSession

from crawl_scout.crawler.errors import FetchError
from crawl_scout.logger import logger

__all__ = ("ImageDownloader", "sanitize_file_name", "image_file_name")


def sanitize_file_name(name: str) -> str:
    """Strip the query string: ``photo.jpg?size=large`` -> ``photo.jpg``."""
    return name.split("?", 1)[0]


def image_file_name(url: str) -> Optional[str]:
    """File name for *url*: its last path segment without query, or None if unusable."""
    name = sanitize_file_name(url.rstrip("/").rsplit("/", 1)[-1])
    if name in ("", ".", ".."):
        return None
    return name


class ImageDownloader:
    """Downloads images into a directory, skipping (and logging) every failure."""

    def __init__(self, session: ClientSession, concurrency: int = 8) -> None:
        self.session = session
        self.semaphore = asyncio.Semaphore(concurrency)

    async def fetch(self, url: str) -> bytes:
        """Return the raw bytes behind *url*, or raise FetchError."""
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if resp.status >= 400:
                    raise FetchError(url, f"HTTP {resp.status}")
                return await resp.read()
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "timed out") from exc
        except (ClientError, ValueError) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

    async def download(self, url: str, directory: Path) -> Optional[Path]:
        """Download one image; return the written path or None on failure."""
        name = image_file_name(url)
        if name is None:
            logger.warning("Error downloading image from %s: no file name in URL", url)
            return None
        async with self.semaphore:
            try:
                data = await self.fetch(url)
            except FetchError as exc:
                logger.warning("Error downloading image from %s: %s", url, exc.reason)
                return None
        path = directory / name
        try:
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as exc:
            logger.warning("Error writing image content to file for %s: %s", url, exc)
            return None
        logger.info("Downloaded and saved image: %s", path)
        return path

    async def download_all(self, urls: Iterable[str], directory: Union[str, Path]) -> List[Path]:
        """
        Download every URL into *directory* concurrently.

        Files with the same derived name overwrite each other. Returns the
        paths that were written, in the order of *urls*.
        """
        target = Path(directory)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create image directory %s: %s", target, exc)
            return []
        saved = await asyncio.gather(*(self.download(url, target) for url in urls))
        return [p for p in saved if p is not None]
