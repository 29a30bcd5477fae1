# File: crawl_scout/aggregator.py
"""crawl_scout.aggregator: crawl report assembled by the collection loop."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterable, List, TypedDict


class PageInfo(TypedDict):
    """A page that was fetched successfully."""

    url: str
    spawned: int
    images: List[str]


class ErrorInfo(TypedDict):
    """A page whose fetch failed."""

    url: str
    error: str


@dataclass(slots=True)
class CrawlReport:
    """Outcome of one crawl run."""

    seed_url: str
    pages: List[PageInfo] = field(default_factory=list)
    errors: List[ErrorInfo] = field(default_factory=list)
    image_urls: List[str] = field(default_factory=list)
    saved_images: List[str] = field(default_factory=list)
    collected: int = 0
    to_collect: int = 1
    timed_out: bool = False

    @property
    def finished(self) -> bool:
        """True when every promised outcome was collected."""
        return not self.timed_out and self.collected == self.to_collect

    def add_page(self, url: str, spawned: int, images: List[str]) -> None:
        self.pages.append({"url": url, "spawned": spawned, "images": images})
        self.image_urls.extend(images)

    def add_error(self, url: str, error: str) -> None:
        self.errors.append({"url": url, "error": error})

    def add_saved(self, paths: Iterable[Path]) -> None:
        self.saved_images.extend(str(p) for p in paths)

    def summary(self) -> str:
        text = (
            f"Crawled {len(self.pages)} pages, {len(self.errors)} errors, "
            f"{len(self.image_urls)} images found, {len(self.saved_images)} saved"
        )
        if self.timed_out:
            text += f" (timed out, {self.collected}/{self.to_collect} outcomes)"
        return text

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        output = asdict(self)
        output["finished"] = self.finished
        return json.dumps(output, ensure_ascii=False, indent=2 if pretty else None)
