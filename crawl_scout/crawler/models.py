"""
Data models for the CrawlScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union


@dataclass(slots=True)
class FetchedPage:
    """Body of a fetched page and the absolute links found in it."""

    body: str
    links: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PageResult:
    """Emitted once by every task whose fetch succeeded.

    ``spawned`` is the number of child tasks the page scheduled, i.e. how many
    more outcomes the collector has to wait for.
    """

    url: str
    body: str
    spawned: int = 0
    saved_images: Tuple[Path, ...] = ()


@dataclass(slots=True)
class CrawlFailure:
    """Emitted instead of a PageResult when the fetch failed."""

    url: str
    error: str


Outcome = Union[PageResult, CrawlFailure]
