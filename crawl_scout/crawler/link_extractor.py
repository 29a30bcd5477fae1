"""
Link and image extraction utilities for CrawlScout.

References are absolutized with a deliberately naive rule: anything that
contains ``"http"`` is kept as is, everything else is appended to the URL of
the page it was found on. Host classification uses real URL parsing.
"""
from __future__ import annotations

from typing import Iterator, List, Sequence
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from crawl_scout.logger import logger

__all__: Sequence[str] = (
    "absolutize",
    "iter_links",
    "iter_images",
    "extract_links",
    "extract_images",
    "is_internal_link",
)

_LINK_TAGS = ("a", "link")
_IMAGE_TAGS = ("img",)


def absolutize(reference: str, source_url: str) -> str:
    """Return *reference* unchanged if it looks absolute, else ``source_url + reference``."""
    if "http" in reference:
        return reference
    return source_url + reference


def _iter_references(body: str, source_url: str, tags: Sequence[str], attr: str) -> Iterator[str]:
    try:
        soup = BeautifulSoup(body, "html.parser")
    except ParserRejectedMarkup as exc:
        logger.debug("Markup of %s rejected, no references extracted: %s", source_url, exc)
        return
    for tag in soup.find_all(list(tags)):
        if not isinstance(tag, Tag):
            continue
        value = tag.get(attr)
        if isinstance(value, str):
            yield absolutize(value, source_url)


def iter_links(body: str, source_url: str) -> Iterator[str]:
    """Yield ``href`` targets of ``<a>`` and ``<link>`` elements in document order."""
    return _iter_references(body, source_url, _LINK_TAGS, "href")


def iter_images(body: str, source_url: str) -> Iterator[str]:
    """Yield ``src`` targets of ``<img>`` elements in document order."""
    return _iter_references(body, source_url, _IMAGE_TAGS, "src")


def extract_links(body: str, source_url: str) -> List[str]:
    return list(iter_links(body, source_url))


def extract_images(body: str, source_url: str) -> List[str]:
    return list(iter_images(body, source_url))


def _host(netloc: str) -> str:
    # host[:port] without credentials
    return netloc.rpartition("@")[2].lower()


def is_internal_link(base_url: str, candidate: str) -> bool:
    """
    True if *candidate*, resolved against *base_url*, lives on the same host.

    Malformed input is never internal.
    """
    try:
        base = urlsplit(base_url)
        target = urlsplit(urljoin(base_url, candidate))
    except ValueError:
        return False
    if not base.netloc:
        return False
    return _host(base.netloc) == _host(target.netloc)
