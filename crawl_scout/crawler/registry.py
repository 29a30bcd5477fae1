"""
Registry of URLs already claimed by a crawl task.
"""
from __future__ import annotations

import threading
from typing import Set

__all__ = ("VisitedRegistry",)


class VisitedRegistry:
    """
    Set of claimed URLs shared by all tasks of one crawl run.

    URLs are compared verbatim. Once claimed, a URL stays claimed for the
    lifetime of the registry; the only mutation is :meth:`claim_if_new`.
    """

    def __init__(self) -> None:
        self._claimed: Set[str] = set()
        self._lock = threading.Lock()

    def claim_if_new(self, url: str) -> bool:
        """Record *url* and return True, or return False if it was already claimed."""
        with self._lock:
            if url in self._claimed:
                return False
            self._claimed.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._claimed

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)

    def __repr__(self) -> str:
        return f"<VisitedRegistry claimed={len(self)}>"
