"""Concurrent crawl engine: fetcher, extractor, registry, coordinator, images."""
from crawl_scout.crawler.coordinator import CrawlCoordinator
from crawl_scout.crawler.errors import CrawlScoutError, FetchError
from crawl_scout.crawler.fetcher import Fetcher, HttpFetcher
from crawl_scout.crawler.images import ImageDownloader
from crawl_scout.crawler.models import CrawlFailure, FetchedPage, PageResult
from crawl_scout.crawler.registry import VisitedRegistry

__all__ = [
    "CrawlCoordinator",
    "CrawlFailure",
    "CrawlScoutError",
    "FetchError",
    "FetchedPage",
    "Fetcher",
    "HttpFetcher",
    "ImageDownloader",
    "PageResult",
    "VisitedRegistry",
]
