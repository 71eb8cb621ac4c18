"""首页与正文抓取模块."""

from hnsignal.fetcher.crawler import CrawlError, HackerNewsCrawler, ListingItem
from hnsignal.fetcher.normalizer import ContentNormalizer

__all__ = [
    "ContentNormalizer",
    "CrawlError",
    "HackerNewsCrawler",
    "ListingItem",
]
