"""Feed ingestion - fetching, parsing and caching RSS feeds."""

from .interfaces import (
    ContentType, FeedConfig, PodcastItem, DevotionalItem, VideoItem,
    NormalizedItem, FetcherInterface
)
from .parser import parse_feed_items
from .cache import FeedCache, CacheEntry
from .fetcher import FeedFetcher
from .service import FeedIngestionService

__all__ = [
    "ContentType", "FeedConfig", "PodcastItem", "DevotionalItem", "VideoItem",
    "NormalizedItem", "FetcherInterface", "parse_feed_items",
    "FeedCache", "CacheEntry", "FeedFetcher", "FeedIngestionService"
]
