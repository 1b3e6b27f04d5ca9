"""Feed ingestion: cache lookup, upstream fetch, parse."""

from typing import List, TYPE_CHECKING

import structlog

from .cache import FeedCache, cache_key
from .interfaces import ContentType, FetcherInterface, NormalizedItem
from .parser import MAX_ITEMS, parse_feed_items

if TYPE_CHECKING:
    from ..config.feeds import FeedRegistry

logger = structlog.get_logger()


class FeedIngestionService:
    """Serves normalized feed items, from cache while fresh.

    The only await point is the upstream fetch. Two concurrent misses for
    the same key may both fetch; whichever finishes last owns the entry.
    """

    def __init__(
        self,
        registry: "FeedRegistry",
        fetcher: FetcherInterface,
        cache: FeedCache = None,
        max_items: int = MAX_ITEMS,
    ):
        self.registry = registry
        self.fetcher = fetcher
        self.cache = cache if cache is not None else FeedCache()
        self.max_items = max_items

    def normalize_language(self, language: str) -> str:
        language = (language or "").strip().lower()
        return language or self.registry.default_language

    async def get_content(self, content_type: ContentType, language: str) -> List[NormalizedItem]:
        """Items for one feed, newest first as the upstream emits them.

        Raises UpstreamFetchError when the feed cannot be fetched; nothing is
        cached in that case.
        """
        language = self.normalize_language(language)
        key = cache_key(content_type, language)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info("cache_hit", key=key, items=len(cached))
            return cached

        feed = self.registry.resolve(content_type, language)
        logger.info("cache_miss", key=key, url=feed.url)

        xml = await self.fetcher.fetch_text(feed.url)
        items = parse_feed_items(xml, content_type, max_items=self.max_items)

        self.cache.set(key, items)
        return items
