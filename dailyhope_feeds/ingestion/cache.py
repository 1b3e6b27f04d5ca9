"""In-memory cache of parsed feeds with a TTL."""

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import structlog

from .interfaces import ContentType, NormalizedItem

logger = structlog.get_logger()

DEFAULT_TTL_SECONDS = 300


def cache_key(content_type: ContentType, language: str) -> str:
    return f"{content_type.value}-{language}"


@dataclass
class CacheEntry:
    """Items parsed from one feed fetch."""
    key: str
    items: List[NormalizedItem]
    fetched_at: float


class FeedCache:
    """Process-lifetime cache keyed by content type and language.

    Created once at startup and handed to the service. Entries are replaced
    wholesale on refetch; stale ones stay in memory until then.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.fetched_at < self.ttl_seconds

    def get(self, key: str) -> Optional[List[NormalizedItem]]:
        """A copy of the items for `key` if the entry is still fresh, else None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self.is_fresh(entry):
            logger.debug("cache_stale", key=key, age_seconds=round(self.clock() - entry.fetched_at, 1))
            return None
        return list(entry.items)

    def set(self, key: str, items: List[NormalizedItem]) -> CacheEntry:
        entry = CacheEntry(key=key, items=list(items), fetched_at=self.clock())
        self._entries[key] = entry
        return entry

    def entry(self, key: str) -> Optional[CacheEntry]:
        """Raw entry regardless of freshness."""
        return self._entries.get(key)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
