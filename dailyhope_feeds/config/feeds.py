"""Feed configuration loader."""

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import structlog

from ..errors import FeedNotConfiguredError
from ..ingestion.interfaces import ContentType, FeedConfig

logger = structlog.get_logger()

DEFAULT_FEEDS_PATH = Path(__file__).parent / "feeds.json"


def load_feeds(config_path: str = None) -> Tuple[List[FeedConfig], str]:
    """Load feed configurations from a JSON file.

    Returns the feeds and the default language to fall back to.
    """
    if config_path is None:
        config_path = DEFAULT_FEEDS_PATH

    with open(config_path) as f:
        data = json.load(f)

    feeds = []
    for feed_data in data.get("feeds", []):
        feeds.append(FeedConfig(
            content_type=ContentType(feed_data["content_type"]),
            language=feed_data["language"].lower(),
            url=feed_data["url"],
        ))

    return feeds, data.get("default_language", "en").lower()


class FeedRegistry:
    """Maps (content type, language) to an upstream feed URL."""

    def __init__(self, feeds: List[FeedConfig], default_language: str = "en"):
        self.default_language = default_language
        self._feeds: Dict[Tuple[ContentType, str], FeedConfig] = {
            (feed.content_type, feed.language): feed for feed in feeds
        }

    @classmethod
    def from_file(cls, config_path: Optional[str] = None) -> "FeedRegistry":
        feeds, default_language = load_feeds(config_path)
        logger.info("feeds_loaded", count=len(feeds), default_language=default_language)
        return cls(feeds, default_language)

    def resolve(self, content_type: ContentType, language: str) -> FeedConfig:
        """Localized feed if one exists, otherwise the default-language feed."""
        feed = self._feeds.get((content_type, language))
        if feed is not None:
            return feed

        feed = self._feeds.get((content_type, self.default_language))
        if feed is not None:
            logger.debug(
                "feed_language_fallback",
                content_type=content_type.value,
                requested=language,
                using=self.default_language,
            )
            return feed

        raise FeedNotConfiguredError(content_type.value, language)

    def __len__(self) -> int:
        return len(self._feeds)
