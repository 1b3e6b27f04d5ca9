"""Interface definitions for feed ingestion."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union


class ContentType(Enum):
    """Feed families served by the ingestion service."""
    PODCAST = "podcast"
    DEVOTIONAL = "devotional"
    TV = "tv"

    @property
    def item_type(self) -> str:
        """Value of the `type` field on serialised items."""
        return {
            ContentType.PODCAST: "podcast",
            ContentType.DEVOTIONAL: "article",
            ContentType.TV: "video",
        }[self]


@dataclass
class FeedConfig:
    """Configuration for a single upstream feed."""
    content_type: ContentType
    language: str
    url: str


@dataclass(frozen=True)
class PodcastItem:
    """An audio broadcast episode."""
    id: str
    title: str
    published_at: str
    link: str = ""
    description: str = ""
    audio_url: str = ""
    duration: str = "0:00"
    image_url: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "audio_url": self.audio_url,
            "duration": self.duration,
            "image_url": self.image_url,
            "published_at": self.published_at,
            "link": self.link,
            "type": ContentType.PODCAST.item_type,
        }


@dataclass(frozen=True)
class DevotionalItem:
    """A written devotional. `content` is HTML and is returned untouched."""
    id: str
    title: str
    published_at: str
    link: str = ""
    excerpt: str = ""
    content: str = ""
    verse: str = ""
    image_url: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "excerpt": self.excerpt,
            "content": self.content,
            "verse": self.verse,
            "image_url": self.image_url,
            "published_at": self.published_at,
            "link": self.link,
            "type": ContentType.DEVOTIONAL.item_type,
        }


@dataclass(frozen=True)
class VideoItem:
    """A video message."""
    id: str
    title: str
    published_at: str
    link: str = ""
    description: str = ""
    video_url: str = ""
    duration: str = "0:00"
    image_url: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "video_url": self.video_url,
            "duration": self.duration,
            "image_url": self.image_url,
            "published_at": self.published_at,
            "link": self.link,
            "type": ContentType.TV.item_type,
        }


NormalizedItem = Union[PodcastItem, DevotionalItem, VideoItem]


class FetcherInterface:
    """Interface for retrieving a raw feed body."""

    async def fetch_text(self, url: str) -> str:
        """Return the body of a successful GET, or raise UpstreamFetchError."""
        raise NotImplementedError
