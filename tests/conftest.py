"""Pytest configuration and shared fixtures."""

import pytest

# Add project root to path
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dailyhope_feeds.config.feeds import FeedRegistry
from dailyhope_feeds.errors import UpstreamFetchError
from dailyhope_feeds.ingestion.cache import FeedCache
from dailyhope_feeds.ingestion.interfaces import ContentType, FeedConfig, FetcherInterface
from dailyhope_feeds.ingestion.service import FeedIngestionService

PODCAST_EN_URL = "https://feeds.example.com/en/broadcast"
PODCAST_ES_URL = "https://feeds.example.com/es/broadcast"
DEVOTIONAL_EN_URL = "https://feeds.example.com/en/devotional"
TV_EN_URL = "https://feeds.example.com/en/tv"

TWO_PODCASTS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
<channel>
  <title>Daily Hope</title>
  <link>https://example.com/</link>
  <item>
    <title><![CDATA[Hope for Today]]></title>
    <description>First episode</description>
    <link>https://example.com/broadcast/hope-for-today</link>
    <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
    <enclosure url="https://cdn.example.com/hope.mp3" length="1000" type="audio/mpeg"/>
    <itunes:duration>25:30</itunes:duration>
    <itunes:image href="https://cdn.example.com/hope.jpg"/>
  </item>
  <item>
    <title>Grace Abounds</title>
    <description>Second episode</description>
    <link>https://example.com/broadcast/grace-abounds</link>
    <pubDate>Sun, 31 Dec 2023 12:00:00 GMT</pubDate>
    <enclosure url="https://cdn.example.com/grace.mp3" length="1000" type="audio/mpeg"/>
  </item>
</channel>
</rss>
"""


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher(FetcherInterface):
    """Returns canned bodies per URL and records every request."""

    def __init__(self, responses: dict = None):
        self.responses = responses or {}
        self.calls = []

    async def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise UpstreamFetchError(url, status=404)
        if isinstance(response, Exception):
            raise response
        return response


def build_item(**fields) -> str:
    """Render an <item> block from keyword fields, in the given order.

    Values are used verbatim, so callers can pass CDATA or raw markup.
    `raw` is appended as-is for attribute-only tags.
    """
    raw = fields.pop("raw", "")
    parts = [f"<{tag.replace('__', ':')}>{value}</{tag.replace('__', ':')}>" for tag, value in fields.items()]
    return "<item>" + "".join(parts) + raw + "</item>"


def build_feed(items) -> str:
    return (
        '<?xml version="1.0"?><rss version="2.0"><channel><title>Feed</title>'
        + "".join(items)
        + "</channel></rss>"
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry():
    return FeedRegistry(
        [
            FeedConfig(ContentType.PODCAST, "en", PODCAST_EN_URL),
            FeedConfig(ContentType.PODCAST, "es", PODCAST_ES_URL),
            FeedConfig(ContentType.DEVOTIONAL, "en", DEVOTIONAL_EN_URL),
            FeedConfig(ContentType.TV, "en", TV_EN_URL),
        ],
        default_language="en",
    )


@pytest.fixture
def fetcher():
    return FakeFetcher({PODCAST_EN_URL: TWO_PODCASTS_XML})


@pytest.fixture
def service(registry, fetcher, clock):
    return FeedIngestionService(registry, fetcher, FeedCache(ttl_seconds=300, clock=clock))
