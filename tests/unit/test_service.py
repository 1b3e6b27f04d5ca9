"""Unit tests for FeedIngestionService."""

import pytest

from conftest import (
    DEVOTIONAL_EN_URL,
    PODCAST_EN_URL,
    PODCAST_ES_URL,
    TWO_PODCASTS_XML,
    build_feed,
    build_item,
)
from dailyhope_feeds.errors import FeedFetchError, FeedNotConfiguredError, UpstreamFetchError
from dailyhope_feeds.ingestion.interfaces import ContentType, DevotionalItem


@pytest.mark.asyncio
class TestGetContent:
    """Tests for cache-aware content retrieval."""

    async def test_first_call_fetches(self, service, fetcher):
        items = await service.get_content(ContentType.PODCAST, "en")

        assert len(items) == 2
        assert fetcher.calls == [PODCAST_EN_URL]

    async def test_second_call_within_ttl_uses_cache(self, service, fetcher, clock):
        first = await service.get_content(ContentType.PODCAST, "en")
        clock.advance(299)
        second = await service.get_content(ContentType.PODCAST, "en")

        assert fetcher.calls == [PODCAST_EN_URL]
        assert second == first

    async def test_caller_changes_do_not_reach_cache(self, service, fetcher):
        first = await service.get_content(ContentType.PODCAST, "en")
        first.pop()

        second = await service.get_content(ContentType.PODCAST, "en")

        assert len(second) == 2
        assert fetcher.calls == [PODCAST_EN_URL]

    async def test_refetch_after_ttl(self, service, fetcher, clock):
        await service.get_content(ContentType.PODCAST, "en")
        clock.advance(300)

        fetcher.responses[PODCAST_EN_URL] = build_feed([build_item(title="Newer")])
        items = await service.get_content(ContentType.PODCAST, "en")

        assert fetcher.calls == [PODCAST_EN_URL, PODCAST_EN_URL]
        assert [item.title for item in items] == ["Newer"]
        assert service.cache.get("podcast-en") == items

    async def test_failure_is_not_cached(self, service, fetcher):
        fetcher.responses[PODCAST_EN_URL] = UpstreamFetchError(PODCAST_EN_URL, status=500)

        with pytest.raises(FeedFetchError):
            await service.get_content(ContentType.PODCAST, "en")
        assert service.cache.entry("podcast-en") is None

        fetcher.responses[PODCAST_EN_URL] = TWO_PODCASTS_XML
        items = await service.get_content(ContentType.PODCAST, "en")
        assert len(items) == 2
        assert len(fetcher.calls) == 2

    async def test_failed_refetch_keeps_previous_entry(self, service, fetcher, clock):
        await service.get_content(ContentType.PODCAST, "en")
        clock.advance(301)
        fetcher.responses[PODCAST_EN_URL] = UpstreamFetchError(PODCAST_EN_URL, status=503)

        with pytest.raises(UpstreamFetchError):
            await service.get_content(ContentType.PODCAST, "en")
        assert len(service.cache.entry("podcast-en").items) == 2

    async def test_localized_feed(self, service, fetcher):
        fetcher.responses[PODCAST_ES_URL] = build_feed([build_item(title="Esperanza")])

        items = await service.get_content(ContentType.PODCAST, "es")

        assert fetcher.calls == [PODCAST_ES_URL]
        assert items[0].title == "Esperanza"

    async def test_unknown_language_falls_back_to_english_feed(self, service, fetcher):
        await service.get_content(ContentType.PODCAST, "pt")

        assert fetcher.calls == [PODCAST_EN_URL]
        # Cached under the requested language
        assert service.cache.entry("podcast-pt") is not None
        assert service.cache.entry("podcast-en") is None

    async def test_language_is_normalized(self, service, fetcher):
        await service.get_content(ContentType.PODCAST, " EN ")
        await service.get_content(ContentType.PODCAST, "")
        await service.get_content(ContentType.PODCAST, None)

        assert fetcher.calls == [PODCAST_EN_URL]

    async def test_content_types_cached_separately(self, service, fetcher):
        fetcher.responses[DEVOTIONAL_EN_URL] = build_feed([build_item(title="Rest", description="d")])

        podcasts = await service.get_content(ContentType.PODCAST, "en")
        articles = await service.get_content(ContentType.DEVOTIONAL, "en")

        assert len(podcasts) == 2
        assert isinstance(articles[0], DevotionalItem)
        assert fetcher.calls == [PODCAST_EN_URL, DEVOTIONAL_EN_URL]

    async def test_max_items_is_applied(self, registry, fetcher, clock):
        from dailyhope_feeds.ingestion.cache import FeedCache
        from dailyhope_feeds.ingestion.service import FeedIngestionService

        fetcher.responses[PODCAST_EN_URL] = build_feed(build_item(title=f"E{i}") for i in range(10))
        service = FeedIngestionService(registry, fetcher, FeedCache(clock=clock), max_items=4)

        items = await service.get_content(ContentType.PODCAST, "en")
        assert len(items) == 4


@pytest.mark.asyncio
async def test_missing_feed_configuration(fetcher, clock):
    from dailyhope_feeds.config.feeds import FeedRegistry
    from dailyhope_feeds.ingestion.cache import FeedCache
    from dailyhope_feeds.ingestion.service import FeedIngestionService

    service = FeedIngestionService(FeedRegistry([]), fetcher, FeedCache(clock=clock))

    with pytest.raises(FeedNotConfiguredError):
        await service.get_content(ContentType.TV, "en")
    assert fetcher.calls == []
