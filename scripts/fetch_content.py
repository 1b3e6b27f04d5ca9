#!/usr/bin/env python3
"""Fetch one feed through the ingestion service and print what came back."""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dailyhope_feeds.config.feeds import FeedRegistry
from dailyhope_feeds.config.logging import configure_logging
from dailyhope_feeds.config.settings import settings
from dailyhope_feeds.errors import FeedIngestionError
from dailyhope_feeds.ingestion import ContentType, FeedFetcher, FeedIngestionService


async def fetch(content_type: ContentType, language: str):
    registry = FeedRegistry.from_file(settings.feeds_config_path)
    async with FeedFetcher() as fetcher:
        service = FeedIngestionService(registry, fetcher, max_items=settings.max_items_per_feed)
        return await service.get_content(content_type, language)


def main():
    parser = argparse.ArgumentParser(description="Fetch and normalize a content feed")
    parser.add_argument("type", choices=[t.value for t in ContentType])
    parser.add_argument("--language", default=settings.default_language)
    parser.add_argument("--limit", type=int, default=10, help="Items to print")
    args = parser.parse_args()

    configure_logging(settings.log_level, settings.log_format)

    try:
        items = asyncio.run(fetch(ContentType(args.type), args.language))
    except FeedIngestionError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print(f"{args.type.upper()} ({args.language}): {len(items)} items")
    print("=" * 50 + "\n")

    for item in items[:args.limit]:
        image = "yes" if item.image_url else "no"
        print(f"  {item.published_at[:10]}  {item.title[:70]}")
        print(f"      id={item.id}  image={image}")


if __name__ == "__main__":
    main()
