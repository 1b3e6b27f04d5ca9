"""Normalize RSS <item> blocks into podcast, devotional and video items."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Iterator, List, Optional

import structlog

from .interfaces import ContentType, DevotionalItem, NormalizedItem, PodcastItem, VideoItem
from .xml_scan import (
    extract_attribute,
    extract_first_img_src,
    extract_link,
    extract_tag_content,
    find_open_tag,
    is_url,
)
from ..errors import MalformedItemError

logger = structlog.get_logger()

MAX_ITEMS = 60
DEFAULT_TITLE = "Untitled"
DEFAULT_DURATION = "0:00"

# Tried after RFC 2822 parsing fails
_DATE_FORMATS = [
    "%a, %d %b %Y %H:%M:%S %Z",
    "%a, %d %b %Y %H:%M %z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2024-01-01T12:00:00.000Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    # strftime does not zero-pad years below 1000 on every platform
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}.{dt.microsecond // 1000:03d}Z"
    )


def _parse_date_formats(value: str) -> Optional[datetime]:
    try:
        parsed = parsedate_to_datetime(value)
        if parsed is not None:
            return parsed
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_pub_date(value: str) -> Optional[datetime]:
    """Parse an RSS pubDate into an aware UTC datetime.

    Returns None when no known format fits or the instant has no UTC
    representation (e.g. year 1 with a positive offset).
    """
    value = value.strip()
    if not value:
        return None

    parsed = _parse_date_formats(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def iter_item_blocks(xml: str) -> Iterator[str]:
    """Yield `<item>...</item>` blocks in document order.

    Stops at the end of the document or at the first unterminated block.
    """
    pos = 0
    while True:
        found = find_open_tag(xml, "item", pos)
        if found is None:
            return
        start, _ = found
        end = xml.find("</item>", start)
        if end == -1:
            return
        end += len("</item>")
        yield xml[start:end]
        pos = end


def resolve_image(item_xml: str, content_type: ContentType, body_html: str = "") -> str:
    """First non-empty image URL from the item, or an empty string."""
    candidates = (
        lambda: extract_attribute(item_xml, "itunes:image", "href"),
        lambda: extract_tag_content(item_xml, "itunes:image"),
        lambda: extract_attribute(item_xml, "media:content", "url"),
        lambda: extract_attribute(item_xml, "media:thumbnail", "url"),
        lambda: _image_enclosure(item_xml),
    )
    for candidate in candidates:
        url = candidate()
        if url:
            return url

    if content_type is ContentType.DEVOTIONAL and body_html:
        return extract_first_img_src(body_html)
    return ""


def _image_enclosure(item_xml: str) -> str:
    enclosure_type = extract_attribute(item_xml, "enclosure", "type")
    if enclosure_type.lower().startswith("image/"):
        return extract_attribute(item_xml, "enclosure", "url")
    return ""


def normalize_item(
    item_xml: str,
    content_type: ContentType,
    index: int,
    now: Callable[[], datetime] = _utcnow,
) -> NormalizedItem:
    """Build one normalized item from an `<item>` block.

    Missing fields fall back to empty strings (or "Untitled" / "0:00").
    Raises MalformedItemError only for a block with no child elements.
    """
    inner_start = item_xml.find(">") + 1
    inner = item_xml[inner_start:-len("</item>")]
    if "<" not in inner:
        raise MalformedItemError(index, "no child elements")

    title = extract_tag_content(item_xml, "title") or DEFAULT_TITLE
    description = extract_tag_content(item_xml, "description")
    link = extract_link(item_xml)

    parsed_date = parse_pub_date(extract_tag_content(item_xml, "pubDate"))
    published_at = to_iso(parsed_date if parsed_date is not None else now())

    # Ids must survive refetches so clients can match bookmarks to items
    if link:
        item_id = link
    elif parsed_date is not None:
        item_id = published_at
    else:
        item_id = f"{content_type.value}-{index}"

    if content_type is ContentType.PODCAST:
        return PodcastItem(
            id=item_id,
            title=title,
            published_at=published_at,
            link=link,
            description=description,
            audio_url=extract_attribute(item_xml, "enclosure", "url"),
            duration=extract_tag_content(item_xml, "itunes:duration") or DEFAULT_DURATION,
            image_url=resolve_image(item_xml, content_type),
        )

    if content_type is ContentType.TV:
        video_url = extract_attribute(item_xml, "enclosure", "url")
        if not video_url:
            guid = extract_tag_content(item_xml, "guid")
            video_url = guid if is_url(guid) else ""
        return VideoItem(
            id=item_id,
            title=title,
            published_at=published_at,
            link=link,
            description=description,
            video_url=video_url,
            duration=extract_tag_content(item_xml, "itunes:duration") or DEFAULT_DURATION,
            image_url=resolve_image(item_xml, content_type),
        )

    content = extract_tag_content(item_xml, "content:encoded") or description
    return DevotionalItem(
        id=item_id,
        title=title,
        published_at=published_at,
        link=link,
        excerpt=description,
        content=content,
        verse="",
        image_url=resolve_image(item_xml, content_type, content),
    )


def parse_feed_items(
    xml: str,
    content_type: ContentType,
    max_items: int = MAX_ITEMS,
    now: Callable[[], datetime] = _utcnow,
) -> List[NormalizedItem]:
    """Parse up to `max_items` items from a feed body, in feed order.

    Pure function: no I/O, safe to call on literal XML in tests.
    """
    items: List[NormalizedItem] = []

    for index, item_xml in enumerate(iter_item_blocks(xml)):
        if len(items) >= max_items:
            break
        try:
            item = normalize_item(item_xml, content_type, index, now=now)
        except MalformedItemError as e:
            logger.warning("item_skipped", content_type=content_type.value, index=index, reason=e.reason)
            continue

        logger.debug(
            "item_parsed",
            content_type=content_type.value,
            index=index,
            title=item.title,
            has_image=bool(item.image_url),
        )
        items.append(item)

    logger.info("feed_parsed", content_type=content_type.value, items=len(items), xml_length=len(xml))
    return items
