"""Index-based extraction helpers for RSS <item> blocks.

Upstream feeds are not reliably well-formed (raw HTML inside descriptions,
unescaped ampersands, stray tags), so nothing here builds a tree. Every
helper scans the text with str.find or a narrow regex, and returns an empty
string when the thing it looks for is absent.
"""

import re
from typing import Optional, Tuple

CDATA_START = "<![CDATA["
CDATA_END = "]]>"

_OPEN_TAG_TERMINATORS = (">", "/", " ", "\t", "\r", "\n")

# <link> often appears after a large content:encoded block, so it is matched
# anywhere in the item rather than at a tag boundary.
_LINK_RE = re.compile(
    r"<link>\s*(?:<!\[CDATA\[)?\s*(.*?)\s*(?:\]\]>)?\s*</link>",
    re.IGNORECASE | re.DOTALL,
)
_LINK_HREF_RE = re.compile(
    r"<link\s[^>]*?href\s*=\s*([\"'])(.*?)\1",
    re.IGNORECASE | re.DOTALL,
)
_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"'>]+)[\"']", re.IGNORECASE)


def find_open_tag(xml: str, tag: str, start: int = 0) -> Optional[Tuple[int, int]]:
    """Locate the next `<tag ...>` at or after `start`.

    Returns (index of '<', index of the closing '>') or None. A match must
    end the tag name, so `<item>` does not match `<itemize>`.
    """
    needle = f"<{tag}"
    pos = xml.find(needle, start)
    while pos != -1:
        after = pos + len(needle)
        if after < len(xml) and xml[after] in _OPEN_TAG_TERMINATORS:
            gt = xml.find(">", after)
            if gt == -1:
                return None
            return pos, gt
        pos = xml.find(needle, after)
    return None


def strip_cdata(text: str) -> str:
    """Unwrap a leading CDATA section and trim the result."""
    text = text.strip()
    if text.startswith(CDATA_START):
        text = text[len(CDATA_START):]
        end = text.find(CDATA_END)
        if end != -1:
            text = text[:end]
    return text.strip()


def extract_tag_content(xml: str, tag: str) -> str:
    """Text between the first `<tag>` and its `</tag>`, CDATA unwrapped.

    Entities are left as they appear in the source.
    """
    found = find_open_tag(xml, tag)
    if found is None:
        return ""
    _, gt = found
    if xml[gt - 1] == "/":
        return ""

    close = xml.find(f"</{tag}>", gt + 1)
    if close == -1:
        return ""
    return strip_cdata(xml[gt + 1:close])


def extract_attribute(xml: str, tag: str, attribute: str) -> str:
    """Value of `attribute` on the first `<tag ...>` occurrence."""
    found = find_open_tag(xml, tag)
    if found is None:
        return ""
    start, gt = found

    pattern = re.compile(
        rf"\s{re.escape(attribute)}\s*=\s*([\"'])(.*?)\1",
        re.IGNORECASE | re.DOTALL,
    )
    match = pattern.search(xml[start:gt])
    return match.group(2).strip() if match else ""


def is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def extract_link(item_xml: str) -> str:
    """Canonical link of an item.

    Order: a plain `<link>` element, a `<link href="...">` element, then a
    `<guid>` that holds a URL.
    """
    for match in _LINK_RE.finditer(item_xml):
        value = match.group(1).strip()
        if value:
            return value

    match = _LINK_HREF_RE.search(item_xml)
    if match and match.group(2).strip():
        return match.group(2).strip()

    guid = extract_tag_content(item_xml, "guid")
    if is_url(guid):
        return guid
    return ""


def extract_first_img_src(html: str) -> str:
    match = _IMG_SRC_RE.search(html)
    return match.group(1) if match else ""
