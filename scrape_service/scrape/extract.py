"""Text and media extraction from vendor markdown, HTML and JSON.

Everything here is pattern based and pure; an empty input produces an empty
result rather than an error.
"""

from __future__ import annotations

import html as html_lib
import re
from typing import Any

from .models import Link, MediaItem, MediaList, MediaType, TextContent
from .schema import validate_payload

_TITLE_RE = re.compile(r"^# (.+)$", re.MULTILINE)
_HEADING_RE = re.compile(r"^#{1,6} (.+)$", re.MULTILINE)
_HEADING_LINE_RE = re.compile(r"^#{1,6} ")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

_MIN_PARAGRAPH_LENGTH = 20

_META_DESCRIPTION_RE = re.compile(
    r"<meta\b(?=[^>]*\bname\s*=\s*[\"']description[\"'])[^>]*\bcontent\s*=\s*[\"']([^\"']*)[\"']",
    re.IGNORECASE,
)
_MEDIA_TAG_RES: tuple[tuple[MediaType, re.Pattern[str]], ...] = (
    ("image", re.compile(r"<img\b[^>]*>", re.IGNORECASE)),
    ("video", re.compile(r"<video\b[^>]*>", re.IGNORECASE)),
    ("audio", re.compile(r"<audio\b[^>]*>", re.IGNORECASE)),
)


def _attr(tag: str, name: str) -> str | None:
    match = re.search(
        rf"\s{name}\s*=\s*[\"']([^\"']*)[\"']", tag, re.IGNORECASE
    )
    return html_lib.unescape(match.group(1)) if match else None


def derive_text_content(markdown: str, html: str = "") -> TextContent:
    """Derive title, headings, paragraphs and links from *markdown*.

    The title is the first level-1 heading. Every heading whose text equals
    the title, at any level, is dropped from ``headings``.
    """
    title_match = _TITLE_RE.search(markdown)
    title = title_match.group(1) if title_match else ""

    headings = [m.group(1) for m in _HEADING_RE.finditer(markdown)]
    if title:
        headings = [heading for heading in headings if heading != title]

    paragraphs = [
        line
        for line in markdown.split("\n")
        if line.strip()
        and not _HEADING_LINE_RE.match(line)
        and len(line) > _MIN_PARAGRAPH_LENGTH
    ]

    links = [Link(text=m.group(1), url=m.group(2)) for m in _LINK_RE.finditer(markdown)]

    description_match = _META_DESCRIPTION_RE.search(html)
    description = html_lib.unescape(description_match.group(1)) if description_match else None

    return TextContent(
        title=title,
        description=description,
        headings=tuple(headings),
        paragraphs=tuple(paragraphs),
        links=tuple(links),
    )


def _html_media(html: str) -> list[MediaItem]:
    items: list[MediaItem] = []
    for media_type, tag_re in _MEDIA_TAG_RES:
        for match in tag_re.finditer(html):
            tag = match.group(0)
            src = _attr(tag, "src")
            if not src or not src.strip():
                continue
            if media_type == "image":
                items.append(MediaItem(url=src.strip(), alt=_attr(tag, "alt") or "", type="image"))
            else:
                items.append(MediaItem(url=src.strip(), type=media_type))
    return items


def _vendor_media(vendor_json: Any) -> list[MediaItem]:
    if not isinstance(vendor_json, dict):
        return []
    raw_media = vendor_json.get("media")
    if not raw_media:
        return []
    return list(validate_payload(MediaList, {"items": raw_media}).items)


def derive_media(vendor_json: Any, html: str = "") -> tuple[MediaItem, ...]:
    """Collect media from vendor JSON then HTML, keeping the first item per URL.

    Vendor items are validated strictly; a malformed one raises
    :class:`~scrape_service.scrape.errors.ValidationError`.
    """
    media = _vendor_media(vendor_json) + _html_media(html)

    seen: set[str] = set()
    unique: list[MediaItem] = []
    for item in media:
        if item.url in seen:
            continue
        seen.add(item.url)
        unique.append(item)
    return tuple(unique)

