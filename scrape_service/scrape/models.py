"""Data models for the scrape pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel

MediaType = Literal["image", "video", "audio"]
OutputFormat = Literal["markdown", "html", "json", "links"]

# Absolute URIs and relative references are both accepted; empty or
# whitespace-bearing strings are not.
MediaUrl = Annotated[str, StringConstraints(min_length=1, pattern=r"^\S+$")]


class CamelRecord(BaseModel):
    """Frozen model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class MediaItem(CamelRecord):
    """One image, video or audio file found on a page.

    ``url`` must be non-empty and free of whitespace. It is not resolved, so
    relative references such as ``/side.png`` are kept as the page gives them.
    """

    url: MediaUrl
    alt: str | None = None
    title: str | None = None
    type: MediaType
    size: str | None = None
    format: str | None = None


class MediaList(BaseModel):
    """Wrapper so a bare JSON array validates with indexed error paths."""

    items: list[MediaItem]


class PageExtraction(BaseModel):
    """JSON shape requested from the vendor alongside the page formats."""

    media: list[MediaItem] = []


class Link(CamelRecord):
    text: str
    url: str


class TextContent(CamelRecord):
    title: str = ""
    description: str | None = None
    headings: tuple[str, ...] = ()
    paragraphs: tuple[str, ...] = ()
    links: tuple[Link, ...] = ()


class PageMetadata(CamelRecord):
    title: str | None = None
    description: str | None = None
    keywords: tuple[str, ...] = ()
    author: str | None = None
    publish_date: str | None = None
    language: str | None = None
    source_url: str
    scraped_at: datetime


class StructuredData(CamelRecord):
    """Normalized result for one scraped URL."""

    text_content: TextContent
    media: tuple[MediaItem, ...] = ()
    metadata: PageMetadata

    @model_validator(mode="after")
    def _media_urls_unique(self) -> StructuredData:
        seen: set[str] = set()
        for item in self.media:
            if item.url in seen:
                raise ValueError(f"duplicate media url: {item.url}")
            seen.add(item.url)
        return self


class ScrapeOptions(CamelRecord):
    """Per-call scrape configuration. Durations are milliseconds."""

    formats: tuple[OutputFormat, ...] = ("markdown", "html", "json", "links")
    include_tags: tuple[str, ...] = ("img", "video", "audio", "source", "picture")
    exclude_tags: tuple[str, ...] = ("script", "style", "nav", "footer", "aside")
    only_main_content: bool = True
    wait_for: int = Field(2000, ge=0)
    timeout: int = Field(30000, gt=0)
    custom_prompt: str | None = None
    enable_retry: bool = True
    max_retries: int = Field(3, ge=0)


# --- vendor wire format ---


class VendorPageMetadata(BaseModel):
    title: str | None = None
    description: str | None = None
    keywords: str | list[str] | None = None
    language: str | None = None
    source_url: str | None = Field(None, alias="sourceURL")
    status_code: int | None = Field(None, alias="statusCode")


class VendorPageData(BaseModel):
    markdown: str | None = None
    html: str | None = None
    json_: Any = Field(None, alias="json")
    links: list[str] | None = None
    metadata: VendorPageMetadata = Field(default_factory=VendorPageMetadata)


class VendorResponse(BaseModel):
    """Envelope returned by ``POST /scrape``."""

    success: bool
    data: VendorPageData | None = None
    error: str | None = None


# --- batch bookkeeping ---


@dataclass(frozen=True)
class ScrapeFailure:
    url: str
    error_message: str


@dataclass
class BatchResult:
    """Successes (input order) and failures of a multi-URL scrape."""

    successes: list[StructuredData] = field(default_factory=list)
    failures: list[ScrapeFailure] = field(default_factory=list)
