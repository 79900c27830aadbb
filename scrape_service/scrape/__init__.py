"""Vendor scrape pipeline: Firecrawl page scraping and Zyte product extraction."""

from __future__ import annotations

from .errors import (
    ExtractionError,
    InvalidUrlError,
    MissingCredentialsError,
    NetworkError,
    ScrapeError,
    ScrapeFailedError,
    ValidationError,
    VendorError,
    VendorTimeoutError,
)
from .extract import derive_media, derive_text_content
from .models import (
    BatchResult,
    Link,
    MediaItem,
    PageMetadata,
    ScrapeFailure,
    ScrapeOptions,
    StructuredData,
    TextContent,
)
from .service import ScrapeService
from .zyte import ProductRecord, ScrapType, ZyteClient

__all__ = [
    "BatchResult",
    "ExtractionError",
    "InvalidUrlError",
    "Link",
    "MediaItem",
    "MissingCredentialsError",
    "NetworkError",
    "PageMetadata",
    "ProductRecord",
    "ScrapType",
    "ScrapeError",
    "ScrapeFailedError",
    "ScrapeFailure",
    "ScrapeOptions",
    "ScrapeService",
    "StructuredData",
    "TextContent",
    "ValidationError",
    "VendorError",
    "VendorTimeoutError",
    "ZyteClient",
    "derive_media",
    "derive_text_content",
]
