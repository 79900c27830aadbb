"""Scrape orchestrator: retrying single-URL scrapes, batched fan-out and schema extraction."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from scrape_service.config import Settings

from .client import VendorClient, VendorRequester
from .errors import ExtractionError, VendorError
from .extract import derive_media, derive_text_content
from .models import (
    BatchResult,
    PageExtraction,
    PageMetadata,
    ScrapeFailure,
    ScrapeOptions,
    StructuredData,
    VendorPageData,
    VendorResponse,
)
from .retry import RetryPolicy, SleepFunc, run_with_retry
from .schema import json_schema, validate_payload
from .urls import validate_url

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

SCRAPE_ENDPOINT = "/scrape"
DEFAULT_TIMEOUT_MS = 30000
BATCH_PAUSE_SECONDS = 1.0
HEALTH_CHECK_URL = "https://example.com"

DEFAULT_EXTRACTION_PROMPT = """Extract everything useful from this page:
1. The text content, organized by headings and paragraphs
2. Every media file on the page, listed under "media". Each entry needs its
   absolute "url" and a "type" of exactly "image", "video" or "audio", plus
   "alt", "title", "size" and "format" when the page gives them
3. Every link with its text and URL
4. Page metadata such as title, description and keywords

Return the data in the provided schema with as much detail as the page offers."""

DEFAULT_SCHEMA_PROMPT = "Extract the data according to the provided schema"


def build_scrape_payload(url: str, options: ScrapeOptions) -> dict[str, Any]:
    """Vendor request body.

    The json format always becomes an extraction shaped by
    :class:`PageExtraction`, so vendor media items arrive in the form
    :func:`derive_media` validates.
    """
    formats: list[Any] = [f for f in options.formats if f != "json"]
    formats.append(
        {
            "type": "json",
            "schema": json_schema(PageExtraction),
            "prompt": options.custom_prompt or DEFAULT_EXTRACTION_PROMPT,
        }
    )
    return {
        "url": url,
        "formats": formats,
        "includeTags": list(options.include_tags),
        "excludeTags": list(options.exclude_tags),
        "onlyMainContent": options.only_main_content,
        "waitFor": options.wait_for,
        "timeout": options.timeout,
    }


def _keywords(raw: str | list[str] | None) -> tuple[str, ...]:
    if not raw:
        return ()
    parts = raw.split(",") if isinstance(raw, str) else raw
    return tuple(k.strip() for k in parts if k.strip())


def process_response(raw: dict[str, Any], source_url: str) -> StructuredData:
    """Turn a raw vendor response into :class:`StructuredData`.

    ``source_url`` is the URL the caller asked for; the vendor's own
    ``sourceURL`` may be a redirect target and is ignored.
    """
    response = validate_payload(VendorResponse, raw)
    if not response.success:
        raise VendorError(f"Scraping failed: {response.error or 'Unknown error'}")

    data = response.data or VendorPageData()
    markdown = data.markdown or ""
    html = data.html or ""

    metadata = PageMetadata(
        title=data.metadata.title,
        description=data.metadata.description,
        keywords=_keywords(data.metadata.keywords),
        language=data.metadata.language,
        source_url=source_url,
        scraped_at=datetime.now(timezone.utc),
    )
    return StructuredData(
        text_content=derive_text_content(markdown, html),
        media=derive_media(data.json_, html),
        metadata=metadata,
    )


class ScrapeService:
    """Scrapes pages through Firecrawl and normalizes them into :class:`StructuredData`.

    The API key is read once, at construction, from the argument or from
    ``FIRECRAWL_API_KEY``. Nothing else is kept between calls.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        settings: Settings | None = None,
        client: VendorRequester | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        settings = settings or Settings()
        if client is None:
            client = VendorClient(
                vendor="Firecrawl",
                base_url=settings.firecrawl_api_url,
                api_key=api_key or settings.firecrawl_api_key,
                transport=transport,
            )
        self._client = client
        self._sleep = sleep
        self._default_concurrency = settings.scrape_concurrency

    async def scrape_url(self, url: str, options: ScrapeOptions | None = None) -> StructuredData:
        """Scrape one URL, retrying transient failures with exponential backoff."""
        validate_url(url)
        options = options or ScrapeOptions()
        payload = build_scrape_payload(url, options)
        policy = RetryPolicy(max_retries=options.max_retries, enabled=options.enable_retry)
        timeout = options.timeout / 1000

        async def _once() -> StructuredData:
            raw = await self._client.request(SCRAPE_ENDPOINT, payload, timeout=timeout)
            return process_response(raw, url)

        result = await run_with_retry(_once, policy, url=url, sleep=self._sleep)
        logger.debug(
            "scraped url",
            extra={"url": url, "media_count": len(result.media), "link_count": len(result.text_content.links)},
        )
        return result

    async def scrape_batch(
        self,
        urls: list[str],
        options: ScrapeOptions | None = None,
        concurrency: int | None = None,
    ) -> BatchResult:
        """Scrape *urls* in consecutive batches of *concurrency*.

        URLs within a batch run concurrently and results keep input order. A
        one-second pause separates batches. Failures are collected, never raised.
        """
        size = concurrency if concurrency is not None else self._default_concurrency
        if size < 1:
            raise ValueError(f"concurrency must be at least 1, got {size}")

        result = BatchResult()
        for start in range(0, len(urls), size):
            batch = urls[start : start + size]
            outcomes = await asyncio.gather(
                *(self.scrape_url(url, options) for url in batch),
                return_exceptions=True,
            )
            for url, outcome in zip(batch, outcomes):
                if isinstance(outcome, Exception):
                    result.failures.append(ScrapeFailure(url=url, error_message=str(outcome)))
                elif isinstance(outcome, BaseException):
                    raise outcome
                else:
                    result.successes.append(outcome)

            if start + size < len(urls):
                await self._sleep(BATCH_PAUSE_SECONDS)

        if result.failures:
            logger.warning(
                "failed to scrape %d of %d urls",
                len(result.failures), len(urls),
                extra={
                    "failed_count": len(result.failures),
                    "failures": [asdict(f) for f in result.failures],
                },
            )
        logger.debug(
            "scrape batch complete",
            extra={"urls_attempted": len(urls), "pages_returned": len(result.successes)},
        )
        return result

    async def scrape_multiple_urls(
        self,
        urls: list[str],
        options: ScrapeOptions | None = None,
        concurrency: int | None = None,
    ) -> list[StructuredData]:
        """Like :meth:`scrape_batch` but return only the successes.

        An empty list means every URL failed; the failures are logged.
        """
        batch = await self.scrape_batch(urls, options, concurrency)
        return batch.successes

    async def extract_with_schema(
        self,
        url: str,
        schema: type[ModelT],
        prompt: str | None = None,
    ) -> ModelT:
        """Ask the vendor for data shaped like *schema*. One attempt, no retry."""
        validate_url(url)
        payload = {
            "url": url,
            "formats": [
                {
                    "type": "json",
                    "schema": json_schema(schema),
                    "prompt": prompt or DEFAULT_SCHEMA_PROMPT,
                }
            ],
            "onlyMainContent": True,
            "timeout": DEFAULT_TIMEOUT_MS,
        }
        raw = await self._client.request(SCRAPE_ENDPOINT, payload, timeout=DEFAULT_TIMEOUT_MS / 1000)
        response = validate_payload(VendorResponse, raw)
        if not response.success:
            raise VendorError(f"Failed to extract data: {response.error or 'Unknown error'}")
        if response.data is None or response.data.json_ is None:
            raise ExtractionError("Failed to extract data: No JSON data returned")
        return validate_payload(schema, response.data.json_)

    async def health_check(self) -> bool:
        """Scrape a known-good page once. Any failure yields ``False``."""
        options = ScrapeOptions(formats=("markdown",), timeout=10000, enable_retry=False)
        try:
            await self.scrape_url(HEALTH_CHECK_URL, options)
        except Exception:
            logger.warning("health check failed", exc_info=True)
            return False
        return True
