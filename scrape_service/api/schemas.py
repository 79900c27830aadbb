"""Request/response Pydantic models."""

from pydantic import Field

from scrape_service.scrape.models import CamelRecord, ScrapeOptions, StructuredData


class ScrapeRequest(CamelRecord):
    url: str
    options: ScrapeOptions | None = None


class BatchScrapeRequest(CamelRecord):
    urls: list[str] = Field(min_length=1)
    options: ScrapeOptions | None = None
    concurrency: int | None = Field(None, ge=1)


class FailedUrl(CamelRecord):
    url: str
    error: str


class BatchScrapeResponse(CamelRecord):
    results: list[StructuredData] = []
    failures: list[FailedUrl] = []


class IngestRequest(CamelRecord):
    url: str


class HealthResponse(CamelRecord):
    status: str = "ok"
    vendor: bool = False
