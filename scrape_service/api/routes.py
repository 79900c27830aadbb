"""POST /scrape, POST /scrape/batch, POST /ingest endpoint handlers."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from scrape_service.api.schemas import (
    BatchScrapeRequest,
    BatchScrapeResponse,
    FailedUrl,
    IngestRequest,
    ScrapeRequest,
)
from scrape_service.scrape import (
    InvalidUrlError,
    ProductRecord,
    ScrapeError,
    ScrapeService,
    StructuredData,
    ZyteClient,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_scraper(request: Request) -> ScrapeService:
    scraper = getattr(request.app.state, "scraper", None)
    if scraper is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Firecrawl API key not configured",
        )
    return scraper


def _get_zyte(request: Request) -> ZyteClient:
    zyte = getattr(request.app.state, "zyte", None)
    if zyte is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Zyte API key not configured",
        )
    return zyte


@router.post("/scrape", response_model=StructuredData)
async def scrape(
    body: ScrapeRequest,
    scraper: ScrapeService = Depends(_get_scraper),
):
    try:
        return await scraper.scrape_url(body.url, body.options)
    except InvalidUrlError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except ScrapeError as exc:
        logger.warning("scrape request failed", extra={"url": body.url, "error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to scrape URL") from exc


@router.post("/scrape/batch", response_model=BatchScrapeResponse)
async def scrape_batch(
    body: BatchScrapeRequest,
    scraper: ScrapeService = Depends(_get_scraper),
):
    batch = await scraper.scrape_batch(body.urls, body.options, body.concurrency)
    return BatchScrapeResponse(
        results=batch.successes,
        failures=[FailedUrl(url=f.url, error=f.error_message) for f in batch.failures],
    )


@router.post("/ingest", response_model=ProductRecord)
async def ingest(
    body: IngestRequest,
    zyte: ZyteClient = Depends(_get_zyte),
):
    try:
        return await zyte.ingest_product(body.url)
    except InvalidUrlError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except ScrapeError as exc:
        logger.exception("ingest failed", extra={"url": body.url})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to ingest URL") from exc
