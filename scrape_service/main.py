"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager
from typing import Callable, TypeVar

from fastapi import FastAPI, Request

from scrape_service.api.routes import router
from scrape_service.api.schemas import HealthResponse
from scrape_service.config import Settings, get_settings
from scrape_service.logging_config import setup_logging
from scrape_service.scrape import MissingCredentialsError, ScrapeService, ZyteClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _build(factory: Callable[..., T], settings: Settings) -> T | None:
    """Construct a vendor service, or return ``None`` when its key is missing."""
    try:
        return factory(settings=settings)
    except MissingCredentialsError as exc:
        logger.warning("vendor disabled: %s", exc, extra={"vendor": factory.__name__})
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Logging first so construction warnings come out as JSON
    setup_logging(settings.log_level)
    logger.info("starting scrape service")

    app.state.settings = settings
    app.state.scraper = _build(ScrapeService, settings)
    app.state.zyte = _build(ZyteClient, settings)

    logger.info(
        "scrape service ready",
        extra={
            "firecrawl_enabled": app.state.scraper is not None,
            "zyte_enabled": app.state.zyte is not None,
            "scrape_concurrency": settings.scrape_concurrency,
        },
    )

    yield

    logger.info("shutting down scrape service")


app = FastAPI(title="Scrape Service", lifespan=lifespan)
app.include_router(router)


@app.get("/health", response_model=HealthResponse)
async def health(request: Request):
    scraper: ScrapeService | None = getattr(request.app.state, "scraper", None)
    vendor = await scraper.health_check() if scraper is not None else False
    return HealthResponse(vendor=vendor)
