"""Zyte product extraction and the flat record handed to persistence."""

from __future__ import annotations

import logging
from enum import Enum

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from scrape_service.config import Settings

from .client import VendorClient, VendorRequester, basic_auth
from .errors import ExtractionError
from .models import CamelRecord
from .schema import validate_payload
from .urls import validate_url

logger = logging.getLogger(__name__)

EXTRACT_ENDPOINT = "/extract"
_EXTRACT_TIMEOUT_SECONDS = 60.0


class ScrapType(str, Enum):
    PRODUCT = "product"


class _ZyteModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ZyteImage(_ZyteModel):
    url: str


class ZyteVideo(_ZyteModel):
    url: str


class AggregateRating(_ZyteModel):
    rating_value: float | None = None
    best_rating: float | None = None
    review_count: int | None = None


class AdditionalProperty(_ZyteModel):
    name: str
    value: str


class ProductMetadata(_ZyteModel):
    probability: float | None = None
    date_downloaded: str | None = None


class Product(_ZyteModel):
    name: str | None = None
    price: str | None = None
    currency: str | None = None
    sku: str | None = None
    main_image: ZyteImage | None = None
    images: list[ZyteImage] = []
    videos: list[ZyteVideo] = []
    description: str | None = None
    description_html: str | None = None
    aggregate_rating: AggregateRating | None = None
    additional_properties: list[AdditionalProperty] = []
    url: str | None = None
    canonical_url: str | None = None
    metadata: ProductMetadata | None = None


class ProductExtraction(_ZyteModel):
    """Response of ``POST /extract`` with product extraction enabled."""

    url: str
    status_code: int | None = None
    browser_html: str | None = None
    product: Product | None = None


class ProductRecord(CamelRecord):
    """Flattened product as stored by the ingest flow."""

    url: str
    name: str = ""
    price: str = ""
    main_image: str = ""
    description: str = ""
    images: tuple[str, ...] = ()
    videos: tuple[str, ...] = ()


def to_product_record(url: str, extraction: ProductExtraction) -> ProductRecord:
    """Flatten *extraction* into a :class:`ProductRecord` keyed by the requested *url*."""
    product = extraction.product
    if product is None:
        raise ExtractionError(f"Zyte returned no product data for {url}")

    return ProductRecord(
        url=url,
        name=product.name or "",
        price=product.price or "",
        main_image=product.main_image.url if product.main_image else "",
        description=product.description or "",
        images=tuple(image.url for image in product.images),
        videos=tuple(video.url for video in product.videos),
    )


class ZyteClient:
    """Structured product scraping through the Zyte API."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        settings: Settings | None = None,
        client: VendorRequester | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or Settings()
        if client is None:
            client = VendorClient(
                vendor="Zyte",
                base_url=settings.zyte_api_url,
                api_key=api_key or settings.zyte_api_key,
                auth_header=basic_auth,
                transport=transport,
            )
        self._client = client

    async def get_structured_scraped_data(
        self,
        url: str,
        scrap_type: ScrapType = ScrapType.PRODUCT,
    ) -> ProductExtraction:
        validate_url(url)
        payload = {
            "url": url,
            "browserHtml": True,
            "product": scrap_type is ScrapType.PRODUCT,
            "productOptions": {"extractFrom": "browserHtml"},
        }
        logger.info("zyte extraction requested", extra={"url": url, "scrap_type": scrap_type.value})
        raw = await self._client.request(EXTRACT_ENDPOINT, payload, timeout=_EXTRACT_TIMEOUT_SECONDS)
        return validate_payload(ProductExtraction, raw)

    async def ingest_product(self, url: str) -> ProductRecord:
        """Scrape a product page and return the record to persist."""
        extraction = await self.get_structured_scraped_data(url, ScrapType.PRODUCT)
        record = to_product_record(url, extraction)
        logger.info(
            "product ingested",
            extra={"url": url, "image_count": len(record.images), "video_count": len(record.videos)},
        )
        return record
