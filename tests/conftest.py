"""Shared fixtures: isolated settings, recorded sleeps and a stub vendor client."""

from unittest.mock import AsyncMock

import pytest

from scrape_service.config import Settings


class SleepRecorder:
    """Stands in for ``asyncio.sleep`` and remembers every requested delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore the process environment's .env file."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        firecrawl_api_key="fc-test-key",
        zyte_api_key="zyte-test-key",
        scrape_concurrency=3,
    )


@pytest.fixture
def vendor() -> AsyncMock:
    """Stub for the single-attempt vendor client; set ``vendor.request.side_effect``."""
    stub = AsyncMock()
    stub.request = AsyncMock()
    return stub
