"""Retry state machine with capped exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar, Union

from .errors import NetworkError, ScrapeFailedError, VendorError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]

# Transient failures. Anything else (a schema mismatch, a bug) will not be
# fixed by asking again.
RETRYABLE_ERRORS: tuple[type[Exception], ...] = (VendorError, NetworkError)


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential-backoff configuration. Delays are in seconds."""

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    enabled: bool = True

    def delay_for(self, failures: int) -> float:
        """Backoff to wait after the *failures*-th failed attempt (1-based)."""
        return min(self.base_delay * (2 ** (failures - 1)), self.max_delay)

    def should_retry(self, failures: int) -> bool:
        return self.enabled and failures <= self.max_retries

    @property
    def max_attempts(self) -> int:
        return 1 + self.max_retries if self.enabled else 1


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Retryable:
    error: Exception


@dataclass(frozen=True)
class Fatal:
    error: Exception


Outcome = Union[Success[T], Retryable, Fatal]


async def attempt(operation: Callable[[], Awaitable[T]]) -> Outcome[T]:
    """Run *operation* once and tag the result."""
    try:
        return Success(await operation())
    except RETRYABLE_ERRORS as exc:
        return Retryable(exc)
    except Exception as exc:
        return Fatal(exc)


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    url: str,
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """Drive *operation* through attempt, backoff and retry until it settles.

    Fatal errors propagate unchanged after the first occurrence. Retryable
    errors are retried while the policy allows, then surface as
    :class:`ScrapeFailedError` carrying the attempt count and last cause.
    """
    failures = 0
    while True:
        outcome = await attempt(operation)
        if isinstance(outcome, Success):
            return outcome.value
        if isinstance(outcome, Fatal):
            raise outcome.error

        failures += 1
        if not policy.should_retry(failures):
            raise ScrapeFailedError(url, failures, outcome.error) from outcome.error

        delay = policy.delay_for(failures)
        logger.warning(
            "scrape attempt %d failed for %s, retrying in %.1fs: %s",
            failures, url, delay, outcome.error,
            extra={"url": url, "attempt": failures, "delay_ms": int(delay * 1000)},
        )
        await sleep(delay)
