"""Single-attempt authenticated JSON client for extraction vendors."""

from __future__ import annotations

import base64
import logging
from typing import Any, Callable, Protocol

import httpx

from .errors import MissingCredentialsError, NetworkError, VendorError, VendorTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def bearer_auth(api_key: str) -> str:
    return f"Bearer {api_key}"


def basic_auth(api_key: str) -> str:
    """Zyte style: the key is the username, the password is empty."""
    token = base64.b64encode(f"{api_key}:".encode()).decode()
    return f"Basic {token}"


class VendorRequester(Protocol):
    """Anything that can perform one vendor call."""

    async def request(
        self, endpoint: str, payload: dict[str, Any], timeout: float = ...
    ) -> dict[str, Any]: ...


class VendorClient:
    """POSTs JSON to one vendor base URL.

    Each call is exactly one HTTP attempt. Retrying is left to the caller.
    """

    def __init__(
        self,
        *,
        vendor: str,
        base_url: str,
        api_key: str,
        auth_header: Callable[[str], str] = bearer_auth,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise MissingCredentialsError(f"{vendor} API key not configured")
        self.vendor = vendor
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": auth_header(api_key),
            "Content-Type": "application/json",
        }
        self._transport = transport

    async def request(
        self,
        endpoint: str,
        payload: dict[str, Any],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> dict[str, Any]:
        """POST *payload* to ``<base_url><endpoint>`` and return the decoded body."""
        url = f"{self._base_url}{endpoint}"
        logger.debug("vendor request", extra={"vendor": self.vendor, "endpoint": endpoint})
        try:
            async with httpx.AsyncClient(
                headers=self._headers,
                timeout=timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(url, json=payload)
        except httpx.TimeoutException as exc:
            raise VendorTimeoutError(
                f"{self.vendor} request to {endpoint} timed out after {timeout:g}s"
            ) from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"{self.vendor} request to {endpoint} failed: {exc}") from exc

        if not resp.is_success:
            raise VendorError.from_status(self.vendor, resp.status_code, resp.text)

        try:
            body = resp.json()
        except ValueError as exc:
            raise VendorError(
                f"{self.vendor} API returned a non-JSON body",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc
        if not isinstance(body, dict):
            raise VendorError(
                f"{self.vendor} API returned a non-object JSON body",
                status_code=resp.status_code,
                body=resp.text,
            )
        return body
