"""URL checks applied before any request leaves the process."""

from __future__ import annotations

from urllib.parse import urlparse

from .errors import InvalidUrlError

_VALID_SCHEMES = {"http", "https"}


def validate_url(url: str) -> str:
    """Return *url* unchanged if it is an absolute http(s) URL.

    Raises :class:`InvalidUrlError` otherwise.
    """
    if not isinstance(url, str) or not url or url != url.strip() or any(c.isspace() for c in url):
        raise InvalidUrlError(str(url))

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        parsed.port  # raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidUrlError(url) from exc

    if parsed.scheme.lower() not in _VALID_SCHEMES or not hostname:
        raise InvalidUrlError(url)
    return url
