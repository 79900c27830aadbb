"""Exception taxonomy for the scrape pipeline."""

from __future__ import annotations

from dataclasses import dataclass


class ScrapeError(Exception):
    """Base class for every failure raised by the scrape pipeline."""


class InvalidUrlError(ScrapeError):
    """The URL is not a well-formed absolute URL. Raised before any I/O."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL provided: {url}")
        self.url = url


class MissingCredentialsError(ScrapeError):
    """No vendor API key was configured."""


class VendorError(ScrapeError):
    """The vendor answered with a non-2xx status or ``success: false``."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_status(cls, vendor: str, status_code: int, body: str) -> VendorError:
        return cls(f"{vendor} API Error: {status_code} {body}", status_code=status_code, body=body)


class NetworkError(ScrapeError):
    """The request never produced an HTTP response."""


class VendorTimeoutError(NetworkError):
    """The request exceeded its deadline."""


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    type: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(ScrapeError):
    """A payload did not conform to the expected shape."""

    def __init__(self, issues: list[ValidationIssue], model: str = "") -> None:
        self.issues = issues
        self.model = model
        detail = "; ".join(str(issue) for issue in issues) or "unknown validation error"
        prefix = f"Schema validation failed for {model}" if model else "Schema validation failed"
        super().__init__(f"{prefix}: {detail}")


class ExtractionError(ScrapeError):
    """The vendor succeeded but returned no JSON payload."""


class ScrapeFailedError(ScrapeError):
    """Retries for a URL were exhausted. ``__cause__`` holds the last error."""

    def __init__(self, url: str, attempts: int, last_error: BaseException) -> None:
        super().__init__(
            f"Failed to scrape {url} after {attempts} attempts. Last error: {last_error}"
        )
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
