"""Page fetch errors.

Adapters catch these at their boundary and turn them into a failed
ScraperResult (search page) or a skipped recipe (detail page).
"""

from __future__ import annotations

from typing import Optional

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class FetchError(Exception):
    """Base exception for page fetch failures."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """Connection failure, reset or timeout. Retryable."""


class HttpStatusError(FetchError):
    """Non-2xx response."""

    def __init__(self, status: int, url: Optional[str] = None, reason: str = "") -> None:
        super().__init__(f"HTTP {status}{': ' + reason if reason else ''}", url)
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.status in RETRYABLE_STATUS_CODES


class CircuitOpenError(FetchError):
    """The origin's circuit is open; no request was made."""

    def __init__(self, origin: str, url: Optional[str] = None) -> None:
        super().__init__(f"Circuit breaker OPEN for {origin}, skipping request", url)
        self.origin = origin
