# recipe_scout/services/fetcher.py
# Single page fetch: circuit check -> GET with retry/backoff -> circuit bookkeeping
# Retries: transport errors and 408/429/5xx. Other non-2xx statuses fail at once.

from __future__ import annotations
import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional
from urllib.parse import urlparse

import httpx

from recipe_scout.services.circuit_breaker import CircuitBreakerRegistry
from recipe_scout.services.errors import FetchError, HttpStatusError, NetworkError

log = logging.getLogger(__name__)

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:133.0) Gecko/20100101 Firefox/133.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.6 Safari/605.1.15",
]


def build_headers() -> dict:
    return {
        "User-Agent": random.choice(USER_AGENTS),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Cache-Control": "no-cache",
        "Upgrade-Insecure-Requests": "1",
    }


def origin_of(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Retry-After in seconds. HTTP-date values are ignored."""
    if not value:
        return None
    try:
        secs = float(value.strip())
    except ValueError:
        return None
    return secs if secs >= 0 else None


class PageFetcher:
    def __init__(
        self,
        client: httpx.AsyncClient,
        breakers: CircuitBreakerRegistry,
        *,
        timeout_s: float = 10.0,
        max_retries: int = 2,
        backoff_base_s: float = 1.0,
        backoff_max_s: float = 8.0,
        retry_after_max_s: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.breakers = breakers
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.backoff_base_s = backoff_base_s
        self.backoff_max_s = backoff_max_s
        self.retry_after_max_s = retry_after_max_s
        self._sleep = sleep

    def _backoff(self, attempt: int) -> float:
        return min(self.backoff_base_s * (2 ** attempt), self.backoff_max_s)

    async def fetch(self, url: str) -> str:
        """
        Return the page text for url.

        Raises CircuitOpenError (no request made), HttpStatusError, NetworkError
        or FetchError (redirect loops, undecodable bodies).
        The origin's circuit records exactly one outcome per call; a cancelled
        call counts as a failure.
        """
        origin = origin_of(url)
        trial = self.breakers.before_request(origin)

        try:
            text = await self._fetch_with_retry(url)
        except BaseException:
            # cancellation included; the half-open slot must always be released
            self.breakers.record_failure(origin, trial)
            raise
        self.breakers.record_success(origin)
        return text

    async def _fetch_with_retry(self, url: str) -> str:
        attempts = self.max_retries + 1
        for attempt in range(attempts):
            last_try = attempt == attempts - 1
            try:
                r = await self.client.get(
                    url,
                    headers=build_headers(),
                    timeout=self.timeout_s,
                    follow_redirects=True,
                )
            except httpx.TransportError as e:
                kind = "timeout" if isinstance(e, httpx.TimeoutException) else type(e).__name__
                if last_try:
                    raise NetworkError(f"{kind} fetching {url}: {e}", url) from e
                delay = self._backoff(attempt)
                log.warning("fetch %s failed (%s), retrying in %.1fs (attempt %d/%d)",
                            url, kind, delay, attempt + 1, self.max_retries)
                await self._sleep(delay)
                continue
            except httpx.HTTPError as e:
                # TooManyRedirects, DecodingError...: retrying gives the same answer
                raise FetchError(f"{type(e).__name__} fetching {url}: {e}", url) from e

            if r.is_success:
                return r.text

            err = HttpStatusError(r.status_code, url, r.reason_phrase)
            if not err.retryable or last_try:
                raise err

            delay = parse_retry_after(r.headers.get("Retry-After"))
            delay = min(delay, self.retry_after_max_s) if delay is not None else self._backoff(attempt)
            log.warning("fetch %s returned %d, retrying in %.1fs (attempt %d/%d)",
                        url, r.status_code, delay, attempt + 1, self.max_retries)
            await self._sleep(delay)

        # attempts >= 1, the loop always returns or raises
        raise NetworkError(f"fetch failed for {url}", url)
