# Per-client sliding-window rate limiter for the search endpoint (in-memory)
from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque, Dict

RATE_LIMIT_MESSAGE = "Too many requests. Please wait a moment and try again."


class SlidingWindowLimiter:
    def __init__(
        self,
        max_requests: int = 10,
        window_s: float = 60.0,
        clock: Callable[[], float] = time.time,
        prune_every_s: float = 300.0,
    ) -> None:
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock
        self._buckets: Dict[str, Deque[float]] = {}
        self._prune_every_s = prune_every_s
        self._last_prune = clock()

    def __len__(self) -> int:
        return len(self._buckets)

    def _trim(self, bucket: Deque[float], now: float) -> None:
        while bucket and now - bucket[0] >= self.window_s:
            bucket.popleft()

    def hit(self, client: str) -> bool:
        """Count one request for client. False when it is over the limit (not counted)."""
        now = self._clock()
        if now - self._last_prune >= self._prune_every_s:
            self.prune()

        bucket = self._buckets.setdefault(client, deque())
        self._trim(bucket, now)
        if len(bucket) >= self.max_requests:
            return False
        bucket.append(now)
        return True

    def prune(self) -> None:
        # drop clients with no request inside the window
        now = self._clock()
        for client in list(self._buckets):
            bucket = self._buckets[client]
            self._trim(bucket, now)
            if not bucket:
                del self._buckets[client]
        self._last_prune = now
