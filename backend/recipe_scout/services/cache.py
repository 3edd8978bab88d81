# recipe_scout/services/cache.py
# In-memory result cache (TTL + LRU capacity) and in-flight search sharing.
# Nothing here survives a restart.

from __future__ import annotations
import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from recipe_scout.models.schemas import SearchParams

log = logging.getLogger(__name__)

T = TypeVar("T")


def cache_key(params: SearchParams) -> str:
    """ingredients|timeAvailable|cuisine|strictness, lowercased and trimmed."""
    parts = [
        params.ingredients,
        params.timeAvailable or "",
        params.cuisine or "",
        params.strictness or "flexible",
    ]
    return "|".join(p.lower().strip() for p in parts)


@dataclass
class CacheEntry(Generic[T]):
    data: T
    timestamp: float


class TTLCache(Generic[T]):
    def __init__(
        self,
        ttl_s: float = 900.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_s = ttl_s
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp > self.ttl_s:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry.data

    def set(self, key: str, data: T) -> None:
        self._entries[key] = CacheEntry(data=data, timestamp=self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("cache evicted %s", evicted)

    def clear(self) -> None:
        self._entries.clear()


class InFlight:
    """
    Collapse concurrent identical work: the first caller for a key starts the
    task, later callers await the same task. The entry is dropped when the task
    settles, success or failure. Callers are shielded, so one caller going away
    does not cancel the shared task.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, "asyncio.Task[Any]"] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: str) -> bool:
        return key in self._tasks

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda t, k=key: self._discard(k, t))
        else:
            log.info("joining in-flight search for %s", key)
        return await asyncio.shield(task)

    def _discard(self, key: str, task: "asyncio.Task[Any]") -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        # retrieve the exception so an unawaited failure is not reported as lost
        if not task.cancelled():
            task.exception()
