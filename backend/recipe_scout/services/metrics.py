# recipe_scout/services/metrics.py
# Rolling per-adapter health metrics and the recent run history (diagnostics only)

from __future__ import annotations
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List

from recipe_scout.models.schemas import RunLog


@dataclass
class AdapterMetrics:
    total_runs: int = 0
    success_runs: int = 0
    total_recipes: int = 0
    total_response_ms: int = 0
    last_success: float = 0.0
    last_failure: float = 0.0

    def summary(self) -> dict:
        n = self.total_runs
        return {
            "totalRuns": n,
            "successRate": round(self.success_runs / n * 100) if n else 0,
            "avgRecipesPerRun": round(self.total_recipes / n, 1) if n else 0,
            "avgResponseMs": round(self.total_response_ms / n) if n else 0,
            "lastSuccess": self.last_success,
            "lastFailure": self.last_failure,
        }


class MetricsRegistry:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._metrics: Dict[str, AdapterMetrics] = {}

    def get(self, name: str) -> AdapterMetrics:
        m = self._metrics.get(name)
        if m is None:
            m = self._metrics[name] = AdapterMetrics()
        return m

    def record(self, name: str, success: bool, recipes: int, elapsed_ms: int) -> None:
        # a run only counts as a success when it produced something
        m = self.get(name)
        m.total_runs += 1
        m.total_response_ms += elapsed_ms
        m.total_recipes += recipes
        if success and recipes > 0:
            m.success_runs += 1
            m.last_success = self._clock()
        else:
            m.last_failure = self._clock()

    def snapshot(self) -> Dict[str, dict]:
        return {name: m.summary() for name, m in self._metrics.items()}


class RunHistory:
    """Newest-first, capped list of RunLog entries."""

    def __init__(self, maxlen: int = 50) -> None:
        self._runs: Deque[RunLog] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._runs)

    @property
    def maxlen(self) -> int:
        return self._runs.maxlen

    def add(self, run: RunLog) -> None:
        self._runs.appendleft(run)

    def recent(self, n: int = 20) -> List[RunLog]:
        return list(self._runs)[:n]

    def stats(self) -> dict:
        total = len(self._runs)
        scraped = sum(1 for r in self._runs if r.source == "scraped")
        return {
            "totalRuns": total,
            "scrapedSuccessRate": round(scraped / total * 100) if total else 0,
        }
