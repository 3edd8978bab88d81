# recipe_scout/services/recipe_service.py
# Search entry point: cache -> in-flight sharing -> tiered scrape -> rank -> response
# Owns every piece of shared state (circuits, metrics, run history, cache, in-flight map),
# so one instance per app; tests build their own isolated instances.
# A search never errors out to the caller: no usable result or an unexpected failure -> demo recipes.

from __future__ import annotations
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Sequence

import httpx

from recipe_scout.core.config import Settings, settings as default_settings
from recipe_scout.models.schemas import RecipeResponse, RunLog, ScraperMeta, ScraperResult, SearchParams
from recipe_scout.services.cache import InFlight, TTLCache, cache_key
from recipe_scout.services.circuit_breaker import CircuitBreakerRegistry
from recipe_scout.services.demo import demo_recipes
from recipe_scout.services.fetcher import PageFetcher
from recipe_scout.services.metrics import MetricsRegistry, RunHistory
from recipe_scout.services.orchestrator import ScraperOrchestrator
from recipe_scout.services.ranking import rank_recipes
from recipe_scout.services.sites.base import SiteAdapter, SiteProfile, build_adapters
from recipe_scout.services.sites.registry import PROFILES

log = logging.getLogger(__name__)

RECENT_RUNS_SHOWN = 20


class RecipeSearchService:
    def __init__(
        self,
        orchestrator: ScraperOrchestrator,
        *,
        breakers: Optional[CircuitBreakerRegistry] = None,
        cache: Optional[TTLCache] = None,
        inflight: Optional[InFlight] = None,
        results_limit: int = 5,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.breakers = breakers if breakers is not None else CircuitBreakerRegistry()
        self.cache: TTLCache[RecipeResponse] = cache if cache is not None else TTLCache()
        self.inflight = inflight if inflight is not None else InFlight()
        self.results_limit = results_limit
        self._client = client

    @classmethod
    def create(
        cls,
        cfg: Settings = default_settings,
        *,
        client: Optional[httpx.AsyncClient] = None,
        profiles: Sequence[SiteProfile] = PROFILES,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> "RecipeSearchService":
        """Wire the full stack from settings. A client passed in is not closed by aclose()."""
        owned = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=cfg.fetch_timeout_s, follow_redirects=True)

        breakers = CircuitBreakerRegistry(
            failure_threshold=cfg.circuit_failure_threshold,
            cooldown_s=cfg.circuit_cooldown_s,
            clock=clock,
        )
        fetcher = PageFetcher(
            client,
            breakers,
            timeout_s=cfg.fetch_timeout_s,
            max_retries=cfg.fetch_max_retries,
            backoff_base_s=cfg.backoff_base_s,
            backoff_max_s=cfg.backoff_max_s,
            retry_after_max_s=cfg.retry_after_max_s,
            sleep=sleep,
        )
        orchestrator = ScraperOrchestrator(
            build_adapters(profiles, fetcher, max_links=cfg.max_links_per_site),
            MetricsRegistry(clock=clock),
            RunHistory(maxlen=cfg.run_log_size),
            tier1_timeout_s=cfg.tier1_timeout_s,
            tier2_timeout_s=cfg.tier2_timeout_s,
            tier2_threshold=cfg.tier2_threshold,
        )
        return cls(
            orchestrator,
            breakers=breakers,
            cache=TTLCache(ttl_s=cfg.cache_ttl_s, max_entries=cfg.cache_max_entries, clock=clock),
            results_limit=cfg.results_limit,
            client=client if owned else None,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    async def search(self, params: SearchParams) -> RecipeResponse:
        key = cache_key(params)
        cached = self.cache.get(key)
        if cached is not None:
            log.info("cache hit for %s", key)
            meta = (cached.meta or ScraperMeta()).model_copy(update={"fromCache": True})
            return cached.model_copy(update={"meta": meta})
        return await self.inflight.run(key, lambda: self._search(params, key))

    async def _search(self, params: SearchParams, key: str) -> RecipeResponse:
        log.info("recipe search: %r (time=%s, cuisine=%s, strictness=%s, related=%s)",
                 params.ingredients, params.timeAvailable or "any", params.cuisine or "any",
                 params.strictness, ", ".join(params.relatedTerms) or "-")
        start = time.perf_counter()
        # site search boxes take one line
        query = params.ingredients.replace("\n", ", ")
        run: Optional[RunLog] = None
        try:
            valid, run = await self.orchestrator.collect(query)
            top = rank_recipes(valid, params, limit=self.results_limit)
        except Exception:
            log.exception("search failed for %r, serving demo recipes", params.ingredients)
            top = []
        if run is None:
            run = RunLog(query=query)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        if top:
            run.source = "scraped"
            self.orchestrator.record(run)
            response = RecipeResponse(recipes=top, source="scraped", meta=run.to_meta())
            self.cache.set(key, response)
            log.info("returning %d scraped recipes in %dms", len(top), elapsed_ms)
            return response

        run.source = "demo"
        self.orchestrator.record(run)
        log.info("no valid scraped recipes, falling back to demo (%dms)", elapsed_ms)
        return RecipeResponse(recipes=demo_recipes(params.ingredients), source="demo", meta=run.to_meta())

    # ------------------------------------------------------------------
    def find_adapter(self, site: str) -> Optional[SiteAdapter]:
        s = (site or "").strip().lower()
        for a in self.orchestrator.adapters:
            if s in (a.profile.key, a.name.lower()):
                return a
        return None

    async def run_single(self, site: str, query: str) -> Optional[ScraperResult]:
        """Run one adapter directly, outside tiers, cache and metrics. None for an unknown site."""
        adapter = self.find_adapter(site)
        if adapter is None:
            return None
        timeout = self.orchestrator.timeout_for(adapter)
        try:
            return await asyncio.wait_for(adapter.search(query), timeout=timeout)
        except asyncio.TimeoutError:
            return ScraperResult(siteName=adapter.name, success=False,
                                 error=f"Scraper timeout after {timeout:g}s")

    def status(self) -> dict:
        history = self.orchestrator.history
        return {
            "circuitBreakers": self.breakers.snapshot(),
            "perScraperMetrics": self.orchestrator.metrics.snapshot(),
            "recentRuns": [r.model_dump() for r in history.recent(RECENT_RUNS_SHOWN)],
            "stats": history.stats(),
        }
