# recipe_scout/services/orchestrator.py
# Tiered fan-out over the site adapters.
# 1) Tier 1 concurrently, each adapter under its own hard timeout (cancelled on expiry)
# 2) Tier 2 only when Tier 1 produced fewer than `tier2_threshold` recipes
# 3) concat in declaration order -> dedupe by name -> aggregate quality filter
# Adapter failures never escape; they become failed ScraperResults in the run log.

from __future__ import annotations
import asyncio
import logging
import time
from typing import List, Optional, Sequence, Tuple

from recipe_scout.models.schemas import AdapterRun, Recipe, RunLog, ScraperResult
from recipe_scout.services.extract import validate_recipe
from recipe_scout.services.metrics import MetricsRegistry, RunHistory
from recipe_scout.services.sites.base import SiteAdapter

log = logging.getLogger(__name__)

BAD_URL_PATTERNS = ["/category/", "/collection/", "/collections/", "/categories/", "/tag/", "/tags/"]
BAD_NAME_KEYWORDS = [
    "recipe ideas", "recipe collection", "recipes for", "best recipes", "top recipes",
    "easy recipes for every", "dietary needs", "special occasion",
]
MIN_DESCRIPTION_LEN = 20


def dedupe_by_name(recipes: Sequence[Recipe]) -> List[Recipe]:
    """First occurrence wins; names compared lowercased and trimmed."""
    seen = set()
    out = []
    for r in recipes:
        key = r.name.lower().strip()
        if key in seen:
            continue
        seen.add(key)
        out.append(r)
    return out


def passes_quality(recipe: Recipe) -> bool:
    if validate_recipe(recipe) is None:
        return False
    url = (recipe.sourceUrl or "").lower()
    if any(p in url for p in BAD_URL_PATTERNS):
        return False
    name = recipe.name.lower()
    if any(kw in name for kw in BAD_NAME_KEYWORDS):
        return False
    # nutrition or a real description
    if recipe.nutrition.calories <= 0 and len(recipe.description or "") < MIN_DESCRIPTION_LEN:
        return False
    # no time, nutrition or ingredient signal at all
    if (recipe.prepTime == "N/A" and recipe.cookTime == "N/A"
            and recipe.nutrition.calories == 0 and not recipe.ingredients):
        return False
    return True


class ScraperOrchestrator:
    def __init__(
        self,
        adapters: Sequence[SiteAdapter],
        metrics: Optional[MetricsRegistry] = None,
        history: Optional[RunHistory] = None,
        *,
        tier1_timeout_s: float = 12.0,
        tier2_timeout_s: float = 10.0,
        tier2_threshold: int = 3,
    ) -> None:
        self.adapters = list(adapters)
        self.metrics = metrics if metrics is not None else MetricsRegistry()
        self.history = history if history is not None else RunHistory()
        self.tier1_timeout_s = tier1_timeout_s
        self.tier2_timeout_s = tier2_timeout_s
        self.tier2_threshold = tier2_threshold

    def tier(self, n: int) -> List[SiteAdapter]:
        return [a for a in self.adapters if a.tier == n]

    def timeout_for(self, adapter: SiteAdapter) -> float:
        return self.tier1_timeout_s if adapter.tier == 1 else self.tier2_timeout_s

    async def run_adapter(self, adapter: SiteAdapter, query: str) -> Tuple[ScraperResult, AdapterRun]:
        """One adapter under its timeout. Metrics are recorded here; never raises (except cancellation)."""
        timeout = self.timeout_for(adapter)
        start = time.perf_counter()
        try:
            result = await asyncio.wait_for(adapter.search(query), timeout=timeout)
        except asyncio.TimeoutError:
            result = ScraperResult(siteName=adapter.name, success=False,
                                   error=f"Scraper timeout after {timeout:g}s")
        except Exception as e:
            log.exception("[%s] adapter crashed", adapter.name)
            result = ScraperResult(siteName=adapter.name, success=False, error=str(e) or type(e).__name__)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        n = len(result.recipes)
        self.metrics.record(adapter.name, result.success, n, elapsed_ms)
        if result.success:
            log.info("  [%s] %d recipes in %dms", adapter.name, n, elapsed_ms)
        else:
            log.warning("  [%s] FAILED in %dms: %s", adapter.name, elapsed_ms, result.error)

        run = AdapterRun(site=adapter.name, recipes=n, success=result.success,
                         error=result.error, elapsedMs=elapsed_ms)
        return result, run

    async def _run_tier(self, adapters: Sequence[SiteAdapter], query: str) -> List[Tuple[ScraperResult, AdapterRun]]:
        return list(await asyncio.gather(*(self.run_adapter(a, query) for a in adapters)))

    async def collect(self, query: str) -> Tuple[List[Recipe], RunLog]:
        """
        Run the tiers for `query`.

        Returns the deduplicated, quality-filtered pool (declaration order) and
        an unrecorded RunLog; the caller sets its source and calls record().
        """
        run = RunLog(query=query)
        pool: List[Recipe] = []

        tier1 = self.tier(1)
        log.info("Tier 1 (%s)", ", ".join(a.name for a in tier1))
        for result, ar in await self._run_tier(tier1, query):
            pool.extend(result.recipes)
            run.results.append(ar)

        tier2 = self.tier(2)
        if tier2 and len(pool) < self.tier2_threshold:
            log.info("Tier 2 (%s), tier 1 returned only %d", ", ".join(a.name for a in tier2), len(pool))
            for result, ar in await self._run_tier(tier2, query):
                pool.extend(result.recipes)
                run.results.append(ar)
        elif tier2:
            log.info("skipping Tier 2, tier 1 returned %d recipes", len(pool))

        run.totalRecipes = len(pool)
        valid = [r for r in dedupe_by_name(pool) if passes_quality(r)]
        run.validRecipes = len(valid)
        log.info("scraped %d recipes, %d valid after dedupe/quality filter", len(pool), len(valid))
        return valid, run

    def record(self, run: RunLog) -> None:
        self.history.add(run)
