from recipe_scout.services.metrics import MetricsRegistry, RunHistory
from recipe_scout.services.orchestrator import ScraperOrchestrator, dedupe_by_name, passes_quality


def orchestrator(adapters, **kw):
    kw.setdefault("tier1_timeout_s", 0.2)
    kw.setdefault("tier2_timeout_s", 0.2)
    return ScraperOrchestrator(adapters, MetricsRegistry(), RunHistory(), **kw)


async def test_tier2_skipped_when_tier1_has_enough(adapter_factory, recipe_factory):
    t1 = adapter_factory("A", 1, [recipe_factory(f"Chicken Dish {i}") for i in range(3)])
    t2 = adapter_factory("B", 2, [recipe_factory("Backup Dish")])
    pool, run = await orchestrator([t1, t2]).collect("chicken")
    assert t2.calls == 0
    assert [r.name for r in pool] == ["Chicken Dish 0", "Chicken Dish 1", "Chicken Dish 2"]
    assert [x.site for x in run.results] == ["A"]


async def test_tier2_runs_when_tier1_is_short(adapter_factory, recipe_factory):
    t1a = adapter_factory("A", 1, [recipe_factory("Chicken Dish")])
    t1b = adapter_factory("B", 1, fail="HTTP 403")
    t2 = adapter_factory("C", 2, [recipe_factory("Backup Dish")])
    pool, run = await orchestrator([t1a, t1b, t2]).collect("chicken")
    assert t2.calls == 1
    assert [r.name for r in pool] == ["Chicken Dish", "Backup Dish"]
    assert [(x.site, x.success) for x in run.results] == [("A", True), ("B", False), ("C", True)]
    assert run.results[1].error == "HTTP 403"
    assert run.to_meta().scrapersDown == ["B"]
    assert run.to_meta().scrapersUsed == ["A", "C"]


async def test_timed_out_adapter_is_cancelled_and_marked_failed(adapter_factory, recipe_factory):
    slow = adapter_factory("Slow", 1, [recipe_factory("Late Dish")], delay=5.0)
    fast = adapter_factory("Fast", 1, [recipe_factory("Quick Dish")])
    orch = orchestrator([slow, fast], tier1_timeout_s=0.05)
    pool, run = await orch.collect("chicken")
    assert slow.cancelled is True
    assert [r.name for r in pool] == ["Quick Dish"]
    by_site = {x.site: x for x in run.results}
    assert by_site["Slow"].success is False
    assert "timeout" in by_site["Slow"].error.lower()


async def test_adapter_exception_is_contained(adapter_factory, recipe_factory):
    boom = adapter_factory("Boom", 1, raises=RuntimeError("selector blew up"))
    ok = adapter_factory("Ok", 1, [recipe_factory(f"Dish {i}") for i in range(3)])
    pool, run = await orchestrator([boom, ok]).collect("x")
    assert len(pool) == 3
    assert run.results[0].success is False
    assert run.results[0].error == "selector blew up"


async def test_results_keep_declaration_order_and_dedupe(adapter_factory, recipe_factory):
    a = adapter_factory("A", 1, [recipe_factory("Garlic Chicken", site="A")], delay=0.02)
    b = adapter_factory("B", 1, [recipe_factory("  garlic chicken ", site="B"), recipe_factory("Rice Bowl", site="B")])
    pool, run = await orchestrator([a, b]).collect("chicken")
    # A finished last but is declared first, so its copy wins
    assert [(r.name, r.sourceSite) for r in pool] == [("Garlic Chicken", "A"), ("Rice Bowl", "B")]
    assert run.totalRecipes == 3
    assert run.validRecipes == 2


async def test_metrics_recorded_per_adapter(adapter_factory, recipe_factory):
    ok = adapter_factory("Ok", 1, [recipe_factory("Dish One"), recipe_factory("Dish Two"), recipe_factory("Dish Three")])
    empty = adapter_factory("Empty", 1, [])
    orch = orchestrator([ok, empty])
    await orch.collect("x")
    await orch.collect("y")
    snap = orch.metrics.snapshot()
    assert snap["Ok"]["totalRuns"] == 2
    assert snap["Ok"]["successRate"] == 100
    assert snap["Ok"]["avgRecipesPerRun"] == 3
    # success with zero recipes is not a successful run
    assert snap["Empty"]["successRate"] == 0
    assert snap["Empty"]["lastFailure"] > 0


def test_dedupe_keeps_first(recipe_factory):
    a, b, c = recipe_factory("Pad Thai", site="A"), recipe_factory("PAD THAI ", site="B"), recipe_factory("Pho")
    assert dedupe_by_name([a, b, c]) == [a, c]


def test_quality_filter(recipe_factory):
    assert passes_quality(recipe_factory())
    assert not passes_quality(recipe_factory(url="https://site/recipes/category/dinner/"))
    assert not passes_quality(recipe_factory(url="https://site/tags/quick/"))
    assert not passes_quality(recipe_factory(name="Chicken Recipes For Two"))
    assert not passes_quality(recipe_factory(calories=0, description="Too short"))
    assert passes_quality(recipe_factory(calories=0, description="A substantive twenty-plus character blurb"))
    assert not passes_quality(recipe_factory(ingredients=["salt"]))
