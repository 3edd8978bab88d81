import asyncio

import pytest

from recipe_scout.models.schemas import SearchParams
from recipe_scout.services.cache import InFlight, TTLCache, cache_key


def test_cache_key_normalizes_and_defaults():
    a = SearchParams(ingredients="  Chicken, Rice ", cuisine="Thai")
    b = SearchParams(ingredients="chicken, rice", cuisine="thai", strictness="flexible")
    assert cache_key(a) == cache_key(b) == "chicken, rice||thai|flexible"
    assert cache_key(SearchParams(ingredients="chicken", strictness="strict")) == "chicken|||strict"


def test_entries_expire_after_ttl(clock):
    cache = TTLCache(ttl_s=900, clock=clock)
    cache.set("k", "v")
    clock.advance(899)
    assert cache.get("k") == "v"
    clock.advance(2)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_least_recently_used_is_evicted(clock):
    cache = TTLCache(ttl_s=900, max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")          # a is now most recent
    cache.set("c", 3)
    assert "b" not in cache
    assert cache.get("a") == 1
    assert cache.get("c") == 3


async def test_inflight_shares_one_execution():
    inflight = InFlight()
    calls = 0
    gate = asyncio.Event()

    async def work():
        nonlocal calls
        calls += 1
        await gate.wait()
        return {"answer": 42}

    tasks = [asyncio.ensure_future(inflight.run("k", work)) for _ in range(5)]
    await asyncio.sleep(0)
    assert "k" in inflight
    gate.set()
    results = await asyncio.gather(*tasks)
    assert calls == 1
    assert all(r is results[0] for r in results)
    assert "k" not in inflight


async def test_inflight_entry_removed_after_failure():
    inflight = InFlight()

    async def boom():
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        await inflight.run("k", boom)
    assert len(inflight) == 0


async def test_cancelled_caller_does_not_cancel_shared_work():
    inflight = InFlight()
    gate = asyncio.Event()

    async def work():
        await gate.wait()
        return "done"

    first = asyncio.ensure_future(inflight.run("k", work))
    second = asyncio.ensure_future(inflight.run("k", work))
    await asyncio.sleep(0)
    first.cancel()
    await asyncio.sleep(0)
    gate.set()
    assert await second == "done"
