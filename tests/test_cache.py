"""
Tests for the single-flight result cache.
"""

import asyncio

import pytest

from desidub.utils.cache import CacheEntry, ResultCache, cleanup_expired_cache
from desidub.utils.errors import FetchError


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_producer_call():
    cache = ResultCache()
    calls = 0
    release = asyncio.Event()

    async def producer():
        nonlocal calls
        calls += 1
        await release.wait()
        return {"value": calls}

    tasks = [asyncio.create_task(cache.get_or_set("home", 60, producer)) for _ in range(10)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks)

    assert calls == 1
    assert all(result is results[0] for result in results)
    assert cache.stats()["inflight"] == 0


@pytest.mark.asyncio
async def test_fresh_entry_is_served_without_calling_producer(fake_clock):
    cache = ResultCache(clock=fake_clock)
    calls = 0

    async def producer():
        nonlocal calls
        calls += 1
        return calls

    assert await cache.get_or_set("key", 30, producer) == 1
    fake_clock.advance(29.9)
    assert await cache.get_or_set("key", 30, producer) == 1
    assert calls == 1
    assert cache.stats()["hits"] == 1


@pytest.mark.asyncio
async def test_expired_entry_reinvokes_producer(fake_clock):
    cache = ResultCache(clock=fake_clock)
    calls = 0

    async def producer():
        nonlocal calls
        calls += 1
        return calls

    assert await cache.get_or_set("key", 30, producer) == 1
    fake_clock.advance(30.1)
    assert await cache.get_or_set("key", 30, producer) == 2
    assert calls == 2


@pytest.mark.asyncio
async def test_failures_are_shared_but_not_cached():
    cache = ResultCache()
    calls = 0
    release = asyncio.Event()

    async def failing():
        nonlocal calls
        calls += 1
        await release.wait()
        raise FetchError("https://www.desidubanime.me/", 503)

    tasks = [asyncio.create_task(cache.get_or_set("home", 60, failing)) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert calls == 1
    assert all(isinstance(result, FetchError) and result.status == 503 for result in results)
    assert cache.get("home") is None

    async def succeeding():
        return "recovered"

    assert await cache.get_or_set("home", 60, succeeding) == "recovered"


@pytest.mark.asyncio
async def test_failed_refresh_keeps_key_retryable(fake_clock):
    cache = ResultCache(clock=fake_clock)

    async def first():
        return "old"

    async def failing():
        raise FetchError("https://www.desidubanime.me/", 500)

    await cache.get_or_set("key", 10, first)
    fake_clock.advance(11)

    with pytest.raises(FetchError):
        await cache.get_or_set("key", 10, failing)

    assert cache.stats()["inflight"] == 0


@pytest.mark.asyncio
async def test_distinct_keys_do_not_wait_on_each_other():
    cache = ResultCache()
    slow_started = asyncio.Event()
    release_slow = asyncio.Event()

    async def slow():
        slow_started.set()
        await release_slow.wait()
        return "slow"

    async def fast():
        return "fast"

    slow_task = asyncio.create_task(cache.get_or_set("slow", 60, slow))
    await slow_started.wait()

    assert await cache.get_or_set("fast", 60, fast) == "fast"
    assert not slow_task.done()

    release_slow.set()
    assert await slow_task == "slow"


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_flight():
    cache = ResultCache()
    release = asyncio.Event()

    async def producer():
        await release.wait()
        return "done"

    first = asyncio.create_task(cache.get_or_set("key", 60, producer))
    second = asyncio.create_task(cache.get_or_set("key", 60, producer))
    await asyncio.sleep(0)

    first.cancel()
    release.set()

    assert await second == "done"
    assert cache.get("key") == "done"


def test_purge_expired_and_invalidate(fake_clock):
    cache = ResultCache(clock=fake_clock)
    cache._entries["old"] = CacheEntry(key="old", value=1, stored_at=fake_clock(), ttl=5)
    cache._entries["new"] = CacheEntry(key="new", value=2, stored_at=fake_clock(), ttl=50)

    fake_clock.advance(10)

    assert cache.purge_expired() == 1
    assert cache.get("new") == 2

    cache.invalidate("new")
    assert cache.get("new") is None
    assert cache.stats()["entries"] == 0


def test_cache_entry_expiry_boundary():
    entry = CacheEntry(key="k", value=None, stored_at=100.0, ttl=10)

    assert not entry.is_expired(109.9)
    assert not entry.is_expired(110.0)
    assert entry.is_expired(110.1)


@pytest.mark.asyncio
async def test_cleanup_loop_purges_expired_entries(fake_clock):
    cache = ResultCache(clock=fake_clock)
    cache._entries["old"] = CacheEntry(key="old", value=1, stored_at=fake_clock(), ttl=5)
    fake_clock.advance(10)

    task = asyncio.create_task(cleanup_expired_cache(cache))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert cache.stats()["entries"] == 0
