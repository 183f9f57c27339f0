"""Tests for the TTL result cache."""

import pytest

from mayerprism.core.data.cache import ResultCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResultCache(ttl=600, clock=clock)


class TestResultCache:
    @pytest.mark.asyncio
    async def test_put_then_get(self, cache):
        await cache.put("bitcoin-data", ["a", "b"])

        assert await cache.get("bitcoin-data") == ["a", "b"]

    @pytest.mark.asyncio
    async def test_missing_key(self, cache):
        assert await cache.get("nothing-here") is None

    @pytest.mark.asyncio
    async def test_fresh_just_before_ttl(self, cache, clock):
        await cache.put("k", 1)
        clock.advance(599.9)

        assert await cache.get("k") == 1

    @pytest.mark.asyncio
    async def test_stale_at_exactly_ttl(self, cache, clock):
        await cache.put("k", 1)
        clock.advance(600)

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_stale_entry_is_not_evicted(self, cache, clock):
        await cache.put("k", 1)
        clock.advance(11 * 60)

        assert await cache.get("k") is None
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_put_overwrites_and_restarts_clock(self, cache, clock):
        await cache.put("k", "old")
        clock.advance(700)
        await cache.put("k", "new")
        clock.advance(300)

        assert await cache.get("k") == "new"

    @pytest.mark.asyncio
    async def test_get_ttl(self, cache, clock):
        await cache.put("k", 1)
        clock.advance(100)

        assert await cache.get_ttl("k") == pytest.approx(500)
        clock.advance(600)
        assert await cache.get_ttl("k") is None
        assert await cache.get_ttl("missing") is None

    @pytest.mark.asyncio
    async def test_clear(self, cache):
        await cache.put("a", 1)
        await cache.put("b", 2)

        await cache.clear()

        assert len(cache) == 0
        assert await cache.get("a") is None
