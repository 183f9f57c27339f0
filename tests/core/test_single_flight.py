"""Tests for collapsing concurrent calls."""

import asyncio

import pytest

from mayerprism.core.data.cache import SingleFlight


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_execution(self):
        flight = SingleFlight()
        release = asyncio.Event()
        calls = 0

        async def work():
            nonlocal calls
            calls += 1
            await release.wait()
            return "done"

        first = asyncio.create_task(flight.do("key", work))
        second = asyncio.create_task(flight.do("key", work))
        await asyncio.sleep(0)
        assert flight.in_flight("key")

        release.set()
        results = await asyncio.gather(first, second)

        assert results == ["done", "done"]
        assert calls == 1
        assert not flight.in_flight("key")

    @pytest.mark.asyncio
    async def test_failure_reaches_every_caller_and_clears_key(self):
        flight = SingleFlight()
        release = asyncio.Event()

        async def boom():
            await release.wait()
            raise RuntimeError("broken")

        first = asyncio.create_task(flight.do("key", boom))
        second = asyncio.create_task(flight.do("key", boom))
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(first, second, return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        assert not flight.in_flight("key")

    @pytest.mark.asyncio
    async def test_sequential_calls_run_again(self):
        flight = SingleFlight()
        calls = 0

        async def work():
            nonlocal calls
            calls += 1
            return calls

        assert await flight.do("key", work) == 1
        assert await flight.do("key", work) == 2

    @pytest.mark.asyncio
    async def test_distinct_keys_do_not_share(self):
        flight = SingleFlight()

        async def value(v):
            return v

        a, b = await asyncio.gather(flight.do("a", lambda: value(1)), flight.do("b", lambda: value(2)))

        assert (a, b) == (1, 2)

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_shared_work(self):
        flight = SingleFlight()
        release = asyncio.Event()

        async def work():
            await release.wait()
            return "ok"

        impatient = asyncio.create_task(flight.do("key", work))
        patient = asyncio.create_task(flight.do("key", work))
        await asyncio.sleep(0)
        impatient.cancel()
        release.set()

        assert await patient == "ok"
        with pytest.raises(asyncio.CancelledError):
            await impatient
