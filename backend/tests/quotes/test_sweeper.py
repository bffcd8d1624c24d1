"""Tests for the background CacheSweeper."""

import asyncio

import pytest

from app.quotes.cache import QuoteCache
from app.quotes.models import FailureReason, ResolutionFailure
from app.quotes.sweeper import CacheSweeper


@pytest.mark.asyncio
class TestCacheSweeper:
    """Integration tests for CacheSweeper."""

    async def test_sweeps_expired_entries(self, clock):
        cache = QuoteCache(ttl_seconds=300, clock=clock)
        cache.set("AAPL", ResolutionFailure(ticker="AAPL", reason=FailureReason.NOT_FOUND))
        clock.advance(301)

        sweeper = CacheSweeper(cache, interval=0.01)
        await sweeper.start()
        await asyncio.sleep(0.1)
        await sweeper.stop()

        assert len(cache) == 0

    async def test_keeps_live_entries(self, clock):
        cache = QuoteCache(ttl_seconds=300, clock=clock)
        cache.set("AAPL", ResolutionFailure(ticker="AAPL", reason=FailureReason.NOT_FOUND))

        sweeper = CacheSweeper(cache, interval=0.01)
        await sweeper.start()
        await asyncio.sleep(0.05)
        await sweeper.stop()

        assert len(cache) == 1

    async def test_start_twice_keeps_one_task(self, clock):
        sweeper = CacheSweeper(QuoteCache(clock=clock), interval=10.0)
        await sweeper.start()
        task = sweeper._task
        await sweeper.start()
        assert sweeper._task is task
        await sweeper.stop()

    async def test_stop_is_idempotent(self, clock):
        sweeper = CacheSweeper(QuoteCache(clock=clock), interval=10.0)
        await sweeper.stop()
        await sweeper.start()
        assert sweeper.running
        await sweeper.stop()
        await sweeper.stop()
        assert not sweeper.running

    async def test_sweep_error_does_not_kill_loop(self, clock):
        cache = QuoteCache(clock=clock)
        calls = []

        def flaky_sweep():
            calls.append(1)
            raise RuntimeError("boom")

        cache.sweep = flaky_sweep
        sweeper = CacheSweeper(cache, interval=0.01)
        await sweeper.start()
        await asyncio.sleep(0.1)
        assert sweeper.running
        await sweeper.stop()
        assert len(calls) >= 2
