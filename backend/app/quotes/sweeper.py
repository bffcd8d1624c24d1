"""Background task that evicts expired cache entries."""

from __future__ import annotations

import asyncio
import logging

from .cache import QuoteCache

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Periodically calls QuoteCache.sweep() so idle tickers do not pile up.

    Lifecycle mirrors the other background tasks in the app:
        sweeper = CacheSweeper(cache, interval=60.0)
        await sweeper.start()
        ...
        await sweeper.stop()
    """

    def __init__(self, cache: QuoteCache, interval: float = 60.0) -> None:
        self._cache = cache
        self._interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop(), name="quote-cache-sweeper")
        logger.info("Cache sweeper started (%.1fs interval)", self._interval)

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Cache sweeper stopped")

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                removed = self._cache.sweep()
                if removed:
                    logger.debug("Cache sweep removed %d expired entries", removed)
            except Exception:
                logger.exception("Cache sweep failed")
