"""Massive (Polygon.io) last-trade adapter."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any

from .interface import ProviderAdapter
from .models import Quote

DEMO_API_KEY = "demo"


class PolygonLastTradeAdapter(ProviderAdapter):
    """Source C: ``GET /v2/last/trade/{ticker}`` through the Massive REST client.

    The Massive RESTClient is synchronous, so each call runs in a worker
    thread bounded by ``timeout``. The client is created lazily on first use.
    """

    def __init__(
        self,
        api_key: str = DEMO_API_KEY,
        name: str = "Polygon Demo",
        timeout: float = 3.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(name=name, timeout=timeout, clock=clock)
        self._api_key = api_key
        self._client: Any = None  # Lazy import keeps massive off the import path until needed

    async def fetch_quote(self, symbol: str, exchange: str | None = None) -> Quote:
        try:
            trade = await asyncio.wait_for(asyncio.to_thread(self._fetch_last_trade, symbol), self.timeout)
        except asyncio.TimeoutError:
            raise self._fail(f"timed out after {self.timeout:.1f}s") from None
        except Exception as e:
            # Massive raises BadResponse, urllib3 errors, etc.
            raise self._fail(f"last trade request failed: {type(e).__name__}") from None
        return self._make_quote(symbol, exchange, getattr(trade, "price", None))

    def _fetch_last_trade(self, symbol: str) -> Any:
        """Synchronous call to the Massive REST API. Runs in a thread."""
        if self._client is None:
            from massive import RESTClient

            self._client = RESTClient(api_key=self._api_key)
        return self._client.get_last_trade(ticker=symbol)
