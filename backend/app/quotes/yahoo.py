"""Yahoo Finance chart adapter."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping

import httpx

from .interface import HttpProviderAdapter
from .models import Quote

YAHOO_BASE_URL = "https://query1.finance.yahoo.com"
_CHART_PATH = "/v8/finance/chart"


class YahooChartAdapter(HttpProviderAdapter):
    """Source B: unauthenticated ``/v8/finance/chart/{symbol}``.

    Price is ``chart.result[0].meta.regularMarketPrice``.
    """

    headers = {"User-Agent": "Mozilla/5.0"}

    def __init__(
        self,
        name: str = "Yahoo Finance",
        timeout: float = 3.0,
        client: httpx.AsyncClient | None = None,
        market_suffixes: Mapping[str, str] | None = None,
        base_url: str = YAHOO_BASE_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(name=name, timeout=timeout, client=client, market_suffixes=market_suffixes, clock=clock)
        self._base_url = base_url

    async def fetch_quote(self, symbol: str, exchange: str | None = None) -> Quote:
        provider_symbol = self.provider_symbol(symbol, exchange)
        data = await self._get_json(f"{self._base_url}{_CHART_PATH}/{provider_symbol}")
        try:
            meta = data["chart"]["result"][0]["meta"]
            price = meta["regularMarketPrice"]
        except (KeyError, IndexError, TypeError):
            raise self._fail(f"no chart data for {provider_symbol}") from None
        return self._make_quote(symbol, exchange, price)
