"""Direct NSE quote-equity adapter."""

from __future__ import annotations

import time
from collections.abc import Callable

import httpx

from .interface import HttpProviderAdapter
from .models import Quote

NSE_BASE_URL = "https://www.nseindia.com"


class NSEQuoteAdapter(HttpProviderAdapter):
    """Exchange-direct data from the public NSE ``/api/quote-equity`` endpoint.

    Only NSE listings are served; other exchanges fail without a request.
    """

    headers = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}

    def __init__(
        self,
        name: str = "NSE API",
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
        base_url: str = NSE_BASE_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(name=name, timeout=timeout, client=client, clock=clock)
        self._base_url = base_url

    async def fetch_quote(self, symbol: str, exchange: str | None = None) -> Quote:
        if exchange != "NSE":
            raise self._fail("only NSE supported")
        data = await self._get_json(f"{self._base_url}/api/quote-equity", params={"symbol": symbol})
        try:
            price = data["priceInfo"]["lastPrice"]
        except (KeyError, TypeError):
            raise self._fail(f"no price data for {symbol}") from None
        return self._make_quote(symbol, exchange, price)
