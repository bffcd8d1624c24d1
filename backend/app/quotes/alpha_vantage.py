"""Alpha Vantage GLOBAL_QUOTE adapter."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping

import httpx

from .interface import HttpProviderAdapter, optional_float
from .models import ProviderRateLimitedError, Quote, SymbolNotFoundError

ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"
DEMO_API_KEY = "demo"


class AlphaVantageAdapter(HttpProviderAdapter):
    """Source A: ``function=GLOBAL_QUOTE``.

    Works with the constrained ``demo`` key or a real key. The payload is
    classified as:
      - ``Global Quote`` with ``05. price``  -> Quote
      - ``Error Message``                    -> SymbolNotFoundError
      - ``Information`` / ``Note``           -> ProviderRateLimitedError
      - anything else                        -> ProviderError
    """

    headers = {"User-Agent": "StockApp/1.0"}

    def __init__(
        self,
        api_key: str = DEMO_API_KEY,
        name: str = "Alpha Vantage Demo",
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
        market_suffixes: Mapping[str, str] | None = None,
        base_url: str = ALPHA_VANTAGE_BASE_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(name=name, timeout=timeout, client=client, market_suffixes=market_suffixes, clock=clock)
        self._api_key = api_key or DEMO_API_KEY
        self._base_url = base_url

    @property
    def uses_demo_key(self) -> bool:
        return self._api_key == DEMO_API_KEY

    async def fetch_quote(self, symbol: str, exchange: str | None = None) -> Quote:
        provider_symbol = self.provider_symbol(symbol, exchange)
        data = await self._get_json(
            self._base_url,
            params={"function": "GLOBAL_QUOTE", "symbol": provider_symbol, "apikey": self._api_key},
        )
        if not isinstance(data, dict):
            raise self._fail("unexpected payload type")

        global_quote = data.get("Global Quote")
        if isinstance(global_quote, dict) and global_quote.get("05. price"):
            return self._make_quote(
                symbol,
                exchange,
                global_quote["05. price"],
                change=optional_float(global_quote.get("09. change")),
                change_percent=global_quote.get("10. change percent") or None,
            )
        if "Error Message" in data:
            raise SymbolNotFoundError(self.name, f"unknown symbol {provider_symbol}")
        if "Information" in data or "Note" in data:
            raise ProviderRateLimitedError(self.name, "request limit reached")
        raise self._fail(f"no quote data for {provider_symbol}")
