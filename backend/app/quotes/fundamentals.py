"""Market cap and sector lookup for Indian listings (screener data)."""

from __future__ import annotations

import dataclasses
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence

import httpx

from .cache import QuoteCache
from .interface import JsonHttp, optional_float
from .models import FailureReason, Fundamentals, ProviderError, ResolutionFailure

logger = logging.getLogger(__name__)

SCREENER_BASE_URL = "https://www.screener.in"
YAHOO_QUOTE_TYPE_BASE_URL = "https://query1.finance.yahoo.com"

# Symbols are interpolated into URL paths.
SCREENER_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9&-]+$")


class FundamentalsAdapter(ABC):
    """One source of company fundamentals. Raises ProviderError on failure."""

    headers: dict[str, str] = {}

    def __init__(self, name: str, timeout: float, client: httpx.AsyncClient | None = None) -> None:
        self.name = name
        self._http = JsonHttp(name, timeout, client=client, headers=self.headers)

    @abstractmethod
    async def fetch_fundamentals(self, symbol: str) -> Fundamentals: ...


class ScreenerAdapter(FundamentalsAdapter):
    """Screener.in company API: ``/api/company/{SYMBOL}/``."""

    headers = {
        "User-Agent": "Mozilla/5.0 (compatible; StockPortfolioTracker/1.0)",
        "Accept": "application/json",
    }

    def __init__(
        self,
        name: str = "Screener.in",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        base_url: str = SCREENER_BASE_URL,
    ) -> None:
        super().__init__(name=name, timeout=timeout, client=client)
        self._base_url = base_url

    async def fetch_fundamentals(self, symbol: str) -> Fundamentals:
        data = await self._http.get_json(f"{self._base_url}/api/company/{symbol.upper()}/")
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected payload type")
        return Fundamentals(
            symbol=symbol,
            market_cap=optional_float(data.get("market_cap")),
            sector=data.get("sector") or None,
        )


class YahooQuoteTypeAdapter(FundamentalsAdapter):
    """Yahoo ``/v1/finance/quoteType/{SYMBOL}.NS`` fallback."""

    def __init__(
        self,
        name: str = "Yahoo Finance quoteType",
        timeout: float = 8.0,
        client: httpx.AsyncClient | None = None,
        base_url: str = YAHOO_QUOTE_TYPE_BASE_URL,
    ) -> None:
        super().__init__(name=name, timeout=timeout, client=client)
        self._base_url = base_url

    async def fetch_fundamentals(self, symbol: str) -> Fundamentals:
        data = await self._http.get_json(f"{self._base_url}/v1/finance/quoteType/{symbol}.NS")
        try:
            result = data["quoteType"]["result"][0]
        except (KeyError, IndexError, TypeError):
            raise ProviderError(self.name, f"no data found for {symbol}") from None
        if not isinstance(result, dict):
            raise ProviderError(self.name, f"no data found for {symbol}")
        return Fundamentals(
            symbol=symbol,
            market_cap=optional_float(result.get("marketCap")),
            sector=result.get("sector") or None,
        )


class FundamentalsResolver:
    """Screener lookup with ordered fallback and a day-long cache.

    Failures are cached too, so a bad symbol is not re-fetched all day.
    """

    def __init__(self, cache: QuoteCache, adapters: Sequence[FundamentalsAdapter]) -> None:
        self._cache = cache
        self._adapters = tuple(adapters)

    @property
    def cache(self) -> QuoteCache:
        return self._cache

    @property
    def adapters(self) -> tuple[FundamentalsAdapter, ...]:
        return self._adapters

    async def resolve(self, raw_ticker: str) -> Fundamentals | ResolutionFailure:
        symbol = raw_ticker.split(":")[1] if ":" in raw_ticker else raw_ticker
        symbol = symbol.strip().upper()
        if not SCREENER_SYMBOL_PATTERN.match(symbol):
            logger.info("Rejected screener symbol %r", raw_ticker)
            return ResolutionFailure(
                ticker=symbol or raw_ticker.strip().upper(),
                reason=FailureReason.INVALID_FORMAT,
                detail="empty symbol" if not symbol else "symbol contains unsupported characters",
            )

        try:
            return await self._resolve(symbol)
        except Exception as e:
            logger.exception("Unexpected error resolving fundamentals for %s", symbol)
            return ResolutionFailure(
                ticker=symbol,
                reason=FailureReason.INTERNAL_ERROR,
                detail=type(e).__name__,
            )

    async def _resolve(self, symbol: str) -> Fundamentals | ResolutionFailure:
        key = symbol.lower()
        entry = self._cache.get(key)
        if entry is not None:
            if isinstance(entry.outcome, Fundamentals):
                return dataclasses.replace(entry.outcome, source="cache")
            return entry.outcome  # type: ignore[return-value]

        failures: list[str] = []
        for adapter in self._adapters:
            try:
                result = await adapter.fetch_fundamentals(symbol)
            except ProviderError as e:
                logger.warning("%s failed for %s: %s", adapter.name, symbol, e.reason)
                failures.append(f"{adapter.name}: {e.reason}")
                continue
            except Exception as e:
                logger.exception("%s raised unexpectedly for %s", adapter.name, symbol)
                failures.append(f"{adapter.name}: {type(e).__name__}")
                continue
            self._cache.set(key, result)
            return result

        failure = ResolutionFailure(ticker=symbol, reason=FailureReason.NOT_FOUND, detail="; ".join(failures))
        self._cache.set(key, failure)
        return failure
