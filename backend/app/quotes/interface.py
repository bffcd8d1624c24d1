"""Abstract interface for upstream quote providers."""

from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from .models import ProviderError, ProviderRateLimitedError, Quote, canonical_form


def optional_float(value: object) -> float | None:
    """Parse an optional numeric field; blank, malformed or non-finite values become None."""
    if value in (None, "") or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class ProviderAdapter(ABC):
    """Contract for one upstream price source.

    An adapter builds the provider-specific request, applies its own timeout,
    and normalizes the response into a Quote. Any failure (HTTP status,
    malformed payload, missing price, timeout, network error) is raised as a
    ProviderError; nothing else may escape ``fetch_quote``.

    Usage:
        adapter = YahooChartAdapter(name="Yahoo Finance", timeout=3.0)
        quote = await adapter.fetch_quote("AAPL", exchange="NASDAQ")
    """

    def __init__(self, name: str, timeout: float, clock: Callable[[], float] = time.time) -> None:
        self.name = name
        self.timeout = timeout
        self._clock = clock

    @abstractmethod
    async def fetch_quote(self, symbol: str, exchange: str | None = None) -> Quote:
        """Fetch the current price for symbol, optionally hinted with its exchange.

        Raises ProviderError (or a subclass) when no price can be produced.
        """

    def _fail(self, message: str) -> ProviderError:
        return ProviderError(self.name, message)

    def _make_quote(self, symbol: str, exchange: str | None, raw_price: Any, **extra: Any) -> Quote:
        """Build a Quote from a raw provider price, rejecting non-numeric, non-finite or non-positive values."""
        if isinstance(raw_price, bool) or raw_price is None:
            raise self._fail(f"no price in response for {symbol}")
        try:
            price = float(raw_price)
        except (TypeError, ValueError):
            raise self._fail(f"non-numeric price {raw_price!r} for {symbol}") from None
        if not (math.isfinite(price) and price > 0):
            raise self._fail(f"non-positive or non-finite price {price!r} for {symbol}")
        return Quote(
            ticker=canonical_form(symbol, exchange),
            symbol=symbol,
            exchange=exchange,
            price=price,
            provider_name=self.name,
            resolved_at=self._clock(),
            **extra,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class JsonHttp:
    """GET a JSON document with httpx, mapping every failure to ProviderError.

    ``client`` may be injected (tests pass one built on httpx.MockTransport);
    otherwise a short-lived AsyncClient is opened per call. Request URLs are
    never included in error text since some carry API keys.
    """

    def __init__(
        self,
        provider: str,
        timeout: float,
        client: httpx.AsyncClient | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.provider = provider
        self.timeout = timeout
        self._client = client
        self._headers = dict(headers or {})

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        try:
            if self._client is not None:
                resp = await self._client.get(url, params=params, headers=self._headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.get(url, params=params, headers=self._headers)
        except httpx.TimeoutException:
            raise ProviderError(self.provider, f"timed out after {self.timeout:.1f}s") from None
        except httpx.RequestError as e:
            raise ProviderError(self.provider, f"request error: {type(e).__name__}") from None

        if resp.status_code == 429:
            raise ProviderRateLimitedError(self.provider, "HTTP 429")
        if not resp.is_success:
            raise ProviderError(self.provider, f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError:
            raise ProviderError(self.provider, "malformed JSON payload") from None


class HttpProviderAdapter(ProviderAdapter):
    """ProviderAdapter that talks JSON over HTTP.

    ``market_suffixes`` maps an exchange to the symbol suffix this provider
    expects (e.g. NSE -> .NS). When set, exchanges missing from the map are
    rejected before any request is made.
    """

    headers: Mapping[str, str] = {}

    def __init__(
        self,
        name: str,
        timeout: float,
        client: httpx.AsyncClient | None = None,
        market_suffixes: Mapping[str, str] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(name=name, timeout=timeout, clock=clock)
        self._http = JsonHttp(name, timeout, client=client, headers=self.headers)
        self._suffixes = dict(market_suffixes) if market_suffixes is not None else None

    def provider_symbol(self, symbol: str, exchange: str | None) -> str:
        """Symbol as this provider spells it."""
        if self._suffixes is None:
            return symbol
        suffix = self._suffixes.get(exchange or "")
        if not suffix:
            raise self._fail(f"exchange {exchange!r} not supported")
        return f"{symbol}{suffix}"

    async def _get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        return await self._http.get_json(url, params=params)
