"""Ordered multi-provider quote resolution."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TypeVar

from .cache import QuoteCache
from .exchanges import RATE_LIMITED_CACHE_TTL
from .interface import ProviderAdapter
from .models import (
    FailureReason,
    InvalidTickerFormat,
    ProviderError,
    ProviderRateLimitedError,
    Quote,
    ResolutionFailure,
    SymbolNotFoundError,
    TickerIdentifier,
)
from .parser import Route, parse_ticker, route_for

logger = logging.getLogger(__name__)

_O = TypeVar("_O", Quote, ResolutionFailure)


class QuoteResolver:
    """Answers "what is the current price of ticker T".

    Flow for one call:
        parse -> cache lookup -> route by exchange -> [direct keyed attempt]
        -> adapters in declared order, first success wins -> cache outcome

    Adapters are tried one at a time in the order given; they are never
    reordered or raced. Every path ends in a Quote or a ResolutionFailure;
    no exception escapes ``resolve``.

    ``direct`` is an optional adapter holding a real API key. It is tried
    first for internationally routed tickers. If it reports the symbol as
    unknown or rate limited, that outcome is returned as-is; any other
    failure falls through to the ordered chain.
    """

    def __init__(
        self,
        cache: QuoteCache,
        international: Sequence[ProviderAdapter],
        indian: Sequence[ProviderAdapter],
        direct: ProviderAdapter | None = None,
    ) -> None:
        self._cache = cache
        self._chains: dict[Route, tuple[ProviderAdapter, ...]] = {
            Route.INTERNATIONAL: tuple(international),
            Route.INDIAN: tuple(indian),
        }
        self._direct = direct

    @property
    def cache(self) -> QuoteCache:
        return self._cache

    @property
    def direct(self) -> ProviderAdapter | None:
        return self._direct

    def adapters_for(self, route: Route) -> tuple[ProviderAdapter, ...]:
        return self._chains[route]

    async def resolve(self, raw_ticker: str) -> Quote | ResolutionFailure:
        try:
            ticker = parse_ticker(raw_ticker)
        except InvalidTickerFormat as e:
            logger.info("Rejected ticker %r: %s", raw_ticker, e)
            return ResolutionFailure(
                ticker=raw_ticker.strip().upper(),
                reason=FailureReason.INVALID_FORMAT,
                detail=str(e),
            )

        try:
            return await self._resolve(ticker)
        except Exception as e:
            logger.exception("Unexpected error resolving %s", ticker.canonical_form)
            return ResolutionFailure(
                ticker=ticker.canonical_form,
                reason=FailureReason.INTERNAL_ERROR,
                detail=type(e).__name__,
            )

    async def _resolve(self, ticker: TickerIdentifier) -> Quote | ResolutionFailure:
        key = ticker.canonical_form

        entry = self._cache.get(key)
        if entry is not None:
            logger.debug("Cache hit for %s", key)
            return entry.outcome  # type: ignore[return-value]

        route = route_for(ticker)
        if route is None:
            return ResolutionFailure(
                ticker=key,
                reason=FailureReason.NOT_FOUND,
                detail=f"no provider supports exchange {ticker.exchange}",
            )

        if route is Route.INTERNATIONAL and self._direct is not None:
            outcome = await self._try_direct(ticker)
            if outcome is not None:
                return self._store(key, outcome)

        failures: list[str] = []
        for adapter in self._chains[route]:
            try:
                quote = await adapter.fetch_quote(ticker.symbol, ticker.exchange)
            except ProviderError as e:
                logger.warning("%s failed for %s: %s", adapter.name, key, e.reason)
                failures.append(f"{adapter.name}: {e.reason}")
                continue
            except Exception as e:
                logger.exception("%s raised unexpectedly for %s", adapter.name, key)
                failures.append(f"{adapter.name}: {type(e).__name__}")
                continue
            logger.info("Resolved %s via %s: %.4f", key, adapter.name, quote.price)
            return self._store(key, quote)

        logger.warning("All %d %s providers failed for %s", len(failures), route.value, key)
        return self._store(
            key,
            ResolutionFailure(
                ticker=key,
                reason=FailureReason.ALL_PROVIDERS_FAILED,
                detail="; ".join(failures),
            ),
        )

    async def _try_direct(self, ticker: TickerIdentifier) -> Quote | ResolutionFailure | None:
        """Keyed lookup. Returns None when the failure should fall through to the chain."""
        assert self._direct is not None
        key = ticker.canonical_form
        try:
            return await self._direct.fetch_quote(ticker.symbol, ticker.exchange)
        except SymbolNotFoundError as e:
            return ResolutionFailure(ticker=key, reason=FailureReason.NOT_FOUND, detail=str(e))
        except ProviderRateLimitedError as e:
            return ResolutionFailure(ticker=key, reason=FailureReason.RATE_LIMITED, detail=str(e))
        except ProviderError as e:
            logger.warning("%s failed for %s, falling back: %s", self._direct.name, key, e.reason)
        except Exception:
            logger.exception("%s raised unexpectedly for %s, falling back", self._direct.name, key)
        return None

    def _store(self, key: str, outcome: _O) -> _O:
        if isinstance(outcome, ResolutionFailure) and outcome.reason is FailureReason.RATE_LIMITED:
            self._cache.set(key, outcome, ttl_seconds=min(self._cache.ttl, RATE_LIMITED_CACHE_TTL))
        else:
            self._cache.set(key, outcome)
        return outcome
