"""Data models for quote resolution."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from .exchanges import MSG_FETCH_FAILED, MSG_INVALID_FORMAT, MSG_NOT_FOUND, MSG_RATE_LIMITED


class ExchangeClass(str, Enum):
    """Coarse market grouping derived from a ticker's exchange prefix."""

    UNCLASSIFIED = "unclassified"
    US_MAJOR = "us_major"
    INDIAN = "indian"
    OTHER_INTERNATIONAL = "other_international"


class FailureReason(str, Enum):
    INVALID_FORMAT = "invalid_format"
    NOT_FOUND = "not_found"
    ALL_PROVIDERS_FAILED = "all_providers_failed"
    RATE_LIMITED = "rate_limited"
    INTERNAL_ERROR = "internal_error"


_STATUS_CODES: dict[FailureReason, int] = {
    FailureReason.INVALID_FORMAT: 400,
    FailureReason.NOT_FOUND: 404,
    FailureReason.RATE_LIMITED: 429,
    FailureReason.ALL_PROVIDERS_FAILED: 502,
    FailureReason.INTERNAL_ERROR: 500,
}

_MESSAGES: dict[FailureReason, str] = {
    FailureReason.INVALID_FORMAT: MSG_INVALID_FORMAT,
    FailureReason.NOT_FOUND: MSG_NOT_FOUND,
    FailureReason.RATE_LIMITED: MSG_RATE_LIMITED,
    FailureReason.ALL_PROVIDERS_FAILED: MSG_FETCH_FAILED,
    FailureReason.INTERNAL_ERROR: MSG_FETCH_FAILED,
}


def canonical_form(symbol: str, exchange: str | None = None) -> str:
    """'EXCHANGE:SYMBOL' when an exchange is given, otherwise the bare symbol."""
    return f"{exchange}:{symbol}" if exchange else symbol


def _iso_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class TickerIdentifier:
    """A parsed ticker: uppercase symbol plus optional exchange prefix."""

    symbol: str
    exchange: str | None = None

    @property
    def canonical_form(self) -> str:
        return canonical_form(self.symbol, self.exchange)


@dataclass(frozen=True, slots=True)
class Quote:
    """Immutable price resolved from a single provider.

    Prices are in the instrument's native currency; no conversion is applied.
    """

    ticker: str
    symbol: str
    exchange: str | None
    price: float
    provider_name: str
    resolved_at: float = field(default_factory=time.time)  # Unix seconds
    change: float | None = None
    change_percent: str | None = None

    def __post_init__(self) -> None:
        if not (math.isfinite(self.price) and self.price > 0):
            raise ValueError(f"Quote price must be positive and finite, got {self.price!r}")

    @property
    def last_updated(self) -> str:
        """ISO-8601 UTC timestamp of resolution."""
        return _iso_timestamp(self.resolved_at)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        data: dict[str, Any] = {
            "ticker": self.ticker,
            "symbol": self.symbol,
            "exchange": self.exchange,
            "price": self.price,
            "source": self.provider_name,
            "lastUpdated": self.last_updated,
        }
        if self.change is not None:
            data["change"] = self.change
        if self.change_percent is not None:
            data["changePercent"] = self.change_percent
        return data


@dataclass(frozen=True, slots=True)
class ResolutionFailure:
    """Terminal failed outcome of a resolution attempt.

    ``detail`` is for logs only and never leaves the process.
    """

    ticker: str
    reason: FailureReason
    detail: str = ""

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.reason]

    @property
    def message(self) -> str:
        return _MESSAGES[self.reason]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"error": self.message}
        if self.ticker:
            data["ticker"] = self.ticker
        return data


@dataclass(frozen=True, slots=True)
class Fundamentals:
    """Market cap and sector for a listed company."""

    symbol: str
    market_cap: float | None = None
    sector: str | None = None
    source: str = "screener"

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "symbol": self.symbol,
            "marketCap": self.market_cap,
            "sector": self.sector or "Unknown",
            "source": self.source,
        }


Outcome = Union[Quote, ResolutionFailure, Fundamentals]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: str
    outcome: Outcome
    stored_at: float
    ttl: float


class InvalidTickerFormat(ValueError):
    """Raised when a raw ticker fails structural validation."""


class ProviderError(Exception):
    """A single provider could not produce a quote.

    Never crosses the resolver boundary; the resolver logs it and moves on.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.reason = message


class SymbolNotFoundError(ProviderError):
    """Provider positively reported the symbol as unknown."""


class ProviderRateLimitedError(ProviderError):
    """Provider signalled throttling."""
