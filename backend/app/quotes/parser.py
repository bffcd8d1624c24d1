"""Ticker parsing, validation, and exchange classification.

Everything here is pure: no I/O, no clock, no shared state.
"""

from __future__ import annotations

import re
from enum import Enum

from .exchanges import (
    DEFAULT_SYMBOL_PATTERN,
    INDIAN_EXCHANGES,
    INDIAN_SYMBOL_PATTERN,
    INTERNATIONAL_ROUTE_EXCHANGES,
    RECOGNIZED_EXCHANGES,
    US_MAJOR_EXCHANGES,
)
from .models import ExchangeClass, InvalidTickerFormat, TickerIdentifier

_INDIAN_SYMBOL_RE = re.compile(INDIAN_SYMBOL_PATTERN)
_DEFAULT_SYMBOL_RE = re.compile(DEFAULT_SYMBOL_PATTERN)


class Route(str, Enum):
    """Which provider chain serves a ticker."""

    INTERNATIONAL = "international"
    INDIAN = "indian"


def split_ticker(raw: str) -> TickerIdentifier:
    """Uppercase, trim, and split on a single ':' without validating.

    Input with zero or several colons keeps the whole string as the symbol.
    """
    cleaned = raw.strip().upper()
    if cleaned.count(":") == 1:
        exchange, symbol = cleaned.split(":")
        return TickerIdentifier(symbol=symbol.strip(), exchange=exchange.strip())
    return TickerIdentifier(symbol=cleaned)


def validate_ticker(ticker: TickerIdentifier) -> None:
    """Raise InvalidTickerFormat unless symbol and exchange have a valid shape."""
    pattern = _INDIAN_SYMBOL_RE if ticker.exchange in INDIAN_EXCHANGES else _DEFAULT_SYMBOL_RE
    if not pattern.match(ticker.symbol):
        raise InvalidTickerFormat(f"symbol {ticker.symbol!r} does not match {pattern.pattern}")
    if ticker.exchange is not None and ticker.exchange not in RECOGNIZED_EXCHANGES:
        raise InvalidTickerFormat(f"unrecognized exchange {ticker.exchange!r}")


def parse_ticker(raw: str) -> TickerIdentifier:
    """Parse 'AAPL' or 'NASDAQ:AAPL' style input into a validated TickerIdentifier."""
    ticker = split_ticker(raw)
    validate_ticker(ticker)
    return ticker


def is_valid_ticker(raw: str) -> bool:
    try:
        parse_ticker(raw)
    except InvalidTickerFormat:
        return False
    return True


def classify_exchange(ticker: TickerIdentifier) -> ExchangeClass:
    if not ticker.exchange:
        return ExchangeClass.UNCLASSIFIED
    if ticker.exchange in US_MAJOR_EXCHANGES:
        return ExchangeClass.US_MAJOR
    if ticker.exchange in INDIAN_EXCHANGES:
        return ExchangeClass.INDIAN
    return ExchangeClass.OTHER_INTERNATIONAL


def route_for(ticker: TickerIdentifier) -> Route | None:
    """Pick the provider chain, or None when no provider supports the exchange."""
    exchange_class = classify_exchange(ticker)
    if exchange_class is ExchangeClass.INDIAN:
        return Route.INDIAN
    if exchange_class is ExchangeClass.UNCLASSIFIED or ticker.exchange in INTERNATIONAL_ROUTE_EXCHANGES:
        return Route.INTERNATIONAL
    return None
