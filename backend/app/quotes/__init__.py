"""Quote resolution subsystem for the portfolio tracker.

Public API:
    TickerIdentifier     - Parsed exchange + symbol
    Quote                - Immutable resolved price
    ResolutionFailure    - Typed failure outcome (reason + HTTP status)
    QuoteCache           - Thread-safe TTL cache of outcomes
    CacheSweeper         - Optional background eviction of expired entries
    ProviderAdapter      - Abstract interface for upstream price sources
    QuoteResolver        - Ordered multi-provider resolution
    FundamentalsResolver - Screener market cap / sector lookup
    parse_ticker         - Parse and validate a raw ticker string
    create_quote_resolver / create_fundamentals_resolver - Environment-driven wiring
    create_quote_router  - FastAPI router factory for the stock endpoints
"""

from .cache import QuoteCache
from .factory import create_fundamentals_resolver, create_quote_resolver
from .fundamentals import FundamentalsResolver
from .interface import ProviderAdapter
from .models import (
    ExchangeClass,
    FailureReason,
    Fundamentals,
    Quote,
    ResolutionFailure,
    TickerIdentifier,
)
from .parser import classify_exchange, parse_ticker, validate_ticker
from .resolver import QuoteResolver
from .routes import create_quote_router
from .sweeper import CacheSweeper

__all__ = [
    "TickerIdentifier",
    "ExchangeClass",
    "FailureReason",
    "Fundamentals",
    "Quote",
    "ResolutionFailure",
    "QuoteCache",
    "CacheSweeper",
    "ProviderAdapter",
    "QuoteResolver",
    "FundamentalsResolver",
    "parse_ticker",
    "validate_ticker",
    "classify_exchange",
    "create_quote_resolver",
    "create_fundamentals_resolver",
    "create_quote_router",
]
