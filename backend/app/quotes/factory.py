"""Factories that wire resolvers from the environment."""

from __future__ import annotations

import logging
import os
import time

from .alpha_vantage import DEMO_API_KEY, AlphaVantageAdapter
from .cache import Clock, QuoteCache
from .exchanges import FUNDAMENTALS_CACHE_TTL, INDIAN_MARKET_SUFFIXES
from .fundamentals import FundamentalsResolver, ScreenerAdapter, YahooQuoteTypeAdapter
from .massive_client import PolygonLastTradeAdapter
from .nse import NSEQuoteAdapter
from .resolver import QuoteResolver
from .yahoo import YahooChartAdapter

logger = logging.getLogger(__name__)


def alpha_vantage_api_key() -> str | None:
    """The configured Alpha Vantage key, or None for demo mode. Never logged."""
    api_key = os.environ.get("ALPHA_VANTAGE_API_KEY", "").strip()
    if not api_key or api_key == DEMO_API_KEY:
        return None
    return api_key


def create_quote_resolver(cache: QuoteCache, clock: Clock = time.time) -> QuoteResolver:
    """Build the quote resolver based on environment variables.

    - ALPHA_VANTAGE_API_KEY set (and not 'demo') -> keyed Alpha Vantage is tried
      directly before the ordered fallback chain, and the Indian chain uses it
    - Otherwise -> demo/dynamic mode, fallback chains only
    """
    api_key = alpha_vantage_api_key()

    international = [
        AlphaVantageAdapter(api_key=DEMO_API_KEY, name="Alpha Vantage Demo", timeout=5.0, clock=clock),
        YahooChartAdapter(name="Yahoo Finance", timeout=3.0, clock=clock),
        PolygonLastTradeAdapter(name="Polygon Demo", timeout=3.0, clock=clock),
    ]
    indian = [
        AlphaVantageAdapter(
            api_key=api_key or DEMO_API_KEY,
            name="Alpha Vantage India",
            timeout=5.0,
            market_suffixes=INDIAN_MARKET_SUFFIXES,
            clock=clock,
        ),
        YahooChartAdapter(
            name="Yahoo Finance India",
            timeout=5.0,
            market_suffixes=INDIAN_MARKET_SUFFIXES,
            clock=clock,
        ),
        NSEQuoteAdapter(name="NSE API", timeout=5.0, clock=clock),
    ]

    direct = None
    if api_key:
        direct = AlphaVantageAdapter(api_key=api_key, name="Alpha Vantage", timeout=10.0, clock=clock)
        logger.info("Quote resolver: Alpha Vantage key configured (direct lookup enabled)")
    else:
        logger.info("Quote resolver: demo mode (dynamic fallback only)")

    return QuoteResolver(cache=cache, international=international, indian=indian, direct=direct)


def create_fundamentals_resolver(cache: QuoteCache | None = None) -> FundamentalsResolver:
    """Screener.in first, Yahoo quoteType second, cached for a day."""
    if cache is None:
        cache = QuoteCache(ttl_seconds=FUNDAMENTALS_CACHE_TTL)
    return FundamentalsResolver(cache=cache, adapters=[ScreenerAdapter(), YahooQuoteTypeAdapter()])


def sweep_interval() -> float:
    """Seconds between cache sweeps; 0 disables the sweeper."""
    raw = os.environ.get("QUOTE_CACHE_SWEEP_INTERVAL", "").strip()
    if not raw:
        return 60.0
    try:
        return max(float(raw), 0.0)
    except ValueError:
        logger.warning("Ignoring invalid QUOTE_CACHE_SWEEP_INTERVAL=%r", raw)
        return 60.0
