"""HTTP endpoints for quote and fundamentals lookup."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .fundamentals import FundamentalsResolver
from .models import FailureReason, Fundamentals, ResolutionFailure
from .resolver import QuoteResolver


def create_quote_router(resolver: QuoteResolver, fundamentals: FundamentalsResolver) -> APIRouter:
    """Create the stock router bound to the given resolvers.

    This factory pattern lets us inject the resolvers (and their caches) without globals.
    """
    router = APIRouter(prefix="/api/stock", tags=["stock"])

    @router.get("/{ticker}")
    async def get_stock_price(ticker: str) -> JSONResponse:
        """Current price for 'AAPL' or 'NASDAQ:AAPL' style tickers.

        200: {ticker, symbol, exchange, price, source, lastUpdated}
        4xx/5xx: {error, ticker}
        """
        outcome = await resolver.resolve(ticker)
        if isinstance(outcome, ResolutionFailure):
            return JSONResponse(outcome.to_dict(), status_code=outcome.status_code)
        return JSONResponse(outcome.to_dict())

    @router.get("/{ticker}/screener")
    async def get_stock_fundamentals(ticker: str) -> JSONResponse:
        """Market cap and sector, cached for 24 hours."""
        outcome = await fundamentals.resolve(ticker)
        if isinstance(outcome, Fundamentals):
            return JSONResponse(outcome.to_dict())
        internal = outcome.reason is FailureReason.INTERNAL_ERROR
        return JSONResponse(
            {
                "success": False,
                "symbol": outcome.ticker,
                "error": outcome.message if internal else "No fundamentals data found",
                "marketCap": None,
                "sector": "Unknown",
            },
            status_code=outcome.status_code if outcome.status_code in (400, 500) else 404,
        )

    return router
