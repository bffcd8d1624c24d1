"""FastAPI application for the portfolio tracker backend."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .quotes import (
    CacheSweeper,
    FundamentalsResolver,
    QuoteCache,
    QuoteResolver,
    create_fundamentals_resolver,
    create_quote_resolver,
    create_quote_router,
)
from .quotes.factory import sweep_interval

logger = logging.getLogger(__name__)


def create_app(
    resolver: QuoteResolver | None = None,
    fundamentals: FundamentalsResolver | None = None,
) -> FastAPI:
    """Build the app. Resolvers default to environment-driven wiring."""
    if resolver is None:
        resolver = create_quote_resolver(QuoteCache())
    if fundamentals is None:
        fundamentals = create_fundamentals_resolver()

    interval = sweep_interval()
    sweepers = (
        [CacheSweeper(resolver.cache, interval), CacheSweeper(fundamentals.cache, interval)]
        if interval > 0
        else []
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        for sweeper in sweepers:
            await sweeper.start()
        try:
            yield
        finally:
            for sweeper in sweepers:
                await sweeper.stop()

    app = FastAPI(title="Portfolio Tracker", lifespan=lifespan)
    app.state.quote_resolver = resolver
    app.state.fundamentals_resolver = fundamentals
    app.state.sweepers = sweepers
    app.include_router(create_quote_router(resolver, fundamentals))

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "ok"}

    logger.info("App created (cache sweep interval %.1fs)", interval)
    return app
