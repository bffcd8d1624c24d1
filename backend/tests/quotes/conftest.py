"""Fixtures for quote resolution tests."""

import httpx
import pytest

from app.quotes.interface import ProviderAdapter
from app.quotes.models import ProviderError


class FakeAdapter(ProviderAdapter):
    """Adapter that returns a fixed price or raises a fixed error, recording calls."""

    def __init__(self, name, price=None, error=None, clock=None):
        kwargs = {"clock": clock} if clock is not None else {}
        super().__init__(name=name, timeout=1.0, **kwargs)
        self.price = price
        self.error = error
        self.calls = []

    async def fetch_quote(self, symbol, exchange=None):
        self.calls.append((symbol, exchange))
        if self.error is not None:
            raise self.error
        if self.price is None:
            raise ProviderError(self.name, "no price")
        return self._make_quote(symbol, exchange, self.price)


@pytest.fixture
def make_adapter(clock):
    """Factory for FakeAdapter instances sharing the test clock."""

    def _make(name, price=None, error=None):
        return FakeAdapter(name, price=price, error=error, clock=clock)

    return _make


@pytest.fixture
def mock_client():
    """Factory for an httpx.AsyncClient served by a handler function."""

    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
