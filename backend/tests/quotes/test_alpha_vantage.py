"""Tests for AlphaVantageAdapter (mocked transport)."""

import httpx
import pytest

from app.quotes.alpha_vantage import AlphaVantageAdapter
from app.quotes.exchanges import INDIAN_MARKET_SUFFIXES
from app.quotes.models import ProviderError, ProviderRateLimitedError, SymbolNotFoundError


def _global_quote(price="190.5000", change="1.2500", change_percent="0.6604%"):
    return {
        "Global Quote": {
            "01. symbol": "AAPL",
            "05. price": price,
            "09. change": change,
            "10. change percent": change_percent,
        }
    }


@pytest.mark.asyncio
class TestAlphaVantageAdapter:
    """Unit tests for AlphaVantageAdapter."""

    async def test_parses_global_quote(self, mock_client, clock):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            seen["user-agent"] = request.headers["User-Agent"]
            return httpx.Response(200, json=_global_quote())

        adapter = AlphaVantageAdapter(client=mock_client(handler), clock=clock)
        quote = await adapter.fetch_quote("AAPL")

        assert quote.price == 190.5
        assert quote.ticker == "AAPL"
        assert quote.provider_name == "Alpha Vantage Demo"
        assert quote.change == 1.25
        assert quote.change_percent == "0.6604%"
        assert quote.resolved_at == clock.now
        assert seen["function"] == "GLOBAL_QUOTE"
        assert seen["symbol"] == "AAPL"
        assert seen["apikey"] == "demo"
        assert seen["user-agent"] == "StockApp/1.0"

    async def test_uses_configured_key(self, mock_client):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json=_global_quote())

        adapter = AlphaVantageAdapter(api_key="real-key", name="Alpha Vantage", client=mock_client(handler))
        await adapter.fetch_quote("AAPL", exchange="NASDAQ")
        assert seen["apikey"] == "real-key"
        assert adapter.uses_demo_key is False

    async def test_indian_suffix_mapping(self, mock_client):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json=_global_quote(price="2450.75"))

        adapter = AlphaVantageAdapter(
            name="Alpha Vantage India",
            client=mock_client(handler),
            market_suffixes=INDIAN_MARKET_SUFFIXES,
        )
        quote = await adapter.fetch_quote("RELIANCE", exchange="BSE")
        assert seen["symbol"] == "RELIANCE.BO"
        assert quote.ticker == "BSE:RELIANCE"
        assert quote.symbol == "RELIANCE"

    async def test_unmapped_exchange_fails_without_request(self, mock_client):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=_global_quote())

        adapter = AlphaVantageAdapter(client=mock_client(handler), market_suffixes=INDIAN_MARKET_SUFFIXES)
        with pytest.raises(ProviderError):
            await adapter.fetch_quote("GOLD", exchange="MCX")
        assert calls == []

    async def test_error_message_is_symbol_not_found(self, mock_client):
        adapter = AlphaVantageAdapter(
            client=mock_client(lambda r: httpx.Response(200, json={"Error Message": "Invalid API call."}))
        )
        with pytest.raises(SymbolNotFoundError):
            await adapter.fetch_quote("ZZZZ")

    @pytest.mark.parametrize("key", ["Information", "Note"])
    async def test_information_is_rate_limited(self, mock_client, key):
        adapter = AlphaVantageAdapter(
            client=mock_client(lambda r: httpx.Response(200, json={key: "Thank you for using Alpha Vantage!"}))
        )
        with pytest.raises(ProviderRateLimitedError):
            await adapter.fetch_quote("AAPL")

    async def test_empty_global_quote_fails(self, mock_client):
        adapter = AlphaVantageAdapter(client=mock_client(lambda r: httpx.Response(200, json={"Global Quote": {}})))
        with pytest.raises(ProviderError) as exc_info:
            await adapter.fetch_quote("AAPL")
        assert not isinstance(exc_info.value, (SymbolNotFoundError, ProviderRateLimitedError))

    async def test_http_error_fails(self, mock_client):
        adapter = AlphaVantageAdapter(client=mock_client(lambda r: httpx.Response(500, text="oops")))
        with pytest.raises(ProviderError, match="HTTP 500"):
            await adapter.fetch_quote("AAPL")

    async def test_http_429_is_rate_limited(self, mock_client):
        adapter = AlphaVantageAdapter(client=mock_client(lambda r: httpx.Response(429)))
        with pytest.raises(ProviderRateLimitedError):
            await adapter.fetch_quote("AAPL")

    async def test_malformed_json_fails(self, mock_client):
        adapter = AlphaVantageAdapter(client=mock_client(lambda r: httpx.Response(200, text="<html>")))
        with pytest.raises(ProviderError, match="malformed"):
            await adapter.fetch_quote("AAPL")

    async def test_non_numeric_price_fails(self, mock_client):
        adapter = AlphaVantageAdapter(
            client=mock_client(lambda r: httpx.Response(200, json=_global_quote(price="n/a")))
        )
        with pytest.raises(ProviderError, match="non-numeric"):
            await adapter.fetch_quote("AAPL")

    @pytest.mark.parametrize("price", ["Infinity", "NaN", "-Infinity"])
    async def test_non_finite_price_fails(self, mock_client, price):
        """A price that parses to inf/nan is a malformed payload, not a quote."""
        adapter = AlphaVantageAdapter(
            client=mock_client(lambda r: httpx.Response(200, json=_global_quote(price=price)))
        )
        with pytest.raises(ProviderError, match="non-finite"):
            await adapter.fetch_quote("AAPL")

    async def test_non_finite_change_is_dropped(self, mock_client):
        adapter = AlphaVantageAdapter(
            client=mock_client(lambda r: httpx.Response(200, json=_global_quote(change="Infinity")))
        )
        quote = await adapter.fetch_quote("AAPL")

        assert quote.price == 190.5
        assert quote.change is None

    async def test_timeout_fails(self, mock_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        adapter = AlphaVantageAdapter(client=mock_client(handler), timeout=5.0)
        with pytest.raises(ProviderError, match="timed out"):
            await adapter.fetch_quote("AAPL")

    async def test_error_text_does_not_leak_key(self, mock_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        adapter = AlphaVantageAdapter(api_key="secret-key", client=mock_client(handler))
        with pytest.raises(ProviderError) as exc_info:
            await adapter.fetch_quote("AAPL")
        assert "secret-key" not in str(exc_info.value)
