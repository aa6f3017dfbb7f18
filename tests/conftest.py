"""Shared fixtures for the test suite."""

import json

import pytest
from unittest.mock import MagicMock

from models import Quote


@pytest.fixture
def mock_response():
    """Factory for mock HTTP responses."""
    def _make(status_code=200, json_data=None):
        resp = MagicMock()
        resp.status_code = status_code
        resp.json.return_value = json_data or {}
        # truthy when status_code == 200
        resp.__bool__ = lambda self: self.status_code == 200
        return resp
    return _make


@pytest.fixture
def make_quote():
    """Factory fixture: make_quote('AAPL', 110, 100, volume=5) -> Quote."""
    def _make(symbol="AAPL", price=110.0, reference_price=100.0, volume=1_000_000, name=""):
        return Quote.from_prices(symbol, price, reference_price, volume=volume, name=name)
    return _make


@pytest.fixture
def chart_payload():
    """Factory for a Yahoo v8 chart response body."""
    def _make(closes=(101.0, 102.5), previous_close=100.0, volume=1_234_567, chart_previous_close=None):
        meta = {"regularMarketVolume": volume}
        if previous_close is not None:
            meta["previousClose"] = previous_close
        if chart_previous_close is not None:
            meta["chartPreviousClose"] = chart_previous_close
        return {
            "chart": {
                "result": [{
                    "meta": meta,
                    "indicators": {"quote": [{"close": list(closes)}]},
                }],
                "error": None,
            }
        }
    return _make


@pytest.fixture
def watchlist_data():
    """A small but complete watchlist dict."""
    return {
        "indices": [
            {"symbol": "^GSPC", "name": "S&P 500"},
            {"symbol": "^IXIC", "name": "Nasdaq"},
        ],
        "tracked_stocks": ["AAA", "BBB", "CCC"],
        "keyword_pages": [
            {
                "slug": "gainers-page",
                "title": "Gainers",
                "h1": "Top Gainers",
                "description": "Stocks going up",
                "keywords": ["gainers today"],
                "filter": "gainers",
            },
            {
                "slug": "tech-page",
                "title": "Tech",
                "h1": "Tech Stocks",
                "description": "Tech names",
                "keywords": ["tech premarket"],
                "symbols": ["AAA", "BBB"],
            },
        ],
        "sectors": [
            {"symbol": "XLK", "name": "Technology", "color": "#00a8e8"},
            {"symbol": "XLE", "name": "Energy", "color": "#f7931a"},
        ],
    }


@pytest.fixture
def watchlist_file(tmp_path, watchlist_data):
    path = tmp_path / "watchlists.json"
    path.write_text(json.dumps(watchlist_data))
    return str(path)


@pytest.fixture
def mock_provider():
    """
    Mock QuoteDataProvider driven by a {symbol: raw_quote | Exception} table.

    Set provider.table before use. Unknown symbols raise DataNotFoundError.
    """
    from sources.quotes.providers.base import DataNotFoundError

    provider = MagicMock()
    provider.name = "mock"
    provider.table = {}
    provider.names = {}

    def _get_quote(symbol):
        value = provider.table.get(symbol)
        if value is None:
            raise DataNotFoundError(f"{symbol}: not in table")
        if isinstance(value, Exception):
            raise value
        return value

    provider.get_quote.side_effect = _get_quote
    provider.get_company_name.side_effect = lambda s: provider.names.get(s)
    return provider
