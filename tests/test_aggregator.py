"""Tests for QuoteAggregator and rank_movers."""

import pytest
from unittest.mock import MagicMock

from models import FetchStatus
from sources.quotes.aggregator import QuoteAggregator, rank_movers
from sources.quotes.providers.base import DataNotFoundError, ProviderError, RateLimitError


def _raw(symbol, price, reference_price, volume=0):
    return {"symbol": symbol, "price": price, "reference_price": reference_price, "volume": volume}


def _aggregator(provider, delay=0.0, limit=10):
    sleep = MagicMock()
    return QuoteAggregator(provider, delay=delay, limit=limit, sleep=sleep), sleep


# ---------------------------------------------------------------------------
# fetch_quote
# ---------------------------------------------------------------------------

class TestFetchQuote:
    def test_ok_quote(self, mock_provider):
        mock_provider.table = {"AAPL": _raw("AAPL", 105.0, 100.0, 1000)}
        agg, _ = _aggregator(mock_provider)
        result = agg.fetch_quote("AAPL")
        assert result.status == FetchStatus.OK
        assert result.quote.change == pytest.approx(5.0)
        assert result.quote.change_percent == pytest.approx(5.0)
        assert result.quote.volume == 1000

    def test_no_data(self, mock_provider):
        agg, _ = _aggregator(mock_provider)
        result = agg.fetch_quote("ZZZZ")
        assert result.status == FetchStatus.NO_DATA
        assert result.quote is None

    @pytest.mark.parametrize("exc", [RateLimitError("429"), ProviderError("HTTP 500"), ConnectionError("reset")])
    def test_transient_errors_are_failed(self, mock_provider, exc):
        mock_provider.table = {"AAPL": exc}
        agg, _ = _aggregator(mock_provider)
        result = agg.fetch_quote("AAPL")
        assert result.status == FetchStatus.FAILED
        assert not result.ok

    def test_missing_reference_is_no_data(self, mock_provider):
        mock_provider.table = {"AAPL": _raw("AAPL", 105.0, None)}
        agg, _ = _aggregator(mock_provider)
        result = agg.fetch_quote("AAPL")
        assert result.status == FetchStatus.NO_DATA

    def test_zero_reference_is_no_data(self, mock_provider):
        mock_provider.table = {"AAPL": _raw("AAPL", 105.0, 0.0)}
        agg, _ = _aggregator(mock_provider)
        assert agg.fetch_quote("AAPL").status == FetchStatus.NO_DATA

    def test_missing_price_is_no_data(self, mock_provider):
        mock_provider.table = {"AAPL": {"symbol": "AAPL", "reference_price": 100.0}}
        agg, _ = _aggregator(mock_provider)
        assert agg.fetch_quote("AAPL").status == FetchStatus.NO_DATA

    def test_non_dict_payload_is_no_data(self, mock_provider):
        mock_provider.get_quote.side_effect = None
        mock_provider.get_quote.return_value = None
        agg, _ = _aggregator(mock_provider)
        result = agg.fetch_quote("AAPL")
        assert result.status == FetchStatus.NO_DATA
        assert result.quote is None

    def test_with_name_uses_provider(self, mock_provider):
        mock_provider.table = {"AAPL": _raw("AAPL", 105.0, 100.0)}
        mock_provider.names = {"AAPL": "Apple Inc."}
        agg, _ = _aggregator(mock_provider)
        assert agg.fetch_quote("AAPL", with_name=True).quote.name == "Apple Inc."

    def test_with_name_falls_back_to_symbol(self, mock_provider):
        mock_provider.table = {"^VIX": _raw("^VIX", 15.0, 16.0)}
        agg, _ = _aggregator(mock_provider)
        assert agg.fetch_quote("^VIX", with_name=True).quote.name == "VIX"

    def test_name_lookup_error_falls_back(self, mock_provider):
        mock_provider.table = {"AAPL": _raw("AAPL", 105.0, 100.0)}
        mock_provider.get_company_name.side_effect = ProviderError("boom")
        agg, _ = _aggregator(mock_provider)
        assert agg.fetch_quote("AAPL", with_name=True).quote.name == "AAPL"

    def test_name_not_looked_up_by_default(self, mock_provider):
        mock_provider.table = {"AAPL": _raw("AAPL", 105.0, 100.0)}
        agg, _ = _aggregator(mock_provider)
        agg.fetch_quote("AAPL")
        mock_provider.get_company_name.assert_not_called()


# ---------------------------------------------------------------------------
# fetch_all
# ---------------------------------------------------------------------------

class TestFetchAll:
    def test_preserves_order(self, mock_provider):
        mock_provider.table = {s: _raw(s, 2.0, 1.0) for s in ["C", "A", "B"]}
        agg, _ = _aggregator(mock_provider)
        assert [r.symbol for r in agg.fetch_all(["C", "A", "B"])] == ["C", "A", "B"]

    def test_delay_between_requests_only(self, mock_provider):
        mock_provider.table = {s: _raw(s, 2.0, 1.0) for s in ["A", "B", "C", "D"]}
        agg, sleep = _aggregator(mock_provider, delay=0.1)
        agg.fetch_all(["A", "B", "C", "D"])
        assert sleep.call_count == 3
        sleep.assert_called_with(0.1)

    def test_single_symbol_never_sleeps(self, mock_provider):
        mock_provider.table = {"A": _raw("A", 2.0, 1.0)}
        agg, sleep = _aggregator(mock_provider, delay=0.1)
        agg.fetch_all(["A"])
        sleep.assert_not_called()

    def test_zero_delay_never_sleeps(self, mock_provider):
        mock_provider.table = {s: _raw(s, 2.0, 1.0) for s in ["A", "B"]}
        agg, sleep = _aggregator(mock_provider, delay=0)
        agg.fetch_all(["A", "B"])
        sleep.assert_not_called()

    def test_delay_applies_after_failures(self, mock_provider):
        mock_provider.table = {"A": ProviderError("x"), "C": _raw("C", 2.0, 1.0)}
        agg, sleep = _aggregator(mock_provider, delay=0.5)
        agg.fetch_all(["A", "B", "C"])
        assert sleep.call_count == 2

    def test_on_result_callback(self, mock_provider):
        mock_provider.table = {"A": _raw("A", 2.0, 1.0)}
        agg, _ = _aggregator(mock_provider)
        seen = []
        agg.fetch_all(["A", "B"], on_result=lambda i, total, r: seen.append((i, total, r.status)))
        assert seen == [(1, 2, FetchStatus.OK), (2, 2, FetchStatus.NO_DATA)]


# ---------------------------------------------------------------------------
# aggregate
# ---------------------------------------------------------------------------

class TestAggregate:
    def test_worked_example(self, mock_provider):
        mock_provider.table = {
            "A": _raw("A", 105, 100, 1000),
            "B": _raw("B", 95, 100, 5000),
            "C": _raw("C", 100, 100, 3000),
        }
        agg, _ = _aggregator(mock_provider)
        movers = agg.aggregate(["A", "B", "C"])
        assert [q.symbol for q in movers.gainers] == ["A"]
        assert movers.gainers[0].change_percent == pytest.approx(5.0)
        assert [q.symbol for q in movers.decliners] == ["B"]
        assert movers.decliners[0].change_percent == pytest.approx(-5.0)
        assert [q.symbol for q in movers.active] == ["B", "C", "A"]

    def test_one_symbol_fails(self, mock_provider):
        mock_provider.table = {
            "A": _raw("A", 110, 100, 100),
            "B": _raw("B", 90, 100, 200),
            "C": ProviderError("timeout"),
        }
        agg, _ = _aggregator(mock_provider)
        movers = agg.aggregate(["A", "B", "C"])
        assert [(q.symbol, round(q.change_percent, 2)) for q in movers.gainers] == [("A", 10.0)]
        assert [(q.symbol, round(q.change_percent, 2)) for q in movers.decliners] == [("B", -10.0)]
        assert [q.symbol for q in movers.active] == ["B", "A"]
        assert movers.skipped == ["C"]

    def test_failed_symbols_excluded_everywhere(self, mock_provider):
        mock_provider.table = {
            "A": _raw("A", 105, 100, 1000),
            "BAD": ProviderError("HTTP 500"),
        }
        agg, _ = _aggregator(mock_provider)
        movers = agg.aggregate(["A", "BAD", "MISSING"])
        for view in (movers.gainers, movers.decliners, movers.active, movers.quotes):
            assert "BAD" not in [q.symbol for q in view]
            assert "MISSING" not in [q.symbol for q in view]
        assert movers.skipped == ["BAD", "MISSING"]

    def test_all_fail_gives_empty_views(self, mock_provider):
        agg, _ = _aggregator(mock_provider)
        movers = agg.aggregate(["X", "Y"])
        assert movers.gainers == [] and movers.decliners == [] and movers.active == []

    def test_empty_input(self, mock_provider):
        agg, sleep = _aggregator(mock_provider, delay=0.1)
        movers = agg.aggregate([])
        assert movers.active == []
        sleep.assert_not_called()
        mock_provider.get_quote.assert_not_called()

    def test_limit_caps_each_view(self, mock_provider):
        symbols = [f"S{i}" for i in range(15)]
        mock_provider.table = {s: _raw(s, 100 + i + 1, 100, i) for i, s in enumerate(symbols)}
        agg, _ = _aggregator(mock_provider, limit=10)
        movers = agg.aggregate(symbols)
        assert len(movers.gainers) == 10
        assert len(movers.active) == 10
        assert len(movers.quotes) == 15
        assert movers.gainers[0].symbol == "S14"

    def test_limit_override(self, mock_provider):
        mock_provider.table = {s: _raw(s, 2.0, 1.0) for s in ["A", "B", "C"]}
        agg, _ = _aggregator(mock_provider, limit=10)
        assert len(agg.aggregate(["A", "B", "C"], limit=2).active) == 2


# ---------------------------------------------------------------------------
# rank_movers
# ---------------------------------------------------------------------------

class TestRankMovers:
    def test_unchanged_is_neither_gainer_nor_decliner(self, make_quote):
        movers = rank_movers([make_quote("FLAT", 100.0, 100.0)])
        assert movers.gainers == [] and movers.decliners == []
        assert [q.symbol for q in movers.active] == ["FLAT"]

    def test_ordering(self, make_quote):
        quotes = [
            make_quote("G1", 101.0, 100.0, volume=10),
            make_quote("G2", 103.0, 100.0, volume=30),
            make_quote("D1", 99.0, 100.0, volume=20),
            make_quote("D2", 90.0, 100.0, volume=5),
        ]
        movers = rank_movers(quotes)
        assert [q.symbol for q in movers.gainers] == ["G2", "G1"]
        assert [q.symbol for q in movers.decliners] == ["D2", "D1"]
        assert [q.symbol for q in movers.active] == ["G2", "D1", "G1", "D2"]

    def test_ties_keep_input_order(self, make_quote):
        quotes = [
            make_quote("X", 102.0, 100.0, volume=7),
            make_quote("Y", 102.0, 100.0, volume=7),
            make_quote("Z", 102.0, 100.0, volume=7),
        ]
        movers = rank_movers(quotes)
        assert [q.symbol for q in movers.gainers] == ["X", "Y", "Z"]
        assert [q.symbol for q in movers.active] == ["X", "Y", "Z"]

    def test_zero_limit(self, make_quote):
        movers = rank_movers([make_quote("A", 2.0, 1.0)], limit=0)
        assert movers.gainers == [] and movers.active == []
