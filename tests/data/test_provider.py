"""Tests for the market data provider layer."""

from datetime import date, timedelta
from unittest.mock import Mock

import pytest

from event_lab.data.models import MarketSeries
from event_lab.data.provider import InMemoryMarketDataProvider, fetch_many, parse_lookback
from event_lab.errors import DataUnavailableError


class TestParseLookback:
    """Lookback string conversion."""

    def test_units(self):
        """Day, week, month and year units."""
        assert parse_lookback("5d") == timedelta(days=5)
        assert parse_lookback("2w") == timedelta(days=14)
        assert parse_lookback("6mo") == timedelta(days=186)
        assert parse_lookback("5y") == timedelta(days=1830)

    def test_max_is_unbounded(self):
        assert parse_lookback("max") is None

    @pytest.mark.parametrize("value", ["", "5", "y5", "5 years"])
    def test_invalid(self, value):
        """Unknown formats are rejected."""
        with pytest.raises(ValueError):
            parse_lookback(value)


class TestInMemoryMarketDataProvider:
    """Test suite for InMemoryMarketDataProvider."""

    def test_history_trimmed_to_lookback(self, make_range_series):
        """Sessions older than the lookback are dropped."""
        series = make_range_series(date(2020, 1, 1), date(2022, 12, 30), symbol="SPY")
        provider = InMemoryMarketDataProvider({"SPY": series})

        trimmed = provider.get_history("SPY", "1y")

        assert trimmed.last_date == date(2022, 12, 30)
        assert trimmed.first_date >= date(2022, 12, 30) - timedelta(days=366)
        assert len(trimmed) < len(series)
        assert provider.get_history("SPY", "max") is series

    def test_unknown_symbol(self):
        """Unknown symbols return None."""
        assert InMemoryMarketDataProvider().get_history("NOPE", "5y") is None

    def test_add_series(self, make_series):
        provider = InMemoryMarketDataProvider()
        provider.add_series("QQQ", make_series([1.0, 2.0], symbol="QQQ"))

        assert provider.symbols() == ["QQQ"]

    def test_macro_snapshot(self, macro_snapshot):
        """Snapshots are served once set."""
        provider = InMemoryMarketDataProvider()
        with pytest.raises(DataUnavailableError):
            provider.get_macro_snapshot()

        provider.set_macro_snapshot(macro_snapshot)
        assert provider.get_macro_snapshot() is macro_snapshot


class TestFetchMany:
    """Concurrent series retrieval."""

    def test_fetches_each_symbol_once(self, provider):
        """Duplicates collapse into a single fetch."""
        results = fetch_many(provider, ["SPY", "^VIX", "SPY"], "5y")

        assert set(results) == {"SPY", "^VIX"}
        assert all(isinstance(series, MarketSeries) for series in results.values())

    def test_failed_fetch_maps_to_none(self, make_series):
        """A raising fetch does not abort the others."""
        good = make_series([1.0, 2.0], symbol="SPY")

        def get_history(symbol, lookback):
            if symbol == "BAD":
                raise ConnectionError("provider timeout")
            return good

        provider = Mock()
        provider.get_history.side_effect = get_history

        results = fetch_many(provider, ["SPY", "BAD"], "1y", max_workers=2)

        assert results == {"SPY": good, "BAD": None}
        assert provider.get_history.call_count == 2

    def test_no_symbols(self, provider):
        assert fetch_many(provider, [], "5y") == {}
