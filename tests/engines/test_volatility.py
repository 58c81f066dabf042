"""Tests for volatility spike detection."""

import pytest

from event_lab.engines import VolatilityEngine
from event_lab.models.parameters import VolatilityParams


def params(condition: str = "any", threshold: float = 2.0) -> VolatilityParams:
    return VolatilityParams(
        volatility_symbol="^VIX",
        vix_threshold=25.0,
        price_condition=condition,
        price_threshold=threshold,
    )


@pytest.fixture
def spy(make_series):
    return make_series(
        closes=[100.0, 97.0, 98.0, 100.0],
        opens=[100.0, 99.0, 94.5, 98.0],
        symbol="SPY",
    )


@pytest.fixture
def vix(make_series):
    return make_series([20.0, 30.0, 31.0, 18.0], symbol="^VIX")


class TestVolatilityEngine:
    """Test suite for VolatilityEngine."""

    def test_companion_is_volatility_symbol(self):
        """The volatility index is fetched as a companion series."""
        assert VolatilityEngine().companion_symbols(params()) == ("^VIX",)

    def test_any_condition_matches_every_spike(self, spy, vix):
        """With no price condition every elevated session matches."""
        result = VolatilityEngine().analyze(spy, params(), {"^VIX": vix}).unwrap()

        assert [m.date for m in result.matches] == [spy[1].date, spy[2].date]
        assert result.summary["avg_vix"] == pytest.approx(30.5)

    def test_down_condition(self, spy, vix):
        """Only the 3% drop on an elevated session matches."""
        result = VolatilityEngine().analyze(spy, params("down"), {"^VIX": vix}).unwrap()

        assert result.match_count == 1
        match = result.matches[0]
        assert match.get("vix_level") == 30.0
        assert match.get("price_change") == pytest.approx(-3.0)
        assert match.get("price") == 97.0
        assert match.get("condition_met") == "VIX 30.0 + SPY -3.00%"

    def test_up_condition(self, spy, vix):
        """A 1% rise is below the 2% threshold."""
        result = VolatilityEngine().analyze(spy, params("up"), {"^VIX": vix}).unwrap()

        assert result.match_count == 0

    def test_gap_down_uses_open_gap(self, spy, vix):
        """Session 1 closes 3% lower but only gapped 1%; session 2 gapped 2.6%."""
        result = VolatilityEngine().analyze(spy, params("gap_down"), {"^VIX": vix}).unwrap()

        assert [m.date for m in result.matches] == [spy[2].date]

    def test_missing_volatility_series(self, spy):
        """Without the index series the engine fails and records it."""
        engine = VolatilityEngine()
        outcome = engine.analyze(spy, params(), {})

        assert not outcome.success
        assert outcome.fallback == "Volatility Events engine is temporarily unavailable. Please try again later."
        assert not engine.health.healthy
