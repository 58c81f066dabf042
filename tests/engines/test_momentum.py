"""Tests for SMA momentum detection."""

import pytest

from event_lab.engines import MomentumEngine
from event_lab.models.parameters import MomentumParams


def trend(growth: float, shock_at: int = 50, shock: float = 1.0, length: int = 90) -> list[float]:
    """Steady trend with a single one-session shock relative to the prior close."""
    closes = [100.0 * growth ** k for k in range(length)]
    closes[shock_at] = closes[shock_at - 1] * shock
    return closes


def params(momentum_type: str = "bullish", threshold: float = 1.2) -> MomentumParams:
    return MomentumParams(
        sma_period=20,
        days=60,
        momentum_type=momentum_type,
        threshold=threshold,
        min_gap_days=30,
    )


class TestBullishMomentum:
    """Bullish windows: every close above the SMA with bounded drawdown."""

    def test_shallow_dip_still_matches(self, make_series):
        """A 0.8% dip stays inside the 1.2% drawdown limit."""
        series = make_series(trend(1.005, shock=0.992))
        result = MomentumEngine().analyze(series, params()).unwrap()

        assert result.match_count == 1
        match = result.matches[0]
        assert match.date == series[80].date
        assert match.get("max_drawdown") == pytest.approx(-0.8)
        assert match.get("days_above_sma") == 60
        assert match.get("period_return") > 0

    def test_deep_dip_breaks_every_window(self, make_series):
        """A 1.5% dip inside every candidate window prevents any match."""
        series = make_series(trend(1.005, shock=0.985))

        assert MomentumEngine().analyze(series, params()).unwrap().match_count == 0

    def test_min_gap_suppresses_overlapping_windows(self, make_series):
        """Later windows ending within 30 calendar days of a match are skipped."""
        series = make_series(trend(1.005, length=200))
        result = MomentumEngine().analyze(series, params()).unwrap()

        dates = [match.date for match in result.matches]
        assert len(dates) > 1
        assert all((later - earlier).days >= 30 for earlier, later in zip(dates, dates[1:]))

    def test_close_below_sma_breaks_window(self, make_series):
        """A drop under the SMA disqualifies the window regardless of threshold."""
        series = make_series(trend(1.005, shock=0.9))

        assert MomentumEngine().analyze(series, params(threshold=50.0)).unwrap().match_count == 0


class TestBearishMomentum:
    """Bearish windows: every close below the SMA with bounded rally."""

    def test_small_bounce_matches(self, make_series):
        """A 0.8% bounce stays inside the 1.2% rally limit."""
        series = make_series(trend(0.995, shock=1.008))
        result = MomentumEngine().analyze(series, params("bearish")).unwrap()

        assert result.match_count == 1
        match = result.matches[0]
        assert match.get("max_rally") == pytest.approx(0.8)
        assert match.get("days_below_sma") == 60
        assert result.summary["momentum_type"] == "bearish"
        assert "below 20-SMA" in result.summary["criteria"]

    def test_uptrend_is_not_bearish(self, make_series):
        """A rising series never qualifies as bearish momentum."""
        series = make_series(trend(1.005))

        assert MomentumEngine().analyze(series, params("bearish")).unwrap().match_count == 0
