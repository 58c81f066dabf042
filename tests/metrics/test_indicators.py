"""Tests for price indicators and return statistics."""

import pytest

from event_lab.metrics.indicators import (
    calculate_return,
    calculate_sma,
    population_stdev,
    win_rate,
)


class TestCalculateSMA:
    """Test suite for the rolling SMA."""

    def test_sma_values(self):
        """Values before the first full window are None."""
        assert calculate_sma([1.0, 2.0, 3.0, 4.0], 2) == [None, 1.5, 2.5, 3.5]

    def test_sma_period_one_is_identity(self):
        """A one-session SMA equals the input."""
        assert calculate_sma([5.0, 7.0], 1) == [5.0, 7.0]

    def test_sma_longer_than_input(self):
        """No full window means no values."""
        assert calculate_sma([1.0, 2.0], 5) == [None, None]

    def test_sma_invalid_period(self):
        """Non-positive periods are rejected."""
        with pytest.raises(ValueError):
            calculate_sma([1.0], 0)


class TestReturnStatistics:
    """Test suite for return helpers."""

    def test_calculate_return(self):
        """Returns are expressed in percent."""
        assert calculate_return(100.0, 110.0) == pytest.approx(10.0)
        assert calculate_return(200.0, 190.0) == pytest.approx(-5.0)

    def test_population_stdev(self):
        """Population (not sample) deviation, 0 for a single value."""
        assert population_stdev([2.0, 4.0]) == pytest.approx(1.0)
        assert population_stdev([3.0]) == 0.0
        assert population_stdev([]) == 0.0

    def test_win_rate_is_fraction(self):
        """Zero returns are not wins."""
        assert win_rate([1.0, -1.0, 0.0, 2.0]) == 0.5
        assert win_rate([]) == 0.0
