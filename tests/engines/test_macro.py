"""Tests for the macro regime engine."""

from datetime import date

from event_lab.data.provider import InMemoryMarketDataProvider
from event_lab.engines import MacroEngine
from event_lab.models.parameters import MacroParams


class TestMacroEngine:
    """Test suite for MacroEngine."""

    def test_all_conditions_met(self, macro_snapshot):
        """Every supplied threshold at or below the reading yields one signal."""
        engine = MacroEngine(InMemoryMarketDataProvider(macro=macro_snapshot))
        result = engine.analyze(None, MacroParams(cpi_threshold=3.0, rate_threshold=5.25)).unwrap()

        assert result.match_count == 1
        assert result.matches[0].date == date(2024, 6, 28)
        assert result.matches[0].get("signal") == "Macro conditions met"
        assert result.summary["conditions_met"] == "2/2"
        assert result.summary["signal"] == "All macro conditions met"
        assert [c["metric"] for c in result.summary["conditions"]] == ["CPI", "Fed Funds Rate"]
        assert result.summary["current_macro"]["as_of"] == "2024-06-28"

    def test_partial_conditions(self, macro_snapshot):
        """One unmet threshold suppresses the signal."""
        engine = MacroEngine(InMemoryMarketDataProvider(macro=macro_snapshot))
        result = engine.analyze(None, MacroParams(cpi_threshold=4.0, dxy_threshold=1.0)).unwrap()

        assert result.match_count == 0
        assert result.summary["conditions_met"] == "1/2"
        assert result.summary["signal"] == "Macro conditions not met"
        cpi = result.summary["conditions"][0]
        assert cpi == {"metric": "CPI", "threshold": 4.0, "current": 3.5, "met": False}

    def test_no_thresholds_means_no_signal(self, macro_snapshot):
        """Without thresholds there is nothing to meet."""
        engine = MacroEngine(InMemoryMarketDataProvider(macro=macro_snapshot))
        result = engine.analyze(None, MacroParams()).unwrap()

        assert result.match_count == 0
        assert result.summary["conditions_met"] == "0/0"

    def test_unavailable_snapshot_fails(self):
        """Provider errors are isolated into a failed outcome."""
        engine = MacroEngine(InMemoryMarketDataProvider())
        outcome = engine.analyze(None, MacroParams(cpi_threshold=3.0))

        assert not outcome.success
        assert "No macro snapshot available" in outcome.error
        assert engine.health.snapshot().error_count == 1
