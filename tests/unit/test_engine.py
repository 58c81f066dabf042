"""Unit tests for the engine coordinator."""

from unittest.mock import Mock

import pytest

from event_lab.data.provider import InMemoryMarketDataProvider
from event_lab.engine import EngineCoordinator, build_default_engines
from event_lab.engines import EngineOutcome, MomentumEngine, PercentMoveEngine
from event_lab.errors import InputValidationError, MissingSeriesError, UnknownEventKindError
from event_lab.models.parameters import EventKind, MomentumParams, TOYParams
from event_lab.state.health import HealthRegistry


@pytest.fixture
def coordinator(provider, config_dir):
    return EngineCoordinator.create(provider, config_dir)


class TestEngineRegistry:
    """Default engine wiring."""

    def test_every_kind_has_an_engine(self, provider):
        engines = build_default_engines(provider)

        assert set(engines) == set(EventKind)
        assert isinstance(engines[EventKind.PERCENT_MOVE], PercentMoveEngine)

    def test_momentum_kinds_have_separate_health(self, provider):
        """Both momentum kinds share an algorithm but not a health record."""
        registry = HealthRegistry()
        engines = build_default_engines(provider, registry)

        bullish = engines[EventKind.MOMENTUM_BULLISH]
        bearish = engines[EventKind.MOMENTUM_BEARISH]
        assert isinstance(bullish, MomentumEngine)
        assert bullish is not bearish
        assert bullish.health is not bearish.health
        assert registry.get("MOMENTUM_BEARISH") is bearish.health


class TestEngineCoordinator:
    """Test suite for EngineCoordinator."""

    def test_resolve_unknown_kind(self, coordinator):
        with pytest.raises(UnknownEventKindError):
            coordinator.resolve_kind("EARTHQUAKE")

    def test_resolve_kind_without_engine(self, provider):
        """Kinds missing from a custom registry are unknown to that coordinator."""
        coordinator = EngineCoordinator({EventKind.PERCENT_MOVE: PercentMoveEngine()}, provider)

        with pytest.raises(UnknownEventKindError) as exc_info:
            coordinator.resolve_kind("REVERSAL")

        assert exc_info.value.available == ["PERCENT_MOVE"]

    def test_build_parameters_precedence(self, coordinator):
        """Defaults, then ticker overrides, then request values."""
        params = coordinator.build_parameters(EventKind.PERCENT_MOVE, "SPY", {"direction": "down"})

        assert params.percent_move == 3.0
        assert params.days == 1
        assert params.direction == "down"

    def test_build_parameters_for_momentum_kind(self, coordinator):
        params = coordinator.build_parameters(EventKind.MOMENTUM_BEARISH, "QQQ")

        assert params == MomentumParams(
            sma_period=20, days=60, momentum_type="bearish", threshold=1.5, min_gap_days=30
        )

    def test_build_parameters_sets_toy_ticker(self, coordinator):
        params = coordinator.build_parameters(EventKind.TOY_BAROMETER, "SPY")

        assert isinstance(params, TOYParams)
        assert params.ticker == "SPY"
        assert params.first_year == 2000

    def test_build_parameters_rejects_invalid(self, coordinator):
        with pytest.raises(InputValidationError):
            coordinator.build_parameters(EventKind.PERCENT_MOVE, "SPY", {"days": -1})

    def test_analyze_event(self, coordinator):
        """Percent moves on the sample ticker: two drops and two rebounds."""
        analysis = coordinator.analyze_event("percent_move", "SPY")

        assert analysis.kind is EventKind.PERCENT_MOVE
        assert analysis.outcome.success
        assert analysis.outcome.unwrap().match_count == 4
        assert analysis.series is not None
        assert analysis.companions == {}

    def test_analyze_event_fetches_companions(self, coordinator):
        analysis = coordinator.analyze_event(EventKind.VOLATILITY_EVENT, "SPY")

        assert set(analysis.companions) == {"^VIX"}
        assert analysis.outcome.unwrap().match_count == 2

    def test_missing_ticker_series(self, coordinator):
        with pytest.raises(MissingSeriesError) as exc_info:
            coordinator.analyze_event("REVERSAL", "NOPE")

        assert exc_info.value.symbol == "NOPE"

    def test_self_sourced_kinds_skip_fetch(self, macro_snapshot, config_dir):
        """Macro analyses never request a ticker series."""
        provider = Mock()
        provider.get_macro_snapshot.return_value = macro_snapshot
        coordinator = EngineCoordinator.create(provider, config_dir)

        outcome = coordinator.run_event_analysis("MACRO_EVENT", "SPY", {"cpi_threshold": 3.0})

        assert isinstance(outcome, EngineOutcome)
        assert outcome.success
        provider.get_history.assert_not_called()

    def test_health_status(self, coordinator):
        """Health reflects each kind's own runs."""
        coordinator.analyze_event("PERCENT_MOVE", "SPY")
        coordinator.analyze_event("SECTOR_SPREAD", "SPY", {"sector_a": "XLK", "sector_b": "XLE"})

        status = coordinator.get_engine_health_status()
        assert status["PERCENT_MOVE"]["healthy"] is True
        assert status["PERCENT_MOVE"]["total_analyses"] == 1
        assert status["SECTOR_SPREAD"]["healthy"] is False
        assert status["REVERSAL"]["total_analyses"] == 0

        assert "SECTOR_SPREAD" not in coordinator.get_available_engines()
        overview = coordinator.get_health_overview()
        assert overview["overall"] == "degraded"
        assert "timestamp" in overview

    def test_all_healthy_overview(self, provider):
        coordinator = EngineCoordinator(build_default_engines(provider), provider)

        assert coordinator.get_health_overview()["overall"] == "healthy"
        assert len(coordinator.get_available_engines()) == 8
