"""
Main event analysis coordinator.

Dispatches an event kind to its engine, prepares the data the engine needs
and reports aggregated engine health:

Request → Parameters → Series fetch → Engine → EngineOutcome
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Optional, Union

import structlog

from .config.loader import ConfigLoader
from .data.models import MarketSeries
from .data.provider import MarketDataProvider, fetch_many
from .engines import (
    EngineOutcome,
    EventEngine,
    MacroEngine,
    MomentumEngine,
    PercentMoveEngine,
    ReversalEngine,
    SectorSpreadEngine,
    TOYSeasonalEngine,
    VolatilityEngine,
)
from .errors import MissingSeriesError, UnknownEventKindError
from .models.parameters import KIND_SPECS, EventKind, EventParams, parse_parameters
from .state.health import HealthRegistry, HealthStatus

logger = structlog.get_logger(__name__)

# Kinds whose engines do not scan the ticker series fetched by the coordinator
SELF_SOURCED_KINDS = frozenset({EventKind.TOY_BAROMETER, EventKind.MACRO_EVENT})


@dataclass(frozen=True)
class EventAnalysis:
    """Everything one coordinator call produced."""
    kind: EventKind
    ticker: str
    params: EventParams
    outcome: EngineOutcome
    series: Optional[MarketSeries] = None
    companions: Mapping[str, Optional[MarketSeries]] = field(default_factory=dict)


def build_default_engines(
    provider: MarketDataProvider,
    registry: Optional[HealthRegistry] = None
) -> dict[EventKind, EventEngine]:
    """
    Build the standard engine registry.

    Each kind gets its own engine instance and health record, so the two
    momentum kinds report health independently.
    """
    registry = registry or HealthRegistry()

    def health(kind: EventKind, engine_type: type[EventEngine]) -> HealthStatus:
        return registry.create(kind.value, engine_type.name)

    return {
        EventKind.PERCENT_MOVE: PercentMoveEngine(
            health=health(EventKind.PERCENT_MOVE, PercentMoveEngine)),
        EventKind.REVERSAL: ReversalEngine(
            health=health(EventKind.REVERSAL, ReversalEngine)),
        EventKind.SECTOR_SPREAD: SectorSpreadEngine(
            health=health(EventKind.SECTOR_SPREAD, SectorSpreadEngine)),
        EventKind.MOMENTUM_BULLISH: MomentumEngine(
            health=health(EventKind.MOMENTUM_BULLISH, MomentumEngine)),
        EventKind.MOMENTUM_BEARISH: MomentumEngine(
            health=health(EventKind.MOMENTUM_BEARISH, MomentumEngine)),
        EventKind.VOLATILITY_EVENT: VolatilityEngine(
            health=health(EventKind.VOLATILITY_EVENT, VolatilityEngine)),
        EventKind.MACRO_EVENT: MacroEngine(
            provider, health=health(EventKind.MACRO_EVENT, MacroEngine)),
        EventKind.TOY_BAROMETER: TOYSeasonalEngine(
            provider, health=health(EventKind.TOY_BAROMETER, TOYSeasonalEngine)),
    }


class EngineCoordinator:
    """
    Coordinator for the event detection engines.

    Manages the analysis pipeline up to the engine outcome:
    Kind lookup → Parameter merge/validation → Parallel data fetch → Engine
    """

    def __init__(
        self,
        engines: Mapping[EventKind, EventEngine],
        provider: MarketDataProvider,
        config_loader: Optional[ConfigLoader] = None
    ) -> None:
        """Initialize the coordinator with an explicit engine registry."""
        self.engines = dict(engines)
        self.provider = provider
        self.config_loader = config_loader or ConfigLoader.create()
        self.logger = logger

        self.logger.info("Engine coordinator initialized",
                         engines=[kind.value for kind in self.engines])

    @classmethod
    def create(
        cls,
        provider: MarketDataProvider,
        config_dir: Optional[str] = None
    ) -> "EngineCoordinator":
        """Coordinator wired with the default engines."""
        return cls(
            engines=build_default_engines(provider),
            provider=provider,
            config_loader=ConfigLoader.create(config_dir),
        )

    def resolve_kind(self, event_kind: Union[str, EventKind]) -> EventKind:
        """
        Resolve an event kind that has a registered engine.

        Raises:
            UnknownEventKindError: If the kind is unknown or has no engine
        """
        kind = EventKind.parse(event_kind)
        if kind not in self.engines:
            available = [k.value for k in self.engines]
            raise UnknownEventKindError(
                f"Unknown event kind: {kind.value}",
                event_kind=kind.value,
                available=available,
                suggestion=f"Use one of: {', '.join(available)}",
            )
        return kind

    def build_parameters(
        self,
        kind: EventKind,
        ticker: str,
        parameters: Optional[Mapping[str, Any]] = None
    ) -> EventParams:
        """
        Merge defaults, ticker overrides and request parameters into typed parameters.

        Raises:
            InputValidationError: If the merged parameters are invalid
        """
        section = KIND_SPECS[kind].section
        values = self.config_loader.section(section, ticker, dict(parameters or {}))
        if kind is EventKind.TOY_BAROMETER:
            values.setdefault("ticker", ticker)
        return parse_parameters(kind, values)

    def analyze_event(
        self,
        event_kind: Union[str, EventKind],
        ticker: str,
        parameters: Optional[Mapping[str, Any]] = None
    ) -> EventAnalysis:
        """
        Run one event analysis.

        Args:
            event_kind: Event kind name
            ticker: Symbol to analyze
            parameters: Request-level parameter overrides

        Returns:
            EventAnalysis carrying the engine outcome and the data it ran on

        Raises:
            UnknownEventKindError: If no engine handles the kind
            InputValidationError: If the parameters are invalid
            MissingSeriesError: If the ticker has no price data
        """
        kind = self.resolve_kind(event_kind)
        params = self.build_parameters(kind, ticker, parameters)
        engine = self.engines[kind]

        self.logger.info("Running event analysis", event_kind=kind.value, ticker=ticker)

        if kind in SELF_SOURCED_KINDS:
            outcome = engine.analyze(None, params)
            analyzed = outcome.result.series if outcome.result is not None else None
            return EventAnalysis(
                kind=kind, ticker=ticker, params=params, outcome=outcome, series=analyzed
            )

        companion_symbols = engine.companion_symbols(params)
        data_config = self.config_loader.defaults.data
        fetched = fetch_many(
            self.provider,
            (ticker, *companion_symbols),
            data_config.default_lookback,
            max_workers=data_config.fetch_workers,
        )

        series = fetched.get(ticker)
        if series is None or not series:
            raise MissingSeriesError(
                f"No market data available for {ticker}",
                symbol=ticker,
                context={"event_kind": kind.value},
            )

        companions = {symbol: fetched.get(symbol) for symbol in companion_symbols}
        outcome = engine.analyze(series, params, companions)
        return EventAnalysis(
            kind=kind,
            ticker=ticker,
            params=params,
            outcome=outcome,
            series=series,
            companions=companions,
        )

    def run_event_analysis(
        self,
        event_kind: Union[str, EventKind],
        ticker: str,
        parameters: Optional[Mapping[str, Any]] = None
    ) -> EngineOutcome:
        """Run one event analysis and return only the engine outcome."""
        return self.analyze_event(event_kind, ticker, parameters).outcome

    def get_engine_health_status(self) -> dict[str, dict[str, Any]]:
        """Per-kind health: name, healthy, success_rate, last_error, total_analyses."""
        return {kind.value: engine.health.to_dict() for kind, engine in self.engines.items()}

    def get_available_engines(self) -> list[str]:
        """Kinds whose engines are currently healthy."""
        return [kind.value for kind, engine in self.engines.items() if engine.health.healthy]

    def get_health_overview(self) -> dict[str, Any]:
        """Overall status plus per-engine detail."""
        status = self.get_engine_health_status()
        return {
            "overall": "healthy" if all(s["healthy"] for s in status.values()) else "degraded",
            "engines": status,
            "available": self.get_available_engines(),
            "timestamp": datetime.now(UTC).isoformat(),
        }
