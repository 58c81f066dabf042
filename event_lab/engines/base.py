"""
Event engine abstraction with fault isolation.

Every detection algorithm runs inside ``EventEngine.analyze``. Any exception
raised by the algorithm is converted to a failed ``EngineOutcome`` at that
boundary, logged, and recorded in the engine's health record; the caller
never sees the exception itself.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from ..data.models import EngineResult, MarketSeries
from ..errors import EngineExecutionError, MissingSeriesError
from ..logging.config import get_engine_logger, log_engine_outcome
from ..state.health import HealthStatus


@dataclass(frozen=True)
class EngineOutcome:
    """Result of one engine call: a result on success, an error otherwise."""
    engine: str
    success: bool
    result: Optional[EngineResult] = None
    error: Optional[str] = None
    fallback: Optional[str] = None

    def unwrap(self) -> EngineResult:
        """
        Return the result or raise.

        Raises:
            EngineExecutionError: If the analysis failed
        """
        if not self.success or self.result is None:
            raise EngineExecutionError(
                self.error or f"{self.engine} analysis unavailable",
                engine_name=self.engine,
                fallback=self.fallback,
            )
        return self.result

    def to_dict(self) -> dict[str, Any]:
        if self.success and self.result is not None:
            return {"success": True, "engine": self.engine, "data": self.result.to_dict()}
        return {
            "success": False,
            "engine": self.engine,
            "error": self.error,
            "fallback": self.fallback,
        }


class EventEngine(ABC):
    """Base class for detection engines."""

    name: str = "Event"

    def __init__(self, health: Optional[HealthStatus] = None):
        self.health = health if health is not None else HealthStatus(self.name)
        self.logger = get_engine_logger(type(self).__module__, self.name)

    def companion_symbols(self, params: Any) -> tuple[str, ...]:
        """Extra series this engine needs besides the ticker series."""
        return ()

    def fallback_message(self) -> str:
        return f"{self.name} engine is temporarily unavailable. Please try again later."

    def analyze(
        self,
        series: Optional[MarketSeries],
        params: Any,
        companions: Optional[Mapping[str, Optional[MarketSeries]]] = None
    ) -> EngineOutcome:
        """
        Run the detection algorithm with fault isolation.

        Args:
            series: Ticker series (None for engines that do not scan a series)
            params: Typed parameter set for this engine
            companions: Companion series keyed by symbol

        Returns:
            EngineOutcome; never raises
        """
        try:
            result = self._run(series, params, companions or {})
        except Exception as e:
            message = str(e) or type(e).__name__
            self.health.record_failure(message)
            log_engine_outcome(
                self.logger,
                self.name,
                success=False,
                error=message,
                context={"error_type": type(e).__name__},
            )
            return EngineOutcome(
                engine=self.name,
                success=False,
                error=f"{self.name} analysis unavailable: {message}",
                fallback=self.fallback_message(),
            )

        self.health.record_success()
        log_engine_outcome(self.logger, self.name, success=True, match_count=result.match_count)
        return EngineOutcome(engine=self.name, success=True, result=result)

    @abstractmethod
    def _run(
        self,
        series: Optional[MarketSeries],
        params: Any,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        """Detection algorithm; may raise, the caller isolates failures."""
        pass

    def _require_series(self, series: Optional[MarketSeries], symbol: Optional[str] = None) -> MarketSeries:
        if series is None or not series:
            raise MissingSeriesError(f"No market data available for {symbol or 'ticker'}", symbol=symbol)
        return series

    def _require_companion(
        self,
        companions: Mapping[str, Optional[MarketSeries]],
        symbol: str
    ) -> MarketSeries:
        return self._require_series(companions.get(symbol), symbol)


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0 for no values."""
    values = list(values)
    return sum(values) / len(values) if values else 0.0
