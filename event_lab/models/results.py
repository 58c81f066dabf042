"""Result models for forward-return statistics and seasonal periods."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..utils.time import format_date


@dataclass(frozen=True)
class PerformanceRow:
    """Aggregate forward performance for one timeframe."""
    timeframe: str
    avg_return: Optional[float] = None
    win_rate: Optional[float] = None                 # Fraction of positive returns
    best: Optional[float] = None
    worst: Optional[float] = None
    volatility: Optional[float] = None               # Population stdev
    sample_count: int = 0
    return_vol_ratio: float = 0.0

    @property
    def has_samples(self) -> bool:
        return self.sample_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeframe": self.timeframe,
            "avg_return": self.avg_return,
            "win_rate": self.win_rate,
            "best": self.best,
            "worst": self.worst,
            "volatility": self.volatility,
            "sample_count": self.sample_count,
            "return_vol_ratio": self.return_vol_ratio,
        }


@dataclass(frozen=True)
class ForwardReturnRow:
    """Forward returns measured from one match date."""
    match_date: date
    price: float
    event_details: str
    returns: dict[str, Optional[float]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "match_date": format_date(self.match_date),
            "price": self.price,
            "event_details": self.event_details,
        }
        for label, value in self.returns.items():
            result[label] = "N/A" if value is None else value
        return result


@dataclass(frozen=True)
class ForwardReturnsReport:
    """Per-match forward returns plus per-timeframe aggregates."""
    results: tuple[ForwardReturnRow, ...] = ()
    summary: dict[str, Any] = field(default_factory=dict)
    rows: tuple[PerformanceRow, ...] = ()
    headers: tuple[str, ...] = ()
    message: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.results

    @property
    def performance_table(self) -> dict[str, Any]:
        table: dict[str, Any] = {
            "headers": list(self.headers),
            "rows": [row.to_dict() for row in self.rows],
        }
        if self.message:
            table["message"] = self.message
        return table

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [row.to_dict() for row in self.results],
            "summary": dict(self.summary),
            "performance_table": self.performance_table,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class TOYPeriod:
    """One year's Turn-of-Year window and what followed it."""
    year: int
    window_start_date: date
    window_end_date: date
    toy_return: float
    signal: str                                      # Bullish, Bearish or Neutral
    start_price: float
    end_price: float
    period_days: int                                 # Trading sessions, inclusive
    forward_returns: dict[str, Optional[float]] = field(default_factory=dict)

    def to_payload(self, toy_window: str) -> dict[str, Any]:
        """Match payload (everything except the match date)."""
        payload: dict[str, Any] = {
            "year": self.year,
            "toy_start_date": format_date(self.window_start_date),
            "toy_end_date": format_date(self.window_end_date),
            "toy_return": self.toy_return,
            "signal": self.signal,
            "start_price": self.start_price,
            "end_price": self.end_price,
            "period_days": self.period_days,
            "toy_window": toy_window,
        }
        for label, value in self.forward_returns.items():
            payload[f"{label}_return"] = value
        return payload
