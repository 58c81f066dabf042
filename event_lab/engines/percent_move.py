"""Cumulative percent move detection."""

from collections.abc import Mapping
from typing import Optional

from ..data.models import EngineResult, MarketSeries, MatchEvent
from ..models.parameters import PercentMoveParams
from ..metrics.indicators import calculate_return
from .base import EventEngine, mean


class PercentMoveEngine(EventEngine):
    """Finds windows of ``days`` sessions whose close-to-close move reaches a threshold."""

    name = "Percent Move"

    def _run(
        self,
        series: Optional[MarketSeries],
        params: PercentMoveParams,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        series = self._require_series(series)
        threshold = params.percent_move
        days = params.days
        matches = []

        for i in range(len(series) - days):
            start = series[i]
            end = series[i + days]
            cumulative_return = calculate_return(start.close, end.close)

            if params.direction == "up":
                is_match = cumulative_return >= threshold
            elif params.direction == "down":
                is_match = cumulative_return <= -abs(threshold)
            else:
                is_match = abs(cumulative_return) >= abs(threshold)

            if is_match:
                matches.append(MatchEvent(end.date, {
                    "start_price": start.close,
                    "end_price": end.close,
                    "return": cumulative_return,
                    "direction": "up" if cumulative_return > 0 else "down",
                }))

        return EngineResult(
            matches=tuple(matches),
            summary={
                "total_matches": len(matches),
                "avg_return": mean(m.payload["return"] for m in matches),
                "criteria": f"{abs(threshold)}% moves over {days} days",
            },
        )
