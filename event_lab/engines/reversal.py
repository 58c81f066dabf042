"""Gap-and-reverse intraday pattern detection."""

from collections.abc import Mapping
from typing import Optional

from ..data.models import EngineResult, MarketSeries, MatchEvent
from ..models.parameters import ReversalParams
from ..metrics.indicators import calculate_return
from .base import EventEngine, mean


class ReversalEngine(EventEngine):
    """
    Finds sessions that gap one way from the prior close and close the other way.

    Bearish: opens up at least ``open_threshold`` % and closes down at least
    ``close_threshold`` % from the open. Bullish mirrors it.
    """

    name = "Reversal Patterns"

    def _run(
        self,
        series: Optional[MarketSeries],
        params: ReversalParams,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        series = self._require_series(series)
        matches = []

        for i in range(1, len(series)):
            prev_close = series[i - 1].close
            bar = series[i]
            open_move = calculate_return(prev_close, bar.open)
            close_move = calculate_return(bar.open, bar.close)

            if params.pattern == "bearish":
                is_match = open_move >= params.open_threshold and close_move <= -params.close_threshold
            else:
                is_match = open_move <= -params.open_threshold and close_move >= params.close_threshold

            if is_match:
                matches.append(MatchEvent(bar.date, {
                    "prev_close": prev_close,
                    "open": bar.open,
                    "close": bar.close,
                    "open_move": open_move,
                    "close_move": close_move,
                    "pattern": params.pattern,
                    "reversal_size": abs(open_move + close_move),
                }))

        return EngineResult(
            matches=tuple(matches),
            summary={
                "total_matches": len(matches),
                "pattern_type": params.pattern,
                "avg_reversal": mean(m.payload["reversal_size"] for m in matches),
                "criteria": (
                    f"{params.pattern} reversals: open {params.open_threshold}%, "
                    f"close {params.close_threshold}%"
                ),
            },
        )
