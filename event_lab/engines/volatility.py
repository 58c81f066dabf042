"""Volatility-index spikes combined with a price condition."""

from collections.abc import Mapping
from typing import Optional

from ..data.aligner import SeriesAligner
from ..data.models import EngineResult, MarketSeries, MatchEvent
from ..metrics.indicators import calculate_return
from ..models.parameters import VolatilityParams
from .base import EventEngine, mean


class VolatilityEngine(EventEngine):
    """Finds sessions where the volatility index is elevated and price moved as requested."""

    name = "Volatility Events"

    def companion_symbols(self, params: VolatilityParams) -> tuple[str, ...]:
        return (params.volatility_symbol,)

    def _run(
        self,
        series: Optional[MarketSeries],
        params: VolatilityParams,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        series = self._require_series(series)
        vix_series = self._require_companion(companions, params.volatility_symbol)
        aligned = SeriesAligner.align(series, vix_series)
        symbol = series.symbol or "price"
        limit = abs(params.price_threshold)
        matches = []

        for i in range(1, len(aligned)):
            previous = aligned[i - 1].a
            bar = aligned[i].a
            vix_level = aligned[i].b.close
            price_change = calculate_return(previous.close, bar.close)

            if params.price_condition == "down":
                condition_met = price_change < -limit
            elif params.price_condition == "up":
                condition_met = price_change > limit
            elif params.price_condition == "gap_down":
                condition_met = calculate_return(previous.close, bar.open) <= -limit
            else:
                condition_met = True

            if vix_level >= params.vix_threshold and condition_met:
                matches.append(MatchEvent(bar.date, {
                    "vix_level": vix_level,
                    "price_change": price_change,
                    "price": bar.close,
                    "condition_met": f"VIX {vix_level:.1f} + {symbol} {price_change:.2f}%",
                }))

        return EngineResult(
            matches=tuple(matches),
            summary={
                "total_matches": len(matches),
                "avg_vix": mean(m.payload["vix_level"] for m in matches),
                "criteria": (
                    f"VIX >{params.vix_threshold} with {symbol} "
                    f"{params.price_condition} moves"
                ),
            },
        )
