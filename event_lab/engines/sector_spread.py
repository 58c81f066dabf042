"""Relative performance spread between two sector series."""

from collections.abc import Mapping
from typing import Optional

from ..data.aligner import SeriesAligner
from ..data.models import EngineResult, MarketSeries, MatchEvent
from ..models.parameters import SectorSpreadParams
from ..metrics.indicators import calculate_return
from .base import EventEngine, mean


class SectorSpreadEngine(EventEngine):
    """Finds windows where one sector outperforms another by at least a threshold."""

    name = "Sector Spread"

    def companion_symbols(self, params: SectorSpreadParams) -> tuple[str, ...]:
        return (params.sector_a, params.sector_b)

    def _run(
        self,
        series: Optional[MarketSeries],
        params: SectorSpreadParams,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        series_a = self._require_companion(companions, params.sector_a)
        series_b = self._require_companion(companions, params.sector_b)
        aligned = SeriesAligner.align(series_a, series_b)
        days = params.days
        matches = []

        for i in range(len(aligned) - days):
            start = aligned[i]
            end = aligned[i + days]
            return_a = calculate_return(start.a.close, end.a.close)
            return_b = calculate_return(start.b.close, end.b.close)
            spread = return_a - return_b

            if abs(spread) >= abs(params.spread_threshold):
                matches.append(MatchEvent(end.date, {
                    "sector_a": {
                        "symbol": params.sector_a,
                        "start": start.a.close,
                        "end": end.a.close,
                        "return": return_a,
                    },
                    "sector_b": {
                        "symbol": params.sector_b,
                        "start": start.b.close,
                        "end": end.b.close,
                        "return": return_b,
                    },
                    "spread": spread,
                    "outperformer": params.sector_a if spread > 0 else params.sector_b,
                }))

        self.logger.debug("Sector series aligned",
                          sector_a=params.sector_a,
                          sector_b=params.sector_b,
                          aligned_points=len(aligned))

        return EngineResult(
            matches=tuple(matches),
            summary={
                "total_matches": len(matches),
                "avg_spread": mean(abs(m.payload["spread"]) for m in matches),
                "criteria": (
                    f"{params.sector_a} vs {params.sector_b} spread "
                    f">{abs(params.spread_threshold)}% over {days} days"
                ),
            },
        )
