"""Sustained trend detection relative to a simple moving average."""

from collections.abc import Mapping
from datetime import date
from typing import Optional

from ..data.models import EngineResult, MarketSeries, MatchEvent
from ..metrics.indicators import calculate_return, calculate_sma
from ..models.parameters import MomentumParams
from ..utils.time import calendar_days_between
from .base import EventEngine, mean


class MomentumEngine(EventEngine):
    """
    Finds windows of ``days`` sessions spent entirely on one side of the SMA.

    Bullish windows keep every close above the SMA and never draw down more
    than ``threshold`` % from the running peak. Bearish windows keep every
    close below the SMA and never rally more than ``threshold`` % off the
    running trough. A window whose end falls fewer than ``min_gap_days``
    calendar days after the previous match's end is skipped.
    """

    name = "Momentum Patterns"

    def _run(
        self,
        series: Optional[MarketSeries],
        params: MomentumParams,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        series = self._require_series(series)
        closes = series.closes()
        sma = calculate_sma(closes, params.sma_period)
        bullish = params.momentum_type == "bullish"
        days = params.days
        limit = abs(params.threshold)

        matches = []
        last_match_end: Optional[date] = None

        for i in range(params.sma_period, len(series) - days):
            end = series[i + days]
            if (last_match_end is not None
                    and calendar_days_between(last_match_end, end.date) < params.min_gap_days):
                continue

            if bullish:
                extreme = self._worst_drawdown(closes, sma, i, days)
                is_match = extreme is not None and extreme >= -limit
            else:
                extreme = self._max_rally(closes, sma, i, days)
                is_match = extreme is not None and extreme <= limit

            if not is_match:
                continue

            payload = {
                "start_price": closes[i],
                "end_price": end.close,
                "period_return": calculate_return(closes[i], end.close),
            }
            if bullish:
                payload["max_drawdown"] = extreme
                payload["days_above_sma"] = days
            else:
                payload["max_rally"] = extreme
                payload["days_below_sma"] = days

            matches.append(MatchEvent(end.date, payload))
            last_match_end = end.date

        side = "above" if bullish else "below"
        return EngineResult(
            matches=tuple(matches),
            summary={
                "total_matches": len(matches),
                "momentum_type": params.momentum_type,
                "avg_return": mean(m.payload["period_return"] for m in matches),
                "criteria": (
                    f"{params.momentum_type} momentum: {days} days {side} "
                    f"{params.sma_period}-SMA"
                ),
            },
        )

    @staticmethod
    def _worst_drawdown(
        closes: list[float],
        sma: list[Optional[float]],
        start: int,
        days: int
    ) -> Optional[float]:
        """Worst peak-to-close drawdown in %, or None if any close is not above its SMA."""
        peak = closes[start]
        worst = 0.0
        for j in range(start, start + days):
            average = sma[j]
            if average is None or closes[j] <= average:
                return None
            peak = max(peak, closes[j])
            worst = min(worst, calculate_return(peak, closes[j]))
        return worst

    @staticmethod
    def _max_rally(
        closes: list[float],
        sma: list[Optional[float]],
        start: int,
        days: int
    ) -> Optional[float]:
        """Largest trough-to-close rally in %, or None if any close is not below its SMA."""
        trough = closes[start]
        largest = 0.0
        for j in range(start, start + days):
            average = sma[j]
            if average is None or closes[j] >= average:
                return None
            trough = min(trough, closes[j])
            largest = max(largest, calculate_return(trough, closes[j]))
        return largest
