"""
Turn-of-Year seasonal analysis.

For every year in range, the configured calendar window (``11-19`` to
``01-19`` by default, crossing into the next year when the end month
precedes the start month) is resolved to trading sessions, its return is
classified as a Bullish, Bearish or Neutral signal, and forward returns are
measured from the window's closing session.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from ..data.models import EngineResult, MarketSeries, MatchEvent
from ..data.provider import MarketDataProvider
from ..errors import DataUnavailableError, TradingDayNotFoundError
from ..metrics.indicators import calculate_return, win_rate
from ..models.parameters import TOYParams
from ..models.results import TOYPeriod
from ..utils.time import parse_month_day, resolve_calendar_date, snap_to_trading_day
from .base import EventEngine, mean

# Trading days -> display label. 20/21, 40/42 and 60/63 share a label.
FORWARD_DAY_LABELS = {
    1: "1D", 2: "2D", 3: "3D", 4: "4D", 5: "1W",
    10: "2W", 15: "3W", 20: "1M", 21: "1M", 40: "2M",
    42: "2M", 60: "3M", 63: "3M", 126: "6M", 252: "12M",
}

SIGNAL_FORWARD_LABELS = ("1M", "3M", "6M", "12M")

BULLISH = "Bullish"
BEARISH = "Bearish"
NEUTRAL = "Neutral"


def forward_label(days: int) -> str:
    """Display label for a forward offset in trading days."""
    return FORWARD_DAY_LABELS.get(days, f"{days}D")


def classify_signal(toy_return: float, threshold: float) -> str:
    """Bullish at or above the threshold, Bearish below zero, else Neutral."""
    if toy_return >= threshold:
        return BULLISH
    if toy_return < 0:
        return BEARISH
    return NEUTRAL


class TOYSeasonalEngine(EventEngine):
    """Turn-of-Year barometer over an extended price history."""

    name = "TOY (Turn of Year)"

    def __init__(self, provider: Optional[MarketDataProvider] = None, **kwargs):
        super().__init__(**kwargs)
        self.provider = provider

    def fallback_message(self) -> str:
        return "TOY Barometer engine is temporarily unavailable. Please try again later."

    def _run(
        self,
        series: Optional[MarketSeries],
        params: TOYParams,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        if series is None and self.provider is not None:
            series = self.provider.get_history(params.ticker, params.lookback)
        series = self._require_series(series, params.ticker)

        self.logger.info("Running TOY analysis",
                         ticker=params.ticker,
                         first_year=params.first_year,
                         last_year=params.last_year,
                         toy_start=params.toy_start,
                         toy_end=params.toy_end)

        periods: list[TOYPeriod] = []
        skipped_years: list[dict[str, Any]] = []

        for year in range(params.first_year, params.last_year + 1):
            try:
                periods.append(self._analyze_year(series, year, params))
            except DataUnavailableError as e:
                self.logger.warning("Skipping TOY year", year=year, reason=str(e))
                skipped_years.append({"year": year, "reason": str(e)})

        toy_window = f"{params.toy_start} to {params.toy_end}"
        matches = tuple(
            MatchEvent(period.window_end_date, period.to_payload(toy_window))
            for period in periods
        )

        summary = {
            "total_periods": len(periods),
            "analysis_years": f"{params.first_year}-{params.last_year}",
            "toy_window": toy_window,
            "threshold": params.threshold,
            **self.summarize(periods, params),
        }

        return EngineResult(
            matches=matches,
            summary=summary,
            extras={
                "toy_periods": [period.to_payload(toy_window) for period in periods],
                "skipped_years": skipped_years,
                "metadata": {
                    "strategy": "toy_barometer",
                    "ticker": params.ticker,
                    "forward_days": list(params.forward_days),
                },
            },
            series=series,
        )

    def _analyze_year(self, series: MarketSeries, year: int, params: TOYParams) -> TOYPeriod:
        """
        Resolve and measure one year's window.

        Raises:
            TradingDayNotFoundError: If either boundary has no session nearby
        """
        start_month, start_day = parse_month_day(params.toy_start)
        end_month, end_day = parse_month_day(params.toy_end)
        end_year = year + 1 if end_month < start_month else year

        start_target = resolve_calendar_date(year, start_month, start_day)
        end_target = resolve_calendar_date(end_year, end_month, end_day)

        index = series.date_index
        start_session = snap_to_trading_day(start_target, index, params.search_window_days)
        end_session = snap_to_trading_day(end_target, index, params.search_window_days)

        if start_session is None or end_session is None:
            missing = start_target if start_session is None else end_target
            raise TradingDayNotFoundError(
                f"No trading days found for TOY period {year}",
                target_date=missing,
                search_days=params.search_window_days,
            )

        start_idx = index[start_session]
        end_idx = index[end_session]
        start_price = series[start_idx].close
        end_price = series[end_idx].close
        toy_return = calculate_return(start_price, end_price)

        return TOYPeriod(
            year=year,
            window_start_date=start_session,
            window_end_date=end_session,
            toy_return=toy_return,
            signal=classify_signal(toy_return, params.threshold),
            start_price=start_price,
            end_price=end_price,
            period_days=end_idx - start_idx + 1,
            forward_returns=self._forward_returns(series, end_idx, params.forward_days),
        )

    @staticmethod
    def _forward_returns(
        series: MarketSeries,
        start_idx: int,
        forward_days: Sequence[int]
    ) -> dict[str, Optional[float]]:
        start_price = series[start_idx].close
        returns: dict[str, Optional[float]] = {}
        for days in forward_days:
            future_idx = start_idx + days
            returns[forward_label(days)] = (
                calculate_return(start_price, series[future_idx].close)
                if future_idx < len(series) else None
            )
        return returns

    @staticmethod
    def summarize(periods: Sequence[TOYPeriod], params: TOYParams) -> dict[str, Any]:
        """Per-signal statistics, best and worst years and the current signal."""
        custom_window = not params.is_standard_window
        if not periods:
            return {
                "message": "No TOY periods analyzed",
                "historical_insight": "Insufficient data for analysis",
                "custom_window": custom_window,
                "current_signal": None,
            }

        by_signal = {
            signal: [period for period in periods if period.signal == signal]
            for signal in (BULLISH, BEARISH, NEUTRAL)
        }
        total = len(periods)

        summary: dict[str, Any] = {
            "methodology": f"Turn of Year analysis ({params.toy_start} to {params.toy_end})",
            "avg_toy_return": mean(period.toy_return for period in periods),
        }
        for signal, group in by_signal.items():
            key = signal.lower()
            summary[f"{key}_periods"] = len(group)
            summary[f"{key}_rate"] = len(group) / total
            summary[f"avg_{key}_toy_return"] = (
                mean(period.toy_return for period in group) if group else None
            )

        ranked = sorted(periods, key=lambda period: period.toy_return, reverse=True)
        best, worst = ranked[0], ranked[-1]
        summary["best_year"] = {"year": best.year, "toy_return": best.toy_return}
        summary["worst_year"] = {"year": worst.year, "toy_return": worst.toy_return}

        forward_by_signal: dict[str, dict[str, Any]] = {}
        for signal, group in by_signal.items():
            stats = {}
            for label in SIGNAL_FORWARD_LABELS:
                values = [
                    period.forward_returns[label]
                    for period in group
                    if period.forward_returns.get(label) is not None
                ]
                if values:
                    stats[label] = {
                        "avg_return": mean(values),
                        "win_rate": win_rate(values),
                        "samples": len(values),
                    }
            if stats:
                forward_by_signal[signal.lower()] = stats
        summary["forward_by_signal"] = forward_by_signal

        bullish_rate = summary["bullish_rate"] * 100
        window_note = (
            f" (custom period {params.toy_start} to {params.toy_end})" if custom_window else ""
        )
        summary["historical_insight"] = (
            f"TOY Barometer shows {bullish_rate:.1f}% bullish signals over {total} years{window_note}. "
            f"Average TOY return: {summary['avg_toy_return']:.2f}%. "
            f"Best: {best.year} ({best.toy_return:.2f}%), "
            f"Worst: {worst.year} ({worst.toy_return:.2f}%)"
        )
        summary["custom_window"] = custom_window

        latest = periods[-1]
        summary["current_signal"] = {
            "year": latest.year,
            "signal": latest.signal,
            "toy_return": latest.toy_return,
            "strength": abs(latest.toy_return),
        }
        return summary
