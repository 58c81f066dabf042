"""Forward-return statistics for a set of event matches"""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Optional

import structlog

from ..config.defaults import DefaultConfig, get_default_config
from ..data.models import MarketSeries, MatchEvent
from ..errors import MatchDateNotFoundError
from ..models.results import ForwardReturnRow, ForwardReturnsReport, PerformanceRow
from ..utils.time import format_date
from .formatting import format_event_details
from .indicators import calculate_return, population_stdev, win_rate

logger = structlog.get_logger(__name__)

PERFORMANCE_HEADERS = ("Timeframe", "Avg Return", "Win Rate", "Best", "Worst", "Volatility", "Samples")

EMPTY_MESSAGE = "No historical instances found for this event pattern"
EMPTY_TABLE_MESSAGE = "No historical matches found for analysis"


class ForwardReturnsCalculator:
    """
    Measures what happened after each match over a set of timeframes

    A timeframe is a label and a trading-day offset: the ``1M`` return of a
    match is the close ``21`` sessions after the match date relative to the
    close on the match date.
    """

    def __init__(self, config: Optional[DefaultConfig] = None):
        self.config = config or get_default_config()

    @property
    def default_timeframes(self) -> dict[str, int]:
        return dict(self.config.forward_returns.timeframes)

    def calculate(
        self,
        series: MarketSeries,
        matches: Sequence[MatchEvent],
        timeframes: Optional[Mapping[str, int]] = None
    ) -> ForwardReturnsReport:
        """
        Calculate per-match forward returns and per-timeframe aggregates

        Args:
            series: Price series the forward returns are measured on
            matches: Engine matches (dates must be sessions of ``series``)
            timeframes: Label -> trading-day offset; defaults to the 11 standard ones

        Returns:
            ForwardReturnsReport; empty report with a message when there are no matches
        """
        periods = dict(timeframes) if timeframes else self.default_timeframes

        if not matches:
            return self.empty_report(periods)

        logger.info("Calculating forward returns",
                    match_count=len(matches),
                    timeframe_count=len(periods))

        samples: dict[str, list[float]] = {label: [] for label in periods}
        rows = []
        skipped = 0

        for match in matches:
            try:
                rows.append(self._match_row(series, match, periods, samples))
            except MatchDateNotFoundError as e:
                logger.warning("No data found for match date",
                               match_date=format_date(match.date),
                               error=str(e))
                skipped += 1

        performance = [self._performance_row(label, samples[label]) for label in periods]
        ranked = sorted(performance, key=lambda row: row.return_vol_ratio, reverse=True)

        summary = self._summary(performance, len(matches), len(rows))

        logger.info("Forward returns calculated",
                    rows=len(rows),
                    skipped_matches=skipped)

        return ForwardReturnsReport(
            results=tuple(rows),
            summary=summary,
            rows=tuple(ranked),
            headers=PERFORMANCE_HEADERS,
            metadata={
                "total_matches": len(matches),
                "data_points_analyzed": len(rows),
                "skipped_matches": skipped,
                "timeframes": list(periods),
                "calculated_at": datetime.now(UTC).isoformat(),
            },
        )

    def empty_report(self, periods: Optional[Mapping[str, int]] = None) -> ForwardReturnsReport:
        """Report returned when an event pattern has no matches"""
        periods = dict(periods) if periods else self.default_timeframes
        return ForwardReturnsReport(
            results=(),
            summary={"total_matches": 0, "message": EMPTY_MESSAGE},
            rows=(),
            headers=PERFORMANCE_HEADERS,
            message=EMPTY_TABLE_MESSAGE,
            metadata={
                "total_matches": 0,
                "data_points_analyzed": 0,
                "skipped_matches": 0,
                "timeframes": list(periods),
                "calculated_at": datetime.now(UTC).isoformat(),
            },
        )

    def _match_row(
        self,
        series: MarketSeries,
        match: MatchEvent,
        periods: Mapping[str, int],
        samples: dict[str, list[float]]
    ) -> ForwardReturnRow:
        index = series.index_of(match.date)
        if index is None:
            raise MatchDateNotFoundError(
                f"Match date {format_date(match.date)} is not a session of {series.symbol or 'the series'}",
                match_date=match.date,
            )

        price = series[index].close
        returns: dict[str, Optional[float]] = {}
        for label, offset in periods.items():
            future_index = index + offset
            if future_index < len(series):
                value = calculate_return(price, series[future_index].close)
                returns[label] = value
                samples[label].append(value)
            else:
                returns[label] = None

        return ForwardReturnRow(
            match_date=match.date,
            price=price,
            event_details=format_event_details(match.payload),
            returns=returns,
        )

    @staticmethod
    def _performance_row(label: str, values: list[float]) -> PerformanceRow:
        if not values:
            return PerformanceRow(timeframe=label)

        avg_return = sum(values) / len(values)
        volatility = population_stdev(values)
        return PerformanceRow(
            timeframe=label,
            avg_return=avg_return,
            win_rate=win_rate(values),
            best=max(values),
            worst=min(values),
            volatility=volatility,
            sample_count=len(values),
            return_vol_ratio=avg_return / volatility if volatility > 0 else 0.0,
        )

    @staticmethod
    def _summary(
        performance: Sequence[PerformanceRow],
        total_matches: int,
        analyzed: int
    ) -> dict[str, Any]:
        summary: dict[str, Any] = {
            "total_matches": total_matches,
            "analyzed_matches": analyzed,
            "timeframes": {row.timeframe: row.to_dict() for row in performance},
        }

        scored = [row for row in performance if row.has_samples]
        if scored:
            best = max(scored, key=lambda row: row.avg_return * row.win_rate)
            summary["best_timeframe"] = best.timeframe
            summary["key_insight"] = (
                f"{best.timeframe} timeframe shows strongest edge with "
                f"{best.avg_return:.2f}% average return and {best.win_rate * 100:.1f}% win rate"
            )
        else:
            summary["key_insight"] = "Insufficient data for insights"

        return summary
