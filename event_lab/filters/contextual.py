"""
Contextual date filters.

Narrows a list of match dates to those falling inside market regimes:
earnings seasons, FOMC meeting windows, options expiration weeks, given
weekdays or given months. Filters are applied in order and compose with AND.
"""

import threading
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional, TypeVar, Union

from ..config.defaults import FilterParams
from ..logging.config import get_filter_logger
from ..utils.time import MONTH_ABBREVIATIONS, weekday_name
from .calendars import (
    ContextFilter,
    EarningsSeason,
    FedMeeting,
    OptionsExpiration,
    earnings_seasons,
    fed_meetings,
    options_expirations,
)

T = TypeVar("T")

FILTER_DESCRIPTIONS = {
    ContextFilter.EARNINGS_SEASON: "during quarterly earnings periods",
    ContextFilter.FED_MEETING: "around Federal Reserve meeting dates",
    ContextFilter.OPTIONS_EXPIRATION: "during options expiration weeks",
}


@dataclass(frozen=True)
class RegimeTables:
    """Regime calendars for one year range."""
    start_year: int
    end_year: int
    earnings: tuple[EarningsSeason, ...]
    fed: tuple[FedMeeting, ...]
    expirations: tuple[OptionsExpiration, ...]


class ContextualFilterService:
    """Applies regime filters to dates, memoizing calendars per year range."""

    def __init__(
        self,
        params: Optional[FilterParams] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.params = params or FilterParams()
        self._clock = clock
        self._cache: dict[tuple[int, int], tuple[float, RegimeTables]] = {}
        self._lock = threading.Lock()
        self.logger = get_filter_logger(__name__)

    def regime_tables(self, start_year: int, end_year: int) -> RegimeTables:
        """Calendars for a year range, rebuilt once the memo entry expires."""
        key = (start_year, end_year)
        now = self._clock()

        with self._lock:
            ttl = self.params.cache_ttl_seconds
            expired = [k for k, (built_at, _) in self._cache.items() if now - built_at >= ttl]
            for stale in expired:
                del self._cache[stale]

            cached = self._cache.get(key)
            if cached is not None:
                return cached[1]

            tables = RegimeTables(
                start_year=start_year,
                end_year=end_year,
                earnings=tuple(earnings_seasons(start_year, end_year)),
                fed=tuple(fed_meetings(start_year, end_year)),
                expirations=tuple(options_expirations(start_year, end_year)),
            )
            self._cache[key] = (now, tables)

        self.logger.debug("Regime tables built",
                          start_year=start_year,
                          end_year=end_year,
                          earnings_seasons=len(tables.earnings),
                          fed_meetings=len(tables.fed),
                          expirations=len(tables.expirations))
        return tables

    def is_earnings_season(self, value: date, tables: RegimeTables) -> bool:
        return any(season.contains(value) for season in tables.earnings)

    def is_fed_meeting_window(self, value: date, tables: RegimeTables) -> bool:
        window = timedelta(days=self.params.fed_window_days)
        return any(
            meeting.date - window <= value <= meeting.date + window
            for meeting in tables.fed
        )

    def is_options_expiration_week(self, value: date, tables: RegimeTables) -> bool:
        before = timedelta(days=self.params.opex_days_before)
        after = timedelta(days=self.params.opex_days_after)
        return any(
            expiration.date - before <= value <= expiration.date + after
            for expiration in tables.expirations
        )

    def apply_context_filters(
        self,
        dates: Sequence[date],
        filters: Iterable[Union[str, ContextFilter]],
        additional_filters: Optional[Mapping[str, Any]] = None
    ) -> list[date]:
        """
        Keep the dates that satisfy every filter.

        Args:
            dates: Dates to filter, order is preserved
            filters: Filter names applied in order
            additional_filters: ``day_filter`` (weekday names) and
                ``month_filter`` (month numbers 1-12)

        Returns:
            Filtered dates
        """
        return self.filter_items(dates, filters, additional_filters, key=lambda value: value)

    def filter_items(
        self,
        items: Sequence[T],
        filters: Iterable[Union[str, ContextFilter]],
        additional_filters: Optional[Mapping[str, Any]] = None,
        key: Callable[[T], date] = lambda item: item.date  # type: ignore[attr-defined]
    ) -> list[T]:
        """Filter arbitrary dated items (e.g. matches) by their date."""
        filters = [ContextFilter(f) for f in filters]
        additional_filters = additional_filters or {}
        remaining = list(items)

        if not filters or not remaining:
            return remaining

        years = [key(item).year for item in remaining]
        tables = self.regime_tables(min(years) - 1, max(years))

        for context_filter in filters:
            before = len(remaining)

            if context_filter is ContextFilter.EARNINGS_SEASON:
                remaining = [i for i in remaining if self.is_earnings_season(key(i), tables)]

            elif context_filter is ContextFilter.FED_MEETING:
                remaining = [i for i in remaining if self.is_fed_meeting_window(key(i), tables)]

            elif context_filter is ContextFilter.OPTIONS_EXPIRATION:
                remaining = [i for i in remaining if self.is_options_expiration_week(key(i), tables)]

            elif context_filter is ContextFilter.DAY_OF_WEEK:
                day_filter = additional_filters.get("day_filter")
                if not day_filter:
                    self.logger.info("Day-of-week filter skipped, no days given")
                    continue
                days = {day.upper() for day in day_filter}
                remaining = [i for i in remaining if weekday_name(key(i)) in days]

            elif context_filter is ContextFilter.MONTH_OF_YEAR:
                month_filter = additional_filters.get("month_filter")
                if not month_filter:
                    self.logger.info("Month-of-year filter skipped, no months given")
                    continue
                months = set(month_filter)
                remaining = [i for i in remaining if key(i).month in months]

            self.logger.debug("Context filter applied",
                              filter=context_filter.value,
                              before=before,
                              after=len(remaining))

        return remaining

    def get_filter_summary(
        self,
        filters: Iterable[Union[str, ContextFilter]],
        additional_filters: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Human-readable description of the active filters."""
        additional_filters = additional_filters or {}
        parts = []

        for context_filter in (ContextFilter(f) for f in filters):
            if context_filter in FILTER_DESCRIPTIONS:
                parts.append(FILTER_DESCRIPTIONS[context_filter])
            elif context_filter is ContextFilter.DAY_OF_WEEK and additional_filters.get("day_filter"):
                days = " and ".join(day.lower() for day in additional_filters["day_filter"])
                parts.append(f"on {days}s")
            elif context_filter is ContextFilter.MONTH_OF_YEAR and additional_filters.get("month_filter"):
                months = " and ".join(MONTH_ABBREVIATIONS[m - 1] for m in additional_filters["month_filter"])
                parts.append(f"in {months}")

        return ", ".join(parts)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
        self.logger.info("Contextual filter cache cleared")
