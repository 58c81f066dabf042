"""Tests for contextual market-regime filters."""

from datetime import date, timedelta

import pytest

from event_lab.config.defaults import FilterParams
from event_lab.data.models import MatchEvent
from event_lab.filters import ContextFilter, ContextualFilterService
from event_lab.filters.calendars import (
    FOMC_MEETINGS,
    earnings_seasons,
    fed_meetings,
    options_expirations,
)

FED_DAY = date(2022, 3, 16)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def service():
    return ContextualFilterService()


class TestCalendars:
    """Regime calendar generation."""

    def test_earnings_seasons(self):
        """Three in-year seasons per year plus Q4 for all but the last year."""
        seasons = earnings_seasons(2021, 2022)

        assert len(seasons) == 7
        q4 = [s for s in seasons if s.quarter == "Q4"]
        assert len(q4) == 1
        assert q4[0].start == date(2022, 1, 15)
        assert q4[0].period == "Q4 2021 Earnings"

    def test_fed_meetings_in_range(self):
        """Only meetings in the year range, in date order."""
        meetings = fed_meetings(2020, 2020)

        assert len(meetings) == 9
        assert [m.type for m in meetings].count("Emergency Cut") == 2
        assert all(a.date < b.date for a, b in zip(meetings, meetings[1:]))
        assert fed_meetings(2030, 2031) == []
        assert len(FOMC_MEETINGS) > 40

    def test_options_expirations(self):
        """Third Fridays, quarterly months flagged as triple witching."""
        expirations = options_expirations(2022, 2022)

        assert len(expirations) == 12
        assert expirations[2].date == date(2022, 3, 18)
        assert expirations[2].triple_witching
        assert sum(1 for e in expirations if e.triple_witching) == 4
        assert expirations[0].type == "Monthly Options Expiration"


class TestContextualFilterService:
    """Test suite for ContextualFilterService."""

    def test_fed_meeting_window(self, service):
        """Dates within three calendar days of a meeting are kept."""
        dates = [FED_DAY + timedelta(days=offset) for offset in range(-4, 5)]
        kept = service.apply_context_filters(dates, [ContextFilter.FED_MEETING])

        assert kept == [FED_DAY + timedelta(days=offset) for offset in range(-3, 4)]

    def test_earnings_season_includes_prior_year_q4(self, service):
        """January dates fall in the previous year's Q4 season."""
        dates = [date(2022, 1, 20), date(2022, 3, 1), date(2022, 4, 20)]
        kept = service.apply_context_filters(dates, ["EARNINGS_SEASON"])

        assert kept == [date(2022, 1, 20), date(2022, 4, 20)]

    def test_options_expiration_week(self, service):
        """Four days before through two days after the third Friday."""
        dates = [date(2022, 3, 13), date(2022, 3, 14), date(2022, 3, 20), date(2022, 3, 21)]
        kept = service.apply_context_filters(dates, [ContextFilter.OPTIONS_EXPIRATION])

        assert kept == [date(2022, 3, 14), date(2022, 3, 20)]

    def test_day_of_week(self, service):
        """Weekday names are matched case-insensitively."""
        dates = [date(2022, 3, 14), date(2022, 3, 15), date(2022, 3, 18)]
        kept = service.apply_context_filters(
            dates, [ContextFilter.DAY_OF_WEEK], {"day_filter": ["monday", "FRIDAY"]}
        )

        assert kept == [date(2022, 3, 14), date(2022, 3, 18)]

    def test_month_of_year(self, service):
        """Month numbers select calendar months."""
        dates = [date(2022, 1, 3), date(2022, 3, 14), date(2023, 3, 1)]
        kept = service.apply_context_filters(
            dates, [ContextFilter.MONTH_OF_YEAR], {"month_filter": [3]}
        )

        assert kept == [date(2022, 3, 14), date(2023, 3, 1)]

    def test_filters_without_values_are_skipped(self, service):
        """Day and month filters with nothing selected keep every date."""
        dates = [date(2022, 3, 14), date(2022, 3, 15)]

        assert service.apply_context_filters(dates, [ContextFilter.DAY_OF_WEEK]) == dates
        assert service.apply_context_filters(dates, [ContextFilter.MONTH_OF_YEAR], {}) == dates

    def test_filters_compose_with_and(self, service):
        """Every filter narrows the result of the previous one."""
        dates = [FED_DAY + timedelta(days=offset) for offset in range(-4, 5)]
        kept = service.apply_context_filters(
            dates,
            [ContextFilter.FED_MEETING, ContextFilter.DAY_OF_WEEK],
            {"day_filter": ["MONDAY"]},
        )

        assert kept == [date(2022, 3, 14)]

    def test_no_filters_returns_input(self, service):
        """Nothing to apply means nothing removed."""
        dates = [date(2022, 3, 14)]
        assert service.apply_context_filters(dates, []) == dates
        assert service.apply_context_filters([], [ContextFilter.FED_MEETING]) == []

    def test_unknown_filter_rejected(self, service):
        """Filter names outside the enum raise."""
        with pytest.raises(ValueError):
            service.apply_context_filters([date(2022, 3, 14)], ["FULL_MOON"])

    def test_filter_items_keeps_matches(self, service):
        """Matches are filtered by their date and returned intact."""
        inside = MatchEvent(FED_DAY, {"return": 5.0})
        outside = MatchEvent(date(2022, 4, 1), {"return": -5.0})

        kept = service.filter_items([inside, outside], [ContextFilter.FED_MEETING])

        assert kept == [inside]

    def test_filter_summary(self, service):
        """Active filters are described in order."""
        summary = service.get_filter_summary(
            ["EARNINGS_SEASON", "DAY_OF_WEEK", "MONTH_OF_YEAR"],
            {"day_filter": ["MONDAY"], "month_filter": [1, 3]},
        )

        assert summary == "during quarterly earnings periods, on mondays, in Jan and Mar"

    def test_regime_tables_are_memoized(self):
        """Tables are reused until the memo entry expires."""
        clock = FakeClock()
        service = ContextualFilterService(FilterParams(cache_ttl_seconds=100), clock=clock)

        first = service.regime_tables(2021, 2022)
        clock.now = 50.0
        assert service.regime_tables(2021, 2022) is first

        clock.now = 150.0
        rebuilt = service.regime_tables(2021, 2022)
        assert rebuilt is not first
        assert rebuilt == first

    def test_expired_entries_are_evicted(self):
        """Building any range drops every expired entry, not only the requested one."""
        clock = FakeClock()
        service = ContextualFilterService(FilterParams(cache_ttl_seconds=100), clock=clock)

        service.regime_tables(2019, 2020)
        clock.now = 60.0
        service.regime_tables(2021, 2022)
        assert set(service._cache) == {(2019, 2020), (2021, 2022)}

        clock.now = 120.0
        service.regime_tables(2023, 2024)
        assert set(service._cache) == {(2021, 2022), (2023, 2024)}

        clock.now = 500.0
        service.regime_tables(2023, 2024)
        assert set(service._cache) == {(2023, 2024)}

    def test_clear_cache(self):
        """Clearing forces a rebuild."""
        service = ContextualFilterService()
        first = service.regime_tables(2022, 2022)
        service.clear_cache()

        assert service.regime_tables(2022, 2022) is not first

    def test_custom_fed_window(self):
        """The meeting window width is configurable."""
        service = ContextualFilterService(FilterParams(fed_window_days=1))
        dates = [FED_DAY - timedelta(days=2), FED_DAY + timedelta(days=1)]

        assert service.apply_context_filters(dates, ["FED_MEETING"]) == [FED_DAY + timedelta(days=1)]
