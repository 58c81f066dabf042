"""
Market regime calendars used by the contextual filters.

Earnings seasons and options expirations are generated from calendar rules;
FOMC decision dates come from a fixed table.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from ..utils.time import third_friday


class ContextFilter(str, Enum):
    """Supported contextual filters."""
    EARNINGS_SEASON = "EARNINGS_SEASON"
    FED_MEETING = "FED_MEETING"
    OPTIONS_EXPIRATION = "OPTIONS_EXPIRATION"
    DAY_OF_WEEK = "DAY_OF_WEEK"
    MONTH_OF_YEAR = "MONTH_OF_YEAR"


@dataclass(frozen=True)
class EarningsSeason:
    quarter: str
    year: int
    start: date
    end: date

    @property
    def period(self) -> str:
        return f"{self.quarter} {self.year} Earnings"

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True)
class FedMeeting:
    date: date
    type: str

    @property
    def year(self) -> int:
        return self.date.year


@dataclass(frozen=True)
class OptionsExpiration:
    date: date
    triple_witching: bool = False

    @property
    def type(self) -> str:
        if self.triple_witching:
            return "Quarterly Options Expiration (Triple Witching)"
        return "Monthly Options Expiration"


FOMC_DECISION = "FOMC Decision"
EMERGENCY_CUT = "Emergency Cut"

FOMC_MEETINGS: tuple[FedMeeting, ...] = (
    # 2020
    FedMeeting(date(2020, 1, 29), FOMC_DECISION),
    FedMeeting(date(2020, 3, 3), EMERGENCY_CUT),
    FedMeeting(date(2020, 3, 15), EMERGENCY_CUT),
    FedMeeting(date(2020, 4, 29), FOMC_DECISION),
    FedMeeting(date(2020, 6, 10), FOMC_DECISION),
    FedMeeting(date(2020, 7, 29), FOMC_DECISION),
    FedMeeting(date(2020, 9, 16), FOMC_DECISION),
    FedMeeting(date(2020, 11, 5), FOMC_DECISION),
    FedMeeting(date(2020, 12, 16), FOMC_DECISION),
    # 2021
    FedMeeting(date(2021, 1, 27), FOMC_DECISION),
    FedMeeting(date(2021, 3, 17), FOMC_DECISION),
    FedMeeting(date(2021, 4, 28), FOMC_DECISION),
    FedMeeting(date(2021, 6, 16), FOMC_DECISION),
    FedMeeting(date(2021, 7, 28), FOMC_DECISION),
    FedMeeting(date(2021, 9, 22), FOMC_DECISION),
    FedMeeting(date(2021, 11, 3), FOMC_DECISION),
    FedMeeting(date(2021, 12, 15), FOMC_DECISION),
    # 2022
    FedMeeting(date(2022, 1, 26), FOMC_DECISION),
    FedMeeting(date(2022, 3, 16), FOMC_DECISION),
    FedMeeting(date(2022, 5, 4), FOMC_DECISION),
    FedMeeting(date(2022, 6, 15), FOMC_DECISION),
    FedMeeting(date(2022, 7, 27), FOMC_DECISION),
    FedMeeting(date(2022, 9, 21), FOMC_DECISION),
    FedMeeting(date(2022, 11, 2), FOMC_DECISION),
    FedMeeting(date(2022, 12, 14), FOMC_DECISION),
    # 2023
    FedMeeting(date(2023, 2, 1), FOMC_DECISION),
    FedMeeting(date(2023, 3, 22), FOMC_DECISION),
    FedMeeting(date(2023, 5, 3), FOMC_DECISION),
    FedMeeting(date(2023, 6, 14), FOMC_DECISION),
    FedMeeting(date(2023, 7, 26), FOMC_DECISION),
    FedMeeting(date(2023, 9, 20), FOMC_DECISION),
    FedMeeting(date(2023, 11, 1), FOMC_DECISION),
    FedMeeting(date(2023, 12, 13), FOMC_DECISION),
    # 2024
    FedMeeting(date(2024, 1, 31), FOMC_DECISION),
    FedMeeting(date(2024, 3, 20), FOMC_DECISION),
    FedMeeting(date(2024, 5, 1), FOMC_DECISION),
    FedMeeting(date(2024, 6, 12), FOMC_DECISION),
    FedMeeting(date(2024, 7, 31), FOMC_DECISION),
    FedMeeting(date(2024, 9, 18), FOMC_DECISION),
    FedMeeting(date(2024, 11, 7), FOMC_DECISION),
    FedMeeting(date(2024, 12, 18), FOMC_DECISION),
    # 2025
    FedMeeting(date(2025, 1, 29), FOMC_DECISION),
    FedMeeting(date(2025, 3, 19), FOMC_DECISION),
    FedMeeting(date(2025, 5, 7), FOMC_DECISION),
    FedMeeting(date(2025, 6, 18), FOMC_DECISION),
    FedMeeting(date(2025, 7, 30), FOMC_DECISION),
    FedMeeting(date(2025, 9, 17), FOMC_DECISION),
    FedMeeting(date(2025, 10, 29), FOMC_DECISION),
    FedMeeting(date(2025, 12, 10), FOMC_DECISION),
)

# (quarter, start month, end month); seasons run from the 15th to the 15th
EARNINGS_WINDOWS = (
    ("Q1", 4, 5),
    ("Q2", 7, 8),
    ("Q3", 10, 11),
)

TRIPLE_WITCHING_MONTHS = (3, 6, 9, 12)


def earnings_seasons(start_year: int, end_year: int) -> list[EarningsSeason]:
    """
    Earnings seasons for a year range.

    Q4 results are reported from January 15 to February 15 of the following
    year; that season is only included for years before ``end_year``.
    """
    seasons = []
    for year in range(start_year, end_year + 1):
        for quarter, start_month, end_month in EARNINGS_WINDOWS:
            seasons.append(EarningsSeason(
                quarter=quarter,
                year=year,
                start=date(year, start_month, 15),
                end=date(year, end_month, 15),
            ))
        if year < end_year:
            seasons.append(EarningsSeason(
                quarter="Q4",
                year=year,
                start=date(year + 1, 1, 15),
                end=date(year + 1, 2, 15),
            ))
    return seasons


def fed_meetings(start_year: int, end_year: int) -> list[FedMeeting]:
    """Known FOMC decision dates within a year range, ascending."""
    meetings = [m for m in FOMC_MEETINGS if start_year <= m.year <= end_year]
    return sorted(meetings, key=lambda m: m.date)


def options_expirations(start_year: int, end_year: int) -> list[OptionsExpiration]:
    """Monthly options expirations (third Fridays) within a year range."""
    return [
        OptionsExpiration(
            date=third_friday(year, month),
            triple_witching=month in TRIPLE_WITCHING_MONTHS,
        )
        for year in range(start_year, end_year + 1)
        for month in range(1, 13)
    ]
