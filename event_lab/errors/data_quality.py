"""
Data quality error classifications for price series processing.

These exceptions describe gaps or defects in market data that can usually be
absorbed locally: a skipped year, a skipped match row, a rejected series.
"""

from typing import Any, Optional


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class DataUnavailableError(DataQualityError):
    """Required market data could not be found."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class MissingSeriesError(DataUnavailableError):
    """No (or an empty) price series exists for a symbol."""

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs):
        super().__init__(message, data_type="series", **kwargs)
        self.symbol = symbol


class TradingDayNotFoundError(DataUnavailableError):
    """No trading session within the search window of a calendar date."""

    def __init__(self, message: str, target_date: Any = None,
                 search_days: Optional[int] = None, **kwargs):
        super().__init__(message, data_type="trading_day", **kwargs)
        self.target_date = target_date
        self.search_days = search_days


class MatchDateNotFoundError(DataUnavailableError):
    """A match date is absent from the series used for forward returns."""

    def __init__(self, message: str, match_date: Any = None, **kwargs):
        super().__init__(message, data_type="match_date", **kwargs)
        self.match_date = match_date


class MalformedSeriesError(DataQualityError):
    """Series data exists but violates ordering or field constraints."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
