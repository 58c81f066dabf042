"""
Error classification system for market-event analysis.

This module provides the exception hierarchy used across the engines, the
coordinator and the statistics layer.
"""

from .data_quality import (
    DataQualityError,
    DataUnavailableError,
    MissingSeriesError,
    TradingDayNotFoundError,
    MatchDateNotFoundError,
    MalformedSeriesError,
)
from .system_failures import (
    SystemFailureError,
    EngineExecutionError,
)
from .recovery import (
    UnrecoverableError,
    RequestError,
    InputValidationError,
    UnknownEventKindError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "DataUnavailableError",
    "MissingSeriesError",
    "TradingDayNotFoundError",
    "MatchDateNotFoundError",
    "MalformedSeriesError",
    # System Failures
    "SystemFailureError",
    "EngineExecutionError",
    # Request Errors
    "UnrecoverableError",
    "RequestError",
    "InputValidationError",
    "UnknownEventKindError",
]
