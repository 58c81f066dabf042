"""
Logging configuration and utilities for the event analysis system.
"""
from .config import (
    configure_logging,
    get_engine_logger,
    get_filter_logger,
    get_logger,
    log_engine_outcome,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "get_engine_logger",
    "get_filter_logger",
    "log_engine_outcome",
]
