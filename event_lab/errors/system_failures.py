"""
System failure error classifications.

These exceptions represent failures inside the analysis machinery itself,
as opposed to gaps in the data it was given.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class EngineExecutionError(SystemFailureError):
    """A detection engine failed while running its algorithm."""

    def __init__(self, message: str, engine_name: Optional[str] = None,
                 fallback: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.engine_name = engine_name
        self.fallback = fallback
