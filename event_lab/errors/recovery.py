"""
Recovery strategy classifications for request-level errors.

Request errors are surfaced to the caller immediately. Each one carries a
suggestion string that can be shown to the user as-is.
"""

from typing import Any, Optional


class UnrecoverableError(Exception):
    """Mixin for errors that require the caller to change the request."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = False


class RequestError(UnrecoverableError):
    """Base class for errors caused by the shape of an analysis request."""

    default_suggestion = "Check the request parameters and try again."

    def __init__(self, message: str, suggestion: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.suggestion = suggestion or self.default_suggestion


class InputValidationError(RequestError):
    """Request parameters failed validation before any engine ran."""

    default_suggestion = "Correct the listed parameters and resubmit the request."

    def __init__(self, message: str, errors: Optional[list[Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class UnknownEventKindError(RequestError):
    """The requested event kind has no registered engine."""

    default_suggestion = "Use one of the supported event kinds."

    def __init__(self, message: str, event_kind: Optional[str] = None,
                 available: Optional[list[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.event_kind = event_kind
        self.available = available or []
