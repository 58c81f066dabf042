"""Contextual regime filters for match dates."""

from .calendars import ContextFilter
from .contextual import ContextualFilterService

__all__ = ["ContextFilter", "ContextualFilterService"]
