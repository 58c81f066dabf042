"""Forward-return statistics and price indicators"""

from .formatting import format_event_details, format_return, format_table
from .forward_returns import ForwardReturnsCalculator
from .indicators import calculate_return, calculate_sma, population_stdev, win_rate

__all__ = [
    "ForwardReturnsCalculator",
    "calculate_return",
    "calculate_sma",
    "population_stdev",
    "win_rate",
    "format_event_details",
    "format_return",
    "format_table",
]
