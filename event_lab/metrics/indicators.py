"""Price indicators and return statistics used by the engines"""

import statistics
from collections.abc import Sequence
from typing import Optional


def calculate_sma(values: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Simple moving average with a rolling sum

    Args:
        values: Values in chronological order
        period: Window length

    Returns:
        List aligned with ``values``; None until a full window is available
    """
    if period <= 0:
        raise ValueError(f"SMA period must be positive, got {period}")

    result: list[Optional[float]] = [None] * len(values)
    window_sum = 0.0

    for i, value in enumerate(values):
        window_sum += value
        if i >= period:
            window_sum -= values[i - period]
        if i >= period - 1:
            result[i] = window_sum / period

    return result


def calculate_return(start_price: float, end_price: float) -> float:
    """
    Percent return between two prices

    Returns:
        (end - start) / start * 100
    """
    return (end_price - start_price) / start_price * 100


def population_stdev(values: Sequence[float]) -> float:
    """Population standard deviation, 0 for fewer than two values"""
    if len(values) < 2:
        return 0.0
    return statistics.pstdev(values)


def win_rate(values: Sequence[float]) -> float:
    """Fraction of values strictly greater than zero"""
    if not values:
        return 0.0
    return sum(1 for value in values if value > 0) / len(values)
