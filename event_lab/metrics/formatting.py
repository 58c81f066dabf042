"""Text rendering for forward-return results"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from ..models.results import ForwardReturnsReport, PerformanceRow

NOT_AVAILABLE = "N/A"


def _signed(value: float, decimals: int) -> str:
    return f"{'+' if value > 0 else ''}{value:.{decimals}f}%"


def format_return(value: Optional[float], with_marker: bool = False) -> str:
    """
    Format a percent return as ``+1.23%``

    Args:
        value: Return in percent, None when not measurable
        with_marker: Append a magnitude marker (large, significant, up, down, flat)

    Returns:
        Formatted return or ``N/A``
    """
    if value is None:
        return NOT_AVAILABLE

    formatted = f"{'+' if value >= 0 else ''}{value:.2f}%"
    if not with_marker:
        return formatted

    if abs(value) >= 10:
        marker = "large"
    elif abs(value) >= 5:
        marker = "significant"
    elif value > 0:
        marker = "up"
    elif value < 0:
        marker = "down"
    else:
        marker = "flat"
    return f"{formatted} ({marker})"


def format_rate(value: Optional[float]) -> str:
    """Format a fraction as a percentage with one decimal"""
    if value is None:
        return NOT_AVAILABLE
    return f"{value * 100:.1f}%"


def format_event_details(payload: Mapping[str, Any]) -> str:
    """One-line description of a match payload"""
    if payload.get("return") is not None:
        return f"{_signed(payload['return'], 2)} move"
    if payload.get("open_move") is not None and payload.get("close_move") is not None:
        return f"Open: {_signed(payload['open_move'], 1)}, Close: {_signed(payload['close_move'], 1)}"
    if payload.get("spread") is not None:
        return f"Spread: {_signed(payload['spread'], 2)}"
    if payload.get("vix_level") is not None:
        return f"VIX: {payload['vix_level']:.1f}, Price: {_signed(payload.get('price_change', 0.0), 2)}"
    if payload.get("toy_return") is not None:
        return f"TOY: {_signed(payload['toy_return'], 2)} ({payload.get('signal')})"
    if payload.get("period_return") is not None:
        return f"Trend: {_signed(payload['period_return'], 2)} over window"
    return "Event occurred"


def performance_row_cells(row: PerformanceRow) -> list[str]:
    return [
        row.timeframe,
        format_return(row.avg_return),
        format_rate(row.win_rate),
        format_return(row.best),
        format_return(row.worst),
        NOT_AVAILABLE if row.volatility is None else f"{row.volatility:.2f}%",
        str(row.sample_count),
    ]


def format_table(source: Union[ForwardReturnsReport, Sequence[PerformanceRow]],
                 headers: Optional[Sequence[str]] = None) -> str:
    """
    Render a performance table as a box-drawn text table

    Args:
        source: Report or performance rows (rendered in the given order)
        headers: Column headers; taken from the report when omitted

    Returns:
        Multi-line table, or a short notice when there are no rows
    """
    if isinstance(source, ForwardReturnsReport):
        rows = list(source.rows)
        headers = headers or source.headers
    else:
        rows = list(source)

    if not rows:
        return "No performance data available"

    headers = list(headers or ("Timeframe", "Avg Return", "Win Rate", "Best", "Worst", "Volatility", "Samples"))
    cells = [performance_row_cells(row) for row in rows]
    widths = [
        max(len(headers[i]), *(len(line[i]) for line in cells))
        for i in range(len(headers))
    ]

    def border(left: str, middle: str, right: str) -> str:
        return left + "─" + f"─{middle}─".join("─" * w for w in widths) + "─" + right

    def line(values: Sequence[str]) -> str:
        return "│ " + " │ ".join(value.ljust(widths[i]) for i, value in enumerate(values)) + " │"

    output = [border("┌", "┬", "┐"), line(headers), border("├", "┼", "┤")]
    output.extend(line(values) for values in cells)
    output.append(border("└", "┴", "┘"))
    return "\n".join(output)
