"""
Canonical data models for daily market data and engine output.

This module defines immutable structures for price series and for the
matches engines produce. A MarketSeries is validated once at construction
and carries its own date index so that lookups by session date are O(1).
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union, overload

from ..errors import MalformedSeriesError
from ..utils.time import format_date


@dataclass(frozen=True)
class PricePoint:
    """One daily OHLCV bar."""
    date: date          # Session date
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


class MarketSeries:
    """
    Ordered daily price series for one symbol.

    Dates are strictly increasing with no duplicates. Integer positions are
    trading-day offsets: ``series[i + n]`` is n sessions after ``series[i]``.
    """

    __slots__ = ("symbol", "_points", "_index")

    def __init__(self, points: Iterable[PricePoint], symbol: Optional[str] = None):
        self.symbol = symbol
        self._points: tuple[PricePoint, ...] = tuple(points)
        self._index: dict[date, int] = {}

        previous: Optional[date] = None
        for position, point in enumerate(self._points):
            if previous is not None and point.date <= previous:
                raise MalformedSeriesError(
                    f"Series dates must be strictly increasing: {point.date} follows {previous}",
                    context={"symbol": symbol, "position": position},
                )
            self._index[point.date] = position
            previous = point.date

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self._points)

    def __bool__(self) -> bool:
        return bool(self._points)

    @overload
    def __getitem__(self, position: int) -> PricePoint: ...

    @overload
    def __getitem__(self, position: slice) -> tuple[PricePoint, ...]: ...

    def __getitem__(self, position: Union[int, slice]) -> Union[PricePoint, tuple[PricePoint, ...]]:
        return self._points[position]

    def __repr__(self) -> str:
        if not self._points:
            return f"MarketSeries(symbol={self.symbol!r}, empty)"
        return (
            f"MarketSeries(symbol={self.symbol!r}, points={len(self._points)}, "
            f"{self._points[0].date}..{self._points[-1].date})"
        )

    @property
    def date_index(self) -> Mapping[date, int]:
        """Session date -> position."""
        return self._index

    def index_of(self, session: date) -> Optional[int]:
        """Position of a session date, or None when absent."""
        return self._index.get(session)

    def has_date(self, session: date) -> bool:
        return session in self._index

    def dates(self) -> list[date]:
        return [point.date for point in self._points]

    def closes(self) -> list[float]:
        return [point.close for point in self._points]

    @property
    def first_date(self) -> Optional[date]:
        return self._points[0].date if self._points else None

    @property
    def last_date(self) -> Optional[date]:
        return self._points[-1].date if self._points else None


@dataclass(frozen=True)
class AlignedPoint:
    """Two bars from different series on the same session date."""
    date: date
    a: PricePoint
    b: PricePoint


@dataclass(frozen=True)
class MatchEvent:
    """A single pattern occurrence produced by one engine call."""
    date: date
    payload: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        result = {"date": format_date(self.date)}
        result.update(self.payload)
        return result


@dataclass(frozen=True)
class EngineResult:
    """
    Matches and summary statistics from one engine call.

    ``series`` is set by engines that load their own history; forward
    returns for their matches are measured on that same series.
    """
    matches: tuple[MatchEvent, ...] = ()
    summary: dict[str, Any] = field(default_factory=dict)
    extras: dict[str, Any] = field(default_factory=dict)
    series: Optional[MarketSeries] = field(default=None, compare=False, repr=False)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def to_dict(self) -> dict[str, Any]:
        return {
            "matches": [match.to_dict() for match in self.matches],
            "summary": dict(self.summary),
            **self.extras,
        }


@dataclass(frozen=True)
class MacroSnapshot:
    """Latest macro indicator readings supplied by the data provider."""
    cpi: float
    dxy_ytd: float
    policy_rate: float
    as_of: date
