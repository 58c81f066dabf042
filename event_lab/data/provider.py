"""
Market data provider interface.

Retrieval of market data is owned by an external collaborator. The analysis
layer only depends on the ``MarketDataProvider`` protocol below; the
in-memory implementation backs tests, examples and callers that already hold
their series.
"""

import re
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Optional, Protocol

import structlog

from ..errors import DataUnavailableError
from .models import MacroSnapshot, MarketSeries

logger = structlog.get_logger(__name__)

LOOKBACK_PATTERN = re.compile(r"^(\d+)(d|w|mo|y)$")
LOOKBACK_UNIT_DAYS = {"d": 1, "w": 7, "mo": 31, "y": 366}


class MarketDataProvider(Protocol):
    """Source of daily price series and macro readings."""

    def get_history(self, symbol: str, lookback: str) -> Optional[MarketSeries]:
        """Daily series for a symbol covering the lookback (e.g. ``5y``), or None."""
        ...

    def get_macro_snapshot(self) -> MacroSnapshot:
        """Latest macro indicator readings."""
        ...


def parse_lookback(lookback: str) -> Optional[timedelta]:
    """
    Convert a lookback string to a calendar span.

    ``max`` means unbounded and returns None. Units: d, w, mo, y.

    Raises:
        ValueError: If the lookback is not recognised
    """
    if lookback == "max":
        return None
    match = LOOKBACK_PATTERN.match(lookback or "")
    if not match:
        raise ValueError(f"Unsupported lookback {lookback!r}; expected e.g. 5d, 6mo, 10y or max")
    count, unit = match.groups()
    return timedelta(days=int(count) * LOOKBACK_UNIT_DAYS[unit])


class InMemoryMarketDataProvider:
    """Provider serving pre-built series from memory."""

    def __init__(
        self,
        series: Optional[Mapping[str, MarketSeries]] = None,
        macro: Optional[MacroSnapshot] = None
    ):
        self._series: dict[str, MarketSeries] = dict(series or {})
        self._macro = macro

    def add_series(self, symbol: str, series: MarketSeries) -> None:
        self._series[symbol] = series

    def set_macro_snapshot(self, snapshot: MacroSnapshot) -> None:
        self._macro = snapshot

    def symbols(self) -> list[str]:
        return sorted(self._series)

    def get_history(self, symbol: str, lookback: str) -> Optional[MarketSeries]:
        """Return the stored series trimmed to the lookback ending at its last date."""
        series = self._series.get(symbol)
        if series is None or not series:
            return series

        span = parse_lookback(lookback)
        if span is None:
            return series

        cutoff = series.last_date - span
        start = next((i for i, point in enumerate(series) if point.date >= cutoff), len(series))
        if start == 0:
            return series
        return MarketSeries(series[start:], symbol=series.symbol or symbol)

    def get_macro_snapshot(self) -> MacroSnapshot:
        if self._macro is None:
            raise DataUnavailableError("No macro snapshot available", data_type="macro")
        return self._macro


def fetch_many(
    provider: MarketDataProvider,
    symbols: Iterable[str],
    lookback: str,
    max_workers: int = 4
) -> dict[str, Optional[MarketSeries]]:
    """
    Fetch several series concurrently and join once all have arrived.

    A symbol whose fetch raises is reported as None; the caller decides
    whether that symbol was required.

    Args:
        provider: Market data provider
        symbols: Symbols to fetch (duplicates are fetched once)
        lookback: Lookback string passed to the provider
        max_workers: Thread pool size

    Returns:
        Mapping of symbol to series (or None when unavailable)
    """
    unique = list(dict.fromkeys(symbols))
    if not unique:
        return {}

    results: dict[str, Optional[MarketSeries]] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(unique)))) as executor:
        futures = {symbol: executor.submit(provider.get_history, symbol, lookback) for symbol in unique}
        for symbol, future in futures.items():
            try:
                results[symbol] = future.result()
            except Exception as e:
                logger.warning("Series fetch failed",
                               symbol=symbol,
                               lookback=lookback,
                               error=str(e),
                               error_type=type(e).__name__)
                results[symbol] = None

    logger.debug("Series fetch completed",
                 symbols=unique,
                 available=[s for s, series in results.items() if series])
    return results
