"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Sequence
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

import pytest

from event_lab.data.models import MacroSnapshot, MarketSeries, PricePoint
from event_lab.data.provider import InMemoryMarketDataProvider


def business_days(start: date, count: int) -> list[date]:
    """``count`` consecutive weekdays starting on (or after) ``start``."""
    days = []
    current = start
    while len(days) < count:
        if current.weekday() < 5:
            days.append(current)
        current += timedelta(days=1)
    return days


def build_series(
    closes: Sequence[float],
    start: date = date(2022, 1, 3),
    symbol: Optional[str] = "TEST",
    opens: Optional[Sequence[float]] = None
) -> MarketSeries:
    """Daily series on consecutive weekdays; opens default to the closes."""
    opens = opens if opens is not None else closes
    points = [
        PricePoint(
            date=session,
            open=opens[i],
            high=max(opens[i], closes[i]),
            low=min(opens[i], closes[i]),
            close=closes[i],
            volume=1_000_000.0,
        )
        for i, session in enumerate(business_days(start, len(closes)))
    ]
    return MarketSeries(points, symbol=symbol)


def build_range_series(
    start: date,
    end: date,
    daily_growth: float = 0.001,
    symbol: Optional[str] = "TEST"
) -> MarketSeries:
    """Weekday series between two dates growing by a constant rate per session."""
    points = []
    current = start
    price = 100.0
    while current <= end:
        if current.weekday() < 5:
            points.append(PricePoint(current, price, price, price, price, 1_000_000.0))
            price *= 1 + daily_growth
        current += timedelta(days=1)
    return MarketSeries(points, symbol=symbol)


@pytest.fixture
def make_series() -> Callable[..., MarketSeries]:
    """Factory for short synthetic series."""
    return build_series


@pytest.fixture
def make_range_series() -> Callable[..., MarketSeries]:
    """Factory for multi-year synthetic series."""
    return build_range_series


@pytest.fixture
def macro_snapshot() -> MacroSnapshot:
    """Sample macro readings."""
    return MacroSnapshot(cpi=3.5, dxy_ytd=2.0, policy_rate=5.25, as_of=date(2024, 6, 28))


@pytest.fixture
def provider(macro_snapshot: MacroSnapshot) -> InMemoryMarketDataProvider:
    """In-memory provider with a trending ticker, two sector series and a volatility index."""
    ticker_closes = [100.0 * 1.004 ** k for k in range(120)]
    # Two sharp drops on sessions 40 and 80
    ticker_closes[40] = ticker_closes[39] * 0.96
    ticker_closes[80] = ticker_closes[79] * 0.95

    vix_closes = [18.0] * 120
    vix_closes[40] = 31.0
    vix_closes[80] = 34.0

    return InMemoryMarketDataProvider(
        series={
            "SPY": build_series(ticker_closes, symbol="SPY"),
            "XLK": build_series([100.0 * 1.003 ** k for k in range(120)], symbol="XLK"),
            "XLF": build_series([100.0] * 120, symbol="XLF"),
            "^VIX": build_series(vix_closes, symbol="^VIX"),
        },
        macro=macro_snapshot,
    )


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Config directory with a small tickers.yaml."""
    (tmp_path / "tickers.yaml").write_text(
        "tickers:\n"
        "  SPY:\n"
        "    percent_move:\n"
        "      percent_move: 3.0\n"
        "      days: 1\n"
        "  QQQ:\n"
        "    momentum:\n"
        "      threshold: 1.5\n"
    )
    return tmp_path
