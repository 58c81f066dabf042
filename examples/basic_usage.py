#!/usr/bin/env python3
"""
Basic Usage Example - Market Event Analysis

This script demonstrates the analysis pipeline on synthetic daily data.
It shows how to:
- Load price records into an in-memory provider
- Run several event kinds through the pipeline
- Apply contextual filters and custom timeframes
- Render the performance table and inspect engine health

Run: python examples/basic_usage.py
"""

import math
from datetime import date, timedelta
from typing import Any

from event_lab.data.models import MacroSnapshot
from event_lab.data.parsers import parse_price_records
from event_lab.data.provider import InMemoryMarketDataProvider
from event_lab.engine import EngineCoordinator
from event_lab.logging import configure_logging
from event_lab.metrics.formatting import format_rate, format_return
from event_lab.pipeline import AnalysisPipeline


def create_price_records(start: date, sessions: int, drift: float, wave: float,
                         seed_price: float = 100.0) -> list[dict[str, Any]]:
    """Weekday OHLC records following a drifting sine wave."""
    records = []
    current = start
    close = seed_price
    while len(records) < sessions:
        if current.weekday() < 5:
            k = len(records)
            change = drift + wave * math.sin(k / 9.0) + 0.6 * wave * math.sin(k / 2.3)
            open_price = close * (1 + 0.3 * wave * math.cos(k / 1.7))
            close = close * (1 + change)
            records.append({
                "date": current.isoformat(),
                "open": round(open_price, 2),
                "high": round(max(open_price, close) * 1.004, 2),
                "low": round(min(open_price, close) * 0.996, 2),
                "close": round(close, 2),
                "volume": 50_000_000 + 1_000 * k,
            })
        current += timedelta(days=1)
    return records


def build_provider() -> InMemoryMarketDataProvider:
    """Provider holding a ticker, two sector ETFs and a volatility index."""
    start = date(2019, 1, 2)
    provider = InMemoryMarketDataProvider(macro=MacroSnapshot(
        cpi=3.2, dxy_ytd=1.5, policy_rate=5.25, as_of=date(2023, 12, 29)
    ))
    provider.add_series("SPY", parse_price_records(create_price_records(start, 1260, 0.0004, 0.012), "SPY"))
    provider.add_series("XLK", parse_price_records(create_price_records(start, 1260, 0.0006, 0.015), "XLK"))
    provider.add_series("XLF", parse_price_records(create_price_records(start, 1260, 0.0002, 0.010), "XLF"))
    provider.add_series("^VIX", parse_price_records(
        create_price_records(start, 1260, 0.0, 0.05, seed_price=20.0), "^VIX"
    ))
    return provider


def print_response(title: str, response: dict[str, Any]) -> None:
    """Print the headline numbers of a pipeline response."""
    print(f"📊 {title}")
    if not response["success"]:
        print(f"   ❌ {response['error_type']}: {response['error']}")
        print(f"   💡 {response['suggestion']}")
        print()
        return

    analysis = response["event_analysis"]
    print(f"   Matches: {analysis['matches']} (of {analysis['total_matches']})")

    summary = response["summary"]
    if "key_insight" in summary:
        print(f"   Insight: {summary['key_insight']}")
    if "message" in summary:
        print(f"   {summary['message']}")
    if "context_filters" in summary:
        print(f"   Filters: {summary['context_filters']} ({summary['filtered_matches']})")

    for row in response["performance_table"]["rows"][:3]:
        print(f"   {row['timeframe']:>4}: avg {format_return(row['avg_return'])}, "
              f"win {format_rate(row['win_rate'])}, n={row['sample_count']}")
    print()


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")

    print("🚀 Market Event Analysis - Basic Usage Demo")
    print("=" * 60)

    print("1. Building the in-memory market data provider...")
    provider = build_provider()
    print(f"   Symbols: {', '.join(provider.symbols())}")
    print()

    print("2. Initializing the pipeline...")
    pipeline = AnalysisPipeline(EngineCoordinator.create(provider))
    print()

    print("3. Running analyses...")
    print()
    print_response("SPY 3% moves over 3 days", pipeline.run({
        "event_kind": "PERCENT_MOVE",
        "ticker": "SPY",
        "parameters": {"percent_move": 3.0, "days": 3},
    }))
    print_response("SPY volatility spikes on down days", pipeline.run({
        "event_kind": "VOLATILITY_EVENT",
        "ticker": "SPY",
        "parameters": {"vix_threshold": 22.0, "price_condition": "down", "price_threshold": 1.0},
        "timeframes": {"1W": 5, "1M": 21, "3M": 63},
    }))
    print_response("XLK vs XLF sector spread around Fed meetings", pipeline.run({
        "event_kind": "SECTOR_SPREAD",
        "ticker": "SPY",
        "parameters": {"spread_threshold": 4.0},
        "context_filters": ["FED_MEETING"],
    }))
    print_response("Bearish reversals on Mondays", pipeline.run({
        "event_kind": "REVERSAL",
        "ticker": "SPY",
        "parameters": {"open_threshold": 0.5, "close_threshold": 0.5},
        "context_filters": ["DAY_OF_WEEK"],
        "additional_filters": {"day_filter": ["MONDAY"]},
    }))
    print_response("TOY barometer 2019-2022", pipeline.run({
        "event_kind": "TOY_BAROMETER",
        "ticker": "SPY",
        "parameters": {"first_year": 2019, "last_year": 2022},
    }))
    print_response("Macro regime", pipeline.run({
        "event_kind": "MACRO_EVENT",
        "ticker": "SPY",
        "parameters": {"cpi_threshold": 3.0, "rate_threshold": 5.0},
    }))
    print_response("Unknown ticker", pipeline.run({"event_kind": "REVERSAL", "ticker": "NOPE"}))

    print("4. Engine health:")
    overview = pipeline.coordinator.get_health_overview()
    print(f"   Overall: {overview['overall']}")
    for kind, status in overview["engines"].items():
        marker = "✅" if status["healthy"] else "❌"
        print(f"   {marker} {kind}: {status['total_analyses']} runs, "
              f"{format_rate(status['success_rate'])} success")


if __name__ == "__main__":
    main()
