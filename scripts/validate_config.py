#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Optional

import yaml

from event_lab.config.loader import ConfigLoader
from event_lab.config.validation import ConfigValidator, ValidationError
from event_lab.errors import InputValidationError
from event_lab.models.parameters import KIND_SPECS, parse_parameters


def validate_ticker_config(loader: ConfigLoader, ticker: str) -> list[ValidationError]:
    """Validate the merged configuration of one ticker."""
    return ConfigValidator.validate_config(loader.merge_config(ticker))


def validate_event_parameters(loader: ConfigLoader, ticker: str) -> list[str]:
    """Build the typed parameters of every event kind for a ticker."""
    problems = []
    for kind, spec in KIND_SPECS.items():
        values = loader.section(spec.section, ticker)
        if spec.section == "toy":
            values.setdefault("ticker", ticker)
        try:
            parse_parameters(kind, values)
        except InputValidationError as e:
            problems.extend(f"{kind.value}: {error}" for error in e.errors)
    return problems


def main(config_dir: Optional[str] = None) -> None:
    """Main validation function."""
    print("🔍 Validating event analysis configuration...")

    loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
    tickers_file = loader.config_dir / "tickers.yaml"

    tickers = []
    if tickers_file.exists():
        with open(tickers_file) as f:
            tickers = list(((yaml.safe_load(f) or {}).get("tickers") or {}).keys())
    else:
        print(f"ℹ️  No {tickers_file} found, validating defaults only")

    all_valid = True

    for ticker in [*tickers, "UNKNOWN-TICKER"]:  # The last one uses defaults
        print(f"\n📊 Validating {ticker}...")

        errors = validate_ticker_config(loader, ticker)
        problems = [str(error) for error in errors] or validate_event_parameters(loader, ticker)

        if problems:
            print(f"❌ Found {len(problems)} validation errors:")
            for problem in problems:
                print(f"  • {problem}")
            all_valid = False
        else:
            print(f"✅ {ticker} configuration is valid")

    print("\n📋 Testing request-level overrides...")
    overrides = {"momentum": {"threshold": 2.0, "days": 40}}
    errors = ConfigValidator.validate_config(loader.merge_config("SPY", overrides))

    if errors:
        print("❌ Request override validation failed:")
        for error in errors:
            print(f"  • {error}")
        all_valid = False
    else:
        print("✅ Request override validation passed")

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
