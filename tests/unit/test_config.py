"""Unit tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from event_lab.config.defaults import get_default_config
from event_lab.config.loader import ConfigLoader
from event_lab.config.validation import ConfigValidator

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Defaults match the documented analysis parameters."""
        config = get_default_config()

        assert config.percent_move.percent_move == 5.0
        assert config.momentum.sma_period == 20
        assert config.momentum.min_gap_days == 30
        assert config.volatility.volatility_symbol == "^VIX"
        assert config.toy.toy_start == "11-19"
        assert config.toy.forward_days == (5, 10, 15, 20, 40, 63, 126, 252)
        assert config.filters.fed_window_days == 3
        assert config.data.default_lookback == "5y"
        assert len(config.forward_returns.timeframes) == 11

    def test_defaults_pass_validation(self) -> None:
        """The shipped defaults are themselves valid."""
        config = ConfigLoader.create().merge_config("UNKNOWN-TICKER")

        assert ConfigValidator.validate_config(config) == []


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """The default config directory is the repository config folder."""
        loader = ConfigLoader.create()

        assert isinstance(loader.config_dir, Path)
        assert loader.config_dir.name == "config"

    def test_merge_config_defaults_only(self, tmp_path) -> None:
        """Without a tickers file only defaults apply."""
        loader = ConfigLoader.create(tmp_path)
        config = loader.merge_config("SPY")

        assert config["percent_move"]["percent_move"] == 5.0
        assert config["momentum"]["threshold"] == 1.2

    def test_ticker_overrides(self, config_dir) -> None:
        """Ticker entries override defaults field by field."""
        loader = ConfigLoader.create(config_dir)
        config = loader.merge_config("SPY")

        assert config["percent_move"]["percent_move"] == 3.0
        assert config["percent_move"]["days"] == 1
        assert config["percent_move"]["direction"] == "both"

    def test_request_overrides_win(self, config_dir) -> None:
        """Request values take precedence over ticker values."""
        loader = ConfigLoader.create(config_dir)
        values = loader.section("percent_move", "SPY", {"percent_move": 7.5})

        assert values == {"percent_move": 7.5, "days": 1, "direction": "both"}

    def test_section_for_other_ticker(self, config_dir) -> None:
        """Overrides are scoped to their ticker."""
        loader = ConfigLoader.create(config_dir)

        assert loader.section("momentum", "QQQ")["threshold"] == 1.5
        assert loader.section("momentum", "SPY")["threshold"] == 1.2

    def test_empty_tickers_file(self, tmp_path) -> None:
        """An empty YAML document means no overrides."""
        (tmp_path / "tickers.yaml").write_text("")
        loader = ConfigLoader.create(tmp_path)

        assert loader.load_ticker_config("SPY") == {}

    def test_repository_ticker_config_is_valid(self) -> None:
        """Every override shipped in config/tickers.yaml validates."""
        with open(REPO_CONFIG_DIR / "tickers.yaml") as f:
            tickers = yaml.safe_load(f)["tickers"]

        for ticker, sections in tickers.items():
            assert ConfigValidator.validate_config(sections) == [], ticker


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_percent_move_params(self) -> None:
        errors = ConfigValidator.validate_percent_move_params(
            {"percent_move": 5.0, "days": 5, "direction": "up"}
        )
        assert errors == []

    @pytest.mark.parametrize("params, field", [
        ({"days": 0}, "days"),
        ({"days": True}, "days"),
        ({"direction": "sideways"}, "direction"),
        ({"percent_move": "5"}, "percent_move"),
    ])
    def test_invalid_percent_move_params(self, params, field) -> None:
        errors = ConfigValidator.validate_percent_move_params(params)

        assert len(errors) == 1
        assert errors[0].field == field

    def test_sector_legs_must_differ(self) -> None:
        errors = ConfigValidator.validate_sector_spread_params({"sector_a": "XLK", "sector_b": "XLK"})

        assert [e.field for e in errors] == ["sector_b"]

    def test_toy_window_format(self) -> None:
        """MM-DD strings with real month and day ranges."""
        errors = ConfigValidator.validate_toy_params({"toy_start": "13-01", "toy_end": "1119"})

        assert {e.field for e in errors} == {"toy_start", "toy_end"}
        assert any("Month must be between 1-12" in e.message for e in errors)

    def test_toy_year_order_and_threshold(self) -> None:
        errors = ConfigValidator.validate_toy_params(
            {"first_year": 2020, "last_year": 2020, "threshold": 25.0}
        )

        assert {e.field for e in errors} == {"first_year", "threshold"}

    def test_macro_thresholds_allow_null(self) -> None:
        assert ConfigValidator.validate_macro_params({"cpi_threshold": None}) == []
        assert len(ConfigValidator.validate_macro_params({"cpi_threshold": "high"})) == 1

    def test_volatility_condition(self) -> None:
        errors = ConfigValidator.validate_volatility_params({"price_condition": "crash"})
        assert errors[0].field == "price_condition"

    def test_timeframes(self) -> None:
        assert ConfigValidator.validate_timeframes({"1W": 5}) == []
        assert len(ConfigValidator.validate_timeframes({})) == 1
        assert ConfigValidator.validate_timeframes({"1W": -5})[0].field == "timeframes.1W"

    def test_validation_error_str(self) -> None:
        error = ConfigValidator.validate_momentum_params({"sma_period": 0})[0]
        assert str(error) == "sma_period: Must be a positive integer (got: 0)"
