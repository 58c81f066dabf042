"""Configuration and request parameter validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..utils.time import MONTH_DAY_PATTERN

PERCENT_MOVE_DIRECTIONS = ("up", "down", "both")
REVERSAL_PATTERNS = ("bearish", "bullish")
MOMENTUM_TYPES = ("bullish", "bearish")
PRICE_CONDITIONS = ("any", "down", "up", "gap_down")
TOY_THRESHOLD_RANGE = (0.0, 20.0)


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any

    def __str__(self) -> str:
        return f"{self.field}: {self.message} (got: {self.value!r})"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration sections and per-request parameters."""

    @staticmethod
    def validate_percent_move_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate percent move parameters."""
        errors = []

        if "percent_move" in params and not _is_number(params["percent_move"]):
            errors.append(ValidationError(
                field="percent_move",
                message="Must be a number",
                value=params["percent_move"]
            ))

        if "days" in params and not _is_positive_int(params["days"]):
            errors.append(ValidationError(
                field="days",
                message="Must be a positive integer",
                value=params["days"]
            ))

        if "direction" in params and params["direction"] not in PERCENT_MOVE_DIRECTIONS:
            errors.append(ValidationError(
                field="direction",
                message=f"Must be one of {', '.join(PERCENT_MOVE_DIRECTIONS)}",
                value=params["direction"]
            ))

        return errors

    @staticmethod
    def validate_reversal_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate reversal parameters."""
        errors = []

        for name in ("open_threshold", "close_threshold"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number",
                        value=value
                    ))

        if "pattern" in params and params["pattern"] not in REVERSAL_PATTERNS:
            errors.append(ValidationError(
                field="pattern",
                message=f"Must be one of {', '.join(REVERSAL_PATTERNS)}",
                value=params["pattern"]
            ))

        return errors

    @staticmethod
    def validate_sector_spread_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate sector spread parameters."""
        errors = []

        for name in ("sector_a", "sector_b"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or not value.strip():
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-empty ticker symbol",
                        value=value
                    ))

        if params.get("sector_a") and params.get("sector_a") == params.get("sector_b"):
            errors.append(ValidationError(
                field="sector_b",
                message="Must differ from sector_a",
                value=params["sector_b"]
            ))

        if "spread_threshold" in params and not _is_number(params["spread_threshold"]):
            errors.append(ValidationError(
                field="spread_threshold",
                message="Must be a number",
                value=params["spread_threshold"]
            ))

        if "days" in params and not _is_positive_int(params["days"]):
            errors.append(ValidationError(
                field="days",
                message="Must be a positive integer",
                value=params["days"]
            ))

        return errors

    @staticmethod
    def validate_momentum_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate momentum parameters."""
        errors = []

        for name in ("sma_period", "days"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        if "threshold" in params:
            value = params["threshold"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="threshold",
                    message="Must be a non-negative number",
                    value=value
                ))

        if "min_gap_days" in params:
            value = params["min_gap_days"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="min_gap_days",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "momentum_type" in params and params["momentum_type"] not in MOMENTUM_TYPES:
            errors.append(ValidationError(
                field="momentum_type",
                message=f"Must be one of {', '.join(MOMENTUM_TYPES)}",
                value=params["momentum_type"]
            ))

        return errors

    @staticmethod
    def validate_volatility_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate volatility event parameters."""
        errors = []

        if "volatility_symbol" in params:
            value = params["volatility_symbol"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="volatility_symbol",
                    message="Must be a non-empty ticker symbol",
                    value=value
                ))

        for name in ("vix_threshold", "price_threshold"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number",
                        value=value
                    ))

        if "price_condition" in params and params["price_condition"] not in PRICE_CONDITIONS:
            errors.append(ValidationError(
                field="price_condition",
                message=f"Must be one of {', '.join(PRICE_CONDITIONS)}",
                value=params["price_condition"]
            ))

        return errors

    @staticmethod
    def validate_macro_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate macro thresholds."""
        errors = []

        for name in ("cpi_threshold", "dxy_threshold", "rate_threshold"):
            value = params.get(name)
            if value is not None and not _is_number(value):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a number or null",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_toy_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate Turn-of-Year parameters."""
        errors = []

        for name in ("toy_start", "toy_end"):
            if name not in params:
                continue
            value = params[name]
            if not isinstance(value, str) or not MONTH_DAY_PATTERN.match(value):
                errors.append(ValidationError(
                    field=name,
                    message="Must be in MM-DD format (e.g., 11-19)",
                    value=value
                ))
                continue

            month, day = (int(part) for part in value.split("-"))
            if month < 1 or month > 12:
                errors.append(ValidationError(
                    field=name,
                    message="Month must be between 1-12",
                    value=value
                ))
            if day < 1 or day > 31:
                errors.append(ValidationError(
                    field=name,
                    message="Day must be between 1-31",
                    value=value
                ))

        for name in ("first_year", "last_year"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer year",
                    value=params[name]
                ))

        first_year = params.get("first_year")
        last_year = params.get("last_year")
        if _is_positive_int(first_year) and _is_positive_int(last_year) and first_year >= last_year:
            errors.append(ValidationError(
                field="first_year",
                message="First year must be before last year",
                value=first_year
            ))

        if "threshold" in params:
            value = params["threshold"]
            low, high = TOY_THRESHOLD_RANGE
            if not _is_number(value) or value < low or value > high:
                errors.append(ValidationError(
                    field="threshold",
                    message="Threshold should be between 0% and 20%",
                    value=value
                ))

        if "forward_days" in params:
            value = params["forward_days"]
            if not isinstance(value, (list, tuple)) or not all(_is_positive_int(d) for d in value):
                errors.append(ValidationError(
                    field="forward_days",
                    message="Must be a list of positive integers",
                    value=value
                ))

        if "search_window_days" in params and not _is_positive_int(params["search_window_days"]):
            errors.append(ValidationError(
                field="search_window_days",
                message="Must be a positive integer",
                value=params["search_window_days"]
            ))

        return errors

    @staticmethod
    def validate_timeframes(timeframes: Any) -> list[ValidationError]:
        """Validate a forward-return timeframe map (label -> trading days)."""
        if not isinstance(timeframes, dict) or not timeframes:
            return [ValidationError(
                field="timeframes",
                message="Must be a non-empty mapping of label to trading days",
                value=timeframes
            )]

        errors = []
        for label, offset in timeframes.items():
            if not isinstance(label, str) or not _is_positive_int(offset):
                errors.append(ValidationError(
                    field=f"timeframes.{label}",
                    message="Offset must be a positive integer number of trading days",
                    value=offset
                ))
        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        section_validators = {
            "percent_move": ConfigValidator.validate_percent_move_params,
            "reversal": ConfigValidator.validate_reversal_params,
            "sector_spread": ConfigValidator.validate_sector_spread_params,
            "momentum": ConfigValidator.validate_momentum_params,
            "volatility": ConfigValidator.validate_volatility_params,
            "macro": ConfigValidator.validate_macro_params,
            "toy": ConfigValidator.validate_toy_params,
        }

        for section, validator in section_validators.items():
            if section in config:
                errors.extend(validator(config[section]))

        if "forward_returns" in config and "timeframes" in config["forward_returns"]:
            errors.extend(ConfigValidator.validate_timeframes(config["forward_returns"]["timeframes"]))

        return errors
