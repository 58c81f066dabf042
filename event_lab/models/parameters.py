"""
Typed per-kind analysis parameters.

Each event kind has one frozen parameter dataclass. Instances are only built
through ``parse_parameters`` which rejects unknown keys and invalid values
before any engine runs, so engines can rely on the fields being well-formed.
"""

from collections.abc import Callable, Mapping
from dataclasses import MISSING, dataclass, fields
from datetime import date
from enum import Enum
from typing import Any, Optional, Union

from ..config.validation import ConfigValidator, ValidationError
from ..errors import InputValidationError, UnknownEventKindError


class EventKind(str, Enum):
    """Supported event kinds."""
    PERCENT_MOVE = "PERCENT_MOVE"
    REVERSAL = "REVERSAL"
    SECTOR_SPREAD = "SECTOR_SPREAD"
    MOMENTUM_BULLISH = "MOMENTUM_BULLISH"
    MOMENTUM_BEARISH = "MOMENTUM_BEARISH"
    VOLATILITY_EVENT = "VOLATILITY_EVENT"
    MACRO_EVENT = "MACRO_EVENT"
    TOY_BAROMETER = "TOY_BAROMETER"

    @classmethod
    def parse(cls, value: Union[str, "EventKind"]) -> "EventKind":
        """
        Resolve an event kind from its name.

        Raises:
            UnknownEventKindError: If the name is not a supported kind
        """
        if isinstance(value, cls):
            return value
        name = value.strip().upper() if isinstance(value, str) else value
        try:
            return cls(name)
        except ValueError:
            available = [kind.value for kind in cls]
            raise UnknownEventKindError(
                f"Unknown event kind: {value}",
                event_kind=str(value),
                available=available,
                suggestion=f"Use one of: {', '.join(available)}",
            )


@dataclass(frozen=True)
class PercentMoveParams:
    percent_move: float
    days: int
    direction: str


@dataclass(frozen=True)
class ReversalParams:
    open_threshold: float
    close_threshold: float
    pattern: str


@dataclass(frozen=True)
class SectorSpreadParams:
    sector_a: str
    sector_b: str
    spread_threshold: float
    days: int


@dataclass(frozen=True)
class MomentumParams:
    sma_period: int
    days: int
    momentum_type: str
    threshold: float
    min_gap_days: int


@dataclass(frozen=True)
class VolatilityParams:
    volatility_symbol: str
    vix_threshold: float
    price_condition: str
    price_threshold: float


@dataclass(frozen=True)
class MacroParams:
    cpi_threshold: Optional[float] = None
    dxy_threshold: Optional[float] = None
    rate_threshold: Optional[float] = None

    def thresholds(self) -> dict[str, float]:
        """Supplied thresholds keyed by condition name."""
        supplied = {
            "cpi": self.cpi_threshold,
            "dxy": self.dxy_threshold,
            "rate": self.rate_threshold,
        }
        return {name: value for name, value in supplied.items() if value is not None}


@dataclass(frozen=True)
class TOYParams:
    ticker: str
    first_year: int
    last_year: int
    toy_start: str
    toy_end: str
    threshold: float
    forward_days: tuple[int, ...]
    search_window_days: int = 10
    lookback: str = "10y"

    @property
    def is_standard_window(self) -> bool:
        return self.toy_start == "11-19" and self.toy_end == "01-19"


EventParams = Union[
    PercentMoveParams,
    ReversalParams,
    SectorSpreadParams,
    MomentumParams,
    VolatilityParams,
    MacroParams,
    TOYParams,
]


@dataclass(frozen=True)
class KindSpec:
    """Binding between an event kind, its config section and its parameter type."""
    section: str
    params_type: type
    validator: Callable[[dict[str, Any]], list[ValidationError]]
    fixed: Mapping[str, Any]


KIND_SPECS: dict[EventKind, KindSpec] = {
    EventKind.PERCENT_MOVE: KindSpec(
        "percent_move", PercentMoveParams, ConfigValidator.validate_percent_move_params, {}),
    EventKind.REVERSAL: KindSpec(
        "reversal", ReversalParams, ConfigValidator.validate_reversal_params, {}),
    EventKind.SECTOR_SPREAD: KindSpec(
        "sector_spread", SectorSpreadParams, ConfigValidator.validate_sector_spread_params, {}),
    EventKind.MOMENTUM_BULLISH: KindSpec(
        "momentum", MomentumParams, ConfigValidator.validate_momentum_params,
        {"momentum_type": "bullish"}),
    EventKind.MOMENTUM_BEARISH: KindSpec(
        "momentum", MomentumParams, ConfigValidator.validate_momentum_params,
        {"momentum_type": "bearish"}),
    EventKind.VOLATILITY_EVENT: KindSpec(
        "volatility", VolatilityParams, ConfigValidator.validate_volatility_params, {}),
    EventKind.MACRO_EVENT: KindSpec(
        "macro", MacroParams, ConfigValidator.validate_macro_params, {}),
    EventKind.TOY_BAROMETER: KindSpec(
        "toy", TOYParams, ConfigValidator.validate_toy_params, {}),
}


def parse_parameters(kind: EventKind, values: Mapping[str, Any]) -> EventParams:
    """
    Build the typed parameter set for an event kind.

    ``values`` is the fully merged mapping (defaults, ticker overrides and
    request overrides). Kind-derived fields such as ``momentum_type`` are
    forced from the kind and may not be contradicted by the request.

    Raises:
        InputValidationError: On unknown keys, missing fields or invalid values
    """
    spec = KIND_SPECS[kind]
    values = dict(values)

    errors: list[ValidationError] = []
    for name, fixed_value in spec.fixed.items():
        supplied = values.get(name, fixed_value)
        if supplied != fixed_value:
            errors.append(ValidationError(
                field=name,
                message=f"Conflicts with event kind {kind.value}",
                value=supplied
            ))
        values[name] = fixed_value

    if kind is EventKind.TOY_BAROMETER:
        values.setdefault("last_year", date.today().year)
        if isinstance(values.get("forward_days"), list):
            values["forward_days"] = tuple(values["forward_days"])

    known = {f.name for f in fields(spec.params_type)}
    for name in sorted(set(values) - known):
        errors.append(ValidationError(
            field=name,
            message=f"Unknown parameter for {kind.value}",
            value=values[name]
        ))
    for name in sorted(known - set(values)):
        field_def = spec.params_type.__dataclass_fields__[name]
        if field_def.default is MISSING and field_def.default_factory is MISSING:
            errors.append(ValidationError(
                field=name,
                message="Required parameter is missing",
                value=None
            ))

    errors.extend(spec.validator(values))

    if errors:
        raise InputValidationError(
            f"Invalid parameters for {kind.value}: " + "; ".join(str(e) for e in errors),
            errors=errors,
        )

    return spec.params_type(**{name: values[name] for name in known if name in values})
