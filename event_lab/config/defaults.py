"""Default configuration parameters for the event analysis system."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class PercentMoveDefaults:
    """Cumulative percent move detection."""
    percent_move: float = 5.0                        # Threshold move in %
    days: int = 5                                    # Lookback in trading days
    direction: str = "both"                          # up, down or both


@dataclass(frozen=True)
class ReversalDefaults:
    """Open-gap-then-reverse intraday pattern."""
    open_threshold: float = 2.0                      # Gap from prior close, %
    close_threshold: float = 1.0                     # Move from open to close, %
    pattern: str = "bearish"                         # bearish or bullish


@dataclass(frozen=True)
class SectorSpreadDefaults:
    """Relative performance between two sector series."""
    sector_a: str = "XLK"
    sector_b: str = "XLF"
    spread_threshold: float = 5.0                    # Return spread in %
    days: int = 10


@dataclass(frozen=True)
class MomentumDefaults:
    """Sustained trend relative to a simple moving average."""
    sma_period: int = 20
    days: int = 60                                   # Window that must hold the trend
    threshold: float = 1.2                           # Max drawdown / rally in %
    min_gap_days: int = 30                           # Calendar days between matches


@dataclass(frozen=True)
class VolatilityDefaults:
    """Volatility-index spikes combined with a price condition."""
    volatility_symbol: str = "^VIX"
    vix_threshold: float = 25.0
    price_condition: str = "any"                     # any, down, up, gap_down
    price_threshold: float = 2.0


@dataclass(frozen=True)
class MacroDefaults:
    """Macro regime thresholds; None means the condition is not checked."""
    cpi_threshold: Optional[float] = None
    dxy_threshold: Optional[float] = None
    rate_threshold: Optional[float] = None


@dataclass(frozen=True)
class TOYDefaults:
    """Turn-of-Year seasonal window."""
    first_year: int = 2000
    toy_start: str = "11-19"                         # MM-DD
    toy_end: str = "01-19"                           # MM-DD
    threshold: float = 3.0                           # Bullish threshold in %
    forward_days: tuple[int, ...] = (5, 10, 15, 20, 40, 63, 126, 252)
    search_window_days: int = 10                     # Calendar days to snap forward
    lookback: str = "10y"


@dataclass(frozen=True)
class ForwardReturnsParams:
    """Forward-return timeframes, label -> trading-day offset."""
    timeframes: dict[str, int] = field(default_factory=lambda: {
        "1D": 1,
        "2D": 2,
        "3D": 3,
        "4D": 4,
        "1W": 5,
        "2W": 10,
        "1M": 21,
        "2M": 42,
        "3M": 63,
        "6M": 126,
        "12M": 252,
    })


@dataclass(frozen=True)
class FilterParams:
    """Contextual filter windows and memo lifetime."""
    cache_ttl_seconds: int = 24 * 60 * 60
    fed_window_days: int = 3
    opex_days_before: int = 4
    opex_days_after: int = 2


@dataclass(frozen=True)
class DataParams:
    """Market data retrieval parameters."""
    default_lookback: str = "5y"
    fetch_workers: int = 4


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    percent_move: PercentMoveDefaults
    reversal: ReversalDefaults
    sector_spread: SectorSpreadDefaults
    momentum: MomentumDefaults
    volatility: VolatilityDefaults
    macro: MacroDefaults
    toy: TOYDefaults
    forward_returns: ForwardReturnsParams
    filters: FilterParams
    data: DataParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        percent_move=PercentMoveDefaults(),
        reversal=ReversalDefaults(),
        sector_spread=SectorSpreadDefaults(),
        momentum=MomentumDefaults(),
        volatility=VolatilityDefaults(),
        macro=MacroDefaults(),
        toy=TOYDefaults(),
        forward_returns=ForwardReturnsParams(),
        filters=FilterParams(),
        data=DataParams(),
    )
