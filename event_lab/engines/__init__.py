"""Fault-isolated event detection engines"""

from .base import EngineOutcome, EventEngine
from .macro import MacroEngine
from .momentum import MomentumEngine
from .percent_move import PercentMoveEngine
from .reversal import ReversalEngine
from .sector_spread import SectorSpreadEngine
from .toy_seasonal import TOYSeasonalEngine
from .volatility import VolatilityEngine

__all__ = [
    "EngineOutcome",
    "EventEngine",
    "PercentMoveEngine",
    "ReversalEngine",
    "SectorSpreadEngine",
    "MomentumEngine",
    "VolatilityEngine",
    "MacroEngine",
    "TOYSeasonalEngine",
]
