"""Macro regime check against the provider's latest indicator snapshot."""

from collections.abc import Mapping
from typing import Any, Optional

from ..data.models import EngineResult, MacroSnapshot, MarketSeries, MatchEvent
from ..data.provider import MarketDataProvider
from ..models.parameters import MacroParams
from ..utils.time import format_date
from .base import EventEngine

# condition key -> (display metric, snapshot attribute)
MACRO_CONDITIONS = {
    "cpi": ("CPI", "cpi"),
    "dxy": ("DXY YTD", "dxy_ytd"),
    "rate": ("Fed Funds Rate", "policy_rate"),
}


class MacroEngine(EventEngine):
    """
    Emits a single signal when every supplied macro threshold is met.

    Each supplied threshold is met when the current reading is at or above
    it. No thresholds means no signal.
    """

    name = "Macro Events"

    def __init__(self, provider: MarketDataProvider, **kwargs):
        super().__init__(**kwargs)
        self.provider = provider

    def _run(
        self,
        series: Optional[MarketSeries],
        params: MacroParams,
        companions: Mapping[str, Optional[MarketSeries]]
    ) -> EngineResult:
        snapshot = self.provider.get_macro_snapshot()
        thresholds = params.thresholds()

        conditions = []
        for key, threshold in thresholds.items():
            metric, attribute = MACRO_CONDITIONS[key]
            current = getattr(snapshot, attribute)
            conditions.append({
                "metric": metric,
                "threshold": threshold,
                "current": current,
                "met": current >= threshold,
            })

        met_count = sum(1 for condition in conditions if condition["met"])
        all_met = bool(conditions) and met_count == len(conditions)

        matches = ()
        if all_met:
            matches = (MatchEvent(snapshot.as_of, {"signal": "Macro conditions met"}),)

        return EngineResult(
            matches=matches,
            summary={
                "conditions_met": f"{met_count}/{len(conditions)}",
                "signal": "All macro conditions met" if all_met else "Macro conditions not met",
                "conditions": conditions,
                "current_macro": self._snapshot_to_dict(snapshot),
            },
        )

    @staticmethod
    def _snapshot_to_dict(snapshot: MacroSnapshot) -> dict[str, Any]:
        return {
            "cpi": snapshot.cpi,
            "dxy_ytd": snapshot.dxy_ytd,
            "policy_rate": snapshot.policy_rate,
            "as_of": format_date(snapshot.as_of),
        }
