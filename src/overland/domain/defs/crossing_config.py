"""Crossing tuning definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from overland.core.types import CrossingKind, ExecOrder, GameMode, StrategyId


@dataclass(slots=True)
class CrossingCost:
    """Resource costs attached to one crossing kind."""

    detour_supplies: int
    detour_pants: int
    bribe_cost_cents: int
    permit_credibility: int = 1


@dataclass(slots=True)
class CrossingOdds:
    detour_probability: float
    bribe_success: float


@dataclass(slots=True, frozen=True)
class CrossingPolicy:
    """Probabilities handed to the resolver for one strategy."""

    strategy: StrategyId
    detour_probability: float
    bribe_success_probability: float
    detour_days_min: int = 2
    detour_days_max: int = 4


@dataclass(slots=True)
class CrossingConfig:
    costs: Dict[CrossingKind, CrossingCost]
    odds: Dict[GameMode, Dict[StrategyId, CrossingOdds]]
    milestones: Tuple[float, ...] = (650.0, 1250.0, 1900.0)
    permit_tags: Tuple[str, ...] = ("permit", "press_pass")
    consumable_permit_tags: Tuple[str, ...] = ("permit",)
    storm_detour_pants: int = 1
    exec_bribe_scale: Dict[ExecOrder, float] = field(default_factory=dict)
    detour_days_min: int = 2
    detour_days_max: int = 4
    allow_negative_budget: bool = False

    def policy_for(
        self,
        mode: GameMode,
        strategy: StrategyId,
        exec_order: ExecOrder | None = None,
    ) -> CrossingPolicy:
        odds = self.odds[mode][strategy]
        bribe_success = odds.bribe_success
        if exec_order is not None:
            bribe_success *= self.exec_bribe_scale.get(exec_order, 1.0)
        return CrossingPolicy(
            strategy=strategy,
            detour_probability=odds.detour_probability,
            bribe_success_probability=bribe_success,
            detour_days_min=self.detour_days_min,
            detour_days_max=self.detour_days_max,
        )
