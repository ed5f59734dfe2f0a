"""Camp action tuning."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class CampActionConfig:
    """Costs and rewards for one camp action."""

    days: int = 1
    supplies: int = 0
    hp: int = 0
    sanity: int = 0
    pants: int = 0
    morale: int = 0
    budget_cents: int = 0
    vehicle_repair: float = 0.0
    wear_delta: float = 0.0
    bonus_max: int = 0
    cooldown_days: int = 0


@dataclass(slots=True)
class CampConfig:
    rest: CampActionConfig = field(default_factory=CampActionConfig)
    forage: CampActionConfig = field(default_factory=CampActionConfig)
    therapy: CampActionConfig = field(default_factory=CampActionConfig)
    repair_spare: CampActionConfig = field(default_factory=CampActionConfig)
    repair_hack: CampActionConfig = field(default_factory=CampActionConfig)
    therapy_sanity_ceiling: int = 9
