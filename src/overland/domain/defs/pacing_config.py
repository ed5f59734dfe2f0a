"""Pace and diet tuning."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from overland.core.types import DietId, PaceId


@dataclass(slots=True)
class PaceConfig:
    distance_mult: float = 1.0
    encounter_delta: float = 0.0
    sanity: int = 0
    pants: int = 0


@dataclass(slots=True)
class DietConfig:
    sanity: int = 0
    pants: int = 0


@dataclass(slots=True)
class PacingLimits:
    encounter_base: float = 0.27
    encounter_floor: float = 0.0
    encounter_ceiling: float = 0.6
    pants_floor: int = 0
    pants_ceiling: int = 100
    passive_relief: int = 0
    passive_relief_threshold: int = 0
    boss_pants_cap: int = 0
    distance_penalty_floor: float = 0.6


@dataclass(slots=True)
class PacingConfig:
    paces: Dict[PaceId, PaceConfig] = field(default_factory=dict)
    diets: Dict[DietId, DietConfig] = field(default_factory=dict)
    limits: PacingLimits = field(default_factory=PacingLimits)

    def pace(self, pace_id: PaceId) -> PaceConfig:
        return self.paces.get(pace_id, PaceConfig())

    def diet(self, diet_id: DietId) -> DietConfig:
        return self.diets.get(diet_id, DietConfig())
