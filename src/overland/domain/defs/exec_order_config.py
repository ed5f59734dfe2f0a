"""Exec order (active event modifier) tuning."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from overland.core.types import ExecOrder


@dataclass(slots=True)
class ExecOrderEffect:
    supplies: int = 0
    sanity: int = 0
    travel_mult: float = 1.0
    breakdown_bonus: float = 0.0
    encounter_delta: float = 0.0


@dataclass(slots=True)
class ExecOrderConfig:
    daily_chance: float = 0.06
    duration_min: int = 2
    duration_max: int = 4
    cooldown_min: int = 6
    cooldown_max: int = 9
    travel_mult_floor: float = 0.72
    breakdown_bonus_cap: float = 0.2
    orders: Dict[ExecOrder, ExecOrderEffect] = field(default_factory=dict)
