"""Weather tuning definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from overland.core.types import Region, Weather


@dataclass(slots=True)
class WeatherEffect:
    """Daily stat deltas and modifiers for one weather state."""

    supplies: int = 0
    sanity: int = 0
    pants: int = 0
    encounter_delta: float = 0.0
    travel_mult: float = 1.0


@dataclass(slots=True)
class WeatherMitigation:
    """Inventory tag that replaces the sanity and/or pants delta when carried."""

    tag: str
    sanity: int | None = None
    pants: int | None = None


@dataclass(slots=True)
class WeatherLimits:
    max_extreme_streak: int = 2
    encounter_cap: float = 0.35
    pants_floor: int = 0
    pants_ceiling: int = 100


@dataclass(slots=True)
class WeatherConfig:
    limits: WeatherLimits = field(default_factory=WeatherLimits)
    effects: Dict[Weather, WeatherEffect] = field(default_factory=dict)
    mitigation: Dict[Weather, WeatherMitigation] = field(default_factory=dict)
    weights: Dict[Region, Dict[Weather, int]] = field(default_factory=dict)
