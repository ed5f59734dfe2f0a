"""Journey tuning resolved per (mode, strategy) from the policy catalog."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from overland.core.types import DietId, ExecOrder, GameMode, PaceId, Part, StrategyId, Weather


@dataclass(slots=True)
class TravelConfig:
    """Miles-per-day model."""

    mpd_base: float = 13.5
    mpd_min: float = 6.0
    mpd_max: float = 24.0
    pace_factor: Dict[PaceId, float] = field(default_factory=dict)
    weather_factor: Dict[Weather, float] = field(default_factory=dict)


@dataclass(slots=True)
class WearConfig:
    base: float = 0.2
    fatigue_k: float = 0.0
    comfort_miles: float = 1200.0


@dataclass(slots=True)
class BreakdownConfig:
    base: float = 0.04
    beta: float = 0.2
    extreme_weather_bonus: float = 0.04
    critical_bonus: float = 0.05
    pace_factor: Dict[PaceId, float] = field(default_factory=dict)
    weather_factor: Dict[Weather, float] = field(default_factory=dict)

    def pace_multiplier(self, pace: PaceId) -> float:
        return self.pace_factor.get(pace, 1.0)

    def weather_multiplier(self, weather: Weather) -> float:
        return self.weather_factor.get(weather, 1.0)


@dataclass(slots=True)
class DailyChannelConfig:
    """One daily drain channel: base amount scaled by the day's conditions."""

    base: float = 0.0
    pace: Dict[PaceId, float] = field(default_factory=dict)
    diet: Dict[DietId, float] = field(default_factory=dict)
    weather: Dict[Weather, float] = field(default_factory=dict)
    exec: Dict[ExecOrder, float] = field(default_factory=dict)

    def value(
        self,
        *,
        pace: PaceId,
        diet: DietId,
        weather: Weather,
        exec_order: ExecOrder | None,
    ) -> float:
        """Return base scaled by every matching multiplier; missing keys count as 1.0."""
        multiplier = self.pace.get(pace, 1.0) * self.diet.get(diet, 1.0) * self.weather.get(weather, 1.0)
        if exec_order is not None:
            multiplier *= self.exec.get(exec_order, 1.0)
        return self.base * multiplier


@dataclass(slots=True)
class HealthTickConfig:
    decay: float = 0.0
    rest_heal: float = 1.0
    weather: Dict[Weather, float] = field(default_factory=dict)
    exec: Dict[ExecOrder, float] = field(default_factory=dict)


@dataclass(slots=True)
class DailyTickConfig:
    supplies: DailyChannelConfig = field(default_factory=DailyChannelConfig)
    sanity: DailyChannelConfig = field(default_factory=DailyChannelConfig)
    health: HealthTickConfig = field(default_factory=HealthTickConfig)


@dataclass(slots=True)
class JourneyCfg:
    """Fully resolved tuning for one (mode, strategy) pair."""

    travel: TravelConfig = field(default_factory=TravelConfig)
    wear: WearConfig = field(default_factory=WearConfig)
    breakdown: BreakdownConfig = field(default_factory=BreakdownConfig)
    part_weights: Dict[Part, int] = field(default_factory=dict)
    daily: DailyTickConfig = field(default_factory=DailyTickConfig)
    partial_ratio: float = 0.5
    victory_miles: float = 2100.0
    stop_cap: int = 1
    stop_cap_window: int = 10


PolicyKey = Tuple[GameMode, StrategyId]


@dataclass(slots=True)
class PolicyCatalog:
    """Every (mode, strategy) combination resolved and validated at load time."""

    policies: Dict[PolicyKey, JourneyCfg]

    def resolve(self, mode: GameMode, strategy: StrategyId) -> JourneyCfg:
        try:
            return self.policies[(mode, strategy)]
        except KeyError as exc:
            raise KeyError(f"{mode}/{strategy}") from exc
