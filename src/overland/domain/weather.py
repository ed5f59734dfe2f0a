"""Daily weather selection and effects."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable

from overland.core.numbers import clamp, clamp_int
from overland.core.rng import RandomSource
from overland.core.types import EXTREME_WEATHER, WEATHER_ORDER, Season, Weather
from overland.domain.defs import WeatherConfig
from overland.domain.events import emit, trace

if TYPE_CHECKING:
    from overland.domain.state import GameState

LOG = logging.getLogger(__name__)

HEATWAVE_MAX_STREAK = 4
COLDSNAP_MAX_STREAK = 4
NEUTRAL_BUFFER_MIN = 2
NEUTRAL_BUFFER_MAX = 3
EXPOSURE_STREAK_DAMAGE = 3
NEUTRAL_WEATHER: tuple[Weather, ...] = ("clear", "smoke")
HEAT_GEAR_TAGS = ("water_jugs", "water")
COLD_GEAR_TAGS = ("warm_coat", "cold_resist")

SEASONAL_OVERRIDES: Dict[Season, tuple[Weather, float]] = {
    "winter": ("cold_snap", 0.20),
    "summer": ("heat_wave", 0.20),
    "fall": ("storm", 0.15),
    "spring": ("smoke", 0.12),
}


class WeatherSelectionError(Exception):
    """Raised when the current region has no usable weather weights."""


@dataclass(slots=True)
class WeatherState:
    today: Weather = "clear"
    yesterday: Weather = "clear"
    extreme_streak: int = 0
    heatwave_streak: int = 0
    coldsnap_streak: int = 0
    neutral_buffer: int = 0
    exposure_streak_heat: int = 0
    exposure_streak_cold: int = 0


@dataclass(slots=True)
class WeatherEffects:
    """What today's weather did; lives only for the day."""

    weather: Weather
    supplies: int = 0
    sanity: int = 0
    pants: int = 0
    encounter_delta: float = 0.0
    travel_mult: float = 1.0
    exposure_damage: int = 0
    mitigated: bool = False


def is_extreme(weather: Weather) -> bool:
    return weather in EXTREME_WEATHER


def _walk(weights: Dict[Weather, int], order: Iterable[Weather], roll: int) -> Weather | None:
    for weather in order:
        weight = weights.get(weather, 0)
        if weight <= 0:
            continue
        if roll < weight:
            return weather
        roll -= weight
    return None


def _pick_neutral(weights: Dict[Weather, int], rng: RandomSource) -> Weather:
    total = sum(weights.get(weather, 0) for weather in NEUTRAL_WEATHER)
    if total <= 0:
        return "clear"
    return _walk(weights, NEUTRAL_WEATHER, rng.randint(0, total - 1)) or "clear"


def select_weather_for_today(state: "GameState", cfg: WeatherConfig, rng: RandomSource) -> Weather:
    """Pick today's weather from the region's weights.

    Raises WeatherSelectionError when the region has no weights.
    """
    weather_state = state.weather_state
    weights = cfg.weights.get(state.region)
    if not weights:
        raise WeatherSelectionError(f"Weather weights must exist for region '{state.region}'.")
    total = sum(weights.get(weather, 0) for weather in WEATHER_ORDER)
    if total <= 0:
        raise WeatherSelectionError(f"Weather weights for region '{state.region}' sum to zero.")

    roll = rng.randint(0, total - 1)
    candidate = _walk(weights, WEATHER_ORDER, roll) or "clear"
    trace(
        state,
        "weather.select",
        candidate,
        roll=float(roll),
        candidates=[(weather, float(weights.get(weather, 0))) for weather in WEATHER_ORDER],
    )

    cap = cfg.limits.max_extreme_streak
    if is_extreme(candidate) and weather_state.extreme_streak >= cap:
        calm = [weather for weather in WEATHER_ORDER if not is_extreme(weather)]
        calm_total = sum(weights.get(weather, 0) for weather in calm)
        if calm_total > 0:
            candidate = _walk(weights, calm, rng.randint(0, calm_total - 1)) or "clear"
        else:
            candidate = "clear"

    override, chance = SEASONAL_OVERRIDES[state.season]
    if rng.random() < chance:
        candidate = override

    if weather_state.neutral_buffer > 0:
        candidate = _pick_neutral(weights, rng)
        weather_state.neutral_buffer -= 1
    elif (candidate == "heat_wave" and weather_state.heatwave_streak >= HEATWAVE_MAX_STREAK) or (
        candidate == "cold_snap" and weather_state.coldsnap_streak >= COLDSNAP_MAX_STREAK
    ):
        candidate = _pick_neutral(weights, rng)
        weather_state.neutral_buffer = rng.randint(NEUTRAL_BUFFER_MIN, NEUTRAL_BUFFER_MAX) - 1

    if is_extreme(candidate) and weather_state.extreme_streak >= cap:
        candidate = "clear"
    return candidate


def _update_streaks(state: "GameState", today: Weather) -> None:
    weather_state = state.weather_state
    if is_extreme(today):
        weather_state.extreme_streak = weather_state.extreme_streak + 1 if is_extreme(weather_state.yesterday) else 1
    else:
        weather_state.extreme_streak = 0
    weather_state.heatwave_streak = weather_state.heatwave_streak + 1 if today == "heat_wave" else 0
    weather_state.coldsnap_streak = weather_state.coldsnap_streak + 1 if today == "cold_snap" else 0


def _apply_exposure(state: "GameState", today: Weather) -> int:
    weather_state = state.weather_state
    tags = state.inventory
    heat = today == "heat_wave" and not tags.has_any_tag(HEAT_GEAR_TAGS)
    cold = today == "cold_snap" and not tags.has_any_tag(COLD_GEAR_TAGS)
    damage = 0

    if cold:
        weather_state.exposure_streak_cold += 1
        if weather_state.exposure_streak_cold >= EXPOSURE_STREAK_DAMAGE:
            damage += 1
            state.last_damage = "exposure_cold"
    else:
        weather_state.exposure_streak_cold = 0

    if heat:
        weather_state.exposure_streak_heat += 1
        state.stats.sanity -= 1
        if weather_state.exposure_streak_heat >= EXPOSURE_STREAK_DAMAGE:
            damage += 1
            state.last_damage = "exposure_heat"
    else:
        weather_state.exposure_streak_heat = 0

    state.stats.hp -= damage
    return damage


def apply_weather_effects(state: "GameState", cfg: WeatherConfig) -> WeatherEffects:
    """Apply today's weather to stats, streaks and today's encounter chance."""
    today = state.weather_state.today
    _update_streaks(state, today)
    effect = cfg.effects.get(today)
    if effect is None:
        state.day_state.weather_travel_mult = 1.0
        return WeatherEffects(weather=today)

    sanity = effect.sanity
    pants = effect.pants
    mitigated = False
    mitigation = cfg.mitigation.get(today)
    if mitigation is not None and state.inventory.has_tag(mitigation.tag):
        mitigated = True
        if mitigation.sanity is not None:
            sanity = mitigation.sanity
        if mitigation.pants is not None:
            pants = mitigation.pants

    stats = state.stats
    stats.supplies += effect.supplies
    stats.sanity += sanity
    stats.pants = clamp_int(stats.pants + pants, cfg.limits.pants_floor, cfg.limits.pants_ceiling)
    exposure = _apply_exposure(state, today)
    stats.clamp()

    travel_mult = max(effect.travel_mult, 0.1)
    state.day_state.weather_travel_mult = travel_mult

    cap = cfg.limits.encounter_cap if cfg.limits.encounter_cap > 0.0 else 1.0
    state.day_state.encounter_chance_today = clamp(
        state.day_state.encounter_chance_today + effect.encounter_delta, 0.0, cap
    )

    return WeatherEffects(
        weather=today,
        supplies=effect.supplies,
        sanity=sanity,
        pants=pants,
        encounter_delta=effect.encounter_delta,
        travel_mult=travel_mult,
        exposure_damage=exposure,
        mitigated=mitigated,
    )


def process_daily_weather(state: "GameState", cfg: WeatherConfig, rng: RandomSource) -> WeatherEffects:
    """Roll and apply the day's weather; a selection failure keeps yesterday's weather."""
    weather_state = state.weather_state
    weather_state.yesterday = weather_state.today
    try:
        selected = select_weather_for_today(state, cfg, rng)
    except WeatherSelectionError as exc:
        LOG.warning("weather selection failed on day %s: %s", state.day, exc)
        selected = weather_state.today
        if is_extreme(selected) and weather_state.extreme_streak >= cfg.limits.max_extreme_streak:
            selected = "clear"
    weather_state.today = selected
    effects = apply_weather_effects(state, cfg)
    emit(
        state,
        "weather_changed",
        ui_key=f"weather.{selected}",
        weather=selected,
        extreme_streak=weather_state.extreme_streak,
        mitigated=effects.mitigated,
        exposure_damage=effects.exposure_damage,
    )
    return effects


__all__ = [
    "WeatherEffects",
    "WeatherSelectionError",
    "WeatherState",
    "apply_weather_effects",
    "is_extreme",
    "process_daily_weather",
    "select_weather_for_today",
]
