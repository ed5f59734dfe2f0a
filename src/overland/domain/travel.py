"""Miles-per-day model and travel wear."""
from __future__ import annotations

import logging

from overland.core.numbers import clamp, is_finite
from overland.domain.daily import illness_travel_penalty
from overland.domain.day_accounting import TRAVEL_PARTIAL_MIN_DISTANCE
from overland.domain.defs import PacingConfig
from overland.domain.state import GameState
from overland.domain.vehicle import VEHICLE_CRITICAL_SPEED_FACTOR, daily_wear

LOG = logging.getLogger(__name__)

MIN_MULTIPLIER = 0.1
MALNUTRITION_SPEED_PER_STACK = 0.05
MALNUTRITION_MIN_FACTOR = 0.3


def malnutrition_factor(level: int) -> float:
    if level <= 0:
        return 1.0
    return max(1.0 - MALNUTRITION_SPEED_PER_STACK * level, MALNUTRITION_MIN_FACTOR)


def compute_distance_today(state: GameState, pacing: PacingConfig) -> float:
    """Work out today's full and partial distance and store them on the day scratch."""
    travel = state.journey.travel
    scratch = state.day_state
    weather = state.weather_state.today

    pace_mult = pacing.pace(state.pace).distance_mult
    pace_scalar = max(travel.pace_factor.get(state.pace, 1.0) * (pace_mult if pace_mult > 0.0 else 1.0), MIN_MULTIPLIER)
    weather_scalar = max(
        travel.weather_factor.get(weather, 1.0) * max(scratch.weather_travel_mult, MIN_MULTIPLIER),
        MIN_MULTIPLIER,
    )
    multiplier = max(pace_scalar * weather_scalar, pacing.limits.distance_penalty_floor)

    raw = travel.mpd_base * multiplier
    distance = raw
    if state.vehicle.is_critical():
        distance *= VEHICLE_CRITICAL_SPEED_FACTOR
    distance *= malnutrition_factor(state.malnutrition_level)
    distance *= scratch.travel_multiplier
    distance *= illness_travel_penalty(state)

    cap = max(travel.mpd_max, travel.mpd_base)
    if not is_finite(distance) or distance <= 0.0:
        distance = max(travel.mpd_min, TRAVEL_PARTIAL_MIN_DISTANCE)
    distance = max(clamp(distance, travel.mpd_min, cap), TRAVEL_PARTIAL_MIN_DISTANCE)

    ratio = clamp(state.journey.partial_ratio, 0.0, 1.0)
    partial = clamp(distance * ratio, 0.0, distance)
    if partial > 0.0:
        partial = max(partial, min(TRAVEL_PARTIAL_MIN_DISTANCE, distance))

    scratch.distance_today_raw = clamp(raw, 0.0, cap)
    scratch.distance_today = distance
    scratch.partial_distance_today = partial
    scratch.distance_cap_today = cap
    return distance


def apply_travel_wear(state: GameState) -> float:
    """Wear the vehicle for one day on the road; returns the wear actually applied."""
    base = daily_wear(
        state.journey.wear,
        state.journey.breakdown,
        pace=state.pace,
        weather=state.weather_state.today,
        miles_traveled=state.miles_traveled_actual,
        malnutrition_level=state.malnutrition_level,
    )
    return state.vehicle.apply_scaled_wear(base)


__all__ = ["apply_travel_wear", "compute_distance_today", "malnutrition_factor"]
