"""Vehicle durability and breakdown model."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Sequence, Tuple, TypeVar

from overland.core.numbers import clamp, clamp_probability
from overland.core.rng import RandomSource
from overland.core.types import EXTREME_WEATHER, PARTS, PaceId, Part, Weather
from overland.domain.defs import BreakdownConfig, WearConfig
from overland.domain.events import emit, trace

if TYPE_CHECKING:
    from overland.domain.state import GameState

LOG = logging.getLogger(__name__)

T = TypeVar("T")

VEHICLE_HEALTH_MAX = 100.0
VEHICLE_CRITICAL_THRESHOLD = 20.0
VEHICLE_BREAKDOWN_DAMAGE = 6.0
VEHICLE_BREAKDOWN_WEAR_DEEP = 6.0
VEHICLE_BREAKDOWN_WEAR_CLASSIC = 5.0
VEHICLE_EMERGENCY_HEAL = 10.0
VEHICLE_JURY_RIG_HEAL = 4.0
VEHICLE_BREAKDOWN_PARTIAL_FACTOR = 0.5
VEHICLE_CRITICAL_SPEED_FACTOR = 0.5
MALNUTRITION_WEAR_PER_STACK = 0.05
EMERGENCY_REPAIR_COST_CENTS = 1_000


@dataclass(slots=True)
class Vehicle:
    """Vehicle durability. Wear only grows unless a repair or stabilizer acts on it."""

    wear: float = 0.0
    health: float = VEHICLE_HEALTH_MAX
    wear_multiplier: float = 1.0
    breakdown_cooldown: int = 0

    def apply_damage(self, amount: float) -> None:
        if amount <= 0.0:
            return
        self.health = max(self.health - amount, 0.0)

    def repair(self, amount: float) -> None:
        """Restore durability, clamped to the maximum."""
        if amount <= 0.0:
            return
        self.health = min(self.health + amount, VEHICLE_HEALTH_MAX)

    def is_critical(self) -> bool:
        return self.health <= VEHICLE_CRITICAL_THRESHOLD

    def ensure_health_floor(self, floor: float) -> None:
        if floor <= 0.0:
            return
        self.health = max(self.health, min(floor, VEHICLE_HEALTH_MAX))

    def reset_wear(self) -> None:
        self.wear = 0.0

    def set_wear(self, wear: float) -> None:
        self.wear = clamp(wear, 0.0, VEHICLE_HEALTH_MAX)

    def apply_scaled_wear(self, base: float) -> float:
        """Add ``base`` wear scaled by the wear multiplier; health drops by the same amount."""
        if base <= 0.0:
            return 0.0
        applied = max(base * max(self.wear_multiplier, 0.0), 0.0)
        if applied <= 0.0:
            return 0.0
        self.wear = min(self.wear + applied, VEHICLE_HEALTH_MAX)
        self.apply_damage(applied)
        return applied

    def set_breakdown_cooldown(self, days: int) -> None:
        self.breakdown_cooldown = max(days, 0)

    def tick_breakdown_cooldown(self) -> None:
        if self.breakdown_cooldown > 0:
            self.breakdown_cooldown -= 1

    def breakdown_suppressed(self) -> bool:
        return self.breakdown_cooldown > 0

    def set_wear_multiplier(self, multiplier: float) -> None:
        self.wear_multiplier = multiplier if multiplier > 0.0 else 0.0

    def clear_wear_multiplier(self) -> None:
        self.wear_multiplier = 1.0


@dataclass(slots=True)
class Breakdown:
    part: Part
    day_started: int


def weighted_pick(options: Sequence[Tuple[T, int]], rng: RandomSource) -> T | None:
    """Pick one option proportionally to its weight; None when every weight is zero."""
    total = sum(max(weight, 0) for _, weight in options)
    if total <= 0:
        return None
    roll = rng.randint(0, total - 1)
    running = 0
    for item, weight in options:
        if weight <= 0:
            continue
        running += weight
        if roll < running:
            return item
    return options[0][0]


def breakdown_roll(probability: float, rng: RandomSource) -> bool:
    return rng.random() < probability


def breakdown_chance(
    cfg: BreakdownConfig,
    *,
    wear: float,
    pace: PaceId,
    weather: Weather,
    critical: bool = False,
    exec_bonus: float = 0.0,
) -> float:
    """Daily breakdown probability for the given conditions."""
    chance = cfg.base * (1.0 + cfg.beta * max(wear, 0.0))
    chance *= cfg.pace_multiplier(pace) * cfg.weather_multiplier(weather)
    if weather in EXTREME_WEATHER:
        chance += cfg.extreme_weather_bonus
    if critical:
        chance += cfg.critical_bonus
    return clamp_probability(chance + exec_bonus)


def daily_wear(
    cfg: WearConfig,
    breakdown_cfg: BreakdownConfig,
    *,
    pace: PaceId,
    weather: Weather,
    miles_traveled: float,
    malnutrition_level: int,
) -> float:
    """Base wear for one travel day before the vehicle's own multiplier."""
    fatigue = 1.0
    if cfg.fatigue_k > 0.0 and cfg.comfort_miles > 0.0:
        fatigue += cfg.fatigue_k * max(miles_traveled - cfg.comfort_miles, 0.0) / cfg.comfort_miles
    malnutrition = 1.0 + MALNUTRITION_WEAR_PER_STACK * max(malnutrition_level, 0)
    wear = cfg.base * breakdown_cfg.pace_multiplier(pace) * breakdown_cfg.weather_multiplier(weather)
    return max(wear * fatigue * malnutrition, 0.0)


def part_options(weights: Dict[Part, int]) -> list[Tuple[Part, int]]:
    return [(part, weights.get(part, 0)) for part in PARTS]


# ----------------------------------------------------------------------
# State-level operations
# ----------------------------------------------------------------------
def vehicle_roll(state: "GameState", rng: RandomSource) -> bool:
    """Roll today's breakdown and start one on success.

    Never rolls while a breakdown is live or the vehicle is suppressed.
    """
    if state.breakdown is not None or state.vehicle.breakdown_suppressed():
        return False
    chance = breakdown_chance(
        state.journey.breakdown,
        wear=state.vehicle.wear,
        pace=state.pace,
        weather=state.weather_state.today,
        critical=state.vehicle.is_critical(),
        exec_bonus=state.day_state.breakdown_bonus,
    )
    roll = rng.random()
    if roll >= chance:
        return False

    options = part_options(state.journey.part_weights)
    part = weighted_pick(options, rng) or "tire"
    trace(state, "vehicle.breakdown_part", part, roll=roll, candidates=[(p, float(w)) for p, w in options])
    state.breakdown = Breakdown(part=part, day_started=state.day)
    state.day_state.travel_blocked = True
    state.vehicle_breakdowns += 1
    state.vehicle.apply_damage(VEHICLE_BREAKDOWN_DAMAGE)
    extra_wear = VEHICLE_BREAKDOWN_WEAR_DEEP if state.mode == "deep" else VEHICLE_BREAKDOWN_WEAR_CLASSIC
    state.vehicle.set_wear(state.vehicle.wear + extra_wear)
    state.last_damage = "vehicle"
    LOG.debug(
        "breakdown day=%s part=%s health=%.1f roll=%.3f chance=%.3f",
        state.day,
        part,
        state.vehicle.health,
        roll,
        chance,
    )
    emit(
        state,
        "breakdown_started",
        severity="warning",
        ui_key="log.breakdown",
        ui_hint="toast",
        part=part,
        chance=chance,
    )
    return True


def spend_emergency_repair(state: "GameState") -> int:
    """Pay for an emergency repair from the budget; returns the cents actually spent."""
    paid = min(EMERGENCY_REPAIR_COST_CENTS, max(state.budget_cents, 0))
    state.budget_cents -= paid
    state.repairs_spent_cents += paid
    state.vehicle.repair(VEHICLE_EMERGENCY_HEAL)
    return paid


def clear_breakdown(state: "GameState") -> None:
    state.breakdown = None
    state.day_state.travel_blocked = False


def resolve_breakdown(state: "GameState") -> None:
    """Try to clear a live breakdown.

    A matching spare fixes it at once. With no spares at all the emergency
    budget is used. Otherwise the vehicle stays stalled for the day it broke
    and is jury-rigged the following day.
    """
    breakdown = state.breakdown
    if breakdown is None:
        state.day_state.travel_blocked = False
        return

    if state.inventory.spares.take(breakdown.part):
        state.vehicle.repair(VEHICLE_JURY_RIG_HEAL)
        clear_breakdown(state)
        emit(state, "breakdown_repaired", ui_key="log.breakdown-repaired", method="spare", part=breakdown.part)
        return

    if state.inventory.spares.total() == 0 and state.budget_cents >= EMERGENCY_REPAIR_COST_CENTS:
        paid = spend_emergency_repair(state)
        clear_breakdown(state)
        emit(
            state,
            "breakdown_repaired",
            ui_key="log.vehicle.repair.emergency",
            method="emergency",
            part=breakdown.part,
            cost_cents=paid,
        )
        return

    if state.day - breakdown.day_started >= 1:
        state.vehicle.apply_damage(VEHICLE_BREAKDOWN_DAMAGE * VEHICLE_BREAKDOWN_PARTIAL_FACTOR)
        state.last_damage = "vehicle"
        clear_breakdown(state)
        emit(state, "breakdown_repaired", ui_key="log.breakdown-jury-rigged", method="jury_rig", part=breakdown.part)
    else:
        state.day_state.travel_blocked = True


__all__ = [
    "Breakdown",
    "EMERGENCY_REPAIR_COST_CENTS",
    "VEHICLE_CRITICAL_SPEED_FACTOR",
    "VEHICLE_EMERGENCY_HEAL",
    "VEHICLE_HEALTH_MAX",
    "VEHICLE_JURY_RIG_HEAL",
    "Vehicle",
    "breakdown_chance",
    "breakdown_roll",
    "clear_breakdown",
    "daily_wear",
    "resolve_breakdown",
    "spend_emergency_repair",
    "vehicle_roll",
    "weighted_pick",
]
