"""Last-resort vehicle recovery.

A vehicle at zero health does not end the run on the spot. A spare part or
the emergency budget patches it first; failing that, the vehicle limps on
while the breakdown count stays under the run's tolerance. Once every option
is gone, a few mode-specific field repairs get a final say before the
vehicle is written off.
"""
from __future__ import annotations

import logging
from typing import Tuple

from overland.core.rng import RandomSource
from overland.domain.day_accounting import apply_partial_travel_credit, partial_day_miles, reset_today_progress
from overland.domain.defs import EndgameConfig
from overland.domain.endgame import enforce_failure_guard
from overland.domain.events import emit
from overland.domain.state import Ending, GameState
from overland.domain.vehicle import (
    EMERGENCY_REPAIR_COST_CENTS,
    VEHICLE_EMERGENCY_HEAL,
    VEHICLE_JURY_RIG_HEAL,
    clear_breakdown,
    spend_emergency_repair,
)

LOG = logging.getLogger(__name__)

VEHICLE_BASE_TOLERANCE_DEEP = 4
VEHICLE_BASE_TOLERANCE_CLASSIC = 5
VEHICLE_SPARE_GUARD_SCALE = 3
# (miles, bonus) pairs, highest first; only the first match applies.
DEEP_BALANCED_TOLERANCE_THRESHOLDS: Tuple[Tuple[float, int], ...] = ((1_950.0, 2), (1_900.0, 1))
DEEP_AGGRESSIVE_TOLERANCE_THRESHOLDS: Tuple[Tuple[float, int], ...] = ((1_950.0, 3), (1_850.0, 2))
DEEP_BALANCED_FAILSAFE_MILES = 1_950.0

CLASSIC_BALANCED_GUARD_MILES = 1_950.0
CLASSIC_FIELD_REPAIR_COST_CENTS = 2_500
CLASSIC_FIELD_REPAIR_WEAR_REDUCTION = 0.35

DEEP_AGGRESSIVE_REPAIR_MILES = 1_600.0
DEEP_AGGRESSIVE_REPAIR_CHANCE = 0.15

EMERGENCY_LIMP_MILES = 1_850.0
EMERGENCY_LIMP_MILE_WINDOW = 200.0
EMERGENCY_LIMP_COST_CENTS = 1_500
EMERGENCY_LIMP_WEAR_REDUCTION = 0.20

DELAY_TRAVEL_CREDIT_MILES = 9.0


def breakdown_tolerance(state: GameState) -> int:
    """How many breakdowns the run absorbs before a dead vehicle can end it."""
    deep = state.mode == "deep"
    base = VEHICLE_BASE_TOLERANCE_DEEP if deep and state.strategy != "balanced" else VEHICLE_BASE_TOLERANCE_CLASSIC
    tolerance = max(base, state.inventory.spares.total() * VEHICLE_SPARE_GUARD_SCALE)
    if not deep:
        return tolerance

    thresholds: Tuple[Tuple[float, int], ...] = ()
    if state.strategy in ("aggressive", "conservative"):
        thresholds = DEEP_AGGRESSIVE_TOLERANCE_THRESHOLDS
    elif state.strategy == "balanced":
        thresholds = DEEP_BALANCED_TOLERANCE_THRESHOLDS
    for threshold, bonus in thresholds:
        if state.miles_traveled_actual >= threshold:
            tolerance += bonus
            break
    return tolerance


def _credit_partial_day(state: GameState, miles: float, reason_tag: str) -> float:
    scratch = state.day_state
    if scratch.traveled_today and not scratch.partial_traveled_today:
        reset_today_progress(state)
    return apply_partial_travel_credit(state, miles, reason_tag)


def _pay_repair(state: GameState, cost_cents: int) -> int:
    paid = min(cost_cents, max(state.budget_cents, 0))
    state.budget_cents -= paid
    state.repairs_spent_cents += paid
    return paid


def _field_patch(state: GameState, reason_tag: str, wear_reduction: float, cost_cents: int) -> int:
    """Credit a partial day, prop the vehicle up and settle the bill."""
    _credit_partial_day(state, partial_day_miles(state, 0.0), reason_tag)
    vehicle = state.vehicle
    vehicle.ensure_health_floor(VEHICLE_EMERGENCY_HEAL)
    vehicle.set_wear(max(vehicle.wear - wear_reduction, 0.0))
    paid = _pay_repair(state, cost_cents)
    clear_breakdown(state)
    return paid


def consume_any_spare_for_emergency(state: GameState) -> bool:
    part = state.inventory.spares.take_any()
    if part is None:
        return False
    state.vehicle.repair(VEHICLE_JURY_RIG_HEAL)
    emit(state, "vehicle_recovered", ui_key="log.vehicle.repair.spare", method="spare", part=part)
    return True


def limp_on_delay(state: GameState) -> None:
    """Keep a dead vehicle barely running at the cost of most of the day."""
    state.vehicle.ensure_health_floor(VEHICLE_JURY_RIG_HEAL)
    _credit_partial_day(state, DELAY_TRAVEL_CREDIT_MILES, "repair")
    emit(state, "vehicle_recovered", ui_key="log.travel.delay-credit", method="limp", miles=DELAY_TRAVEL_CREDIT_MILES)


def apply_classic_field_repair_guard(state: GameState) -> None:
    paid = _field_patch(state, "field_repair_guard", CLASSIC_FIELD_REPAIR_WEAR_REDUCTION, CLASSIC_FIELD_REPAIR_COST_CENTS)
    emit(
        state,
        "vehicle_recovered",
        severity="warning",
        ui_key="log.vehicle.field-repair-guard",
        ui_hint="toast",
        method="field_repair_guard",
        cost_cents=paid,
    )


def try_deep_aggressive_field_repair(state: GameState, rng: RandomSource | None) -> bool:
    """A 15% chance of a roadside fix for deep aggressive runs late on the trail."""
    if state.mode != "deep" or state.strategy != "aggressive":
        return False
    if state.miles_traveled_actual < DEEP_AGGRESSIVE_REPAIR_MILES:
        return False
    roll = rng.random() if rng is not None else 1.0
    if roll >= DEEP_AGGRESSIVE_REPAIR_CHANCE:
        return False

    paid = _field_patch(state, "field_repair", EMERGENCY_LIMP_WEAR_REDUCTION, EMERGENCY_LIMP_COST_CENTS)
    emit(
        state,
        "vehicle_recovered",
        severity="warning",
        ui_key="log.vehicle.deep-field-repair",
        ui_hint="toast",
        method="deep_field_repair",
        roll=roll,
        cost_cents=paid,
    )
    return True


def try_emergency_limp_guard(state: GameState) -> bool:
    """Limp the last stretch home, at most once per limp window of miles."""
    if state.mode == "classic" and state.strategy == "balanced":
        return False
    miles = state.miles_traveled_actual
    if miles < EMERGENCY_LIMP_MILES:
        return False
    if miles - state.endgame.last_limp_mile < EMERGENCY_LIMP_MILE_WINDOW:
        return False

    paid = _field_patch(state, "emergency_limp", EMERGENCY_LIMP_WEAR_REDUCTION, EMERGENCY_LIMP_COST_CENTS)
    state.endgame.last_limp_mile = state.miles_traveled_actual
    emit(
        state,
        "vehicle_recovered",
        severity="warning",
        ui_key="log.vehicle.emergency-limp",
        ui_hint="toast",
        method="emergency_limp",
        cost_cents=paid,
    )
    return True


def try_field_recovery(state: GameState, rng: RandomSource | None = None) -> str | None:
    """Run the mode-specific field repairs in order.

    Returns the method that saved the vehicle, or None when none applied.
    """
    if (
        state.mode == "classic"
        and state.strategy == "balanced"
        and state.miles_traveled_actual < CLASSIC_BALANCED_GUARD_MILES
    ):
        apply_classic_field_repair_guard(state)
        return "field_repair_guard"
    if try_deep_aggressive_field_repair(state, rng):
        return "deep_field_repair"
    if try_emergency_limp_guard(state):
        return "emergency_limp"
    return None


def check_vehicle_terminal_state(state: GameState, endgame_cfg: EndgameConfig, rng: RandomSource | None = None) -> bool:
    """Try every recovery for a dead vehicle; True when the run ends on it."""
    vehicle = state.vehicle
    spare_count = state.inventory.spares.total()
    tolerance = breakdown_tolerance(state)

    if vehicle.health <= 0.0:
        recovered = spare_count > 0 and consume_any_spare_for_emergency(state)
        if not recovered and state.budget_cents >= EMERGENCY_REPAIR_COST_CENTS:
            paid = spend_emergency_repair(state)
            emit(state, "vehicle_recovered", ui_key="log.vehicle.repair.emergency", method="emergency", cost_cents=paid)
            recovered = True
        if not recovered and state.vehicle_breakdowns < tolerance:
            limp_on_delay(state)
            recovered = True
        if recovered:
            state.last_damage = "vehicle"

    out_of_options = spare_count == 0 and state.budget_cents < EMERGENCY_REPAIR_COST_CENTS
    if enforce_failure_guard(state, endgame_cfg):
        return False
    if vehicle.health > 0.0 or state.vehicle_breakdowns < tolerance or not out_of_options:
        return False

    method = try_field_recovery(state, rng)
    if method is not None:
        LOG.debug("vehicle saved by %s on day %s at %.1f miles", method, state.day, state.miles_traveled_actual)
        return False
    if state.mode == "deep" and state.strategy == "balanced" and state.miles_traveled_actual < DEEP_BALANCED_FAILSAFE_MILES:
        limp_on_delay(state)
        return False

    vehicle.health = 0.0
    state.last_damage = "vehicle"
    state.set_ending(Ending(kind="vehicle_failure", cause="destroyed"))
    return True


__all__ = [
    "breakdown_tolerance",
    "check_vehicle_terminal_state",
    "consume_any_spare_for_emergency",
    "try_deep_aggressive_field_repair",
    "try_emergency_limp_guard",
    "try_field_recovery",
]
