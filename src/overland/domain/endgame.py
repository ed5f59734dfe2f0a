"""Endgame travel controller.

Deep-mode runs get a safety net over the last stretch of the trail: one field
repair after the first breakdown, vehicle stabilizers, and a failure guard
that keeps a wrecked vehicle limping until the guard mileage is reached.
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from overland.core.numbers import clamp
from overland.domain.day_accounting import TRAVEL_PARTIAL_MIN_DISTANCE, record_travel_day, reset_today_progress
from overland.domain.defs import EndgameConfig, EndgamePolicyConfig, ResourceKind
from overland.domain.events import emit
from overland.domain.state import GameState
from overland.domain.vehicle import EMERGENCY_REPAIR_COST_CENTS, clear_breakdown, spend_emergency_repair

LOG = logging.getLogger(__name__)

DEFAULT_RESOURCE_PRIORITY: List[ResourceKind] = ["matching_spare", "any_spare", "emergency"]


def policy_key_for(state: GameState) -> str:
    return f"deep_{state.strategy}"


def active_policy(state: GameState, cfg: EndgameConfig) -> EndgamePolicyConfig | None:
    if not cfg.enabled or state.mode != "deep":
        return None
    return cfg.policy(state.endgame.policy_key or policy_key_for(state))


def _stabilize(state: GameState, health_floor: float, wear_reset: float) -> None:
    if health_floor > 0.0:
        state.vehicle.ensure_health_floor(health_floor)
    if wear_reset <= 0.0:
        state.vehicle.reset_wear()
    else:
        state.vehicle.set_wear(wear_reset)


def _apply_policy(state: GameState, policy: EndgamePolicyConfig) -> None:
    _stabilize(state, policy.health_floor, policy.wear_reset)
    if policy.cooldown_days > 0:
        state.vehicle.set_breakdown_cooldown(policy.cooldown_days)
    if policy.wear_multiplier >= 0.0:
        state.vehicle.set_wear_multiplier(policy.wear_multiplier)


def _spend_resource(state: GameState, priority: Iterable[ResourceKind]) -> ResourceKind | None:
    breakdown = state.breakdown
    spares = state.inventory.spares
    for resource in [*priority, "emergency"]:
        if resource == "matching_spare":
            if breakdown is not None and spares.take(breakdown.part):
                return resource
        elif resource == "any_spare":
            if spares.take_any() is not None:
                return resource
        elif state.budget_cents >= EMERGENCY_REPAIR_COST_CENTS:
            spend_emergency_repair(state)
            return resource
    return None


def run_field_repair(state: GameState, policy: EndgamePolicyConfig, computed_miles: float) -> ResourceKind | None:
    """Patch the vehicle up on the spot and credit today as a partial day."""
    resource = _spend_resource(state, policy.resource_priority or DEFAULT_RESOURCE_PRIORITY)
    _apply_policy(state, policy)
    part = state.breakdown.part if state.breakdown is not None else None
    clear_breakdown(state)
    state.endgame.field_repair_used = True

    miles = max(computed_miles, 0.0)
    ratio = clamp(policy.partial_ratio, 0.0, 1.0)
    partial = clamp(miles * ratio, 0.0, miles)
    partial = max(partial, min(TRAVEL_PARTIAL_MIN_DISTANCE, miles))

    reset_today_progress(state)
    record_travel_day(state, "partial", partial, "field_repair")
    scratch = state.day_state
    scratch.distance_today = partial
    scratch.distance_today_raw = partial
    scratch.partial_distance_today = partial
    state.stats.clamp()

    LOG.debug("field repair on day %s using %s; credited %.2f miles", state.day, resource, partial)
    emit(
        state,
        "endgame_field_repair",
        severity="notice",
        ui_key="log.endgame.field-repair",
        ui_hint="toast",
        resource=resource,
        part=part,
        miles=partial,
    )
    return resource


def run_endgame_controller(
    state: GameState,
    cfg: EndgameConfig,
    *,
    computed_miles: float,
    breakdown_started: bool,
) -> bool:
    """Activate and drive the endgame controller for today.

    Returns True when a field repair took over today's travel.
    """
    policy = active_policy(state, cfg)
    if policy is None:
        return False

    endgame = state.endgame
    if not endgame.active and state.miles_traveled_actual >= policy.mi_start:
        endgame.active = True
        endgame.policy_key = policy_key_for(state)
        endgame.field_repair_used = False
        endgame.wear_reset_used = False
        state.day_state.add_tag("endgame_activate")
        LOG.info("endgame controller active at %.1f miles (%s)", state.miles_traveled_actual, endgame.policy_key)
        emit(
            state,
            "endgame_activated",
            severity="notice",
            ui_key="log.endgame.activate",
            ui_hint="banner",
            policy=endgame.policy_key,
            miles=state.miles_traveled_actual,
        )

    if not endgame.active:
        return False

    state.day_state.add_tag("endgame_active")
    if state.vehicle.breakdown_suppressed():
        state.day_state.add_tag("endgame_cooldown")

    repaired = False
    # A spare may already have cleared today's breakdown.
    if breakdown_started and not endgame.field_repair_used and state.breakdown is not None:
        run_field_repair(state, policy, computed_miles)
        repaired = True

    if breakdown_started and not endgame.wear_reset_used and policy.wear_reset > 0.0:
        _stabilize(state, 0.0, policy.wear_reset)
        endgame.wear_reset_used = True
    return repaired


def enforce_failure_guard(state: GameState, cfg: EndgameConfig) -> bool:
    """Keep a destroyed vehicle going while the guard mileage has not been reached.

    Returns True when the guard fired; the caller must not end the run.
    """
    endgame = state.endgame
    if not endgame.active:
        return False
    policy = active_policy(state, cfg)
    if policy is None:
        return False
    if state.miles_traveled_actual >= policy.failure_guard_miles:
        return False
    if state.vehicle.health > 0.0:
        return False

    _apply_policy(state, policy)
    endgame.guard_uses += 1
    endgame.last_guard_day = state.day
    state.day_state.add_tag("endgame_guard")
    state.day_state.rest_requested = True
    emit(
        state,
        "endgame_guard",
        severity="warning",
        ui_key="log.endgame.failure-guard",
        ui_hint="toast",
        health=state.vehicle.health,
    )
    return True


__all__ = [
    "active_policy",
    "enforce_failure_guard",
    "policy_key_for",
    "run_endgame_controller",
    "run_field_repair",
]
