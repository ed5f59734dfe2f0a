"""Camp actions: rest, forage, therapy and vehicle repairs."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Literal

from overland.core.rng import RandomSource
from overland.core.types import Part
from overland.domain.day_accounting import end_of_day, record_travel_day, start_of_day
from overland.domain.defs import CampActionConfig, CampConfig
from overland.domain.events import emit
from overland.domain.state import GameState
from overland.domain.vehicle import VEHICLE_HEALTH_MAX, clear_breakdown

LOG = logging.getLogger(__name__)

CampAction = Literal["rest", "forage", "therapy", "repair_spare", "repair_hack"]


@dataclass(slots=True)
class CampOutcome:
    """Result of one camp action; lives only for the action that produced it."""

    action: CampAction
    ok: bool
    log_key: str
    days: int = 0
    deltas: Dict[str, int] = field(default_factory=dict)


def can_repair(state: GameState, cfg: CampConfig) -> bool:
    return state.breakdown is not None or (
        state.vehicle.health < VEHICLE_HEALTH_MAX and state.camp.repair_cooldown == 0
    )


def can_therapy(state: GameState, cfg: CampConfig) -> bool:
    action = cfg.therapy
    return (
        state.camp.therapy_cooldown == 0
        and state.stats.sanity < cfg.therapy_sanity_ceiling
        and state.budget_cents >= action.budget_cents
    )


def _apply_stats(state: GameState, action: CampActionConfig, *, supplies_bonus: int = 0) -> Dict[str, int]:
    before = state.stats.snapshot()
    stats = state.stats
    stats.supplies += action.supplies + supplies_bonus
    stats.hp += action.hp
    stats.sanity += action.sanity
    stats.pants += action.pants
    stats.morale += action.morale
    stats.clamp()
    after = stats.snapshot()
    return {name: after[name] - before[name] for name in after if after[name] != before[name]}


def _spend_days(state: GameState, name: CampAction, days: int) -> None:
    """Close ``days`` camp days. Camp days never count against the stop cap."""
    scratch = state.day_state
    if days > 0 and scratch.initialized and not scratch.ended and scratch.current_day_kind is not None:
        # Today already has travel credit; camp starts tomorrow.
        end_of_day(state)
    for _ in range(days):
        start_of_day(state, suppress_stop_ratio=True)
        state.day_state.suppress_stop_ratio = True
        record_travel_day(state, "non_travel", 0.0, "camp")
        state.day_state.add_tag(f"camp_{name}")
        end_of_day(state)


def _refused(action: CampAction, reason: str) -> CampOutcome:
    return CampOutcome(action=action, ok=False, log_key=f"log.camp.{action}.{reason}")


def _finish(
    state: GameState,
    action: CampAction,
    cfg: CampActionConfig,
    deltas: Dict[str, int],
    **payload: object,
) -> CampOutcome:
    emit(state, "camp_action", ui_key=f"log.camp.{action}", action=action, days=cfg.days, deltas=deltas, **payload)
    _spend_days(state, action, cfg.days)
    LOG.debug("camp %s on day %s: %s", action, state.day, deltas)
    return CampOutcome(action=action, ok=True, log_key=f"log.camp.{action}", days=cfg.days, deltas=deltas)


def camp_rest(state: GameState, cfg: CampConfig) -> CampOutcome:
    if state.camp.rest_cooldown > 0:
        return _refused("rest", "cooldown")
    action = cfg.rest
    deltas = _apply_stats(state, action)
    state.camp.rest_cooldown = action.cooldown_days
    return _finish(state, "rest", action, deltas)


def camp_forage(state: GameState, cfg: CampConfig, rng: RandomSource) -> CampOutcome:
    if state.camp.forage_cooldown > 0:
        return _refused("forage", "cooldown")
    action = cfg.forage
    bonus = rng.randint(0, action.bonus_max) if action.bonus_max > 0 else 0
    deltas = _apply_stats(state, action, supplies_bonus=bonus)
    state.camp.forage_cooldown = action.cooldown_days
    return _finish(state, "forage", action, deltas, bonus=bonus)


def camp_therapy(state: GameState, cfg: CampConfig) -> CampOutcome:
    if not can_therapy(state, cfg):
        return _refused("therapy", "unavailable")
    action = cfg.therapy
    state.budget_cents -= action.budget_cents
    deltas = _apply_stats(state, action)
    if action.budget_cents:
        deltas["budget_cents"] = -action.budget_cents
    state.camp.therapy_cooldown = action.cooldown_days
    return _finish(state, "therapy", action, deltas)


def camp_repair_spare(state: GameState, cfg: CampConfig, part: Part) -> CampOutcome:
    """Fit a spare for ``part``. Fixes a matching breakdown, or tops up health when none is live."""
    breakdown = state.breakdown
    if breakdown is not None and breakdown.part != part:
        return _refused("repair_spare", "wrong_part")
    if breakdown is None and state.vehicle.health >= VEHICLE_HEALTH_MAX:
        return _refused("repair_spare", "not_needed")
    if not state.inventory.spares.take(part):
        return _refused("repair_spare", "no_spare")
    action = cfg.repair_spare
    state.vehicle.repair(action.vehicle_repair)
    if breakdown is not None:
        clear_breakdown(state)
        emit(state, "breakdown_repaired", ui_key="log.breakdown-repaired", method="camp_spare", part=part)
    state.camp.repair_cooldown = action.cooldown_days
    return _finish(state, "repair_spare", action, {}, part=part)


def camp_repair_hack(state: GameState, cfg: CampConfig) -> CampOutcome:
    if not can_repair(state, cfg) or state.camp.repair_cooldown > 0:
        return _refused("repair_hack", "unavailable")
    action = cfg.repair_hack
    breakdown = state.breakdown
    state.vehicle.repair(action.vehicle_repair)
    state.vehicle.set_wear(state.vehicle.wear + action.wear_delta)
    if breakdown is not None:
        clear_breakdown(state)
        emit(state, "breakdown_repaired", ui_key="log.breakdown-jury-rigged", method="camp_hack", part=breakdown.part)
    state.camp.repair_cooldown = action.cooldown_days
    return _finish(state, "repair_hack", action, {})


__all__ = [
    "CampAction",
    "CampOutcome",
    "camp_forage",
    "camp_repair_hack",
    "camp_repair_spare",
    "camp_rest",
    "camp_therapy",
    "can_repair",
    "can_therapy",
]
