"""Checkpoint and bridge crossings.

``resolve_crossing`` is a pure function of its inputs: each crossing gets its
own counter-based generator seeded from (seed, crossing index, day), so the
outcome never depends on draws taken elsewhere in the run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from overland.core.hashing import event_seed
from overland.core.numbers import clamp
from overland.core.rng import CounterRng, RandomSource
from overland.core.types import CrossingKind, GameMode
from overland.domain.day_accounting import (
    advance_days_with_credit,
    apply_target_travel,
    end_of_day,
    partial_day_miles,
    record_travel_day,
    reset_today_progress,
)
from overland.domain.defs import CrossingConfig, CrossingPolicy
from overland.domain.events import emit
from overland.domain.state import Ending, GameState

LOG = logging.getLogger(__name__)

CrossingResult = Literal["pass", "detour", "terminal_fail"]

BRIBE_FAIL_DETOUR_PENALTY_DEEP = 0.03
BRIBE_FAIL_DETOUR_PENALTY_CLASSIC = 0.02
BRIBE_FAIL_DETOUR_MIN = 0.6
BRIBE_FAIL_DETOUR_MAX = 0.98


@dataclass(slots=True, frozen=True)
class CrossingOutcome:
    result: CrossingResult
    detour_days: int = 0
    used_permit: bool = False
    bribe_attempted: bool = False
    bribe_succeeded: bool = False


@dataclass(slots=True, frozen=True)
class CrossingReport:
    """What ``handle_crossing_event`` did to the state."""

    index: int
    kind: CrossingKind
    outcome: CrossingOutcome
    ended: bool
    log_key: str


def crossing_rng(seed: int, crossing_index: int, day_index: int) -> CounterRng:
    return CounterRng(event_seed(seed, crossing_index, day_index))


def detour_probability_after_bribe_failure(policy: CrossingPolicy, mode: GameMode) -> float:
    penalty = BRIBE_FAIL_DETOUR_PENALTY_DEEP if mode == "deep" else BRIBE_FAIL_DETOUR_PENALTY_CLASSIC
    return clamp(policy.detour_probability - penalty, BRIBE_FAIL_DETOUR_MIN, BRIBE_FAIL_DETOUR_MAX)


def sample_detour_days(policy: CrossingPolicy, mode: GameMode, rng: RandomSource) -> int:
    roll = rng.random()
    if policy.strategy == "resource_manager" and mode != "deep":
        roll *= 0.9
    if roll < 0.35:
        days = 2
    elif roll < 0.75:
        days = 3
    elif mode == "deep" and (policy.strategy == "aggressive" or roll > 0.9):
        days = 4
    else:
        days = 3
    return int(clamp(days, policy.detour_days_min, policy.detour_days_max))


def _detour_or_fail(policy: CrossingPolicy, mode: GameMode, rng: RandomSource, detour_probability: float) -> tuple[CrossingResult, int]:
    if rng.random() < detour_probability:
        return "detour", sample_detour_days(policy, mode, rng)
    return "terminal_fail", 0


def resolve_crossing(
    policy: CrossingPolicy,
    mode: GameMode,
    has_permit: bool,
    bribe_intent: bool,
    crossing_index: int,
    day_index: int,
    seed: int,
) -> CrossingOutcome:
    """Decide one crossing: pass, detour for some days, or a terminal failure."""
    if has_permit:
        return CrossingOutcome(result="pass", used_permit=True)

    rng = crossing_rng(seed, crossing_index, day_index)
    if not bribe_intent:
        result, days = _detour_or_fail(policy, mode, rng, policy.detour_probability)
        return CrossingOutcome(result=result, detour_days=days)

    if rng.random() < policy.bribe_success_probability:
        return CrossingOutcome(result="pass", bribe_attempted=True, bribe_succeeded=True)
    result, days = _detour_or_fail(policy, mode, rng, detour_probability_after_bribe_failure(policy, mode))
    return CrossingOutcome(result=result, detour_days=days, bribe_attempted=True)


# ----------------------------------------------------------------------
# State-level handling
# ----------------------------------------------------------------------
def crossing_kind_for_index(cfg: CrossingConfig, mode: GameMode, index: int) -> CrossingKind:
    if index == len(cfg.milestones) - 1 or (mode == "deep" and index % 2 == 1):
        return "bridge_out"
    return "checkpoint"


def next_milestone(state: GameState, cfg: CrossingConfig) -> float | None:
    if state.crossings_completed >= len(cfg.milestones):
        return None
    return cfg.milestones[state.crossings_completed]


def held_permit_tag(state: GameState, cfg: CrossingConfig) -> str | None:
    for tag in cfg.permit_tags:
        if state.inventory.has_tag(tag):
            return tag
    return None


def can_afford_bribe(state: GameState, cfg: CrossingConfig, kind: CrossingKind) -> bool:
    return cfg.allow_negative_budget or state.budget_cents >= cfg.costs[kind].bribe_cost_cents


def _pay(state: GameState, cfg: CrossingConfig, cents: int) -> int:
    paid = cents if cfg.allow_negative_budget else min(cents, max(state.budget_cents, 0))
    state.budget_cents -= paid
    return paid


def _apply_detour_costs(state: GameState, cfg: CrossingConfig, kind: CrossingKind) -> None:
    cost = cfg.costs[kind]
    state.stats.supplies -= cost.detour_supplies
    state.stats.pants += cost.detour_pants
    if state.weather_state.today == "storm":
        state.stats.pants += cfg.storm_detour_pants
    state.stats.clamp()


def handle_crossing_event(state: GameState, cfg: CrossingConfig, computed_miles: float) -> CrossingReport | None:
    """Resolve the next crossing once its milestone is reached.

    Every outcome closes today. Returns None when no milestone is due.
    """
    milestone = next_milestone(state, cfg)
    if milestone is None or state.miles_traveled_actual < milestone:
        return None

    index = state.crossings_completed
    kind = crossing_kind_for_index(cfg, state.mode, index)
    permit_tag = held_permit_tag(state, cfg)
    has_permit = permit_tag is not None
    bribe_intent = state.auto_bribe and not has_permit and can_afford_bribe(state, cfg, kind)
    policy = cfg.policy_for(state.mode, state.strategy, state.exec_order.current)
    outcome = resolve_crossing(policy, state.mode, has_permit, bribe_intent, index, state.day, state.seed)

    cost = cfg.costs[kind]
    paid = 0
    if outcome.used_permit:
        state.stats.credibility += cost.permit_credibility
        state.stats.clamp()
        state.crossing_permit_uses += 1
        if permit_tag in cfg.consumable_permit_tags:
            state.inventory.remove_tag(permit_tag)
    if outcome.bribe_attempted:
        paid = _pay(state, cfg, cost.bribe_cost_cents)
        state.crossing_bribe_attempts += 1
        if outcome.bribe_succeeded:
            state.crossing_bribe_successes += 1

    ended = False
    if outcome.result == "pass":
        state.crossings_completed += 1
        target = partial_day_miles(state, computed_miles)
        apply_target_travel(state, "partial", target, "crossing_pass")
        log_key = "log.crossing.passed"
    elif outcome.result == "detour":
        state.crossings_completed += 1
        state.crossing_detours_taken += 1
        _apply_detour_costs(state, cfg, kind)
        per_day = partial_day_miles(state, computed_miles)
        apply_target_travel(state, "partial", per_day, "detour")
        log_key = "log.crossing.detour"
    else:
        state.crossing_failures += 1
        reset_today_progress(state)
        record_travel_day(state, "non_travel", 0.0, "crossing_fail")
        state.set_ending(Ending(kind="collapse", cause="crossing"))
        ended = True
        log_key = "log.crossing.failure"

    LOG.debug(
        "crossing %s (%s) on day %s: %s permit=%s bribe=%s/%s",
        index,
        kind,
        state.day,
        outcome.result,
        outcome.used_permit,
        outcome.bribe_attempted,
        outcome.bribe_succeeded,
    )
    emit(
        state,
        "crossing_resolved",
        severity="critical" if ended else "notice",
        ui_key=log_key,
        ui_hint="modal" if ended else "toast",
        index=index,
        crossing_kind=kind,
        result=outcome.result,
        detour_days=outcome.detour_days,
        used_permit=outcome.used_permit,
        bribe_attempted=outcome.bribe_attempted,
        bribe_succeeded=outcome.bribe_succeeded,
        bribe_paid_cents=paid,
    )
    end_of_day(state)
    if outcome.result == "detour" and outcome.detour_days > 1:
        advance_days_with_credit(state, outcome.detour_days - 1, "partial", per_day, "detour")

    return CrossingReport(index=index, kind=kind, outcome=outcome, ended=ended, log_key=log_key)


__all__ = [
    "CrossingOutcome",
    "CrossingReport",
    "CrossingResult",
    "can_afford_bribe",
    "crossing_kind_for_index",
    "crossing_rng",
    "detour_probability_after_bribe_failure",
    "handle_crossing_event",
    "held_permit_tag",
    "next_milestone",
    "resolve_crossing",
    "sample_detour_days",
]
