"""Exec orders: temporary modifiers that start at random and expire on their own."""
from __future__ import annotations

import logging

from overland.core.numbers import clamp
from overland.core.rng import RandomSource
from overland.core.types import EXEC_ORDERS, ExecOrder
from overland.domain.defs import ExecOrderConfig, ExecOrderEffect
from overland.domain.events import emit, trace
from overland.domain.state import GameState

LOG = logging.getLogger(__name__)


def effect_for(cfg: ExecOrderConfig, order: ExecOrder) -> ExecOrderEffect:
    return cfg.orders.get(order, ExecOrderEffect())


def apply_exec_order_effects(state: GameState, cfg: ExecOrderConfig, order: ExecOrder) -> None:
    """Apply one day of ``order`` to stats and today's modifiers."""
    effect = effect_for(cfg, order)
    scratch = state.day_state
    state.stats.supplies -= effect.supplies
    state.stats.sanity -= effect.sanity
    state.stats.clamp()
    scratch.travel_multiplier = clamp(
        scratch.travel_multiplier * effect.travel_mult,
        cfg.travel_mult_floor,
        1.0,
    )
    scratch.breakdown_bonus = clamp(
        scratch.breakdown_bonus + effect.breakdown_bonus,
        0.0,
        cfg.breakdown_bonus_cap,
    )
    scratch.encounter_chance_today = clamp(scratch.encounter_chance_today + effect.encounter_delta, 0.0, 1.0)


def _start_cooldown(state: GameState, cfg: ExecOrderConfig, rng: RandomSource) -> None:
    state.exec_order.cooldown = rng.randint(cfg.cooldown_min, cfg.cooldown_max)


def tick_exec_order(state: GameState, cfg: ExecOrderConfig, rng: RandomSource) -> ExecOrder | None:
    """Advance the exec-order state by one day.

    An active order applies its effects and counts down; when it expires a
    cooldown is drawn. Otherwise, once off cooldown, a new order may start.
    Returns the order that applied today, if any.
    """
    orders = state.exec_order
    current = orders.current
    if current is not None:
        apply_exec_order_effects(state, cfg, current)
        orders.days_remaining = max(orders.days_remaining - 1, 0)
        if orders.days_remaining == 0:
            orders.current = None
            _start_cooldown(state, cfg, rng)
            LOG.debug("exec order %s ended on day %s; cooldown %s", current, state.day, orders.cooldown)
            emit(state, "exec_order_ended", ui_key=f"exec.{current}.end", order=current)
        return current

    if orders.cooldown > 0:
        orders.cooldown -= 1
        return None

    roll = rng.random()
    if roll >= cfg.daily_chance:
        return None

    order = EXEC_ORDERS[rng.randint(0, len(EXEC_ORDERS) - 1)]
    duration = rng.randint(cfg.duration_min, cfg.duration_max)
    trace(state, "exec_order.start", order, roll=roll, candidates=[(name, 1.0) for name in EXEC_ORDERS])
    orders.current = order
    orders.days_remaining = duration
    emit(
        state,
        "exec_order_started",
        severity="notice",
        ui_key=f"exec.{order}.start",
        ui_hint="banner",
        order=order,
        duration=duration,
    )
    apply_exec_order_effects(state, cfg, order)
    orders.days_remaining -= 1
    if orders.days_remaining == 0:
        orders.current = None
        _start_cooldown(state, cfg, rng)
        emit(state, "exec_order_ended", ui_key=f"exec.{order}.end", order=order)
    return order


__all__ = ["apply_exec_order_effects", "effect_for", "tick_exec_order"]
