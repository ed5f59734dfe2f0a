"""Daily physics: drain channels, starvation, illness and ally attrition."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from overland.core.numbers import clamp, sanitize
from overland.core.rng import RandomSource
from overland.core.types import ExecOrder
from overland.domain.defs import DailyChannelConfig, DailyTickConfig, HealthTickConfig
from overland.domain.events import emit
from overland.domain.state import GameState
from overland.domain.weather import WeatherEffects

LOG = logging.getLogger(__name__)

STARVATION_GRACE_DAYS = 1
STARVATION_MAX_STACK = 5
STARVATION_HP_LOSS = 1
STARVATION_SANITY_LOSS = 1
STARVATION_PANTS_GAIN = 1

ILLNESS_DAILY_CHANCE = 0.012
ILLNESS_NO_SUPPLIES_BONUS = 0.02
ILLNESS_STARVATION_BONUS = 0.015
ILLNESS_LOW_HP_BONUS = 0.01
ILLNESS_LOW_HP_THRESHOLD = 4
ILLNESS_MAX_CHANCE = 0.18
ILLNESS_DURATION_MIN = 2
ILLNESS_DURATION_MAX = 4
ILLNESS_TRAVEL_PENALTY = 0.85
ILLNESS_COOLDOWN_DAYS = 5

ALLY_ATTRITION_CHANCE = 0.02
ALLIES_GONE_SANITY_LOSS = 2


@dataclass(slots=True)
class DailyTickOutcome:
    """What the once-per-day physics pass changed."""

    weather: WeatherEffects
    exec_order: ExecOrder | None = None
    starving: bool = False
    ill: bool = False
    supplies_delta: int = 0
    sanity_delta: int = 0
    health_delta: int = 0


def channel_amount(cfg: DailyChannelConfig, state: GameState) -> float:
    if cfg.base <= 0.0:
        return 0.0
    return cfg.value(
        pace=state.pace,
        diet=state.diet,
        weather=state.weather_state.today,
        exec_order=state.exec_order.current,
    )


def _drain(state: GameState, channel: str, amount: float) -> int:
    """Accumulate a fractional drain and return the whole points due today."""
    carry = state.daily_carry.get(channel, 0.0) + max(sanitize(amount), 0.0)
    whole = math.floor(carry)
    state.daily_carry[channel] = carry - whole
    return int(whole)


def apply_supplies_channel(state: GameState, cfg: DailyTickConfig) -> int:
    loss = _drain(state, "supplies", channel_amount(cfg.supplies, state))
    if loss:
        state.stats.supplies = max(state.stats.supplies - loss, 0)
    return -loss


def apply_sanity_channel(state: GameState, cfg: DailyTickConfig) -> int:
    loss = _drain(state, "sanity", channel_amount(cfg.sanity, state))
    if loss:
        state.stats.sanity -= loss
        state.stats.clamp()
    return -loss


def health_change(cfg: HealthTickConfig, state: GameState) -> int:
    delta = 0.0
    weather = state.weather_state.today
    if cfg.decay > 0.0:
        decay = cfg.decay * cfg.weather.get(weather, 1.0)
        order = state.exec_order.current
        if order is not None:
            decay *= cfg.exec.get(order, 1.0)
        delta -= decay
    if cfg.rest_heal > 0.0 and state.day_state.rest_requested:
        delta += cfg.rest_heal
    return int(round(delta))


def apply_health_channel(state: GameState, cfg: DailyTickConfig) -> int:
    delta = health_change(cfg.health, state)
    if delta:
        state.stats.hp += delta
        state.stats.clamp()
    return delta


# ----------------------------------------------------------------------
# Starvation and illness
# ----------------------------------------------------------------------
def apply_starvation_tick(state: GameState) -> bool:
    """Advance starvation while supplies are empty. Returns True on a damaging day."""
    if state.stats.supplies > 0:
        if state.starvation_days > 0:
            emit(state, "starvation", ui_key="log.starvation.relief", relieved=True)
        state.starvation_days = 0
        state.malnutrition_level = 0
        state.starvation_backstop_used = False
        return False

    state.starvation_days += 1
    if state.starvation_days <= STARVATION_GRACE_DAYS:
        state.malnutrition_level = 0
        return False

    state.malnutrition_level = min(state.starvation_days, STARVATION_MAX_STACK)
    state.stats.hp -= STARVATION_HP_LOSS
    state.stats.sanity -= STARVATION_SANITY_LOSS
    state.stats.pants += STARVATION_PANTS_GAIN
    state.last_damage = "starvation"
    emit(
        state,
        "starvation",
        severity="warning",
        ui_key="log.starvation.tick",
        days=state.starvation_days,
        malnutrition=state.malnutrition_level,
    )
    if state.stats.hp <= 0 and not state.starvation_backstop_used:
        state.starvation_backstop_used = True
        state.stats.hp = 1
        state.day_state.rest_requested = True
        emit(state, "starvation", severity="critical", ui_key="log.starvation.backstop", backstop=True)
    state.stats.clamp()
    return True


def illness_chance(state: GameState) -> float:
    chance = ILLNESS_DAILY_CHANCE
    if state.stats.supplies <= 0:
        chance += ILLNESS_NO_SUPPLIES_BONUS
    if state.starvation_days > 0:
        chance += ILLNESS_STARVATION_BONUS
    if state.stats.hp <= ILLNESS_LOW_HP_THRESHOLD:
        chance += ILLNESS_LOW_HP_BONUS
    return clamp(chance, 0.0, ILLNESS_MAX_CHANCE)


def _illness_hit(state: GameState) -> None:
    state.stats.hp -= 1
    state.stats.sanity -= 1
    state.stats.supplies = max(state.stats.supplies - 1, 0)
    state.day_state.rest_requested = True
    state.last_damage = "disease"
    state.stats.clamp()


def roll_daily_illness(state: GameState, rng: RandomSource) -> bool:
    """Tick an ongoing illness or roll for a new one. Returns True while ill today."""
    if state.disease_cooldown > 0:
        state.disease_cooldown -= 1

    if state.illness_days_remaining > 0:
        _illness_hit(state)
        state.illness_days_remaining -= 1
        if state.illness_days_remaining == 0:
            state.disease_cooldown = ILLNESS_COOLDOWN_DAYS
            emit(state, "illness_recovered", ui_key="log.disease.recover")
        return True

    if state.disease_cooldown > 0:
        return False
    if rng.random() >= illness_chance(state):
        return False

    state.illness_days_remaining = rng.randint(ILLNESS_DURATION_MIN, ILLNESS_DURATION_MAX)
    state.disease_cooldown = ILLNESS_COOLDOWN_DAYS
    _illness_hit(state)
    emit(
        state,
        "illness_started",
        severity="warning",
        ui_key="log.disease.hit",
        ui_hint="toast",
        duration=state.illness_days_remaining,
    )
    return True


def illness_travel_penalty(state: GameState) -> float:
    return ILLNESS_TRAVEL_PENALTY if state.illness_days_remaining > 0 else 1.0


def tick_ally_attrition(state: GameState, rng: RandomSource) -> bool:
    """Maybe lose one ally. Returns True when an ally left."""
    if state.stats.allies <= 0:
        return False
    if rng.random() > ALLY_ATTRITION_CHANCE:
        return False
    state.stats.allies -= 1
    state.stats.morale -= 1
    if state.stats.allies == 0:
        state.stats.sanity -= ALLIES_GONE_SANITY_LOSS
    state.stats.clamp()
    emit(state, "ally_lost", ui_key="log.ally.lost", remaining=state.stats.allies)
    return True


__all__ = [
    "ALLY_ATTRITION_CHANCE",
    "DailyTickOutcome",
    "ILLNESS_TRAVEL_PENALTY",
    "STARVATION_GRACE_DAYS",
    "STARVATION_MAX_STACK",
    "apply_health_channel",
    "apply_sanity_channel",
    "apply_starvation_tick",
    "apply_supplies_channel",
    "channel_amount",
    "health_change",
    "illness_chance",
    "illness_travel_penalty",
    "roll_daily_illness",
    "tick_ally_attrition",
]
