"""Roadside encounters: trigger chance, selection and choice resolution."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from overland.core.numbers import clamp
from overland.core.rng import RandomSource
from overland.domain.day_accounting import record_travel_day
from overland.domain.defs import EncounterCatalog, EncounterDef, EncounterEffects
from overland.domain.events import emit, trace
from overland.domain.state import GameState, PendingEncounter
from overland.domain.vehicle import weighted_pick

LOG = logging.getLogger(__name__)

MAX_ENCOUNTERS_PER_DAY = 2
REPEAT_WINDOW_DAYS = 6
CRITICAL_VEHICLE_BONUS = 0.12
SOFT_CAP_WINDOW_DAYS = 10
SOFT_CAP_COUNT = 5
SOFT_CAP_FACTOR = 0.45


@dataclass(slots=True)
class EncounterResolution:
    encounter_id: str
    choice_index: int
    label: str
    deltas: Dict[str, int] = field(default_factory=dict)
    bonus_miles: float = 0.0
    stops_day: bool = False


def recent_encounter_count(state: GameState, window: int = SOFT_CAP_WINDOW_DAYS) -> int:
    return sum(1 for day, _ in state.encounter_history if state.day - day < window)


def encounter_chance(state: GameState) -> float:
    """Today's trigger probability, after the critical-vehicle bonus and the soft cap."""
    chance = state.day_state.encounter_chance_today
    if state.vehicle.is_critical():
        chance += CRITICAL_VEHICLE_BONUS
    if recent_encounter_count(state) >= SOFT_CAP_COUNT:
        chance *= SOFT_CAP_FACTOR
    return clamp(chance, 0.0, 1.0)


def eligible_encounters(state: GameState, catalog: EncounterCatalog) -> List[EncounterDef]:
    return [
        encounter
        for encounter in catalog.encounters
        if (not encounter.regions or state.region in encounter.regions)
        and (not encounter.modes or state.mode in encounter.modes)
        and encounter.weight > 0
    ]


def pick_encounter(state: GameState, catalog: EncounterCatalog, rng: RandomSource) -> EncounterDef | None:
    """Weighted pick among eligible encounters, skipping ones seen in the repeat window."""
    candidates = eligible_encounters(state, catalog)
    if not candidates:
        return None
    recent = {encounter_id for day, encounter_id in state.encounter_history if state.day - day < REPEAT_WINDOW_DAYS}
    fresh = [encounter for encounter in candidates if encounter.id not in recent]
    pool: Sequence[EncounterDef] = fresh or candidates
    options = [(encounter, encounter.weight) for encounter in pool]
    chosen = weighted_pick(options, rng)
    if chosen is not None:
        trace(
            state,
            "encounter.pick",
            chosen.id,
            candidates=[(encounter.id, float(encounter.weight)) for encounter in pool],
        )
    return chosen


def maybe_trigger_encounter(state: GameState, catalog: EncounterCatalog, rng: RandomSource) -> PendingEncounter | None:
    """Roll for an encounter today and make it pending on success."""
    scratch = state.day_state
    if state.current_encounter is not None or scratch.encounters_today >= MAX_ENCOUNTERS_PER_DAY:
        return None
    chance = encounter_chance(state)
    roll = rng.random()
    if roll >= chance:
        return None
    encounter = pick_encounter(state, catalog, rng)
    if encounter is None:
        return None

    pending = PendingEncounter(
        encounter_id=encounter.id,
        name=encounter.name,
        day=state.day,
        hard_stop=encounter.hard_stop,
    )
    state.current_encounter = pending
    scratch.encounter_occurred_today = True
    scratch.encounters_today += 1
    state.encounter_history.append((state.day, encounter.id))
    cutoff = state.day - max(SOFT_CAP_WINDOW_DAYS, REPEAT_WINDOW_DAYS)
    state.encounter_history[:] = [entry for entry in state.encounter_history if entry[0] > cutoff]
    emit(
        state,
        "encounter_triggered",
        ui_key=f"encounter.{encounter.id}",
        ui_hint="modal",
        encounter=encounter.id,
        chance=chance,
        roll=roll,
        choices=[choice.label for choice in encounter.choices],
    )
    return pending


def _apply_effects(state: GameState, effects: EncounterEffects) -> Dict[str, int]:
    before = state.stats.snapshot()
    stats = state.stats
    stats.hp += effects.hp
    stats.sanity += effects.sanity
    stats.credibility += effects.credibility
    stats.supplies += effects.supplies
    stats.morale += effects.morale
    stats.allies += effects.allies
    stats.pants += effects.pants
    stats.clamp()
    after = stats.snapshot()
    deltas = {name: after[name] - before[name] for name in after if after[name] != before[name]}
    if effects.hp < 0:
        state.last_damage = "encounter"
    if effects.budget_cents:
        paid = effects.budget_cents
        if paid < 0:
            paid = -min(-paid, max(state.budget_cents, 0))
        state.budget_cents += paid
        deltas["budget_cents"] = paid
    if effects.add_tag:
        state.inventory.add_tag(effects.add_tag)
    return deltas


def apply_choice(state: GameState, catalog: EncounterCatalog, choice_index: int) -> EncounterResolution:
    """Resolve the pending encounter with the player's choice.

    Raises LookupError when nothing is pending or the choice does not exist.
    """
    pending = state.current_encounter
    if pending is None:
        raise LookupError("No encounter is waiting for a choice.")
    encounter = catalog.get(pending.encounter_id)
    if not 0 <= choice_index < len(encounter.choices):
        raise LookupError(f"Encounter '{encounter.id}' has no choice {choice_index}.")
    choice = encounter.choices[choice_index]
    effects = choice.effects

    deltas = _apply_effects(state, effects)
    scratch = state.day_state
    bonus = 0.0
    if effects.travel_bonus_ratio > 0.0 and scratch.distance_today > 0.0:
        bonus = scratch.distance_today * effects.travel_bonus_ratio
        kind = scratch.current_day_kind or "partial"
        _, bonus = record_travel_day(state, kind, bonus, "encounter_bonus")
        scratch.distance_today += bonus

    stops_day = pending.hard_stop or effects.rest
    if effects.rest:
        scratch.rest_requested = True
    if stops_day:
        scratch.stop_requested = True

    state.current_encounter = None
    state.encounters_resolved += 1
    emit(
        state,
        "encounter_resolved",
        ui_key=f"encounter.{encounter.id}.choice.{choice_index}",
        encounter=encounter.id,
        choice=choice_index,
        deltas=deltas,
        bonus_miles=bonus,
        stops_day=stops_day,
    )
    LOG.debug("encounter %s resolved with choice %s: %s", encounter.id, choice_index, deltas)
    return EncounterResolution(
        encounter_id=encounter.id,
        choice_index=choice_index,
        label=choice.label,
        deltas=deltas,
        bonus_miles=bonus,
        stops_day=stops_day,
    )


__all__ = [
    "CRITICAL_VEHICLE_BONUS",
    "EncounterResolution",
    "MAX_ENCOUNTERS_PER_DAY",
    "REPEAT_WINDOW_DAYS",
    "apply_choice",
    "eligible_encounters",
    "encounter_chance",
    "maybe_trigger_encounter",
    "pick_encounter",
    "recent_encounter_count",
]
