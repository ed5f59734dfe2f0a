"""Day lifecycle, travel-day classification and the day ledger."""
from __future__ import annotations

import logging
from typing import Dict, Tuple

from overland.core.numbers import clamp, is_finite
from overland.core.types import TravelDayKind
from overland.domain.events import emit
from overland.domain.state import DayRecord, DayScratch, GameState

LOG = logging.getLogger(__name__)

TRAVEL_PARTIAL_MIN_DISTANCE = 1.0
PARTIAL_RATIO_MIN = 0.2
PARTIAL_RATIO_MAX = 0.95

# (counter, delta) pairs applied when a day's kind changes.
_INITIAL_COUNTERS: Dict[TravelDayKind, Tuple[Tuple[str, int], ...]] = {
    "travel": (("travel_days", 1), ("rotation_travel_days", 1)),
    "partial": (("partial_travel_days", 1), ("rotation_travel_days", 1)),
    "non_travel": (("non_travel_days", 1),),
}
_TRANSITIONS: Dict[Tuple[TravelDayKind, TravelDayKind], Tuple[Tuple[str, int], ...]] = {
    ("partial", "travel"): (("partial_travel_days", -1), ("travel_days", 1)),
    ("non_travel", "partial"): (("non_travel_days", -1), ("partial_travel_days", 1), ("rotation_travel_days", 1)),
    ("non_travel", "travel"): (("non_travel_days", -1), ("travel_days", 1), ("rotation_travel_days", 1)),
    ("partial", "non_travel"): (("partial_travel_days", -1), ("non_travel_days", 1), ("rotation_travel_days", -1)),
    ("travel", "partial"): (("travel_days", -1), ("partial_travel_days", 1)),
    ("travel", "non_travel"): (("travel_days", -1), ("non_travel_days", 1), ("rotation_travel_days", -1)),
}


def _apply_counters(state: GameState, changes: Tuple[Tuple[str, int], ...]) -> None:
    for name, delta in changes:
        setattr(state, name, max(getattr(state, name) + delta, 0))


def sanitize_miles(miles: float) -> float:
    if not is_finite(miles):
        return 0.0
    return max(miles, 0.0)


# ----------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------
def start_of_day(state: GameState, *, suppress_stop_ratio: bool = False) -> bool:
    """Open a new day unless one is already open. Returns True when a day was opened."""
    previous = state.day_state
    if previous.initialized and not previous.ended:
        return False
    state.day_state = DayScratch(
        initialized=True,
        prev_miles_traveled=state.miles_traveled_actual,
        suppress_stop_ratio=suppress_stop_ratio,
        events=previous.events,
        decision_traces=previous.decision_traces,
    )
    state.vehicle.tick_breakdown_cooldown()
    return True


def end_of_day(state: GameState) -> bool:
    """Close today: finalize its kind, append the ledger record and advance the calendar."""
    scratch = state.day_state
    if not scratch.initialized or scratch.ended:
        return False
    if scratch.current_day_kind is None:
        record_travel_day(state, "non_travel", 0.0)
    kind = scratch.current_day_kind or "non_travel"

    state.recent_travel_days.append(kind)
    window = max(state.journey.stop_cap_window, 1)
    if len(state.recent_travel_days) > window:
        del state.recent_travel_days[:-window]
    state.day_records.append(
        DayRecord(
            day_index=state.day,
            kind=kind,
            miles=scratch.current_day_miles,
            tags=tuple(scratch.current_day_tags),
        )
    )
    LOG.debug(
        "day %s closed kind=%s miles=%.2f total=%.2f tags=%s",
        state.day,
        kind,
        scratch.current_day_miles,
        state.miles_traveled_actual,
        ",".join(scratch.current_day_tags),
    )
    scratch.ended = True
    scratch.rest_requested = False
    scratch.suppress_stop_ratio = False
    state.camp.tick()
    state.day += 1
    state.refresh_calendar()
    return True


# ----------------------------------------------------------------------
# Classification
# ----------------------------------------------------------------------
def enforce_ratio_floor(state: GameState) -> bool:
    """True when too many recent days were stops for another one to count as a stop."""
    window = state.journey.stop_cap_window - 1
    if window <= 0:
        return False
    recent = state.recent_travel_days[-window:]
    stops = sum(1 for kind in recent if kind == "non_travel")
    return stops >= state.journey.stop_cap


def partial_day_miles(state: GameState, miles: float) -> float:
    """Miles credited for a partial day when the caller has no explicit figure."""
    if miles > 0.0:
        return miles
    scratch = state.day_state
    ratio = clamp(state.journey.partial_ratio, PARTIAL_RATIO_MIN, PARTIAL_RATIO_MAX)
    if scratch.partial_distance_today > 0.0:
        return max(scratch.partial_distance_today, TRAVEL_PARTIAL_MIN_DISTANCE)
    if scratch.distance_today > 0.0:
        return max(scratch.distance_today * ratio, TRAVEL_PARTIAL_MIN_DISTANCE)
    return max(state.journey.travel.mpd_base * ratio, TRAVEL_PARTIAL_MIN_DISTANCE)


def apply_travel_progress(state: GameState, miles: float) -> None:
    if miles <= 0.0:
        return
    state.miles_traveled_actual += miles
    state.miles_traveled = min(state.miles_traveled_actual, state.trail_distance)
    if state.miles_traveled_actual >= state.trail_distance:
        state.boss_ready = True


def record_travel_day(
    state: GameState,
    kind: TravelDayKind,
    miles: float,
    reason_tag: str = "",
) -> Tuple[TravelDayKind, float]:
    """Classify today (possibly merging with an earlier classification) and credit miles.

    Returns the effective kind and the miles actually credited.
    """
    start_of_day(state)
    scratch = state.day_state
    effective = kind
    credited = sanitize_miles(miles)

    if effective == "non_travel" and not scratch.suppress_stop_ratio and enforce_ratio_floor(state):
        effective = "partial"
        credited = partial_day_miles(state, credited)
        scratch.add_tag("stop_cap")
        emit(state, "stop_cap_applied", ui_key="log.travel.stop-cap", miles=credited)

    if reason_tag:
        scratch.add_tag(reason_tag)

    existing = scratch.current_day_kind
    if existing is None:
        _apply_counters(state, _INITIAL_COUNTERS[effective])
        scratch.current_day_kind = effective
    elif existing != effective:
        _apply_counters(state, _TRANSITIONS[(existing, effective)])
        scratch.current_day_kind = effective

    if credited > 0.0:
        apply_travel_progress(state, credited)
        scratch.current_day_miles += credited

    scratch.traveled_today = effective == "travel"
    scratch.partial_traveled_today = effective == "partial"
    return effective, credited


def apply_partial_travel_credit(state: GameState, miles: float, reason_tag: str = "") -> float:
    _, credited = record_travel_day(state, "partial", miles, reason_tag)
    return credited


def reset_today_progress(state: GameState) -> None:
    """Undo every mile and counter credited today."""
    scratch = state.day_state
    progress = max(state.miles_traveled_actual - scratch.prev_miles_traveled, 0.0)
    if progress > 0.0:
        state.miles_traveled_actual -= progress
        state.miles_traveled = min(state.miles_traveled_actual, state.trail_distance)
        if state.miles_traveled_actual < state.trail_distance:
            state.boss_ready = False
    if scratch.current_day_kind is not None:
        _apply_counters(
            state,
            tuple((name, -delta) for name, delta in _INITIAL_COUNTERS[scratch.current_day_kind]),
        )
        scratch.current_day_kind = None
    scratch.current_day_miles = 0.0
    scratch.distance_today = 0.0
    scratch.distance_today_raw = 0.0
    scratch.partial_distance_today = 0.0
    scratch.traveled_today = False
    scratch.partial_traveled_today = False


def apply_target_travel(state: GameState, kind: TravelDayKind, target_miles: float, reason_tag: str) -> None:
    """Make today's total credit equal ``target_miles`` (resetting first if already past it)."""
    target = max(target_miles, 0.0)
    if target + 1e-4 < state.day_state.current_day_miles:
        reset_today_progress(state)
    delta = max(target - state.day_state.current_day_miles, 0.0)
    record_travel_day(state, kind, delta, reason_tag)


def advance_days_with_credit(
    state: GameState,
    days: int,
    kind: TravelDayKind,
    miles: float,
    reason_tag: str = "",
) -> None:
    """Close ``days`` whole days at once; used by detours and multi-day camp actions."""
    for _ in range(max(days, 0)):
        start_of_day(state, suppress_stop_ratio=kind == "non_travel" and miles <= 0.0)
        record_travel_day(state, kind, miles, reason_tag)
        end_of_day(state)


__all__ = [
    "TRAVEL_PARTIAL_MIN_DISTANCE",
    "advance_days_with_credit",
    "apply_partial_travel_credit",
    "apply_target_travel",
    "apply_travel_progress",
    "end_of_day",
    "enforce_ratio_floor",
    "partial_day_miles",
    "record_travel_day",
    "reset_today_progress",
    "sanitize_miles",
    "start_of_day",
]
