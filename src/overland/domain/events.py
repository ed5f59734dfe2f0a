"""Structured journey events and decision traces."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Literal, Tuple

if TYPE_CHECKING:
    from overland.domain.state import GameState

EventKind = Literal[
    "weather_changed",
    "exec_order_started",
    "exec_order_ended",
    "starvation",
    "illness_started",
    "illness_recovered",
    "ally_lost",
    "breakdown_started",
    "breakdown_repaired",
    "vehicle_recovered",
    "travel_blocked",
    "encounter_triggered",
    "encounter_resolved",
    "crossing_resolved",
    "endgame_activated",
    "endgame_field_repair",
    "endgame_guard",
    "stop_cap_applied",
    "camp_action",
    "boss_resolved",
    "travel_credited",
    "run_ended",
]
Severity = Literal["info", "notice", "warning", "critical"]
UiHint = Literal["log", "toast", "modal", "banner"]


@dataclass(slots=True, frozen=True, order=True)
class EventId:
    """Orders events by day, then by emission sequence within the day."""

    day: int
    seq: int


@dataclass(slots=True)
class Event:
    """Source of truth for everything that happened during a day.

    ``ui_key`` is an opaque presentation key; consumers may ignore it.
    """

    id: EventId
    day: int
    kind: EventKind
    severity: Severity = "info"
    tags: List[str] = field(default_factory=list)
    ui_hint: UiHint | None = None
    ui_key: str | None = None
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class DecisionTrace:
    """Records how a random pick was made so a run can be audited."""

    pipeline: str
    chosen: str
    roll: float | None = None
    candidates: List[Tuple[str, float]] = field(default_factory=list)


def emit(
    state: "GameState",
    kind: EventKind,
    *,
    severity: Severity = "info",
    ui_key: str | None = None,
    ui_hint: UiHint | None = None,
    tags: Iterable[str] = (),
    **payload: Any,
) -> Event:
    """Append a new event to today's scratch list and return it."""
    scratch = state.day_state
    scratch.event_seq += 1
    event = Event(
        id=EventId(day=state.day, seq=scratch.event_seq),
        day=state.day,
        kind=kind,
        severity=severity,
        tags=list(tags),
        ui_hint=ui_hint,
        ui_key=ui_key,
        payload=dict(payload),
    )
    scratch.events.append(event)
    return event


def trace(
    state: "GameState",
    pipeline: str,
    chosen: str,
    *,
    roll: float | None = None,
    candidates: Iterable[Tuple[str, float]] = (),
) -> DecisionTrace:
    record = DecisionTrace(pipeline=pipeline, chosen=chosen, roll=roll, candidates=list(candidates))
    state.day_state.decision_traces.append(record)
    return record


def drain(state: "GameState") -> Tuple[List[Event], List[DecisionTrace]]:
    """Take every pending event and trace off the day scratch."""
    scratch = state.day_state
    events, traces = scratch.events, scratch.decision_traces
    scratch.events = []
    scratch.decision_traces = []
    return events, traces


__all__ = ["DecisionTrace", "Event", "EventId", "EventKind", "Severity", "UiHint", "drain", "emit", "trace"]
