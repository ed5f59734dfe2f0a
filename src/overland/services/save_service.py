"""Serialization helpers for pausing and resuming a journey."""
from __future__ import annotations

import copy
import logging
import math
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping

from overland.core.rng import RngBundle
from overland.core.types import (
    DIETS,
    EXEC_ORDERS,
    GAME_MODES,
    PACES,
    PARTS,
    REGIONS,
    SEASONS,
    STRATEGIES,
    TRAVEL_DAY_KINDS,
    WEATHER_ORDER,
)
from overland.domain.defs import PolicyCatalog
from overland.domain.events import DecisionTrace, Event, EventId
from overland.domain.share_code import encode_friendly
from overland.domain.state import (
    ENDING_KINDS,
    STAT_BOUNDS,
    CampState,
    DayRecord,
    DayScratch,
    EndgameState,
    Ending,
    ExecOrderState,
    GameState,
    Inventory,
    PendingEncounter,
    Spares,
    Stats,
)
from overland.domain.vehicle import Breakdown, Vehicle
from overland.domain.weather import WeatherState
from overland.services.errors import SaveLoadError

LOG = logging.getLogger(__name__)

SavePayload = Dict[str, Any]

_WEATHER_FIELDS = ("today", "yesterday")
_SCRATCH_LISTS = ("current_day_tags", "events", "decision_traces")
_STATE_INTS = (
    "day",
    "budget_cents",
    "travel_days",
    "partial_travel_days",
    "non_travel_days",
    "rotation_travel_days",
    "crossings_completed",
    "crossing_permit_uses",
    "crossing_bribe_attempts",
    "crossing_bribe_successes",
    "crossing_detours_taken",
    "crossing_failures",
    "vehicle_breakdowns",
    "encounters_resolved",
    "starvation_days",
    "malnutrition_level",
    "illness_days_remaining",
    "disease_cooldown",
    "repairs_spent_cents",
)
_STATE_FLOATS = ("miles_traveled", "miles_traveled_actual", "trail_distance")
_STATE_BOOLS = ("starvation_backstop_used", "boss_ready", "boss_attempted", "boss_victory", "auto_bribe")


def _scalars(obj: Any, skip: Iterable[str] = ()) -> Dict[str, Any]:
    excluded = set(skip)
    return {item.name: getattr(obj, item.name) for item in fields(obj) if item.name not in excluded}


class SaveService:
    """Converts a journey to/from a validated, versioned payload.

    The journey tuning is not stored: it is re-resolved from the policy
    catalog using the saved mode and strategy.
    """

    SAVE_VERSION = 1

    def __init__(self, *, catalog: PolicyCatalog) -> None:
        self._catalog = catalog

    def serialize(self, state: GameState, rngs: RngBundle | None = None) -> SavePayload:
        """Return a JSON-serializable payload; include ``rngs`` to keep stream positions."""
        payload: SavePayload = {
            "save_version": self.SAVE_VERSION,
            "metadata": self._build_metadata(state),
            "state": self._serialize_state(state),
        }
        if rngs is not None:
            payload["rng"] = rngs.export_state()
        LOG.info("serialized journey at day %s (%.1f mi)", state.day, state.miles_traveled_actual)
        return payload

    def deserialize(self, payload: Mapping[str, Any]) -> GameState:
        """Rehydrate a GameState from a persisted payload."""
        state_payload = self._require_state_section(payload)
        seed = self._require_int(state_payload.get("seed"), "state.seed")
        mode = self._require_choice(state_payload.get("mode"), GAME_MODES, "state.mode")
        strategy = self._require_choice(state_payload.get("strategy"), STRATEGIES, "state.strategy")
        try:
            journey = self._catalog.resolve(mode, strategy)
        except KeyError as exc:
            raise SaveLoadError(f"Save incompatible with current definitions: policy {exc} missing.") from exc

        state = GameState(seed=seed, mode=mode, strategy=strategy, journey=journey)
        state.pace = self._require_choice(state_payload.get("pace"), PACES, "state.pace")
        state.diet = self._require_choice(state_payload.get("diet"), DIETS, "state.diet")
        state.region = self._require_choice(state_payload.get("region"), REGIONS, "state.region")
        state.season = self._require_choice(state_payload.get("season"), SEASONS, "state.season")
        for name in _STATE_INTS:
            setattr(state, name, self._require_int(state_payload.get(name), f"state.{name}"))
        for name in _STATE_FLOATS:
            setattr(state, name, self._require_number(state_payload.get(name), f"state.{name}"))
        for name in _STATE_BOOLS:
            setattr(state, name, self._require_bool(state_payload.get(name), f"state.{name}"))
        if state.day < 1:
            raise SaveLoadError("state.day must be at least 1.")

        state.stats = self._coerce_stats(state_payload.get("stats"))
        state.inventory = self._coerce_inventory(state_payload.get("inventory"))
        state.vehicle = self._restore_scalars(Vehicle, state_payload.get("vehicle"), "state.vehicle")
        state.breakdown = self._coerce_breakdown(state_payload.get("breakdown"))
        state.weather_state = self._coerce_weather(state_payload.get("weather_state"))
        state.camp = self._restore_scalars(CampState, state_payload.get("camp"), "state.camp")
        state.endgame = self._restore_scalars(EndgameState, state_payload.get("endgame"), "state.endgame")
        state.exec_order = self._coerce_exec_order(state_payload.get("exec_order"))
        state.day_records = self._coerce_day_records(state_payload.get("day_records"))
        state.recent_travel_days = [
            self._require_choice(kind, TRAVEL_DAY_KINDS, "state.recent_travel_days entry")
            for kind in self._require_list(state_payload.get("recent_travel_days", []), "state.recent_travel_days")
        ]
        state.encounter_history = self._coerce_encounter_history(state_payload.get("encounter_history", []))
        state.daily_carry = self._coerce_float_dict(state_payload.get("daily_carry", {}), "state.daily_carry")
        state.last_damage = self._coerce_optional_str(state_payload.get("last_damage"), "state.last_damage")
        state.ending = self._coerce_ending(state_payload.get("ending"))
        state.current_encounter = self._coerce_encounter(state_payload.get("current_encounter"))
        state.day_state = self._coerce_scratch(state_payload.get("day_state"))
        LOG.info("loaded journey at day %s (%s/%s)", state.day, mode, strategy)
        return state

    def deserialize_rngs(self, payload: Mapping[str, Any]) -> RngBundle | None:
        """Restore the RNG streams saved alongside the state; None when none were saved."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        rng_payload = payload.get("rng")
        if rng_payload is None:
            return None
        if not isinstance(rng_payload, Mapping):
            raise SaveLoadError("Invalid RNG state payload.")
        try:
            return RngBundle.restore(dict(rng_payload))
        except ValueError as exc:
            raise SaveLoadError(f"Invalid RNG state: {exc}") from exc

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def _build_metadata(self, state: GameState) -> Dict[str, Any]:
        return {
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "day": state.day,
            "miles": round(state.miles_traveled_actual, 2),
            "mode": state.mode,
            "share_code": encode_friendly(state.mode == "deep", state.seed),
        }

    def _serialize_state(self, state: GameState) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "seed": state.seed,
            "mode": state.mode,
            "strategy": state.strategy,
            "pace": state.pace,
            "diet": state.diet,
            "region": state.region,
            "season": state.season,
            "stats": _scalars(state.stats),
            "inventory": {"spares": _scalars(state.inventory.spares), "tags": sorted(state.inventory.tags)},
            "vehicle": _scalars(state.vehicle),
            "breakdown": None
            if state.breakdown is None
            else {"part": state.breakdown.part, "day_started": state.breakdown.day_started},
            "weather_state": _scalars(state.weather_state),
            "camp": _scalars(state.camp),
            "endgame": _scalars(state.endgame),
            "exec_order": _scalars(state.exec_order),
            "day_records": [
                {"day_index": record.day_index, "kind": record.kind, "miles": record.miles, "tags": list(record.tags)}
                for record in state.day_records
            ],
            "recent_travel_days": list(state.recent_travel_days),
            "encounter_history": [[day, encounter_id] for day, encounter_id in state.encounter_history],
            "daily_carry": dict(state.daily_carry),
            "last_damage": state.last_damage,
            "ending": None if state.ending is None else {"kind": state.ending.kind, "cause": state.ending.cause},
            "current_encounter": None if state.current_encounter is None else _scalars(state.current_encounter),
            "day_state": self._serialize_scratch(state.day_state),
        }
        for name in (*_STATE_INTS, *_STATE_FLOATS, *_STATE_BOOLS):
            payload[name] = getattr(state, name)
        return payload

    @staticmethod
    def _serialize_scratch(scratch: DayScratch) -> Dict[str, Any]:
        payload = _scalars(scratch, skip=_SCRATCH_LISTS)
        payload["current_day_tags"] = list(scratch.current_day_tags)
        payload["events"] = [
            {
                "day": event.id.day,
                "seq": event.id.seq,
                "kind": event.kind,
                "severity": event.severity,
                "tags": list(event.tags),
                "ui_hint": event.ui_hint,
                "ui_key": event.ui_key,
                "payload": copy.deepcopy(event.payload),
            }
            for event in scratch.events
        ]
        payload["decision_traces"] = [
            {
                "pipeline": record.pipeline,
                "chosen": record.chosen,
                "roll": record.roll,
                "candidates": [[name, weight] for name, weight in record.candidates],
            }
            for record in scratch.decision_traces
        ]
        return payload

    # ------------------------------------------------------------------
    # Coercion helpers
    # ------------------------------------------------------------------
    def _require_state_section(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        version = payload.get("save_version")
        if version != self.SAVE_VERSION:
            raise SaveLoadError(f"Unsupported save version {version!r}; expected {self.SAVE_VERSION}.")
        state_payload = payload.get("state")
        if not isinstance(state_payload, Mapping):
            raise SaveLoadError("Save data is missing required sections.")
        return state_payload

    def _restore_scalars(self, cls: type, value: Any, context: str, **overrides: Any) -> Any:
        """Rebuild a dataclass of scalar fields; absent keys keep the field default."""
        mapping = self._require_mapping(value, context)
        defaults = cls()
        values: Dict[str, Any] = {}
        for item in fields(cls):
            if item.name in overrides or item.name not in mapping:
                continue
            default = getattr(defaults, item.name)
            raw = mapping[item.name]
            field_context = f"{context}.{item.name}"
            if isinstance(default, bool):
                values[item.name] = self._require_bool(raw, field_context)
            elif isinstance(default, int):
                values[item.name] = self._require_int(raw, field_context)
            elif isinstance(default, float):
                values[item.name] = self._require_number(raw, field_context)
            elif isinstance(default, str) or default is None:
                values[item.name] = self._coerce_optional_str(raw, field_context)
            else:
                raise SaveLoadError(f"{field_context} is not a scalar field.")
        values.update(overrides)
        return cls(**values)

    def _coerce_stats(self, value: Any) -> Stats:
        stats: Stats = self._restore_scalars(Stats, value, "state.stats")
        for name, (low, high) in STAT_BOUNDS.items():
            if not low <= getattr(stats, name) <= high:
                raise SaveLoadError(f"state.stats.{name} must be between {low} and {high}.")
        return stats

    def _coerce_inventory(self, value: Any) -> Inventory:
        mapping = self._require_mapping(value, "state.inventory")
        spares: Spares = self._restore_scalars(Spares, mapping.get("spares", {}), "state.inventory.spares")
        if any(spares.count(part) < 0 for part in PARTS):
            raise SaveLoadError("state.inventory.spares counts must be non-negative.")
        tags = self._coerce_str_list(mapping.get("tags", []), "state.inventory.tags")
        return Inventory(spares=spares, tags=set(tags))

    def _coerce_breakdown(self, value: Any) -> Breakdown | None:
        if value is None:
            return None
        mapping = self._require_mapping(value, "state.breakdown")
        return Breakdown(
            part=self._require_choice(mapping.get("part"), PARTS, "state.breakdown.part"),
            day_started=self._require_int(mapping.get("day_started"), "state.breakdown.day_started"),
        )

    def _coerce_weather(self, value: Any) -> WeatherState:
        weather: WeatherState = self._restore_scalars(WeatherState, value, "state.weather_state")
        for name in _WEATHER_FIELDS:
            self._require_choice(getattr(weather, name), WEATHER_ORDER, f"state.weather_state.{name}")
        return weather

    def _coerce_exec_order(self, value: Any) -> ExecOrderState:
        orders: ExecOrderState = self._restore_scalars(ExecOrderState, value, "state.exec_order")
        if orders.current is not None:
            self._require_choice(orders.current, EXEC_ORDERS, "state.exec_order.current")
        return orders

    def _coerce_day_records(self, value: Any) -> List[DayRecord]:
        records: List[DayRecord] = []
        last_index = 0
        for index, entry in enumerate(self._require_list(value, "state.day_records")):
            context = f"state.day_records[{index}]"
            mapping = self._require_mapping(entry, context)
            record = DayRecord(
                day_index=self._require_int(mapping.get("day_index"), f"{context}.day_index"),
                kind=self._require_choice(mapping.get("kind"), TRAVEL_DAY_KINDS, f"{context}.kind"),
                miles=self._require_number(mapping.get("miles"), f"{context}.miles"),
                tags=tuple(self._coerce_str_list(mapping.get("tags", []), f"{context}.tags")),
            )
            if record.day_index < last_index:
                raise SaveLoadError(f"{context}.day_index goes backwards.")
            last_index = record.day_index
            records.append(record)
        return records

    def _coerce_encounter_history(self, value: Any) -> List[tuple[int, str]]:
        history: List[tuple[int, str]] = []
        for index, entry in enumerate(self._require_list(value, "state.encounter_history")):
            context = f"state.encounter_history[{index}]"
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise SaveLoadError(f"{context} must be a [day, encounter_id] pair.")
            history.append((self._require_int(entry[0], context), self._require_str(entry[1], context)))
        return history

    def _coerce_ending(self, value: Any) -> Ending | None:
        if value is None:
            return None
        mapping = self._require_mapping(value, "state.ending")
        return Ending(
            kind=self._require_choice(mapping.get("kind"), ENDING_KINDS, "state.ending.kind"),
            cause=self._coerce_optional_str(mapping.get("cause"), "state.ending.cause"),
        )

    def _coerce_encounter(self, value: Any) -> PendingEncounter | None:
        if value is None:
            return None
        mapping = self._require_mapping(value, "state.current_encounter")
        return PendingEncounter(
            encounter_id=self._require_str(mapping.get("encounter_id"), "state.current_encounter.encounter_id"),
            name=self._require_str(mapping.get("name"), "state.current_encounter.name"),
            day=self._require_int(mapping.get("day"), "state.current_encounter.day"),
            hard_stop=self._require_bool(mapping.get("hard_stop", False), "state.current_encounter.hard_stop"),
        )

    def _coerce_scratch(self, value: Any) -> DayScratch:
        if value is None:
            return DayScratch()
        mapping = self._require_mapping(value, "state.day_state")
        scratch: DayScratch = self._restore_scalars(
            DayScratch,
            {key: item for key, item in mapping.items() if key not in _SCRATCH_LISTS},
            "state.day_state",
        )
        if scratch.current_day_kind is not None:
            self._require_choice(scratch.current_day_kind, TRAVEL_DAY_KINDS, "state.day_state.current_day_kind")
        scratch.current_day_tags = self._coerce_str_list(
            mapping.get("current_day_tags", []), "state.day_state.current_day_tags"
        )
        scratch.events = [
            self._coerce_event(entry, f"state.day_state.events[{index}]")
            for index, entry in enumerate(self._require_list(mapping.get("events", []), "state.day_state.events"))
        ]
        scratch.decision_traces = [
            self._coerce_trace(entry, f"state.day_state.decision_traces[{index}]")
            for index, entry in enumerate(
                self._require_list(mapping.get("decision_traces", []), "state.day_state.decision_traces")
            )
        ]
        return scratch

    def _coerce_event(self, value: Any, context: str) -> Event:
        mapping = self._require_mapping(value, context)
        day = self._require_int(mapping.get("day"), f"{context}.day")
        payload = mapping.get("payload", {})
        if not isinstance(payload, Mapping):
            raise SaveLoadError(f"{context}.payload must be an object.")
        return Event(
            id=EventId(day=day, seq=self._require_int(mapping.get("seq"), f"{context}.seq")),
            day=day,
            kind=self._require_str(mapping.get("kind"), f"{context}.kind"),
            severity=self._require_str(mapping.get("severity", "info"), f"{context}.severity"),
            tags=self._coerce_str_list(mapping.get("tags", []), f"{context}.tags"),
            ui_hint=self._coerce_optional_str(mapping.get("ui_hint"), f"{context}.ui_hint"),
            ui_key=self._coerce_optional_str(mapping.get("ui_key"), f"{context}.ui_key"),
            payload=copy.deepcopy(dict(payload)),
        )

    def _coerce_trace(self, value: Any, context: str) -> DecisionTrace:
        mapping = self._require_mapping(value, context)
        roll = mapping.get("roll")
        candidates = []
        for entry in self._require_list(mapping.get("candidates", []), f"{context}.candidates"):
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise SaveLoadError(f"{context}.candidates entries must be [name, weight] pairs.")
            candidates.append(
                (self._require_str(entry[0], f"{context}.candidates"), self._require_number(entry[1], f"{context}.candidates"))
            )
        return DecisionTrace(
            pipeline=self._require_str(mapping.get("pipeline"), f"{context}.pipeline"),
            chosen=self._require_str(mapping.get("chosen"), f"{context}.chosen"),
            roll=None if roll is None else self._require_number(roll, f"{context}.roll"),
            candidates=candidates,
        )

    def _coerce_float_dict(self, value: Any, context: str) -> Dict[str, float]:
        mapping = self._require_mapping(value, context)
        result: Dict[str, float] = {}
        for key, item in mapping.items():
            if not isinstance(key, str):
                raise SaveLoadError(f"{context} keys must be strings.")
            result[key] = self._require_number(item, f"{context}.{key}")
        return result

    @staticmethod
    def _require_mapping(value: Any, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_list(value: Any, context: str) -> List[Any]:
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: Any, context: str) -> bool:
        if not isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_number(value: Any, context: str) -> float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a number.")
        number = float(value)
        if not math.isfinite(number):
            raise SaveLoadError(f"{context} must be finite.")
        return number

    @classmethod
    def _require_choice(cls, value: Any, allowed: Iterable[str], context: str) -> Any:
        text = cls._require_str(value, context)
        options = tuple(allowed)
        if text not in options:
            raise SaveLoadError(f"Invalid {context} value: {text}")
        return text

    @staticmethod
    def _coerce_optional_str(value: Any, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string or null.")
        return value

    @staticmethod
    def _coerce_str_list(value: Any, context: str) -> List[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        result: List[str] = []
        for item in value:
            if not isinstance(item, str):
                raise SaveLoadError(f"{context} entries must be strings.")
            result.append(item)
        return result


__all__ = ["SavePayload", "SaveService"]
