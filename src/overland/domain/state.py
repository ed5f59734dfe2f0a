"""Game state aggregate for one journey."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal, Set, Tuple

from overland.core.numbers import clamp_int
from overland.core.types import (
    PARTS,
    DietId,
    ExecOrder,
    GameMode,
    PaceId,
    Part,
    Region,
    Season,
    StrategyId,
    TravelDayKind,
)
from overland.domain.defs import JourneyCfg
from overland.domain.events import DecisionTrace, Event
from overland.domain.vehicle import Breakdown, Vehicle
from overland.domain.weather import WeatherState

LOG = logging.getLogger(__name__)

SEASON_LENGTH_DAYS = 45
SEASON_ORDER: Tuple[Season, ...] = ("spring", "summer", "fall", "winter")
DEFAULT_BUDGET_CENTS = 10_000
DEFAULT_TRAIL_DISTANCE = 2_100.0

STAT_BOUNDS: Dict[str, Tuple[int, int]] = {
    "supplies": (0, 20),
    "hp": (0, 10),
    "sanity": (0, 10),
    "credibility": (0, 20),
    "morale": (0, 10),
    "allies": (0, 50),
    "pants": (0, 100),
}

EndingKind = Literal[
    "boss_victory",
    "boss_vote_failed",
    "collapse",
    "sanity_loss",
    "vehicle_failure",
    "exposure",
]
ENDING_KINDS: Tuple[EndingKind, ...] = (
    "boss_victory",
    "boss_vote_failed",
    "collapse",
    "sanity_loss",
    "vehicle_failure",
    "exposure",
)


def region_for_day(day: int) -> Region:
    if day <= 4:
        return "heartland"
    if day <= 9:
        return "rust_belt"
    return "beltway"


def season_for_day(day: int) -> Season:
    index = (max(day, 1) - 1) // SEASON_LENGTH_DAYS
    return SEASON_ORDER[index % len(SEASON_ORDER)]


@dataclass(slots=True, frozen=True)
class Ending:
    """How the run ended. Set once and never replaced."""

    kind: EndingKind
    cause: str | None = None

    @property
    def key(self) -> str:
        return self.kind if self.cause is None else f"{self.kind}.{self.cause}"


@dataclass(slots=True)
class Stats:
    supplies: int = 10
    hp: int = 10
    sanity: int = 10
    credibility: int = 5
    morale: int = 5
    allies: int = 0
    pants: int = 0

    def clamp(self) -> None:
        """Pull every stat back inside its bounds."""
        for name, (low, high) in STAT_BOUNDS.items():
            setattr(self, name, clamp_int(getattr(self, name), low, high))

    def snapshot(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in STAT_BOUNDS}


@dataclass(slots=True)
class Spares:
    tire: int = 1
    battery: int = 1
    alternator: int = 0
    fuel_pump: int = 0

    def count(self, part: Part) -> int:
        return getattr(self, part)

    def total(self) -> int:
        return sum(self.count(part) for part in PARTS)

    def add(self, part: Part, amount: int = 1) -> None:
        setattr(self, part, max(self.count(part) + amount, 0))

    def take(self, part: Part) -> bool:
        """Consume one spare for ``part``; False when none is left."""
        if self.count(part) <= 0:
            return False
        setattr(self, part, self.count(part) - 1)
        return True

    def take_any(self) -> Part | None:
        for part in PARTS:
            if self.take(part):
                return part
        return None


@dataclass(slots=True)
class Inventory:
    spares: Spares = field(default_factory=Spares)
    tags: Set[str] = field(default_factory=set)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return any(tag in self.tags for tag in tags)

    def add_tag(self, tag: str) -> None:
        if tag:
            self.tags.add(tag)

    def remove_tag(self, tag: str) -> bool:
        if tag in self.tags:
            self.tags.remove(tag)
            return True
        return False


@dataclass(slots=True)
class CampState:
    """Cooldown counters for camp actions, in days."""

    rest_cooldown: int = 0
    forage_cooldown: int = 0
    therapy_cooldown: int = 0
    repair_cooldown: int = 0

    def tick(self) -> None:
        self.rest_cooldown = max(self.rest_cooldown - 1, 0)
        self.forage_cooldown = max(self.forage_cooldown - 1, 0)
        self.therapy_cooldown = max(self.therapy_cooldown - 1, 0)
        self.repair_cooldown = max(self.repair_cooldown - 1, 0)


@dataclass(slots=True)
class EndgameState:
    active: bool = False
    policy_key: str | None = None
    field_repair_used: bool = False
    wear_reset_used: bool = False
    guard_uses: int = 0
    last_guard_day: int = 0
    last_limp_mile: float = 0.0


@dataclass(slots=True)
class ExecOrderState:
    current: ExecOrder | None = None
    days_remaining: int = 0
    cooldown: int = 0


@dataclass(slots=True)
class PendingEncounter:
    """An encounter waiting for the player's choice; the day stays open until then."""

    encounter_id: str
    name: str
    day: int
    hard_stop: bool = False


@dataclass(slots=True, frozen=True)
class DayRecord:
    """One finished day in the ledger."""

    day_index: int
    kind: TravelDayKind
    miles: float
    tags: Tuple[str, ...] = ()


@dataclass(slots=True)
class DayScratch:
    """Per-day transient values, reset when a new day starts."""

    initialized: bool = False
    physics_applied: bool = False
    pacing_applied: bool = False
    ended: bool = False
    breakdown_rolled: bool = False
    distance_today: float = 0.0
    distance_today_raw: float = 0.0
    partial_distance_today: float = 0.0
    distance_cap_today: float = 0.0
    current_day_kind: TravelDayKind | None = None
    current_day_miles: float = 0.0
    current_day_tags: List[str] = field(default_factory=list)
    traveled_today: bool = False
    partial_traveled_today: bool = False
    prev_miles_traveled: float = 0.0
    encounter_chance_today: float = 0.0
    encounter_occurred_today: bool = False
    encounters_today: int = 0
    travel_multiplier: float = 1.0
    breakdown_bonus: float = 0.0
    weather_travel_mult: float = 1.0
    travel_blocked: bool = False
    suppress_stop_ratio: bool = False
    rest_requested: bool = False
    stop_requested: bool = False
    event_seq: int = 0
    events: List[Event] = field(default_factory=list)
    decision_traces: List[DecisionTrace] = field(default_factory=list)

    def add_tag(self, tag: str) -> None:
        if tag and tag not in self.current_day_tags:
            self.current_day_tags.append(tag)


@dataclass(slots=True)
class GameState:
    """Everything needed to continue a journey.

    Holds no RNG: random streams are owned by the session and passed in.
    """

    seed: int
    mode: GameMode = "classic"
    strategy: StrategyId = "balanced"
    pace: PaceId = "steady"
    diet: DietId = "mixed"
    journey: JourneyCfg = field(default_factory=JourneyCfg)
    day: int = 1
    region: Region = "heartland"
    season: Season = "spring"
    stats: Stats = field(default_factory=Stats)
    budget_cents: int = DEFAULT_BUDGET_CENTS
    inventory: Inventory = field(default_factory=Inventory)
    vehicle: Vehicle = field(default_factory=Vehicle)
    breakdown: Breakdown | None = None
    weather_state: WeatherState = field(default_factory=WeatherState)
    camp: CampState = field(default_factory=CampState)
    endgame: EndgameState = field(default_factory=EndgameState)
    exec_order: ExecOrderState = field(default_factory=ExecOrderState)
    day_records: List[DayRecord] = field(default_factory=list)
    travel_days: int = 0
    partial_travel_days: int = 0
    non_travel_days: int = 0
    rotation_travel_days: int = 0
    recent_travel_days: List[TravelDayKind] = field(default_factory=list)
    crossings_completed: int = 0
    crossing_permit_uses: int = 0
    crossing_bribe_attempts: int = 0
    crossing_bribe_successes: int = 0
    crossing_detours_taken: int = 0
    crossing_failures: int = 0
    vehicle_breakdowns: int = 0
    encounters_resolved: int = 0
    encounter_history: List[Tuple[int, str]] = field(default_factory=list)
    starvation_days: int = 0
    malnutrition_level: int = 0
    starvation_backstop_used: bool = False
    illness_days_remaining: int = 0
    disease_cooldown: int = 0
    repairs_spent_cents: int = 0
    daily_carry: Dict[str, float] = field(default_factory=dict)
    miles_traveled: float = 0.0
    miles_traveled_actual: float = 0.0
    trail_distance: float = DEFAULT_TRAIL_DISTANCE
    boss_ready: bool = False
    boss_attempted: bool = False
    boss_victory: bool = False
    auto_bribe: bool = True
    last_damage: str | None = None
    ending: Ending | None = None
    current_encounter: PendingEncounter | None = None
    day_state: DayScratch = field(default_factory=DayScratch)

    @property
    def is_over(self) -> bool:
        return self.ending is not None

    def set_ending(self, ending: Ending) -> bool:
        """Record the ending unless one is already set."""
        if self.ending is not None:
            return False
        self.ending = ending
        LOG.info("run ended on day %s: %s", self.day, ending.key)
        return True

    def refresh_calendar(self) -> None:
        self.region = region_for_day(self.day)
        self.season = season_for_day(self.day)


def new_game_state(
    seed: int,
    mode: GameMode,
    strategy: StrategyId,
    journey: JourneyCfg,
    *,
    budget_cents: int = DEFAULT_BUDGET_CENTS,
) -> GameState:
    """Create the day-1 state for a fresh journey."""
    state = GameState(
        seed=seed,
        mode=mode,
        strategy=strategy,
        journey=journey,
        budget_cents=budget_cents,
        trail_distance=journey.victory_miles,
    )
    state.refresh_calendar()
    return state


__all__ = [
    "CampState",
    "DayRecord",
    "DayScratch",
    "ENDING_KINDS",
    "EndgameState",
    "Ending",
    "EndingKind",
    "ExecOrderState",
    "GameState",
    "Inventory",
    "PendingEncounter",
    "STAT_BOUNDS",
    "Spares",
    "Stats",
    "new_game_state",
    "region_for_day",
    "season_for_day",
]
