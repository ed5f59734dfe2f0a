"""One-day simulation kernel.

Each ``tick_day`` call walks today through physics, pacing and travel. A day
interrupted by an encounter stays open: the next ``tick_day`` after the choice
is applied picks it up where it stopped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from overland.core.numbers import clamp, clamp_int
from overland.core.rng import RandomSource, RngBundle
from overland.core.types import DietId, GameMode, PaceId, Region, Season
from overland.domain import day_accounting
from overland.domain.crossing import handle_crossing_event
from overland.domain.daily import (
    DailyTickOutcome,
    apply_health_channel,
    apply_sanity_channel,
    apply_starvation_tick,
    apply_supplies_channel,
    roll_daily_illness,
    tick_ally_attrition,
)
from overland.domain.day_accounting import apply_target_travel, partial_day_miles, record_travel_day
from overland.domain.encounters import maybe_trigger_encounter
from overland.domain.endgame import run_endgame_controller
from overland.domain.events import DecisionTrace, Event, drain, emit
from overland.domain.exec_orders import tick_exec_order
from overland.domain.recovery import check_vehicle_terminal_state
from overland.domain.state import DayRecord, Ending, GameState
from overland.domain.travel import apply_travel_wear, compute_distance_today
from overland.domain.vehicle import resolve_breakdown, vehicle_roll
from overland.domain.weather import process_daily_weather
from overland.services.config_service import GameConfig

LOG = logging.getLogger(__name__)

_DAMAGE_ENDINGS = {
    "exposure_cold": Ending(kind="exposure", cause="cold"),
    "exposure_heat": Ending(kind="exposure", cause="heat"),
    "starvation": Ending(kind="collapse", cause="hunger"),
    "vehicle": Ending(kind="vehicle_failure"),
    "disease": Ending(kind="collapse", cause="disease"),
}


@dataclass(slots=True, frozen=True)
class DayInputs:
    """The decisions and context a day started with."""

    day: int
    mode: GameMode
    pace: PaceId
    diet: DietId
    region: Region
    season: Season
    miles_before: float


@dataclass(slots=True)
class DayOutcome:
    ended: bool
    log_key: str
    breakdown_started: bool = False
    day_consumed: bool = False
    inputs: DayInputs | None = None
    effects: DailyTickOutcome | None = None
    record: DayRecord | None = None
    records: List[DayRecord] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    decision_traces: List[DecisionTrace] = field(default_factory=list)


class DailyTickKernel:
    """Runs the day lifecycle against a GameState.

    The kernel owns no state: the GameState and RNG bundle are passed in on
    every call, and config comes from the bundle given at construction.
    """

    def __init__(self, config: GameConfig) -> None:
        self._config = config

    @property
    def config(self) -> GameConfig:
        return self._config

    # ------------------------------------------------------------------
    # Lifecycle steps
    # ------------------------------------------------------------------
    def start_of_day(self, state: GameState) -> bool:
        return day_accounting.start_of_day(state)

    def end_of_day(self, state: GameState) -> bool:
        return day_accounting.end_of_day(state)

    def apply_daily_physics(self, state: GameState, rngs: RngBundle) -> DailyTickOutcome | None:
        """Weather, exec orders, drains, starvation, illness and health; once per day.

        Returns None when today's physics already ran.
        """
        self.start_of_day(state)
        scratch = state.day_state
        if scratch.physics_applied:
            return None
        scratch.physics_applied = True

        before = state.stats.snapshot()
        weather = process_daily_weather(state, self._config.weather, rngs.weather)
        order = tick_exec_order(state, self._config.exec_orders, rngs.events)
        daily = state.journey.daily
        apply_supplies_channel(state, daily)
        starving = apply_starvation_tick(state)
        ill = roll_daily_illness(state, rngs.health)
        apply_sanity_channel(state, daily)
        apply_health_channel(state, daily)
        state.stats.clamp()
        after = state.stats.snapshot()

        return DailyTickOutcome(
            weather=weather,
            exec_order=order,
            starving=starving,
            ill=ill,
            supplies_delta=after["supplies"] - before["supplies"],
            sanity_delta=after["sanity"] - before["sanity"],
            health_delta=after["hp"] - before["hp"],
        )

    def apply_pace_and_diet(self, state: GameState) -> bool:
        """Apply pace and diet, then set today's encounter chance and distance; once per day."""
        self.start_of_day(state)
        scratch = state.day_state
        if scratch.pacing_applied:
            return False
        scratch.pacing_applied = True

        pacing = self._config.pacing
        pace = pacing.pace(state.pace)
        diet = pacing.diet(state.diet)
        limits = pacing.limits
        stats = state.stats

        stats.sanity += pace.sanity + diet.sanity
        stats.pants = clamp_int(stats.pants + pace.pants + diet.pants, limits.pants_floor, limits.pants_ceiling)
        if limits.passive_relief and stats.pants >= limits.passive_relief_threshold:
            stats.pants = clamp_int(stats.pants + limits.passive_relief, limits.pants_floor, limits.pants_ceiling)
        if limits.boss_pants_cap > 0 and state.boss_ready:
            stats.pants = min(stats.pants, limits.boss_pants_cap)
        stats.clamp()

        # Weather and exec orders already pushed their deltas into today's chance.
        carried = scratch.encounter_chance_today
        scratch.encounter_chance_today = clamp(
            limits.encounter_base + pace.encounter_delta + carried,
            limits.encounter_floor,
            limits.encounter_ceiling,
        )
        compute_distance_today(state, pacing)
        return True

    def check_failure(self, state: GameState, rng: RandomSource | None = None) -> str | None:
        """End the run when a stat or the vehicle has given out.

        A dead vehicle goes through the recovery ladder first; ``rng`` feeds
        its field-repair roll. Returns the log key of the ending, or None
        while the run goes on.
        """
        if state.is_over:
            return "log.run-ended"
        stats = state.stats
        if state.vehicle.health <= 0.0 and check_vehicle_terminal_state(state, self._config.endgame, rng):
            return "log.vehicle.failure"
        if stats.pants >= 100:
            state.set_ending(Ending(kind="collapse", cause="panic"))
            return "log.panic"
        if stats.hp <= 0:
            ending = _DAMAGE_ENDINGS.get(state.last_damage or "", Ending(kind="collapse", cause="breakdown"))
            state.set_ending(ending)
            return f"log.ending.{ending.kind}"
        if stats.sanity <= 0:
            state.set_ending(Ending(kind="sanity_loss"))
            return "log.sanity-loss"
        return None

    def _close_failed_day(self, state: GameState, log_key: str, breakdown_started: bool) -> Tuple[bool, str, bool]:
        self.end_of_day(state)
        return True, log_key, breakdown_started

    def travel_next_leg(self, state: GameState, rngs: RngBundle) -> Tuple[bool, str, bool]:
        """Run the travel part of today.

        Returns ``(ended, log_key, breakdown_started)``; ``ended`` is False only
        while an encounter is waiting for a choice.
        """
        self.start_of_day(state)
        scratch = state.day_state
        endgame_cfg = self._config.endgame

        if state.boss_ready and not state.boss_attempted:
            scratch.suppress_stop_ratio = True
            record_travel_day(state, "non_travel", 0.0, "boss_gate")
            self.end_of_day(state)
            return True, "log.boss.await", False

        if scratch.stop_requested:
            self.end_of_day(state)
            return True, "log.encounter.day-over", False

        if not scratch.encounter_occurred_today:
            tick_ally_attrition(state, rngs.encounter)
            state.stats.clamp()
        failure = self.check_failure(state, rngs.breakdown)
        if failure is not None:
            return self._close_failed_day(state, failure, False)

        breakdown_started = False
        if not scratch.breakdown_rolled:
            scratch.breakdown_rolled = True
            breakdown_started = vehicle_roll(state, rngs.breakdown)
            if state.breakdown is not None:
                resolve_breakdown(state)

        if run_endgame_controller(
            state,
            endgame_cfg,
            computed_miles=scratch.distance_today,
            breakdown_started=breakdown_started,
        ):
            self.end_of_day(state)
            return True, "log.endgame.field-repair", breakdown_started

        if state.vehicle.health <= 0.0:
            failure = self.check_failure(state, rngs.breakdown)
            if failure is not None:
                return self._close_failed_day(state, failure, breakdown_started)

        if scratch.travel_blocked or state.breakdown is not None:
            if scratch.current_day_kind is None:
                record_travel_day(state, "non_travel", 0.0, "repair")
            else:
                scratch.add_tag("repair")
            emit(
                state,
                "travel_blocked",
                severity="warning",
                ui_key="log.travel-blocked",
                part=state.breakdown.part if state.breakdown is not None else None,
            )
            self.end_of_day(state)
            return True, "log.travel-blocked", breakdown_started

        pending = maybe_trigger_encounter(state, self._config.encounters, rngs.encounter)
        if pending is not None:
            if scratch.current_day_kind is None:
                apply_target_travel(state, "partial", partial_day_miles(state, 0.0), "encounter")
            return False, "log.encounter", breakdown_started

        apply_travel_wear(state)
        report = handle_crossing_event(state, self._config.crossings, scratch.distance_today)
        if report is not None:
            return True, report.log_key, breakdown_started

        remaining = max(scratch.distance_today - scratch.current_day_miles, 0.0)
        _, credited = record_travel_day(state, "travel", remaining)
        emit(state, "travel_credited", ui_key="log.traveled", miles=credited, total=state.miles_traveled_actual)
        run_endgame_controller(
            state,
            endgame_cfg,
            computed_miles=scratch.distance_today,
            breakdown_started=False,
        )
        failure = self.check_failure(state, rngs.breakdown)
        if failure is not None:
            return self._close_failed_day(state, failure, breakdown_started)
        self.end_of_day(state)
        return True, "log.traveled", breakdown_started

    # ------------------------------------------------------------------
    # Whole day
    # ------------------------------------------------------------------
    def tick_day(self, state: GameState, rngs: RngBundle) -> DayOutcome:
        """Advance the journey by one day (or resume a day an encounter interrupted)."""
        if state.is_over:
            return DayOutcome(ended=True, log_key="log.run-ended")
        if state.current_encounter is not None:
            return DayOutcome(ended=False, log_key="log.encounter.pending")

        day_before = state.day
        records_before = len(state.day_records)
        self.start_of_day(state)
        inputs = DayInputs(
            day=state.day,
            mode=state.mode,
            pace=state.pace,
            diet=state.diet,
            region=state.region,
            season=state.season,
            miles_before=state.day_state.prev_miles_traveled,
        )

        effects = self.apply_daily_physics(state, rngs)
        self.apply_pace_and_diet(state)
        ended, log_key, breakdown_started = self.travel_next_leg(state, rngs)

        if state.is_over:
            emit(
                state,
                "run_ended",
                severity="critical",
                ui_key=f"result.ending.{state.ending.key}",
                ui_hint="modal",
                ending=state.ending.kind,
                cause=state.ending.cause,
            )
        records = list(state.day_records[records_before:])
        events, traces = drain(state)
        LOG.debug("tick day=%s -> %s (%s)", day_before, log_key, "ended" if ended else "open")
        return DayOutcome(
            ended=ended,
            log_key=log_key,
            breakdown_started=breakdown_started,
            day_consumed=state.day > day_before,
            inputs=inputs,
            effects=effects,
            record=records[0] if records else None,
            records=records,
            events=events,
            decision_traces=traces,
        )


__all__ = ["DailyTickKernel", "DayInputs", "DayOutcome"]
