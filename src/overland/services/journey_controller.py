"""UI-agnostic controller for journey progression."""
from __future__ import annotations

import logging

from overland.core.rng import RngBundle
from overland.core.types import Part
from overland.domain.boss import BossOutcome, run_boss_minigame
from overland.domain.camp import (
    CampOutcome,
    camp_forage,
    camp_repair_hack,
    camp_repair_spare,
    camp_rest,
    camp_therapy,
)
from overland.domain.encounters import EncounterResolution, apply_choice
from overland.domain.scoring import ResultSummary, summarize_result
from overland.domain.state import GameState
from overland.services.config_service import GameConfig
from overland.services.journey_kernel import DailyTickKernel, DayOutcome

LOG = logging.getLogger(__name__)


class JourneyController:
    """
    Wraps the day kernel and the player actions around it.

    The controller holds config only. It does NOT hold the GameState or the
    RNG bundle; callers pass both in and decide when to persist them.
    """

    def __init__(self, config: GameConfig, kernel: DailyTickKernel | None = None) -> None:
        self._config = config
        self._kernel = kernel or DailyTickKernel(config)

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def kernel(self) -> DailyTickKernel:
        return self._kernel

    def tick_day(self, state: GameState, rngs: RngBundle) -> DayOutcome:
        return self._kernel.tick_day(state, rngs)

    def apply_choice(self, state: GameState, choice_index: int) -> EncounterResolution:
        """Resolve the pending encounter; the day resumes on the next tick."""
        resolution = apply_choice(state, self._config.encounters, choice_index)
        failure = self._kernel.check_failure(state)
        if failure is not None:
            self._kernel.end_of_day(state)
        return resolution

    def camp_rest(self, state: GameState) -> CampOutcome:
        return camp_rest(state, self._config.camp)

    def camp_forage(self, state: GameState, rngs: RngBundle) -> CampOutcome:
        return camp_forage(state, self._config.camp, rngs.travel)

    def camp_therapy(self, state: GameState) -> CampOutcome:
        return camp_therapy(state, self._config.camp)

    def camp_repair_spare(self, state: GameState, part: Part) -> CampOutcome:
        return camp_repair_spare(state, self._config.camp, part)

    def camp_repair_hack(self, state: GameState) -> CampOutcome:
        return camp_repair_hack(state, self._config.camp)

    def attempt_boss(self, state: GameState, rngs: RngBundle) -> BossOutcome:
        return run_boss_minigame(state, self._config.boss, rngs.boss)

    def summary(self, state: GameState) -> ResultSummary:
        threshold = self._config.boss.score_threshold.get(state.mode, 0)
        return summarize_result(state, self._config.result, threshold)


__all__ = ["JourneyController"]
