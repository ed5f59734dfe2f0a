"""Boss confrontation at the end of the trail."""
from __future__ import annotations

import logging
from typing import Literal

from overland.core.numbers import clamp
from overland.core.rng import RandomSource
from overland.domain.defs import BossConfig
from overland.domain.events import emit, trace
from overland.domain.scoring import journey_score
from overland.domain.state import Ending, GameState

LOG = logging.getLogger(__name__)

BossOutcome = Literal["passed_cloture", "survived_flood", "pants_emergency", "exhausted"]

_ENDINGS = {
    "passed_cloture": Ending(kind="boss_victory"),
    "survived_flood": Ending(kind="boss_vote_failed"),
    "pants_emergency": Ending(kind="collapse", cause="panic"),
    "exhausted": Ending(kind="sanity_loss"),
}


def victory_chance(state: GameState, cfg: BossConfig) -> float:
    stats = state.stats
    chance = cfg.base_victory_chance
    chance += stats.credibility * cfg.credibility_weight
    chance += stats.sanity * cfg.sanity_weight
    chance += stats.supplies * cfg.supplies_weight
    chance += stats.allies * cfg.allies_weight
    chance -= stats.pants * cfg.pants_penalty_weight

    threshold = cfg.score_threshold.get(state.mode, 0)
    if threshold > 0:
        chance += cfg.score_weight * clamp(journey_score(state) / threshold, 0.0, 1.0)

    if cfg.distance_required > 0.0:
        chance *= clamp(state.miles_traveled / cfg.distance_required, 0.0, 1.0)
    chance = clamp(chance, cfg.min_chance, cfg.max_chance)
    if state.mode == "deep" and state.strategy == "aggressive":
        chance = min(chance + cfg.deep_aggressive_bonus, 1.0)
    return chance


def run_boss_minigame(state: GameState, cfg: BossConfig, rng: RandomSource) -> BossOutcome:
    """Play out the attrition rounds and the final vote, then set the ending."""
    state.boss_attempted = True
    outcome: BossOutcome | None = None
    for _ in range(max(cfg.rounds, 0)):
        state.stats.pants += max(cfg.pants_gain_per_round, 0)
        state.stats.sanity -= max(cfg.sanity_loss_per_round, 0)
        state.stats.clamp()
        if state.stats.pants >= 100:
            outcome = "pants_emergency"
            break
        if state.stats.sanity <= 0:
            outcome = "exhausted"
            break

    chance = None
    roll = None
    if outcome is None:
        chance = victory_chance(state, cfg)
        roll = rng.random()
        outcome = "passed_cloture" if roll < chance else "survived_flood"
        trace(state, "boss.vote", outcome, roll=roll, candidates=[("passed_cloture", chance)])

    state.boss_victory = outcome == "passed_cloture"
    state.set_ending(_ENDINGS[outcome])
    LOG.info("boss resolved on day %s: %s", state.day, outcome)
    emit(
        state,
        "boss_resolved",
        severity="critical",
        ui_key=f"log.boss.{outcome}",
        ui_hint="modal",
        outcome=outcome,
        chance=chance,
        roll=roll,
    )
    return outcome


__all__ = ["BossOutcome", "run_boss_minigame", "victory_chance"]
