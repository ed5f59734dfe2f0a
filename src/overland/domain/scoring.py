"""Journey score, final score and the result summary."""
from __future__ import annotations

from dataclasses import dataclass

from overland.core.numbers import I32_MAX, I32_MIN, ceil_to_int, clamp_int, floor_to_int, round_to_int
from overland.domain.defs import ResultConfig, RoundingMode
from overland.domain.share_code import encode_friendly
from overland.domain.state import Ending, GameState

BREAKDOWN_PENALTY = 12
BREAKDOWN_PENALTY_CAP = 600
MIN_SCORE_MULTIPLIER = 0.1

HEADLINE_KEYS = {
    "boss_victory": "result.headline.victory",
    "boss_vote_failed": "result.headline.boss_loss",
    "sanity_loss": "result.headline.sanity",
    "collapse": "result.headline.collapse",
    "vehicle_failure": "result.headline.vehicle",
    "exposure": "result.headline.exposure",
}


def journey_score(state: GameState) -> int:
    stats = state.stats
    days = max(state.day - 1, 0)
    score = (
        stats.supplies * 10
        + stats.hp * 50
        + stats.morale * 25
        + stats.credibility * 15
        + stats.allies * 5
        + days * 4
        + state.encounters_resolved * 6
    )
    return score - min(state.vehicle_breakdowns * BREAKDOWN_PENALTY, BREAKDOWN_PENALTY_CAP)


def total_multiplier(state: GameState, cfg: ResultConfig) -> float:
    bonus = cfg.display_bonus_deep if state.mode == "deep" else 0.0
    return max(cfg.score_mult + bonus, MIN_SCORE_MULTIPLIER)


def apply_rounding(value: float, mode: RoundingMode) -> int:
    """Round to an int; "nearest" rounds half away from zero. Saturates to the i32 range."""
    if mode == "floor":
        return floor_to_int(value)
    if mode == "ceil":
        return ceil_to_int(value, I32_MIN, I32_MAX)
    return round_to_int(value)


def final_score(state: GameState, cfg: ResultConfig) -> int:
    score = journey_score(state)
    pants = max(state.stats.pants, 0)
    if pants > cfg.pants_threshold:
        score -= (pants - cfg.pants_threshold) * cfg.pants_penalty_per_point
    score = clamp_int(score, cfg.final_min, cfg.final_max)
    scaled = apply_rounding(score * total_multiplier(state, cfg), cfg.rounding)
    return clamp_int(scaled, cfg.final_min, cfg.final_max)


def select_ending(state: GameState, boss_won: bool | None = None) -> Ending:
    """Pick the run's ending; an ending already set always wins.

    Precedence: panic, sanity, collapse, lost vote, victory.
    """
    if state.ending is not None:
        return state.ending
    stats = state.stats
    if stats.pants >= 100:
        return Ending(kind="collapse", cause="panic")
    if stats.sanity <= 0:
        return Ending(kind="sanity_loss")
    if stats.hp <= 0 or stats.supplies <= 0:
        return Ending(kind="collapse", cause="hunger" if stats.supplies <= 0 else "breakdown")
    won = state.boss_victory if boss_won is None else boss_won
    if not won:
        return Ending(kind="boss_vote_failed")
    return Ending(kind="boss_victory")


@dataclass(slots=True, frozen=True)
class ResultSummary:
    ending: Ending
    headline_key: str
    ending_cause: str | None
    share_code: str
    mode: str
    score: int
    journey_score: int
    score_threshold: int
    passed_threshold: bool
    multiplier: float
    days: int
    miles: float
    encounters: int
    breakdowns: int
    crossings: int
    allies: int
    supplies: int
    credibility: int
    pants: int
    malnutrition_days: int


def summarize_result(state: GameState, cfg: ResultConfig, score_threshold: int) -> ResultSummary:
    ending = select_ending(state)
    score = final_score(state, cfg)
    return ResultSummary(
        ending=ending,
        headline_key=HEADLINE_KEYS[ending.kind],
        ending_cause=ending.cause,
        share_code=encode_friendly(state.mode == "deep", state.seed),
        mode=state.mode,
        score=score,
        journey_score=journey_score(state),
        score_threshold=score_threshold,
        passed_threshold=score >= score_threshold,
        multiplier=total_multiplier(state, cfg),
        days=max(state.day - 1, 0),
        miles=state.miles_traveled_actual,
        encounters=state.encounters_resolved,
        breakdowns=state.vehicle_breakdowns,
        crossings=state.crossings_completed,
        allies=state.stats.allies,
        supplies=state.stats.supplies,
        credibility=state.stats.credibility,
        pants=state.stats.pants,
        malnutrition_days=state.starvation_days,
    )


__all__ = [
    "ResultSummary",
    "apply_rounding",
    "final_score",
    "journey_score",
    "select_ending",
    "summarize_result",
    "total_multiplier",
]
