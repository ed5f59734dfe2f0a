import pytest

from overland.domain.boss import run_boss_minigame, victory_chance
from overland.domain.defs import BossConfig
from tests.helpers.builders import make_state
from tests.helpers.fakes import FixedRng


def _depleted_state():
    state = make_state(miles_traveled=100.0)
    stats = state.stats
    stats.credibility = 0
    stats.sanity = 1
    stats.supplies = 0
    stats.allies = 0
    stats.pants = 50
    stats.hp = 1
    return state


def _strong_state():
    state = make_state(mode="deep", strategy="aggressive", miles_traveled=2100.0)
    stats = state.stats
    stats.credibility = 20
    stats.sanity = 10
    stats.supplies = 20
    stats.allies = 10
    stats.pants = 0
    stats.hp = 10
    stats.morale = 10
    return state


def test_victory_chance_respects_floor() -> None:
    cfg = BossConfig(rounds=0, distance_required=5000.0, max_chance=0.2)

    assert victory_chance(_depleted_state(), cfg) == pytest.approx(0.08)


def test_victory_chance_caps_then_adds_aggressive_bonus() -> None:
    cfg = BossConfig(rounds=0, max_chance=0.7)

    assert victory_chance(_strong_state(), cfg) == pytest.approx(0.75)


def test_weak_run_loses_the_vote() -> None:
    state = _depleted_state()
    cfg = BossConfig(rounds=0, distance_required=5000.0, max_chance=0.2)

    outcome = run_boss_minigame(state, cfg, FixedRng(0.5))

    assert outcome == "survived_flood"
    assert state.boss_attempted is True
    assert state.boss_victory is False
    assert state.ending.kind == "boss_vote_failed"


def test_strong_run_passes_cloture() -> None:
    state = _strong_state()

    outcome = run_boss_minigame(state, BossConfig(rounds=0, max_chance=0.7), FixedRng(0.5))

    assert outcome == "passed_cloture"
    assert state.boss_victory is True
    assert state.ending.kind == "boss_victory"


def test_pants_emergency_skips_the_vote() -> None:
    state = make_state(miles_traveled=2100.0)
    state.stats.pants = 95
    rng = FixedRng(0.0)

    outcome = run_boss_minigame(state, BossConfig(), rng)

    assert outcome == "pants_emergency"
    assert state.ending.kind == "collapse"
    assert state.ending.cause == "panic"
    assert rng.calls == 0


def test_exhaustion_ends_in_sanity_loss() -> None:
    state = make_state(miles_traveled=2100.0)
    state.stats.sanity = 3

    outcome = run_boss_minigame(state, BossConfig(), FixedRng(0.0))

    assert outcome == "exhausted"
    assert state.stats.sanity == 0
    assert state.stats.pants == 8
    assert state.ending.kind == "sanity_loss"


def test_rounds_wear_down_stats_before_the_vote() -> None:
    state = make_state(miles_traveled=2100.0)

    run_boss_minigame(state, BossConfig(), FixedRng(0.99))

    assert state.stats.sanity == 4
    assert state.stats.pants == 12
    assert state.ending.kind == "boss_vote_failed"
