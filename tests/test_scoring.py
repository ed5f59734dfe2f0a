from overland.domain.defs import ResultConfig
from overland.domain.scoring import (
    apply_rounding,
    final_score,
    journey_score,
    select_ending,
    summarize_result,
)
from overland.domain.share_code import WORD_LIST, compose_seed
from overland.domain.state import Ending
from tests.helpers.builders import make_config, make_state


def test_fresh_state_journey_score() -> None:
    assert journey_score(make_state()) == 800


def test_score_counts_days_and_encounters() -> None:
    state = make_state(day=11, encounters_resolved=3)

    assert journey_score(state) == 800 + 10 * 4 + 3 * 6


def test_breakdown_penalty_is_capped() -> None:
    assert journey_score(make_state(vehicle_breakdowns=2)) == 776
    assert journey_score(make_state(vehicle_breakdowns=100)) == 200


def test_final_score_mode_multiplier() -> None:
    cfg = make_config().result

    assert final_score(make_state(), cfg) == 800
    assert final_score(make_state(mode="deep"), cfg) == 840


def test_final_score_pants_penalty() -> None:
    cfg = make_config().result
    state = make_state()
    state.stats.pants = 80

    assert final_score(state, cfg) == 780


def test_final_score_clamps_at_zero() -> None:
    cfg = make_config().result
    state = make_state(vehicle_breakdowns=50)
    for name in ("supplies", "hp", "morale", "credibility"):
        setattr(state.stats, name, 0)
    state.stats.pants = 100

    assert final_score(state, cfg) == 0


def test_scaled_score_stays_within_bounds() -> None:
    cfg = ResultConfig(final_min=0, final_max=100)

    assert final_score(make_state(mode="deep"), cfg) == 100
    assert final_score(make_state(), ResultConfig(final_min=0, final_max=100, score_mult=3.0)) == 100


def test_rounding_modes() -> None:
    assert apply_rounding(2.5, "nearest") == 3
    assert apply_rounding(2.4, "nearest") == 2
    assert apply_rounding(2.7, "floor") == 2
    assert apply_rounding(2.1, "ceil") == 3
    assert apply_rounding(-2.5, "nearest") == -3
    assert apply_rounding(float("nan"), "nearest") == 0
    assert apply_rounding(1e12, "ceil") == 2**31 - 1


def test_ending_precedence() -> None:
    state = make_state()
    state.stats.pants = 100
    state.stats.sanity = 0
    assert select_ending(state) == Ending(kind="collapse", cause="panic")

    state.stats.pants = 0
    assert select_ending(state) == Ending(kind="sanity_loss")

    state.stats.sanity = 5
    state.stats.supplies = 0
    assert select_ending(state) == Ending(kind="collapse", cause="hunger")

    state.stats.supplies = 5
    assert select_ending(state) == Ending(kind="boss_vote_failed")
    assert select_ending(state, boss_won=True) == Ending(kind="boss_victory")


def test_existing_ending_wins() -> None:
    state = make_state()
    state.set_ending(Ending(kind="vehicle_failure", cause="destroyed"))
    state.stats.pants = 100

    assert select_ending(state) == Ending(kind="vehicle_failure", cause="destroyed")


def test_summary_carries_share_code_and_threshold() -> None:
    seed = compose_seed(False, WORD_LIST.index("ORANGE"), 42)
    state = make_state(seed=seed)

    summary = summarize_result(state, make_config().result, 1000)

    assert summary.share_code == "CL-ORANGE42"
    assert summary.ending.kind == "boss_vote_failed"
    assert summary.headline_key == "result.headline.boss_loss"
    assert summary.score == 800
    assert summary.passed_threshold is False
    assert summary.days == 0
