import pytest

from overland.domain.daily import (
    apply_sanity_channel,
    apply_starvation_tick,
    apply_supplies_channel,
    health_change,
    illness_chance,
    roll_daily_illness,
    tick_ally_attrition,
)
from tests.helpers.builders import make_state
from tests.helpers.fakes import FixedRng


def test_fractional_drain_carries_between_days() -> None:
    state = make_state(open_day=True)
    state.journey.daily.supplies.base = 0.5

    losses = [apply_supplies_channel(state, state.journey.daily) for _ in range(4)]

    assert losses == [0, -1, 0, -1]
    assert state.stats.supplies == 8
    assert state.daily_carry["supplies"] == 0.0


def test_drain_scales_with_pace_and_diet() -> None:
    state = make_state(open_day=True, pace="blitz", diet="doom")
    state.journey.daily.sanity.base = 0.5

    # 0.5 * 1.5 * 2.0 = 1.5 per day
    losses = [apply_sanity_channel(state, state.journey.daily) for _ in range(2)]

    assert losses == [-1, -2]
    assert state.stats.sanity == 7


def test_zero_base_channel_never_drains() -> None:
    state = make_state(open_day=True)
    state.journey.daily.supplies.base = 0.0

    assert apply_supplies_channel(state, state.journey.daily) == 0
    assert state.daily_carry.get("supplies", 0.0) == 0.0


def test_rest_heals_through_health_channel() -> None:
    state = make_state(open_day=True)
    assert health_change(state.journey.daily.health, state) == 0

    state.day_state.rest_requested = True
    assert health_change(state.journey.daily.health, state) == 1


def test_starvation_grace_then_damage() -> None:
    state = make_state(open_day=True)
    state.stats.supplies = 0

    assert apply_starvation_tick(state) is False
    assert state.stats.hp == 10

    assert apply_starvation_tick(state) is True
    assert state.stats.hp == 9
    assert state.stats.sanity == 9
    assert state.stats.pants == 1
    assert state.malnutrition_level == 2
    assert state.last_damage == "starvation"


def test_starvation_backstop_fires_once() -> None:
    state = make_state(open_day=True)
    state.stats.supplies = 0
    state.stats.hp = 1
    state.starvation_days = 1

    apply_starvation_tick(state)
    assert state.stats.hp == 1
    assert state.starvation_backstop_used is True
    assert state.day_state.rest_requested is True

    apply_starvation_tick(state)
    assert state.stats.hp == 0


def test_supplies_end_starvation() -> None:
    state = make_state(open_day=True, starvation_days=4, malnutrition_level=4)

    assert apply_starvation_tick(state) is False
    assert state.starvation_days == 0
    assert state.malnutrition_level == 0


def test_illness_chance_bonuses() -> None:
    state = make_state()
    assert illness_chance(state) == pytest.approx(0.012)

    state.stats.supplies = 0
    state.starvation_days = 2
    state.stats.hp = 3
    assert illness_chance(state) == pytest.approx(0.057)


def test_illness_runs_its_course_then_cools_down() -> None:
    state = make_state(open_day=True)

    assert roll_daily_illness(state, FixedRng(0.0)) is True
    assert state.illness_days_remaining == 2
    assert state.stats.hp == 9
    assert state.last_damage == "disease"

    roll_daily_illness(state, FixedRng(0.0))
    roll_daily_illness(state, FixedRng(0.0))
    assert state.illness_days_remaining == 0
    assert state.disease_cooldown == 5

    # Cooling down: no new illness even on a zero roll.
    assert roll_daily_illness(state, FixedRng(0.0)) is False
    assert state.disease_cooldown == 4


def test_no_illness_on_high_roll() -> None:
    state = make_state(open_day=True)

    assert roll_daily_illness(state, FixedRng(0.99)) is False
    assert state.stats.hp == 10


def test_ally_attrition() -> None:
    state = make_state(open_day=True)
    state.stats.allies = 1

    assert tick_ally_attrition(state, FixedRng(0.5)) is False
    assert tick_ally_attrition(state, FixedRng(0.0)) is True
    assert state.stats.allies == 0
    assert state.stats.morale == 4
    assert state.stats.sanity == 8
    assert tick_ally_attrition(state, FixedRng(0.0)) is False
