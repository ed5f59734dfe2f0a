import pytest

from overland.domain.exec_orders import apply_exec_order_effects, tick_exec_order
from tests.helpers.builders import make_config, make_state
from tests.helpers.fakes import FixedRng


def test_order_starts_applies_and_expires() -> None:
    config = make_config().exec_orders
    state = make_state(open_day=True)

    # First order in the table, shortest duration.
    assert tick_exec_order(state, config, FixedRng(0.0)) == "shutdown"
    assert state.exec_order.current == "shutdown"
    assert state.exec_order.days_remaining == 1
    assert state.stats.supplies == 9
    assert state.day_state.travel_multiplier == pytest.approx(0.9)
    assert state.day_state.encounter_chance_today == pytest.approx(0.02)

    assert tick_exec_order(state, config, FixedRng(0.0)) == "shutdown"
    assert state.exec_order.current is None
    assert state.exec_order.cooldown == 6

    assert tick_exec_order(state, config, FixedRng(0.0)) is None
    assert state.exec_order.cooldown == 5


def test_no_order_on_high_roll() -> None:
    config = make_config().exec_orders
    state = make_state(open_day=True)

    assert tick_exec_order(state, config, FixedRng(0.5)) is None
    assert state.exec_order.current is None


def test_travel_multiplier_floor_and_bonus_cap() -> None:
    config = make_config().exec_orders
    state = make_state(open_day=True)
    state.day_state.travel_multiplier = 0.75
    state.day_state.breakdown_bonus = 0.18

    apply_exec_order_effects(state, config, "tariffs")

    assert state.day_state.travel_multiplier == pytest.approx(0.72)
    assert state.day_state.breakdown_bonus == pytest.approx(0.2)


def test_order_events_are_emitted() -> None:
    config = make_config().exec_orders
    state = make_state(open_day=True)

    tick_exec_order(state, config, FixedRng(0.0))

    kinds = [event.kind for event in state.day_state.events]
    assert kinds == ["exec_order_started"]
    assert state.day_state.events[0].payload == {"order": "shutdown", "duration": 2}
