import pytest

from overland.domain.recovery import (
    DELAY_TRAVEL_CREDIT_MILES,
    breakdown_tolerance,
    check_vehicle_terminal_state,
    try_field_recovery,
)
from overland.domain.state import Ending, Spares
from overland.domain.vehicle import Breakdown
from tests.helpers.builders import make_config, make_state
from tests.helpers.fakes import FixedRng


def _endgame():
    return make_config().endgame


def _stranded(mode="classic", strategy="aggressive", miles=1000.0, **overrides):
    """A dead vehicle with no spares and, unless overridden, no money left."""
    overrides.setdefault("budget_cents", 0)
    state = make_state(
        mode=mode,
        strategy=strategy,
        miles_traveled_actual=miles,
        miles_traveled=miles,
        open_day=True,
        **overrides,
    )
    state.inventory.spares = Spares(tire=0, battery=0)
    state.vehicle.health = 0.0
    return state


def test_tolerance_grows_with_spares_and_late_miles() -> None:
    assert breakdown_tolerance(make_state()) == 6
    assert breakdown_tolerance(_stranded("deep", "aggressive", 1000.0)) == 4
    assert breakdown_tolerance(_stranded("deep", "aggressive", 1860.0)) == 6
    assert breakdown_tolerance(_stranded("deep", "aggressive", 1960.0)) == 7
    assert breakdown_tolerance(_stranded("deep", "balanced", 1900.0)) == 6
    assert breakdown_tolerance(_stranded("deep", "balanced", 1950.0)) == 7
    assert breakdown_tolerance(_stranded("deep", "resource_manager", 1960.0)) == 4


def test_dead_vehicle_uses_a_spare_first() -> None:
    state = make_state(strategy="aggressive", open_day=True)
    state.vehicle.health = 0.0

    assert check_vehicle_terminal_state(state, _endgame()) is False
    assert state.inventory.spares.tire == 0
    assert state.inventory.spares.battery == 1
    assert state.vehicle.health == 4.0
    assert state.budget_cents == 10_000
    assert state.last_damage == "vehicle"


def test_dead_vehicle_falls_back_to_the_emergency_budget() -> None:
    state = _stranded(budget_cents=10_000)

    assert check_vehicle_terminal_state(state, _endgame()) is False
    assert state.vehicle.health == 10.0
    assert state.budget_cents == 9_000
    assert state.repairs_spent_cents == 1_000


def test_dead_vehicle_limps_while_under_tolerance() -> None:
    state = _stranded()

    assert check_vehicle_terminal_state(state, _endgame()) is False
    assert state.vehicle.health == 4.0
    assert state.day_state.current_day_kind == "partial"
    assert state.miles_traveled_actual == pytest.approx(1000.0 + DELAY_TRAVEL_CREDIT_MILES)
    assert "repair" in state.day_state.current_day_tags
    assert not state.is_over


def test_out_of_options_past_tolerance_ends_the_run() -> None:
    state = _stranded(vehicle_breakdowns=10)

    assert check_vehicle_terminal_state(state, _endgame()) is True
    assert state.ending == Ending(kind="vehicle_failure", cause="destroyed")
    assert state.vehicle.health == 0.0


def test_classic_balanced_field_repair_guard() -> None:
    state = _stranded(strategy="balanced", vehicle_breakdowns=10, budget_cents=800)
    state.breakdown = Breakdown(part="battery", day_started=state.day)
    state.vehicle.wear = 20.0

    assert check_vehicle_terminal_state(state, _endgame()) is False
    assert state.vehicle.health == 10.0
    assert state.vehicle.wear == pytest.approx(19.65)
    assert state.budget_cents == 0
    assert state.repairs_spent_cents == 800
    assert state.breakdown is None
    assert state.day_state.current_day_kind == "partial"
    assert state.miles_traveled_actual == pytest.approx(1006.0)
    assert "field_repair_guard" in state.day_state.current_day_tags

    late = _stranded(strategy="balanced", miles=1950.0, vehicle_breakdowns=10)
    assert check_vehicle_terminal_state(late, _endgame()) is True


def test_deep_aggressive_field_repair_roll() -> None:
    lucky = _stranded("deep", "aggressive", 1700.0, vehicle_breakdowns=10)
    rng = FixedRng(0.1)

    assert check_vehicle_terminal_state(lucky, _endgame(), rng) is False
    assert rng.calls == 1
    assert lucky.vehicle.health == 10.0
    assert "field_repair" in lucky.day_state.current_day_tags

    unlucky = _stranded("deep", "aggressive", 1700.0, vehicle_breakdowns=10)
    assert check_vehicle_terminal_state(unlucky, _endgame(), FixedRng(0.5)) is True

    too_early = _stranded("deep", "aggressive", 1500.0, vehicle_breakdowns=10)
    assert try_field_recovery(too_early, FixedRng(0.0)) is None


def test_emergency_limp_once_per_window() -> None:
    state = _stranded("deep", "conservative", 1900.0, vehicle_breakdowns=20)

    assert check_vehicle_terminal_state(state, _endgame()) is False
    assert state.vehicle.health == 10.0
    assert state.endgame.last_limp_mile == state.miles_traveled_actual
    assert "emergency_limp" in state.day_state.current_day_tags

    state.vehicle.health = 0.0
    assert check_vehicle_terminal_state(state, _endgame()) is True
    assert state.ending == Ending(kind="vehicle_failure", cause="destroyed")


def test_deep_balanced_failsafe_before_its_distance() -> None:
    state = _stranded("deep", "balanced", 1000.0, vehicle_breakdowns=20)

    assert check_vehicle_terminal_state(state, _endgame()) is False
    assert state.vehicle.health == 4.0
    assert "repair" in state.day_state.current_day_tags

    late = _stranded("deep", "balanced", 1960.0, vehicle_breakdowns=20)
    late.endgame.last_limp_mile = 1900.0
    assert check_vehicle_terminal_state(late, _endgame()) is True


def test_healthy_vehicle_is_left_alone() -> None:
    state = make_state(open_day=True)

    assert check_vehicle_terminal_state(state, _endgame()) is False
    assert state.inventory.spares.total() == 2
    assert state.day_state.current_day_kind is None
