import pytest

from overland.domain.travel import apply_travel_wear, compute_distance_today, malnutrition_factor
from tests.helpers.builders import make_config, make_state


def _distance(state, config=None) -> float:
    config = config or make_config()
    return compute_distance_today(state, config.pacing)


def test_base_distance_and_partial() -> None:
    state = make_state(open_day=True)

    assert _distance(state) == pytest.approx(12.0)
    assert state.day_state.partial_distance_today == pytest.approx(6.0)
    assert state.day_state.distance_cap_today == pytest.approx(22.0)


def test_pace_scales_distance() -> None:
    state = make_state(open_day=True, pace="blitz")

    assert _distance(state) == pytest.approx(16.2)


def test_deep_family_uses_its_own_base() -> None:
    state = make_state(mode="deep", strategy="aggressive", open_day=True, pace="blitz")

    assert _distance(state) == pytest.approx(13.5 * 1.35)


def test_weather_slows_travel_down_to_penalty_floor() -> None:
    state = make_state(open_day=True)
    state.weather_state.today = "storm"
    state.day_state.weather_travel_mult = 0.85

    assert _distance(state) == pytest.approx(12.0 * 0.85 * 0.85)

    state.day_state.weather_travel_mult = 0.1
    assert _distance(state) == pytest.approx(12.0 * 0.6)


def test_critical_vehicle_and_modifiers_respect_minimum() -> None:
    state = make_state(open_day=True)
    state.vehicle.health = 10.0
    assert _distance(state) == pytest.approx(6.0)

    state.vehicle.health = 100.0
    state.day_state.travel_multiplier = 0.4
    assert _distance(state) == pytest.approx(6.0)


def test_malnutrition_and_illness_slow_travel() -> None:
    state = make_state(open_day=True, malnutrition_level=3)
    assert _distance(state) == pytest.approx(12.0 * 0.85)

    state.malnutrition_level = 0
    state.illness_days_remaining = 2
    assert _distance(state) == pytest.approx(12.0 * 0.85)


def test_malnutrition_factor_floor() -> None:
    assert malnutrition_factor(0) == 1.0
    assert malnutrition_factor(3) == pytest.approx(0.85)
    assert malnutrition_factor(20) == pytest.approx(0.3)


def test_travel_wear_damages_vehicle() -> None:
    state = make_state(open_day=True)

    applied = apply_travel_wear(state)

    assert applied == pytest.approx(0.19)
    assert state.vehicle.wear == pytest.approx(0.19)
    assert state.vehicle.health == pytest.approx(99.81)
