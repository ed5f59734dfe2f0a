import pytest

from overland.core.rng import RNG
from overland.domain.state import Spares
from overland.domain.vehicle import (
    Breakdown,
    Vehicle,
    breakdown_chance,
    breakdown_roll,
    daily_wear,
    resolve_breakdown,
    vehicle_roll,
    weighted_pick,
)
from tests.helpers.builders import make_state
from tests.helpers.fakes import FixedRng


def test_breakdown_chance_scales_with_pace_weather_and_wear() -> None:
    cfg = make_state().journey.breakdown

    assert breakdown_chance(cfg, wear=0.0, pace="heated", weather="clear") == pytest.approx(0.04)
    assert breakdown_chance(cfg, wear=0.0, pace="steady", weather="clear") == pytest.approx(0.038)
    assert breakdown_chance(cfg, wear=0.0, pace="steady", weather="storm") == pytest.approx(0.04 * 0.95 * 1.3 + 0.04)
    assert breakdown_chance(cfg, wear=5.0, pace="heated", weather="clear") == pytest.approx(0.08)
    assert breakdown_chance(cfg, wear=0.0, pace="heated", weather="clear", critical=True) == pytest.approx(0.09)


def test_breakdown_rate_matches_configured_base() -> None:
    cfg = make_state().journey.breakdown
    chance = breakdown_chance(cfg, wear=0.0, pace="heated", weather="clear")
    rng = RNG(2024)
    trials = 6000

    hits = sum(1 for _ in range(trials) if breakdown_roll(chance, rng))

    assert abs(hits / trials - 0.04) < 0.025


def test_weighted_pick() -> None:
    options = [("tire", 50), ("battery", 20), ("alternator", 0)]

    assert weighted_pick(options, FixedRng()) == "tire"
    assert weighted_pick(options, FixedRng(ints=[60])) == "battery"
    assert weighted_pick([("tire", 0)], FixedRng()) is None


def test_vehicle_roll_starts_breakdown() -> None:
    state = make_state(open_day=True)

    started = vehicle_roll(state, FixedRng(0.0))

    assert started is True
    assert state.breakdown == Breakdown(part="tire", day_started=1)
    assert state.day_state.travel_blocked is True
    assert state.vehicle_breakdowns == 1
    assert state.vehicle.health == pytest.approx(94.0)
    assert state.vehicle.wear == pytest.approx(5.0)
    assert state.last_damage == "vehicle"


def test_vehicle_roll_respects_cooldown_and_live_breakdown() -> None:
    state = make_state(open_day=True)
    state.vehicle.set_breakdown_cooldown(2)
    assert vehicle_roll(state, FixedRng(0.0)) is False

    state.vehicle.set_breakdown_cooldown(0)
    state.breakdown = Breakdown(part="battery", day_started=1)
    assert vehicle_roll(state, FixedRng(0.0)) is False
    assert state.vehicle_breakdowns == 0


def test_resolve_breakdown_with_matching_spare() -> None:
    state = make_state(open_day=True)
    state.vehicle.health = 90.0
    state.breakdown = Breakdown(part="tire", day_started=1)

    resolve_breakdown(state)

    assert state.breakdown is None
    assert state.inventory.spares.tire == 0
    assert state.vehicle.health == pytest.approx(94.0)
    assert state.day_state.travel_blocked is False


def test_resolve_breakdown_pays_for_emergency_without_spares() -> None:
    state = make_state(open_day=True)
    state.inventory.spares = Spares(tire=0, battery=0, alternator=0, fuel_pump=0)
    state.breakdown = Breakdown(part="alternator", day_started=1)

    resolve_breakdown(state)

    assert state.breakdown is None
    assert state.budget_cents == 9_000
    assert state.repairs_spent_cents == 1_000


def test_resolve_breakdown_stalls_then_jury_rigs() -> None:
    state = make_state(open_day=True)
    state.inventory.spares = Spares(tire=0, battery=1, alternator=0, fuel_pump=0)
    state.breakdown = Breakdown(part="tire", day_started=1)

    resolve_breakdown(state)
    assert state.breakdown is not None
    assert state.day_state.travel_blocked is True

    state.day = 2
    resolve_breakdown(state)
    assert state.breakdown is None
    assert state.vehicle.health == pytest.approx(97.0)
    assert state.inventory.spares.battery == 1


def test_daily_wear_includes_fatigue() -> None:
    classic = make_state()
    deep = make_state(mode="deep")

    classic_wear = daily_wear(
        classic.journey.wear,
        classic.journey.breakdown,
        pace="steady",
        weather="clear",
        miles_traveled=2400.0,
        malnutrition_level=0,
    )
    deep_wear = daily_wear(
        deep.journey.wear,
        deep.journey.breakdown,
        pace="steady",
        weather="clear",
        miles_traveled=2400.0,
        malnutrition_level=0,
    )

    assert classic_wear == pytest.approx(0.19)
    assert deep_wear == pytest.approx(0.19 * 1.3)


def test_scaled_wear_and_repair_clamps() -> None:
    vehicle = Vehicle()
    vehicle.set_wear_multiplier(0.5)

    applied = vehicle.apply_scaled_wear(2.0)
    vehicle.repair(50.0)

    assert applied == pytest.approx(1.0)
    assert vehicle.wear == pytest.approx(1.0)
    assert vehicle.health == pytest.approx(100.0)
    assert vehicle.is_critical() is False
    vehicle.apply_damage(85.0)
    assert vehicle.is_critical() is True
