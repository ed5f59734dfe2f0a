import pytest

from overland.domain.encounters import (
    apply_choice,
    eligible_encounters,
    encounter_chance,
    maybe_trigger_encounter,
)
from overland.domain.state import PendingEncounter
from tests.helpers.builders import make_config, make_state
from tests.helpers.fakes import FixedRng


def _catalog():
    return make_config().encounters


def test_trigger_makes_encounter_pending() -> None:
    catalog = _catalog()
    state = make_state(open_day=True)
    state.day_state.encounter_chance_today = 0.3

    pending = maybe_trigger_encounter(state, catalog, FixedRng(0.0))

    assert pending is not None
    assert pending.encounter_id == "roadside_rally"
    assert state.current_encounter == pending
    assert state.day_state.encounter_occurred_today is True
    assert state.encounter_history == [(1, "roadside_rally")]
    # Nothing else triggers while a choice is outstanding.
    assert maybe_trigger_encounter(state, catalog, FixedRng(0.0)) is None


def test_no_trigger_above_chance() -> None:
    state = make_state(open_day=True)
    state.day_state.encounter_chance_today = 0.3

    assert maybe_trigger_encounter(state, _catalog(), FixedRng(0.5)) is None
    assert state.current_encounter is None


def test_repeat_window_and_daily_limit() -> None:
    catalog = _catalog()
    state = make_state(open_day=True)
    state.day_state.encounter_chance_today = 1.0

    maybe_trigger_encounter(state, catalog, FixedRng(0.0))
    apply_choice(state, catalog, 1)
    second = maybe_trigger_encounter(state, catalog, FixedRng(0.0))
    apply_choice(state, catalog, 1)

    assert second is not None
    assert second.encounter_id == "hitchhiker"
    assert maybe_trigger_encounter(state, catalog, FixedRng(0.0)) is None


def test_eligibility_filters_region_and_mode() -> None:
    catalog = _catalog()
    classic = {encounter.id for encounter in eligible_encounters(make_state(), catalog)}
    deep_beltway = {
        encounter.id for encounter in eligible_encounters(make_state(mode="deep", region="beltway"), catalog)
    }

    assert "farm_stand" in classic
    assert "fuel_scare" not in classic
    assert "permit_office" not in classic
    assert {"permit_office", "press_scrum", "fuel_scare"} <= deep_beltway
    assert "farm_stand" not in deep_beltway


def test_encounter_chance_bonus_and_soft_cap() -> None:
    state = make_state(open_day=True)
    state.day_state.encounter_chance_today = 0.4
    assert encounter_chance(state) == pytest.approx(0.4)

    state.vehicle.health = 15.0
    assert encounter_chance(state) == pytest.approx(0.52)

    state.vehicle.health = 100.0
    state.encounter_history = [(1, "hitchhiker")] * 5
    assert encounter_chance(state) == pytest.approx(0.4 * 0.45)


def test_choice_applies_effects() -> None:
    catalog = _catalog()
    state = make_state(open_day=True)
    state.current_encounter = PendingEncounter(encounter_id="roadside_rally", name="Roadside Rally", day=1)

    resolution = apply_choice(state, catalog, 0)

    assert resolution.deltas == {"morale": 1, "pants": 2, "credibility": 1}
    assert state.current_encounter is None
    assert state.encounters_resolved == 1
    assert resolution.stops_day is False


def test_budget_costs_stop_at_zero() -> None:
    catalog = _catalog()
    state = make_state(open_day=True, budget_cents=300)
    state.current_encounter = PendingEncounter(encounter_id="fuel_scare", name="Fuel Scare", day=1)

    resolution = apply_choice(state, catalog, 0)

    assert state.budget_cents == 0
    assert resolution.deltas["budget_cents"] == -300


def test_travel_bonus_credits_extra_miles() -> None:
    catalog = _catalog()
    state = make_state(open_day=True)
    state.day_state.distance_today = 12.0
    state.current_encounter = PendingEncounter(encounter_id="tailwind", name="Tailwind", day=1)

    resolution = apply_choice(state, catalog, 0)

    assert resolution.bonus_miles == pytest.approx(3.0)
    assert state.miles_traveled_actual == pytest.approx(3.0)
    assert state.day_state.distance_today == pytest.approx(15.0)
    assert "encounter_bonus" in state.day_state.current_day_tags


def test_hard_stop_and_rest_end_the_day() -> None:
    catalog = _catalog()
    state = make_state(open_day=True)
    state.current_encounter = PendingEncounter(
        encounter_id="flooded_underpass", name="Flooded Underpass", day=1, hard_stop=True
    )
    assert apply_choice(state, catalog, 0).stops_day is True
    assert state.day_state.stop_requested is True

    other = make_state(open_day=True)
    other.current_encounter = PendingEncounter(encounter_id="fuel_scare", name="Fuel Scare", day=1)
    assert apply_choice(other, catalog, 1).stops_day is True
    assert other.day_state.rest_requested is True


def test_choice_tags_inventory() -> None:
    catalog = _catalog()
    state = make_state(open_day=True, region="beltway")
    state.current_encounter = PendingEncounter(encounter_id="press_scrum", name="Press Scrum", day=1)

    apply_choice(state, catalog, 1)

    assert state.inventory.has_tag("press_pass")


def test_invalid_choice_raises_and_keeps_pending() -> None:
    catalog = _catalog()
    state = make_state(open_day=True)
    with pytest.raises(LookupError):
        apply_choice(state, catalog, 0)

    state.current_encounter = PendingEncounter(encounter_id="hitchhiker", name="Hitchhiker", day=1)
    with pytest.raises(LookupError):
        apply_choice(state, catalog, 7)
    assert state.current_encounter is not None
