from overland.domain.camp import (
    camp_forage,
    camp_repair_hack,
    camp_repair_spare,
    camp_rest,
    camp_therapy,
)
from overland.domain.day_accounting import record_travel_day
from overland.domain.vehicle import Breakdown
from tests.helpers.builders import make_config, make_state
from tests.helpers.fakes import FixedRng


def _camp():
    return make_config().camp


def test_rest_spends_a_day_and_starts_cooldown() -> None:
    cfg = _camp()
    state = make_state()

    outcome = camp_rest(state, cfg)

    assert outcome.ok is True
    assert outcome.log_key == "log.camp.rest"
    assert outcome.deltas == {"supplies": -1}
    assert state.stats.supplies == 9
    assert state.day == 2
    assert state.camp.rest_cooldown == 1
    record = state.day_records[-1]
    assert record.kind == "non_travel"
    assert record.tags == ("camp", "camp_rest")

    again = camp_rest(state, cfg)
    assert again.ok is False
    assert again.log_key == "log.camp.rest.cooldown"
    assert state.day == 2


def test_camp_days_ignore_the_stop_cap() -> None:
    state = make_state(recent_travel_days=["non_travel"])

    camp_rest(state, _camp())

    assert state.day_records[-1].kind == "non_travel"


def test_camp_after_travel_closes_today_first() -> None:
    state = make_state(open_day=True)
    record_travel_day(state, "travel", 12.0)

    camp_rest(state, _camp())

    assert [record.kind for record in state.day_records] == ["travel", "non_travel"]
    assert state.day == 3


def test_forage_adds_supplies_and_bonus() -> None:
    cfg = _camp()
    state = make_state()
    assert camp_forage(state, cfg, FixedRng()).deltas == {"supplies": 2}
    assert state.stats.supplies == 12

    other = make_state()
    camp_forage(other, cfg, FixedRng(ints=[2]))
    assert other.stats.supplies == 14


def test_therapy_requires_low_sanity_and_budget() -> None:
    cfg = _camp()
    calm = make_state()
    refused = camp_therapy(calm, cfg)
    assert refused.ok is False
    assert refused.log_key == "log.camp.therapy.unavailable"
    assert calm.budget_cents == 10_000

    state = make_state()
    state.stats.sanity = 5
    outcome = camp_therapy(state, cfg)
    assert outcome.ok is True
    assert outcome.deltas == {"sanity": 2, "budget_cents": -500}
    assert state.stats.sanity == 7
    assert state.budget_cents == 9_500

    broke = make_state(budget_cents=100)
    broke.stats.sanity = 5
    assert camp_therapy(broke, cfg).ok is False


def test_repair_spare_fixes_matching_breakdown() -> None:
    cfg = _camp()
    state = make_state(breakdown=Breakdown(part="tire", day_started=1))
    state.vehicle.health = 80.0

    outcome = camp_repair_spare(state, cfg, "tire")

    assert outcome.ok is True
    assert outcome.days == 0
    assert state.breakdown is None
    assert state.inventory.spares.tire == 0
    assert state.vehicle.health == 90.0
    assert state.day == 1


def test_repair_spare_refusals() -> None:
    cfg = _camp()
    broken = make_state(breakdown=Breakdown(part="battery", day_started=1))
    assert camp_repair_spare(broken, cfg, "tire").log_key == "log.camp.repair_spare.wrong_part"

    healthy = make_state()
    assert camp_repair_spare(healthy, cfg, "tire").log_key == "log.camp.repair_spare.not_needed"

    worn = make_state()
    worn.vehicle.health = 50.0
    assert camp_repair_spare(worn, cfg, "alternator").log_key == "log.camp.repair_spare.no_spare"
    assert worn.vehicle.health == 50.0


def test_repair_hack_trades_wear_for_health() -> None:
    cfg = _camp()
    state = make_state()
    state.vehicle.health = 50.0

    outcome = camp_repair_hack(state, cfg)

    assert outcome.ok is True
    assert state.vehicle.health == 54.0
    assert state.vehicle.wear == 5.0
    assert state.day == 2
    assert state.camp.repair_cooldown == 1
    assert camp_repair_hack(state, cfg).log_key == "log.camp.repair_hack.unavailable"
