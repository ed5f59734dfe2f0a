from overland.core.rng import RngBundle
from overland.core.types import PARTS
from overland.domain.state import Ending, Spares
from overland.domain.vehicle import Breakdown
from overland.services.journey_kernel import DailyTickKernel
from tests.helpers.builders import make_config, make_session, make_state, play_days

SUPPRESSED_TAGS = {"camp", "boss_gate"}


def _ledger(session):
    return [(record.day_index, record.kind, record.miles, record.tags) for record in session.state.day_records]


def test_same_seed_replays_the_same_journey() -> None:
    first = make_session(seed=99)
    second = make_session(seed=99)

    play_days(first, 40)
    play_days(second, 40)

    assert _ledger(first) == _ledger(second)
    assert first.state.stats == second.state.stats
    assert first.state.miles_traveled_actual == second.state.miles_traveled_actual


def test_different_seeds_diverge() -> None:
    first = make_session(seed=1)
    second = make_session(seed=2)

    play_days(first, 40)
    play_days(second, 40)

    assert _ledger(first) != _ledger(second)


def test_day_records_are_contiguous() -> None:
    session = make_session(seed=7)

    play_days(session, 30)

    days = [record.day_index for record in session.state.day_records]
    assert days == list(range(1, len(days) + 1))
    assert session.state.day == len(days) + 1


def _assert_stop_cap(session) -> None:
    records = session.state.day_records
    window = session.state.journey.stop_cap_window
    cap = session.state.journey.stop_cap
    for start in range(max(len(records) - window + 1, 0)):
        chunk = records[start : start + window]
        if any(SUPPRESSED_TAGS & set(record.tags) for record in chunk):
            continue
        assert sum(1 for record in chunk if record.kind == "non_travel") <= cap


def test_stop_cap_holds_over_long_runs() -> None:
    for mode, strategy, seed in (("classic", "balanced", 11), ("deep", "conservative", 12), ("deep", "aggressive", 13)):
        session = make_session(mode, strategy, seed)
        session.set_diet("doom")
        play_days(session, 80)
        _assert_stop_cap(session)


def test_daily_physics_runs_once_per_day() -> None:
    kernel = DailyTickKernel(make_config())
    state = make_state()
    rngs = RngBundle.from_user_seed(state.seed)

    first = kernel.apply_daily_physics(state, rngs)
    counts = rngs.draw_counts()
    second = kernel.apply_daily_physics(state, rngs)

    assert first is not None
    assert second is None
    assert rngs.draw_counts() == counts


def test_pace_and_diet_apply_once() -> None:
    kernel = DailyTickKernel(make_config())
    state = make_state()

    assert kernel.apply_pace_and_diet(state) is True
    chance = state.day_state.encounter_chance_today
    distance = state.day_state.distance_today
    assert kernel.apply_pace_and_diet(state) is False
    assert state.day_state.encounter_chance_today == chance
    assert state.day_state.distance_today == distance
    assert distance > 0.0


def test_stalled_breakdown_blocks_travel_then_jury_rigs() -> None:
    kernel = DailyTickKernel(make_config())
    state = make_state(open_day=True, breakdown=Breakdown(part="battery", day_started=1))
    state.inventory.spares.battery = 0
    rngs = RngBundle.from_user_seed(state.seed)

    ended, log_key, started = kernel.travel_next_leg(state, rngs)

    assert (ended, log_key, started) == (True, "log.travel-blocked", False)
    record = state.day_records[-1]
    assert record.kind == "non_travel"
    assert "repair" in record.tags
    assert state.breakdown is not None

    outcome = kernel.tick_day(state, rngs)

    assert state.breakdown is None
    assert "log.breakdown-jury-rigged" in [event.ui_key for event in outcome.events]


def test_boss_gate_closes_the_day_without_travel() -> None:
    kernel = DailyTickKernel(make_config())
    state = make_state(open_day=True, boss_ready=True, recent_travel_days=["non_travel"])
    rngs = RngBundle.from_user_seed(state.seed)

    ended, log_key, _ = kernel.travel_next_leg(state, rngs)

    assert (ended, log_key) == (True, "log.boss.await")
    record = state.day_records[-1]
    assert record.kind == "non_travel"
    assert "boss_gate" in record.tags


def test_check_failure_endings() -> None:
    kernel = DailyTickKernel(make_config())

    wrecked = make_state(strategy="aggressive", open_day=True, vehicle_breakdowns=10, budget_cents=0)
    wrecked.inventory.spares = Spares(tire=0, battery=0)
    wrecked.vehicle.health = 0.0
    assert kernel.check_failure(wrecked) == "log.vehicle.failure"
    assert wrecked.ending == Ending(kind="vehicle_failure", cause="destroyed")

    panicked = make_state(open_day=True)
    panicked.stats.pants = 100
    assert kernel.check_failure(panicked) == "log.panic"

    starved = make_state(open_day=True, last_damage="starvation")
    starved.stats.hp = 0
    assert kernel.check_failure(starved) == "log.ending.collapse"
    assert starved.ending == Ending(kind="collapse", cause="hunger")

    broken = make_state(open_day=True)
    broken.stats.sanity = 0
    assert kernel.check_failure(broken) == "log.sanity-loss"

    assert kernel.check_failure(make_state(open_day=True)) is None


def test_failure_guard_keeps_deep_run_alive() -> None:
    kernel = DailyTickKernel(make_config())
    state = make_state(mode="deep", miles_traveled_actual=1900.0, open_day=True)
    state.endgame.active = True
    state.endgame.policy_key = "deep_balanced"
    state.inventory.spares = Spares(tire=0, battery=0)
    state.budget_cents = 0
    state.vehicle_breakdowns = 20
    state.vehicle.health = 0.0

    assert kernel.check_failure(state) is None
    assert state.vehicle.health == 40.0
    assert not state.is_over


def test_dead_classic_balanced_vehicle_is_field_repaired() -> None:
    kernel = DailyTickKernel(make_config())
    state = make_state(miles_traveled_actual=800.0, miles_traveled=800.0, open_day=True)
    state.inventory.spares = Spares(tire=0, battery=0)
    state.budget_cents = 0
    state.vehicle_breakdowns = 10
    state.vehicle.health = 0.0

    assert kernel.check_failure(state) is None
    assert state.vehicle.health == 10.0
    assert "field_repair_guard" in state.day_state.current_day_tags
    assert not state.is_over


def _careful_day(session) -> None:
    """Camp when a stat runs low, otherwise travel one day."""
    stats = session.state.stats
    if stats.supplies <= 3 and session.camp_forage().ok:
        return
    if stats.sanity <= 4 and session.camp_therapy().ok:
        return
    if stats.hp <= 4 and session.camp_rest().ok:
        return
    play_days(session, 1)


def test_late_trail_run_reaches_endgame_crossing_and_boss_gate() -> None:
    config = make_config()
    config.encounters.encounters = []
    session = make_session("deep", "balanced", 606, config)
    state = session.state
    state.miles_traveled_actual = state.miles_traveled = 1800.0
    state.crossings_completed = 2
    state.stats.supplies = 20
    for tag in ("press_pass", "rain_gear", "water_jugs", "warm_coat", "respirator"):
        state.inventory.add_tag(tag)
    for part in PARTS:
        state.inventory.spares.add(part, 30)

    for _ in range(200):
        if session.is_over or state.boss_ready:
            break
        _careful_day(session)

    assert not session.is_over
    assert state.boss_ready
    assert state.crossings_completed == 3
    assert state.endgame.active
    day_tags = [set(record.tags) for record in state.day_records]
    assert any("endgame_activate" in tags for tags in day_tags)
    assert any("crossing_pass" in tags for tags in day_tags)

    outcome = session.tick_day()
    assert outcome.log_key == "log.boss.await"
    assert "boss_gate" in state.day_records[-1].tags


def test_tick_reports_inputs_and_effects() -> None:
    session = make_session(seed=5)

    outcome = session.tick_day()
    while not outcome.ended:
        session.apply_choice(0)
        outcome = session.tick_day()

    assert outcome.day_consumed is True
    assert outcome.records
    assert session.state.day_records[-1] == outcome.records[-1]
    assert session.state.day_state.events == []
