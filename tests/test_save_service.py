from __future__ import annotations

import json

import pytest

from overland.domain.day_accounting import apply_partial_travel_credit, start_of_day
from overland.domain.events import emit
from overland.domain.vehicle import Breakdown
from overland.services.errors import SaveLoadError
from overland.services.save_service import SaveService
from overland.services.session import JourneySession
from tests.helpers.builders import make_config, make_session, play_days


def _service(config=None) -> SaveService:
    return SaveService(catalog=(config or make_config()).journey)


def _through_json(payload: dict) -> dict:
    return json.loads(json.dumps(payload))


def test_round_trip_restores_state() -> None:
    config = make_config()
    service = _service(config)
    session = make_session("deep", "aggressive", 4242, config)
    play_days(session, 25)

    payload = _through_json(service.serialize(session.state, session.rngs))
    restored = service.deserialize(payload)

    assert service.serialize(restored)["state"] == service.serialize(session.state)["state"]
    assert restored.day == session.state.day
    assert restored.stats == session.state.stats
    assert restored.day_records == session.state.day_records
    assert restored.journey == session.state.journey
    assert restored == session.state


def test_round_trip_mid_day_with_live_endgame() -> None:
    config = make_config()
    service = _service(config)
    session = make_session("deep", "balanced", 4242, config)
    state = session.state
    state.miles_traveled_actual = state.miles_traveled = 1862.5
    state.endgame.active = True
    state.endgame.policy_key = "deep_balanced"
    state.endgame.field_repair_used = True
    state.endgame.guard_uses = 2
    state.endgame.last_guard_day = 1
    state.endgame.last_limp_mile = 1855.25
    state.breakdown = Breakdown(part="alternator", day_started=state.day)
    state.vehicle_breakdowns = 3
    state.vehicle.breakdown_cooldown = 2
    state.exec_order.current = "shutdown"
    state.exec_order.days_remaining = 3
    start_of_day(state)
    apply_partial_travel_credit(state, 5.4, "field_repair")
    state.day_state.add_tag("endgame_active")
    emit(state, "endgame_field_repair", severity="notice", ui_key="log.endgame.field-repair", miles=5.4)

    payload = _through_json(service.serialize(state, session.rngs))
    restored = service.deserialize(payload)

    assert restored == state
    assert restored.endgame == state.endgame
    assert restored.breakdown == Breakdown(part="alternator", day_started=state.day)
    assert restored.exec_order.current == "shutdown"
    assert restored.day_state.current_day_kind == "partial"
    assert restored.day_state.current_day_tags == ["field_repair", "endgame_active"]
    assert restored.day_state.events == state.day_state.events


def test_metadata_describes_the_run() -> None:
    session = JourneySession.from_share_code("CL-MANGO99", config=make_config())

    payload = _service().serialize(session.state)

    assert payload["save_version"] == SaveService.SAVE_VERSION
    assert payload["metadata"]["share_code"] == "CL-MANGO99"
    assert payload["metadata"]["mode"] == "classic"
    assert "rng" not in payload


def test_restored_streams_continue_the_same_run() -> None:
    config = make_config()
    service = _service(config)
    original = make_session(seed=606, config=config)
    play_days(original, 10)

    payload = _through_json(service.serialize(original.state, original.rngs))
    resumed = JourneySession.from_state(service.deserialize(payload), config, service.deserialize_rngs(payload))
    play_days(original, 15)
    play_days(resumed, 15)

    assert resumed.state.day_records == original.state.day_records
    assert resumed.state.stats == original.state.stats
    assert resumed.rngs.draw_counts() == original.rngs.draw_counts()


def test_pending_encounter_survives_a_save() -> None:
    config = make_config()
    config.pacing.limits.encounter_base = 1.0
    config.pacing.limits.encounter_ceiling = 1.0
    service = _service(config)
    session = make_session(seed=31, config=config)
    for _ in range(5):
        if not session.tick_day().ended:
            break
    assert session.state.current_encounter is not None

    payload = _through_json(service.serialize(session.state, session.rngs))
    resumed = JourneySession.from_state(service.deserialize(payload), config, service.deserialize_rngs(payload))

    assert resumed.state.current_encounter == session.state.current_encounter
    resumed.apply_choice(0)
    assert resumed.state.current_encounter is None


def test_missing_rng_section_returns_none() -> None:
    service = _service()
    payload = service.serialize(make_session().state)

    assert service.deserialize_rngs(payload) is None


def test_version_mismatch_is_rejected() -> None:
    service = _service()
    payload = service.serialize(make_session().state)
    payload["save_version"] = 99

    with pytest.raises(SaveLoadError):
        service.deserialize(payload)


def test_missing_state_section_is_rejected() -> None:
    with pytest.raises(SaveLoadError):
        _service().deserialize({"save_version": SaveService.SAVE_VERSION})
    with pytest.raises(SaveLoadError):
        _service().deserialize(["not", "a", "mapping"])


def test_out_of_range_stats_are_rejected() -> None:
    service = _service()
    payload = _through_json(service.serialize(make_session().state))
    payload["state"]["stats"]["hp"] = 42

    with pytest.raises(SaveLoadError):
        service.deserialize(payload)


def test_bad_choice_values_are_rejected() -> None:
    service = _service()
    payload = _through_json(service.serialize(make_session().state))
    payload["state"]["pace"] = "warp"

    with pytest.raises(SaveLoadError):
        service.deserialize(payload)


def test_day_must_be_positive() -> None:
    service = _service()
    payload = _through_json(service.serialize(make_session().state))
    payload["state"]["day"] = 0

    with pytest.raises(SaveLoadError):
        service.deserialize(payload)


def test_corrupt_rng_payload_is_rejected() -> None:
    service = _service()
    session = make_session()
    payload = _through_json(service.serialize(session.state, session.rngs))
    del payload["rng"]["streams"]["weather"]

    with pytest.raises(SaveLoadError):
        service.deserialize_rngs(payload)
