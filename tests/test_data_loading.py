import json
import logging
from pathlib import Path

import pytest

from overland.data.errors import DataLoadError, DataReferenceError, DataValidationError
from overland.data.repositories import (
    BossRepository,
    CrossingsRepository,
    EncountersRepository,
    JourneyRepository,
    WeatherRepository,
)
from overland.services.config_service import default_game_config, load_game_config


def test_packaged_definitions_load_strictly() -> None:
    config = load_game_config(strict=True)

    assert config.fallbacks == ()
    assert config.boss.rounds == 3
    assert config.boss.score_threshold == {"classic": 1000, "deep": 1200}
    assert config.crossings.milestones == (650.0, 1250.0, 1900.0)
    assert config.camp.rest.cooldown_days == 2
    assert config.pacing.limits.encounter_base == pytest.approx(0.27)
    assert config.exec_orders.daily_chance == pytest.approx(0.06)
    assert {encounter.id for encounter in config.encounters.encounters} >= {"roadside_rally", "permit_office"}


def test_missing_documents_fall_back_to_embedded_defaults(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        config = load_game_config(tmp_path)

    defaults = default_game_config()
    assert set(config.fallbacks) == {
        "weather",
        "crossings",
        "boss",
        "camp",
        "pacing",
        "endgame",
        "result",
        "exec_orders",
        "journey",
        "encounters",
    }
    assert config.weather == defaults.weather
    assert config.journey == defaults.journey
    assert config.encounters == defaults.encounters
    assert "embedded default" in caplog.text


def test_missing_document_raises_when_strict(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        load_game_config(tmp_path, strict=True)


def test_malformed_json_falls_back(tmp_path: Path) -> None:
    (tmp_path / "weather.json").write_text("{ not json", encoding="utf-8")
    repo = WeatherRepository(tmp_path)

    config = repo.load()

    assert repo.used_fallback is True
    assert config == WeatherRepository().build_default()


def test_malformed_json_raises_when_strict(tmp_path: Path) -> None:
    (tmp_path / "weather.json").write_text("{ not json", encoding="utf-8")

    with pytest.raises(DataLoadError):
        WeatherRepository(tmp_path, strict=True).load()


def test_weather_repo_rejects_unknown_weather(tmp_path: Path) -> None:
    _write_json(tmp_path / "weather.json", {"effects": {"hail": {"pants": 3}}})

    with pytest.raises(DataValidationError):
        WeatherRepository(tmp_path, strict=True).load()


def test_weather_repo_requires_every_region(tmp_path: Path) -> None:
    document = _packaged("weather.json")
    del document["weights"]["beltway"]
    _write_json(tmp_path / "weather.json", document)

    with pytest.raises(DataValidationError):
        WeatherRepository(tmp_path, strict=True).load()


def test_boss_repo_rejects_zero_rounds(tmp_path: Path) -> None:
    document = _packaged("boss.json")
    document["rounds"] = 0
    _write_json(tmp_path / "boss.json", document)

    with pytest.raises(DataValidationError):
        BossRepository(tmp_path, strict=True).load()


def test_crossings_repo_requires_ascending_milestones(tmp_path: Path) -> None:
    document = _packaged("crossings.json")
    document["milestones"] = [1250.0, 650.0]
    _write_json(tmp_path / "crossings.json", document)

    with pytest.raises(DataValidationError):
        CrossingsRepository(tmp_path, strict=True).load()


def test_encounters_repo_rejects_duplicate_ids(tmp_path: Path) -> None:
    document = _packaged("encounters.json")
    document["encounters"].append(dict(document["encounters"][0]))
    _write_json(tmp_path / "encounters.json", document)

    with pytest.raises(DataValidationError):
        EncountersRepository(tmp_path, strict=True).load()


def test_journey_catalog_resolves_families_and_overlays() -> None:
    catalog = JourneyRepository(strict=True).load()

    classic = catalog.resolve("classic", "balanced")
    deep = catalog.resolve("deep", "balanced")
    assert classic.travel.mpd_base == pytest.approx(12.0)
    assert classic.travel.mpd_max == pytest.approx(22.0)
    assert deep.travel.mpd_base == pytest.approx(13.5)
    assert deep.travel.mpd_max == pytest.approx(24.0)
    # Deep inherits everything it does not override.
    assert deep.breakdown.base == pytest.approx(classic.breakdown.base)
    assert deep.wear.fatigue_k == pytest.approx(0.3)

    assert catalog.resolve("classic", "aggressive").partial_ratio == pytest.approx(0.45)
    assert catalog.resolve("classic", "conservative").breakdown.base == pytest.approx(0.036)
    assert catalog.resolve("deep", "conservative").stop_cap == 2
    assert catalog.resolve("classic", "conservative").stop_cap == 1

    weights = catalog.resolve("classic", "resource_manager").part_weights
    assert weights["tire"] == 40
    assert weights["fuel_pump"] == 25
    assert weights["battery"] == 20


def test_journey_catalog_unknown_policy_raises() -> None:
    catalog = JourneyRepository().build_default()

    with pytest.raises(KeyError):
        catalog.resolve("arcade", "balanced")


def test_journey_repo_detects_family_cycles(tmp_path: Path) -> None:
    document = _packaged("journey.json")
    document["family_parent"] = {"deep": "classic", "classic": "deep"}
    _write_json(tmp_path / "journey.json", document)

    with pytest.raises(DataValidationError):
        JourneyRepository(tmp_path, strict=True).load()


def test_journey_repo_rejects_unknown_parent(tmp_path: Path) -> None:
    document = _packaged("journey.json")
    document["family_parent"] = {"deep": "arcade"}
    _write_json(tmp_path / "journey.json", document)

    with pytest.raises(DataReferenceError):
        JourneyRepository(tmp_path, strict=True).load()

    lenient = JourneyRepository(tmp_path)
    assert lenient.load() == JourneyRepository().build_default()
    assert lenient.used_fallback is True


def _packaged(filename: str) -> dict:
    from overland.data.paths import get_definitions_path

    return json.loads((get_definitions_path() / filename).read_text(encoding="utf-8"))


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")
