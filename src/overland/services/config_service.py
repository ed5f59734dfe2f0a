"""Loads every config document into one bundle."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from overland.data.repositories import (
    BossRepository,
    CampRepository,
    CrossingsRepository,
    EncountersRepository,
    EndgameRepository,
    ExecOrdersRepository,
    JourneyRepository,
    PacingRepository,
    ResultRepository,
    WeatherRepository,
)
from overland.domain.defs import (
    BossConfig,
    CampConfig,
    CrossingConfig,
    EncounterCatalog,
    EndgameConfig,
    ExecOrderConfig,
    PacingConfig,
    PolicyCatalog,
    ResultConfig,
    WeatherConfig,
)

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class GameConfig:
    """All tuning a journey needs, threaded through the controller and session."""

    weather: WeatherConfig
    crossings: CrossingConfig
    boss: BossConfig
    camp: CampConfig
    pacing: PacingConfig
    endgame: EndgameConfig
    result: ResultConfig
    exec_orders: ExecOrderConfig
    journey: PolicyCatalog
    encounters: EncounterCatalog
    fallbacks: tuple[str, ...] = ()


def load_game_config(base_path: Path | str | None = None, *, strict: bool = False) -> GameConfig:
    """Load every document from ``base_path`` (the packaged definitions by default).

    Documents that fail to load are replaced by their embedded defaults unless
    ``strict`` is set, in which case the DataError propagates.
    """
    repos = {
        "weather": WeatherRepository(base_path, strict=strict),
        "crossings": CrossingsRepository(base_path, strict=strict),
        "boss": BossRepository(base_path, strict=strict),
        "camp": CampRepository(base_path, strict=strict),
        "pacing": PacingRepository(base_path, strict=strict),
        "endgame": EndgameRepository(base_path, strict=strict),
        "result": ResultRepository(base_path, strict=strict),
        "exec_orders": ExecOrdersRepository(base_path, strict=strict),
        "journey": JourneyRepository(base_path, strict=strict),
        "encounters": EncountersRepository(base_path, strict=strict),
    }
    loaded = {name: repo.load() for name, repo in repos.items()}
    fallbacks = tuple(name for name, repo in repos.items() if repo.used_fallback)
    if fallbacks:
        LOG.warning("config loaded with embedded defaults for: %s", ", ".join(fallbacks))
    return GameConfig(fallbacks=fallbacks, **loaded)


def default_game_config() -> GameConfig:
    """Build the bundle from the embedded defaults only, without touching disk."""
    return GameConfig(
        weather=WeatherRepository().build_default(),
        crossings=CrossingsRepository().build_default(),
        boss=BossRepository().build_default(),
        camp=CampRepository().build_default(),
        pacing=PacingRepository().build_default(),
        endgame=EndgameRepository().build_default(),
        result=ResultRepository().build_default(),
        exec_orders=ExecOrdersRepository().build_default(),
        journey=JourneyRepository().build_default(),
        encounters=EncountersRepository().build_default(),
    )


__all__ = ["GameConfig", "default_game_config", "load_game_config"]
