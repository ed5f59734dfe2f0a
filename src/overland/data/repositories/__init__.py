"""Repository exports."""

from .base import ConfigRepository, deep_merge
from .boss_repo import BossRepository
from .camp_repo import CampRepository
from .crossings_repo import CrossingsRepository
from .encounters_repo import EncountersRepository
from .endgame_repo import EndgameRepository
from .exec_orders_repo import ExecOrdersRepository
from .journey_repo import JourneyRepository
from .pacing_repo import PacingRepository
from .result_repo import ResultRepository
from .weather_repo import WeatherRepository

__all__ = [
    "BossRepository",
    "CampRepository",
    "ConfigRepository",
    "CrossingsRepository",
    "EncountersRepository",
    "EndgameRepository",
    "ExecOrdersRepository",
    "JourneyRepository",
    "PacingRepository",
    "ResultRepository",
    "WeatherRepository",
    "deep_merge",
]
