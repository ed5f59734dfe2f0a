"""Service layer exports."""

from .errors import SaveLoadError, SessionError, ShareCodeError
from .config_service import GameConfig, default_game_config, load_game_config
from .journey_kernel import DailyTickKernel, DayInputs, DayOutcome
from .journey_controller import JourneyController
from .save_service import SaveService
from .session import JourneySession

__all__ = [
    "SaveLoadError",
    "SessionError",
    "ShareCodeError",
    "GameConfig",
    "default_game_config",
    "load_game_config",
    "DailyTickKernel",
    "DayInputs",
    "DayOutcome",
    "JourneyController",
    "SaveService",
    "JourneySession",
]
