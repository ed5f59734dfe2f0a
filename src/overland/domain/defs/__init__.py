"""Typed config and content definitions."""

from .boss_config import BossConfig
from .camp_config import CampActionConfig, CampConfig
from .crossing_config import CrossingConfig, CrossingCost, CrossingOdds, CrossingPolicy
from .encounter_def import EncounterCatalog, EncounterChoice, EncounterDef, EncounterEffects
from .endgame_config import RESOURCE_KINDS, EndgameConfig, EndgamePolicyConfig, ResourceKind
from .exec_order_config import ExecOrderConfig, ExecOrderEffect
from .journey_config import (
    BreakdownConfig,
    DailyChannelConfig,
    DailyTickConfig,
    HealthTickConfig,
    JourneyCfg,
    PolicyCatalog,
    TravelConfig,
    WearConfig,
)
from .pacing_config import DietConfig, PaceConfig, PacingConfig, PacingLimits
from .result_config import ResultConfig, RoundingMode
from .weather_config import WeatherConfig, WeatherEffect, WeatherLimits, WeatherMitigation

__all__ = [
    "BossConfig",
    "BreakdownConfig",
    "CampActionConfig",
    "CampConfig",
    "CrossingConfig",
    "CrossingCost",
    "CrossingOdds",
    "CrossingPolicy",
    "DailyChannelConfig",
    "DailyTickConfig",
    "DietConfig",
    "EncounterCatalog",
    "EncounterChoice",
    "EncounterDef",
    "EncounterEffects",
    "EndgameConfig",
    "EndgamePolicyConfig",
    "ExecOrderConfig",
    "ExecOrderEffect",
    "HealthTickConfig",
    "JourneyCfg",
    "PaceConfig",
    "PacingConfig",
    "PacingLimits",
    "PolicyCatalog",
    "RESOURCE_KINDS",
    "ResourceKind",
    "ResultConfig",
    "RoundingMode",
    "TravelConfig",
    "WearConfig",
    "WeatherConfig",
    "WeatherEffect",
    "WeatherLimits",
    "WeatherMitigation",
]
