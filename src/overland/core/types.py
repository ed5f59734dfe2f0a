"""Shared type aliases for the core and domain layers."""
from typing import Literal

GameMode = Literal["classic", "deep"]
StrategyId = Literal["balanced", "aggressive", "conservative", "resource_manager"]
PaceId = Literal["steady", "heated", "blitz"]
DietId = Literal["quiet", "mixed", "doom"]
Region = Literal["heartland", "rust_belt", "beltway"]
Season = Literal["spring", "summer", "fall", "winter"]
Weather = Literal["clear", "storm", "heat_wave", "cold_snap", "smoke"]
Part = Literal["tire", "battery", "alternator", "fuel_pump"]
TravelDayKind = Literal["travel", "partial", "non_travel"]
CrossingKind = Literal["checkpoint", "bridge_out"]
ExecOrder = Literal["shutdown", "militarize", "deregulate", "tax_cuts", "tariffs", "gag"]

GAME_MODES: tuple[GameMode, ...] = ("classic", "deep")
STRATEGIES: tuple[StrategyId, ...] = ("balanced", "aggressive", "conservative", "resource_manager")
PACES: tuple[PaceId, ...] = ("steady", "heated", "blitz")
DIETS: tuple[DietId, ...] = ("quiet", "mixed", "doom")
REGIONS: tuple[Region, ...] = ("heartland", "rust_belt", "beltway")
SEASONS: tuple[Season, ...] = ("spring", "summer", "fall", "winter")
WEATHER_ORDER: tuple[Weather, ...] = ("clear", "storm", "heat_wave", "cold_snap", "smoke")
EXTREME_WEATHER: frozenset[Weather] = frozenset({"storm", "heat_wave", "smoke"})
PARTS: tuple[Part, ...] = ("tire", "battery", "alternator", "fuel_pump")
TRAVEL_DAY_KINDS: tuple[TravelDayKind, ...] = ("travel", "partial", "non_travel")
CROSSING_KINDS: tuple[CrossingKind, ...] = ("checkpoint", "bridge_out")
EXEC_ORDERS: tuple[ExecOrder, ...] = (
    "shutdown",
    "militarize",
    "deregulate",
    "tax_cuts",
    "tariffs",
    "gag",
)

__all__ = [
    "CROSSING_KINDS",
    "CrossingKind",
    "DIETS",
    "DietId",
    "EXEC_ORDERS",
    "EXTREME_WEATHER",
    "ExecOrder",
    "GAME_MODES",
    "GameMode",
    "PACES",
    "PARTS",
    "PaceId",
    "Part",
    "REGIONS",
    "Region",
    "SEASONS",
    "STRATEGIES",
    "Season",
    "StrategyId",
    "TRAVEL_DAY_KINDS",
    "TravelDayKind",
    "WEATHER_ORDER",
    "Weather",
]
