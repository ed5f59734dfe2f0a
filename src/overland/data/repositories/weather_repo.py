"""Repository for the weather config document."""
from __future__ import annotations

from typing import Dict

from overland.core.types import REGIONS, WEATHER_ORDER, Region, Weather
from overland.data.defaults import WEATHER
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import WeatherConfig, WeatherEffect, WeatherLimits, WeatherMitigation

_EFFECT_FIELDS = {"supplies", "sanity", "pants", "encounter_delta", "travel_mult"}
_LIMIT_FIELDS = {"max_extreme_streak", "encounter_cap", "pants_floor", "pants_ceiling"}


class WeatherRepository(ConfigRepository[WeatherConfig]):
    """Loads weather effects, mitigations and regional weights."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("weather.json", WEATHER, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> WeatherConfig:
        self._assert_known_keys(raw, {"limits", "effects", "mitigation", "weights"}, "weather.json")
        limits = self._build_limits(raw.get("limits", {}))

        effects_map = self._require_mapping(raw.get("effects"), "weather.json.effects")
        self._assert_known_keys(effects_map, WEATHER_ORDER, "weather.json.effects")
        effects: Dict[Weather, WeatherEffect] = {}
        for weather in WEATHER_ORDER:
            payload = self._require_mapping(effects_map.get(weather, {}), f"weather effect '{weather}'")
            self._assert_known_keys(payload, _EFFECT_FIELDS, f"weather effect '{weather}'")
            travel_mult = self._require_non_negative(
                payload.get("travel_mult", 1.0), f"weather effect '{weather}' travel_mult"
            )
            effects[weather] = WeatherEffect(
                supplies=self._require_int(payload.get("supplies", 0), f"weather effect '{weather}' supplies"),
                sanity=self._require_int(payload.get("sanity", 0), f"weather effect '{weather}' sanity"),
                pants=self._require_int(payload.get("pants", 0), f"weather effect '{weather}' pants"),
                encounter_delta=self._require_number(
                    payload.get("encounter_delta", 0.0), f"weather effect '{weather}' encounter_delta"
                ),
                travel_mult=travel_mult,
            )

        mitigation_map = self._require_mapping(raw.get("mitigation", {}), "weather.json.mitigation")
        self._assert_known_keys(mitigation_map, WEATHER_ORDER, "weather.json.mitigation")
        mitigation: Dict[Weather, WeatherMitigation] = {}
        for weather, entry in mitigation_map.items():
            payload = self._require_mapping(entry, f"weather mitigation '{weather}'")
            self._assert_known_keys(payload, {"tag", "sanity", "pants"}, f"weather mitigation '{weather}'")
            tag = self._require_str(payload.get("tag"), f"weather mitigation '{weather}' tag").strip()
            if not tag:
                raise DataValidationError(f"weather mitigation '{weather}' tag must not be empty.")
            sanity = payload.get("sanity")
            pants = payload.get("pants")
            mitigation[weather] = WeatherMitigation(
                tag=tag,
                sanity=None if sanity is None else self._require_int(sanity, f"weather mitigation '{weather}' sanity"),
                pants=None if pants is None else self._require_int(pants, f"weather mitigation '{weather}' pants"),
            )

        weights_map = self._require_mapping(raw.get("weights"), "weather.json.weights")
        weights: Dict[Region, Dict[Weather, int]] = {}
        for region in REGIONS:
            if region not in weights_map:
                raise DataValidationError(f"weather.json.weights is missing region '{region}'.")
            region_map = self._require_mapping(weights_map[region], f"weather weights '{region}'")
            self._assert_known_keys(region_map, WEATHER_ORDER, f"weather weights '{region}'")
            region_weights: Dict[Weather, int] = {}
            for weather in WEATHER_ORDER:
                weight = self._require_int(region_map.get(weather, 0), f"weather weights '{region}.{weather}'")
                if weight < 0:
                    raise DataValidationError(f"weather weights '{region}.{weather}' must not be negative.")
                region_weights[weather] = weight
            if sum(region_weights.values()) <= 0:
                raise DataValidationError(f"weather weights for '{region}' must have a positive total.")
            weights[region] = region_weights
        self._assert_known_keys(weights_map, REGIONS, "weather.json.weights")

        return WeatherConfig(limits=limits, effects=effects, mitigation=mitigation, weights=weights)

    def _build_limits(self, value: object) -> WeatherLimits:
        payload = self._require_mapping(value, "weather.json.limits")
        self._assert_known_keys(payload, _LIMIT_FIELDS, "weather.json.limits")
        defaults = WeatherLimits()
        max_streak = self._require_int(
            payload.get("max_extreme_streak", defaults.max_extreme_streak), "weather limits max_extreme_streak"
        )
        if max_streak < 1:
            raise DataValidationError("weather limits max_extreme_streak must be at least 1.")
        pants_floor = self._require_int(payload.get("pants_floor", defaults.pants_floor), "weather limits pants_floor")
        pants_ceiling = self._require_int(
            payload.get("pants_ceiling", defaults.pants_ceiling), "weather limits pants_ceiling"
        )
        if pants_floor > pants_ceiling:
            raise DataValidationError("weather limits pants_floor must not exceed pants_ceiling.")
        return WeatherLimits(
            max_extreme_streak=max_streak,
            encounter_cap=self._require_probability(
                payload.get("encounter_cap", defaults.encounter_cap), "weather limits encounter_cap"
            ),
            pants_floor=pants_floor,
            pants_ceiling=pants_ceiling,
        )
