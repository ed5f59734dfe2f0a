"""Repository for the journey policy catalog."""
from __future__ import annotations

from typing import Dict, Mapping

from overland.core.types import DIETS, EXEC_ORDERS, GAME_MODES, PACES, PARTS, STRATEGIES, WEATHER_ORDER
from overland.data.defaults import JOURNEY
from overland.data.errors import DataReferenceError, DataValidationError
from overland.data.repositories.base import ConfigRepository, deep_merge
from overland.domain.defs import (
    BreakdownConfig,
    DailyChannelConfig,
    DailyTickConfig,
    HealthTickConfig,
    JourneyCfg,
    PolicyCatalog,
    TravelConfig,
    WearConfig,
)
from overland.domain.defs.journey_config import PolicyKey


class JourneyRepository(ConfigRepository[PolicyCatalog]):
    """Builds the policy catalog from mode families and strategy overlays.

    Each (mode, strategy) pair is resolved as ``family -> overlays[strategy]
    -> overlays["<mode>_<strategy>"]`` and validated up front, so a bad
    overlay is reported at load time rather than mid-run.
    """

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("journey.json", JOURNEY, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> PolicyCatalog:
        self._assert_known_keys(raw, {"families", "family_parent", "overlays"}, "journey.json")
        families = self._require_mapping(raw.get("families"), "journey.json.families")
        parents = self._require_mapping(raw.get("family_parent", {}), "journey.json.family_parent")
        overlays = self._require_mapping(raw.get("overlays", {}), "journey.json.overlays")
        self._assert_known_keys(families, GAME_MODES, "journey.json.families")
        allowed_overlays = set(STRATEGIES) | {f"{mode}_{strategy}" for mode in GAME_MODES for strategy in STRATEGIES}
        self._assert_known_keys(overlays, allowed_overlays, "journey.json.overlays")

        policies: Dict[PolicyKey, JourneyCfg] = {}
        for mode in GAME_MODES:
            family = self._resolve_family(mode, families, parents)
            for strategy in STRATEGIES:
                merged = deep_merge(family, self._require_mapping(overlays.get(strategy, {}), f"overlay '{strategy}'"))
                mode_key = f"{mode}_{strategy}"
                merged = deep_merge(merged, self._require_mapping(overlays.get(mode_key, {}), f"overlay '{mode_key}'"))
                policies[(mode, strategy)] = self._build_policy(merged, f"journey policy '{mode}/{strategy}'")
        return PolicyCatalog(policies=policies)

    def _resolve_family(
        self,
        mode: str,
        families: Mapping[str, object],
        parents: Mapping[str, object],
    ) -> dict[str, object]:
        chain = []
        current: str | None = mode
        while current is not None:
            if current in chain:
                raise DataValidationError(f"journey.json family_parent has a cycle at '{current}'.")
            if current not in families:
                raise DataReferenceError(f"journey.json references unknown family '{current}'.")
            chain.append(current)
            parent = parents.get(current)
            current = None if parent is None else self._require_str(parent, f"family_parent '{current}'")
        merged: dict[str, object] = {}
        for name in reversed(chain):
            merged = deep_merge(merged, self._require_mapping(families[name], f"family '{name}'"))
        return merged

    def _build_policy(self, merged: dict[str, object], context: str) -> JourneyCfg:
        travel_map = self._require_mapping(merged.get("travel", {}), f"{context} travel")
        travel: TravelConfig = self._build_scalars(
            TravelConfig,
            travel_map,
            f"{context} travel",
            pace_factor=self._require_number_map(travel_map.get("pace_factor"), PACES, f"{context} travel.pace_factor"),
            weather_factor=self._require_number_map(
                travel_map.get("weather_factor"), WEATHER_ORDER, f"{context} travel.weather_factor"
            ),
        )
        if not 0.0 < travel.mpd_min <= travel.mpd_base <= travel.mpd_max:
            raise DataValidationError(f"{context} travel requires 0 < mpd_min <= mpd_base <= mpd_max.")

        wear: WearConfig = self._build_scalars(
            WearConfig, self._require_mapping(merged.get("wear", {}), f"{context} wear"), f"{context} wear"
        )
        if wear.base < 0.0 or wear.fatigue_k < 0.0 or wear.comfort_miles <= 0.0:
            raise DataValidationError(f"{context} wear values must be non-negative with positive comfort_miles.")

        breakdown_map = self._require_mapping(merged.get("breakdown", {}), f"{context} breakdown")
        breakdown: BreakdownConfig = self._build_scalars(
            BreakdownConfig,
            breakdown_map,
            f"{context} breakdown",
            pace_factor=self._require_number_map(
                breakdown_map.get("pace_factor"), PACES, f"{context} breakdown.pace_factor"
            ),
            weather_factor=self._require_number_map(
                breakdown_map.get("weather_factor"), WEATHER_ORDER, f"{context} breakdown.weather_factor"
            ),
        )
        self._require_probability(breakdown.base, f"{context} breakdown.base")

        part_weights = {
            part: int(weight)
            for part, weight in self._require_number_map(
                merged.get("part_weights"), PARTS, f"{context} part_weights"
            ).items()
        }
        if any(weight < 0 for weight in part_weights.values()) or sum(part_weights.values()) <= 0:
            raise DataValidationError(f"{context} part_weights must be non-negative with a positive total.")

        daily = self._build_daily(self._require_mapping(merged.get("daily", {}), f"{context} daily"), context)

        partial_ratio = self._require_number(merged.get("partial_ratio", 0.5), f"{context} partial_ratio")
        if not 0.2 <= partial_ratio <= 0.95:
            raise DataValidationError(f"{context} partial_ratio must be between 0.2 and 0.95.")
        victory_miles = self._require_number(merged.get("victory_miles", 2100.0), f"{context} victory_miles")
        if not 500.0 <= victory_miles <= 10000.0:
            raise DataValidationError(f"{context} victory_miles must be between 500 and 10000.")
        stop_cap = self._require_int(merged.get("stop_cap", 1), f"{context} stop_cap")
        stop_cap_window = self._require_int(merged.get("stop_cap_window", 10), f"{context} stop_cap_window")
        if stop_cap < 0 or stop_cap_window < 2 or stop_cap >= stop_cap_window:
            raise DataValidationError(f"{context} requires 0 <= stop_cap < stop_cap_window and window >= 2.")

        self._assert_known_keys(
            merged,
            {
                "travel",
                "wear",
                "breakdown",
                "part_weights",
                "daily",
                "partial_ratio",
                "victory_miles",
                "stop_cap",
                "stop_cap_window",
            },
            context,
        )
        return JourneyCfg(
            travel=travel,
            wear=wear,
            breakdown=breakdown,
            part_weights=part_weights,
            daily=daily,
            partial_ratio=partial_ratio,
            victory_miles=victory_miles,
            stop_cap=stop_cap,
            stop_cap_window=stop_cap_window,
        )

    def _build_daily(self, payload: dict[str, object], context: str) -> DailyTickConfig:
        self._assert_known_keys(payload, {"supplies", "sanity", "health"}, f"{context} daily")
        channels = {}
        for name in ("supplies", "sanity"):
            channel_context = f"{context} daily.{name}"
            channel = self._require_mapping(payload.get(name, {}), channel_context)
            channels[name] = self._build_scalars(
                DailyChannelConfig,
                channel,
                channel_context,
                pace=self._require_number_map(channel.get("pace"), PACES, f"{channel_context}.pace"),
                diet=self._require_number_map(channel.get("diet"), DIETS, f"{channel_context}.diet"),
                weather=self._require_number_map(channel.get("weather"), WEATHER_ORDER, f"{channel_context}.weather"),
                exec=self._require_number_map(channel.get("exec"), EXEC_ORDERS, f"{channel_context}.exec"),
            )
        health_context = f"{context} daily.health"
        health_map = self._require_mapping(payload.get("health", {}), health_context)
        health: HealthTickConfig = self._build_scalars(
            HealthTickConfig,
            health_map,
            health_context,
            weather=self._require_number_map(health_map.get("weather"), WEATHER_ORDER, f"{health_context}.weather"),
            exec=self._require_number_map(health_map.get("exec"), EXEC_ORDERS, f"{health_context}.exec"),
        )
        return DailyTickConfig(supplies=channels["supplies"], sanity=channels["sanity"], health=health)
