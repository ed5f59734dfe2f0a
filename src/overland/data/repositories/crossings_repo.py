"""Repository for the crossings config document."""
from __future__ import annotations

from typing import Dict

from overland.core.types import CROSSING_KINDS, EXEC_ORDERS, GAME_MODES, STRATEGIES, CrossingKind, GameMode, StrategyId
from overland.data.defaults import CROSSINGS
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import CrossingConfig, CrossingCost, CrossingOdds

_TOP_LEVEL = {
    "milestones",
    "permit_tags",
    "consumable_permit_tags",
    "storm_detour_pants",
    "detour_days_min",
    "detour_days_max",
    "allow_negative_budget",
    "exec_bribe_scale",
    "costs",
    "odds",
}


class CrossingsRepository(ConfigRepository[CrossingConfig]):
    """Loads crossing costs and the per-mode, per-strategy odds table."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("crossings.json", CROSSINGS, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> CrossingConfig:
        self._assert_known_keys(raw, _TOP_LEVEL, "crossings.json")

        costs_map = self._require_mapping(raw.get("costs"), "crossings.json.costs")
        self._assert_known_keys(costs_map, CROSSING_KINDS, "crossings.json.costs")
        costs: Dict[CrossingKind, CrossingCost] = {}
        for kind in CROSSING_KINDS:
            if kind not in costs_map:
                raise DataValidationError(f"crossings.json.costs is missing '{kind}'.")
            payload = self._require_mapping(costs_map[kind], f"crossing cost '{kind}'")
            self._assert_known_keys(
                payload,
                {"detour_supplies", "detour_pants", "bribe_cost_cents", "permit_credibility"},
                f"crossing cost '{kind}'",
            )
            bribe_cost = self._require_int(payload.get("bribe_cost_cents"), f"crossing cost '{kind}' bribe_cost_cents")
            if bribe_cost < 0:
                raise DataValidationError(f"crossing cost '{kind}' bribe_cost_cents must not be negative.")
            costs[kind] = CrossingCost(
                detour_supplies=self._require_int(
                    payload.get("detour_supplies"), f"crossing cost '{kind}' detour_supplies"
                ),
                detour_pants=self._require_int(payload.get("detour_pants"), f"crossing cost '{kind}' detour_pants"),
                bribe_cost_cents=bribe_cost,
                permit_credibility=self._require_int(
                    payload.get("permit_credibility", 1), f"crossing cost '{kind}' permit_credibility"
                ),
            )

        odds_map = self._require_mapping(raw.get("odds"), "crossings.json.odds")
        self._assert_known_keys(odds_map, GAME_MODES, "crossings.json.odds")
        odds: Dict[GameMode, Dict[StrategyId, CrossingOdds]] = {}
        for mode in GAME_MODES:
            mode_map = self._require_mapping(odds_map.get(mode), f"crossing odds '{mode}'")
            self._assert_known_keys(mode_map, STRATEGIES, f"crossing odds '{mode}'")
            odds[mode] = {}
            for strategy in STRATEGIES:
                context = f"crossing odds '{mode}.{strategy}'"
                payload = self._require_mapping(mode_map.get(strategy), context)
                self._assert_known_keys(payload, {"detour_probability", "bribe_success"}, context)
                odds[mode][strategy] = CrossingOdds(
                    detour_probability=self._require_probability(
                        payload.get("detour_probability"), f"{context} detour_probability"
                    ),
                    bribe_success=self._require_probability(payload.get("bribe_success"), f"{context} bribe_success"),
                )

        milestones = tuple(
            self._require_non_negative(value, "crossings.json.milestones entry")
            for value in self._require_list(raw.get("milestones", [650.0, 1250.0, 1900.0]), "crossings.json.milestones")
        )
        if list(milestones) != sorted(set(milestones)):
            raise DataValidationError("crossings.json.milestones must be strictly ascending.")

        detour_min = self._require_int(raw.get("detour_days_min", 2), "crossings.json.detour_days_min")
        detour_max = self._require_int(raw.get("detour_days_max", 4), "crossings.json.detour_days_max")
        if detour_min < 1 or detour_max < detour_min:
            raise DataValidationError("crossings.json detour day range must satisfy 1 <= min <= max.")

        exec_scale = self._require_number_map(
            raw.get("exec_bribe_scale"), EXEC_ORDERS, "crossings.json.exec_bribe_scale"
        )
        permit_tags = tuple(self._require_str_list(raw.get("permit_tags", ["permit", "press_pass"]), "permit_tags"))
        consumable = tuple(
            self._require_str_list(raw.get("consumable_permit_tags", ["permit"]), "consumable_permit_tags")
        )
        missing = set(consumable) - set(permit_tags)
        if missing:
            raise DataValidationError(f"consumable_permit_tags not in permit_tags: {sorted(missing)}.")

        return CrossingConfig(
            costs=costs,
            odds=odds,
            milestones=milestones,
            permit_tags=permit_tags,
            consumable_permit_tags=consumable,
            storm_detour_pants=self._require_int(raw.get("storm_detour_pants", 1), "crossings.json.storm_detour_pants"),
            exec_bribe_scale=exec_scale,
            detour_days_min=detour_min,
            detour_days_max=detour_max,
            allow_negative_budget=self._require_bool(
                raw.get("allow_negative_budget", False), "crossings.json.allow_negative_budget"
            ),
        )
