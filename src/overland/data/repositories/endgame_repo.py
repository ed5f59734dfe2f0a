"""Repository for the endgame config document."""
from __future__ import annotations

from overland.data.defaults import ENDGAME
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import RESOURCE_KINDS, EndgameConfig, EndgamePolicyConfig


class EndgameRepository(ConfigRepository[EndgameConfig]):
    """Loads endgame safety-net policies keyed by ``<mode>_<strategy>``."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("endgame.json", ENDGAME, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> EndgameConfig:
        self._assert_known_keys(raw, {"enabled", "policies"}, "endgame.json")
        enabled = self._require_bool(raw.get("enabled", True), "endgame.json enabled")
        policies_map = self._require_mapping(raw.get("policies", {}), "endgame.json.policies")
        policies = {}
        for key, entry in policies_map.items():
            context = f"endgame policy '{key}'"
            payload = self._require_mapping(entry, context)
            priority = [
                self._require_choice(kind, RESOURCE_KINDS, f"{context} resource_priority entry")
                for kind in self._require_list(
                    payload.get("resource_priority", list(RESOURCE_KINDS)), f"{context} resource_priority"
                )
            ]
            policy: EndgamePolicyConfig = self._build_scalars(
                EndgamePolicyConfig, payload, context, resource_priority=priority
            )
            if policy.failure_guard_miles < policy.mi_start:
                raise DataValidationError(f"{context} failure_guard_miles must not be below mi_start.")
            if not 0.0 < policy.partial_ratio <= 1.0:
                raise DataValidationError(f"{context} partial_ratio must be in (0, 1].")
            if not 0.0 <= policy.health_floor <= 100.0:
                raise DataValidationError(f"{context} health_floor must be between 0 and 100.")
            if policy.wear_multiplier <= 0.0 or policy.cooldown_days < 0:
                raise DataValidationError(f"{context} wear_multiplier must be positive and cooldown non-negative.")
            policies[key] = policy
        return EndgameConfig(enabled=enabled, policies=policies)
