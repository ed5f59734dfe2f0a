"""Repository for the camp config document."""
from __future__ import annotations

from overland.data.defaults import CAMP
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import CampActionConfig, CampConfig

CAMP_ACTIONS = ("rest", "forage", "therapy", "repair_spare", "repair_hack")


class CampRepository(ConfigRepository[CampConfig]):
    """Loads the costs and rewards of every camp action."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("camp.json", CAMP, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> CampConfig:
        self._assert_known_keys(raw, {*CAMP_ACTIONS, "therapy_sanity_ceiling"}, "camp.json")
        actions = {}
        for action in CAMP_ACTIONS:
            payload = self._require_mapping(raw.get(action, {}), f"camp action '{action}'")
            config: CampActionConfig = self._build_scalars(CampActionConfig, payload, f"camp action '{action}'")
            if config.days < 0 or config.cooldown_days < 0 or config.bonus_max < 0:
                raise DataValidationError(f"camp action '{action}' day counts must not be negative.")
            if config.vehicle_repair < 0:
                raise DataValidationError(f"camp action '{action}' vehicle_repair must not be negative.")
            actions[action] = config
        ceiling = self._require_int(raw.get("therapy_sanity_ceiling", 9), "camp.json therapy_sanity_ceiling")
        return CampConfig(therapy_sanity_ceiling=ceiling, **actions)
