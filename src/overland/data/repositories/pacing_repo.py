"""Repository for the pacing config document."""
from __future__ import annotations

from overland.core.types import DIETS, PACES
from overland.data.defaults import PACING
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import DietConfig, PaceConfig, PacingConfig, PacingLimits


class PacingRepository(ConfigRepository[PacingConfig]):
    """Loads pace and diet modifiers plus the shared pacing limits."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("pacing.json", PACING, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> PacingConfig:
        self._assert_known_keys(raw, {"paces", "diets", "limits"}, "pacing.json")
        paces_map = self._require_mapping(raw.get("paces"), "pacing.json.paces")
        diets_map = self._require_mapping(raw.get("diets"), "pacing.json.diets")
        self._assert_known_keys(paces_map, PACES, "pacing.json.paces")
        self._assert_known_keys(diets_map, DIETS, "pacing.json.diets")
        for required, source, label in ((PACES, paces_map, "pace"), (DIETS, diets_map, "diet")):
            missing = [key for key in required if key not in source]
            if missing:
                raise DataValidationError(f"pacing.json is missing {label} entries: {missing}.")

        paces = {
            pace: self._build_scalars(PaceConfig, self._require_mapping(paces_map[pace], f"pace '{pace}'"), f"pace '{pace}'")
            for pace in PACES
        }
        diets = {
            diet: self._build_scalars(DietConfig, self._require_mapping(diets_map[diet], f"diet '{diet}'"), f"diet '{diet}'")
            for diet in DIETS
        }
        limits: PacingLimits = self._build_scalars(
            PacingLimits, self._require_mapping(raw.get("limits", {}), "pacing.json.limits"), "pacing limits"
        )
        if not 0.0 <= limits.encounter_floor <= limits.encounter_ceiling <= 1.0:
            raise DataValidationError("pacing limits require 0 <= encounter_floor <= encounter_ceiling <= 1.")
        if limits.pants_floor > limits.pants_ceiling:
            raise DataValidationError("pacing limits pants_floor must not exceed pants_ceiling.")
        self._require_probability(limits.encounter_base, "pacing limits encounter_base")
        return PacingConfig(paces=paces, diets=diets, limits=limits)
