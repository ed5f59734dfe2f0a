"""Repository for encounter definitions."""
from __future__ import annotations

from typing import List

from overland.core.types import GAME_MODES, REGIONS
from overland.data.defaults import ENCOUNTERS
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import EncounterCatalog, EncounterChoice, EncounterDef, EncounterEffects


class EncountersRepository(ConfigRepository[EncounterCatalog]):
    """Loads and validates the encounter deck."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("encounters.json", ENCOUNTERS, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> EncounterCatalog:
        self._assert_known_keys(raw, {"encounters"}, "encounters.json")
        entries = self._require_list(raw.get("encounters"), "encounters.json.encounters")
        if not entries:
            raise DataValidationError("encounters.json must define at least one encounter.")
        seen: set[str] = set()
        encounters: List[EncounterDef] = []
        for index, entry in enumerate(entries):
            payload = self._require_mapping(entry, f"encounters[{index}]")
            self._assert_known_keys(
                payload, {"id", "name", "weight", "regions", "modes", "hard_stop", "choices"}, f"encounters[{index}]"
            )
            encounter_id = self._require_str(payload.get("id"), f"encounters[{index}].id").strip()
            if not encounter_id:
                raise DataValidationError(f"encounters[{index}].id must not be empty.")
            if encounter_id in seen:
                raise DataValidationError(f"Duplicate encounter id '{encounter_id}'.")
            seen.add(encounter_id)
            context = f"encounter '{encounter_id}'"

            weight = self._require_int(payload.get("weight", 5), f"{context} weight")
            if weight <= 0:
                raise DataValidationError(f"{context} weight must be positive.")
            regions = [
                self._require_choice(region, REGIONS, f"{context} regions entry")
                for region in self._require_str_list(payload.get("regions"), f"{context} regions")
            ]
            modes = [
                self._require_choice(mode, GAME_MODES, f"{context} modes entry")
                for mode in self._require_str_list(payload.get("modes"), f"{context} modes")
            ]
            choices_raw = self._require_list(payload.get("choices"), f"{context} choices")
            if not choices_raw:
                raise DataValidationError(f"{context} must offer at least one choice.")
            choices = [self._build_choice(choice, f"{context} choices[{i}]") for i, choice in enumerate(choices_raw)]

            encounters.append(
                EncounterDef(
                    id=encounter_id,
                    name=self._require_str(payload.get("name", encounter_id), f"{context} name"),
                    weight=weight,
                    regions=regions,
                    modes=modes,
                    hard_stop=self._require_bool(payload.get("hard_stop", False), f"{context} hard_stop"),
                    choices=choices,
                )
            )
        return EncounterCatalog(encounters=encounters)

    def _build_choice(self, value: object, context: str) -> EncounterChoice:
        payload = self._require_mapping(value, context)
        self._assert_known_keys(payload, {"label", "effects"}, context)
        label = self._require_str(payload.get("label"), f"{context} label")
        effects_map = self._require_mapping(payload.get("effects", {}), f"{context} effects")
        add_tag = effects_map.get("add_tag")
        effects: EncounterEffects = self._build_scalars(
            EncounterEffects,
            effects_map,
            f"{context} effects",
            add_tag=None if add_tag is None else self._require_str(add_tag, f"{context} effects add_tag"),
        )
        if not 0.0 <= effects.travel_bonus_ratio <= 1.0:
            raise DataValidationError(f"{context} effects travel_bonus_ratio must be between 0 and 1.")
        return EncounterChoice(label=label, effects=effects)
