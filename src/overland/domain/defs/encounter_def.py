"""Encounter definition data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from overland.core.types import GameMode, Region


@dataclass(slots=True)
class EncounterEffects:
    """Stat changes and side effects applied when a choice is picked."""

    hp: int = 0
    sanity: int = 0
    credibility: int = 0
    supplies: int = 0
    morale: int = 0
    allies: int = 0
    pants: int = 0
    budget_cents: int = 0
    add_tag: str | None = None
    rest: bool = False
    travel_bonus_ratio: float = 0.0


@dataclass(slots=True)
class EncounterChoice:
    label: str
    effects: EncounterEffects = field(default_factory=EncounterEffects)


@dataclass(slots=True)
class EncounterDef:
    id: str
    name: str
    weight: int = 5
    regions: List[Region] = field(default_factory=list)
    modes: List[GameMode] = field(default_factory=list)
    hard_stop: bool = False
    choices: List[EncounterChoice] = field(default_factory=list)


@dataclass(slots=True)
class EncounterCatalog:
    encounters: List[EncounterDef] = field(default_factory=list)

    def get(self, encounter_id: str) -> EncounterDef:
        for encounter in self.encounters:
            if encounter.id == encounter_id:
                return encounter
        raise KeyError(encounter_id)
