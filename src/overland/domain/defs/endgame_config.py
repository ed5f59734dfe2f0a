"""Endgame travel safety-net tuning."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal

ResourceKind = Literal["matching_spare", "any_spare", "emergency"]
RESOURCE_KINDS: tuple[ResourceKind, ...] = ("matching_spare", "any_spare", "emergency")


def _default_priority() -> List[ResourceKind]:
    return ["matching_spare", "any_spare", "emergency"]


@dataclass(slots=True)
class EndgamePolicyConfig:
    mi_start: float = 1850.0
    failure_guard_miles: float = 1950.0
    health_floor: float = 40.0
    wear_reset: float = 0.0
    cooldown_days: int = 3
    partial_ratio: float = 0.45
    wear_multiplier: float = 1.0
    resource_priority: List[ResourceKind] = field(default_factory=_default_priority)


@dataclass(slots=True)
class EndgameConfig:
    enabled: bool = True
    policies: Dict[str, EndgamePolicyConfig] = field(default_factory=dict)

    def policy(self, key: str) -> EndgamePolicyConfig | None:
        return self.policies.get(key)
