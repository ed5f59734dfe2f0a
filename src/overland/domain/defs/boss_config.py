"""Boss minigame tuning."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from overland.core.types import GameMode


@dataclass(slots=True)
class BossConfig:
    distance_required: float = 2100.0
    rounds: int = 3
    sanity_loss_per_round: int = 2
    pants_gain_per_round: int = 4
    base_victory_chance: float = 0.11
    credibility_weight: float = 0.012
    sanity_weight: float = 0.01
    supplies_weight: float = 0.004
    allies_weight: float = 0.015
    pants_penalty_weight: float = 0.005
    score_weight: float = 0.25
    min_chance: float = 0.08
    max_chance: float = 0.65
    deep_aggressive_bonus: float = 0.05
    score_threshold: Dict[GameMode, int] = field(
        default_factory=lambda: {"classic": 1000, "deep": 1200}
    )
