"""Final score tuning."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RoundingMode = Literal["nearest", "floor", "ceil"]


@dataclass(slots=True)
class ResultConfig:
    pants_threshold: int = 70
    pants_penalty_per_point: int = 2
    rounding: RoundingMode = "nearest"
    final_min: int = 0
    final_max: int = 999_999
    score_mult: float = 1.0
    display_bonus_deep: float = 0.05
