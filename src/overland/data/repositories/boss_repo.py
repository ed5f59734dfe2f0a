"""Repository for the boss config document."""
from __future__ import annotations

from overland.core.types import GAME_MODES
from overland.data.defaults import BOSS
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import BossConfig


class BossRepository(ConfigRepository[BossConfig]):
    """Loads boss gate and victory-chance tuning."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("boss.json", BOSS, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> BossConfig:
        thresholds = self._require_mapping(raw.get("score_threshold", {}), "boss.json.score_threshold")
        self._assert_known_keys(thresholds, GAME_MODES, "boss.json.score_threshold")
        score_threshold = {"classic": 1000, "deep": 1200}
        for mode, value in thresholds.items():
            threshold = self._require_int(value, f"boss score_threshold '{mode}'")
            if threshold <= 0:
                raise DataValidationError(f"boss score_threshold '{mode}' must be positive.")
            score_threshold[mode] = threshold

        config: BossConfig = self._build_scalars(BossConfig, raw, "boss.json", score_threshold=score_threshold)
        if config.distance_required <= 0:
            raise DataValidationError("boss.json distance_required must be positive.")
        if config.rounds < 1:
            raise DataValidationError("boss.json rounds must be at least 1.")
        for name in ("min_chance", "max_chance", "deep_aggressive_bonus"):
            self._require_probability(getattr(config, name), f"boss.json {name}")
        if config.min_chance > config.max_chance:
            raise DataValidationError("boss.json min_chance must not exceed max_chance.")
        return config
