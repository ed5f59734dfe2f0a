"""Repository for the result config document."""
from __future__ import annotations

from overland.data.defaults import RESULT
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import ResultConfig

ROUNDING_MODES = ("nearest", "floor", "ceil")


class ResultRepository(ConfigRepository[ResultConfig]):
    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("result.json", RESULT, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> ResultConfig:
        rounding = self._require_choice(raw.get("rounding", "nearest"), ROUNDING_MODES, "result.json rounding")
        config: ResultConfig = self._build_scalars(ResultConfig, raw, "result.json", rounding=rounding)
        if config.final_min > config.final_max:
            raise DataValidationError("result.json final_min must not exceed final_max.")
        if config.score_mult < 0:
            raise DataValidationError("result.json score_mult must not be negative.")
        return config
