"""Repository for the exec orders config document."""
from __future__ import annotations

from overland.core.types import EXEC_ORDERS
from overland.data.defaults import EXEC_ORDERS as EXEC_ORDERS_DOCUMENT
from overland.data.errors import DataValidationError
from overland.data.repositories.base import ConfigRepository
from overland.domain.defs import ExecOrderConfig, ExecOrderEffect


class ExecOrdersRepository(ConfigRepository[ExecOrderConfig]):
    """Loads exec order scheduling and per-order effects."""

    def __init__(self, base_path=None, *, strict: bool = False) -> None:
        super().__init__("exec_orders.json", EXEC_ORDERS_DOCUMENT, base_path, strict=strict)

    def _build(self, raw: dict[str, object]) -> ExecOrderConfig:
        orders_map = self._require_mapping(raw.get("orders"), "exec_orders.json.orders")
        self._assert_known_keys(orders_map, EXEC_ORDERS, "exec_orders.json.orders")
        orders = {}
        for order in EXEC_ORDERS:
            if order not in orders_map:
                raise DataValidationError(f"exec_orders.json.orders is missing '{order}'.")
            context = f"exec order '{order}'"
            effect: ExecOrderEffect = self._build_scalars(
                ExecOrderEffect, self._require_mapping(orders_map[order], context), context
            )
            if effect.travel_mult <= 0.0:
                raise DataValidationError(f"{context} travel_mult must be positive.")
            orders[order] = effect

        config: ExecOrderConfig = self._build_scalars(ExecOrderConfig, raw, "exec_orders.json", orders=orders)
        self._require_probability(config.daily_chance, "exec_orders.json daily_chance")
        self._require_probability(config.breakdown_bonus_cap, "exec_orders.json breakdown_bonus_cap")
        if not 1 <= config.duration_min <= config.duration_max:
            raise DataValidationError("exec_orders.json duration range must satisfy 1 <= min <= max.")
        if not 0 <= config.cooldown_min <= config.cooldown_max:
            raise DataValidationError("exec_orders.json cooldown range must satisfy 0 <= min <= max.")
        if not 0.0 < config.travel_mult_floor <= 1.0:
            raise DataValidationError("exec_orders.json travel_mult_floor must be in (0, 1].")
        return config
