"""Base repository implementation for JSON config documents."""
from __future__ import annotations

import copy
import logging
import math
from dataclasses import fields
from pathlib import Path
from typing import Any, Generic, Iterable, List, Mapping, TypeVar

from overland.data import paths
from overland.data.errors import DataLoadError, DataReferenceError, DataValidationError
from overland.data.json_loader import load_json

T = TypeVar("T")

LOG = logging.getLogger(__name__)


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new dict with overlay merged into base; nested objects merge key by key."""
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigRepository(Generic[T]):
    """Loads one config document and caches the typed result.

    A missing or malformed document falls back to the embedded default and
    logs a warning. With ``strict=True`` the error propagates instead.
    """

    def __init__(
        self,
        filename: str,
        default_document: Mapping[str, Any],
        base_path: Path | str | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._filename = filename
        self._default_document = default_document
        self._base_path = Path(base_path) if base_path is not None else None
        self._strict = strict
        self._config: T | None = None
        self._used_fallback = False

    @property
    def used_fallback(self) -> bool:
        """True when the embedded default replaced the document on disk."""
        return self._used_fallback

    def _get_file_path(self) -> Path:
        definitions_dir = paths.get_definitions_path(self._base_path)
        return definitions_dir / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> T:
        """Convert a raw dict into the typed config."""
        raise NotImplementedError

    def build_default(self) -> T:
        """Build the typed config from the embedded default document."""
        return self._build(copy.deepcopy(dict(self._default_document)))

    def load(self) -> T:
        """Return the typed config, loading it on first use."""
        if self._config is None:
            try:
                self._config = self._build(self._load_raw())
            except (DataLoadError, DataReferenceError, DataValidationError) as exc:
                if self._strict:
                    raise
                LOG.warning("config %s: using embedded default (%s)", self._filename, exc)
                self._config = self.build_default()
                self._used_fallback = True
        return self._config

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_type(value: object, expected_type: type, context: str) -> object:
        if not isinstance(value, expected_type):
            raise DataValidationError(f"{context} must be of type {expected_type.__name__}.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_number(value: object, context: str) -> float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise DataValidationError(f"{context} must be a number.")
        number = float(value)
        if not math.isfinite(number):
            raise DataValidationError(f"{context} must be finite.")
        return number

    @classmethod
    def _require_probability(cls, value: object, context: str) -> float:
        number = cls._require_number(value, context)
        if not 0.0 <= number <= 1.0:
            raise DataValidationError(f"{context} must be between 0 and 1.")
        return number

    @classmethod
    def _require_non_negative(cls, value: object, context: str) -> float:
        number = cls._require_number(value, context)
        if number < 0.0:
            raise DataValidationError(f"{context} must not be negative.")
        return number

    @classmethod
    def _require_choice(cls, value: object, allowed: Iterable[str], context: str) -> str:
        text = cls._require_str(value, context)
        options = tuple(allowed)
        if text not in options:
            raise DataValidationError(f"{context} must be one of {', '.join(options)}.")
        return text

    @staticmethod
    def _require_str_list(value: object, context: str) -> List[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: List[str] = []
        for item in value:
            if not isinstance(item, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(item)
        return result

    @staticmethod
    def _assert_known_keys(payload: Mapping[str, object], allowed: Iterable[str], context: str) -> None:
        unknown = set(payload.keys()) - set(allowed)
        if unknown:
            raise DataValidationError(f"{context} has unknown fields: {sorted(unknown)}.")

    @classmethod
    def _require_number_map(
        cls,
        value: object,
        allowed: Iterable[str],
        context: str,
    ) -> dict[str, float]:
        """Validate an object of ``key -> number`` whose keys come from ``allowed``."""
        if value is None:
            return {}
        mapping = cls._require_mapping(value, context)
        cls._assert_known_keys(mapping, allowed, context)
        return {key: cls._require_number(item, f"{context}.{key}") for key, item in mapping.items()}

    def _build_scalars(self, cls: type, payload: Mapping[str, object], context: str, **overrides: Any) -> Any:
        """Build a dataclass of scalar fields, keeping field defaults for absent keys.

        Field types are taken from the default values, so every field handled
        here must declare one.
        """
        self._assert_known_keys(payload, {item.name for item in fields(cls)}, context)
        defaults = cls()
        values: dict[str, Any] = {}
        for item in fields(cls):
            if item.name in overrides or item.name not in payload:
                continue
            default = getattr(defaults, item.name)
            field_context = f"{context} {item.name}"
            value = payload[item.name]
            if isinstance(default, bool):
                values[item.name] = self._require_bool(value, field_context)
            elif isinstance(default, int):
                values[item.name] = self._require_int(value, field_context)
            elif isinstance(default, float):
                values[item.name] = self._require_number(value, field_context)
            elif isinstance(default, str):
                values[item.name] = self._require_str(value, field_context)
            else:
                raise DataValidationError(f"{field_context} is not a scalar field.")
        values.update(overrides)
        return cls(**values)
