"""Saturating numeric helpers used on the simulation hot path.

Every float to int conversion in the kernel goes through these helpers so a
NaN or an overflowing intermediate never raises mid-tick.
"""
from __future__ import annotations

import math

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1
U64_MASK = 0xFFFFFFFFFFFFFFFF


def is_finite(value: float) -> bool:
    """Return True when value is a finite real number."""
    return isinstance(value, (int, float)) and math.isfinite(value)


def sanitize(value: float, default: float = 0.0) -> float:
    """Return value, or default when it is NaN or infinite."""
    return float(value) if is_finite(value) else default


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]; NaN collapses to low."""
    if value != value:  # NaN
        return low
    return max(low, min(high, value))


def clamp_int(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_probability(value: float) -> float:
    """Clamp value into [0, 1]; non-finite values become 0."""
    return clamp(sanitize(value), 0.0, 1.0)


def round_to_int(value: float, low: int = I32_MIN, high: int = I32_MAX) -> int:
    """Round half away from zero and saturate into [low, high].

    NaN rounds to 0; +/- infinity saturate to the bound.
    """
    if value != value:
        return 0
    if value == math.inf:
        return high
    if value == -math.inf:
        return low
    rounded = math.floor(abs(value) + 0.5)
    result = int(rounded) if value >= 0 else -int(rounded)
    return clamp_int(result, low, high)


def floor_to_int(value: float, low: int = I32_MIN, high: int = I32_MAX) -> int:
    if not is_finite(value):
        return 0
    return clamp_int(math.floor(value), low, high)


def ceil_to_int(value: float, low: int = I64_MIN, high: int = I64_MAX) -> int:
    if not is_finite(value):
        return 0
    return clamp_int(math.ceil(value), low, high)


def to_u64(value: int) -> int:
    """Wrap an integer into the unsigned 64-bit range."""
    return value & U64_MASK


def saturating_sub(value: int, amount: int) -> int:
    """Subtract without going below zero."""
    return max(0, value - amount)


__all__ = [
    "I32_MAX",
    "I32_MIN",
    "I64_MAX",
    "I64_MIN",
    "U64_MASK",
    "ceil_to_int",
    "clamp",
    "clamp_int",
    "clamp_probability",
    "floor_to_int",
    "is_finite",
    "round_to_int",
    "sanitize",
    "saturating_sub",
    "to_u64",
]
