"""Stable hashing helpers for seeds and share codes."""
from __future__ import annotations

import hashlib
import hmac

from overland.core.numbers import U64_MASK

FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3

# Odd 64-bit constants used to spread small indices across the seed space.
CROSSING_INDEX_SALT = 0x9E3779B97F4A7C15
CROSSING_DAY_SALT = 0xC2B2AE3D27D4EB4F


def fnv1a64(data: bytes) -> int:
    """Return the 64-bit FNV-1a hash of data."""
    value = FNV_OFFSET_BASIS
    for byte in data:
        value ^= byte
        value = (value * FNV_PRIME) & U64_MASK
    return value


def domain_seed(seed: int, tag: str) -> int:
    """Derive an independent 64-bit seed for a named domain.

    HMAC-SHA256 keyed by the root seed (8 little-endian bytes) over the tag;
    the first 8 digest bytes are read little-endian.
    """
    key = (seed & U64_MASK).to_bytes(8, "little")
    digest = hmac.new(key, tag.encode("utf-8"), hashlib.sha256).digest()
    return int.from_bytes(digest[:8], "little")


def event_seed(seed: int, crossing_index: int, day_index: int) -> int:
    """Mix a root seed with a crossing index and day into one event seed."""
    mixed = (
        (seed & U64_MASK)
        ^ ((crossing_index * CROSSING_INDEX_SALT) & U64_MASK)
        ^ ((day_index * CROSSING_DAY_SALT) & U64_MASK)
    )
    return fnv1a64(mixed.to_bytes(8, "little"))


__all__ = ["domain_seed", "event_seed", "fnv1a64"]
