"""Deterministic RNG wrappers and the per-domain stream bundle."""
from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import Any, Dict, MutableSequence, Protocol, Sequence, TypeVar

from overland.core.hashing import domain_seed
from overland.core.numbers import U64_MASK

T_co = TypeVar("T_co")

RNGStatePayload = Dict[str, Any]

DOMAIN_TAGS: tuple[str, ...] = (
    "weather",
    "health",
    "travel",
    "events",
    "breakdown",
    "encounter",
    "crossing",
    "boss",
)

_SPLITMIX_GAMMA = 0x9E3779B97F4A7C15
_FLOAT_SCALE = 1.0 / (1 << 53)


class RandomSource(Protocol):
    """The draw surface every simulation subsystem relies on."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...


class RNG:
    """Wrapper around random.Random that provides deterministic helpers."""

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._random = Random(seed)
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        """Number of draws taken from this stream."""
        return self._draws

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        self._draws += 1
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        self._draws += 1
        return self._random.random()

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        self._draws += 1
        return self._random.choice(seq)

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        """Shuffle the sequence in-place."""
        self._draws += 1
        self._random.shuffle(seq)

    def export_state(self) -> RNGStatePayload:
        """Return a JSON-serializable snapshot of the generator."""
        version, internal, gauss_next = self._random.getstate()
        return {
            "seed": self._seed,
            "version": version,
            "internal": list(internal),
            "gauss_next": gauss_next,
            "draws": self._draws,
        }

    def restore_state(self, payload: RNGStatePayload) -> None:
        """Restore a snapshot produced by export_state."""
        internal = payload.get("internal")
        version = payload.get("version")
        draws = payload.get("draws", 0)
        if not isinstance(internal, list) or not all(isinstance(v, int) for v in internal):
            raise ValueError("RNG internal state must be a list of integers.")
        if not isinstance(version, int) or not isinstance(draws, int) or draws < 0:
            raise ValueError("RNG version and draws must be non-negative integers.")
        gauss_next = payload.get("gauss_next")
        if gauss_next is not None and not isinstance(gauss_next, (int, float)):
            raise ValueError("RNG gauss_next must be numeric or null.")
        try:
            self._random.setstate((version, tuple(internal), gauss_next))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Rejected RNG state: {exc}") from exc
        self._draws = draws


class CounterRng:
    """Counter-based SplitMix64 generator.

    Output i depends only on (seed, i), which makes a stream cheap to derive
    for one-off events such as a single crossing.
    """

    def __init__(self, seed: int, counter: int = 0) -> None:
        self._seed = seed & U64_MASK
        self._counter = counter

    @property
    def draws(self) -> int:
        return self._counter

    def next_u64(self) -> int:
        self._counter += 1
        z = (self._seed + self._counter * _SPLITMIX_GAMMA) & U64_MASK
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & U64_MASK
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & U64_MASK
        return z ^ (z >> 31)

    def random(self) -> float:
        return (self.next_u64() >> 11) * _FLOAT_SCALE

    def randint(self, a: int, b: int) -> int:
        if b < a:
            raise ValueError(f"Empty range for randint({a}, {b}).")
        return a + self.next_u64() % (b - a + 1)

    def choice(self, seq: Sequence[T_co]) -> T_co:
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[self.randint(0, len(seq) - 1)]

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        for i in range(len(seq) - 1, 0, -1):
            j = self.randint(0, i)
            seq[i], seq[j] = seq[j], seq[i]


@dataclass(slots=True)
class RngBundle:
    """Independent RNG streams, one per simulation domain.

    Each stream is seeded from (root seed, domain tag) so draws in one domain
    never shift another domain's sequence.
    """

    seed: int
    weather: RNG
    health: RNG
    travel: RNG
    events: RNG
    breakdown: RNG
    encounter: RNG
    crossing: RNG
    boss: RNG

    @classmethod
    def from_user_seed(cls, seed: int) -> "RngBundle":
        seed &= U64_MASK
        streams = {tag: RNG(domain_seed(seed, tag)) for tag in DOMAIN_TAGS}
        return cls(seed=seed, **streams)

    def stream(self, tag: str) -> RNG:
        if tag not in DOMAIN_TAGS:
            raise KeyError(tag)
        return getattr(self, tag)

    def draw_counts(self) -> Dict[str, int]:
        return {tag: self.stream(tag).draws for tag in DOMAIN_TAGS}

    def export_state(self) -> RNGStatePayload:
        return {
            "seed": self.seed,
            "streams": {tag: self.stream(tag).export_state() for tag in DOMAIN_TAGS},
        }

    @classmethod
    def restore(cls, payload: RNGStatePayload) -> "RngBundle":
        seed = payload.get("seed")
        streams = payload.get("streams")
        if not isinstance(seed, int) or isinstance(seed, bool):
            raise ValueError("RNG bundle seed must be an integer.")
        if not isinstance(streams, dict):
            raise ValueError("RNG bundle streams must be an object.")
        bundle = cls.from_user_seed(seed)
        for tag in DOMAIN_TAGS:
            stream_payload = streams.get(tag)
            if not isinstance(stream_payload, dict):
                raise ValueError(f"RNG stream '{tag}' is missing.")
            bundle.stream(tag).restore_state(stream_payload)
        return bundle


__all__ = ["CounterRng", "DOMAIN_TAGS", "RNG", "RNGStatePayload", "RandomSource", "RngBundle"]
