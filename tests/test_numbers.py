import math

from overland.core.numbers import (
    U64_MASK,
    ceil_to_int,
    clamp,
    clamp_probability,
    floor_to_int,
    round_to_int,
    sanitize,
    saturating_sub,
    to_u64,
)


def test_clamp_bounds_and_nan() -> None:
    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0
    assert clamp(0.25, 0.0, 1.0) == 0.25
    assert clamp(float("nan"), 0.2, 0.8) == 0.2


def test_round_to_int_rounds_half_away_from_zero() -> None:
    assert round_to_int(2.5) == 3
    assert round_to_int(-2.5) == -3
    assert round_to_int(2.4) == 2
    assert round_to_int(-0.4) == 0


def test_round_to_int_saturates_non_finite_values() -> None:
    assert round_to_int(float("nan")) == 0
    assert round_to_int(math.inf, 0, 10) == 10
    assert round_to_int(-math.inf, 0, 10) == 0
    assert round_to_int(1e30, 0, 100) == 100


def test_floor_and_ceil_ignore_non_finite_values() -> None:
    assert floor_to_int(2.9) == 2
    assert floor_to_int(float("nan")) == 0
    assert ceil_to_int(2.1) == 3
    assert ceil_to_int(math.inf) == 0


def test_sanitize_and_probability_helpers() -> None:
    assert sanitize(float("inf"), 7.0) == 7.0
    assert sanitize(3) == 3.0
    assert clamp_probability(1.7) == 1.0
    assert clamp_probability(float("nan")) == 0.0


def test_unsigned_helpers() -> None:
    assert to_u64(-1) == U64_MASK
    assert saturating_sub(3, 5) == 0
    assert saturating_sub(5, 3) == 2
