"""Scaling, interpolation and nearest-pair selection primitives.

All functions here are pure. Values of ``scale`` outside [0, 1] are how the
estimator extrapolates beyond its calibrated range; they are not errors.
"""

import math
from collections.abc import Sequence
from typing import Protocol, TypeVar

from takeoffperf.core.config import ConfigurationError


class Anchored(Protocol):
    anchor: float


T = TypeVar("T", bound=Anchored)

I64_MAX = 2**63 - 1
I64_MIN = -(2**63)


def scale(first: float, second: float, value: float) -> float:
    """Position of ``value`` relative to ``first`` (0) and ``second`` (1).

    Examples:
        >>> scale(5.0, 10.0, 7.5)
        0.5
        >>> scale(5.0, 10.0, 2.5)
        -0.5
    """
    return (value - first) / (second - first)


def interpolate_linear(first: float, second: float, fraction: float) -> float:
    """Linear blend from ``first`` (fraction 0) to ``second`` (fraction 1)."""
    return (second - first) * fraction + first


def lin(a: float, b: float, x: float) -> float:
    """Evaluate ``a * x + b``."""
    return a * x + b


def fahrenheit_from_celsius(temp_c: float) -> float:
    return lin(1.8, 32.0, temp_c)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's built-in ``round`` rounds halves to even (``round(2.5) == 2``);
    chart readings are rounded the conventional way (``2.5 -> 3``).

    Results outside the signed 64-bit range saturate at its bounds, and NaN
    becomes 0, so a reading is always an integer a JSON consumer can hold.

    Examples:
        >>> round_half_away(-2.5)
        -3
        >>> round_half_away(float("inf")) == I64_MAX
        True
    """
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return I64_MAX if value > 0 else I64_MIN

    magnitude = abs(value)
    whole = math.floor(magnitude)
    # magnitude - whole is exact, unlike magnitude + 0.5
    if magnitude - whole >= 0.5:
        whole += 1
    result = whole if value >= 0 else -whole
    return max(I64_MIN, min(I64_MAX, result))


def search_nearest_pair(segments: Sequence[T], value: float) -> tuple[T, T]:
    """Find the two segments whose anchors lie closest to ``value``.

    The first two entries seed the result. A single forward pass then
    promotes any segment strictly closer than the current closest one, and
    the displaced closest becomes the second. The second entry is never
    compared on its own, so for some orderings the result is not the true
    two nearest anchors (``[-3, 4, -2]`` searched at -6 gives ``(-3, 4)``).
    Calibrated tables depend on this exact selection near their edges.

    Args:
        segments: At least two anchored segments, in table order.
        value: Lookup value in the same units as the anchors.

    Returns:
        ``(closest, second)`` ordered by distance rank, not by anchor.

    Raises:
        ConfigurationError: If fewer than two segments are given.
    """
    if len(segments) < 2:
        raise ConfigurationError(
            f"Cannot interpolate between fewer than 2 segments (got {len(segments)})"
        )

    closest = segments[0]
    second = segments[1]
    for segment in segments:
        if abs(value - segment.anchor) < abs(value - closest.anchor):
            second = closest
            closest = segment

    return closest, second
