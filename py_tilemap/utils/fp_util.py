"""
Floating point comparison policy and small numeric helpers.

All geometric predicates in the package compare floats through the functions
in this module. They share one adjustable threshold: two values are equal when
they differ by at most the threshold.

Caution: hashing is done by rounding ``value / threshold``. It is always
possible to find two values that compare equal but fall into separate hash
buckets, so hash-based containers keyed by floats (or by points) are only
approximately correct near the threshold. Changing the threshold at runtime
also invalidates all previously computed hashes.
"""

import math
import sys
from enum import Enum
from typing import Optional

from ..config import settings

DEFAULT_FP_THRESHOLD = 1e-7

# Used as the parametric value of unbounded line ends.
NEG_INF = -sys.float_info.max
POS_INF = sys.float_info.max

_fp_threshold = settings.fp_threshold
_truncation_factor = 1.0 / _fp_threshold


def global_fp_threshold() -> float:
    """Return the threshold currently used for float comparisons."""
    return _fp_threshold


def set_global_fp_threshold(threshold: float) -> None:
    """
    Change the global comparison threshold.

    Args:
        threshold: New positive threshold
    """
    global _fp_threshold, _truncation_factor
    if threshold <= 0:
        raise ValueError(f"fp threshold must be positive, got {threshold}")
    _fp_threshold = threshold
    _truncation_factor = 1.0 / threshold


def fp_hash(value: float, threshold: Optional[float] = None) -> int:
    """Hash a float so that most values within the threshold share a bucket."""
    factor = _truncation_factor if threshold is None else 1.0 / threshold
    return hash(round(value * factor))


# Hot path: comparisons read the global threshold inline.

def fp_equal(a: float, b: float, threshold: Optional[float] = None) -> bool:
    if threshold is None:
        return abs(a - b) <= _fp_threshold
    return abs(a - b) <= threshold


def fp_less(a: float, b: float, threshold: Optional[float] = None) -> bool:
    # a has to be smaller than b by more than the threshold.
    if threshold is None:
        return a - b < -_fp_threshold
    return a - b < -threshold


def fp_less_equal(a: float, b: float, threshold: Optional[float] = None) -> bool:
    if threshold is None:
        return a - b <= _fp_threshold
    return a - b <= threshold


def fp_greater(a: float, b: float, threshold: Optional[float] = None) -> bool:
    if threshold is None:
        return a - b > _fp_threshold
    return a - b > threshold


def fp_greater_equal(a: float, b: float, threshold: Optional[float] = None) -> bool:
    if threshold is None:
        return a - b >= -_fp_threshold
    return a - b >= -threshold


class Sign(Enum):
    """Sign of a value under the comparison threshold."""

    POSITIVE = 1
    NEGATIVE = -1
    NONE = 0


def sign(value: float) -> Sign:
    if fp_greater(value, 0.0):
        return Sign.POSITIVE
    if fp_less(value, 0.0):
        return Sign.NEGATIVE
    return Sign.NONE


class Interval:
    """Closed interval [a, b]. Always normalized so that a <= b."""

    __slots__ = ("a", "b")

    def __init__(self, a: float, b: float):
        self.a = a if a <= b else b
        self.b = b if a <= b else a

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Interval):
            return NotImplemented
        return fp_equal(self.a, other.a) and fp_equal(self.b, other.b)

    def __hash__(self):
        return hash((fp_hash(self.a), fp_hash(self.b)))

    def __repr__(self):
        return f"Interval({self.a}, {self.b})"

    def length(self) -> float:
        return self.b - self.a

    def is_empty(self) -> bool:
        return fp_equal(self.length(), 0.0)

    def contains(self, value: float) -> bool:
        return fp_greater_equal(value, self.a) and fp_less_equal(value, self.b)

    def intersect(self, other: "Interval") -> Optional["Interval"]:
        """
        Return the overlap of two intervals.

        Returns:
            The overlapping interval or None if the intervals are disjoint
        """
        first, second = (self, other) if self.a <= other.a else (other, self)
        if first.b < second.a:
            return None
        if first.b >= second.b:
            # Fully contained.
            return second
        return Interval(second.a, first.b)

    def unite(self, other: "Interval") -> "Interval":
        return Interval(min(self.a, other.a), max(self.b, other.b))


def clamp_to_range(value: float, lo: float, hi: float) -> float:
    """Limit a value to [lo, hi]. The bounds may be given in any order."""
    if lo > hi:
        lo, hi = hi, lo
    return min(max(value, lo), hi)


def shift_into_range(value: float, lo: float, hi: float) -> float:
    """
    Shift a value into [lo, hi] keeping its position within the range.

    Example: 780 shifted into [0, 360] gives 60.
    """
    if lo > hi:
        lo, hi = hi, lo
    span = hi - lo
    if span == 0.0:
        return value
    if value < lo:
        value = hi - (lo - value) % span
    if value > hi:
        value = lo + (value - lo) % span
    return value


def cyclic_next(index: int, count: int) -> int:
    """Next index in a cyclic sequence of ``count`` elements."""
    return index + 1 if index < count - 1 else 0


def degrees_from_radians(rad: float) -> float:
    return rad * 180.0 / math.pi


def radians_from_degrees(deg: float) -> float:
    return deg * math.pi / 180.0


def rand_gaussian(rand, lo: float, hi: float) -> float:
    """
    Approximately gaussian value in [lo, hi].

    Values further than three standard deviations from the mean are clamped,
    then the [-3, 3] range is mapped onto [lo, hi].

    Args:
        rand: Random source with a ``gauss(mu, sigma)`` method
        lo: Lower end of the output range
        hi: Upper end of the output range
    """
    value = rand.gauss(0.0, 1.0)
    normed = clamp_to_range(value + 3.0, 0.0, 6.0) / 6.0
    return lo + (hi - lo) * normed
