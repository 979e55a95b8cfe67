"""Tests for the floating point comparison helpers."""

import math

import pytest

from py_tilemap.core.alea_prng import AleaPRNG
from py_tilemap.utils import fp_util
from py_tilemap.utils.fp_util import (
    Interval, Sign, clamp_to_range, cyclic_next, degrees_from_radians, fp_equal, fp_greater,
    fp_greater_equal, fp_less, fp_less_equal, radians_from_degrees, rand_gaussian,
    set_global_fp_threshold, shift_into_range, sign
)


class TestComparisons:
    """Test threshold based comparisons."""

    def test_equal_within_threshold(self):
        """Test that values closer than the threshold are equal."""
        assert fp_equal(1.0, 1.0 + 1e-8)
        assert fp_equal(1.0, 1.0)
        assert not fp_equal(1.0, 1.0 + 1e-6)

    def test_less_needs_margin(self):
        """Test that less only holds beyond the threshold."""
        assert not fp_less(1.0, 1.0 + 1e-8)
        assert fp_less(1.0, 1.1)
        assert fp_less_equal(1.0 + 1e-8, 1.0)
        assert not fp_less_equal(1.1, 1.0)

    def test_greater(self):
        """Test greater and greater-equal comparisons."""
        assert fp_greater(2.0, 1.0)
        assert not fp_greater(1.0 + 1e-8, 1.0)
        assert fp_greater_equal(1.0 - 1e-8, 1.0)
        assert not fp_greater_equal(0.9, 1.0)

    def test_explicit_threshold(self):
        """Test comparisons with a per-call threshold."""
        assert fp_equal(1.0, 1.05, 0.1)
        assert not fp_less(1.0, 1.05, 0.1)
        assert fp_greater(1.2, 1.0, 0.1)


class TestGlobalThreshold:
    """Test changing the global threshold."""

    @pytest.fixture(autouse=True)
    def restore_threshold(self):
        """Restore the threshold after each test."""
        saved = fp_util.global_fp_threshold()
        yield
        set_global_fp_threshold(saved)

    def test_set_threshold(self):
        """Test that a new threshold affects all comparisons."""
        set_global_fp_threshold(0.01)
        assert fp_util.global_fp_threshold() == 0.01
        assert fp_equal(1.0, 1.005)
        assert not fp_less(1.0, 1.005)

    def test_invalid_threshold(self):
        """Test that non-positive thresholds are rejected."""
        with pytest.raises(ValueError):
            set_global_fp_threshold(0.0)
        with pytest.raises(ValueError):
            set_global_fp_threshold(-1.0)


class TestSign:
    """Test tolerant sign calculation."""

    def test_signs(self):
        """Test positive, negative and zero values."""
        assert sign(0.5) is Sign.POSITIVE
        assert sign(-0.5) is Sign.NEGATIVE
        assert sign(0.0) is Sign.NONE
        assert sign(1e-9) is Sign.NONE


class TestInterval:
    """Test closed intervals."""

    def test_normalized(self):
        """Test that bounds are swapped into order."""
        interval = Interval(3.0, 1.0)
        assert interval.a == 1.0
        assert interval.b == 3.0

    def test_overlap(self):
        """Test intersecting overlapping intervals."""
        assert Interval(0.0, 2.0).intersect(Interval(1.0, 3.0)) == Interval(1.0, 2.0)
        assert Interval(1.0, 3.0).intersect(Interval(0.0, 2.0)) == Interval(1.0, 2.0)

    def test_containment(self):
        """Test that a contained interval is the intersection."""
        assert Interval(0.0, 10.0).intersect(Interval(2.0, 3.0)) == Interval(2.0, 3.0)

    def test_disjoint(self):
        """Test that disjoint intervals have no intersection."""
        assert Interval(0.0, 1.0).intersect(Interval(2.0, 3.0)) is None

    def test_touching(self):
        """Test that touching intervals intersect in a single value."""
        overlap = Interval(0.0, 1.0).intersect(Interval(1.0, 2.0))
        assert overlap is not None
        assert overlap.is_empty()

    def test_contains_and_unite(self):
        """Test membership and union."""
        interval = Interval(0.0, 1.0)
        assert interval.contains(0.5)
        assert interval.contains(1.0 + 1e-8)
        assert not interval.contains(1.5)
        assert interval.unite(Interval(2.0, 3.0)) == Interval(0.0, 3.0)


class TestRangeHelpers:
    """Test range helpers."""

    def test_clamp(self):
        """Test clamping with ordered and swapped bounds."""
        assert clamp_to_range(5.0, 0.0, 1.0) == 1.0
        assert clamp_to_range(-1.0, 1.0, 0.0) == 0.0
        assert clamp_to_range(0.5, 0.0, 1.0) == 0.5

    def test_shift_into_range(self):
        """Test shifting angles into a range."""
        assert shift_into_range(780.0, 0.0, 360.0) == pytest.approx(60.0)
        assert shift_into_range(-30.0, 0.0, 360.0) == pytest.approx(330.0)
        assert shift_into_range(90.0, 0.0, 360.0) == 90.0

    def test_angle_conversion(self):
        """Test converting between degrees and radians."""
        assert degrees_from_radians(math.pi) == pytest.approx(180.0)
        assert radians_from_degrees(90.0) == pytest.approx(math.pi / 2)
        assert degrees_from_radians(radians_from_degrees(-45.0)) == pytest.approx(-45.0)

    def test_cyclic_next(self):
        """Test wrapping to the first index."""
        assert cyclic_next(0, 3) == 1
        assert cyclic_next(2, 3) == 0

    def test_rand_gaussian_range(self):
        """Test that gaussian values stay inside the requested range."""
        rand = AleaPRNG("gauss")
        values = [rand_gaussian(rand, 2.0, 4.0) for _ in range(500)]
        assert all(2.0 <= v <= 4.0 for v in values)
        assert 2.5 < sum(values) / len(values) < 3.5
