"""Tests for the seeded random number generator."""

import pytest

from py_tilemap.core.alea_prng import AleaPRNG
from py_tilemap.utils import random as random_utils


class TestAleaPRNG:
    """Test deterministic random numbers."""

    def test_same_seed_same_sequence(self):
        """Test that equal seeds give equal sequences."""
        a = AleaPRNG("map")
        b = AleaPRNG("map")
        assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]

    def test_different_seeds(self):
        """Test that different seeds give different sequences."""
        a = AleaPRNG("seed1")
        b = AleaPRNG("seed2")
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    def test_random_range(self):
        """Test that values are in [0, 1)."""
        rand = AleaPRNG("range")
        values = [rand.random() for _ in range(1000)]
        assert all(0.0 <= v < 1.0 for v in values)
        assert rand.call_count == 1000

    def test_randint(self):
        """Test integers in [0, upper)."""
        rand = AleaPRNG("ints")
        values = {rand.randint(5) for _ in range(500)}
        assert values == {0, 1, 2, 3, 4}

    def test_randint_invalid(self):
        """Test that a non-positive bound is rejected."""
        with pytest.raises(ValueError):
            AleaPRNG("ints").randint(0)

    def test_uniform(self):
        """Test uniform floats in a range."""
        rand = AleaPRNG("uniform")
        assert all(-2.0 <= rand.uniform(-2.0, 3.0) < 3.0 for _ in range(200))

    def test_gauss_deterministic(self):
        """Test that gaussian draws are reproducible."""
        a = AleaPRNG("gauss")
        b = AleaPRNG("gauss")
        assert [a.gauss(1.0, 2.0) for _ in range(11)] == [b.gauss(1.0, 2.0) for _ in range(11)]

    def test_choice(self):
        """Test choosing from sequences."""
        rand = AleaPRNG("choice")
        items = ["a", "b", "c"]
        assert all(rand.choice(items) in items for _ in range(50))
        with pytest.raises(IndexError):
            rand.choice([])

    def test_iterable_seed(self):
        """Test seeding with several values."""
        a = AleaPRNG(["map", 42])
        b = AleaPRNG(["map", 42])
        assert a.random() == b.random()


class TestDefaultPRNG:
    """Test the process-wide default generator."""

    def test_set_random_seed(self):
        """Test that the default generator can be reseeded."""
        prng = random_utils.set_random_seed("global")
        assert random_utils.get_prng() is prng
        expected = AleaPRNG("global").random()
        assert random_utils.get_prng().random() == expected
