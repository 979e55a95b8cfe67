"""
Seeded random source for map generation.

Implements Johannes Baagøe's Alea generator. It is small, fast, fully
deterministic for a given seed string and independent of the interpreter's
``random`` module, so a seed reproduces the same map everywhere.
"""

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

_TWO_POW_32 = 0x100000000
_TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Hash function that turns seed data into generator state."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * _TWO_POW_32
        return _uint32(self.n) * _TWO_POW_NEG_32


class AleaPRNG:
    """
    Deterministic pseudo random number generator.

    Provides the subset of the ``random.Random`` interface that the generators
    need: ``random``, ``randint``, ``uniform``, ``gauss`` and ``choice``.
    """

    def __init__(self, seed="default"):
        """
        Initialize with a seed.

        Args:
            seed: Any value with a stable ``str`` representation, or an
                iterable of such values
        """
        self.seed = seed
        self.call_count = 0
        self._next_gauss = None

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 = self._wrap(self.s0 - mash(part))
            self.s1 = self._wrap(self.s1 - mash(part))
            self.s2 = self._wrap(self.s2 - mash(part))

    @staticmethod
    def _wrap(value: float) -> float:
        return value + 1 if value < 0 else value

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def randint(self, upper: int) -> int:
        """Random integer in [0, upper)."""
        if upper <= 0:
            raise ValueError(f"upper bound must be positive, got {upper}")
        return min(int(self.random() * upper), upper - 1)

    def uniform(self, lo: float, hi: float) -> float:
        """Random float in [lo, hi)."""
        return lo + (hi - lo) * self.random()

    def gauss(self, mu: float = 0.0, sigma: float = 1.0) -> float:
        """Normally distributed value (Box-Muller, caches the second value)."""
        if self._next_gauss is not None:
            z, self._next_gauss = self._next_gauss, None
            return mu + sigma * z

        u1 = self.random()
        while u1 == 0.0:
            u1 = self.random()
        u2 = self.random()
        radius = math.sqrt(-2.0 * math.log(u1))
        angle = 2.0 * math.pi * u2
        self._next_gauss = radius * math.sin(angle)
        return mu + sigma * radius * math.cos(angle)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]
