"""
2D Perlin gradient noise.

Sources:
    https://mzucker.github.io/html/perlin-noise-math-faq.html
    https://flafla2.github.io/2014/08/09/perlinnoise.html
"""

import math

import numpy as np


def fade(t):
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a, b, ratio):
    return a + ratio * (b - a)


class PerlinNoise:
    """
    Perlin noise over the lattice ``[0, width] x [0, height]``.

    Every lattice point holds a random unit gradient. The noise at a point is
    the faded bilinear interpolation of the dot products between the
    gradients of its cell's corners and the vectors from the corners to the
    point.
    """

    def __init__(self, width: int, height: int, rand):
        """
        Initialize the gradient lattice.

        Args:
            width: Number of lattice cells horizontally
            height: Number of lattice cells vertically
            rand: Random source (``random()`` in [0, 1))
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Noise lattice needs a positive size, got {width}x{height}")
        self.width = width
        self.height = height
        # Indexed [row, col, component].
        self.gradients = self._make_gradients(width + 1, height + 1, rand)

    @staticmethod
    def _make_gradients(num_cols: int, num_rows: int, rand) -> np.ndarray:
        grads = np.empty((num_rows, num_cols, 2), dtype=np.float64)
        for r in range(num_rows):
            for c in range(num_cols):
                gx = -1.0 + rand.random() * 2.0
                gy = -1.0 + rand.random() * 2.0
                while gx == 0.0 and gy == 0.0:
                    gx = -1.0 + rand.random() * 2.0
                    gy = -1.0 + rand.random() * 2.0
                length = math.hypot(gx, gy)
                grads[r, c, 0] = gx / length
                grads[r, c, 1] = gy / length
        return grads

    def noise(self, x: float, y: float) -> float:
        """
        Noise value in about [-1, 1] at a lattice position.

        Positions wrap around the lattice size.
        """
        x = x % self.width
        y = y % self.height
        left = min(int(x), self.width - 1)
        top = min(int(y), self.height - 1)
        right = left + 1
        bottom = top + 1

        g = self.gradients
        dx0, dx1 = x - left, x - right
        dy0, dy1 = y - top, y - bottom
        n_lt = g[top, left, 0] * dx0 + g[top, left, 1] * dy0
        n_rt = g[top, right, 0] * dx1 + g[top, right, 1] * dy0
        n_lb = g[bottom, left, 0] * dx0 + g[bottom, left, 1] * dy1
        n_rb = g[bottom, right, 0] * dx1 + g[bottom, right, 1] * dy1

        wx = fade(dx0)
        wy = fade(dy0)
        return lerp(lerp(n_lt, n_rt, wx), lerp(n_lb, n_rb, wx), wy)

    def octave_noise(self, x: float, y: float, num_octaves: int, persistence: float) -> float:
        """
        Sum of noise values at increasingly coarse scales.

        Each octave halves the frequency and multiplies the amplitude by the
        persistence. The sum is normalized by the total amplitude.
        """
        total = 0.0
        frequency = 1.0
        amplitude = 1.0
        max_value = 0.0
        for _ in range(num_octaves):
            total += self.noise(x * frequency, y * frequency) * amplitude
            max_value += amplitude
            amplitude *= persistence
            frequency /= 2.0
        if max_value == 0.0:
            return 0.0
        return total / max_value
