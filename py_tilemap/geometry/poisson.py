"""
Poisson-disc sampling.

Generates evenly spaced random points with Bridson's algorithm
(https://www.cs.ubc.ca/~rbridson/docs/bridson-siggraph07-poissondisk.pdf).
Runs in O(n) thanks to a background grid that answers "is another sample
nearby?" by looking at a handful of cells.
"""

import math
from typing import Dict, List, Optional

import numpy as np
import structlog

from .primitives import Point2D, Rect2D, Ring2D

logger = structlog.get_logger()

NUM_CANDIDATES_DEFAULT = 30

# Bound for drawing a single point inside an annulus. Only reached when the
# domain is smaller than the minimal distance.
_MAX_RING_ATTEMPTS = 1000


class BackgroundGrid:
    """
    Grid over the domain whose cells hold the index of the sample inside
    them, or EMPTY_CELL. The grid also keeps the inserted samples so that
    queries can measure the distance to the samples it finds.

    The cell size is ``min_dist / sqrt(2)`` so a cell's diagonal is exactly
    ``min_dist`` long. Each cell can hold at most one sample, and only a
    few cells around a test point need to be checked for samples closer than
    ``min_dist``: the 3 cells thick horizontal strip, plus one row of three
    cells above and below it when the test point sits close enough to its
    cell's border.
    """

    EMPTY_CELL = -1

    def __init__(self, domain: Rect2D, min_dist: float):
        self.domain = domain
        self.min_dist = min_dist
        self.cell_size = min_dist / math.sqrt(2.0)

        num_rows = int(math.ceil(domain.height / self.cell_size))
        num_cols = int(math.ceil(domain.width / self.cell_size))
        self.cells = np.full((num_rows, num_cols), self.EMPTY_CELL, dtype=np.int64)
        self.samples: Dict[int, Point2D] = {}

    @property
    def shape(self):
        return self.cells.shape

    def insert(self, sample: Point2D, sample_idx: int) -> None:
        """Store a sample index in the cell the sample falls on."""
        num_rows, num_cols = self.cells.shape
        # Samples on the right or bottom border belong to the last cell.
        r = min(self._row(sample.y), num_rows - 1)
        c = min(self._col(sample.x), num_cols - 1)
        self.cells[r, c] = sample_idx
        self.samples[sample_idx] = sample

    def have_sample_within_min_distance(self, test: Point2D) -> bool:
        """Whether a stored sample is closer than min_dist to the test point."""
        test_row = self._row(test.y)
        test_col = self._col(test.x)

        top_most_row = self._row(test.y - self.min_dist)
        bottom_most_row = self._row(test.y + self.min_dist)
        left_most_col = self._col(test.x - self.min_dist)
        right_most_col = self._col(test.x + self.min_dist)

        if top_most_row < test_row - 1:
            for c in range(test_col - 1, test_col + 2):
                if self._is_near(top_most_row, c, test):
                    return True

        for r in range(test_row - 1, test_row + 2):
            for c in range(left_most_col, right_most_col + 1):
                if self._is_near(r, c, test):
                    return True

        if bottom_most_row > test_row + 1:
            for c in range(test_col - 1, test_col + 2):
                if self._is_near(bottom_most_row, c, test):
                    return True

        return False

    def _row(self, y: float) -> int:
        return int(math.floor((y - self.domain.top) / self.cell_size))

    def _col(self, x: float) -> int:
        return int(math.floor((x - self.domain.left) / self.cell_size))

    def _is_near(self, r: int, c: int, test: Point2D) -> bool:
        num_rows, num_cols = self.cells.shape
        if r < 0 or r >= num_rows or c < 0 or c >= num_cols:
            return False
        idx = self.cells[r, c]
        if idx == self.EMPTY_CELL:
            return False
        sample = self.samples[int(idx)]
        return Point2D.distance_squared(sample, test) < self.min_dist * self.min_dist


class Annulus:
    """Ring around a seed sample that candidates are drawn from."""

    def __init__(self, center: Point2D, inner_radius: float, outer_radius: float,
                 domain: Rect2D, rand):
        self.ring = Ring2D(center, inner_radius, outer_radius)
        # Candidates must stay inside the domain.
        self.bounds = self.ring.bounds().intersect(domain)
        self.rand = rand

    def generate_point_in_ring(self) -> Optional[Point2D]:
        """
        Draw a random point inside the ring and the domain.

        Returns:
            The point or None if none was found after a bounded number of tries
        """
        for _ in range(_MAX_RING_ATTEMPTS):
            pt = self._generate_point_in_bounds()
            if self.ring.is_point_in_ring(pt):
                return pt
        return None

    def _generate_point_in_bounds(self) -> Point2D:
        b = self.bounds
        return Point2D(b.left + self.rand.random() * b.width,
                       b.top + self.rand.random() * b.height)


class PoissonDiscSampler:
    """
    Bridson's Poisson-disc sampling over a rectangular domain.

    The next seed is always the oldest active sample, which makes the output
    a deterministic function of the random source.

    Example:
        >>> sampler = PoissonDiscSampler(Rect2D(0, 0, 100, 100), 5.0, 30, AleaPRNG("seed"))
        >>> points = sampler.generate()
    """

    def __init__(self, domain: Rect2D, min_dist: float,
                 num_candidates: int = NUM_CANDIDATES_DEFAULT, rand=None):
        """
        Initialize the sampler.

        Args:
            domain: Area to place samples in
            min_dist: Minimal distance between any two samples
            num_candidates: Candidates tried per seed before the seed is retired
            rand: Random source (``random()`` in [0, 1))
        """
        if min_dist <= 0:
            raise ValueError(f"min_dist must be positive, got {min_dist}")
        if num_candidates <= 0:
            raise ValueError(f"num_candidates must be positive, got {num_candidates}")
        if rand is None:
            raise ValueError("A random source is required")

        self.domain = domain
        self.min_dist = min_dist
        self.num_candidates = num_candidates
        self.max_candidate_dist = 2.0 * min_dist
        self.rand = rand

        self._reset()

    def _reset(self) -> None:
        self.samples: List[Point2D] = []
        self._active: List[int] = []
        self._grid = BackgroundGrid(self.domain, self.min_dist)

    def generate(self, initial_sample: Optional[Point2D] = None) -> List[Point2D]:
        """
        Generate samples.

        Args:
            initial_sample: First sample; a random one inside the domain if None

        Returns:
            The generated samples, starting with the initial one
        """
        self._reset()
        if initial_sample is None:
            initial_sample = self._generate_sample()
        if self.domain.is_degenerate():
            # Nothing fits next to a sample in an area without extent.
            self.samples.append(initial_sample)
            return self.samples

        self._store_sample(initial_sample)

        while self._active:
            seed_idx = self._choose_seed()
            new_sample = self._find_new_sample(self.samples[seed_idx])
            if new_sample is None:
                self._active.remove(seed_idx)
            else:
                self._store_sample(new_sample)

        logger.debug("Generated Poisson-disc samples", count=len(self.samples),
                     min_dist=self.min_dist, grid_shape=self._grid.shape)
        return self.samples

    def _generate_sample(self) -> Point2D:
        d = self.domain
        return Point2D(d.left + self.rand.random() * d.width,
                       d.top + self.rand.random() * d.height)

    def _choose_seed(self) -> int:
        return self._active[0]

    def _store_sample(self, sample: Point2D) -> None:
        self.samples.append(sample)
        idx = len(self.samples) - 1
        self._active.append(idx)
        self._grid.insert(sample, idx)

    def _find_new_sample(self, seed: Point2D) -> Optional[Point2D]:
        annulus = Annulus(seed, self.min_dist, self.max_candidate_dist, self.domain, self.rand)
        for _ in range(self.num_candidates):
            candidate = annulus.generate_point_in_ring()
            if candidate is None:
                return None
            if not self._grid.have_sample_within_min_distance(candidate):
                return candidate
        return None
