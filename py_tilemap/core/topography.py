"""
Topography generators.

A topography generator writes elevations in [-1, 1] onto the nodes and tiles
of a finished map representation. Two strategies are available:

- :class:`PerlinTopography`: fractal Perlin noise sampled at every node and
  tile seed.
- :class:`ContinentBasedTopography`: grows land masses over the node graph
  and leaves the rest as water.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from ..geometry.primitives import Rect2D
from ..utils.fp_util import clamp_to_range, rand_gaussian
from .map_model import UNASSIGNED_ELEVATION, MapNode, Representation
from .perlin_noise import PerlinNoise

logger = structlog.get_logger()

LAND_ELEVATION = 1.0
WATER_ELEVATION = -1.0


class TopographyGenerator(ABC):
    """Assigns elevations to the nodes and tiles of a representation."""

    @abstractmethod
    def generate(self, rep: Representation) -> None:
        """Write elevations in place."""


@dataclass
class PerlinTopographySpec:
    """
    Parameters of the noise based topography.

    Attributes:
        bounds: Area covered by the map
        num_octaves: Number of noise octaves. More octaves let larger areas
            influence each value, which looks like zooming into features.
        persistence: Amplitude factor per octave. Larger values give larger
            and smoother features, smaller values smaller and choppier ones.
    """

    bounds: Rect2D
    num_octaves: int = 9
    persistence: float = 2.0

    def __post_init__(self):
        if self.num_octaves <= 0:
            raise ValueError(f"num_octaves must be positive, got {self.num_octaves}")
        if self.persistence <= 0:
            raise ValueError(f"persistence must be positive, got {self.persistence}")


class PerlinTopography(TopographyGenerator):
    """Elevations from multi octave Perlin noise."""

    def __init__(self, spec: PerlinTopographySpec, rand):
        self.spec = spec
        self.rand = rand
        self.left = int(spec.bounds.left)
        self.top = int(spec.bounds.top)
        self.width = int(spec.bounds.right - self.left) + 1
        self.height = int(spec.bounds.bottom - self.top) + 1

    def generate(self, rep: Representation) -> None:
        noise = PerlinNoise(self.width, self.height, self.rand)

        for node in rep.nodes:
            node.elevation = self._elevation_at(noise, node.pos.x, node.pos.y)
        for tile in rep.tiles:
            tile.elevation = self._elevation_at(noise, tile.seed.x, tile.seed.y)

        logger.info("Generated Perlin topography", nodes=rep.count_nodes(),
                    tiles=rep.count_tiles(), octaves=self.spec.num_octaves)

    def _elevation_at(self, noise: PerlinNoise, x: float, y: float) -> float:
        # Lattice coordinates start at the bounds' left/top corner.
        lx = max(x - self.left, 0.0)
        ly = max(y - self.top, 0.0)
        value = noise.octave_noise(lx, ly, self.spec.num_octaves, self.spec.persistence)
        return scale_elevation(value)


def scale_elevation(value: float) -> float:
    """
    Stretch a noise value and clamp it to [-1, 1].

    Noise summed over many octaves is rather flat, so values near zero are
    amplified the most.
    """
    return clamp_to_range(_stretch(value), -1.0, 1.0)


def _stretch(t: float) -> float:
    magnitude = abs(t)
    if magnitude < 0.3:
        return 4.0 * t
    if magnitude < 0.5:
        return 3.0 * t
    return t


@dataclass
class Continent:
    """Node budget of a continent and the nodes it claimed so far."""

    allocated_size: int
    nodes: List[MapNode] = field(default_factory=list)

    def size(self) -> int:
        return len(self.nodes)

    def add_node(self, node: MapNode) -> None:
        self.nodes.append(node)


class ContinentGenerator(ABC):
    """Grows a single continent over the node graph of a map."""

    @abstractmethod
    def set_map(self, rep: Representation) -> None:
        pass

    @abstractmethod
    def generate(self, continent: Continent) -> None:
        """Claim up to ``continent.allocated_size`` nodes for the continent."""


@dataclass
class ContinentSpec:
    """
    Parameters of the continent based topography.

    Attributes:
        land_ratio: Share of nodes that become land, in [0, 1]
        num_continents: Number of continents the land is split into
        continent_generator: Strategy that grows each continent
    """

    land_ratio: float
    num_continents: int
    continent_generator: ContinentGenerator

    def __post_init__(self):
        if not 0.0 <= self.land_ratio <= 1.0:
            raise ValueError(f"land_ratio must be in [0, 1], got {self.land_ratio}")
        if self.num_continents <= 0:
            raise ValueError(f"num_continents must be positive, got {self.num_continents}")

    @classmethod
    def random(cls, rand, continent_generator: ContinentGenerator) -> "ContinentSpec":
        """Spec with a gaussian land ratio and 1 to 20 continents."""
        land_ratio = rand_gaussian(rand, 0.0, 1.0)
        num_continents = 1 + rand.randint(20)
        return cls(land_ratio, num_continents, continent_generator)


class ContinentBasedTopography(TopographyGenerator):
    """
    Land masses grown over the node graph.

    Claimed nodes become land (elevation 1), all others water (elevation -1).
    Tiles get the mean elevation of their nodes.
    """

    def __init__(self, spec: ContinentSpec, rand):
        self.spec = spec
        self.rand = rand
        self.continents: List[Continent] = []

    def generate(self, rep: Representation) -> None:
        self.spec.continent_generator.set_map(rep)
        self.continents = self._init_continents(rep.count_nodes())
        for continent in self.continents:
            self.spec.continent_generator.generate(continent)

        for node in rep.nodes:
            if not node.is_assigned():
                node.elevation = WATER_ELEVATION
        for tile in rep.tiles:
            if tile.nodes:
                tile.elevation = sum(n.elevation for n in tile.nodes) / len(tile.nodes)
            else:
                tile.elevation = WATER_ELEVATION

        logger.info("Generated continent topography", continents=len(self.continents),
                    land_nodes=sum(c.size() for c in self.continents),
                    nodes=rep.count_nodes())

    def _init_continents(self, num_nodes: int) -> List[Continent]:
        """Split the land budget randomly. The last continent takes the rest."""
        num_continents = self.spec.num_continents
        land_nodes_remaining = int(num_nodes * self.spec.land_ratio)

        continents = []
        for i in range(num_continents - 1):
            continents_remaining = num_continents - i
            if land_nodes_remaining > continents_remaining:
                size = self.rand.randint(land_nodes_remaining - continents_remaining)
            else:
                size = 0
            land_nodes_remaining -= size
            continents.append(Continent(size))

        continents.append(Continent(land_nodes_remaining))
        return continents


class BlobContinentGenerator(ContinentGenerator):
    """
    Grows continents randomly outward from a seed node.

    Gives blob looking shapes on large maps.
    """

    MAX_SEED_ATTEMPTS = 100

    def __init__(self, rand):
        self.rand = rand
        self.rep: Optional[Representation] = None

    def set_map(self, rep: Representation) -> None:
        self.rep = rep

    def generate(self, continent: Continent) -> None:
        if self.rep is None:
            raise RuntimeError("set_map() has to be called before generate()")
        if continent.allocated_size <= 0:
            return

        next_node = self._find_seed_node()
        if next_node is None:
            return
        self._assign_node(continent, next_node)

        # Nodes the continent can still grow from.
        growth_pool = [next_node]
        while continent.size() < continent.allocated_size:
            next_node = self._find_unassigned_node(growth_pool)
            if next_node is None:
                return
            self._assign_node(continent, next_node)
            growth_pool.append(next_node)

    def _find_seed_node(self) -> Optional[MapNode]:
        count = self.rep.count_nodes()
        if count == 0:
            return None
        for _ in range(self.MAX_SEED_ATTEMPTS):
            node = self.rep.node(self.rand.randint(count))
            if _is_unassigned(node):
                return node
        return None

    def _find_unassigned_node(self, pool: List[MapNode]) -> Optional[MapNode]:
        """Unassigned neighbor of a random pool node. Exhausted nodes leave the pool."""
        while pool:
            idx = self.rand.randint(len(pool))
            for neighbor in pool[idx].neighbors:
                if _is_unassigned(neighbor):
                    return neighbor
            pool.pop(idx)
        return None

    @staticmethod
    def _assign_node(continent: Continent, node: MapNode) -> None:
        node.elevation = LAND_ELEVATION
        continent.add_node(node)


def _is_unassigned(node: MapNode) -> bool:
    return node.elevation == UNASSIGNED_ELEVATION
