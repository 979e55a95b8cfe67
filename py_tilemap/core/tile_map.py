"""
Top level map generation entry point.

A :class:`Map` is built from a :class:`MapSpec` and a seeded random source.
:meth:`Map.generate` lays out the tiles once and then assigns elevations with
the configured topography generator.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog

from ..config import settings
from ..geometry.primitives import Rect2D
from ..geometry.shapes import Polygon2D
from ..utils import random as random_utils
from .map_geometry import GeometrySpec, MapGeometryGenerator
from .map_model import MapNode, MapTile, Representation
from .topography import (BlobContinentGenerator, ContinentBasedTopography, ContinentSpec,
                         PerlinTopography, PerlinTopographySpec, TopographyGenerator)

logger = structlog.get_logger()

TOPOGRAPHY_PERLIN = "perlin"
TOPOGRAPHY_CONTINENTS = "continents"


@dataclass
class MapSpec:
    """
    Parameters of a map.

    Attributes:
        geometry: Tile layout parameters
        perlin: Noise topography parameters
        topography: Topography strategy, "perlin" or "continents"
        continents: Continent topography parameters; drawn randomly when None
    """

    geometry: GeometrySpec
    perlin: PerlinTopographySpec
    topography: str = TOPOGRAPHY_PERLIN
    continents: Optional[ContinentSpec] = None

    def __post_init__(self):
        if self.topography not in (TOPOGRAPHY_PERLIN, TOPOGRAPHY_CONTINENTS):
            raise ValueError(
                f"topography must be '{TOPOGRAPHY_PERLIN}' or '{TOPOGRAPHY_CONTINENTS}', "
                f"got {self.topography!r}")

    @classmethod
    def from_settings(cls, width: Optional[float] = None, height: Optional[float] = None,
                      topography: str = TOPOGRAPHY_PERLIN) -> "MapSpec":
        """Spec for a map at the origin with the defaults from settings."""
        bounds = Rect2D(0.0, 0.0,
                        width if width is not None else settings.default_map_width,
                        height if height is not None else settings.default_map_height)
        geometry = GeometrySpec(bounds.copy(), settings.min_sample_distance,
                                settings.num_sample_candidates)
        perlin = PerlinTopographySpec(bounds.copy(), settings.num_octaves, settings.persistence)
        return cls(geometry, perlin, topography)


class Map:
    """
    A generated tile map.

    Example:
        >>> game_map = Map(MapSpec.from_settings(100, 100), AleaPRNG("seed"))
        >>> game_map.generate()
        >>> game_map.count_tiles()
    """

    def __init__(self, spec: MapSpec, rand=None):
        """
        Initialize the map.

        Args:
            spec: Map parameters
            rand: Random source; the process-wide default PRNG if None
        """
        self.spec = spec
        self.rand = rand if rand is not None else random_utils.get_prng()
        self.rep = Representation()

    def generate(self) -> "Map":
        """Generate geometry and topography. Returns the map itself."""
        logger.info("Generating map", width=self.width, height=self.height,
                    topography=self.spec.topography)
        self.rep = MapGeometryGenerator(self.spec.geometry).generate(self.rand)
        self._make_topography_generator().generate(self.rep)
        return self

    def _make_topography_generator(self) -> TopographyGenerator:
        if self.spec.topography == TOPOGRAPHY_CONTINENTS:
            continents = self.spec.continents
            if continents is None:
                continents = ContinentSpec.random(self.rand, BlobContinentGenerator(self.rand))
            return ContinentBasedTopography(continents, self.rand)
        return PerlinTopography(self.spec.perlin, self.rand)

    @property
    def width(self) -> float:
        return self.spec.geometry.bounds.width

    @property
    def height(self) -> float:
        return self.spec.geometry.bounds.height

    def count_tiles(self) -> int:
        return self.rep.count_tiles()

    def tile(self, idx: int) -> MapTile:
        return self.rep.tile(idx)

    def count_nodes(self) -> int:
        return self.rep.count_nodes()

    def node(self, idx: int) -> MapNode:
        return self.rep.node(idx)

    def tile_shapes(self) -> List[Polygon2D]:
        return [tile.shape for tile in self.rep.tiles]

    def node_positions(self) -> np.ndarray:
        """Node positions as an (n, 2) array, in node order."""
        return self.rep.node_positions()

    def node_elevations(self) -> np.ndarray:
        return self.rep.node_elevations()
