"""Generation of the tile layout of a map."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog

from ..geometry.poisson import PoissonDiscSampler
from ..geometry.primitives import Point2D, Rect2D
from ..geometry.shapes import Polygon2D, Triangle2D
from ..geometry.voronoi import VoronoiTessellation, VoronoiTile
from .map_model import MapNode, MapTile, Representation

logger = structlog.get_logger()


@dataclass
class GeometrySpec:
    """
    Parameters of the tile layout.

    Attributes:
        bounds: Area covered by the map
        min_sample_distance: Minimal distance between tile seeds. Smaller
            distances give more and smaller tiles.
        num_sample_candidates: Candidates tested for each new tile seed. More
            candidates give more evenly spaced seeds but take longer.
    """

    bounds: Rect2D
    min_sample_distance: float = 1.0
    num_sample_candidates: int = 20

    def __post_init__(self):
        if self.bounds.is_degenerate():
            raise ValueError(f"Map bounds must have an area, got {self.bounds!r}")
        if self.min_sample_distance <= 0:
            raise ValueError(
                f"min_sample_distance must be positive, got {self.min_sample_distance}")
        if self.num_sample_candidates <= 0:
            raise ValueError(
                f"num_sample_candidates must be positive, got {self.num_sample_candidates}")


class MapGeometryGenerator:
    """
    Builds tiles and nodes from Voronoi tiles.

    Tile adjacency comes from the Delaunay triangulation behind the
    tessellation: tiles whose seeds are connected by a triangle edge are
    neighbors. Node adjacency comes from the tile outlines: consecutive
    outline vertices are neighboring nodes.
    """

    def __init__(self, spec: GeometrySpec):
        self.spec = spec
        self.rep = Representation()

    def generate(self, rand) -> Representation:
        """
        Generate the geometry from Poisson-disc sampled tile seeds.

        Args:
            rand: Random source for the sampler

        Returns:
            The populated representation
        """
        sampler = PoissonDiscSampler(self.spec.bounds, self.spec.min_sample_distance,
                                     self.spec.num_sample_candidates, rand)
        seeds = sampler.generate()
        logger.info("Generated tile seeds", count=len(seeds))
        return self.generate_from_points(seeds)

    def generate_from_points(self, points: Sequence[Point2D]) -> Representation:
        """Generate the geometry for given unique tile seeds."""
        self.rep = Representation()
        tessellation = VoronoiTessellation(points, self.spec.bounds)
        tess_tiles = tessellation.tessellate()

        self._make_map_tiles(tess_tiles)
        if tessellation.triangulation is not None:
            self._populate_tile_neighbors(tessellation.triangulation.triangles)
        elif len(tess_tiles) == 2:
            # No triangulation for two seeds, their tiles share the bisector.
            self._connect_tiles_at(tess_tiles[0].seed, tess_tiles[1].seed)
        self._populate_node_neighbors(tess_tiles)

        logger.info("Generated map geometry", tiles=self.rep.count_tiles(),
                    nodes=self.rep.count_nodes())
        return self.rep

    def _make_map_tiles(self, tess_tiles: List[VoronoiTile]) -> None:
        for tess_tile in tess_tiles:
            tile = MapTile(tess_tile.seed, tess_tile.outline)
            tile.set_nodes(self._make_tile_nodes(tess_tile.outline))
            self.rep.add_tile(tile)

    def _make_tile_nodes(self, shape: Polygon2D) -> List[MapNode]:
        return [self.rep.find_or_add_node_at(pt) for pt in shape]

    def _populate_tile_neighbors(self, triangles: Sequence[Triangle2D]) -> None:
        # Triangle vertices are tile seeds, triangle edges connect neighbors.
        for t in triangles:
            self._connect_tiles_at(t.vertex(0), t.vertex(1))
            self._connect_tiles_at(t.vertex(1), t.vertex(2))
            self._connect_tiles_at(t.vertex(2), t.vertex(0))

    def _connect_tiles_at(self, a: Point2D, b: Point2D) -> None:
        tile_a = self.rep.find_tile_at(a)
        tile_b = self.rep.find_tile_at(b)
        if tile_a is not None and tile_b is not None:
            tile_a.add_neighbor(tile_b)
            tile_b.add_neighbor(tile_a)

    def _populate_node_neighbors(self, tess_tiles: List[VoronoiTile]) -> None:
        for tess_tile in tess_tiles:
            outline = tess_tile.outline
            count = outline.count_vertices()
            if count < 2:
                continue
            for i in range(count):
                self._connect_nodes_at(outline.vertex(i), outline.vertex((i + 1) % count))

    def _connect_nodes_at(self, a: Point2D, b: Point2D) -> None:
        node_a: Optional[MapNode] = self.rep.find_node_at(a)
        node_b: Optional[MapNode] = self.rep.find_node_at(b)
        if node_a is not None and node_b is not None:
            node_a.add_neighbor(node_b)
            node_b.add_neighbor(node_a)
