"""
Data model of a generated map.

Tiles are the Voronoi cells of the map, nodes are the corners of the tiles.
Tiles sharing a corner share the node instance at that corner. Lookups by
position use quantized position keys (see
:func:`py_tilemap.geometry.primitives.position_key`).
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from ..geometry.primitives import Point2D, PositionKey, Rect2D, position_key
from ..geometry.shapes import Polygon2D

# Marks nodes and tiles whose elevation was not assigned yet. Lies below the
# valid elevation range [-1, 1].
UNASSIGNED_ELEVATION = -2.0


class MapNode:
    """Map properties at a tile corner."""

    __slots__ = ("pos", "elevation", "neighbors")

    def __init__(self, pos: Point2D):
        self.pos = pos
        self.elevation = UNASSIGNED_ELEVATION
        self.neighbors: List["MapNode"] = []

    def __repr__(self):
        return f"MapNode({self.pos!r}, elevation={self.elevation})"

    def add_neighbor(self, node: "MapNode") -> None:
        if node is self:
            return
        if not any(n is node for n in self.neighbors):
            self.neighbors.append(node)

    def count_neighbors(self) -> int:
        return len(self.neighbors)

    def neighbor(self, idx: int) -> "MapNode":
        return self.neighbors[idx]

    def is_assigned(self) -> bool:
        return self.elevation > UNASSIGNED_ELEVATION


class MapTile:
    """
    A tile of the map.

    Attributes:
        seed: Sample point that the tile was grown around
        shape: Outline of the tile
        bounds: Bounding box of the outline
        nodes: Nodes at each outline vertex, in outline order
        neighbors: Tiles sharing an edge with this tile
        elevation: Elevation at the seed
    """

    __slots__ = ("seed", "shape", "bounds", "nodes", "neighbors", "elevation")

    def __init__(self, seed: Point2D, shape: Polygon2D):
        self.seed = seed
        self.shape = shape
        self.bounds: Rect2D = shape.bounds()
        self.nodes: List[MapNode] = []
        self.neighbors: List["MapTile"] = []
        self.elevation = UNASSIGNED_ELEVATION

    def __repr__(self):
        return f"MapTile({self.seed!r}, nodes={len(self.nodes)}, elevation={self.elevation})"

    def set_nodes(self, nodes: Sequence[MapNode]) -> None:
        """Set the nodes of the outline. They have to match the outline vertices."""
        self.nodes = list(nodes)

    def count_nodes(self) -> int:
        return len(self.nodes)

    def node(self, idx: int) -> MapNode:
        return self.nodes[idx]

    def add_neighbor(self, tile: "MapTile") -> None:
        if tile is self:
            return
        if not any(t is tile for t in self.neighbors):
            self.neighbors.append(tile)

    def count_neighbors(self) -> int:
        return len(self.neighbors)

    def neighbor(self, idx: int) -> "MapTile":
        return self.neighbors[idx]


class Representation:
    """
    Tiles and nodes of a map plus lookups by position.

    Filled once during geometry generation, afterwards only elevations
    change.
    """

    def __init__(self):
        self.tiles: List[MapTile] = []
        self.nodes: List[MapNode] = []
        self._tile_lookup: Dict[PositionKey, MapTile] = {}
        self._node_lookup: Dict[PositionKey, MapNode] = {}

    def add_tile(self, tile: MapTile) -> None:
        self.tiles.append(tile)
        self._tile_lookup[position_key(tile.seed)] = tile

    def count_tiles(self) -> int:
        return len(self.tiles)

    def tile(self, idx: int) -> MapTile:
        return self.tiles[idx]

    def find_tile_at(self, pos: Point2D) -> Optional[MapTile]:
        """Tile whose seed is at a given position."""
        return self._tile_lookup.get(position_key(pos))

    def add_node(self, node: MapNode) -> None:
        self.nodes.append(node)
        self._node_lookup[position_key(node.pos)] = node

    def count_nodes(self) -> int:
        return len(self.nodes)

    def node(self, idx: int) -> MapNode:
        return self.nodes[idx]

    def find_node_at(self, pos: Point2D) -> Optional[MapNode]:
        return self._node_lookup.get(position_key(pos))

    def find_or_add_node_at(self, pos: Point2D) -> MapNode:
        node = self.find_node_at(pos)
        if node is None:
            node = MapNode(pos)
            self.add_node(node)
        return node

    def node_positions(self) -> np.ndarray:
        """Node positions as an (n, 2) array."""
        if not self.nodes:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([(n.pos.x, n.pos.y) for n in self.nodes], dtype=np.float64)

    def node_elevations(self) -> np.ndarray:
        return np.array([n.elevation for n in self.nodes], dtype=np.float64)

    def tile_elevations(self) -> np.ndarray:
        return np.array([t.elevation for t in self.tiles], dtype=np.float64)
