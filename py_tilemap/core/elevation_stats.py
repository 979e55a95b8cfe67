"""Elevation statistics of map tiles."""

from typing import Optional

from ..geometry.primitives import Point2D, Rect2D, calc_bounding_box
from .map_model import MapTile


class ExtremeElevationFinder:
    """
    Finds the lowest and highest node of a tile.

    Attributes after :meth:`find`:
        min / max: Extreme node elevations, clamped to [-1, 1]
        min_pos / max_pos: Positions of the extreme nodes
        bounds: Bounding box of the tile's nodes
    """

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self.max = -2.0
        self.max_pos: Optional[Point2D] = None
        self.min = 2.0
        self.min_pos: Optional[Point2D] = None
        self.bounds = Rect2D()

    def find(self, tile: MapTile) -> "ExtremeElevationFinder":
        self._reset()

        for node in tile.nodes:
            if node.elevation > self.max:
                self.max = node.elevation
                self.max_pos = node.pos
            if node.elevation < self.min:
                self.min = node.elevation
                self.min_pos = node.pos

        self.max = min(self.max, 1.0)
        self.min = max(self.min, -1.0)
        self.bounds = calc_bounding_box(node.pos for node in tile.nodes)
        return self
