"""
Voronoi tessellation built as the dual of a Delaunay triangulation.

Each sample point becomes the seed of a tile. For the general case the
samples are triangulated, the Delaunay edges around every sample are
converted into Voronoi edges, and the unordered Voronoi edges are chained
into a polygon that is finally clipped to a border rectangle.
"""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Dict, List, Optional, Sequence, Union

import structlog

from .convex import cut_convex_polygon, intersect_convex_polygons
from .delaunay import DelaunayTriangle, DelaunayTriangulation, TriangulationResult
from .lines import InfiniteLine2D, IntersectionType, Line2D, LineRay2D, LineSegment2D, intersect
from .primitives import (Point2D, PositionKey, Rect2D, Vector2D, calc_bounding_box,
                         compare_xy, position_key)
from .shapes import Polygon2D

logger = structlog.get_logger()

# Distance that open Voronoi edges are extended to before clipping.
RAY_EXTENSION_DIST = 100000.0


@dataclass
class VoronoiTile:
    """Seed point and the outline of the area closest to it."""

    seed: Point2D
    outline: Polygon2D

    def count_vertices(self) -> int:
        return self.outline.count_vertices()

    def has_vertex(self, pt: Point2D) -> bool:
        return self.outline.has_vertex(pt)


class _DelaunayEdge:
    """A Delaunay edge and the one or two triangles it belongs to."""

    def __init__(self, edge: LineSegment2D, t: DelaunayTriangle):
        self.edge = edge
        self.triangles: List[DelaunayTriangle] = [t]

    def add_triangle(self, t: DelaunayTriangle) -> None:
        if len(self.triangles) < 2:
            self.triangles.append(t)
        else:
            self.triangles[1] = t

    def is_edge(self, e: LineSegment2D) -> bool:
        """Direction insensitive edge comparison."""
        sa, ea = self.edge.start_point(), self.edge.end_point()
        sb, eb = e.start_point(), e.end_point()
        return (sa == sb and ea == eb) or (sa == eb and ea == sb)

    def make_voronoi_edge(self) -> Optional[Line2D]:
        """
        The Voronoi edge dual to this edge.

        Returns:
            A segment between two circumcenters, a ray away from a single
            triangle, or None if both circumcenters coincide
        """
        if len(self.triangles) == 1:
            # Triangles are ccw, so the cw normal of an edge points away from
            # the triangle.
            return LineRay2D(self.triangles[0].circumcenter,
                             self.edge.direction.cw_normal())

        ca = self.triangles[0].circumcenter
        cb = self.triangles[1].circumcenter
        if ca == cb:
            return None
        return LineSegment2D(ca, cb)


class _DelaunayEdgeCollection:
    """Delaunay edges meeting at one sample point."""

    def __init__(self, sample: Point2D):
        self.sample = sample
        self.edges: List[_DelaunayEdge] = []

    def add_edge(self, edge: LineSegment2D, t: DelaunayTriangle) -> None:
        for de in self.edges:
            if de.is_edge(edge):
                de.add_triangle(t)
                return
        self.edges.append(_DelaunayEdge(edge, t))

    def make_voronoi_edges(self) -> List[Line2D]:
        voronoi_edges = []
        for de in self.edges:
            ve = de.make_voronoi_edge()
            if ve is not None:
                voronoi_edges.append(ve)
        return voronoi_edges


class _PolygonBuilder:
    """Builds a clipped polygon from an unordered list of Voronoi edges."""

    def __init__(self, edges: Sequence[Line2D], clip_bounds: Rect2D):
        self.edges: List[Line2D] = list(edges)
        self.clip = Polygon2D.from_rect(clip_bounds)

    def build(self) -> Polygon2D:
        unclipped = Polygon2D(self._create_vertex_sequence())
        return intersect_convex_polygons(unclipped, self.clip)

    def _create_vertex_sequence(self) -> List[Point2D]:
        if not self.edges:
            return []
        return self._order_edges(self._take_end_edges())

    def _take_end_edges(self) -> List[Line2D]:
        """Remove and return up to two edges without end point (rays)."""
        end_edges = [e for e in self.edges if not e.has_end_point][:2]
        for e in end_edges:
            self.edges.remove(e)
        return end_edges

    def _order_edges(self, end_edges: List[Line2D]) -> List[Point2D]:
        # Tiles on the hull have two open edges, inner tiles none.
        is_open_path = len(end_edges) == 2
        vertices: List[Point2D] = []

        if is_open_path:
            vertices.append(_calc_distant_point(end_edges[0]))
            next_edge = self._take_next_edge(end_edges[0].start_point())
        else:
            next_edge = self.edges.pop(0)

        while next_edge is not None:
            vertices.append(next_edge.start_point())
            next_edge = self._take_next_edge(next_edge.end_point())

        if is_open_path:
            vertices.append(end_edges[1].start_point())
            vertices.append(_calc_distant_point(end_edges[1]))
            _fix_intersecting_end_edges(vertices)

        return vertices

    def _take_next_edge(self, connector: Optional[Point2D]) -> Optional[Line2D]:
        """Remove and return the edge that continues at a given point."""
        if connector is None:
            return None
        for i, e in enumerate(self.edges):
            if e.start_point() == connector:
                return self.edges.pop(i)
            if e.end_point() == connector:
                self.edges.pop(i)
                return LineSegment2D(e.end_point(), e.start_point())
        return None


def _calc_distant_point(edge: Line2D) -> Point2D:
    return edge.start_point().offset(edge.direction.normalize().scale(RAY_EXTENSION_DIST))


def _fix_intersecting_end_edges(vertices: List[Point2D]) -> None:
    """
    Snap the far ends of both open edges to their intersection if they cross.

    Crossing open edges would make the polygon non-convex and break the
    clipping. Crossing at their start points is fine.
    """
    isect = intersect(LineSegment2D(vertices[1], vertices[0]),
                      LineSegment2D(vertices[-2], vertices[-1]))
    if isect.kind is not IntersectionType.POINT:
        return
    isect_pt = isect.shape
    if isect_pt != vertices[1] and isect_pt != vertices[-2]:
        vertices[0] = isect_pt
        vertices[-1] = Point2D(isect_pt.x, isect_pt.y)


def calc_border(points: Sequence[Point2D], offset: float = 0.0) -> Rect2D:
    """Bounding box of the points, grown by an offset on each side."""
    border = calc_bounding_box(points)
    border.inflate(offset)
    return border


class VoronoiTessellation:
    """
    Voronoi tessellation of unique sample points within a border.

    The caller is responsible for the samples being free of duplicates.

    Example:
        >>> tiles = VoronoiTessellation(points, border_offset=10.0).tessellate()
    """

    def __init__(self, samples: Sequence[Point2D], border: Union[Rect2D, float, None] = None,
                 border_offset: float = 0.0):
        """
        Initialize the tessellation.

        Args:
            samples: Unique sample points
            border: Rectangle to clip tiles to. Defaults to the bounding box of
                the samples. A number is taken as border offset.
            border_offset: Distance to grow the default border by
        """
        self.samples: List[Point2D] = list(samples)
        if isinstance(border, (int, float)):
            border_offset = float(border)
            border = None
        self.border = border if border is not None else calc_border(self.samples, border_offset)
        self.tiles: List[VoronoiTile] = []
        self._triangulation: Optional[TriangulationResult] = None

    @property
    def triangulation(self) -> Optional[TriangulationResult]:
        """Delaunay triangulation used by the last run, if any."""
        return self._triangulation

    def tessellate(self) -> List[VoronoiTile]:
        self.tiles = []
        count = len(self.samples)
        if count == 0:
            return self.tiles
        if count == 1:
            return self._tessellate_into_single_tile()
        if count == 2:
            return self._tessellate_into_two_tiles()

        self._triangulation = DelaunayTriangulation(self.samples).triangulate()
        edge_map = _collect_delaunay_edges(self._triangulation.delaunay_triangles)

        # Tiles ordered by seed position. Seeds are the triangle vertices which
        # might be slightly off the original samples.
        collections = sorted(edge_map.values(),
                             key=cmp_to_key(lambda a, b: compare_xy(a.sample, b.sample)))
        for collection in collections:
            voronoi_edges = collection.make_voronoi_edges()
            outline = _PolygonBuilder(voronoi_edges, self.border).build()
            if outline.count_vertices() > 0:
                self.tiles.append(VoronoiTile(collection.sample, outline))

        logger.debug("Voronoi tessellation done", num_samples=count,
                     num_tiles=len(self.tiles),
                     num_triangles=len(self._triangulation.triangles))
        return self.tiles

    def _tessellate_into_single_tile(self) -> List[VoronoiTile]:
        sample = self.samples[0]
        if self.border.is_degenerate():
            outline = Polygon2D([sample])
        else:
            outline = Polygon2D.from_rect(self.border)
        self.tiles.append(VoronoiTile(sample, outline))
        return self.tiles

    def _tessellate_into_two_tiles(self) -> List[VoronoiTile]:
        pa, pb = self.samples
        # Split the border along the bisector of the two samples.
        sample_edge = LineSegment2D(pa, pb)
        bisector = InfiniteLine2D(sample_edge.mid_point(), sample_edge.direction.ccw_normal())

        pieces = cut_convex_polygon(Polygon2D.from_rect(self.border), bisector)
        if len(pieces) != 2:
            logger.debug("Abandoning two tile tessellation", num_pieces=len(pieces))
            self.tiles.clear()
            return self.tiles

        first_is_a = _are_on_same_side_of(pa, pieces[0], bisector)
        self.tiles.append(VoronoiTile(pa, pieces[0] if first_is_a else pieces[1]))
        self.tiles.append(VoronoiTile(pb, pieces[1] if first_is_a else pieces[0]))
        return self.tiles


def _collect_delaunay_edges(
        triangles: Sequence[DelaunayTriangle]) -> Dict[PositionKey, _DelaunayEdgeCollection]:
    """Group the edges of all triangles by the vertices they touch."""
    edge_map: Dict[PositionKey, _DelaunayEdgeCollection] = {}
    for dt in triangles:
        for i in range(3):
            v = dt.vertex(i)
            key = position_key(v)
            collection = edge_map.get(key)
            if collection is None:
                collection = edge_map[key] = _DelaunayEdgeCollection(v)
            # Incoming edge first, then outgoing.
            collection.add_edge(LineSegment2D(dt.vertex((i + 2) % 3), v), dt)
            collection.add_edge(LineSegment2D(v, dt.vertex((i + 1) % 3)), dt)
    return edge_map


def _are_on_same_side_of(pt: Point2D, poly: Polygon2D, line: InfiniteLine2D) -> bool:
    """Check if a point and a polygon are on the same side of a line."""
    line_dir = line.direction
    is_left = line_dir.is_ccw(Vector2D.between(line.anchor, pt))
    for poly_pt in poly:
        if line.is_point_on_line(poly_pt).is_on_line:
            continue
        if line_dir.is_ccw(Vector2D.between(line.anchor, poly_pt)) != is_left:
            return False
    return True


def tessellate(samples: Sequence[Point2D], border: Optional[Rect2D] = None) -> List[VoronoiTile]:
    """Shortcut for VoronoiTessellation(samples, border).tessellate()."""
    return VoronoiTessellation(samples, border).tessellate()
