"""
Algorithms on convex polygons.

- :func:`intersect_convex_polygons` clips two convex polygons against each
  other (O'Rourke et al., "A new linear algorithm for intersecting convex
  polygons", 1982; https://www.cs.jhu.edu/~misha/Spring16/ORourke82.pdf).
- :func:`cut_convex_polygon` splits a convex polygon along an infinite line.

Both are fail-soft: degenerate or non-convex input yields empty polygons
instead of exceptions.
"""

from enum import Enum
from typing import List, Optional

import structlog

from ..utils.fp_util import fp_greater, fp_less, fp_less_equal
from .lines import InfiniteLine2D, IntersectionType, Line2D, LineSegment2D, intersect
from .primitives import Point2D, Vector2D
from .shapes import Polygon2D, is_point_inside_convex_polygon

logger = structlog.get_logger()


class _InsideFlag(Enum):
    """Which polygon's boundary is currently inside the other polygon."""

    P_INSIDE = "p"
    Q_INSIDE = "q"
    UNKNOWN = "unknown"


class _Traversal:
    """Cursor walking along the vertices and edges of a ccw polygon."""

    def __init__(self, poly: Polygon2D, start: int, inside_flag: _InsideFlag):
        self.poly = poly
        self.pt_idx = start
        self.inside_flag = inside_flag
        self.point = poly.vertex(start)
        self.edge = poly.edge(self._edge_index(start))

    def advance(self) -> None:
        self.pt_idx = (self.pt_idx + 1) % self.poly.count_vertices()
        self.point = self.poly.vertex(self.pt_idx)
        self.edge = self.poly.edge(self._edge_index(self.pt_idx))

    def collect_point_if_inside(self, cur_inside: _InsideFlag, out: Polygon2D) -> None:
        if cur_inside is self.inside_flag:
            out.add_unique_vertex(self.point)

    def is_point_on_inside(self, pt: Point2D) -> bool:
        """Check if a point is on the inner side of the current edge (or on it)."""
        v = Vector2D.between(self.edge.anchor, pt)
        return fp_less_equal(self.edge.direction.perp_dot(v), 0.0)

    def is_edge_ccw_or_collinear(self, e: LineSegment2D) -> bool:
        return fp_less_equal(self.edge.direction.perp_dot(e.direction), 0.0)

    def _edge_index(self, pt_idx: int) -> int:
        # The edge that ends at the given point.
        return pt_idx - 1 if pt_idx != 0 else self.poly.count_edges() - 1


def intersect_convex_polygons(p_in: Polygon2D, q_in: Polygon2D) -> Polygon2D:
    """
    Intersect two convex polygons.

    Polygons with one vertex are treated as points and polygons with two
    vertices as segments. Non-convex input gives an empty polygon.

    Args:
        p_in: First polygon, any orientation
        q_in: Second polygon, any orientation

    Returns:
        The intersection polygon in ccw (screen) order; possibly empty, a
        single point or a segment
    """
    if p_in.count_vertices() == 0 or q_in.count_vertices() == 0:
        return Polygon2D()
    if p_in.count_vertices() == 1:
        return _intersect_with_point(p_in.vertex(0), q_in)
    if q_in.count_vertices() == 1:
        return _intersect_with_point(q_in.vertex(0), p_in)
    if p_in.count_vertices() == 2:
        return _intersect_with_line(p_in.edge(0), q_in)
    if q_in.count_vertices() == 2:
        return _intersect_with_line(q_in.edge(0), p_in)
    if not p_in.is_convex() or not q_in.is_convex():
        logger.debug("Skipping intersection of non-convex polygons",
                     p_vertices=p_in.count_vertices(), q_vertices=q_in.count_vertices())
        return Polygon2D()

    p_poly = _make_ccw(p_in)
    q_poly = _make_ccw(q_in)
    result = Polygon2D()

    max_iter = 2 * (p_poly.count_edges() + q_poly.count_edges())
    first_isect_pt: Optional[Point2D] = None
    first_isect_iter = -1

    p = _Traversal(p_poly, 1, _InsideFlag.P_INSIDE)
    q = _Traversal(q_poly, 1, _InsideFlag.Q_INSIDE)
    cur_inside = _InsideFlag.UNKNOWN

    for num_iter in range(max_iter + 1):
        # Collinear edges (segment results) count as no intersection.
        isect = intersect(p.edge, q.edge)
        if isect.kind is IntersectionType.POINT:
            isect_pt = isect.shape
            if first_isect_pt is None:
                # Remember where the walk started to detect a full loop.
                first_isect_pt = isect_pt
                first_isect_iter = num_iter
            elif isect_pt == first_isect_pt and first_isect_iter != num_iter - 1:
                return result

            result.add_unique_vertex(isect_pt)
            cur_inside = (_InsideFlag.P_INSIDE if q.is_point_on_inside(p.point)
                          else _InsideFlag.Q_INSIDE)

        _advance(p, q, cur_inside, result)

    # No crossing boundaries: either disjoint or one contains the other.
    if is_point_inside_convex_polygon(p.point, q_poly):
        return p_poly
    if is_point_inside_convex_polygon(q.point, p_poly):
        return q_poly
    return Polygon2D()


def _advance(p: _Traversal, q: _Traversal, cur_inside: _InsideFlag, out: Polygon2D) -> None:
    """Advance whichever traversal lags behind the other."""
    if q.is_edge_ccw_or_collinear(p.edge):
        rear = q if q.is_point_on_inside(p.point) else p
    else:
        rear = p if p.is_point_on_inside(q.point) else q
    rear.collect_point_if_inside(cur_inside, out)
    rear.advance()


def _intersect_with_point(pt: Point2D, poly: Polygon2D) -> Polygon2D:
    if is_point_inside_convex_polygon(pt, poly):
        return Polygon2D([pt])
    return Polygon2D()


def _intersect_with_line(line: LineSegment2D, poly: Polygon2D) -> Polygon2D:
    """Clip a segment against a convex polygon."""
    result = Polygon2D()

    for i in range(poly.count_edges()):
        isect = intersect(line, poly.edge(i))
        if isect.kind is IntersectionType.POINT:
            result.add_unique_vertex(isect.shape)
        elif isect.kind is IntersectionType.LINE_SEGMENT:
            result.add_unique_vertex(isect.shape.start_point())
            result.add_unique_vertex(isect.shape.end_point())

    # With two crossings neither end point can be inside the polygon.
    count = result.count_vertices()
    if count < 2:
        known = result.vertex(0) if count == 1 else None
        start = line.start_point()
        end = line.end_point()
        if (known is None or start != known) and is_point_inside_convex_polygon(start, poly):
            if not result.has_vertex(start):
                result.insert_vertex(start, 0)
        if (known is None or end != known) and is_point_inside_convex_polygon(end, poly):
            result.add_unique_vertex(end)

    return result


def _make_ccw(poly: Polygon2D) -> Polygon2D:
    return poly if _is_ccw(poly) else poly.reversed()


def _is_ccw(poly: Polygon2D) -> bool:
    # Twice the signed area. Negative for ccw order in screen coordinates.
    count = poly.count_vertices()
    area2 = 0.0
    for i in range(count):
        a = poly.vertex(i)
        b = poly.vertex((i + 1) % count)
        area2 += a.x * b.y - b.x * a.y
    return area2 < 0.0


class _Side(Enum):
    """Position of a point relative to a directed line."""

    NONE = 0
    LEFT = 1
    RIGHT = 2
    CENTER = 3


def cut_convex_polygon(poly: Polygon2D, line: InfiniteLine2D) -> List[Polygon2D]:
    """
    Cut a convex polygon with an infinite line.

    Args:
        poly: Convex polygon to cut
        line: Cutting line

    Returns:
        One or two polygons. Empty input gives a single empty polygon, a
        polygon lying completely on the line is returned as is, and a
        polygon touching the line from one side is returned as the only
        piece.
    """
    left_poly = Polygon2D()
    right_poly = Polygon2D()
    # Points strictly on one side tell cuts apart from mere touches.
    have_left = False
    have_right = False
    side = _Side.NONE

    count = poly.count_vertices()
    for i in range(count):
        pt = poly.vertex(i)
        prev_side, side = side, _calc_side_of_line(line, pt)

        # The crossing point goes in before the current vertex to keep order.
        if _was_line_crossed(prev_side, side):
            _add_crossing(line, LineSegment2D(poly.vertex(i - 1), pt), left_poly, right_poly)

        if side is _Side.LEFT:
            left_poly.add_vertex(pt)
            have_left = True
        elif side is _Side.RIGHT:
            right_poly.add_vertex(pt)
            have_right = True
        else:
            left_poly.add_vertex(pt)
            right_poly.add_vertex(pt)

    # Closing edge, only for polygons with an area.
    if count > 2:
        pt = poly.vertex(0)
        prev_side, side = side, _calc_side_of_line(line, pt)
        if _was_line_crossed(prev_side, side):
            _add_crossing(line, LineSegment2D(poly.vertex(count - 1), pt), left_poly, right_poly)

    if left_poly.count_vertices() == 0 and right_poly.count_vertices() == 0:
        return [left_poly]
    if not have_left and not have_right:
        return [left_poly]

    pieces = []
    if left_poly.count_vertices() > 0 and have_left:
        pieces.append(left_poly)
    if right_poly.count_vertices() > 0 and have_right:
        pieces.append(right_poly)
    return pieces


def _calc_side_of_line(line: Line2D, pt: Point2D) -> _Side:
    value = line.direction.perp_dot(Vector2D.between(line.anchor, pt))
    if fp_less(value, 0.0):
        return _Side.LEFT
    if fp_greater(value, 0.0):
        return _Side.RIGHT
    return _Side.CENTER


def _was_line_crossed(prev: _Side, now: _Side) -> bool:
    return ((now is _Side.LEFT and prev is _Side.RIGHT)
            or (now is _Side.RIGHT and prev is _Side.LEFT))


def _add_crossing(line: InfiniteLine2D, edge: LineSegment2D,
                  left_poly: Polygon2D, right_poly: Polygon2D) -> None:
    isect = intersect(line, edge)
    if isect.kind is IntersectionType.POINT:
        left_poly.add_vertex(isect.shape)
        right_poly.add_vertex(isect.shape)
