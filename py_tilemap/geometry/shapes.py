"""Triangles and polygons."""

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from ..utils.fp_util import Sign, cyclic_next, sign
from .lines import InfiniteLine2D, IntersectionType, LineSegment2D
from .primitives import Circle2D, Point2D, Rect2D, Vector2D, calc_bounding_box, is_convex_path


class GeometryError(ValueError):
    """Raised when a geometric construction is impossible for the given input."""


class Triangle2D:
    """
    Triangle with vertices in ccw order (screen coordinates).

    The vertex order is fixed at construction. Degenerate triangles (all
    vertices at one point, or all on one line) are valid objects and can be
    detected with :meth:`is_point`, :meth:`is_line` and :meth:`is_degenerate`.
    """

    __slots__ = ("vertices",)

    def __init__(self, a: Optional[Point2D] = None, b: Optional[Point2D] = None,
                 c: Optional[Point2D] = None):
        a = a if a is not None else Point2D()
        b = b if b is not None else Point2D()
        c = c if c is not None else Point2D()
        if Vector2D.between(a, b).is_ccw(Vector2D.between(b, c)):
            self.vertices: Tuple[Point2D, Point2D, Point2D] = (a, b, c)
        else:
            self.vertices = (a, c, b)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Triangle2D):
            return NotImplemented
        return self.vertices == other.vertices

    def __hash__(self):
        return hash(self.vertices)

    def __repr__(self):
        return "Triangle2D({!r}, {!r}, {!r})".format(*self.vertices)

    def vertex(self, idx: int) -> Point2D:
        return self.vertices[idx]

    def has_vertex(self, pt: Point2D) -> bool:
        return pt in self.vertices

    def edge(self, idx: int) -> LineSegment2D:
        return LineSegment2D(self.vertices[idx], self.vertices[cyclic_next(idx, 3)])

    def is_point(self) -> bool:
        v = self.vertices
        return v[0] == v[1] and v[0] == v[2]

    def is_line(self) -> bool:
        if self.is_point():
            return False
        v = self.vertices
        if v[0] == v[1]:
            return True
        return LineSegment2D(v[0], v[1]).is_point_on_infinite_line(v[2]).is_on_line

    def is_degenerate(self) -> bool:
        return self.is_point() or self.is_line()

    def area(self) -> float:
        if self.is_degenerate():
            return 0.0
        # Half the parallelogram spanned by two sides.
        v = Vector2D.between(self.vertices[0], self.vertices[1])
        w = Vector2D.between(self.vertices[0], self.vertices[2])
        return abs(v.perp_dot(w)) / 2.0

    def circumcircle(self) -> Optional[Circle2D]:
        """
        Circle through all three vertices.

        Returns:
            The circumcircle, a zero radius circle for point triangles, or
            None for line triangles

        Raises:
            GeometryError: If the circumcenter cannot be calculated
        """
        if self.is_point():
            return Circle2D(self.vertices[0], 0.0)
        if self.is_line():
            return None
        center = self._circumcenter()
        radius = Vector2D.between(center, self.vertices[0]).length()
        return Circle2D(center, radius)

    def _circumcenter(self) -> Point2D:
        # The perpendicular bisectors of all sides meet at the circumcenter.
        # Intersecting two of them is enough.
        side01 = self.edge(0)
        side12 = self.edge(1)
        bisector01 = InfiniteLine2D(side01.mid_point(), side01.direction.ccw_normal())
        bisector12 = InfiniteLine2D(side12.mid_point(), side12.direction.ccw_normal())

        isect = bisector01.intersect(bisector12)
        if isect.kind is not IntersectionType.POINT:
            raise GeometryError(
                f"Failed to calculate circumcenter of {self!r}: bisectors intersect as {isect.kind.value}"
            )
        return isect.shape


class Polygon2D:
    """
    Closed polygon. Edge i runs from vertex i to vertex (i + 1) mod n.

    The vertex list is mutable.
    """

    __slots__ = ("_vertices",)

    def __init__(self, points: Optional[Iterable[Point2D]] = None):
        self._vertices: List[Point2D] = list(points) if points is not None else []

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Polygon2D):
            return NotImplemented
        return self._vertices == other._vertices

    def __hash__(self):
        return hash(tuple(self._vertices))

    def __repr__(self):
        return f"Polygon2D({self._vertices!r})"

    def __len__(self):
        return len(self._vertices)

    def __iter__(self) -> Iterator[Point2D]:
        return iter(self._vertices)

    @property
    def vertices(self) -> Sequence[Point2D]:
        return self._vertices

    def count_vertices(self) -> int:
        return len(self._vertices)

    def vertex(self, idx: int) -> Point2D:
        return self._vertices[idx]

    def set_vertex(self, idx: int, pt: Point2D) -> None:
        self._vertices[idx] = pt

    def has_vertex(self, pt: Point2D) -> bool:
        return pt in self._vertices

    def add_vertex(self, pt: Point2D) -> None:
        self._vertices.append(pt)

    def add_unique_vertex(self, pt: Point2D) -> None:
        if pt not in self._vertices:
            self._vertices.append(pt)

    def insert_vertex(self, pt: Point2D, idx: int) -> None:
        self._vertices.insert(idx, pt)

    def count_edges(self) -> int:
        # A single point has no edges, two points have two (back and forth).
        if len(self._vertices) == 1:
            return 0
        return len(self._vertices)

    def edge(self, idx: int) -> LineSegment2D:
        count = len(self._vertices)
        return LineSegment2D(self._vertices[idx], self._vertices[(idx + 1) % count])

    def bounds(self) -> Rect2D:
        return calc_bounding_box(self._vertices)

    def reversed(self) -> "Polygon2D":
        return Polygon2D(reversed(self._vertices))

    def is_convex(self) -> bool:
        return is_convex_path(self._vertices)

    @classmethod
    def from_rect(cls, rect: Rect2D) -> "Polygon2D":
        """Polygon of the rect's corners in ccw (screen) order."""
        return cls([rect.left_top(), rect.left_bottom(), rect.right_bottom(), rect.right_top()])


def is_point_inside_convex_polygon(pt: Point2D, poly: Polygon2D) -> bool:
    """
    Check whether a point is inside a convex polygon. Points on an edge count
    as inside.

    Inside a convex polygon the vectors from the point to consecutive vertices
    keep turning in the same direction. A change of direction means the point
    is outside.
    """
    count = poly.count_vertices()
    if count == 0:
        return False
    if count == 1:
        return poly.vertex(0) == pt

    poly_orientation = Sign.NONE
    for i in range(count):
        v = Vector2D.between(pt, poly.vertex(i))
        w = Vector2D.between(pt, poly.vertex(cyclic_next(i, count)))
        cur = sign(v.perp_dot(w))

        if cur is Sign.NONE and poly.edge(i).is_point_on_line(pt).is_on_line:
            return True

        if poly_orientation is Sign.NONE:
            poly_orientation = cur
        elif cur is not poly_orientation:
            return False

    return True
