"""
Delaunay triangulation with the Bowyer-Watson algorithm.

Triangulates a point set so that no triangle's circumcircle contains any of
the other points (the Delaunay condition). Based on
http://paulbourke.net/papers/triangulate/.

Points are processed in ascending x order. A triangle whose circumcircle lies
completely left of the current point can never be affected by any later
point, so it is moved out of the working set early ("settled").
"""

from functools import cmp_to_key
from typing import Iterable, List, NamedTuple, Optional, Sequence, Set

import structlog

from ..utils.fp_util import fp_greater, fp_less_equal
from .lines import LineSegment2D
from .primitives import Circle2D, Point2D, Rect2D, calc_bounding_box, compare_x
from .shapes import GeometryError, Triangle2D

logger = structlog.get_logger()

# Size of the super triangle relative to the extent of the input points.
SUPER_TRIANGLE_SCALE = 20.0


class DelaunayTriangle:
    """
    Triangle annotated with data the triangulation needs repeatedly.

    Caches the circumcircle, its squared radius and the triangle's bounds.
    Construction raises GeometryError if the circumcircle cannot be computed.
    """

    __slots__ = ("triangle", "circumcircle", "bounds", "radius_squared")

    def __init__(self, triangle: Triangle2D):
        circle = triangle.circumcircle()
        if circle is None:
            raise GeometryError(f"Triangle {triangle!r} has no circumcircle")
        self.triangle = triangle
        self.circumcircle: Circle2D = circle
        self.bounds: Rect2D = calc_bounding_box(triangle.vertices)
        self.radius_squared = circle.radius * circle.radius

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, DelaunayTriangle):
            return NotImplemented
        return self.triangle == other.triangle

    def __hash__(self):
        return hash(self.triangle)

    def __repr__(self):
        return f"DelaunayTriangle({self.triangle!r})"

    @property
    def circumcenter(self) -> Point2D:
        return self.circumcircle.center

    @property
    def circumcircle_radius(self) -> float:
        return self.circumcircle.radius

    def vertex(self, idx: int) -> Point2D:
        return self.triangle.vertex(idx)

    def find_vertex(self, pt: Point2D) -> int:
        """Index of a vertex or -1 if the point is not a vertex."""
        if not self.bounds.is_point_in_rect(pt):
            return -1
        for i, v in enumerate(self.triangle.vertices):
            if v == pt:
                return i
        return -1

    def edge(self, idx: int) -> LineSegment2D:
        return self.triangle.edge(idx)

    def is_point_in_circumcircle(self, pt: Point2D) -> bool:
        """Inside or on the circumcircle."""
        return fp_less_equal(Point2D.distance_squared(pt, self.circumcircle.center),
                             self.radius_squared)

    def has_settled(self, pt: Point2D) -> bool:
        """
        Check if the triangle can be affected by a given point or any point
        with a larger x coordinate.
        """
        return fp_greater(pt.x - self.circumcircle.center.x, self.circumcircle.radius)


class TriangulationResult(NamedTuple):
    """
    Outcome of a triangulation.

    A failed triangulation has no triangles at all, partial results are
    never returned.
    """

    triangles: List[Triangle2D]
    delaunay_triangles: List[DelaunayTriangle]
    succeeded: bool = True


class _EdgeBuffer:
    """Edges of the triangles removed for a new point."""

    def __init__(self):
        self.edges: List[LineSegment2D] = []

    def __len__(self):
        return len(self.edges)

    def __iter__(self):
        return iter(self.edges)

    def add_edges(self, t: DelaunayTriangle) -> None:
        for i in range(3):
            self.edges.append(t.edge(i))

    def clear(self) -> None:
        self.edges.clear()

    def remove_duplicates(self) -> None:
        """Remove every edge that occurs more than once, all copies of it."""
        duplicates: Set[int] = set()
        for i in range(len(self.edges)):
            for j in range(i + 1, len(self.edges)):
                if _is_duplicate_edge(self.edges[i], self.edges[j]):
                    duplicates.add(i)
                    duplicates.add(j)
        self.edges = [e for i, e in enumerate(self.edges) if i not in duplicates]


def _is_duplicate_edge(a: LineSegment2D, b: LineSegment2D) -> bool:
    sa, ea = a.start_point(), a.end_point()
    sb, eb = b.start_point(), b.end_point()
    return (sa == sb and ea == eb) or (sa == eb and ea == sb)


class DelaunayTriangulation:
    """
    Bowyer-Watson triangulation of a point set.

    The caller is responsible for the points being free of duplicates. The
    given sequence is copied and left untouched.
    """

    def __init__(self, points: Iterable[Point2D]):
        self.samples: List[Point2D] = list(points)
        self.super_triangle = calc_super_triangle(self.samples)

        # Super triangle vertices are processed like samples.
        if not self.super_triangle.is_degenerate():
            self.samples.extend(self.super_triangle.vertices)

        self.samples.sort(key=cmp_to_key(compare_x))

        self._active: List[DelaunayTriangle] = []
        self._settled: List[DelaunayTriangle] = []
        self._result: Optional[TriangulationResult] = None

    @property
    def result(self) -> Optional[TriangulationResult]:
        """Result of the last run, None before :meth:`triangulate`."""
        return self._result

    def triangulate(self) -> TriangulationResult:
        """
        Run the triangulation.

        Returns:
            The triangles. Input with a degenerate bounding box gives an empty
            but successful result; a failed circumcircle calculation aborts
            the run and gives an empty failed result.
        """
        if self.super_triangle.is_degenerate():
            self._result = TriangulationResult([], [], True)
            return self._result

        try:
            self._active.append(DelaunayTriangle(self.super_triangle))
            edges = _EdgeBuffer()

            for sample in self.samples:
                edges.clear()
                self._find_enclosing_polygon_edges(sample, edges)
                edges.remove_duplicates()
                self._generate_new_triangles(sample, edges)

            self._settled.extend(self._active)
            self._active.clear()
            self._remove_triangles_sharing_vertices(self.super_triangle)
        except GeometryError as e:
            logger.warning("Delaunay triangulation aborted", error=str(e),
                           num_samples=len(self.samples))
            self._active.clear()
            self._settled.clear()
            self._result = TriangulationResult([], [], False)
            return self._result

        logger.debug("Delaunay triangulation done", num_samples=len(self.samples),
                     num_triangles=len(self._settled))
        self._result = TriangulationResult([dt.triangle for dt in self._settled],
                                           list(self._settled), True)
        return self._result

    def _find_enclosing_polygon_edges(self, sample: Point2D, edges: _EdgeBuffer) -> None:
        """
        Remove the active triangles whose circumcircle contains a point and
        collect their edges. Settles triangles on the way.
        """
        remaining = []
        for t in self._active:
            if t.has_settled(sample):
                self._settled.append(t)
            elif t.is_point_in_circumcircle(sample):
                edges.add_edges(t)
            else:
                remaining.append(t)
        self._active = remaining

    def _generate_new_triangles(self, sample: Point2D, edges: _EdgeBuffer) -> None:
        for e in edges:
            t = Triangle2D(sample, e.start_point(), e.end_point())
            if t.is_degenerate():
                continue
            try:
                self._active.append(DelaunayTriangle(t))
            except GeometryError:
                logger.debug("Skipping triangle without circumcircle", triangle=repr(t))

    def _remove_triangles_sharing_vertices(self, master: Triangle2D) -> None:
        self._settled = [t for t in self._settled
                         if not any(master.has_vertex(v) for v in t.triangle.vertices)]


def triangulate(points: Iterable[Point2D]) -> TriangulationResult:
    """Triangulate a point set. Shortcut for DelaunayTriangulation(points).triangulate()."""
    return DelaunayTriangulation(points).triangulate()


def calc_super_triangle(points: Sequence[Point2D]) -> Triangle2D:
    """
    Triangle that strictly contains all given points.

    Returns:
        The triangle, or a degenerate triangle if the points' bounding box
        is degenerate
    """
    bounds = calc_bounding_box(points)
    if bounds.is_degenerate():
        return Triangle2D()

    dim_max = max(bounds.width, bounds.height)
    center = bounds.center()
    a = Point2D(center.x - SUPER_TRIANGLE_SCALE * dim_max, center.y - dim_max)
    b = Point2D(center.x, center.y + SUPER_TRIANGLE_SCALE * dim_max)
    c = Point2D(center.x + SUPER_TRIANGLE_SCALE * dim_max, center.y - dim_max)
    return Triangle2D(a, b, c)


def is_delaunay_condition_satisfied(triangles: Sequence[Triangle2D]) -> bool:
    """
    Check that no triangle's circumcircle strictly contains a vertex of any
    triangle in the list.
    """
    vertices = {v for t in triangles for v in t.vertices}
    for t in triangles:
        try:
            circle = t.circumcircle()
        except GeometryError:
            continue
        if circle is None:
            continue
        for pt in vertices:
            if circle.is_point_inside_circle(pt):
                return False
    return True
