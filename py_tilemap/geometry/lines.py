"""
Line types and the line intersection engine.

Segments, rays and infinite lines share one representation: an anchor point
and a direction vector. They only differ in which parametric values along
the direction are part of the line:

    segment        [0, 1]    anchor is the start, anchor + direction the end
    ray            [0, inf)  anchor is the start
    infinite line  (-inf, inf)

:func:`intersect` intersects any two of them and reports the outcome as a
:class:`LineIntersection` tagged with an :class:`IntersectionType`.
"""

from enum import Enum
from typing import NamedTuple, Optional, Tuple, Union

from ..utils.fp_util import NEG_INF, POS_INF, Interval, fp_equal, fp_greater, fp_less
from .primitives import Point2D, Vector2D


class PointOnLineResult(NamedTuple):
    """Outcome of checking whether a point lies on a line."""

    is_on_line: bool
    # Factor to scale the line direction by to reach the point from the anchor.
    parametric_value: float = 0.0


_NOT_ON_LINE = PointOnLineResult(False)


class Line2D:
    """Common functionality of all line types."""

    __slots__ = ("anchor", "direction")

    # Class level tags keep hashes of different line types with the same data apart.
    _HASH_TAG = 0

    def __init__(self, anchor: Point2D, direction: Vector2D):
        # For line types with a start point the anchor is the start point.
        self.anchor = anchor
        self.direction = direction

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self.anchor == other.anchor and self.direction == other.direction

    def __hash__(self):
        return hash((self._HASH_TAG, self.anchor, self.direction))

    def __repr__(self):
        return f"{type(self).__name__}({self.anchor!r}, {self.direction!r})"

    def is_point(self) -> bool:
        """Check if the line degenerates into a point."""
        return self.direction.is_zero_vector()

    @property
    def has_start_point(self) -> bool:
        return False

    @property
    def has_end_point(self) -> bool:
        return False

    def start_point(self) -> Optional[Point2D]:
        return None

    def end_point(self) -> Optional[Point2D]:
        return None

    def _is_in_range(self, parametric_value: float) -> bool:
        return True

    def is_point_on_line(self, pt: Point2D) -> PointOnLineResult:
        value = self.calc_parametric_value(pt)
        if value is None or not self._is_in_range(value):
            return _NOT_ON_LINE
        return PointOnLineResult(True, value)

    def is_point_on_infinite_line(self, pt: Point2D) -> PointOnLineResult:
        """Check if a point is on the infinite extension of the line."""
        value = self.calc_parametric_value(pt)
        if value is None:
            return _NOT_ON_LINE
        return PointOnLineResult(True, value)

    def calc_parametric_value(self, pt: Point2D) -> Optional[float]:
        """
        Parametric value of a point along the infinite extension of the line.

        Returns:
            The value or None if the point is not on the line
        """
        if self.is_point():
            return 0.0 if pt == self.anchor else None

        v = Vector2D.between(self.anchor, pt)
        if not v.is_parallel(self.direction):
            return None

        # Direction length is non-zero, checked above.
        value = v.length() / self.direction.length()
        if not v.has_same_direction(self.direction):
            value = -value
        return value

    def calc_point_at(self, parametric_value: float) -> Point2D:
        return self.anchor.offset(self.direction.scale(parametric_value))

    def is_parallel(self, other: "Line2D") -> bool:
        return self.direction.is_parallel(other.direction.normalize())

    def is_coincident(self, other: "Line2D") -> bool:
        """Check if both lines lie on the same infinite line."""
        return (self.is_parallel(other)
                and self.is_point_on_infinite_line(other.anchor).is_on_line)

    def intersect(self, other: "Line2D") -> "LineIntersection":
        return intersect(self, other)


class LineSegment2D(Line2D):
    """Line with finite start and end points."""

    __slots__ = ()
    _HASH_TAG = 7

    def __init__(self, start: Point2D, end: Union[Point2D, Vector2D]):
        if isinstance(end, Point2D):
            end = Vector2D.between(start, end)
        super().__init__(start, end)

    @property
    def has_start_point(self) -> bool:
        return True

    @property
    def has_end_point(self) -> bool:
        return True

    def start_point(self) -> Point2D:
        return self.anchor

    def end_point(self) -> Point2D:
        return self.anchor.offset(self.direction)

    def mid_point(self) -> Point2D:
        return self.anchor.offset(self.direction.scale(0.5))

    def length(self) -> float:
        return self.direction.length()

    def length_squared(self) -> float:
        return self.direction.length_squared()

    def reversed(self) -> "LineSegment2D":
        return LineSegment2D(self.end_point(), self.anchor)

    def _is_in_range(self, parametric_value: float) -> bool:
        return 0.0 <= parametric_value <= 1.0


class LineRay2D(Line2D):
    """Line with a start point that extends infinitely into its direction."""

    __slots__ = ()
    _HASH_TAG = 11

    @property
    def has_start_point(self) -> bool:
        return True

    def start_point(self) -> Point2D:
        return self.anchor

    def _is_in_range(self, parametric_value: float) -> bool:
        return parametric_value >= 0.0


class InfiniteLine2D(Line2D):
    """Line extending infinitely to both sides of its anchor."""

    __slots__ = ()
    _HASH_TAG = 13


class IntersectionType(Enum):
    """Possible outcomes of intersecting two lines."""

    NONE = "none"
    POINT = "point"
    LINE_SEGMENT = "line_segment"
    LINE_RAY = "line_ray"
    INFINITE_LINE = "infinite_line"


class LineIntersection(NamedTuple):
    """
    Result of intersecting two lines.

    ``shape`` is None for NONE, a Point2D for POINT, and a LineSegment2D,
    LineRay2D or InfiniteLine2D for the remaining types.
    """

    kind: IntersectionType
    shape: Union[None, Point2D, Line2D] = None

    @property
    def is_point(self) -> bool:
        return self.kind is IntersectionType.POINT


NO_INTERSECTION = LineIntersection(IntersectionType.NONE)


def intersect(a: Line2D, b: Line2D) -> LineIntersection:
    """
    Intersect two lines of any type.

    Args:
        a: First line
        b: Second line

    Returns:
        The typed intersection result
    """
    if a.is_point() or b.is_point():
        return _intersect_degenerate_lines(a, b)
    if a.is_coincident(b):
        return _intersect_coincident_lines(a, b)
    if a.is_parallel(b):
        return NO_INTERSECTION
    return _intersect_skew_lines(a, b)


def _intersect_degenerate_lines(a: Line2D, b: Line2D) -> LineIntersection:
    # Also covers both lines being points.
    if a.is_point():
        return _intersect_point_line(a.anchor, b)
    return _intersect_point_line(b.anchor, a)


def _intersect_point_line(pt: Point2D, line: Line2D) -> LineIntersection:
    if line.is_point_on_line(pt).is_on_line:
        return LineIntersection(IntersectionType.POINT, pt)
    return NO_INTERSECTION


def _intersect_coincident_lines(a: Line2D, b: Line2D) -> LineIntersection:
    # Express both lines as intervals of parametric values along line a.
    # Unbounded ends of b map to -inf or +inf depending on whether b runs
    # in the same or the opposite direction as a.
    a_interval = Interval(0.0 if a.has_start_point else NEG_INF,
                          1.0 if a.has_end_point else POS_INF)

    same_dir = b.direction.has_same_direction(a.direction)
    if b.has_start_point:
        begin = a.calc_parametric_value(b.start_point())
    else:
        begin = NEG_INF if same_dir else POS_INF
    if b.has_end_point:
        end = a.calc_parametric_value(b.end_point())
    else:
        end = POS_INF if same_dir else NEG_INF
    if begin is None or end is None:
        return NO_INTERSECTION

    overlap = a_interval.intersect(Interval(begin, end))
    if overlap is None:
        return NO_INTERSECTION

    num_infinite_ends = (overlap.a == NEG_INF) + (overlap.b == POS_INF)
    if num_infinite_ends == 2:
        return LineIntersection(IntersectionType.INFINITE_LINE,
                                InfiniteLine2D(a.anchor, a.direction))
    if num_infinite_ends == 1:
        if overlap.a == NEG_INF:
            ray = LineRay2D(a.calc_point_at(overlap.b), a.direction.scale(-1))
        else:
            ray = LineRay2D(a.calc_point_at(overlap.a), a.direction)
        return LineIntersection(IntersectionType.LINE_RAY, ray)
    if fp_equal(overlap.a, overlap.b):
        return LineIntersection(IntersectionType.POINT, a.calc_point_at(overlap.a))
    return LineIntersection(IntersectionType.LINE_SEGMENT,
                            LineSegment2D(a.calc_point_at(overlap.a),
                                          a.calc_point_at(overlap.b)))


def _intersect_skew_lines(a: Line2D, b: Line2D) -> LineIntersection:
    # Source: http://geomalgorithms.com/a05-_intersect-1.html
    value_a, value_b = _calc_parametric_intersection_values(a, b)
    if _is_parametric_value_on_line(value_a, a) and _is_parametric_value_on_line(value_b, b):
        return LineIntersection(IntersectionType.POINT, a.calc_point_at(value_a))
    return NO_INTERSECTION


def _calc_parametric_intersection_values(a: Line2D, b: Line2D) -> Tuple[float, float]:
    """Parametric values of the intersection point on each of two skew lines."""
    u = a.direction
    v = b.direction
    w = Vector2D.between(b.anchor, a.anchor)
    # Denominators are only zero for parallel lines.
    value_a = (v.y * w.x - v.x * w.y) / v.perp_dot(u)
    value_b = u.perp_dot(w) / u.perp_dot(v)
    return value_a, value_b


def _is_parametric_value_on_line(value: float, line: Line2D) -> bool:
    if line.has_start_point and fp_less(value, 0.0):
        return False
    if line.has_end_point and fp_greater(value, 1.0):
        return False
    return True
