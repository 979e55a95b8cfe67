"""
Basic 2D value types.

Points, vectors, rectangles, circles and rings. Equality of all types is
tolerant: coordinates compare equal when they are within the global
floating point threshold (see :mod:`py_tilemap.utils.fp_util`).

Caution: because of the threshold-based equality it is always possible to
find two points that compare equal but hash into separate buckets. Sets and
dicts keyed by these types are only approximately correct.
"""

import math
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from ..config import settings
from ..utils import fp_util
from ..utils.fp_util import fp_equal, fp_greater, fp_greater_equal, fp_less, fp_less_equal, fp_hash


class CoordSystem(Enum):
    """Orientation of the y axis."""

    # y axis points down. Default for all orientation predicates.
    SCREEN = "screen"
    # y axis points up.
    CARTESIAN = "cartesian"


class Point2D:
    """Immutable point in 2D space."""

    __slots__ = ("x", "y")

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Point2D):
            return NotImplemented
        thres = fp_util._fp_threshold
        return abs(self.x - other.x) <= thres and abs(self.y - other.y) <= thres

    def __hash__(self):
        return hash((fp_hash(self.x), fp_hash(self.y)))

    def __repr__(self):
        return f"Point2D({self.x}, {self.y})"

    def __iter__(self):
        yield self.x
        yield self.y

    def offset(self, dx, dy: Optional[float] = None) -> "Point2D":
        """Offset by a vector or by separate x and y deltas."""
        if dy is None:
            return Point2D(self.x + dx.x, self.y + dx.y)
        return Point2D(self.x + dx, self.y + dy)

    def scale(self, factor: float) -> "Point2D":
        return Point2D(self.x * factor, self.y * factor)

    @staticmethod
    def distance(a: "Point2D", b: "Point2D") -> float:
        # Compare squared distances where possible, this needs a sqrt.
        return math.sqrt(Point2D.distance_squared(a, b))

    @staticmethod
    def distance_squared(a: "Point2D", b: "Point2D") -> float:
        dx = b.x - a.x
        dy = b.y - a.y
        return dx * dx + dy * dy


def compare_x(a: Point2D, b: Point2D) -> int:
    """Tolerant three-way comparison of the x coordinates."""
    if fp_less(a.x, b.x):
        return -1
    if fp_equal(a.x, b.x):
        return 0
    return 1


def compare_xy(a: Point2D, b: Point2D) -> int:
    """Tolerant three-way comparison by x, then by y."""
    if fp_less(a.x, b.x):
        return -1
    if fp_equal(a.x, b.x):
        if fp_less(a.y, b.y):
            return -1
        if fp_equal(a.y, b.y):
            return 0
    return 1


PositionKey = Tuple[float, float]


def position_key(pt: Point2D, precision: Optional[int] = None) -> PositionKey:
    """
    Lookup key of a position: its coordinates rounded to a fixed number of
    decimal digits (``settings.node_key_precision`` by default).

    Unlike point equality the key does not depend on the comparison
    threshold, so keys stay valid when the threshold changes.
    """
    digits = settings.node_key_precision if precision is None else precision
    # Adding 0.0 turns -0.0 into 0.0.
    return (round(pt.x, digits) + 0.0, round(pt.y, digits) + 0.0)


class Vector2D:
    """2-dimensional mathematical vector."""

    __slots__ = ("x", "y")

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    @classmethod
    def between(cls, start: Point2D, end: Point2D) -> "Vector2D":
        """Vector pointing from one point to another."""
        return cls(end.x - start.x, end.y - start.y)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Vector2D):
            return NotImplemented
        return fp_equal(self.x, other.x) and fp_equal(self.y, other.y)

    def __hash__(self):
        return hash((fp_hash(self.x), fp_hash(self.y)))

    def __repr__(self):
        return f"Vector2D({self.x}, {self.y})"

    def is_zero_vector(self) -> bool:
        return self.x == 0.0 and self.y == 0.0

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> "Vector2D":
        length = self.length()
        if length == 0.0:
            return Vector2D(self.x, self.y)
        return self.scale(1.0 / length)

    def scale(self, factor: float) -> "Vector2D":
        return Vector2D(self.x * factor, self.y * factor)

    def dot(self, w: "Vector2D") -> float:
        """
        Dot (inner) product.

        Zero for perpendicular vectors, positive for an acute angle between
        the vectors, negative for an obtuse one.
        """
        return self.x * w.x + self.y * w.y

    def perp_dot(self, w: "Vector2D") -> float:
        """
        Perp dot product, the dot product of the perpendicular of ``self``
        with ``w``.

        Zero when the vectors are parallel. In screen coordinates a negative
        value means ``w`` is ccw of ``self`` when facing into the direction of
        ``self``; in cartesian coordinates the sign flips. The magnitude is the
        area of the parallelogram spanned by the vectors.
        """
        return self.x * w.y - self.y * w.x

    def is_perpendicular(self, w: "Vector2D") -> bool:
        return self.dot(w) == 0

    def is_parallel(self, w: "Vector2D") -> bool:
        """Parallel in the same or the opposite direction."""
        return fp_equal(self.perp_dot(w), 0.0)

    def has_same_direction(self, w: "Vector2D") -> bool:
        return self.is_parallel(w) and self.has_acute_angle(w)

    def has_acute_angle(self, w: "Vector2D") -> bool:
        return fp_greater(self.dot(w), 0.0)

    def has_obtuse_angle(self, w: "Vector2D") -> bool:
        return fp_less(self.dot(w), 0.0)

    def is_ccw(self, w: "Vector2D", cs: CoordSystem = CoordSystem.SCREEN) -> bool:
        """Check if ``w`` turns counter-clockwise relative to ``self``."""
        if cs is CoordSystem.SCREEN:
            return fp_less(self.perp_dot(w), 0.0)
        return fp_greater(self.perp_dot(w), 0.0)

    def is_cw(self, w: "Vector2D", cs: CoordSystem = CoordSystem.SCREEN) -> bool:
        """Check if ``w`` turns clockwise relative to ``self``."""
        if cs is CoordSystem.SCREEN:
            return fp_greater(self.perp_dot(w), 0.0)
        return fp_less(self.perp_dot(w), 0.0)

    def cw_normal(self, cs: CoordSystem = CoordSystem.SCREEN) -> "Vector2D":
        if cs is CoordSystem.SCREEN:
            return Vector2D(-self.y, self.x)
        return Vector2D(self.y, -self.x)

    def ccw_normal(self, cs: CoordSystem = CoordSystem.SCREEN) -> "Vector2D":
        if cs is CoordSystem.SCREEN:
            return Vector2D(self.y, -self.x)
        return Vector2D(-self.y, self.x)


class Rect2D:
    """
    Axis aligned rectangle.

    Always normalized: ``left <= right`` and ``top <= bottom``. The setters
    renormalize after every change.
    """

    __slots__ = ("_left", "_top", "_right", "_bottom")

    def __init__(self, left: float = 0.0, top: float = 0.0,
                 right: float = 0.0, bottom: float = 0.0):
        self._left = min(left, right)
        self._top = min(top, bottom)
        self._right = max(left, right)
        self._bottom = max(top, bottom)

    @classmethod
    def from_points(cls, left_top: Point2D, right_bottom: Point2D) -> "Rect2D":
        return cls(left_top.x, left_top.y, right_bottom.x, right_bottom.y)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Rect2D):
            return NotImplemented
        return (fp_equal(self._left, other._left) and fp_equal(self._top, other._top)
                and fp_equal(self._right, other._right)
                and fp_equal(self._bottom, other._bottom))

    def __hash__(self):
        return hash((fp_hash(self._left), fp_hash(self._top),
                     fp_hash(self._right), fp_hash(self._bottom)))

    def __repr__(self):
        return f"Rect2D({self._left}, {self._top}, {self._right}, {self._bottom})"

    def copy(self) -> "Rect2D":
        return Rect2D(self._left, self._top, self._right, self._bottom)

    def is_degenerate(self) -> bool:
        return fp_equal(self._left, self._right) or fp_equal(self._top, self._bottom)

    @property
    def left(self) -> float:
        return self._left

    @left.setter
    def left(self, value: float) -> None:
        self._left = value
        self._normalize()

    @property
    def top(self) -> float:
        return self._top

    @top.setter
    def top(self, value: float) -> None:
        self._top = value
        self._normalize()

    @property
    def right(self) -> float:
        return self._right

    @right.setter
    def right(self, value: float) -> None:
        self._right = value
        self._normalize()

    @property
    def bottom(self) -> float:
        return self._bottom

    @bottom.setter
    def bottom(self, value: float) -> None:
        self._bottom = value
        self._normalize()

    @property
    def width(self) -> float:
        return self._right - self._left

    @property
    def height(self) -> float:
        return self._bottom - self._top

    def left_top(self) -> Point2D:
        return Point2D(self._left, self._top)

    def right_top(self) -> Point2D:
        return Point2D(self._right, self._top)

    def left_bottom(self) -> Point2D:
        return Point2D(self._left, self._bottom)

    def right_bottom(self) -> Point2D:
        return Point2D(self._right, self._bottom)

    def center(self) -> Point2D:
        return Point2D((self._left + self._right) / 2.0, (self._top + self._bottom) / 2.0)

    def inflate(self, by: float) -> None:
        """Grow the rect by a given distance on each side."""
        self._left -= by
        self._right += by
        self._top -= by
        self._bottom += by
        self._normalize()

    def is_point_in_rect(self, pt: Point2D) -> bool:
        """Inside or on the border."""
        return (fp_greater_equal(pt.x, self._left) and fp_less_equal(pt.x, self._right)
                and fp_greater_equal(pt.y, self._top) and fp_less_equal(pt.y, self._bottom))

    def intersect(self, other: "Rect2D") -> "Rect2D":
        """Overlap of two rects. Disjoint rects give an empty rect at the origin."""
        if (self._left > other._right or other._left > self._right
                or self._top > other._bottom or other._top > self._bottom):
            return Rect2D()
        return Rect2D(max(self._left, other._left), max(self._top, other._top),
                      min(self._right, other._right), min(self._bottom, other._bottom))

    def _normalize(self) -> None:
        if self._left > self._right:
            self._left, self._right = self._right, self._left
        if self._top > self._bottom:
            self._top, self._bottom = self._bottom, self._top


class Circle2D:
    """Circle in 2D space."""

    __slots__ = ("center", "radius")

    def __init__(self, center: Point2D, radius: float):
        self.center = center
        self.radius = radius

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Circle2D):
            return NotImplemented
        return self.center == other.center and fp_equal(self.radius, other.radius)

    def __hash__(self):
        return hash((self.center, fp_hash(self.radius)))

    def __repr__(self):
        return f"Circle2D({self.center!r}, {self.radius})"

    def is_point(self) -> bool:
        return fp_equal(self.radius, 0.0)

    def bounds(self) -> Rect2D:
        c, r = self.center, self.radius
        return Rect2D(c.x - r, c.y - r, c.x + r, c.y + r)

    def offset(self, v: Vector2D) -> "Circle2D":
        return Circle2D(self.center.offset(v), self.radius)

    def is_point_in_circle(self, pt: Point2D) -> bool:
        """Inside or on the circle."""
        return fp_less_equal(Point2D.distance_squared(pt, self.center),
                             self.radius * self.radius)

    def is_point_on_circle(self, pt: Point2D) -> bool:
        return fp_equal(Point2D.distance_squared(pt, self.center), self.radius * self.radius)

    def is_point_inside_circle(self, pt: Point2D) -> bool:
        """Strictly inside, points on the circle don't count."""
        return fp_less(Point2D.distance_squared(pt, self.center), self.radius * self.radius)

    def point_at_radian(self, angle: float) -> Point2D:
        """
        Point on the circumference.

        Zero radians is the 3 o'clock position; growing angles move
        counter-clockwise in cartesian coordinates.
        """
        return Point2D(self.center.x + self.radius * math.cos(angle),
                       self.center.y + self.radius * math.sin(angle))


class Ring2D:
    """Area between two concentric circles."""

    __slots__ = ("inner", "outer")

    def __init__(self, center: Point2D, inner_radius: float, outer_radius: float):
        lo, hi = sorted((inner_radius, outer_radius))
        self.inner = Circle2D(center, lo)
        self.outer = Circle2D(center, hi)

    def __eq__(self, other):
        if not isinstance(other, Ring2D):
            return NotImplemented
        return self.inner == other.inner and self.outer == other.outer

    def __hash__(self):
        return hash((self.inner, self.outer))

    @property
    def center(self) -> Point2D:
        return self.inner.center

    @property
    def inner_radius(self) -> float:
        return self.inner.radius

    @property
    def outer_radius(self) -> float:
        return self.outer.radius

    def bounds(self) -> Rect2D:
        return self.outer.bounds()

    def offset(self, v: Vector2D) -> "Ring2D":
        return Ring2D(self.center.offset(v), self.inner.radius, self.outer.radius)

    def is_point_in_ring(self, pt: Point2D) -> bool:
        """Between or on the circles."""
        return self.outer.is_point_in_circle(pt) and not self.inner.is_point_inside_circle(pt)


def calc_bounding_box(points: Iterable[Point2D]) -> Rect2D:
    """Minimal rect around given points. No points give an empty rect."""
    points = list(points)
    if not points:
        return Rect2D()
    xs = [pt.x for pt in points]
    ys = [pt.y for pt in points]
    return Rect2D(min(xs), min(ys), max(xs), max(ys))


def is_convex_path(path: Sequence[Point2D]) -> bool:
    """
    Check if a closed path of points is convex.

    All turns have to bend in the same direction; collinear turns are ignored.
    Paths of up to three points are always convex.
    """
    count = len(path)
    if count <= 3:
        return True

    orientation = fp_util.Sign.NONE
    prev = None
    for i in range(count + 1):
        cur = Vector2D.between(path[i % count], path[(i + 1) % count])
        if prev is not None:
            turn = fp_util.sign(prev.perp_dot(cur))
            if turn is not fp_util.Sign.NONE:
                if orientation is fp_util.Sign.NONE:
                    orientation = turn
                elif turn is not orientation:
                    return False
        prev = cur
    return True
