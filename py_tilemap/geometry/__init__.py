"""
Computational geometry for map generation.
"""

from .primitives import (CoordSystem, Point2D, Vector2D, Rect2D, Circle2D, Ring2D,
                         calc_bounding_box, is_convex_path, position_key)
from .lines import (Line2D, LineSegment2D, LineRay2D, InfiniteLine2D, IntersectionType,
                    LineIntersection, intersect)
from .shapes import GeometryError, Triangle2D, Polygon2D, is_point_inside_convex_polygon
from .convex import intersect_convex_polygons, cut_convex_polygon
from .poisson import PoissonDiscSampler
from .delaunay import (DelaunayTriangle, DelaunayTriangulation, TriangulationResult,
                       is_delaunay_condition_satisfied, triangulate)
from .voronoi import VoronoiTile, VoronoiTessellation, tessellate

__all__ = ['CoordSystem', 'Point2D', 'Vector2D', 'Rect2D', 'Circle2D', 'Ring2D',
           'calc_bounding_box', 'is_convex_path', 'position_key',
           'Line2D', 'LineSegment2D', 'LineRay2D', 'InfiniteLine2D', 'IntersectionType',
           'LineIntersection', 'intersect',
           'GeometryError', 'Triangle2D', 'Polygon2D', 'is_point_inside_convex_polygon',
           'intersect_convex_polygons', 'cut_convex_polygon', 'PoissonDiscSampler',
           'DelaunayTriangle', 'DelaunayTriangulation', 'TriangulationResult',
           'is_delaunay_condition_satisfied', 'triangulate',
           'VoronoiTile', 'VoronoiTessellation', 'tessellate']
