"""
Thin geometry layer over shapely.

Generators only need a handful of capabilities from a geometry library:
build points, polygons and multipolygons, translate a polygon, and test
two polygons for intersection. They all go through here.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import numpy as np
from shapely import affinity
from shapely.geometry import MultiPolygon, Point, Polygon


def make_point(x: float, y: float) -> Point:
    return Point(x, y)


def point_xy(point: Point) -> np.ndarray:
    return np.array([point.x, point.y], dtype=np.float64)


def make_polygon(ring: np.ndarray, holes: Optional[Sequence[np.ndarray]] = None) -> Polygon:
    """Build a polygon from a closed (n + 1, 2) ring; holes default to none."""
    ring = np.asarray(ring)
    return Polygon(ring.tolist(), [np.asarray(h).tolist() for h in holes or []])


def translate_polygon(polygon: Polygon, dx: float, dy: float) -> Polygon:
    return affinity.translate(polygon, xoff=dx, yoff=dy)


def polygons_intersect(a: Polygon, b: Polygon) -> bool:
    return bool(a.intersects(b))


def make_multipolygon(polygons: Iterable[Polygon]) -> MultiPolygon:
    return MultiPolygon(list(polygons))


def polygon_ring(polygon: Polygon) -> np.ndarray:
    """Closed exterior ring, first point repeated last."""
    return np.asarray(polygon.exterior.coords, dtype=np.float64)


def polygon_vertices(polygon: Polygon) -> np.ndarray:
    """Exterior vertices without the closing duplicate, shape (n, 2)."""
    return polygon_ring(polygon)[:-1]


def multipolygon_members(multipolygon: MultiPolygon) -> List[Polygon]:
    return list(multipolygon.geoms)


def is_simple(polygon: Polygon) -> bool:
    # Valid here means the exterior ring does not cross itself.
    return bool(polygon.is_valid)


__all__ = [
    "MultiPolygon",
    "Point",
    "Polygon",
    "is_simple",
    "make_multipolygon",
    "make_point",
    "make_polygon",
    "multipolygon_members",
    "point_xy",
    "polygon_ring",
    "polygon_vertices",
    "polygons_intersect",
    "translate_polygon",
]
