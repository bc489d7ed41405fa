"""Geographic polygons with containment and overlap tests.

Geometry runs in planar degree space with ``x = longitude`` and
``y = latitude``. Two containment strategies are available:

- ``ray_cast_contains``: even-odd ray casting, any winding or convexity.
- ``convex_contains``: every directed edge must have the point on its
  left (counter-clockwise winding); O(n) and only valid for convex shapes.

A polygon with fewer than three vertices is degenerate. Containment and
overlap queries against a degenerate polygon return ``False``; they never
raise.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geodetic_core.core.exceptions import InvalidGeometryError
from geodetic_core.models.bounding_box import GeographicBoundingBox
from geodetic_core.models.coordinate import Coordinate
from geodetic_core.utils.geodesy import geodesic_area_m2, is_valid_ring, to_shapely_polygon

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from shapely.geometry import Polygon

logger = logging.getLogger("geodetic_core.models.polygon")

# Fewer vertices than this is a degenerate polygon
MIN_POLYGON_VERTICES = 3

Point = tuple[float, float]


# ---------------------------------------------------------------------------
# Planar primitives
# ---------------------------------------------------------------------------


def orientation(a: Point, b: Point, c: Point) -> float:
    """Cross product of ``a->b`` and ``a->c``; positive when *c* is left of ``a->b``."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def signed_area(points: Sequence[Point]) -> float:
    """Shoelace area; positive for counter-clockwise rings."""
    total = 0.0
    last = points[-1]
    for cur in points:
        total += last[0] * cur[1] - cur[0] * last[1]
        last = cur
    return total / 2.0


def _on_segment(a: Point, b: Point, p: Point) -> bool:
    return min(a[0], b[0]) <= p[0] <= max(a[0], b[0]) and min(a[1], b[1]) <= p[1] <= max(a[1], b[1])


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """Whether segment ``p1-p2`` and segment ``q1-q2`` share at least one point.

    Proper crossings, touching endpoints and collinear overlaps all count.
    """
    o1 = orientation(p1, p2, q1)
    o2 = orientation(p1, p2, q2)
    o3 = orientation(q1, q2, p1)
    o4 = orientation(q1, q2, p2)

    if ((o1 > 0 > o2) or (o1 < 0 < o2)) and ((o3 > 0 > o4) or (o3 < 0 < o4)):
        return True

    # Collinear and touching cases
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, p2, q2):
        return True
    if o3 == 0 and _on_segment(q1, q2, p1):
        return True
    return o4 == 0 and _on_segment(q1, q2, p2)


def distance_to_segment(p: Point, a: Point, b: Point) -> float:
    """Planar distance from *p* to segment ``a-b``."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return math.hypot(p[0] - a[0], p[1] - a[1])
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(p[0] - (a[0] + t * dx), p[1] - (a[1] + t * dy))


def ray_cast_contains(points: Sequence[Point], x: float, y: float) -> bool:
    """Even-odd containment test casting a ray towards +x.

    The edge from the last vertex back to the first is included. Horizontal
    edges are skipped and each edge owns the half-open y-range
    ``[min_y, max_y)`` so a vertex on the ray is counted once.
    """
    if len(points) < MIN_POLYGON_VERTICES:
        return False

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    if not (min(xs) <= x <= max(xs) and min(ys) <= y <= max(ys)):
        return False

    hits = 0
    last_x, last_y = points[-1]
    for cur_x, cur_y in points:
        prev_x, prev_y = last_x, last_y
        last_x, last_y = cur_x, cur_y

        if cur_y == prev_y:
            continue

        if cur_x < prev_x:
            if x >= prev_x:
                continue
            left_x = cur_x
        else:
            if x >= cur_x:
                continue
            left_x = prev_x

        if cur_y < prev_y:
            if y < cur_y or y >= prev_y:
                continue
            if x < left_x:
                hits += 1
                continue
            test1 = x - cur_x
            test2 = y - cur_y
        else:
            if y < prev_y or y >= cur_y:
                continue
            if x < left_x:
                hits += 1
                continue
            test1 = x - prev_x
            test2 = y - prev_y

        if test1 < test2 / (prev_y - cur_y) * (prev_x - cur_x):
            hits += 1

    return hits % 2 == 1


def convex_contains(
    points: Sequence[Point],
    x: float,
    y: float,
    tolerance: float = 0.0,
    *,
    clockwise: bool = False,
) -> bool:
    """Containment test for convex polygons.

    The point must lie on the left of every directed edge (on the right
    when *clockwise*), allowing it to sit up to *tolerance* degrees
    outside an edge.
    """
    if len(points) < MIN_POLYGON_VERTICES:
        return False

    sign = -1.0 if clockwise else 1.0
    last = points[-1]
    for cur in points:
        edge_length = math.hypot(cur[0] - last[0], cur[1] - last[1])
        if edge_length > 0.0:
            side = sign * orientation(last, cur, (x, y)) / edge_length
            if side < -tolerance:
                return False
        last = cur
    return True


def is_convex_ring(points: Sequence[Point]) -> bool:
    """Whether every turn of the ring bends the same way (collinear turns allowed)."""
    if len(points) < MIN_POLYGON_VERTICES:
        return False

    has_left = has_right = False
    count = len(points)
    for i in range(count):
        turn = orientation(points[i - 2], points[i - 1], points[i])
        if turn > 0:
            has_left = True
        elif turn < 0:
            has_right = True
        if has_left and has_right:
            return False
    return True


# ---------------------------------------------------------------------------
# Bounding circle
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BoundingCircle:
    """Planar circle enclosing a polygon, used to reject disjoint pairs early.

    Attributes:
        center: Centre of the polygon's envelope.
        radius_deg: Distance in degrees from the centre to the far corner.
    """

    center: Coordinate
    radius_deg: float

    def overlaps(self, other: BoundingCircle, tolerance: float = 0.0) -> bool:
        distance = math.hypot(self.center.lon_d - other.center.lon_d, self.center.lat_d - other.center.lat_d)
        return distance <= self.radius_deg + other.radius_deg + max(tolerance, 0.0)


# ---------------------------------------------------------------------------
# Polygons
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GeographicPolygon:
    """Ordered ring of geographic vertices.

    Vertices are expected counter-clockwise; the closing vertex may be
    given or omitted.

    Attributes:
        vertices: Ring vertices in order.
    """

    vertices: tuple[Coordinate, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", tuple(self.vertices))

    @classmethod
    def from_shapely(cls, polygon: Polygon) -> GeographicPolygon:
        """Build from a shapely polygon's exterior ring (``(lon, lat)`` axes)."""
        coords = list(polygon.exterior.coords)
        if len(coords) > 1 and coords[0] == coords[-1]:
            coords = coords[:-1]
        return cls(tuple(Coordinate.from_vec2d(c) for c in coords))

    @property
    def is_degenerate(self) -> bool:
        return len(self.vertices) < MIN_POLYGON_VERTICES

    @property
    def points(self) -> list[Point]:
        """Vertices as planar ``(lon, lat)`` points."""
        return [v.as_vec2d() for v in self.vertices]

    @property
    def bounding_box(self) -> GeographicBoundingBox:
        """Minimum (antimeridian-aware) bounding box of the vertices."""
        return GeographicBoundingBox.from_positions(self.vertices)

    @property
    def bounding_circle(self) -> BoundingCircle:
        """Circle around the planar envelope: box centre, radius to the far corner."""
        points = self.points
        envelope = GeographicBoundingBox.from_degrees(
            min(p[1] for p in points),
            min(p[0] for p in points),
            max(p[1] for p in points),
            max(p[0] for p in points),
        )
        center = envelope.center
        corner = envelope.upper_right
        radius = math.hypot(corner.lon_d - center.lon_d, corner.lat_d - center.lat_d)
        return BoundingCircle(center, radius)

    def edges(self) -> Iterator[tuple[Point, Point]]:
        """Directed edges, including the closing edge from the last vertex to the first."""
        points = self.points
        last = points[-1]
        for cur in points:
            yield last, cur
            last = cur

    def contains(self, position: Coordinate, tolerance: float = 0.0) -> bool:
        """Ray-cast containment; a positive *tolerance* also accepts points within that many degrees of an edge."""
        if self.is_degenerate:
            return False
        x, y = position.as_vec2d()
        if ray_cast_contains(self.points, x, y):
            return True
        if tolerance > 0.0:
            return any(distance_to_segment((x, y), a, b) <= tolerance for a, b in self.edges())
        return False

    def overlaps(self, other: GeographicPolygon, tolerance: float = 0.0) -> bool:
        """Whether the polygons share any area or boundary.

        Disjoint bounding circles reject the pair immediately. Otherwise
        the polygons overlap if either contains a vertex of the other, or
        if any pair of edges intersects.
        """
        if self.is_degenerate or other.is_degenerate:
            return False

        if not self.bounding_circle.overlaps(other.bounding_circle, tolerance):
            logger.debug("Overlap rejected by bounding circles | a=%d | b=%d", len(self.vertices), len(other.vertices))
            return False

        if any(self.contains(v, tolerance) for v in other.vertices):
            return True
        if any(other.contains(v, tolerance) for v in self.vertices):
            return True

        other_edges = list(other.edges())
        return any(segments_intersect(a1, a2, b1, b2) for a1, a2 in self.edges() for b1, b2 in other_edges)

    # -- interop ------------------------------------------------------------

    def to_shapely(self) -> Polygon:
        return to_shapely_polygon(self.vertices)

    def is_valid_geometry(self) -> bool:
        """Shapely validity: simple ring with non-zero area. Logs the reason when invalid."""
        return is_valid_ring(self.vertices, name=type(self).__name__)

    def geodesic_area_m2(self, ellipsoid: str | None = None) -> float:
        """Area on the ellipsoid in square metres (winding-order agnostic)."""
        return geodesic_area_m2(self.vertices, ellipsoid=ellipsoid)


@dataclass(frozen=True, slots=True)
class ConvexPolygon(GeographicPolygon):
    """Convex polygon using the edge-side containment fast path.

    A ring with zero area (all vertices collinear) is accepted but answers
    containment with the general ray cast, which has no interior to find;
    only points within *tolerance* of the segment are contained.

    Raises:
        InvalidGeometryError: If a non-degenerate vertex set is not convex.
    """

    def __post_init__(self) -> None:
        GeographicPolygon.__post_init__(self)
        if not self.is_degenerate and not is_convex_ring(self.points):
            msg = f"Vertex set of {len(self.vertices)} points is not convex"
            raise InvalidGeometryError(msg, operation="convex_polygon")

    @staticmethod
    def is_convex(vertices: Sequence[Coordinate]) -> bool:
        return is_convex_ring([v.as_vec2d() for v in vertices])

    def contains(self, position: Coordinate, tolerance: float = 0.0) -> bool:
        if self.is_degenerate:
            return False
        points = self.points
        area = signed_area(points)
        if area == 0.0:
            # collinear ring: the edge-side test would accept the whole line
            return GeographicPolygon.contains(self, position, tolerance)
        x, y = position.as_vec2d()
        return convex_contains(points, x, y, tolerance, clockwise=area < 0)
