"""Antimeridian-aware geographic bounding box.

A box is two corner coordinates. The lower-left corner always has the
smaller latitude (the constructor swaps corners to guarantee it), while
longitude order is kept exactly as given: ``lower_left.lon_d >
upper_right.lon_d`` means the box crosses the antimeridian. Width, centre
and merge computations all branch on that signal.

Known limitations (kept on purpose, pinned by tests):
- ``intersection``, ``union``, ``intersects`` and ``contains_box`` operate
  on the plain ``[min_lon, max_lon]`` envelope of each box, so a box that
  crosses the antimeridian is treated as spanning the long way round.
- ``merge`` picks between the direct and wrap-around hypotheses by
  longitude delta; boxes that both span more than half the globe can
  merge to the wrong arc.
"""

from __future__ import annotations

import functools
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geodetic_core.core.constants import (
    EPSILON,
    FULL_CIRCLE_DEG,
    HALF_CIRCLE_DEG,
    MAX_BOX_FLATTENING,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from geodetic_core.core.exceptions import IncompatibleReferenceLevelError, InvalidGeometryError
from geodetic_core.models.altitude import Altitude, ReferenceLevel
from geodetic_core.models.coordinate import Coordinate, normalize_longitude
from geodetic_core.utils.geodesy import geodesic_area_m2

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shapely.geometry import Polygon

    from geodetic_core.core.config import GeometryConfig
    from geodetic_core.models.polygon import ConvexPolygon

logger = logging.getLogger("geodetic_core.models.bounding_box")

# Normalized longitudes beyond this are "near" the antimeridian for merging
_NEAR_ANTIMERIDIAN_DEG = 90.0


def _compare(a: float, b: float) -> int:
    if abs(a - b) < EPSILON:
        return 0
    return -1 if a < b else 1


@functools.total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class GeographicBoundingBox:
    """Axis-aligned geographic extent.

    Hashing follows ``Coordinate``: boxes on the same reference level share
    a hash, so sets of boxes do linear equality scans.

    Attributes:
        lower_left: Corner with the smaller latitude.
        upper_right: Corner with the larger latitude.

    Raises:
        IncompatibleReferenceLevelError: If the corners use different
            altitude reference levels.
    """

    lower_left: Coordinate
    upper_right: Coordinate

    def __post_init__(self) -> None:
        if not self.lower_left.altitude.same_reference(self.upper_right.altitude):
            raise IncompatibleReferenceLevelError(
                self.lower_left.altitude.describe_reference(),
                self.upper_right.altitude.describe_reference(),
                operation="bounding_box",
            )
        if self.upper_right.lat_d < self.lower_left.lat_d:
            lower_left = self.upper_right
            object.__setattr__(self, "upper_right", self.lower_left)
            object.__setattr__(self, "lower_left", lower_left)

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------

    @classmethod
    def from_degrees(
        cls,
        min_lat: float,
        min_lon: float,
        max_lat: float,
        max_lon: float,
        reference: ReferenceLevel = ReferenceLevel.TERRAIN,
    ) -> GeographicBoundingBox:
        """Create a zero-altitude box from its edge values."""
        return cls(
            Coordinate.from_degrees(min_lat, min_lon, reference),
            Coordinate.from_degrees(max_lat, max_lon, reference),
        )

    @classmethod
    def from_positions(
        cls,
        positions: Iterable[Coordinate],
        *,
        config: GeometryConfig | None = None,
    ) -> GeographicBoundingBox:
        """Compute the minimum bounding box of a set of positions.

        Both the plain longitude extent and the extent with positive
        longitudes shifted by -360 are measured; the narrower one wins, so
        a point cloud straddling the antimeridian gets a crossing box. A
        side thinner than ``max_box_flattening`` times the other side is
        padded symmetrically.

        Raises:
            ValueError: If *positions* is empty.
        """
        min_lat = min_lon = min_lon_shifted = math.inf
        max_lat = max_lon = max_lon_shifted = -math.inf
        count = 0
        for pos in positions:
            count += 1
            min_lat = min(min_lat, pos.lat_d)
            max_lat = max(max_lat, pos.lat_d)
            min_lon = min(min_lon, pos.lon_d)
            max_lon = max(max_lon, pos.lon_d)

            shifted = pos.lon_d - FULL_CIRCLE_DEG if pos.lon_d > 0 else pos.lon_d
            min_lon_shifted = min(min_lon_shifted, shifted)
            max_lon_shifted = max(max_lon_shifted, shifted)

        if count == 0:
            msg = "Cannot compute a bounding box of zero positions"
            raise ValueError(msg)

        epsilon = config.epsilon if config else EPSILON
        flattening = config.max_box_flattening if config else None

        if (max_lon - min_lon) - (max_lon_shifted - min_lon_shifted) < epsilon:
            return _box_from_edges(min_lat, max_lat, min_lon, max_lon, lon_shifted=False, flattening=flattening)
        return _box_from_edges(
            min_lat, max_lat, min_lon_shifted, max_lon_shifted, lon_shifted=True, flattening=flattening
        )

    @classmethod
    def from_positions_with_altitude(
        cls,
        positions: Iterable[Coordinate],
        *,
        config: GeometryConfig | None = None,
    ) -> GeographicBoundingBox:
        """Minimum bounding box whose corners sit at the highest altitude, ellipsoid reference."""
        positions = list(positions)
        max_alt_m = max([0.0, *(p.alt_m for p in positions)])
        bbox = cls.from_positions(positions, config=config)
        altitude = Altitude(max_alt_m, ReferenceLevel.ELLIPSOID)
        return cls(
            Coordinate(bbox.lower_left.lat_d, bbox.lower_left.lon_d, altitude),
            Coordinate(bbox.upper_right.lat_d, bbox.upper_right.lon_d, altitude),
        )

    @staticmethod
    def merge(
        box1: GeographicBoundingBox | None,
        box2: GeographicBoundingBox | None,
        reference: ReferenceLevel | None = None,
    ) -> GeographicBoundingBox | None:
        """Smallest box covering both inputs, honouring the antimeridian.

        Two hypotheses are measured: the box running from the smaller to the
        larger longitude, and the box running the other way round the globe
        from ``max(min lons)`` to ``min(max lons)``. The one with the smaller
        longitude span wins, unless either input already crosses the
        antimeridian, which forces the first.

        Args:
            box1: First box, or ``None``.
            box2: Second box, or ``None``.
            reference: Reference level for the merged corners. When omitted
                the inputs must share a reference level, which is reused.

        Returns:
            The merged box (altitude zero), the non-``None`` input, or
            ``None`` when both are ``None``.

        Raises:
            IncompatibleReferenceLevelError: If *reference* is omitted and
                the boxes use different reference levels.
        """
        if box1 is None:
            return box2
        if box2 is None:
            return box1

        if reference is None:
            box1._check_reference(box2, "merge")
            zero = Altitude(0.0, box1.reference, box1.upper_right.altitude.custom_id)
        else:
            if box1.reference is not reference or box2.reference is not reference:
                logger.warning(
                    "Merged box reference overridden | first=%s | second=%s | reference=%s",
                    box1.reference.value,
                    box2.reference.value,
                    reference.value,
                )
            zero = Altitude(0.0, reference)

        ll1 = box1.lower_left.normalized()
        ur1 = box1.upper_right.normalized()
        ll2 = box2.lower_left.normalized()
        ur2 = box2.upper_right.normalized()

        min_lat = min(box1.lower_left.lat_d, box2.lower_left.lat_d)
        max_lat = max(box1.upper_right.lat_d, box2.upper_right.lat_d)

        box1_min_lon = box1.lower_left.lon_d
        box1_max_lon = box1.upper_right.lon_d
        box2_min_lon = box2.lower_left.lon_d
        box2_max_lon = box2.upper_right.lon_d

        min_crosses = ll1.positions_cross_longitude_boundary(ll2)
        max_crosses = ur1.positions_cross_longitude_boundary(ur2)

        if min_crosses and abs(ll1.lon_d) > _NEAR_ANTIMERIDIAN_DEG and abs(ll2.lon_d) > _NEAR_ANTIMERIDIAN_DEG:
            min_lon = max(box1_min_lon, box2_min_lon)
        else:
            min_lon = min(box1_min_lon, box2_min_lon)
        if max_crosses and abs(ur1.lon_d) > _NEAR_ANTIMERIDIAN_DEG and abs(ur2.lon_d) > _NEAR_ANTIMERIDIAN_DEG:
            max_lon = min(box1_max_lon, box2_max_lon)
        else:
            max_lon = max(box1_max_lon, box2_max_lon)

        min_max_lon = min(box1_max_lon, box2_max_lon)
        max_min_lon = max(box1_min_lon, box2_min_lon)

        delta_direct = max_lon - min_lon
        if delta_direct < 0.0:
            delta_direct += FULL_CIRCLE_DEG

        # Above 360 the longitude ranges overlap
        delta_wrapped = min_max_lon - max_min_lon + FULL_CIRCLE_DEG

        input_crosses = ll1.positions_cross_longitude_boundary(ur1) or ll2.positions_cross_longitude_boundary(ur2)

        if delta_direct < delta_wrapped or input_crosses:
            west, east = min_lon, max_lon
        else:
            west, east = max_min_lon, min_max_lon

        logger.debug(
            "Boxes merged | direct=%.6f | wrapped=%.6f | input_crosses=%s | lon=[%.6f, %.6f]",
            delta_direct,
            delta_wrapped,
            input_crosses,
            west,
            east,
        )
        return GeographicBoundingBox(Coordinate(min_lat, west, zero), Coordinate(max_lat, east, zero))

    # -----------------------------------------------------------------------
    # Dimensions
    # -----------------------------------------------------------------------

    @property
    def reference(self) -> ReferenceLevel:
        return self.upper_right.reference

    @property
    def delta_lat_d(self) -> float:
        return self.upper_right.lat_d - self.lower_left.lat_d

    @property
    def delta_lon_d(self) -> float:
        """Longitude span, with 360 added when the box crosses the antimeridian."""
        width = self.upper_right.lon_d - self.lower_left.lon_d
        if width < 0.0:
            width += FULL_CIRCLE_DEG
        return width

    @property
    def delta_alt_m(self) -> float:
        return abs(self.upper_right.alt_m - self.lower_left.alt_m)

    @property
    def width(self) -> float:
        return self.delta_lon_d

    @property
    def height(self) -> float:
        return self.delta_lat_d

    @property
    def dimensions(self) -> tuple[float, float, float]:
        """``(delta_lat, delta_lon, delta_alt_m)``."""
        return (self.delta_lat_d, self.delta_lon_d, self.delta_alt_m)

    @property
    def crosses_antimeridian(self) -> bool:
        return self.lower_left.lon_d > self.upper_right.lon_d

    @property
    def min_lat_d(self) -> float:
        return min(self.lower_left.lat_d, self.upper_right.lat_d)

    @property
    def max_lat_d(self) -> float:
        return max(self.lower_left.lat_d, self.upper_right.lat_d)

    @property
    def min_lon_d(self) -> float:
        return min(self.lower_left.lon_d, self.upper_right.lon_d)

    @property
    def max_lon_d(self) -> float:
        return max(self.lower_left.lon_d, self.upper_right.lon_d)

    # -----------------------------------------------------------------------
    # Derived positions
    # -----------------------------------------------------------------------

    @property
    def center_lat_d(self) -> float:
        return (self.lower_left.lat_d + self.upper_right.lat_d) / 2.0

    @property
    def center_lon_d(self) -> float:
        """Average longitude, moved half a turn when the box crosses the antimeridian."""
        average = (self.lower_left.lon_d + self.upper_right.lon_d) / 2.0
        if self.lower_left.lon_d <= self.upper_right.lon_d:
            return average
        return average - HALF_CIRCLE_DEG

    @property
    def center_alt_m(self) -> float:
        return (self.lower_left.alt_m + self.upper_right.alt_m) / 2.0

    def _at(self, lat_d: float, lon_d: float) -> Coordinate:
        altitude = self.upper_right.altitude
        return Coordinate(lat_d, lon_d, Altitude(self.center_alt_m, altitude.reference, altitude.custom_id))

    @property
    def center(self) -> Coordinate:
        return self._at(self.center_lat_d, self.center_lon_d)

    @property
    def lower_right(self) -> Coordinate:
        return self._at(self.lower_left.lat_d, self.upper_right.lon_d)

    @property
    def upper_left(self) -> Coordinate:
        return self._at(self.upper_right.lat_d, self.lower_left.lon_d)

    @property
    def left_center(self) -> Coordinate:
        return self._at(self.center_lat_d, self.lower_left.lon_d)

    @property
    def right_center(self) -> Coordinate:
        return self._at(self.center_lat_d, self.upper_right.lon_d)

    @property
    def upper_center(self) -> Coordinate:
        return self._at(self.upper_right.lat_d, self.center_lon_d)

    @property
    def lower_center(self) -> Coordinate:
        return self._at(self.lower_left.lat_d, self.center_lon_d)

    @property
    def vertices(self) -> list[Coordinate]:
        """Corners counter-clockwise from the lower left: ``[LL, LR, UR, UL]``."""
        return [self.lower_left, self.lower_right, self.upper_right, self.upper_left]

    def offset(self, outer: GeographicBoundingBox) -> tuple[float, float, float]:
        """Position of this box's lower-left corner as a fraction of *outer*'s extent.

        Raises:
            InvalidGeometryError: If *outer* has zero width or height.
        """
        outer._require_extent("offset")
        x = (self.lower_left.lon_d - outer.lower_left.lon_d) / outer.delta_lon_d
        y = (self.lower_left.lat_d - outer.lower_left.lat_d) / outer.delta_lat_d
        return (x, y, 0.0)

    def offset_percent(self, position: Coordinate) -> tuple[float, float, float]:
        """Position of *position* as a fraction of this box's width and height.

        Raises:
            InvalidGeometryError: If the box has zero width or height.
        """
        self._require_extent("offset_percent")
        width_pct = (position.lon_d - self.lower_left.lon_d) / self.width
        height_pct = (position.lat_d - self.lower_left.lat_d) / self.height
        return (width_pct, height_pct, 0.0)

    # -----------------------------------------------------------------------
    # Predicates
    # -----------------------------------------------------------------------

    def contains(self, position: Coordinate, radius: float = 0.0) -> bool:
        """Whether *position* lies inside the box grown by *radius* degrees.

        A negative radius shrinks the box; if the box is not at least
        ``2 * |radius|`` wide and high the answer is ``False``. A positive
        radius grows the latitude range up to the poles and, once the grown
        width reaches 360 degrees, covers every longitude.
        """
        if radius < 0:
            span = 2 * abs(radius)
            if self.width < span or self.height < span:
                return False

        point = position.normalized()
        min_lat = max(self.lower_left.lat_d - radius, MIN_LATITUDE)
        max_lat = min(self.upper_right.lat_d + radius, MAX_LATITUDE)
        if min_lat > point.lat_d or max_lat < point.lat_d:
            return False

        if self.width + 2 * radius >= FULL_CIRCLE_DEG:
            return True
        min_lon = normalize_longitude(self.lower_left.lon_d - radius)
        max_lon = normalize_longitude(self.upper_right.lon_d + radius)
        if min_lon <= max_lon:
            return min_lon <= point.lon_d <= max_lon
        return point.lon_d >= min_lon or point.lon_d <= max_lon

    def contains_box(self, other: GeographicBoundingBox) -> bool:
        """Whether *other*'s envelope lies within this box's envelope."""
        return (
            self.min_lon_d <= other.min_lon_d
            and other.max_lon_d <= self.max_lon_d
            and self.min_lat_d <= other.min_lat_d
            and other.max_lat_d <= self.max_lat_d
        )

    def intersects(self, other: GeographicBoundingBox) -> bool:
        return self.intersection(other) is not None

    def overlaps(self, other: GeographicBoundingBox, tolerance: float = 0.0) -> bool:
        """Whether either box contains a corner or the centre of the other."""
        for box, inner in ((self, other), (other, self)):
            for position in (inner.lower_left, inner.upper_right, inner.lower_right, inner.upper_left, inner.center):
                if box.contains(position, tolerance):
                    return True
        return False

    # -----------------------------------------------------------------------
    # Set operations
    # -----------------------------------------------------------------------

    def intersection(self, other: GeographicBoundingBox) -> GeographicBoundingBox | None:
        """Envelope intersection.

        Returns ``None`` when the envelopes are disjoint. Touching boxes give
        a degenerate box (a shared edge or a single shared point).

        Raises:
            IncompatibleReferenceLevelError: If the boxes use different references.
        """
        self._check_reference(other, "intersection")
        min_lon = max(self.min_lon_d, other.min_lon_d)
        max_lon = min(self.max_lon_d, other.max_lon_d)
        min_lat = max(self.min_lat_d, other.min_lat_d)
        max_lat = min(self.max_lat_d, other.max_lat_d)
        if min_lon > max_lon or min_lat > max_lat:
            return None
        return self._envelope(min_lat, min_lon, max_lat, max_lon)

    def union(self, other: GeographicBoundingBox) -> GeographicBoundingBox:
        """Envelope covering both boxes.

        Raises:
            IncompatibleReferenceLevelError: If the boxes use different references.
        """
        self._check_reference(other, "union")
        return self._envelope(
            min(self.min_lat_d, other.min_lat_d),
            min(self.min_lon_d, other.min_lon_d),
            max(self.max_lat_d, other.max_lat_d),
            max(self.max_lon_d, other.max_lon_d),
        )

    def quad_split(self) -> list[GeographicBoundingBox]:
        """Split into quadrants ordered ``[lower-left, lower-right, upper-left, upper-right]``."""
        center = self.center
        return [
            GeographicBoundingBox(self.lower_left, center),
            GeographicBoundingBox(self.lower_center, self.right_center),
            GeographicBoundingBox(self.left_center, self.upper_center),
            GeographicBoundingBox(center, self.upper_right),
        ]

    # -----------------------------------------------------------------------
    # Keys and conversions
    # -----------------------------------------------------------------------

    def to_grid_string(self, grid_size: int) -> str:
        """Encode the box position as a recursive quadrant key.

        Level 0 cells are *grid_size* degrees; each further level halves the
        cell until the cell width reaches the box width. The key is the
        sequence of column indices, ``/``, then the row indices, with a ``.``
        after the level-0 index of each.

        Raises:
            InvalidGeometryError: If the box has zero width, or *grid_size*
                is not positive.
        """
        if self.width <= 0.0 or grid_size <= 0:
            msg = f"Grid key needs a positive width and grid size: width={self.width}, grid_size={grid_size}"
            raise InvalidGeometryError(msg, operation="to_grid_string")
        level = -math.log2(self.width / grid_size)
        lon_d = self.lower_left.lon_d + HALF_CIRCLE_DEG
        lat_d = self.lower_left.lat_d + MAX_LATITUDE
        xs: list[str] = []
        ys: list[str] = []
        i = 0
        while i <= level:
            div = grid_size * 2.0**-i
            x = int(lon_d / div)
            y = int(lat_d / div)
            xs.append(f"{x}." if i == 0 else str(x))
            ys.append(f"{y}." if i == 0 else str(y))
            lon_d -= x * div
            lat_d -= y * div
            i += 1
        return "".join(xs) + "/" + "".join(ys)

    def as_polygon(self) -> ConvexPolygon:
        """The box as a convex polygon, vertices ``[LL, LR, UR, UL]``."""
        from geodetic_core.models.polygon import ConvexPolygon

        return ConvexPolygon(self.vertices)

    def to_shapely(self) -> Polygon:
        """Shapely ``box`` over the longitude envelope (``(lon, lat)`` axes)."""
        from shapely.geometry import box

        return box(self.min_lon_d, self.min_lat_d, self.max_lon_d, self.max_lat_d)

    def geodesic_area_m2(self, ellipsoid: str | None = None) -> float:
        """Area of the box on the ellipsoid in square metres."""
        return geodesic_area_m2(self.vertices, ellipsoid=ellipsoid)

    def to_simple_string(self) -> str:
        return f"{self.lower_left.to_simple_string()} | {self.upper_right.to_simple_string()}"

    # -----------------------------------------------------------------------
    # Comparison
    # -----------------------------------------------------------------------

    def compare_to(self, other: GeographicBoundingBox) -> int:
        """Order by lower-left longitude, lower-left latitude, then the upper-right corner."""
        for a, b in (
            (self.lower_left.lon_d, other.lower_left.lon_d),
            (self.lower_left.lat_d, other.lower_left.lat_d),
            (self.upper_right.lon_d, other.upper_right.lon_d),
            (self.upper_right.lat_d, other.upper_right.lat_d),
        ):
            result = _compare(a, b)
            if result:
                return result
        return 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, GeographicBoundingBox):
            return NotImplemented
        return self.compare_to(other) < 0

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, GeographicBoundingBox):
            return NotImplemented
        return self.lower_left == other.lower_left and self.upper_right == other.upper_right

    def __hash__(self) -> int:
        return hash((self.lower_left, self.upper_right))

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _check_reference(self, other: GeographicBoundingBox, operation: str) -> None:
        if not self.upper_right.altitude.same_reference(other.upper_right.altitude):
            raise IncompatibleReferenceLevelError(
                self.upper_right.altitude.describe_reference(),
                other.upper_right.altitude.describe_reference(),
                operation=operation,
            )

    def _require_extent(self, operation: str) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            msg = f"Box has no area: {self.to_simple_string()}"
            raise InvalidGeometryError(msg, operation=operation)

    def _envelope(self, min_lat: float, min_lon: float, max_lat: float, max_lon: float) -> GeographicBoundingBox:
        altitude = self.upper_right.altitude
        zero = Altitude(0.0, altitude.reference, altitude.custom_id)
        return GeographicBoundingBox(Coordinate(min_lat, min_lon, zero), Coordinate(max_lat, max_lon, zero))


def _box_from_edges(
    min_lat: float,
    max_lat: float,
    min_lon: float,
    max_lon: float,
    *,
    lon_shifted: bool,
    flattening: float | None,
) -> GeographicBoundingBox:
    """Build a box, padding a side that is too thin relative to the other."""
    ratio = MAX_BOX_FLATTENING if flattening is None else flattening
    delta_lat = max_lat - min_lat
    delta_lon = max_lon - min_lon
    min_delta_lon = delta_lat * ratio
    min_delta_lat = delta_lon * ratio

    if delta_lat < min_delta_lat:
        shift = (min_delta_lat - delta_lat) * 0.5
        min_lat -= shift
        max_lat += shift
    elif delta_lon < min_delta_lon:
        shift = (min_delta_lon - delta_lon) * 0.5
        min_lon -= shift
        max_lon += shift

    if lon_shifted:
        min_lon += FULL_CIRCLE_DEG

    return GeographicBoundingBox(Coordinate.from_degrees(min_lat, min_lon), Coordinate.from_degrees(max_lat, max_lon))


WHOLE_GLOBE = GeographicBoundingBox(
    Coordinate.from_degrees(MIN_LATITUDE, MIN_LONGITUDE),
    Coordinate.from_degrees(MAX_LATITUDE, MAX_LONGITUDE),
)
