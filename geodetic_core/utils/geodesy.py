"""Ellipsoidal measurement and shapely interop helpers.

Distances and areas are computed with ``pyproj.Geod`` on the configured
ellipsoid, never by scaling degrees. Shapely is used for polygon validity
checks and for handing geometry to code that speaks shapely.

All coordinate sequences here are ``(lon, lat)`` ordered, matching
``Coordinate.as_vec2d()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from geodetic_core.core.config import GeometryConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pyproj import Geod
    from shapely.geometry import Polygon

    from geodetic_core.models.coordinate import Coordinate

logger = logging.getLogger("geodetic_core.utils.geodesy")

# Minimum distinct vertices for a polygon with area
MIN_POLYGON_VERTICES = 3


def _geod(ellipsoid: str | None) -> Geod:
    """Build a ``pyproj.Geod``, falling back to the configured ellipsoid."""
    from pyproj import Geod

    return Geod(ellps=ellipsoid or GeometryConfig.from_env().ellipsoid)


# ---------------------------------------------------------------------------
# Geodesic measurement (pyproj)
# ---------------------------------------------------------------------------


def geodesic_distance_m(
    start: Coordinate,
    end: Coordinate,
    *,
    ellipsoid: str | None = None,
) -> float:
    """Compute the geodesic distance between two positions in metres.

    Args:
        start: First position.
        end: Second position.
        ellipsoid: ``pyproj`` ellipsoid name (default from
            ``GEODETIC_ELLIPSOID``, WGS 84 when unset).

    Returns:
        Distance along the ellipsoid surface in metres (altitude ignored).
    """
    geod = _geod(ellipsoid)
    _fwd_az, _back_az, distance = geod.inv(
        start.normalized_lon_d,
        start.normalized_lat_d,
        end.normalized_lon_d,
        end.normalized_lat_d,
    )
    return float(distance)


def geodesic_area_m2(
    positions: Sequence[Coordinate],
    *,
    ellipsoid: str | None = None,
) -> float:
    """Compute the geodesic area enclosed by a ring of positions.

    Winding-order agnostic: the absolute area is returned.

    Args:
        positions: Ring vertices; closure is optional.
        ellipsoid: ``pyproj`` ellipsoid name (default from
            ``GEODETIC_ELLIPSOID``, WGS 84 when unset).

    Returns:
        Area in square metres, ``0.0`` for fewer than three positions.
    """
    if len(positions) < MIN_POLYGON_VERTICES:
        return 0.0

    geod = _geod(ellipsoid)
    lons = [p.lon_d for p in positions]
    lats = [p.lat_d for p in positions]

    # Geod.polygon_area_perimeter returns (area_m2, perimeter_m)
    area_m2, _perimeter = geod.polygon_area_perimeter(lons, lats)
    return abs(float(area_m2))


# ---------------------------------------------------------------------------
# Shapely interop
# ---------------------------------------------------------------------------


def to_shapely_polygon(positions: Sequence[Coordinate]) -> Polygon:
    """Build a shapely polygon from positions in ``(lon, lat)`` order."""
    from shapely.geometry import Polygon

    return Polygon([p.as_vec2d() for p in positions])


def is_valid_ring(positions: Sequence[Coordinate], name: str = "polygon") -> bool:
    """Check that a ring describes a valid, non-empty shapely polygon.

    Invalid rings are logged with the reason shapely reports.

    Args:
        positions: Ring vertices.
        name: Label used in log messages.

    Returns:
        ``True`` if the ring is simple, closed-able and has non-zero area.
    """
    if len(positions) < MIN_POLYGON_VERTICES:
        logger.warning("Ring too short | name=%s | vertices=%d", name, len(positions))
        return False

    from shapely.validation import explain_validity

    poly = to_shapely_polygon(positions)
    if not poly.is_valid:
        logger.warning("Invalid ring | name=%s | reason=%s", name, explain_validity(poly))
        return False
    if poly.area == 0:
        logger.warning("Zero-area ring | name=%s", name)
        return False
    return True
