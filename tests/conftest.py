"""Shared pytest fixtures for the geodetic core test suite."""

from __future__ import annotations

import pytest

from geodetic_core.models.altitude import ReferenceLevel
from geodetic_core.models.bounding_box import GeographicBoundingBox
from geodetic_core.models.coordinate import Coordinate
from geodetic_core.models.polygon import ConvexPolygon, GeographicPolygon

# ---------------------------------------------------------------------------
# Coordinate fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def origin() -> Coordinate:
    """Zero-altitude terrain coordinate at (0, 0)."""
    return Coordinate.from_degrees(0.0, 0.0)


@pytest.fixture()
def ellipsoid_point() -> Coordinate:
    """Coordinate 1 km above the ellipsoid."""
    return Coordinate.from_degrees_meters(10.0, 20.0, 1000.0, ReferenceLevel.ELLIPSOID)


# ---------------------------------------------------------------------------
# Bounding box fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def unit_box() -> GeographicBoundingBox:
    """Box from (0, 0) to (10, 10) degrees."""
    return GeographicBoundingBox.from_degrees(0.0, 0.0, 10.0, 10.0)


@pytest.fixture()
def crossing_box() -> GeographicBoundingBox:
    """Box from 170E to 170W that crosses the antimeridian."""
    return GeographicBoundingBox.from_degrees(-10.0, 170.0, 10.0, -170.0)


# ---------------------------------------------------------------------------
# Polygon fixtures
# ---------------------------------------------------------------------------


def _ring(*lat_lons: tuple[float, float]) -> tuple[Coordinate, ...]:
    return tuple(Coordinate.from_degrees(lat, lon) for lat, lon in lat_lons)


@pytest.fixture()
def square() -> GeographicPolygon:
    """Square (0,0)-(0,10)-(10,10)-(10,0) given as (lat, lon)."""
    return GeographicPolygon(_ring((0, 0), (0, 10), (10, 10), (10, 0)))


@pytest.fixture()
def convex_square() -> ConvexPolygon:
    """Convex version of the ``square`` fixture."""
    return ConvexPolygon(_ring((0, 0), (0, 10), (10, 10), (10, 0)))


@pytest.fixture()
def concave_polygon() -> GeographicPolygon:
    """U shape open to the north, with a notch over lon 4-6 above lat 2."""
    return GeographicPolygon(
        _ring(
            (0, 0),
            (0, 10),
            (10, 10),
            (10, 6),
            (2, 6),
            (2, 4),
            (10, 4),
            (10, 0),
        )
    )
