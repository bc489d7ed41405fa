"""Tests for polygon containment and overlap.

Covers:
- Planar primitives (orientation, signed area, segment intersection)
- Ray-cast containment on convex and concave rings
- Convex fast path in either winding, with tolerance
- Bounding-circle rejection and edge-crossing overlap
- Degenerate polygons answer False without raising
- Shapely validity checks and geodesic area
"""

from __future__ import annotations

import logging

import pytest
from shapely.geometry import Polygon

from geodetic_core.core.exceptions import InvalidGeometryError, ValidationError
from geodetic_core.models.coordinate import Coordinate
from geodetic_core.models.polygon import (
    ConvexPolygon,
    GeographicPolygon,
    distance_to_segment,
    is_convex_ring,
    orientation,
    segments_intersect,
    signed_area,
)


def _polygon(*lat_lons: tuple[float, float]) -> GeographicPolygon:
    return GeographicPolygon(tuple(Coordinate.from_degrees(lat, lon) for lat, lon in lat_lons))


def _at(lat: float, lon: float) -> Coordinate:
    return Coordinate.from_degrees(lat, lon)


# ===========================================================================
# Planar primitives
# ===========================================================================


class TestPrimitives:
    """Planar helpers in (x=lon, y=lat) space."""

    def test_orientation_sign(self) -> None:
        assert orientation((0.0, 0.0), (1.0, 0.0), (0.0, 1.0)) > 0
        assert orientation((0.0, 0.0), (1.0, 0.0), (0.0, -1.0)) < 0
        assert orientation((0.0, 0.0), (1.0, 0.0), (2.0, 0.0)) == 0

    def test_signed_area_winding(self) -> None:
        ccw = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
        assert signed_area(ccw) == pytest.approx(100.0)
        assert signed_area(list(reversed(ccw))) == pytest.approx(-100.0)

    def test_segments_cross(self) -> None:
        assert segments_intersect((0.0, 0.0), (10.0, 10.0), (0.0, 10.0), (10.0, 0.0))

    def test_segments_touch_at_endpoint(self) -> None:
        assert segments_intersect((0.0, 0.0), (5.0, 5.0), (5.0, 5.0), (10.0, 0.0))

    def test_segments_collinear_overlap(self) -> None:
        assert segments_intersect((0.0, 0.0), (5.0, 0.0), (3.0, 0.0), (8.0, 0.0))

    def test_segments_disjoint(self) -> None:
        assert not segments_intersect((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0))
        assert not segments_intersect((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0))

    def test_distance_to_segment(self) -> None:
        assert distance_to_segment((5.0, 3.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(3.0)
        assert distance_to_segment((13.0, 4.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(5.0)
        assert distance_to_segment((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == pytest.approx(5.0)

    def test_is_convex_ring(self) -> None:
        assert is_convex_ring([(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)])
        assert not is_convex_ring([(0.0, 0.0), (10.0, 0.0), (5.0, 2.0), (10.0, 10.0), (0.0, 10.0)])
        assert not is_convex_ring([(0.0, 0.0), (1.0, 1.0)])


# ===========================================================================
# Ray-cast containment
# ===========================================================================


class TestRayCastContains:
    """General polygon containment."""

    def test_inside_square(self, square: GeographicPolygon) -> None:
        assert square.contains(_at(5.0, 5.0))

    def test_outside_square(self, square: GeographicPolygon) -> None:
        assert not square.contains(_at(15.0, 5.0))
        assert not square.contains(_at(5.0, -1.0))

    def test_winding_does_not_matter(self) -> None:
        clockwise = _polygon((0, 0), (10, 0), (10, 10), (0, 10))
        assert clockwise.contains(_at(5.0, 5.0))

    def test_concave_notch_is_outside(self, concave_polygon: GeographicPolygon) -> None:
        assert not concave_polygon.contains(_at(5.0, 5.0))

    def test_concave_arms_are_inside(self, concave_polygon: GeographicPolygon) -> None:
        assert concave_polygon.contains(_at(5.0, 2.0))
        assert concave_polygon.contains(_at(5.0, 8.0))
        assert concave_polygon.contains(_at(1.0, 5.0))

    def test_tolerance_accepts_near_edge(self, square: GeographicPolygon) -> None:
        near = _at(5.0, 10.5)
        assert not square.contains(near)
        assert square.contains(near, tolerance=1.0)
        assert not square.contains(near, tolerance=0.25)


class TestConvexContains:
    """Edge-side fast path."""

    def test_inside(self, convex_square: ConvexPolygon) -> None:
        assert convex_square.contains(_at(5.0, 5.0))

    def test_outside(self, convex_square: ConvexPolygon) -> None:
        assert not convex_square.contains(_at(5.0, 15.0))

    def test_clockwise_ring(self) -> None:
        clockwise = ConvexPolygon(tuple(_at(lat, lon) for lat, lon in ((0, 0), (10, 0), (10, 10), (0, 10))))
        assert clockwise.contains(_at(5.0, 5.0))
        assert not clockwise.contains(_at(5.0, 15.0))

    def test_tolerance(self, convex_square: ConvexPolygon) -> None:
        near = _at(5.0, 10.5)
        assert not convex_square.contains(near)
        assert convex_square.contains(near, tolerance=1.0)
        assert not convex_square.contains(near, tolerance=0.25)

    def test_agrees_with_ray_cast(self, square: GeographicPolygon, convex_square: ConvexPolygon) -> None:
        samples = [_at(lat, lon) for lat in (-1.0, 0.5, 5.0, 9.5, 11.0) for lon in (-1.0, 0.5, 5.0, 9.5, 11.0)]
        assert [square.contains(p) for p in samples] == [convex_square.contains(p) for p in samples]

    def test_non_convex_raises(self) -> None:
        with pytest.raises(InvalidGeometryError, match="not convex") as exc_info:
            ConvexPolygon(tuple(_at(lat, lon) for lat, lon in ((0, 0), (0, 10), (2, 5), (10, 10), (10, 0))))
        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.operation == "convex_polygon"

    def test_is_convex(self, square: GeographicPolygon, concave_polygon: GeographicPolygon) -> None:
        assert ConvexPolygon.is_convex(square.vertices)
        assert not ConvexPolygon.is_convex(concave_polygon.vertices)


class TestDegenerate:
    """Fewer than three vertices never raises."""

    def test_contains_false(self) -> None:
        line = _polygon((0, 0), (10, 10))
        assert line.is_degenerate
        assert not line.contains(_at(0.0, 0.0))

    def test_convex_degenerate_allowed(self) -> None:
        line = ConvexPolygon((_at(0.0, 0.0), _at(1.0, 1.0)))
        assert not line.contains(_at(0.5, 0.5))

    def test_collinear_convex_ring_has_no_interior(self) -> None:
        flat = ConvexPolygon((_at(0.0, 0.0), _at(0.0, 5.0), _at(0.0, 10.0)))
        assert signed_area(flat.points) == 0.0
        assert not flat.contains(_at(0.0, 50.0))
        assert not flat.contains(_at(0.0, -20.0))
        assert not flat.contains(_at(0.0, 5.0))

    def test_collinear_convex_ring_honours_tolerance(self) -> None:
        flat = ConvexPolygon((_at(0.0, 0.0), _at(0.0, 5.0), _at(0.0, 10.0)))
        assert flat.contains(_at(0.3, 5.0), tolerance=0.5)
        assert not flat.contains(_at(0.0, 50.0), tolerance=0.5)

    def test_collinear_convex_ring_does_not_overlap_distant_polygon(self) -> None:
        flat = ConvexPolygon((_at(0.0, 0.0), _at(0.0, 5.0), _at(0.0, 10.0)))
        beyond = _polygon((-1, 40), (-1, 60), (1, 60), (1, 40))
        assert not flat.overlaps(beyond)
        assert not beyond.overlaps(flat)

    def test_overlaps_false(self, square: GeographicPolygon) -> None:
        line = _polygon((5, 5), (6, 6))
        assert not square.overlaps(line)
        assert not line.overlaps(square)


# ===========================================================================
# Overlap
# ===========================================================================


class TestOverlaps:
    """Polygon overlap with bounding-circle pre-check."""

    def test_bounding_circle(self, square: GeographicPolygon) -> None:
        circle = square.bounding_circle
        assert circle.center == _at(5.0, 5.0)
        assert circle.radius_deg == pytest.approx(50.0**0.5)

    def test_shared_vertex_area(self, square: GeographicPolygon) -> None:
        other = _polygon((5, 5), (5, 15), (15, 15), (15, 5))
        assert square.overlaps(other)
        assert other.overlaps(square)

    def test_far_apart(self, square: GeographicPolygon) -> None:
        other = _polygon((20, 20), (20, 30), (30, 30), (30, 20))
        assert not square.bounding_circle.overlaps(other.bounding_circle)
        assert not square.overlaps(other)

    def test_crossing_edges_without_contained_vertices(self, square: GeographicPolygon) -> None:
        bar = _polygon((4, -5), (4, 15), (6, 15), (6, -5))
        assert square.overlaps(bar)

    def test_touching_edge(self, square: GeographicPolygon) -> None:
        neighbour = _polygon((0, 10), (0, 20), (10, 20), (10, 10))
        assert square.overlaps(neighbour)

    def test_gap_closed_by_tolerance(self, square: GeographicPolygon) -> None:
        neighbour = _polygon((0, 10.5), (0, 20.5), (10, 20.5), (10, 10.5))
        assert not square.overlaps(neighbour)
        assert square.overlaps(neighbour, tolerance=1.0)

    def test_concave_and_convex(self, concave_polygon: GeographicPolygon) -> None:
        in_notch = _polygon((4.5, 4.5), (4.5, 5.5), (5.5, 5.5), (5.5, 4.5))
        assert not concave_polygon.overlaps(in_notch)


def _convex(*lat_lons: tuple[float, float]) -> ConvexPolygon:
    return ConvexPolygon(tuple(_at(lat, lon) for lat, lon in lat_lons))


_SYMMETRY_SHAPES: list[GeographicPolygon] = [
    _polygon((0, 0), (0, 10), (10, 10), (10, 0)),
    _convex((0, 0), (0, 10), (10, 10), (10, 0)),
    _polygon((0, 0), (0, 10), (10, 10), (10, 6), (2, 6), (2, 4), (10, 4), (10, 0)),
    _convex((4.5, 4.5), (4.5, 5.5), (5.5, 5.5), (5.5, 4.5)),
    _convex((0, 10.5), (10, 10.5), (10, 20.5), (0, 20.5)),
    _polygon((4, -5), (4, 15), (6, 15), (6, -5)),
    _convex((12, 12), (20, 12), (12, 20)),
    _polygon((30, 30), (30, 40), (40, 35)),
    _convex((0, 0), (0, 5), (0, 10)),
    _polygon((5, 5), (6, 6)),
]


class TestOverlapSymmetry:
    """overlaps(P, Q) equals overlaps(Q, P) for every pair and tolerance."""

    @pytest.mark.parametrize("tolerance", [-1.0, 0.0, 0.25, 1.0, 5.0])
    @pytest.mark.parametrize("first", range(len(_SYMMETRY_SHAPES)))
    def test_symmetric(self, first: int, tolerance: float) -> None:
        p = _SYMMETRY_SHAPES[first]
        for q in _SYMMETRY_SHAPES:
            assert p.overlaps(q, tolerance) == q.overlaps(p, tolerance)

    def test_mixed_kinds_agree(self) -> None:
        general = _SYMMETRY_SHAPES[0]
        convex = _SYMMETRY_SHAPES[1]
        neighbour = _SYMMETRY_SHAPES[4]
        for tolerance in (0.0, 1.0):
            assert general.overlaps(neighbour, tolerance) == convex.overlaps(neighbour, tolerance)
        assert not convex.overlaps(neighbour)
        assert convex.overlaps(neighbour, tolerance=1.0)


# ===========================================================================
# Interop
# ===========================================================================


class TestInterop:
    """Shapely conversion, validity and geodesic area."""

    def test_from_shapely(self) -> None:
        polygon = GeographicPolygon.from_shapely(Polygon([(0, 0), (10, 0), (10, 10), (0, 10)]))
        assert len(polygon.vertices) == 4
        assert polygon.vertices[1] == _at(0.0, 10.0)

    def test_to_shapely(self, square: GeographicPolygon) -> None:
        assert square.to_shapely().area == pytest.approx(100.0)

    def test_valid_geometry(self, square: GeographicPolygon) -> None:
        assert square.is_valid_geometry()

    def test_bowtie_is_invalid(self, caplog: pytest.LogCaptureFixture) -> None:
        bowtie = _polygon((0, 0), (10, 10), (0, 10), (10, 0))
        with caplog.at_level(logging.WARNING, logger="geodetic_core.utils.geodesy"):
            assert not bowtie.is_valid_geometry()
        assert "Invalid ring" in caplog.text

    def test_geodesic_area(self, square: GeographicPolygon) -> None:
        assert 1.2e12 < square.geodesic_area_m2() < 1.26e12

    def test_bounding_box(self, square: GeographicPolygon) -> None:
        box = square.bounding_box
        assert box.lower_left == _at(0.0, 0.0)
        assert box.upper_right == _at(10.0, 10.0)
