"""Immutable geodetic coordinate (latitude, longitude, altitude).

Coordinates are created through factory classmethods and never mutated.
Latitude and longitude may be held denormalized; ``normalized()`` folds
latitude back across the poles and wraps longitude into [-180, 180].

Equality is tolerance based: two coordinates are equal when their
altitude reference levels match and every component differs by less
than ``EPSILON``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geodetic_core.core.constants import (
    EPSILON,
    FULL_CIRCLE_DEG,
    HALF_CIRCLE_DEG,
    MAX_LATITUDE,
    MAX_LONGITUDE,
)
from geodetic_core.core.exceptions import IncompatibleReferenceLevelError
from geodetic_core.models.altitude import Altitude, ReferenceLevel
from geodetic_core.utils.geodesy import geodesic_distance_m

if TYPE_CHECKING:
    from collections.abc import Sequence

# Latitude folding limits (degrees past which the fold direction changes)
_THREE_QUARTER_TURN = 270.0
_FIVE_QUARTER_TURN = 450.0
_ONE_AND_HALF_TURN = 540.0


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_latitude(latitude: float) -> float:
    """Fold a latitude into [-90, 90].

    Values past a pole are reflected back (95 -> 85, 181 -> -1) rather than
    wrapped, because walking over a pole continues on the far meridian.
    """
    out = latitude
    if out > MAX_LATITUDE:
        if out > _ONE_AND_HALF_TURN:
            out = math.fmod(out, FULL_CIRCLE_DEG)
            if out > _THREE_QUARTER_TURN:
                out -= FULL_CIRCLE_DEG
            elif out > MAX_LATITUDE:
                out = HALF_CIRCLE_DEG - out
        elif out > _THREE_QUARTER_TURN:
            if out > _FIVE_QUARTER_TURN:
                out = _ONE_AND_HALF_TURN - out
            else:
                out -= FULL_CIRCLE_DEG
        else:
            out = HALF_CIRCLE_DEG - out
    elif out < -MAX_LATITUDE:
        if out < -_ONE_AND_HALF_TURN:
            out = math.fmod(out, FULL_CIRCLE_DEG)
            if out < -_THREE_QUARTER_TURN:
                out += FULL_CIRCLE_DEG
            elif out < -MAX_LATITUDE:
                out = -HALF_CIRCLE_DEG - out
        elif out < -_THREE_QUARTER_TURN:
            if out < -_FIVE_QUARTER_TURN:
                out = -_ONE_AND_HALF_TURN - out
            else:
                out += FULL_CIRCLE_DEG
        else:
            out = -HALF_CIRCLE_DEG - out
    return out


def normalize_longitude(longitude: float) -> float:
    """Wrap a longitude into [-180, 180]. Both -180 and 180 are kept as given."""
    out = longitude
    if out > MAX_LONGITUDE:
        out -= int((out + HALF_CIRCLE_DEG) / FULL_CIRCLE_DEG) * FULL_CIRCLE_DEG
    elif out < -MAX_LONGITUDE:
        out -= int((out - HALF_CIRCLE_DEG) / FULL_CIRCLE_DEG) * FULL_CIRCLE_DEG
    return out


def longitude_difference(lon_d1: float, lon_d2: float) -> float:
    """Difference between two longitudes measured the short way round, in [0, 180]."""
    delta = abs(lon_d1 - lon_d2)
    if delta > FULL_CIRCLE_DEG:
        delta -= int(delta / FULL_CIRCLE_DEG) * FULL_CIRCLE_DEG
    if delta > HALF_CIRCLE_DEG:
        delta = FULL_CIRCLE_DEG - delta
    return delta


def _signum(value: float) -> int:
    return (value > 0) - (value < 0)


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Coordinate:
    """A geodetic position.

    Equality is tolerance based (every component within ``EPSILON``), which no
    hash of the components can respect. The hash therefore covers only the
    reference level: all coordinates on one reference share a hash bucket,
    so large sets or dict keys of coordinates degrade to linear lookups.
    Key by ``as_vec3d()`` when exact values and fast lookups are needed.

    Attributes:
        lat_d: Geodetic latitude in degrees (may be denormalized).
        lon_d: Longitude in degrees (may be denormalized).
        altitude: Altitude magnitude and reference level.
    """

    lat_d: float
    lon_d: float
    altitude: Altitude = Altitude()

    # -- factories ----------------------------------------------------------

    @classmethod
    def from_degrees(
        cls,
        lat_d: float,
        lon_d: float,
        reference: ReferenceLevel = ReferenceLevel.TERRAIN,
    ) -> Coordinate:
        """Create a zero-altitude coordinate (terrain reference by default)."""
        return cls(lat_d, lon_d, Altitude(0.0, reference))

    @classmethod
    def from_degrees_meters(
        cls,
        lat_d: float,
        lon_d: float,
        alt_m: float,
        reference: ReferenceLevel,
    ) -> Coordinate:
        return cls(lat_d, lon_d, Altitude(alt_m, reference))

    @classmethod
    def from_degrees_km(
        cls,
        lat_d: float,
        lon_d: float,
        alt_km: float,
        reference: ReferenceLevel,
    ) -> Coordinate:
        return cls(lat_d, lon_d, Altitude.from_km(alt_km, reference))

    @classmethod
    def from_degrees_altitude(cls, lat_d: float, lon_d: float, altitude: Altitude) -> Coordinate:
        return cls(lat_d, lon_d, altitude)

    @classmethod
    def from_vec2d(cls, vec: Sequence[float]) -> Coordinate:
        """Create from a ``(lon, lat)`` pair, the inverse of ``as_vec2d()``."""
        return cls.from_degrees(vec[1], vec[0])

    @staticmethod
    def parse(text: str | None) -> Coordinate | None:
        """Parse a free-form location string. Returns ``None`` when unrecognised."""
        from geodetic_core.parsing import parse_lat_lon

        return parse_lat_lon(text)

    # -- accessors ----------------------------------------------------------

    @property
    def alt_m(self) -> float:
        return self.altitude.meters

    @property
    def reference(self) -> ReferenceLevel:
        return self.altitude.reference

    @property
    def normalized_lat_d(self) -> float:
        return normalize_latitude(self.lat_d)

    @property
    def normalized_lon_d(self) -> float:
        return normalize_longitude(self.lon_d)

    def as_vec2d(self) -> tuple[float, float]:
        """Return ``(lon, lat)`` in degrees."""
        return (self.lon_d, self.lat_d)

    def as_vec3d(self) -> tuple[float, float, float]:
        """Return ``(lon, lat, alt_m)``."""
        return (self.lon_d, self.lat_d, self.alt_m)

    # -- derived coordinates ------------------------------------------------

    def convert_reference(self, reference: ReferenceLevel, custom_id: str = "") -> Coordinate:
        """Return this position with its altitude reinterpreted under *reference*.

        Returns ``self`` when the reference level is already *reference*.
        """
        altitude = self.altitude.with_reference(reference, custom_id)
        if altitude is self.altitude:
            return self
        return Coordinate(self.lat_d, self.lon_d, altitude)

    def normalized(self) -> Coordinate:
        """Return the equivalent coordinate with latitude in [-90, 90] and longitude in [-180, 180]."""
        if abs(self.lat_d) > MAX_LATITUDE or abs(self.lon_d) > MAX_LONGITUDE:
            return Coordinate(normalize_latitude(self.lat_d), normalize_longitude(self.lon_d), self.altitude)
        return self

    def add_degrees_meters(self, lat_degrees: float, lon_degrees: float, alt_meters: float) -> Coordinate:
        """Offset each component and return the new coordinate."""
        return Coordinate(
            self.lat_d + lat_degrees,
            self.lon_d + lon_degrees,
            Altitude(self.alt_m + alt_meters, self.altitude.reference, self.altitude.custom_id),
        )

    def interpolate(self, other: Coordinate, fraction: float, long_way: bool = False) -> Coordinate:
        """Blend between this coordinate (``fraction=0``) and *other* (``fraction=1``).

        Longitude follows the shorter arc unless *long_way* is set, in which
        case it goes round the other side of the globe.

        Raises:
            IncompatibleReferenceLevelError: If the altitude references differ.
        """
        if not self.altitude.same_reference(other.altitude):
            raise IncompatibleReferenceLevelError(
                self.altitude.describe_reference(),
                other.altitude.describe_reference(),
                operation="interpolate",
            )

        lat = other.lat_d * fraction + self.lat_d * (1.0 - fraction)
        alt = other.alt_m * fraction + self.alt_m * (1.0 - fraction)

        lon1 = self.lon_d
        lon2 = other.lon_d
        if long_way != (abs(lon2 - lon1) > HALF_CIRCLE_DEG):
            if lon2 < lon1:
                lon = normalize_longitude((lon2 + FULL_CIRCLE_DEG) * fraction + lon1 * (1.0 - fraction))
            else:
                lon = normalize_longitude(lon2 * fraction + (lon1 + FULL_CIRCLE_DEG) * (1.0 - fraction))
        else:
            lon = lon2 * fraction + lon1 * (1.0 - fraction)

        return Coordinate(lat, lon, Altitude(alt, self.altitude.reference, self.altitude.custom_id))

    # -- predicates ---------------------------------------------------------

    def positions_cross_longitude_boundary(self, other: Coordinate) -> bool:
        """Whether this position and *other* sit on opposite sides of the antimeridian.

        Assumes both longitudes are already in [-180, 180]. The longitudes
        must have opposite signs and be more than 180 degrees apart.
        """
        delta = abs(self.lon_d - other.lon_d)
        return _signum(self.lon_d) != _signum(other.lon_d) and HALF_CIRCLE_DEG < delta < FULL_CIRCLE_DEG

    @staticmethod
    def crosses_antimeridian(first: Coordinate, second: Coordinate) -> bool:
        """Whether the short segment between two positions crosses the antimeridian.

        A segment touching +-180 exactly is not considered crossing.
        """
        if abs(first.lon_d) == MAX_LONGITUDE or abs(second.lon_d) == MAX_LONGITUDE:
            return False
        return abs(first.normalized_lon_d - second.normalized_lon_d) > HALF_CIRCLE_DEG

    def is_within_lat_lon_tolerance(self, other: Coordinate, tolerance: float) -> bool:
        """Whether latitude and longitude each differ by no more than *tolerance*."""
        return self == other or (
            abs(self.lat_d - other.lat_d) <= tolerance and abs(self.lon_d - other.lon_d) <= tolerance
        )

    # -- measurement --------------------------------------------------------

    def geodesic_distance_m(self, other: Coordinate, ellipsoid: str | None = None) -> float:
        """Geodesic distance to *other* on the ellipsoid, in metres."""
        return geodesic_distance_m(self, other, ellipsoid=ellipsoid)

    # -- dunder -------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Coordinate):
            return NotImplemented
        return (
            self.altitude.same_reference(other.altitude)
            and abs(self.alt_m - other.alt_m) < EPSILON
            and abs(self.lat_d - other.lat_d) < EPSILON
            and abs(self.lon_d - other.lon_d) < EPSILON
        )

    def __hash__(self) -> int:
        # Tolerance-based equality: only the reference level is hashed.
        return hash((self.altitude.reference, self.altitude.custom_id))

    def to_simple_string(self) -> str:
        """Compact ``lat/lon/alt`` text."""
        return f"{self.lat_d}/{self.lon_d}/{self.alt_m}"
