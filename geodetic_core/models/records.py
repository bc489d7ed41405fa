"""Pydantic records for storing geometry values.

The value types in this package are frozen dataclasses with no wire
format. These records give them one, so caches and registries can
persist coordinates, boxes and polygons as JSON and rebuild them later.

All coordinates are written in degrees, altitudes in metres. Reference
levels serialize by enum value (``"terrain"``, ``"ellipsoid"``, ...).

Round trip::

    text = PolygonRecord.from_polygon(poly).model_dump_json()
    poly = PolygonRecord.model_validate_json(text).to_polygon()
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from geodetic_core.models.altitude import Altitude, ReferenceLevel
from geodetic_core.models.bounding_box import GeographicBoundingBox
from geodetic_core.models.coordinate import Coordinate
from geodetic_core.models.polygon import ConvexPolygon, GeographicPolygon

# Schema version for forward compatibility
SCHEMA_VERSION = "geodetic-record-v1"


class CoordinateRecord(BaseModel):
    """Serialized ``Coordinate``.

    Attributes:
        lat_d: Latitude in degrees (may be denormalized).
        lon_d: Longitude in degrees (may be denormalized).
        alt_m: Altitude magnitude in metres.
        reference: Altitude reference level.
        custom_id: Custom datum identifier, empty unless ``reference`` is custom.
    """

    lat_d: float
    lon_d: float
    alt_m: float = 0.0
    reference: ReferenceLevel = ReferenceLevel.TERRAIN
    custom_id: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_coordinate(cls, coord: Coordinate) -> CoordinateRecord:
        return cls(
            lat_d=coord.lat_d,
            lon_d=coord.lon_d,
            alt_m=coord.alt_m,
            reference=coord.reference,
            custom_id=coord.altitude.custom_id,
        )

    def to_coordinate(self) -> Coordinate:
        return Coordinate(self.lat_d, self.lon_d, Altitude(self.alt_m, self.reference, self.custom_id))


class BoundingBoxRecord(BaseModel):
    """Serialized ``GeographicBoundingBox`` (two corners).

    Attributes:
        lower_left: South-west corner.
        upper_right: North-east corner.
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    lower_left: CoordinateRecord
    upper_right: CoordinateRecord

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_box(cls, box: GeographicBoundingBox) -> BoundingBoxRecord:
        return cls(
            lower_left=CoordinateRecord.from_coordinate(box.lower_left),
            upper_right=CoordinateRecord.from_coordinate(box.upper_right),
        )

    def to_box(self) -> GeographicBoundingBox:
        """Rebuild the box.

        Raises:
            IncompatibleReferenceLevelError: If the corners were stored
                with different reference levels.
        """
        return GeographicBoundingBox(self.lower_left.to_coordinate(), self.upper_right.to_coordinate())

    @property
    def bbox(self) -> list[float]:
        """Corners as ``[min_lon, min_lat, max_lon, max_lat]``."""
        return [self.lower_left.lon_d, self.lower_left.lat_d, self.upper_right.lon_d, self.upper_right.lat_d]


class PolygonRecord(BaseModel):
    """Serialized polygon ring.

    Attributes:
        vertices: Ring vertices in order, closure omitted.
        convex: Rebuild as a ``ConvexPolygon`` when set.
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    vertices: list[CoordinateRecord] = Field(default_factory=list)
    convex: bool = False

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_polygon(cls, polygon: GeographicPolygon) -> PolygonRecord:
        return cls(
            vertices=[CoordinateRecord.from_coordinate(v) for v in polygon.vertices],
            convex=isinstance(polygon, ConvexPolygon),
        )

    def to_polygon(self) -> GeographicPolygon:
        """Rebuild the polygon.

        Raises:
            InvalidGeometryError: If ``convex`` is set but the vertices are
                not convex.
        """
        vertices = tuple(v.to_coordinate() for v in self.vertices)
        if self.convex:
            return ConvexPolygon(vertices)
        return GeographicPolygon(vertices)

    def to_geojson(self) -> dict[str, object]:
        """GeoJSON ``Polygon`` geometry with a closed ``[lon, lat]`` ring."""
        ring = [[v.lon_d, v.lat_d] for v in self.vertices]
        if ring and ring[0] != ring[-1]:
            ring.append(list(ring[0]))
        return {"type": "Polygon", "coordinates": [ring]}
