"""Geometry value types and records.

Defines the immutable values used throughout the package:
- Altitude / ReferenceLevel: height magnitude and vertical datum
- Coordinate: latitude, longitude and altitude with tolerance equality
- GeographicBoundingBox: antimeridian-aware box algebra
- GeographicPolygon / ConvexPolygon: containment and overlap tests
- *Record: pydantic records for JSON persistence
"""

from geodetic_core.models.altitude import Altitude, ReferenceLevel
from geodetic_core.models.bounding_box import WHOLE_GLOBE, GeographicBoundingBox
from geodetic_core.models.coordinate import (
    Coordinate,
    longitude_difference,
    normalize_latitude,
    normalize_longitude,
)
from geodetic_core.models.polygon import BoundingCircle, ConvexPolygon, GeographicPolygon
from geodetic_core.models.records import BoundingBoxRecord, CoordinateRecord, PolygonRecord

__all__ = [
    "Altitude",
    "ReferenceLevel",
    "Coordinate",
    "normalize_latitude",
    "normalize_longitude",
    "longitude_difference",
    "GeographicBoundingBox",
    "WHOLE_GLOBE",
    "BoundingCircle",
    "GeographicPolygon",
    "ConvexPolygon",
    "CoordinateRecord",
    "BoundingBoxRecord",
    "PolygonRecord",
]
