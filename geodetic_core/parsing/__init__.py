"""Coordinate text parsing and formatting.

Reads latitude/longitude text written in decimal degrees, degrees-minutes-
seconds (DMS) or degrees-decimal-minutes (DDM), in either order and with
or without hemisphere letters, and renders coordinates back to text.

The package is split into focused stages:
- **_patterns**: regex fragments, format enums and the priority-ordered
  pattern table
- **_parser**: pair and single-angle parsing, lat/lon order disambiguation
- **_formatting**: DMS/DDM/decimal rendering with rounding carry-over
- **_validation**: decimal-degree validity checks

Parsing never raises. Unreadable text yields ``NaN`` for single angles and
``None`` for coordinate pairs.
"""

from __future__ import annotations

from geodetic_core.parsing._formatting import (
    deg_to_ddm,
    deg_to_dms,
    format_coordinate,
    lat_to_ddm_string,
    lat_to_dms_string,
    lon_to_ddm_string,
    lon_to_dms_string,
)
from geodetic_core.parsing._parser import (
    get_lat_lon_format,
    parse_lat,
    parse_lat_lon,
    parse_lon,
    valid_lat,
    valid_lon,
)
from geodetic_core.parsing._patterns import CoordFormat
from geodetic_core.parsing._validation import is_valid_decimal_lat, is_valid_decimal_lon

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "CoordFormat",
    "deg_to_ddm",
    "deg_to_dms",
    "format_coordinate",
    "get_lat_lon_format",
    "is_valid_decimal_lat",
    "is_valid_decimal_lon",
    "lat_to_ddm_string",
    "lat_to_dms_string",
    "lon_to_ddm_string",
    "lon_to_dms_string",
    "parse_lat",
    "parse_lat_lon",
    "parse_lon",
    "valid_lat",
    "valid_lon",
]
