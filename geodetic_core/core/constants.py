"""Shared geodetic constants.

Centralises coordinate bounds, comparison tolerances, unit conversions
and the symbols used when rendering coordinates as text.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# WGS 84 coordinate bounds
# ---------------------------------------------------------------------------

MIN_LATITUDE: float = -90.0
MAX_LATITUDE: float = 90.0
MIN_LONGITUDE: float = -180.0
MAX_LONGITUDE: float = 180.0

HALF_CIRCLE_DEG: float = 180.0
FULL_CIRCLE_DEG: float = 360.0
"""Longitude is cyclic with this period."""

# ---------------------------------------------------------------------------
# Tolerances
# ---------------------------------------------------------------------------

EPSILON: float = 1e-12
"""Component tolerance used by coordinate and bounding-box equality."""

MAX_BOX_FLATTENING: float = 0.025
"""Smallest allowed ratio between the short and long side of a minimum bounding box."""

# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------

MINUTES_PER_DEGREE: int = 60
SECONDS_PER_MINUTE: int = 60
SECONDS_PER_DEGREE: int = MINUTES_PER_DEGREE * SECONDS_PER_MINUTE
METRES_PER_KILOMETRE: float = 1000.0

# ---------------------------------------------------------------------------
# Notation symbols
# ---------------------------------------------------------------------------

DEGREE_SYMBOL: str = "°"
MINUTE_SYMBOL: str = "'"
SECOND_SYMBOL: str = '"'

# ---------------------------------------------------------------------------
# Ellipsoid
# ---------------------------------------------------------------------------

DEFAULT_ELLIPSOID: str = "WGS84"
