"""Free-form latitude/longitude text parser.

Text is stripped, upper-cased and matched in full against the pattern
table in ``_patterns``; the first pattern that matches decides how the
fields are read. Parsing never raises: text that cannot be understood
yields ``NaN`` (single angles) or ``None`` (coordinate pairs).

Field rules:
- Minutes longer than two digits without a decimal point read as
  ``MM.mmm`` (``"3045"`` is 30.45 minutes).
- A negative degree field, including ``-0``, negates the whole angle.
- An ``S`` or ``W`` hemisphere letter negates again, so ``"-5S"`` is +5.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from geodetic_core.core.constants import MAX_LATITUDE, MINUTES_PER_DEGREE, SECONDS_PER_DEGREE
from geodetic_core.models.coordinate import Coordinate
from geodetic_core.parsing._patterns import (
    DECIMAL_NUMBER,
    LAT_BY_FORMAT,
    LAT_LON_OPTIONS,
    LON_BY_FORMAT,
    POSSIBLE_LAT,
    POSSIBLE_LON,
    CoordFormat,
    CoordType,
)

if TYPE_CHECKING:
    import re
    from collections.abc import Sequence

    from geodetic_core.parsing._patterns import CoordPair, CoordPattern

logger = logging.getLogger("geodetic_core.parsing")

_NEGATIVE_HEMISPHERES = ("S", "W")
_MAX_PLAIN_MINUTE_DIGITS = 2
_VALIDATION_FORMATS = (CoordFormat.DECIMAL, CoordFormat.DMS, CoordFormat.DDM)

# Longer text is rejected before matching; the separator runs in the
# patterns overlap, so failed matches backtrack polynomially in length.
MAX_TEXT_LENGTH = 64


# ---------------------------------------------------------------------------
# Coordinate pairs
# ---------------------------------------------------------------------------


def _clean(text: str) -> str | None:
    cleaned = text.strip().upper()
    if len(cleaned) > MAX_TEXT_LENGTH:
        logger.debug("Coordinate text too long | length=%d | limit=%d", len(cleaned), MAX_TEXT_LENGTH)
        return None
    return cleaned


def _match_pair(text: str) -> tuple[CoordPair, re.Match[str]] | None:
    cleaned = _clean(text)
    if cleaned is None:
        return None
    for option in LAT_LON_OPTIONS:
        match = option.pattern.fullmatch(cleaned)
        if match is not None:
            return option, match
    return None


def parse_lat_lon(text: str | None) -> Coordinate | None:
    """Parse a latitude/longitude pair from free-form text.

    Either order is accepted; hemisphere letters, decimal degrees, DMS and
    DDM notations are recognised. If the field read as latitude exceeds
    90 degrees in magnitude the pair is swapped; if neither field fits
    a latitude the text is rejected.

    Args:
        text: Text such as ``"40.5N 105W"`` or ``"25:21:36 -169.09"``.

    Returns:
        A terrain-referenced zero-altitude coordinate, or ``None`` if the
        text is ``None``, longer than ``MAX_TEXT_LENGTH`` after stripping,
        matches no pattern, or a field is unreadable.
    """
    if text is None:
        return None

    logger.debug("Parsing lat/lon text | text=%r", text)
    found = _match_pair(text)
    if found is None:
        logger.debug("No lat/lon pattern matched | text=%r", text)
        return None

    option, match = found
    logger.debug("Lat/lon pattern matched | lat_fmt=%s | lon_fmt=%s", option.lat.fmt.value, option.lon.fmt.value)
    lat = _read(option.lat, match)
    lon = _read(option.lon, match)
    if math.isnan(lat) or math.isnan(lon):
        return None

    if abs(lat) > MAX_LATITUDE:
        if abs(lon) > MAX_LATITUDE:
            logger.debug("Neither field is a latitude | first=%s | second=%s", lat, lon)
            return None
        return Coordinate.from_degrees(lon, lat)
    return Coordinate.from_degrees(lat, lon)


def get_lat_lon_format(text: str | None) -> tuple[CoordFormat, CoordFormat] | None:
    """Return the ``(latitude_format, longitude_format)`` of the first matching pattern."""
    if text is None:
        return None
    found = _match_pair(text)
    if found is None:
        return None
    option, _match = found
    return option.lat.fmt, option.lon.fmt


# ---------------------------------------------------------------------------
# Single angles
# ---------------------------------------------------------------------------


def parse_lat(text: str | None, fmt: CoordFormat | None = None) -> float:
    """Parse a latitude in degrees.

    Args:
        text: Latitude text.
        fmt: Restrict matching to one format family. ``None`` tries every
            pattern in priority order.

    Returns:
        Latitude in degrees, or ``NaN`` if unreadable or beyond +-90.
    """
    return _parse_single(text, fmt, CoordType.LAT, POSSIBLE_LAT, LAT_BY_FORMAT)


def parse_lon(text: str | None, fmt: CoordFormat | None = None) -> float:
    """Parse a longitude in degrees. Returns ``NaN`` if unreadable."""
    return _parse_single(text, fmt, CoordType.LON, POSSIBLE_LON, LON_BY_FORMAT)


def valid_lat(text: str | None) -> bool:
    """Whether *text* reads as a latitude in any of the decimal, DMS or DDM formats."""
    return any(not math.isnan(parse_lat(text, fmt)) for fmt in _VALIDATION_FORMATS)


def valid_lon(text: str | None) -> bool:
    """Whether *text* reads as a longitude in any of the decimal, DMS or DDM formats."""
    return any(not math.isnan(parse_lon(text, fmt)) for fmt in _VALIDATION_FORMATS)


def _parse_single(
    text: str | None,
    fmt: CoordFormat | None,
    kind: CoordType,
    possible: Sequence[CoordPattern],
    by_format: dict[CoordFormat, tuple[CoordPattern, ...]],
) -> float:
    if fmt is None:
        return _parse_angle(text, possible)

    value = math.nan
    if fmt is CoordFormat.DECIMAL:
        value = _parse_decimal(text, kind)
    if math.isnan(value):
        value = _parse_angle(text, by_format.get(fmt))
    return value


def _parse_decimal(text: str | None, kind: CoordType) -> float:
    """Plain float read; text starting with ``0`` is left to the patterns (it may be packed DMS)."""
    if text is None or text.startswith("0"):
        return math.nan
    cleaned = text.strip()
    if DECIMAL_NUMBER.fullmatch(cleaned) is None:
        return math.nan
    value = float(cleaned)
    if kind is CoordType.LAT and abs(value) > MAX_LATITUDE:
        return math.nan
    return value


def _parse_angle(text: str | None, patterns: Sequence[CoordPattern] | None) -> float:
    if text is None or patterns is None:
        return math.nan

    cleaned = _clean(text)
    if cleaned is None:
        return math.nan
    for pattern in patterns:
        match = pattern.compiled.fullmatch(cleaned)
        if match is not None:
            value = _read(pattern, match)
            if pattern.kind is CoordType.LAT and abs(value) > MAX_LATITUDE:
                return math.nan
            return value
    return math.nan


# ---------------------------------------------------------------------------
# Field arithmetic
# ---------------------------------------------------------------------------


def _read(pattern: CoordPattern, match: re.Match[str]) -> float:
    deg, minutes, seconds, fraction, direction = pattern.fields(match)
    try:
        return _to_degrees(deg, minutes, seconds, fraction, direction)
    except ValueError:
        logger.debug(
            "Unreadable angle fields | deg=%r | min=%r | sec=%r | frac=%r",
            deg,
            minutes,
            seconds,
            fraction,
        )
        return math.nan


def _to_degrees(
    deg: str | None,
    minutes: str | None,
    seconds: str | None,
    fraction: str | None,
    direction: str | None,
) -> float:
    """Combine captured fields into signed decimal degrees.

    Raises:
        ValueError: If a captured field is empty or not a number
            (e.g. a bare sign or a lone decimal point).
    """
    degrees = float(deg) if deg is not None else math.nan
    value = abs(degrees)

    if minutes is not None:
        value += _parse_minutes(minutes) / MINUTES_PER_DEGREE
    if seconds is not None:
        value += float(seconds) / SECONDS_PER_DEGREE
    if fraction is not None:
        value += float("." + fraction) / SECONDS_PER_DEGREE

    # copysign catches "-0" as well as ordinary negatives
    if math.copysign(1.0, degrees) < 0:
        value = -value
    if direction in _NEGATIVE_HEMISPHERES:
        value = -value
    return value


def _parse_minutes(minutes: str) -> float:
    if len(minutes) <= _MAX_PLAIN_MINUTE_DIGITS or "." in minutes:
        return float(minutes)
    return float(minutes[:2] + "." + minutes[2:])
