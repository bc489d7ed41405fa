"""Render angles and coordinates as DMS, DDM or decimal text.

Rounding uses Python's fixed-point formatting (round-half-even on the
binary value). Trailing fractional zeros are dropped, so ``1.50`` renders
as ``1.5`` and ``2.00`` as ``2``. A seconds (or minutes) field that rounds
up to 60 carries into the next unit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from geodetic_core.core.config import GeometryConfig
from geodetic_core.core.constants import (
    DEGREE_SYMBOL,
    MINUTE_SYMBOL,
    MINUTES_PER_DEGREE,
    SECOND_SYMBOL,
    SECONDS_PER_MINUTE,
)
from geodetic_core.parsing._patterns import CoordFormat

if TYPE_CHECKING:
    from geodetic_core.models.coordinate import Coordinate

_ROLLOVER = "60"


def _format_fraction(value: float, round_off: int) -> str:
    text = f"{value:.{round_off}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _suffix(value: float, positive: str, negative: str) -> str:
    # -0.0 compares equal to 0.0 and so takes the positive suffix
    return positive if value >= 0.0 else negative


# ---------------------------------------------------------------------------
# Degrees, minutes, seconds
# ---------------------------------------------------------------------------


def deg_to_dms(
    degrees: float,
    round_off: int,
    degree_symbol: str = DEGREE_SYMBOL,
    minute_symbol: str = MINUTE_SYMBOL,
    second_symbol: str = SECOND_SYMBOL,
) -> str:
    """Format the magnitude of *degrees* as ``D°M'S"`` with no hemisphere letter."""
    abs_deg = abs(degrees)
    deg = int(abs_deg)
    dec_min = (abs_deg - deg) * MINUTES_PER_DEGREE
    minutes = int(dec_min)
    seconds = (dec_min - minutes) * SECONDS_PER_MINUTE

    sec_str = _format_fraction(seconds, round_off)
    if sec_str.startswith(_ROLLOVER):
        sec_str = "0"
        minutes += 1
        if minutes >= MINUTES_PER_DEGREE:
            minutes = 0
            deg += 1

    return f"{deg}{degree_symbol}{minutes}{minute_symbol}{sec_str}{second_symbol}"


def lat_to_dms_string(
    degrees: float,
    round_off: int,
    degree_symbol: str = DEGREE_SYMBOL,
    minute_symbol: str = MINUTE_SYMBOL,
    second_symbol: str = SECOND_SYMBOL,
) -> str:
    """Format a latitude as DMS with an ``N``/``S`` suffix.

    Args:
        degrees: Latitude in decimal degrees.
        round_off: Decimal places kept on the seconds field.
        degree_symbol: Symbol after the degree field.
        minute_symbol: Symbol after the minutes field.
        second_symbol: Symbol after the seconds field.

    Returns:
        Text such as ``10°30'15.5"N``.
    """
    body = deg_to_dms(degrees, round_off, degree_symbol, minute_symbol, second_symbol)
    return body + _suffix(degrees, "N", "S")


def lon_to_dms_string(
    degrees: float,
    round_off: int,
    degree_symbol: str = DEGREE_SYMBOL,
    minute_symbol: str = MINUTE_SYMBOL,
    second_symbol: str = SECOND_SYMBOL,
) -> str:
    """Format a longitude as DMS with an ``E``/``W`` suffix."""
    body = deg_to_dms(degrees, round_off, degree_symbol, minute_symbol, second_symbol)
    return body + _suffix(degrees, "E", "W")


# ---------------------------------------------------------------------------
# Degrees, decimal minutes
# ---------------------------------------------------------------------------


def deg_to_ddm(
    degrees: float,
    round_off: int,
    degree_symbol: str = DEGREE_SYMBOL,
    minute_symbol: str = MINUTE_SYMBOL,
) -> str:
    """Format the magnitude of *degrees* as ``D°M.mmm'`` with no hemisphere letter."""
    abs_deg = abs(degrees)
    deg = int(abs_deg)
    dec_min = (abs_deg - deg) * MINUTES_PER_DEGREE

    min_str = _format_fraction(dec_min, round_off)
    if min_str.startswith(_ROLLOVER):
        min_str = "0"
        deg += 1

    return f"{deg}{degree_symbol}{min_str}{minute_symbol}"


def lat_to_ddm_string(
    degrees: float,
    round_off: int,
    degree_symbol: str = DEGREE_SYMBOL,
    minute_symbol: str = MINUTE_SYMBOL,
) -> str:
    """Format a latitude as DDM with an ``N``/``S`` suffix."""
    return deg_to_ddm(degrees, round_off, degree_symbol, minute_symbol) + _suffix(degrees, "N", "S")


def lon_to_ddm_string(
    degrees: float,
    round_off: int,
    degree_symbol: str = DEGREE_SYMBOL,
    minute_symbol: str = MINUTE_SYMBOL,
) -> str:
    """Format a longitude as DDM with an ``E``/``W`` suffix."""
    return deg_to_ddm(degrees, round_off, degree_symbol, minute_symbol) + _suffix(degrees, "E", "W")


# ---------------------------------------------------------------------------
# Whole coordinates
# ---------------------------------------------------------------------------


def format_coordinate(
    coord: Coordinate,
    fmt: CoordFormat,
    round_off: int | None = None,
    *,
    config: GeometryConfig | None = None,
) -> str:
    """Render a coordinate as ``"<lat> <lon>"`` text.

    Args:
        coord: Position to render.
        fmt: ``DECIMAL``, ``DMS`` or ``DDM``.
        round_off: Decimal places on the last field. Defaults to the
            configured DMS/DDM round-off; decimal output defaults to the
            full ``repr`` of each value.
        config: Geometry settings; read from the environment when omitted.

    Returns:
        Formatted text such as ``10°30'0"N 20°15'0"W``.

    Raises:
        ValueError: If *fmt* is not a renderable format.
    """
    if fmt is CoordFormat.DECIMAL:
        if round_off is None:
            return f"{coord.lat_d} {coord.lon_d}"
        return f"{_format_fraction(coord.lat_d, round_off)} {_format_fraction(coord.lon_d, round_off)}"

    if fmt is CoordFormat.DMS:
        if round_off is None:
            round_off = (config or GeometryConfig.from_env()).dms_round_off
        return f"{lat_to_dms_string(coord.lat_d, round_off)} {lon_to_dms_string(coord.lon_d, round_off)}"

    if fmt is CoordFormat.DDM:
        if round_off is None:
            round_off = (config or GeometryConfig.from_env()).ddm_round_off
        return f"{lat_to_ddm_string(coord.lat_d, round_off)} {lon_to_ddm_string(coord.lon_d, round_off)}"

    msg = f"Cannot format a coordinate as {fmt.value}"
    raise ValueError(msg)
