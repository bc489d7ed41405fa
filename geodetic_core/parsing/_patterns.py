"""Regex pattern table for latitude/longitude text.

Each ``CoordPattern`` pairs a regex fragment with the group numbers that
hold its fields. Fragments are combined into ``CoordPair`` patterns
(latitude then longitude, or the reverse) and tried in priority order.

Building blocks (``G_`` = greedy/optional, ``F_`` = fixed/required):

- ``NS`` / ``EW``: optional hemisphere letter, prefix or suffix
- ``*_LAT`` / ``*_LON``: signed degree field
- ``*_60``: a minutes or seconds field below 60
- ``*_SEP`` / ``*_DEG``: separator runs (whitespace, quotes, comma,
  colon, period and, for ``*_DEG``, the degree sign)
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from geodetic_core.core.constants import DEGREE_SYMBOL

# ---------------------------------------------------------------------------
# Format and axis enums
# ---------------------------------------------------------------------------


class CoordFormat(enum.Enum):
    """Text formats a coordinate can be written in."""

    DECIMAL = "Decimal"
    DDM = "DDM"
    DMS = "DMS"
    MGRS = "MGRS"
    WKT_GEOMETRY = "WKT"
    UNKNOWN = "Unknown"

    @classmethod
    def from_string(cls, text: str | None) -> CoordFormat:
        """Look up a format by value or member name, ignoring case.

        Returns ``UNKNOWN`` for anything unrecognised.
        """
        if not text:
            return cls.UNKNOWN
        wanted = text.strip().upper()
        for member in cls:
            if wanted in (member.value.upper(), member.name):
                return member
        return cls.UNKNOWN


class CoordType(enum.Enum):
    LAT = "lat"
    LON = "lon"


# ---------------------------------------------------------------------------
# Regex building blocks
# ---------------------------------------------------------------------------

START = r"\s*"
MIDDLE = r"[,\s/]*"
END = r"\s*"

_SEP = r"\s'\",:"
_PERIOD = "."

G_SEP = f"[{_SEP}{_PERIOD}]*"
F_SEP = f"[{_SEP}{_PERIOD}]+"
G_DEG = f"[{_SEP}{_PERIOD}{DEGREE_SYMBOL}]*"
F_DEG = f"[{_SEP}{_PERIOD}{DEGREE_SYMBOL}]+"

NS = "([NS])?"
EW = "([EW])?"

F_60 = "([0-5][0-9])"
G_60 = "([0-5]?[0-9])"
G_FRAC = "(?:[.]([0-9]*))?"

G_LAT = "([-+]?0*?0?[0-9]?[0-9])"
F_LAT = "([-+]?[0-9][0-9])"
G_LON = "([-+]?(?:0?(?:[0-2]?[0-9]?[0-9]|3[0-5][0-9]|360)))"
F_LON = "([-+]?(?:[0-2][0-9][0-9]|3[0-5][0-9]|360))"

G_MM_SS = f"(?:{F_60}(?:{G_SEP}{F_60}{G_FRAC})?)?"
F_MM_SS = f"(?:{G_60}(?:{F_SEP}(?:{G_60}{G_FRAC})?)?)?"

G_DMIN = "([0-5]?[0-9](?:[.][0-9]+)?)"
F_DMIN = "([0-5][0-9](?:[.]?[0-9]+)?)?"

_PACKED_SECONDS = f"(?:{F_60}([0-9]*)?)?"


# ---------------------------------------------------------------------------
# Pattern records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CoordPattern:
    """One coordinate regex fragment and the groups holding its fields.

    Group numbers are 1-based; ``None`` marks a field the pattern does
    not capture.

    Attributes:
        kind: Whether the fragment matches a latitude or longitude.
        fmt: Format family the fragment belongs to.
        regex: Uncompiled regex fragment.
        degrees: Group holding the signed degree field.
        minutes: Group holding minutes (integer or decimal).
        seconds: Group holding whole seconds.
        fraction: Group holding fractional-second digits.
        direction: Group holding the suffix hemisphere letter.
        alt_direction: Group holding the prefix hemisphere letter.
        last: Highest group number the fragment uses.
    """

    kind: CoordType
    fmt: CoordFormat
    regex: str
    degrees: int | None
    minutes: int | None
    seconds: int | None
    fraction: int | None
    direction: int | None
    alt_direction: int | None
    last: int

    @property
    def compiled(self) -> re.Pattern[str]:
        return _compile(self.regex)

    def shifted(self, addend: int) -> CoordPattern:
        """Copy with every group number moved up by *addend*."""

        def inc(index: int | None) -> int | None:
            return None if index is None else index + addend

        return CoordPattern(
            kind=self.kind,
            fmt=self.fmt,
            regex=self.regex,
            degrees=inc(self.degrees),
            minutes=inc(self.minutes),
            seconds=inc(self.seconds),
            fraction=inc(self.fraction),
            direction=inc(self.direction),
            alt_direction=inc(self.alt_direction),
            last=self.last + addend,
        )

    def fields(self, match: re.Match[str]) -> tuple[str | None, str | None, str | None, str | None, str | None]:
        """Extract ``(deg, min, sec, frac, dir)`` from a match.

        The suffix hemisphere letter wins over the prefix when both are
        present.
        """

        def group(index: int | None) -> str | None:
            return None if index is None else match.group(index)

        direction = group(self.direction) or group(self.alt_direction)
        return (
            group(self.degrees),
            group(self.minutes),
            group(self.seconds),
            group(self.fraction),
            direction,
        )


@dataclass(frozen=True, slots=True)
class CoordPair:
    """Two coordinate fragments joined into one full-text pattern."""

    first: CoordPattern
    second: CoordPattern
    pattern: re.Pattern[str]

    @classmethod
    def of(cls, first: CoordPattern, second: CoordPattern) -> CoordPair:
        if first.kind == second.kind:
            msg = f"Coordinate pair needs one latitude and one longitude, got {first.kind.value} twice"
            raise ValueError(msg)
        shifted = second.shifted(first.last)
        return cls(first, shifted, _compile(START + first.regex + MIDDLE + second.regex + END))

    @property
    def lat(self) -> CoordPattern:
        return self.first if self.first.kind is CoordType.LAT else self.second

    @property
    def lon(self) -> CoordPattern:
        return self.first if self.first.kind is CoordType.LON else self.second


def _compile(regex: str) -> re.Pattern[str]:
    # ASCII classes: \d and \s must not match other scripts' digits or spaces
    return re.compile(regex, re.ASCII)


def _pattern(kind: CoordType, fmt: CoordFormat, regex: str, groups: tuple[int, ...]) -> CoordPattern:
    """Build a fragment from a ``(deg, min, sec, frac, dir, alt_dir, last)`` tuple; ``0`` means absent."""
    deg, minutes, sec, frac, direction, alt_direction, last = (g or None for g in groups)
    return CoordPattern(kind, fmt, regex, deg, minutes, sec, frac, direction, alt_direction, last)


# ---------------------------------------------------------------------------
# Pattern table
# ---------------------------------------------------------------------------

_LAT, _LON = CoordType.LAT, CoordType.LON
_DEC, _DMS, _DDM = CoordFormat.DECIMAL, CoordFormat.DMS, CoordFormat.DDM

_DMS_GROUPS = (2, 3, 4, 5, 6, 1, 6)
_DDM_GROUPS = (2, 3, 0, 0, 4, 1, 4)
_DECIMAL_GROUPS = (2, 0, 0, 0, 3, 1, 3)

LAT_DECIMAL = _pattern(_LAT, _DEC, NS + r"([-+]?\d{0,2}(?:[.]\d*)?)[\s" + DEGREE_SYMBOL + "]*" + NS, _DECIMAL_GROUPS)
LON_DECIMAL = _pattern(
    _LON, _DEC, EW + r"([-+]?(?:[0-3]?\d{0,2}(?:[.]\d*)?))[\s" + DEGREE_SYMBOL + "]*" + EW, _DECIMAL_GROUPS
)

LAT_DMS = _pattern(_LAT, _DMS, NS + G_LAT + G_DEG + G_MM_SS + G_SEP + NS, _DMS_GROUPS)
LON_DMS = _pattern(_LON, _DMS, EW + G_LON + G_DEG + G_MM_SS + G_SEP + EW, _DMS_GROUPS)

LAT_DMS_SYM = _pattern(_LAT, _DMS, NS + G_LAT + F_DEG + F_MM_SS + G_SEP + NS, _DMS_GROUPS)
LON_DMS_SYM = _pattern(_LON, _DMS, EW + G_LON + F_DEG + F_MM_SS + G_SEP + EW, _DMS_GROUPS)

LAT_DMS_PACKED = _pattern(_LAT, _DMS, NS + F_LAT + F_60 + _PACKED_SECONDS + NS, _DMS_GROUPS)
LON_DMS_PACKED = _pattern(_LON, _DMS, EW + F_LON + F_60 + _PACKED_SECONDS + EW, _DMS_GROUPS)

LAT_DDM = _pattern(_LAT, _DDM, NS + F_LAT + f"[{_SEP}{DEGREE_SYMBOL}]*" + F_DMIN + G_SEP + NS, _DDM_GROUPS)
LON_DDM = _pattern(_LON, _DDM, EW + F_LON + f"[{_SEP}{DEGREE_SYMBOL}]*" + F_DMIN + G_SEP + EW, _DDM_GROUPS)

LAT_DDM_SYM = _pattern(_LAT, _DDM, NS + G_LAT + f"[{_SEP}{DEGREE_SYMBOL}]+" + G_DMIN + G_SEP + NS, _DDM_GROUPS)
LON_DDM_SYM = _pattern(_LON, _DDM, EW + G_LON + f"[{_SEP}{DEGREE_SYMBOL}]+" + G_DMIN + G_SEP + EW, _DDM_GROUPS)

LAT_BY_FORMAT: dict[CoordFormat, tuple[CoordPattern, ...]] = {
    _DEC: (LAT_DECIMAL,),
    _DMS: (LAT_DMS, LAT_DMS_SYM, LAT_DMS_PACKED),
    _DDM: (LAT_DDM, LAT_DDM_SYM),
}

LON_BY_FORMAT: dict[CoordFormat, tuple[CoordPattern, ...]] = {
    _DEC: (LON_DECIMAL,),
    _DMS: (LON_DMS, LON_DMS_SYM, LON_DMS_PACKED),
    _DDM: (LON_DDM, LON_DDM_SYM),
}

# Single-field patterns in priority order
POSSIBLE_LAT: tuple[CoordPattern, ...] = (
    LAT_DECIMAL,
    LAT_DDM_SYM,
    LAT_DMS_SYM,
    LAT_DMS,
    LAT_DMS_PACKED,
    LAT_DDM,
)
POSSIBLE_LON: tuple[CoordPattern, ...] = (
    LON_DECIMAL,
    LON_DDM_SYM,
    LON_DMS_SYM,
    LON_DMS,
    LON_DMS_PACKED,
    LON_DDM,
)


def _both_orders(lat: CoordPattern, lon: CoordPattern) -> list[CoordPair]:
    return [CoordPair.of(lat, lon), CoordPair.of(lon, lat)]


# Pair patterns in priority order; the first full match wins
LAT_LON_OPTIONS: tuple[CoordPair, ...] = (
    *_both_orders(LAT_DECIMAL, LON_DECIMAL),
    *_both_orders(LAT_DDM_SYM, LON_DDM_SYM),
    *_both_orders(LAT_DMS_SYM, LON_DMS_SYM),
    *_both_orders(LAT_DMS, LON_DMS),
    *_both_orders(LAT_DMS_PACKED, LON_DMS_PACKED),
    # Mixed: one field with symbols, the other bare
    CoordPair.of(LAT_DMS_SYM, LON_DMS),
    CoordPair.of(LON_DMS_SYM, LAT_DMS),
    CoordPair.of(LAT_DMS, LON_DMS_SYM),
    CoordPair.of(LON_DMS, LAT_DMS_SYM),
    # DMS with decimal
    CoordPair.of(LAT_DMS_SYM, LON_DECIMAL),
    CoordPair.of(LON_DMS_SYM, LAT_DECIMAL),
    CoordPair.of(LAT_DMS, LON_DECIMAL),
    CoordPair.of(LON_DMS, LAT_DECIMAL),
    # Decimal with DMS
    CoordPair.of(LAT_DECIMAL, LON_DMS_SYM),
    CoordPair.of(LON_DECIMAL, LAT_DMS_SYM),
    CoordPair.of(LAT_DECIMAL, LON_DMS),
    CoordPair.of(LON_DECIMAL, LAT_DMS),
    *_both_orders(LAT_DDM, LON_DDM),
)

# Plain signed decimal number, as accepted by the fast decimal path
DECIMAL_NUMBER = _compile(r"[-+]?(?:\d+[.]?\d*|[.]\d+)(?:[eE][-+]?\d+)?")
