"""Validity checks for decimal-degree text fields.

Responsibilities:
- Accept plain signed decimal degrees within latitude/longitude bounds
- Allow a single trailing marker (degree sign, hemisphere letter) only
  when the caller lists it
"""

from __future__ import annotations

import logging

from geodetic_core.core.constants import MAX_LATITUDE, MAX_LONGITUDE
from geodetic_core.parsing._patterns import DECIMAL_NUMBER

logger = logging.getLogger("geodetic_core.parsing")

_DIGITS = "0123456789"


def is_valid_decimal_lat(text: str, *allowed_last_chars: str) -> bool:
    """Check that *text* is a decimal latitude in [-90, 90].

    Args:
        text: Candidate text, surrounding whitespace ignored.
        allowed_last_chars: Non-numeric characters permitted as the final
            character (e.g. ``"°"``, ``"N"``).

    Returns:
        ``True`` if the text parses and is in range.
    """
    return _is_valid_decimal_degrees(text, MAX_LATITUDE, allowed_last_chars)


def is_valid_decimal_lon(text: str, *allowed_last_chars: str) -> bool:
    """Check that *text* is a decimal longitude in [-180, 180]."""
    return _is_valid_decimal_degrees(text, MAX_LONGITUDE, allowed_last_chars)


def _is_valid_decimal_degrees(text: str, boundary: float, allowed_last_chars: tuple[str, ...]) -> bool:
    trimmed = text.strip()
    if not trimmed:
        return False

    # Letters are only tolerated in the final position
    if any(ch.isalpha() for ch in trimmed[:-1]):
        return False

    last = trimmed[-1]
    if last in _DIGITS or last == ".":
        number = trimmed
    elif last in allowed_last_chars:
        number = trimmed[:-1]
    else:
        return False

    if DECIMAL_NUMBER.fullmatch(number) is None:
        logger.debug("Not a decimal number | text=%r", text)
        return False
    return -boundary <= float(number) <= boundary
