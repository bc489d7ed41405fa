"""Altitude value type.

An altitude is a magnitude in metres measured against a reference level.
Reference levels are a single enum plus an optional identifier for custom
origins; there are no per-reference or zero/non-zero subtypes.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from geodetic_core.core.constants import METRES_PER_KILOMETRE


class ReferenceLevel(enum.Enum):
    """Vertical datum an altitude is measured against.

    Values:
        ELLIPSOID: Height above the WGS 84 ellipsoid surface.
        TERRAIN:   Height above local terrain.
        ORIGIN:    Distance from the model origin (centre of the earth).
        CUSTOM:    Caller-defined datum, distinguished by ``Altitude.custom_id``.
    """

    ELLIPSOID = "ellipsoid"
    TERRAIN = "terrain"
    ORIGIN = "origin"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Altitude:
    """A height in metres relative to a reference level.

    ``NaN`` magnitudes are stored as ``0.0``.

    Attributes:
        meters: Magnitude in metres.
        reference: Reference level the magnitude is measured against.
        custom_id: Identifier of a custom datum (only meaningful with
            ``ReferenceLevel.CUSTOM``).
    """

    meters: float = 0.0
    reference: ReferenceLevel = ReferenceLevel.TERRAIN
    custom_id: str = ""

    def __post_init__(self) -> None:
        if math.isnan(self.meters):
            object.__setattr__(self, "meters", 0.0)

    @classmethod
    def from_km(cls, km: float, reference: ReferenceLevel = ReferenceLevel.TERRAIN) -> Altitude:
        """Create an altitude from a magnitude in kilometres."""
        return cls(km * METRES_PER_KILOMETRE, reference)

    @property
    def km(self) -> float:
        """Magnitude in kilometres."""
        return self.meters / METRES_PER_KILOMETRE

    @property
    def is_zero(self) -> bool:
        return self.meters == 0.0

    def same_reference(self, other: Altitude) -> bool:
        """Whether *other* is measured against the same datum."""
        return self.reference is other.reference and self.custom_id == other.custom_id

    def with_reference(self, reference: ReferenceLevel, custom_id: str = "") -> Altitude:
        """Reinterpret the same magnitude under another reference level.

        This is a representational change, not a vertical datum transform.
        """
        if self.reference is reference and self.custom_id == custom_id:
            return self
        return Altitude(self.meters, reference, custom_id)

    def describe_reference(self) -> str:
        """Reference level label, including the custom id when present."""
        if self.reference is ReferenceLevel.CUSTOM and self.custom_id:
            return f"{self.reference.value}:{self.custom_id}"
        return self.reference.value
