"""Geometry configuration loaded from environment variables.

All values have defaults matching the package constants, so a bare
``GeometryConfig()`` reproduces the library's standard behaviour.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from geodetic_core.core.constants import DEFAULT_ELLIPSOID, EPSILON, MAX_BOX_FLATTENING
from geodetic_core.core.exceptions import ValidationError

MAX_ROUND_OFF = 10


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_operation = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class GeometryConfig:
    """Immutable geometry configuration.

    Attributes:
        epsilon: Component tolerance for coordinate equality (degrees / metres).
        max_box_flattening: Minimum short/long side ratio for minimum bounding boxes.
        dms_round_off: Default fractional digits for DMS seconds.
        ddm_round_off: Default fractional digits for DDM minutes.
        ellipsoid: ``pyproj`` ellipsoid name for geodesic measurements.
    """

    epsilon: float = EPSILON
    max_box_flattening: float = MAX_BOX_FLATTENING
    dms_round_off: int = 2
    ddm_round_off: int = 4
    ellipsoid: str = DEFAULT_ELLIPSOID

    @classmethod
    def from_env(cls) -> GeometryConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or the ellipsoid name is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``GEODETIC_EPSILON=abc``).
        """
        config = cls(
            epsilon=float(os.getenv("GEODETIC_EPSILON", str(EPSILON))),
            max_box_flattening=float(os.getenv("GEODETIC_MAX_BOX_FLATTENING", str(MAX_BOX_FLATTENING))),
            dms_round_off=int(os.getenv("GEODETIC_DMS_ROUND_OFF", "2")),
            ddm_round_off=int(os.getenv("GEODETIC_DDM_ROUND_OFF", "4")),
            ellipsoid=os.getenv("GEODETIC_ELLIPSOID", DEFAULT_ELLIPSOID),
        )
        _validate(config)
        return config


def _validate(config: GeometryConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.epsilon <= 0:
        raise ConfigValidationError("GEODETIC_EPSILON", config.epsilon, "must be > 0")

    if not 0.0 <= config.max_box_flattening < 1.0:
        raise ConfigValidationError(
            "GEODETIC_MAX_BOX_FLATTENING",
            config.max_box_flattening,
            "must be >= 0 and < 1 (ratio)",
        )

    if not 0 <= config.dms_round_off <= MAX_ROUND_OFF:
        raise ConfigValidationError(
            "GEODETIC_DMS_ROUND_OFF",
            config.dms_round_off,
            f"must be between 0 and {MAX_ROUND_OFF} (digits)",
        )

    if not 0 <= config.ddm_round_off <= MAX_ROUND_OFF:
        raise ConfigValidationError(
            "GEODETIC_DDM_ROUND_OFF",
            config.ddm_round_off,
            f"must be between 0 and {MAX_ROUND_OFF} (digits)",
        )

    if not config.ellipsoid:
        raise ConfigValidationError("GEODETIC_ELLIPSOID", config.ellipsoid, "must not be empty")
