"""Geodetic exception taxonomy.

Every structural failure raised by the package inherits from
``GeodeticError`` and carries the operation and a machine-readable code,
so callers can log or report failures consistently.

Taxonomy categories
-------------------
- ``ValidationError``: caller supplied values that break an invariant
  (mismatched reference levels, wrong vertex counts, non-convex input).

Parse failures are deliberately absent: coordinate text that cannot be
understood is an expected outcome and is reported as ``NaN`` or ``None``.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from geodetic_core.models.altitude import Altitude


class GeodeticError(Exception):
    """Base exception for all geodetic-domain errors.

    Attributes:
        message: Human-readable error description.
        operation: Operation where the error occurred
            (e.g. ``"interpolate"``, ``"tessellation"``).
        code: Machine-readable error code (e.g. ``"INCOMPATIBLE_REFERENCE_LEVEL"``).
    """

    #: Default operation for subclasses (override via class attribute or kwarg).
    default_operation: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        operation: str = "",
        code: str = "",
    ) -> None:
        self.message = message
        self.operation = operation or self.default_operation
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        return "internal"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "operation": self.operation,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(GeodeticError):
    """Caller broke a structural invariant. Indicates a logic bug upstream."""

    default_code = "VALIDATION_FAILED"


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class IncompatibleReferenceLevelError(ValueError, ValidationError):
    """Raised when values measured against different altitude references are combined.

    Attributes:
        first: Altitude (or reference description) of the first operand.
        second: Altitude (or reference description) of the second operand.
    """

    default_code = "INCOMPATIBLE_REFERENCE_LEVEL"

    def __init__(self, first: Altitude | object, second: Altitude | object, *, operation: str = "") -> None:
        self.first = first
        self.second = second
        formatted = f"Altitude reference levels do not match: {first!r} vs {second!r}"
        ValidationError.__init__(self, formatted, operation=operation)


class InvalidVertexCountError(ValueError, ValidationError):
    """Raised when a fixed-arity shape receives the wrong number of vertices.

    Attributes:
        expected: Number of vertices the shape requires.
        actual: Number of vertices supplied.
    """

    default_code = "INVALID_VERTEX_COUNT"

    def __init__(self, expected: int, actual: int, *, operation: str = "") -> None:
        self.expected = expected
        self.actual = actual
        formatted = f"Expected {expected} vertices, got {actual}"
        ValidationError.__init__(self, formatted, operation=operation)


class InvalidGeometryError(ValueError, ValidationError):
    """Raised when a vertex set cannot represent the requested shape."""

    default_code = "INVALID_GEOMETRY"

    def __init__(self, message: str = "", *, operation: str = "") -> None:
        ValidationError.__init__(self, message, operation=operation)
