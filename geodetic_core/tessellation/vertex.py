"""Vertex types stored in tessellation blocks.

Defines the contract every vertex must satisfy so the builder can
deduplicate and re-centre it without knowing what it wraps.

Contract:
    1. Hashable, with equality consistent with the hash. Two vertices
       that compare equal are stored once.
    2. ``adjust_to_center(center)``: pure transform returning a new vertex
       expressed relative to *center*.
    3. ``components()``: flat float tuple for handing to a renderer.

Vertex equality here is exact (bit-for-bit components). The tolerance
based equality of ``Coordinate`` is deliberately not used, since a
vertex buffer must never merge two distinct inputs.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any

from geodetic_core.models.altitude import Altitude
from geodetic_core.models.coordinate import Coordinate


class Vertex(abc.ABC):
    """Abstract base class for tessellation vertices."""

    __slots__ = ()

    @abc.abstractmethod
    def adjust_to_center(self, center: Any) -> Vertex:
        """Return a copy of this vertex expressed relative to *center*."""

    @abc.abstractmethod
    def components(self) -> tuple[float, ...]:
        """Return the vertex as a flat tuple of floats."""


# ---------------------------------------------------------------------------
# Concrete vertices
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class GeographicVertex(Vertex):
    """Vertex wrapping a geographic coordinate.

    Components are ``(lon, lat, alt_m)``. Centering subtracts the centre
    coordinate's latitude, longitude and altitude; the reference level is
    kept.
    """

    coordinate: Coordinate

    def adjust_to_center(self, center: Coordinate) -> GeographicVertex:
        coord = self.coordinate
        altitude = Altitude(coord.alt_m - center.alt_m, coord.reference, coord.altitude.custom_id)
        return GeographicVertex(Coordinate(coord.lat_d - center.lat_d, coord.lon_d - center.lon_d, altitude))

    def components(self) -> tuple[float, ...]:
        return self.coordinate.as_vec3d()

    def _key(self) -> tuple[object, ...]:
        coord = self.coordinate
        return (coord.lat_d, coord.lon_d, coord.alt_m, coord.reference, coord.altitude.custom_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeographicVertex):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


@dataclass(frozen=True, slots=True)
class ModelVertex(Vertex):
    """Vertex in model (Cartesian) space. Centering subtracts an ``(x, y, z)`` origin."""

    x: float
    y: float
    z: float = 0.0

    def adjust_to_center(self, center: tuple[float, float, float]) -> ModelVertex:
        cx, cy, cz = center
        return ModelVertex(self.x - cx, self.y - cy, self.z - cz)

    def components(self) -> tuple[float, ...]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class TexturedVertex(Vertex):
    """Any vertex plus ``(u, v)`` texture coordinates.

    Centering moves the wrapped vertex only; texture coordinates are
    appended after its components.
    """

    vertex: Vertex
    u: float
    v: float

    def adjust_to_center(self, center: Any) -> TexturedVertex:
        return TexturedVertex(self.vertex.adjust_to_center(center), self.u, self.v)

    def components(self) -> tuple[float, ...]:
        return (*self.vertex.components(), self.u, self.v)
