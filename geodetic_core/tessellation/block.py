"""Immutable tessellation block: shared vertices plus an index buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

import numpy as np

from geodetic_core.core.exceptions import InvalidGeometryError, InvalidVertexCountError
from geodetic_core.tessellation.vertex import Vertex

if TYPE_CHECKING:
    from collections.abc import Iterator

V = TypeVar("V", bound=Vertex)


@dataclass(frozen=True, slots=True)
class TessellationBlock(Generic[V]):
    """Render-ready mesh of fixed-size tesserae (triangles, quads, ...).

    Each vertex is stored once; ``indices`` refers to positions in
    ``vertices``, ``tessera_size`` entries per tessera.

    Attributes:
        vertices: Deduplicated vertices in first-seen order.
        indices: Flat index buffer.
        tessera_size: Vertices per tessera.

    Raises:
        InvalidVertexCountError: If the index buffer is not a whole number
            of tesserae.
        InvalidGeometryError: If the tessera size is not positive or an
            index does not reference a stored vertex.
    """

    vertices: tuple[V, ...]
    indices: tuple[int, ...]
    tessera_size: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", tuple(self.vertices))
        object.__setattr__(self, "indices", tuple(self.indices))

        if self.tessera_size < 1:
            msg = f"Tessera size must be positive, got {self.tessera_size}"
            raise InvalidGeometryError(msg, operation="tessellation")

        remainder = len(self.indices) % self.tessera_size
        if remainder:
            expected = len(self.indices) - remainder + self.tessera_size
            raise InvalidVertexCountError(expected, len(self.indices), operation="tessellation")

        count = len(self.vertices)
        bad = [i for i in self.indices if not 0 <= i < count]
        if bad:
            msg = f"Index {bad[0]} out of range for {count} vertices"
            raise InvalidGeometryError(msg, operation="tessellation")

    @property
    def tessera_count(self) -> int:
        return len(self.indices) // self.tessera_size

    def tesserae(self) -> Iterator[tuple[V, ...]]:
        """Yield each tessera as a tuple of its vertices."""
        size = self.tessera_size
        for start in range(0, len(self.indices), size):
            yield tuple(self.vertices[i] for i in self.indices[start : start + size])

    def index_array(self) -> np.ndarray:
        """Index buffer as a flat ``uint32`` array."""
        return np.asarray(self.indices, dtype=np.uint32)

    def vertex_array(self) -> np.ndarray:
        """Vertex buffer as a ``float64`` array with one row of components per vertex."""
        if not self.vertices:
            return np.empty((0, 0), dtype=np.float64)
        return np.array([v.components() for v in self.vertices], dtype=np.float64)
