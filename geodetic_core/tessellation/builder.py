"""Incremental builder that deduplicates tessera vertices.

The builder owns a plain ``dict`` from vertex to assigned index. It is a
single-writer accumulator: confine one builder to one thread, or guard it
externally.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from geodetic_core.core.exceptions import InvalidGeometryError, InvalidVertexCountError
from geodetic_core.tessellation.block import TessellationBlock
from geodetic_core.tessellation.vertex import Vertex

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger("geodetic_core.tessellation")

V = TypeVar("V", bound=Vertex)


class TessellationBuilder(Generic[V]):
    """Accumulate fixed-size tesserae into a shared vertex buffer.

    Vertices are looked up by value before centering. A vertex seen for
    the first time gets the next sequential index and is stored adjusted
    to *center*; a repeat only appends its existing index.

    Example usage::

        builder = TessellationBuilder(3)
        builder.add([a, b, c])
        builder.add([c, b, d])
        block = builder.build()   # 4 vertices, 6 indices

    Args:
        tessera_size: Vertices per tessera (3 for triangles).
        center: Optional origin passed to ``Vertex.adjust_to_center``.

    Raises:
        InvalidGeometryError: If *tessera_size* is not positive.
    """

    def __init__(self, tessera_size: int, center: Any = None) -> None:
        if tessera_size < 1:
            msg = f"Tessera size must be positive, got {tessera_size}"
            raise InvalidGeometryError(msg, operation="tessellation")
        self._tessera_size = tessera_size
        self._center = center
        self._lookup: dict[V, int] = {}
        self._vertices: list[V] = []
        self._indices: list[int] = []

    @property
    def tessera_size(self) -> int:
        return self._tessera_size

    @property
    def center(self) -> Any:
        return self._center

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def index_count(self) -> int:
        return len(self._indices)

    @property
    def tessera_count(self) -> int:
        return len(self._indices) // self._tessera_size

    def add(self, vertices: Sequence[V]) -> None:
        """Add one tessera.

        Raises:
            InvalidVertexCountError: If ``len(vertices)`` differs from the
                configured tessera size. The builder is left unchanged.
        """
        if len(vertices) != self._tessera_size:
            raise InvalidVertexCountError(self._tessera_size, len(vertices), operation="tessellation")

        for vertex in vertices:
            index = self._lookup.get(vertex)
            if index is None:
                index = len(self._vertices)
                self._lookup[vertex] = index
                stored = vertex if self._center is None else vertex.adjust_to_center(self._center)
                self._vertices.append(stored)
            self._indices.append(index)

    def add_all(self, tesserae: Iterable[Sequence[V]]) -> None:
        """Add several tesserae in order; stops at the first wrongly sized one."""
        for tessera in tesserae:
            self.add(tessera)

    def build(self) -> TessellationBlock[V]:
        """Freeze the accumulated buffers into an immutable block.

        The builder stays usable; later additions do not affect blocks
        already built.
        """
        block: TessellationBlock[V] = TessellationBlock(
            tuple(self._vertices),
            tuple(self._indices),
            self._tessera_size,
        )
        logger.info(
            "Tessellation built | tesserae=%d | vertices=%d | indices=%d",
            block.tessera_count,
            len(block.vertices),
            len(block.indices),
        )
        return block
