"""Tests for the tessellation builder and block.

Covers:
- Vertex deduplication across tesserae
- Wrong tessera sizes rejected before any mutation
- Centering applied to stored vertices only, lookup by original value
- Block invariants (index range, whole tesserae)
- numpy buffer export
- Vertex types: geographic, model and textured
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from geodetic_core.core.exceptions import InvalidGeometryError, InvalidVertexCountError
from geodetic_core.models.altitude import ReferenceLevel
from geodetic_core.models.coordinate import Coordinate
from geodetic_core.tessellation import (
    GeographicVertex,
    ModelVertex,
    TessellationBlock,
    TessellationBuilder,
    TexturedVertex,
)


def _geo(lat: float, lon: float, alt: float = 0.0) -> GeographicVertex:
    return GeographicVertex(Coordinate.from_degrees_meters(lat, lon, alt, ReferenceLevel.TERRAIN))


# ===========================================================================
# Builder
# ===========================================================================


class TestTessellationBuilder:
    """Incremental accumulation with deduplication."""

    def test_two_triangles_share_an_edge(self) -> None:
        a, b, c, d = ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(1, 1), ModelVertex(0, 1)
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(3)
        builder.add([a, b, c])
        builder.add([a, c, d])
        block = builder.build()

        assert block.vertices == (a, b, c, d)
        assert block.indices == (0, 1, 2, 0, 2, 3)
        assert block.tessera_count == 2

    def test_counts(self) -> None:
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(3)
        builder.add([ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(0, 0)])
        assert builder.vertex_count == 2
        assert builder.index_count == 3
        assert builder.tessera_count == 1

    def test_empty_build(self) -> None:
        block = TessellationBuilder(3).build()
        assert block.vertices == ()
        assert block.indices == ()
        assert block.tessera_count == 0

    def test_wrong_size_leaves_builder_unchanged(self) -> None:
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(3)
        builder.add([ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(1, 1)])
        with pytest.raises(InvalidVertexCountError) as exc_info:
            builder.add([ModelVertex(5, 5), ModelVertex(6, 6)])

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        assert exc_info.value.operation == "tessellation"
        assert builder.vertex_count == 3
        assert builder.index_count == 3

    def test_wrong_size_is_a_value_error(self) -> None:
        with pytest.raises(ValueError, match="Expected 4 vertices, got 3"):
            TessellationBuilder(4).add([ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(1, 1)])

    @pytest.mark.parametrize("size", [0, -3])
    def test_non_positive_size_rejected(self, size: int) -> None:
        with pytest.raises(InvalidGeometryError, match="Tessera size must be positive") as exc_info:
            TessellationBuilder(size)
        assert exc_info.value.operation == "tessellation"

    def test_builder_and_block_reject_size_alike(self) -> None:
        with pytest.raises(InvalidGeometryError) as from_builder:
            TessellationBuilder(0)
        with pytest.raises(InvalidGeometryError) as from_block:
            TessellationBlock(vertices=(), indices=(), tessera_size=0)
        assert from_builder.value.code == from_block.value.code == "INVALID_GEOMETRY"

    def test_add_all(self) -> None:
        a, b, c, d = ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(1, 1), ModelVertex(0, 1)
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(2)
        builder.add_all([[a, b], [b, c], [c, d], [d, a]])
        assert builder.build().indices == (0, 1, 1, 2, 2, 3, 3, 0)

    def test_built_block_is_a_snapshot(self) -> None:
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(1)
        builder.add([ModelVertex(0, 0)])
        first = builder.build()
        builder.add([ModelVertex(1, 1)])
        assert len(first.vertices) == 1
        assert len(builder.build().vertices) == 2

    def test_build_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(3)
        builder.add([ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(1, 1)])
        with caplog.at_level(logging.INFO, logger="geodetic_core.tessellation"):
            builder.build()
        assert "Tessellation built" in caplog.text
        assert "vertices=3" in caplog.text


class TestCentering:
    """Vertices stored relative to the builder's centre."""

    def test_model_vertices_centred(self) -> None:
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(3, center=(10.0, 20.0, 0.0))
        builder.add([ModelVertex(10, 20), ModelVertex(11, 20), ModelVertex(10, 21)])
        block = builder.build()
        assert block.vertices == (ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(0, 1))

    def test_dedup_uses_original_value(self) -> None:
        builder: TessellationBuilder[ModelVertex] = TessellationBuilder(1, center=(1.0, 1.0, 0.0))
        builder.add([ModelVertex(1, 1)])
        # Equal to the stored (centred) vertex but not to the original input
        builder.add([ModelVertex(0, 0)])
        builder.add([ModelVertex(1, 1)])
        block = builder.build()
        assert block.indices == (0, 1, 0)
        assert len(block.vertices) == 2

    def test_geographic_vertices_centred(self) -> None:
        center = Coordinate.from_degrees_meters(10.0, 20.0, 100.0, ReferenceLevel.TERRAIN)
        builder: TessellationBuilder[GeographicVertex] = TessellationBuilder(1, center=center)
        builder.add([_geo(11.0, 22.0, 150.0)])
        stored = builder.build().vertices[0]
        assert stored.components() == pytest.approx((2.0, 1.0, 50.0))
        assert stored.coordinate.reference is ReferenceLevel.TERRAIN


# ===========================================================================
# Block
# ===========================================================================


class TestTessellationBlock:
    """Direct construction and invariants."""

    def test_tesserae(self) -> None:
        a, b, c, d = ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(1, 1), ModelVertex(0, 1)
        block = TessellationBlock((a, b, c, d), (0, 1, 2, 0, 2, 3), 3)
        assert list(block.tesserae()) == [(a, b, c), (a, c, d)]

    def test_accepts_lists(self) -> None:
        block = TessellationBlock([ModelVertex(0, 0)], [0], 1)
        assert block.vertices == (ModelVertex(0, 0),)
        assert block.indices == (0,)

    def test_partial_tessera_rejected(self) -> None:
        with pytest.raises(InvalidVertexCountError) as exc_info:
            TessellationBlock((ModelVertex(0, 0), ModelVertex(1, 0)), (0, 1, 0, 1), 3)
        assert exc_info.value.expected == 6
        assert exc_info.value.actual == 4

    def test_index_out_of_range(self) -> None:
        with pytest.raises(InvalidGeometryError, match="Index 5 out of range for 2 vertices"):
            TessellationBlock((ModelVertex(0, 0), ModelVertex(1, 0)), (0, 1, 5), 3)

    def test_negative_index(self) -> None:
        with pytest.raises(InvalidGeometryError, match="out of range"):
            TessellationBlock((ModelVertex(0, 0),), (-1,), 1)

    def test_non_positive_size(self) -> None:
        with pytest.raises(InvalidGeometryError, match="positive"):
            TessellationBlock((), (), 0)

    def test_is_frozen(self) -> None:
        block = TessellationBlock((), (), 3)
        with pytest.raises(AttributeError):
            block.tessera_size = 4  # type: ignore[misc]


class TestNumpyExport:
    """Render buffers."""

    def test_index_array(self) -> None:
        block = TessellationBlock((ModelVertex(0, 0), ModelVertex(1, 0), ModelVertex(1, 1)), (0, 1, 2), 3)
        indices = block.index_array()
        assert indices.dtype == np.uint32
        np.testing.assert_array_equal(indices, [0, 1, 2])

    def test_vertex_array(self) -> None:
        block = TessellationBlock((ModelVertex(0, 0, 1), ModelVertex(1, 2, 3)), (0, 1), 2)
        array = block.vertex_array()
        assert array.dtype == np.float64
        assert array.shape == (2, 3)
        np.testing.assert_allclose(array[1], [1.0, 2.0, 3.0])

    def test_empty_vertex_array(self) -> None:
        assert TessellationBlock((), (), 3).vertex_array().shape == (0, 0)

    def test_geographic_vertex_array_is_lon_lat_alt(self) -> None:
        block = TessellationBlock((_geo(10.0, 20.0, 5.0),), (0,), 1)
        np.testing.assert_allclose(block.vertex_array(), [[20.0, 10.0, 5.0]])


# ===========================================================================
# Vertex types
# ===========================================================================


class TestVertexTypes:
    """Equality, hashing and components of each vertex type."""

    def test_geographic_equality_is_exact(self) -> None:
        a = _geo(10.0, 20.0)
        b = _geo(10.0 + 1e-13, 20.0)
        # Coordinates compare equal within tolerance; vertices must not
        assert a.coordinate == b.coordinate
        assert a != b
        assert a == _geo(10.0, 20.0)
        assert hash(a) == hash(_geo(10.0, 20.0))

    def test_geographic_reference_distinguishes(self) -> None:
        a = _geo(10.0, 20.0)
        b = GeographicVertex(Coordinate.from_degrees(10.0, 20.0, ReferenceLevel.ELLIPSOID))
        assert a != b

    def test_model_vertex_default_z(self) -> None:
        assert ModelVertex(1.0, 2.0).components() == (1.0, 2.0, 0.0)

    def test_textured_components(self) -> None:
        vertex = TexturedVertex(ModelVertex(1.0, 2.0, 3.0), 0.25, 0.75)
        assert vertex.components() == (1.0, 2.0, 3.0, 0.25, 0.75)

    def test_textured_centering_keeps_uv(self) -> None:
        vertex = TexturedVertex(ModelVertex(1.0, 2.0, 3.0), 0.25, 0.75)
        moved = vertex.adjust_to_center((1.0, 1.0, 1.0))
        assert moved == TexturedVertex(ModelVertex(0.0, 1.0, 2.0), 0.25, 0.75)

    def test_textured_dedup(self) -> None:
        builder: TessellationBuilder[TexturedVertex] = TessellationBuilder(2)
        builder.add([TexturedVertex(ModelVertex(0, 0), 0, 0), TexturedVertex(ModelVertex(0, 0), 0, 0)])
        assert builder.vertex_count == 1
