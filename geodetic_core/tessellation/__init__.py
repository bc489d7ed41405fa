"""Deduplicated vertex/index tessellation for handing geometry to a renderer."""

from __future__ import annotations

from geodetic_core.tessellation.block import TessellationBlock
from geodetic_core.tessellation.builder import TessellationBuilder
from geodetic_core.tessellation.vertex import GeographicVertex, ModelVertex, TexturedVertex, Vertex

__all__ = [
    "GeographicVertex",
    "ModelVertex",
    "TessellationBlock",
    "TessellationBuilder",
    "TexturedVertex",
    "Vertex",
]
