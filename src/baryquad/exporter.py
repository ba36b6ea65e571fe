"""Straight-line GLB build pipeline and the terminal file write."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from baryquad.buffers import build_byte_buffer
from baryquad.container import Container, assemble_glb
from baryquad.errors import BaryquadError, ExportError
from baryquad.layout import build_document
from baryquad.models import QUAD_INDICES, QUAD_VERTICES, Vertex

DEFAULT_OUTPUT = Path("barycentric.glb")


def build_quad_glb(
    vertices: Sequence[Vertex] = QUAD_VERTICES,
    indices: Sequence[int] = QUAD_INDICES,
) -> Container:
    """Build the GLB container in memory.

    Pipeline: pack vertices + indices -> lay out views/accessors -> frame GLB.
    """
    buffer = build_byte_buffer(vertices, indices)
    gltf = build_document(buffer)
    return assemble_glb(gltf, buffer.data)


def export_glb(output_path: Path = DEFAULT_OUTPUT) -> Container:
    """Build the quad and write it to ``output_path``; returns the container written."""
    try:
        container = build_quad_glb()
        output_path.write_bytes(container.to_bytes())
    except Exception as e:
        if isinstance(e, BaryquadError):
            raise
        raise ExportError(f"Failed to export GLB: {e}") from e
    return container
