"""Interleaved vertex and index byte buffer construction."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from baryquad.errors import LayoutError
from baryquad.models import FLOATS_PER_VERTEX, Vertex


@dataclass(frozen=True)
class ByteBuffer:
    """The single binary buffer: vertex records followed by the index list."""

    data: bytes
    index_offset: int  # start of the index region == vertex region length
    index_count: int

    @property
    def vertex_length(self) -> int:
        return self.index_offset

    @property
    def index_length(self) -> int:
        return len(self.data) - self.index_offset


def pack_vertices(vertices: Sequence[Vertex]) -> bytes:
    """Serialize vertices as tightly packed little-endian float32 records."""
    records = np.array([v.as_floats() for v in vertices], dtype="<f4")
    return records.reshape(len(vertices), FLOATS_PER_VERTEX).tobytes()


def pack_indices(indices: Sequence[int]) -> bytes:
    """Serialize triangle indices as little-endian uint16."""
    raw = np.asarray(indices, dtype=np.int64)
    if raw.size and (raw.min() < 0 or raw.max() > 0xFFFF):
        raise LayoutError(f"Index out of uint16 range: {list(indices)}")
    return raw.astype("<u2").tobytes()


def build_byte_buffer(vertices: Sequence[Vertex], indices: Sequence[int]) -> ByteBuffer:
    """Append the index region directly after the vertex region."""
    blob_data = bytearray(pack_vertices(vertices))
    index_offset = len(blob_data)
    blob_data.extend(pack_indices(indices))
    return ByteBuffer(data=bytes(blob_data), index_offset=index_offset, index_count=len(indices))
