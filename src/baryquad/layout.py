"""glTF document layout: buffer views, accessors, primitive and mesh via pygltflib."""

from __future__ import annotations

from typing import TypeVar

import numpy as np
import pygltflib

from baryquad.buffers import ByteBuffer
from baryquad.errors import LayoutError
from baryquad.models import (
    BARYCENTRIC_OFFSET,
    BARYCENTRIC_SEMANTIC,
    COLOR_OFFSET,
    FLOATS_PER_VERTEX,
    POSITION_OFFSET,
    VERTEX_STRIDE,
)

T = TypeVar("T")

COMPONENT_SIZES: dict[int, int] = {
    pygltflib.BYTE: 1,
    pygltflib.UNSIGNED_BYTE: 1,
    pygltflib.SHORT: 2,
    pygltflib.UNSIGNED_SHORT: 2,
    pygltflib.UNSIGNED_INT: 4,
    pygltflib.FLOAT: 4,
}

TYPE_ARITY: dict[str, int] = {
    pygltflib.SCALAR: 1,
    pygltflib.VEC2: 2,
    pygltflib.VEC3: 3,
    pygltflib.VEC4: 4,
}


def append_index(items: list[T], item: T) -> int:
    """Append ``item`` and return its stable index in ``items``."""
    index = len(items)
    items.append(item)
    return index


def build_document(buffer: ByteBuffer) -> pygltflib.GLTF2:
    """Describe the interleaved vertex region and the index region of ``buffer``."""
    gltf = pygltflib.GLTF2(
        scene=0,
        scenes=[],
        nodes=[],
        meshes=[],
        accessors=[],
        bufferViews=[],
        buffers=[],
    )

    attr_bv_idx = append_index(
        gltf.bufferViews,
        pygltflib.BufferView(
            buffer=0,
            byteOffset=0,
            byteLength=buffer.vertex_length,
            byteStride=VERTEX_STRIDE,
            target=pygltflib.ARRAY_BUFFER,
        ),
    )
    idx_bv_idx = append_index(
        gltf.bufferViews,
        pygltflib.BufferView(
            buffer=0,
            byteOffset=buffer.index_offset,
            byteLength=buffer.index_length,
            target=pygltflib.ELEMENT_ARRAY_BUFFER,
        ),
    )

    records = np.frombuffer(buffer.data, dtype="<f4", count=buffer.vertex_length // 4)
    records = records.reshape(-1, FLOATS_PER_VERTEX)
    vertex_count = len(records)
    if vertex_count == 0:
        raise LayoutError("Cannot lay out an empty vertex buffer")
    positions = records[:, 0:3]

    pos_acc_idx = append_index(
        gltf.accessors,
        pygltflib.Accessor(
            bufferView=attr_bv_idx,
            byteOffset=POSITION_OFFSET,
            componentType=pygltflib.FLOAT,
            count=vertex_count,
            type=pygltflib.VEC3,
            max=positions.max(axis=0).tolist(),
            min=positions.min(axis=0).tolist(),
        ),
    )
    color_acc_idx = append_index(
        gltf.accessors,
        pygltflib.Accessor(
            bufferView=attr_bv_idx,
            byteOffset=COLOR_OFFSET,
            componentType=pygltflib.FLOAT,
            count=vertex_count,
            type=pygltflib.VEC4,
        ),
    )
    bary_acc_idx = append_index(
        gltf.accessors,
        pygltflib.Accessor(
            bufferView=attr_bv_idx,
            byteOffset=BARYCENTRIC_OFFSET,
            componentType=pygltflib.FLOAT,
            count=vertex_count,
            type=pygltflib.VEC3,
        ),
    )
    idx_acc_idx = append_index(
        gltf.accessors,
        pygltflib.Accessor(
            bufferView=idx_bv_idx,
            byteOffset=0,
            componentType=pygltflib.UNSIGNED_SHORT,
            count=buffer.index_count,
            type=pygltflib.SCALAR,
        ),
    )

    gltf_prim = pygltflib.Primitive(
        attributes=pygltflib.Attributes(
            POSITION=pos_acc_idx,
            COLOR_0=color_acc_idx,
            **{BARYCENTRIC_SEMANTIC: bary_acc_idx},
        ),
        indices=idx_acc_idx,
        mode=pygltflib.TRIANGLES,
    )
    mesh_idx = append_index(gltf.meshes, pygltflib.Mesh(name="quad", primitives=[gltf_prim]))
    node_idx = append_index(gltf.nodes, pygltflib.Node(name="quad", mesh=mesh_idx))
    append_index(gltf.scenes, pygltflib.Scene(nodes=[node_idx]))

    # GLB-embedded buffer: no uri
    append_index(gltf.buffers, pygltflib.Buffer(byteLength=len(buffer.data)))

    check_bounds(gltf, len(buffer.data))
    return gltf


def check_bounds(gltf: pygltflib.GLTF2, buffer_length: int) -> None:
    """Reject any view or accessor that reaches outside its byte range.

    Also checks that every accessor the primitive references exists and that
    per-vertex attributes agree on the vertex count.

    Raises:
        LayoutError: On the first violated bound.
    """
    for buf_idx, buf in enumerate(gltf.buffers):
        if buf.byteLength != buffer_length:
            raise LayoutError(
                f"Buffer {buf_idx} declares {buf.byteLength} bytes, blob has {buffer_length}"
            )

    for bv_idx, bv in enumerate(gltf.bufferViews):
        offset = bv.byteOffset or 0
        if offset < 0 or bv.byteLength < 0:
            raise LayoutError(f"Buffer view {bv_idx} has a negative offset or length")
        if offset + bv.byteLength > buffer_length:
            raise LayoutError(
                f"Buffer view {bv_idx} spans [{offset}, {offset + bv.byteLength}) "
                f"past buffer length {buffer_length}"
            )

    for acc_idx, acc in enumerate(gltf.accessors):
        if acc.bufferView is None or not 0 <= acc.bufferView < len(gltf.bufferViews):
            raise LayoutError(f"Accessor {acc_idx} references missing buffer view {acc.bufferView}")
        bv = gltf.bufferViews[acc.bufferView]
        element_size = COMPONENT_SIZES[acc.componentType] * TYPE_ARITY[acc.type]
        byte_offset = acc.byteOffset or 0
        end = byte_offset + element_size * acc.count
        if end > bv.byteLength:
            raise LayoutError(
                f"Accessor {acc_idx} needs {end} bytes, buffer view {acc.bufferView} "
                f"holds {bv.byteLength}"
            )
        if bv.byteStride is not None and acc.count > 0:
            if bv.byteStride < element_size:
                raise LayoutError(
                    f"Buffer view {acc.bufferView} stride {bv.byteStride} is smaller than "
                    f"accessor {acc_idx} element size {element_size}"
                )
            strided_end = byte_offset + bv.byteStride * (acc.count - 1) + element_size
            if strided_end > bv.byteLength:
                raise LayoutError(
                    f"Accessor {acc_idx} last element ends at {strided_end}, buffer view "
                    f"{acc.bufferView} holds {bv.byteLength}"
                )

    for mesh in gltf.meshes:
        for prim in mesh.primitives:
            attrs = {
                name: idx
                for name, idx in vars(prim.attributes).items()
                if isinstance(idx, int)
            }
            counts = set()
            for name, idx in attrs.items():
                if not 0 <= idx < len(gltf.accessors):
                    raise LayoutError(f"Attribute {name} references missing accessor {idx}")
                counts.add(gltf.accessors[idx].count)
            if len(counts) > 1:
                raise LayoutError(f"Per-vertex attributes disagree on vertex count: {sorted(counts)}")
            if prim.indices is not None and not 0 <= prim.indices < len(gltf.accessors):
                raise LayoutError(f"Primitive references missing index accessor {prim.indices}")
