"""Read-back diagnostics: decode every accessor of a GLB produced by baryquad."""

from __future__ import annotations

import numpy as np

from baryquad.container import GlbContents, read_glb
from baryquad.errors import ContainerError

_COMPONENT_DTYPES: dict[int, str] = {
    5120: "i1",
    5121: "u1",
    5122: "<i2",
    5123: "<u2",
    5125: "<u4",
    5126: "<f4",
}

_TYPE_ARITY: dict[str, int] = {"SCALAR": 1, "VEC2": 2, "VEC3": 3, "VEC4": 4}


def decode_accessor(contents: GlbContents, accessor_index: int) -> np.ndarray:
    """Decode one accessor into a ``(count, arity)`` array, honouring byteStride."""
    document = contents.document
    accessors = document.get("accessors", [])
    if not 0 <= accessor_index < len(accessors):
        raise ContainerError(f"Accessor index out of range: {accessor_index}")
    accessor = accessors[accessor_index]

    dtype = _COMPONENT_DTYPES.get(accessor.get("componentType"))
    arity = _TYPE_ARITY.get(accessor.get("type"))
    if dtype is None or arity is None:
        raise ContainerError(
            f"Accessor {accessor_index}: unsupported {accessor.get('componentType')}/"
            f"{accessor.get('type')}"
        )

    buffer_view = document["bufferViews"][accessor["bufferView"]]
    component_size = np.dtype(dtype).itemsize
    element_size = component_size * arity
    stride = buffer_view.get("byteStride", element_size)
    count = accessor["count"]

    base = buffer_view.get("byteOffset", 0) + accessor.get("byteOffset", 0)
    view_end = buffer_view.get("byteOffset", 0) + buffer_view["byteLength"]
    if count and base + stride * (count - 1) + element_size > min(view_end, len(contents.bin_chunk)):
        raise ContainerError(f"Accessor {accessor_index} points outside its buffer view")

    values = np.ndarray(
        shape=(count, arity),
        dtype=dtype,
        buffer=contents.bin_chunk,
        offset=base,
        strides=(stride, component_size),
    )
    return values.copy()


def inspect_glb(data: bytes) -> dict[str, object]:
    """Parse ``data`` and return a deterministic description of its layout and values."""
    contents = read_glb(data)
    document = contents.document

    accessors: list[dict[str, object]] = []
    for idx, acc in enumerate(document.get("accessors", [])):
        entry: dict[str, object] = {
            "index": idx,
            "bufferView": acc.get("bufferView"),
            "byteOffset": acc.get("byteOffset", 0),
            "type": acc.get("type"),
            "componentType": acc.get("componentType"),
            "count": acc.get("count"),
            "values": decode_accessor(contents, idx).tolist(),
        }
        if "min" in acc:
            entry["min"] = acc["min"]
            entry["max"] = acc["max"]
        accessors.append(entry)

    primitives = [
        {
            "mesh": mesh_idx,
            "attributes": prim.get("attributes", {}),
            "indices": prim.get("indices"),
            "mode": prim.get("mode", 4),
        }
        for mesh_idx, mesh in enumerate(document.get("meshes", []))
        for prim in mesh.get("primitives", [])
    ]

    return {
        "header": {"version": contents.version, "length": contents.length},
        "bin_length": len(contents.bin_chunk),
        "bufferViews": document.get("bufferViews", []),
        "accessors": accessors,
        "primitives": primitives,
    }


def render_text(payload: dict[str, object]) -> str:
    """Render human-readable text output for an inspected GLB."""
    lines: list[str] = []

    header = payload["header"]
    lines.append(f"glb_version: {header['version']}")
    lines.append(f"length: {header['length']}")
    lines.append(f"bin_length: {payload['bin_length']}")

    lines.append("bufferViews:")
    for idx, bv in enumerate(payload["bufferViews"]):
        stride = bv.get("byteStride")
        lines.append(
            f"  - [{idx}] offset={bv.get('byteOffset', 0)} length={bv['byteLength']}"
            + (f" stride={stride}" if stride is not None else "")
        )

    lines.append("accessors:")
    for acc in payload["accessors"]:
        lines.append(
            f"  - [{acc['index']}] view={acc['bufferView']} offset={acc['byteOffset']} "
            f"{acc['type']} x{acc['count']}"
        )
        if "min" in acc:
            lines.append(f"    min: {_fmt_vec(acc['min'])}")
            lines.append(f"    max: {_fmt_vec(acc['max'])}")
        for row in acc["values"]:
            lines.append(f"    {_fmt_vec(row)}")

    lines.append("primitives:")
    for prim in payload["primitives"]:
        attrs = ", ".join(f"{name}={idx}" for name, idx in sorted(prim["attributes"].items()))
        lines.append(f"  - mesh={prim['mesh']} mode={prim['mode']} indices={prim['indices']}")
        lines.append(f"    attributes: {attrs}")

    return "\n".join(lines) + "\n"


def _fmt_vec(vec: object) -> str:
    if not isinstance(vec, list):
        return str(vec)
    return "[" + ", ".join(f"{float(v):.6g}" for v in vec) + "]"
