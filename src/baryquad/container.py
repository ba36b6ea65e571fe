"""GLB 2.0 container framing: document serialization, assembly and read-back."""

from __future__ import annotations

import json
import struct
from dataclasses import dataclass
from typing import Any

import pygltflib

from baryquad.diagnostics import emit_warning
from baryquad.errors import ContainerError, ExportError

GLB_MAGIC = b"glTF"
GLB_VERSION = 2

CHUNK_TYPE_JSON = 0x4E4F534A  # b"JSON"
CHUNK_TYPE_BIN = 0x004E4942  # b"BIN\0"

HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8


@dataclass(frozen=True)
class Container:
    """An assembled GLB: header length plus the padded JSON and BIN payloads."""

    document_bytes: bytes
    buffer_bytes: bytes

    @property
    def payload_length(self) -> int:
        return len(self.document_bytes) + len(self.buffer_bytes)

    @property
    def length(self) -> int:
        """Header length field: the whole file, framing included."""
        return HEADER_SIZE + 2 * CHUNK_HEADER_SIZE + self.payload_length

    def to_bytes(self) -> bytes:
        out = bytearray()
        out += struct.pack("<4sII", GLB_MAGIC, GLB_VERSION, self.length)
        out += struct.pack("<II", len(self.document_bytes), CHUNK_TYPE_JSON)
        out += self.document_bytes
        out += struct.pack("<II", len(self.buffer_bytes), CHUNK_TYPE_BIN)
        out += self.buffer_bytes
        return bytes(out)


@dataclass(frozen=True)
class GlbContents:
    """A parsed GLB byte stream."""

    version: int
    length: int
    document: dict[str, Any]
    bin_chunk: bytes


def _pad4(data: bytes, fill: bytes) -> bytes:
    padding_needed = (4 - len(data) % 4) % 4
    return data + fill * padding_needed


def serialize_document(gltf: pygltflib.GLTF2) -> bytes:
    """Serialize the document to compact JSON bytes (unpadded).

    Raises:
        ExportError: If pygltflib fails to encode the document.
    """
    try:
        return gltf.to_json(separators=(",", ":")).encode("utf-8")
    except Exception as e:
        raise ExportError(f"Failed to serialize glTF document: {e}") from e


def assemble_glb(gltf: pygltflib.GLTF2, blob: bytes) -> Container:
    """Frame the serialized document and ``blob`` as a GLB 2.0 container.

    The JSON chunk is padded with spaces and the BIN chunk with zeros to
    4-byte boundaries.
    """
    json_bytes = serialize_document(gltf)
    if len(blob) % 4:
        emit_warning(
            "W01",
            f"Binary buffer length {len(blob)} is not 4-byte aligned; BIN chunk padded",
        )
    return Container(
        document_bytes=_pad4(json_bytes, b"\x20"),
        buffer_bytes=_pad4(blob, b"\x00"),
    )


def read_glb(data: bytes) -> GlbContents:
    """Parse a GLB byte stream into its document and BIN chunk.

    Raises:
        ContainerError: On bad magic, version, length or chunk structure.
    """
    if len(data) < HEADER_SIZE:
        raise ContainerError("Invalid GLB: file too small")

    magic, version, total_length = struct.unpack_from("<4sII", data, 0)
    if magic != GLB_MAGIC:
        raise ContainerError(f"Invalid GLB: bad magic {magic!r}")
    if version != GLB_VERSION:
        raise ContainerError(f"Unsupported GLB version: {version} (expected {GLB_VERSION})")
    if total_length != len(data):
        raise ContainerError(
            f"Invalid GLB: header length {total_length} does not match {len(data)} bytes"
        )

    json_chunk: bytes | None = None
    bin_chunk: bytes | None = None

    offset = HEADER_SIZE
    while offset < total_length:
        if offset + CHUNK_HEADER_SIZE > total_length:
            raise ContainerError("Invalid GLB: truncated chunk header")
        chunk_length, chunk_type = struct.unpack_from("<II", data, offset)
        offset += CHUNK_HEADER_SIZE
        if offset + chunk_length > total_length:
            raise ContainerError("Invalid GLB: truncated chunk data")
        chunk_data = data[offset : offset + chunk_length]
        offset += chunk_length

        if chunk_type == CHUNK_TYPE_JSON and json_chunk is None:
            json_chunk = chunk_data
        elif chunk_type == CHUNK_TYPE_BIN and bin_chunk is None:
            bin_chunk = chunk_data

    if json_chunk is None:
        raise ContainerError("Invalid GLB: missing JSON chunk")

    try:
        document = json.loads(json_chunk.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ContainerError(f"Invalid GLB JSON chunk: {e}") from e
    if not isinstance(document, dict):
        raise ContainerError("Invalid GLB: JSON root is not an object")

    return GlbContents(
        version=version,
        length=total_length,
        document=document,
        bin_chunk=bin_chunk or b"",
    )
