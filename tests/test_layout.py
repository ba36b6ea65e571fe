"""Tests for buffer view / accessor layout and bounds checking."""

import json

import numpy as np
import pygltflib
import pytest

from baryquad.buffers import ByteBuffer
from baryquad.container import serialize_document
from baryquad.errors import LayoutError
from baryquad.layout import (
    COMPONENT_SIZES,
    TYPE_ARITY,
    append_index,
    build_document,
    check_bounds,
)


class TestAppendIndex:
    def test_returns_stable_positions(self):
        items: list[str] = []
        assert append_index(items, "a") == 0
        assert append_index(items, "b") == 1
        assert items == ["a", "b"]


class TestBufferViews:
    def test_attribute_view(self, quad_gltf):
        bv = quad_gltf.bufferViews[0]
        assert bv.byteOffset == 0
        assert bv.byteLength == 160
        assert bv.byteStride == 40
        assert bv.target == pygltflib.ARRAY_BUFFER

    def test_index_view(self, quad_gltf):
        bv = quad_gltf.bufferViews[1]
        assert bv.byteOffset == 160
        assert bv.byteLength == 12
        assert bv.byteStride is None
        assert bv.target == pygltflib.ELEMENT_ARRAY_BUFFER

    def test_single_buffer(self, quad_gltf):
        buffers = quad_gltf.buffers
        assert len(buffers) == 1
        assert buffers[0].byteLength == 172
        assert buffers[0].uri is None


class TestAccessors:
    def test_attribute_offsets(self, quad_gltf):
        accs = quad_gltf.accessors
        assert [a.byteOffset for a in accs[:3]] == [0, 12, 28]
        assert all(a.bufferView == 0 for a in accs[:3])

    def test_types_and_counts(self, quad_gltf):
        accs = quad_gltf.accessors
        assert [(a.type, a.count) for a in accs] == [
            ("VEC3", 4),
            ("VEC4", 4),
            ("VEC3", 4),
            ("SCALAR", 6),
        ]
        assert [a.componentType for a in accs[:3]] == [pygltflib.FLOAT] * 3
        assert accs[3].componentType == pygltflib.UNSIGNED_SHORT
        assert accs[3].bufferView == 1

    def test_position_bounds(self, quad_gltf):
        pos = quad_gltf.accessors[0]
        assert pos.min == [-1.0, -1.0, 0.0]
        assert pos.max == [1.0, 1.0, 0.0]

    def test_only_position_has_bounds(self, quad_gltf):
        for acc in quad_gltf.accessors[1:]:
            assert not acc.min
            assert not acc.max
        doc = json.loads(serialize_document(quad_gltf))
        assert "min" in doc["accessors"][0]
        for acc in doc["accessors"][1:]:
            assert "min" not in acc
            assert "max" not in acc

    def test_every_accessor_within_view(self, quad_gltf):
        gltf = quad_gltf
        for acc in gltf.accessors:
            bv = gltf.bufferViews[acc.bufferView]
            size = COMPONENT_SIZES[acc.componentType] * TYPE_ARITY[acc.type]
            assert acc.byteOffset + size * acc.count <= bv.byteLength
        for bv in gltf.bufferViews:
            assert bv.byteOffset + bv.byteLength <= gltf.buffers[0].byteLength

    def test_positions_decode_from_buffer(self, quad_buffer, quad_gltf):
        acc = quad_gltf.accessors[0]
        bv = quad_gltf.bufferViews[acc.bufferView]
        values = np.ndarray(
            shape=(acc.count, 3),
            dtype="<f4",
            buffer=quad_buffer.data,
            offset=bv.byteOffset + acc.byteOffset,
            strides=(bv.byteStride, 4),
        )
        assert values.tolist() == [
            [-1.0, -1.0, 0.0],
            [1.0, -1.0, 0.0],
            [-1.0, 1.0, 0.0],
            [1.0, 1.0, 0.0],
        ]


class TestPrimitive:
    def test_attribute_mapping(self, quad_gltf):
        prim = quad_gltf.meshes[0].primitives[0]
        assert prim.attributes.POSITION == 0
        assert prim.attributes.COLOR_0 == 1
        assert getattr(prim.attributes, "_BARYCENTRIC") == 2
        assert prim.indices == 3
        assert prim.mode == pygltflib.TRIANGLES

    def test_single_mesh_and_node(self, quad_gltf):
        gltf = quad_gltf
        assert len(gltf.meshes) == 1
        assert len(gltf.meshes[0].primitives) == 1
        assert gltf.nodes[0].mesh == 0
        assert gltf.scenes[0].nodes == [0]


class TestCheckBounds:
    def test_valid_layout_passes(self, quad_gltf):
        check_bounds(quad_gltf, 172)

    def test_buffer_length_mismatch(self, quad_gltf):
        with pytest.raises(LayoutError, match="declares"):
            check_bounds(quad_gltf, 200)

    def test_view_past_buffer_end(self, quad_gltf):
        quad_gltf.bufferViews[1].byteLength = 16
        with pytest.raises(LayoutError, match="Buffer view 1"):
            check_bounds(quad_gltf, 172)

    def test_accessor_past_view_end(self, quad_gltf):
        quad_gltf.accessors[3].count = 7
        with pytest.raises(LayoutError, match="Accessor 3"):
            check_bounds(quad_gltf, 172)

    def test_strided_accessor_past_view_end(self, quad_gltf):
        # 32 + 40 * 3 + 12 = 164 > 160
        quad_gltf.accessors[2].byteOffset = 32
        with pytest.raises(LayoutError, match="last element"):
            check_bounds(quad_gltf, 172)

    def test_stride_smaller_than_element(self, quad_gltf):
        quad_gltf.bufferViews[0].byteStride = 8
        with pytest.raises(LayoutError, match="stride"):
            check_bounds(quad_gltf, 172)

    def test_missing_buffer_view(self, quad_gltf):
        quad_gltf.accessors[0].bufferView = 5
        with pytest.raises(LayoutError, match="missing buffer view"):
            check_bounds(quad_gltf, 172)

    def test_missing_custom_attribute_accessor(self, quad_gltf):
        setattr(quad_gltf.meshes[0].primitives[0].attributes, "_BARYCENTRIC", 9)
        with pytest.raises(LayoutError, match="_BARYCENTRIC"):
            check_bounds(quad_gltf, 172)

    def test_vertex_count_disagreement(self, quad_gltf):
        quad_gltf.accessors[1].count = 3
        with pytest.raises(LayoutError, match="disagree"):
            check_bounds(quad_gltf, 172)

    def test_empty_vertex_buffer_rejected(self):
        buffer = ByteBuffer(data=b"", index_offset=0, index_count=0)
        with pytest.raises(LayoutError, match="empty vertex buffer"):
            build_document(buffer)
