"""Shared fixtures for baryquad tests."""

import pytest

from baryquad.buffers import build_byte_buffer
from baryquad.exporter import build_quad_glb
from baryquad.layout import build_document
from baryquad.models import QUAD_INDICES, QUAD_VERTICES


@pytest.fixture
def quad_buffer():
    return build_byte_buffer(QUAD_VERTICES, QUAD_INDICES)


@pytest.fixture
def quad_gltf(quad_buffer):
    return build_document(quad_buffer)


@pytest.fixture
def quad_container():
    return build_quad_glb()


@pytest.fixture
def quad_glb_bytes(quad_container):
    return quad_container.to_bytes()
