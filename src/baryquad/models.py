"""Pydantic v2 models and fixed geometry for the barycentric quad."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

FLOAT_SIZE = 4
INDEX_SIZE = 2

# Float offsets of each attribute inside one interleaved vertex record.
POSITION_OFFSET = 0
COLOR_OFFSET = 3 * FLOAT_SIZE
BARYCENTRIC_OFFSET = COLOR_OFFSET + 4 * FLOAT_SIZE

FLOATS_PER_VERTEX = 10
VERTEX_STRIDE = FLOATS_PER_VERTEX * FLOAT_SIZE  # 40 bytes

BARYCENTRIC_SEMANTIC = "_BARYCENTRIC"


class Vertex(BaseModel):
    """One interleaved vertex record: position, RGBA color, barycentric coordinate."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    position: tuple[float, float, float]
    color: tuple[float, float, float, float]
    barycentric: tuple[float, float, float]

    @field_validator("color", "barycentric")
    @classmethod
    def unit_range(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        for c in v:
            if not 0.0 <= c <= 1.0:
                raise ValueError(f"Component {c} outside [0, 1]")
        return v

    def as_floats(self) -> tuple[float, ...]:
        """Return the 10 fields in record order (x, y, z, r, g, b, a, s, t, u)."""
        return (*self.position, *self.color, *self.barycentric)


QUAD_VERTICES: tuple[Vertex, ...] = (
    Vertex(position=(-1.0, -1.0, 0.0), color=(1.0, 0.0, 0.0, 1.0), barycentric=(1.0, 0.0, 0.0)),
    Vertex(position=(1.0, -1.0, 0.0), color=(0.5, 0.5, 0.0, 1.0), barycentric=(0.0, 1.0, 0.0)),
    Vertex(position=(-1.0, 1.0, 0.0), color=(0.5, 0.5, 0.0, 1.0), barycentric=(0.0, 0.0, 1.0)),
    Vertex(position=(1.0, 1.0, 0.0), color=(0.0, 1.0, 0.0, 1.0), barycentric=(1.0, 0.0, 0.0)),
)

# Two triangles sharing the v1-v2 diagonal.
QUAD_INDICES: tuple[int, ...] = (0, 1, 2, 2, 1, 3)
