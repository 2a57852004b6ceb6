"""
Quad tessellation helpers for procedural room meshes.

Quads are given as four corners in order v0 (bottom-left), v1
(bottom-right), v2 (top-right), v3 (top-left). Each quad is split into a
``resolution x resolution`` grid of sub-quads by bilinear interpolation;
every sub-quad gets its own four vertices and two triangles.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np

Vec3 = Tuple[float, float, float]
Vec2 = Tuple[float, float]

# Triangle corner orders for one sub-quad (indices into its 4 vertices).
_DEFAULT_ORDER = ((0, 2, 1), (0, 3, 2))
_FLIPPED_ORDER = ((0, 1, 2), (0, 2, 3))


def _lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def _distance(a: Vec3, b: Vec3) -> float:
    return math.sqrt((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2 + (b[2] - a[2]) ** 2)


def bilinear(v0: Vec3, v1: Vec3, v2: Vec3, v3: Vec3, u: float, v: float) -> Vec3:
    """Point at (u, v) on the quad; u runs v0->v1, v runs v0->v3."""
    return _lerp(_lerp(v0, v1, u), _lerp(v3, v2, u), v)


class MeshData:
    """Accumulates vertices, triangles and UVs for one mesh group."""

    def __init__(self):
        self.vertices: List[Vec3] = []
        self.triangles: List[Tuple[int, int, int]] = []
        self.uvs: List[Vec2] = []

    @property
    def is_empty(self) -> bool:
        return not self.vertices

    def clear(self):
        self.vertices.clear()
        self.triangles.clear()
        self.uvs.clear()

    def add_subdivided_quad(
        self,
        v0: Vec3, v1: Vec3, v2: Vec3, v3: Vec3,
        flip: bool,
        double_sided: bool = False,
        uv_scale: float = 1.0,
        resolution: int = 1,
    ) -> None:
        """
        Tessellate a quad into resolution² sub-quads.

        UVs are scaled by the quad's real width (|v1 - v0|) and height
        (|v3 - v0|) so texel density does not depend on quad size.

        Args:
            v0, v1, v2, v3: Quad corners
            flip: Reverse the front-face winding
            double_sided: Also emit a back-facing copy of every sub-quad
            uv_scale: Uniform UV multiplier
            resolution: Subdivisions per side (>= 1)

        Raises:
            ValueError: If resolution is less than 1
        """
        if resolution < 1:
            raise ValueError(f"Mesh resolution must be >= 1, got {resolution}")

        width = _distance(v0, v1)
        height = _distance(v0, v3)
        front = _FLIPPED_ORDER if flip else _DEFAULT_ORDER
        back = _DEFAULT_ORDER if flip else _FLIPPED_ORDER

        for row in range(resolution):
            for col in range(resolution):
                u0, u1 = col / resolution, (col + 1) / resolution
                t0, t1 = row / resolution, (row + 1) / resolution

                corners = (
                    bilinear(v0, v1, v2, v3, u0, t0),
                    bilinear(v0, v1, v2, v3, u1, t0),
                    bilinear(v0, v1, v2, v3, u1, t1),
                    bilinear(v0, v1, v2, v3, u0, t1),
                )
                uvs = (
                    (u0 * width * uv_scale, t0 * height * uv_scale),
                    (u1 * width * uv_scale, t0 * height * uv_scale),
                    (u1 * width * uv_scale, t1 * height * uv_scale),
                    (u0 * width * uv_scale, t1 * height * uv_scale),
                )

                self._add_sub_quad(corners, uvs, front)
                if double_sided:
                    self._add_sub_quad(corners, uvs, back)

    def _add_sub_quad(self, corners: Sequence[Vec3], uvs: Sequence[Vec2],
                      order: Sequence[Tuple[int, int, int]]) -> None:
        base = len(self.vertices)
        self.vertices.extend(corners)
        self.uvs.extend(uvs)
        for a, b, c in order:
            self.triangles.append((base + a, base + b, base + c))

    def arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(vertices N×3 float32, triangles M×3 uint32, uvs N×2 float32)."""
        if not self.vertices:
            return (
                np.zeros((0, 3), dtype=np.float32),
                np.zeros((0, 3), dtype=np.uint32),
                np.zeros((0, 2), dtype=np.float32),
            )
        return (
            np.array(self.vertices, dtype=np.float32),
            np.array(self.triangles, dtype=np.uint32),
            np.array(self.uvs, dtype=np.float32),
        )
