"""
Mesh builder for converting a height grid to renderable room geometry.

Produces three independent mesh groups:
- Floor: one quad per occupied cell at elevation 0
- Walls: one quad per cell side that drops to a lower neighbour
- Roof:  one ceiling quad per occupied cell, or an exterior cap over the
         empty cells when the roof is inverted

World space is Y-up: grid cell (x, y) spans [x, x+1] × [y, y+1] on the
XZ plane and cell heights run along +Y.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from roomgen.config import (
    FLOOR_MESH_NAME,
    MESH_GROUP_NAMES,
    ROOF_MESH_NAME,
    WALLS_MESH_NAME,
    MeshSettings,
)
from roomgen.grid import CellWinding, GridData, WallSide

from .mesh_utils import MeshData

logger = logging.getLogger(__name__)


@dataclass
class MeshGroup:
    """Named renderable mesh."""
    name: str
    vertices: np.ndarray   # Shape: (N, 3), dtype=float32
    triangles: np.ndarray  # Shape: (M, 3), dtype=uint32
    uvs: np.ndarray        # Shape: (N, 2), dtype=float32

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def index_count(self) -> int:
        return self.triangle_count * 3

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) == 0

    @property
    def bounds(self) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
        """(min, max) corners of the vertex bounding box."""
        if self.is_empty:
            return (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)
        return tuple(self.vertices.min(axis=0).tolist()), tuple(self.vertices.max(axis=0).tolist())


@dataclass
class RoomMesh:
    """Mesh groups generated for a room. Empty groups are not present."""
    groups: Dict[str, MeshGroup] = field(default_factory=dict)

    def get(self, name: str) -> Optional[MeshGroup]:
        return self.groups.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.groups

    def __iter__(self) -> Iterator[MeshGroup]:
        return iter(self.groups.values())

    @property
    def floor(self) -> Optional[MeshGroup]:
        return self.groups.get(FLOOR_MESH_NAME)

    @property
    def walls(self) -> Optional[MeshGroup]:
        return self.groups.get(WALLS_MESH_NAME)

    @property
    def roof(self) -> Optional[MeshGroup]:
        return self.groups.get(ROOF_MESH_NAME)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    @property
    def total_triangles(self) -> int:
        return sum(g.triangle_count for g in self.groups.values())


class RoomMeshBuilder:
    """Converts a GridData into floor, wall and roof mesh groups."""

    def __init__(self, grid: GridData, settings: Optional[MeshSettings] = None):
        self.grid = grid
        self.settings = settings or MeshSettings()
        if self.settings.mesh_resolution < 1:
            raise ValueError(
                f"Mesh resolution must be >= 1, got {self.settings.mesh_resolution}")

    def build(self) -> RoomMesh:
        """Generate the room mesh groups from the current grid."""
        floor = MeshData()
        walls = MeshData()
        roof = MeshData()

        winding = self.settings.cell_winding
        flipped = winding == CellWinding.FLIPPED
        double_sided = winding == CellWinding.DOUBLE_SIDED

        grid = self.grid
        for y in range(grid.height):
            for x in range(grid.width):
                height = float(grid.heights[x, y])
                if height <= 0:
                    continue

                self._quad(floor, (x, 0.0, y), (x + 1, 0.0, y),
                           (x + 1, 0.0, y + 1), (x, 0.0, y + 1),
                           flipped, double_sided)

                # Ceilings face down, so they use the opposite winding.
                if not self.settings.invert_roof:
                    self._quad(roof, (x, height, y), (x + 1, height, y),
                               (x + 1, height, y + 1), (x, height, y + 1),
                               not flipped, double_sided)

                self._add_walls(walls, x, y, height, flipped, double_sided)

        if self.settings.invert_roof:
            self._add_exterior_roof(roof)

        result = RoomMesh()
        for name, data in zip(MESH_GROUP_NAMES, (floor, walls, roof)):
            if data.is_empty:
                continue
            vertices, triangles, uvs = data.arrays()
            result.groups[name] = MeshGroup(name, vertices, triangles, uvs)

        logger.info(
            "Built room mesh %dx%d: %s",
            grid.width, grid.height,
            ", ".join(f"{g.name}={g.triangle_count} tris" for g in result) or "empty",
        )
        return result

    def _quad(self, target: MeshData, v0, v1, v2, v3, flip: bool, double_sided: bool) -> None:
        target.add_subdivided_quad(
            v0, v1, v2, v3, flip, double_sided,
            self.settings.uv_scale, self.settings.mesh_resolution,
        )

    def _add_walls(self, walls: MeshData, x: int, y: int, height: float,
                   flipped: bool, double_sided: bool) -> None:
        """Emit a wall on every enabled side whose neighbour is lower."""
        grid = self.grid
        for side in WallSide:
            dx, dy = side.offset
            neighbor = grid.get_cell_height(x + dx, y + dy)
            if neighbor >= height or not grid.walls[x, y, side.value]:
                continue

            if side == WallSide.LEFT:
                corners = ((x, neighbor, y), (x, neighbor, y + 1),
                           (x, height, y + 1), (x, height, y))
            elif side == WallSide.RIGHT:
                corners = ((x + 1, neighbor, y + 1), (x + 1, neighbor, y),
                           (x + 1, height, y), (x + 1, height, y + 1))
            elif side == WallSide.BACK:
                corners = ((x + 1, neighbor, y), (x, neighbor, y),
                           (x, height, y), (x + 1, height, y))
            else:
                corners = ((x, neighbor, y + 1), (x + 1, neighbor, y + 1),
                           (x + 1, height, y + 1), (x, height, y + 1))

            self._quad(walls, *corners, flipped, double_sided)

    def _add_exterior_roof(self, roof: MeshData) -> None:
        """
        Cap every empty cell at the grid's maximum height.

        The cap is a lid seen from above, so it always uses the default
        single-sided winding. An empty grid gets no cap.
        """
        roof_height = self.grid.max_height()
        if roof_height <= 0:
            return

        for y in range(self.grid.height):
            for x in range(self.grid.width):
                if self.grid.heights[x, y] != 0:
                    continue
                self._quad(roof, (x, roof_height, y), (x + 1, roof_height, y),
                           (x + 1, roof_height, y + 1), (x, roof_height, y + 1),
                           False, False)


def build_room_mesh(grid: GridData, settings: Optional[MeshSettings] = None) -> RoomMesh:
    """Convenience function to build room meshes in one call."""
    return RoomMeshBuilder(grid, settings).build()
