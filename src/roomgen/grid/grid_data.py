"""
Grid data for procedural room generation.

The grid is the canonical model shared by layout generators, the mesh
builder and the light placer. Cells are addressed as ``[x, y]`` with
``0 <= x < width`` and ``0 <= y < height``.

Storage is dense numpy arrays rather than per-cell objects:
- heights: float32 array of shape (width, height); 0 means empty
- walls:   bool array of shape (width, height, 4) indexed by WallSide
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)


class CellWinding(Enum):
    """Triangle winding order used when tessellating cell quads."""
    DEFAULT = "default"
    FLIPPED = "flipped"
    DOUBLE_SIDED = "double_sided"


class WallSide(Enum):
    """The four sides of a grid cell. Values index the walls array."""
    LEFT = 0    # -X
    RIGHT = 1   # +X
    BACK = 2    # -Y
    FRONT = 3   # +Y

    @property
    def offset(self) -> Tuple[int, int]:
        """Grid offset of the neighbouring cell on this side."""
        return _SIDE_OFFSETS[self]


_SIDE_OFFSETS = {
    WallSide.LEFT: (-1, 0),
    WallSide.RIGHT: (1, 0),
    WallSide.BACK: (0, -1),
    WallSide.FRONT: (0, 1),
}


@dataclass
class Cell:
    """Snapshot of a single grid cell."""
    height: float = 0.0
    left_wall: bool = True
    right_wall: bool = True
    back_wall: bool = True
    front_wall: bool = True

    def wall(self, side: WallSide) -> bool:
        return (self.left_wall, self.right_wall, self.back_wall, self.front_wall)[side.value]


class GridData:
    """Dense 2D grid of cells with heights and per-side wall flags."""

    def __init__(self, width: int, height: int):
        self.width = max(int(width), 0)
        self.height = max(int(height), 0)
        self.heights = np.zeros((self.width, self.height), dtype=np.float32)
        self.walls = np.ones((self.width, self.height, 4), dtype=bool)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if (x, y) addresses a cell of this grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    # ------------------------------------------------------------------
    # Cell accessors (out-of-range reads return safe defaults)
    # ------------------------------------------------------------------

    def get_cell(self, x: int, y: int) -> Cell:
        """Return a copy of the cell at (x, y), or a default cell when out of range."""
        if not self.in_bounds(x, y):
            return Cell()
        left, right, back, front = (bool(v) for v in self.walls[x, y])
        return Cell(
            height=float(self.heights[x, y]),
            left_wall=left,
            right_wall=right,
            back_wall=back,
            front_wall=front,
        )

    def get_cell_height(self, x: int, y: int) -> float:
        """Height of the cell at (x, y); 0 if out of range."""
        if self.in_bounds(x, y):
            return float(self.heights[x, y])
        return 0.0

    def set_cell_height(self, x: int, y: int, value: float) -> None:
        """Set the height of a cell. Out-of-range writes are ignored."""
        if self.in_bounds(x, y):
            self.heights[x, y] = value

    def is_walkable(self, x: int, y: int) -> bool:
        """True if (x, y) is inside the grid and has a positive height."""
        return self.in_bounds(x, y) and self.heights[x, y] > 0

    def get_cell_wall(self, x: int, y: int, side: WallSide) -> bool:
        """Wall flag of one side of a cell; True if out of range."""
        if self.in_bounds(x, y):
            return bool(self.walls[x, y, side.value])
        return True

    def set_cell_wall(self, x: int, y: int, side: WallSide, enabled: bool) -> None:
        if self.in_bounds(x, y):
            self.walls[x, y, side.value] = enabled

    def toggle_cell_wall(self, x: int, y: int, side: WallSide) -> None:
        if self.in_bounds(x, y):
            self.walls[x, y, side.value] = not self.walls[x, y, side.value]

    # ------------------------------------------------------------------
    # Whole-grid operations
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Set every cell height to 0, keeping the grid shape and wall flags."""
        self.heights.fill(0.0)

    def has_active_cells(self) -> bool:
        """True if at least one cell has a positive height."""
        return bool(np.any(self.heights > 0))

    def max_height(self) -> float:
        """Maximum cell height in the grid (0 for an empty grid)."""
        if self.heights.size == 0:
            return 0.0
        return max(float(self.heights.max()), 0.0)

    def resize(self, new_width: int, new_height: int) -> Tuple[int, int]:
        """
        Resize the grid while preserving existing cell data.

        Shrinking never discards a cell with a positive height: if such a cell
        lies outside the requested bounds, the bound is grown to include it.

        Args:
            new_width: Requested width in cells
            new_height: Requested height in cells

        Returns:
            The realized (width, height) after resizing.
        """
        new_width = max(int(new_width), 0)
        new_height = max(int(new_height), 0)

        if new_width < self.width or new_height < self.height:
            occupied_x, occupied_y = np.nonzero(self.heights > 0)
            if occupied_x.size:
                grown_width = max(new_width, int(occupied_x.max()) + 1)
                grown_height = max(new_height, int(occupied_y.max()) + 1)
                if (grown_width, grown_height) != (new_width, new_height):
                    logger.debug(
                        "Resize to %dx%d would drop occupied cells, growing to %dx%d",
                        new_width, new_height, grown_width, grown_height,
                    )
                new_width, new_height = grown_width, grown_height

        heights = np.zeros((new_width, new_height), dtype=np.float32)
        walls = np.ones((new_width, new_height, 4), dtype=bool)

        keep_w = min(self.width, new_width)
        keep_h = min(self.height, new_height)
        heights[:keep_w, :keep_h] = self.heights[:keep_w, :keep_h]
        walls[:keep_w, :keep_h] = self.walls[:keep_w, :keep_h]

        self.heights = heights
        self.walls = walls
        self.width = new_width
        self.height = new_height
        return self.width, self.height

    def load_heights(self, heights: np.ndarray) -> None:
        """
        Load a height grid, resizing this grid to match its dimensions.

        Cells that survive the resize keep their wall flags.

        Args:
            heights: 2D array indexed [x, y]

        Raises:
            ValueError: If the array is not two-dimensional
        """
        data = np.asarray(heights, dtype=np.float32)
        if data.ndim != 2:
            raise ValueError(f"Height grid must be 2D, got shape {data.shape}")

        width, height = data.shape
        keep_w = min(self.width, width)
        keep_h = min(self.height, height)
        walls = np.ones((width, height, 4), dtype=bool)
        walls[:keep_w, :keep_h] = self.walls[:keep_w, :keep_h]

        self.width = width
        self.height = height
        self.heights = data.copy()
        self.walls = walls

    def to_height_array(self) -> np.ndarray:
        """Export the heights as a new 2D float array indexed [x, y]."""
        return self.heights.copy()

    @classmethod
    def from_heights(cls, heights: np.ndarray) -> 'GridData':
        """Create a grid from a 2D height array with all walls enabled."""
        data = np.asarray(heights)
        grid = cls(0, 0)
        grid.load_heights(data)
        return grid

    def __repr__(self) -> str:
        active = int(np.count_nonzero(self.heights > 0))
        return f"GridData({self.width}x{self.height}, active={active})"
