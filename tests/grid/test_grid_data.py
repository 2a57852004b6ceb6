"""Tests for the GridData cell model."""

from __future__ import annotations

import numpy as np
import pytest

from roomgen.grid import Cell, GridData, WallSide


def test_new_grid_is_empty_with_all_walls() -> None:
    """A new grid has zero heights and every wall flag enabled."""
    grid = GridData(4, 3)

    assert grid.shape == (4, 3)
    assert grid.heights.shape == (4, 3)
    assert not grid.has_active_cells()
    assert grid.walls.all()


def test_out_of_range_reads_return_defaults() -> None:
    """Reads outside the grid return height 0 and walls present."""
    grid = GridData(2, 2)
    grid.set_cell_height(1, 1, 3.0)

    assert grid.get_cell(-1, 0) == Cell()
    assert grid.get_cell_height(5, 5) == 0.0
    assert grid.get_cell_wall(2, 0, WallSide.LEFT) is True
    assert not grid.is_walkable(-1, 1)


def test_out_of_range_writes_are_ignored() -> None:
    """Writes outside the grid leave it untouched."""
    grid = GridData(2, 2)
    grid.set_cell_height(2, 0, 1.0)
    grid.set_cell_wall(0, 5, WallSide.FRONT, False)

    assert not grid.has_active_cells()
    assert grid.walls.all()


def test_get_cell_snapshot() -> None:
    """get_cell copies height and wall flags."""
    grid = GridData(3, 3)
    grid.set_cell_height(1, 2, 2.5)
    grid.set_cell_wall(1, 2, WallSide.BACK, False)

    cell = grid.get_cell(1, 2)
    assert cell.height == 2.5
    assert cell.left_wall and cell.right_wall and cell.front_wall
    assert not cell.back_wall
    assert not cell.wall(WallSide.BACK)


def test_toggle_cell_wall() -> None:
    """Toggling a wall twice restores it."""
    grid = GridData(2, 2)
    grid.toggle_cell_wall(0, 0, WallSide.RIGHT)
    assert grid.get_cell_wall(0, 0, WallSide.RIGHT) is False

    grid.toggle_cell_wall(0, 0, WallSide.RIGHT)
    assert grid.get_cell_wall(0, 0, WallSide.RIGHT) is True


def test_clear_keeps_shape_and_walls() -> None:
    """clear() only zeroes heights."""
    grid = GridData(3, 3)
    grid.set_cell_height(0, 0, 1.0)
    grid.set_cell_wall(0, 0, WallSide.LEFT, False)

    grid.clear()

    assert grid.shape == (3, 3)
    assert not grid.has_active_cells()
    assert not grid.get_cell_wall(0, 0, WallSide.LEFT)


def test_max_height() -> None:
    """max_height is the largest cell height, 0 for an empty grid."""
    grid = GridData(3, 3)
    assert grid.max_height() == 0.0

    grid.set_cell_height(0, 0, 1.5)
    grid.set_cell_height(2, 1, 4.0)
    assert grid.max_height() == 4.0


def test_resize_grow_preserves_cells_and_walls() -> None:
    """Growing keeps existing data; new cells get defaults."""
    grid = GridData(3, 3)
    grid.set_cell_height(2, 2, 2.0)
    grid.set_cell_wall(2, 2, WallSide.FRONT, False)

    assert grid.resize(6, 5) == (6, 5)

    assert grid.get_cell_height(2, 2) == 2.0
    assert not grid.get_cell_wall(2, 2, WallSide.FRONT)
    assert grid.get_cell_height(5, 4) == 0.0
    assert grid.get_cell_wall(5, 4, WallSide.FRONT)


def test_resize_shrink_keeps_cells_inside_new_bounds() -> None:
    """Shrinking over empty cells realizes the requested size."""
    grid = GridData(10, 10)
    grid.set_cell_height(1, 1, 1.0)
    grid.set_cell_height(3, 4, 2.0)

    assert grid.resize(4, 5) == (4, 5)
    assert grid.get_cell_height(1, 1) == 1.0
    assert grid.get_cell_height(3, 4) == 2.0


def test_resize_shrink_grows_to_keep_occupied_cells() -> None:
    """Shrinking never drops a cell with a positive height."""
    grid = GridData(10, 10)
    grid.set_cell_height(7, 8, 2.0)

    realized = grid.resize(3, 3)

    assert realized == (8, 9)
    assert grid.shape == (8, 9)
    assert grid.get_cell_height(7, 8) == 2.0


def test_resize_shrink_only_grows_needed_axis() -> None:
    """Only the axis that would lose data is grown."""
    grid = GridData(10, 10)
    grid.set_cell_height(1, 8, 1.0)

    assert grid.resize(2, 2) == (2, 9)


def test_load_heights_resizes_grid() -> None:
    """Loading an array adopts its shape and values."""
    grid = GridData(2, 2)
    grid.set_cell_wall(0, 0, WallSide.LEFT, False)
    heights = np.array([[0.0, 1.0, 2.0], [3.0, 0.0, 0.5]])

    grid.load_heights(heights)

    assert grid.shape == (2, 3)
    assert grid.get_cell_height(0, 2) == 2.0
    assert grid.get_cell_height(1, 0) == 3.0
    assert not grid.get_cell_wall(0, 0, WallSide.LEFT), "overlapping wall flags are kept"
    assert grid.get_cell_wall(1, 2, WallSide.LEFT)


def test_load_heights_rejects_non_2d() -> None:
    """Only 2D height arrays are accepted."""
    grid = GridData(2, 2)
    with pytest.raises(ValueError):
        grid.load_heights(np.zeros((2, 2, 2)))
    with pytest.raises(ValueError):
        grid.load_heights(np.zeros(4))


def test_export_is_a_copy() -> None:
    """Exported arrays do not alias the grid."""
    grid = GridData.from_heights(np.ones((3, 2)))

    exported = grid.to_height_array()
    exported[0, 0] = 9.0

    assert grid.get_cell_height(0, 0) == 1.0
    assert np.array_equal(grid.to_height_array(), np.ones((3, 2)))
