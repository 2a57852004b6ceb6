"""Tests for converting grids to Floor / Walls / Roof mesh groups."""

from __future__ import annotations

import numpy as np
import pytest

from roomgen.config import MeshSettings
from roomgen.conversion import MeshData, RoomMeshBuilder, build_room_mesh
from roomgen.grid import CellWinding, GridData, WallSide


def _grid(heights: list[list[float]]) -> GridData:
    return GridData.from_heights(np.array(heights, dtype=np.float32))


def _normals(group) -> np.ndarray:
    v = group.vertices[group.triangles]
    return np.cross(v[:, 1] - v[:, 0], v[:, 2] - v[:, 0])


def _single_cell(height: float = 2.0) -> GridData:
    grid = GridData(3, 3)
    grid.set_cell_height(1, 1, height)
    return grid


# =============================================================================
# Quad tessellation
# =============================================================================


@pytest.mark.parametrize("resolution", [1, 2, 3])
def test_tessellation_counts(resolution: int) -> None:
    """One quad gives 4r² vertices and 6r² indices, doubled when double sided."""
    corners = ((0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1))

    single = MeshData()
    single.add_subdivided_quad(*corners, flip=False, resolution=resolution)
    assert len(single.vertices) == 4 * resolution ** 2
    assert len(single.triangles) * 3 == 6 * resolution ** 2

    double = MeshData()
    double.add_subdivided_quad(*corners, flip=False, double_sided=True, resolution=resolution)
    assert len(double.vertices) == 8 * resolution ** 2
    assert len(double.triangles) * 3 == 12 * resolution ** 2


def test_tessellation_rejects_zero_resolution() -> None:
    """Resolution below one is an error."""
    with pytest.raises(ValueError):
        MeshData().add_subdivided_quad(
            (0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1), flip=False, resolution=0)


def test_subdivided_quad_covers_original_corners() -> None:
    """Sub-quad vertices span exactly the original quad."""
    data = MeshData()
    data.add_subdivided_quad((0, 0, 0), (2, 0, 0), (2, 0, 4), (0, 0, 4), flip=False, resolution=2)
    vertices, _, _ = data.arrays()

    assert vertices.min(axis=0).tolist() == [0.0, 0.0, 0.0]
    assert vertices.max(axis=0).tolist() == [2.0, 0.0, 4.0]
    assert {tuple(v) for v in vertices.tolist()} >= {(1.0, 0.0, 2.0)}


def test_uvs_follow_quad_size_and_scale() -> None:
    """UVs are scaled by the quad's width and height and by uv_scale."""
    data = MeshData()
    data.add_subdivided_quad((0, 0, 0), (2, 0, 0), (2, 3, 0), (0, 3, 0), flip=False, uv_scale=0.5)
    _, _, uvs = data.arrays()

    assert uvs.max(axis=0).tolist() == [1.0, 1.5]
    assert uvs.min(axis=0).tolist() == [0.0, 0.0]


def test_empty_mesh_data_arrays() -> None:
    """Empty mesh data exports correctly shaped empty arrays."""
    vertices, triangles, uvs = MeshData().arrays()

    assert vertices.shape == (0, 3)
    assert triangles.shape == (0, 3)
    assert uvs.shape == (0, 2)


# =============================================================================
# Room mesh groups
# =============================================================================


def test_solid_block_counts() -> None:
    """A 10x10 block yields 100 floor quads, 100 roof quads and 40 wall quads."""
    grid = GridData.from_heights(np.full((10, 10), 3.0))
    mesh = build_room_mesh(grid)

    assert mesh.floor.vertex_count == 100 * 4
    assert mesh.floor.triangle_count == 100 * 2
    assert mesh.roof.triangle_count == mesh.floor.triangle_count
    assert mesh.walls.vertex_count == 40 * 4
    assert mesh.walls.triangle_count == 40 * 2
    assert mesh.total_triangles == 200 + 200 + 80


def test_solid_block_bounds() -> None:
    """Floor sits at y=0, roof at the cell height, walls span both."""
    grid = GridData.from_heights(np.full((10, 10), 3.0))
    mesh = build_room_mesh(grid)

    assert mesh.floor.bounds == ((0.0, 0.0, 0.0), (10.0, 0.0, 10.0))
    assert mesh.roof.bounds == ((0.0, 3.0, 0.0), (10.0, 3.0, 10.0))
    assert mesh.walls.bounds == ((0.0, 0.0, 0.0), (10.0, 3.0, 10.0))


def test_no_wall_between_equal_neighbours() -> None:
    """Two adjacent cells of equal height share no wall."""
    mesh = build_room_mesh(_grid([[2.0], [2.0]]))

    assert mesh.walls.vertex_count == 6 * 4
    # No wall quad lies entirely in the shared plane x = 1
    quads = mesh.walls.vertices.reshape(-1, 4, 3)
    assert not any(np.all(quad[:, 0] == 1.0) for quad in quads)


def test_isolated_cell_has_four_walls() -> None:
    """A lone cell gets one wall per side."""
    mesh = build_room_mesh(_single_cell())

    assert mesh.walls.vertex_count == 16
    assert mesh.walls.triangle_count == 8


def test_disabled_wall_is_skipped() -> None:
    """A cleared wall flag removes that side's wall."""
    grid = _single_cell()
    grid.set_cell_wall(1, 1, WallSide.LEFT, False)

    mesh = build_room_mesh(grid)

    assert mesh.walls.vertex_count == 12
    assert np.all(mesh.walls.vertices[:, 0] > 1.0 - 1e-6)


def test_step_wall_spans_height_difference() -> None:
    """A wall toward a lower neighbour starts at the neighbour's height."""
    mesh = build_room_mesh(_grid([[3.0], [1.0]]))

    quads = mesh.walls.vertices.reshape(-1, 4, 3)
    assert len(quads) == 7
    step = [q for q in quads if np.all(q[:, 0] == 1.0)]
    assert len(step) == 1
    assert sorted(set(step[0][:, 1].tolist())) == [1.0, 3.0]


def test_default_winding_faces_into_the_room() -> None:
    """Floors face up, ceilings face down and walls face the cell."""
    mesh = build_room_mesh(_single_cell())

    assert np.all(_normals(mesh.floor)[:, 1] > 0)
    assert np.all(_normals(mesh.roof)[:, 1] < 0)

    walls = mesh.walls
    centroids = walls.vertices[walls.triangles].mean(axis=1)
    to_center = np.array([1.5, 0.0, 1.5]) - centroids
    to_center[:, 1] = 0.0
    assert np.all(np.einsum('ij,ij->i', _normals(walls), to_center) > 0)


def test_flipped_winding_reverses_faces() -> None:
    """FLIPPED turns every face around."""
    settings = MeshSettings(cell_winding=CellWinding.FLIPPED)
    mesh = build_room_mesh(_single_cell(), settings)

    assert np.all(_normals(mesh.floor)[:, 1] < 0)
    assert np.all(_normals(mesh.roof)[:, 1] > 0)


def test_double_sided_doubles_geometry() -> None:
    """DOUBLE_SIDED emits a reversed copy of every face."""
    settings = MeshSettings(cell_winding=CellWinding.DOUBLE_SIDED)
    mesh = build_room_mesh(_single_cell(), settings)

    assert mesh.floor.vertex_count == 8
    assert mesh.walls.vertex_count == 32
    normals_y = _normals(mesh.floor)[:, 1]
    assert (normals_y > 0).sum() == 2
    assert (normals_y < 0).sum() == 2


def test_resolution_scales_every_group() -> None:
    """Mesh resolution subdivides floors, walls and roofs alike."""
    mesh = build_room_mesh(_single_cell(), MeshSettings(mesh_resolution=2))

    assert mesh.floor.vertex_count == 16
    assert mesh.roof.vertex_count == 16
    assert mesh.walls.vertex_count == 4 * 16


def test_invalid_resolution_raises() -> None:
    """The builder rejects a resolution below one."""
    with pytest.raises(ValueError):
        RoomMeshBuilder(_single_cell(), MeshSettings(mesh_resolution=0))


def test_uv_scale_applies_to_room() -> None:
    """uv_scale multiplies the per-quad UVs."""
    mesh = build_room_mesh(_single_cell(height=3.0), MeshSettings(uv_scale=2.0))

    assert mesh.floor.uvs.max() == pytest.approx(2.0)
    assert mesh.walls.uvs[:, 1].max() == pytest.approx(6.0)


def test_inverted_roof_caps_empty_cells() -> None:
    """An inverted roof covers empty cells at the grid's max height."""
    mesh = build_room_mesh(_single_cell(height=2.0), MeshSettings(invert_roof=True))

    assert mesh.roof.vertex_count == 8 * 4
    assert np.all(mesh.roof.vertices[:, 1] == 2.0)
    assert np.all(_normals(mesh.roof)[:, 1] > 0)


def test_inverted_roof_on_full_grid_is_omitted() -> None:
    """With no empty cells the inverted roof group is empty and left out."""
    grid = GridData.from_heights(np.full((4, 4), 1.0))
    mesh = build_room_mesh(grid, MeshSettings(invert_roof=True))

    assert "Roof" not in mesh
    assert "Floor" in mesh and "Walls" in mesh


def test_empty_grid_has_no_groups() -> None:
    """An empty grid produces no mesh groups, inverted roof or not."""
    assert build_room_mesh(GridData(5, 5)).is_empty
    assert build_room_mesh(GridData(5, 5), MeshSettings(invert_roof=True)).is_empty


def test_group_arrays_are_consistent() -> None:
    """Every group has one UV per vertex and valid indices."""
    grid = _grid([[1.0, 2.0, 0.0], [0.0, 2.0, 3.0]])
    mesh = build_room_mesh(grid, MeshSettings(mesh_resolution=2))

    for group in mesh:
        assert group.vertices.dtype == np.float32
        assert group.triangles.dtype == np.uint32
        assert len(group.uvs) == group.vertex_count
        assert group.triangles.max() < group.vertex_count
