"""
Grid and mesh validation checks.

- GRID-001: negative cell heights (WARN)
- GRID-002: grid has no active cells (INFO)
- MESH-001: triangle index out of range (FAIL)
- MESH-002: UV count differs from vertex count (FAIL)
- MESH-003: degenerate (zero-area) triangle (WARN)
"""

import numpy as np

from roomgen.conversion import MeshGroup, RoomMesh
from roomgen.grid import GridData

from .core import Severity, ValidationError, ValidationIssue, ValidationResult

# Triangles with a cross-product magnitude below this are degenerate
DEGENERATE_AREA_TOLERANCE = 1e-9


def validate_grid(grid: GridData, fail_fast: bool = False) -> ValidationResult:
    """Check a grid before it is converted to geometry.

    Args:
        grid: Grid to check
        fail_fast: Raise instead of returning a failed result

    Raises:
        ValidationError: If fail_fast is set and a FAIL issue was found
    """
    result = ValidationResult()

    negative = np.argwhere(grid.heights < 0)
    if len(negative):
        x, y = negative[0]
        result.add_issue(ValidationIssue(
            severity=Severity.WARN,
            code="GRID-001",
            message=f"{len(negative)} cell(s) have negative heights and are treated as empty",
            location=f"cell ({x}, {y})",
        ))

    if not grid.has_active_cells():
        result.add_issue(ValidationIssue(
            severity=Severity.INFO,
            code="GRID-002",
            message=f"Grid {grid.width}x{grid.height} has no active cells",
        ))

    return _finish(result, fail_fast)


def check_mesh_group(group: MeshGroup) -> ValidationResult:
    """Index range, UV count and triangle area checks for one mesh group."""
    result = ValidationResult()

    if len(group.uvs) != group.vertex_count:
        result.add_issue(ValidationIssue(
            severity=Severity.FAIL,
            code="MESH-002",
            message=f"{len(group.uvs)} UVs for {group.vertex_count} vertices",
            location=group.name,
        ))

    if group.triangle_count == 0:
        return result

    out_of_range = np.nonzero(np.any(group.triangles >= group.vertex_count, axis=1))[0]
    if len(out_of_range):
        result.add_issue(ValidationIssue(
            severity=Severity.FAIL,
            code="MESH-001",
            message=f"{len(out_of_range)} triangle(s) reference missing vertices",
            location=f"{group.name} triangle {out_of_range[0]}",
        ))
        # Area checks need valid indices
        return result

    corners = group.vertices[group.triangles]
    cross = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
    degenerate = np.nonzero(np.linalg.norm(cross, axis=1) < DEGENERATE_AREA_TOLERANCE)[0]
    if len(degenerate):
        result.add_issue(ValidationIssue(
            severity=Severity.WARN,
            code="MESH-003",
            message=f"{len(degenerate)} degenerate triangle(s)",
            location=f"{group.name} triangle {degenerate[0]}",
        ))

    return result


def validate_mesh(mesh: RoomMesh, fail_fast: bool = False) -> ValidationResult:
    """Check every group of a room mesh.

    Raises:
        ValidationError: If fail_fast is set and a FAIL issue was found
    """
    result = ValidationResult()
    for group in mesh:
        result.issues.extend(check_mesh_group(group).issues)
    return _finish(result, fail_fast)


def _finish(result: ValidationResult, fail_fast: bool) -> ValidationResult:
    if fail_fast and not result.passed:
        raise ValidationError(result)
    return result
