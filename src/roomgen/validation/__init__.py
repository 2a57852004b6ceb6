"""
Validation of grids and generated room meshes.

Usage:
    from roomgen.validation import validate_mesh

    result = validate_mesh(mesh)
    if not result.passed:
        print(result.report())
"""

from .checks import check_mesh_group, validate_grid, validate_mesh
from .core import (
    RoomGenError,
    Severity,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    'RoomGenError',
    'Severity',
    'ValidationError',
    'ValidationIssue',
    'ValidationResult',
    'check_mesh_group',
    'validate_grid',
    'validate_mesh',
]
