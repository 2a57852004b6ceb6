"""
Grid Module

Dense cell grid shared by the layout generators, the mesh builder and the
light placer.
"""

from .grid_data import Cell, CellWinding, GridData, WallSide

__all__ = [
    'Cell',
    'CellWinding',
    'GridData',
    'WallSide',
]
