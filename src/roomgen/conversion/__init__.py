"""
Conversion of grids to room geometry and light placements.
"""

from .light_placement import (
    InMemoryLightHost,
    LightHost,
    LightPlacement,
    LightsPlacer,
    PointLight,
    ReferenceFrame,
    classify_cell,
    compute_light_placements,
    count_walkable_neighbors,
    neighbor_offsets,
)
from .mesh_builder import MeshGroup, RoomMesh, RoomMeshBuilder, build_room_mesh
from .mesh_utils import MeshData

__all__ = [
    'InMemoryLightHost',
    'LightHost',
    'LightPlacement',
    'LightsPlacer',
    'MeshData',
    'MeshGroup',
    'PointLight',
    'ReferenceFrame',
    'RoomMesh',
    'RoomMeshBuilder',
    'build_room_mesh',
    'classify_cell',
    'compute_light_placements',
    'count_walkable_neighbors',
    'neighbor_offsets',
]
