"""
Layout generation algorithms.

- RoomCorridorLayoutGenerator: rectangular rooms linked by L-shaped corridors
- DungeonLayoutGenerator: cellular-automata caves or backtracker mazes
- MazeLayoutGenerator: backtracker maze with loop / dead-end / smoothing knobs

Every generator maps (seed, settings, width, height) to a float32 height
array indexed [x, y].
"""

from .base import GeneratorType, LayoutGenerator, LayoutGeneratorSettings
from .dungeon import DungeonLayoutGenerator, DungeonSettings
from .factory import (
    GENERATOR_SETTINGS,
    AnyGeneratorSettings,
    create_layout_generator,
    parse_generator_type,
)
from .maze import MazeLayoutGenerator, MazeSettings
from .room_corridor import (
    Room,
    RoomCorridorLayoutGenerator,
    RoomCorridorSettings,
    normalize_room_sizes,
)

__all__ = [
    'AnyGeneratorSettings',
    'DungeonLayoutGenerator',
    'DungeonSettings',
    'GENERATOR_SETTINGS',
    'GeneratorType',
    'LayoutGenerator',
    'LayoutGeneratorSettings',
    'MazeLayoutGenerator',
    'MazeSettings',
    'Room',
    'RoomCorridorLayoutGenerator',
    'RoomCorridorSettings',
    'create_layout_generator',
    'normalize_room_sizes',
    'parse_generator_type',
]
