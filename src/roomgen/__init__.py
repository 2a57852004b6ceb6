"""
roomgen - procedural room layouts and room geometry.

Layout generators fill a grid of cell heights; the mesh builder turns the
grid into Floor / Walls / Roof mesh groups and the light placer puts
ceiling lights over it. RoomGenerator drives all three.
"""

from roomgen.config import RoomGeneratorSettings
from roomgen.grid import GridData
from roomgen.pipeline import RoomGenerator
from roomgen.validation import RoomGenError, ValidationError

__version__ = "1.0.0"

__all__ = [
    'GridData',
    'RoomGenError',
    'RoomGenerator',
    'RoomGeneratorSettings',
    'ValidationError',
]
