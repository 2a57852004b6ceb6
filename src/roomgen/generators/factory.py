"""
Construction of layout generators from their settings.

The settings dataclasses form a tagged union over the generator variants;
the settings type selects the generator.
"""

from __future__ import annotations

from typing import Dict, Type, Union

from .base import GeneratorType, LayoutGenerator, LayoutGeneratorSettings
from .dungeon import DungeonLayoutGenerator, DungeonSettings
from .maze import MazeLayoutGenerator, MazeSettings
from .room_corridor import RoomCorridorLayoutGenerator, RoomCorridorSettings

AnyGeneratorSettings = Union[RoomCorridorSettings, DungeonSettings, MazeSettings]

GENERATOR_SETTINGS: Dict[GeneratorType, Type[LayoutGeneratorSettings]] = {
    GeneratorType.ROOM_CORRIDOR: RoomCorridorSettings,
    GeneratorType.DUNGEON: DungeonSettings,
    GeneratorType.MAZE: MazeSettings,
}


def create_layout_generator(settings: AnyGeneratorSettings) -> LayoutGenerator:
    """
    Build the generator matching a settings object.

    Raises:
        TypeError: If the settings type does not belong to a known generator
    """
    # Exact type checks: MazeSettings and DungeonSettings share a base.
    if type(settings) is RoomCorridorSettings:
        return RoomCorridorLayoutGenerator(settings)
    if type(settings) is DungeonSettings:
        return DungeonLayoutGenerator(settings)
    if type(settings) is MazeSettings:
        return MazeLayoutGenerator(settings)
    raise TypeError(f"No layout generator for settings type {type(settings).__name__}")


def parse_generator_type(value: Union[str, GeneratorType]) -> GeneratorType:
    """
    Accept a GeneratorType or its string value.

    Raises:
        ValueError: If the name is unknown
    """
    if isinstance(value, GeneratorType):
        return value
    try:
        return GeneratorType(str(value).lower())
    except ValueError:
        valid = ", ".join(t.value for t in GeneratorType)
        raise ValueError(f"Unknown generator type '{value}' (expected one of: {valid})") from None
