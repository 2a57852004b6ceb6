"""
Configuration for room generation.

Holds the grid size limits, the mesh and lighting settings, and the
per-generator settings bundle, plus JSON persistence of those settings in
~/.config/roomgen/settings.json.

Usage:
    from roomgen.config import load_settings, save_settings

    settings = load_settings()
    settings.mesh.mesh_resolution = 2
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from roomgen.generators import (
    DungeonSettings,
    GeneratorType,
    MazeSettings,
    RoomCorridorSettings,
)
from roomgen.grid import CellWinding

logger = logging.getLogger(__name__)


# Grid size limits applied by the room generator
MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 100
DEFAULT_GRID_SIZE = 40

# Mesh group names
FLOOR_MESH_NAME = "Floor"
WALLS_MESH_NAME = "Walls"
ROOF_MESH_NAME = "Roof"
MESH_GROUP_NAMES = (FLOOR_MESH_NAME, WALLS_MESH_NAME, ROOF_MESH_NAME)

SETTINGS_FILENAME = "settings.json"


class Neighborhood(Enum):
    """Neighbour set used to classify cells for lighting."""
    FOUR = 4    # orthogonal neighbours
    EIGHT = 8   # orthogonal + diagonal neighbours


@dataclass
class MeshSettings:
    """Settings for converting a grid to mesh groups."""
    uv_scale: float = 1.0
    mesh_resolution: int = 1          # subdivisions per quad side
    cell_winding: CellWinding = CellWinding.DEFAULT
    invert_roof: bool = False


@dataclass
class LightSettings:
    """
    Ceiling light placement rules.

    A walkable cell is a room cell when it has at least room_min_neighbors
    walkable neighbours, otherwise a corridor cell when the count lies in
    [corridor_min_neighbors, corridor_max_neighbors]; anything else gets no
    light. Neighbours are counted within neighbor_radius cells: a square
    for EIGHT, a diamond (Manhattan distance) for FOUR.
    """
    room_spacing: float = 8.0
    corridor_spacing: float = 8.0
    neighborhood: Neighborhood = Neighborhood.EIGHT
    neighbor_radius: int = 1
    room_min_neighbors: int = 4
    corridor_min_neighbors: int = 1
    corridor_max_neighbors: int = 2


@dataclass
class RoomGeneratorSettings:
    """Complete settings for the room generator."""
    grid_width: int = DEFAULT_GRID_SIZE
    grid_height: int = DEFAULT_GRID_SIZE
    default_height: float = 2.5
    realtime_generation: bool = True
    automatically_add_lights: bool = True
    generator_type: GeneratorType = GeneratorType.DUNGEON

    mesh: MeshSettings = field(default_factory=MeshSettings)
    lights: LightSettings = field(default_factory=LightSettings)

    room_corridor: RoomCorridorSettings = field(default_factory=RoomCorridorSettings)
    dungeon: DungeonSettings = field(default_factory=DungeonSettings)
    maze: MazeSettings = field(default_factory=MazeSettings)

    def generator_settings(self, generator_type: Optional[GeneratorType] = None):
        """Settings object for a generator type (defaults to the selected one)."""
        generator_type = generator_type or self.generator_type
        return {
            GeneratorType.ROOM_CORRIDOR: self.room_corridor,
            GeneratorType.DUNGEON: self.dungeon,
            GeneratorType.MAZE: self.maze,
        }[generator_type]


def clamp_grid_size(value: int) -> int:
    """Clamp a grid dimension to [MIN_GRID_SIZE, MAX_GRID_SIZE]."""
    return max(MIN_GRID_SIZE, min(MAX_GRID_SIZE, int(value)))


# ---------------------------------------------------------------------------
# Dict conversion
# ---------------------------------------------------------------------------

def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    return value


def settings_to_dict(settings: RoomGeneratorSettings) -> Dict[str, Any]:
    """Convert settings to a JSON-serializable dictionary."""
    return _encode(asdict(settings))


def _dataclass_from_dict(cls, data: Optional[Dict[str, Any]], enums: Dict[str, type] = None):
    """
    Build a dataclass from a dict, ignoring unknown keys.

    Raises:
        ValueError: If data is not a dict
    """
    instance = cls()
    if data is None:
        return instance
    if not isinstance(data, dict):
        raise ValueError(f"{cls.__name__} section must be an object, got {type(data).__name__}")
    enums = enums or {}
    known = {f.name for f in fields(cls)}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown setting %s.%s", cls.__name__, key)
            continue
        if key in enums:
            value = enums[key](value)
        setattr(instance, key, value)
    return instance


def settings_from_dict(data: Dict[str, Any]) -> RoomGeneratorSettings:
    """
    Create settings from a dictionary.

    Missing keys keep their defaults; unknown keys are ignored.

    Raises:
        ValueError: If data is not a dict or an enum value is not recognised
    """
    if not isinstance(data, dict):
        raise ValueError(f"Settings must be an object, got {type(data).__name__}")
    nested = {
        "mesh": _dataclass_from_dict(
            MeshSettings, data.get("mesh"), {"cell_winding": CellWinding}),
        "lights": _dataclass_from_dict(
            LightSettings, data.get("lights"), {"neighborhood": Neighborhood}),
        "room_corridor": _dataclass_from_dict(RoomCorridorSettings, data.get("room_corridor")),
        "dungeon": _dataclass_from_dict(DungeonSettings, data.get("dungeon")),
        "maze": _dataclass_from_dict(MazeSettings, data.get("maze")),
    }
    top_level = {k: v for k, v in data.items() if k not in nested}
    settings = _dataclass_from_dict(
        RoomGeneratorSettings, top_level, {"generator_type": GeneratorType})
    for key, value in nested.items():
        setattr(settings, key, value)
    return settings


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def get_config_dir() -> Path:
    """
    Directory for user settings.

    Returns:
        Path to ~/.config/roomgen/ (not created here)
    """
    return Path.home() / ".config" / "roomgen"


def save_settings(settings: RoomGeneratorSettings, path: Optional[Path] = None) -> Path:
    """
    Save settings as JSON.

    Args:
        settings: Settings to save
        path: Target file (defaults to the user config file)

    Returns:
        Path to the saved file
    """
    path = Path(path) if path else get_config_dir() / SETTINGS_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings_to_dict(settings), f, indent=2)
    logger.info("Saved settings to %s", path)
    return path


def load_settings(path: Optional[Path] = None) -> RoomGeneratorSettings:
    """
    Load settings from JSON.

    A missing file yields defaults. A malformed file yields defaults and a
    logged warning.
    """
    path = Path(path) if path else get_config_dir() / SETTINGS_FILENAME
    if not path.exists():
        return RoomGeneratorSettings()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings root must be an object")
        return settings_from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Failed to load settings from %s: %s", path, e)
        return RoomGeneratorSettings()
