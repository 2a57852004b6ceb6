"""
Rooms-and-corridors layout generation.

Rooms are placed by rejection sampling (a rejected room is skipped, never
retried), then linked in center order by L-shaped corridors.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .base import GeneratorType, LayoutGenerator, LayoutGeneratorSettings, empty_grid

logger = logging.getLogger(__name__)


@dataclass
class RoomCorridorSettings(LayoutGeneratorSettings):
    """Settings for rooms-and-corridors generation."""
    max_rooms: int = 10
    min_room_size: int = 4
    max_room_size: int = 10


@dataclass
class Room:
    """Rectangular room in grid cells. Only lives for one generate() call."""
    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        """One past the right edge."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """One past the front edge."""
        return self.y + self.height

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def intersects(self, other: 'Room') -> bool:
        """True if the rooms overlap or touch; accepted rooms keep a one-cell gap."""
        return not (self.x2 < other.x or self.x > other.x2 or
                    self.y2 < other.y or self.y > other.y2)


def normalize_room_sizes(settings: RoomCorridorSettings, width: int, height: int) -> Tuple[int, int]:
    """
    Clamp the room size range to what fits inside a grid.

    Both sizes are limited to ``min(width, height) - 2`` so a room keeps a
    one-cell margin. The max size is pushed above the min size when the grid
    leaves room for it.

    Returns:
        (min_room_size, max_room_size)
    """
    limit = max(min(width, height) - 2, 1)
    min_size = min(max(settings.min_room_size, 1), limit)
    max_size = settings.max_room_size
    if max_size <= min_size:
        max_size = min_size + 1
    return min_size, min(max_size, limit)


class RoomCorridorLayoutGenerator(LayoutGenerator):
    """Generates rooms connected by L-shaped corridors."""

    generator_type = GeneratorType.ROOM_CORRIDOR

    def __init__(self, settings: RoomCorridorSettings = None):
        self.settings = settings or RoomCorridorSettings()

    def generate(self, width: int, height: int) -> np.ndarray:
        rng = self._make_rng(self.settings.seed)
        grid = empty_grid(width, height)
        if min(width, height) < 3:
            logger.debug("Grid %dx%d too small for rooms", width, height)
            return grid

        rooms = self.place_rooms(rng, width, height)
        for room in rooms:
            self._carve_room(grid, room)
        self._connect_rooms(rng, grid, rooms)

        logger.debug(
            "Room/corridor layout %dx%d (seed %d): %d of %d rooms placed",
            width, height, self.settings.seed, len(rooms), self.settings.max_rooms,
        )
        return grid

    def place_rooms(self, rng: random.Random, width: int, height: int) -> List[Room]:
        """Rejection-sample up to max_rooms non-touching rooms."""
        min_size, max_size = normalize_room_sizes(self.settings, width, height)
        rooms: List[Room] = []

        for _ in range(self.settings.max_rooms):
            w = rng.randint(min_size, max_size)
            h = rng.randint(min_size, max_size)
            x = rng.randint(1, max(1, width - w - 2))
            y = rng.randint(1, max(1, height - h - 2))

            new_room = Room(x, y, w, h)
            if any(new_room.intersects(other) for other in rooms):
                continue
            rooms.append(new_room)

        return rooms

    def _carve_room(self, grid: np.ndarray, room: Room) -> None:
        grid[room.x:room.x2, room.y:room.y2] = self.settings.height

    def _carve_h_corridor(self, grid: np.ndarray, x1: int, x2: int, y: int) -> None:
        grid[min(x1, x2):max(x1, x2) + 1, y] = self.settings.height

    def _carve_v_corridor(self, grid: np.ndarray, y1: int, y2: int, x: int) -> None:
        grid[x, min(y1, y2):max(y1, y2) + 1] = self.settings.height

    def _connect_rooms(self, rng: random.Random, grid: np.ndarray, rooms: List[Room]) -> None:
        # Sorting by center gives a consistent left-to-right chain.
        ordered = sorted(rooms, key=lambda r: r.center)

        for current, following in zip(ordered, ordered[1:]):
            x1, y1 = current.center
            x2, y2 = following.center
            if rng.random() < 0.5:
                self._carve_h_corridor(grid, x1, x2, y1)
                self._carve_v_corridor(grid, y1, y2, x2)
            else:
                self._carve_v_corridor(grid, y1, y2, x1)
                self._carve_h_corridor(grid, x1, x2, y2)
