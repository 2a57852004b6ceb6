"""
Ceiling light placement for generated rooms.

Cells are classified by how many walkable neighbours they have: open
areas become room cells, narrow passages become corridor cells. A greedy
row-major scan then accepts one candidate light per cell center as long as
it keeps its classification's spacing from every light already accepted.

Light instances are owned by a LightHost. Re-running placement diffs the
new list against the tracked instances by index so unchanged lights are
moved rather than recreated.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from roomgen.config import LightSettings, Neighborhood
from roomgen.grid import GridData

logger = logging.getLogger(__name__)

# Point light parameters per classification
ROOM_LIGHT_RANGE = 6.0
ROOM_LIGHT_INTENSITY = 1.7
CORRIDOR_LIGHT_RANGE = 4.0
CORRIDOR_LIGHT_INTENSITY = 1.2


class ReferenceFrame:
    """Parent transform applied to grid-space positions (4x4 affine matrix)."""

    def __init__(self, matrix: Optional[np.ndarray] = None):
        if matrix is None:
            matrix = np.eye(4)
        self.matrix = np.asarray(matrix, dtype=np.float64)
        if self.matrix.shape != (4, 4):
            raise ValueError(f"Reference frame must be a 4x4 matrix, got {self.matrix.shape}")

    @classmethod
    def identity(cls) -> 'ReferenceFrame':
        return cls()

    @classmethod
    def from_translation(cls, x: float, y: float, z: float) -> 'ReferenceFrame':
        matrix = np.eye(4)
        matrix[:3, 3] = (x, y, z)
        return cls(matrix)

    def transform_point(self, point: Sequence[float]) -> np.ndarray:
        p = np.array([point[0], point[1], point[2], 1.0])
        return (self.matrix @ p)[:3]


@dataclass
class LightPlacement:
    """World-space light position and its room/corridor classification."""
    position: np.ndarray
    is_room: bool


@lru_cache(maxsize=None)
def neighbor_offsets(neighborhood: Neighborhood, radius: int = 1) -> Tuple[Tuple[int, int], ...]:
    """
    Offsets of the cells counted as neighbours.

    EIGHT covers the square of side 2r+1, FOUR the diamond of cells within
    Manhattan distance r. Radii below 1 count as 1.
    """
    radius = max(int(radius), 1)
    offsets = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if dx == 0 and dy == 0:
                continue
            if neighborhood == Neighborhood.FOUR and abs(dx) + abs(dy) > radius:
                continue
            offsets.append((dx, dy))
    return tuple(offsets)


def count_walkable_neighbors(grid: GridData, x: int, y: int,
                             neighborhood: Neighborhood = Neighborhood.EIGHT,
                             radius: int = 1) -> int:
    """Count walkable cells around (x, y); off-grid cells do not count."""
    return sum(1 for dx, dy in neighbor_offsets(neighborhood, radius)
               if grid.is_walkable(x + dx, y + dy))


def classify_cell(grid: GridData, x: int, y: int,
                  settings: LightSettings) -> Optional[bool]:
    """
    Classify a cell for lighting.

    Returns:
        True for a room cell, False for a corridor cell, None when the cell
        is not walkable or matches neither class.
    """
    if not grid.is_walkable(x, y):
        return None

    count = count_walkable_neighbors(
        grid, x, y, settings.neighborhood, settings.neighbor_radius)
    if count >= settings.room_min_neighbors:
        return True
    if settings.corridor_min_neighbors <= count <= settings.corridor_max_neighbors:
        return False
    return None


def compute_light_placements(
    grid: GridData,
    settings: Optional[LightSettings] = None,
    frame: Optional[ReferenceFrame] = None,
) -> List[LightPlacement]:
    """
    Greedy light placement over the grid.

    Cells are scanned row by row (y outer, x inner). A candidate is
    accepted only if it lies at least its own class spacing away from every
    light accepted so far.

    Args:
        grid: Grid to light
        settings: Classification and spacing rules
        frame: Parent transform for the positions (identity if omitted)

    Returns:
        Accepted placements in scan order.
    """
    settings = settings or LightSettings()
    frame = frame or ReferenceFrame.identity()
    accepted: List[LightPlacement] = []

    for y in range(grid.height):
        for x in range(grid.width):
            is_room = classify_cell(grid, x, y, settings)
            if is_room is None:
                continue

            position = frame.transform_point((x + 0.5, grid.get_cell_height(x, y), y + 0.5))
            spacing = settings.room_spacing if is_room else settings.corridor_spacing
            if all(np.linalg.norm(position - other.position) >= spacing for other in accepted):
                accepted.append(LightPlacement(position, is_room))

    return accepted


# ---------------------------------------------------------------------------
# Light instances
# ---------------------------------------------------------------------------

class LightHost(ABC):
    """Creates and owns light instances for placements."""

    @abstractmethod
    def create_light(self, placement: LightPlacement) -> Any:
        """Create a light for a placement and return its handle."""

    @abstractmethod
    def move_light(self, light: Any, position: np.ndarray) -> None:
        """Move an existing light."""

    @abstractmethod
    def destroy_light(self, light: Any) -> None:
        """Destroy a light. Destroying a dead light is a no-op."""

    @abstractmethod
    def is_alive(self, light: Any) -> bool:
        """True if the light still exists in the host."""


@dataclass(eq=False)
class PointLight:
    """In-memory point light. Compared by identity."""
    position: np.ndarray
    range: float
    intensity: float
    is_room: bool
    alive: bool = True


class InMemoryLightHost(LightHost):
    """Host that keeps point lights in a list."""

    def __init__(self):
        self.lights: List[PointLight] = []

    def create_light(self, placement: LightPlacement) -> PointLight:
        if placement.is_room:
            light = PointLight(placement.position.copy(), ROOM_LIGHT_RANGE,
                               ROOM_LIGHT_INTENSITY, True)
        else:
            light = PointLight(placement.position.copy(), CORRIDOR_LIGHT_RANGE,
                               CORRIDOR_LIGHT_INTENSITY, False)
        self.lights.append(light)
        return light

    def move_light(self, light: PointLight, position: np.ndarray) -> None:
        light.position = np.asarray(position).copy()

    def destroy_light(self, light: PointLight) -> None:
        if not light.alive:
            return
        light.alive = False
        self.lights.remove(light)

    def is_alive(self, light: PointLight) -> bool:
        return light.alive

    @property
    def light_count(self) -> int:
        return len(self.lights)


@dataclass
class LightsPlacer:
    """Keeps a host's light instances in sync with the current grid."""
    host: LightHost = field(default_factory=InMemoryLightHost)
    instances: List[Any] = field(default_factory=list)
    placements: List[LightPlacement] = field(default_factory=list)

    def add_ceiling_lights(
        self,
        grid: GridData,
        settings: Optional[LightSettings] = None,
        frame: Optional[ReferenceFrame] = None,
        host: Optional[LightHost] = None,
    ) -> List[LightPlacement]:
        """
        Place lights for the grid, reusing existing instances by index.

        The first min(old, new) instances are moved, extra placements get
        new instances and surplus instances are destroyed. A different host,
        or any tracked instance that is no longer alive, forces a full
        rebuild.

        Returns:
            The placements now backed by instances.
        """
        if host is not None and host is not self.host:
            self.clear()
            self.host = host
        elif any(not self.host.is_alive(light) for light in self.instances):
            logger.debug("Tracked light instance lost, rebuilding all lights")
            self.clear()

        placements = compute_light_placements(grid, settings, frame)
        created, reused, destroyed = self._sync(placements)
        self.placements = placements

        logger.debug(
            "Placed %d lights (%d reused, %d created, %d destroyed)",
            len(placements), reused, created, destroyed,
        )
        return placements

    def _sync(self, placements: List[LightPlacement]) -> Tuple[int, int, int]:
        reused = min(len(self.instances), len(placements))
        for light, placement in zip(self.instances, placements):
            self.host.move_light(light, placement.position)

        created = 0
        for placement in placements[reused:]:
            self.instances.append(self.host.create_light(placement))
            created += 1

        surplus = self.instances[len(placements):]
        for light in surplus:
            self.host.destroy_light(light)
        del self.instances[len(placements):]

        return created, reused, len(surplus)

    def clear(self) -> None:
        """Destroy every tracked light instance."""
        for light in self.instances:
            if self.host.is_alive(light):
                self.host.destroy_light(light)
        self.instances.clear()
        self.placements = []

    @property
    def light_count(self) -> int:
        return len(self.instances)
