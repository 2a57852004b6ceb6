"""
Carving and post-processing passes for dungeon and maze layouts.

Every pass works in place on (or returns) a float32 height grid indexed
[x, y]. Cells with a positive height are floor, everything else is wall.
Passes that need randomness take an explicit ``random.Random`` so a whole
generation stays reproducible from one seed.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import List, Set, Tuple

import numpy as np

from .base import empty_grid

logger = logging.getLogger(__name__)

# Axis steps used by the backtracker, in the order they are considered.
BACKTRACK_DIRECTIONS = ((0, -2), (2, 0), (0, 2), (-2, 0))
NEIGHBORS_4 = ((0, 1), (1, 0), (0, -1), (-1, 0))


def is_floor(grid: np.ndarray, x: int, y: int) -> bool:
    return bool(grid[x, y] > 0)


def count_floor_neighbors(grid: np.ndarray, x: int, y: int) -> int:
    """Count floor cells among the 4-neighbours of an interior cell."""
    return sum(1 for dx, dy in NEIGHBORS_4 if grid[x + dx, y + dy] > 0)


def is_dead_end(grid: np.ndarray, x: int, y: int) -> bool:
    """A floor cell with exactly one floor 4-neighbour."""
    return count_floor_neighbors(grid, x, y) == 1


# ---------------------------------------------------------------------------
# Cellular automata
# ---------------------------------------------------------------------------

def random_fill(width: int, height: int, density: float, floor_height: float,
                rng: random.Random) -> np.ndarray:
    """Border cells are walls; interior cells are walls with probability ``density``."""
    grid = empty_grid(width, height)
    for x in range(1, width - 1):
        for y in range(1, height - 1):
            if rng.random() >= density:
                grid[x, y] = floor_height
    return grid


def count_wall_neighbors(grid: np.ndarray) -> np.ndarray:
    """
    Count walls among the 8 Moore neighbours of every cell.

    Off-grid neighbours count as walls.
    """
    width, height = grid.shape
    walls = np.pad(grid <= 0, 1, mode='constant', constant_values=True).astype(np.int8)
    counts = np.zeros((width, height), dtype=np.int8)
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += walls[1 + dx:1 + dx + width, 1 + dy:1 + dy + height]
    return counts


def cellular_step(grid: np.ndarray, floor_height: float) -> np.ndarray:
    """
    One synchronous automata step over the interior cells.

    5 or more wall neighbours -> wall, 3 or fewer -> floor, 4 -> unchanged.
    The outer border is always wall.
    """
    width, height = grid.shape
    result = empty_grid(width, height)
    if width < 3 or height < 3:
        return result

    counts = count_wall_neighbors(grid)[1:-1, 1:-1]
    interior = grid[1:-1, 1:-1]
    result[1:-1, 1:-1] = np.where(
        counts >= 5, 0.0, np.where(counts <= 3, floor_height, interior)
    )
    return result


def flood_fill(grid: np.ndarray, start_x: int, start_y: int,
               visited: np.ndarray) -> List[Tuple[int, int]]:
    """Breadth-first 4-connected flood fill over floor cells."""
    width, height = grid.shape
    area = []
    queue = deque([(start_x, start_y)])
    visited[start_x, start_y] = True

    while queue:
        x, y = queue.popleft()
        area.append((x, y))
        for dx, dy in NEIGHBORS_4:
            nx, ny = x + dx, y + dy
            if (0 <= nx < width and 0 <= ny < height
                    and not visited[nx, ny] and grid[nx, ny] > 0):
                visited[nx, ny] = True
                queue.append((nx, ny))

    return area


def find_regions(grid: np.ndarray) -> List[List[Tuple[int, int]]]:
    """All 4-connected floor regions, discovered in x-major scan order."""
    width, height = grid.shape
    visited = np.zeros((width, height), dtype=bool)
    regions = []
    for x in range(width):
        for y in range(height):
            if grid[x, y] > 0 and not visited[x, y]:
                regions.append(flood_fill(grid, x, y, visited))
    return regions


def keep_largest_region(grid: np.ndarray) -> int:
    """
    Zero every floor cell outside the largest 4-connected region.

    Ties keep the region found first.

    Returns:
        Number of cells removed.
    """
    regions = find_regions(grid)
    if not regions:
        return 0

    largest = regions[0]
    for region in regions[1:]:
        if len(region) > len(largest):
            largest = region

    keep = np.zeros(grid.shape, dtype=bool)
    xs, ys = zip(*largest)
    keep[list(xs), list(ys)] = True

    removed_mask = (grid > 0) & ~keep
    removed = int(np.count_nonzero(removed_mask))
    grid[removed_mask] = 0.0
    if removed:
        logger.debug("Dropped %d cells in %d disconnected regions", removed, len(regions) - 1)
    return removed


def widen_paths(grid: np.ndarray, path_width: int, floor_height: float) -> np.ndarray:
    """
    Stamp a ``path_width`` square at every interior floor cell.

    The square extends toward +x/+y only and never touches the outer border.
    """
    width, height = grid.shape
    result = grid.copy()
    if path_width <= 1:
        return result

    for x in range(1, width - 1):
        for y in range(1, height - 1):
            if grid[x, y] <= 0:
                continue
            x_end = min(x + path_width, width - 1)
            y_end = min(y + path_width, height - 1)
            result[x:x_end, y:y_end] = floor_height

    return result


def generate_cellular(width: int, height: int, density: float, iterations: int,
                      path_width: int, floor_height: float,
                      rng: random.Random) -> np.ndarray:
    """Cave layout: random fill, automata smoothing, largest region, widening."""
    grid = random_fill(width, height, density, floor_height, rng)
    for _ in range(iterations):
        grid = cellular_step(grid, floor_height)
    keep_largest_region(grid)
    if path_width > 1:
        grid = widen_paths(grid, path_width, floor_height)
    return grid


# ---------------------------------------------------------------------------
# Recursive backtracker
# ---------------------------------------------------------------------------

def carve_recursive_backtracker(width: int, height: int, floor_height: float,
                                rng: random.Random) -> np.ndarray:
    """
    Carve a perfect maze with an explicit-stack depth-first search.

    Starts at the grid center and moves two cells at a time, carving the
    cell in between, so carved passages stay separated by walls. Targets
    must lie strictly inside the outer border.
    """
    grid = empty_grid(width, height)
    if width == 0 or height == 0:
        return grid

    start = (width // 2, height // 2)
    visited = np.zeros((width, height), dtype=bool)
    stack = [start]
    visited[start] = True
    grid[start] = floor_height

    while stack:
        x, y = stack[-1]
        neighbors = []
        for dx, dy in BACKTRACK_DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 < nx < width - 1 and 0 < ny < height - 1 and not visited[nx, ny]:
                neighbors.append((nx, ny, dx, dy))

        if not neighbors:
            stack.pop()
            continue

        nx, ny, dx, dy = neighbors[rng.randrange(len(neighbors))]
        grid[x + dx // 2, y + dy // 2] = floor_height
        grid[nx, ny] = floor_height
        visited[nx, ny] = True
        stack.append((nx, ny))

    return grid


# ---------------------------------------------------------------------------
# Shared post-processing
# ---------------------------------------------------------------------------

def add_loops(grid: np.ndarray, loop_count: int, floor_height: float,
              rng: random.Random) -> int:
    """
    Open random walls that touch at least two floor cells.

    Makes at most ``10 * loop_count`` attempts and stops after ``loop_count``
    successes.

    Returns:
        Number of walls converted to floor.
    """
    width, height = grid.shape
    if loop_count <= 0 or width < 4 or height < 4:
        return 0

    added = 0
    attempts = 0
    max_attempts = loop_count * 10
    while added < loop_count and attempts < max_attempts:
        attempts += 1
        x = _sample_inner(rng, width)
        y = _sample_inner(rng, height)
        if grid[x, y] <= 0 and count_floor_neighbors(grid, x, y) >= 2:
            grid[x, y] = floor_height
            added += 1

    logger.debug("Added %d loops in %d attempts", added, attempts)
    return added


def _sample_inner(rng: random.Random, size: int) -> int:
    # Candidates keep two cells from the border: [2, size - 3].
    if size - 2 <= 2:
        return 2
    return rng.randrange(2, size - 2)


def remove_dead_ends(grid: np.ndarray) -> int:
    """
    Remove dead ends repeatedly until none remain.

    Returns:
        Number of cells removed.
    """
    width, height = grid.shape
    removed = 0
    changed = True
    while changed:
        changed = False
        for x in range(1, width - 1):
            for y in range(1, height - 1):
                if grid[x, y] > 0 and is_dead_end(grid, x, y):
                    grid[x, y] = 0.0
                    removed += 1
                    changed = True
    return removed


def remove_some_dead_ends(grid: np.ndarray, keep_chance: float,
                          rng: random.Random) -> int:
    """
    Single pass removing each dead end with probability ``1 - keep_chance``.

    Dead ends created during the pass are not revisited.
    """
    width, height = grid.shape
    removed = 0
    for x in range(1, width - 1):
        for y in range(1, height - 1):
            if grid[x, y] > 0 and is_dead_end(grid, x, y):
                if rng.random() > keep_chance:
                    grid[x, y] = 0.0
                    removed += 1
    return removed


def smooth_edges(grid: np.ndarray, floor_height: float) -> int:
    """Single in-place pass turning walls with 3+ floor neighbours into floor."""
    width, height = grid.shape
    filled = 0
    for x in range(1, width - 1):
        for y in range(1, height - 1):
            if grid[x, y] <= 0 and count_floor_neighbors(grid, x, y) >= 3:
                grid[x, y] = floor_height
                filled += 1
    return filled


def post_process(grid: np.ndarray, loop_count: int, dead_end_keep_chance: float,
                 smooth: bool, floor_height: float, rng: random.Random) -> None:
    """Loops, then dead-end handling, then optional edge smoothing."""
    if loop_count > 0:
        add_loops(grid, loop_count, floor_height, rng)

    if dead_end_keep_chance <= 0:
        removed = remove_dead_ends(grid)
    elif dead_end_keep_chance < 1:
        removed = remove_some_dead_ends(grid, dead_end_keep_chance, rng)
    else:
        removed = 0
    if removed:
        logger.debug("Removed %d dead-end cells", removed)

    if smooth:
        smooth_edges(grid, floor_height)


def carved_cells(grid: np.ndarray) -> Set[Tuple[int, int]]:
    """Coordinates of every floor cell."""
    xs, ys = np.nonzero(grid > 0)
    return set(zip(xs.tolist(), ys.tolist()))
