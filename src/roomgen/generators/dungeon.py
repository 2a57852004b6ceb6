"""
Dungeon layout generation.

Two carving algorithms share one post-processing pipeline:
- Cellular automata: organic caves, repaired to a single connected region
- Recursive backtracker: a perfect maze carved on a two-cell lattice
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from . import passes
from .base import GeneratorType, LayoutGenerator, LayoutGeneratorSettings

logger = logging.getLogger(__name__)


@dataclass
class DungeonSettings(LayoutGeneratorSettings):
    """Settings for dungeon / cave generation."""
    density: float = 0.4             # 0-1, higher = more walls
    iterations: int = 3              # automata steps
    path_width: int = 1              # 1-5
    dead_end_keep_chance: float = 0.3
    loop_count: int = 5
    smooth_edges: bool = False
    use_recursive_backtracker: bool = False


class DungeonLayoutGenerator(LayoutGenerator):
    """Cellular automata or backtracker dungeon generator."""

    generator_type = GeneratorType.DUNGEON

    def __init__(self, settings: DungeonSettings = None):
        self.settings = settings or DungeonSettings()

    def generate(self, width: int, height: int) -> np.ndarray:
        rng = self._make_rng(self.settings.seed)
        s = self.settings

        if s.use_recursive_backtracker:
            grid = passes.carve_recursive_backtracker(width, height, s.height, rng)
        else:
            grid = passes.generate_cellular(
                width, height, s.density, s.iterations, s.path_width, s.height, rng
            )

        passes.post_process(
            grid, s.loop_count, s.dead_end_keep_chance, s.smooth_edges, s.height, rng
        )

        logger.debug(
            "%s layout %dx%d (seed %d): %d floor cells",
            "Backtracker" if s.use_recursive_backtracker else "Cellular",
            width, height, s.seed, int(np.count_nonzero(grid > 0)),
        )
        return grid
