"""
Maze layout generation.

A maze is the recursive-backtracker dungeon with the maze-relevant knobs
exposed: loops, dead-end pruning and edge smoothing.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .base import GeneratorType, LayoutGenerator, LayoutGeneratorSettings
from .dungeon import DungeonLayoutGenerator, DungeonSettings


@dataclass
class MazeSettings(LayoutGeneratorSettings):
    """Settings for maze generation."""
    loop_count: int = 5
    dead_end_keep_chance: float = 0.3
    smooth_edges: bool = False

    def to_dungeon_settings(self) -> DungeonSettings:
        return DungeonSettings(
            seed=self.seed,
            height=self.height,
            loop_count=self.loop_count,
            dead_end_keep_chance=self.dead_end_keep_chance,
            smooth_edges=self.smooth_edges,
            use_recursive_backtracker=True,
        )


class MazeLayoutGenerator(LayoutGenerator):
    """Perfect maze via recursive backtracker, then shared post-processing."""

    generator_type = GeneratorType.MAZE

    def __init__(self, settings: MazeSettings = None):
        self.settings = settings or MazeSettings()

    def generate(self, width: int, height: int) -> np.ndarray:
        return DungeonLayoutGenerator(self.settings.to_dungeon_settings()).generate(width, height)
