"""
Base types shared by all layout generators.

A layout generator is a pure function of (seed, settings, width, height):
it returns a dense float32 height array indexed [x, y] where 0 is a wall
and a positive value is the floor elevation.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import numpy as np


class GeneratorType(Enum):
    """Available layout generator variants."""
    ROOM_CORRIDOR = "room_corridor"
    DUNGEON = "dungeon"
    MAZE = "maze"


@dataclass
class LayoutGeneratorSettings:
    """Fields common to every generator variant."""
    seed: int = 0
    height: float = 1.0


class LayoutGenerator(ABC):
    """Interface for generators that produce 2D height grids."""

    generator_type: GeneratorType

    @abstractmethod
    def generate(self, width: int, height: int) -> np.ndarray:
        """
        Generate a layout.

        Args:
            width: Width of the grid in cells
            height: Height of the grid in cells

        Returns:
            float32 array of shape (width, height); 0 for walls, >0 for floors.
        """

    @staticmethod
    def _make_rng(seed: int) -> random.Random:
        # A fresh RNG per call keeps generate() reproducible.
        return random.Random(seed)


def empty_grid(width: int, height: int) -> np.ndarray:
    """All-wall height grid."""
    return np.zeros((max(width, 0), max(height, 0)), dtype=np.float32)
