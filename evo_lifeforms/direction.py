"""
Compass directions a lifeform can face. North is +y, listed clockwise.
"""
from enum import Enum
from typing import Tuple
import math
import numpy as np


class Direction(Enum):
    NORTH = 0
    NORTH_EAST = 1
    EAST = 2
    SOUTH_EAST = 3
    SOUTH = 4
    SOUTH_WEST = 5
    WEST = 6
    NORTH_WEST = 7

    @property
    def vector(self) -> Tuple[int, int]:
        return _VECTORS[self.value]

    @property
    def angle(self) -> float:
        """Heading in radians, clockwise from north."""
        return self.value * math.pi / 4

    def turn_left(self) -> "Direction":
        return Direction((self.value - 1) % 8)

    def turn_right(self) -> "Direction":
        return Direction((self.value + 1) % 8)

    @classmethod
    def random(cls, rng: np.random.Generator) -> "Direction":
        return cls(int(rng.integers(0, 8)))


_VECTORS = [(0, 1), (1, 1), (1, 0), (1, -1), (0, -1), (-1, -1), (-1, 0), (-1, 1)]
