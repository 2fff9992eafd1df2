"""
Pheromone field for AntEvo.

A 2-D grid over the world footprint (x, z). Ants deposit into it when they
move or eat, read it through their sensors, and it fades every tick.
"""

import numpy as np
from config import PHEROMONE_EPSILON


class PheromoneField:
    """Bounded scalar trail map with values in [0, 1]."""

    def __init__(self, width: int, depth: int):
        self.width = width
        self.depth = depth
        self._grid = np.zeros((width, depth), dtype=np.float64)

    def deposit(self, x: int, z: int, amount: float):
        """Add pheromone at (x, z), saturating at 1. Out of bounds is ignored."""
        if not self._in_bounds(x, z):
            return
        self._grid[x, z] = min(self._grid[x, z] + amount, 1.0)

    def decay(self, rate: float):
        """Fade every cell by `rate`; cells already near zero snap to 0."""
        g = self._grid
        g[:] = np.where(g > PHEROMONE_EPSILON, g * (1.0 - rate), 0.0)

    def query(self, x: int, z: int) -> float:
        """Pheromone at (x, z); 0 outside the grid."""
        if not self._in_bounds(x, z):
            return 0.0
        return float(self._grid[x, z])

    def clear(self):
        self._grid[:] = 0.0

    def total(self) -> float:
        return float(self._grid.sum())

    def as_array(self) -> np.ndarray:
        return self._grid.copy()

    def _in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.depth
