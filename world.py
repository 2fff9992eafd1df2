"""
Voxel World for AntEvo.

The world is a fixed-size 3-D block grid indexed [x, y, z] with y pointing
up. The simulation only needs three things from it: read a block, write a
block, and find the top solid block of a column. Anything that provides
get_cell / set_cell / column_height / count plus width, height and depth can
stand in for VoxelWorld.
"""

from enum import IntEnum

import numpy as np
from config import (WORLD_WIDTH, WORLD_HEIGHT, WORLD_DEPTH, GROUND_LEVEL,
                    FOOD_FRACTION, HAZARD_FRACTION)


class BlockType(IntEnum):
    """Block kinds. The sensor code of a kind is value / (len - 1)."""
    EMPTY          = 0
    GRASS          = 1
    STONE          = 2
    FOOD           = 3
    NEST           = 4
    HAZARD         = 5
    INDESTRUCTIBLE = 6


_CODE_SCALE = len(BlockType) - 1


def block_code(kind) -> float:
    """Map a block kind evenly onto [0, 1] for the sensors."""
    return int(kind) / _CODE_SCALE


class VoxelWorld:
    """
    In-memory block grid. Out-of-bounds reads return EMPTY and
    out-of-bounds writes are ignored.
    """

    def __init__(self, width: int = WORLD_WIDTH, height: int = WORLD_HEIGHT,
                 depth: int = WORLD_DEPTH):
        self.width  = width
        self.height = height
        self.depth  = depth
        self._blocks = np.zeros((width, height, depth), dtype=np.int8)

    # ──────────────────────────────────────────────────────────────────────────

    def get_cell(self, x: int, y: int, z: int) -> BlockType:
        if not self._in_bounds(x, y, z):
            return BlockType.EMPTY
        return BlockType(int(self._blocks[x, y, z]))

    def set_cell(self, x: int, y: int, z: int, kind):
        if self._in_bounds(x, y, z):
            self._blocks[x, y, z] = int(kind)

    def column_height(self, x: int, z: int) -> int:
        """Y of the topmost non-empty block at (x, z); 0 if the column is empty."""
        if not (0 <= x < self.width and 0 <= z < self.depth):
            return 0
        solid = np.flatnonzero(self._blocks[x, :, z])
        return int(solid[-1]) if solid.size else 0

    def count(self, kind) -> int:
        return int(np.count_nonzero(self._blocks == int(kind)))

    def top_view(self):
        """
        Returns two (width, depth) arrays for visualisation:
          heights: column_height of every column
          kinds:   block type at the top of every column
        """
        solid = self._blocks != BlockType.EMPTY
        # index of the last True along y; columns with no solid block give 0
        rev = solid[:, ::-1, :]
        heights = self.height - 1 - np.argmax(rev, axis=1)
        heights[~solid.any(axis=1)] = 0
        xs, zs = np.indices((self.width, self.depth))
        kinds = self._blocks[xs, heights, zs]
        return heights, kinds

    def _in_bounds(self, x: int, y: int, z: int) -> bool:
        return (0 <= x < self.width and 0 <= y < self.height
                and 0 <= z < self.depth)


# ──────────────────────────────────────────────────────────────────────────────
# Demo terrain
# ──────────────────────────────────────────────────────────────────────────────

def build_flat_world(width: int = WORLD_WIDTH, height: int = WORLD_HEIGHT,
                     depth: int = WORLD_DEPTH, ground: int = GROUND_LEVEL,
                     food_fraction: float = FOOD_FRACTION,
                     hazard_fraction: float = HAZARD_FRACTION,
                     rng=None) -> VoxelWorld:
    """
    Layered test terrain: indestructible bedrock at y=0, stone up to
    `ground`-1, a grass surface at `ground`, and a random share of surface
    columns carrying one food block or turned into hazard.
    """
    if rng is None:
        rng = np.random.default_rng()
    ground = max(1, min(ground, height - 3))
    world = VoxelWorld(width, height, depth)
    blocks = world._blocks
    blocks[:, 0, :] = BlockType.INDESTRUCTIBLE
    blocks[:, 1:ground, :] = BlockType.STONE
    blocks[:, ground, :] = BlockType.GRASS

    roll = rng.random((width, depth))
    food = roll < food_fraction
    hazard = (roll >= food_fraction) & (roll < food_fraction + hazard_fraction)
    blocks[:, ground + 1, :][food] = BlockType.FOOD
    blocks[:, ground, :][hazard] = BlockType.HAZARD
    return world
