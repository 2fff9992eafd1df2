"""
Unit tests for world.py
"""

import pytest
import numpy as np
from world import BlockType, VoxelWorld, block_code, build_flat_world


class TestBlockCodes:

    def test_codes_spread_evenly(self):
        """Seven kinds mapped onto 0, 1/6, ..., 1"""
        codes = [block_code(k) for k in BlockType]
        assert len(codes) == 7
        assert codes[0] == 0.0
        assert codes[-1] == 1.0
        assert np.allclose(np.diff(codes), 1 / 6)

    def test_food_is_midpoint(self):
        assert block_code(BlockType.FOOD) == pytest.approx(0.5)


class TestVoxelWorld:

    def test_get_set(self):
        w = VoxelWorld(4, 4, 4)
        assert w.get_cell(1, 2, 3) == BlockType.EMPTY
        w.set_cell(1, 2, 3, BlockType.FOOD)
        assert w.get_cell(1, 2, 3) == BlockType.FOOD

    def test_out_of_bounds(self):
        """OOB reads are EMPTY and OOB writes are ignored"""
        w = VoxelWorld(4, 4, 4)
        w.set_cell(-1, 0, 0, BlockType.STONE)
        w.set_cell(0, 4, 0, BlockType.STONE)
        assert w.get_cell(-1, 0, 0) == BlockType.EMPTY
        assert w.get_cell(9, 9, 9) == BlockType.EMPTY
        assert w.count(BlockType.STONE) == 0

    def test_column_height(self):
        w = VoxelWorld(4, 8, 4)
        assert w.column_height(1, 1) == 0
        w.set_cell(1, 2, 1, BlockType.STONE)
        w.set_cell(1, 5, 1, BlockType.NEST)
        assert w.column_height(1, 1) == 5
        assert w.column_height(-1, 1) == 0

    def test_count(self):
        w = VoxelWorld(4, 4, 4)
        w.set_cell(0, 0, 0, BlockType.NEST)
        w.set_cell(3, 3, 3, BlockType.NEST)
        assert w.count(BlockType.NEST) == 2

    def test_top_view(self):
        w = VoxelWorld(3, 6, 2)
        w.set_cell(0, 1, 0, BlockType.STONE)
        w.set_cell(2, 4, 1, BlockType.FOOD)
        heights, kinds = w.top_view()
        assert heights.shape == (3, 2)
        assert heights[0, 0] == 1 and kinds[0, 0] == BlockType.STONE
        assert heights[2, 1] == 4 and kinds[2, 1] == BlockType.FOOD
        assert heights[1, 0] == 0 and kinds[1, 0] == BlockType.EMPTY


class TestFlatWorld:

    def test_layers(self, flat_world):
        assert flat_world.get_cell(0, 0, 0) == BlockType.INDESTRUCTIBLE
        assert flat_world.get_cell(0, 1, 0) == BlockType.STONE
        assert flat_world.get_cell(0, 3, 0) == BlockType.GRASS
        assert flat_world.column_height(5, 7) == 3

    def test_all_food(self, rng):
        w = build_flat_world(6, 8, 6, ground=2, food_fraction=1.0,
                             hazard_fraction=0.0, rng=rng)
        assert w.count(BlockType.FOOD) == 36
        assert w.column_height(3, 3) == 3

    def test_all_hazard(self, rng):
        w = build_flat_world(6, 8, 6, ground=2, food_fraction=0.0,
                             hazard_fraction=1.0, rng=rng)
        assert w.count(BlockType.HAZARD) == 36
        assert w.count(BlockType.GRASS) == 0
