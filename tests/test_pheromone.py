"""
Unit tests for pheromone.py
"""

import pytest
import numpy as np
from pheromone import PheromoneField


@pytest.fixture
def field():
    return PheromoneField(10, 8)


class TestPheromoneField:

    def test_initialization(self, field):
        """Field starts empty"""
        assert field.as_array().shape == (10, 8)
        assert field.total() == 0.0

    def test_deposit_and_query(self, field):
        field.deposit(3, 4, 0.25)
        assert field.query(3, 4) == pytest.approx(0.25)
        assert field.query(4, 3) == 0.0

    def test_deposit_saturates_at_one(self, field):
        field.deposit(1, 1, 0.7)
        field.deposit(1, 1, 0.7)
        assert field.query(1, 1) == 1.0

    @pytest.mark.parametrize("x,z", [(-1, 0), (0, -1), (10, 0), (0, 8), (50, 50)])
    def test_out_of_bounds_is_silent(self, field, x, z):
        """OOB deposit is ignored and OOB query reads 0"""
        field.deposit(x, z, 0.5)
        assert field.query(x, z) == 0.0
        assert field.total() == 0.0

    def test_deposit_then_decay(self, field):
        """Deposit(a) then Decay(r) gives min(prior + a, 1) * (1 - r)"""
        field.deposit(2, 2, 0.3)
        field.deposit(2, 2, 0.4)
        field.decay(0.1)
        assert field.query(2, 2) == pytest.approx(0.7 * 0.9)

        field.deposit(5, 5, 0.8)
        field.deposit(5, 5, 0.8)
        field.decay(0.25)
        assert field.query(5, 5) == pytest.approx(0.75)

    def test_repeated_decay_trends_to_zero(self, field):
        """Decay never goes negative and eventually snaps to exactly 0"""
        field.deposit(0, 0, 1.0)
        previous = 1.0
        for _ in range(1000):
            field.decay(0.05)
            value = field.query(0, 0)
            assert 0.0 <= value <= previous
            previous = value
        assert field.query(0, 0) == 0.0

    def test_values_below_epsilon_snap_to_zero(self, field):
        field.deposit(4, 4, 0.0005)
        field.decay(0.01)
        assert field.query(4, 4) == 0.0

    def test_values_stay_in_unit_interval(self, field, rng):
        for _ in range(200):
            field.deposit(int(rng.integers(0, 10)), int(rng.integers(0, 8)),
                          float(rng.random()))
            field.decay(0.02)
        grid = field.as_array()
        assert np.all(grid >= 0.0) and np.all(grid <= 1.0)

    def test_clear(self, field):
        field.deposit(1, 2, 0.5)
        field.clear()
        assert field.total() == 0.0

    def test_as_array_is_a_copy(self, field):
        snapshot = field.as_array()
        snapshot[0, 0] = 1.0
        assert field.query(0, 0) == 0.0
