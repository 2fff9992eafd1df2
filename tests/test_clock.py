"""
Unit tests for clock.py

Speeds are chosen so tick intervals are exact binary fractions.
"""

import pytest
from clock import TickClock


class FakeSim:
    """Counts ticks; reports a generation end on the given tick number."""

    def __init__(self, ends_on=None):
        self.ticks = 0
        self.ends_on = ends_on

    def tick(self):
        self.ticks += 1
        return self.ticks == self.ends_on


class TestSpeed:

    def test_clamped_on_construction(self):
        assert TickClock(1000.0).speed == 500.0
        assert TickClock(0.1).speed == 1.0

    def test_faster_and_slower(self):
        clock = TickClock(30.0)
        clock.faster()
        assert clock.speed == pytest.approx(45.0)
        clock.slower()
        assert clock.speed == pytest.approx(30.0)

    def test_bounds(self):
        clock = TickClock(400.0)
        clock.faster()
        assert clock.speed == 500.0
        clock = TickClock(1.2)
        clock.slower()
        assert clock.speed == 1.0

    @pytest.mark.parametrize("speed,batch", [(5, 1), (19, 1), (100, 10), (500, 50)])
    def test_batch_limit(self, speed, batch):
        assert TickClock(speed).max_ticks_per_update == batch

    def test_state(self):
        clock = TickClock(30.0)
        clock.faster()
        assert clock.state() == {"speed": 45.0, "paused": False}


class TestAdvance:

    def test_whole_intervals(self):
        clock = TickClock(32.0)               # interval 1/32, batch 3
        assert clock.advance(1 / 16) == 2
        assert clock.advance(0.0) == 0

    def test_partial_interval_carries_over(self):
        clock = TickClock(32.0)
        assert clock.advance(1 / 64) == 0
        assert clock.advance(1 / 64) == 1

    def test_batch_cap_leaves_remainder(self):
        clock = TickClock(16.0)               # interval 1/16, batch 1
        assert clock.advance(1 / 8) == 1
        assert clock.advance(0.0) == 1
        assert clock.advance(0.0) == 0

    def test_large_backlog_dropped(self):
        clock = TickClock(32.0)
        assert clock.advance(0.25) == 3       # 8 due, 3 run, 5 dropped
        assert clock.advance(0.0) == 0

    def test_pause(self):
        clock = TickClock(32.0)
        assert clock.toggle_pause() is True
        assert clock.advance(1.0) == 0
        assert clock.toggle_pause() is False
        assert clock.advance(0.0) == 0


class TestPump:

    def test_runs_due_ticks(self):
        sim = FakeSim()
        assert TickClock(32.0).pump(sim, 1 / 16) == 2
        assert sim.ticks == 2

    def test_stops_at_generation_end(self):
        sim = FakeSim(ends_on=1)
        assert TickClock(32.0).pump(sim, 3 / 32) == 1
        assert sim.ticks == 1

    def test_paused_clock_runs_nothing(self):
        sim = FakeSim()
        clock = TickClock(32.0)
        clock.toggle_pause()
        assert clock.pump(sim, 1.0) == 0
        assert sim.ticks == 0

    def test_drives_a_simulation(self, small_config, flat_world):
        from simulation import Simulation
        sim = Simulation(small_config, world=flat_world, seed=1, verbose=False)
        assert TickClock(32.0).pump(sim, 1 / 16) == 2
        assert sim.tick_count == 2
