"""
Pytest configuration and shared fixtures for AntEvo tests.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ant import Ant, Role
from config import SimConfig
from genome import Genome
from simulation import Simulation
from world import build_flat_world

GROUND = 3


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests"""
    return np.random.default_rng(42)


@pytest.fixture
def small_config():
    """Small colony on a 12x10x12 world"""
    return SimConfig(world_width=12, world_height=10, world_depth=12,
                     ant_count=4, steps_per_gen=20, elite_count=3)


@pytest.fixture
def flat_world():
    """Bare grass plain: bedrock y=0, stone y=1-2, grass y=3"""
    return build_flat_world(12, 10, 12, ground=GROUND,
                            food_fraction=0.0, hazard_fraction=0.0,
                            rng=np.random.default_rng(0))


@pytest.fixture
def zero_genome(small_config):
    return Genome.from_vector(np.zeros(small_config.genome_length))


class Colony:
    """A simulation with its spawned ants removed, for hand-placed scenarios"""

    def __init__(self, sim, genome):
        self.sim = sim
        self.genome = genome
        sim.ants = []
        sim.queen = None
        sim.alive_count = 0

    def add(self, role=Role.WORKER, x=5, z=5, y=None, health=None):
        sim = self.sim
        if y is None:
            y = sim.world.column_height(x, z)
        ant = Ant(len(sim.ants), role, x, y, z, self.genome.copy(), sim.config)
        if health is not None:
            ant.health = float(health)
        sim.ants.append(ant)
        if role is Role.QUEEN:
            sim.queen = ant
        sim.alive_count = sum(1 for a in sim.ants if a.alive)
        return ant


@pytest.fixture
def colony(small_config, flat_world, zero_genome):
    sim = Simulation(small_config, world=flat_world, seed=1, verbose=False)
    return Colony(sim, zero_genome)
