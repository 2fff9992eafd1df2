"""
Simulation Engine for AntEvo.

Orchestrates the colony's evolutionary loop, one tick at a time:

  INITIALIZING  clear the field, derive the generation's base genome,
                spawn one queen and N-1 workers around the world centre
  RUNNING       every tick: step each living ant in spawn order, let workers
                on the queen's block heal her, fade pheromones, count the living
  FINISHING     when everyone is dead or the tick cap is hit: archive the base
                genome with its fitness (nests placed this generation), then
                breed the next base genome from the elite archive

The simulation owns its world, pheromone field, archive and random generator.
It never sleeps or blocks; pacing belongs to clock.TickClock.
"""

import time
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from ant import Ant, Role, transfer_amount
from config import (SimConfig, SPAWN_RADIUS, SPAWN_MARGIN,
                    SPAWN_MUTATION_RATE, SPAWN_MUTATION_STRENGTH)
from genome import Genome, genome_similarity
from pheromone import PheromoneField
from world import BlockType, build_flat_world

QUEEN_HEAL_BELOW  = 0.6   # workers heal the queen while she is under this
WORKER_HEAL_ABOVE = 0.4   # ... provided they are above this themselves


class Phase(Enum):
    INITIALIZING = "initializing"
    RUNNING      = "running"
    FINISHING    = "finishing"


# ──────────────────────────────────────────────────────────────────────────────
# Elite archive
# ──────────────────────────────────────────────────────────────────────────────

@dataclass
class ArchiveEntry:
    genome:  Genome
    fitness: int


class EliteArchive:
    """
    The best genomes seen so far, sorted by fitness (best first) and capped
    at `capacity`. Genomes with equal fitness keep their arrival order.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.entries  = []

    def record(self, genome: Genome, fitness: int):
        self.entries.append(ArchiveEntry(genome, int(fitness)))
        self.entries.sort(key=lambda e: e.fitness, reverse=True)
        del self.entries[self.capacity:]

    def tournament(self, rng) -> Genome:
        """Sample two entries with replacement and keep the fitter one."""
        n = len(self.entries)
        first  = self.entries[int(rng.integers(0, n))]
        second = self.entries[int(rng.integers(0, n))]
        return first.genome if first.fitness >= second.fitness else second.genome

    def breed(self, length: int, rng, rate: float, strength: float) -> Genome:
        """
        Next base genome: random while fewer than two genomes are archived,
        otherwise tournament → crossover → mutate.
        """
        if len(self.entries) < 2:
            return Genome.random(length, rng)
        parent_a = self.tournament(rng)
        parent_b = self.tournament(rng)
        child = Genome.crossover(parent_a, parent_b, rng)
        return child.mutate(rate, strength, rng)

    def diversity(self) -> float:
        """Average pairwise dissimilarity of archived genomes (0 → identical)."""
        genomes = [e.genome for e in self.entries]
        if len(genomes) < 2:
            return 0.0
        total, count = 0.0, 0
        for i in range(len(genomes)):
            for j in range(i + 1, len(genomes)):
                total += 1.0 - genome_similarity(genomes[i], genomes[j])
                count += 1
        return total / count

    def best_fitness(self) -> int:
        return self.entries[0].fitness if self.entries else 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


# ──────────────────────────────────────────────────────────────────────────────
# Read-only state for renderers and telemetry
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AntSnapshot:
    id:         int
    role:       str
    position:   Tuple[int, int, int]
    health:     float
    max_health: float
    alive:      bool


@dataclass(frozen=True)
class ColonySnapshot:
    generation:            int
    tick:                  int
    phase:                 str
    nests_this_generation: int
    nests_total:           int
    best_fitness:          int
    alive_count:           int
    ants:                  Tuple[AntSnapshot, ...]

    def to_dict(self) -> dict:
        return asdict(self)


# ──────────────────────────────────────────────────────────────────────────────
# Simulation
# ──────────────────────────────────────────────────────────────────────────────

class Simulation:
    """
    Main colony controller. The first generation is spawned on construction;
    after that every call to tick() advances exactly one logical tick.
    """

    def __init__(
        self,
        config:           Optional[SimConfig] = None,
        world                                 = None,
        seed:             Optional[int]       = None,
        rng                                   = None,
        verbose:          bool                = True,
        on_tick_callback                      = None,   # called after every tick
        on_gen_callback                       = None,   # called at end of each generation
    ):
        self.config = (config or SimConfig()).validate()
        self.rng    = rng if rng is not None else np.random.default_rng(seed)
        if world is None:
            world = build_flat_world(self.config.world_width,
                                     self.config.world_height,
                                     self.config.world_depth,
                                     rng=self.rng)
        self.world     = world
        self.pheromone = PheromoneField(world.width, world.depth)
        self.archive   = EliteArchive(self.config.elite_count)
        self.verbose   = verbose
        self.on_tick_callback = on_tick_callback
        self.on_gen_callback  = on_gen_callback

        self.ants  = []
        self.queen = None
        self.phase = Phase.INITIALIZING

        self.generation            = 0
        self.tick_count            = 0
        self.alive_count           = 0
        self.nests_this_generation = 0
        self.nests_total           = 0
        self.best_fitness          = 0
        self.base_genome           = None
        self.stats                 = []   # one dict per finished generation

        self._next_genome = None
        self._gen_started = time.time()
        self._begin_generation()

    # ──────────────────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────────────────

    def tick(self) -> bool:
        """
        Run one full tick. Returns True if it ended the generation (the next
        one has already been spawned by the time this returns).
        """
        self.tick_count += 1

        for ant in self.ants:
            if ant.alive:
                ant.step(self)

        self._auto_heal_queen()
        self.pheromone.decay(self.config.pheromone_decay)
        self.alive_count = sum(1 for a in self.ants if a.alive)

        if self.on_tick_callback:
            self.on_tick_callback(self)

        if self.alive_count == 0 or self.tick_count >= self.config.steps_per_gen:
            self._finish_generation()
            self._begin_generation()
            return True
        return False

    def run_generation(self) -> dict:
        """Tick until the current generation ends; return its stats."""
        while not self.tick():
            pass
        return self.stats[-1]

    def run(self, max_generations: int):
        for _ in range(max_generations):
            self.run_generation()
        if self.verbose:
            print("\n=== Simulation complete ===")

    def snapshot(self) -> ColonySnapshot:
        return ColonySnapshot(
            generation            = self.generation,
            tick                  = self.tick_count,
            phase                 = self.phase.value,
            nests_this_generation = self.nests_this_generation,
            nests_total           = self.nests_total,
            best_fitness          = self.best_fitness,
            alive_count           = self.alive_count,
            ants = tuple(
                AntSnapshot(a.id, a.role.value, a.position,
                            a.health, a.max_health, a.alive)
                for a in self.ants
            ),
        )

    # ──────────────────────────────────────────────────────────────────────────
    # Queries and notifications used by the ants
    # ──────────────────────────────────────────────────────────────────────────

    def others_at(self, ant, x: int, y: int, z: int) -> list:
        """Living ants other than `ant` on block (x, y, z), in spawn order."""
        return [o for o in self.ants
                if o is not ant and o.alive
                and o.x == x and o.y == y and o.z == z]

    def on_ant_died(self, ant):
        if ant.is_queen and self.verbose:
            print(f"  Queen died in generation {self.generation} "
                  f"at tick {self.tick_count}")

    def on_nest_placed(self):
        self.nests_this_generation += 1
        self.nests_total += 1

    def on_nest_destroyed(self):
        self.nests_total = max(0, self.nests_total - 1)

    # ──────────────────────────────────────────────────────────────────────────
    # Generation lifecycle
    # ──────────────────────────────────────────────────────────────────────────

    def _begin_generation(self):
        self.phase = Phase.INITIALIZING
        self.ants  = []
        self.queen = None
        self.pheromone.clear()
        self.nests_this_generation = 0
        self.tick_count  = 0
        self.nests_total = self.world.count(BlockType.NEST)
        self.generation += 1

        if self._next_genome is None:
            self._next_genome = Genome.random(self.config.genome_length, self.rng)
        self.base_genome  = self._next_genome
        self._next_genome = None

        self._spawn(self.base_genome)
        self.alive_count  = len(self.ants)
        self._gen_started = time.time()
        self.phase = Phase.RUNNING

    def _spawn(self, base: Genome):
        """Queen on the centre column, workers jittered around her."""
        world = self.world
        cx, cz = world.width // 2, world.depth // 2
        self.queen = self._add_ant(base.copy(), Role.QUEEN,
                                   cx, world.column_height(cx, cz), cz)

        for _ in range(self.config.ant_count - 1):
            genome = base.copy().mutate(SPAWN_MUTATION_RATE,
                                        SPAWN_MUTATION_STRENGTH, self.rng)
            x = cx + int(self.rng.integers(-SPAWN_RADIUS, SPAWN_RADIUS + 1))
            z = cz + int(self.rng.integers(-SPAWN_RADIUS, SPAWN_RADIUS + 1))
            x = max(SPAWN_MARGIN, min(world.width - 1 - SPAWN_MARGIN, x))
            z = max(SPAWN_MARGIN, min(world.depth - 1 - SPAWN_MARGIN, z))
            y = world.column_height(x, z)
            if world.get_cell(x, y, z) == BlockType.EMPTY:
                continue
            self._add_ant(genome, Role.WORKER, x, y, z)

    def _add_ant(self, genome: Genome, role: Role, x: int, y: int, z: int) -> Ant:
        ant = Ant(len(self.ants), role, x, y, z, genome, self.config)
        self.ants.append(ant)
        return ant

    def _auto_heal_queen(self):
        """Workers standing on the queen's block top her up when she is hurt."""
        queen = self.queen
        if queen is None or not queen.alive:
            return
        for worker in self.ants:
            if worker is queen or not worker.alive:
                continue
            if worker.position != queen.position:
                continue
            if queen.health >= queen.max_health * QUEEN_HEAL_BELOW:
                continue
            if worker.health <= worker.max_health * WORKER_HEAL_ABOVE:
                continue
            amount = transfer_amount(worker, queen)
            if amount > 0.0:
                worker.health -= amount
                queen.health  += amount

    def _finish_generation(self):
        self.phase = Phase.FINISHING
        fitness = self.nests_this_generation
        self.archive.record(self.base_genome.copy(), fitness)
        if fitness > self.best_fitness:
            self.best_fitness = fitness

        self._next_genome = self.archive.breed(
            self.config.genome_length, self.rng,
            self.config.mutation_rate, self.config.mutation_strength)

        stats = self._compute_stats()
        self.stats.append(stats)
        if self.verbose:
            self._print_stats(self.generation, stats)
        if self.on_gen_callback:
            self.on_gen_callback(self.generation, stats, self)

    # ──────────────────────────────────────────────────────────────────────────
    # Stats
    # ──────────────────────────────────────────────────────────────────────────

    def _compute_stats(self) -> dict:
        n_pop = len(self.ants)
        return {
            "generation":   self.generation,
            "ticks":        self.tick_count,
            "fitness":      self.nests_this_generation,
            "nests_total":  self.nests_total,
            "best_fitness": self.best_fitness,
            "population":   n_pop,
            "survivors":    self.alive_count,
            "queen_alive":  bool(self.queen is not None and self.queen.alive),
            "archive_size": len(self.archive),
            "diversity":    round(self.archive.diversity(), 4),
            "elapsed_s":    round(time.time() - self._gen_started, 3),
        }

    def _print_stats(self, gen_idx: int, stats: dict):
        if gen_idx % 10 == 0 or gen_idx <= 5:
            print(
                f"Gen {gen_idx:>5}  |  "
                f"nests {stats['fitness']:>3} (best {stats['best_fitness']:>3})  |  "
                f"alive {stats['survivors']:>3}/{stats['population']:<3} "
                f"after {stats['ticks']:>5} ticks  |  "
                f"diversity {stats['diversity']:.3f}  |  "
                f"{stats['elapsed_s']:.2f}s"
            )
