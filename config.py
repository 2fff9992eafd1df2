"""
AntEvo Configuration
All tunable parameters for the neuroevolutionary ant colony simulation.

The module-level constants are the defaults. A running simulation never reads
them directly: it is handed a SimConfig built from them (and from CLI flags or
request JSON), so several simulations can run side by side with different
settings.
"""

from dataclasses import dataclass, asdict

# ─── World ────────────────────────────────────────────────────────────────────
WORLD_WIDTH  = 64    # blocks east-west   (x)
WORLD_HEIGHT = 32    # blocks vertically  (y)
WORLD_DEPTH  = 64    # blocks north-south (z)
GROUND_LEVEL = 8     # top solid layer of the flat demo terrain
FOOD_FRACTION   = 0.08   # share of surface columns topped with food
HAZARD_FRACTION = 0.04   # share of surface columns topped with hazard blocks

# ─── Population ───────────────────────────────────────────────────────────────
ANT_COUNT        = 25     # ants per generation, queen included
ANT_MAX_HEALTH   = 100.0
HEALTH_DRAIN     = 0.5    # health lost per tick (doubled on hazard)
FOOD_RESTORE     = 40.0   # health regained by eating one food block
STEPS_PER_GEN    = 1500   # tick cap per generation
MAX_GENERATIONS  = 200    # used by the CLI / server runners
SPAWN_RADIUS     = 8      # workers spawn within ±SPAWN_RADIUS of the centre
SPAWN_MARGIN     = 2      # keep spawns this far from the world edge

# ─── Genome / Evolution ───────────────────────────────────────────────────────
ELITE_COUNT       = 6     # size K of the elite archive
MUTATION_RATE     = 0.15  # per-gene probability of mutating
MUTATION_STRENGTH = 0.5   # max absolute change of one mutation
GENE_LIMIT        = 3.0   # genes are clamped to [-GENE_LIMIT, GENE_LIMIT]
SPAWN_MUTATION_RATE     = 0.05   # extra per-worker variation at spawn
SPAWN_MUTATION_STRENGTH = 0.1

# ─── Neural Network ───────────────────────────────────────────────────────────
# Sensory inputs available to every ant (index → meaning)
SENSOR_LABELS = {
    0:  "health",             # current / max health
    1:  "is_queen",           # 1 for the queen, 0 for workers
    2:  "on_food",            # standing on a food block
    3:  "on_hazard",          # standing on a hazard block
    4:  "block_n",            # top block type of the north column (0→1)
    5:  "block_s",
    6:  "block_e",
    7:  "block_w",
    8:  "height_n",           # height delta to the north column (−1→1)
    9:  "height_s",
    10: "height_e",
    11: "height_w",
    12: "pher_n",             # pheromone in the north column (0→1)
    13: "pher_s",
    14: "pher_e",
    15: "pher_w",
    16: "queen_dx",           # unit vector toward the living queen
    17: "queen_dz",
}
NUM_SENSORS = len(SENSOR_LABELS)

# Action outputs available to every ant (index → meaning)
ACTION_LABELS = {
    0: "move_n",
    1: "move_s",
    2: "move_e",
    3: "move_w",
    4: "dig",           # remove the block underfoot
    5: "eat",           # consume the food block underfoot
    6: "place_nest",    # queen only: stack a nest block
    7: "share_health",  # give health to a co-located ant
    8: "noop",          # always succeeds
}
NUM_ACTIONS = len(ACTION_LABELS)

HIDDEN_NEURONS = 12

# ─── Pheromone ────────────────────────────────────────────────────────────────
PHEROMONE_DECAY    = 0.02   # fraction lost every tick
PHEROMONE_EPSILON  = 0.001  # cells at or below this snap to zero
PHEROMONE_MOVE     = 0.05   # trail left by every successful move
PHEROMONE_FOOD     = 0.4    # mark left where food was eaten

# ─── Pacing ───────────────────────────────────────────────────────────────────
SIM_SPEED     = 30.0    # ticks per wall-clock second
MIN_SPEED     = 1.0
MAX_SPEED     = 500.0
SPEED_FACTOR  = 1.5     # multiplier for faster / slower

# ─── Output / Logging ─────────────────────────────────────────────────────────
SAVE_DIR           = "output"      # directory for saved images and charts
SNAPSHOT_INTERVAL  = 10            # save a world snapshot every N generations
SAVE_NEURAL_SAMPLE = True          # save neural-network diagrams
LOG_CSV            = True          # write per-generation CSV log


@dataclass
class SimConfig:
    """Everything one Simulation needs, passed explicitly."""
    world_width:        int   = WORLD_WIDTH
    world_height:       int   = WORLD_HEIGHT
    world_depth:        int   = WORLD_DEPTH
    ant_count:          int   = ANT_COUNT
    max_health:         float = ANT_MAX_HEALTH
    health_drain:       float = HEALTH_DRAIN
    food_restore:       float = FOOD_RESTORE
    steps_per_gen:      int   = STEPS_PER_GEN
    elite_count:        int   = ELITE_COUNT
    mutation_rate:      float = MUTATION_RATE
    mutation_strength:  float = MUTATION_STRENGTH
    pheromone_decay:    float = PHEROMONE_DECAY
    n_inputs:           int   = NUM_SENSORS
    n_hidden:           int   = HIDDEN_NEURONS
    n_outputs:          int   = NUM_ACTIONS

    @property
    def genome_length(self) -> int:
        from neural_network import required_genome_length
        return required_genome_length(self.n_inputs, self.n_hidden, self.n_outputs)

    def validate(self) -> "SimConfig":
        """Raise ValueError if the settings cannot drive a simulation."""
        for name in ("world_width", "world_height", "world_depth",
                     "ant_count", "steps_per_gen", "elite_count", "n_hidden"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.max_health <= 0:
            raise ValueError("max_health must be positive")
        if self.n_inputs != NUM_SENSORS:
            raise ValueError(
                f"n_inputs must be {NUM_SENSORS} (one per sensor), got {self.n_inputs}")
        if self.n_outputs != NUM_ACTIONS:
            raise ValueError(
                f"n_outputs must be {NUM_ACTIONS} (one per action), got {self.n_outputs}")
        for name in ("mutation_rate", "pheromone_decay"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {value}")
        return self

    def to_dict(self) -> dict:
        return asdict(self)
