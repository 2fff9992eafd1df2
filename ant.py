"""
Ant agents for AntEvo.

Each ant has:
  - an (x, y, z) block position, y pointing up
  - a role: one queen per generation, everyone else a worker
  - health that drains every tick
  - a genome and the NeuralNetwork brain loaded from it

Every simulation tick a living ant:
  1. Falls onto solid ground if the block under it was removed
  2. Pays its health drain (double on hazard) and may die
  3. Gathers sensor readings from the world
  4. Runs its neural network to score every action
  5. Executes the best-scoring action whose preconditions hold

Action selection is split in two. `resolve` and `plan_action` only read the
world and return an Effect describing what would happen; `apply_effect`
writes that Effect back. A failed precondition is a normal result (None),
not an error, and NOOP always succeeds so resolution always terminates.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np
from neural_network import NeuralNetwork
from world import BlockType, block_code
from config import (NUM_SENSORS, PHEROMONE_MOVE, PHEROMONE_FOOD)


class Role(Enum):
    QUEEN  = "queen"
    WORKER = "worker"


class Action(IntEnum):
    """Network outputs, in order. Ties in score go to the lower value."""
    MOVE_N       = 0
    MOVE_S       = 1
    MOVE_E       = 2
    MOVE_W       = 3
    DIG          = 4
    EAT          = 5
    PLACE_NEST   = 6
    SHARE_HEALTH = 7
    NOOP         = 8


# N, S, E, W as (dx, dz)
DIRECTIONS = ((0, 1), (0, -1), (1, 0), (-1, 0))
MOVE_DIRS = {
    Action.MOVE_N: DIRECTIONS[0],
    Action.MOVE_S: DIRECTIONS[1],
    Action.MOVE_E: DIRECTIONS[2],
    Action.MOVE_W: DIRECTIONS[3],
}

MAX_CLIMB        = 2      # largest step up or down a move may take
HEIGHT_SCALE     = 5.0    # height deltas are divided by this for the sensors
SHARE_MIN_HEALTH = 0.3    # giver must be above this fraction of max health
SHARE_FRACTION   = 0.1    # at most this fraction of the giver's max per share
NEST_COST_DIVISOR = 3     # queen pays max health / this per nest


@dataclass(frozen=True)
class Effect:
    """The outcome of one successful action, not yet applied."""
    action:          Action
    position:        Optional[Tuple[int, int, int]] = None
    health_delta:    float = 0.0
    cells:           Tuple[Tuple[int, int, int, BlockType], ...] = ()
    pheromone:       Optional[Tuple[int, int, float]] = None
    nests_placed:    int = 0
    nests_destroyed: int = 0
    receiver:        Optional["Ant"] = None
    transfer:        float = 0.0


class Ant:
    """
    A single agent in the colony.
    """
    __slots__ = (
        "id", "role", "x", "y", "z",
        "health", "max_health", "genome", "brain", "alive",
    )

    def __init__(self, ant_id: int, role: Role, x: int, y: int, z: int,
                 genome, config):
        self.id         = ant_id
        self.role       = role
        self.x, self.y, self.z = x, y, z
        self.max_health = float(config.max_health)
        self.health     = self.max_health
        self.genome     = genome
        self.brain      = NeuralNetwork.from_genome(
            genome, config.n_inputs, config.n_hidden, config.n_outputs)
        self.alive      = True

    @property
    def is_queen(self) -> bool:
        return self.role is Role.QUEEN

    @property
    def position(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        return (f"Ant({self.id}, {self.role.value}, {self.position}, "
                f"hp={self.health:.1f}, {state})")

    # ──────────────────────────────────────────────────────────────────────────

    def step(self, sim) -> Optional[Action]:
        """Execute one tick: fall → drain → sense → think → act."""
        if not self.alive:
            return None
        world = sim.world

        if world.get_cell(self.x, self.y, self.z) == BlockType.EMPTY:
            self.y = world.column_height(self.x, self.z)

        drain = sim.config.health_drain
        if world.get_cell(self.x, self.y, self.z) == BlockType.HAZARD:
            drain *= 2.0
        self.health -= drain
        if self.health <= 0.0:
            self.die(sim)
            return None

        inputs = sense(self, sim)
        action, effect = resolve(inputs, self.brain, self, sim)
        apply_effect(self, effect, sim)
        return action

    def die(self, sim):
        self.alive  = False
        self.health = 0.0
        sim.on_ant_died(self)


# ──────────────────────────────────────────────────────────────────────────────
# Sensing
# ──────────────────────────────────────────────────────────────────────────────

def sense(ant: Ant, view) -> np.ndarray:
    """Compute all sensory input values, in SENSOR_LABELS order."""
    world = view.world
    inputs = np.zeros(NUM_SENSORS, dtype=np.float64)

    # 0-3: own state and the block underfoot
    inputs[0] = ant.health / ant.max_health
    inputs[1] = 1.0 if ant.is_queen else 0.0
    here = world.get_cell(ant.x, ant.y, ant.z)
    inputs[2] = 1.0 if here == BlockType.FOOD else 0.0
    inputs[3] = 1.0 if here == BlockType.HAZARD else 0.0

    # 4-15: neighbouring columns N, S, E, W
    for i, (dx, dz) in enumerate(DIRECTIONS):
        nx, nz = ant.x + dx, ant.z + dz
        top = world.column_height(nx, nz)
        inputs[4 + i]  = block_code(world.get_cell(nx, top, nz))
        inputs[8 + i]  = min(1.0, max(-1.0, (top - ant.y) / HEIGHT_SCALE))
        inputs[12 + i] = view.pheromone.query(nx, nz)

    # 16-17: direction to the queen (workers only)
    queen = view.queen
    if not ant.is_queen and queen is not None and queen.alive:
        dx = queen.x - ant.x
        dz = queen.z - ant.z
        dist = float(np.hypot(dx, dz))
        if dist > 0.01:
            inputs[16] = min(1.0, max(-1.0, dx / dist))
            inputs[17] = min(1.0, max(-1.0, dz / dist))

    return inputs


# ──────────────────────────────────────────────────────────────────────────────
# Action resolution (read-only)
# ──────────────────────────────────────────────────────────────────────────────

def rank_actions(scores) -> list:
    """Actions by descending score; equal scores keep enumeration order."""
    return sorted(Action, key=lambda a: -float(scores[a]))


def resolve(inputs, brain: NeuralNetwork, ant: Ant, view):
    """
    Score every action with the brain and return (action, effect) for the
    best-ranked action whose preconditions hold. Nothing is mutated.
    """
    scores = brain.forward(inputs)
    for action in rank_actions(scores):
        effect = plan_action(ant, action, view)
        if effect is not None:
            return action, effect
    raise RuntimeError("NOOP must always resolve")


def plan_action(ant: Ant, action: Action, view) -> Optional[Effect]:
    """Effect of `action` for `ant`, or None if a precondition fails."""
    if action in MOVE_DIRS:
        return _plan_move(ant, action, view)
    if action == Action.DIG:
        return _plan_dig(ant, view)
    if action == Action.EAT:
        return _plan_eat(ant, view)
    if action == Action.PLACE_NEST:
        return _plan_place_nest(ant, view)
    if action == Action.SHARE_HEALTH:
        return _plan_share(ant, view)
    return Effect(Action.NOOP)


def share_allowance(giver: Ant) -> float:
    """Most a giver may hand over in one share: a tenth of its max, never
    leaving it below 1."""
    return min(giver.max_health * SHARE_FRACTION, giver.health - 1.0)


def transfer_amount(giver: Ant, receiver: Ant) -> float:
    """
    Health actually moved in one share: the giver's allowance, capped at the
    receiver's headroom so the giver's loss always equals the receiver's gain.
    May be 0 when the receiver is already at full health.
    """
    headroom = receiver.max_health - receiver.health
    return max(0.0, min(share_allowance(giver), headroom))


def _top_after_removal(world, x: int, y: int, z: int) -> int:
    """Column top at (x, z) once the block at y is gone."""
    top = world.column_height(x, z)
    if top != y:
        return top
    for below in range(y - 1, -1, -1):
        if world.get_cell(x, below, z) != BlockType.EMPTY:
            return below
    return 0


def _plan_move(ant: Ant, action: Action, view) -> Optional[Effect]:
    world = view.world
    dx, dz = MOVE_DIRS[action]
    tx, tz = ant.x + dx, ant.z + dz
    ty = world.column_height(tx, tz)
    if abs(ty - ant.y) > MAX_CLIMB:
        return None
    if world.get_cell(tx, ty, tz) == BlockType.EMPTY:
        return None
    return Effect(action, position=(tx, ty, tz),
                  pheromone=(tx, tz, PHEROMONE_MOVE))


def _plan_dig(ant: Ant, view) -> Optional[Effect]:
    world = view.world
    kind = world.get_cell(ant.x, ant.y, ant.z)
    if kind in (BlockType.EMPTY, BlockType.INDESTRUCTIBLE):
        return None
    landing = _top_after_removal(world, ant.x, ant.y, ant.z)
    return Effect(Action.DIG,
                  position=(ant.x, landing, ant.z),
                  cells=((ant.x, ant.y, ant.z, BlockType.EMPTY),),
                  nests_destroyed=1 if kind == BlockType.NEST else 0)


def _plan_eat(ant: Ant, view) -> Optional[Effect]:
    world = view.world
    if world.get_cell(ant.x, ant.y, ant.z) != BlockType.FOOD:
        return None
    if view.others_at(ant, ant.x, ant.y, ant.z):
        return None
    gain = min(ant.health + view.config.food_restore, ant.max_health) - ant.health
    landing = _top_after_removal(world, ant.x, ant.y, ant.z)
    return Effect(Action.EAT,
                  position=(ant.x, landing, ant.z),
                  health_delta=gain,
                  cells=((ant.x, ant.y, ant.z, BlockType.EMPTY),),
                  pheromone=(ant.x, ant.z, PHEROMONE_FOOD))


def _plan_place_nest(ant: Ant, view) -> Optional[Effect]:
    if not ant.is_queen:
        return None
    cost = ant.max_health / NEST_COST_DIVISOR
    if ant.health <= cost:
        return None
    world = view.world
    nest_y = ant.y + 1
    if world.get_cell(ant.x, nest_y, ant.z) != BlockType.EMPTY:
        return None
    if nest_y >= world.height - 1:
        return None
    return Effect(Action.PLACE_NEST,
                  position=(ant.x, nest_y, ant.z),
                  health_delta=-cost,
                  cells=((ant.x, nest_y, ant.z, BlockType.NEST),),
                  nests_placed=1)


def _plan_share(ant: Ant, view) -> Optional[Effect]:
    if ant.health <= ant.max_health * SHARE_MIN_HEALTH:
        return None
    others = view.others_at(ant, ant.x, ant.y, ant.z)
    if not others:
        return None
    if share_allowance(ant) <= 0.0:
        return None
    # a full receiver still takes the action, it just gains nothing
    receiver = min(others, key=lambda a: a.health)
    amount = transfer_amount(ant, receiver)
    return Effect(Action.SHARE_HEALTH, health_delta=-amount,
                  receiver=receiver, transfer=amount)


# ──────────────────────────────────────────────────────────────────────────────
# Applying effects
# ──────────────────────────────────────────────────────────────────────────────

def apply_effect(ant: Ant, effect: Effect, sim):
    """Write a planned Effect back into the ant, the world and the colony."""
    for x, y, z, kind in effect.cells:
        sim.world.set_cell(x, y, z, kind)
    if effect.position is not None:
        ant.x, ant.y, ant.z = effect.position
    ant.health = min(ant.health + effect.health_delta, ant.max_health)
    if effect.receiver is not None:
        effect.receiver.health += effect.transfer
    if effect.pheromone is not None:
        sim.pheromone.deposit(*effect.pheromone)
    for _ in range(effect.nests_placed):
        sim.on_nest_placed()
    for _ in range(effect.nests_destroyed):
        sim.on_nest_destroyed()
