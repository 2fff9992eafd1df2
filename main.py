"""
AntEvo – Main Entry Point
=========================

Runs the colony headless, as fast as the machine allows, and writes charts,
world snapshots, network diagrams and a CSV log.

Usage examples:
  python main.py                          # defaults from config.py
  python main.py --gens 50 --ants 40      # custom parameters
  python main.py --steps 500 --elite 10   # shorter generations, bigger archive
  python main.py --no_mutation            # turn off mutations (demonstration)
  python main.py --seed 7                 # reproducible run
"""

import argparse

import numpy as np

from simulation  import Simulation
from visualizer  import (ensure_dirs, save_world_snapshot,
                          save_evolution_chart, save_neural_diagram,
                          append_csv)
from world import build_flat_world
from config import (SimConfig, SAVE_DIR, SNAPSHOT_INTERVAL, SAVE_NEURAL_SAMPLE,
                    ANT_COUNT, MAX_GENERATIONS, STEPS_PER_GEN, ELITE_COUNT,
                    MUTATION_RATE, MUTATION_STRENGTH, PHEROMONE_DECAY,
                    HEALTH_DRAIN, FOOD_RESTORE, HIDDEN_NEURONS,
                    WORLD_WIDTH, WORLD_HEIGHT, WORLD_DEPTH, GROUND_LEVEL,
                    FOOD_FRACTION, HAZARD_FRACTION)


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="AntEvo – Neuroevolutionary Ant Colony Simulator")
    p.add_argument("--gens",       type=int,   default=MAX_GENERATIONS,
                   help="Number of generations to run")
    p.add_argument("--ants",       type=int,   default=ANT_COUNT,
                   help="Ants per generation (queen included)")
    p.add_argument("--steps",      type=int,   default=STEPS_PER_GEN,
                   help="Tick cap per generation")
    p.add_argument("--elite",      type=int,   default=ELITE_COUNT,
                   help="Elite archive size")
    p.add_argument("--mutation",   type=float, default=MUTATION_RATE,
                   help="Per-gene mutation probability")
    p.add_argument("--strength",   type=float, default=MUTATION_STRENGTH,
                   help="Maximum size of one mutation")
    p.add_argument("--no_mutation",action="store_true",
                   help="Set mutation rate to 0 (demonstration)")
    p.add_argument("--decay",      type=float, default=PHEROMONE_DECAY,
                   help="Pheromone decay per tick")
    p.add_argument("--drain",      type=float, default=HEALTH_DRAIN,
                   help="Health drained per tick")
    p.add_argument("--food",       type=float, default=FOOD_RESTORE,
                   help="Health restored by one food block")
    p.add_argument("--hidden",     type=int,   default=HIDDEN_NEURONS,
                   help="Hidden neurons in every brain")
    p.add_argument("--size",       type=int, nargs=3,
                   default=[WORLD_WIDTH, WORLD_HEIGHT, WORLD_DEPTH],
                   metavar=("W", "H", "D"), help="World size in blocks")
    p.add_argument("--ground",     type=int,   default=GROUND_LEVEL,
                   help="Surface height of the flat world")
    p.add_argument("--food_fraction",   type=float, default=FOOD_FRACTION)
    p.add_argument("--hazard_fraction", type=float, default=HAZARD_FRACTION)
    p.add_argument("--seed",       type=int,   default=None,
                   help="Random seed for reproducibility")
    p.add_argument("--outdir",     default=SAVE_DIR,
                   help="Output directory")
    p.add_argument("--snapshot_interval", type=int, default=SNAPSHOT_INTERVAL,
                   help="Save world snapshot every N generations")
    return p.parse_args(argv)


def config_from_args(args) -> SimConfig:
    width, height, depth = args.size
    return SimConfig(
        world_width       = width,
        world_height      = height,
        world_depth       = depth,
        ant_count         = args.ants,
        health_drain      = args.drain,
        food_restore      = args.food,
        steps_per_gen     = args.steps,
        elite_count       = args.elite,
        mutation_rate     = 0.0 if args.no_mutation else args.mutation,
        mutation_strength = args.strength,
        pheromone_decay   = args.decay,
        n_hidden          = args.hidden,
    ).validate()


# ──────────────────────────────────────────────────────────────────────────────
# Callbacks
# ──────────────────────────────────────────────────────────────────────────────

class SimCallbacks:
    """Bundles the per-generation callbacks used by the simulation."""

    def __init__(self, outdir: str, snapshot_interval: int, all_stats: list):
        self.outdir            = outdir
        self.snapshot_interval = snapshot_interval
        self.all_stats         = all_stats

    def on_generation(self, gen_idx, stats, sim):
        self.all_stats.append(stats)

        # CSV log
        append_csv(stats, self.outdir)

        # The ants of the finished generation are still in place here
        if gen_idx % self.snapshot_interval == 0:
            path = save_world_snapshot(sim, self.outdir)
            print(f"  → Snapshot: {path}")

            if SAVE_NEURAL_SAMPLE and sim.queen is not None:
                npath = save_neural_diagram(sim.queen, gen_idx, "queen", self.outdir)
                print(f"  → Neural diagram: {npath}")

        if gen_idx % 100 == 0:
            save_evolution_chart(self.all_stats, self.outdir)


# ──────────────────────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────────────────────

def main(argv=None):
    args = parse_args(argv)
    cfg  = config_from_args(args)
    outdir = args.outdir
    ensure_dirs(outdir)

    print("=" * 60)
    print("  AntEvo – Neuroevolutionary Ant Colony Simulator")
    print("=" * 60)
    print(f"  World      : {cfg.world_width}×{cfg.world_height}×{cfg.world_depth}")
    print(f"  Ants       : {cfg.ant_count}")
    print(f"  Generations: {args.gens}")
    print(f"  Steps/gen  : {cfg.steps_per_gen}")
    print(f"  Brain      : {cfg.n_inputs}→{cfg.n_hidden}→{cfg.n_outputs} "
          f"({cfg.genome_length} genes)")
    print(f"  Mutation   : rate {cfg.mutation_rate}, strength {cfg.mutation_strength}")
    print(f"  Elite K    : {cfg.elite_count}")
    print(f"  Output dir : {outdir}")
    print("=" * 60)

    all_stats = []
    cb = SimCallbacks(outdir, args.snapshot_interval, all_stats)

    rng = np.random.default_rng(args.seed)
    world = build_flat_world(cfg.world_width, cfg.world_height, cfg.world_depth,
                             ground=args.ground,
                             food_fraction=args.food_fraction,
                             hazard_fraction=args.hazard_fraction, rng=rng)
    sim = Simulation(cfg, world=world, rng=rng,
                     on_gen_callback=cb.on_generation)
    sim.run(args.gens)

    print("\nSaving final evolution chart …")
    chart_path = save_evolution_chart(all_stats, outdir, "evolution_final.png")
    print(f"  → {chart_path}")

    print(f"\nBest generation fitness: {sim.best_fitness} nests")
    print("Done! All outputs saved to:", outdir)


if __name__ == "__main__":
    main()
