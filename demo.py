"""
Quick demo – runs a 30-generation colony on a small world
and saves snapshots + charts without needing a display.
"""
import os, sys
sys.path.insert(0, os.path.dirname(__file__))

from config import SimConfig
from simulation import Simulation
from visualizer import (ensure_dirs, save_world_snapshot,
                         save_evolution_chart, save_neural_diagram, append_csv)

OUT = "output/demo"
ensure_dirs(OUT)

all_stats = []

def on_gen(gen_idx, stats, sim):
    all_stats.append(stats)
    append_csv(stats, OUT)
    if gen_idx % 5 == 0:
        save_world_snapshot(sim, OUT)
        save_neural_diagram(sim.queen, gen_idx, "queen", OUT)

sim = Simulation(
    SimConfig(world_width=32, world_height=16, world_depth=32,
              ant_count=15, steps_per_gen=400, elite_count=4),
    seed            = 42,
    on_gen_callback = on_gen,
)
sim.run(30)

save_evolution_chart(all_stats, OUT, "demo_chart.png")
print("\nAll outputs in:", OUT)
