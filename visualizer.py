"""
Visualizer for AntEvo.

Produces:
  1. World snapshots  – top-down height map with pheromone overlay and ants
  2. Evolution chart  – nests per generation, best-ever, survivors, diversity
  3. Neural network diagrams – dense wiring of one ant's brain
  4. CSV log          – per-generation stats
"""

import os
import csv
import numpy as np
import matplotlib
matplotlib.use("Agg")          # non-interactive backend (no display needed)
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap

from config import SAVE_DIR, LOG_CSV, SENSOR_LABELS, ACTION_LABELS
from world import BlockType

# One colour per BlockType, used for the surface layer of the snapshot
BLOCK_COLORS = {
    BlockType.EMPTY:          "#000000",
    BlockType.GRASS:          "#3A7D2C",
    BlockType.STONE:          "#777777",
    BlockType.FOOD:           "#8B5A2B",
    BlockType.NEST:           "#FFD700",
    BlockType.HAZARD:         "#9ACD32",
    BlockType.INDESTRUCTIBLE: "#334466",
}
QUEEN_COLOR  = "#FFD700"
WORKER_COLOR = "#D2691E"


# ──────────────────────────────────────────────────────────────────────────────
# Directory setup
# ──────────────────────────────────────────────────────────────────────────────

def ensure_dirs(base: str = SAVE_DIR):
    for sub in ("snapshots", "charts", "neural"):
        os.makedirs(os.path.join(base, sub), exist_ok=True)


# ──────────────────────────────────────────────────────────────────────────────
# World snapshot
# ──────────────────────────────────────────────────────────────────────────────

def save_world_snapshot(sim, base: str = SAVE_DIR, label: str = ""):
    """
    Render the world from above: surface block colours shaded by height,
    pheromone as a translucent red overlay, workers as brown dots and the
    queen as a gold star.
    """
    world = sim.world
    snap  = sim.snapshot()
    heights, kinds = world.top_view()

    cmap = ListedColormap([BLOCK_COLORS[k] for k in BlockType])
    shade = 0.55 + 0.45 * heights / max(1, world.height - 1)

    fig, ax = plt.subplots(figsize=(6, 6), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")
    rgba = cmap(kinds.T.astype(int), alpha=None)
    rgba[..., :3] *= shade.T[..., None]
    ax.imshow(rgba, origin="lower", interpolation="nearest")

    pher = sim.pheromone.as_array()
    if pher.max() > 0:
        overlay = np.zeros(pher.T.shape + (4,))
        overlay[..., 0] = 1.0
        overlay[..., 3] = np.clip(pher.T, 0.0, 1.0) * 0.7
        ax.imshow(overlay, origin="lower", interpolation="nearest")

    workers = [a for a in snap.ants if a.alive and a.role == "worker"]
    queens  = [a for a in snap.ants if a.alive and a.role == "queen"]
    if workers:
        ax.scatter([a.position[0] for a in workers],
                   [a.position[2] for a in workers],
                   c=WORKER_COLOR, s=10, linewidths=0)
    if queens:
        ax.scatter([a.position[0] for a in queens],
                   [a.position[2] for a in queens],
                   c=QUEEN_COLOR, s=80, marker="*",
                   edgecolors="white", linewidths=0.5)

    ax.set_title(f"Generation {snap.generation}  tick {snap.tick}  "
                 f"({snap.alive_count} alive, {snap.nests_this_generation} nests)",
                 color="white", fontsize=10)
    ax.tick_params(colors="white")
    for spine in ax.spines.values():
        spine.set_edgecolor("#444444")

    suffix = f"_{label}" if label else ""
    path = os.path.join(base, "snapshots",
                        f"gen_{snap.generation:06d}{suffix}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Evolution statistics chart
# ──────────────────────────────────────────────────────────────────────────────

def save_evolution_chart(stats: list, base: str = SAVE_DIR,
                         filename: str = "evolution.png"):
    """
    Plot nests per generation, best fitness ever, survivors at generation
    end, and archive diversity.
    """
    if not stats:
        return
    gens      = [s["generation"]   for s in stats]
    fitness   = [s["fitness"]      for s in stats]
    best      = [s["best_fitness"] for s in stats]
    survivors = [s["survivors"]    for s in stats]
    diversity = [s["diversity"]    for s in stats]
    popul     = [s["population"]   for s in stats]

    fig, ax1 = plt.subplots(figsize=(12, 5), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax1.set_facecolor("#111111")

    ax1.plot(gens, fitness, color="#FFD700", linewidth=1.2,
             label="Nests this generation", zorder=3)
    ax1.plot(gens, best, color="#FF8800", linewidth=1.0,
             linestyle=":", label="Best ever", zorder=3)
    ax1.plot(gens, survivors, color="#44FF44", linewidth=1.0,
             alpha=0.8, label="Survivors", zorder=2)
    top = max(max(best), max(popul)) if popul else 1
    ax1.set_ylabel("Count", color="white")
    ax1.set_ylim(0, top * 1.05 + 1)
    ax1.tick_params(axis="both", colors="white")
    ax1.set_xlabel("Generation", color="white")

    ax2 = ax1.twinx()
    ax2.set_facecolor("#111111")
    ax2.plot(gens, diversity, color="#CC44FF", linewidth=1.0,
             linestyle="--", label="Archive diversity", zorder=2)
    ax2.set_ylabel("Genetic diversity (0–1)", color="white")
    ax2.set_ylim(0, 1.05)
    ax2.tick_params(colors="white")

    for spine in ax1.spines.values():
        spine.set_edgecolor("#444444")

    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2,
               facecolor="#222222", labelcolor="white",
               loc="upper left", fontsize=8)

    ax1.set_title("Colony Fitness", color="white", fontsize=12)
    plt.tight_layout()
    path = os.path.join(base, "charts", filename)
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Neural network diagram
# ──────────────────────────────────────────────────────────────────────────────

def save_neural_diagram(ant, generation: int, label: str = "",
                        base: str = SAVE_DIR, min_weight: float = 0.5):
    """
    Draw an ant's network as three columns: sensors (blue) → hidden (grey)
    → actions (pink). Only edges with |w| >= min_weight are drawn so the
    dense wiring stays readable. Green edges = positive, red = negative.
    """
    w_ih, b_h, w_ho, b_o = ant.brain.layers()
    n_in, n_hidden = w_ih.shape
    n_out = w_ho.shape[1]

    def _column(n, x):
        return [(x, (i + 1) / (n + 1)) for i in range(n)]

    sensors = _column(n_in, 0.0)
    hidden  = _column(n_hidden, 0.5)
    actions = _column(n_out, 1.0)

    fig, ax = plt.subplots(figsize=(10, 6), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")
    ax.axis("off")
    ax.set_xlim(-0.2, 1.25)
    ax.set_ylim(-0.05, 1.08)

    n_edges = 0
    for src, dst, weights in ((sensors, hidden, w_ih), (hidden, actions, w_ho)):
        for i, (x1, y1) in enumerate(src):
            for j, (x2, y2) in enumerate(dst):
                w = weights[i, j]
                if abs(w) < min_weight:
                    continue
                color = "#44FF44" if w >= 0 else "#FF4444"
                lw    = 0.3 + min(2.5, abs(w))
                ax.plot([x1, x2], [y1, y2], color=color, lw=lw,
                        alpha=0.5, zorder=1)
                n_edges += 1

    def _draw_nodes(points, color, labels, ha, dx):
        for idx, (x, y) in enumerate(points):
            ax.add_patch(plt.Circle((x, y), 0.015, color=color, zorder=3))
            if labels is not None:
                ax.text(x + dx, y, labels.get(idx, str(idx)), color="white",
                        fontsize=6.5, ha=ha, va="center", zorder=4)

    _draw_nodes(sensors, "#4499FF", SENSOR_LABELS, "right", -0.03)
    _draw_nodes(hidden,  "#AAAAAA", None, "center", 0.0)
    _draw_nodes(actions, "#FF88AA", ACTION_LABELS, "left", 0.03)

    for tx, title in [(0.0, "Sensors"), (0.5, "Hidden"), (1.0, "Actions")]:
        ax.text(tx, 1.04, title, color="#CCCCCC", ha="center",
                fontsize=9, fontweight="bold")

    ax.set_title(
        f"Gen {generation} — Brain of {label or ant.role.value}  "
        f"({n_edges} edges with |w| ≥ {min_weight})",
        color="white", fontsize=10, pad=4)

    path = os.path.join(base, "neural", f"gen_{generation:06d}_{label or ant.role.value}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# CSV log
# ──────────────────────────────────────────────────────────────────────────────

def append_csv(stats: dict, base: str = SAVE_DIR, enabled: bool = LOG_CSV):
    """Append one generation's stats to a CSV file."""
    if not enabled:
        return
    path = os.path.join(base, "evolution_log.csv")
    file_exists = os.path.isfile(path)
    with open(path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(stats.keys()))
        if not file_exists:
            writer.writeheader()
        writer.writerow(stats)
    return path
