"""
AntEvo Server  –  Flask + Server-Sent Events
============================================

A thin adapter around Simulation: a background thread polls a TickClock,
runs the due ticks and publishes snapshots. No simulation rules live here.

Endpoints:
  POST /start        Start (or restart) the colony with a JSON config body
  POST /stop         Stop the running colony
  POST /pause        Toggle pause
  POST /speed        {"direction": "faster" | "slower"}
  GET  /stream       SSE stream – browser subscribes here for live data
  GET  /status       Latest snapshot + clock state as JSON

Run:
  python server.py
  # → http://localhost:5000
"""

import threading
import queue
import json
import time

from flask import Flask, Response, request, jsonify

from simulation import Simulation
from clock import TickClock
from config import (
    SimConfig, ANT_COUNT, STEPS_PER_GEN, MAX_GENERATIONS, ELITE_COUNT,
    MUTATION_RATE, MUTATION_STRENGTH, PHEROMONE_DECAY,
    WORLD_WIDTH, WORLD_HEIGHT, WORLD_DEPTH, SIM_SPEED,
)

FRAME_INTERVAL = 1.0 / 30.0   # seconds between clock polls

# ──────────────────────────────────────────────────────────────────────────────
app = Flask(__name__)

# Global server state (the simulation itself is owned by the worker thread)
_sim_thread:  threading.Thread | None = None
_stop_event   = threading.Event()
_gen_queue    = queue.Queue(maxsize=200)   # holds dicts to stream
_clock        = TickClock(SIM_SPEED)
_sim_status   = {
    "running":    False,
    "generation": 0,
    "max_gen":    0,
    "cfg":        {},
    "snapshot":   None,
}
_status_lock  = threading.Lock()


# ──────────────────────────────────────────────────────────────────────────────
# CORS helper – allow a separate frontend dev server to call us
# ──────────────────────────────────────────────────────────────────────────────

@app.after_request
def add_cors(response):
    response.headers["Access-Control-Allow-Origin"]  = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response

@app.route("/", methods=["OPTIONS"])
@app.route("/<path:p>", methods=["OPTIONS"])
def preflight(p=""):
    return Response(status=200)


# ──────────────────────────────────────────────────────────────────────────────
# Simulation thread
# ──────────────────────────────────────────────────────────────────────────────

def _build_cfg(data: dict) -> dict:
    """Merge request JSON with defaults."""
    return {
        "world_width":       int(data.get("worldWidth",        WORLD_WIDTH)),
        "world_height":      int(data.get("worldHeight",       WORLD_HEIGHT)),
        "world_depth":       int(data.get("worldDepth",        WORLD_DEPTH)),
        "ant_count":         int(data.get("antCount",          ANT_COUNT)),
        "steps_per_gen":     int(data.get("stepsPerGen",       STEPS_PER_GEN)),
        "elite_count":       int(data.get("eliteCount",        ELITE_COUNT)),
        "mutation_rate":     float(data.get("mutationRate",    MUTATION_RATE)),
        "mutation_strength": float(data.get("mutationStrength", MUTATION_STRENGTH)),
        "pheromone_decay":   float(data.get("pheromoneDecay",  PHEROMONE_DECAY)),
        "max_generations":   int(data.get("maxGenerations",    MAX_GENERATIONS)),
        "speed":             float(data.get("speed",           SIM_SPEED)),
        "seed":              data.get("seed"),
    }


def _sim_config(cfg: dict) -> SimConfig:
    """SimConfig from a merged request config; raises ValueError if unusable."""
    return SimConfig(**{k: cfg[k] for k in (
        "world_width", "world_height", "world_depth", "ant_count",
        "steps_per_gen", "elite_count", "mutation_rate",
        "mutation_strength", "pheromone_decay")}).validate()


def _push(out_q: queue.Queue, payload: dict):
    """Non-blocking put; drop oldest frame if queue full."""
    if out_q.full():
        try:
            out_q.get_nowait()
        except queue.Empty:
            pass
    out_q.put(payload)


def _sim_worker(cfg: dict, clock: TickClock,
                stop_evt: threading.Event, out_q: queue.Queue):
    """Drive the simulation from the clock until stopped or out of generations."""

    def on_gen(gen_idx, stats, sim):
        _push(out_q, {"type": "generation", "maxGen": cfg["max_generations"],
                      **stats})

    with _status_lock:
        _sim_status["running"] = True

    try:
        sim = Simulation(_sim_config(cfg), seed=cfg["seed"], verbose=False,
                         on_gen_callback=on_gen)
        last = time.monotonic()
        while not stop_evt.is_set() and sim.generation <= cfg["max_generations"]:
            time.sleep(FRAME_INTERVAL)
            now = time.monotonic()
            ran = clock.pump(sim, now - last)
            last = now
            if not ran:
                continue
            snap = sim.snapshot().to_dict()
            with _status_lock:
                _sim_status["generation"] = snap["generation"]
                _sim_status["snapshot"]   = snap
            _push(out_q, {"type": "tick", **snap})
    finally:
        with _status_lock:
            _sim_status["running"] = False
            last_gen = _sim_status["generation"]
        out_q.put({"type": "done", "gen": last_gen})


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────

@app.route("/start", methods=["POST"])
def start():
    global _sim_thread, _stop_event, _gen_queue, _clock

    try:
        cfg = _build_cfg(request.get_json(silent=True) or {})
        _sim_config(cfg)
    except (TypeError, ValueError) as exc:
        return jsonify({"error": str(exc)}), 400

    # Stop any running sim
    _stop_event.set()
    if _sim_thread and _sim_thread.is_alive():
        _sim_thread.join(timeout=3)

    # Reset
    _stop_event = threading.Event()
    _gen_queue  = queue.Queue(maxsize=200)
    _clock = TickClock(cfg["speed"])
    with _status_lock:
        _sim_status["generation"] = 0
        _sim_status["running"]    = False
        _sim_status["snapshot"]   = None
        _sim_status["cfg"]        = cfg
        _sim_status["max_gen"]    = cfg["max_generations"]

    _sim_thread = threading.Thread(
        target=_sim_worker,
        args=(cfg, _clock, _stop_event, _gen_queue),
        daemon=True,
    )
    _sim_thread.start()
    return jsonify({"status": "started", "cfg": cfg})


@app.route("/stop", methods=["POST"])
def stop():
    _stop_event.set()
    return jsonify({"status": "stopped"})


@app.route("/pause", methods=["POST"])
def pause():
    _clock.toggle_pause()
    return jsonify(_clock.state())


@app.route("/speed", methods=["POST"])
def speed():
    direction = (request.get_json(silent=True) or {}).get("direction")
    if direction == "faster":
        _clock.faster()
    elif direction == "slower":
        _clock.slower()
    else:
        return jsonify({"error": "direction must be 'faster' or 'slower'"}), 400
    return jsonify(_clock.state())


@app.route("/status", methods=["GET"])
def status():
    with _status_lock:
        body = dict(_sim_status)
    body["clock"] = _clock.state()
    return jsonify(body)


@app.route("/stream", methods=["GET"])
def stream():
    """SSE endpoint – browser subscribes and receives ticks and generation summaries."""

    def event_gen():
        # Send a hello so the browser knows it's connected
        yield "data: {\"type\": \"connected\"}\n\n"

        while True:
            try:
                payload = _gen_queue.get(timeout=1)
                yield f"data: {json.dumps(payload)}\n\n"
                if payload.get("type") == "done":
                    break
            except queue.Empty:
                # Keep-alive ping
                yield "data: {\"type\": \"ping\"}\n\n"

    return Response(
        event_gen(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",    # disable nginx buffering if behind proxy
        },
    )


# ──────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 50)
    print("  AntEvo Server  →  http://localhost:5000")
    print("  SSE stream     →  http://localhost:5000/stream")
    print("=" * 50)
    app.run(host="0.0.0.0", port=5000, threaded=True, debug=False)
