"""
main.py — Algorithm Lab Flask App
===================================
A thin JSON host over the visualizers.  Drawing, pacing and user-facing
forms belong to whatever front end calls these endpoints; this module
only validates input, forwards it to the right engine and returns the
engine's snapshot.

Routes:
  GET  /                               – experiments and algorithms on offer
  GET  /api/<kind>/snapshot            – current state of one experiment
  POST /api/<kind>/reset               – back to the initial state
  POST /api/bst/insert|search|delete   – {"value": n}
  POST /api/hash-table/insert          – {"key": k, "value": v}
  POST /api/hash-table/search          – {"key": k}
  POST /api/hash-table/delete          – {"index": i}
  POST /api/sorting/array              – {"values": [..]}
  POST /api/sorting/shuffle            – {"size": n}        (optional)
  POST /api/cpu-scheduling/processes   – {"processes": [{burst_time, arrival_time, name}, ..]}
  POST /api/cpu-scheduling/add         – {"burst_time": b, "arrival_time": a, "name": s}
  POST /api/<kind>/algorithm           – {"algo_key": key}
  POST /api/<kind>/start|step|cancel|run
  POST /api/<kind>/play|pause|toggle|tick
  POST /api/<kind>/step/back           – replay cursor one step back
  POST /api/<kind>/step/goto           – {"index": i}
  POST /api/<kind>/speed               – {"speed": preset} or {"seconds": s}
  GET  /api/log/<kind>?tail=n          – event log lines
  POST /api/log/<kind>/truncate        – {"keep": n}
  POST /api/compare                    – {"kind": k, "left": key, "right": key}
  GET  /api/submission/<kind>          – state to attach to a submission

State management:
  Visualizers hold live generators, so they cannot live in the cookie
  session.  The session only carries a workspace id; the visualizers
  themselves sit in the in-process WORKSPACES dict, one set per id.  At
  most settings.max_workspaces sets are kept; the least recently used
  one is evicted when a new session needs room.
"""

import logging
import secrets
from collections import OrderedDict
from typing import Any, Dict

from flask import Flask, request, jsonify, session

from algorithms import SCHEDULING, algorithms_by_family, get_algorithm, list_algorithms
from config import load_settings
from engine import Recorder, SPEED_PRESETS, compare
from visualizers import (
    VISUALIZERS,
    SteppableVisualizer,
    Visualizer,
    capture,
    create,
)


logger = logging.getLogger(__name__)

settings = load_settings()

app = Flask(__name__)
app.secret_key = settings.secret_key

# least recently used first; capped at settings.max_workspaces
WORKSPACES: "OrderedDict[str, Dict[str, Visualizer]]" = OrderedDict()


class InputError(ValueError):
    """Rejected request body; reported to the client as HTTP 400."""


@app.errorhandler(InputError)
def handle_input_error(e):
    logger.warning("rejected request to %s: %s", request.path, e)
    return jsonify({"error": str(e)}), 400


# ---------------------------------------------------------------------------
# Workspace Helpers
# ---------------------------------------------------------------------------
def get_workspace() -> Dict[str, Visualizer]:
    ws_id = session.get("workspace")
    if ws_id is not None and ws_id in WORKSPACES:
        WORKSPACES.move_to_end(ws_id)
        return WORKSPACES[ws_id]

    ws_id = secrets.token_hex(16)
    session["workspace"] = ws_id
    WORKSPACES[ws_id] = {}
    logger.info("new workspace %s", ws_id)
    while len(WORKSPACES) > max(settings.max_workspaces, 1):
        evicted, _ = WORKSPACES.popitem(last=False)
        logger.info("evicted idle workspace %s", evicted)
    return WORKSPACES[ws_id]


def get_visualizer(kind: str) -> Visualizer:
    if kind not in VISUALIZERS:
        raise InputError(f"Unknown experiment: {kind}")
    ws = get_workspace()
    if kind not in ws:
        ws[kind] = create(kind, settings=settings)
    return ws[kind]


def get_steppable(kind: str) -> SteppableVisualizer:
    viz = get_visualizer(kind)
    if not isinstance(viz, SteppableVisualizer):
        raise InputError(f"Experiment {kind} is not steppable")
    return viz


def body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def require_int(data: Dict[str, Any], name: str, minimum=None) -> int:
    raw = data.get(name)
    if isinstance(raw, bool):
        raise InputError(f"{name} must be an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InputError(f"{name} must be an integer")
    if minimum is not None and value < minimum:
        raise InputError(f"{name} must be >= {minimum}")
    return value


def require_text(data: Dict[str, Any], name: str) -> str:
    value = str(data.get(name, "")).strip()
    if not value:
        raise InputError(f"{name} is required")
    return value


def snapshot_response(viz: Visualizer, **extra: Any):
    payload = {"state": viz.get_snapshot()}
    payload.update(extra)
    return jsonify(payload)


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    return jsonify({
        "experiments": sorted(VISUALIZERS),
        "algorithms":  [a.to_dict() for a in list_algorithms()],
        "families":    {
            cls.family: [a.key for a in algorithms_by_family(cls.family)]
            for cls in VISUALIZERS.values() if issubclass(cls, SteppableVisualizer)
        },
    })


# ---------------------------------------------------------------------------
# API: Any Experiment
# ---------------------------------------------------------------------------
@app.route("/api/<kind>/snapshot")
def api_snapshot(kind):
    return snapshot_response(get_visualizer(kind))


@app.route("/api/<kind>/reset", methods=["POST"])
def api_reset(kind):
    viz = get_visualizer(kind)
    viz.reset()
    return snapshot_response(viz)


@app.route("/api/submission/<kind>")
def api_submission(kind):
    return jsonify(capture(get_visualizer(kind)))


# ---------------------------------------------------------------------------
# API: Binary Search Tree
# ---------------------------------------------------------------------------
@app.route("/api/bst/<op>", methods=["POST"])
def api_bst(op):
    if op not in ("insert", "search", "delete"):
        raise InputError(f"Unknown operation: {op}")
    viz   = get_visualizer("bst")
    value = require_int(body(), "value")
    ok    = getattr(viz, op)(value)
    return snapshot_response(viz, ok=ok)


# ---------------------------------------------------------------------------
# API: Hash Table
# ---------------------------------------------------------------------------
@app.route("/api/hash-table/insert", methods=["POST"])
def api_hash_insert():
    data   = body()
    viz    = get_visualizer("hash-table")
    result = viz.insert(require_text(data, "key"), require_text(data, "value"))
    return snapshot_response(viz, ok=result.ok, index=result.index, probes=result.probes)


@app.route("/api/hash-table/search", methods=["POST"])
def api_hash_search():
    viz    = get_visualizer("hash-table")
    result = viz.search(require_text(body(), "key"))
    return snapshot_response(viz, ok=result.found, index=result.index, probes=result.probes)


@app.route("/api/hash-table/delete", methods=["POST"])
def api_hash_delete():
    viz = get_visualizer("hash-table")
    ok  = viz.delete(require_int(body(), "index", minimum=0))
    return snapshot_response(viz, ok=ok)


# ---------------------------------------------------------------------------
# API: Sorting Input
# ---------------------------------------------------------------------------
@app.route("/api/sorting/array", methods=["POST"])
def api_sorting_array():
    values = body().get("values")
    if not isinstance(values, list) or not values:
        raise InputError("values must be a non-empty list of integers")
    ints = [require_int({"value": v}, "value") for v in values]
    viz  = get_visualizer("sorting")
    return snapshot_response(viz, ok=viz.set_array(ints))


@app.route("/api/sorting/shuffle", methods=["POST"])
def api_sorting_shuffle():
    data = body()
    size = require_int(data, "size", minimum=1) if "size" in data else None
    viz  = get_visualizer("sorting")
    return snapshot_response(viz, ok=viz.shuffle(size))


# ---------------------------------------------------------------------------
# API: CPU Scheduling Input
# ---------------------------------------------------------------------------
def parse_process(raw: Any, index: int) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise InputError(f"process {index + 1} must be an object")
    proc = {
        "id":           index + 1,
        "burst_time":   require_int(raw, "burst_time", minimum=0),
        "arrival_time": require_int(raw, "arrival_time", minimum=0) if "arrival_time" in raw else 0,
    }
    if raw.get("name"):
        proc["name"] = str(raw["name"])
    return proc


@app.route("/api/cpu-scheduling/processes", methods=["POST"])
def api_scheduling_processes():
    raw = body().get("processes")
    if not isinstance(raw, list) or not raw:
        raise InputError("processes must be a non-empty list")
    procs = [parse_process(p, i) for i, p in enumerate(raw)]
    viz   = get_visualizer("cpu-scheduling")
    try:
        ok = viz.set_processes(procs)
    except ValueError as e:
        raise InputError(str(e))
    return snapshot_response(viz, ok=ok)


@app.route("/api/cpu-scheduling/add", methods=["POST"])
def api_scheduling_add():
    data = body()
    proc = parse_process(data, 0)
    viz  = get_visualizer("cpu-scheduling")
    try:
        added = viz.add_process(proc["burst_time"], proc["arrival_time"], proc.get("name"))
    except ValueError as e:
        raise InputError(str(e))
    return snapshot_response(viz, ok=added is not None)


# ---------------------------------------------------------------------------
# API: Run Control (sorting, cpu-scheduling, tcp-handshake)
# ---------------------------------------------------------------------------
@app.route("/api/<kind>/algorithm", methods=["POST"])
def api_algorithm(kind):
    viz = get_steppable(kind)
    key = require_text(body(), "algo_key")
    try:
        ok = viz.select_algorithm(key)
    except ValueError as e:
        raise InputError(str(e))
    return snapshot_response(viz, ok=ok)


@app.route("/api/<kind>/start", methods=["POST"])
def api_start(kind):
    viz = get_steppable(kind)
    return snapshot_response(viz, ok=viz.start())


@app.route("/api/<kind>/step", methods=["POST"])
def api_step(kind):
    viz  = get_steppable(kind)
    step = viz.step()
    return snapshot_response(viz, ok=step is not None, step=step.to_dict() if step else None)


@app.route("/api/<kind>/cancel", methods=["POST"])
def api_cancel(kind):
    viz = get_steppable(kind)
    return snapshot_response(viz, ok=viz.cancel())


@app.route("/api/<kind>/run", methods=["POST"])
def api_run(kind):
    viz = get_steppable(kind)
    state = viz.run_to_completion()
    return snapshot_response(viz, ok=state.value == "completed")


@app.route("/api/<kind>/step/back", methods=["POST"])
def api_step_back(kind):
    viz  = get_steppable(kind)
    step = viz.back()
    return snapshot_response(viz, ok=step is not None, step=step.to_dict() if step else None)


@app.route("/api/<kind>/step/goto", methods=["POST"])
def api_step_goto(kind):
    viz  = get_steppable(kind)
    step = viz.goto(require_int(body(), "index", minimum=0))
    return snapshot_response(viz, ok=step is not None, step=step.to_dict() if step else None)


@app.route("/api/<kind>/tick", methods=["POST"])
def api_tick(kind):
    viz = get_steppable(kind)
    return snapshot_response(viz, ok=viz.tick())


@app.route("/api/<kind>/play", methods=["POST"])
def api_play(kind):
    viz = get_steppable(kind)
    viz.play()
    return snapshot_response(viz, ok=viz.status == "running")


@app.route("/api/<kind>/pause", methods=["POST"])
def api_pause(kind):
    viz = get_steppable(kind)
    viz.pause()
    return snapshot_response(viz, ok=viz.status == "paused")


@app.route("/api/<kind>/toggle", methods=["POST"])
def api_toggle(kind):
    viz = get_steppable(kind)
    viz.toggle_play()
    return snapshot_response(viz, ok=viz.is_running)


@app.route("/api/<kind>/speed", methods=["POST"])
def api_speed(kind):
    viz  = get_steppable(kind)
    data = body()
    if "seconds" in data:
        seconds = data["seconds"]
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)) or seconds <= 0:
            raise InputError("seconds must be a positive number")
        viz.set_speed_seconds(float(seconds))
        return jsonify({"speed": "custom", "seconds": viz.speed})

    speed = require_text(data, "speed")
    if speed not in SPEED_PRESETS:
        raise InputError(f"Unknown speed: {speed}")
    viz.set_speed(speed)
    return jsonify({"speed": speed, "seconds": viz.speed})


# ---------------------------------------------------------------------------
# API: Event Log
# ---------------------------------------------------------------------------
@app.route("/api/log/<kind>")
def api_log(kind):
    log = get_visualizer(kind).log
    if "tail" in request.args:
        lines = log.tail(require_int(request.args, "tail", minimum=0))
    else:
        lines = log.lines()
    return jsonify({"lines": lines, "dropped": log.dropped})


@app.route("/api/log/<kind>/truncate", methods=["POST"])
def api_log_truncate(kind):
    log = get_visualizer(kind).log
    log.truncate(require_int(body(), "keep", minimum=0))
    return jsonify({"lines": log.lines(), "dropped": log.dropped})


# ---------------------------------------------------------------------------
# API: Comparison Mode
# ---------------------------------------------------------------------------
@app.route("/api/compare", methods=["POST"])
def api_compare():
    data = body()
    kind = require_text(data, "kind")
    if kind == "sorting":
        inputs = {"values": get_visualizer(kind).array}
    elif kind == "cpu-scheduling":
        inputs = {"processes": get_visualizer(kind).processes}
    else:
        raise InputError(f"Comparison is not available for {kind}")

    family = get_steppable(kind).family
    recorders = []
    for side in ("left", "right"):
        key  = require_text(data, side)
        info = get_algorithm(key)
        if info is None or info.family != family:
            raise InputError(f"Unknown algorithm: {key}")
        options = dict(inputs)
        if family == SCHEDULING and info.preemptive:
            options["quantum"] = settings.rr_quantum
        rec = Recorder()
        rec.start(key, **options)
        rec.run_to_completion()
        recorders.append(rec)

    return jsonify(compare(*recorders).to_dict())


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    logger.info("Algorithm Lab listening on http://localhost:5000")
    app.run(debug=False, port=5000)
