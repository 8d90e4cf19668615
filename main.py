"""
main.py — Prim MST Visualizer Flask App
=======================================
The web server the drawing front-end talks to.  Everything is JSON;
drawing and pointer handling live in the browser.

Routes:
  GET  /api/state               – tick the run, return the published view
  GET  /api/graph               – current graph
  GET  /api/metrics             – analytics for the current / last run
  GET  /api/export              – full run log (graph input + every state)
  GET  /api/algorithm           – pseudocode listing and metadata

  POST /api/graph/node          – add node            {x, y, name?}
  POST /api/graph/node/move     – move node           {id, x, y}
  POST /api/graph/node/rename   – rename node         {id, name}
  POST /api/graph/node/delete   – delete node         {id}
  POST /api/graph/edge          – add edge            {source, target, weight?}
  POST /api/graph/edge/weight   – change edge weight  {source, target, weight}
  POST /api/graph/edge/delete   – delete edge         {source, target}
  POST /api/graph/directed      – toggle directedness {directed}
  POST /api/graph/load          – replace the graph   {nodes, edges, directed} or an export
  POST /api/reset               – clear graph and run

  POST /api/run                 – start Prim          {source?}
  POST /api/pause | /api/resume | /api/pause/toggle
  POST /api/cancel              – stop, keep the recorded steps
  POST /api/finish              – compute the rest immediately
  POST /api/speed               – set speed multiplier {multiplier}
  POST /api/speed/hold | /api/speed/release

  POST /api/step/next | /api/step/prev | /api/step/goto {index}
  POST /api/hold/next | /api/hold/prev | /api/hold/release

State management:
  One Workspace (graph + PlaybackSession) per app, kept in
  app.extensions.  The session is single-threaded, so every /api request
  holds the workspace lock for its whole duration.  The browser polls
  /api/state; every poll ticks the session, which is what moves a live
  run forward.
"""

import logging
import math
import threading
import time
from typing import Any, Callable, Dict, Mapping, Optional

from flask import Blueprint, Flask, current_app, g, jsonify, request

from algorithms import list_algorithms
from engine import PlaybackConfig, PlaybackSession
from graph import Graph, GraphError


logger = logging.getLogger(__name__)

DEFAULTS = {
    "BASE_INTERVAL":    1.0,
    "HOLD_DEBOUNCE":    0.25,
    "SPEED_MULTIPLIER": 10,
}


# ---------------------------------------------------------------------------
# Workspace — the graph being edited and the session that runs on it
# ---------------------------------------------------------------------------
class Workspace:
    """
    Attributes:
        graph   : The Graph being edited.
        session : PlaybackSession running on snapshots of `graph`.
        lock    : Held for the whole of every /api request; the session
                  is single-threaded.
    """

    def __init__(self, config: PlaybackConfig, clock: Callable[[], float]):
        self.graph   = Graph()
        self.session = PlaybackSession(config, clock=clock)
        self.lock    = threading.Lock()

    def edit(self, fn: Callable[[Graph], Any]) -> Any:
        """Apply one graph edit.  Any edit invalidates the previous run."""
        if self.session.is_active:
            raise GraphError("Cannot edit the graph while a run is active")
        result = fn(self.graph)
        if len(self.session.log):
            self.session.reset()
        return result

    def load(self, data: Mapping[str, Any]) -> Graph:
        """Replace the whole graph, e.g. with the `graph` part of an export."""
        def replace(old: Graph) -> Graph:
            try:
                new = Graph.from_dict(data)
            except (KeyError, TypeError, AttributeError) as e:
                raise GraphError(f"Malformed graph: {e!r}") from e
            new.version = old.version + 1
            self.graph = new
            return new

        return self.edit(replace)

    def run(self, source: Optional[int] = None) -> bool:
        if source is None:
            ids = self.graph.node_ids()
            source = ids[0] if ids else 0
        nodes, edges = self.graph.snapshot()
        return self.session.begin_run(nodes, edges, self.graph.directed, source)

    def reset(self) -> None:
        self.session.reset()
        self.graph.clear()


def get_workspace() -> Workspace:
    ws: Workspace = current_app.extensions["primviz"]
    ws.session.tick()
    return ws


class MissingField(ValueError):
    """A required key is absent from the request body."""

    def __init__(self, key: str):
        super().__init__(f"Missing field: {key}")
        self.key = key


def view_response(ws: Workspace, **extra):
    body = ws.session.view()
    body["directed"]      = ws.graph.directed
    body["graph_version"] = ws.graph.version
    body.update(extra)
    return jsonify(body)


def payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def field(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise MissingField(key)
    return data[key]


def as_int(data: Mapping[str, Any], key: str) -> int:
    value = field(data, key)
    if isinstance(value, bool) or (isinstance(value, float) and not math.isfinite(value)):
        raise ValueError(f"'{key}' must be an integer")
    return int(value)


def as_number(data: Mapping[str, Any], key: str) -> float:
    value = field(data, key)
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"'{key}' must be a finite number")
    return number


api = Blueprint("api", __name__, url_prefix="/api")


@api.before_request
def lock_workspace():
    current_app.extensions["primviz"].lock.acquire()
    g.workspace_locked = True


@api.teardown_request
def unlock_workspace(exc):
    if g.pop("workspace_locked", False):
        current_app.extensions["primviz"].lock.release()


@api.errorhandler(GraphError)
def handle_graph_error(e):
    return jsonify({"error": str(e)}), 400


@api.errorhandler(ValueError)
@api.errorhandler(TypeError)
def handle_bad_value(e):
    # MissingField lands here too
    return jsonify({"error": str(e)}), 400


# ---------------------------------------------------------------------------
# API: Read
# ---------------------------------------------------------------------------
@api.route("/state")
def api_state():
    return view_response(get_workspace())


@api.route("/graph")
def api_graph():
    return jsonify(get_workspace().graph.to_dict())


@api.route("/metrics")
def api_metrics():
    return jsonify(get_workspace().session.metrics().to_dict())


@api.route("/export")
def api_export():
    return jsonify(get_workspace().session.log.export())


@api.route("/algorithm")
def api_algorithm():
    """Metadata and pseudocode listing that `pseudocode_line` indexes into."""
    info = get_workspace().session.algorithm
    return jsonify({
        "key":         info.key,
        "label":       info.label,
        "pseudocode":  info.pseudocode,
        "tags":        info.tags,
        "complexity":  {"time": info.complexity_time, "space": info.complexity_space},
        "description": info.description,
    })


# ---------------------------------------------------------------------------
# API: Graph Editing
# ---------------------------------------------------------------------------
@api.route("/graph/node", methods=["POST"])
def api_add_node():
    data = payload()
    ws = get_workspace()
    node = ws.edit(lambda graph: graph.add_node(as_number(data, "x"), as_number(data, "y"), data.get("name")))
    return jsonify(node.to_dict())


@api.route("/graph/node/move", methods=["POST"])
def api_move_node():
    data = payload()
    ws = get_workspace()
    node = ws.edit(lambda graph: graph.move_node(as_int(data, "id"), as_number(data, "x"), as_number(data, "y")))
    return jsonify(node.to_dict())


@api.route("/graph/node/rename", methods=["POST"])
def api_rename_node():
    data = payload()
    ws = get_workspace()
    node = ws.edit(lambda graph: graph.rename_node(as_int(data, "id"), data.get("name")))
    return jsonify(node.to_dict())


@api.route("/graph/node/delete", methods=["POST"])
def api_delete_node():
    data = payload()
    ws = get_workspace()
    ws.edit(lambda graph: graph.remove_node(as_int(data, "id")))
    return jsonify(ws.graph.to_dict())


@api.route("/graph/edge", methods=["POST"])
def api_add_edge():
    data = payload()
    ws = get_workspace()
    weight = as_number(data, "weight") if data.get("weight") is not None else None
    edge = ws.edit(lambda graph: graph.add_edge(as_int(data, "source"), as_int(data, "target"), weight))
    return jsonify(edge.to_dict())


@api.route("/graph/edge/weight", methods=["POST"])
def api_edge_weight():
    data = payload()
    ws = get_workspace()
    edge = ws.edit(lambda graph: graph.set_edge_weight(
        as_int(data, "source"), as_int(data, "target"), as_number(data, "weight")))
    return jsonify(edge.to_dict())


@api.route("/graph/edge/delete", methods=["POST"])
def api_delete_edge():
    data = payload()
    ws = get_workspace()
    ws.edit(lambda graph: graph.remove_edge(as_int(data, "source"), as_int(data, "target")))
    return jsonify(ws.graph.to_dict())


@api.route("/graph/directed", methods=["POST"])
def api_directed():
    data = payload()
    ws = get_workspace()
    ws.edit(lambda graph: graph.set_directed(bool(data.get("directed", False))))
    return jsonify(ws.graph.to_dict())


@api.route("/graph/load", methods=["POST"])
def api_load_graph():
    data = payload()
    ws = get_workspace()
    # accepts a bare graph or a whole /api/export document
    graph = ws.load(data.get("graph", data))
    return jsonify(graph.to_dict())


@api.route("/reset", methods=["POST"])
def api_reset():
    ws = get_workspace()
    ws.reset()
    return view_response(ws)


# ---------------------------------------------------------------------------
# API: Run Control
# ---------------------------------------------------------------------------
@api.route("/run", methods=["POST"])
def api_run():
    data = payload()
    ws = get_workspace()
    source = as_int(data, "source") if data.get("source") is not None else None
    started = ws.run(source)
    return view_response(ws, started=started)


@api.route("/pause", methods=["POST"])
def api_pause():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.pause())


@api.route("/resume", methods=["POST"])
def api_resume():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.resume())


@api.route("/pause/toggle", methods=["POST"])
def api_toggle_pause():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.toggle_pause())


@api.route("/cancel", methods=["POST"])
def api_cancel():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.cancel())


@api.route("/finish", methods=["POST"])
def api_finish():
    ws = get_workspace()
    ws.session.finish()
    return view_response(ws)


@api.route("/speed", methods=["POST"])
def api_speed():
    data = payload()
    ws = get_workspace()
    value = data.get("multiplier")
    ok = isinstance(value, int) and ws.session.set_speed_multiplier(value)
    return view_response(ws, ok=ok)


@api.route("/speed/hold", methods=["POST"])
def api_speed_hold():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.speed_up())


@api.route("/speed/release", methods=["POST"])
def api_speed_release():
    ws = get_workspace()
    ws.session.release_speed_up()
    return view_response(ws)


# ---------------------------------------------------------------------------
# API: Step Navigation
# ---------------------------------------------------------------------------
@api.route("/step/next", methods=["POST"])
def api_step_next():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.step_forward())


@api.route("/step/prev", methods=["POST"])
def api_step_prev():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.step_backward())


@api.route("/step/goto", methods=["POST"])
def api_step_goto():
    data = payload()
    ws = get_workspace()
    return view_response(ws, ok=ws.session.seek(as_int(data, "index")))


@api.route("/hold/next", methods=["POST"])
def api_hold_next():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.hold_forward())


@api.route("/hold/prev", methods=["POST"])
def api_hold_prev():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.hold_backward())


@api.route("/hold/release", methods=["POST"])
def api_hold_release():
    ws = get_workspace()
    return view_response(ws, ok=ws.session.release_hold())


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(test_config: Optional[Mapping[str, Any]] = None,
               clock: Callable[[], float] = time.monotonic) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULTS)
    if test_config is None:
        # e.g. PRIMVIZ_BASE_INTERVAL=0.5
        app.config.from_prefixed_env("PRIMVIZ")
    else:
        app.config.from_mapping(test_config)

    config = PlaybackConfig.from_mapping(app.config)
    app.extensions["primviz"] = Workspace(config, clock)
    app.register_blueprint(api)

    @app.route("/")
    def index():
        return jsonify({
            "name":       "Prim MST Visualizer",
            "algorithms": [a.label for a in list_algorithms()],
            "config":     config.to_dict(),
        })

    logger.info("app created with %s", config)
    return app


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    logger.info("Prim MST Visualizer on http://localhost:5000")
    create_app().run(debug=True, host="0.0.0.0", port=5000, threaded=False)
