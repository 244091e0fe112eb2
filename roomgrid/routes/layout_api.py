"""
project: Roomgrid
module: layout_api.py
License: MIT

Layout retrieval, regeneration and advance API routes.

The app keeps a single LayoutSet in ``app.extensions['roomgrid']``. All reads
and mutations of it go through a per-app lock because Flask-SocketIO may
interleave greenlets/threads between HTTP requests and socket events.
"""

import threading

from flask import Blueprint, Response, current_app, jsonify, request

from roomgrid.layout import ConfigurationError, LayoutConfig, LayoutSet, coerce_seed, render_ascii
from roomgrid.logging_utils import get_logger

bp_layouts = Blueprint("layouts", __name__)
_log = get_logger("layout_api")

# request body key -> LayoutConfig attribute
_BODY_FIELDS = {
    "rows": "rows",
    "columns": "columns",
    "spacing": "spacing",
    "density": "density",
    "count": "layout_count",
}


class LayoutState:
    def __init__(self, layout_set: LayoutSet):
        self.layout_set = layout_set
        self.lock = threading.Lock()


def init_layouts(app):
    """Generate the initial LayoutSet from app config and attach it to the app."""
    cfg = LayoutConfig.from_mapping(app.config)
    app.extensions["roomgrid"] = LayoutState(LayoutSet.from_config(cfg))


def get_state() -> LayoutState:
    return current_app.extensions["roomgrid"]


def advance_active():
    """Advance the shared set and return the new active layout as a dict."""
    state = get_state()
    with state.lock:
        layout = state.layout_set.advance()
        return layout.to_dict()


def active_layout_dict():
    state = get_state()
    with state.lock:
        return state.layout_set.active.to_dict()


def _config_from_body(data) -> LayoutConfig:
    if not isinstance(data, dict):
        raise ConfigurationError("__root__", "payload must be an object")
    cfg = LayoutConfig.from_mapping(current_app.config)
    for key, attr in _BODY_FIELDS.items():
        if key in data and data[key] is not None:
            setattr(cfg, attr, data[key])
    if "seed" in data:
        cfg.seed = coerce_seed(data["seed"])
    return cfg.validate()


@bp_layouts.route("/api/layouts", methods=["GET"])
def list_layouts():
    """
    Summarize every layout in the set.
    Response: { 'root_seed', 'count', 'active_index', 'layouts': [...] }
    """
    state = get_state()
    with state.lock:
        return jsonify(state.layout_set.to_dict())


@bp_layouts.route("/api/layouts", methods=["POST"])
def regenerate_layouts():
    """Replace the whole set.

    Body JSON (all optional, defaults from app config):
      { "rows", "columns", "spacing", "density", "count", "seed": <int|str|null> }
    A string seed is hashed deterministically; null/empty picks a random one.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    cfg = _config_from_body(data)
    layout_set = LayoutSet.from_config(cfg)
    state = get_state()
    with state.lock:
        state.layout_set = layout_set
        summary = layout_set.to_dict()
        active = layout_set.active.to_dict()
    _log.info(event="layouts_regenerated", root_seed=layout_set.root_seed, count=len(layout_set))
    from roomgrid import socketio

    # The previous set is gone; actuators must rebuild from the new active layout.
    socketio.emit("layout_changed", active)
    return jsonify(summary), 201


@bp_layouts.route("/api/layouts/active", methods=["GET"])
def active_layout():
    return jsonify(active_layout_dict())


@bp_layouts.route("/api/layouts/active/ascii", methods=["GET"])
def active_layout_ascii():
    state = get_state()
    with state.lock:
        text = render_ascii(state.layout_set.active)
    return Response(text + "\n", mimetype="text/plain")


@bp_layouts.route("/api/layouts/<int:index>", methods=["GET"])
def layout_detail(index):
    state = get_state()
    with state.lock:
        if index >= len(state.layout_set):
            return jsonify({"error": "layout not found", "index": index}), 404
        return jsonify(state.layout_set[index].to_dict())


@bp_layouts.route("/api/layouts/advance", methods=["POST"])
def advance_layout():
    """Advance to the next layout (wrapping) and return it."""
    data = advance_active()
    from roomgrid import socketio

    # Keep socket-connected actuators in step with HTTP-triggered advances.
    socketio.emit("layout_changed", data)
    return jsonify(data)
