"""
project: Roomgrid
module: __init__.py
License: MIT

Flask application factory and Socket.IO extension setup.

The app holds one LayoutSet (generated at startup from LAYOUT_* config) and
exposes it over HTTP (``/api/layouts``) and Socket.IO (``advance_layout``) so
an external actuator can build room geometry and switch layouts. Configuration
is sourced from environment variables (``ROOMGRID_*``, optionally via a .env
file) with defaults matching LayoutConfig.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_socketio import SocketIO

from roomgrid.layout import ConfigurationError, LayoutConfig
from roomgrid.logging_utils import log

__version__ = "0.2.0"

# Handlers in roomgrid.websockets register against this instance; create_app binds it.
socketio = SocketIO()

# Import websocket handlers before any init_app so each new server picks them up (side-effect)
from roomgrid.websockets import actuator as _ws_actuator  # noqa: E402,F401


def create_app(overrides=None):
    """Build and return a configured Flask app.

    ``overrides`` is applied on top of environment-derived config before the
    initial LayoutSet is generated, so tests can pin seeds and grid sizes.
    """
    # Load .env if present so ROOMGRID_* values can be supplied without exporting them.
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only deployments still work; only the rotating log file needs it
        pass

    env_cfg = LayoutConfig.from_env()
    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        LAYOUT_ROWS=env_cfg.rows,
        LAYOUT_COLUMNS=env_cfg.columns,
        LAYOUT_SPACING=env_cfg.spacing,
        LAYOUT_DENSITY=env_cfg.density,
        LAYOUT_COUNT=env_cfg.layout_count,
        LAYOUT_SEED=env_cfg.seed,
        LAYOUT_ORIGIN=env_cfg.origin,
    )
    if overrides:
        app.config.update(overrides)

    # Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
    socketio.init_app(
        app,
        async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
        cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
        ping_interval=20,
        ping_timeout=10,
    )

    from roomgrid.routes.layout_api import bp_layouts, init_layouts

    app.register_blueprint(bp_layouts)
    init_layouts(app)

    _register_error_handlers(app)
    log.info(
        event="app_created",
        rows=app.config["LAYOUT_ROWS"],
        columns=app.config["LAYOUT_COLUMNS"],
        count=app.config["LAYOUT_COUNT"],
    )
    return app


def _register_error_handlers(app):
    @app.errorhandler(ConfigurationError)
    def invalid_config(e):
        return jsonify(e.to_dict()), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not found", "path": request.path}), 404

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        log.error(event="unhandled_exception", error_id=error_id, path=request.path)
        return jsonify({"error": "internal error", "error_id": error_id}), 500
