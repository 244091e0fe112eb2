"""Minimal structured logging helper.

Emits key=value pairs (or one JSON object per line) with a timestamp, level
and logger name, so generation events can be grepped or parsed.

Usage:
    from roomgrid.logging_utils import get_logger
    _log = get_logger("layout")
    _log.info(event="layout_set_created", count=3, root_seed=42)

Environment:
    ROOMGRID_LOG_LEVEL  debug | info | warn | error (default info)
    ROOMGRID_LOG_JSON   1/true/yes/on for JSON lines

Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("ROOMGRID_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("ROOMGRID_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")
_OUTPUT = None  # None => stdout, errors to stderr


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "roomgrid"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        fields.setdefault("logger", self.name)
        stream = _OUTPUT or (sys.stdout if lvl != "error" else sys.stderr)
        print(_format(lvl, **fields), file=stream)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


def set_output(stream) -> None:
    """Send every level to ``stream`` (None restores stdout/stderr split)."""
    global _OUTPUT
    _OUTPUT = stream


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("roomgrid")
