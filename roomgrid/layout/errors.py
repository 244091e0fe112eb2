"""Error taxonomy for layout generation.

ConfigurationError is raised before any generation work starts; the HTTP and
Socket.IO layers translate it into client errors. InvariantViolation signals a
bug in the generator itself and is never caught inside the core.
"""
from __future__ import annotations


class LayoutError(Exception):
    """Base class for all layout generation errors."""


class ConfigurationError(LayoutError, ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def to_dict(self):
        return {"error": self.message, "field": self.field, "code": "invalid_config"}


class InvariantViolation(LayoutError, AssertionError):
    """Internal-logic fault (self-edge, duplicate edge, unvisited room...)."""


__all__ = ["LayoutError", "ConfigurationError", "InvariantViolation"]
