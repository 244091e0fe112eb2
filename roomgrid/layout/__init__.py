"""Public layout package interface.

Generation core: grid topology, connectivity generation, wall mapping and the
layout set. The HTTP and Socket.IO layers only consume what is exported here.
"""

from .config import LayoutConfig, coerce_seed
from .connectivity import MAX_DEGREE, ConnectionSet, generate, max_extra_edges
from .errors import ConfigurationError, InvariantViolation, LayoutError
from .layout_set import LayoutSet
from .pipeline import Layout, build_layout
from .render import render_ascii
from .topology import Edge, GridTopology, RoomId
from .walls import Direction, DoorwayInstruction, map_walls  # noqa: F401

__all__ = [
    "LayoutConfig",
    "coerce_seed",
    "MAX_DEGREE",
    "ConnectionSet",
    "generate",
    "max_extra_edges",
    "ConfigurationError",
    "InvariantViolation",
    "LayoutError",
    "LayoutSet",
    "Layout",
    "build_layout",
    "render_ascii",
    "Edge",
    "GridTopology",
    "RoomId",
    "Direction",
    "DoorwayInstruction",
    "map_walls",
]
