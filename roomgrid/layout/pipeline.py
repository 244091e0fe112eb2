"""Pipeline orchestration for a single layout.

A Layout owns its GridTopology, its (frozen) ConnectionSet and the derived
DoorwayInstructions. Generation runs once, in ``__post_init__``, from a local
``random.Random(seed)`` so nothing outside the layout affects the result.
The layout never touches scene objects; an actuator reads ``doorways`` and
``position()`` and builds geometry from them.
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from roomgrid.logging_utils import get_logger

from .config import LayoutConfig
from .connectivity import ConnectionSet, generate
from .metrics import init_metrics
from .topology import GridTopology, RoomId
from .walls import Direction, DoorwayInstruction, doorways_by_room, map_walls

_log = get_logger("layout")


@dataclass
class Layout:
    index: int = 0
    seed: Optional[int] = None
    rows: int = 3
    columns: int = 3
    spacing: float = 20.0
    density: float = 0.05
    origin: Tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))
    enable_metrics: bool = True

    def __post_init__(self):
        # 0 is a valid deterministic seed; None => random
        if self.seed is None:
            self.seed = random.randint(1, 1_000_000)
        env_val = os.environ.get('ROOMGRID_ENABLE_GENERATION_METRICS')
        if env_val is not None:
            self.enable_metrics = env_val.lower() not in {'0', 'false', 'no', ''}
        LayoutConfig(rows=self.rows, columns=self.columns, spacing=self.spacing, density=self.density,
                     layout_count=1, seed=self.seed, origin=self.origin).validate()
        self.active = False
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self._run_pipeline()

    def _run_pipeline(self):
        """Build topology, spanning tree, extra edges and doorway list in order.

        When metrics are enabled each phase is timed into ``metrics['phase_ms']``.
        """
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = round((pe - ps) * 1000, 3)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)
        rng = random.Random(self.seed)
        self.topology: GridTopology = _phase('topology', GridTopology, self.rows, self.columns)
        self.connections: ConnectionSet = generate(self.topology, self.density, rng,
                                                   self.metrics if self.enable_metrics else None, phase=_phase)
        spanning = self.topology.room_count - 1
        self.doorways: List[DoorwayInstruction] = _phase('map_walls', map_walls, self.connections)
        if self.enable_metrics:
            self.metrics['rooms'] = self.topology.room_count
            self.metrics['doorways'] = len(self.doorways)
            self.metrics['runtime_ms'] = round((time.perf_counter() - start) * 1000, 3)
            self.metrics['phase_ms'] = phase_times
        _log.debug(
            event="layout_generated",
            index=self.index,
            seed=self.seed,
            rooms=self.topology.room_count,
            edges=len(self.connections),
            extra=len(self.connections) - spanning,
            runtime_ms=self.metrics.get('runtime_ms'),
        )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.rows, self.columns)

    def rooms(self) -> List[RoomId]:
        return list(self.topology.rooms())

    def position(self, room) -> Tuple[float, float, float]:
        """World position of a room: columns step along X, rows along Z."""
        row, col = room
        if not self.topology.contains(room):
            raise IndexError(f"room {tuple(room)} outside {self.rows}x{self.columns} grid")
        ox, oy, oz = self.origin
        return (ox + col * self.spacing, oy, oz + row * self.spacing)

    def doorways_for(self, room) -> List[DoorwayInstruction]:
        room = RoomId(*room)
        return [d for d in self.doorways if d.room == room]

    def open_walls(self) -> Dict[RoomId, List[Direction]]:
        return doorways_by_room(self.doorways)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "seed": self.seed,
            "rows": self.rows,
            "columns": self.columns,
            "spacing": self.spacing,
            "density": self.density,
            "active": self.active,
            "edges": [[list(e.a), list(e.b)] for e in self.connections],
            "doorways": [d.to_dict() for d in self.doorways],
            "positions": [
                {"room": [r.row, r.col], "position": list(self.position(r))} for r in self.topology.rooms()
            ],
            "metrics": self.metrics,
        }


def build_layout(index: int, rows: int, columns: int, spacing: float, density: float, seed: int,
                 origin=(0.0, 0.0, 0.0), enable_metrics: bool = True) -> Layout:
    return Layout(index=index, seed=seed, rows=rows, columns=columns, spacing=spacing,
                  density=density, origin=tuple(origin), enable_metrics=enable_metrics)


__all__ = ["Layout", "build_layout"]
