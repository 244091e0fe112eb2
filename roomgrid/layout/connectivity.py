"""Connectivity generation: spanning pass plus bounded extra-edge injection.

The spanning pass is a randomized depth-first traversal from room (0,0) that
yields a spanning tree (rows*columns - 1 edges, every room reachable). The
extra-edge pass then walks every grid-adjacent pair in shuffled order and adds
up to ``max_extra_edges`` loops, skipping any pair where either room already
has MAX_DEGREE doorways. Tree edges are never removed.

The cap bounds only the extra-edge pass. On grids larger than 3x3 the DFS
can leave an interior room with four tree edges; those stay, because
removing one would disconnect the grid.

All randomness comes from the ``rng`` argument (a ``random.Random``), so a
fixed seed reproduces the same ConnectionSet.
"""
from __future__ import annotations

import math
from collections import deque
from typing import Any, Callable, Dict, Iterator, List, MutableSequence, Optional, Set, TypeVar

from .errors import ConfigurationError, InvariantViolation
from .topology import Edge, GridTopology, RoomId

MAX_DEGREE = 3

T = TypeVar("T")


class ConnectionSet:
    """Edge set owned by one layout, with a degree table kept in step with inserts."""

    def __init__(self, topology: GridTopology):
        self.topology = topology
        self._edges: Dict[Edge, None] = {}
        self._degree: Dict[RoomId, int] = {}
        self._frozen = False

    def __repr__(self):
        return f"ConnectionSet({self.topology!r}, edges={len(self._edges)})"

    def __len__(self):
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)

    def __contains__(self, edge) -> bool:
        try:
            return Edge.between(*edge) in self._edges
        except InvariantViolation:
            return False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, edge: Edge) -> None:
        if self._frozen:
            raise InvariantViolation("ConnectionSet is frozen")
        edge = Edge.between(*edge)
        if not (self.topology.contains(edge.a) and self.topology.contains(edge.b)):
            raise InvariantViolation(f"{edge} outside {self.topology!r}")
        if edge in self._edges:
            raise InvariantViolation(f"duplicate edge {edge}")
        self._edges[edge] = None
        for room in edge:
            self._degree[room] = self._degree.get(room, 0) + 1

    def freeze(self) -> "ConnectionSet":
        self._frozen = True
        return self

    def edges(self) -> List[Edge]:
        return list(self._edges)

    def degree(self, room) -> int:
        return self._degree.get(RoomId(*room), 0)

    def neighbors(self, room) -> List[RoomId]:
        room = RoomId(*room)
        return [e.other(room) for e in self._edges if room in e]

    def reachable_from(self, start) -> Set[RoomId]:
        adjacency: Dict[RoomId, List[RoomId]] = {}
        for e in self._edges:
            adjacency.setdefault(e.a, []).append(e.b)
            adjacency.setdefault(e.b, []).append(e.a)
        start = RoomId(*start)
        q = deque([start])
        vis = {start}
        while q:
            cur = q.popleft()
            for nxt in adjacency.get(cur, ()):
                if nxt not in vis:
                    vis.add(nxt)
                    q.append(nxt)
        return vis

    def is_connected(self) -> bool:
        return len(self.reachable_from(RoomId(0, 0))) == self.topology.room_count


def fisher_yates(items: MutableSequence[T], rng) -> MutableSequence[T]:
    """Shuffle in place: for i from last down to 1 swap with a uniform index in [0, i]."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def validate_density(density: Any) -> float:
    if isinstance(density, bool) or not isinstance(density, (int, float)):
        raise ConfigurationError("density", "must be a number")
    if math.isnan(density) or math.isinf(density):
        raise ConfigurationError("density", "must be finite")
    if density < 0:
        raise ConfigurationError("density", "must be >= 0")
    return float(density)


def max_extra_edges(room_count: int, density: float) -> int:
    """Extra-edge budget, rounded half up: 9 rooms at 0.5 gives 5."""
    return int(math.floor(room_count * density + 0.5))


def spanning_pass(topology: GridTopology, rng) -> ConnectionSet:
    connections = ConnectionSet(topology)
    start = RoomId(0, 0)
    visited = {start}
    stack = [(start, iter(fisher_yates(topology.neighbors(start), rng)))]
    while stack:
        room, pending = stack[-1]
        for nxt in pending:
            if nxt not in visited:
                visited.add(nxt)
                connections.add(Edge.between(room, nxt))
                stack.append((nxt, iter(fisher_yates(topology.neighbors(nxt), rng))))
                break
        else:
            stack.pop()
    if len(visited) != topology.room_count:
        missing = [r for r in topology.rooms() if r not in visited]
        raise InvariantViolation(f"spanning pass left {len(missing)} rooms unvisited: {missing[:5]}")
    if len(connections) != topology.room_count - 1:
        raise InvariantViolation(f"spanning pass produced {len(connections)} edges for {topology.room_count} rooms")
    return connections


def extra_edge_pass(
    topology: GridTopology,
    connections: ConnectionSet,
    density: float,
    rng,
    metrics: Optional[Dict[str, Any]] = None,
) -> int:
    """Add loop edges in shuffled order; returns the number accepted."""
    density = validate_density(density)
    budget = max_extra_edges(topology.room_count, density)
    candidates = fisher_yates(topology.all_edges(), rng)
    added = 0
    present = capped = 0
    for edge in candidates:
        if added >= budget:
            break
        if edge in connections:
            present += 1
            continue
        if connections.degree(edge.a) < MAX_DEGREE and connections.degree(edge.b) < MAX_DEGREE:
            connections.add(edge)
            added += 1
        else:
            capped += 1
    if metrics is not None:
        metrics['max_extra_edges'] = budget
        metrics['extra_edges'] = added
        metrics['candidates_already_present'] = present
        metrics['candidates_degree_capped'] = capped
    return added


def _direct(label, fn, *args):
    return fn(*args)


def generate(
    topology: GridTopology,
    density: float,
    rng,
    metrics: Optional[Dict[str, Any]] = None,
    phase: Callable[..., Any] = _direct,
) -> ConnectionSet:
    """Spanning pass then extra-edge pass; returns the frozen ConnectionSet.

    ``phase(label, fn, *args)`` wraps each pass so callers can time them.
    """
    density = validate_density(density)
    connections = phase("spanning_pass", spanning_pass, topology, rng)
    if metrics is not None:
        metrics["spanning_edges"] = len(connections)
    phase("extra_edge_pass", extra_edge_pass, topology, connections, density, rng, metrics)
    return connections.freeze()


__all__ = [
    "MAX_DEGREE",
    "ConnectionSet",
    "fisher_yates",
    "validate_density",
    "max_extra_edges",
    "spanning_pass",
    "extra_edge_pass",
    "generate",
]
