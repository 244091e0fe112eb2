"""Grid topology: room identifiers and grid-adjacent edges. No randomness here."""
from __future__ import annotations

from typing import Iterator, List, NamedTuple

from .errors import ConfigurationError, InvariantViolation


class RoomId(NamedTuple):
    row: int
    col: int


class Edge(NamedTuple):
    """Undirected doorway between two adjacent rooms, stored with ``a < b``."""

    a: RoomId
    b: RoomId

    @classmethod
    def between(cls, first, second) -> "Edge":
        first, second = RoomId(*first), RoomId(*second)
        if first == second:
            raise InvariantViolation(f"self-edge at {first}")
        if abs(first.row - second.row) + abs(first.col - second.col) != 1:
            raise InvariantViolation(f"rooms {first} and {second} are not grid-adjacent")
        return cls(first, second) if first < second else cls(second, first)

    @property
    def axis(self) -> str:
        return "row" if self.a.col == self.b.col else "col"

    def other(self, room: RoomId) -> RoomId:
        if room == self.a:
            return self.b
        if room == self.b:
            return self.a
        raise InvariantViolation(f"{room} is not an endpoint of {self}")


# East, South, West, North as (drow, dcol)
_NEIGHBOR_OFFSETS = [(0, 1), (1, 0), (0, -1), (-1, 0)]


class GridTopology:
    def __init__(self, rows: int, columns: int):
        for name, value in (("rows", rows), ("columns", columns)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(name, "must be an integer")
            if value <= 0:
                raise ConfigurationError(name, "must be >= 1")
        self.rows = rows
        self.columns = columns

    def __repr__(self):
        return f"GridTopology(rows={self.rows}, columns={self.columns})"

    @property
    def room_count(self) -> int:
        return self.rows * self.columns

    @property
    def max_edges(self) -> int:
        return self.rows * (self.columns - 1) + self.columns * (self.rows - 1)

    def contains(self, room) -> bool:
        row, col = room
        return 0 <= row < self.rows and 0 <= col < self.columns

    def rooms(self) -> Iterator[RoomId]:
        for row in range(self.rows):
            for col in range(self.columns):
                yield RoomId(row, col)

    def neighbors(self, room) -> List[RoomId]:
        row, col = room
        if not self.contains(room):
            raise InvariantViolation(f"{room} outside {self!r}")
        out = []
        for drow, dcol in _NEIGHBOR_OFFSETS:
            nrow, ncol = row + drow, col + dcol
            if 0 <= nrow < self.rows and 0 <= ncol < self.columns:
                out.append(RoomId(nrow, ncol))
        return out

    def all_edges(self) -> List[Edge]:
        edges = []
        for row in range(self.rows):
            for col in range(self.columns):
                if col < self.columns - 1:
                    edges.append(Edge(RoomId(row, col), RoomId(row, col + 1)))
                if row < self.rows - 1:
                    edges.append(Edge(RoomId(row, col), RoomId(row + 1, col)))
        return edges


__all__ = ["RoomId", "Edge", "GridTopology"]
