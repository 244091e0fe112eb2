"""Translate edges into per-room "open this wall" instructions.

Rows grow north to south and columns grow west to east. For each edge the room
with the lower index gets the primary instruction (South or East); the other
endpoint gets the mirrored, non-primary one.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Tuple

from .topology import Edge, RoomId


class Direction(Enum):
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def offset(self) -> Tuple[int, int]:
        """(drow, dcol) step toward the neighbor behind this wall."""
        return _OFFSETS[self]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_OFFSETS = {
    Direction.NORTH: (-1, 0),
    Direction.SOUTH: (1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
}

# (axis, sign of step from a to b) -> direction of the wall opened on a
_DIRECTION_TABLE = {
    ("row", 1): Direction.SOUTH,
    ("row", -1): Direction.NORTH,
    ("col", 1): Direction.EAST,
    ("col", -1): Direction.WEST,
}


class DoorwayInstruction(NamedTuple):
    room: RoomId
    direction: Direction
    is_primary: bool

    def to_dict(self):
        return {
            "room": [self.room.row, self.room.col],
            "direction": self.direction.value,
            "primary": self.is_primary,
        }


def direction_between(a, b) -> Direction:
    edge = Edge.between(a, b)
    a = RoomId(*a)
    b = RoomId(*b)
    step = (b.row - a.row) if edge.axis == "row" else (b.col - a.col)
    return _DIRECTION_TABLE[(edge.axis, step)]


def map_walls(connections: Iterable[Edge]) -> List[DoorwayInstruction]:
    out: List[DoorwayInstruction] = []
    for edge in connections:
        edge = Edge.between(*edge)
        forward = direction_between(edge.a, edge.b)
        out.append(DoorwayInstruction(edge.a, forward, True))
        out.append(DoorwayInstruction(edge.b, forward.opposite, False))
    return out


def doorways_by_room(instructions: Iterable[DoorwayInstruction]) -> Dict[RoomId, List[Direction]]:
    order = list(Direction)
    rooms: Dict[RoomId, List[Direction]] = {}
    for ins in instructions:
        rooms.setdefault(ins.room, []).append(ins.direction)
    for dirs in rooms.values():
        dirs.sort(key=order.index)
    return rooms


__all__ = ["Direction", "DoorwayInstruction", "direction_between", "map_walls", "doorways_by_room"]
