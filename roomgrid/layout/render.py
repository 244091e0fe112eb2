"""ASCII preview of a layout.

Rooms sit on odd character coordinates; the cells between them are shared
walls, drawn open where a doorway connects the two rooms.

    +---+---+
    |       |
    +   +---+
    |       |
    +---+---+
"""
from __future__ import annotations

from typing import List

from .pipeline import Layout
from .topology import RoomId

CORNER = "+"
H_WALL = "---"
V_WALL = "|"
FLOOR = "   "
H_DOOR = "   "
V_DOOR = " "


def render_ascii(layout: Layout, *, header: bool = True) -> str:
    rows, cols = layout.rows, layout.columns
    conns = layout.connections
    lines: List[str] = []
    if header:
        state = "active" if layout.active else "inactive"
        lines.append(f"layout {layout.index} seed={layout.seed} ({state}) {rows}x{cols} edges={len(conns)}")
    lines.append(CORNER + (H_WALL + CORNER) * cols)
    for r in range(rows):
        row_line = V_WALL
        for c in range(cols):
            row_line += FLOOR
            if c < cols - 1 and (RoomId(r, c), RoomId(r, c + 1)) in conns:
                row_line += V_DOOR
            else:
                row_line += V_WALL
        lines.append(row_line)
        below = CORNER
        for c in range(cols):
            if r < rows - 1 and (RoomId(r, c), RoomId(r + 1, c)) in conns:
                below += H_DOOR
            else:
                below += H_WALL
            below += CORNER
        lines.append(below)
    return "\n".join(lines)


__all__ = ["render_ascii"]
