import random
from collections import Counter

import pytest

from roomgrid.layout import Direction, DoorwayInstruction, Edge, GridTopology, RoomId, generate, map_walls
from roomgrid.layout.walls import direction_between, doorways_by_room


def test_horizontal_edge_opens_east_then_west():
    out = map_walls([Edge.between((0, 1), (0, 0))])
    assert out == [
        DoorwayInstruction(RoomId(0, 0), Direction.EAST, True),
        DoorwayInstruction(RoomId(0, 1), Direction.WEST, False),
    ]


def test_vertical_edge_opens_south_then_north():
    out = map_walls([Edge.between((2, 3), (1, 3))])
    assert out == [
        DoorwayInstruction(RoomId(1, 3), Direction.SOUTH, True),
        DoorwayInstruction(RoomId(2, 3), Direction.NORTH, False),
    ]


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ((1, 1), (0, 1), Direction.NORTH),
        ((1, 1), (2, 1), Direction.SOUTH),
        ((1, 1), (1, 2), Direction.EAST),
        ((1, 1), (1, 0), Direction.WEST),
    ],
)
def test_direction_between(a, b, expected):
    assert direction_between(a, b) is expected
    assert direction_between(b, a) is expected.opposite


def test_direction_offsets_match_neighbors():
    for d in Direction:
        drow, dcol = d.offset
        assert direction_between((5, 5), (5 + drow, 5 + dcol)) is d
        assert d.opposite.opposite is d


def test_two_instructions_per_edge_with_opposite_directions():
    for seed in range(10):
        conns = generate(GridTopology(5, 6), 0.3, random.Random(seed))
        out = map_walls(conns)
        assert len(out) == 2 * len(conns)
        for i in range(0, len(out), 2):
            primary, mirror = out[i], out[i + 1]
            assert primary.is_primary and not mirror.is_primary
            assert primary.direction.opposite is mirror.direction
            assert primary.direction in (Direction.SOUTH, Direction.EAST)
            drow, dcol = primary.direction.offset
            assert (primary.room.row + drow, primary.room.col + dcol) == mirror.room


def test_mapping_is_idempotent():
    conns = generate(GridTopology(4, 4), 0.5, random.Random(8))
    assert Counter(map_walls(conns)) == Counter(map_walls(conns))


def test_doorways_by_room_groups_and_orders():
    out = map_walls([Edge.between((0, 0), (0, 1)), Edge.between((0, 0), (1, 0))])
    rooms = doorways_by_room(out)
    assert rooms[RoomId(0, 0)] == [Direction.SOUTH, Direction.EAST]
    assert rooms[RoomId(0, 1)] == [Direction.WEST]
    assert rooms[RoomId(1, 0)] == [Direction.NORTH]


def test_instruction_to_dict():
    ins = DoorwayInstruction(RoomId(2, 1), Direction.NORTH, False)
    assert ins.to_dict() == {"room": [2, 1], "direction": "North", "primary": False}
