import pytest

from roomgrid.layout import ConfigurationError, Layout, LayoutConfig, LayoutSet, build_layout
from roomgrid.layout.layout_set import derive_seeds
from tests.layout_test_utils import all_rooms, bfs_reachable


def _active_flags(ls):
    return [layout.active for layout in ls]


def test_create_marks_only_first_active():
    ls = LayoutSet.create(3, 3, 3, spacing=20.0, density=0.05, seed=7)
    assert len(ls) == 3
    assert ls.active_index == 0
    assert _active_flags(ls) == [True, False, False]
    assert ls.active is ls[0]


def test_advance_cycles_back_to_start():
    ls = LayoutSet.create(4, 2, 3, seed=11)
    seen = []
    for _ in range(len(ls)):
        layout = ls.advance()
        seen.append(ls.active_index)
        assert layout is ls.active
        assert sum(_active_flags(ls)) == 1
    assert seen == [1, 2, 3, 0]
    assert ls.active_index == 0


def test_single_layout_advance_stays_put():
    ls = LayoutSet.create(1, 2, 2, seed=3)
    assert ls.advance() is ls[0]
    assert ls[0].active


def test_zero_count_rejected():
    with pytest.raises(ConfigurationError) as exc:
        LayoutSet.create(0, 3, 3)
    assert exc.value.field == "layout_count"
    with pytest.raises(ConfigurationError):
        LayoutSet([])


def test_invalid_dimensions_fail_whole_set():
    with pytest.raises(ConfigurationError):
        LayoutSet.create(2, 0, 3)
    with pytest.raises(ConfigurationError):
        LayoutSet.create(2, 3, 3, density=-1)


def test_every_layout_fully_connected():
    ls = LayoutSet.create(5, 4, 5, density=0.2, seed=2024)
    for layout in ls:
        edges = [(e.a, e.b) for e in layout.connections]
        assert bfs_reachable(edges) == all_rooms(4, 5)
        assert len(layout.doorways) == 2 * len(edges)


def test_root_seed_reproduces_every_layout():
    a = LayoutSet.create(3, 4, 4, density=0.3, seed=42)
    b = LayoutSet.from_config(LayoutConfig(rows=4, columns=4, density=0.3, layout_count=3, seed=42))
    assert a.root_seed == b.root_seed == 42
    for la, lb in zip(a, b):
        assert la.seed == lb.seed
        assert la.connections.edges() == lb.connections.edges()


def test_sub_seeds_are_derived_in_order():
    seeds = derive_seeds(42, 5)
    assert seeds[:3] == derive_seeds(42, 3)
    assert len(set(seeds)) == 5
    ls = LayoutSet.create(5, 2, 2, seed=42)
    assert [layout.seed for layout in ls] == seeds


def test_random_root_seed_when_none():
    ls = LayoutSet.create(2, 2, 2)
    assert isinstance(ls.root_seed, int)


def test_select_jumps_and_validates():
    ls = LayoutSet.create(3, 2, 2, seed=1)
    assert ls.select(2) is ls[2]
    assert _active_flags(ls) == [False, False, True]
    assert ls.advance() is ls[0]
    with pytest.raises(IndexError):
        ls.select(3)
    with pytest.raises(ConfigurationError):
        ls.select("1")


def test_layout_positions_offset_from_origin():
    layout = build_layout(0, 3, 2, 10.0, 0.0, seed=5, origin=(1.0, 2.0, 3.0))
    assert layout.position((0, 0)) == (1.0, 2.0, 3.0)
    assert layout.position((2, 1)) == (11.0, 2.0, 23.0)
    with pytest.raises(IndexError):
        layout.position((3, 0))


def test_layout_doorways_for_room():
    layout = Layout(seed=9, rows=1, columns=3, density=0.0)
    middle = layout.doorways_for((0, 1))
    assert {d.direction.value for d in middle} == {"West", "East"}
    assert {d.is_primary for d in middle} == {True, False}
    walls = layout.open_walls()
    assert len(walls) == 3


def test_layout_metrics_and_phases():
    layout = Layout(seed=4, rows=3, columns=3, density=0.5)
    m = layout.metrics
    assert m["rooms"] == 9
    assert m["spanning_edges"] == 8
    assert m["max_extra_edges"] == 5
    assert m["doorways"] == 2 * len(layout.connections)
    assert set(m["phase_ms"]) == {"topology", "spanning_pass", "extra_edge_pass", "map_walls"}
    assert m["runtime_ms"] >= 0


def test_metrics_disabled_via_env(monkeypatch):
    monkeypatch.setenv("ROOMGRID_ENABLE_GENERATION_METRICS", "0")
    layout = Layout(seed=4, rows=2, columns=2)
    assert layout.metrics == {}
    assert len(layout.connections) == 3


def test_layout_to_dict_shape():
    ls = LayoutSet.create(2, 2, 3, spacing=5.0, seed=10)
    data = ls.active.to_dict()
    assert data["index"] == 0 and data["active"] is True
    assert len(data["positions"]) == 6
    assert data["positions"][-1] == {"room": [1, 2], "position": [10.0, 0.0, 5.0]}
    assert len(data["doorways"]) == 2 * len(data["edges"])
    summary = ls.to_dict()
    assert summary["count"] == 2 and summary["active_index"] == 0
    assert [entry["active"] for entry in summary["layouts"]] == [True, False]


def test_layout_matches_generate_for_same_seed():
    import random

    from roomgrid.layout import GridTopology, generate

    layout = Layout(seed=31, rows=4, columns=4, density=0.3)
    direct = generate(GridTopology(4, 4), 0.3, random.Random(31))
    assert layout.connections.edges() == direct.edges()


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"spacing": float("nan")}, "spacing"),
        ({"spacing": float("inf")}, "spacing"),
        ({"spacing": "20"}, "spacing"),
        ({"origin": (0.0, 0.0)}, "origin"),
        ({"origin": (0.0, "y", 0.0)}, "origin"),
        ({"density": -0.5}, "density"),
        ({"rows": 0}, "rows"),
    ],
)
def test_layout_rejects_invalid_parameters(kwargs, field):
    with pytest.raises(ConfigurationError) as exc:
        Layout(seed=1, **kwargs)
    assert exc.value.field == field
