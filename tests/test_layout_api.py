from tests.layout_test_utils import all_rooms, bfs_reachable


def test_list_layouts(client):
    r = client.get("/api/layouts")
    assert r.status_code == 200
    data = r.get_json()
    assert data["count"] == 3
    assert data["active_index"] == 0
    assert data["root_seed"] == 1234
    assert [entry["active"] for entry in data["layouts"]] == [True, False, False]


def test_active_layout_payload(client):
    r = client.get("/api/layouts/active")
    assert r.status_code == 200
    data = r.get_json()
    assert data["rows"] == 3 and data["columns"] == 4
    assert data["active"] is True
    assert bfs_reachable([tuple(map(tuple, e)) for e in data["edges"]]) == all_rooms(3, 4)
    assert len(data["doorways"]) == 2 * len(data["edges"])
    assert {d["direction"] for d in data["doorways"]} <= {"North", "South", "East", "West"}


def test_advance_wraps(client):
    indexes = [client.post("/api/layouts/advance").get_json()["index"] for _ in range(4)]
    assert indexes == [1, 2, 0, 1]
    assert client.get("/api/layouts/active").get_json()["index"] == 1


def test_layout_detail_and_missing(client):
    r = client.get("/api/layouts/2")
    assert r.status_code == 200
    assert r.get_json()["index"] == 2
    assert r.get_json()["active"] is False
    missing = client.get("/api/layouts/9")
    assert missing.status_code == 404
    assert missing.get_json()["index"] == 9
    assert client.get("/api/layouts/abc").status_code == 404


def test_regenerate_with_string_seed_is_deterministic(client):
    body = {"rows": 2, "columns": 2, "count": 2, "density": 0, "seed": "alpha"}
    r1 = client.post("/api/layouts", json=body)
    assert r1.status_code == 201
    first = client.get("/api/layouts/active").get_json()
    r2 = client.post("/api/layouts", json=body)
    second = client.get("/api/layouts/active").get_json()
    assert r1.get_json()["root_seed"] == r2.get_json()["root_seed"]
    assert r2.get_json()["count"] == 2
    assert first["edges"] == second["edges"]
    assert len(first["edges"]) == 3


def test_regenerate_defaults_from_app_config(client):
    r = client.post("/api/layouts", json={"seed": 5})
    assert r.status_code == 201
    data = r.get_json()
    assert data["root_seed"] == 5
    assert data["count"] == 3
    assert all(entry["rooms"] == 12 for entry in data["layouts"])


def test_regenerate_rejects_bad_config(client):
    r = client.post("/api/layouts", json={"rows": 0})
    assert r.status_code == 400
    assert r.get_json()["field"] == "rows"
    r = client.post("/api/layouts", json={"density": -1})
    assert r.status_code == 400
    assert r.get_json()["field"] == "density"
    r = client.post("/api/layouts", json={"count": 0})
    assert r.status_code == 400
    assert r.get_json()["field"] == "layout_count"
    r = client.post("/api/layouts", json={"seed": True})
    assert r.status_code == 400
    assert r.get_json()["field"] == "seed"
    r = client.post("/api/layouts", json=[1, 2])
    assert r.status_code == 400
    assert r.get_json()["field"] == "__root__"
    # Failed regeneration leaves the previous set in place
    assert client.get("/api/layouts").get_json()["root_seed"] == 1234


def test_active_ascii(client):
    r = client.get("/api/layouts/active/ascii")
    assert r.status_code == 200
    assert r.mimetype == "text/plain"
    text = r.get_data(as_text=True)
    assert text.startswith("layout 0 seed=")
    assert "(active)" in text
