import os
import sys

import pytest

# Ensure repository root importable early (run.py lives there)
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from roomgrid import create_app, socketio  # noqa: E402

_ENV_KEYS = (
    "ROOMGRID_ROWS",
    "ROOMGRID_COLUMNS",
    "ROOMGRID_SPACING",
    "ROOMGRID_DENSITY",
    "ROOMGRID_LAYOUT_COUNT",
    "ROOMGRID_SEED",
    "ROOMGRID_ENABLE_GENERATION_METRICS",
)


@pytest.fixture(autouse=True)
def _clean_layout_env(monkeypatch):
    """Keep developer shell settings from leaking into generation tests."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture()
def test_app():
    app = create_app(
        {
            "TESTING": True,
            "LAYOUT_ROWS": 3,
            "LAYOUT_COLUMNS": 4,
            "LAYOUT_COUNT": 3,
            "LAYOUT_DENSITY": 0.25,
            "LAYOUT_SEED": 1234,
        }
    )
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def ws_client(test_app):
    # Flask-SocketIO test client bound to the app created for this test
    test_client = socketio.test_client(test_app, flask_test_client=test_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()
