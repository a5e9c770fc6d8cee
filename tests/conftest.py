import pytest
from fastapi.testclient import TestClient

from app import app, get_store
from store import Store


@pytest.fixture
def store(tmp_path):
    """A Store bound to a file that does not exist yet."""
    return Store(tmp_path / "todo.json")


@pytest.fixture
def client(store):
    """
    A TestClient whose get_store dependency is overridden to use the
    per-test store, so every test starts from an empty file.
    """
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=True)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(client):
    """A client whose list already holds two tasks."""
    for i in (1, 2):
        r = client.post("/todo", json={"task": f"Task Number {i}."})
        assert r.status_code == 201
    return client
