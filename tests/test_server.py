import pytest

import server
from app import app
from store import Store


def test_flags_override_defaults():
    args = server.parse_args(["-h", "0.0.0.0", "-p", "9000", "-f", "tasks.json"])
    assert (args.host, args.port, args.file) == ("0.0.0.0", 9000, "tasks.json")


def test_defaults_come_from_environment_config():
    args = server.parse_args([])
    assert args.host == server.HOST
    assert args.port == server.PORT
    assert args.file == server.TODO_FILE


def test_non_numeric_port_is_rejected():
    with pytest.raises(SystemExit):
        server.parse_args(["-p", "http"])


def test_main_binds_store_for_file_and_runs_uvicorn(tmp_path, monkeypatch):
    calls = {}
    monkeypatch.setattr(server.uvicorn, "run", lambda *a, **kw: calls.update(kw))
    previous = app.state.store
    try:
        server.main(["-p", "9001", "-f", str(tmp_path / "t.json")])
        assert isinstance(app.state.store, Store)
        assert app.state.store.path == tmp_path / "t.json"
    finally:
        app.state.store = previous
    assert calls["port"] == 9001
    assert calls["host"] == server.HOST
