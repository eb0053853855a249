import importlib
import logging

import pytest

# The package re-exports main(), which shadows the submodule attribute
main_module = importlib.import_module("song_queue_service.main")


@pytest.fixture()
def captured_run(monkeypatch):
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(main_module.uvicorn, "run", fake_run)
    yield calls
    logging.getLogger().setLevel(logging.INFO)


def test_main_uses_environment(monkeypatch, captured_run):
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("CORS_ORIGIN", "http://host.example")

    main_module.main([])

    config = captured_run["app"].state.config
    assert captured_run["port"] == 9100
    assert config.port == 9100
    assert config.cors_origins == ["http://host.example"]


def test_cli_flags_override_environment(monkeypatch, captured_run):
    monkeypatch.setenv("PORT", "9100")

    main_module.main(["--port", "9200", "--cors-origin", "http://a,http://b", "--max-queue-size", "3",
                      "--log-level", "WARNING"])

    app = captured_run["app"]
    assert captured_run["port"] == 9200
    assert captured_run["log_level"] == "warning"
    assert app.state.config.cors_origins == ["http://a", "http://b"]
    assert app.state.store.max_queue_size == 3
