from pathlib import Path

from gantt_player.config import DEFAULT_BACKEND_URL, DEFAULT_TIMEOUT, AppConfig


def test_defaults(monkeypatch):
    for name in ("GANTT_PLAYER_BACKEND_URL", "GANTT_PLAYER_TIMEOUT", "GANTT_PLAYER_SETTINGS", "GANTT_PLAYER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = AppConfig.from_env()
    assert config.backend_url == DEFAULT_BACKEND_URL
    assert config.request_timeout == DEFAULT_TIMEOUT
    assert config.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("GANTT_PLAYER_BACKEND_URL", "http://sim.local:9000/")
    monkeypatch.setenv("GANTT_PLAYER_TIMEOUT", "2.5")
    monkeypatch.setenv("GANTT_PLAYER_SETTINGS", str(tmp_path / "prefs.json"))
    monkeypatch.setenv("GANTT_PLAYER_LOG_LEVEL", "debug")
    config = AppConfig.from_env()
    assert config.backend_url == "http://sim.local:9000"
    assert config.request_timeout == 2.5
    assert config.settings_path == Path(tmp_path / "prefs.json")
    assert config.log_level == "DEBUG"


def test_bad_timeout_falls_back(monkeypatch):
    monkeypatch.setenv("GANTT_PLAYER_TIMEOUT", "soon")
    assert AppConfig.from_env().request_timeout == DEFAULT_TIMEOUT
    monkeypatch.setenv("GANTT_PLAYER_TIMEOUT", "-3")
    assert AppConfig.from_env().request_timeout == DEFAULT_TIMEOUT
