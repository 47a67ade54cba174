# tests/test_config_manager.py
"""
ConfigManager loading, dot-path lookup and overrides.
"""

from __future__ import annotations

import json

from machine_seed.core.config_manager import ConfigManager
from machine_seed.utils.logger import LogCategory, Logger


def test_loads_json_and_reads_dot_paths(tmp_path) -> None:
    path = tmp_path / "balance.json"
    path.write_text(json.dumps({"bots": {"move_speed": 2.0}, "world": {"width": 32}}))

    config = ConfigManager(str(path), watch=False)

    assert config.get("bots.move_speed") == 2.0
    assert config.get("world.width") == 32
    assert config.get("world.height", 64) == 64
    assert config.get("bots.move_speed.value") is None


def test_overrides_win_over_file(tmp_path) -> None:
    path = tmp_path / "balance.json"
    path.write_text(json.dumps({"bots": {"move_speed": 2.0, "initial_count": 2}}))

    config = ConfigManager(str(path), watch=False, overrides={"bots.move_speed": 0.5, "debug.log_jobs": True})

    assert config.get("bots.move_speed") == 0.5
    assert config.get("bots.initial_count") == 2
    assert config.get("debug") == {"log_jobs": True}


def test_bad_reload_keeps_last_good_config(tmp_path, capsys) -> None:
    path = tmp_path / "balance.json"
    path.write_text(json.dumps({"global": {"tick_rate": 20}}))
    config = ConfigManager(str(path), watch=False)

    path.write_text("{ not json")
    config.load_config()

    assert config.get("global.tick_rate") == 20
    assert "Failed to load config" in capsys.readouterr().out


def test_missing_file_gives_empty_config(tmp_path) -> None:
    config = ConfigManager(str(tmp_path / "absent.json"), watch=False)

    assert config.get("global.tick_rate", 60) == 60
    config.stop()


def test_watcher_starts_and_stops(tmp_path) -> None:
    path = tmp_path / "balance.json"
    path.write_text("{}")

    config = ConfigManager(str(path))
    assert config.observer is not None

    config.stop()
    assert config.observer is None


def test_reload_keeps_overrides_and_refreshes_debug_flags(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("DEBUG_JOBS", raising=False)
    path = tmp_path / "balance.json"
    path.write_text(json.dumps({"bots": {"move_speed": 2.0}}))
    config = ConfigManager(str(path), watch=False, overrides={"bots.move_speed": 0.5})

    path.write_text(json.dumps({"bots": {"move_speed": 3.0, "initial_count": 4}, "debug": {"log_jobs": True}}))
    config.reload()

    try:
        assert config.get("bots.move_speed") == 0.5
        assert config.get("bots.initial_count") == 4
        assert Logger.is_tracing(LogCategory.JOBS)
    finally:
        Logger.configure_debug({})
