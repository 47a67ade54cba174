# tests/test_logger.py
"""
Logger line format and per-category debug tracing.
"""

from __future__ import annotations

import pytest

from machine_seed.core.time_manager import TimeManager
from machine_seed.utils.logger import LogCategory, Logger


@pytest.fixture(autouse=True)
def _reset_logger(monkeypatch):
    for name in ("DEBUG_PATHFINDING", "DEBUG_JOBS", "DEBUG_BOT_BEHAVIOR"):
        monkeypatch.delenv(name, raising=False)
    yield
    for name in ("DEBUG_PATHFINDING", "DEBUG_JOBS", "DEBUG_BOT_BEHAVIOR"):
        monkeypatch.delenv(name, raising=False)
    Logger.set_time_manager(None)
    Logger.configure_debug({})


def test_lines_carry_tick_and_category(capsys) -> None:
    time_manager = TimeManager()
    time_manager.update()
    time_manager.update()
    Logger.set_time_manager(time_manager)

    Logger.log(LogCategory.JOBS, "Scanned zones")
    Logger.warn("no home base")

    out = capsys.readouterr().out.splitlines()
    assert out[0].endswith("[Tick:2][JOBS] Scanned zones")
    assert out[1].endswith("[Tick:2][SYSTEM] WARNING: no home base")


def test_trace_is_silent_unless_enabled(capsys) -> None:
    Logger.configure_debug({})
    Logger.trace(LogCategory.PATHFINDING, "hidden")
    assert capsys.readouterr().out == ""

    Logger.configure_debug({"log_pathfinding": True})
    Logger.trace(LogCategory.PATHFINDING, "shown")
    Logger.trace(LogCategory.AI, "still hidden")
    out = capsys.readouterr().out
    assert "shown" in out
    assert "still hidden" not in out


def test_environment_overrides_config(monkeypatch) -> None:
    monkeypatch.setenv("DEBUG_JOBS", "1")
    monkeypatch.setenv("DEBUG_BOT_BEHAVIOR", "false")

    Logger.configure_debug({"log_bot_behavior": True})

    assert Logger.is_tracing(LogCategory.JOBS)
    assert not Logger.is_tracing(LogCategory.AI)
    assert not Logger.is_tracing(LogCategory.PATHFINDING)


def test_time_manager_pause_and_scale() -> None:
    time_manager = TimeManager(fixed_dt=1.0)
    time_manager.set_time_scale(2.0)
    assert time_manager.update() == 2.0

    time_manager.toggle_pause()
    assert time_manager.update() == 0.0
    assert time_manager.total_ticks == 2
    assert time_manager.elapsed_time == 2.0
