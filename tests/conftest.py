# tests/conftest.py
"""
Shared builders for the simulation tests.

Maps are written as ASCII rows, row index = y, column index = x:
  '.' ground   'S' stockpile   '*' scrap   '#' wall
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Set, Tuple

import pytest

from machine_seed.core.config_manager import ConfigManager
from machine_seed.core.simulation import Simulation
from machine_seed.world.grid import (
    Grid,
    Position,
    TILE_GROUND,
    TILE_SCRAP,
    TILE_STOCKPILE,
    TILE_WALL,
)

ASCII_TILES = {".": TILE_GROUND, "S": TILE_STOCKPILE, "*": TILE_SCRAP, "#": TILE_WALL}


def build_grid(rows: List[str], chunk_size: int = 4) -> Grid:
    height = len(rows)
    width = len(rows[0])
    grid = Grid(width, height, chunk_size=chunk_size)
    for y, row in enumerate(rows):
        assert len(row) == width, f"row {y} has length {len(row)}, expected {width}"
        for x, ch in enumerate(row):
            grid.tiles[x, y] = ASCII_TILES[ch]
    return grid


def reachable_from(grid: Grid, start: Tuple[int, int]) -> Set[Tuple[int, int]]:
    """Plain BFS over walkable tiles, used as an oracle for zone tests."""
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for nx, ny in grid.neighbors(x, y):
            if (nx, ny) not in seen and grid.is_walkable(nx, ny):
                seen.add((nx, ny))
                queue.append((nx, ny))
    return seen


def assert_valid_path(grid: Grid, path: List[Position], start: Tuple[int, int], goal: Tuple[int, int]) -> None:
    assert path[0] == start
    for a, b in zip(path, path[1:]):
        assert abs(a.x - b.x) + abs(a.y - b.y) == 1, f"{a} -> {b} is not a single 4-way step"
    for step in path[1:]:
        assert grid.is_walkable(*step), f"{step} is not walkable"
    last = path[-1]
    if grid.is_walkable(*goal):
        assert last == goal
    else:
        assert abs(last.x - goal[0]) + abs(last.y - goal[1]) == 1


def make_config(overrides: Optional[Dict[str, object]] = None) -> ConfigManager:
    base = {
        "bots.move_speed": 1.0,
        "bots.harvest_duration": 0.0,
        "bots.scrap_per_harvest": 5,
        "bots.max_path_retries": 3,
        "bots.max_replan_attempts": 3,
        "jobs.scrap_priority": 10,
    }
    base.update(overrides or {})
    return ConfigManager(watch=False, overrides=base)


@pytest.fixture
def config() -> ConfigManager:
    return make_config()


@pytest.fixture
def open_sim(config: ConfigManager) -> Simulation:
    """20x20 open map, scrap at (10,10), home base and one bot at (0,0)."""
    grid = Grid(20, 20, chunk_size=8)
    grid.set_tile(10, 10, TILE_SCRAP)
    sim = Simulation(grid, config)
    sim.spawn_home_base(0, 0)
    sim.spawn_bot(0, 0)
    return sim
