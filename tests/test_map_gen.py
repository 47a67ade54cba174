# tests/test_map_gen.py
"""
Seeded map generation and initial spawning.
"""

from __future__ import annotations

import numpy as np

from machine_seed.components.data_components import InZoneComponent, PositionComponent
from machine_seed.components.tags import IsBot, IsHomeBase
from machine_seed.core.ecs import EntityManager
from machine_seed.world.grid import Grid, TILE_GROUND, TILE_SCRAP, TILE_STOCKPILE
from machine_seed.world.map_gen import generate_map
from machine_seed.world.spawn import spawn_home_base, spawn_initial_bots


def test_same_seed_same_map() -> None:
    a, b = Grid(32, 32), Grid(32, 32)

    generate_map(a, np.random.default_rng(7), scrap_density=0.1, wall_count=5)
    generate_map(b, np.random.default_rng(7), scrap_density=0.1, wall_count=5)

    assert np.array_equal(a.tiles, b.tiles)
    assert np.count_nonzero(a.tiles == TILE_SCRAP) > 0


def test_centre_is_clear_stockpile_with_ground_ring() -> None:
    grid = Grid(20, 20)
    grid.clear_dirty()

    generate_map(grid, np.random.default_rng(3), scrap_density=0.5, wall_count=30, stockpile_radius=2)

    assert np.all(grid.tiles[8:13, 8:13] == TILE_STOCKPILE)
    assert np.all(grid.tiles[7, 7:14] == TILE_GROUND)
    assert np.all(grid.tiles[13, 7:14] == TILE_GROUND)
    assert len(grid.dirty_chunks()) == 4


def test_initial_bots_flank_the_home_base() -> None:
    em = EntityManager()
    grid = Grid(16, 16)
    base = spawn_home_base(em, grid, 8, 8)

    bots = spawn_initial_bots(em, grid, 8, 8, count=3)

    assert grid.get_tile(8, 8) == TILE_STOCKPILE
    assert em.has_component(base, IsHomeBase)
    assert [em.get_component(b, PositionComponent).pos for b in bots] == [(10, 8), (6, 8), (12, 8)]
    assert all(em.has_component(b, IsBot) and em.has_component(b, InZoneComponent) for b in bots)


def test_initial_bots_clamped_to_grid() -> None:
    em = EntityManager()
    grid = Grid(4, 4)

    bots = spawn_initial_bots(em, grid, 0, 0, count=2)

    assert [em.get_component(b, PositionComponent).pos for b in bots] == [(2, 0), (0, 0)]
