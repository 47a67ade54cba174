# tests/test_zones.py
"""
ReachabilityZones flood fill and rebuild trigger.
"""

from __future__ import annotations

import numpy as np

from conftest import build_grid, reachable_from
from machine_seed.world.grid import Grid, Position, TILE_GROUND, TILE_SCRAP, TILE_WALL
from machine_seed.world.zone_manager import ReachabilityZones


def test_no_walkable_tiles_gives_no_zones() -> None:
    grid = build_grid(["###", "#*#", "###"])
    zones = ReachabilityZones()

    assert zones.rebuild(grid) == {}
    assert zones.zone_count == 0


def test_open_grid_with_single_scrap_is_one_zone() -> None:
    grid = Grid(20, 20)
    grid.set_tile(10, 10, TILE_SCRAP)
    zones = ReachabilityZones()
    zones.rebuild(grid)

    assert zones.zone_count == 1
    assert len(zones.zones) == 399
    assert zones.get_zone(10, 10) is None
    assert zones.get_zone(0, 0) == 0


def test_bisecting_wall_makes_two_zones_numbered_in_raster_order() -> None:
    grid = Grid(20, 20)
    grid.paint_rect(10, 0, 10, 19, TILE_WALL)
    zones = ReachabilityZones()
    zones.rebuild(grid)

    assert zones.zone_count == 2
    assert zones.get_zone(0, 0) == 0
    assert zones.get_zone(19, 0) == 1
    assert zones.zone_sizes() == {0: 200, 1: 180}
    assert not zones.same_zone((9, 5), (11, 5))


def test_rebuild_is_reproducible() -> None:
    grid = build_grid([
        "..#..",
        "..#..",
        "#####",
        "..*..",
    ])
    zones = ReachabilityZones()
    first = dict(zones.rebuild(grid))
    second = dict(zones.rebuild(grid))

    assert first == second
    assert zones.zone_count == 4


def test_partition_matches_bfs_reachability_on_random_maps() -> None:
    rng = np.random.default_rng(1234)
    for _ in range(8):
        grid = Grid(12, 10)
        grid.tiles[:, :] = rng.choice([TILE_GROUND, TILE_SCRAP, TILE_WALL], size=(12, 10), p=[0.6, 0.1, 0.3])
        zones = ReachabilityZones()
        zones.rebuild(grid)

        walkable = [(x, y) for y in range(10) for x in range(12) if grid.is_walkable(x, y)]
        assert set(zones.zones) == set(walkable)
        for p in walkable:
            reach = reachable_from(grid, p)
            for q in walkable:
                assert zones.same_zone(p, q) == (q in reach)


def test_change_far_from_any_zone_does_not_rebuild() -> None:
    grid = build_grid([
        "......",
        "......",
        "######",
        "######",
        "######",
    ])
    zones = ReachabilityZones()
    zones.rebuild(grid)

    grid.set_tile(2, 4, TILE_SCRAP)

    assert not zones.rebuild_if_affected([Position(2, 4)], grid)
    assert zones.rebuild_count == 1


def test_change_next_to_zone_rebuilds() -> None:
    grid = Grid(6, 6)
    zones = ReachabilityZones()
    zones.rebuild(grid)

    grid.paint_rect(3, 0, 3, 5, TILE_WALL)
    changed = [Position(3, y) for y in range(6)]

    assert zones.rebuild_if_affected(changed, grid)
    assert zones.zone_count == 2


def test_tile_opened_inside_sealed_rock_gets_a_zone() -> None:
    grid = build_grid([
        "...",
        "###",
        "###",
        "###",
    ])
    zones = ReachabilityZones()
    zones.rebuild(grid)

    grid.set_tile(1, 3, TILE_GROUND)

    assert zones.rebuild_if_affected([Position(1, 3)], grid)
    assert zones.zone_count == 2
    assert zones.get_zone(1, 3) == 1


def test_no_changes_means_no_rebuild() -> None:
    grid = Grid(4, 4)
    zones = ReachabilityZones()
    zones.rebuild(grid)

    assert not zones.rebuild_if_affected([], grid)
