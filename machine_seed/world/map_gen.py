import numpy as np
from machine_seed.world.grid import Grid, TILE_GROUND, TILE_SCRAP, TILE_STOCKPILE, TILE_WALL
from machine_seed.utils.logger import Logger

def generate_map(grid: Grid, rng: np.random.Generator, scrap_density: float = 0.05,
                 wall_count: int = 6, stockpile_radius: int = 2, max_wall_length: int = 12):
    """
    Scatters scrap and straight wall segments.
    A stockpile square around the centre is left clear for the home base.
    """
    cx, cy = grid.width // 2, grid.height // 2

    grid.tiles[:, :] = TILE_GROUND
    scrap_mask = rng.random((grid.width, grid.height)) < scrap_density
    grid.tiles[scrap_mask] = TILE_SCRAP

    for _ in range(wall_count):
        x = int(rng.integers(0, grid.width))
        y = int(rng.integers(0, grid.height))
        length = int(rng.integers(3, max_wall_length + 1))
        if rng.random() < 0.5:
            grid.tiles[x:min(x + length, grid.width), y] = TILE_WALL
        else:
            grid.tiles[x, y:min(y + length, grid.height)] = TILE_WALL

    x0, x1 = max(0, cx - stockpile_radius), min(grid.width, cx + stockpile_radius + 1)
    y0, y1 = max(0, cy - stockpile_radius), min(grid.height, cy + stockpile_radius + 1)
    grid.tiles[x0:x1, y0:y1] = TILE_STOCKPILE
    # Keep a ring of ground around the stockpile so bots can leave it
    rx0, rx1 = max(0, x0 - 1), min(grid.width, x1 + 1)
    ry0, ry1 = max(0, y0 - 1), min(grid.height, y1 + 1)
    ring = grid.tiles[rx0:rx1, ry0:ry1]
    ring[ring != TILE_STOCKPILE] = TILE_GROUND

    # Bulk numpy writes bypass set_tile, so flag everything
    grid.chunk_dirty[:, :] = True

    scrap_count = int(np.count_nonzero(grid.tiles == TILE_SCRAP))
    wall_tiles = int(np.count_nonzero(grid.tiles == TILE_WALL))
    Logger.info(f"Generated map: {grid.width}x{grid.height} tiles, {scrap_count} scrap, {wall_tiles} wall tiles")
