import numpy as np
from typing import Iterator, List, NamedTuple

# Tile kinds
TILE_GROUND = 0
TILE_STOCKPILE = 1
TILE_SCRAP = 2 # Harvestable resource, blocks movement
TILE_WALL = 3 # Blocks movement and line of sight
NUM_TILE_KINDS = 4

# Walkability is a pure function of kind
WALKABLE = np.array([True, True, False, False], dtype=bool)
HARVESTABLE = np.array([False, False, True, False], dtype=bool)

# 4-way movement, fixed order keeps searches deterministic
DIRECTIONS = ((0, 1), (1, 0), (0, -1), (-1, 0))

class Position(NamedTuple):
    x: int
    y: int

class Grid:
    def __init__(self, width: int, height: int, chunk_size: int = 16):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")

        self.width = width
        self.height = height
        self.chunk_size = chunk_size

        # Indexed [x, y]
        self.tiles = np.full((width, height), TILE_GROUND, dtype=np.int16)

        self.chunk_cols = (width + chunk_size - 1) // chunk_size
        self.chunk_rows = (height + chunk_size - 1) // chunk_size
        # Everything counts as changed before the first tick
        self.chunk_dirty = np.ones((self.chunk_cols, self.chunk_rows), dtype=bool)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> int:
        if self.in_bounds(x, y):
            return int(self.tiles[x, y])
        return -1

    def set_tile(self, x: int, y: int, kind: int):
        """Writes a tile kind and marks the owning chunk dirty."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile ({x}, {y}) outside {self.width}x{self.height} grid")
        if not 0 <= kind < NUM_TILE_KINDS:
            raise ValueError(f"Unknown tile kind {kind}")
        self.tiles[x, y] = kind
        self.mark_chunk_dirty(x, y)

    def paint_rect(self, x0: int, y0: int, x1: int, y1: int, kind: int):
        """Paints the inclusive rectangle, clipped to the grid."""
        if not 0 <= kind < NUM_TILE_KINDS:
            raise ValueError(f"Unknown tile kind {kind}")
        xs = range(max(0, min(x0, x1)), min(self.width, max(x0, x1) + 1))
        ys = range(max(0, min(y0, y1)), min(self.height, max(y0, y1) + 1))
        for x in xs:
            for y in ys:
                self.set_tile(x, y, kind)

    def is_walkable(self, x: int, y: int) -> bool:
        if self.in_bounds(x, y):
            return bool(WALKABLE[self.tiles[x, y]])
        return False

    def is_harvestable(self, x: int, y: int) -> bool:
        if self.in_bounds(x, y):
            return bool(HARVESTABLE[self.tiles[x, y]])
        return False

    def walkable_mask(self) -> np.ndarray:
        return WALKABLE[self.tiles]

    def neighbors(self, x: int, y: int) -> Iterator[Position]:
        """In-bounds 4-way neighbors, any kind."""
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield Position(nx, ny)

    # --- Chunks ---
    def chunk_of(self, x: int, y: int):
        return x // self.chunk_size, y // self.chunk_size

    def mark_chunk_dirty(self, x: int, y: int):
        cx, cy = self.chunk_of(x, y)
        self.chunk_dirty[cx, cy] = True

    def is_chunk_dirty(self, cx: int, cy: int) -> bool:
        return bool(self.chunk_dirty[cx, cy])

    def has_dirty_chunks(self) -> bool:
        return bool(self.chunk_dirty.any())

    def dirty_chunks(self) -> List[tuple]:
        return [(int(cx), int(cy)) for cx, cy in np.argwhere(self.chunk_dirty)]

    def chunk_bounds(self, cx: int, cy: int):
        """(x_start, y_start, x_end, y_end), end exclusive and clipped."""
        x_start = cx * self.chunk_size
        y_start = cy * self.chunk_size
        return (x_start, y_start,
                min(x_start + self.chunk_size, self.width),
                min(y_start + self.chunk_size, self.height))

    def clear_dirty(self):
        self.chunk_dirty[:, :] = False
