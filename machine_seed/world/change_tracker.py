from typing import List, Optional
import numpy as np
from machine_seed.world.grid import Grid, Position
from machine_seed.utils.logger import Logger, LogCategory

class WorldChangeTracker:
    """
    Turns dirty chunks into the tiles whose kind changed since the last tick.

    Only dirty chunks are compared against the previous snapshot. Chunk
    flags are cleared once read, so the list is reset every tick.
    """
    def __init__(self):
        self.tiles_changed: List[Position] = []
        self._snapshot: Optional[np.ndarray] = None

    def update(self, grid: Grid) -> List[Position]:
        self.tiles_changed = []

        if self._snapshot is None or self._snapshot.shape != grid.tiles.shape:
            # First tick: every tile is new
            self.tiles_changed = [Position(x, y) for y in range(grid.height) for x in range(grid.width)]
        else:
            for cx, cy in grid.dirty_chunks():
                x0, y0, x1, y1 = grid.chunk_bounds(cx, cy)
                diff = grid.tiles[x0:x1, y0:y1] != self._snapshot[x0:x1, y0:y1]
                for dx, dy in np.argwhere(diff):
                    self.tiles_changed.append(Position(x0 + int(dx), y0 + int(dy)))
            self.tiles_changed.sort(key=lambda p: (p.y, p.x))

        self._snapshot = grid.tiles.copy()
        grid.clear_dirty()

        if self.tiles_changed:
            Logger.trace(LogCategory.ZONES, f"{len(self.tiles_changed)} tiles changed")
        return self.tiles_changed

    def has_changes(self) -> bool:
        return bool(self.tiles_changed)
