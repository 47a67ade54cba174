from collections import deque
from typing import Dict, Iterable, List, Optional, Tuple
import numpy as np
from machine_seed.world.grid import Grid, Position, DIRECTIONS
from machine_seed.utils.logger import Logger, LogCategory

NO_ZONE = -1

class ReachabilityZones:
    """
    Partition of walkable tiles into contiguous 4-way regions.

    Zone IDs come from a raster-order flood fill, so they are reproducible
    for a fixed grid but carry no meaning across rebuilds. Consumers must
    look zones up again after every rebuild.
    """
    def __init__(self):
        # position -> zone_id, walkable tiles only
        self.zones: Dict[Position, int] = {}
        self.zone_count = 0
        self.zone_ids: Optional[np.ndarray] = None
        self.rebuild_count = 0

    def get_zone(self, x: int, y: int) -> Optional[int]:
        return self.zones.get((x, y))

    def same_zone(self, a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        zone_a = self.zones.get(a)
        return zone_a is not None and zone_a == self.zones.get(b)

    def zone_sizes(self) -> Dict[int, int]:
        sizes: Dict[int, int] = {}
        for zone_id in self.zones.values():
            sizes[zone_id] = sizes.get(zone_id, 0) + 1
        return sizes

    def rebuild(self, grid: Grid) -> Dict[Position, int]:
        """Full flood-fill rebuild. A grid with no walkable tiles yields no zones."""
        self.zones = {}
        self.zone_count = 0
        zone_ids = np.full((grid.width, grid.height), NO_ZONE, dtype=np.int32)

        walkable = grid.walkable_mask().tolist()  # [x][y]
        width, height = grid.width, grid.height

        for y in range(height):
            for x in range(width):
                if not walkable[x][y] or zone_ids[x, y] != NO_ZONE:
                    continue

                # New zone found, flood fill it
                zone_id = self.zone_count
                self.zone_count += 1

                queue = deque([(x, y)])
                zone_ids[x, y] = zone_id
                while queue:
                    cx, cy = queue.popleft()
                    self.zones[Position(cx, cy)] = zone_id
                    for dx, dy in DIRECTIONS:
                        nx, ny = cx + dx, cy + dy
                        if nx < 0 or ny < 0 or nx >= width or ny >= height:
                            continue
                        if walkable[nx][ny] and zone_ids[nx, ny] == NO_ZONE:
                            zone_ids[nx, ny] = zone_id
                            queue.append((nx, ny))

        self.zone_ids = zone_ids
        self.rebuild_count += 1
        Logger.log(LogCategory.ZONES, f"Rebuilt reachability zones: {self.zone_count} zones found")
        return self.zones

    def affected_zones(self, changed_tiles: Iterable[Tuple[int, int]], grid: Grid) -> set:
        """Zones that contain a changed tile or border one."""
        affected = set()
        for x, y in changed_tiles:
            zone_id = self.zones.get((x, y))
            if zone_id is not None:
                affected.add(zone_id)
            for nx, ny in grid.neighbors(x, y):
                zone_id = self.zones.get((nx, ny))
                if zone_id is not None:
                    affected.add(zone_id)
        return affected

    def needs_rebuild(self, changed_tiles: List[Tuple[int, int]], grid: Grid) -> bool:
        if not changed_tiles:
            return False
        if self.zone_ids is None:
            return True
        if self.affected_zones(changed_tiles, grid):
            return True
        # A tile painted walkable inside sealed terrain touches no zone but still needs one
        return any(grid.is_walkable(x, y) and (x, y) not in self.zones for x, y in changed_tiles)

    def rebuild_if_affected(self, changed_tiles: List[Tuple[int, int]], grid: Grid) -> bool:
        """
        Full rebuild when the changes touch any tracked zone.
        Partial patching is not attempted since edits can split or merge zones.
        """
        if not self.needs_rebuild(changed_tiles, grid):
            return False
        Logger.trace(LogCategory.ZONES,
                     f"Rebuilding {len(self.affected_zones(changed_tiles, grid))} affected zones "
                     f"out of {self.zone_count} total zones")
        self.rebuild(grid)
        return True
