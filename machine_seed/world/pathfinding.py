import heapq
from typing import Dict, List, Optional, Tuple
from machine_seed.world.grid import Grid, Position, DIRECTIONS
from machine_seed.world.zone_manager import ReachabilityZones
from machine_seed.utils.logger import Logger, LogCategory

def heuristic(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(b[0] - a[0]) + abs(b[1] - a[1])

def goal_reached(pos: Tuple[int, int], goal: Tuple[int, int], grid: Grid) -> bool:
    """
    Walkable goals must be reached exactly.
    Non-walkable goals (scrap, walls) are reached from any adjacent tile.
    """
    if grid.is_walkable(goal[0], goal[1]):
        return pos[0] == goal[0] and pos[1] == goal[1]
    return heuristic(pos, goal) == 1

def _zones_disjoint(start: Tuple[int, int], goal: Tuple[int, int], grid: Grid,
                    zones: ReachabilityZones) -> bool:
    """Cheap rejection before searching: no tile satisfying the goal lies in start's zone."""
    start_zone = zones.get_zone(*start)
    if start_zone is None:
        return False  # Start off-zone, let the search decide
    if grid.is_walkable(goal[0], goal[1]):
        return zones.get_zone(*goal) != start_zone
    return all(zones.get_zone(nx, ny) != start_zone for nx, ny in grid.neighbors(*goal))

def find_path(grid: Grid, start: Tuple[int, int], goal: Tuple[int, int],
              zones: Optional[ReachabilityZones] = None) -> Optional[List[Position]]:
    """
    A* Pathfinding over 4-way walkable adjacency, unit step cost.
    Returns the tiles from start (inclusive) to the resolved goal,
    or None if no path exists.
    Equal f-scores are broken by lower h, then by position, so output is stable.
    """
    start_node = Position(*start)
    goal_node = Position(*goal)

    if not grid.in_bounds(*start_node) or not grid.in_bounds(*goal_node):
        return None

    # Zones go stale once the grid has edits the tracker has not read yet
    if zones is not None and not grid.has_dirty_chunks() and _zones_disjoint(start_node, goal_node, grid, zones):
        Logger.trace(LogCategory.PATHFINDING, f"No path {start_node} -> {goal_node}: different zones")
        return None

    if goal_reached(start_node, goal_node, grid):
        return [start_node]

    start_h = heuristic(start_node, goal_node)
    open_set: List[Tuple[int, int, Position]] = [(start_h, start_h, start_node)]
    came_from: Dict[Position, Position] = {}
    g_score = {start_node: 0}
    closed = set()

    while open_set:
        _, _, current = heapq.heappop(open_set)
        if current in closed:
            continue
        closed.add(current)

        if goal_reached(current, goal_node, grid):
            path = [current]
            while current in came_from:
                current = came_from[current]
                path.append(current)
            path.reverse()
            Logger.trace(LogCategory.PATHFINDING,
                         f"Path found {start_node} -> {goal_node}: {len(path) - 1} steps")
            return path

        x, y = current
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            # Walls and resource tiles block traversal
            if not grid.is_walkable(nx, ny):
                continue
            neighbor = Position(nx, ny)
            if neighbor in closed:
                continue

            tentative_g_score = g_score[current] + 1
            if tentative_g_score < g_score.get(neighbor, float('inf')):
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g_score
                h = heuristic(neighbor, goal_node)
                heapq.heappush(open_set, (tentative_g_score + h, h, neighbor))

    Logger.trace(LogCategory.PATHFINDING, f"No path found from {start_node} to {goal_node}")
    return None
