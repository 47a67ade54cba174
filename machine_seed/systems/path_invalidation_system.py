from machine_seed.core.ecs import System, EntityManager
from machine_seed.components.data_components import PathComponent
from machine_seed.world.change_tracker import WorldChangeTracker
from machine_seed.utils.logger import Logger, LogCategory

class PathInvalidationSystem(System):
    """Drops any path whose unwalked steps cross a tile that changed this tick."""
    def __init__(self, entity_manager: EntityManager, tracker: WorldChangeTracker):
        self.entity_manager = entity_manager
        self.tracker = tracker
        self.invalidated_count = 0

    def update(self, dt: float):
        if not self.tracker.tiles_changed:
            return

        changed = set(self.tracker.tiles_changed)
        for entity, path in self.entity_manager.get_entities_with(PathComponent):
            if any(step in changed for step in path.remaining()):
                # No partial repair, the owner replans from scratch
                self.entity_manager.remove_component(entity, PathComponent)
                self.invalidated_count += 1
                Logger.trace(LogCategory.PATHFINDING, f"Invalidated path of entity {entity}")
