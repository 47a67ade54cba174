from machine_seed.core.ecs import System, EntityManager
from machine_seed.components.data_components import MovementComponent, PathComponent, PositionComponent
from machine_seed.world.grid import Grid
from machine_seed.utils.logger import Logger, LogCategory

class MovementSystem(System):
    """
    Walks entities along their paths, one tile per step.
    The only writer of positions.
    """
    def __init__(self, entity_manager: EntityManager, grid: Grid):
        self.entity_manager = entity_manager
        self.grid = grid

    def update(self, dt: float):
        for entity, move_comp, pos_comp, path in self.entity_manager.get_entities_with(
                MovementComponent, PositionComponent, PathComponent):
            self._handle_move(entity, move_comp, pos_comp, path, dt)

    def _handle_move(self, entity, move_comp: MovementComponent, pos_comp: PositionComponent,
                     path: PathComponent, dt: float):
        target_step = path.next_step()
        if target_step is None:
            self.entity_manager.remove_component(entity, PathComponent)
            move_comp.progress = 0.0
            return

        # Progress float 0..1 between tiles, logic moves when it reaches 1
        move_comp.progress += move_comp.current_speed() * dt
        if move_comp.progress < 1.0:
            return

        if not self.grid.is_walkable(*target_step):
            # Invalidation runs first, so this means a stale path slipped through
            Logger.error(f"Entity {entity}: next step {target_step} is not walkable, dropping path")
            self.entity_manager.remove_component(entity, PathComponent)
            move_comp.progress = 0.0
            return

        pos_comp.x, pos_comp.y = target_step
        path.current_idx += 1
        move_comp.progress = 0.0

        if path.is_complete():
            Logger.trace(LogCategory.PATHFINDING, f"Entity {entity} completed path at {target_step}")
            self.entity_manager.remove_component(entity, PathComponent)
