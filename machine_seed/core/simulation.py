from typing import List, Optional
from machine_seed.core.ecs import EntityManager, Entity
from machine_seed.core.config_manager import ConfigManager
from machine_seed.core.time_manager import TimeManager
from machine_seed.systems.ai_system import AISystem
from machine_seed.systems.colony_resources import ColonyResources
from machine_seed.systems.job_system import JobSystem
from machine_seed.systems.movement_system import MovementSystem
from machine_seed.systems.path_invalidation_system import PathInvalidationSystem
from machine_seed.systems.reservation import ReservationSystem
from machine_seed.systems.zone_system import ZoneSystem
from machine_seed.world.change_tracker import WorldChangeTracker
from machine_seed.world.grid import Grid
from machine_seed.world.spawn import spawn_bot, spawn_home_base
from machine_seed.world.zone_manager import ReachabilityZones
from machine_seed.utils.logger import Logger

class Simulation:
    """
    Fixed-order tick pipeline over one grid:

        change tracking -> zone rebuild -> job rescan -> zone tags
        -> path invalidation -> job assignment / pathing -> movement

    Grid edits made between ticks (painting, building) are picked up by the
    next tick's change tracking. Each phase is the only writer of its data
    while it runs, so nothing needs locking.
    """
    def __init__(self, grid: Grid, config_manager: Optional[ConfigManager] = None,
                 time_manager: Optional[TimeManager] = None):
        self.grid = grid
        self.config_manager = config_manager or ConfigManager(watch=False)
        self.time_manager = time_manager or TimeManager(
            tick_rate=self.config_manager.get("global.tick_rate", 60))

        self.entity_manager = EntityManager()
        self.tracker = WorldChangeTracker()
        self.zones = ReachabilityZones()
        self.reservations = ReservationSystem()
        self.resources = ColonyResources()
        self.job_system = JobSystem(self.entity_manager, self.config_manager, self.reservations)

        self.zone_system = ZoneSystem(self.entity_manager, grid, self.zones, self.tracker, self.job_system)
        self.path_invalidation_system = PathInvalidationSystem(self.entity_manager, self.tracker)
        self.ai_system = AISystem(self.entity_manager, self.job_system, grid, self.zones,
                                  self.resources, self.config_manager)
        self.movement_system = MovementSystem(self.entity_manager, grid)

        Logger.set_time_manager(self.time_manager)
        Logger.configure_debug(self.config_manager.get("debug", {}))
        self.initialized = False

    def spawn_home_base(self, x: int, y: int) -> Entity:
        return spawn_home_base(self.entity_manager, self.grid, x, y)

    def spawn_bot(self, x: int, y: int) -> Entity:
        return spawn_bot(self.entity_manager, x, y, self.config_manager.get("bots.move_speed", 1.0))

    def initialize(self):
        """Startup zone build and job scan; runs on the first tick if not called."""
        self.tracker.update(self.grid)
        self.zone_system.initialize()
        self.initialized = True
        Logger.info("Simulation initialized")

    def tick(self) -> float:
        if not self.initialized:
            self.initialize()

        dt = self.time_manager.update()
        self.ai_system.current_tick = self.time_manager.total_ticks

        self.tracker.update(self.grid)
        self.zone_system.update(dt)
        self.path_invalidation_system.update(dt)
        self.ai_system.update(dt)
        self.movement_system.update(dt)
        return dt

    def run(self, ticks: int) -> List[float]:
        return [self.tick() for _ in range(ticks)]
