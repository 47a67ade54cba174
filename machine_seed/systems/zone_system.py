from machine_seed.core.ecs import System, EntityManager
from machine_seed.components.data_components import InZoneComponent, PositionComponent
from machine_seed.systems.job_system import JobSystem
from machine_seed.world.change_tracker import WorldChangeTracker
from machine_seed.world.grid import Grid
from machine_seed.world.zone_manager import ReachabilityZones

class ZoneSystem(System):
    """
    Keeps zones, job queues and zone tags in step with the grid.
    Runs after change tracking and before any system that reads zones.
    """
    def __init__(self, entity_manager: EntityManager, grid: Grid, zones: ReachabilityZones,
                 tracker: WorldChangeTracker, job_system: JobSystem):
        self.entity_manager = entity_manager
        self.grid = grid
        self.zones = zones
        self.tracker = tracker
        self.job_system = job_system
        self.rebuilt_last_tick = False

    def initialize(self):
        """Startup build: zones, tags, then the first job scan."""
        self.zones.rebuild(self.grid)
        self.update_entity_zones()
        self.job_system.rescan(self.grid, self.zones)

    def update(self, dt: float):
        self.rebuilt_last_tick = self.zones.rebuild_if_affected(self.tracker.tiles_changed, self.grid)
        if self.rebuilt_last_tick:
            # Tags first: the rescan checks claimers against fresh zones
            self.update_entity_zones()
            self.job_system.rescan(self.grid, self.zones)

        self.update_entity_zones()

    def update_entity_zones(self):
        for entity, pos_comp, in_zone in self.entity_manager.get_entities_with(PositionComponent, InZoneComponent):
            in_zone.zone_id = self.zones.get_zone(pos_comp.x, pos_comp.y)
