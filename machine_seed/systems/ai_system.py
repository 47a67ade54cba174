from typing import Optional
from machine_seed.core.ecs import System, EntityManager, Entity
from machine_seed.core.config_manager import ConfigManager
from machine_seed.components.data_components import (BotComponent, BotState, InZoneComponent,
                                                     PathComponent, PositionComponent)
from machine_seed.components.tags import IsHomeBase
from machine_seed.systems.colony_resources import ColonyResources
from machine_seed.systems.job_system import JobSystem
from machine_seed.world.grid import Grid, Position, TILE_GROUND
from machine_seed.world.pathfinding import find_path, goal_reached, heuristic
from machine_seed.world.zone_manager import ReachabilityZones
from machine_seed.utils.logger import Logger, LogCategory

class AISystem(System):
    """
    Bot scheduler: Idle -> MovingToJob -> Harvesting -> Hauling -> Idle.

    Each pass first clears dangling job handles, then gives every bot one
    state step. Paths are requested here and walked by the MovementSystem.
    """
    def __init__(self, entity_manager: EntityManager, job_system: JobSystem, grid: Grid,
                 zones: ReachabilityZones, resources: ColonyResources,
                 config_manager: Optional[ConfigManager] = None):
        self.entity_manager = entity_manager
        self.job_system = job_system
        self.grid = grid
        self.zones = zones
        self.resources = resources
        self.config_manager = config_manager or ConfigManager(watch=False)
        self.current_tick = 0

    def update(self, dt: float):
        self._cleanup_orphaned_jobs()

        for entity, bot, pos_comp, in_zone in self.entity_manager.get_entities_with(
                BotComponent, PositionComponent, InZoneComponent):
            if bot.state == BotState.IDLE:
                self._find_job(entity, bot, pos_comp, in_zone)
            elif bot.state == BotState.MOVING_TO_JOB:
                self._handle_moving(entity, bot, pos_comp)
            elif bot.state == BotState.HARVESTING:
                self._handle_harvest(entity, bot, pos_comp, dt)
            elif bot.state == BotState.HAULING:
                self._handle_haul(entity, bot, pos_comp)

    def _cleanup_orphaned_jobs(self):
        for entity, bot in self.entity_manager.get_entities_with(BotComponent):
            if bot.job is None or self.entity_manager.has_entity(bot.job):
                continue
            Logger.log(LogCategory.JOBS, f"Bot {entity} held job {bot.job} which no longer exists, returning to Idle")
            self.job_system.discard(bot.job)
            bot.job = None
            bot.harvest_progress = 0.0
            bot.replan_failures = 0
            if bot.state != BotState.HAULING:
                self.entity_manager.remove_component(entity, PathComponent)
                bot.state = BotState.IDLE

    def _find_job(self, entity: Entity, bot: BotComponent, pos_comp: PositionComponent,
                  in_zone: InZoneComponent):
        if in_zone.zone_id is None:
            Logger.trace(LogCategory.AI, f"Idle bot {entity} at {pos_comp.pos} has no zone")
            return

        job = self.job_system.claim(in_zone.zone_id, entity)
        if job is None:
            Logger.trace(LogCategory.AI, f"No job found for bot {entity} in zone {in_zone.zone_id}")
            return

        target = self.job_system.get_job(job).target
        if heuristic(pos_comp.pos, target) <= 1:
            # Already next to the scrap, no path needed
            self._assign(entity, bot, job)
            return

        path = find_path(self.grid, pos_comp.pos, target, self.zones)
        if path is None:
            Logger.log(LogCategory.AI, f"Bot {entity}: no path from {pos_comp.pos} to job at {target}")
            self.job_system.release(job, requeue=True)
            return

        self._assign(entity, bot, job)
        self.entity_manager.add_component(entity, PathComponent(nodes=path, goal=target))
        Logger.trace(LogCategory.AI, f"Bot {entity} took job at {target}, path of {len(path) - 1} steps")

    def _assign(self, entity: Entity, bot: BotComponent, job: Entity):
        bot.job = job
        bot.state = BotState.MOVING_TO_JOB
        bot.replan_failures = 0

    def _handle_moving(self, entity: Entity, bot: BotComponent, pos_comp: PositionComponent):
        job_comp = self.job_system.get_job(bot.job)
        target = job_comp.target

        if heuristic(pos_comp.pos, target) <= 1:
            self.entity_manager.remove_component(entity, PathComponent)
            bot.state = BotState.HARVESTING
            bot.harvest_progress = 0.0
            Logger.trace(LogCategory.AI, f"Bot {entity} reached scrap at {target}")
            return

        if self.entity_manager.has_component(entity, PathComponent):
            return

        # Path was invalidated or ended short of the target
        path = find_path(self.grid, pos_comp.pos, target, self.zones)
        if path is not None:
            self.entity_manager.add_component(entity, PathComponent(nodes=path, goal=target))
            bot.replan_failures = 0
            Logger.trace(LogCategory.AI, f"Bot {entity} replanned to {target}")
            return

        bot.replan_failures += 1
        max_attempts = self.config_manager.get("bots.max_replan_attempts", 3)
        Logger.trace(LogCategory.AI,
                     f"Bot {entity} cannot reach {target} (attempt {bot.replan_failures}/{max_attempts})")
        if bot.replan_failures >= max_attempts:
            Logger.log(LogCategory.AI, f"Bot {entity} gave up job at {target}")
            self.job_system.release(bot.job, requeue=True)
            bot.job = None
            bot.replan_failures = 0
            bot.state = BotState.IDLE

    def _handle_harvest(self, entity: Entity, bot: BotComponent, pos_comp: PositionComponent, dt: float):
        job_comp = self.job_system.get_job(bot.job)
        target = job_comp.target

        if not self.grid.is_harvestable(*target):
            # Painted over since the claim
            self.job_system.discard(bot.job)
            bot.job = None
            bot.state = BotState.IDLE
            return

        if heuristic(pos_comp.pos, target) > 1:
            bot.state = BotState.MOVING_TO_JOB
            return

        bot.harvest_progress += dt
        if bot.harvest_progress < self.config_manager.get("bots.harvest_duration", 0.0):
            return

        self.job_system.complete(bot.job)
        self.grid.set_tile(target.x, target.y, TILE_GROUND)
        bot.carried += self.config_manager.get("bots.scrap_per_harvest", 5)
        bot.job = None
        bot.harvest_progress = 0.0
        bot.state = BotState.HAULING
        Logger.gameplay(f"Bot {entity} collected scrap at {target} and is returning to base")

        self._request_home_path(entity, pos_comp)

    def _handle_haul(self, entity: Entity, bot: BotComponent, pos_comp: PositionComponent):
        home = self._home_base_pos()
        if home is None:
            Logger.warn(f"Hauling bot {entity}: no home base, will retry")
            return

        if goal_reached(pos_comp.pos, home, self.grid):
            self.entity_manager.remove_component(entity, PathComponent)
            self.resources.add_scrap(bot.carried, bot=entity, tick=self.current_tick)
            Logger.gameplay(f"Bot {entity} delivered {bot.carried} scrap (total {self.resources.scrap})")
            bot.carried = 0
            bot.state = BotState.IDLE
            return

        if not self.entity_manager.has_component(entity, PathComponent):
            # Cannot drop cargo, so keep retrying every pass
            self._request_home_path(entity, pos_comp)

    def _request_home_path(self, entity: Entity, pos_comp: PositionComponent) -> bool:
        home = self._home_base_pos()
        if home is None:
            return False
        if goal_reached(pos_comp.pos, home, self.grid):
            return True
        path = find_path(self.grid, pos_comp.pos, home, self.zones)
        if path is None:
            Logger.trace(LogCategory.AI,
                         f"Hauling bot {entity} at {pos_comp.pos} can't find path to base at {home}, will retry")
            return False
        self.entity_manager.add_component(entity, PathComponent(nodes=path, goal=home))
        return True

    def _home_base_pos(self) -> Optional[Position]:
        for _, _, pos_comp in self.entity_manager.get_entities_with(IsHomeBase, PositionComponent):
            return pos_comp.pos
        return None
