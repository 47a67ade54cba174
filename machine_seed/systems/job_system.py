import heapq
import itertools
from typing import Dict, List, Optional, Set, Tuple
import numpy as np
from machine_seed.core.ecs import EntityManager, Entity
from machine_seed.core.config_manager import ConfigManager
from machine_seed.components.data_components import JobComponent, JobType, InZoneComponent
from machine_seed.systems.reservation import ReservationSystem, entity_key
from machine_seed.world.grid import Grid, Position, HARVESTABLE
from machine_seed.world.zone_manager import ReachabilityZones
from machine_seed.utils.logger import Logger, LogCategory

DEFAULT_JOB_PRIORITY = 10
DEFAULT_MAX_PATH_RETRIES = 3

class ZonedJobQueue:
    """
    One priority queue of job handles per zone.
    Higher priority pops first; equal priorities pop in push order.
    """
    def __init__(self):
        self.queues: Dict[int, List[Tuple[int, int, Entity]]] = {}
        self._queued: Dict[Entity, int] = {}  # job -> zone_id
        self._counter = itertools.count()

    def push(self, zone_id: int, priority: int, job: Entity):
        if job in self._queued:
            raise ValueError(f"Job {job} already queued in zone {self._queued[job]}")
        heapq.heappush(self.queues.setdefault(zone_id, []), (-priority, next(self._counter), job))
        self._queued[job] = zone_id

    def pop(self, zone_id: int) -> Optional[Entity]:
        heap = self.queues.get(zone_id)
        if not heap:
            return None
        _, _, job = heapq.heappop(heap)
        del self._queued[job]
        return job

    def clear(self):
        self.queues.clear()
        self._queued.clear()

    def contains(self, job: Entity) -> bool:
        return job in self._queued

    def zone_of(self, job: Entity) -> Optional[int]:
        return self._queued.get(job)

    def __len__(self) -> int:
        return len(self._queued)

    def count(self, zone_id: int) -> int:
        return len(self.queues.get(zone_id, []))

class JobSystem:
    """
    Owns job entities, the zoned queue and job claims.

    A job lives while its target is a scrap tile. Queued jobs belong to
    their zone; a popped job belongs to the bot that claimed it.
    """
    def __init__(self, entity_manager: EntityManager, config_manager: Optional[ConfigManager] = None,
                 reservations: Optional[ReservationSystem] = None):
        self.entity_manager = entity_manager
        self.config_manager = config_manager or ConfigManager(watch=False)
        self.reservations = reservations or ReservationSystem()
        self.queue = ZonedJobQueue()
        self.jobs_created = 0
        self.jobs_completed = 0

    @property
    def max_path_retries(self) -> int:
        return self.config_manager.get("bots.max_path_retries", DEFAULT_MAX_PATH_RETRIES)

    def get_job(self, job: Optional[Entity]) -> Optional[JobComponent]:
        if not self.entity_manager.has_entity(job):
            return None
        return self.entity_manager.get_component(job, JobComponent)

    def claimed_by(self, job: Entity) -> Optional[Entity]:
        return self.reservations.get_reserver(entity_key(job))

    def rescan(self, grid: Grid, zones: ReachabilityZones) -> int:
        """
        Rebuilds every zone queue from the grid.
        Each scrap tile gets one job per bordering zone. Claimed jobs are
        kept while still valid and stand in for their zone's copy.
        Returns the number of jobs created.
        """
        covered = self._revalidate_jobs(grid, zones)
        self.queue.clear()

        priority = self.config_manager.get("jobs.scrap_priority", DEFAULT_JOB_PRIORITY)
        created = 0
        enclosed = 0

        # Raster order keeps job creation deterministic
        targets = sorted((Position(int(x), int(y)) for x, y in np.argwhere(HARVESTABLE[grid.tiles])),
                         key=lambda p: (p.y, p.x))
        for target in targets:
            bordering = sorted({zones.get_zone(nx, ny) for nx, ny in grid.neighbors(*target)} - {None})
            if not bordering:
                enclosed += 1
                Logger.trace(LogCategory.JOBS, f"Scrap at {target} is enclosed, no job created")
                continue
            for zone_id in bordering:
                if (target, zone_id) in covered:
                    continue
                self._create_job(target, zone_id, priority)
                created += 1

        self.jobs_created += created
        Logger.log(LogCategory.JOBS,
                   f"Scanned zones and created {created} jobs across {zones.zone_count} zones")
        if enclosed:
            Logger.log(LogCategory.JOBS, f"{enclosed} scrap tiles unreachable from any zone")
        return created

    def _revalidate_jobs(self, grid: Grid, zones: ReachabilityZones) -> Set[Tuple[Position, int]]:
        covered: Set[Tuple[Position, int]] = set()
        for job, job_comp in self.entity_manager.get_entities_with(JobComponent):
            bot = self.claimed_by(job)
            if bot is None:
                # Unclaimed jobs are recreated by the scan
                self.entity_manager.destroy_entity(job)
                continue

            in_zone = self.entity_manager.get_component(bot, InZoneComponent)
            bot_zone = in_zone.zone_id if in_zone else None
            target = job_comp.target
            bordering = {zones.get_zone(nx, ny) for nx, ny in grid.neighbors(*target)}
            if (not self.entity_manager.has_entity(bot) or not grid.is_harvestable(*target)
                    or bot_zone is None or bot_zone not in bordering
                    or (target, bot_zone) in covered):
                # Merged zones can leave two claims on one tile, the first one wins
                Logger.trace(LogCategory.JOBS, f"Claimed job {job} at {target} no longer valid, destroying")
                self.reservations.unreserve(entity_key(job))
                self.entity_manager.destroy_entity(job)
                continue

            job_comp.zone_id = bot_zone
            covered.add((target, bot_zone))
        return covered

    def _create_job(self, target: Position, zone_id: int, priority: int) -> Entity:
        job = self.entity_manager.create_entity()
        self.entity_manager.add_component(job, JobComponent(
            job_type=JobType.HARVEST,
            target=target,
            zone_id=zone_id,
            priority=priority,
        ))
        self.queue.push(zone_id, priority, job)
        return job

    def claim(self, zone_id: int, bot: Entity) -> Optional[Entity]:
        """Pops the best live job in the zone and reserves it for the bot."""
        while True:
            job = self.queue.pop(zone_id)
            if job is None:
                return None
            if not self.entity_manager.has_entity(job):
                continue
            if not self.reservations.try_reserve(entity_key(job), bot):
                Logger.error(f"Job {job} popped from zone {zone_id} while claimed by {self.claimed_by(job)}")
                continue
            Logger.trace(LogCategory.JOBS, f"Assigned job {job} to bot {bot} in zone {zone_id}")
            return job

    def release(self, job: Entity, requeue: bool = True) -> bool:
        """
        Drops the claim on a job. The job goes back to its zone queue until it
        has failed max_path_retries times, then it is abandoned.
        Returns True if the job was requeued.
        """
        self.reservations.unreserve(entity_key(job))
        job_comp = self.get_job(job)
        if job_comp is None:
            return False

        job_comp.failed_attempts += 1
        if requeue and job_comp.failed_attempts < self.max_path_retries:
            self.queue.push(job_comp.zone_id, job_comp.priority, job)
            Logger.trace(LogCategory.JOBS, f"Requeued job {job} at {job_comp.target} in zone {job_comp.zone_id}")
            return True

        Logger.log(LogCategory.JOBS,
                   f"Abandoned job {job} at {job_comp.target} after {job_comp.failed_attempts} failed attempts")
        self.entity_manager.destroy_entity(job)
        return False

    def complete(self, job: Entity):
        """Destroys a finished job."""
        self.reservations.unreserve(entity_key(job))
        if self.entity_manager.has_entity(job):
            self.entity_manager.destroy_entity(job)
            self.jobs_completed += 1

    def discard(self, job: Entity):
        """Destroys a job whose target stopped being scrap."""
        self.reservations.unreserve(entity_key(job))
        if self.entity_manager.has_entity(job):
            self.entity_manager.destroy_entity(job)

    def available_count(self, zone_id: Optional[int] = None) -> int:
        if zone_id is None:
            return len(self.queue)
        return self.queue.count(zone_id)
