from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
from machine_seed.core.ecs import Component, Entity
from machine_seed.world.grid import Position

class BotState(Enum):
    IDLE = "Idle"
    MOVING_TO_JOB = "MovingToJob"
    HARVESTING = "Harvesting"
    HAULING = "Hauling"

class JobType(Enum):
    HARVEST = "harvest"

@dataclass(slots=True)
class PositionComponent(Component):
    x: int
    y: int

    @property
    def pos(self) -> Position:
        return Position(self.x, self.y)

@dataclass(slots=True)
class MovementComponent(Component):
    speed: float = 1.0  # Tiles per game second
    progress: float = 0.0  # Progress to next tile (0.0 to 1.0)
    modifiers: Dict[str, float] = field(default_factory=dict)  # {"low_power": 0.2}

    def current_speed(self) -> float:
        multiplier = 1.0
        for value in self.modifiers.values():
            multiplier *= value
        return self.speed * multiplier

@dataclass(slots=True)
class PathComponent(Component):
    nodes: List[Position]  # Starts at the tile the path was planned from
    current_idx: int = 0  # Index of the tile the bot stands on
    goal: Optional[Position] = None

    def remaining(self) -> List[Position]:
        """Steps not yet walked."""
        return self.nodes[self.current_idx + 1:]

    def next_step(self) -> Optional[Position]:
        if self.current_idx + 1 < len(self.nodes):
            return self.nodes[self.current_idx + 1]
        return None

    def is_complete(self) -> bool:
        return self.current_idx >= len(self.nodes) - 1

@dataclass(slots=True)
class InZoneComponent(Component):
    zone_id: Optional[int] = None  # None when standing on non-walkable terrain

@dataclass(slots=True)
class BotComponent(Component):
    state: BotState = BotState.IDLE
    carried: int = 0
    job: Optional[Entity] = None
    harvest_progress: float = 0.0
    replan_failures: int = 0

@dataclass(slots=True)
class JobComponent(Component):
    job_type: JobType
    target: Position
    zone_id: int
    priority: int = 10
    failed_attempts: int = 0
