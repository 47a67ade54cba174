from dataclasses import dataclass
from machine_seed.core.ecs import Component

@dataclass(slots=True)
class IsBot(Component):
    pass

@dataclass(slots=True)
class IsHomeBase(Component):
    pass
