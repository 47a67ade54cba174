from dataclasses import dataclass, field
from typing import List, Optional
from machine_seed.core.ecs import Entity

@dataclass
class DeliveryEvent:
    tick: int
    bot: Optional[Entity]
    amount: int

@dataclass
class ColonyResources:
    """
    Scrap delivered to the home base.
    External bookkeeping (power, compute) reads the events; scheduling never does.
    """
    scrap: int = 0
    deliveries: List[DeliveryEvent] = field(default_factory=list)

    def add_scrap(self, amount: int, bot: Optional[Entity] = None, tick: int = 0):
        self.scrap += amount
        self.deliveries.append(DeliveryEvent(tick=tick, bot=bot, amount=amount))

    def can_afford_scrap(self, amount: int) -> bool:
        return self.scrap >= amount

    def spend_scrap(self, amount: int) -> bool:
        if self.can_afford_scrap(amount):
            self.scrap -= amount
            return True
        return False

    def drain_events(self) -> List[DeliveryEvent]:
        events, self.deliveries = self.deliveries, []
        return events
