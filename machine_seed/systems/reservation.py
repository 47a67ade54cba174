from typing import Dict, Optional, Tuple
from machine_seed.core.ecs import Entity
from machine_seed.world.grid import Position

# Position and Entity are both int pairs, so keys carry their kind
ReservationKey = Tuple[str, Tuple[int, int]]

def tile_key(pos: Position) -> ReservationKey:
    return ("tile", (pos[0], pos[1]))

def entity_key(entity: Entity) -> ReservationKey:
    return ("entity", (entity.index, entity.generation))

class ReservationSystem:
    """Exclusive claims on tiles or entities, held by one bot each."""
    def __init__(self):
        self.reservations: Dict[ReservationKey, Entity] = {}

    def try_reserve(self, key: ReservationKey, bot: Entity) -> bool:
        if key in self.reservations:
            return False  # Already reserved by another bot
        self.reservations[key] = bot
        return True

    def unreserve(self, key: ReservationKey):
        self.reservations.pop(key, None)

    def is_reserved(self, key: ReservationKey) -> bool:
        return key in self.reservations

    def get_reserver(self, key: ReservationKey) -> Optional[Entity]:
        return self.reservations.get(key)

    def release_all(self, bot: Entity):
        for key in [k for k, owner in self.reservations.items() if owner == bot]:
            del self.reservations[key]
