from dataclasses import dataclass
from typing import Type, TypeVar, Optional, Dict, List, Iterable, Tuple, NamedTuple

# --- Component ---
@dataclass(slots=True)
class Component:
    """Base class for all components. Subclasses should be dataclasses."""
    pass

T = TypeVar('T', bound=Component)

# --- Entity handle ---
class Entity(NamedTuple):
    """
    Generational handle. The slot index is recycled after destruction,
    the generation is bumped so stale handles stop resolving.
    """
    index: int
    generation: int

    def __str__(self) -> str:
        return f"{self.index}v{self.generation}"

# --- System ---
class System:
    """Base class for all systems."""
    def update(self, dt: float):
        raise NotImplementedError

# --- EntityManager ---
class EntityManager:
    def __init__(self):
        self._generations: List[int] = []
        self._alive: List[bool] = []
        self._free_slots: List[int] = []
        # component_type -> {entity -> component_instance}
        self._components: Dict[Type[Component], Dict[Entity, Component]] = {}

    def create_entity(self) -> Entity:
        """Creates a new entity handle, reusing a free slot when one exists."""
        if self._free_slots:
            index = self._free_slots.pop()
            self._alive[index] = True
        else:
            index = len(self._generations)
            self._generations.append(0)
            self._alive.append(True)
        return Entity(index, self._generations[index])

    def destroy_entity(self, entity: Entity):
        """Removes an entity and all its components. Stale handles are ignored."""
        if not self.has_entity(entity):
            return
        for store in self._components.values():
            store.pop(entity, None)
        self._alive[entity.index] = False
        self._generations[entity.index] += 1
        self._free_slots.append(entity.index)

    def has_entity(self, entity: Optional[Entity]) -> bool:
        """True while the handle still resolves to a live entity."""
        if entity is None:
            return False
        index, generation = entity
        return (0 <= index < len(self._generations)
                and self._alive[index]
                and self._generations[index] == generation)

    def entity_count(self) -> int:
        return sum(1 for alive in self._alive if alive)

    def add_component(self, entity: Entity, component: Component):
        """Adds a component to an entity."""
        if not self.has_entity(entity):
            raise KeyError(f"Entity {entity} does not exist")
        comp_type = type(component)
        if comp_type not in self._components:
            self._components[comp_type] = {}
        self._components[comp_type][entity] = component

    def remove_component(self, entity: Entity, comp_type: Type[T]):
        """Removes a component from an entity."""
        if comp_type in self._components and entity in self._components[comp_type]:
            del self._components[comp_type][entity]

    def get_component(self, entity: Entity, comp_type: Type[T]) -> Optional[T]:
        """Retrieves a specific component for an entity."""
        if comp_type in self._components:
            return self._components[comp_type].get(entity)
        return None

    def has_component(self, entity: Entity, comp_type: Type[Component]) -> bool:
        """Checks if an entity has a specific component."""
        return comp_type in self._components and entity in self._components[comp_type]

    def get_entities_with(self, *comp_types: Type[Component]) -> Iterable[Tuple]:
        """
        Yields (entity, comp1, comp2, ...) for entities that have ALL specified components.
        Iteration order follows entity creation order within the smallest store,
        so systems visit entities deterministically.
        """
        if not comp_types:
            return

        # Iterate the smallest store to minimize checks
        primary_type = min(comp_types, key=lambda t: len(self._components.get(t, {})))
        primary_store = self._components.get(primary_type, {})

        # Snapshot allows modification during iteration
        for entity in sorted(primary_store):
            if not all(entity in self._components.get(t, {}) for t in comp_types):
                continue
            yield tuple([entity] + [self._components[t][entity] for t in comp_types])
