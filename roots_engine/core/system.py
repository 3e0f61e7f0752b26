"""
System base class for logic processors.

Systems contain the game logic. They process the entities that carry a
specific component combination, once per tick.

Usage:
    class CooldownSystem(System):
        required_components = [Cooldown]

        def process_entity(self, entity: Entity, dt: float) -> None:
            cooldown = entity.get(Cooldown)
            cooldown.remaining = max(0.0, cooldown.remaining - dt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Iterator

from roots_engine.core.component import Component

if TYPE_CHECKING:
    from roots_engine.core.entity import Entity
    from roots_engine.core.world import World


class System(ABC):
    """
    Base class for all systems.

    Override required_components to select entities and process_entity
    to define the per-entity logic.
    """

    # Components an entity needs to be processed by this system
    required_components: ClassVar[list[type[Component]]] = []

    # Execution order (higher = earlier)
    priority: ClassVar[int] = 0

    enabled: bool = True

    def __init__(self):
        self._world: World | None = None

    @property
    def world(self) -> World:
        """Get the world this system belongs to."""
        if self._world is None:
            raise RuntimeError(f"System {self.__class__.__name__} not attached to world")
        return self._world

    def on_add(self, world: World) -> None:
        """Called when system is added to a world."""
        self._world = world

    def on_remove(self) -> None:
        """Called when system is removed from a world."""
        self._world = None

    def get_entities(self) -> Iterator[Entity]:
        """Get entities that match this system's required components."""
        if not self._world:
            return iter([])

        if not self.required_components:
            return iter(self._world.entities)

        return self._world.get_entities_with(*self.required_components)

    def update(self, dt: float) -> None:
        """
        Update this system.

        Args:
            dt: Delta time in seconds
        """
        if not self.enabled:
            return

        self.pre_update(dt)

        for entity in list(self.get_entities()):
            if entity.active:
                self.process_entity(entity, dt)

        self.post_update(dt)

    def pre_update(self, dt: float) -> None:
        """Called before processing entities."""
        pass

    def post_update(self, dt: float) -> None:
        """Called after processing entities."""
        pass

    @abstractmethod
    def process_entity(self, entity: Entity, dt: float) -> None:
        """Process a single entity."""
        pass

    def __repr__(self) -> str:
        required = ", ".join(c.__name__ for c in self.required_components)
        return f"{self.__class__.__name__}(requires=[{required}])"
