"""
Entity class - a container for components.

Entities hold components and tags. They have no behaviour themselves;
Systems find them by component combination.

Usage:
    npc = Entity("Shopkeeper")
    npc.add(Transform(x=120, y=80))
    npc.add(TriggerZone(width=48, height=48))

    if npc.has(DialogueSpeaker):
        speaker = npc.get(DialogueSpeaker)
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Iterator, TypeVar

from roots_engine.core.component import Component

if TYPE_CHECKING:
    from roots_engine.core.world import World


C = TypeVar('C', bound=Component)


class Entity:
    """
    A named, tagged bag of components with a unique id.
    """

    _id_counter = itertools.count(1)

    def __init__(self, name: str = ""):
        self._id = next(Entity._id_counter)
        self._name = name or f"Entity_{self._id}"
        self._components: dict[type[Component], Component] = {}
        self._tags: set[str] = set()
        self._active = True
        self._world: World | None = None

    @property
    def id(self) -> int:
        """Unique entity identifier."""
        return self._id

    @property
    def name(self) -> str:
        """Entity name (for lookups and logging)."""
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def active(self) -> bool:
        """Whether entity is processed by systems."""
        return self._active

    @active.setter
    def active(self, value: bool) -> None:
        self._active = value

    @property
    def world(self) -> World | None:
        """The World this entity belongs to."""
        return self._world

    def add(self, component: C) -> C:
        """
        Add a component to this entity.

        Raises:
            ValueError: If entity already has this component type
        """
        comp_type = type(component)

        if comp_type in self._components:
            raise ValueError(
                f"Entity {self._name} already has component {comp_type.__name__}"
            )

        component._entity_id = self._id
        self._components[comp_type] = component

        if self._world:
            self._world._on_component_added(self, component)

        return component

    def remove(self, component_type: type[C]) -> C | None:
        """Remove a component, returning it (or None if absent)."""
        component = self._components.pop(component_type, None)

        if component:
            component._entity_id = None
            if self._world:
                self._world._on_component_removed(self, component)

        return component  # type: ignore[return-value]

    def get(self, component_type: type[C]) -> C:
        """
        Get a component by type.

        Raises:
            KeyError: If component not found
        """
        if component_type not in self._components:
            raise KeyError(
                f"Entity {self._name} does not have component {component_type.__name__}"
            )
        return self._components[component_type]  # type: ignore[return-value]

    def try_get(self, component_type: type[C]) -> C | None:
        """Get a component by type, or None."""
        return self._components.get(component_type)  # type: ignore[return-value]

    def has(self, *component_types: type[Component]) -> bool:
        """Check if entity has all specified component types."""
        return all(ct in self._components for ct in component_types)

    @property
    def components(self) -> Iterator[Component]:
        """Iterate over all components."""
        return iter(self._components.values())

    # Tags

    def add_tag(self, tag: str) -> None:
        """Add a tag to this entity."""
        self._tags.add(tag)
        if self._world:
            self._world._index_tag(self, tag)

    def remove_tag(self, tag: str) -> None:
        """Remove a tag from this entity."""
        self._tags.discard(tag)
        if self._world:
            self._world._unindex_tag(self, tag)

    def has_tag(self, tag: str) -> bool:
        """Check if entity has a tag."""
        return tag in self._tags

    @property
    def tags(self) -> frozenset[str]:
        """Get all tags."""
        return frozenset(self._tags)

    def __repr__(self) -> str:
        components = ", ".join(c.__name__ for c in self._components)
        return f"Entity({self._name}, id={self._id}, components=[{components}])"

    def __hash__(self) -> int:
        return hash(self._id)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Entity):
            return self._id == other._id
        return False
