"""
Component base class for data-only components.

Components are pure data containers. Behaviour lives in Systems and in
the controller objects those Systems own, which keeps components trivially
serializable and easy to build from JSON configuration.

Usage:
    class TriggerZone(Component):
        width: float = 32.0
        height: float = 32.0
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all components.

    Pydantic gives every component validation on construction and on
    assignment, JSON round-tripping and declared defaults.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    # Component type name used by the registry
    _type_name: ClassVar[str] = ""

    # Owning entity id, set by Entity.add
    _entity_id: int | None = None

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    @property
    def entity_id(self) -> int | None:
        """Id of the entity this component is attached to."""
        return self._entity_id

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)


_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type by name.

    Usage:
        @register_component
        class SceneTransition(Component):
            scene_id: str = ""
    """
    _component_registry[cls.get_type_name()] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)

