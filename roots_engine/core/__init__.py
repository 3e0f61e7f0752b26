"""
Core engine module.

Exports:
- Entity: Entity container
- Component, register_component: Component base and registration
- System: System base class
- World: Entity/system container
- EventBus, Event, EngineEvent, AudioEvent: Event system
- Action: Input actions
- Clock: Frame delta source
- Scheduler, DeferredCall: Cancelable one-shot callbacks
- Game, GameConfig: Host loop and configuration
"""

from roots_engine.core.entity import Entity
from roots_engine.core.component import Component, register_component, get_component_type
from roots_engine.core.system import System
from roots_engine.core.world import World
from roots_engine.core.events import EventBus, Event, EngineEvent, AudioEvent
from roots_engine.core.actions import Action
from roots_engine.core.clock import Clock
from roots_engine.core.scheduler import Scheduler, DeferredCall
from roots_engine.core.game import Game, GameConfig

__all__ = [
    # ECS
    "Entity",
    "Component",
    "register_component",
    "get_component_type",
    "System",
    "World",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    "AudioEvent",
    # Input
    "Action",
    # Timing
    "Clock",
    "Scheduler",
    "DeferredCall",
    # Game
    "Game",
    "GameConfig",
]
