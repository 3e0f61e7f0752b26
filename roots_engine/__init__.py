"""
Roots Engine

Small pygame host for tick-driven 2D scenes: ECS core, typed event bus,
keyboard input, deferred callbacks and audio.

Quick Start:
    from roots_engine import Game, GameConfig

    game = Game(GameConfig(title="Village"))
    player = game.world.create_entity("player")
    game.run()
"""

__version__ = "0.1.0"

from roots_engine.core import (
    Game,
    GameConfig,
    Entity,
    Component,
    register_component,
    System,
    World,
    EventBus,
    Event,
    EngineEvent,
    Action,
    Clock,
    Scheduler,
    DeferredCall,
)

from roots_engine.input import InputHandler
from roots_engine.audio import AudioManager

__all__ = [
    # Core
    "Game",
    "GameConfig",
    # ECS
    "Entity",
    "Component",
    "register_component",
    "System",
    "World",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    # Timing
    "Clock",
    "Scheduler",
    "DeferredCall",
    # Input
    "InputHandler",
    "Action",
    # Audio
    "AudioManager",
]
