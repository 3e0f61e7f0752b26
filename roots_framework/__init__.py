"""
Roots dialogue framework.

Built on top of roots_engine:
- Components (data-only, pydantic models)
- Dialogue (text utilities, ports, session state machine, triggers)
- Systems (zones, dialogue, scene transitions)
- World (player controller and lock, scene loading)
"""

__version__ = "0.1.0"

from roots_framework.components import (
    DialogueScript,
    DialogueSpeaker,
    InteractionTrigger,
    SceneTransition,
    SessionState,
    Transform,
    TriggerMode,
    TriggerZone,
)
from roots_framework.dialogue.session import DialogueEvent, DialogueSession
from roots_framework.dialogue.trigger import TriggerController
from roots_framework.dialogue.presenter import SurfacePresenter
from roots_framework.dialogue.config import SpeakerDatabase
from roots_framework.systems import (
    DialogueSystem,
    SceneTransitionHandler,
    ZoneEvent,
    ZoneSystem,
)
from roots_framework.world import DeferredSceneLoader, PlayerController, PlayerLock, create_player

__all__ = [
    # Components
    "DialogueScript",
    "DialogueSpeaker",
    "InteractionTrigger",
    "SceneTransition",
    "SessionState",
    "Transform",
    "TriggerMode",
    "TriggerZone",
    # Dialogue
    "DialogueEvent",
    "DialogueSession",
    "TriggerController",
    "SurfacePresenter",
    "SpeakerDatabase",
    # Systems
    "DialogueSystem",
    "SceneTransitionHandler",
    "ZoneEvent",
    "ZoneSystem",
    # World
    "DeferredSceneLoader",
    "PlayerController",
    "PlayerLock",
    "create_player",
]
