"""
Framework systems.

Exports:
- ZoneSystem, ZoneEvent: zone crossing detection
- DialogueSystem: sessions and triggers per speaker
- SceneTransitionHandler: scene loads after finished dialogue
"""

from roots_framework.systems.zone import ZoneSystem, ZoneEvent
from roots_framework.systems.dialogue import DialogueSystem
from roots_framework.systems.scene_transition import SceneTransitionHandler

__all__ = [
    "ZoneSystem",
    "ZoneEvent",
    "DialogueSystem",
    "SceneTransitionHandler",
]
