"""
Framework components.

All components are pydantic models registered by type name, so speaker
definitions can be built from JSON.
"""

from roots_framework.components.transform import Transform, Velocity
from roots_framework.components.dialogue import (
    BubbleStyle,
    DialogueScript,
    DialogueSpeaker,
    PromptStyle,
    SessionState,
)
from roots_framework.components.interaction import (
    InteractionTrigger,
    SceneTransition,
    TriggerMode,
    TriggerZone,
)

__all__ = [
    # Transform
    "Transform",
    "Velocity",
    # Dialogue
    "BubbleStyle",
    "DialogueScript",
    "DialogueSpeaker",
    "PromptStyle",
    "SessionState",
    # Interaction
    "InteractionTrigger",
    "SceneTransition",
    "TriggerMode",
    "TriggerZone",
]
