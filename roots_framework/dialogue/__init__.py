"""
Dialogue module.

Leaf utilities and interfaces shared by the session and its collaborators:
- split_lines, wrap_text, unwrap_text, ROW_BREAK: text processing
- DialogueError and subclasses: error taxonomy
- PresentationPort, AudioPort, SceneLoader, InputSource, ClockSource,
  PlayerLockPort: collaborator interfaces

The session, trigger and presenter live in their own submodules:
    from roots_framework.dialogue.session import DialogueSession
    from roots_framework.dialogue.trigger import TriggerController
"""

from roots_framework.dialogue.text import ROW_BREAK, split_lines, wrap_text, unwrap_text
from roots_framework.dialogue.errors import (
    DialogueError,
    ConfigurationEmpty,
    InvalidTransition,
    ResourceConflict,
    SpeakerConfigError,
)
from roots_framework.dialogue.ports import (
    PresentationPort,
    AudioPort,
    SceneLoader,
    InputSource,
    ClockSource,
    PlayerLockPort,
)

__all__ = [
    # Text
    "ROW_BREAK",
    "split_lines",
    "wrap_text",
    "unwrap_text",
    # Errors
    "DialogueError",
    "ConfigurationEmpty",
    "InvalidTransition",
    "ResourceConflict",
    "SpeakerConfigError",
    # Ports
    "PresentationPort",
    "AudioPort",
    "SceneLoader",
    "InputSource",
    "ClockSource",
    "PlayerLockPort",
]
