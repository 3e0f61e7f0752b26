"""
Collaborator interfaces the dialogue session talks to.

The session never touches pygame directly: it is handed these ports at
construction time. Engine classes that already have the right shape are
registered as virtual subclasses at the bottom of this module.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Hashable, Optional

from roots_engine.audio.manager import AudioManager
from roots_engine.core.clock import Clock
from roots_engine.input.handler import InputHandler

if TYPE_CHECKING:
    from roots_framework.components.dialogue import BubbleStyle, PromptStyle
    from roots_framework.world.player import PlayerLockToken

# Opaque handle returned by a port and passed back to it later
Handle = Hashable


class PresentationPort(ABC):
    """
    Shows and hides the prompt and bubble overlays.

    Calls are fire-and-forget; the session assumes they cannot fail.
    """

    @abstractmethod
    def show_prompt(self, text: str, style: PromptStyle) -> Handle:
        """Show the interaction prompt and return its handle."""

    @abstractmethod
    def show_bubble(self, text: str, style: BubbleStyle) -> Handle:
        """Show a bubble with already-wrapped text and return its handle."""

    @abstractmethod
    def update_text(self, handle: Handle, text: str) -> None:
        """Replace the text of a shown overlay."""

    @abstractmethod
    def hide(self, handle: Handle) -> None:
        """Remove an overlay. Unknown handles are ignored."""


class AudioPort(ABC):
    """Clip playback."""

    @abstractmethod
    def play(self, clip: str, volume: float = 1.0, loop: bool = False) -> Optional[Any]:
        """Start a clip; returns a handle or None when nothing played."""

    @abstractmethod
    def stop(self, handle: Optional[Any]) -> None:
        """Stop a handle returned by play(). None is a no-op."""


class SceneLoader(ABC):
    """Scene switching, consumed when a finished dialogue leads elsewhere."""

    @abstractmethod
    def load_after(self, scene_id: str, delay_seconds: float) -> None:
        """Load scene_id after delay_seconds."""

    @abstractmethod
    def reposition_actor_to(self, spawn_point_id: str) -> None:
        """Move the player to a named spawn point."""


class InputSource(ABC):
    """Edge-triggered key queries."""

    @abstractmethod
    def is_key_just_pressed(self, key: int) -> bool:
        """True for exactly one tick per physical press."""


class ClockSource(ABC):
    """Per-frame delta source."""

    @abstractmethod
    def tick(self) -> float:
        """Seconds since the previous tick, never negative."""


class PlayerLockPort(ABC):
    """Exclusive suspension of player movement."""

    @abstractmethod
    def acquire(self, owner: str) -> PlayerLockToken:
        """
        Freeze the player on behalf of owner.

        Raises:
            ResourceConflict: If another token is outstanding
        """

    @abstractmethod
    def release(self, token: PlayerLockToken) -> None:
        """Unfreeze the player. Stale tokens are ignored."""


AudioPort.register(AudioManager)
InputSource.register(InputHandler)
ClockSource.register(Clock)
