"""
Dialogue components - script text, presentation styles, speaker settings.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roots_engine.core.component import Component, register_component
from roots_framework.dialogue.text import split_lines

Color = tuple[int, int, int, int]


class SessionState(Enum):
    """States of a dialogue session."""
    IDLE = auto()        # Nothing shown
    PROMPTING = auto()   # Prompt visible, dialogue not started
    PRESENTING = auto()  # A line is shown
    LOCKED = auto()      # Player frozen, intro sound playing


class DialogueScript(BaseModel):
    """
    Raw dialogue text as authored. Read-only to the engine.

    lines() splits on every call so edits to the source are picked up
    the next time a session starts.
    """
    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None

    def lines(self) -> list[str]:
        return split_lines(self.text)

    @property
    def is_empty(self) -> bool:
        return not self.lines()


class BubbleStyle(BaseModel):
    """
    Look of the dialogue bubble. Opaque to the session.

    Attributes:
        offset: Offset from the speaker's position (pixels)
        background_size: Minimum background quad size (pixels)
        background_color: RGBA background
        text_color: RGBA text
        text_size: Font size
        padding: Space between quad edge and text
    """
    model_config = ConfigDict(extra='forbid')

    offset: tuple[float, float] = (0.0, -48.0)
    background_size: tuple[float, float] = (280.0, 64.0)
    background_color: Color = (31, 31, 41, 230)
    text_color: Color = (235, 235, 235, 255)
    text_size: int = Field(default=20, ge=6)
    padding: int = Field(default=8, ge=0)


class PromptStyle(BaseModel):
    """
    Look and text of the interaction prompt.

    Attributes:
        text: Prompt text
        offset: Offset from the speaker's position (pixels)
        color: RGBA text colour
        text_size: Font size
    """
    model_config = ConfigDict(extra='forbid')

    text: str = "Press E to talk"
    offset: tuple[float, float] = (0.0, -36.0)
    color: Color = (255, 255, 128, 255)
    text_size: int = Field(default=18, ge=6)


@register_component
class DialogueSpeaker(Component):
    """
    Dialogue settings for an NPC or cutscene entity.

    Attributes:
        script: Raw dialogue text, one line per row
        max_chars_per_row: Width used for word wrapping
        auto_advance: Advance lines on a timer
        seconds_per_line: Auto-advance interval, 0 disables timed advance
        terminal_state: State a finished run returns to (IDLE or PROMPTING)
        bubble: Bubble style
        prompt: Prompt style
        dialogue_sound: Clip played when a run starts
        dialogue_sound_volume: Volume for dialogue_sound
        dialogue_sound_duration: Seconds before dialogue_sound is stopped
    """
    script: Optional[str] = None
    max_chars_per_row: int = Field(default=40, ge=10, le=100)
    auto_advance: bool = True
    seconds_per_line: float = Field(default=3.0, ge=0.0)
    terminal_state: SessionState = SessionState.IDLE
    bubble: BubbleStyle = Field(default_factory=BubbleStyle)
    prompt: PromptStyle = Field(default_factory=PromptStyle)
    dialogue_sound: Optional[str] = None
    dialogue_sound_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    dialogue_sound_duration: float = Field(default=2.0, ge=0.0)

    @field_validator("terminal_state")
    @classmethod
    def _check_terminal_state(cls, value: SessionState) -> SessionState:
        if value not in (SessionState.IDLE, SessionState.PROMPTING):
            raise ValueError("terminal_state must be IDLE or PROMPTING")
        return value

    @property
    def dialogue_script(self) -> DialogueScript:
        """Snapshot of the current script text."""
        return DialogueScript(text=self.script)

    @property
    def auto_advance_interval(self) -> float:
        """Effective timer interval; 0 means no timed advance."""
        return self.seconds_per_line if self.auto_advance else 0.0
