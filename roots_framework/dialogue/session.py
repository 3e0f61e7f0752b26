"""
Dialogue session - the per-speaker state machine.

A session owns the lines of one run, the index of the visible line, the
auto-advance accumulator and the overlay/audio handles it created. It is
driven by a TriggerController and never reads input itself.

States:
    IDLE -> PROMPTING        show_prompt()
    IDLE/PROMPTING -> PRESENTING   start()
    IDLE -> LOCKED           begin_lock()
    LOCKED -> PRESENTING     intro duration elapsed (tick)
    PRESENTING -> PRESENTING advance() with lines left
    PRESENTING -> terminal   advance() on the last line
    any -> IDLE              cancel()

Usage:
    session = DialogueSession(speaker, presenter, audio=audio, event_bus=bus)
    session.start()
    session.tick(dt)
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Optional

from roots_engine.core.events import EventBus
from roots_engine.core.scheduler import DeferredCall, Scheduler
from roots_framework.components.dialogue import DialogueSpeaker, SessionState
from roots_framework.dialogue.errors import (
    ConfigurationEmpty,
    InvalidTransition,
    ResourceConflict,
)
from roots_framework.dialogue.ports import (
    AudioPort,
    Handle,
    PlayerLockPort,
    PresentationPort,
)
from roots_framework.dialogue.text import wrap_text

if TYPE_CHECKING:
    from roots_engine.core.entity import Entity
    from roots_framework.world.player import PlayerLockToken

logger = logging.getLogger(__name__)


class DialogueEvent(Enum):
    """Session lifecycle events."""
    PROMPT_SHOWN = auto()
    STARTED = auto()
    LINE_SHOWN = auto()
    LOCKED = auto()
    FINISHED = auto()
    CANCELLED = auto()


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.IDLE: frozenset({
        SessionState.IDLE,
        SessionState.PROMPTING,
        SessionState.PRESENTING,
        SessionState.LOCKED,
    }),
    SessionState.PROMPTING: frozenset({
        SessionState.IDLE,
        SessionState.PRESENTING,
    }),
    SessionState.PRESENTING: frozenset({
        SessionState.IDLE,
        SessionState.PROMPTING,
        SessionState.PRESENTING,
    }),
    SessionState.LOCKED: frozenset({
        SessionState.IDLE,
        SessionState.PRESENTING,
    }),
}


class DialogueSession:
    """
    State machine for one speaker's dialogue.

    Attributes:
        speaker: Settings and script source, re-read at every start
        presenter: Port that realizes prompt and bubble overlays
        audio: Optional port for the dialogue and intro sounds
        player_lock: Optional port used by the locking variant
        scheduler: Optional scheduler for the timed dialogue-sound stop
        event_bus: Optional bus for DialogueEvent notifications
        entity: Owning entity, passed along with every event
    """

    def __init__(
        self,
        speaker: DialogueSpeaker,
        presenter: PresentationPort,
        *,
        audio: Optional[AudioPort] = None,
        player_lock: Optional[PlayerLockPort] = None,
        scheduler: Optional[Scheduler] = None,
        event_bus: Optional[EventBus] = None,
        entity: Optional[Entity] = None,
        name: str = "",
    ):
        self.speaker = speaker
        self.presenter = presenter
        self.audio = audio
        self.player_lock = player_lock
        self.scheduler = scheduler
        self.event_bus = event_bus
        self.entity = entity
        self.name = name or (entity.name if entity else "dialogue")

        self._state = SessionState.IDLE
        self._lines: list[str] = []
        self._index = 0
        self._elapsed = 0.0

        # Locking variant
        self._locking = False
        self._intro_elapsed = 0.0
        self._intro_duration = 0.0
        self._intro_handle: Any = None
        self._lock_token: Optional[PlayerLockToken] = None

        # Owned overlay and audio handles
        self._prompt_handle: Optional[Handle] = None
        self._bubble_handle: Optional[Handle] = None
        self._sound_handle: Any = None
        self._sound_stop: Optional[DeferredCall] = None

    # --- Read-only state ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def lines(self) -> tuple[str, ...]:
        """Lines of the current run (empty while idle)."""
        return tuple(self._lines)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_line(self) -> Optional[str]:
        """Unwrapped visible line, or None when nothing is presented."""
        if self._state != SessionState.PRESENTING:
            return None
        return self._lines[self._index]

    @property
    def current_text(self) -> Optional[str]:
        """Visible line as wrapped for the bubble."""
        line = self.current_line
        if line is None:
            return None
        return wrap_text(line, self.speaker.max_chars_per_row)

    @property
    def elapsed_since_advance(self) -> float:
        return self._elapsed

    @property
    def intro_elapsed(self) -> float:
        return self._intro_elapsed

    @property
    def is_active(self) -> bool:
        return self._state != SessionState.IDLE

    @property
    def holds_lock(self) -> bool:
        return self._lock_token is not None

    # --- Transitions ---

    def show_prompt(self) -> bool:
        """
        Idle -> Prompting.

        A speaker with nothing to say does not prompt.

        Returns:
            True if the prompt was shown
        """
        if self._state != SessionState.IDLE:
            logger.debug(f"{self.name}: show_prompt ignored in {self._state.name}")
            return False

        if not self._load_lines():
            return False

        self._transition(SessionState.PROMPTING)
        self._show_prompt_overlay()
        return True

    def start(self) -> bool:
        """
        Idle/Prompting -> Presenting, showing the first line.

        Lines are split fresh from the speaker's script; an empty script
        leaves the state unchanged.

        Returns:
            True if dialogue started
        """
        if self._state not in (SessionState.IDLE, SessionState.PROMPTING):
            logger.debug(f"{self.name}: start ignored in {self._state.name}")
            return False

        lines = self._load_lines()
        if not lines:
            return False

        self._hide_prompt_overlay()
        self._lines = lines
        self._present_first_line()
        return True

    def begin_lock(
        self,
        intro_sound: Optional[str] = None,
        intro_volume: float = 1.0,
        intro_duration: float = 0.0,
    ) -> bool:
        """
        Idle -> Locked: freeze the player and play the intro sound.

        The first line appears from tick() once intro_duration has elapsed.

        Returns:
            True if the session locked
        """
        if self._state != SessionState.IDLE:
            logger.debug(f"{self.name}: begin_lock ignored in {self._state.name}")
            return False

        lines = self._load_lines()
        if not lines:
            return False

        self._lines = lines
        self._locking = True
        self._transition(SessionState.LOCKED)
        self._acquire_lock()

        self._intro_elapsed = 0.0
        self._intro_duration = max(0.0, intro_duration)
        if self.audio and intro_sound:
            self._intro_handle = self.audio.play(intro_sound, intro_volume, False)

        logger.info(f"{self.name}: locked, intro for {self._intro_duration:.2f}s")
        self._publish(DialogueEvent.LOCKED)
        return True

    def advance(self) -> bool:
        """
        Show the next line, or finish on the last one.

        Returns:
            True if a transition happened
        """
        if self._state != SessionState.PRESENTING:
            logger.debug(f"{self.name}: advance ignored in {self._state.name}")
            return False

        if self._index + 1 < len(self._lines):
            self._transition(SessionState.PRESENTING)
            self._index += 1
            self._elapsed = 0.0
            if self._bubble_handle is not None:
                self.presenter.update_text(self._bubble_handle, self.current_text)
            self._publish(DialogueEvent.LINE_SHOWN, index=self._index, line=self.current_line)
        else:
            self._finish()
        return True

    def cancel(self) -> None:
        """
        Any state -> Idle.

        Hides overlays, stops sounds, disarms deferred callbacks and
        releases the player lock.
        """
        was_active = self._state != SessionState.IDLE

        self._hide_bubble_overlay()
        self._hide_prompt_overlay()
        self._stop_intro_sound()
        self._stop_dialogue_sound()
        self._release_lock()

        self._reset_run()
        self._transition(SessionState.IDLE)

        if was_active:
            logger.debug(f"{self.name}: cancelled")
            self._publish(DialogueEvent.CANCELLED)

    def tick(self, dt: float, allow_auto_advance: bool = True) -> None:
        """
        Advance the timers by dt.

        Locked: counts the intro and presents the first line when it ends.
        Presenting: counts towards the auto-advance interval; at most one
        advance per tick, and none when allow_auto_advance is False.

        Args:
            dt: Seconds since the previous tick
            allow_auto_advance: False when a key already advanced this tick
        """
        dt = max(0.0, dt)

        if self._state == SessionState.LOCKED:
            self._intro_elapsed += dt
            if self._intro_elapsed >= self._intro_duration:
                self._stop_intro_sound()
                self._present_first_line()
            return

        if self._state != SessionState.PRESENTING:
            return

        interval = self.speaker.auto_advance_interval
        if interval <= 0:
            return

        self._elapsed += dt
        if allow_auto_advance and self._elapsed >= interval:
            self.advance()

    def set_max_chars_per_row(self, width: int) -> None:
        """Change the wrap width and re-wrap the visible line."""
        self.speaker.max_chars_per_row = width
        if self._state == SessionState.PRESENTING and self._bubble_handle is not None:
            self.presenter.update_text(self._bubble_handle, self.current_text)

    # --- Internals ---

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvalidTransition(self._state, target)
        self._state = target

    def _load_lines(self) -> list[str]:
        lines = self.speaker.dialogue_script.lines()
        if not lines:
            logger.warning(str(ConfigurationEmpty(self.name)))
        return lines

    def _present_first_line(self) -> None:
        self._index = 0
        self._elapsed = 0.0
        self._transition(SessionState.PRESENTING)
        self._bubble_handle = self.presenter.show_bubble(self.current_text, self.speaker.bubble)
        self._start_dialogue_sound()

        logger.info(f"{self.name}: started with {len(self._lines)} line(s)")
        self._publish(DialogueEvent.STARTED, lines=self.lines)
        self._publish(DialogueEvent.LINE_SHOWN, index=0, line=self.current_line)

    def _finish(self) -> None:
        target = SessionState.IDLE if self._locking else self.speaker.terminal_state
        line_count = len(self._lines)

        self._hide_bubble_overlay()
        self._release_lock()
        self._reset_run()
        self._transition(target)

        if target == SessionState.PROMPTING:
            self._show_prompt_overlay()

        logger.info(f"{self.name}: finished after {line_count} line(s)")
        self._publish(DialogueEvent.FINISHED, line_count=line_count)

    def _reset_run(self) -> None:
        self._lines = []
        self._index = 0
        self._elapsed = 0.0
        self._locking = False
        self._intro_elapsed = 0.0
        self._intro_duration = 0.0

    def _show_prompt_overlay(self) -> None:
        style = self.speaker.prompt
        self._prompt_handle = self.presenter.show_prompt(style.text, style)
        self._publish(DialogueEvent.PROMPT_SHOWN)

    def _hide_prompt_overlay(self) -> None:
        if self._prompt_handle is not None:
            self.presenter.hide(self._prompt_handle)
            self._prompt_handle = None

    def _hide_bubble_overlay(self) -> None:
        if self._bubble_handle is not None:
            self.presenter.hide(self._bubble_handle)
            self._bubble_handle = None

    def _start_dialogue_sound(self) -> None:
        clip = self.speaker.dialogue_sound
        if not self.audio or not clip:
            return

        self._stop_dialogue_sound()
        self._sound_handle = self.audio.play(clip, self.speaker.dialogue_sound_volume, False)
        if self.scheduler and self.speaker.dialogue_sound_duration > 0:
            self._sound_stop = self.scheduler.arm(
                self.speaker.dialogue_sound_duration,
                self._stop_dialogue_sound,
                label=f"{self.name} dialogue sound",
            )

    def _stop_dialogue_sound(self) -> None:
        if self._sound_stop is not None:
            if self.scheduler:
                self.scheduler.cancel(self._sound_stop)
            else:
                self._sound_stop.cancel()
            self._sound_stop = None
        if self.audio and self._sound_handle is not None:
            self.audio.stop(self._sound_handle)
        self._sound_handle = None

    def _stop_intro_sound(self) -> None:
        if self.audio and self._intro_handle is not None:
            self.audio.stop(self._intro_handle)
        self._intro_handle = None

    def _acquire_lock(self) -> None:
        if not self.player_lock:
            return
        try:
            self._lock_token = self.player_lock.acquire(self.name)
        except ResourceConflict as e:
            logger.error(f"{self.name}: {e}; continuing without freezing the player")
            self._lock_token = None

    def _release_lock(self) -> None:
        if self.player_lock and self._lock_token is not None:
            self.player_lock.release(self._lock_token)
        self._lock_token = None

    def _publish(self, event_type: DialogueEvent, **data: Any) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, session=self, entity=self.entity, **data)

    def __repr__(self) -> str:
        return f"DialogueSession({self.name!r}, {self._state.name}, line={self._index})"
