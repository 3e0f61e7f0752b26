"""
Interaction trigger - maps zone presence and key presses onto a session.

One controller class covers all trigger modes; the mode on the
InteractionTrigger component selects the policy:

    KEY_GATED      enter -> prompt, key -> start/advance, exit -> cancel
    AUTO_PLAY      enter -> start, timer advances, key may advance early
    DELAY_LOCKING  stay entry_delay seconds -> lock + intro, then present

The controller holds no dialogue text; it only decides which session
operation to call.
"""

from __future__ import annotations

import logging

from roots_framework.components.dialogue import SessionState
from roots_framework.components.interaction import InteractionTrigger, TriggerMode
from roots_framework.dialogue.session import DialogueSession

logger = logging.getLogger(__name__)


class TriggerController:
    """
    Per-speaker policy driving a DialogueSession.

    Usage:
        controller = TriggerController(session, trigger)
        controller.on_zone_enter()
        controller.update(dt, key_pressed=input.is_key_just_pressed(trigger.interact_key))
    """

    def __init__(self, session: DialogueSession, trigger: InteractionTrigger):
        self.session = session
        self.trigger = trigger

        self._in_zone = False
        self._delay_elapsed = 0.0
        self._fired = False

    @property
    def mode(self) -> TriggerMode:
        return self.trigger.mode

    @property
    def in_zone(self) -> bool:
        return self._in_zone

    @property
    def delay_elapsed(self) -> float:
        """Continuous presence accumulated towards entry_delay."""
        return self._delay_elapsed

    @property
    def fired(self) -> bool:
        """Whether DELAY_LOCKING has already opened the dialogue."""
        return self._fired

    def on_zone_enter(self) -> None:
        """The tracked actor entered the speaker's zone."""
        if self._in_zone:
            return
        self._in_zone = True
        self._delay_elapsed = 0.0

        mode = self.trigger.mode
        if mode == TriggerMode.KEY_GATED:
            self.session.show_prompt()
        elif mode == TriggerMode.AUTO_PLAY:
            self.session.start()
        elif mode == TriggerMode.DELAY_LOCKING:
            logger.debug(f"{self.session.name}: waiting {self.trigger.entry_delay:.2f}s before locking")

    def on_zone_exit(self) -> None:
        """
        The tracked actor left the zone.

        Cancels the session in every state and resets the entry delay to
        zero, so re-entry starts counting from scratch. A DELAY_LOCKING run
        cut short during its intro never showed a line, so it re-arms even
        when once_only is set.
        """
        if not self._in_zone:
            return
        self._in_zone = False
        self._delay_elapsed = 0.0
        interrupted_intro = self.session.state == SessionState.LOCKED
        self.session.cancel()

        if self.trigger.mode == TriggerMode.DELAY_LOCKING:
            if interrupted_intro or not self.trigger.once_only:
                self._fired = False

    def update(self, dt: float, key_pressed: bool = False, skip_pressed: bool = False) -> None:
        """
        Per-tick step.

        Args:
            dt: Seconds since the previous tick
            key_pressed: Interact key went down this tick
            skip_pressed: Skip key went down this tick
        """
        key_pressed = key_pressed and self._in_zone
        # Skip only acts on a line that was already up before this tick
        skip_pressed = (
            skip_pressed
            and self._in_zone
            and self.session.state == SessionState.PRESENTING
        )

        mode = self.trigger.mode
        if mode == TriggerMode.KEY_GATED:
            advanced = self._update_key_gated(key_pressed)
        elif mode == TriggerMode.AUTO_PLAY:
            advanced = self._update_auto_play(key_pressed)
        elif mode == TriggerMode.DELAY_LOCKING:
            if self._count_entry_delay(dt):
                # Intro time starts on the next tick
                return
            advanced = self._update_delay_locking(key_pressed)
        else:
            advanced = False

        if skip_pressed and not advanced:
            advanced = self.session.advance()

        # A key advance consumes this tick's timer advance
        self.session.tick(dt, allow_auto_advance=not advanced)

    def _update_key_gated(self, key_pressed: bool) -> bool:
        if not key_pressed:
            return False

        state = self.session.state
        if state == SessionState.PROMPTING:
            return self.session.start()
        if state == SessionState.PRESENTING:
            return self.session.advance()
        return False

    def _update_auto_play(self, key_pressed: bool) -> bool:
        if not key_pressed:
            return False

        state = self.session.state
        if state == SessionState.PRESENTING and self.trigger.allow_key_advance:
            return self.session.advance()
        if state == SessionState.PROMPTING:
            # Finished run parked on the prompt; the key replays it
            return self.session.start()
        return False

    def _count_entry_delay(self, dt: float) -> bool:
        """
        Accumulate presence and lock once entry_delay is reached.

        Returns:
            True if the session locked this tick
        """
        if not self._in_zone or self._fired or self.session.state != SessionState.IDLE:
            return False

        self._delay_elapsed += max(0.0, dt)
        if self._delay_elapsed < self.trigger.entry_delay:
            return False

        self._delay_elapsed = 0.0
        locked = self.session.begin_lock(
            intro_sound=self.trigger.intro_sound,
            intro_volume=self.trigger.intro_volume,
            intro_duration=self.trigger.intro_duration,
        )
        if locked:
            self._fired = True
        return locked

    def _update_delay_locking(self, key_pressed: bool) -> bool:
        if key_pressed and self.trigger.allow_key_advance and self.session.state == SessionState.PRESENTING:
            return self.session.advance()
        return False
