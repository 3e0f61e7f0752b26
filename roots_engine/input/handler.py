"""
Input handler with action-based abstraction.

Translates pygame keyboard events into per-frame key and Action state.
"Just pressed" queries are edge-triggered: they are true for exactly one
update() after the physical press.

Usage:
    for event in pygame.event.get():
        input.process_event(event)
    input.update()

    if input.is_key_just_pressed(pygame.K_e):
        ...
    dx, dy = input.get_movement_vector()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import pygame

from roots_engine.core.actions import Action, DEFAULT_KEY_BINDINGS
from roots_engine.core.events import EventBus


class InputEvent(Enum):
    """Input-specific events."""
    ACTION_PRESSED = "input.action_pressed"
    ACTION_RELEASED = "input.action_released"


@dataclass
class InputState:
    """Input state for the current frame."""
    actions_pressed: set[Action] = field(default_factory=set)
    actions_just_pressed: set[Action] = field(default_factory=set)
    actions_just_released: set[Action] = field(default_factory=set)

    keys_pressed: set[int] = field(default_factory=set)
    keys_just_pressed: set[int] = field(default_factory=set)
    keys_just_released: set[int] = field(default_factory=set)


class InputHandler:
    """
    Keyboard input source.

    Raw events are folded into the held sets as they arrive; update()
    computes the just-pressed/just-released edges once per tick.
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus

        self._state = InputState()
        self._prev_actions: set[Action] = set()
        self._prev_keys: set[int] = set()

        self._key_bindings = {action: list(keys) for action, keys in DEFAULT_KEY_BINDINGS.items()}
        self._reverse_key_bindings: dict[int, list[Action]] = {}
        self._rebuild_reverse_bindings()

    def _rebuild_reverse_bindings(self) -> None:
        self._reverse_key_bindings.clear()
        for action, keys in self._key_bindings.items():
            for key in keys:
                self._reverse_key_bindings.setdefault(key, []).append(action)

    # Queries

    def is_action_pressed(self, action: Action) -> bool:
        """Check if an action is currently held down."""
        return action in self._state.actions_pressed

    def is_action_just_pressed(self, action: Action) -> bool:
        """Check if an action was pressed this frame."""
        return action in self._state.actions_just_pressed

    def is_action_just_released(self, action: Action) -> bool:
        """Check if an action was released this frame."""
        return action in self._state.actions_just_released

    def is_key_pressed(self, key: int) -> bool:
        """Check if a raw key is held."""
        return key in self._state.keys_pressed

    def is_key_just_pressed(self, key: int) -> bool:
        """Check if a raw key was pressed this frame."""
        return key in self._state.keys_just_pressed

    def get_movement_vector(self) -> tuple[float, float]:
        """
        Get the movement direction from held movement actions.

        Returns:
            (x, y) with diagonals normalized
        """
        x = 0.0
        y = 0.0

        if self.is_action_pressed(Action.MOVE_LEFT):
            x -= 1.0
        if self.is_action_pressed(Action.MOVE_RIGHT):
            x += 1.0
        if self.is_action_pressed(Action.MOVE_UP):
            y -= 1.0
        if self.is_action_pressed(Action.MOVE_DOWN):
            y += 1.0

        if x != 0 and y != 0:
            x *= 0.7071
            y *= 0.7071

        return (x, y)

    # Bindings

    def bind_key(self, action: Action, key: int) -> None:
        """Add a key binding for an action."""
        keys = self._key_bindings.setdefault(action, [])
        if key not in keys:
            keys.append(key)
        self._rebuild_reverse_bindings()

    def unbind_key(self, action: Action, key: int) -> None:
        """Remove a key binding for an action."""
        if key in self._key_bindings.get(action, []):
            self._key_bindings[action].remove(key)
        self._rebuild_reverse_bindings()

    def get_bindings(self, action: Action) -> list[int]:
        """Get all key bindings for an action."""
        return list(self._key_bindings.get(action, []))

    # Frame processing

    def process_event(self, event: pygame.event.Event) -> None:
        """Fold a pygame event into the held state."""
        if event.type == pygame.KEYDOWN:
            self.press_key(event.key)
        elif event.type == pygame.KEYUP:
            self.release_key(event.key)

    def press_key(self, key: int) -> None:
        """Mark a key as held (from an event or a scripted source)."""
        self._state.keys_pressed.add(key)
        for action in self._reverse_key_bindings.get(key, []):
            self._state.actions_pressed.add(action)

    def release_key(self, key: int) -> None:
        """Mark a key as released."""
        self._state.keys_pressed.discard(key)

        for action in self._reverse_key_bindings.get(key, []):
            # Keep the action held while another bound key is still down
            still_pressed = any(
                other != key and other in self._state.keys_pressed
                for other in self._key_bindings.get(action, [])
            )
            if not still_pressed:
                self._state.actions_pressed.discard(action)

    def update(self) -> None:
        """
        Compute this frame's edges.

        Call once at the start of each fixed update.
        """
        self._state.actions_just_pressed = self._state.actions_pressed - self._prev_actions
        self._state.actions_just_released = self._prev_actions - self._state.actions_pressed
        self._state.keys_just_pressed = self._state.keys_pressed - self._prev_keys
        self._state.keys_just_released = self._prev_keys - self._state.keys_pressed

        if self.event_bus:
            for action in self._state.actions_just_pressed:
                self.event_bus.publish(InputEvent.ACTION_PRESSED, action=action)
            for action in self._state.actions_just_released:
                self.event_bus.publish(InputEvent.ACTION_RELEASED, action=action)

        self._prev_actions = set(self._state.actions_pressed)
        self._prev_keys = set(self._state.keys_pressed)
