"""
Input action definitions.

Actions abstract raw keys into semantic intents so key rebinding does not
touch game logic. Dialogue triggers are configured with a raw key code
(the interact key); player movement and menus go through Actions.

Usage:
    if input.is_action_just_pressed(Action.INTERACT):
        ...
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """Semantic input actions."""

    # Movement
    MOVE_UP = auto()
    MOVE_DOWN = auto()
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()

    # Interaction
    INTERACT = auto()
    SKIP = auto()

    # System
    PAUSE = auto()
    QUIT = auto()


DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    Action.MOVE_UP: [pygame.K_UP, pygame.K_w],
    Action.MOVE_DOWN: [pygame.K_DOWN, pygame.K_s],
    Action.MOVE_LEFT: [pygame.K_LEFT, pygame.K_a],
    Action.MOVE_RIGHT: [pygame.K_RIGHT, pygame.K_d],

    Action.INTERACT: [pygame.K_e],
    Action.SKIP: [pygame.K_SPACE],

    Action.PAUSE: [pygame.K_p],
    Action.QUIT: [pygame.K_ESCAPE],
}
