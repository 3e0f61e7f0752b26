"""
Interaction components - trigger policy, zones, scene transitions.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

import pygame
from pydantic import Field

from roots_engine.core.component import Component, register_component


class TriggerMode(Enum):
    """How a speaker's dialogue is opened."""
    KEY_GATED = auto()      # Prompt on enter, key to open and advance
    AUTO_PLAY = auto()      # Opens on enter, advances on a timer
    DELAY_LOCKING = auto()  # Opens after staying in zone, freezes the player


@register_component
class InteractionTrigger(Component):
    """
    Maps zone presence and key presses onto a dialogue session.

    Attributes:
        mode: Trigger variant
        interact_key: pygame key code that opens/advances dialogue
        skip_key: Optional second key that only advances a presented line
        allow_key_advance: Key may advance early in AUTO_PLAY/DELAY_LOCKING
        entry_delay: Seconds of continuous presence before DELAY_LOCKING fires
        intro_sound: Clip played while locked, before the first line
        intro_volume: Volume for intro_sound
        intro_duration: Seconds the intro plays before the first line
        once_only: DELAY_LOCKING fires only once per speaker
    """
    mode: TriggerMode = TriggerMode.KEY_GATED
    interact_key: int = pygame.K_e
    skip_key: Optional[int] = None
    allow_key_advance: bool = True
    entry_delay: float = Field(default=3.0, ge=0.0)
    intro_sound: Optional[str] = None
    intro_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    intro_duration: float = Field(default=2.0, ge=0.0)
    once_only: bool = True


@register_component
class TriggerZone(Component):
    """
    Invisible rectangular trigger region anchored at the owner's Transform.

    Attributes:
        width: Zone width
        height: Zone height
        offset_x: Left edge relative to the owner's x
        offset_y: Top edge relative to the owner's y
        is_active: Whether the zone reports enter/exit
        filter_tags: Only entities with one of these tags count (empty = all)
        entities_inside: Ids of entities currently inside
    """
    width: float = Field(default=64.0, gt=0.0)
    height: float = Field(default=64.0, gt=0.0)
    offset_x: float = -32.0
    offset_y: float = -32.0
    is_active: bool = True
    filter_tags: set[str] = Field(default_factory=lambda: {"player"})
    entities_inside: set[int] = Field(default_factory=set)

    def rect(self, x: float, y: float) -> tuple[float, float, float, float]:
        """Zone rectangle (left, top, width, height) for an owner at (x, y)."""
        return (x + self.offset_x, y + self.offset_y, self.width, self.height)

    def contains(self, owner_x: float, owner_y: float, px: float, py: float) -> bool:
        left, top, width, height = self.rect(owner_x, owner_y)
        return left <= px < left + width and top <= py < top + height

    def accepts(self, tags: frozenset[str]) -> bool:
        """Check the tag filter."""
        return not self.filter_tags or bool(self.filter_tags & tags)

    def entity_entered(self, entity_id: int) -> bool:
        """
        Record an entry.

        Returns:
            True if this is a new entry
        """
        if entity_id not in self.entities_inside:
            self.entities_inside.add(entity_id)
            return True
        return False

    def entity_exited(self, entity_id: int) -> bool:
        """
        Record an exit.

        Returns:
            True if entity was inside
        """
        if entity_id in self.entities_inside:
            self.entities_inside.discard(entity_id)
            return True
        return False


@register_component
class SceneTransition(Component):
    """
    Scene to load once the owner's dialogue finishes.

    Attributes:
        scene_id: Scene to load; empty means none configured
        delay: Seconds between finish and load
        spawn_point: Spawn point id the player is moved to
    """
    scene_id: str = ""
    delay: float = Field(default=0.5, ge=0.0)
    spawn_point: Optional[str] = None
