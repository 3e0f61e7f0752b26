"""
Zone system - reports when the tracked actor crosses trigger zones.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from roots_engine.core import Entity, System
from roots_framework.components import Transform, TriggerZone

logger = logging.getLogger(__name__)


class ZoneEvent(Enum):
    """Zone crossing events. Data: zone (zone owner), entity (actor)."""
    ENTERED = auto()
    EXITED = auto()


class ZoneSystem(System):
    """
    Rectangle test of one actor against every TriggerZone.

    Each crossing is published as soon as it is seen; flicker across an
    edge produces one event per crossing. Hosts with their own collision
    code can skip this system and call notify_enter/notify_exit.

    Usage:
        world.add_system(ZoneSystem(player))
    """

    required_components = [Transform, TriggerZone]
    priority = 10

    def __init__(self, actor: Optional[Entity] = None, actor_tag: str = "player"):
        super().__init__()
        self.actor = actor
        self.actor_tag = actor_tag

    def pre_update(self, dt: float) -> None:
        if self.actor is None or self.actor.world is not self.world:
            self.actor = next(iter(self.world.get_entities_with_tag(self.actor_tag)), None)

    def process_entity(self, entity: Entity, dt: float) -> None:
        actor = self.actor
        if actor is None or entity is actor or not actor.has(Transform):
            return

        zone = entity.get(TriggerZone)
        if not zone.is_active or not zone.accepts(actor.tags):
            self.notify_exit(entity, actor)
            return

        owner = entity.get(Transform)
        target = actor.get(Transform)
        if zone.contains(owner.x, owner.y, target.x, target.y):
            self.notify_enter(entity, actor)
        else:
            self.notify_exit(entity, actor)

    def notify_enter(self, zone_entity: Entity, actor: Optional[Entity] = None) -> bool:
        """
        Record that actor is inside zone_entity's zone.

        Returns:
            True if this was a new entry (and ENTERED was published)
        """
        actor = actor or self.actor
        if actor is None:
            return False

        if not zone_entity.get(TriggerZone).entity_entered(actor.id):
            return False

        logger.debug(f"{actor.name} entered {zone_entity.name}")
        self.world.event_bus.publish(ZoneEvent.ENTERED, zone=zone_entity, entity=actor)
        return True

    def notify_exit(self, zone_entity: Entity, actor: Optional[Entity] = None) -> bool:
        """
        Record that actor left zone_entity's zone.

        Returns:
            True if actor was inside (and EXITED was published)
        """
        actor = actor or self.actor
        if actor is None:
            return False

        if not zone_entity.get(TriggerZone).entity_exited(actor.id):
            return False

        logger.debug(f"{actor.name} left {zone_entity.name}")
        self.world.event_bus.publish(ZoneEvent.EXITED, zone=zone_entity, entity=actor)
        return True
