"""
Dialogue system - owns one session and trigger controller per speaker.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from roots_engine.core import Entity, System, World
from roots_engine.core.events import EngineEvent, Event
from roots_engine.core.scheduler import Scheduler
from roots_framework.components import DialogueSpeaker, InteractionTrigger
from roots_framework.dialogue.ports import (
    AudioPort,
    InputSource,
    PlayerLockPort,
    PresentationPort,
)
from roots_framework.dialogue.session import DialogueSession
from roots_framework.dialogue.trigger import TriggerController
from roots_framework.systems.zone import ZoneEvent

logger = logging.getLogger(__name__)

PresenterFactory = Callable[[Entity], PresentationPort]


class DialogueSystem(System):
    """
    Drives every entity with DialogueSpeaker + InteractionTrigger.

    Sessions are built lazily the first time an entity is seen. Zone
    events are forwarded to the entity's controller; each tick the
    controller gets the edge state of its interact key.

    Usage:
        world.add_system(DialogueSystem(
            game.input,
            presenter.view_for,
            audio=game.audio,
            player_lock=PlayerLock(controller),
            scheduler=game.scheduler,
        ))
    """

    required_components = [DialogueSpeaker, InteractionTrigger]
    priority = 0

    def __init__(
        self,
        input_source: Optional[InputSource],
        presenter_factory: PresenterFactory,
        *,
        audio: Optional[AudioPort] = None,
        player_lock: Optional[PlayerLockPort] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        super().__init__()
        self.input = input_source
        self.presenter_factory = presenter_factory
        self.audio = audio
        self.player_lock = player_lock
        self.scheduler = scheduler
        self._controllers: dict[int, TriggerController] = {}

    def on_add(self, world: World) -> None:
        super().on_add(world)
        bus = world.event_bus
        bus.subscribe(ZoneEvent.ENTERED, self._on_zone_entered)
        bus.subscribe(ZoneEvent.EXITED, self._on_zone_exited)
        bus.subscribe(EngineEvent.ENTITY_DESTROYED, self._on_entity_destroyed)

    def on_remove(self) -> None:
        bus = self.world.event_bus
        bus.unsubscribe(ZoneEvent.ENTERED, self._on_zone_entered)
        bus.unsubscribe(ZoneEvent.EXITED, self._on_zone_exited)
        bus.unsubscribe(EngineEvent.ENTITY_DESTROYED, self._on_entity_destroyed)

        for controller in self._controllers.values():
            controller.session.cancel()
        self._controllers.clear()
        super().on_remove()

    # Lookup

    def controller_for(self, entity: Entity) -> TriggerController:
        """Get (or build) the controller for a speaker entity."""
        controller = self._controllers.get(entity.id)
        if controller is None:
            session = DialogueSession(
                entity.get(DialogueSpeaker),
                self.presenter_factory(entity),
                audio=self.audio,
                player_lock=self.player_lock,
                scheduler=self.scheduler,
                event_bus=self.world.event_bus,
                entity=entity,
            )
            controller = TriggerController(session, entity.get(InteractionTrigger))
            self._controllers[entity.id] = controller
            logger.debug(f"Dialogue session created for {entity.name}")
        return controller

    def session_for(self, entity: Entity) -> DialogueSession:
        return self.controller_for(entity).session

    # Zone forwarding

    def enter_zone(self, entity: Entity) -> None:
        """Treat entity's zone as entered. Used to start cutscenes at scene start."""
        if entity.has(DialogueSpeaker, InteractionTrigger):
            self.controller_for(entity).on_zone_enter()

    def exit_zone(self, entity: Entity) -> None:
        if entity.has(DialogueSpeaker, InteractionTrigger):
            self.controller_for(entity).on_zone_exit()

    def _on_zone_entered(self, event: Event) -> None:
        self.enter_zone(event["zone"])

    def _on_zone_exited(self, event: Event) -> None:
        self.exit_zone(event["zone"])

    def _on_entity_destroyed(self, event: Event) -> None:
        controller = self._controllers.pop(event["entity"].id, None)
        if controller is not None:
            controller.session.cancel()

    # Per tick

    def process_entity(self, entity: Entity, dt: float) -> None:
        controller = self.controller_for(entity)
        key = controller.trigger.interact_key
        pressed = bool(self.input and self.input.is_key_just_pressed(key))
        skip_key = controller.trigger.skip_key
        skipped = bool(
            self.input
            and skip_key is not None
            and self.input.is_key_just_pressed(skip_key)
        )
        controller.update(dt, pressed, skipped)
