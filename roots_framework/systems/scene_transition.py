"""
Scene transition handler - loads the next scene when a dialogue finishes.
"""

from __future__ import annotations

import logging

from roots_engine.core.events import Event, EventBus
from roots_framework.components import SceneTransition
from roots_framework.dialogue.ports import SceneLoader
from roots_framework.dialogue.session import DialogueEvent

logger = logging.getLogger(__name__)


class SceneTransitionHandler:
    """
    Listens for DialogueEvent.FINISHED and hands the speaker's
    SceneTransition to a SceneLoader.

    The bus holds the handler weakly; keep a reference for as long as
    transitions should happen.
    """

    def __init__(self, scene_loader: SceneLoader, event_bus: EventBus):
        self.scene_loader = scene_loader
        self.event_bus = event_bus
        event_bus.subscribe(DialogueEvent.FINISHED, self._on_finished)

    def detach(self) -> None:
        self.event_bus.unsubscribe(DialogueEvent.FINISHED, self._on_finished)

    def _on_finished(self, event: Event) -> None:
        entity = event.get("entity")
        if entity is None:
            return

        transition = entity.try_get(SceneTransition)
        if transition is None:
            return

        if not transition.scene_id:
            logger.warning(f"{entity.name} has a SceneTransition without a scene_id")
            return

        self.scene_loader.load_after(transition.scene_id, transition.delay)
        if transition.spawn_point:
            self.scene_loader.reposition_actor_to(transition.spawn_point)
