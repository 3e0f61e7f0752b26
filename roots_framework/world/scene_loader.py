"""
Deferred scene loading on top of the Scheduler.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from roots_engine.core import Entity, World
from roots_engine.core.scheduler import DeferredCall, Scheduler
from roots_framework.components import Transform
from roots_framework.dialogue.ports import SceneLoader

logger = logging.getLogger(__name__)


class DeferredSceneLoader(SceneLoader):
    """
    SceneLoader that switches scenes after a delay.

    Spawn points are entities whose name is the spawn point id and which
    carry a Transform. The scene switch itself is delegated to on_load;
    a reposition requested while a load is pending happens right after it.

    Usage:
        loader = DeferredSceneLoader(game.scheduler, game.world, player, on_load=build_scene)
        loader.load_after("house", 0.5)
        loader.reposition_actor_to("house_door")
    """

    def __init__(
        self,
        scheduler: Scheduler,
        world: World,
        actor: Entity,
        on_load: Optional[Callable[[str], None]] = None,
    ):
        self.scheduler = scheduler
        self.world = world
        self.actor = actor
        self.on_load = on_load
        self._pending: Optional[DeferredCall] = None
        self._spawn_after_load: Optional[str] = None
        self._current_scene: Optional[str] = None

    @property
    def current_scene(self) -> Optional[str]:
        return self._current_scene

    @property
    def pending(self) -> Optional[DeferredCall]:
        """The armed load, if any."""
        if self._pending is not None and self._pending.pending:
            return self._pending
        return None

    def load_after(self, scene_id: str, delay_seconds: float) -> None:
        # A newer request replaces one that has not fired yet
        self.cancel()
        self._pending = self.scheduler.arm(
            delay_seconds,
            lambda: self._load(scene_id),
            label=f"load {scene_id}",
        )
        logger.info(f"Loading scene {scene_id} in {delay_seconds:.2f}s")

    def cancel(self) -> None:
        """Disarm a pending load and its reposition."""
        if self._pending is not None:
            self.scheduler.cancel(self._pending)
            self._pending = None
        self._spawn_after_load = None

    def reposition_actor_to(self, spawn_point_id: str) -> None:
        if self.pending is not None:
            self._spawn_after_load = spawn_point_id
            return
        self._move_actor(spawn_point_id)

    def _move_actor(self, spawn_point_id: str) -> None:
        spawn = self.world.get_entity_by_name(spawn_point_id)
        if spawn is None or not spawn.has(Transform):
            logger.warning(f"Spawn point not found: {spawn_point_id}")
            return

        target = spawn.get(Transform)
        self.actor.get(Transform).move_to(target.x, target.y)
        logger.debug(f"Moved {self.actor.name} to {spawn_point_id}")

    def _load(self, scene_id: str) -> None:
        self._pending = None
        self._current_scene = scene_id
        logger.info(f"Scene loaded: {scene_id}")
        if self.on_load:
            self.on_load(scene_id)

        spawn, self._spawn_after_load = self._spawn_after_load, None
        if spawn:
            self._move_actor(spawn)
