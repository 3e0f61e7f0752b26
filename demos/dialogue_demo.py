"""
Dialogue Demo: three speakers, one per trigger mode

Demonstrates:
- KEY_GATED: walk up to the villager and press E
  (Space skips to the next line)
- AUTO_PLAY: the sign talks as soon as you step next to it
- DELAY_LOCKING: stand by the phone for a few seconds and it rings
- Scene transition after the phone call
- Speakers loaded from JSON with SpeakerDatabase

Run: python -m demos.dialogue_demo
"""

import logging
from pathlib import Path

import pygame

from roots_engine.core import Entity, Game, GameConfig, System
from roots_engine.core.actions import DEFAULT_KEY_BINDINGS, Action
from roots_engine.ui import UIRenderer
from roots_framework.components import (
    DialogueSpeaker,
    InteractionTrigger,
    Transform,
    TriggerMode,
    TriggerZone,
)
from roots_framework.dialogue.config import SpeakerDatabase
from roots_framework.dialogue.presenter import SurfacePresenter
from roots_framework.systems import DialogueSystem, SceneTransitionHandler, ZoneSystem
from roots_framework.world import DeferredSceneLoader, PlayerController, PlayerLock, create_player

DATA_DIR = Path(__file__).parent / "data" / "speakers"


# ============================================================================
# SYSTEMS
# ============================================================================

class PlayerInputSystem(System):
    """Runs the player controller before zones are tested."""
    priority = 20

    def __init__(self, controller: PlayerController):
        super().__init__()
        self.controller = controller

    def update(self, dt: float) -> None:
        self.controller.update(dt)

    def process_entity(self, entity: Entity, dt: float) -> None:
        pass


# ============================================================================
# DRAWING
# ============================================================================

def draw_entities(game: Game, player: Entity):
    def draw(surface: pygame.Surface) -> None:
        for entity in game.world.get_entities_with(Transform, TriggerZone):
            t = entity.get(Transform)
            zone = entity.get(TriggerZone)
            left, top, w, h = zone.rect(t.x, t.y)
            pygame.draw.rect(surface, (60, 70, 60), pygame.Rect(left, top, w, h), 1)
            pygame.draw.rect(surface, (200, 160, 90), pygame.Rect(t.x - 8, t.y - 8, 16, 16))

        pt = player.get(Transform)
        pygame.draw.circle(surface, (120, 180, 255), (int(pt.x), int(pt.y)), 8)
    return draw


# ============================================================================
# MAIN
# ============================================================================

def main():
    logging.basicConfig(level=logging.INFO)

    game = Game(GameConfig(title="Roots - Dialogue Demo"))
    world = game.world

    player = create_player(world, 480, 440)
    controller = PlayerController(player, game.input)
    player_lock = PlayerLock(controller)

    # Spawn point used after the phone call
    door = world.create_entity("street_door")
    door.add(Transform(x=480, y=480))

    # Villager built in code
    villager = world.create_entity("Villager")
    villager.add(Transform(x=200, y=260))
    villager.add(DialogueSpeaker(
        script="Morning!\nThe well dried up last week.\nMaybe ask at the house by the road.",
        auto_advance=False,
    ))
    villager.add(InteractionTrigger(
        mode=TriggerMode.KEY_GATED,
        skip_key=DEFAULT_KEY_BINDINGS[Action.SKIP][0],
    ))
    villager.add(TriggerZone(width=96, height=96, offset_x=-48, offset_y=-48))

    # Sign and phone from JSON
    database = SpeakerDatabase()
    database.load_directory(DATA_DIR)
    if "sign" in database:
        database.create_speaker(world, "sign")
    if "phone" in database:
        database.create_speaker(world, "phone")

    presenter = SurfacePresenter(UIRenderer(game.screen))
    world.add_system(PlayerInputSystem(controller))
    world.add_system(ZoneSystem(player))
    world.add_system(DialogueSystem(
        game.input,
        presenter.view_for,
        audio=game.audio,
        player_lock=player_lock,
        scheduler=game.scheduler,
    ))

    loader = DeferredSceneLoader(
        game.scheduler,
        world,
        player,
        on_load=lambda scene_id: pygame.display.set_caption(f"Roots - {scene_id}"),
    )
    transitions = SceneTransitionHandler(loader, game.event_bus)

    game.add_draw_callback(draw_entities(game, player))
    game.add_draw_callback(presenter.draw)
    game.run()
    transitions.detach()


if __name__ == "__main__":
    main()
