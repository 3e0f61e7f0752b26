import pytest
from unittest.mock import MagicMock
from roots_engine.core.scheduler import Scheduler
from roots_framework.components import Transform
from roots_framework.world.player import create_player
from roots_framework.world.scene_loader import DeferredSceneLoader

@pytest.fixture
def scheduler():
    return Scheduler()

@pytest.fixture
def player(world):
    return create_player(world)

def add_spawn(world, name, x, y):
    spawn = world.create_entity(name)
    spawn.add(Transform(x=x, y=y))
    return spawn

def test_load_after_delay(scheduler, world, player):
    on_load = MagicMock()
    loader = DeferredSceneLoader(scheduler, world, player, on_load=on_load)

    loader.load_after("street", 1.0)
    assert loader.pending is not None

    scheduler.update(0.5)
    on_load.assert_not_called()

    scheduler.update(0.5)
    on_load.assert_called_once_with("street")
    assert loader.current_scene == "street"
    assert loader.pending is None

def test_newer_load_replaces_pending(scheduler, world, player):
    on_load = MagicMock()
    loader = DeferredSceneLoader(scheduler, world, player, on_load=on_load)

    loader.load_after("street", 1.0)
    loader.load_after("house", 2.0)
    scheduler.update(1.0)
    scheduler.update(1.0)

    on_load.assert_called_once_with("house")

def test_cancel(scheduler, world, player):
    on_load = MagicMock()
    loader = DeferredSceneLoader(scheduler, world, player, on_load=on_load)
    loader.load_after("street", 1.0)

    loader.cancel()
    scheduler.update(5.0)

    on_load.assert_not_called()
    assert loader.current_scene is None

def test_reposition_waits_for_load(scheduler, world, player):
    add_spawn(world, "street_door", 300, 40)
    loader = DeferredSceneLoader(scheduler, world, player)

    loader.load_after("street", 0.5)
    loader.reposition_actor_to("street_door")
    assert player.get(Transform).position == (0, 0)

    scheduler.update(0.5)
    assert player.get(Transform).position == (300, 40)

def test_reposition_immediately_without_load(scheduler, world, player):
    add_spawn(world, "well", 12, 34)
    loader = DeferredSceneLoader(scheduler, world, player)

    loader.reposition_actor_to("well")

    assert player.get(Transform).position == (12, 34)

def test_missing_spawn_point_warns(scheduler, world, player, caplog):
    loader = DeferredSceneLoader(scheduler, world, player)

    with caplog.at_level("WARNING"):
        loader.reposition_actor_to("nowhere")

    assert player.get(Transform).position == (0, 0)
    assert "Spawn point not found: nowhere" in caplog.text
