import os
import sys
import pytest
from unittest.mock import MagicMock, patch

# Ensure roots_engine / roots_framework can be imported without installing
sys.path.append(os.getcwd())

@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.quit'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.time'), \
         patch('pygame.mixer'), \
         patch('pygame.font'), \
         patch('pygame.draw'), \
         patch('pygame.key'), \
         patch('pygame.Surface'):

        import pygame
        pygame.time.get_ticks = MagicMock(return_value=0)

        yield

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from roots_engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def world(event_bus):
    """Fresh World for each test, sharing the event_bus fixture."""
    from roots_engine.core.world import World
    return World(event_bus)

@pytest.fixture
def sample_entity(world):
    """Entity with a Transform."""
    from roots_framework.components import Transform

    entity = world.create_entity("sample")
    entity.add(Transform(x=0, y=0))
    return entity

@pytest.fixture
def presenter():
    """PresentationPort double handing out increasing integer handles."""
    from roots_framework.dialogue.ports import PresentationPort

    port = MagicMock(spec=PresentationPort)
    handles = iter(range(1, 10_000))
    port.show_prompt.side_effect = lambda text, style: next(handles)
    port.show_bubble.side_effect = lambda text, style: next(handles)
    return port

@pytest.fixture
def audio():
    """AudioPort double returning a fresh handle per play()."""
    from roots_framework.dialogue.ports import AudioPort

    port = MagicMock(spec=AudioPort)
    port.play.side_effect = lambda clip, volume=1.0, loop=False: MagicMock(name=f"channel:{clip}")
    return port

@pytest.fixture
def recorder(event_bus):
    """Collects every DialogueEvent published on event_bus."""
    from roots_framework.dialogue.session import DialogueEvent

    events = []

    def record(event):
        events.append(event)

    for event_type in DialogueEvent:
        event_bus.subscribe(event_type, record, weak=False)
    return events
