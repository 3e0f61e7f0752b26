"""
Core Game class with fixed timestep game loop.

The Game class is the host for everything the dialogue framework needs:
- Window creation (pygame software surface)
- Fixed timestep update loop
- Per-frame input edges, deferred callbacks and world systems
- Draw callbacks for overlays
"""

from __future__ import annotations

import logging
from typing import Callable

import pygame

from roots_engine.audio.manager import AudioManager
from roots_engine.core.actions import Action
from roots_engine.core.clock import Clock
from roots_engine.core.events import EventBus, EngineEvent
from roots_engine.core.scheduler import Scheduler
from roots_engine.core.world import World
from roots_engine.input.handler import InputHandler

logger = logging.getLogger(__name__)

DrawCallback = Callable[[pygame.Surface], None]


class GameConfig:
    """Configuration for the game host."""

    def __init__(
        self,
        title: str = "Roots",
        width: int = 960,
        height: int = 540,
        target_fps: int = 60,
        fixed_timestep: float = 1 / 60,
        max_frame_skip: int = 5,
        background: tuple[int, int, int] = (20, 24, 20),
        fullscreen: bool = False,
    ):
        self.title = title
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.fixed_timestep = fixed_timestep
        self.max_frame_skip = max_frame_skip
        self.background = background
        self.fullscreen = fullscreen


class Game:
    """
    Main game host.

    Owns the event bus, input handler, scheduler, audio manager and world.
    step() is the single fixed update; run() feeds it from the clock.

    Usage:
        game = Game(GameConfig(title="Village"))
        game.world.add_system(ZoneSystem(player))
        game.add_draw_callback(presenter.draw)
        game.run()
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self._running = False
        self._paused = False

        pygame.init()

        flags = pygame.FULLSCREEN if self.config.fullscreen else 0
        self.screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            flags
        )
        pygame.display.set_caption(self.config.title)

        # Core services
        self.event_bus = EventBus()
        self.input = InputHandler(self.event_bus)
        self.scheduler = Scheduler()
        self.audio = AudioManager(self.event_bus)
        self.audio.init()
        self.world = World(self.event_bus)

        # Timing
        self.clock = Clock(self.config.target_fps)
        self._accumulator = 0.0

        self._draw_callbacks: list[DrawCallback] = []

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    def add_draw_callback(self, callback: DrawCallback) -> None:
        """Register a callback drawn after the background each frame."""
        self._draw_callbacks.append(callback)

    def remove_draw_callback(self, callback: DrawCallback) -> None:
        if callback in self._draw_callbacks:
            self._draw_callbacks.remove(callback)

    def step(self, dt: float) -> None:
        """
        Run one fixed update.

        Order matters: input edges first so systems see this tick's
        presses, then deferred callbacks, then the world.

        Args:
            dt: Fixed delta time in seconds
        """
        self.input.update()
        if self.input.is_action_just_pressed(Action.QUIT):
            self.quit()
            return
        if self.input.is_action_just_pressed(Action.PAUSE):
            self.toggle_pause()
        if self._paused:
            return
        self.scheduler.update(dt)
        self.world.update(dt)

    def run(self) -> None:
        """
        Start the main game loop.

        Uses a fixed timestep for updates with variable rendering.
        """
        self._running = True
        self.event_bus.publish(EngineEvent.GAME_START)
        logger.info(f"Starting {self.config.title}")

        while self._running:
            frame_time = self.clock.tick()
            self._accumulator += frame_time

            self._process_events()

            updates = 0
            while self._accumulator >= self.config.fixed_timestep and self._running:
                self.step(self.config.fixed_timestep)
                self._accumulator -= self.config.fixed_timestep
                updates += 1

                if updates >= self.config.max_frame_skip:
                    self._accumulator = 0
                    break

            self._render()

        self._shutdown()

    def quit(self) -> None:
        """Request game shutdown."""
        self._running = False

    def toggle_pause(self) -> None:
        """Toggle pause state."""
        self._paused = not self._paused

    def _process_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit()
            else:
                self.input.process_event(event)

    def _render(self) -> None:
        self.screen.fill(self.config.background)
        for callback in list(self._draw_callbacks):
            callback(self.screen)
        pygame.display.flip()

    def _shutdown(self) -> None:
        """Clean shutdown."""
        self.event_bus.publish(EngineEvent.GAME_QUIT)
        self.scheduler.cancel_all()
        self.world.clear()
        self.audio.quit()
        pygame.quit()
