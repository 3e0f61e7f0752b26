"""
Frame clock.

Wraps pygame's clock so the rest of the engine only ever sees a
non-negative delta in seconds.
"""

from __future__ import annotations

import pygame


class Clock:
    """
    Monotonic per-frame delta source.

    Usage:
        clock = Clock(target_fps=60, max_delta=0.25)
        while running:
            dt = clock.tick()
            world.update(dt)
    """

    def __init__(self, target_fps: int = 60, max_delta: float = 0.25):
        self.target_fps = target_fps
        # Clamp to avoid a spiral of death after a stall
        self.max_delta = max_delta
        self._clock = pygame.time.Clock()
        self._elapsed = 0.0

    @property
    def elapsed(self) -> float:
        """Total seconds handed out so far."""
        return self._elapsed

    def tick(self) -> float:
        """
        Wait for the next frame and return the elapsed seconds.

        Returns:
            Delta time in seconds, in [0, max_delta]
        """
        ms = self._clock.tick(self.target_fps)
        dt = min(max(ms / 1000.0, 0.0), self.max_delta)
        self._elapsed += dt
        return dt
