"""
Transform components - position and velocity.
"""

from __future__ import annotations

from roots_engine.core.component import Component, register_component


@register_component
class Transform(Component):
    """
    Position in world space.

    Attributes:
        x: X position in pixels
        y: Y position in pixels
    """
    x: float = 0.0
    y: float = 0.0

    @property
    def position(self) -> tuple[float, float]:
        """Get position as tuple."""
        return (self.x, self.y)

    @position.setter
    def position(self, value: tuple[float, float]) -> None:
        self.x, self.y = value

    def move(self, dx: float, dy: float) -> None:
        """Move by delta."""
        self.x += dx
        self.y += dy

    def move_to(self, x: float, y: float) -> None:
        """Move to absolute position."""
        self.x = x
        self.y = y

    def distance_to(self, other: Transform) -> float:
        """Calculate distance to another transform."""
        dx = other.x - self.x
        dy = other.y - self.y
        return (dx * dx + dy * dy) ** 0.5


@register_component
class Velocity(Component):
    """
    Movement velocity.

    Attributes:
        vx: Horizontal velocity (pixels/second)
        vy: Vertical velocity (pixels/second)
        max_speed: Maximum speed
    """
    vx: float = 0.0
    vy: float = 0.0
    max_speed: float = 160.0

    @property
    def speed(self) -> float:
        """Get current speed magnitude."""
        return (self.vx * self.vx + self.vy * self.vy) ** 0.5

    def set(self, dx: float, dy: float, speed: float) -> None:
        """Set velocity from a direction vector and a speed."""
        speed = min(speed, self.max_speed)
        self.vx = dx * speed
        self.vy = dy * speed

    def stop(self) -> None:
        self.vx = 0.0
        self.vy = 0.0
