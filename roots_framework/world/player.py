"""
Player entity - factory, controller and movement lock.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from roots_engine.core import Entity, World
from roots_framework.components import Transform, Velocity
from roots_framework.dialogue.errors import ResourceConflict
from roots_framework.dialogue.ports import PlayerLockPort

if TYPE_CHECKING:
    from roots_engine.input.handler import InputHandler

logger = logging.getLogger(__name__)


class PlayerController:
    """
    Handles player input and movement.

    This is a utility class that processes input and updates
    player components. It's not a System because it specifically
    handles the player entity.
    """

    def __init__(self, player: Entity, input_handler: InputHandler, move_speed: float = 120.0):
        self.player = player
        self.input = input_handler
        self.move_speed = move_speed
        self.can_move: bool = True

    def update(self, dt: float) -> None:
        """Update player from input."""
        transform = self.player.try_get(Transform)
        velocity = self.player.try_get(Velocity)

        if not transform or not velocity:
            return

        if not self.can_move:
            velocity.stop()
            return

        dx, dy = self.input.get_movement_vector()
        velocity.set(dx, dy, self.move_speed)
        transform.move(velocity.vx * dt, velocity.vy * dt)

    def freeze(self) -> None:
        """Stop player movement."""
        self.can_move = False
        velocity = self.player.try_get(Velocity)
        if velocity:
            velocity.stop()

    def unfreeze(self) -> None:
        """Allow player movement."""
        self.can_move = True


@dataclass(frozen=True)
class PlayerLockToken:
    """Proof of holding the player lock."""
    id: int
    owner: str


class PlayerLock(PlayerLockPort):
    """
    Exclusive freeze of the player's movement.

    At most one token is outstanding. Acquiring while held raises
    ResourceConflict; releasing a token that is not current is ignored.
    """

    _ids = itertools.count(1)

    def __init__(self, controller: Optional[PlayerController] = None):
        self.controller = controller
        self._token: Optional[PlayerLockToken] = None

    @property
    def held(self) -> bool:
        return self._token is not None

    @property
    def holder(self) -> Optional[str]:
        return self._token.owner if self._token else None

    def acquire(self, owner: str) -> PlayerLockToken:
        if self._token is not None:
            raise ResourceConflict("player lock", self._token.owner)

        self._token = PlayerLockToken(next(PlayerLock._ids), owner)
        if self.controller:
            self.controller.freeze()
        logger.debug(f"Player locked by {owner}")
        return self._token

    def release(self, token: PlayerLockToken) -> None:
        if token != self._token:
            logger.warning(f"Ignoring stale player lock token #{token.id} from {token.owner}")
            return

        self._token = None
        if self.controller:
            self.controller.unfreeze()
        logger.debug(f"Player unlocked by {token.owner}")


def create_player(
    world: World,
    x: float = 0.0,
    y: float = 0.0,
    name: str = "Player",
) -> Entity:
    """
    Factory function to create a player entity.

    Args:
        world: World to add player to
        x: Starting X position
        y: Starting Y position
        name: Player name

    Returns:
        The created player entity, tagged "player"
    """
    player = world.create_entity(name)
    player.add_tag("player")
    player.add(Transform(x=x, y=y))
    player.add(Velocity())
    return player
