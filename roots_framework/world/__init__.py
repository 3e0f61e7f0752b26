"""
World module.

Exports:
- PlayerController, PlayerLock, PlayerLockToken, create_player
- DeferredSceneLoader
"""

from roots_framework.world.player import (
    PlayerController,
    PlayerLock,
    PlayerLockToken,
    create_player,
)
from roots_framework.world.scene_loader import DeferredSceneLoader

__all__ = [
    "PlayerController",
    "PlayerLock",
    "PlayerLockToken",
    "create_player",
    "DeferredSceneLoader",
]
