"""
Core Audio Manager.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pygame

from roots_engine.core.events import EventBus, AudioEvent

logger = logging.getLogger(__name__)


class AudioManager:
    """
    Central audio manager for the engine.

    Handles:
    - SFX caching and playback on free mixer channels
    - Volume categories (Master, SFX, voice, ...)

    Playback handles are the pygame channels a sound was started on;
    stop() accepts any handle returned by play() or play_sfx(), including None.
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus

        self._master_volume: float = 1.0
        self._category_volumes: dict[str, float] = {
            "sfx": 1.0,
            "ui": 1.0,
            "voice": 1.0,
            "ambient": 1.0,
        }

        self._sound_cache: dict[str, pygame.mixer.Sound] = {}
        self._initialized: bool = False

    def init(self, frequency: int = 44100, size: int = -16, channels: int = 2, buffer: int = 512) -> None:
        """Initialize the audio system."""
        if pygame.mixer.get_init():
            self._initialized = True
            return

        try:
            pygame.mixer.init(frequency=frequency, size=size, channels=channels, buffer=buffer)
            pygame.mixer.set_num_channels(32)
            self._initialized = True
            logger.info("Audio system initialized.")
        except pygame.error as e:
            logger.error(f"Failed to initialize audio system: {e}")

    def quit(self) -> None:
        """Shutdown audio system."""
        pygame.mixer.quit()
        self._sound_cache.clear()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    # --- Volume Control ---

    def set_master_volume(self, volume: float) -> None:
        """Set master volume (0.0 to 1.0)."""
        self._master_volume = max(0.0, min(1.0, volume))

    def set_category_volume(self, category: str, volume: float) -> None:
        """Set volume for a specific category."""
        if category in self._category_volumes:
            self._category_volumes[category] = max(0.0, min(1.0, volume))

    def get_settings(self) -> dict:
        """Get all volume settings."""
        return {
            "master": self._master_volume,
            "categories": self._category_volumes.copy(),
        }

    # --- SFX ---

    def _get_sound(self, file_path: str) -> pygame.mixer.Sound | None:
        """Load or retrieve sound from cache."""
        if not self._initialized:
            return None

        if file_path not in self._sound_cache:
            try:
                if not Path(file_path).exists():
                    logger.warning(f"Audio file not found: {file_path}")
                    return None
                self._sound_cache[file_path] = pygame.mixer.Sound(file_path)
            except pygame.error as e:
                logger.error(f"Failed to load sound {file_path}: {e}")
                return None

        return self._sound_cache[file_path]

    def play_sfx(
        self,
        file_path: str,
        category: str = "sfx",
        volume: float = 1.0,
        loops: int = 0,
    ) -> pygame.mixer.Channel | None:
        """
        Play a sound effect.

        Args:
            file_path: Sound file path
            category: Sound category
            volume: Base volume multiplier
            loops: Number of extra loops (-1 for forever)

        Returns:
            The channel used, or None if failed.
        """
        sound = self._get_sound(file_path)
        if not sound:
            return None

        cat_vol = self._category_volumes.get(category, 1.0)
        final_vol = self._master_volume * cat_vol * max(0.0, min(1.0, volume))

        channel = pygame.mixer.find_channel()
        if not channel:
            channel = pygame.mixer.find_channel(True)

        if not channel:
            logger.debug(f"No free channel for {file_path}")
            return None

        channel.set_volume(final_vol)
        channel.play(sound, loops=loops)

        if self.event_bus:
            self.event_bus.publish(AudioEvent.SFX_PLAYED, file=file_path)

        return channel

    def play(self, clip: str, volume: float = 1.0, loop: bool = False) -> pygame.mixer.Channel | None:
        """Play a clip on the voice category; returns a handle for stop()."""
        return self.play_sfx(clip, category="voice", volume=volume, loops=-1 if loop else 0)

    def stop(self, handle: pygame.mixer.Channel | None) -> None:
        """Stop playback on a handle. Stopping None or a finished channel is a no-op."""
        if handle is None:
            return
        handle.stop()
        if self.event_bus:
            self.event_bus.publish(AudioEvent.SFX_STOPPED, channel=handle)
