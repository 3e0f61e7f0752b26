"""
Audio module.

Exports:
- AudioManager: sound cache, playback and volume categories
"""

from roots_engine.audio.manager import AudioManager

__all__ = ["AudioManager"]
