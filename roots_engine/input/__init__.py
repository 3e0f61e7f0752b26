"""
Input module.

Exports:
- InputHandler: keyboard state with edge-triggered queries
- InputEvent: input bus events
"""

from roots_engine.input.handler import InputHandler, InputEvent, InputState

__all__ = ["InputHandler", "InputEvent", "InputState"]
