"""
UI drawing helpers.

Exports:
- UIRenderer: panels and pre-wrapped text on a pygame surface
- FontConfig: cached font settings
"""

from roots_engine.ui.renderer import UIRenderer, FontConfig

__all__ = ["UIRenderer", "FontConfig"]
