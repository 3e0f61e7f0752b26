"""
UI Renderer for panels and pre-wrapped text blocks.

Text passed to draw_text_block() is expected to be wrapped already:
each "\\n" starts a new row. Pixel-based wrapping is not done here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import pygame


@dataclass(frozen=True)
class FontConfig:
    """Font configuration."""
    name: Optional[str] = None  # None = pygame default
    size: int = 20
    bold: bool = False
    italic: bool = False


class UIRenderer:
    """
    Renderer for UI elements on a pygame surface.

    Usage:
        renderer = UIRenderer(screen)
        w, h = renderer.measure_block("Hello\\nthere", padding=8)
        renderer.draw_panel(10, 10, w, h, (31, 31, 41, 230))
        renderer.draw_text_block("Hello\\nthere", 18, 18, (235, 235, 235))
    """

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self._fonts: dict[FontConfig, pygame.font.Font] = {}
        self._default_font = FontConfig()

    def set_surface(self, surface: pygame.Surface) -> None:
        """Change the target surface."""
        self.surface = surface

    def get_font(self, config: Optional[FontConfig] = None) -> pygame.font.Font:
        """Get or create a font from config."""
        if config is None:
            config = self._default_font

        if config not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            if config.name:
                font = pygame.font.Font(config.name, config.size)
            else:
                font = pygame.font.SysFont(None, config.size)
            font.set_bold(config.bold)
            font.set_italic(config.italic)
            self._fonts[config] = font

        return self._fonts[config]

    def draw_panel(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: Tuple[int, ...],
        radius: int = 6,
    ) -> None:
        """Draw a filled rounded panel, alpha-blended when color has alpha."""
        rect = pygame.Rect(int(x), int(y), int(width), int(height))

        if len(color) == 4 and color[3] < 255:
            temp = pygame.Surface((int(width), int(height)), pygame.SRCALPHA)
            pygame.draw.rect(temp, color, temp.get_rect(), border_radius=radius)
            self.surface.blit(temp, (int(x), int(y)))
        else:
            pygame.draw.rect(self.surface, color[:3], rect, border_radius=radius)

    def draw_text_block(
        self,
        text: str,
        x: float,
        y: float,
        color: Tuple[int, ...] = (255, 255, 255),
        font_config: Optional[FontConfig] = None,
    ) -> pygame.Rect:
        """
        Draw text row by row, left aligned.

        Returns:
            Bounding rect of rendered text
        """
        font = self.get_font(font_config)
        line_height = font.get_height()
        total_rect = pygame.Rect(int(x), int(y), 0, 0)

        for i, row in enumerate(text.split("\n")):
            if not row:
                continue

            text_surface = font.render(row, True, color[:3])
            text_rect = text_surface.get_rect()
            text_rect.left = int(x)
            text_rect.top = int(y) + i * line_height

            if len(color) == 4 and color[3] < 255:
                text_surface.set_alpha(color[3])

            self.surface.blit(text_surface, text_rect)
            total_rect = total_rect.union(text_rect)

        return total_rect

    def measure_block(
        self,
        text: str,
        font_config: Optional[FontConfig] = None,
        padding: int = 0,
    ) -> Tuple[int, int]:
        """Measure a multi-row text block, including padding on every side."""
        font = self.get_font(font_config)
        rows = text.split("\n")
        width = max((font.size(row)[0] for row in rows), default=0)
        height = font.get_height() * len(rows)
        return (width + padding * 2, height + padding * 2)
