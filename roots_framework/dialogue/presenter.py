"""
pygame presentation of prompts and bubbles.

SurfacePresenter keeps every visible overlay by handle and draws them
above the Transform of the entity they belong to. Sessions talk to a
per-entity view obtained with view_for(entity).
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Optional, Union

import pygame

from roots_engine.core.entity import Entity
from roots_engine.ui.renderer import FontConfig, UIRenderer
from roots_framework.components.dialogue import BubbleStyle, PromptStyle
from roots_framework.components.transform import Transform
from roots_framework.dialogue.ports import PresentationPort

logger = logging.getLogger(__name__)


@dataclass
class Overlay:
    """A visible prompt or bubble."""
    handle: int
    kind: str  # "prompt" or "bubble"
    text: str
    style: Union[BubbleStyle, PromptStyle]
    anchor: Optional[Entity] = None


class SurfacePresenter(PresentationPort):
    """
    Draws overlays with a UIRenderer.

    Used directly, overlays are anchored at the screen origin; views from
    view_for() anchor them to an entity.

    Usage:
        presenter = SurfacePresenter(UIRenderer(screen))
        game.add_draw_callback(presenter.draw)
        view = presenter.view_for(npc)
    """

    _handles = itertools.count(1)

    def __init__(self, renderer: UIRenderer, camera: tuple[float, float] = (0.0, 0.0)):
        self.renderer = renderer
        self.camera = camera
        self._overlays: dict[int, Overlay] = {}

    @property
    def overlays(self) -> list[Overlay]:
        return list(self._overlays.values())

    def get(self, handle: int) -> Optional[Overlay]:
        return self._overlays.get(handle)

    def view_for(self, entity: Entity) -> PresentationPort:
        """Port whose overlays follow entity."""
        return _AnchoredView(self, entity)

    # PresentationPort

    def show_prompt(self, text: str, style: PromptStyle, anchor: Optional[Entity] = None) -> int:
        return self._add("prompt", text, style, anchor)

    def show_bubble(self, text: str, style: BubbleStyle, anchor: Optional[Entity] = None) -> int:
        return self._add("bubble", text, style, anchor)

    def update_text(self, handle: int, text: str) -> None:
        overlay = self._overlays.get(handle)
        if overlay is None:
            logger.debug(f"update_text on unknown overlay #{handle}")
            return
        overlay.text = text

    def hide(self, handle: int) -> None:
        self._overlays.pop(handle, None)

    def clear(self) -> None:
        self._overlays.clear()

    # Drawing

    def draw(self, surface: pygame.Surface) -> None:
        """Draw every overlay. Registered as a Game draw callback."""
        self.renderer.set_surface(surface)
        for overlay in list(self._overlays.values()):
            if overlay.kind == "bubble":
                self._draw_bubble(overlay)
            else:
                self._draw_prompt(overlay)

    def _add(self, kind: str, text: str, style, anchor: Optional[Entity]) -> int:
        handle = next(SurfacePresenter._handles)
        self._overlays[handle] = Overlay(handle, kind, text, style, anchor)
        return handle

    def _anchor_point(self, overlay: Overlay) -> tuple[float, float]:
        x, y = 0.0, 0.0
        if overlay.anchor is not None:
            transform = overlay.anchor.try_get(Transform)
            if transform:
                x, y = transform.x, transform.y
        off_x, off_y = overlay.style.offset
        return (x + off_x - self.camera[0], y + off_y - self.camera[1])

    def _draw_bubble(self, overlay: Overlay) -> None:
        style: BubbleStyle = overlay.style
        font = FontConfig(size=style.text_size)
        text_w, text_h = self.renderer.measure_block(overlay.text, font, padding=style.padding)
        width = max(style.background_size[0], text_w)
        height = max(style.background_size[1], text_h)

        cx, bottom = self._anchor_point(overlay)
        left = cx - width / 2
        top = bottom - height

        self.renderer.draw_panel(left, top, width, height, style.background_color)
        self.renderer.draw_text_block(
            overlay.text,
            left + style.padding,
            top + style.padding,
            style.text_color,
            font,
        )

    def _draw_prompt(self, overlay: Overlay) -> None:
        style: PromptStyle = overlay.style
        font = FontConfig(size=style.text_size)
        text_w, text_h = self.renderer.measure_block(overlay.text, font)
        cx, bottom = self._anchor_point(overlay)
        self.renderer.draw_text_block(overlay.text, cx - text_w / 2, bottom - text_h, style.color, font)


class _AnchoredView(PresentationPort):
    """Forwards to a SurfacePresenter with a fixed anchor entity."""

    def __init__(self, presenter: SurfacePresenter, anchor: Entity):
        self.presenter = presenter
        self.anchor = anchor

    def show_prompt(self, text: str, style: PromptStyle) -> int:
        return self.presenter.show_prompt(text, style, anchor=self.anchor)

    def show_bubble(self, text: str, style: BubbleStyle) -> int:
        return self.presenter.show_bubble(text, style, anchor=self.anchor)

    def update_text(self, handle: int, text: str) -> None:
        self.presenter.update_text(handle, text)

    def hide(self, handle: int) -> None:
        self.presenter.hide(handle)
