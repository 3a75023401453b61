"""Static text labels drawn over the rendered scene."""
from __future__ import annotations

from typing import List, Sequence, Tuple

import pygame
from OpenGL import GL as gl

from rendering.opengl_context import begin_overlay, end_overlay

from .layout import OverlayLayout

LABEL_COLOR = (0x8F, 0xA9, 0xF7)
LABEL_FONT_SIZE = 12
LETTER_SPACING = 4.8


def render_label(
    font: pygame.font.Font,
    text: str,
    color: Tuple[int, int, int] = LABEL_COLOR,
    spacing: float = LETTER_SPACING,
) -> pygame.Surface:
    """Render ``text`` uppercased with ``spacing`` pixels between glyphs."""

    glyphs = [font.render(char, True, color) for char in text.upper()]
    if not glyphs:
        return pygame.Surface((0, font.get_height()), pygame.SRCALPHA)
    gap = int(round(spacing))
    width = sum(glyph.get_width() for glyph in glyphs) + gap * (len(glyphs) - 1)
    height = max(glyph.get_height() for glyph in glyphs)
    label = pygame.Surface((width, height), pygame.SRCALPHA)
    x = 0
    for glyph in glyphs:
        label.blit(glyph, (x, 0))
        x += glyph.get_width() + gap
    return label


class OverlayRenderer:
    """Blits pre-rendered label surfaces with ``glDrawPixels``."""

    def __init__(self, labels: Sequence[str], window_size: Tuple[int, int]) -> None:
        pygame.font.init()
        font = pygame.font.SysFont("Helvetica,Arial", LABEL_FONT_SIZE)
        self._surfaces: List[pygame.Surface] = [render_label(font, text) for text in labels]
        self._pixels = [pygame.image.tobytes(surface, "RGBA", True) for surface in self._surfaces]
        self._layout = OverlayLayout(window_size)

    def update_viewport(self, window_size: Tuple[int, int]) -> None:
        self._layout.update(window_size)

    def draw(self) -> None:
        width, height = self._layout.window_size
        if width <= 0 or height <= 0:
            return
        begin_overlay((width, height))
        rects = self._layout.label_rects([surface.get_size() for surface in self._surfaces])
        for surface, data, rect in zip(self._surfaces, self._pixels, rects):
            # Raster position is the bottom-left corner of the image.
            gl.glRasterPos2f(rect.left, rect.bottom)
            gl.glDrawPixels(
                surface.get_width(),
                surface.get_height(),
                gl.GL_RGBA,
                gl.GL_UNSIGNED_BYTE,
                data,
            )
        end_overlay()
