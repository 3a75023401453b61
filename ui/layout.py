"""Anchoring for the static overlay labels."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import pygame


Size = Tuple[int, int]


@dataclass
class OverlayLayout:
    """Places the title top-left and the duration note bottom-right."""

    window_size: Size
    padding: int = 32

    def update(self, window_size: Size) -> None:
        self.window_size = window_size

    def title_rect(self, text_size: Size) -> pygame.Rect:
        width, height = text_size
        return pygame.Rect(self.padding, self.padding, width, height)

    def footer_rect(self, text_size: Size) -> pygame.Rect:
        window_w, window_h = self.window_size
        width, height = text_size
        left = window_w - width - self.padding
        top = window_h - height - self.padding
        return pygame.Rect(left, top, width, height)

    def label_rects(self, text_sizes: Sequence[Size]) -> List[pygame.Rect]:
        """Rects for ``(title, footer)`` text of the given pixel sizes."""

        title_size, footer_size = text_sizes
        return [self.title_rect(title_size), self.footer_rect(footer_size)]
