"""Keeps the render surface and camera projection in step with the window."""
from __future__ import annotations

import logging

import numpy as np

from .camera import PerspectiveCamera
from .host import Renderer

LOGGER = logging.getLogger(__name__)


def aspect_ratio(width: int, height: int) -> float:
    """``width / height``; a zero height yields ``inf`` or ``nan`` unchanged."""

    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(width), np.float64(height)))


class ViewportResizeHandler:
    def __init__(self, renderer: Renderer, camera: PerspectiveCamera) -> None:
        self._renderer = renderer
        self._camera = camera

    def __call__(self, width: int, height: int) -> None:
        self._renderer.set_size(width, height)
        aspect = aspect_ratio(width, height)
        if width <= 0 or height <= 0:
            LOGGER.warning("Degenerate viewport %dx%d (aspect %s)", width, height, aspect)
        self._camera.aspect = aspect
        self._camera.projection_dirty = True
