"""OpenGL context helpers for the chase renderer."""
from __future__ import annotations

from typing import Tuple

from OpenGL import GL as gl


BACKGROUND_COLOR = (0.016, 0.027, 0.075, 1.0)
MAX_PIXEL_RATIO = 2.0


def clamp_pixel_ratio(ratio: float, maximum: float = MAX_PIXEL_RATIO) -> float:
    return min(ratio, maximum)


def drawable_size(surface_size: Tuple[int, int], pixel_ratio: float) -> Tuple[int, int]:
    width, height = surface_size
    return int(width * pixel_ratio), int(height * pixel_ratio)


def initialize_gl(surface_size: Tuple[int, int]) -> None:
    """Configure fixed-function state for lit, depth-tested 3D rendering."""
    width, height = surface_size
    gl.glViewport(0, 0, width, height)
    gl.glClearColor(*BACKGROUND_COLOR)

    gl.glEnable(gl.GL_DEPTH_TEST)
    gl.glDepthFunc(gl.GL_LEQUAL)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)
    gl.glEnable(gl.GL_NORMALIZE)
    gl.glShadeModel(gl.GL_SMOOTH)
    gl.glLightModeli(gl.GL_LIGHT_MODEL_TWO_SIDE, gl.GL_FALSE)
    gl.glEnable(gl.GL_MULTISAMPLE)


def resize_viewport(surface_size: Tuple[int, int]) -> None:
    """Update the viewport when the window changes size."""
    width, height = surface_size
    gl.glViewport(0, 0, max(0, width), max(0, height))


def begin_overlay(surface_size: Tuple[int, int]) -> None:
    """Switch to a y-down pixel projection for 2D text."""
    width, height = surface_size
    gl.glMatrixMode(gl.GL_PROJECTION)
    gl.glPushMatrix()
    gl.glLoadIdentity()
    gl.glOrtho(0, width, height, 0, -1, 1)
    gl.glMatrixMode(gl.GL_MODELVIEW)
    gl.glPushMatrix()
    gl.glLoadIdentity()
    gl.glDisable(gl.GL_DEPTH_TEST)
    gl.glDisable(gl.GL_LIGHTING)
    gl.glDisable(gl.GL_FOG)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)


def end_overlay() -> None:
    gl.glMatrixMode(gl.GL_PROJECTION)
    gl.glPopMatrix()
    gl.glMatrixMode(gl.GL_MODELVIEW)
    gl.glPopMatrix()
    gl.glEnable(gl.GL_DEPTH_TEST)
