"""Place and orient actors along their flight paths."""
from __future__ import annotations

import numpy as np

from .actors import Actor
from .paths import PathLike
from .scene_graph import rotation_x

WORLD_UP = np.array((0.0, 1.0, 0.0))
_FALLBACK_UP = np.array((0.0, 0.0, 1.0))
_EPSILON = 1e-9


def look_rotation(forward: np.ndarray, up: np.ndarray = WORLD_UP) -> np.ndarray:
    """Rotation whose local +X axis points along ``forward``."""

    x_axis = forward / np.linalg.norm(forward)
    if abs(float(np.dot(x_axis, up))) > 0.999:
        up = _FALLBACK_UP
    z_axis = np.cross(x_axis, up)
    z_axis /= np.linalg.norm(z_axis)
    y_axis = np.cross(z_axis, x_axis)
    return np.column_stack((x_axis, y_axis, z_axis))


def pose(actor: Actor, path: PathLike, t: float, lookahead: float = 0.001) -> None:
    """Move ``actor`` to ``path`` at ``t`` facing a point slightly further on.

    The look-ahead sample is clamped to the path end; when it coincides with
    the current point the previous heading is kept. The actor's accumulated
    roll is applied about its forward axis.
    """

    position = path.point_at(t)
    ahead = path.point_at(min(t + lookahead, 1.0))
    direction = ahead - position
    if np.linalg.norm(direction) > _EPSILON:
        actor.heading = look_rotation(direction)
    actor.root.position = position
    apply_roll(actor)


def apply_roll(actor: Actor) -> None:
    actor.root.rotation = actor.heading @ rotation_x(actor.roll)
