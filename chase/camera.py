"""Perspective camera and the framing rule that aims it at the chase."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .paths import PathLike


def _normalize(vec: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vec)
    if norm == 0:
        return vec
    return vec / norm


def _look_at_matrix(position: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    forward = _normalize(target - position)
    side = _normalize(np.cross(forward, up))
    true_up = np.cross(side, forward)

    view = np.identity(4)
    view[0, :3] = side
    view[1, :3] = true_up
    view[2, :3] = -forward
    view[0, 3] = -np.dot(side, position)
    view[1, 3] = -np.dot(true_up, position)
    view[2, 3] = np.dot(forward, position)
    return view


def _perspective_matrix(fov_degrees: float, aspect: float, near: float, far: float) -> np.ndarray:
    perspective = np.zeros((4, 4))
    f = 1.0 / math.tan(math.radians(fov_degrees) / 2.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        perspective[0, 0] = np.divide(f, np.float64(aspect))
    perspective[1, 1] = f
    perspective[2, 2] = (far + near) / (near - far)
    perspective[2, 3] = (2 * far * near) / (near - far)
    perspective[3, 2] = -1.0
    return perspective


@dataclass
class PerspectiveCamera:
    aspect: float
    fov: float = 65.0
    near_clip: float = 0.1
    far_clip: float = 200.0
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    target: np.ndarray = field(default_factory=lambda: np.array((0.0, 0.0, -1.0)))
    up: np.ndarray = field(default_factory=lambda: np.array((0.0, 1.0, 0.0)))
    projection_dirty: bool = True
    _projection: Optional[np.ndarray] = field(default=None, repr=False)

    def look_at(self, point: np.ndarray) -> None:
        self.target = np.array(point, dtype=float)

    def update_projection_matrix(self) -> None:
        self._projection = _perspective_matrix(
            self.fov, self.aspect, self.near_clip, self.far_clip
        )
        self.projection_dirty = False

    def projection_matrix(self) -> np.ndarray:
        if self._projection is None or self.projection_dirty:
            self.update_projection_matrix()
        return self._projection

    def view_matrix(self) -> np.ndarray:
        return _look_at_matrix(self.position, self.target, self.up)


@dataclass(frozen=True)
class CameraPose:
    position: np.ndarray
    look_ahead: np.ndarray
    chase_midpoint: np.ndarray
    focal_point: np.ndarray


def blend_focal_point(
    chase_midpoint: np.ndarray, look_ahead: np.ndarray, midpoint_weight: float = 0.35
) -> np.ndarray:
    return chase_midpoint * midpoint_weight + look_ahead * (1.0 - midpoint_weight)


class CameraFramer:
    """Rides the camera path and aims between the ships and the road ahead.

    Nothing is carried between frames; the pose depends only on the progress
    and the ships' current positions.
    """

    def __init__(
        self,
        camera_path: PathLike,
        target_path: PathLike,
        *,
        lookahead_scale: float = 1.02,
        midpoint_weight: float = 0.35,
    ) -> None:
        self._camera_path = camera_path
        self._target_path = target_path
        self._lookahead_scale = lookahead_scale
        self._midpoint_weight = midpoint_weight

    def frame(
        self, p: float, target_position: np.ndarray, chaser_position: np.ndarray
    ) -> CameraPose:
        position = self._camera_path.point_at(p)
        look_ahead = self._target_path.point_at(min(p * self._lookahead_scale, 1.0))
        midpoint = (np.asarray(target_position) + np.asarray(chaser_position)) * 0.5
        focal = blend_focal_point(midpoint, look_ahead, self._midpoint_weight)
        return CameraPose(
            position=position,
            look_ahead=look_ahead,
            chase_midpoint=midpoint,
            focal_point=focal,
        )

    @staticmethod
    def apply(camera: PerspectiveCamera, pose: CameraPose) -> None:
        camera.position = np.array(pose.position, dtype=float)
        camera.look_at(pose.focal_point)
