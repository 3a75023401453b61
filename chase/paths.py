"""Catmull-Rom flight paths sampled by a normalized parameter."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .config import DEFAULT_CONFIG, PathSpec, SceneConfig

Vec3 = Tuple[float, float, float]

CURVE_TYPES = ("catmullrom", "centripetal", "chordal")
_EXPONENTS = {"centripetal": 0.25, "chordal": 0.5}
ARC_LENGTH_DIVISIONS = 200


def _hermite(p1: np.ndarray, p2: np.ndarray, t1: np.ndarray, t2: np.ndarray, w: float) -> np.ndarray:
    c2 = -3.0 * p1 + 3.0 * p2 - 2.0 * t1 - t2
    c3 = 2.0 * p1 - 2.0 * p2 + t1 + t2
    return p1 + t1 * w + c2 * (w * w) + c3 * (w * w * w)


class CurvePath:
    """Interpolating spline through ordered waypoints.

    ``point_at(t)`` hits waypoint ``i`` at ``t = i / (n - 1)`` for open paths.
    The tension scales the tangents of the uniform ``"catmullrom"`` variant;
    the centripetal and chordal variants space knots by chord length instead.
    """

    def __init__(
        self,
        points: Sequence[Vec3],
        closed: bool = False,
        curve_type: str = "catmullrom",
        tension: float = 0.5,
    ) -> None:
        waypoints = np.array(points, dtype=float).reshape(-1, 3)
        if waypoints.shape[0] < 2:
            raise ValueError("A path needs at least two waypoints")
        if curve_type not in CURVE_TYPES:
            raise ValueError(f"Unknown curve type: {curve_type}")
        if not 0.0 <= tension <= 1.0:
            raise ValueError(f"Tension must lie in [0, 1], got {tension}")
        waypoints.setflags(write=False)
        self._points = waypoints
        self.closed = closed
        self.curve_type = curve_type
        self.tension = tension
        self._lengths: Optional[np.ndarray] = None

    @classmethod
    def from_spec(cls, spec: PathSpec) -> "CurvePath":
        return cls(spec.waypoints, spec.closed, spec.curve_type, spec.tension)

    @property
    def waypoints(self) -> np.ndarray:
        return self._points

    def point_at(self, t: float) -> np.ndarray:
        points = self._points
        count = len(points)
        p = (count if self.closed else count - 1) * t
        index = int(math.floor(p))
        weight = p - index

        if self.closed:
            index += 0 if index > 0 else (abs(index) // count + 1) * count
        elif weight == 0.0 and index == count - 1:
            index = count - 2
            weight = 1.0

        if self.closed or index > 0:
            p0 = points[(index - 1) % count]
        else:
            # Reflect the second point through the first.
            p0 = 2.0 * points[0] - points[1]
        p1 = points[index % count]
        p2 = points[(index + 1) % count]
        if self.closed or index + 2 < count:
            p3 = points[(index + 2) % count]
        else:
            p3 = 2.0 * points[count - 1] - points[count - 2]

        if self.curve_type == "catmullrom":
            t1 = self.tension * (p2 - p0)
            t2 = self.tension * (p3 - p1)
            return _hermite(p1, p2, t1, t2, weight)

        exponent = _EXPONENTS[self.curve_type]
        dt0 = float(np.sum((p1 - p0) ** 2)) ** exponent
        dt1 = float(np.sum((p2 - p1) ** 2)) ** exponent
        dt2 = float(np.sum((p3 - p2) ** 2)) ** exponent
        # Guard against repeated points.
        if dt1 < 1e-4:
            dt1 = 1.0
        if dt0 < 1e-4:
            dt0 = dt1
        if dt2 < 1e-4:
            dt2 = dt1
        t1 = (p1 - p0) / dt0 - (p2 - p0) / (dt0 + dt1) + (p2 - p1) / dt1
        t2 = (p2 - p1) / dt1 - (p3 - p1) / (dt1 + dt2) + (p3 - p2) / dt2
        return _hermite(p1, p2, t1 * dt1, t2 * dt1, weight)

    def points(self, divisions: int = 5) -> np.ndarray:
        return np.array([self.point_at(d / divisions) for d in range(divisions + 1)])

    def lengths(self, divisions: int = ARC_LENGTH_DIVISIONS) -> np.ndarray:
        """Cumulative chord lengths of ``divisions + 1`` evenly spaced samples."""

        if self._lengths is not None and len(self._lengths) == divisions + 1:
            return self._lengths
        samples = self.points(divisions)
        steps = np.linalg.norm(np.diff(samples, axis=0), axis=1)
        lengths = np.concatenate(([0.0], np.cumsum(steps)))
        self._lengths = lengths
        return lengths

    def length(self) -> float:
        return float(self.lengths()[-1])

    def parameter_for_distance(self, u: float) -> float:
        """Map a fraction of total arc length to the curve parameter."""

        lengths = self.lengths()
        total = lengths[-1]
        if total <= 0.0:
            return u
        params = np.linspace(0.0, 1.0, len(lengths))
        return float(np.interp(u * total, lengths, params))

    def point_at_distance(self, u: float) -> np.ndarray:
        return self.point_at(self.parameter_for_distance(u))


class ConstantSpeedPath:
    """View of a path that samples by arc length through ``point_at``."""

    def __init__(self, path: CurvePath) -> None:
        self.path = path

    @property
    def waypoints(self) -> np.ndarray:
        return self.path.waypoints

    def point_at(self, t: float) -> np.ndarray:
        return self.path.point_at_distance(t)


PathLike = Union[CurvePath, ConstantSpeedPath]


@dataclass(frozen=True)
class ChasePaths:
    target: PathLike
    chaser: PathLike
    camera: PathLike


def build_paths(config: SceneConfig = DEFAULT_CONFIG) -> ChasePaths:
    paths = [
        CurvePath.from_spec(spec)
        for spec in (config.target_path, config.chaser_path, config.camera_path)
    ]
    if config.constant_speed:
        paths = [ConstantSpeedPath(path) for path in paths]
    return ChasePaths(*paths)
