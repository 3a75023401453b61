"""Triangle mesh generators for the procedural ship parts and backdrop."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np


@dataclass(frozen=True)
class MeshData:
    """Flat vertex/normal/index arrays ready for upload."""

    vertices: np.ndarray
    normals: np.ndarray
    indices: np.ndarray


def _pack(
    vertices: List[Tuple[float, float, float]],
    normals: List[Tuple[float, float, float]],
    indices: List[int],
) -> MeshData:
    return MeshData(
        vertices=np.asarray(vertices, dtype=np.float32).reshape(-1, 3),
        normals=np.asarray(normals, dtype=np.float32).reshape(-1, 3),
        indices=np.asarray(indices, dtype=np.int32),
    )


def create_cylinder(
    radius_top: float,
    radius_bottom: float,
    height: float,
    radial_segments: int = 16,
    *,
    open_ended: bool = False,
) -> MeshData:
    """Tapered cylinder centred on the origin, axis along +Y."""

    vertices: List[Tuple[float, float, float]] = []
    normals: List[Tuple[float, float, float]] = []
    indices: List[int] = []
    half = height / 2.0
    slope = (radius_bottom - radius_top) / height

    rows: List[List[int]] = []
    for row, radius in enumerate((radius_top, radius_bottom)):
        ring: List[int] = []
        y = half - row * height
        for i in range(radial_segments + 1):
            theta = (i / radial_segments) * math.tau
            sin_t = math.sin(theta)
            cos_t = math.cos(theta)
            vertices.append((radius * sin_t, y, radius * cos_t))
            length = math.sqrt(sin_t * sin_t + slope * slope + cos_t * cos_t)
            normals.append((sin_t / length, slope / length, cos_t / length))
            ring.append(len(vertices) - 1)
        rows.append(ring)

    for i in range(radial_segments):
        a = rows[0][i]
        b = rows[1][i]
        c = rows[1][i + 1]
        d = rows[0][i + 1]
        indices.extend((a, b, d, b, c, d))

    if not open_ended:
        for radius, sign in ((radius_top, 1.0), (radius_bottom, -1.0)):
            if radius <= 0.0:
                continue
            y = half * sign
            center = len(vertices)
            vertices.append((0.0, y, 0.0))
            normals.append((0.0, sign, 0.0))
            for i in range(radial_segments + 1):
                theta = (i / radial_segments) * math.tau
                vertices.append((radius * math.sin(theta), y, radius * math.cos(theta)))
                normals.append((0.0, sign, 0.0))
            for i in range(radial_segments):
                first = center + 1 + i
                if sign > 0:
                    indices.extend((first, first + 1, center))
                else:
                    indices.extend((first + 1, first, center))

    return _pack(vertices, normals, indices)


def create_cone(
    radius: float,
    height: float,
    radial_segments: int = 16,
    *,
    open_ended: bool = False,
) -> MeshData:
    """Cone with its apex at +Y."""

    return create_cylinder(0.0, radius, height, radial_segments, open_ended=open_ended)


def create_sphere(
    radius: float,
    width_segments: int = 16,
    height_segments: int = 16,
) -> MeshData:
    """UV sphere; normals point outward."""

    vertices: List[Tuple[float, float, float]] = []
    normals: List[Tuple[float, float, float]] = []
    indices: List[int] = []
    grid: List[List[int]] = []

    for iy in range(height_segments + 1):
        v = iy / height_segments
        row: List[int] = []
        for ix in range(width_segments + 1):
            u = ix / width_segments
            nx = -math.cos(u * math.tau) * math.sin(v * math.pi)
            ny = math.cos(v * math.pi)
            nz = math.sin(u * math.tau) * math.sin(v * math.pi)
            vertices.append((nx * radius, ny * radius, nz * radius))
            normals.append((nx, ny, nz))
            row.append(len(vertices) - 1)
        grid.append(row)

    for iy in range(height_segments):
        for ix in range(width_segments):
            a = grid[iy][ix + 1]
            b = grid[iy][ix]
            c = grid[iy + 1][ix]
            d = grid[iy + 1][ix + 1]
            if iy != 0:
                indices.extend((a, b, d))
            if iy != height_segments - 1:
                indices.extend((b, c, d))

    return _pack(vertices, normals, indices)


def create_box(width: float, height: float, depth: float) -> MeshData:
    """Axis aligned box with per-face normals."""

    hx, hy, hz = width / 2.0, height / 2.0, depth / 2.0
    # (normal, u axis, v axis) for each face
    faces = (
        ((1, 0, 0), (0, 0, -1), (0, 1, 0)),
        ((-1, 0, 0), (0, 0, 1), (0, 1, 0)),
        ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
        ((0, -1, 0), (1, 0, 0), (0, 0, 1)),
        ((0, 0, 1), (1, 0, 0), (0, 1, 0)),
        ((0, 0, -1), (-1, 0, 0), (0, 1, 0)),
    )
    half = np.array((hx, hy, hz))
    vertices: List[Tuple[float, float, float]] = []
    normals: List[Tuple[float, float, float]] = []
    indices: List[int] = []
    for normal, u_axis, v_axis in faces:
        n = np.array(normal, dtype=float)
        u = np.array(u_axis, dtype=float)
        v = np.array(v_axis, dtype=float)
        start = len(vertices)
        for su, sv in ((-1, -1), (1, -1), (1, 1), (-1, 1)):
            corner = (n + u * su + v * sv) * half
            vertices.append(tuple(corner))
            normals.append(normal)
        indices.extend((start, start + 1, start + 2, start, start + 2, start + 3))
    return _pack(vertices, normals, indices)


def sample_spherical_shell(
    count: int,
    min_radius: float,
    max_radius: float,
    rng: random.Random,
) -> np.ndarray:
    """Scatter ``count`` points between two radii.

    Each point draws its radius, azimuth and inclination uniformly (in that
    order) from ``rng`` and is converted to Cartesian coordinates.
    """

    points = np.empty((count, 3), dtype=np.float32)
    for i in range(count):
        radius = rng.uniform(min_radius, max_radius)
        theta = rng.uniform(0.0, math.tau)
        phi = rng.uniform(0.0, math.pi)
        points[i, 0] = radius * math.sin(phi) * math.cos(theta)
        points[i, 1] = radius * math.sin(phi) * math.sin(theta)
        points[i, 2] = radius * math.cos(phi)
    return points
