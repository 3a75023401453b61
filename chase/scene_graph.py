"""Minimal scene graph: nodes, geometry, materials and lights."""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from rendering.primitives import MeshData

from .config import hex_to_rgb

LOGGER = logging.getLogger(__name__)

Color = Tuple[float, float, float]


class Blending(enum.Enum):
    NORMAL = "normal"
    ADDITIVE = "additive"


class Side(enum.Enum):
    FRONT = "front"
    BACK = "back"
    DOUBLE = "double"


def _as_color(value: Union[int, Sequence[float]]) -> Color:
    if isinstance(value, int):
        return hex_to_rgb(value)
    r, g, b = value
    return (float(r), float(g), float(b))


def rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array(((1.0, 0.0, 0.0), (0.0, c, -s), (0.0, s, c)))


def rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array(((c, 0.0, s), (0.0, 1.0, 0.0), (-s, 0.0, c)))


def rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array(((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0)))


# ----------------------------------------------------------------------
# Disposable resources


class Disposable:
    """Resource that releases its GPU side exactly once.

    Renderers register a listener when they upload the resource; the listener
    fires on the first ``dispose()`` call and never again.
    """

    def __init__(self) -> None:
        self.disposed = False
        self._dispose_listeners: List[Callable[["Disposable"], None]] = []

    def on_dispose(self, listener: Callable[["Disposable"], None]) -> None:
        self._dispose_listeners.append(listener)

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        listeners, self._dispose_listeners = self._dispose_listeners, []
        for listener in listeners:
            listener(self)


class Geometry(Disposable):
    def __init__(
        self,
        vertices: np.ndarray,
        normals: Optional[np.ndarray] = None,
        indices: Optional[np.ndarray] = None,
    ) -> None:
        super().__init__()
        self.vertices = np.asarray(vertices, dtype=np.float32).reshape(-1, 3)
        if normals is None:
            normals = np.zeros_like(self.vertices)
        self.normals = np.asarray(normals, dtype=np.float32).reshape(-1, 3)
        if indices is None:
            indices = np.empty(0, dtype=np.int32)
        self.indices = np.asarray(indices, dtype=np.int32)

    @classmethod
    def from_mesh_data(cls, data: MeshData) -> "Geometry":
        return cls(data.vertices, data.normals, data.indices)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])


class Material(Disposable):
    """Shared surface settings for every material kind."""

    def __init__(
        self,
        color: Union[int, Sequence[float]] = 0xFFFFFF,
        *,
        opacity: float = 1.0,
        transparent: bool = False,
        blending: Blending = Blending.NORMAL,
        side: Side = Side.FRONT,
        depth_write: bool = True,
    ) -> None:
        super().__init__()
        self.color = _as_color(color)
        self.opacity = opacity
        self.transparent = transparent
        self.blending = blending
        self.side = side
        self.depth_write = depth_write


class MeshBasicMaterial(Material):
    """Unlit flat colour."""


class MeshStandardMaterial(Material):
    def __init__(
        self,
        color: Union[int, Sequence[float]] = 0xFFFFFF,
        *,
        metalness: float = 0.0,
        roughness: float = 1.0,
        emissive: Union[int, Sequence[float]] = 0x000000,
        emissive_intensity: float = 1.0,
        **kwargs,
    ) -> None:
        super().__init__(color, **kwargs)
        self.metalness = metalness
        self.roughness = roughness
        self.emissive = _as_color(emissive)
        self.emissive_intensity = emissive_intensity


class PointsMaterial(Material):
    def __init__(
        self,
        color: Union[int, Sequence[float]] = 0xFFFFFF,
        *,
        size: float = 1.0,
        size_attenuation: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(color, **kwargs)
        self.size = size
        self.size_attenuation = size_attenuation


# ----------------------------------------------------------------------
# Nodes


class SceneNode:
    def __init__(self, name: str = "") -> None:
        self.name = name
        self.position = np.zeros(3)
        self.rotation = np.identity(3)
        self.scale = 1.0
        self.visible = True
        self.children: List[SceneNode] = []
        self.parent: Optional[SceneNode] = None

    def add(self, *nodes: "SceneNode") -> None:
        for node in nodes:
            node.parent = self
            self.children.append(node)

    def traverse(self) -> Iterator["SceneNode"]:
        yield self
        for child in self.children:
            yield from child.traverse()

    def local_matrix(self) -> np.ndarray:
        matrix = np.identity(4)
        matrix[:3, :3] = self.rotation * self.scale
        matrix[:3, 3] = self.position
        return matrix

    def world_matrix(self) -> np.ndarray:
        matrix = self.local_matrix()
        node = self.parent
        while node is not None:
            matrix = node.local_matrix() @ matrix
            node = node.parent
        return matrix

    def world_position(self) -> np.ndarray:
        return self.world_matrix()[:3, 3].copy()


class Mesh(SceneNode):
    def __init__(
        self,
        geometry: Geometry,
        material: Union[Material, List[Material]],
        name: str = "",
    ) -> None:
        super().__init__(name)
        self.geometry = geometry
        self.material = material

    @property
    def materials(self) -> List[Material]:
        if isinstance(self.material, list):
            return list(self.material)
        return [self.material]

    def clone(self) -> "Mesh":
        """Copy the node; geometry and material stay shared."""

        copy = type(self)(self.geometry, self.material, self.name)
        copy.position = self.position.copy()
        copy.rotation = self.rotation.copy()
        copy.scale = self.scale
        return copy


class Points(Mesh):
    """Unindexed point cloud."""


class Light(SceneNode):
    def __init__(
        self,
        color: Union[int, Sequence[float]] = 0xFFFFFF,
        intensity: float = 1.0,
        name: str = "",
    ) -> None:
        super().__init__(name)
        self.color = _as_color(color)
        self.intensity = intensity


class AmbientLight(Light):
    pass


class DirectionalLight(Light):
    """Shines from its position toward the origin."""


class PointLight(Light):
    def __init__(
        self,
        color: Union[int, Sequence[float]] = 0xFFFFFF,
        intensity: float = 1.0,
        distance: float = 0.0,
        decay: float = 2.0,
        name: str = "",
    ) -> None:
        super().__init__(color, intensity, name)
        self.distance = distance
        self.decay = decay


@dataclass
class FogExp2:
    color: Color
    density: float


class Scene(SceneNode):
    def __init__(self, name: str = "scene") -> None:
        super().__init__(name)
        self.fog: Optional[FogExp2] = None
        self.background: Color = (0.0, 0.0, 0.0)


def dispose_node(node: SceneNode) -> int:
    """Dispose a node's geometry and every material it holds.

    Returns the number of resources that were released by this call.
    """

    released = 0
    geometry = getattr(node, "geometry", None)
    if geometry is not None and not geometry.disposed:
        geometry.dispose()
        released += 1
    material = getattr(node, "material", None)
    if material is None:
        return released
    materials = material if isinstance(material, list) else [material]
    for item in materials:
        if not item.disposed:
            item.dispose()
            released += 1
    return released
