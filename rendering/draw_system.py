"""Fixed-function OpenGL renderer for the chase scene graph."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
from OpenGL import GL as gl

from chase.camera import PerspectiveCamera
from chase.config import DEFAULT_CONFIG, SceneConfig
from chase.scene_graph import (
    AmbientLight,
    Blending,
    DirectionalLight,
    Geometry,
    Material,
    Mesh,
    MeshStandardMaterial,
    PointLight,
    Points,
    Scene,
    SceneNode,
    Side,
)
from ui.overlay import OverlayRenderer

from .opengl_context import (
    clamp_pixel_ratio,
    drawable_size,
    initialize_gl,
    resize_viewport,
)

LOGGER = logging.getLogger(__name__)

MAX_LIGHTS = 8


@dataclass
class GLCanvas:
    """The drawable the renderer owns; attached to the host's mount surface."""

    width: int = 0
    height: int = 0
    pixel_ratio: float = 1.0


@dataclass
class _GeometryBuffers:
    vertex_buffer: int
    normal_buffer: int
    index_buffer: Optional[int]
    index_count: int
    vertex_count: int

    def ids(self) -> List[int]:
        ids = [self.vertex_buffer, self.normal_buffer]
        if self.index_buffer is not None:
            ids.append(self.index_buffer)
        return ids


class SceneRenderer:
    """Uploads geometry to VBOs on first use and draws the node tree.

    Buffers belong to the renderer; a geometry's dispose listener frees its
    buffers, and ``dispose()`` frees whatever is left.
    """

    def __init__(self, config: SceneConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self.canvas = GLCanvas()
        self._buffers: Dict[int, _GeometryBuffers] = {}
        self._overlay: Optional[OverlayRenderer] = None
        self._initialized = False
        self._disposed = False

    # ------------------------------------------------------------------
    # Surface
    def set_pixel_ratio(self, ratio: float) -> None:
        self.canvas.pixel_ratio = clamp_pixel_ratio(ratio, self._config.max_pixel_ratio)
        self._apply_viewport()

    def set_size(self, width: int, height: int) -> None:
        self.canvas.width = width
        self.canvas.height = height
        self._apply_viewport()
        if self._overlay is not None:
            self._overlay.update_viewport((width, height))

    def _apply_viewport(self) -> None:
        if not self._initialized:
            return
        resize_viewport(drawable_size((self.canvas.width, self.canvas.height), self.canvas.pixel_ratio))

    def _point_scale(self) -> float:
        """Pixels per world unit at unit depth: half the drawable height."""

        _, height = drawable_size((self.canvas.width, self.canvas.height), self.canvas.pixel_ratio)
        return height / 2.0

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        size = drawable_size((self.canvas.width, self.canvas.height), self.canvas.pixel_ratio)
        initialize_gl(size)
        self._overlay = OverlayRenderer(
            self._config.overlay_labels, (self.canvas.width, self.canvas.height)
        )
        self._initialized = True
        LOGGER.debug("GL state initialized for %dx%d drawable", *size)

    # ------------------------------------------------------------------
    # Frame
    def render(self, scene: Scene, camera: PerspectiveCamera) -> None:
        if self._disposed:
            return
        self._ensure_initialized()
        background = getattr(scene, "background", (0.0, 0.0, 0.0))
        gl.glClearColor(background[0], background[1], background[2], 1.0)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)
        self._apply_camera(camera)
        self._apply_fog(scene)

        opaque: List[Mesh] = []
        transparent: List[Tuple[float, Mesh]] = []
        lights: List[SceneNode] = []
        camera_position = np.asarray(camera.position, dtype=float)
        for node in scene.traverse():
            if not node.visible:
                continue
            if isinstance(node, (AmbientLight, DirectionalLight, PointLight)):
                lights.append(node)
            elif isinstance(node, Mesh):
                if any(material.transparent for material in node.materials):
                    depth = float(np.linalg.norm(node.world_position() - camera_position))
                    transparent.append((depth, node))
                else:
                    opaque.append(node)

        self._apply_lights(lights)
        for mesh in opaque:
            self._draw_mesh(mesh)
        # Far to near so translucent layers composite correctly.
        for _, mesh in sorted(transparent, key=lambda item: item[0], reverse=True):
            self._draw_mesh(mesh)

        self._reset_state()
        if self._overlay is not None:
            self._overlay.draw()

    def _apply_camera(self, camera: PerspectiveCamera) -> None:
        projection = camera.projection_matrix()
        view = camera.view_matrix()
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glLoadMatrixf(np.transpose(projection).astype(np.float32).flatten())
        gl.glMatrixMode(gl.GL_MODELVIEW)
        gl.glLoadMatrixf(np.transpose(view).astype(np.float32).flatten())

    @staticmethod
    def _apply_fog(scene: Scene) -> None:
        fog = getattr(scene, "fog", None)
        if fog is None:
            gl.glDisable(gl.GL_FOG)
            return
        gl.glEnable(gl.GL_FOG)
        gl.glFogi(gl.GL_FOG_MODE, gl.GL_EXP2)
        gl.glFogf(gl.GL_FOG_DENSITY, fog.density)
        gl.glFogfv(gl.GL_FOG_COLOR, (*fog.color, 1.0))

    def _apply_lights(self, lights: List[SceneNode]) -> None:
        exposure = self._config.exposure
        ambient = [0.0, 0.0, 0.0]
        slot = 0
        for light in lights:
            color = np.asarray(light.color) * light.intensity
            if isinstance(light, AmbientLight):
                ambient = list(np.asarray(ambient) + color * 0.5)
                continue
            if slot >= MAX_LIGHTS:
                LOGGER.debug("Skipping light %s; all %d slots in use", light.name, MAX_LIGHTS)
                continue
            gl_light = gl.GL_LIGHT0 + slot
            diffuse = (*np.clip(color * exposure * 0.5, 0.0, 1.0), 1.0)
            position = light.world_position()
            gl.glEnable(gl_light)
            gl.glLightfv(gl_light, gl.GL_DIFFUSE, diffuse)
            gl.glLightfv(gl_light, gl.GL_SPECULAR, diffuse)
            if isinstance(light, DirectionalLight):
                gl.glLightfv(gl_light, gl.GL_POSITION, (*position, 0.0))
                gl.glLightf(gl_light, gl.GL_QUADRATIC_ATTENUATION, 0.0)
                gl.glLightf(gl_light, gl.GL_CONSTANT_ATTENUATION, 1.0)
            else:
                gl.glLightfv(gl_light, gl.GL_POSITION, (*position, 1.0))
                gl.glLightf(gl_light, gl.GL_CONSTANT_ATTENUATION, 1.0)
                quadratic = 0.0
                if light.distance > 0.0:
                    quadratic = light.decay / (light.distance * light.distance)
                gl.glLightf(gl_light, gl.GL_QUADRATIC_ATTENUATION, quadratic)
            slot += 1
        for unused in range(slot, MAX_LIGHTS):
            gl.glDisable(gl.GL_LIGHT0 + unused)
        gl.glLightModelfv(gl.GL_LIGHT_MODEL_AMBIENT, (*np.clip(ambient, 0.0, 1.0), 1.0))

    # ------------------------------------------------------------------
    # Meshes
    def _draw_mesh(self, mesh: Mesh) -> None:
        buffers = self._upload(mesh.geometry)
        gl.glPushMatrix()
        gl.glMultMatrixf(np.transpose(mesh.world_matrix()).astype(np.float32).flatten())
        gl.glEnableClientState(gl.GL_VERTEX_ARRAY)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, buffers.vertex_buffer)
        gl.glVertexPointer(3, gl.GL_FLOAT, 0, None)
        gl.glEnableClientState(gl.GL_NORMAL_ARRAY)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, buffers.normal_buffer)
        gl.glNormalPointer(gl.GL_FLOAT, 0, None)

        for material in mesh.materials:
            self._apply_material(material, points=isinstance(mesh, Points))
            if isinstance(mesh, Points) or buffers.index_buffer is None:
                gl.glDrawArrays(gl.GL_POINTS, 0, buffers.vertex_count)
            else:
                gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, buffers.index_buffer)
                gl.glDrawElements(gl.GL_TRIANGLES, buffers.index_count, gl.GL_UNSIGNED_INT, None)

        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, 0)
        gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, 0)
        gl.glDisableClientState(gl.GL_NORMAL_ARRAY)
        gl.glDisableClientState(gl.GL_VERTEX_ARRAY)
        gl.glPopMatrix()

    def _apply_material(self, material: Material, *, points: bool) -> None:
        if material.blending is Blending.ADDITIVE:
            gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE)
        else:
            gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)
        gl.glDepthMask(gl.GL_TRUE if material.depth_write else gl.GL_FALSE)

        if material.side is Side.DOUBLE:
            gl.glDisable(gl.GL_CULL_FACE)
        else:
            gl.glEnable(gl.GL_CULL_FACE)
            gl.glCullFace(gl.GL_FRONT if material.side is Side.BACK else gl.GL_BACK)

        alpha = material.opacity if material.transparent else 1.0
        rgba = (*material.color, alpha)
        if isinstance(material, MeshStandardMaterial):
            gl.glEnable(gl.GL_LIGHTING)
            # Metals tint their highlights with the base colour.
            specular = np.asarray(material.color) * material.metalness + 0.04 * (1.0 - material.metalness)
            emissive = np.asarray(material.emissive) * material.emissive_intensity
            gl.glMaterialfv(gl.GL_FRONT_AND_BACK, gl.GL_AMBIENT_AND_DIFFUSE, rgba)
            gl.glMaterialfv(gl.GL_FRONT_AND_BACK, gl.GL_SPECULAR, (*specular, 1.0))
            gl.glMaterialfv(gl.GL_FRONT_AND_BACK, gl.GL_EMISSION, (*emissive, 1.0))
            gl.glMaterialf(gl.GL_FRONT_AND_BACK, gl.GL_SHININESS, (1.0 - material.roughness) * 128.0)
        else:
            gl.glDisable(gl.GL_LIGHTING)
            gl.glColor4f(*rgba)

        if points:
            size = getattr(material, "size", 1.0)
            if getattr(material, "size_attenuation", False):
                gl.glPointParameterfv(gl.GL_POINT_DISTANCE_ATTENUATION, (0.0, 0.0, 1.0))
                gl.glPointSize(max(1.0, size * self._point_scale()))
            else:
                gl.glPointParameterfv(gl.GL_POINT_DISTANCE_ATTENUATION, (1.0, 0.0, 0.0))
                gl.glPointSize(max(1.0, size))

    @staticmethod
    def _reset_state() -> None:
        gl.glDepthMask(gl.GL_TRUE)
        gl.glDisable(gl.GL_CULL_FACE)
        gl.glDisable(gl.GL_LIGHTING)
        gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)

    # ------------------------------------------------------------------
    # GPU resources
    def _upload(self, geometry: Geometry) -> _GeometryBuffers:
        key = id(geometry)
        buffers = self._buffers.get(key)
        if buffers is not None:
            return buffers

        vertex_buffer, normal_buffer = (int(name) for name in gl.glGenBuffers(2))
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, vertex_buffer)
        gl.glBufferData(gl.GL_ARRAY_BUFFER, geometry.vertices.nbytes, geometry.vertices, gl.GL_STATIC_DRAW)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, normal_buffer)
        gl.glBufferData(gl.GL_ARRAY_BUFFER, geometry.normals.nbytes, geometry.normals, gl.GL_STATIC_DRAW)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, 0)

        index_buffer: Optional[int] = None
        if geometry.indices.size:
            index_buffer = int(gl.glGenBuffers(1))
            gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, index_buffer)
            gl.glBufferData(
                gl.GL_ELEMENT_ARRAY_BUFFER,
                geometry.indices.nbytes,
                geometry.indices.astype(np.uint32),
                gl.GL_STATIC_DRAW,
            )
            gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, 0)

        buffers = _GeometryBuffers(
            vertex_buffer=vertex_buffer,
            normal_buffer=normal_buffer,
            index_buffer=index_buffer,
            index_count=int(geometry.indices.size),
            vertex_count=geometry.vertex_count,
        )
        self._buffers[key] = buffers
        geometry.on_dispose(self._release_geometry)
        return buffers

    def _release_geometry(self, geometry: Geometry) -> None:
        buffers = self._buffers.pop(id(geometry), None)
        if buffers is None or self._disposed:
            return
        ids = buffers.ids()
        gl.glDeleteBuffers(len(ids), ids)

    def dispose(self) -> None:
        if self._disposed:
            return
        if self._buffers:
            ids = [name for buffers in self._buffers.values() for name in buffers.ids()]
            gl.glDeleteBuffers(len(ids), ids)
            LOGGER.debug("Released %d buffers for %d geometries", len(ids), len(self._buffers))
        self._buffers.clear()
        self._disposed = True
