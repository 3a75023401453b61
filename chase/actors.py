"""Procedural ships and backdrop elements for the chase sequence."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from rendering.primitives import (
    create_box,
    create_cone,
    create_cylinder,
    create_sphere,
    sample_spherical_shell,
)

from .config import DEFAULT_CONFIG, SceneConfig, hex_to_rgb
from .scene_graph import (
    Blending,
    Geometry,
    Mesh,
    MeshBasicMaterial,
    MeshStandardMaterial,
    Points,
    PointsMaterial,
    PointLight,
    SceneNode,
    Side,
    rotation_z,
)

LOGGER = logging.getLogger(__name__)

COCKPIT_COLOR = 0x112244
ENGINE_GLOW_COLOR = 0x88CCFF
ENGINE_LIGHT_COLOR = 0x66CCFF


@dataclass
class Actor:
    """A ship: a node tree moved as one unit plus a handle to its engine light."""

    name: str
    root: SceneNode
    engine_light: PointLight
    hull_color: int
    roll: float = 0.0
    # Path-derived facing, without roll.
    heading: np.ndarray = field(default_factory=lambda: np.identity(3))

    @property
    def position(self) -> np.ndarray:
        return self.root.position

    def add_roll(self, delta: float) -> None:
        self.roll += delta


@dataclass
class Backdrop:
    starfield: Points
    nebula: Mesh


@dataclass
class Cast:
    """Everything the loop moves each frame, under one scene root."""

    root: SceneNode
    target: Actor
    chaser: Actor
    backdrop: Backdrop


class ActorBuilder:
    """Builds ships and backdrop elements from primitive geometry."""

    def __init__(
        self,
        config: SceneConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config
        self._rng = rng if rng is not None else random.Random()

    def build_ship(self, name: str, hull_color: int) -> Actor:
        factor = self._config.emissive_factor
        emissive = tuple(channel * factor for channel in hex_to_rgb(hull_color))
        hull = MeshStandardMaterial(
            hull_color,
            metalness=0.8,
            roughness=0.2,
            emissive=emissive,
            emissive_intensity=0.6,
        )

        root = SceneNode(name)

        fuselage = Mesh(
            Geometry.from_mesh_data(create_cylinder(0.2, 0.5, 2.5, 16)),
            hull,
            name=f"{name}.fuselage",
        )
        # Lay the cylinder along X; the cockpit sits at +X.
        fuselage.rotation = rotation_z(math.pi / 2.0)
        root.add(fuselage)

        cockpit_material = MeshStandardMaterial(
            COCKPIT_COLOR,
            metalness=0.9,
            roughness=0.1,
            transparent=True,
            opacity=0.85,
        )
        cockpit = Mesh(
            Geometry.from_mesh_data(create_sphere(0.35, 16, 16)),
            cockpit_material,
            name=f"{name}.cockpit",
        )
        cockpit.position = np.array((0.6, 0.15, 0.0))
        root.add(cockpit)

        wing_geometry = Geometry.from_mesh_data(create_box(0.1, 1.2, 0.4))
        left_wing = Mesh(wing_geometry, hull, name=f"{name}.wing")
        left_wing.position = np.array((0.0, 0.0, 0.6))
        right_wing = left_wing.clone()
        right_wing.position[2] = -0.6
        root.add(left_wing, right_wing)

        fin = Mesh(
            Geometry.from_mesh_data(create_box(0.1, 0.8, 0.4)),
            hull,
            name=f"{name}.fin",
        )
        fin.position = np.array((-0.8, 0.8, 0.0))
        root.add(fin)

        glow_material = MeshBasicMaterial(
            ENGINE_GLOW_COLOR,
            transparent=True,
            opacity=0.9,
            blending=Blending.ADDITIVE,
        )
        glow = Mesh(
            Geometry.from_mesh_data(create_cone(0.4, 1.0, 16, open_ended=True)),
            glow_material,
            name=f"{name}.engine_glow",
        )
        glow.rotation = rotation_z(math.pi)
        glow.position = np.array((-1.4, 0.0, 0.0))
        root.add(glow)

        engine_light = PointLight(
            ENGINE_LIGHT_COLOR, 2.0, distance=6.0, decay=2.0, name=f"{name}.engine_light"
        )
        engine_light.position = np.array((-1.6, 0.0, 0.0))
        root.add(engine_light)

        LOGGER.debug("Built ship %s with hull #%06x", name, hull_color)
        return Actor(name=name, root=root, engine_light=engine_light, hull_color=hull_color)

    def build_starfield(self) -> Points:
        cfg = self._config
        positions = sample_spherical_shell(
            cfg.star_count, cfg.star_min_radius, cfg.star_max_radius, self._rng
        )
        material = PointsMaterial(
            cfg.star_color,
            size=cfg.star_size,
            size_attenuation=True,
            depth_write=False,
            transparent=True,
            opacity=0.85,
            blending=Blending.ADDITIVE,
        )
        return Points(Geometry(positions), material, name="starfield")

    def build_nebula(self) -> Mesh:
        cfg = self._config
        material = MeshBasicMaterial(
            cfg.nebula_color,
            transparent=True,
            opacity=cfg.nebula_opacity,
            side=Side.BACK,
        )
        nebula = Mesh(
            Geometry.from_mesh_data(create_sphere(cfg.nebula_radius, 32, 32)),
            material,
            name="nebula",
        )
        nebula.scale = cfg.nebula_scale
        return nebula

    def build_backdrop(self) -> Backdrop:
        return Backdrop(starfield=self.build_starfield(), nebula=self.build_nebula())
