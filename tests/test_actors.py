from __future__ import annotations

import math
import random
from dataclasses import replace

import numpy as np
import pytest

from chase.actors import ActorBuilder
from chase.config import DEFAULT_CONFIG, hex_to_rgb
from chase.scene_graph import (
    Blending,
    Mesh,
    MeshBasicMaterial,
    MeshStandardMaterial,
    PointLight,
    Points,
    Side,
)


@pytest.fixture()
def builder():
    return ActorBuilder(DEFAULT_CONFIG, random.Random(42))


def _parts(actor):
    return {node.name.split(".", 1)[1]: node for node in actor.root.children}


def test_ship_has_all_parts(builder):
    ship = builder.build_ship("target", 0xFF5533)
    names = [node.name for node in ship.root.children]
    assert names == [
        "target.fuselage",
        "target.cockpit",
        "target.wing",
        "target.wing",
        "target.fin",
        "target.engine_glow",
        "target.engine_light",
    ]


def test_engine_light_is_a_direct_handle(builder):
    ship = builder.build_ship("chaser", 0x44B7FF)
    assert ship.hull_color == 0x44B7FF
    assert isinstance(ship.engine_light, PointLight)
    assert ship.engine_light in ship.root.children
    assert np.allclose(ship.engine_light.position, (-1.6, 0.0, 0.0))
    assert ship.engine_light.distance == 6.0
    assert ship.engine_light.decay == 2.0


def test_emissive_is_derived_from_hull_color(builder):
    ship = builder.build_ship("target", 0xFF5533)
    hull = _parts(ship)["fuselage"].material
    assert isinstance(hull, MeshStandardMaterial)
    assert hull.color == pytest.approx(hex_to_rgb(0xFF5533))
    expected = tuple(channel * 0.25 for channel in hex_to_rgb(0xFF5533))
    assert hull.emissive == pytest.approx(expected)
    assert hull.emissive_intensity == 0.6


def test_ships_differ_only_by_hull_color(builder):
    target = builder.build_ship("target", 0xFF5533)
    chaser = builder.build_ship("chaser", 0x44B7FF)
    for a, b in zip(target.root.children, chaser.root.children):
        assert np.allclose(a.position, b.position)
        assert np.allclose(a.rotation, b.rotation)
    assert _parts(target)["fuselage"].material.color != _parts(chaser)["fuselage"].material.color
    assert _parts(target)["cockpit"].material.color == _parts(chaser)["cockpit"].material.color


def test_wings_mirror_and_share_resources(builder):
    ship = builder.build_ship("target", 0xFF5533)
    left, right = [node for node in ship.root.children if node.name.endswith(".wing")]
    assert left.geometry is right.geometry
    assert left.material is right.material
    assert left.position[2] == pytest.approx(0.6)
    assert right.position[2] == pytest.approx(-0.6)


def test_glow_is_translucent_and_additive(builder):
    glow = _parts(builder.build_ship("target", 0xFF5533))["engine_glow"]
    assert isinstance(glow.material, MeshBasicMaterial)
    assert glow.material.transparent
    assert glow.material.blending is Blending.ADDITIVE
    assert np.allclose(glow.position, (-1.4, 0.0, 0.0))


def test_starfield_points_sit_in_the_shell(builder):
    starfield = builder.build_starfield()
    assert isinstance(starfield, Points)
    vertices = starfield.geometry.vertices
    assert vertices.shape == (1500, 3)
    radii = np.linalg.norm(vertices, axis=1)
    assert radii.min() >= 20.0 - 1e-4
    assert radii.max() <= 80.0 + 1e-4
    material = starfield.material
    assert material.blending is Blending.ADDITIVE
    assert material.transparent and not material.depth_write


def test_starfield_is_deterministic_for_a_seeded_source():
    config = replace(DEFAULT_CONFIG, star_count=32)
    first = ActorBuilder(config, random.Random(7)).build_starfield().geometry.vertices
    second = ActorBuilder(config, random.Random(7)).build_starfield().geometry.vertices
    other = ActorBuilder(config, random.Random(8)).build_starfield().geometry.vertices
    assert np.array_equal(first, second)
    assert not np.array_equal(first, other)


def test_starfield_samples_radius_then_azimuth_then_inclination():
    config = replace(DEFAULT_CONFIG, star_count=1)
    point = ActorBuilder(config, random.Random(3)).build_starfield().geometry.vertices[0]

    rng = random.Random(3)
    radius = rng.uniform(20.0, 80.0)
    theta = rng.uniform(0.0, math.tau)
    phi = rng.uniform(0.0, math.pi)
    expected = (
        radius * math.sin(phi) * math.cos(theta),
        radius * math.sin(phi) * math.sin(theta),
        radius * math.cos(phi),
    )
    assert np.allclose(point, expected, atol=1e-4)


def test_nebula_is_a_faint_inward_sphere(builder):
    nebula = builder.build_nebula()
    assert isinstance(nebula, Mesh)
    assert nebula.material.side is Side.BACK
    assert nebula.material.opacity == pytest.approx(0.08)
    assert nebula.material.transparent
    assert nebula.scale == pytest.approx(1.8)
    radii = np.linalg.norm(nebula.geometry.vertices, axis=1)
    assert np.allclose(radii, 40.0, atol=1e-4)
