from __future__ import annotations

import numpy as np
import pytest

from chase.config import DEFAULT_CONFIG, SceneConfig
from chase.paths import ConstantSpeedPath, CurvePath, build_paths


ALL_SPECS = [DEFAULT_CONFIG.target_path, DEFAULT_CONFIG.chaser_path, DEFAULT_CONFIG.camera_path]


@pytest.mark.parametrize("spec", ALL_SPECS)
def test_endpoints_match_first_and_last_waypoint(spec):
    path = CurvePath.from_spec(spec)
    assert np.allclose(path.point_at(0.0), spec.waypoints[0], atol=1e-9)
    assert np.allclose(path.point_at(1.0), spec.waypoints[-1], atol=1e-9)


@pytest.mark.parametrize("spec", ALL_SPECS)
def test_passes_through_waypoints_at_even_parameters(spec):
    path = CurvePath.from_spec(spec)
    count = len(spec.waypoints)
    for index, waypoint in enumerate(spec.waypoints):
        assert np.allclose(path.point_at(index / (count - 1)), waypoint, atol=1e-9)


@pytest.mark.parametrize("spec", ALL_SPECS)
def test_samples_are_finite_across_unit_interval(spec):
    path = CurvePath.from_spec(spec)
    samples = np.array([path.point_at(t) for t in np.linspace(0.0, 1.0, 257)])
    assert samples.shape == (257, 3)
    assert np.all(np.isfinite(samples))


def _one_sided_tangents(path, knot, h=1e-6):
    left = (path.point_at(knot) - path.point_at(knot - h)) / h
    right = (path.point_at(knot + h) - path.point_at(knot)) / h
    return left, right


@pytest.mark.parametrize("spec", ALL_SPECS)
def test_tangent_is_continuous_at_interior_waypoints(spec):
    path = CurvePath.from_spec(spec)
    count = len(spec.waypoints)
    for index in range(1, count - 1):
        left, right = _one_sided_tangents(path, index / (count - 1))
        assert np.allclose(left, right, rtol=1e-3, atol=1e-3)


@pytest.mark.parametrize("curve_type", ["centripetal", "chordal"])
def test_nonuniform_variants_keep_tangent_direction(curve_type):
    spec = DEFAULT_CONFIG.chaser_path
    path = CurvePath(spec.waypoints, curve_type=curve_type)
    count = len(spec.waypoints)
    for index in range(1, count - 1):
        left, right = _one_sided_tangents(path, index / (count - 1))
        left /= np.linalg.norm(left)
        right /= np.linalg.norm(right)
        assert np.allclose(left, right, atol=1e-3)
        assert np.allclose(path.point_at(index / (count - 1)), spec.waypoints[index])


def test_tension_changes_the_curve_between_waypoints():
    points = DEFAULT_CONFIG.target_path.waypoints
    loose = CurvePath(points, tension=0.5).point_at(0.1)
    tight = CurvePath(points, tension=0.1).point_at(0.1)
    assert not np.allclose(loose, tight)


def test_two_point_path_is_a_straight_segment():
    path = CurvePath([(0.0, 0.0, 0.0), (2.0, 0.0, 0.0)], tension=0.5)
    assert np.allclose(path.point_at(0.5), (1.0, 0.0, 0.0))


def test_closed_path_wraps_to_start():
    square = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 0.0, 1.0), (0.0, 0.0, 1.0)]
    path = CurvePath(square, closed=True)
    assert np.allclose(path.point_at(0.0), square[0])
    assert np.allclose(path.point_at(1.0), square[0])
    assert np.allclose(path.point_at(0.25), square[1])


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"points": [(0.0, 0.0, 0.0)]}, "at least two"),
        ({"points": [(0, 0, 0), (1, 1, 1)], "tension": 1.5}, "Tension"),
        ({"points": [(0, 0, 0), (1, 1, 1)], "curve_type": "bezier"}, "Unknown curve type"),
    ],
)
def test_invalid_paths_are_rejected(kwargs, message):
    with pytest.raises(ValueError, match=message):
        CurvePath(**kwargs)


def test_waypoints_are_read_only():
    path = CurvePath.from_spec(DEFAULT_CONFIG.camera_path)
    with pytest.raises(ValueError):
        path.waypoints[0, 0] = 99.0


def test_arc_length_sampling_keeps_endpoints_and_moves_forward():
    path = CurvePath.from_spec(DEFAULT_CONFIG.chaser_path)
    lengths = path.lengths()
    assert lengths[0] == 0.0
    assert np.all(np.diff(lengths) > 0.0)
    assert np.allclose(path.point_at_distance(0.0), path.waypoints[0])
    assert np.allclose(path.point_at_distance(1.0), path.waypoints[-1])
    assert path.parameter_for_distance(0.25) < path.parameter_for_distance(0.75)


def test_arc_length_sampling_has_near_uniform_speed():
    path = CurvePath.from_spec(DEFAULT_CONFIG.target_path)
    samples = np.array([path.point_at_distance(u) for u in np.linspace(0.0, 1.0, 21)])
    steps = np.linalg.norm(np.diff(samples, axis=0), axis=1)
    assert steps.max() / steps.min() < 1.1


def test_build_paths_uses_configured_tensions():
    paths = build_paths(DEFAULT_CONFIG)
    assert (paths.target.tension, paths.chaser.tension, paths.camera.tension) == (0.4, 0.35, 0.5)
    assert not paths.target.closed


def test_build_paths_constant_speed_wraps_paths():
    paths = build_paths(SceneConfig(constant_speed=True))
    assert isinstance(paths.target, ConstantSpeedPath)
    assert np.allclose(paths.camera.point_at(1.0), DEFAULT_CONFIG.camera_path.waypoints[-1])


def test_length_of_a_straight_path_is_its_span():
    path = CurvePath([(0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (4.0, 0.0, 0.0)])
    assert path.length() == pytest.approx(4.0)
    assert path.lengths()[-1] == path.length()
