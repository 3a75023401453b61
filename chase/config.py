"""Tuning values for the Deep Sector Pursuit sequence."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

Vec3 = Tuple[float, float, float]

TITLE = "Deep Sector Pursuit"
WINDOW_CAPTION = "Cinematic Sci-Fi Chase"


@dataclass(frozen=True)
class PathSpec:
    """Waypoints and smoothing settings for one flight path."""

    waypoints: Tuple[Vec3, ...]
    tension: float
    curve_type: str = "catmullrom"
    closed: bool = False


TARGET_PATH = PathSpec(
    waypoints=(
        (-8.0, -1.5, -6.0),
        (-4.0, 0.5, -1.0),
        (-2.0, 1.3, 1.2),
        (1.5, 1.8, 0.6),
        (4.5, 0.4, -0.8),
        (8.0, -1.5, -3.0),
    ),
    tension=0.4,
)

CHASER_PATH = PathSpec(
    waypoints=(
        (-10.0, -1.6, -7.0),
        (-5.5, -0.5, -2.0),
        (-1.5, 1.1, 1.4),
        (2.2, 1.6, 1.1),
        (5.0, 0.6, -0.2),
        (8.5, -1.8, -2.4),
    ),
    tension=0.35,
)

CAMERA_PATH = PathSpec(
    waypoints=(
        (-12.0, 3.0, 6.0),
        (-6.0, 4.6, 4.0),
        (-1.5, 3.8, 3.0),
        (2.2, 3.0, 2.4),
        (6.5, 2.2, 1.0),
        (9.5, 1.4, -1.5),
    ),
    tension=0.5,
)


@dataclass(frozen=True)
class SceneConfig:
    duration: float = 20.0

    # Backdrop
    star_count: int = 1500
    star_min_radius: float = 20.0
    star_max_radius: float = 80.0
    star_color: int = 0x9BBDFF
    star_size: float = 0.25
    nebula_radius: float = 40.0
    nebula_scale: float = 1.8
    nebula_color: int = 0x1B1E4B
    nebula_opacity: float = 0.08

    # Ships
    target_hull_color: int = 0xFF5533
    chaser_hull_color: int = 0x44B7FF
    emissive_factor: float = 0.25

    # Paths
    target_path: PathSpec = TARGET_PATH
    chaser_path: PathSpec = CHASER_PATH
    camera_path: PathSpec = CAMERA_PATH
    # Sample paths by arc length (constant speed) instead of raw parameter.
    constant_speed: bool = False
    orientation_lookahead: float = 0.001

    # Pacing
    chaser_lead: float = 1.05
    camera_lookahead: float = 1.02
    midpoint_weight: float = 0.35
    pulse_frequency: float = 12.0
    pulse_amplitude: float = 0.35
    pulse_offset: float = 0.65
    target_light_base: float = 1.5
    target_light_gain: float = 1.0
    chaser_light_base: float = 1.8
    chaser_light_gain: float = 1.2
    target_roll_frequency: float = 2.1
    target_roll_amplitude: float = 0.001
    chaser_roll_frequency: float = 2.3
    chaser_roll_amplitude: float = 0.0012

    # Backdrop drift, in radians per rendered frame.
    nebula_yaw_step: float = 0.0006
    starfield_yaw_step: float = 0.0004
    starfield_pitch_step: float = 0.0002
    # When set, the steps above are scaled by dt * reference_fps.
    frame_rate_independent_backdrop: bool = False
    reference_fps: float = 60.0

    # Camera and lighting
    camera_fov: float = 65.0
    camera_near: float = 0.1
    camera_far: float = 200.0
    camera_start: Vec3 = (-6.0, 3.0, 7.0)
    ambient_color: int = 0x334466
    ambient_intensity: float = 0.8
    key_light_color: int = 0x88AAFF
    key_light_intensity: float = 2.2
    key_light_position: Vec3 = (6.0, 4.0, 8.0)
    rim_light_color: int = 0x2244AA
    rim_light_intensity: float = 1.5
    rim_light_position: Vec3 = (-4.0, -2.0, -6.0)
    fog_color: int = 0x040713
    fog_density: float = 0.025
    exposure: float = 1.5

    max_pixel_ratio: float = 2.0
    overlay_labels: Tuple[str, str] = field(
        default=(TITLE, "Duration: 20s")
    )


DEFAULT_CONFIG = SceneConfig()


def hex_to_rgb(value: int) -> Vec3:
    """Split a 0xRRGGBB integer into normalized RGB floats."""

    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )
