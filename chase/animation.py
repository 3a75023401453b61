"""Frame-by-frame driver for the 20 second chase."""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, Hashable, List, Optional, Tuple

from .actors import Cast
from .camera import CameraFramer, PerspectiveCamera
from .clock import Clock
from .config import DEFAULT_CONFIG, SceneConfig
from .host import FrameScheduler, Renderer
from .orientation import apply_roll, pose
from .paths import ChasePaths
from .scene_graph import rotation_x, rotation_y

LOGGER = logging.getLogger(__name__)


class AnimationState(enum.Enum):
    RUNNING = "running"
    FINISHED = "finished"


# ----------------------------------------------------------------------
# Frame math


def progress(elapsed: float, duration: float) -> Tuple[float, float]:
    """Return ``(raw, clamped)`` progress for ``elapsed`` seconds."""

    raw = elapsed / duration
    return raw, min(raw, 1.0)


def chaser_parameter(p: float, lead: float = 1.05) -> float:
    return min(p * lead, 1.0)


def engine_pulse(
    elapsed: float,
    frequency: float = 12.0,
    amplitude: float = 0.35,
    offset: float = 0.65,
) -> float:
    return math.sin(elapsed * frequency) * amplitude + offset


def roll_drift(elapsed: float, config: SceneConfig = DEFAULT_CONFIG) -> Tuple[float, float]:
    """Per-tick roll increments for the target and the chaser."""

    target = math.sin(elapsed * config.target_roll_frequency) * config.target_roll_amplitude
    chaser = math.cos(elapsed * config.chaser_roll_frequency) * config.chaser_roll_amplitude
    return target, chaser


@dataclass(frozen=True)
class FrameSample:
    elapsed: float
    raw_progress: float
    progress: float
    chaser_progress: float
    pulse: float


class AnimationLoopController:
    """Two-state loop: ``RUNNING`` until the duration elapses, then ``FINISHED``.

    Every tick poses both ships, frames the camera, applies the small
    procedural touches, renders, and either books the next tick with the
    scheduler or finishes. The pending tick handle is owned here so teardown
    can cancel it.
    """

    def __init__(
        self,
        cast: Cast,
        paths: ChasePaths,
        camera: PerspectiveCamera,
        renderer: Renderer,
        clock: Clock,
        scheduler: FrameScheduler,
        config: SceneConfig = DEFAULT_CONFIG,
    ) -> None:
        self._cast = cast
        self._paths = paths
        self._camera = camera
        self._renderer = renderer
        self._clock = clock
        self._scheduler = scheduler
        self._config = config
        self._framer = CameraFramer(
            paths.camera,
            paths.target,
            lookahead_scale=config.camera_lookahead,
            midpoint_weight=config.midpoint_weight,
        )
        self.state = AnimationState.RUNNING
        self.frames_rendered = 0
        self.last_frame: Optional[FrameSample] = None
        self._pending: Optional[Hashable] = None
        self._cancelled = False
        self._started = False
        self._last_elapsed: Optional[float] = None
        self._nebula_yaw = 0.0
        self._starfield_yaw = 0.0
        self._starfield_pitch = 0.0
        self._finished_callbacks: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Public API
    @property
    def pending_handle(self) -> Optional[Hashable]:
        return self._pending

    @property
    def is_finished(self) -> bool:
        return self.state is AnimationState.FINISHED

    def on_finished(self, callback: Callable[[], None]) -> None:
        self._finished_callbacks.append(callback)

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        LOGGER.info("Starting %.1fs chase sequence", self._config.duration)
        self.tick()

    def cancel(self) -> None:
        self._cancelled = True
        if self._pending is not None:
            self._scheduler.cancel_frame(self._pending)
            self._pending = None

    def tick(self) -> None:
        """Advance one frame now, replacing any tick already booked."""

        if self._pending is not None:
            self._scheduler.cancel_frame(self._pending)
            self._pending = None
        self._advance()

    def _scheduled_tick(self) -> None:
        self._pending = None
        self._advance()

    def _advance(self) -> None:
        if self._cancelled or self.state is AnimationState.FINISHED:
            return

        cfg = self._config
        cast = self._cast
        elapsed = self._clock.elapsed_seconds()
        raw, p = progress(elapsed, cfg.duration)
        chaser_t = chaser_parameter(p, cfg.chaser_lead)

        pose(cast.target, self._paths.target, p, cfg.orientation_lookahead)
        pose(cast.chaser, self._paths.chaser, chaser_t, cfg.orientation_lookahead)

        camera_pose = self._framer.frame(p, cast.target.position, cast.chaser.position)
        self._framer.apply(self._camera, camera_pose)

        target_roll, chaser_roll = roll_drift(elapsed, cfg)
        cast.target.add_roll(target_roll)
        cast.chaser.add_roll(chaser_roll)
        apply_roll(cast.target)
        apply_roll(cast.chaser)

        pulse = engine_pulse(
            elapsed, cfg.pulse_frequency, cfg.pulse_amplitude, cfg.pulse_offset
        )
        cast.target.engine_light.intensity = cfg.target_light_base + pulse * cfg.target_light_gain
        cast.chaser.engine_light.intensity = cfg.chaser_light_base + pulse * cfg.chaser_light_gain

        self._rotate_backdrop(elapsed)

        self._renderer.render(cast.root, self._camera)
        self.frames_rendered += 1
        self.last_frame = FrameSample(elapsed, raw, p, chaser_t, pulse)
        LOGGER.debug(
            "Frame %d: elapsed=%.3f p=%.4f chaser=%.4f pulse=%.3f",
            self.frames_rendered,
            elapsed,
            p,
            chaser_t,
            pulse,
        )

        if raw < 1.0:
            self._pending = self._scheduler.request_frame(self._scheduled_tick)
        else:
            self._finish()

    # ------------------------------------------------------------------
    # Helpers
    def _rotate_backdrop(self, elapsed: float) -> None:
        cfg = self._config
        scale = 1.0
        if cfg.frame_rate_independent_backdrop:
            previous = self._last_elapsed if self._last_elapsed is not None else elapsed
            scale = (elapsed - previous) * cfg.reference_fps
        self._last_elapsed = elapsed

        self._nebula_yaw += cfg.nebula_yaw_step * scale
        self._starfield_yaw += cfg.starfield_yaw_step * scale
        self._starfield_pitch += cfg.starfield_pitch_step * scale

        backdrop = self._cast.backdrop
        backdrop.nebula.rotation = rotation_y(self._nebula_yaw)
        backdrop.starfield.rotation = rotation_x(self._starfield_pitch) @ rotation_y(
            self._starfield_yaw
        )

    def _finish(self) -> None:
        self.state = AnimationState.FINISHED
        LOGGER.info("Chase finished after %d frames", self.frames_rendered)
        callbacks, self._finished_callbacks = self._finished_callbacks, []
        for callback in callbacks:
            callback()

    @property
    def backdrop_angles(self) -> Tuple[float, float, float]:
        """``(nebula yaw, starfield yaw, starfield pitch)`` in radians."""

        return self._nebula_yaw, self._starfield_yaw, self._starfield_pitch
