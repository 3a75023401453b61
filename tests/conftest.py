"""Shared fixtures for the chase scene tests.

- manual clock
- recording renderer / scheduler / mount surface
- a controller over a lighter starfield
"""

from __future__ import annotations

import random
from dataclasses import replace

import pytest

from chase.animation import AnimationLoopController
from chase.camera import PerspectiveCamera
from chase.config import DEFAULT_CONFIG, SceneConfig
from chase.paths import build_paths
from chase.scene import build_cast
from fakes import FakeRenderer, FakeScheduler, FakeSurface, ManualClock


@pytest.fixture()
def small_config() -> SceneConfig:
    """Default tuning with a lighter starfield."""
    return replace(DEFAULT_CONFIG, star_count=64)


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture()
def controller(small_config, clock, renderer, scheduler) -> AnimationLoopController:
    cast = build_cast(small_config, random.Random(1234))
    paths = build_paths(small_config)
    camera = PerspectiveCamera(aspect=800 / 600)
    return AnimationLoopController(
        cast, paths, camera, renderer, clock, scheduler, small_config
    )
