"""Assembles the chase scene on a host surface and hands back its teardown."""
from __future__ import annotations

import logging
import random
from typing import Callable, Optional

import numpy as np

from .actors import ActorBuilder, Cast
from .animation import AnimationLoopController
from .camera import PerspectiveCamera
from .clock import Clock
from .config import DEFAULT_CONFIG, SceneConfig, hex_to_rgb
from .host import FrameScheduler, MountSurface, Renderer
from .lifecycle import ResourceLifecycleManager, null_teardown
from .paths import build_paths
from .scene_graph import AmbientLight, DirectionalLight, FogExp2, Scene
from .viewport import ViewportResizeHandler, aspect_ratio

LOGGER = logging.getLogger(__name__)

RendererFactory = Callable[[SceneConfig], Renderer]


def _default_renderer_factory(config: SceneConfig) -> Renderer:
    from rendering.draw_system import SceneRenderer

    return SceneRenderer(config)


def build_cast(config: SceneConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None) -> Cast:
    """Create the lit, fogged scene with both ships and the backdrop."""

    scene = Scene()
    scene.fog = FogExp2(color=hex_to_rgb(config.fog_color), density=config.fog_density)
    scene.background = hex_to_rgb(config.fog_color)

    ambient = AmbientLight(config.ambient_color, config.ambient_intensity, name="ambient")
    key_light = DirectionalLight(config.key_light_color, config.key_light_intensity, name="key")
    key_light.position = np.array(config.key_light_position, dtype=float)
    rim_light = DirectionalLight(config.rim_light_color, config.rim_light_intensity, name="rim")
    rim_light.position = np.array(config.rim_light_position, dtype=float)
    scene.add(ambient, key_light, rim_light)

    builder = ActorBuilder(config, rng)
    backdrop = builder.build_backdrop()
    scene.add(backdrop.starfield, backdrop.nebula)

    target = builder.build_ship("target", config.target_hull_color)
    chaser = builder.build_ship("chaser", config.chaser_hull_color)
    scene.add(target.root, chaser.root)
    return Cast(root=scene, target=target, chaser=chaser, backdrop=backdrop)


def initialize(
    mount_surface: Optional[MountSurface],
    scheduler: FrameScheduler,
    *,
    config: SceneConfig = DEFAULT_CONFIG,
    renderer_factory: Optional[RendererFactory] = None,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> Callable[[], None]:
    """Build the scene on ``mount_surface`` and start the loop.

    Returns the teardown callable the host must invoke at most once. Without
    a mount surface nothing is built and a no-op teardown is returned.
    """

    if mount_surface is None:
        LOGGER.info("No mount surface supplied; chase scene not started")
        return null_teardown

    width, height = mount_surface.width, mount_surface.height
    cast = build_cast(config, rng)
    paths = build_paths(config)

    camera = PerspectiveCamera(
        aspect=aspect_ratio(width, height),
        fov=config.camera_fov,
        near_clip=config.camera_near,
        far_clip=config.camera_far,
        position=np.array(config.camera_start, dtype=float),
    )

    factory = renderer_factory or _default_renderer_factory
    renderer = factory(config)
    renderer.set_size(width, height)
    renderer.set_pixel_ratio(min(mount_surface.pixel_ratio, config.max_pixel_ratio))
    mount_surface.attach(renderer.canvas)

    controller = AnimationLoopController(
        cast,
        paths,
        camera,
        renderer,
        clock or Clock(),
        scheduler,
        config,
    )
    LOGGER.info("Chase scene initialized at %dx%d", width, height)
    controller.start()

    resize_handler = ViewportResizeHandler(renderer, camera)
    mount_surface.add_resize_listener(resize_handler)

    manager = ResourceLifecycleManager(
        controller, mount_surface, renderer, cast.root, resize_handler
    )
    return manager
