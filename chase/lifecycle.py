"""One-shot teardown of the scene's loop, listeners and GPU resources."""
from __future__ import annotations

import logging
from typing import Optional

from .animation import AnimationLoopController
from .host import MountSurface, Renderer, ResizeListener
from .scene_graph import SceneNode, dispose_node

LOGGER = logging.getLogger(__name__)


def null_teardown() -> None:
    """Teardown handed out when there was nothing to set up."""


class ResourceLifecycleManager:
    """Releases everything ``initialize`` acquired, exactly once."""

    def __init__(
        self,
        controller: AnimationLoopController,
        mount_surface: MountSurface,
        renderer: Renderer,
        scene_root: SceneNode,
        resize_listener: Optional[ResizeListener] = None,
    ) -> None:
        self._controller = controller
        self._mount_surface = mount_surface
        self._renderer = renderer
        self._scene_root = scene_root
        self._resize_listener = resize_listener
        self.torn_down = False
        self.released = 0

    @property
    def controller(self) -> AnimationLoopController:
        return self._controller

    def __call__(self) -> None:
        self.teardown()

    def teardown(self) -> None:
        if self.torn_down:
            return
        self.torn_down = True

        self._controller.cancel()
        if self._resize_listener is not None:
            self._mount_surface.remove_resize_listener(self._resize_listener)
            self._resize_listener = None
        self._mount_surface.detach(self._renderer.canvas)
        self._renderer.dispose()

        for node in self._scene_root.traverse():
            self.released += dispose_node(node)
        LOGGER.info(
            "Scene torn down after %d frames; released %d resources",
            self._controller.frames_rendered,
            self.released,
        )
