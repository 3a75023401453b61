"""Entry point for the Deep Sector Pursuit sequence."""
from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import pygame

from chase.config import WINDOW_CAPTION
from chase.host import ResizeListener
from chase.scene import initialize

LOGGER = logging.getLogger(__name__)

WINDOW_SIZE = (1280, 720)
TARGET_FPS = 60
DISPLAY_FLAGS = pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE
MSAA_SAMPLES = 4


def setup_logging(level: int = logging.INFO) -> None:
    """Apply a basic logging configuration unless one already exists."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def configure_gl_attributes(samples: int = MSAA_SAMPLES) -> None:
    """Request a multisampled framebuffer; must run before ``set_mode``."""
    pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLEBUFFERS, 1 if samples > 0 else 0)
    pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLESAMPLES, samples)


class PygameMountSurface:
    """The pygame window as a mount surface for the scene."""

    def __init__(self, size: Tuple[int, int], pixel_ratio: float = 1.0) -> None:
        self.width, self.height = size
        self.pixel_ratio = pixel_ratio
        self.canvas: Optional[Any] = None
        self._listeners: List[ResizeListener] = []

    def attach(self, canvas: Any) -> None:
        self.canvas = canvas

    def detach(self, canvas: Any) -> None:
        if self.canvas is canvas:
            self.canvas = None

    def add_resize_listener(self, listener: ResizeListener) -> None:
        self._listeners.append(listener)

    def remove_resize_listener(self, listener: ResizeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def resize(self, size: Tuple[int, int]) -> None:
        self.width, self.height = size
        for listener in list(self._listeners):
            listener(self.width, self.height)


class PygameFrameScheduler:
    """Runs requested callbacks once per display refresh."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._pending: Dict[int, Callable[[], None]] = {}

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_pending(self) -> int:
        """Run the callbacks booked before this refresh; returns how many ran."""
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback()
        return len(due)


def run() -> None:
    setup_logging()
    pygame.init()
    pygame.display.set_caption(WINDOW_CAPTION)
    configure_gl_attributes()
    try:
        pygame.display.set_mode(WINDOW_SIZE, DISPLAY_FLAGS)
    except pygame.error as exc:
        LOGGER.warning("Multisampled context unavailable (%s); continuing without MSAA", exc)
        configure_gl_attributes(0)
        pygame.display.set_mode(WINDOW_SIZE, DISPLAY_FLAGS)
    window_size = pygame.display.get_surface().get_size()

    surface = PygameMountSurface(window_size)
    scheduler = PygameFrameScheduler()
    teardown = initialize(surface, scheduler)
    pygame.display.flip()

    clock = pygame.time.Clock()
    running = True
    while running:
        clock.tick(TARGET_FPS)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                # The GL context survives a resize; only the viewport changes.
                surface.resize(event.size)
        if scheduler.run_pending():
            pygame.display.flip()

    teardown()
    pygame.quit()


if __name__ == "__main__":
    run()
