"""Interfaces the chase scene expects from whatever hosts it."""
from __future__ import annotations

from typing import Any, Callable, Hashable, Protocol

ResizeListener = Callable[[int, int], None]


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> Hashable: ...

    def cancel_frame(self, handle: Hashable) -> None: ...


class MountSurface(Protocol):
    width: int
    height: int
    pixel_ratio: float

    def attach(self, canvas: Any) -> None: ...

    def detach(self, canvas: Any) -> None: ...

    def add_resize_listener(self, listener: ResizeListener) -> None: ...

    def remove_resize_listener(self, listener: ResizeListener) -> None: ...


class Renderer(Protocol):
    canvas: Any

    def set_pixel_ratio(self, ratio: float) -> None: ...

    def set_size(self, width: int, height: int) -> None: ...

    def render(self, scene: Any, camera: Any) -> None: ...

    def dispose(self) -> None: ...
