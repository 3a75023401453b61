from __future__ import annotations

import main
from main import PygameFrameScheduler, PygameMountSurface


def test_scheduler_runs_only_callbacks_booked_before_the_refresh():
    scheduler = PygameFrameScheduler()
    calls = []

    def rebook():
        calls.append("first")
        scheduler.request_frame(lambda: calls.append("second"))

    scheduler.request_frame(rebook)

    assert scheduler.run_pending() == 1
    assert calls == ["first"]
    assert scheduler.run_pending() == 1
    assert calls == ["first", "second"]
    assert scheduler.run_pending() == 0


def test_scheduler_cancel_drops_the_callback():
    scheduler = PygameFrameScheduler()
    calls = []
    first = scheduler.request_frame(lambda: calls.append(1))
    second = scheduler.request_frame(lambda: calls.append(2))
    assert first != second

    scheduler.cancel_frame(first)
    scheduler.cancel_frame(first)

    assert scheduler.run_pending() == 1
    assert calls == [2]


def test_mount_surface_notifies_listeners_on_resize():
    surface = PygameMountSurface((1280, 720), pixel_ratio=1.5)
    seen = []
    surface.add_resize_listener(lambda w, h: seen.append((w, h)))

    surface.resize((800, 600))

    assert (surface.width, surface.height) == (800, 600)
    assert seen == [(800, 600)]


def test_mount_surface_attach_detach():
    surface = PygameMountSurface((100, 100))
    canvas = object()
    seen = []
    surface.attach(canvas)
    assert surface.canvas is canvas

    surface.detach(object())
    assert surface.canvas is canvas
    surface.detach(canvas)
    assert surface.canvas is None

    listener = seen.append
    surface.add_resize_listener(listener)
    surface.remove_resize_listener(listener)
    surface.remove_resize_listener(listener)
    surface.resize((50, 50))
    assert seen == []


def test_gl_attributes_request_multisampling(monkeypatch):
    recorded = []
    monkeypatch.setattr(
        main.pygame.display, "gl_set_attribute", lambda attr, value: recorded.append((attr, value))
    )

    main.configure_gl_attributes()
    main.configure_gl_attributes(0)

    assert recorded == [
        (main.pygame.GL_MULTISAMPLEBUFFERS, 1),
        (main.pygame.GL_MULTISAMPLESAMPLES, main.MSAA_SAMPLES),
        (main.pygame.GL_MULTISAMPLEBUFFERS, 0),
        (main.pygame.GL_MULTISAMPLESAMPLES, 0),
    ]
