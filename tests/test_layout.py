from __future__ import annotations

from ui.layout import OverlayLayout


def test_title_sits_in_the_top_left_corner():
    layout = OverlayLayout((1280, 720))
    rect = layout.title_rect((200, 30))
    assert rect.topleft == (32, 32)
    assert rect.size == (200, 30)


def test_footer_sits_in_the_bottom_right_corner():
    layout = OverlayLayout((1280, 720))
    rect = layout.footer_rect((120, 20))
    assert rect.bottomright == (1280 - 32, 720 - 32)


def test_footer_follows_window_resize():
    layout = OverlayLayout((1280, 720), padding=10)
    layout.update((640, 480))
    title, footer = layout.label_rects([(100, 20), (80, 16)])
    assert title.topleft == (10, 10)
    assert footer.bottomright == (630, 470)
