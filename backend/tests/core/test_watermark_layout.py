"""Watermark Layout — anchors, logo sizing and editor element scaling.

Invariants:
    - 20px padding from edges, +30px for top-anchored text
    - Logo is 15% of the image width
    - Editor canvas is 800x1200
"""

from photobooth.core.watermark_layout import (
    has_project_watermark, logo_origin, logo_size, parse_hex_color,
    scale_element, text_placement,
)


def test_text_placement_bottom_left():
    p = text_placement("bottom-left", 1000, 800)
    assert (p.x, p.y, p.anchor) == (20, 780, "ls")


def test_text_placement_top_right():
    p = text_placement("top-right", 1000, 800)
    assert (p.x, p.y, p.anchor) == (980, 50, "rs")


def test_text_placement_center():
    p = text_placement("center", 1000, 800)
    assert (p.x, p.y, p.anchor) == (500, 400, "ms")


def test_logo_size_keeps_aspect_ratio():
    assert logo_size(1000, 200, 100) == (150, 75)


def test_logo_size_degenerate_logo_is_square():
    assert logo_size(1000, 0, 0) == (150, 150)


def test_logo_origin_per_anchor():
    assert logo_origin("top-left", 1000, 800, 150, 75) == (20, 20)
    assert logo_origin("top-right", 1000, 800, 150, 75) == (830, 20)
    assert logo_origin("bottom-left", 1000, 800, 150, 75) == (20, 705)
    assert logo_origin("center", 1000, 800, 150, 75) == (425, 362)


def test_logo_origin_unknown_position_falls_back_to_bottom_right():
    assert logo_origin("nowhere", 1000, 800, 150, 75) == (830, 705)
    assert logo_origin(None, 1000, 800, 150, 75) == (830, 705)


def test_scale_element_text_uses_smaller_axis_for_font():
    scaled = scale_element({"type": "text", "x": 400, "y": 600, "fontSize": 40}, 1600, 1200)
    assert scaled["x"] == 800
    assert scaled["y"] == 600
    assert scaled["fontSize"] == 40


def test_scale_element_image_scales_box():
    scaled = scale_element(
        {"type": "image", "x": 100, "y": 100, "width": 200, "height": 300}, 400, 600,
    )
    assert scaled == {"type": "image", "x": 50, "y": 50, "width": 100, "height": 150}


def test_scale_element_leaves_input_untouched():
    element = {"type": "text", "x": 400, "y": 600}
    scale_element(element, 1600, 2400)
    assert element["x"] == 400


def test_parse_hex_color():
    assert parse_hex_color("#f00", 0.5) == (255, 0, 0, 128)
    assert parse_hex_color("#336699") == (51, 102, 153, 255)


def test_parse_hex_color_invalid_is_white():
    assert parse_hex_color("zzz") == (255, 255, 255, 255)
    assert parse_hex_color("#12345") == (255, 255, 255, 255)


def test_has_project_watermark():
    assert not has_project_watermark(None, None, [])
    assert has_project_watermark("Gala", None, None)
    assert has_project_watermark(None, "https://x/logo.png", None)
    assert has_project_watermark(None, None, [{"type": "text"}])
