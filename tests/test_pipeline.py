import math

import numpy as np
import pytest
from PIL import Image

from conftest import diagonal_line_image, solid_image
from etchsketch.drawing.stroke_engine.pipeline import BACKGROUND, generate_stroke, letterbox


def test_uniform_gray_image_yields_no_stroke():
    assert generate_stroke(solid_image(100, 100, 128), 100, 100) == []


def test_diagonal_line_is_traced():
    points = generate_stroke(diagonal_line_image(), 100, 100, start_time=0)

    assert points
    for p in points:
        assert 0 <= p.x < 100 and 0 <= p.y < 100
        # Sobel only responds within one pixel of the line's 3x3 window
        assert abs(p.x - p.y) <= 2
        assert 30 <= p.x <= 65
    for a, b in zip(points, points[1:]):
        assert math.hypot(b.x - a.x, b.y - a.y) <= 50
        assert b.timestamp - a.timestamp == 8


def test_stroke_respects_point_cap():
    points = generate_stroke(diagonal_line_image(), 100, 100, max_points=5, start_time=0)
    assert len(points) == 5


def test_letterbox_pads_wide_image_top_and_bottom():
    wide = Image.fromarray(np.tile(np.array([255, 0, 0], dtype=np.uint8), (100, 200, 1)), "RGB")
    canvas = letterbox(wide, 100, 100)

    assert canvas.size == (100, 100)
    assert canvas.mode == "RGBA"
    assert canvas.getpixel((50, 10)) == BACKGROUND + (255,)
    assert canvas.getpixel((50, 24)) == BACKGROUND + (255,)
    assert canvas.getpixel((50, 90)) == BACKGROUND + (255,)
    r, g, b, a = canvas.getpixel((50, 50))
    assert r >= 250 and g <= 5 and b <= 5 and a == 255


def test_letterbox_pads_tall_image_left_and_right():
    tall = solid_image(50, 100, 0)
    canvas = letterbox(tall, 200, 100)

    assert canvas.getpixel((10, 50)) == BACKGROUND + (255,)
    assert canvas.getpixel((190, 50)) == BACKGROUND + (255,)
    assert canvas.getpixel((100, 50))[:3] == (0, 0, 0)


def test_transparent_pixels_show_background():
    clear = Image.new("RGBA", (40, 40), (0, 0, 0, 0))
    canvas = letterbox(clear, 40, 40)
    assert canvas.getpixel((20, 20)) == BACKGROUND + (255,)


def test_rejects_empty_canvas():
    with pytest.raises(ValueError):
        generate_stroke(solid_image(), 0, 100)
