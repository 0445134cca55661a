"""
Image -> stroke pipeline.

The image is letterboxed onto a canvas of the target size, then run through
grayscale, Sobel, non-maximum suppression, hysteresis, adaptive sampling and
nearest-neighbour path building. Each call is independent; nothing is kept
between calls.
"""
import logging
from typing import List, Optional

import numpy as np
from PIL import Image

from ..ingestion.models import StrokePoint
from .edges import apply_hysteresis, detect_gradients, suppress_non_maxima, to_grayscale
from .sampling import MAX_POINTS, sample_edges
from .path_builder import build_path

logger = logging.getLogger("stroke_engine")

BACKGROUND = (229, 231, 235)  # #e5e7eb, same as the drawing canvas


def letterbox(image: Image.Image, width: int, height: int) -> Image.Image:
    """
    Scales image to fit width x height keeping aspect ratio, centred on a
    BACKGROUND canvas. Returns an RGBA image of exactly width x height.
    """
    img_aspect = image.width / image.height
    canvas_aspect = width / height

    draw_w, draw_h = float(width), float(height)
    offset_x, offset_y = 0.0, 0.0
    if img_aspect > canvas_aspect:
        # Wider than the canvas, pad top and bottom
        draw_h = width / img_aspect
        offset_y = (height - draw_h) / 2
    else:
        draw_w = height * img_aspect
        offset_x = (width - draw_w) / 2

    size = (max(1, int(round(draw_w))), max(1, int(round(draw_h))))
    scaled = image.convert("RGBA").resize(size, Image.Resampling.LANCZOS)

    canvas = Image.new("RGBA", (width, height), BACKGROUND + (255,))
    canvas.alpha_composite(scaled, dest=(int(round(offset_x)), int(round(offset_y))))
    return canvas


def generate_stroke(
    image: Image.Image,
    width: int,
    height: int,
    max_points: int = MAX_POINTS,
    start_time: Optional[float] = None,
) -> List[StrokePoint]:
    """
    Converts a decoded image into an ordered, timestamped stroke of at most
    max_points points. A flat image yields an empty list, which callers treat
    as "nothing to draw" rather than an error.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Canvas size must be positive, got {width}x{height}")

    canvas = letterbox(image, width, height)
    buffer = np.asarray(canvas, dtype=np.uint8)

    intensity = to_grayscale(buffer, width, height)
    gradients = detect_gradients(intensity, width, height)
    thinned = suppress_non_maxima(gradients)
    edges = apply_hysteresis(thinned)
    logger.debug(
        "edges: gradients=%d thinned=%d filtered=%d",
        len(gradients), len(thinned), len(edges),
    )

    if not edges:
        logger.info("No edges survived filtering for %dx%d canvas", width, height)
        return []

    sampled = sample_edges(edges, width, height, max_points=max_points)
    points = build_path(sampled, max_points=max_points, start_time=start_time)
    logger.info("Generated stroke with %d points from %d edges", len(points), len(edges))
    return points
