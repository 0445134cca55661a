"""
Edge extraction for image-to-stroke conversion.

Stages, in order:
1. to_grayscale        RGBA buffer -> unweighted mean intensity map
2. detect_gradients    Sobel magnitude/direction for every interior pixel
3. suppress_non_maxima thin edges to peaks along the gradient direction
4. apply_hysteresis    dual threshold, weak edges kept only next to strong ones
"""
import math
import logging
from typing import List, NamedTuple, Tuple, Union

import numpy as np

logger = logging.getLogger("stroke_engine")

BORDER = 2
HIGH_FLOOR = 80.0
LOW_FLOOR = 40.0
HIGH_RATIO = 0.8
LOW_RATIO = 0.4
TOP_FRACTION = 0.05

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


class GradientSample(NamedTuple):
    x: int
    y: int
    magnitude: float
    direction: float  # radians, atan2(sobel_y, sobel_x)


class EdgePoint(NamedTuple):
    x: int
    y: int
    magnitude: float


def to_grayscale(buffer: PixelBuffer, width: int, height: int) -> np.ndarray:
    """Returns a (height, width) uint8 map, the mean of R, G and B. Alpha is ignored."""
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        pixels = np.frombuffer(buffer, dtype=np.uint8)
    else:
        pixels = np.asarray(buffer, dtype=np.uint8)
    pixels = pixels.reshape(height, width, 4)
    total = pixels[:, :, :3].astype(np.uint16).sum(axis=2)
    return (total // 3).astype(np.uint8)


def detect_gradients(intensity: np.ndarray, width: int, height: int) -> List[GradientSample]:
    """
    Sobel gradients for x in [2, width-2), y in [2, height-2), row-major.
    The outer two-pixel border produces no samples.
    """
    if width - 2 * BORDER <= 0 or height - 2 * BORDER <= 0:
        return []

    img = np.asarray(intensity, dtype=np.int32).reshape(height, width)

    def shifted(dx: int, dy: int) -> np.ndarray:
        return img[BORDER + dy:height - BORDER + dy, BORDER + dx:width - BORDER + dx]

    sobel_x = (
        shifted(1, -1) + 2 * shifted(1, 0) + shifted(1, 1)
        - shifted(-1, -1) - 2 * shifted(-1, 0) - shifted(-1, 1)
    )
    sobel_y = (
        shifted(-1, 1) + 2 * shifted(0, 1) + shifted(1, 1)
        - shifted(-1, -1) - 2 * shifted(0, -1) - shifted(1, -1)
    )
    magnitude = np.sqrt(sobel_x.astype(np.float64) ** 2 + sobel_y.astype(np.float64) ** 2)
    direction = np.arctan2(sobel_y, sobel_x)

    ys, xs = np.mgrid[BORDER:height - BORDER, BORDER:width - BORDER]
    return [
        GradientSample(x, y, m, d)
        for x, y, m, d in zip(
            xs.ravel().tolist(),
            ys.ravel().tolist(),
            magnitude.ravel().tolist(),
            direction.ravel().tolist(),
        )
    ]


def _neighbor_offsets(direction: float) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    angle = math.degrees(direction)
    if angle < 0:
        angle += 180.0

    if angle < 22.5 or angle >= 157.5:
        return (1, 0), (-1, 0)
    if angle < 67.5:
        return (1, 1), (-1, -1)
    if angle < 112.5:
        return (0, 1), (0, -1)
    return (-1, 1), (1, -1)


def suppress_non_maxima(samples: List[GradientSample]) -> List[EdgePoint]:
    """
    Keeps a sample only if its magnitude is >= both neighbours along its
    gradient direction. Neighbours without a sample count as magnitude 0.
    """
    lookup = {(s.x, s.y): s for s in samples}
    thinned: List[EdgePoint] = []

    for s in samples:
        (ax, ay), (bx, by) = _neighbor_offsets(s.direction)
        a = lookup.get((s.x + ax, s.y + ay))
        b = lookup.get((s.x + bx, s.y + by))
        mag_a = a.magnitude if a is not None else 0.0
        mag_b = b.magnitude if b is not None else 0.0
        if s.magnitude >= mag_a and s.magnitude >= mag_b:
            thinned.append(EdgePoint(s.x, s.y, s.magnitude))

    return thinned


def hysteresis_thresholds(edges: List[EdgePoint]) -> Tuple[float, float]:
    """(high, low) derived from the top-5% magnitude cutoff."""
    if not edges:
        return HIGH_FLOOR, LOW_FLOOR
    ranked = sorted((e.magnitude for e in edges), reverse=True)
    cutoff = ranked[int(len(ranked) * TOP_FRACTION)]
    high = max(HIGH_FLOOR, cutoff * HIGH_RATIO)
    low = max(LOW_FLOOR, high * LOW_RATIO)
    return high, low


def apply_hysteresis(edges: List[EdgePoint]) -> List[EdgePoint]:
    """
    Strong edges (>= high) always survive. Weak edges (>= low, < high) survive
    only when one of their 8 neighbours is strong. Output lists the strong
    edges first, then the retained weak ones, each in input order.
    """
    if not edges:
        return []

    high, low = hysteresis_thresholds(edges)
    strong = [e for e in edges if e.magnitude >= high]
    weak = [e for e in edges if low <= e.magnitude < high]
    strong_coords = {(e.x, e.y) for e in strong}

    kept_weak = [
        e for e in weak
        if any(
            (e.x + dx, e.y + dy) in strong_coords
            for dx in (-1, 0, 1)
            for dy in (-1, 0, 1)
            if dx or dy
        )
    ]
    logger.debug(
        "hysteresis high=%.1f low=%.1f strong=%d weak=%d kept_weak=%d",
        high, low, len(strong), len(weak), len(kept_weak),
    )
    return strong + kept_weak
