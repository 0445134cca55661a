import logging
from typing import List, Sequence, TypeVar

logger = logging.getLogger("stroke_engine")

# Storage rejects anything above this per drawing
MAX_STORED_POINTS = 8000

T = TypeVar("T")


def simplify_path(points: Sequence[T], max_points: int = MAX_STORED_POINTS) -> List[T]:
    """
    Uniformly subsamples a stroke down to max_points.

    Keeps the first and last points exactly and strides evenly through the
    middle. Strokes already within the limit are returned unchanged.
    """
    if len(points) <= max_points:
        return list(points)
    if max_points <= 0:
        return []
    if max_points == 1:
        return [points[0]]

    n = len(points)
    step = n / max_points
    simplified = [points[0]]
    for i in range(1, max_points - 1):
        idx = int(i * step)
        if 0 < idx < n:
            simplified.append(points[idx])
    simplified.append(points[-1])
    simplified = simplified[:max_points]

    logger.info("Simplified path from %d to %d points", n, len(simplified))
    return simplified


def concatenate_strokes(*strokes: Sequence[T]) -> List[T]:
    """Joins stroke streams in order, e.g. hand-drawn points then generated ones."""
    merged: List[T] = []
    for stroke in strokes:
        merged.extend(stroke)
    return merged
