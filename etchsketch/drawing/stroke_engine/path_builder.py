import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..ingestion.models import StrokePoint
from .sampling import MAX_POINTS

JUMP_THRESHOLD = 50.0
TIMESTAMP_STEP = 8  # ms per point, uniform replay speed


def build_path(
    points: Sequence[Tuple[int, int]],
    max_points: int = MAX_POINTS,
    start_time: Optional[float] = None,
) -> List[StrokePoint]:
    """
    Orders edge points into one continuous stroke by greedy nearest neighbour.

    Starts at points[0]. When the nearest remaining point is farther than
    JUMP_THRESHOLD the walk restarts from the first remaining point instead,
    which renders as a straight travel line between regions. Not tour-optimal.
    """
    if not points or max_points <= 0:
        return []

    if start_time is None:
        start_time = int(time.time() * 1000)

    first_x, first_y = points[0][0], points[0][1]
    path = [StrokePoint(x=first_x, y=first_y, timestamp=start_time)]

    coords = np.array([(p[0], p[1]) for p in points[1:]], dtype=np.float64).reshape(-1, 2)
    xs, ys = coords[:, 0], coords[:, 1]
    taken = np.zeros(len(coords), dtype=bool)
    remaining = len(coords)
    first_free = 0
    cx, cy = float(first_x), float(first_y)
    threshold_sq = JUMP_THRESHOLD * JUMP_THRESHOLD

    while remaining > 0 and len(path) < max_points:
        dist_sq = (xs - cx) ** 2 + (ys - cy) ** 2
        dist_sq[taken] = np.inf
        idx = int(np.argmin(dist_sq))

        if dist_sq[idx] > threshold_sq:
            while taken[first_free]:
                first_free += 1
            idx = first_free

        taken[idx] = True
        remaining -= 1
        cx, cy = xs[idx], ys[idx]
        path.append(StrokePoint(
            x=points[idx + 1][0],
            y=points[idx + 1][1],
            timestamp=start_time + len(path) * TIMESTAMP_STEP,
        ))

    return path
