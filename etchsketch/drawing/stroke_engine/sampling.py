import math
import logging
from typing import Dict, List, Tuple

from .edges import EdgePoint

logger = logging.getLogger("stroke_engine")

MAX_POINTS = 7500
CELL_SIZE = 12
OVERSAMPLE = 1.2
CELL_KEEP_RATIO = 0.3


def cell_quota(cell_edge_count: int, edges_per_cell: int) -> int:
    return min(edges_per_cell, max(1, int(cell_edge_count * CELL_KEEP_RATIO)))


def sample_edges(
    edges: List[EdgePoint],
    width: int,
    height: int,
    max_points: int = MAX_POINTS,
    cell_size: int = CELL_SIZE,
) -> List[Tuple[int, int]]:
    """
    Bounds the edge count ahead of path building.

    Below max_points * 1.2 every edge passes through. Above it, edges are
    binned into a cell_size grid and each cell keeps its strongest edges, at
    most 30% of the cell and at most ceil(max_points / cell_count).
    """
    if len(edges) <= max_points * OVERSAMPLE:
        return [(e.x, e.y) for e in edges]

    cols = math.ceil(width / cell_size)
    rows = math.ceil(height / cell_size)
    cell_count = max(1, cols * rows)
    edges_per_cell = math.ceil(max_points / cell_count)

    cells: Dict[Tuple[int, int], List[EdgePoint]] = {}
    for e in edges:
        cells.setdefault((e.x // cell_size, e.y // cell_size), []).append(e)

    sampled: List[Tuple[int, int]] = []
    for cell_edges in cells.values():
        keep = cell_quota(len(cell_edges), edges_per_cell)
        strongest = sorted(cell_edges, key=lambda e: e.magnitude, reverse=True)[:keep]
        sampled.extend((e.x, e.y) for e in strongest)

    logger.debug(
        "sampled %d of %d edges over %d cells (quota %d)",
        len(sampled), len(edges), len(cells), edges_per_cell,
    )
    return sampled
