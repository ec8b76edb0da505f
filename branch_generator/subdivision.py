"""
Recursive subdivision of rectangular cells.
"""

import logging
from collections import deque
from typing import Iterable, List, Sequence, Tuple

from shapely.geometry import Polygon, box

logger = logging.getLogger(__name__)

Bounds = Tuple[float, float, float, float]


def _as_bounds(cell) -> Bounds:
    if isinstance(cell, Polygon):
        return cell.bounds
    minx, miny, maxx, maxy = cell
    if maxx <= minx or maxy <= miny:
        raise ValueError(f"Degenerate bounds: {cell!r}")
    return float(minx), float(miny), float(maxx), float(maxy)


def split_cell(bounds: Bounds, ratio: float = 0.5) -> Tuple[Bounds, Bounds]:
    """
    Split a rectangle in two across its longer side.

    Args:
        bounds: (minx, miny, maxx, maxy)
        ratio: Fraction of the longer side given to the first half

    Returns:
        (first, second) bounds; first is the lower/left part
    """
    minx, miny, maxx, maxy = bounds
    if maxx - minx >= maxy - miny:
        cut = minx + (maxx - minx) * ratio
        return (minx, miny, cut, maxy), (cut, miny, maxx, maxy)
    cut = miny + (maxy - miny) * ratio
    return (minx, miny, maxx, cut), (minx, cut, maxx, maxy)


def quarter_cell(bounds: Bounds) -> Tuple[Bounds, ...]:
    """Split a rectangle into four quadrants (SW, SE, NW, NE)."""
    minx, miny, maxx, maxy = bounds
    midx = (minx + maxx) / 2
    midy = (miny + maxy) / 2
    return (
        (minx, miny, midx, midy),
        (midx, miny, maxx, midy),
        (minx, midy, midx, maxy),
        (midx, midy, maxx, maxy),
    )


def subdivide(
    cell,
    depth: int,
    ratio: float = 0.5,
    min_size: float = 0.0
) -> List[Polygon]:
    """
    Subdivide a rectangle by repeated halving.

    Each level splits every cell across its longer side. A split that
    would leave a side shorter than `min_size` is skipped and the cell is
    kept as a leaf.

    Args:
        cell: Shapely box or (minx, miny, maxx, maxy)
        depth: Number of levels
        ratio: Split position along the longer side, in (0, 1)
        min_size: Smallest allowed side length

    Returns:
        Leaf cells, depth-first with the first half first
    """
    if depth < 0:
        raise ValueError(f"depth must be >= 0, got {depth}")
    if not 0.0 < ratio < 1.0:
        raise ValueError(f"ratio must be in (0, 1), got {ratio}")

    leaves: List[Polygon] = []
    stack = [(_as_bounds(cell), depth)]

    while stack:
        bounds, remaining = stack.pop()
        if remaining == 0:
            leaves.append(box(*bounds))
            continue

        first, second = split_cell(bounds, ratio)
        if min(_min_side(first), _min_side(second)) < min_size:
            leaves.append(box(*bounds))
            continue

        stack.append((second, remaining - 1))
        stack.append((first, remaining - 1))

    logger.debug("Subdivided into %d cells (depth %d)", len(leaves), depth)
    return leaves


def subdivide_by_codes(cell, codes: Iterable[int]) -> List[Polygon]:
    """
    Subdivide a rectangle following a code sequence.

    Codes are paired with cells in creation order: 1 halves the cell
    across its longer side, 2 splits it into quadrants, anything else
    leaves it whole. Codes left after every cell is final are consumed
    without effect.

    Args:
        cell: Shapely box or (minx, miny, maxx, maxy)
        codes: Code sequence; copied, never mutated

    Returns:
        Leaf cells: finished cells in the order they were finished,
        followed by cells that never received a code
    """
    stream = deque(codes)
    pending = deque([_as_bounds(cell)])
    leaves: List[Polygon] = []

    while stream:
        code = stream.popleft()
        if not pending:
            continue

        bounds = pending.popleft()
        if code == 1:
            pending.extend(split_cell(bounds))
        elif code == 2:
            pending.extend(quarter_cell(bounds))
        else:
            leaves.append(box(*bounds))

    leaves.extend(box(*bounds) for bounds in pending)
    return leaves


def _min_side(bounds: Sequence[float]) -> float:
    minx, miny, maxx, maxy = bounds
    return min(maxx - minx, maxy - miny)
