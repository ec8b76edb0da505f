"""
Geometry primitives and helpers for branch structures.
"""

import math
import numpy as np
from collections import Counter
from typing import Iterable, List, NamedTuple, Sequence, Tuple
from shapely.geometry import LineString
from shapely.ops import unary_union

Vector = Tuple[float, float, float]

PLANES = {
    "xy": (0, 1),
    "xz": (0, 2),
    "yz": (1, 2),
}


class Position(NamedTuple):
    """Immutable point in 3D space."""

    x: float
    y: float
    z: float

    def translate(self, vector: Sequence[float]) -> "Position":
        """Return a new position moved by `vector`."""
        dx, dy, dz = vector
        return Position(self.x + dx, self.y + dy, self.z + dz)

    def distance_to(self, other: "Position") -> float:
        return math.dist(self, other)


class Segment(NamedTuple):
    """One branch, from `start` to `end`."""

    start: Position
    end: Position

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def to_linestring(self) -> LineString:
        return LineString([tuple(self.start), tuple(self.end)])

    def as_tuple(self) -> Tuple[Vector, Vector]:
        return tuple(self.start), tuple(self.end)


ORIGIN = Position(0.0, 0.0, 0.0)


def as_position(value: Sequence[float]) -> Position:
    """
    Coerce a 3-sequence into a Position.

    Args:
        value: (x, y, z) coordinates

    Returns:
        Position with float coordinates
    """
    if isinstance(value, Position):
        return value
    if len(value) != 3:
        raise ValueError(f"Position needs 3 coordinates, got {len(value)}")
    return Position(*(float(c) for c in value))


def segment_multiset(segments: Iterable[Segment]) -> Counter:
    """
    Count segments as geometric pairs, ignoring traversal order.

    Coordinates are rounded so that float noise from repeated
    translations does not split otherwise equal segments.
    """
    return Counter(
        (
            tuple(round(c, 9) for c in seg.start),
            tuple(round(c, 9) for c in seg.end),
        )
        for seg in segments
    )


def project(position: Sequence[float], plane: str = "yz") -> Tuple[float, float]:
    """
    Project a 3D position onto one of the axis planes.

    Args:
        position: (x, y, z) coordinates
        plane: One of 'xy', 'xz', 'yz'

    Returns:
        2D coordinates in that plane
    """
    try:
        i, j = PLANES[plane]
    except KeyError:
        raise ValueError(f"Unknown plane: {plane}") from None
    return position[i], position[j]


def bounding_box(segments: Sequence[Segment]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Axis-aligned bounding box of all segment endpoints.

    Returns:
        (min_xyz, max_xyz) arrays; zeros for an empty input
    """
    if not segments:
        return np.zeros(3), np.zeros(3)

    points = np.array([p for seg in segments for p in seg])
    return points.min(axis=0), points.max(axis=0)


def thicken_segments(
    segments: Sequence[Segment],
    radius: float,
    plane: str = "yz"
):
    """
    Turn a set of branch centre lines into a solid 2D outline.

    Each segment is projected onto `plane`, buffered by `radius` and the
    results are merged.

    Args:
        segments: Branch segments
        radius: Half width of a branch
        plane: Projection plane

    Returns:
        Shapely Polygon or MultiPolygon (empty for no segments)
    """
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")

    outlines: List = []
    for seg in segments:
        line = LineString([project(seg.start, plane), project(seg.end, plane)])
        outlines.append(line.buffer(radius))

    return unary_union(outlines)
