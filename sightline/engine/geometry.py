"""Vector helpers shared by the wall resolver and the visibility engine.

Everything here works on ``Position`` values in grid units and is a pure
function of its arguments. The two epsilons are part of the line-of-sight
contract:

  * ``SIDE_EPSILON``: cross products smaller than this count as collinear
    in ``side_of_line``.
  * ``PARALLEL_EPSILON``: determinants smaller than this make
    ``segments_intersect`` report no hit. Overlapping collinear segments
    are deliberately not detected; a wall edge lying exactly along a
    sightline produces no thin intersection.
"""

from __future__ import annotations

import math

from .types import Position

SIDE_EPSILON = 1e-10
PARALLEL_EPSILON = 1e-10


def cell_center(position: Position) -> Position:
    """Center point of the grid cell at ``position``."""
    return Position(position.x + 0.5, position.y + 0.5)


def cell_of(point: Position) -> tuple[int, int]:
    """Integer grid cell containing ``point``."""
    return math.floor(point.x), math.floor(point.y)


def normalize(a: Position, b: Position) -> Position:
    """Unit vector pointing from ``a`` to ``b``; ``(0, 0)`` if they coincide."""
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy)
    if length == 0:
        return Position(0.0, 0.0)
    return Position(dx / length, dy / length)


def perpendicular(d: Position) -> Position:
    return Position(-d.y, d.x)


def distance_to_segment(
    p: Position, seg_start: Position, seg_end: Position
) -> float:
    """Distance from ``p`` to the closest point of the segment.

    Projects onto the segment and clamps the parameter to [0, 1], so points
    beyond either end measure to that endpoint.
    """
    sx = seg_end.x - seg_start.x
    sy = seg_end.y - seg_start.y
    seg_len_sq = sx * sx + sy * sy
    if seg_len_sq == 0:
        return math.hypot(p.x - seg_start.x, p.y - seg_start.y)

    t = ((p.x - seg_start.x) * sx + (p.y - seg_start.y) * sy) / seg_len_sq
    t = max(0.0, min(1.0, t))
    proj_x = seg_start.x + t * sx
    proj_y = seg_start.y + t * sy
    return math.hypot(p.x - proj_x, p.y - proj_y)


def side_of_line(p: Position, line_start: Position, line_end: Position) -> int:
    """Which side of the directed line ``p`` falls on: +1, -1 or 0."""
    cross = (line_end.x - line_start.x) * (p.y - line_start.y) - (
        line_end.y - line_start.y
    ) * (p.x - line_start.x)
    if abs(cross) < SIDE_EPSILON:
        return 0
    return 1 if cross > 0 else -1


def segments_intersect(
    a_start: Position,
    a_end: Position,
    b_start: Position,
    b_end: Position,
) -> Position | None:
    """Intersection point of two segments, endpoints included.

    Returns None for parallel (or collinear) segments and when the crossing
    of the supporting lines falls outside either segment.
    """
    x1 = a_end.x - a_start.x
    y1 = a_end.y - a_start.y
    x2 = b_end.x - b_start.x
    y2 = b_end.y - b_start.y

    det = x1 * y2 - y1 * x2
    if abs(det) < PARALLEL_EPSILON:
        return None

    dx = b_start.x - a_start.x
    dy = b_start.y - a_start.y
    t = (dx * y2 - dy * x2) / det
    if t < 0 or t > 1:
        return None
    s = (dx * y1 - dy * x1) / det
    if s < 0 or s > 1:
        return None

    return Position(a_start.x + t * x1, a_start.y + t * y1)
