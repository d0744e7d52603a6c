"""Line-of-sight decision between two occupied grid cells.

This module answers the question: can a token in cell A see a token in
cell B, given a set of active walls? The sightline runs between the two
cell centers and is modeled as a thick segment (``LINE_THICKNESS`` wide).
Each wall is resolved to its body quadrilateral (walls.py) and analyzed
independently (intersection.py).

A wall blocks the sightline only if both hold:

  protrusion      The wall has corners strictly on both sides of the line,
                  i.e. the line passes through the body rather than along
                  or past one of its faces.

  distinct hits   The wall has at least two recorded intersections and at
                  least one pair of them is further apart than
                  ``INTERSECTION_TOLERANCE``. A line through a single
                  corner, or one that clips a sliver of wall thinner than
                  the tolerance, touches the wall without crossing it.

Together these encode the tabletop convention that a sightline running
along a wall face or through its very corner is not blocked by a hair's
width.

The result carries every wall's intersections and the indices of all
protruding and blocking walls, not just the first blocker, so a renderer
can show why a line was blocked. Degenerate (zero-length) walls are skipped.

Breakable layers and smoke are composed on top of this in ``layers.py``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from .geometry import cell_center
from .intersection import find_wall_intersections, wall_protrudes
from .types import (
    INTERSECTION_TOLERANCE,
    LINE_THICKNESS,
    Intersection,
    Position,
    VisibilityResult,
    Wall,
)
from .walls import is_degenerate, wall_corners

logger = logging.getLogger("sightline.engine")


def _has_distinct_points(
    intersections: Sequence[Intersection], tolerance: float
) -> bool:
    """True if any two intersections are further apart than ``tolerance``."""
    n = len(intersections)
    for i in range(n):
        pi = intersections[i].point
        for j in range(i + 1, n):
            pj = intersections[j].point
            if math.hypot(pi.x - pj.x, pi.y - pj.y) > tolerance:
                return True
    return False


def compute_visibility(
    pos_a: Position,
    pos_b: Position,
    active_walls: Sequence[Wall],
    line_thickness: float = LINE_THICKNESS,
    tolerance: float = INTERSECTION_TOLERANCE,
) -> VisibilityResult:
    """Decide whether ``active_walls`` block the sightline between two cells.

    Args:
        pos_a: Grid cell of the first token.
        pos_b: Grid cell of the second token.
        active_walls: Walls that currently block sight. ``wall_index`` in
            the returned intersections indexes this sequence.
        line_thickness: Width of the sightline in grid units.
        tolerance: Maximum spread of a wall's intersections still treated
            as a single grazing contact.

    Returns:
        ``VisibilityResult`` with the verdict, all intersections and the
        indices of protruding and blocking walls.
    """
    start = cell_center(pos_a)
    end = cell_center(pos_b)

    blocking: list[int] = []
    intersections: list[Intersection] = []
    protruding: list[int] = []

    for index, wall in enumerate(active_walls):
        if is_degenerate(wall):
            logger.debug(
                "Skipping zero-length wall %d at %s", index, wall.start
            )
            continue

        corners = wall_corners(wall)
        hits = find_wall_intersections(
            start, end, corners, index, line_thickness
        )
        intersections.extend(hits)

        if not wall_protrudes(start, end, corners, line_thickness):
            continue
        protruding.append(index)

        if len(hits) >= 2 and _has_distinct_points(hits, tolerance):
            blocking.append(index)

    return VisibilityResult(
        blocked=bool(blocking),
        intersections=tuple(intersections),
        protruding_walls=tuple(protruding),
        blocking_walls=tuple(blocking),
    )


def is_visible(
    pos_a: Position,
    pos_b: Position,
    active_walls: Sequence[Wall],
    line_thickness: float = LINE_THICKNESS,
) -> bool:
    """Convenience wrapper: True if no wall blocks the sightline."""
    return not compute_visibility(
        pos_a, pos_b, active_walls, line_thickness
    ).blocked
