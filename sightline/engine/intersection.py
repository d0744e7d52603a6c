"""Where a sightline meets one wall body, and whether it passes through it.

The sightline is treated as a thick segment of width ``line_thickness``
(0.05 grid units by default). Two separate questions are answered per wall:

  * ``find_wall_intersections``: the points where the thin centerline
    crosses a wall edge, plus any wall corner lying within half the line
    width of the centerline (a near miss the thick line still touches).
  * ``wall_protrudes``: whether the wall has corners strictly on both
    sides of the line. Corners within half the line width are swallowed by
    the line and take no side.

``visibility.py`` combines both: a wall only blocks when it protrudes and
its intersections are geometrically distinct.
"""

from __future__ import annotations

from .geometry import distance_to_segment, segments_intersect, side_of_line
from .types import LINE_THICKNESS, Intersection, Position
from .walls import Corners

# Corner captures this close to an existing hit are the same point.
DUPLICATE_EPSILON = 1e-5


def _already_recorded(
    point: Position, intersections: list[Intersection]
) -> bool:
    return any(
        abs(i.point.x - point.x) < DUPLICATE_EPSILON
        and abs(i.point.y - point.y) < DUPLICATE_EPSILON
        for i in intersections
    )


def find_wall_intersections(
    line_start: Position,
    line_end: Position,
    corners: Corners,
    wall_index: int,
    line_thickness: float = LINE_THICKNESS,
) -> list[Intersection]:
    """Intersections between the sightline and one wall polygon.

    Edge hits come first (distance 0), in edge order; corner captures
    follow, tagged with the index of the edge starting at that corner.
    """
    result: list[Intersection] = []
    n = len(corners)

    for i in range(n):
        hit = segments_intersect(
            line_start, line_end, corners[i], corners[(i + 1) % n]
        )
        if hit is None:
            continue
        result.append(
            Intersection(
                wall_index=wall_index,
                point=hit,
                edge_index=i,
                distance=0.0,
                side=side_of_line(hit, line_start, line_end),
            )
        )

    half_width = line_thickness / 2
    for i, corner in enumerate(corners):
        dist = distance_to_segment(corner, line_start, line_end)
        if dist > half_width or _already_recorded(corner, result):
            continue
        result.append(
            Intersection(
                wall_index=wall_index,
                point=corner,
                edge_index=i,
                distance=dist,
                side=side_of_line(corner, line_start, line_end),
            )
        )

    return result


def wall_protrudes(
    line_start: Position,
    line_end: Position,
    corners: Corners,
    line_thickness: float = LINE_THICKNESS,
) -> bool:
    """True if the wall has corners on both sides of the thick sightline."""
    half_width = line_thickness / 2
    positive = False
    negative = False
    for corner in corners:
        if distance_to_segment(corner, line_start, line_end) <= half_width:
            continue
        side = side_of_line(corner, line_start, line_end)
        if side > 0:
            positive = True
        elif side < 0:
            negative = True
    return positive and negative
