"""Wall body geometry: from a wall descriptor to a thick quadrilateral.

A map wall is stored as a centerline between two grid intersections plus
thickness, a lateral offset and extensions past either end. The visibility
engine never looks at the centerline directly; it works on the four corners
returned by ``wall_corners``:

    top_left ----------------------- top_right
       |   start ------------> end      |        (+perp side)
    bottom_left ------------------- bottom_right

The ``+perp`` side is the direction vector rotated by 90 degrees; a positive
``offset`` moves the whole body towards it. Edges ``(0,1) (1,2) (2,3)
(3,0)`` trace the boundary in a consistent winding.

Also provides ``point_in_wall`` / ``wall_at_point`` for picking a wall
under the cursor in a map editor. Picking uses shapely so a pick tolerance
can grow the body with ``buffer()``; it is not used for line of sight.
"""

from __future__ import annotations

from collections.abc import Sequence

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from .geometry import normalize, perpendicular
from .types import Position, Wall

Corners = tuple[Position, Position, Position, Position]


def is_degenerate(wall: Wall) -> bool:
    """True for zero-length walls, whose corners all coincide."""
    return wall.start.x == wall.end.x and wall.start.y == wall.end.y


def wall_corners(wall: Wall) -> Corners:
    """Corners of the wall body: top_left, top_right, bottom_right, bottom_left."""
    d = normalize(wall.start, wall.end)
    perp = perpendicular(d)

    sx = wall.start.x - d.x * wall.start_extension + perp.x * wall.offset
    sy = wall.start.y - d.y * wall.start_extension + perp.y * wall.offset
    ex = wall.end.x + d.x * wall.end_extension + perp.x * wall.offset
    ey = wall.end.y + d.y * wall.end_extension + perp.y * wall.offset

    hx = perp.x * wall.thickness / 2
    hy = perp.y * wall.thickness / 2
    return (
        Position(sx + hx, sy + hy),
        Position(ex + hx, ey + hy),
        Position(ex - hx, ey - hy),
        Position(sx - hx, sy - hy),
    )


def wall_polygon(wall: Wall) -> ShapelyPolygon:
    return ShapelyPolygon([(c.x, c.y) for c in wall_corners(wall)])


def point_in_wall(point: Position, wall: Wall, tolerance: float = 0.0) -> bool:
    """Whether ``point`` lies on the wall body, grown by ``tolerance``.

    Degenerate walls have no area and only match within ``tolerance`` of
    their single point.
    """
    p = ShapelyPoint(point.x, point.y)
    if is_degenerate(wall):
        return p.distance(ShapelyPoint(wall.start.x, wall.start.y)) <= tolerance
    poly = wall_polygon(wall)
    if tolerance > 0:
        poly = poly.buffer(tolerance)
    return poly.covers(p)


def wall_at_point(
    point: Position, walls: Sequence[Wall], tolerance: float = 0.1
) -> int | None:
    """Index of the first wall under ``point``, or None."""
    for i, wall in enumerate(walls):
        if point_in_wall(point, wall, tolerance):
            return i
    return None
