"""Breakable wall layers and smoke, composed on top of the wall test.

Maps carry four wall layers (``WallLayer``): ``main`` walls never break,
``red``, ``orange`` and ``window`` walls can be broken during a game. The
current game state lists broken indices per breakable layer
(``BrokenWalls``). ``resolve_active_walls`` is the single place that turns
layers + broken state into the wall list fed to ``compute_visibility``.

Smoke is a separate, cell-based occlusion test evaluated only when no wall
blocks. Each smoke covers a rectangle of whole cells. Rules per cell:

  * Smoke in either token's own cell never blocks that token's sight.
  * Tokens in adjacent cells of the same row (or column) always see each
    other past smoke. The only cells such a line overlaps are the two
    token cells, so the own-cell rule already covers this case.
  * Horizontal sightlines are blocked by a cell whose row strictly contains
    the line and whose column range overlaps the line; vertical sightlines
    likewise with axes swapped.
  * Diagonal sightlines are blocked by a cell containing an endpoint, or a
    cell whose corners fall strictly on both sides of the line while the
    segment's bounding box overlaps the cell.

The three sightline orientations are handled by separate branches on
purpose; they encode table rules rather than one generic cell/segment
test.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from .geometry import cell_center, cell_of
from .types import (
    LINE_THICKNESS,
    BrokenWalls,
    GridSize,
    Position,
    Smoke,
    VisibilityConfig,
    VisibilityResult,
    Wall,
    WallLayer,
    WallLayers,
)
from .visibility import compute_visibility

logger = logging.getLogger("sightline.engine")

_AXIS_EPSILON = 1e-10


class ActiveWall(NamedTuple):
    layer: WallLayer
    index: int
    wall: Wall


def resolve_active_walls(
    layers: WallLayers, broken: BrokenWalls | None = None
) -> list[ActiveWall]:
    """Walls that currently block sight, tagged with their layer and index.

    Main walls come first, then the unbroken red, orange and window walls,
    each in their original order.
    """
    broken = broken or BrokenWalls()
    result: list[ActiveWall] = []
    for layer in WallLayer:
        for i, wall in enumerate(layers.walls(layer)):
            if layer.breakable and broken.is_broken(layer, i):
                continue
            result.append(ActiveWall(layer, i, wall))
    return result


def _layers(
    main_walls: Sequence[Wall],
    red_walls: Sequence[Wall],
    orange_walls: Sequence[Wall],
    window_walls: Sequence[Wall],
) -> WallLayers:
    return WallLayers(
        main=tuple(main_walls),
        red=tuple(red_walls),
        orange=tuple(orange_walls),
        window=tuple(window_walls),
    )


def is_visible_with_layers(
    pos_a: Position,
    pos_b: Position,
    main_walls: Sequence[Wall],
    red_walls: Sequence[Wall] = (),
    orange_walls: Sequence[Wall] = (),
    window_walls: Sequence[Wall] = (),
    broken_walls: BrokenWalls | None = None,
    line_thickness: float = LINE_THICKNESS,
) -> bool:
    """Wall-only line of sight with broken breakable walls removed."""
    layers = _layers(main_walls, red_walls, orange_walls, window_walls)
    active = [a.wall for a in resolve_active_walls(layers, broken_walls)]
    return not compute_visibility(pos_a, pos_b, active, line_thickness).blocked


def _cell_blocks_line(
    cell_x: int, cell_y: int, start: Position, end: Position
) -> bool:
    """Whether smoke in one cell blocks the sightline ``start`` -> ``end``."""
    start_cell = cell_of(start)
    end_cell = cell_of(end)
    if (cell_x, cell_y) == start_cell or (cell_x, cell_y) == end_cell:
        return False

    horizontal = abs(start.y - end.y) < _AXIS_EPSILON
    vertical = abs(start.x - end.x) < _AXIS_EPSILON

    if horizontal:
        y = start.y
        if not cell_y < y < cell_y + 1:
            return False
        min_x = min(start.x, end.x)
        max_x = max(start.x, end.x)
        return min_x <= cell_x + 1 and max_x >= cell_x

    if vertical:
        x = start.x
        if not cell_x < x < cell_x + 1:
            return False
        min_y = min(start.y, end.y)
        max_y = max(start.y, end.y)
        return min_y <= cell_y + 1 and max_y >= cell_y

    for p in (start, end):
        if cell_x < p.x < cell_x + 1 and cell_y < p.y < cell_y + 1:
            return True

    # Implicit line a*x + b*y + c = 0 through both endpoints.
    a = end.y - start.y
    b = start.x - end.x
    c = end.x * start.y - start.x * end.y
    positive = False
    negative = False
    for cx, cy in (
        (cell_x, cell_y),
        (cell_x + 1, cell_y),
        (cell_x + 1, cell_y + 1),
        (cell_x, cell_y + 1),
    ):
        value = a * cx + b * cy + c
        if value > 0:
            positive = True
        elif value < 0:
            negative = True
    if not (positive and negative):
        return False

    return (
        min(start.x, end.x) <= cell_x + 1
        and max(start.x, end.x) >= cell_x
        and min(start.y, end.y) <= cell_y + 1
        and max(start.y, end.y) >= cell_y
    )


def find_blocking_smoke(
    pos_a: Position, pos_b: Position, smokes: Sequence[Smoke]
) -> tuple[int, int] | None:
    """First smoke cell that blocks the sightline between two cells, or None."""
    start = cell_center(pos_a)
    end = cell_center(pos_b)
    for smoke in smokes:
        for cell_x, cell_y in smoke.cells():
            if _cell_blocks_line(cell_x, cell_y, start, end):
                logger.debug(
                    "Smoke cell (%d, %d) blocks %s -> %s",
                    cell_x,
                    cell_y,
                    pos_a,
                    pos_b,
                )
                return cell_x, cell_y
    return None


def is_visible_with_smoke(
    pos_a: Position,
    pos_b: Position,
    main_walls: Sequence[Wall],
    red_walls: Sequence[Wall] = (),
    orange_walls: Sequence[Wall] = (),
    window_walls: Sequence[Wall] = (),
    smokes: Sequence[Smoke] = (),
    broken_walls: BrokenWalls | None = None,
    line_thickness: float = LINE_THICKNESS,
) -> bool:
    """Line of sight through walls, breakable layers and smoke."""
    if not is_visible_with_layers(
        pos_a,
        pos_b,
        main_walls,
        red_walls,
        orange_walls,
        window_walls,
        broken_walls,
        line_thickness,
    ):
        return False
    return find_blocking_smoke(pos_a, pos_b, smokes) is None


@dataclass(frozen=True)
class LineOfSightReport:
    visible: bool
    walls: VisibilityResult
    active_walls: tuple[ActiveWall, ...]
    blocking_smoke: tuple[int, int] | None = None

    def blocking_sources(self) -> list[ActiveWall]:
        """Active walls that block the sightline."""
        return [self.active_walls[i] for i in self.walls.blocking_walls]


def check_line_of_sight(
    pos_a: Position,
    pos_b: Position,
    layers: WallLayers,
    broken: BrokenWalls | None = None,
    smokes: Sequence[Smoke] = (),
    config: VisibilityConfig | None = None,
) -> LineOfSightReport:
    """Full line-of-sight query with diagnostics for renderers and the CLI."""
    config = config or VisibilityConfig()
    active = tuple(resolve_active_walls(layers, broken))
    wall_result = compute_visibility(
        pos_a,
        pos_b,
        [a.wall for a in active],
        config.line_thickness,
        config.intersection_tolerance,
    )
    smoke_cell = None
    if not wall_result.blocked:
        smoke_cell = find_blocking_smoke(pos_a, pos_b, smokes)
    return LineOfSightReport(
        visible=not wall_result.blocked and smoke_cell is None,
        walls=wall_result,
        active_walls=active,
        blocking_smoke=smoke_cell,
    )


def visibility_grid(
    origin: Position,
    layers: WallLayers,
    grid_size: GridSize,
    broken: BrokenWalls | None = None,
    smokes: Sequence[Smoke] = (),
    config: VisibilityConfig | None = None,
) -> np.ndarray:
    """Boolean (height, width) array of the cells visible from ``origin``.

    ``grid[y, x]`` is the verdict of ``check_line_of_sight`` between
    ``origin`` and cell ``(x, y)``. The origin cell always sees itself.
    """
    config = config or VisibilityConfig()
    active = [a.wall for a in resolve_active_walls(layers, broken)]
    grid = np.zeros((grid_size.height, grid_size.width), dtype=bool)
    ox, oy = cell_of(origin)
    for y in range(grid_size.height):
        for x in range(grid_size.width):
            if (x, y) == (ox, oy):
                grid[y, x] = True
                continue
            target = Position(float(x), float(y))
            result = compute_visibility(
                origin,
                target,
                active,
                config.line_thickness,
                config.intersection_tolerance,
            )
            if result.blocked:
                continue
            grid[y, x] = find_blocking_smoke(origin, target, smokes) is None
    return grid
