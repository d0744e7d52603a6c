"""Mapping between map-image pixels and grid coordinates.

The grid is laid over the map image with pixel margins on each side
(``GridOffset``). Cells are square; when the map file does not store a
cell size, it is derived from the image size and margins.

Pure helpers with no Pillow dependency.
"""

from __future__ import annotations

import math

from ..engine.types import GridOffset, GridSize, MapData, Position

FALLBACK_CELL_SIZE = 40.0


def compute_cell_size(image_width, image_height, grid_size, grid_offset):
    """Cell (width, height) in pixels for a grid fitted inside the margins."""
    available_w = image_width - grid_offset.x - grid_offset.right
    available_h = image_height - grid_offset.y - grid_offset.bottom
    cell_w = (
        available_w / grid_size.width
        if grid_size.width > 0
        else FALLBACK_CELL_SIZE
    )
    cell_h = (
        available_h / grid_size.height
        if grid_size.height > 0
        else FALLBACK_CELL_SIZE
    )
    return cell_w, cell_h


def map_cell_size(map_data: MapData, image_width=None, image_height=None):
    """Square cell size for a map: stored value, else averaged from the image."""
    if map_data.cell_size:
        return map_data.cell_size
    if image_width is None or image_height is None:
        return FALLBACK_CELL_SIZE
    cell_w, cell_h = compute_cell_size(
        image_width, image_height, map_data.grid_size, map_data.grid_offset
    )
    return (cell_w + cell_h) / 2


def grid_to_pixel(point: Position, grid_offset: GridOffset, cell_size):
    """Grid coords (cell corners at integers) -> pixel coords."""
    return (
        grid_offset.x + point.x * cell_size,
        grid_offset.y + point.y * cell_size,
    )


def grid_position_from_pixel(
    px, py, grid_size: GridSize, grid_offset: GridOffset, cell_size
) -> Position | None:
    """Cell under a pixel, or None outside the grid."""
    if px < grid_offset.x or py < grid_offset.y:
        return None
    if (
        px > grid_offset.x + grid_size.width * cell_size
        or py > grid_offset.y + grid_size.height * cell_size
    ):
        return None
    gx = int((px - grid_offset.x) // cell_size)
    gy = int((py - grid_offset.y) // cell_size)
    # The far border belongs to the last cell.
    gx = min(gx, grid_size.width - 1)
    gy = min(gy, grid_size.height - 1)
    return Position(float(gx), float(gy))


def grid_intersection_from_pixel(px, py, grid_offset: GridOffset, cell_size):
    """Nearest grid intersection to a pixel (where wall endpoints snap)."""
    return Position(
        float(math.floor((px - grid_offset.x) / cell_size + 0.5)),
        float(math.floor((py - grid_offset.y) / cell_size + 0.5)),
    )
