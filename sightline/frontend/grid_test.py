"""Tests for pixel/grid coordinate mapping."""

from ..engine.types import GridOffset, GridSize, MapData, Position
from .grid import (
    FALLBACK_CELL_SIZE,
    compute_cell_size,
    grid_intersection_from_pixel,
    grid_position_from_pixel,
    grid_to_pixel,
    map_cell_size,
)

OFFSET = GridOffset(x=10, y=20, right=30, bottom=40)
SIZE = GridSize(width=10, height=5)


class TestCellSize:
    def test_fills_area_inside_margins(self):
        # 10 cells in 540 - 10 - 30 px, 5 cells in 270 - 20 - 40 px.
        assert compute_cell_size(540, 270, SIZE, OFFSET) == (50.0, 42.0)

    def test_zero_sized_grid_falls_back(self):
        w, h = compute_cell_size(100, 100, GridSize(0, 0), GridOffset())
        assert w == FALLBACK_CELL_SIZE
        assert h == FALLBACK_CELL_SIZE

    def test_stored_cell_size_wins(self):
        m = MapData(id="m", name="M", grid_size=SIZE, cell_size=32.0)
        assert map_cell_size(m, 540, 270) == 32.0

    def test_averaged_from_image(self):
        m = MapData(id="m", name="M", grid_size=SIZE, grid_offset=OFFSET)
        assert map_cell_size(m, 540, 270) == 46.0

    def test_no_image_no_stored_size(self):
        m = MapData(id="m", name="M", grid_size=SIZE)
        assert map_cell_size(m) == FALLBACK_CELL_SIZE


class TestPixelMapping:
    def test_grid_to_pixel(self):
        assert grid_to_pixel(Position(2, 3), OFFSET, 40) == (90, 140)

    def test_cell_from_pixel(self):
        pos = grid_position_from_pixel(95, 145, SIZE, OFFSET, 40)
        assert pos == Position(2, 3)

    def test_cell_corner_pixel_maps_back(self):
        for x, y in [(0, 0), (4, 2), (9, 4)]:
            px, py = grid_to_pixel(Position(x, y), OFFSET, 40)
            pos = grid_position_from_pixel(px, py, SIZE, OFFSET, 40)
            assert pos == Position(x, y)

    def test_outside_grid(self):
        assert grid_position_from_pixel(5, 50, SIZE, OFFSET, 40) is None
        assert grid_position_from_pixel(50, 10, SIZE, OFFSET, 40) is None
        assert grid_position_from_pixel(500, 50, SIZE, OFFSET, 40) is None
        assert grid_position_from_pixel(50, 300, SIZE, OFFSET, 40) is None

    def test_far_border_belongs_to_last_cell(self):
        pos = grid_position_from_pixel(410, 220, SIZE, OFFSET, 40)
        assert pos == Position(9, 4)

    def test_intersection_snaps_to_nearest(self):
        assert grid_intersection_from_pixel(
            69, 81, OFFSET, 40
        ) == Position(1, 2)
        assert grid_intersection_from_pixel(
            31, 39, OFFSET, 40
        ) == Position(1, 0)
