"""Tests for the Pillow map renderer."""

from PIL import Image

from ..engine.layers import check_line_of_sight
from ..engine.types import (
    BrokenWalls,
    GridOffset,
    GridSize,
    MapData,
    Position,
    Smoke,
    Wall,
)
from .render import (
    BLUE_TOKEN,
    MapRenderer,
    render_map,
)

MAP = MapData(
    id="yard",
    name="Yard",
    grid_size=GridSize(4, 3),
    grid_offset=GridOffset(x=5, y=5, right=5, bottom=5),
    walls=(Wall(start=Position(2, 0), end=Position(2, 2)),),
    red_walls=(Wall(start=Position(0, 2), end=Position(2, 2)),),
    cell_size=20.0,
)


class TestImageSize:
    def test_size_from_grid(self):
        renderer = MapRenderer(MAP)
        assert (renderer.width, renderer.height) == (90, 70)

    def test_size_from_background(self):
        bg = Image.new("RGB", (200, 150), "white")
        img = render_map(MAP, background=bg)
        assert img.size == (200, 150)
        assert img.mode == "RGB"


class TestRender:
    def test_empty_map(self):
        img = render_map(MAP)
        assert img.size == (90, 70)

    def test_token_drawn_at_cell_center(self):
        img = render_map(MAP, blue=Position(0, 0))
        # Cell (0, 0) spans pixels 5..25, its center is (15, 15).
        assert img.getpixel((15, 15)) == Image.new(
            "RGB", (1, 1), BLUE_TOKEN
        ).getpixel((0, 0))

    def test_with_report_broken_walls_and_smoke(self):
        blue, orange = Position(0, 0), Position(3, 0)
        broken = BrokenWalls(red=frozenset({0}))
        smokes = [Smoke(Position(1, 1))]
        report = check_line_of_sight(
            blue, orange, MAP.layers, broken, smokes
        )
        assert report.visible is False
        img = render_map(
            MAP,
            blue=blue,
            orange=orange,
            report=report,
            broken=broken,
            smokes=smokes,
        )
        assert img.size == (90, 70)

    def test_line_scale_widens_lines(self):
        renderer = MapRenderer(MAP, line_scale=3)
        assert renderer._lw(2) == 6
        assert MapRenderer(MAP, line_scale=0.1)._lw(1) == 1
