"""Pillow renderer for a map with tokens and a line-of-sight result.

``MapRenderer`` draws, in order: the map image (or a black background),
the grid, smoke cells, wall bodies per layer (broken walls as outlines
only), the two tokens, the sightline colored by the verdict, and the
intersection points reported by the engine. It produces a static image;
zoom, pan and hover belong to whatever shows the image.
"""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw

from ..engine.types import BrokenWalls, MapData, Position, WallLayer
from ..engine.walls import wall_corners
from .grid import grid_to_pixel, map_cell_size

logger = logging.getLogger("sightline.frontend")

# -- Visual constants --

BACKGROUND = "#000000"
GRID_COLOR = (255, 255, 255, 38)
WALL_COLORS = {
    WallLayer.MAIN: "#ff5252",
    WallLayer.RED: "#c62828",
    WallLayer.ORANGE: "#ff9800",
    WallLayer.WINDOW: "#4fc3f7",
}
SMOKE_FILL = (200, 200, 200, 140)
BLUE_TOKEN = "#4f8bff"
ORANGE_TOKEN = "#ff7f50"
TOKEN_OUTLINE = "#ffffff"
LOS_CLEAR = (105, 240, 174, 230)
LOS_BLOCKED = (255, 82, 82, 230)
INTERSECTION_COLOR = "#ffeb3b"


class MapRenderer:
    """Renders a map and an optional line-of-sight query to a Pillow image."""

    def __init__(self, map_data: MapData, background=None, line_scale=1):
        self.map_data = map_data
        self.background = background
        self.line_scale = line_scale
        if background is not None:
            self.width, self.height = background.size
            self.cell_size = map_cell_size(map_data, *background.size)
        else:
            self.cell_size = map_cell_size(map_data)
            off = map_data.grid_offset
            self.width = int(
                off.x + off.right + map_data.grid_size.width * self.cell_size
            )
            self.height = int(
                off.y + off.bottom + map_data.grid_size.height * self.cell_size
            )

    def _lw(self, base_width):
        return max(1, round(base_width * self.line_scale))

    def _to_px(self, x, y):
        return grid_to_pixel(
            Position(x, y), self.map_data.grid_offset, self.cell_size
        )

    def _cell_center_px(self, pos):
        return self._to_px(pos.x + 0.5, pos.y + 0.5)

    def render(
        self,
        blue=None,
        orange=None,
        report=None,
        broken=None,
        smokes=(),
    ):
        """Draw the map.

        Args:
            blue, orange: Token cells, or None when not placed.
            report: ``LineOfSightReport`` for the two tokens, or None when
                line of sight has not been checked.
            broken: ``BrokenWalls`` to draw as outlines.
            smokes: ``Smoke`` footprints to shade.
        """
        if self.background is not None:
            img = self.background.convert("RGBA")
        else:
            img = Image.new("RGBA", (self.width, self.height), BACKGROUND)
        overlay = Image.new("RGBA", img.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)

        self._draw_grid(draw)

        for smoke in smokes:
            for cx, cy in smoke.cells():
                x0, y0 = self._to_px(cx, cy)
                x1, y1 = self._to_px(cx + 1, cy + 1)
                draw.rectangle([x0, y0, x1, y1], fill=SMOKE_FILL)

        broken = broken or BrokenWalls()
        for layer in WallLayer:
            color = WALL_COLORS[layer]
            for i, wall in enumerate(self.map_data.layers.walls(layer)):
                poly = [self._to_px(c.x, c.y) for c in wall_corners(wall)]
                if layer.breakable and broken.is_broken(layer, i):
                    draw.polygon(poly, outline=color)
                else:
                    draw.polygon(poly, fill=color)

        if blue is not None and orange is not None and report is not None:
            color = LOS_CLEAR if report.visible else LOS_BLOCKED
            draw.line(
                [self._cell_center_px(blue), self._cell_center_px(orange)],
                fill=color,
                width=self._lw(2),
            )

        for pos, fill in ((blue, BLUE_TOKEN), (orange, ORANGE_TOKEN)):
            if pos is None:
                continue
            cx, cy = self._cell_center_px(pos)
            r = self.cell_size / 3
            draw.ellipse(
                [cx - r, cy - r, cx + r, cy + r],
                fill=fill,
                outline=TOKEN_OUTLINE,
                width=self._lw(2),
            )

        if report is not None:
            r = max(2, self.cell_size / 12)
            for hit in report.walls.intersections:
                px, py = self._to_px(hit.point.x, hit.point.y)
                draw.ellipse(
                    [px - r, py - r, px + r, py + r], fill=INTERSECTION_COLOR
                )

        logger.debug(
            "Rendered map '%s' at %dx%d", self.map_data.name, *img.size
        )
        return Image.alpha_composite(img, overlay).convert("RGB")

    def _draw_grid(self, draw):
        size = self.map_data.grid_size
        x_end, y_end = self._to_px(size.width, size.height)
        x_start, y_start = self._to_px(0, 0)
        glw = self._lw(1)
        for ix in range(size.width + 1):
            px, _ = self._to_px(ix, 0)
            draw.line([(px, y_start), (px, y_end)], fill=GRID_COLOR, width=glw)
        for iy in range(size.height + 1):
            _, py = self._to_px(0, iy)
            draw.line([(x_start, py), (x_end, py)], fill=GRID_COLOR, width=glw)


def render_map(
    map_data,
    blue=None,
    orange=None,
    report=None,
    broken=None,
    smokes=(),
    background=None,
):
    """Render a map in one call; see ``MapRenderer.render``."""
    return MapRenderer(map_data, background=background).render(
        blue=blue, orange=orange, report=report, broken=broken, smokes=smokes
    )
