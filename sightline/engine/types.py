"""Data types matching the sightline map JSON format.

All engine inputs are frozen dataclasses: a query never mutates the walls,
smokes or broken-wall state it is given. Key names in ``from_dict`` /
``to_dict`` follow the map files written by the map editor (camelCase).
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

DEFAULT_WALL_THICKNESS = 0.18

# Width of the sightline itself, in grid units.
LINE_THICKNESS = 0.05

# Hits on one wall closer together than this are a single grazing contact.
INTERSECTION_TOLERANCE = 0.05


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    @staticmethod
    def from_dict(d: dict | None) -> Position:
        if not d:
            return Position()
        return Position(x=d.get("x", 0.0), y=d.get("y", 0.0))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Wall:
    start: Position
    end: Position
    thickness: float = DEFAULT_WALL_THICKNESS
    offset: float = 0.0
    start_extension: float = 0.0
    end_extension: float = 0.0

    def __post_init__(self) -> None:
        if self.thickness <= 0:
            raise ValueError(
                f"Wall thickness must be positive, got {self.thickness}"
            )

    @staticmethod
    def from_dict(d: dict) -> Wall:
        return Wall(
            start=Position.from_dict(d["start"]),
            end=Position.from_dict(d["end"]),
            thickness=d.get("thickness", DEFAULT_WALL_THICKNESS),
            offset=d.get("offset", 0.0),
            start_extension=d.get("startExtension", 0.0),
            end_extension=d.get("endExtension", 0.0),
        )

    def to_dict(self) -> dict:
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "thickness": self.thickness,
            "offset": self.offset,
            "startExtension": self.start_extension,
            "endExtension": self.end_extension,
        }


class WallLayer(enum.Enum):
    MAIN = "main"
    RED = "red"
    ORANGE = "orange"
    WINDOW = "window"

    @property
    def breakable(self) -> bool:
        return self is not WallLayer.MAIN


@dataclass(frozen=True)
class WallLayers:
    main: tuple[Wall, ...]
    red: tuple[Wall, ...] = ()
    orange: tuple[Wall, ...] = ()
    window: tuple[Wall, ...] = ()

    def walls(self, layer: WallLayer) -> tuple[Wall, ...]:
        return getattr(self, layer.value)


@dataclass(frozen=True)
class BrokenWalls:
    """Indices of broken walls per breakable layer."""

    red: frozenset[int] = frozenset()
    orange: frozenset[int] = frozenset()
    windows: frozenset[int] = frozenset()

    def indices(self, layer: WallLayer) -> frozenset[int]:
        if layer is WallLayer.RED:
            return self.red
        if layer is WallLayer.ORANGE:
            return self.orange
        if layer is WallLayer.WINDOW:
            return self.windows
        return frozenset()

    def is_broken(self, layer: WallLayer, index: int) -> bool:
        return index in self.indices(layer)

    @staticmethod
    def from_dict(d: dict | None) -> BrokenWalls:
        if not d:
            return BrokenWalls()
        return BrokenWalls(
            red=frozenset(d.get("red", [])),
            orange=frozenset(d.get("orange", [])),
            windows=frozenset(d.get("windows", [])),
        )

    def to_dict(self) -> dict:
        return {
            "red": sorted(self.red),
            "orange": sorted(self.orange),
            "windows": sorted(self.windows),
        }


@dataclass(frozen=True)
class SmokePattern:
    width: int = 1
    height: int = 1

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Smoke pattern must cover at least one cell, got "
                f"{self.width}x{self.height}"
            )


@dataclass(frozen=True)
class Smoke:
    position: Position
    pattern: SmokePattern = field(default_factory=SmokePattern)

    def cells(self) -> list[tuple[int, int]]:
        """Grid cells covered by this smoke, row by row."""
        x0 = math.floor(self.position.x)
        y0 = math.floor(self.position.y)
        return [
            (x0 + dx, y0 + dy)
            for dy in range(self.pattern.height)
            for dx in range(self.pattern.width)
        ]

    @staticmethod
    def from_dict(d: dict) -> Smoke:
        p = d.get("pattern") or {}
        return Smoke(
            position=Position.from_dict(d["position"]),
            pattern=SmokePattern(
                width=p.get("width", 1), height=p.get("height", 1)
            ),
        )

    def to_dict(self) -> dict:
        return {
            "position": self.position.to_dict(),
            "pattern": {
                "width": self.pattern.width,
                "height": self.pattern.height,
            },
        }


@dataclass(frozen=True)
class Intersection:
    wall_index: int
    point: Position
    edge_index: int
    distance: float = 0.0
    side: int = 0


@dataclass(frozen=True)
class VisibilityResult:
    blocked: bool
    intersections: tuple[Intersection, ...] = ()
    protruding_walls: tuple[int, ...] = ()
    blocking_walls: tuple[int, ...] = ()


@dataclass(frozen=True)
class GridSize:
    width: int
    height: int

    @staticmethod
    def from_dict(d: dict) -> GridSize:
        return GridSize(width=d["width"], height=d["height"])

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class GridOffset:
    """Pixel margins between the map image border and the grid."""

    x: float = 0.0
    y: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @staticmethod
    def from_dict(d: dict | None) -> GridOffset:
        if not d:
            return GridOffset()
        return GridOffset(
            x=d.get("x", 0.0),
            y=d.get("y", 0.0),
            right=d.get("right", 0.0),
            bottom=d.get("bottom", 0.0),
        )

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "right": self.right,
            "bottom": self.bottom,
        }


@dataclass(frozen=True)
class MapData:
    id: str
    name: str
    grid_size: GridSize
    grid_offset: GridOffset = field(default_factory=GridOffset)
    walls: tuple[Wall, ...] = ()
    red_walls: tuple[Wall, ...] = ()
    orange_walls: tuple[Wall, ...] = ()
    window_walls: tuple[Wall, ...] = ()
    cell_size: float | None = None
    version: int = 1
    image_path: str | None = None

    @property
    def layers(self) -> WallLayers:
        return WallLayers(
            main=self.walls,
            red=self.red_walls,
            orange=self.orange_walls,
            window=self.window_walls,
        )

    @staticmethod
    def from_dict(d: dict) -> MapData:
        def _walls(key: str) -> tuple[Wall, ...]:
            return tuple(Wall.from_dict(w) for w in d.get(key, []))

        return MapData(
            id=d["id"],
            name=d["name"],
            grid_size=GridSize.from_dict(d["gridSize"]),
            grid_offset=GridOffset.from_dict(d.get("gridOffset")),
            walls=_walls("walls"),
            red_walls=_walls("redWalls"),
            orange_walls=_walls("orangeWalls"),
            window_walls=_walls("windowWalls"),
            cell_size=d.get("cellSize"),
            version=d.get("version", 1),
            image_path=d.get("imagePath"),
        )

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "name": self.name,
            "gridSize": self.grid_size.to_dict(),
            "gridOffset": self.grid_offset.to_dict(),
            "walls": [w.to_dict() for w in self.walls],
            "version": self.version,
        }
        if self.red_walls:
            d["redWalls"] = [w.to_dict() for w in self.red_walls]
        if self.orange_walls:
            d["orangeWalls"] = [w.to_dict() for w in self.orange_walls]
        if self.window_walls:
            d["windowWalls"] = [w.to_dict() for w in self.window_walls]
        if self.cell_size is not None:
            d["cellSize"] = self.cell_size
        if self.image_path:
            d["imagePath"] = self.image_path
        return d


@dataclass(frozen=True)
class VisibilityConfig:
    line_thickness: float = LINE_THICKNESS
    intersection_tolerance: float = INTERSECTION_TOLERANCE

    @staticmethod
    def from_dict(d: dict | None) -> VisibilityConfig:
        if not d:
            return VisibilityConfig()
        return VisibilityConfig(
            line_thickness=d.get("lineThickness", LINE_THICKNESS),
            intersection_tolerance=d.get(
                "intersectionTolerance", INTERSECTION_TOLERANCE
            ),
        )

    def to_dict(self) -> dict:
        return {
            "lineThickness": self.line_thickness,
            "intersectionTolerance": self.intersection_tolerance,
        }
