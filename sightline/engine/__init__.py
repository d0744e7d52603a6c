"""Line-of-sight engine: pure functions over walls, smoke and grid cells."""

from .layers import (
    LineOfSightReport,
    check_line_of_sight,
    is_visible_with_layers,
    is_visible_with_smoke,
    resolve_active_walls,
    visibility_grid,
)
from .types import (
    BrokenWalls,
    Intersection,
    MapData,
    Position,
    Smoke,
    SmokePattern,
    VisibilityConfig,
    VisibilityResult,
    Wall,
    WallLayer,
    WallLayers,
)
from .visibility import compute_visibility, is_visible

__all__ = [
    "BrokenWalls",
    "Intersection",
    "LineOfSightReport",
    "MapData",
    "Position",
    "Smoke",
    "SmokePattern",
    "VisibilityConfig",
    "VisibilityResult",
    "Wall",
    "WallLayer",
    "WallLayers",
    "check_line_of_sight",
    "compute_visibility",
    "is_visible",
    "is_visible_with_layers",
    "is_visible_with_smoke",
    "resolve_active_walls",
    "visibility_grid",
]
