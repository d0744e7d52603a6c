"""Load and save map JSON files.

A map file describes the grid laid over a map image (size in cells, pixel
offsets, cell size) and the wall layers drawn on it. The main layer is
stored under ``walls``; breakable layers under ``redWalls``,
``orangeWalls`` and ``windowWalls``.

Used by ``scripts/check_los.py`` to load the map being queried.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .types import MapData

logger = logging.getLogger("sightline.engine")


def load_map(path: Path | str) -> MapData:
    """Load a JSON map file and return a typed ``MapData``.

    Raises ValueError for files that are not ``.json`` and KeyError when a
    mandatory key (``id``, ``name``, ``gridSize``, wall ``start``/``end``)
    is missing.
    """
    data = load_map_dict(path)
    map_data = MapData.from_dict(data)
    logger.debug(
        "Loaded map '%s' with %d main walls", map_data.name, len(map_data.walls)
    )
    return map_data


def load_map_dict(path: Path | str) -> dict:
    """Load a JSON map file and return the raw dict."""
    path = Path(path)
    if path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported map file extension: {path}")
    with open(path) as f:
        return json.load(f)


def save_map(map_data: MapData, path: Path | str) -> None:
    """Write a map to a JSON file.

    Creates parent directories if they don't exist.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(map_data.to_dict(), f, indent=2)
        f.write("\n")


def map_file_name(map_data: MapData) -> str:
    """Default file name for a map: lowercase name, spaces as dashes."""
    return "-".join(map_data.name.lower().split()) + ".json"
