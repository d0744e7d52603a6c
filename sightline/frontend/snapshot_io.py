"""Save and load line-of-sight snapshots.

A snapshot is one complete query: the map, both token cells, the broken
walls, the smokes and the engine settings. It is saved as the rendered
image with the query JSON in a PNG tEXt chunk (key: ``sightline_snapshot``)
so the picture of a situation is also enough to re-run it. JSON files
holding the same dict are read too, and a plain map JSON file loads as a
snapshot with no tokens placed.

Used by ``scripts/check_los.py`` (``--render`` to save, snapshot file as
the map argument to re-run).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from ..engine.types import (
    BrokenWalls,
    MapData,
    Position,
    Smoke,
    VisibilityConfig,
)

logger = logging.getLogger("sightline.frontend")

METADATA_KEY = "sightline_snapshot"


@dataclass(frozen=True)
class Snapshot:
    map_data: MapData
    blue: Position | None = None
    orange: Position | None = None
    broken: BrokenWalls = field(default_factory=BrokenWalls)
    smokes: tuple[Smoke, ...] = ()
    config: VisibilityConfig = field(default_factory=VisibilityConfig)

    @staticmethod
    def from_dict(d: dict) -> Snapshot:
        blue = d.get("blue")
        orange = d.get("orange")
        return Snapshot(
            map_data=MapData.from_dict(d["map"]),
            blue=Position.from_dict(blue) if blue is not None else None,
            orange=Position.from_dict(orange) if orange is not None else None,
            broken=BrokenWalls.from_dict(d.get("brokenWalls")),
            smokes=tuple(Smoke.from_dict(s) for s in d.get("smokes", [])),
            config=VisibilityConfig.from_dict(d.get("config")),
        )

    def to_dict(self) -> dict:
        return {
            "map": self.map_data.to_dict(),
            "blue": self.blue.to_dict() if self.blue is not None else None,
            "orange": (
                self.orange.to_dict() if self.orange is not None else None
            ),
            "brokenWalls": self.broken.to_dict(),
            "smokes": [s.to_dict() for s in self.smokes],
            "config": self.config.to_dict(),
        }


def save_snapshot_png(img: Image.Image, snapshot: Snapshot, path: str) -> None:
    """Save a rendered image with the snapshot embedded as a PNG tEXt chunk."""
    info = PngInfo()
    info.add_text(METADATA_KEY, json.dumps(snapshot.to_dict()))
    img.save(path, pnginfo=info)


def load_snapshot_png(path: str) -> dict:
    """Raw snapshot dict from a PNG file's tEXt metadata.

    Raises ValueError if the PNG does not contain snapshot metadata.
    """
    with Image.open(path) as img:
        text_data = getattr(img, "text", None)
        if not text_data or METADATA_KEY not in text_data:
            raise ValueError(
                f"{path} has no snapshot metadata "
                f"(missing '{METADATA_KEY}' chunk)"
            )
        return json.loads(text_data[METADATA_KEY])


def load_snapshot_json(path: str) -> dict:
    with open(path) as f:
        return json.load(f)


def load_snapshot(path: str) -> Snapshot:
    """Load a snapshot from a .png or .json file.

    A JSON file without a ``map`` key is read as a bare map document.
    Raises ValueError for other extensions.
    """
    lower = path.lower()
    if lower.endswith(".png"):
        d = load_snapshot_png(path)
    elif lower.endswith(".json"):
        d = load_snapshot_json(path)
        if "map" not in d:
            return Snapshot(map_data=MapData.from_dict(d))
    else:
        raise ValueError(f"Unsupported file extension: {path}")
    snapshot = Snapshot.from_dict(d)
    logger.debug(
        "Loaded snapshot of '%s' from %s", snapshot.map_data.name, path
    )
    return snapshot
