"""Tests for map JSON load/save helpers."""

import json

import pytest

from .map_io import load_map, load_map_dict, map_file_name, save_map
from .types import GridOffset, GridSize, MapData, Position, Wall

SAMPLE_MAP = {
    "id": "bank",
    "name": "Bank Basement",
    "gridSize": {"width": 12, "height": 8},
    "gridOffset": {"x": 10, "y": 12, "right": 8, "bottom": 6},
    "walls": [
        {
            "start": {"x": 1, "y": 0},
            "end": {"x": 1, "y": 3},
            "thickness": 0.2,
            "offset": 0.05,
            "startExtension": 0.1,
            "endExtension": 0,
        }
    ],
    "redWalls": [{"start": {"x": 4, "y": 2}, "end": {"x": 6, "y": 2}}],
    "windowWalls": [
        {"start": {"x": 8, "y": 0}, "end": {"x": 8, "y": 1}, "thickness": 0.1}
    ],
    "cellSize": 40.0,
    "version": 2,
}


def test_load_map(tmp_path):
    path = tmp_path / "bank.json"
    path.write_text(json.dumps(SAMPLE_MAP))

    m = load_map(path)

    assert m.id == "bank"
    assert m.grid_size == GridSize(12, 8)
    assert m.grid_offset == GridOffset(10, 12, 8, 6)
    assert m.walls[0] == Wall(
        start=Position(1, 0),
        end=Position(1, 3),
        thickness=0.2,
        offset=0.05,
        start_extension=0.1,
        end_extension=0,
    )
    assert len(m.red_walls) == 1
    assert m.orange_walls == ()
    assert m.window_walls[0].thickness == 0.1
    assert m.cell_size == 40.0
    assert m.version == 2


def test_wall_defaults(tmp_path):
    """Walls without optional keys get the editor's defaults."""
    path = tmp_path / "bank.json"
    path.write_text(json.dumps(SAMPLE_MAP))

    red = load_map(path).red_walls[0]
    assert red.thickness == 0.18
    assert red.offset == 0.0
    assert red.start_extension == 0.0
    assert red.end_extension == 0.0


def test_save_and_load_preserves_layers(tmp_path):
    path = tmp_path / "maps" / "bank.json"
    original = MapData.from_dict(SAMPLE_MAP)

    save_map(original, path)
    loaded = load_map(path)

    assert loaded == original
    assert loaded.layers.red == original.red_walls


def test_saved_file_ends_with_newline(tmp_path):
    path = tmp_path / "bank.json"
    save_map(MapData.from_dict(SAMPLE_MAP), path)
    assert path.read_text().endswith("}\n")


def test_load_map_dict_keeps_raw_fields(tmp_path):
    path = tmp_path / "bank.json"
    data = dict(SAMPLE_MAP, editorNote="keep me")
    path.write_text(json.dumps(data))
    assert load_map_dict(path)["editorNote"] == "keep me"


def test_unsupported_extension(tmp_path):
    path = tmp_path / "bank.txt"
    path.write_text("{}")
    with pytest.raises(ValueError, match="Unsupported"):
        load_map(path)


def test_missing_mandatory_key(tmp_path):
    path = tmp_path / "broken.json"
    data = {k: v for k, v in SAMPLE_MAP.items() if k != "gridSize"}
    path.write_text(json.dumps(data))
    with pytest.raises(KeyError):
        load_map(path)


def test_map_file_name():
    m = MapData.from_dict(SAMPLE_MAP)
    assert map_file_name(m) == "bank-basement.json"
