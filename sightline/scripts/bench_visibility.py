#!/usr/bin/env python3
"""Benchmark the line-of-sight engine on a full visibility grid.

Usage:
    python -m sightline.scripts.bench_visibility               # synthetic map
    python -m sightline.scripts.bench_visibility -n 5          # 5 iterations
    python -m sightline.scripts.bench_visibility --map m.json  # real map
    python -m sightline.scripts.bench_visibility --origin 0 0  # from a corner
"""

import argparse
import statistics
import time

from ..engine.layers import visibility_grid
from ..engine.map_io import load_map
from ..engine.types import (
    LINE_THICKNESS,
    GridSize,
    MapData,
    Position,
    VisibilityConfig,
    Wall,
    WallLayer,
)


def synthetic_map(size=20, spacing=4):
    """Square map with a lattice of short walls every ``spacing`` cells."""
    walls = []
    for i in range(spacing, size, spacing):
        for j in range(0, size, spacing):
            walls.append(
                Wall(start=Position(i, j), end=Position(i, j + spacing / 2))
            )
            walls.append(
                Wall(start=Position(j, i), end=Position(j + spacing / 2, i))
            )
    return MapData(
        id="bench",
        name="Bench",
        grid_size=GridSize(size, size),
        walls=tuple(walls),
    )


def run_benchmark(map_data, origin, config, iterations):
    """Time ``iterations`` full grids; returns (times_ms, visible cells)."""
    size = map_data.grid_size
    grid = visibility_grid(origin, map_data.layers, size, config=config)
    times_ms = []
    for _ in range(iterations):
        start = time.perf_counter()
        visibility_grid(origin, map_data.layers, size, config=config)
        times_ms.append((time.perf_counter() - start) * 1000)
    return times_ms, int(grid.sum())


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Benchmark the line-of-sight engine"
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=3,
        help="Number of iterations (default: 3)",
    )
    parser.add_argument(
        "--map", help="Map JSON file (default: synthetic 20x20 map)"
    )
    parser.add_argument(
        "--origin",
        type=int,
        nargs=2,
        metavar=("X", "Y"),
        help="Observer cell (default: map center)",
    )
    parser.add_argument(
        "--line-thickness",
        type=float,
        default=LINE_THICKNESS,
        help=f"Sightline width in grid units (default: {LINE_THICKNESS})",
    )
    args = parser.parse_args(argv)

    map_data = load_map(args.map) if args.map else synthetic_map()
    size = map_data.grid_size
    if args.origin:
        origin = Position(*args.origin)
    else:
        origin = Position(size.width // 2, size.height // 2)
    config = VisibilityConfig(line_thickness=args.line_thickness)
    layers = map_data.layers
    walls = {layer: len(layers.walls(layer)) for layer in WallLayer}

    print(f"Benchmark: {map_data.name}, {size.width}x{size.height} cells")
    print(
        "Walls: "
        + ", ".join(f"{n} {layer.value}" for layer, n in walls.items())
    )
    print(
        f"Observer: cell ({int(origin.x)}, {int(origin.y)}), "
        f"line thickness {config.line_thickness}"
    )
    print(f"Iterations: {args.iterations}")
    print()

    times_ms, visible = run_benchmark(
        map_data, origin, config, args.iterations
    )
    for i, elapsed_ms in enumerate(times_ms):
        print(f"  Run {i + 1}: {elapsed_ms:.1f} ms")

    cells = size.width * size.height
    print()
    print(f"Visible: {visible} of {cells} cells")
    if times_ms and cells:
        median = statistics.median(times_ms)
        per_query_us = median * 1000 / cells
        print(f"Median: {median:.1f} ms ({per_query_us:.1f} us/query)")
        print(f"Mean:   {statistics.mean(times_ms):.1f} ms")
    if len(times_ms) > 1:
        print(f"Stdev:  {statistics.stdev(times_ms):.1f} ms")


if __name__ == "__main__":
    main()
