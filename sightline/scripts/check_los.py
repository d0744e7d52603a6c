#!/usr/bin/env python3
"""Check line of sight between two cells of a map file.

Usage:
    sightline-los map.json 0 0 3 0                      # visible / blocked
    sightline-los map.json 0 0 3 0 --broken-red 2       # red wall 2 broken
    sightline-los map.json 0 0 3 0 --smoke 1 0 1 1      # 1x1 smoke at (1, 0)
    sightline-los map.json 0 0 3 0 --render out.png     # PNG snapshot
    sightline-los map.json 4 4 0 0 --grid               # cells visible from A
    sightline-los out.png                               # re-run a snapshot
    sightline-los out.png 0 0 2 0 --broken-red 1        # ... with changes

Exit status: 0 when visible, 1 when blocked, 2 on usage or map errors.
"""

import argparse
import logging
import sys
from dataclasses import replace

from ..engine.layers import check_line_of_sight, visibility_grid
from ..engine.types import (
    LINE_THICKNESS,
    BrokenWalls,
    Position,
    Smoke,
    SmokePattern,
)
from ..frontend.render import render_map
from ..frontend.snapshot_io import load_snapshot, save_snapshot_png

logger = logging.getLogger("sightline.scripts")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Check line of sight between two grid cells of a map"
    )
    parser.add_argument(
        "source",
        help="Map JSON file or a snapshot written by --render",
    )
    parser.add_argument(
        "cells",
        type=int,
        nargs="*",
        metavar="N",
        help="Token cells AX AY BX BY (optional when re-running a snapshot)",
    )
    parser.add_argument(
        "--broken-red",
        type=int,
        nargs="+",
        default=[],
        metavar="I",
        help="Indices of broken red walls",
    )
    parser.add_argument(
        "--broken-orange",
        type=int,
        nargs="+",
        default=[],
        metavar="I",
        help="Indices of broken orange walls",
    )
    parser.add_argument(
        "--broken-window",
        type=int,
        nargs="+",
        default=[],
        metavar="I",
        help="Indices of broken windows",
    )
    parser.add_argument(
        "--smoke",
        type=int,
        nargs=4,
        action="append",
        default=[],
        metavar=("X", "Y", "W", "H"),
        help="Smoke footprint: top-left cell and size (repeatable)",
    )
    parser.add_argument(
        "--line-thickness",
        type=float,
        help=(
            f"Sightline width in grid units (default: the snapshot's, "
            f"else {LINE_THICKNESS})"
        ),
    )
    parser.add_argument(
        "--render",
        metavar="OUT.png",
        help="Write a PNG snapshot of the query",
    )
    parser.add_argument(
        "--grid",
        action="store_true",
        help="Print the cells visible from the first token instead",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    return parser


def _format_grid(grid, origin):
    rows = []
    for y, row in enumerate(grid):
        chars = []
        for x, visible in enumerate(row):
            if (x, y) == (int(origin.x), int(origin.y)):
                chars.append("@")
            else:
                chars.append("." if visible else "#")
        rows.append("".join(chars))
    return "\n".join(rows)


def _apply_args(snapshot, args):
    """Snapshot with the command line tokens, broken walls and smokes added.

    Raises ValueError for a wrong number of cell coordinates or an invalid
    smoke footprint.
    """
    changes = {}
    if args.cells:
        if len(args.cells) != 4:
            raise ValueError(
                f"expected 4 cell coordinates AX AY BX BY, "
                f"got {len(args.cells)}"
            )
        ax, ay, bx, by = args.cells
        changes["blue"] = Position(ax, ay)
        changes["orange"] = Position(bx, by)
    broken = snapshot.broken
    changes["broken"] = BrokenWalls(
        red=broken.red | frozenset(args.broken_red),
        orange=broken.orange | frozenset(args.broken_orange),
        windows=broken.windows | frozenset(args.broken_window),
    )
    changes["smokes"] = snapshot.smokes + tuple(
        Smoke(Position(x, y), SmokePattern(w, h)) for x, y, w, h in args.smoke
    )
    if args.line_thickness is not None:
        changes["config"] = replace(
            snapshot.config, line_thickness=args.line_thickness
        )
    return replace(snapshot, **changes)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        snapshot = _apply_args(load_snapshot(args.source), args)
    except (OSError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    if snapshot.blue is None or (snapshot.orange is None and not args.grid):
        print("Error: token cells AX AY BX BY are required", file=sys.stderr)
        return 2

    map_data = snapshot.map_data
    a, b = snapshot.blue, snapshot.orange

    if args.grid:
        grid = visibility_grid(
            a,
            map_data.layers,
            map_data.grid_size,
            snapshot.broken,
            snapshot.smokes,
            snapshot.config,
        )
        print(_format_grid(grid, a))
        print(f"{int(grid.sum())} of {grid.size} cells visible")
        return 0

    report = check_line_of_sight(
        a,
        b,
        map_data.layers,
        snapshot.broken,
        snapshot.smokes,
        snapshot.config,
    )
    print("visible" if report.visible else "blocked")
    if not report.visible:
        if report.blocking_smoke is not None:
            print(f"  smoke at cell {report.blocking_smoke}")
        for source in report.blocking_sources():
            print(f"  {source.layer.value} wall {source.index}")
    logger.debug(
        "%d intersections recorded", len(report.walls.intersections)
    )

    if args.render:
        img = render_map(
            map_data,
            blue=a,
            orange=b,
            report=report,
            broken=snapshot.broken,
            smokes=snapshot.smokes,
        )
        save_snapshot_png(img, snapshot, args.render)
        print(f"Snapshot written to {args.render}")

    return 0 if report.visible else 1


if __name__ == "__main__":
    sys.exit(main())
