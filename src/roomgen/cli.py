"""
Command line entry point.

Generates a layout, builds the room and prints an ASCII map of the grid
(``#`` wall, ``.`` floor) followed by mesh and light statistics.

Usage:
    python -m roomgen --generator maze --width 21 --height 21 --seed 7
"""

import argparse
import logging
import sys
from typing import List, Optional

from roomgen.config import MAX_GRID_SIZE, MIN_GRID_SIZE, load_settings
from roomgen.generators import GeneratorType
from roomgen.grid import CellWinding, GridData
from roomgen.pipeline import RoomGenerator

logger = logging.getLogger(__name__)


def render_ascii(grid: GridData) -> str:
    """One text row per grid row (y), one character per cell (x)."""
    rows = []
    for y in range(grid.height):
        rows.append("".join("." if grid.heights[x, y] > 0 else "#" for x in range(grid.width)))
    return "\n".join(rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roomgen",
        description="Generate a procedural room layout and its geometry",
    )
    parser.add_argument(
        "--generator",
        choices=[t.value for t in GeneratorType],
        help="Layout generator (default: from settings)",
    )
    parser.add_argument(
        "--width", type=int,
        help=f"Grid width in cells ({MIN_GRID_SIZE}-{MAX_GRID_SIZE})",
    )
    parser.add_argument(
        "--height", type=int,
        help=f"Grid height in cells ({MIN_GRID_SIZE}-{MAX_GRID_SIZE})",
    )
    parser.add_argument("--seed", type=int, help="Seed for the layout generator")
    parser.add_argument("--settings", type=str, help="Settings JSON file to load")
    parser.add_argument("--resolution", type=int, help="Mesh subdivisions per quad side")
    parser.add_argument(
        "--winding",
        choices=[w.value for w in CellWinding],
        help="Triangle winding of cell quads",
    )
    parser.add_argument(
        "--invert-roof", action="store_true",
        help="Cap empty cells at the maximum height instead of roofing rooms",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings(args.settings)
    if args.generator:
        settings.generator_type = GeneratorType(args.generator)
    if args.width is not None:
        settings.grid_width = args.width
    if args.height is not None:
        settings.grid_height = args.height
    if args.seed is not None:
        settings.generator_settings().seed = args.seed
    if args.resolution is not None:
        settings.mesh.mesh_resolution = args.resolution
    if args.winding:
        settings.mesh.cell_winding = CellWinding(args.winding)
    if args.invert_roof:
        settings.mesh.invert_roof = True

    generator = RoomGenerator(settings)
    try:
        generator.generate_layout()
        mesh = generator.generate_room()
    except ValueError as e:
        logger.error("%s", e)
        return 2

    print(render_ascii(generator.grid))
    print()
    for group in mesh:
        print(f"{group.name:6} vertices={group.vertex_count} triangles={group.triangle_count}")
    print(f"Lights: {generator.lights.light_count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
