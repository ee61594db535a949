"""
Main entry point for the tiled2gba exporter.
"""

import argparse
import sys
from pathlib import Path
from .constants import MODE_REGULAR, MACRO_STYLE_PLAIN, MACRO_STYLE_PARENTHESIZED
from .errors import Tiled2GbaError
from .exporter import MAP_FORMATS, ExportOptions, export_map
from .map_reader import read_map
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tiled2gba",
        description="Export Tiled maps as GBA background tile arrays (C source and header)"
    )
    parser.add_argument(
        "map",
        help="Tiled map file (.tmx, .tmj or .json)"
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output file; <name>.h and <name>.c are written next to it "
             "(default: the map path with a .c suffix)"
    )
    parser.add_argument(
        "--format", "-f",
        dest="format_id",
        choices=sorted(MAP_FORMATS),
        default=MODE_REGULAR,
        help="gba: regular background in 32x32 screenblocks (default); "
             "gba-affine: affine background, 16x16 to 128x128"
    )
    parser.add_argument(
        "--macro-style",
        choices=[MACRO_STYLE_PLAIN, MACRO_STYLE_PARENTHESIZED],
        default=None,
        help="Style of the WIDTH/HEIGHT/LENGTH defines "
             "(default: plain for gba, parenthesized for gba-affine)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress information"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Show debug information (implies verbose)"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    
    logger = setup_logging(args.verbose, args.debug, args.quiet)
    
    map_path = Path(args.map).resolve()
    output = Path(args.output).resolve() if args.output else map_path.with_suffix(".c")
    map_format = MAP_FORMATS[args.format_id]
    
    logger.info(f"Input map: {map_path}")
    logger.info(f"Format: {map_format.name}")
    
    try:
        tile_map = read_map(map_path)
        written = export_map(
            tile_map,
            output,
            map_format.format_id,
            ExportOptions(macro_style=args.macro_style)
        )
    except Tiled2GbaError as e:
        logger.error(str(e))
        return 1
    
    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
