"""
tiled2gba - Tiled to GBA background exporter

Converts Tiled maps into C arrays of 16-bit screen entries that can be
copied straight into GBA VRAM, either as regular backgrounds (32x32
screenblocks with flip bits) or as affine backgrounds.
"""

__version__ = "0.1.0"

from .model import Cell, Layer, TileMap
from .errors import (
    Tiled2GbaError,
    InvalidSizeError,
    InvalidOptionError,
    ExportIOError,
    MapReadError,
)
from .encoder import (
    EncodedArray,
    validate_size,
    sanitize_identifier,
    to_hex,
    encode_affine_layer,
    encode_regular_layer,
)
from .exporter import (
    ExportOptions,
    MapFormat,
    MAP_FORMATS,
    get_map_format,
    build_export,
    export_map,
)
from .map_reader import read_map
