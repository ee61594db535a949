"""
Tile array encoder - turns map layers into GBA screen entry arrays.

Two layouts are supported:

- affine (``gba-affine``): one flat, row-major array per layer. Affine
  backgrounds have no flip bits, so tile ids are written as-is.
- regular (``gba``): the layer is cut into 32x32 screenblocks, stored one
  after another. A 64x64 map becomes four screenblocks::

        Layer 64x64            Array
        +---+---+              0, 1, 2, 3
        | 0 | 1 |
        +---+---+     >
        | 2 | 3 |
        +---+---+

  Each screen entry packs the tile id in bits 0-9, horizontal flip in
  bit 10 and vertical flip in bit 11.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple
from .constants import (
    MODE_REGULAR,
    MODE_AFFINE,
    AFFINE_MAP_SIZES,
    SCREENBLOCK_WIDTH,
    SCREENBLOCK_HEIGHT,
    SCREENBLOCK_LENGTH,
    TILE_ID_MASK,
    HFLIP_BIT,
    VFLIP_BIT,
    HEX_PADDING,
    BLANK_ENTRY
)
from .errors import InvalidSizeError
from .model import Cell, Layer
from .logging_config import get_logger

logger = get_logger('encoder')

AFFINE_SIZE_MESSAGE = "Invalid map size! Map must be 16x16, 32x32, 64x64 or 128x128 in size."
REGULAR_SIZE_MESSAGE = "Export failed: Invalid map size! Map width and height must be a multiple of 32."

_IDENTIFIER_INVALID_CHARS = re.compile(r'[^A-Za-z0-9_-]')


@dataclass(frozen=True)
class EncodedArray:
    """Encoded screen entries of one layer."""
    name: str
    length: int
    entries: Tuple[int, ...] = ()
    is_tile_layer: bool = True
    screenblock_count: int = 0


def is_valid_size(width: int, height: int, mode: str) -> bool:
    """Check whether a map of the given size can be exported in ``mode``."""
    if mode == MODE_AFFINE:
        return width == height and width in AFFINE_MAP_SIZES
    if mode == MODE_REGULAR:
        return (
            width > 0 and height > 0
            and width % SCREENBLOCK_WIDTH == 0
            and height % SCREENBLOCK_HEIGHT == 0
        )
    raise ValueError(f"Unknown export mode: {mode}")


def validate_size(width: int, height: int, mode: str) -> None:
    """
    Ensure the map size is allowed for the export mode.
    
    Args:
        width: Map width in tiles
        height: Map height in tiles
        mode: ``gba`` or ``gba-affine``
    
    Raises:
        InvalidSizeError: If the size is not allowed
        ValueError: If the mode is unknown
    """
    if is_valid_size(width, height, mode):
        return
    if mode == MODE_AFFINE:
        raise InvalidSizeError(AFFINE_SIZE_MESSAGE)
    raise InvalidSizeError(REGULAR_SIZE_MESSAGE)


def sanitize_identifier(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with an underscore."""
    return _IDENTIFIER_INVALID_CHARS.sub('_', name)


def to_hex(value: int, padding: int = HEX_PADDING) -> str:
    """
    Format a value as ``0x`` followed by uppercase hex digits.
    
    ``padding`` is a minimum width; longer values are not truncated.
    """
    if value < 0:
        raise ValueError(f"Cannot format negative value {value} as a tile entry")
    return "0x" + format(value, 'X').zfill(padding)


def encode_regular_cell(cell: Cell) -> int:
    """Pack a cell into a regular background screen entry."""
    if cell.is_blank:
        return BLANK_ENTRY
    entry = cell.tile_id
    if cell.flipped_horizontally:
        entry |= HFLIP_BIT
    if cell.flipped_vertically:
        entry |= VFLIP_BIT
    return entry


def encode_affine_cell(cell: Cell) -> int:
    """Affine screen entries are the bare tile id."""
    if cell.is_blank:
        return BLANK_ENTRY
    return cell.tile_id


def encode_affine_layer(layer: Layer, width: int, height: int) -> EncodedArray:
    """
    Encode a layer for an affine background.
    
    Tiles are read row by row, top to bottom, left to right.
    
    Args:
        layer: Layer to encode
        width: Map width in tiles
        height: Map height in tiles
    
    Returns:
        EncodedArray with width*height entries (none for non-tile layers)
    """
    name = sanitize_identifier(layer.name)
    length = width * height
    if not layer.is_tile_layer:
        logger.debug(f"Layer '{layer.name}' is not a tile layer, emitting empty array")
        return EncodedArray(name, length, (), False)
    
    entries = []
    for y in range(height):
        for x in range(width):
            entries.append(encode_affine_cell(layer.cell_at(x, y)))
    
    return EncodedArray(name, length, tuple(entries), True)


def encode_regular_layer(layer: Layer, width: int, height: int) -> EncodedArray:
    """
    Encode a layer for a regular background, one screenblock at a time.
    
    Screenblocks are taken in row-major order over the screenblock grid and
    each one is dumped row by row.
    
    Args:
        layer: Layer to encode
        width: Map width in tiles (multiple of 32)
        height: Map height in tiles (multiple of 32)
    
    Returns:
        EncodedArray with width*height entries (none for non-tile layers)
    """
    name = sanitize_identifier(layer.name)
    length = width * height
    if not layer.is_tile_layer:
        logger.debug(f"Layer '{layer.name}' is not a tile layer, emitting empty array")
        return EncodedArray(name, length, (), False)
    
    screenblock_count_x = width // SCREENBLOCK_WIDTH
    screenblock_count_y = height // SCREENBLOCK_HEIGHT
    
    entries = []
    oversized_ids = 0
    for j in range(screenblock_count_y):
        for k in range(screenblock_count_x):
            for y in range(SCREENBLOCK_HEIGHT):
                for x in range(SCREENBLOCK_WIDTH):
                    tile_x = x + SCREENBLOCK_WIDTH * k
                    tile_y = y + SCREENBLOCK_HEIGHT * j
                    cell = layer.cell_at(tile_x, tile_y)
                    if not cell.is_blank and cell.tile_id > TILE_ID_MASK:
                        oversized_ids += 1
                    entries.append(encode_regular_cell(cell))
    
    if oversized_ids:
        logger.warning(
            f"Layer '{layer.name}' has {oversized_ids} tile ids above {TILE_ID_MASK}, "
            f"they overlap the flip bits"
        )
    
    return EncodedArray(
        name,
        length,
        tuple(entries),
        True,
        screenblock_count_x * screenblock_count_y
    )


def screenblocks(encoded: EncodedArray) -> Iterator[Tuple[int, ...]]:
    """Split regular-mode entries into 1024-entry screenblocks."""
    for start in range(0, len(encoded.entries), SCREENBLOCK_LENGTH):
        yield encoded.entries[start:start + SCREENBLOCK_LENGTH]


def encode_layers(layers: List[Layer], width: int, height: int, mode: str) -> List[EncodedArray]:
    """
    Validate the map size and encode every layer in order.
    
    Raises:
        InvalidSizeError: If the size is not allowed for ``mode``
    """
    validate_size(width, height, mode)
    if mode == MODE_AFFINE:
        encode = encode_affine_layer
    else:
        encode = encode_regular_layer
    return [encode(layer, width, height) for layer in layers]
