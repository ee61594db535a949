"""
Constants for GBA background maps and the Tiled map format.

This module contains all magic numbers used throughout the codebase
to make the code more maintainable and self-documenting.
"""

# Export modes (map format ids)
MODE_REGULAR = "gba"
MODE_AFFINE = "gba-affine"

# Screenblock dimensions (tiles)
SCREENBLOCK_WIDTH = 32
SCREENBLOCK_HEIGHT = 32
SCREENBLOCK_LENGTH = SCREENBLOCK_WIDTH * SCREENBLOCK_HEIGHT

# Affine backgrounds are square, power-of-two sized
AFFINE_MAP_SIZES = (16, 32, 64, 128)

# Bit layout of a regular screen entry
TILE_ID_MASK = 0x03FF      # Bits 0-9: Tile index
HFLIP_BIT = 1 << 10        # Bit 10: Horizontal flip
VFLIP_BIT = 1 << 11        # Bit 11: Vertical flip

# Screen entries are 16 bits wide
HEX_PADDING = 4
BLANK_ENTRY = 0x0000

# Host editor sentinel for an empty cell
HOST_BLANK_TILE_ID = -1

# Tiled GID flags (top bits of a 32-bit GID)
GID_FLIPPED_HORIZONTALLY = 0x80000000
GID_FLIPPED_VERTICALLY = 0x40000000
GID_FLIPPED_DIAGONALLY = 0x20000000
GID_ROTATED_HEXAGONAL_120 = 0x10000000
GID_FLAGS_MASK = (
    GID_FLIPPED_HORIZONTALLY
    | GID_FLIPPED_VERTICALLY
    | GID_FLIPPED_DIAGONALLY
    | GID_ROTATED_HEXAGONAL_120
)

# Macro styles for the dimension defines in the generated header
MACRO_STYLE_PLAIN = "plain"
MACRO_STYLE_PARENTHESIZED = "parenthesized"
DEFAULT_MACRO_STYLES = {
    MODE_REGULAR: MACRO_STYLE_PLAIN,
    MODE_AFFINE: MACRO_STYLE_PARENTHESIZED,
}
