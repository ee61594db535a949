"""
Shared builders for the test suite.
"""

import re
from typing import Callable, List, Optional

from tiled2gba.model import BLANK_CELL, Cell, Layer, TileMap


def make_layer(name: str, width: int, height: int,
               cell_for: Callable[[int, int], Cell] = lambda x, y: BLANK_CELL) -> Layer:
    cells = [[cell_for(x, y) for x in range(width)] for y in range(height)]
    return Layer(name, width, height, True, cells)


def make_map(width: int, height: int, *layers: Layer) -> TileMap:
    return TileMap(width, height, list(layers))


def parse_array(source: str, name: str) -> Optional[List[int]]:
    """Pull the values of array ``name`` back out of generated C source."""
    match = re.search(
        r'const unsigned short ' + re.escape(name) + r'\[\d+\][^=]*=\s*\{(.*?)\};',
        source,
        re.S
    )
    if match is None:
        return None
    body = "\n".join(
        line for line in match.group(1).splitlines()
        if not line.strip().startswith("//")
    )
    return [int(value.strip()[2:], 16) for value in body.split(",") if value.strip()]
