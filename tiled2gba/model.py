"""
Read-only map model consumed by the encoders.

Mirrors what the map editor hands to an export script: a map with ordered
layers, and layers addressable cell by cell. Blank cells are represented by
``tile_id is None`` rather than the editor's ``-1`` sentinel.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
from .constants import HOST_BLANK_TILE_ID


@dataclass(frozen=True)
class Cell:
    """Single map cell: a tile reference and its flip flags."""
    tile_id: Optional[int] = None
    flipped_horizontally: bool = False
    flipped_vertically: bool = False

    @property
    def is_blank(self) -> bool:
        return self.tile_id is None

    @classmethod
    def from_host(
        cls,
        tile_id: Union[int, str, None],
        flipped_horizontally: bool = False,
        flipped_vertically: bool = False
    ) -> 'Cell':
        """
        Build a cell from an editor-style tile id.
        
        The editor reports empty cells as ``-1`` (sometimes as the string
        ``"-1"``); both, and ``None``, become a blank cell.
        
        Args:
            tile_id: Tile id as reported by the editor
            flipped_horizontally: Horizontal flip flag
            flipped_vertically: Vertical flip flag
        
        Returns:
            Cell instance
        """
        if tile_id is None or str(tile_id).strip() == str(HOST_BLANK_TILE_ID):
            return BLANK_CELL
        return cls(int(tile_id), bool(flipped_horizontally), bool(flipped_vertically))


BLANK_CELL = Cell()


@dataclass
class Layer:
    """A map layer. Only tile layers carry cells."""
    name: str
    width: int
    height: int
    is_tile_layer: bool = True
    cells: List[List[Cell]] = field(default_factory=list)  # [y][x]

    def cell_at(self, x: int, y: int) -> Cell:
        """Return the cell at (x, y), or a blank cell outside the layer."""
        if not self.is_tile_layer:
            return BLANK_CELL
        if x < 0 or y < 0 or y >= len(self.cells):
            return BLANK_CELL
        row = self.cells[y]
        if x >= len(row):
            return BLANK_CELL
        return row[x]

    @classmethod
    def from_tile_ids(
        cls,
        name: str,
        width: int,
        height: int,
        tile_ids: List[Optional[int]]
    ) -> 'Layer':
        """Build an unflipped tile layer from a row-major list of tile ids."""
        if len(tile_ids) != width * height:
            raise ValueError(f"Expected {width * height} tile ids, got {len(tile_ids)}")
        cells = []
        for y in range(height):
            row = []
            for x in range(width):
                tile_id = tile_ids[y * width + x]
                row.append(BLANK_CELL if tile_id is None else Cell(tile_id))
            cells.append(row)
        return cls(name, width, height, True, cells)


@dataclass
class TileMap:
    """A map: dimensions in tiles and the layers in export order."""
    width: int
    height: int
    layers: List[Layer] = field(default_factory=list)

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def tilemap_length(self) -> int:
        return self.width * self.height

    def layer_at(self, index: int) -> Layer:
        return self.layers[index]
