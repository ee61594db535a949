"""
Map reader - loads Tiled maps (TMX or JSON) into the map model.

Tile layers store GIDs: ``firstgid`` of the owning tileset plus the local
tile id, with flip flags in the top bits. The exported tile id is the local
id, as the editor reports it to export scripts.
"""

import base64
import gzip
import json
import struct
import zlib
import xml.etree.ElementTree as ET
from bisect import bisect_right
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from .constants import (
    GID_FLIPPED_HORIZONTALLY,
    GID_FLIPPED_VERTICALLY,
    GID_FLIPPED_DIAGONALLY,
    GID_FLAGS_MASK
)
from .errors import MapReadError
from .model import BLANK_CELL, Cell, Layer, TileMap
from .logging_config import get_logger

logger = get_logger('map_reader')

TMX_SUFFIXES = ('.tmx',)
JSON_SUFFIXES = ('.tmj', '.json')


class GidResolver:
    """Turns raw GIDs into cells using the map's tileset ``firstgid`` values."""
    
    def __init__(self, firstgids: List[int]):
        self.firstgids = sorted(firstgids) if firstgids else [1]
        self.diagonal_flips = 0
    
    def resolve(self, gid: int) -> Cell:
        """
        Convert a GID to a cell.
        
        Args:
            gid: Raw 32-bit GID from the layer data
        
        Returns:
            Blank cell for GID 0, otherwise the local tile id with flip flags
        """
        flipped_h = bool(gid & GID_FLIPPED_HORIZONTALLY)
        flipped_v = bool(gid & GID_FLIPPED_VERTICALLY)
        if gid & GID_FLIPPED_DIAGONALLY:
            self.diagonal_flips += 1
        gid &= ~GID_FLAGS_MASK & 0xFFFFFFFF
        if gid == 0:
            return BLANK_CELL
        
        index = bisect_right(self.firstgids, gid) - 1
        if index < 0:
            raise MapReadError(f"GID {gid} does not belong to any tileset")
        return Cell(gid - self.firstgids[index], flipped_h, flipped_v)
    
    def build_layer(self, name: str, width: int, height: int, gids: List[int]) -> Layer:
        """Build a tile layer from row-major GIDs."""
        if len(gids) != width * height:
            raise MapReadError(
                f"Layer '{name}' has {len(gids)} tiles, expected {width * height}"
            )
        self.diagonal_flips = 0
        cells = []
        for y in range(height):
            cells.append([self.resolve(gid) for gid in gids[y * width:(y + 1) * width]])
        if self.diagonal_flips:
            logger.warning(
                f"Layer '{name}': {self.diagonal_flips} diagonally flipped tiles, "
                f"GBA backgrounds cannot rotate tiles so the diagonal flag is dropped"
            )
        return Layer(name, width, height, True, cells)


def decode_base64_gids(text: str, compression: Optional[str]) -> List[int]:
    """
    Decode base64 layer data into GIDs.
    
    Args:
        text: Base64 payload
        compression: None/'' , 'zlib' or 'gzip'
    
    Returns:
        List of GIDs (little-endian uint32 values)
    """
    try:
        raw_data = base64.b64decode(text.strip())
    except ValueError as e:
        raise MapReadError(f"Invalid base64 layer data: {e}") from e
    
    try:
        if compression == 'zlib':
            raw_data = zlib.decompress(raw_data)
        elif compression == 'gzip':
            raw_data = gzip.decompress(raw_data)
        elif compression:
            raise MapReadError(f"Unsupported layer compression: {compression}")
    except (zlib.error, OSError, EOFError) as e:
        raise MapReadError(f"Could not decompress layer data: {e}") from e
    
    if len(raw_data) % 4 != 0:
        raise MapReadError(f"Layer data length {len(raw_data)} is not a multiple of 4")
    return list(struct.unpack(f'<{len(raw_data) // 4}I', raw_data))


def _to_int(value: Any, what: str) -> int:
    """Convert a map attribute or GID to int, reporting bad values as MapReadError."""
    if isinstance(value, bool):
        raise MapReadError(f"Invalid {what}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise MapReadError(f"Invalid {what}: {value!r}") from e


def decode_csv_gids(text: str) -> List[int]:
    """Decode CSV layer data into GIDs."""
    try:
        return [int(x) for x in text.replace('\n', '').split(',') if x.strip()]
    except ValueError as e:
        raise MapReadError(f"Invalid CSV layer data: {e}") from e


class TiledMapReader:
    """Reads Tiled map files into a TileMap."""
    
    def read(self, path: Union[str, Path]) -> TileMap:
        """
        Read a map, choosing the parser from the file suffix.
        
        Args:
            path: Path to a .tmx, .tmj or .json map
        
        Returns:
            TileMap instance
        
        Raises:
            MapReadError: If the file is missing, malformed or unsupported
        """
        path = Path(path)
        if not path.exists():
            raise MapReadError(f"Map file not found: {path}")
        
        suffix = path.suffix.lower()
        if suffix in TMX_SUFFIXES:
            tile_map = self.read_tmx(path)
        elif suffix in JSON_SUFFIXES:
            tile_map = self.read_json(path)
        else:
            raise MapReadError(f"Unsupported map file type: {path.suffix}")
        
        logger.info(
            f"Loaded {path.name}: {tile_map.width}x{tile_map.height}, "
            f"{tile_map.layer_count} layers"
        )
        return tile_map
    
    def read_tmx(self, path: Path) -> TileMap:
        """Read a TMX (XML) map."""
        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise MapReadError(f"Malformed TMX file {path}: {e}") from e
        
        if root.get('infinite', '0') == '1':
            raise MapReadError("Infinite maps are not supported")
        
        width = _to_int(root.get('width', 0), "map width")
        height = _to_int(root.get('height', 0), "map height")
        firstgids = [_to_int(ts.get('firstgid', 1), "tileset firstgid") for ts in root.findall('tileset')]
        resolver = GidResolver(firstgids)
        
        tile_map = TileMap(width, height)
        for elem in root:
            name = elem.get('name', '')
            if elem.tag == 'layer':
                layer_width = _to_int(elem.get('width', width), f"width of layer '{name}'")
                layer_height = _to_int(elem.get('height', height), f"height of layer '{name}'")
                gids = self._read_tmx_data(elem, name)
                tile_map.layers.append(resolver.build_layer(name, layer_width, layer_height, gids))
            elif elem.tag in ('objectgroup', 'imagelayer', 'group'):
                logger.debug(f"Layer '{name}' ({elem.tag}) is not a tile layer")
                tile_map.layers.append(Layer(name, width, height, False))
        
        return tile_map
    
    def _read_tmx_data(self, layer_elem: ET.Element, name: str) -> List[int]:
        data_elem = layer_elem.find('data')
        if data_elem is None:
            raise MapReadError(f"Layer '{name}' has no data")
        if data_elem.find('chunk') is not None:
            raise MapReadError("Infinite maps are not supported")
        
        encoding = data_elem.get('encoding')
        if encoding == 'csv':
            return decode_csv_gids(data_elem.text or '')
        if encoding == 'base64':
            return decode_base64_gids(data_elem.text or '', data_elem.get('compression'))
        if encoding:
            raise MapReadError(f"Unsupported layer encoding: {encoding}")
        return [_to_int(tile.get('gid', 0), f"GID in layer '{name}'") for tile in data_elem.findall('tile')]
    
    def read_json(self, path: Path) -> TileMap:
        """Read a Tiled JSON (.tmj/.json) map."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                map_data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MapReadError(f"Malformed JSON map {path}: {e}") from e
        if not isinstance(map_data, dict):
            raise MapReadError(f"Malformed JSON map {path}: top level is not an object")
        
        return self.map_from_json(map_data)
    
    def map_from_json(self, map_data: Dict[str, Any]) -> TileMap:
        """Build a TileMap from already-parsed Tiled JSON data."""
        if map_data.get('infinite', False):
            raise MapReadError("Infinite maps are not supported")
        
        width = _to_int(map_data.get('width', 0), "map width")
        height = _to_int(map_data.get('height', 0), "map height")
        firstgids = [
            _to_int(ts.get('firstgid', 1), "tileset firstgid")
            for ts in map_data.get('tilesets', [])
        ]
        resolver = GidResolver(firstgids)
        
        tile_map = TileMap(width, height)
        for layer in map_data.get('layers', []):
            name = layer.get('name', '')
            if layer.get('type') != 'tilelayer':
                logger.debug(f"Layer '{name}' ({layer.get('type')}) is not a tile layer")
                tile_map.layers.append(Layer(name, width, height, False))
                continue
            if 'chunks' in layer:
                raise MapReadError("Infinite maps are not supported")
            
            data = layer.get('data', [])
            if layer.get('encoding') == 'base64' and isinstance(data, str):
                gids = decode_base64_gids(data, layer.get('compression') or None)
            elif isinstance(data, list):
                gids = [_to_int(gid, f"GID in layer '{name}'") for gid in data]
            else:
                raise MapReadError(f"Layer '{name}' has unsupported data")
            
            layer_width = _to_int(layer.get('width', width), f"width of layer '{name}'")
            layer_height = _to_int(layer.get('height', height), f"height of layer '{name}'")
            tile_map.layers.append(resolver.build_layer(name, layer_width, layer_height, gids))
        
        return tile_map


def read_map(path: Union[str, Path]) -> TileMap:
    """Read a Tiled map file."""
    return TiledMapReader().read(path)
