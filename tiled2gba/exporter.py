"""
Map formats - the "GBA source files" export entry points.

Each map format validates the map, encodes every layer and writes a
``.h``/``.c`` pair next to the requested file name.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union
from .constants import (
    MODE_REGULAR,
    MODE_AFFINE,
    MACRO_STYLE_PLAIN,
    MACRO_STYLE_PARENTHESIZED,
    DEFAULT_MACRO_STYLES
)
from .c_writer import ExportDocuments, render_header, render_source, write_export
from .encoder import encode_layers, sanitize_identifier
from .errors import InvalidOptionError, Tiled2GbaError
from .model import TileMap
from .logging_config import get_logger

logger = get_logger('exporter')


@dataclass
class ExportOptions:
    """User-tunable parts of the generated output."""
    macro_style: Optional[str] = None  # None: default for the mode

    def resolve_macro_style(self, mode: str) -> str:
        """
        Macro style to use for ``mode``.
        
        Raises:
            InvalidOptionError: If ``macro_style`` is not a known style
        """
        if not self.macro_style:
            return DEFAULT_MACRO_STYLES[mode]
        if self.macro_style not in (MACRO_STYLE_PLAIN, MACRO_STYLE_PARENTHESIZED):
            raise InvalidOptionError(
                f"Unknown macro style: {self.macro_style} "
                f"(expected {MACRO_STYLE_PLAIN} or {MACRO_STYLE_PARENTHESIZED})"
            )
        return self.macro_style


def output_base_name(file_name: Union[str, Path]) -> str:
    """File name without its last extension, made identifier-safe."""
    return sanitize_identifier(Path(file_name).stem)


def build_export(
    tile_map: TileMap,
    base_name: str,
    mode: str,
    options: Optional[ExportOptions] = None
) -> ExportDocuments:
    """
    Encode a map and render both documents without touching the disk.
    
    Args:
        tile_map: Map to export
        base_name: Sanitized file base name
        mode: ``gba`` or ``gba-affine``
        options: Output options (defaults used if None)
    
    Returns:
        ExportDocuments with header and source text
    
    Raises:
        InvalidSizeError: If the map size is not allowed for ``mode``
        InvalidOptionError: If an option has an unknown value
    """
    options = options or ExportOptions()
    macro_style = options.resolve_macro_style(mode)
    arrays = encode_layers(tile_map.layers, tile_map.width, tile_map.height, mode)
    header = render_header(base_name, tile_map.width, tile_map.height, arrays, macro_style)
    source = render_source(base_name, arrays, mode, tile_map.width)
    return ExportDocuments(header, source)


def export_map(
    tile_map: TileMap,
    file_name: Union[str, Path],
    mode: str = MODE_REGULAR,
    options: Optional[ExportOptions] = None
) -> List[Path]:
    """
    Export a map as ``<base>.h`` and ``<base>.c`` in the directory of ``file_name``.
    
    Returns:
        Paths of the written files
    
    Raises:
        InvalidSizeError: If the map size is not allowed for ``mode``
        ExportIOError: If a file cannot be written
    """
    started = time.perf_counter()
    
    file_name = Path(file_name)
    base_name = output_base_name(file_name)
    documents = build_export(tile_map, base_name, mode, options)
    written = write_export(documents, file_name.parent, base_name)
    
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"Export completed in {elapsed_ms:.1f} ms")
    return written


@dataclass(frozen=True)
class MapFormat:
    """An export format as registered with the map editor."""
    format_id: str
    name: str
    extension: str = "c *.h"

    def write(
        self,
        tile_map: TileMap,
        file_name: Union[str, Path],
        options: Optional[ExportOptions] = None
    ) -> Optional[str]:
        """
        Export the map; return None on success or an error message.
        """
        try:
            export_map(tile_map, file_name, self.format_id, options)
        except Tiled2GbaError as e:
            logger.error(str(e))
            return str(e)
        return None


MAP_FORMATS: Dict[str, MapFormat] = {
    MODE_REGULAR: MapFormat(MODE_REGULAR, "GBA source files - regular"),
    MODE_AFFINE: MapFormat(MODE_AFFINE, "GBA source files - affine"),
}


def get_map_format(format_id: str) -> MapFormat:
    """Look up a registered map format by id."""
    return MAP_FORMATS[format_id]
