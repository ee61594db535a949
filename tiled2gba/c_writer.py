"""
C writer - formats encoded layers as a C header/source pair and writes them.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Union
from .constants import (
    MODE_REGULAR,
    MODE_AFFINE,
    MACRO_STYLE_PLAIN,
    MACRO_STYLE_PARENTHESIZED,
    SCREENBLOCK_WIDTH
)
from .encoder import EncodedArray, screenblocks, to_hex
from .errors import ExportIOError
from .logging_config import get_logger

logger = get_logger('c_writer')

INDENT = "    "
ENTRY_SEPARATOR = ", "
ROW_SEPARATOR = ", \n"
SCREENBLOCK_SEPARATOR = ", \n\n"


@dataclass(frozen=True)
class ExportDocuments:
    """The two generated documents, ready to be written."""
    header: str
    source: str


def _format_rows(entries: Sequence[int], row_width: int) -> List[str]:
    rows = []
    for start in range(0, len(entries), row_width):
        row = entries[start:start + row_width]
        rows.append(INDENT + ENTRY_SEPARATOR.join(to_hex(entry) for entry in row))
    return rows


def _format_dimension_macros(guard_name: str, width: int, height: int, macro_style: str) -> List[str]:
    length = width * height
    if macro_style == MACRO_STYLE_PARENTHESIZED:
        return [
            f"#define {guard_name}_WIDTH  ({width})",
            f"#define {guard_name}_HEIGHT ({height})",
            f"#define {guard_name}_LENGTH ({length})",
        ]
    if macro_style == MACRO_STYLE_PLAIN:
        return [
            f"#define {guard_name}_WIDTH {width}",
            f"#define {guard_name}_HEIGHT {height}",
            f"#define {guard_name}_LENGTH {length}",
        ]
    raise ValueError(f"Unknown macro style: {macro_style}")


def render_header(
    base_name: str,
    width: int,
    height: int,
    arrays: Sequence[EncodedArray],
    macro_style: str = MACRO_STYLE_PLAIN
) -> str:
    """
    Build the header: include guard, dimension macros and array declarations.
    
    Args:
        base_name: Sanitized file base name
        width: Map width in tiles
        height: Map height in tiles
        arrays: Encoded layers, in export order
        macro_style: ``plain`` or ``parenthesized`` dimension macros
    
    Returns:
        Header file contents
    """
    guard_name = base_name.upper()
    lines = [
        f"#ifndef _{guard_name}_H_",
        f"#define _{guard_name}_H_",
        "",
    ]
    lines.extend(_format_dimension_macros(guard_name, width, height, macro_style))
    lines.extend([
        "",
        "#ifdef __cplusplus",
        'extern "C" {',
        "#endif",
        "",
    ])
    for encoded in arrays:
        lines.append(f"extern const unsigned short {encoded.name}[{encoded.length}];")
    lines.extend([
        "",
        "#ifdef __cplusplus",
        "}",
        "#endif",
        "",
        "#endif",
    ])
    return "\n".join(lines) + "\n"


def _format_affine_body(encoded: EncodedArray, width: int) -> str:
    return ROW_SEPARATOR.join(_format_rows(encoded.entries, width))


def _format_regular_body(encoded: EncodedArray) -> str:
    blocks = []
    for screenblock_id, block in enumerate(screenblocks(encoded)):
        rows = _format_rows(block, SCREENBLOCK_WIDTH)
        blocks.append(f"{INDENT}// Screenblock {screenblock_id}\n" + ROW_SEPARATOR.join(rows))
    return SCREENBLOCK_SEPARATOR.join(blocks)


def render_array(encoded: EncodedArray, mode: str, width: int) -> str:
    """Render one layer as a C array definition."""
    declaration = (
        f"const unsigned short {encoded.name}[{encoded.length}] "
        f"__attribute__((aligned(4))) =\n{{\n"
    )
    if not encoded.is_tile_layer or not encoded.entries:
        return declaration + "};"
    
    if mode == MODE_REGULAR:
        body = _format_regular_body(encoded)
    elif mode == MODE_AFFINE:
        body = _format_affine_body(encoded, width)
    else:
        raise ValueError(f"Unknown export mode: {mode}")
    return declaration + body + "\n};"


def render_source(base_name: str, arrays: Sequence[EncodedArray], mode: str, width: int) -> str:
    """
    Build the source file: include of the sibling header, then every array.
    
    Args:
        base_name: Sanitized file base name
        arrays: Encoded layers, in export order
        mode: ``gba`` or ``gba-affine``
        width: Map width in tiles (row length in affine mode)
    
    Returns:
        Source file contents
    """
    parts = [f'#include "{base_name}.h"']
    parts.extend(render_array(encoded, mode, width) for encoded in arrays)
    return "\n\n".join(parts) + "\n"


def _write_text(path: Path, text: str) -> None:
    try:
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(text)
    except OSError as e:
        raise ExportIOError(path, e.strerror or str(e)) from e
    logger.info(f"Tilemap exported to {path}")


def write_export(documents: ExportDocuments, directory: Union[str, Path], base_name: str) -> List[Path]:
    """
    Write ``<base_name>.h`` and ``<base_name>.c`` into ``directory``.
    
    Existing files are overwritten. The header is written first; if it fails
    the source is not attempted.
    
    Args:
        documents: Rendered header and source
        directory: Target directory
        base_name: Sanitized file base name
    
    Returns:
        Paths of the written files, header first
    
    Raises:
        ExportIOError: If either file cannot be written
    """
    directory = Path(directory)
    header_path = directory / f"{base_name}.h"
    source_path = directory / f"{base_name}.c"
    
    _write_text(header_path, documents.header)
    _write_text(source_path, documents.source)
    
    return [header_path, source_path]
