"""
Exceptions raised while exporting maps.
"""

from pathlib import Path
from typing import Union


class Tiled2GbaError(Exception):
    """Base class for all export errors."""


class InvalidSizeError(Tiled2GbaError, ValueError):
    """Map dimensions are not allowed by the selected export mode."""


class MapReadError(Tiled2GbaError, ValueError):
    """A Tiled map file could not be read into the map model."""


class ExportIOError(Tiled2GbaError, OSError):
    """Writing one of the generated files failed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")


class InvalidOptionError(Tiled2GbaError, ValueError):
    """An export option has a value the writer does not understand."""
