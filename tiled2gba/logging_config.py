"""
Logging configuration for tiled2gba.

Export progress ("Tilemap exported to ...", "Export completed in ...") is
logged at INFO, problems with the map data (oversized tile ids, dropped
diagonal flips) at WARNING and failed exports at ERROR.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(verbose: bool = False, debug: bool = False, quiet: bool = False) -> int:
    """
    Pick the log level from the command line flags.
    
    ``debug`` wins over ``verbose``, which wins over ``quiet``.
    """
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    return logging.WARNING


def setup_logging(verbose: bool = False, debug: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Configure logging for tiled2gba.
    
    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages (implies verbose)
        quiet: If True, only show errors (data warnings are hidden)
    
    Returns:
        Configured logger instance
    """
    level = resolve_level(verbose, debug, quiet)
    
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True
    )
    
    logger = logging.getLogger('tiled2gba')
    logger.setLevel(level)
    
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a module.
    
    Args:
        name: Optional module name (defaults to 'tiled2gba')
    
    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f'tiled2gba.{name}')
    return logging.getLogger('tiled2gba')
