"""
Logging configuration for cocomerge.

Diagnostics (dropped images, per-file progress) go through the standard
logging module so they never end up in the merged dataset written to disk.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO", log_file: Optional[str] = None, verbose: bool = False
):
    """Setup logging configuration for a CLI run."""
    if verbose:
        level = "DEBUG"
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    handlers: list = [
        logging.StreamHandler(sys.stdout),
    ]
    if isinstance(log_file, str):
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name, typically ``__name__``

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
