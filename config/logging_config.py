"""Logging configuration module."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """
    Setup basic logging configuration.

    Args:
        level: Root logging level
        log_file: Optional file that receives the same records as stdout
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def setup_verbose(log_file: Optional[Path] = None) -> None:
    """Setup verbose logging (INFO level with more detail)."""
    setup_logging(logging.INFO, log_file)


def setup_debug(log_file: Optional[Path] = None) -> None:
    """Setup debug logging (DEBUG level)."""
    setup_logging(logging.DEBUG, log_file)


def setup_quiet(log_file: Optional[Path] = None) -> None:
    """Setup quiet logging (warnings and errors only)."""
    setup_logging(logging.WARNING, log_file)
