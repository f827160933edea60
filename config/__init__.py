"""
Configuration package.

Exports the settings container, the global settings instance and logging helpers.
"""

from config.logging_config import (
    get_logger,
    setup_debug,
    setup_logging,
    setup_quiet,
    setup_verbose,
)
from config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
    "setup_logging",
    "get_logger",
    "setup_verbose",
    "setup_debug",
    "setup_quiet",
]
