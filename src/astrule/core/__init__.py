"""Core astrule utilities.

This module exports core utilities for use throughout the application.
"""

from astrule.core.config import Settings, get_settings
from astrule.core.logging import (
    LoggingContext,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
]
