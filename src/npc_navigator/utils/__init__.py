"""Utility functions and configuration."""

from npc_navigator.utils.config import (
    DEFAULT_TIME_BETWEEN_COMPUTE,
    DEFAULT_WAYPOINT_SPACING,
)
from npc_navigator.utils.logging import (
    get_logger,
    LogCategory,
    LogEntry,
    LogLevel,
    set_logger,
    StructuredLogger,
)

__all__ = [
    "DEFAULT_TIME_BETWEEN_COMPUTE",
    "DEFAULT_WAYPOINT_SPACING",
    "get_logger",
    "LogCategory",
    "LogEntry",
    "LogLevel",
    "set_logger",
    "StructuredLogger",
]
