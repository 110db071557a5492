"""Structured logging for the navigation controller.

Every path computation, follow-loop transition and teardown can be
recorded with an agent name and category so a run can be replayed
from its log afterwards.

This module provides:
- LogCategory: Predefined log categories for consistent filtering
- StructuredLogger: Category-prefixed logging with timestamps and context
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Any, TextIO

# =============================================================================
# LOG CATEGORIES
# =============================================================================

class LogCategory(str, Enum):
    """Log categories for structured filtering and analysis.

    Categories name controller components, not outcomes.
    """
    PATH = "PATH"            # Path queries and their results
    MOVE = "MOVE"            # Waypoint traversal and locomotor commands
    FOLLOW = "FOLLOW"        # Follow loop state transitions
    EVENT = "EVENT"          # Event bus publishes
    LIFECYCLE = "LIFECYCLE"  # Agent construction and teardown
    SYSTEM = "SYSTEM"        # Everything else


# =============================================================================
# LOG LEVELS
# =============================================================================

class LogLevel(str, Enum):
    """Log levels for filtering."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


_LEVEL_MAP = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


# =============================================================================
# LOG ENTRY
# =============================================================================

class LogEntry:
    """A structured log entry with optional agent and cycle context."""

    def __init__(
        self,
        category: LogCategory,
        level: LogLevel,
        message: str,
        agent: str | None = None,
        cycle: int | None = None,
        **kwargs: Any,
    ):
        self.timestamp = datetime.now()
        self.category = category
        self.level = level
        self.message = message
        self.agent = agent
        self.cycle = cycle
        self.context = dict(kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        d: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "category": self.category.value,
            "level": self.level.value,
            "message": self.message,
        }
        if self.agent is not None:
            d["agent"] = self.agent
        if self.cycle is not None:
            d["cycle"] = self.cycle
        if self.context:
            d["context"] = self.context
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    def format_console(self) -> str:
        """Format for console output with category prefix."""
        ts = self.timestamp.strftime("%H:%M:%S.%f")[:-3]
        prefix = f"[{self.category.value}]"

        context_parts = []
        if self.agent is not None:
            context_parts.append(f"agent={self.agent}")
        if self.cycle is not None:
            context_parts.append(f"cycle={self.cycle}")

        context_str = f" ({', '.join(context_parts)})" if context_parts else ""
        return f"{ts} {prefix:12} {self.message}{context_str}"


# =============================================================================
# STRUCTURED LOGGER
# =============================================================================

class StructuredLogger:
    """Category-prefixed structured logger.

    Entries are kept in a bounded history and mirrored to the standard
    ``logging`` tree under ``name`` so they show up alongside the
    module loggers.
    """

    def __init__(
        self,
        name: str = "npc_navigator",
        level: LogLevel = LogLevel.INFO,
        console_output: bool = False,
        file_output: TextIO | None = None,
        json_output: bool = False,
        max_history: int = 10000,
    ):
        self._logger = logging.getLogger(name)
        self._level = level
        self._console_output = console_output
        self._file_output = file_output
        self._json_output = json_output

        self._counts: dict[LogCategory, int] = {cat: 0 for cat in LogCategory}
        self._warning_count = 0
        self._error_count = 0

        self._entries: list[LogEntry] = []
        self._max_history = max_history

        self._disabled_categories: set[LogCategory] = set()

    def log(
        self,
        category: LogCategory,
        level: LogLevel,
        message: str,
        **kwargs: Any,
    ) -> LogEntry:
        """Log a structured entry.

        Args:
            category: Log category
            level: Log level
            message: Log message
            **kwargs: Context such as ``agent`` and ``cycle``

        Returns:
            The created LogEntry (also when filtered out)
        """
        entry = LogEntry(category, level, message, **kwargs)

        if _LEVEL_MAP[level] < _LEVEL_MAP[self._level]:
            return entry
        if category in self._disabled_categories:
            return entry

        self._counts[category] += 1
        if level == LogLevel.ERROR:
            self._error_count += 1
        elif level == LogLevel.WARNING:
            self._warning_count += 1

        self._entries.append(entry)
        if len(self._entries) > self._max_history:
            self._entries = self._entries[-self._max_history:]

        self._logger.log(_LEVEL_MAP[level], "[%s] %s", category.value, message)

        if self._console_output:
            print(entry.format_console(), file=sys.stderr)
        if self._file_output:
            line = entry.to_json() if self._json_output else entry.format_console()
            self._file_output.write(line + "\n")
            self._file_output.flush()

        return entry

    # -------------------------------------------------------------------------
    # CATEGORY-SPECIFIC METHODS
    # -------------------------------------------------------------------------

    def path(self, message: str, level: LogLevel = LogLevel.DEBUG, **kwargs: Any) -> LogEntry:
        """Log a path query."""
        return self.log(LogCategory.PATH, level, message, **kwargs)

    def move(self, message: str, level: LogLevel = LogLevel.DEBUG, **kwargs: Any) -> LogEntry:
        """Log waypoint traversal."""
        return self.log(LogCategory.MOVE, level, message, **kwargs)

    def follow(self, message: str, level: LogLevel = LogLevel.INFO, **kwargs: Any) -> LogEntry:
        """Log a follow loop transition."""
        return self.log(LogCategory.FOLLOW, level, message, **kwargs)

    def event(self, message: str, level: LogLevel = LogLevel.DEBUG, **kwargs: Any) -> LogEntry:
        return self.log(LogCategory.EVENT, level, message, **kwargs)

    def lifecycle(self, message: str, level: LogLevel = LogLevel.INFO, **kwargs: Any) -> LogEntry:
        return self.log(LogCategory.LIFECYCLE, level, message, **kwargs)

    def system(self, message: str, level: LogLevel = LogLevel.INFO, **kwargs: Any) -> LogEntry:
        return self.log(LogCategory.SYSTEM, level, message, **kwargs)

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------

    def set_level(self, level: LogLevel) -> None:
        self._level = level

    def disable_categories(self, categories: list[LogCategory]) -> None:
        self._disabled_categories.update(categories)

    def enable_all_categories(self) -> None:
        self._disabled_categories.clear()

    # -------------------------------------------------------------------------
    # STATISTICS
    # -------------------------------------------------------------------------

    def get_statistics(self) -> dict[str, Any]:
        """Get logging statistics."""
        return {
            "total": sum(self._counts.values()),
            "by_category": {cat.value: count for cat, count in self._counts.items()},
            "warnings": self._warning_count,
            "errors": self._error_count,
        }

    def get_recent_entries(self, count: int = 100) -> list[LogEntry]:
        return self._entries[-count:]

    def filter_by_category(self, category: LogCategory) -> list[LogEntry]:
        return [e for e in self._entries if e.category == category]

    def filter_by_agent(self, agent: str) -> list[LogEntry]:
        return [e for e in self._entries if e.agent == agent]


# =============================================================================
# GLOBAL LOGGER INSTANCE
# =============================================================================

_global_logger: StructuredLogger | None = None


def get_logger() -> StructuredLogger:
    """Get the global logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = StructuredLogger()
    return _global_logger


def set_logger(logger: StructuredLogger) -> None:
    """Set the global logger instance."""
    global _global_logger
    _global_logger = logger


__all__ = [
    "LogCategory",
    "LogLevel",
    "LogEntry",
    "StructuredLogger",
    "get_logger",
    "set_logger",
]
