"""Logging infrastructure for ppbuild.

Provides the Logger interface used for dependency injection of diagnostic output.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any


class LogLevel(enum.Enum):
    """Log verbosity levels for ppbuild diagnostic messages.

    Lower numeric values represent higher severity / less verbosity.
    """
    FATAL = 0  # Only unrecoverable errors (broken build files, unknown tasks)
    ERROR = 1  # Fatal errors plus task failures
    WARN = 2   # Errors plus configuration warnings
    INFO = 3   # Warnings plus tasks being run (default)
    DEBUG = 4  # Info plus skip reasons and resolved paths
    TRACE = 5  # Debug plus dependency traversal


def parse_log_level(name: str) -> LogLevel:
    """Convert a level name such as "debug" to a LogLevel.

    Raises:
        ValueError: If the name is not a known level
    """
    try:
        return LogLevel[name.strip().upper()]
    except KeyError:
        valid = ", ".join(level.name.lower() for level in LogLevel)
        raise ValueError(f"Invalid log level '{name}'. Valid levels: {valid}") from None


class Logger(ABC):
    """Abstract leveled logger.

    Implementations decide where messages go. Arguments are passed through
    unchanged so that rich renderables (tables, trees) can be logged.
    """

    @abstractmethod
    def log(self, level: LogLevel = LogLevel.INFO, *args: Any, **kwargs: Any) -> None:
        ...

    @abstractmethod
    def push_level(self, level: LogLevel) -> None:
        ...

    @abstractmethod
    def pop_level(self) -> LogLevel:
        ...

    def fatal(self, *args: Any, **kwargs: Any) -> None:
        self.log(LogLevel.FATAL, *args, **kwargs)

    def error(self, *args: Any, **kwargs: Any) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def warn(self, *args: Any, **kwargs: Any) -> None:
        self.log(LogLevel.WARN, *args, **kwargs)

    def info(self, *args: Any, **kwargs: Any) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def debug(self, *args: Any, **kwargs: Any) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def trace(self, *args: Any, **kwargs: Any) -> None:
        self.log(LogLevel.TRACE, *args, **kwargs)
