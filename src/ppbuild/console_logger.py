from __future__ import annotations

from typing import Any, Optional

from rich.console import Console

from ppbuild.logging import Logger, LogLevel


class ConsoleLogger(Logger):
    """Logger that prints through Rich consoles.

    Messages more verbose than the active level are dropped. FATAL and ERROR
    messages go to ``err_console`` when one is given, everything else to
    ``console``. The active level is kept on a stack so callers can raise or
    lower verbosity temporarily.
    """

    def __init__(
        self,
        console: Console,
        level: LogLevel = LogLevel.INFO,
        err_console: Optional[Console] = None,
    ) -> None:
        self._console = console
        self._err_console = err_console
        self._levels = [level]

    @property
    def level(self) -> LogLevel:
        return self._levels[-1]

    def log(self, level: LogLevel = LogLevel.INFO, *args: Any, **kwargs: Any) -> None:
        if level.value > self.level.value:
            return
        if self._err_console is not None and level.value <= LogLevel.ERROR.value:
            self._err_console.print(*args, **kwargs)
        else:
            self._console.print(*args, **kwargs)

    def push_level(self, level: LogLevel) -> None:
        self._levels.append(level)

    def pop_level(self) -> LogLevel:
        """Restore the previous level and return the one removed.

        Raises:
            RuntimeError: If only the base level is left
        """
        if len(self._levels) <= 1:
            raise RuntimeError("Cannot pop the base log level")
        return self._levels.pop()
