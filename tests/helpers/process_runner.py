"""Test helpers for ProcessRunner mocking."""

from pathlib import Path
from typing import Callable, Optional

from helpers.logging import logger_stub
from ppbuild.process_runner import ProcessRunner


class MockProcessRunner(ProcessRunner):
    """
    ProcessRunner that records commands instead of running them.

    Args:
        exit_code: Exit status returned from every run() call
        on_run: Optional callback invoked with (command, cwd), e.g. to create
            the file a command would have produced
    """

    def __init__(
        self,
        exit_code: int = 0,
        on_run: Optional[Callable[[str, Optional[Path]], None]] = None,
    ):
        super().__init__(logger_stub)
        self.exit_code = exit_code
        self.on_run = on_run
        self.calls: list[tuple[str, Optional[Path]]] = []

    def run(self, command: str, cwd: Optional[Path] = None) -> int:
        self.calls.append((command, cwd))
        if self.on_run is not None:
            self.on_run(command, cwd)
        return self.exit_code

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]
