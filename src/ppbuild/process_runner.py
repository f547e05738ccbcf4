"""Shell command execution.

Task bodies given as strings are handed to a ProcessRunner, which runs them
through the system shell and reports the exit status. Keeping this behind an
interface lets the executor be tested without spawning processes.
"""

from __future__ import annotations

import subprocess
import sys
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from threading import Thread
from typing import Any, Optional, TextIO

from rich.markup import escape

from ppbuild.logging import Logger

__all__ = [
    "ProcessRunner",
    "PassthroughProcessRunner",
    "SilentProcessRunner",
    "StdoutOnlyProcessRunner",
    "StderrOnlyProcessRunner",
    "TaskOutputTypes",
    "make_process_runner",
    "stream_output",
]


class TaskOutputTypes(Enum):
    """Which output streams of a shell command reach the terminal."""

    ALL = "all"
    NONE = "none"
    OUT = "out"
    ERR = "err"


class ProcessRunner(ABC):
    """Runs a shell command string and returns its exit status."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    @abstractmethod
    def run(self, command: str, cwd: Optional[Path] = None) -> int:
        """
        Run ``command`` in a subordinate shell.

        Args:
            command: Command line, possibly spanning several lines
            cwd: Working directory (defaults to the current one)

        Returns:
            The exit status of the shell
        """
        ...


class PassthroughProcessRunner(ProcessRunner):
    """Runs commands with the parent's stdout and stderr."""

    def run(self, command: str, cwd: Optional[Path] = None) -> int:
        self._logger.trace(f"Executing: {escape(command)}")
        return subprocess.run(command, shell=True, cwd=cwd).returncode


class SilentProcessRunner(ProcessRunner):
    """Runs commands with all output discarded."""

    def run(self, command: str, cwd: Optional[Path] = None) -> int:
        self._logger.trace(f"Executing silently: {escape(command)}")
        completed = subprocess.run(
            command,
            shell=True,
            cwd=cwd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return completed.returncode


def stream_output(pipe: Any, target: TextIO) -> None:
    """
    Copy lines from ``pipe`` to ``target`` until the pipe closes.

    A pipe closed underneath the reader ends the copy quietly.
    """
    if pipe:
        try:
            for line in pipe:
                target.write(line)
                target.flush()
        except (OSError, ValueError):
            # Pipe closed while reading
            pass


class _ForwardingProcessRunner(ProcessRunner):
    """Forwards one output stream through a reader thread, discards the other.

    Writing through ``sys.stdout``/``sys.stderr`` rather than sharing file
    descriptors means redirected Python streams (for example under a test
    runner) still see the command's output.
    """

    forward_stdout = True
    join_timeout_secs = 1.0

    def run(self, command: str, cwd: Optional[Path] = None) -> int:
        self._logger.trace(f"Executing: {escape(command)}")

        if self.forward_stdout:
            stdout, stderr = subprocess.PIPE, subprocess.DEVNULL
        else:
            stdout, stderr = subprocess.DEVNULL, subprocess.PIPE

        process = subprocess.Popen(
            command,
            shell=True,
            cwd=cwd,
            stdout=stdout,
            stderr=stderr,
            text=True,
            bufsize=1,
        )

        if self.forward_stdout:
            pipe, target, thread_name = process.stdout, sys.stdout, "stdout-streamer"
        else:
            pipe, target, thread_name = process.stderr, sys.stderr, "stderr-streamer"

        thread = Thread(target=stream_output, args=(pipe, target), name=thread_name)
        thread.start()
        try:
            return_code = process.wait()
        finally:
            thread.join(timeout=self.join_timeout_secs)
            if pipe:
                pipe.close()

        if thread.is_alive():
            self._logger.warn(
                f"Output thread did not finish within {self.join_timeout_secs} seconds"
            )
        return return_code


class StdoutOnlyProcessRunner(_ForwardingProcessRunner):
    """Shows the command's stdout and drops its stderr."""

    forward_stdout = True


class StderrOnlyProcessRunner(_ForwardingProcessRunner):
    """Shows the command's stderr and drops its stdout."""

    forward_stdout = False


def make_process_runner(output_type: TaskOutputTypes, logger: Logger) -> ProcessRunner:
    """
    Create the ProcessRunner for an output mode.

    Raises:
        ValueError: If ``output_type`` is not a TaskOutputTypes member
    """
    match output_type:
        case TaskOutputTypes.ALL:
            return PassthroughProcessRunner(logger)
        case TaskOutputTypes.NONE:
            return SilentProcessRunner(logger)
        case TaskOutputTypes.OUT:
            return StdoutOnlyProcessRunner(logger)
        case TaskOutputTypes.ERR:
            return StderrOnlyProcessRunner(logger)
        case _:
            raise ValueError(f"Invalid TaskOutputTypes: {output_type}")
