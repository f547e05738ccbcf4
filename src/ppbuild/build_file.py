"""Locate and evaluate build files.

A build file is plain Python. It is evaluated with the definition verbs
already in scope, so a minimal file reads::

    Describe("hello", "Say hello")
    Task("hello", run="echo hello")

    File("out.txt", "hello", run="date > out.txt")
    Group("all", "hello", "out.txt")
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from rich.markup import escape

from ppbuild.logging import Logger
from ppbuild.registry import TaskRegistry

if TYPE_CHECKING:
    from ppbuild.executor import Executor

__all__ = [
    "BUILD_FILE_NAMES",
    "BuildFileError",
    "find_build_file",
    "load_build_file",
    "make_definition_namespace",
]

BUILD_FILE_NAMES = ("build.ppb", "ppbuild.py")


class BuildFileError(Exception):
    """Raised when a build file cannot be read or is not valid Python."""

    pass


def find_build_file(
    start_dir: Optional[Path] = None,
    names: tuple[str, ...] = BUILD_FILE_NAMES,
) -> Optional[Path]:
    """Find a build file in ``start_dir`` or any of its parents.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)
        names: Candidate file names, in order of preference

    Returns:
        Path to the first build file found, or None
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in names:
            candidate = current / filename
            if candidate.is_file():
                return candidate

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def make_definition_namespace(
    registry: TaskRegistry, executor: Optional["Executor"] = None
) -> dict[str, Any]:
    """Names available to a build file.

    ``RunTask`` is only present when an executor is supplied.
    """
    namespace: dict[str, Any] = {
        "Task": registry.task,
        "File": registry.file,
        "Group": registry.group,
        "Describe": registry.describe,
        "TaskList": registry.list_names,
    }
    if executor is not None:
        namespace["RunTask"] = executor.run_task
    return namespace


def load_build_file(
    path: Path,
    registry: TaskRegistry,
    executor: Optional["Executor"] = None,
    logger: Optional[Logger] = None,
) -> TaskRegistry:
    """Evaluate a build file into ``registry``.

    The file's directory is importable while it is evaluated, so helper
    modules can sit next to the build file.

    Args:
        path: Build file to evaluate
        registry: Registry the definitions are added to
        executor: Executor exposed to the file as ``RunTask``
        logger: Optional logger for diagnostic output

    Returns:
        The registry, for chaining

    Raises:
        BuildFileError: If the file is missing or has a syntax error
        DuplicateTaskError: If the file defines a task twice
    """
    path = Path(path)
    if not path.is_file():
        raise BuildFileError(f"Build file not found: {path}")

    if logger:
        logger.debug(f"Loading build file {escape(str(path))}")

    directory = str(path.resolve().parent)
    sys.path.insert(0, directory)
    try:
        runpy.run_path(
            str(path),
            init_globals=make_definition_namespace(registry, executor),
            run_name="__ppbuild__",
        )
    except SyntaxError as e:
        raise BuildFileError(f"Syntax error in build file '{path}': {e}") from e
    finally:
        try:
            sys.path.remove(directory)
        except ValueError:
            pass

    if logger:
        logger.trace(f"Loaded {len(registry)} task(s) from {escape(str(path))}")
    return registry
