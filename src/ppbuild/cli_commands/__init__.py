"""CLI command implementations and shared utilities."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ppbuild.build_file import BUILD_FILE_NAMES, find_build_file, load_build_file
from ppbuild.executor import Executor, ProcessExecutionFailure
from ppbuild.logging import Logger
from ppbuild.process_runner import TaskOutputTypes, make_process_runner
from ppbuild.registry import TaskRegistry


def _supports_unicode() -> bool:
    """
    Check if the terminal can print the tick and cross symbols.
    """
    # Classic Windows console (conhost)
    if os.name == "nt" and "WT_SESSION" not in os.environ:
        return False

    encoding = sys.stdout.encoding
    if not encoding:
        return False

    try:
        "✓✗".encode(encoding)
        return True
    except UnicodeEncodeError:
        return False


def get_action_success_string() -> str:
    return "✓" if _supports_unicode() else "[ OK ]"


def get_action_failure_string() -> str:
    return "✗" if _supports_unicode() else "[ FAIL ]"


@dataclass
class Project:
    """A loaded build file with the registry and executor bound to it."""

    build_file: Path
    registry: TaskRegistry
    executor: Executor


def get_project(
    logger: Logger,
    build_file: Optional[str] = None,
    task_output: TaskOutputTypes = TaskOutputTypes.ALL,
) -> Project:
    """
    Locate and load the build file.

    Shell commands run, and file targets resolve, in the build file's directory.

    Raises:
        typer.Exit: If no build file is found or it fails to load. A shell
            command run by the build file itself exits with its own status.
    """
    if build_file:
        path = Path(build_file)
        if not path.is_file():
            logger.error(f"[red]Build file not found: {escape(build_file)}[/red]")
            raise typer.Exit(1)
    else:
        path = find_build_file()
        if path is None:
            logger.error(
                f"[red]No build file found ({' or '.join(BUILD_FILE_NAMES)})[/red]"
            )
            logger.info("Run [cyan]ppbuild --init[/cyan] to create one")
            raise typer.Exit(1)

    registry = TaskRegistry()
    executor = Executor(
        registry,
        logger,
        make_process_runner(task_output, logger),
        working_dir=path.resolve().parent,
    )

    try:
        load_build_file(path, registry, executor, logger)
    except ProcessExecutionFailure as e:
        logger.error(f"[red]Error loading build file: {escape(str(e))}[/red]")
        raise typer.Exit(e.exit_code)
    except Exception as e:
        logger.error(f"[red]Error loading build file: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    return Project(build_file=path, registry=registry, executor=executor)
