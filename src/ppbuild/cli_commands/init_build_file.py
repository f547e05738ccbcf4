"""Create a starter build file."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from ppbuild.logging import Logger

BUILD_FILE_TEMPLATE = '''# ppbuild build file
#
# This is plain Python. Task, File, Group, Describe, TaskList and RunTask
# are already defined.
#
# A task runs after its dependencies, at most once per invocation. Its body
# is either a shell command string or a Python function taking no arguments.
#
# Describe("compile", "Compile the sources")
# Task("compile", run="cc -c main.c -o main.o")
#
# File tasks are skipped while the file exists and must create it.
#
# Describe("app", "Link the application")
# File("app", "compile", run="cc main.o -o app")
#
# def report():
#     print("built", sorted(TaskList()))
#
# Task("report", "app", run=report)
#
# Groups only run their dependencies, in order.
#
# Describe("all", "Build everything")
# Group("all", "app", "report")
'''


def init_build_file(logger: Logger, path: Path = Path("build.ppb")) -> None:
    """
    Write a commented build file template.

    Raises:
        typer.Exit: If the file already exists
    """
    if path.exists():
        logger.error(f"[red]{escape(str(path))} already exists[/red]")
        raise typer.Exit(1)

    path.write_text(BUILD_FILE_TEMPLATE)
    logger.info(f"[green]Created {escape(str(path))}[/green]")
    logger.info("Edit the file to define your tasks")
