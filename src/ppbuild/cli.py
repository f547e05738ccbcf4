"""Command-line interface for ppbuild."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ppbuild import __version__
from ppbuild.cli_commands import get_project
from ppbuild.cli_commands.init_build_file import init_build_file
from ppbuild.cli_commands.list_tasks import list_tasks
from ppbuild.cli_commands.run_tasks import run_tasks
from ppbuild.cli_commands.show_tree import show_tree
from ppbuild.config import ConfigError, load_settings
from ppbuild.console_logger import ConsoleLogger
from ppbuild.logging import Logger, parse_log_level
from ppbuild.process_runner import TaskOutputTypes

app = typer.Typer(
    help="ppbuild - run tasks from a Python build file, dependencies first",
    add_completion=False,
    no_args_is_help=False,
)


def _version_callback(value: bool) -> None:
    if value:
        Console().print(f"ppbuild version {__version__}")
        raise typer.Exit()


def _show_available_tasks(logger: Logger, build_file: Optional[str]) -> None:
    project = get_project(logger, build_file)
    logger.info("[bold]Available tasks:[/bold]")
    for name in sorted(project.registry.list_names()):
        logger.info(f"  - {escape(name)}")
    logger.info("\nUse [cyan]ppbuild --tasks[/cyan] for descriptions")
    logger.info("Use [cyan]ppbuild <task>...[/cyan] to run tasks")


@app.command()
def main(
    tasks: Optional[List[str]] = typer.Argument(
        None, help="Tasks to run, in order", show_default=False
    ),
    build_file: Optional[str] = typer.Option(
        None, "--file", "-f", help="Build file to use instead of searching for one"
    ),
    list_opt: bool = typer.Option(
        False, "--tasks", "-T", help="List tasks with their descriptions"
    ),
    tree: Optional[str] = typer.Option(
        None, "--tree", help="Show the dependency tree of a task"
    ),
    force: bool = typer.Option(
        False, "--force", help="Run the named tasks even if they are up to date"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-L", help="fatal, error, warn, info, debug or trace"
    ),
    task_output: Optional[str] = typer.Option(
        None, "--output", "-O", help="Shell command output to show: all, none, out or err"
    ),
    init: bool = typer.Option(False, "--init", help="Create a starter build.ppb"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    err_console = Console(stderr=True)

    try:
        settings = load_settings()
    except ConfigError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        level = parse_log_level(log_level) if log_level else settings.log_level
    except ValueError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    if task_output:
        try:
            output_type = TaskOutputTypes(task_output.lower())
        except ValueError:
            valid = ", ".join(t.value for t in TaskOutputTypes)
            err_console.print(
                f"[red]Invalid output type '{task_output}'. Valid values: {valid}[/red]"
            )
            raise typer.Exit(1)
    else:
        output_type = settings.task_output

    logger = ConsoleLogger(Console(), level, err_console=err_console)
    build_file = build_file or settings.build_file

    if init:
        init_build_file(logger)
        return

    if list_opt:
        list_tasks(logger, build_file)
        return

    if tree:
        show_tree(logger, tree, build_file)
        return

    if not tasks:
        _show_available_tasks(logger, build_file)
        return

    run_tasks(logger, tasks, force=force, build_file=build_file, task_output=output_type)


if __name__ == "__main__":
    app()
