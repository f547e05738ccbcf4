"""Run tasks named on the command line."""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape

from ppbuild.cli_commands import (
    get_action_failure_string,
    get_action_success_string,
    get_project,
)
from ppbuild.executor import ProcessExecutionFailure, TaskOutcome
from ppbuild.logging import Logger
from ppbuild.process_runner import TaskOutputTypes


def run_tasks(
    logger: Logger,
    task_names: list[str],
    force: bool = False,
    build_file: Optional[str] = None,
    task_output: TaskOutputTypes = TaskOutputTypes.ALL,
) -> None:
    """
    Run each task, with its dependencies, in the order given.

    The first failure stops the run. A failed shell command exits with the
    command's own status, any other failure with status 1.

    Args:
        logger: Logger interface for output
        task_names: Tasks to run
        force: Re-run the named tasks even if already done (not their dependencies)
        build_file: Path to the build file (searched for if omitted)
        task_output: Which shell command output streams to show
    """
    project = get_project(logger, build_file, task_output)

    for name in task_names:
        if name not in project.registry:
            logger.error(f"[red]Task not found: {escape(name)}[/red]")
            logger.info("\nAvailable tasks:")
            for available in sorted(project.registry.list_names()):
                logger.info(f"  - {escape(available)}")
            raise typer.Exit(1)

    for name in task_names:
        try:
            result = project.executor.run_task(name, force=force)
        except ProcessExecutionFailure as e:
            logger.error(f"[red]{get_action_failure_string()} {escape(str(e))}[/red]")
            raise typer.Exit(e.exit_code)
        except Exception as e:
            logger.error(
                f"[red]{get_action_failure_string()} Task '{escape(name)}' failed: {escape(str(e))}[/red]"
            )
            raise typer.Exit(1)

        if result.outcome is TaskOutcome.UP_TO_DATE:
            logger.info(escape(result.message))
        elif result.has_value:
            logger.debug(f"Task '{escape(name)}' returned {escape(repr(result.value))}")

        logger.info(
            f"[green]{get_action_success_string()} Task '{escape(name)}' completed successfully[/green]"
        )
