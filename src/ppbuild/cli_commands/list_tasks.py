from __future__ import annotations

from typing import Optional

from rich.markup import escape
from rich.table import Table

from ppbuild.cli_commands import get_project
from ppbuild.logging import Logger
from ppbuild.registry import TaskRegistry


def list_tasks(logger: Logger, build_file: Optional[str] = None) -> None:
    """
    List all tasks with their descriptions.
    """
    project = get_project(logger, build_file)
    logger.info("Tasks:")
    logger.info(build_task_table(project.registry))


def build_task_table(registry: TaskRegistry) -> Table:
    """
    Borderless two-column table of task names and descriptions, sorted by name.
    """
    names = sorted(registry.list_names())
    max_task_name_len = max((len(name) for name in names), default=0)

    table = Table(show_edge=False, show_header=False, box=None, padding=(0, 1))
    table.add_column("Task", style="bold cyan", no_wrap=True, width=max_task_name_len + 1)
    table.add_column("Description", style="white", max_width=80)

    for name in names:
        description = registry.describe(name)
        table.add_row(f" {escape(name)}", f"- {escape(description)}" if description else "")

    return table
