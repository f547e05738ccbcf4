from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.tree import Tree

from ppbuild.cli_commands import get_project
from ppbuild.graph import build_dependency_tree
from ppbuild.logging import Logger


def show_tree(logger: Logger, task_name: str, build_file: Optional[str] = None) -> None:
    """
    Show the dependency tree of a task.
    """
    project = get_project(logger, build_file)

    if task_name not in project.registry:
        logger.error(f"[red]Task not found: {escape(task_name)}[/red]")
        raise typer.Exit(1)

    try:
        dep_tree = build_dependency_tree(project.registry, task_name)
    except Exception as e:
        logger.error(f"[red]Error building dependency tree: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    logger.info(build_rich_tree(dep_tree))


def build_rich_tree(dep_tree: dict) -> Tree:
    """
    Convert the nested dependency dictionary into a Rich Tree.

    File tasks are shown with their target, cycles are flagged in red.
    """
    label = escape(dep_tree["name"])
    if dep_tree.get("cycle"):
        label = f"[red]{label} (cycle)[/red]"
    elif dep_tree.get("file"):
        label = f"{label} [dim](file)[/dim]"

    tree = Tree(label)
    for dep in dep_tree.get("deps", []):
        tree.add(build_rich_tree(dep))

    return tree
