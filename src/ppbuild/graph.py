"""Dependency tree construction for display."""

from ppbuild.registry import TaskRegistry


def build_dependency_tree(registry: TaskRegistry, target_task: str) -> dict:
    """Build a tree structure representing dependencies for visualization.

    A task that reappears below itself is reported with ``"cycle": True`` and
    no children instead of being expanded again.

    Args:
        registry: Registry containing all tasks
        target_task: Name of the task at the root of the tree

    Returns:
        Nested dictionary with ``name`` and ``deps`` keys

    Raises:
        UnknownTaskError: If the task or any dependency doesn't exist
    """
    ancestors: set[str] = set()

    def build_tree(task_name: str) -> dict:
        task = registry.get(task_name)

        if task_name in ancestors:
            return {"name": task_name, "deps": [], "cycle": True}

        ancestors.add(task_name)
        tree = {
            "name": task_name,
            "deps": [build_tree(dep) for dep in task.deps],
        }
        ancestors.remove(task_name)

        if task.target_file:
            tree["file"] = task.target_file
        return tree

    return build_tree(target_task)
