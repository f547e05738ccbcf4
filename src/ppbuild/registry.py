"""Task definitions and the registry that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Union


class DuplicateTaskError(Exception):
    """Raised when a task name is registered twice."""

    pass


class UnknownTaskError(Exception):
    """Raised when a task (or a dependency) is not in the registry."""

    pass


@dataclass(frozen=True)
class FunctionPayload:
    """A zero-argument callable whose return value is the task result."""

    func: Callable[[], Any]


@dataclass(frozen=True)
class ShellPayload:
    """A command string handed to the system shell."""

    command: str


@dataclass(frozen=True)
class UnsupportedPayload:
    """Anything else given as a task body. Running it is an error."""

    value: Any


Payload = Union[FunctionPayload, ShellPayload, UnsupportedPayload]


def make_payload(value: Any) -> Optional[Payload]:
    """Classify a task body given at definition time.

    Args:
        value: None, a shell command string, a callable, or an existing payload

    Returns:
        The matching payload variant, or None for a task without a body
    """
    if value is None:
        return None
    if isinstance(value, (FunctionPayload, ShellPayload, UnsupportedPayload)):
        return value
    if isinstance(value, str):
        return ShellPayload(value)
    if callable(value):
        return FunctionPayload(value)
    return UnsupportedPayload(value)


def split_definition_args(
    name: str, args: Sequence[Any], run: Any = None
) -> tuple[list[str], Any]:
    """Separate dependencies from the body in ``Task``/``File`` arguments.

    Two call shapes are accepted::

        Task("link", "compile", "assets", run="cc -o app *.o")
        Task("link", ["compile", "assets"], "cc -o app *.o")

    In the first shape a trailing callable is taken as the body when ``run``
    is not given. A bare string is always a dependency name.

    Raises:
        TypeError: If the body is given twice or a dependency is not a string
    """
    if args and isinstance(args[0], (list, tuple)):
        deps = list(args[0])
        rest = list(args[1:])
        if len(rest) > 1:
            raise TypeError(
                f"Task '{name}' takes a dependency list and at most one body, "
                f"got {len(rest)} extra arguments"
            )
        if rest:
            if run is not None:
                raise TypeError(f"Task '{name}' was given a body twice")
            run = rest[0]
    else:
        deps = list(args)
        if run is None and deps and callable(deps[-1]):
            run = deps.pop()

    return deps, run


def _check_deps(name: str, deps: Sequence[Any]) -> None:
    for dep in deps:
        if not isinstance(dep, str):
            raise TypeError(
                f"Dependencies of task '{name}' must be task names, "
                f"got {type(dep).__name__} {dep!r}"
            )


@dataclass
class Task:
    """Represents a task definition."""

    name: str
    deps: list[str] = field(default_factory=list)
    payload: Optional[Payload] = None
    target_file: Optional[str] = None
    ran: bool = False

    def __post_init__(self):
        if isinstance(self.deps, str):
            self.deps = [self.deps]
        else:
            self.deps = list(self.deps)

    @property
    def is_file_task(self) -> bool:
        return bool(self.target_file)


class TaskRegistry:
    """Named tasks plus their descriptions.

    Dependencies are stored by name only and are resolved when a task runs, so
    tasks may be declared in any order. Descriptions live in their own mapping
    and may be attached before, after, or without the task itself.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._descriptions: dict[str, str] = {}

    def register(
        self,
        name: str,
        deps: tuple[str, ...] | list[str] = (),
        payload: Any = None,
        target_file: Optional[str] = None,
    ) -> Optional[Task]:
        """Create and store a task.

        Args:
            name: Unique task name. An empty name is ignored.
            deps: Names of tasks to run first, in order
            payload: Callable, shell command string, or None
            target_file: Path the task is expected to produce

        Returns:
            The new task, or None if ``name`` was empty

        Raises:
            DuplicateTaskError: If ``name`` is already registered
            TypeError: If a dependency is not a task name
        """
        if not name:
            return None

        if name in self._tasks:
            raise DuplicateTaskError(f"Task '{name}' has already been defined")

        deps = [deps] if isinstance(deps, str) else list(deps)
        _check_deps(name, deps)

        task = Task(
            name=name,
            deps=deps,
            payload=make_payload(payload),
            target_file=target_file,
        )
        self._tasks[name] = task
        return task

    def task(self, name: str, *args: Any, run: Any = None) -> Optional[Task]:
        """Define a task whose body is a callable or a shell command.

        See split_definition_args() for the accepted argument shapes.
        """
        deps, run = split_definition_args(name, args, run)
        return self.register(name, deps, run)

    def file(self, name: str, *args: Any, run: Any = None) -> Optional[Task]:
        """Define a task that produces the file ``name``.

        The task is skipped while the file exists and must create it when run.
        """
        deps, run = split_definition_args(name, args, run)
        return self.register(name, deps, run, target_file=name)

    def group(self, name: str, *deps: Any) -> Optional[Task]:
        """Define a task that only runs its dependencies."""
        if len(deps) == 1 and isinstance(deps[0], (list, tuple)):
            deps = tuple(deps[0])
        return self.register(name, deps)

    def describe(self, name: str, text: Optional[str] = None) -> Optional[str]:
        """Set or get the description of ``name``.

        A non-empty ``text`` replaces any previous description. Either way the
        current description (or None) is returned.
        """
        if text:
            self._descriptions[name] = text
        return self._descriptions.get(name)

    def lookup(self, name: str) -> Optional[Task]:
        return self._tasks.get(name)

    def get(self, name: str) -> Task:
        """Return the task called ``name``.

        Raises:
            UnknownTaskError: If no such task is registered
        """
        task = self._tasks.get(name)
        if task is None:
            raise UnknownTaskError(f"No such task: {name}")
        return task

    def list_names(self) -> set[str]:
        return set(self._tasks)

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)
