"""Task execution with run-once memoization."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from rich.markup import escape

from ppbuild.logging import Logger
from ppbuild.process_runner import ProcessRunner
from ppbuild.registry import (
    FunctionPayload,
    ShellPayload,
    Task,
    TaskRegistry,
    UnknownTaskError,
    UnsupportedPayload,
)


class ExecutionError(Exception):
    """Raised when a task cannot be run to completion."""

    pass


class InvalidPayloadError(ExecutionError):
    """Raised when a task body is neither a callable, a string nor None."""

    pass


class FileTaskPostConditionError(ExecutionError):
    """Raised when a file task finishes without producing its file."""

    def __init__(self, task_name: str, target_file: str):
        super().__init__(
            f"File '{target_file}' does not exist after running file task '{task_name}'"
        )
        self.task_name = task_name
        self.target_file = target_file


class ProcessExecutionFailure(ExecutionError):
    """Raised when a shell command exits with a non-zero status."""

    def __init__(self, task_name: str, command: str, exit_code: int):
        super().__init__(f"Task '{task_name}' failed with exit code {exit_code}")
        self.task_name = task_name
        self.command = command
        self.exit_code = exit_code


class CyclicDependencyError(ExecutionError):
    """Raised when a task depends on itself, directly or indirectly."""

    def __init__(self, chain: list[str]):
        super().__init__(f"Dependency cycle detected: {' -> '.join(chain)}")
        self.chain = chain


class TaskOutcome(enum.Enum):
    """What happened when a task was asked to run."""

    COMPLETED = "completed"      # the body ran
    ALREADY_RAN = "already_ran"  # memoized, nothing executed
    UP_TO_DATE = "up_to_date"    # file target exists, nothing executed
    NO_PAYLOAD = "no_payload"    # group, only dependencies ran


@dataclass(frozen=True)
class TaskResult:
    """Result of Executor.run_task()."""

    task_name: str
    outcome: TaskOutcome
    value: Any = None
    target_file: Optional[str] = None

    @property
    def has_value(self) -> bool:
        return self.outcome is TaskOutcome.COMPLETED and self.value is not None

    @property
    def message(self) -> str:
        if self.outcome is TaskOutcome.UP_TO_DATE:
            return f"{self.target_file} is up to date"
        if self.outcome is TaskOutcome.ALREADY_RAN:
            return f"Task '{self.task_name}' has already run"
        if self.outcome is TaskOutcome.NO_PAYLOAD:
            return f"Task '{self.task_name}' has no body"
        return f"Task '{self.task_name}' completed"


class Executor:
    """Runs tasks from a registry, dependencies first.

    Each task body runs at most once per registry unless the run is forced,
    since the ran flag is kept on the Task itself.
    File tasks are skipped while their target exists. Shell commands run in
    ``working_dir`` and relative target paths are resolved against it; when it
    is None the process's current directory is used for both.
    """

    def __init__(
        self,
        registry: TaskRegistry,
        logger: Logger,
        process_runner: ProcessRunner,
        working_dir: Optional[Path] = None,
    ):
        """Initialize executor.

        Args:
            registry: Tasks to run
            logger: Logger for progress and diagnostics
            process_runner: Runs shell command bodies
            working_dir: Directory for shell commands and file targets
        """
        self.registry = registry
        self.logger = logger
        self.process_runner = process_runner
        self.working_dir = working_dir
        self._call_stack: list[str] = []

    def run_task(self, name: str, force: bool = False) -> TaskResult:
        """Run a task after its dependencies.

        Args:
            name: Task to run
            force: Run the body even if the task already ran or its file
                exists. Dependencies are never forced.

        Returns:
            TaskResult describing whether the body ran and what it returned

        Raises:
            UnknownTaskError: If the task or one of its dependencies is unknown
            CyclicDependencyError: If the task is reached again while it is
                still running its dependencies or its body
            InvalidPayloadError: If the task body has an unsupported type
            ProcessExecutionFailure: If a shell command exits non-zero
            FileTaskPostConditionError: If a file task did not create its file
        """
        task = self.registry.get(name)

        if name in self._call_stack:
            start = self._call_stack.index(name)
            raise CyclicDependencyError(self._call_stack[start:] + [name])

        self._call_stack.append(name)
        try:
            return self._run(task, force)
        finally:
            self._call_stack.pop()

    def _run(self, task: Task, force: bool) -> TaskResult:
        name = task.name
        for dep in task.deps:
            if dep not in self.registry:
                raise UnknownTaskError(f"No such task: {dep} (dependency of '{name}')")
            self.logger.trace(f"'{escape(name)}' depends on '{escape(dep)}'")
            self.run_task(dep)

        if not force:
            if task.ran:
                self.logger.debug(f"Skipping '{escape(name)}': already ran")
                return TaskResult(name, TaskOutcome.ALREADY_RAN)
            if task.is_file_task and self._target_exists(task):
                self.logger.debug(
                    f"Skipping '{escape(name)}': {escape(task.target_file)} exists"
                )
                return TaskResult(name, TaskOutcome.UP_TO_DATE, target_file=task.target_file)

        if task.payload is None:
            return TaskResult(name, TaskOutcome.NO_PAYLOAD)

        self.logger.info(f"Running: {escape(name)}")
        value = self._run_payload(task)

        if task.is_file_task and not self._target_exists(task):
            raise FileTaskPostConditionError(name, task.target_file)

        task.ran = True
        return TaskResult(name, TaskOutcome.COMPLETED, value=value, target_file=task.target_file)

    def _run_payload(self, task: Task) -> Any:
        match task.payload:
            case FunctionPayload(func=func):
                return func()
            case ShellPayload(command=command):
                exit_code = self.process_runner.run(command, cwd=self.working_dir)
                if exit_code != 0:
                    raise ProcessExecutionFailure(task.name, command, exit_code)
                return None
            case UnsupportedPayload(value=value):
                raise InvalidPayloadError(
                    f"Unknown task code: '{type(value).__name__}' for task '{task.name}'"
                )
            case _:
                raise InvalidPayloadError(
                    f"Unknown task code: '{type(task.payload).__name__}' for task '{task.name}'"
                )

    def _target_path(self, task: Task) -> Path:
        path = Path(task.target_file)
        if self.working_dir is not None and not path.is_absolute():
            return self.working_dir / path
        return path

    def _target_exists(self, task: Task) -> bool:
        path = self._target_path(task)
        self.logger.trace(f"Checking target {escape(str(path))}")
        return path.exists()
