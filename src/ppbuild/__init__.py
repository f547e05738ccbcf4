"""ppbuild - a small build tool: named tasks, dependencies, run once."""

__version__ = "0.1.0"

from ppbuild.build_file import (
    BuildFileError,
    find_build_file,
    load_build_file,
    make_definition_namespace,
)
from ppbuild.executor import (
    CyclicDependencyError,
    ExecutionError,
    Executor,
    FileTaskPostConditionError,
    InvalidPayloadError,
    ProcessExecutionFailure,
    TaskOutcome,
    TaskResult,
)
from ppbuild.graph import build_dependency_tree
from ppbuild.registry import (
    DuplicateTaskError,
    FunctionPayload,
    ShellPayload,
    Task,
    TaskRegistry,
    UnknownTaskError,
    UnsupportedPayload,
    make_payload,
)

__all__ = [
    "__version__",
    "BuildFileError",
    "find_build_file",
    "load_build_file",
    "make_definition_namespace",
    "CyclicDependencyError",
    "ExecutionError",
    "Executor",
    "FileTaskPostConditionError",
    "InvalidPayloadError",
    "ProcessExecutionFailure",
    "TaskOutcome",
    "TaskResult",
    "build_dependency_tree",
    "DuplicateTaskError",
    "FunctionPayload",
    "ShellPayload",
    "Task",
    "TaskRegistry",
    "UnknownTaskError",
    "UnsupportedPayload",
    "make_payload",
]
