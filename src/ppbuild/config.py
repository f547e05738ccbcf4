"""
Configuration file handling.

Settings are read from up to three YAML files, later ones overriding earlier
ones: the machine-wide config, the user config, then the nearest
``.ppbuild-config.yml`` above the working directory. Command-line options
override all of them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import platformdirs
import yaml

from ppbuild.logging import LogLevel, parse_log_level
from ppbuild.process_runner import TaskOutputTypes

__all__ = [
    "PROJECT_CONFIG_NAME",
    "ConfigError",
    "Settings",
    "find_project_config",
    "get_machine_config_path",
    "get_user_config_path",
    "load_settings",
    "parse_config_file",
]

PROJECT_CONFIG_NAME = ".ppbuild-config.yml"


class ConfigError(Exception):
    """
    Raised when a configuration file is invalid.
    """

    pass


@dataclass(frozen=True)
class Settings:
    """Effective configuration."""

    build_file: Optional[str] = None
    log_level: LogLevel = LogLevel.INFO
    task_output: TaskOutputTypes = TaskOutputTypes.ALL


def get_machine_config_path() -> Path:
    """
    Path of the machine-level (system-wide) configuration file, which may not exist.
    """
    config_dir = Path(platformdirs.site_config_dir("ppbuild"))
    return config_dir / "config.yml"


def get_user_config_path() -> Path:
    """
    Path of the user-level configuration file, which may not exist.
    """
    config_dir = Path(platformdirs.user_config_dir("ppbuild"))
    return config_dir / "config.yml"


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find .ppbuild-config.yml.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to the project config if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        # resolve() fails on invalid paths and symlink loops
        return None

    while True:
        config_path = current / PROJECT_CONFIG_NAME
        try:
            if config_path.is_file():
                return config_path
        except OSError:
            # Unreadable directory, keep walking up
            pass

        parent = current.parent
        if parent == current:
            return None
        current = parent


def parse_config_file(path: Path) -> dict[str, Any]:
    """
    Parse one configuration file.

    Missing and empty files are valid and yield no settings.

    Args:
        path: Path to the configuration file

    Returns:
        Mapping of the settings the file defines, converted to their types

    Raises:
        ConfigError: If the file is unreadable, is not valid YAML, or holds
            unknown keys or invalid values

    Example file::

        build_file: tools/build.ppb
        log_level: debug
        task_output: err
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Error reading config file '{path}': {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in config file '{path}': {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Error in config file '{path}': top level must be a mapping")

    unknown = sorted(set(data) - {"build_file", "log_level", "task_output"})
    if unknown:
        raise ConfigError(
            f"Error in config file '{path}': unknown setting(s): {', '.join(unknown)}"
        )

    settings: dict[str, Any] = {}

    if "build_file" in data:
        build_file = data["build_file"]
        if not isinstance(build_file, str) or not build_file:
            raise ConfigError(
                f"Error in config file '{path}': Field 'build_file' must be a non-empty string"
            )
        settings["build_file"] = build_file

    if "log_level" in data:
        log_level = data["log_level"]
        if not isinstance(log_level, str):
            raise ConfigError(f"Error in config file '{path}': Field 'log_level' must be a string")
        try:
            settings["log_level"] = parse_log_level(log_level)
        except ValueError as e:
            raise ConfigError(f"Error in config file '{path}': {e}") from e

    if "task_output" in data:
        task_output = data["task_output"]
        if not isinstance(task_output, str):
            raise ConfigError(
                f"Error in config file '{path}': Field 'task_output' must be a string"
            )
        try:
            settings["task_output"] = TaskOutputTypes(task_output.lower())
        except ValueError:
            valid = ", ".join(t.value for t in TaskOutputTypes)
            raise ConfigError(
                f"Error in config file '{path}': Invalid task_output '{task_output}'. "
                f"Valid values: {valid}"
            ) from None

    return settings


def load_settings(start_dir: Optional[Path] = None) -> Settings:
    """
    Merge machine, user and project configuration.

    Args:
        start_dir: Directory the project config search starts from (defaults to cwd)

    Raises:
        ConfigError: If any of the files is invalid
    """
    if start_dir is None:
        start_dir = Path.cwd()

    paths = [get_machine_config_path(), get_user_config_path()]
    project_config = find_project_config(start_dir)
    if project_config is not None:
        paths.append(project_config)

    settings = Settings()
    for path in paths:
        values = parse_config_file(path)
        if values:
            settings = replace(settings, **values)
    return settings
