"""
Configuration parameters for shellenv.
"""

import logging
import os
import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from shellenv.environment_models import EnvironmentSpec
from shellenv.shellenv_exceptions import InvalidSpec
from shellenv.shellenv_logger import ShellEnvLogger

CONFIG_FILE_NAME = "shellenv.toml"

CONFIG_TOML_SCHEMA = """
# shellenv configuration

[shellenv]
# Separator used to join search-path entries (defaults to os.pathsep)
# path_separator = ":"

# Log level for the shellenv logger
# log_level = "INFO"

# Store roots searched by the prefix resolver, in order
store_paths = ["/opt/store"]

# Dependencies of the environment, by role
[environment]
native-build-tool = ["pkg-config"]
linkable-library = ["systemd", "dbus"]
"""


@dataclass
class ShellEnvConfig:
    """
    Configuration parameters
    """

    path_separator: str = os.pathsep
    log_level: int = logging.INFO
    store_paths: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, env: Dict[str, Any]) -> "ShellEnvConfig":
        """
        Create a ShellEnvConfig instance from a dictionary

        Raises:
            InvalidSpec: If a value has the wrong type
        """
        path_separator = env.get("path_separator", os.pathsep)
        if not isinstance(path_separator, str) or not path_separator:
            raise InvalidSpec(f"'path_separator' must be a non-empty string, got {path_separator!r}")

        log_level = env.get("log_level", logging.INFO)
        if isinstance(log_level, str):
            level_value = logging.getLevelName(log_level.upper())
            if not isinstance(level_value, int):
                raise InvalidSpec(f"Unknown log level: {log_level}")
            log_level = level_value
        elif not isinstance(log_level, int):
            raise InvalidSpec(f"'log_level' must be a level name or number, got {log_level!r}")

        store_paths = env.get("store_paths", [])
        if not isinstance(store_paths, list) or not all(isinstance(p, str) for p in store_paths):
            raise InvalidSpec("'store_paths' must be a list of paths")

        return cls(
            path_separator=path_separator,
            log_level=log_level,
            store_paths=store_paths,
        )

    def create_logger(self) -> ShellEnvLogger:
        return ShellEnvLogger(self.log_level)


def load_config(
    path: Union[str, pathlib.Path],
    logger: Optional[ShellEnvLogger] = None,
) -> Tuple[ShellEnvConfig, Optional[EnvironmentSpec]]:
    """
    Load a shellenv.toml file.

    Args:
        path: Path to the TOML file, or a directory containing shellenv.toml

    Returns:
        Tuple of (config, environment spec or None if the file has no
        [environment] table)

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidSpec: If the file is not valid TOML or holds invalid values
    """
    path = pathlib.Path(path)
    if path.is_dir():
        path = path / CONFIG_FILE_NAME

    with open(path, "rb") as f:
        try:
            toml_dict = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise InvalidSpec(f"Failed to parse {path}: {e}") from e

    settings = toml_dict.get("shellenv", {})
    if not isinstance(settings, dict):
        raise InvalidSpec(f"[shellenv] in {path} must be a table")
    config = ShellEnvConfig.from_dict(settings)

    spec = None
    if "environment" in toml_dict:
        spec = EnvironmentSpec.from_dict(toml_dict["environment"], logger)

    if logger is not None:
        logger.log(
            f"Loaded shellenv configuration from {path} "
            f"({len(spec) if spec is not None else 0} dependencies)",
            logging.INFO,
        )

    return config, spec
