"""
Pydantic data models for resolved artifacts and the merged environment
descriptor handed to a shell launcher.
"""

import os
import re
import shlex
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Names a POSIX shell accepts in `export NAME=...`
VARIABLE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def check_variable_names(values: Dict[str, object]) -> Dict[str, object]:
    for variable in values:
        if not VARIABLE_NAME_PATTERN.fullmatch(variable):
            raise ValueError(f"Invalid environment variable name: {variable!r}")
    return values


class ResolvedArtifact(BaseModel):
    """
    The contribution of one resolved dependency.

    `paths` maps a search-path variable (PATH, PKG_CONFIG_PATH, ...) to the
    entries this artifact adds to it. `variables` holds plain scalar values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Dependency name this artifact was resolved from")
    prefix: Optional[str] = Field(None, description="Install prefix, if the resolver has one")
    paths: Dict[str, List[str]] = Field(default_factory=dict)
    variables: Dict[str, str] = Field(default_factory=dict)

    @field_validator("paths", "variables")
    @classmethod
    def validate_variable_names(cls, values: Dict[str, object]) -> Dict[str, object]:
        return check_variable_names(values)


class EnvironmentDescriptor(BaseModel):
    """
    Final environment: variable name -> value, in first-seen order.

    Variables listed in `path_variables` hold entries joined with
    `path_separator`.
    """

    model_config = ConfigDict(frozen=True)

    variables: Dict[str, str] = Field(default_factory=dict)
    path_variables: List[str] = Field(default_factory=list)
    path_separator: str = os.pathsep

    @field_validator("variables")
    @classmethod
    def validate_variable_names(cls, values: Dict[str, str]) -> Dict[str, str]:
        return check_variable_names(values)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(name, default)

    def search_path(self, name: str) -> List[str]:
        """Entries of a path variable, empty if it is not set."""
        value = self.variables.get(name)
        if not value:
            return []
        return value.split(self.path_separator)

    def to_environ(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Overlay the descriptor on a base environment.

        Path variables keep the descriptor's entries first, followed by the
        base entries not already present. Scalar variables replace the base.
        """
        environ = dict(base or {})
        for name, value in self.variables.items():
            if name in self.path_variables and environ.get(name):
                entries = self.search_path(name)
                for entry in environ[name].split(self.path_separator):
                    if entry and entry not in entries:
                        entries.append(entry)
                environ[name] = self.path_separator.join(entries)
            else:
                environ[name] = value
        return environ

    def to_shell_exports(self) -> str:
        """Render POSIX shell `export` lines, one per variable."""
        return "\n".join(
            f"export {name}={shlex.quote(value)}" for name, value in self.variables.items()
        )
