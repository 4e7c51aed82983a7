"""
Pydantic data models for declarative environment specs.

An environment spec maps each dependency role to the ordered list of
dependency names consumed in that role:

{
  "native-build-tool": ["pkg-config"],
  "linkable-library": ["systemd", "dbus"]
}
"""

import json
import logging
import pathlib
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, model_validator

from shellenv.shellenv_exceptions import InvalidSpec
from shellenv.shellenv_logger import ShellEnvLogger

DEFAULT_ENVIRONMENT_FILE = pathlib.Path(__file__).parent / "default_environment.json"


class DependencyRole(str, Enum):
    """
    How a dependency is consumed. Declaration order is the fold priority:
    build-time tools come before libraries.
    """

    NATIVE_BUILD_TOOL = "native-build-tool"
    LINKABLE_LIBRARY = "linkable-library"

    @classmethod
    def from_str(cls, value: Any) -> "DependencyRole":
        if isinstance(value, DependencyRole):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidSpec(f"Unknown dependency role: {value!r}", role=str(value))


DependencyRef = str


def _normalize_roles(
    data: Any,
) -> Tuple[Dict[DependencyRole, List[DependencyRef]], List[Tuple[DependencyRole, DependencyRef]]]:
    """
    Validate raw role data and return (roles in fold order, dropped duplicates).

    Raises:
        InvalidSpec: on unknown roles, non-list values or empty names
    """
    if not isinstance(data, Mapping):
        raise InvalidSpec(
            f"Environment spec must be a mapping of role to names, got {type(data).__name__}"
        )

    given: Dict[DependencyRole, Any] = {}
    for raw_role, names in data.items():
        role = DependencyRole.from_str(raw_role)
        if role in given:
            raise InvalidSpec(f"Role '{role.value}' given more than once", role=role.value)
        if isinstance(names, (str, bytes)) or not isinstance(names, (list, tuple)):
            raise InvalidSpec(
                f"Dependencies for role '{role.value}' must be a list of names",
                role=role.value,
            )
        given[role] = names

    roles: Dict[DependencyRole, List[DependencyRef]] = {}
    duplicates: List[Tuple[DependencyRole, DependencyRef]] = []
    for role in DependencyRole:
        if role not in given:
            continue
        seen = []
        for name in given[role]:
            if not isinstance(name, str) or not name.strip():
                raise InvalidSpec(
                    f"Invalid dependency name {name!r} for role '{role.value}'",
                    role=role.value,
                    name=name if isinstance(name, str) else None,
                )
            if name in seen:
                duplicates.append((role, name))
                continue
            seen.append(name)
        roles[role] = seen

    return roles, duplicates


class EnvironmentSpec(BaseModel):
    """
    Declarative environment: dependency role -> ordered dependency names.

    Duplicates across roles are kept. Duplicates within a role keep their
    first occurrence only.
    """

    model_config = ConfigDict(frozen=True)

    roles: Dict[DependencyRole, List[DependencyRef]] = {}

    @model_validator(mode="before")
    @classmethod
    def validate_roles(cls, values: Any) -> Any:
        if isinstance(values, Mapping) and "roles" in values:
            roles, _ = _normalize_roles(values["roles"])
            return {**values, "roles": roles}
        return values

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], logger: Optional[ShellEnvLogger] = None
    ) -> "EnvironmentSpec":
        """
        Build a spec from plain data keyed by role name.

        Raises:
            InvalidSpec: if the data does not describe a valid spec
        """
        roles, duplicates = _normalize_roles(data)
        if logger is not None:
            for role, name in duplicates:
                logger.log(
                    f"Dropping duplicate dependency '{name}' in role '{role.value}'",
                    logging.WARNING,
                )
        return cls(roles=roles)

    @classmethod
    def from_json_file(
        cls, path: Union[str, pathlib.Path], logger: Optional[ShellEnvLogger] = None
    ) -> "EnvironmentSpec":
        with open(path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidSpec(f"Environment spec {path} is not valid JSON: {e}") from e
        return cls.from_dict(data, logger)

    def get(self, role: Union[DependencyRole, str]) -> List[DependencyRef]:
        return list(self.roles.get(DependencyRole.from_str(role), []))

    def iter_refs(self) -> Iterator[Tuple[DependencyRole, DependencyRef]]:
        """Yield (role, name) in fold order: role priority, then list order."""
        for role in DependencyRole:
            for name in self.roles.get(role, []):
                yield role, name

    def to_dict(self) -> Dict[str, List[str]]:
        return {role.value: list(names) for role, names in self.roles.items()}

    def __len__(self) -> int:
        return sum(len(names) for names in self.roles.values())


def load_default_environment(logger: Optional[ShellEnvLogger] = None) -> EnvironmentSpec:
    """
    Load the environment shipped with the package: pkg-config as a build
    tool, systemd and dbus as libraries.
    """
    return EnvironmentSpec.from_json_file(DEFAULT_ENVIRONMENT_FILE, logger)
