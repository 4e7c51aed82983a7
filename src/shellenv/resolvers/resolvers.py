"""
Dependency resolvers.

A resolver maps a dependency name to the ResolvedArtifact describing what it
contributes to an environment. Resolvers are callables; they signal absence
by raising ArtifactNotFound.
"""

import json
import logging
import pathlib
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from shellenv.environment_models import ResolvedArtifact
from shellenv.shellenv_exceptions import ArtifactNotFound, InvalidSpec
from shellenv.shellenv_logger import ShellEnvLogger

# Sub-directory of an install prefix -> search-path variable it feeds.
PREFIX_LAYOUT: Tuple[Tuple[str, str], ...] = (
    ("bin", "PATH"),
    ("lib", "LIBRARY_PATH"),
    ("include", "CPATH"),
    ("lib/pkgconfig", "PKG_CONFIG_PATH"),
    ("share/pkgconfig", "PKG_CONFIG_PATH"),
)


class DependencyResolver:
    """
    Base class for resolvers. Subclasses implement `resolve`.
    """

    def resolve(self, name: str) -> ResolvedArtifact:
        raise NotImplementedError

    def __call__(self, name: str) -> ResolvedArtifact:
        return self.resolve(name)


class StaticResolver(DependencyResolver):
    """
    Resolves names from a fixed table of artifacts.
    """

    def __init__(self, artifacts: Mapping[str, ResolvedArtifact]):
        self.artifacts = dict(artifacts)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StaticResolver":
        """
        Build the table from plain data:

        {
          "pkg-config": {"prefix": "...", "paths": {"PATH": ["..."]}},
          "dbus": {"paths": {...}, "variables": {...}}
        }

        Raises:
            InvalidSpec: if an entry is not a valid artifact description
        """
        if not isinstance(data, Mapping):
            raise InvalidSpec(
                f"Artifact table must be a mapping of name to artifact, got {type(data).__name__}"
            )

        artifacts = {}
        for name, entry in data.items():
            if not isinstance(entry, Mapping):
                raise InvalidSpec(f"Artifact entry for '{name}' must be a mapping", name=name)
            try:
                artifacts[name] = ResolvedArtifact(name=name, **entry)
            except (TypeError, ValueError) as e:
                raise InvalidSpec(f"Invalid artifact entry for '{name}': {e}", name=name) from e
        return cls(artifacts)

    @classmethod
    def from_json_file(cls, path: Union[str, pathlib.Path]) -> "StaticResolver":
        with open(path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidSpec(f"Artifact table {path} is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def resolve(self, name: str) -> ResolvedArtifact:
        try:
            return self.artifacts[name]
        except KeyError:
            raise ArtifactNotFound(name)


class PrefixResolver(DependencyResolver):
    """
    Resolves a name to the install prefix `<store>/<name>` under the first
    store root that has it, and contributes the conventional sub-directories
    of that prefix which exist (see PREFIX_LAYOUT).
    """

    def __init__(
        self,
        store_paths: Iterable[Union[str, pathlib.Path]],
        logger: Optional[ShellEnvLogger] = None,
    ):
        self.store_paths = [pathlib.Path(p) for p in store_paths]
        self.logger = logger

    def _find_prefix(self, name: str) -> Optional[pathlib.Path]:
        # A name must stay inside the store
        if pathlib.PurePath(name).name != name or name in (".", ".."):
            return None
        for store in self.store_paths:
            prefix = store / name
            if prefix.is_dir():
                return prefix
        return None

    def resolve(self, name: str) -> ResolvedArtifact:
        prefix = self._find_prefix(name)
        if prefix is None:
            raise ArtifactNotFound(
                name,
                f"No prefix for '{name}' in stores {[str(s) for s in self.store_paths]}",
            )

        paths: Dict[str, List[str]] = {}
        for sub_dir, variable in PREFIX_LAYOUT:
            candidate = prefix / sub_dir
            if candidate.is_dir():
                paths.setdefault(variable, []).append(str(candidate))

        if self.logger is not None:
            self.logger.log(f"Resolved {name} to prefix {prefix}", logging.DEBUG)

        return ResolvedArtifact(name=name, prefix=str(prefix), paths=paths)


class ChainResolver(DependencyResolver):
    """
    Tries each resolver in order; the first one that has the name wins.
    """

    def __init__(self, resolvers: Iterable[DependencyResolver]):
        self.resolvers = list(resolvers)

    def resolve(self, name: str) -> ResolvedArtifact:
        for resolver in self.resolvers:
            try:
                return resolver(name)
            except ArtifactNotFound:
                continue
        raise ArtifactNotFound(name)
