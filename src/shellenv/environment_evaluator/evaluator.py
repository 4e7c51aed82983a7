"""
Environment descriptor evaluator.

Folds the artifacts of every dependency in an environment spec into a single
environment descriptor.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from shellenv.environment_models import (
    DependencyRef,
    DependencyRole,
    EnvironmentDescriptor,
    EnvironmentSpec,
    ResolvedArtifact,
)
from shellenv.shellenv_config import ShellEnvConfig
from shellenv.shellenv_exceptions import ArtifactNotFound, DependencyNotFound, InvalidSpec
from shellenv.shellenv_logger import ShellEnvLogger

Resolve = Callable[[DependencyRef], Optional[ResolvedArtifact]]
AsyncResolve = Callable[[DependencyRef], Awaitable[Optional[ResolvedArtifact]]]


class _EnvironmentFold:
    """
    Local accumulator for a single evaluation.
    """

    def __init__(self, logger: ShellEnvLogger, path_separator: str):
        self.logger = logger
        self.path_separator = path_separator
        self.paths: Dict[str, List[str]] = {}
        self.scalars: Dict[str, str] = {}
        # Variable names in first-seen order, path and scalar alike
        self.order: List[str] = []

    def _touch(self, variable: str) -> None:
        if variable not in self.order:
            self.order.append(variable)

    def add(self, artifact: ResolvedArtifact) -> None:
        for variable, entries in artifact.paths.items():
            if variable in self.scalars:
                self.logger.log(
                    f"{artifact.name} adds path entries to {variable}, "
                    f"already set as a plain value; ignoring them",
                    logging.WARNING,
                )
                continue
            for entry in entries:
                if not entry:
                    continue
                if self.path_separator in entry:
                    raise InvalidSpec(
                        f"{artifact.name} adds {entry!r} to {variable}, which contains "
                        f"the path separator {self.path_separator!r}",
                        name=artifact.name,
                    )
                self._touch(variable)
                current = self.paths.setdefault(variable, [])
                if entry not in current:
                    current.append(entry)

        for variable, value in artifact.variables.items():
            if variable in self.paths:
                self.logger.log(
                    f"{artifact.name} sets {variable}, already a search path; ignoring it",
                    logging.WARNING,
                )
                continue
            if variable in self.scalars:
                if self.scalars[variable] != value:
                    self.logger.log(
                        f"{artifact.name} sets {variable}={value!r}, "
                        f"keeping earlier value {self.scalars[variable]!r}",
                        logging.WARNING,
                    )
                continue
            self._touch(variable)
            self.scalars[variable] = value

    def descriptor(self) -> EnvironmentDescriptor:
        variables = {}
        for variable in self.order:
            if variable in self.paths:
                variables[variable] = self.path_separator.join(self.paths[variable])
            else:
                variables[variable] = self.scalars[variable]
        return EnvironmentDescriptor(
            variables=variables,
            path_variables=[v for v in self.order if v in self.paths],
            path_separator=self.path_separator,
        )


class EnvironmentEvaluator:
    """
    Evaluates environment specs against a dependency resolver.

    The evaluator holds no state between evaluations: the descriptor depends
    only on the environment spec and on what the resolver returns.
    """

    def __init__(
        self,
        config: Optional[ShellEnvConfig] = None,
        logger: Optional[ShellEnvLogger] = None,
    ):
        """
        Args:
            config: Configuration; defaults to ShellEnvConfig()
            logger: Logger; defaults to one that leaves the level of the
                `shellenv` logger untouched
        """
        self.config = config or ShellEnvConfig()
        self.logger = logger or ShellEnvLogger()

    def _coerce_spec(self, spec: Union[EnvironmentSpec, Mapping[str, Any]]) -> EnvironmentSpec:
        if isinstance(spec, EnvironmentSpec):
            return spec
        return EnvironmentSpec.from_dict(spec, self.logger)

    def _check_artifact(
        self,
        role: DependencyRole,
        name: DependencyRef,
        artifact: Optional[ResolvedArtifact],
        error: Optional[ArtifactNotFound] = None,
    ) -> ResolvedArtifact:
        if artifact is None:
            self.logger.log(
                f"Dependency {name} ({role.value}) not found, aborting evaluation",
                logging.ERROR,
            )
            raise DependencyNotFound(name=name, role=role.value) from error
        self.logger.log(f"Resolved {name} ({role.value})", logging.DEBUG)
        return artifact

    def _fold(
        self, spec: EnvironmentSpec, artifacts: List[ResolvedArtifact]
    ) -> EnvironmentDescriptor:
        fold = _EnvironmentFold(self.logger, self.config.path_separator)
        for artifact in artifacts:
            fold.add(artifact)
        descriptor = fold.descriptor()

        self.logger.log(
            f"Evaluated environment: {len(spec)} dependencies, "
            f"{len(descriptor.variables)} variables",
            logging.INFO,
        )
        return descriptor

    def evaluate(
        self,
        spec: Union[EnvironmentSpec, Mapping[str, Any]],
        resolve: Resolve,
    ) -> EnvironmentDescriptor:
        """
        Resolve every dependency of the environment spec and fold the results.

        Dependencies are resolved one at a time in fold order: roles by
        priority, then list order within a role. Path entries are appended
        to their variable and kept at their first position when repeated.

        Raises:
            InvalidSpec: if the environment spec is invalid; raised before any resolution
                or if an artifact adds a path entry containing the path separator
            DependencyNotFound: on the first dependency the resolver lacks
        """
        spec = self._coerce_spec(spec)

        artifacts = []
        for role, name in spec.iter_refs():
            error = None
            try:
                artifact = resolve(name)
            except ArtifactNotFound as e:
                artifact, error = None, e
            artifacts.append(self._check_artifact(role, name, artifact, error))

        return self._fold(spec, artifacts)

    async def evaluate_async(
        self,
        spec: Union[EnvironmentSpec, Mapping[str, Any]],
        resolve: AsyncResolve,
    ) -> EnvironmentDescriptor:
        """
        Like `evaluate`, but resolves all dependencies concurrently.

        Results are put back in fold order before folding, so the descriptor
        is the same as the synchronous one. If several dependencies are
        missing, the first in fold order is reported.
        """
        spec = self._coerce_spec(spec)
        refs: List[Tuple[DependencyRole, DependencyRef]] = list(spec.iter_refs())

        pending = []
        try:
            for _, name in refs:
                pending.append(resolve(name))
        except BaseException:
            for awaitable in pending:
                if asyncio.iscoroutine(awaitable):
                    awaitable.close()
            raise

        results = await asyncio.gather(*pending, return_exceptions=True)

        artifacts = []
        for (role, name), result in zip(refs, results):
            if isinstance(result, ArtifactNotFound):
                self._check_artifact(role, name, None, result)
            elif isinstance(result, BaseException):
                raise result
            artifacts.append(self._check_artifact(role, name, result))

        return self._fold(spec, artifacts)


def evaluate(
    spec: Union[EnvironmentSpec, Mapping[str, Any]],
    resolve: Resolve,
    config: Optional[ShellEnvConfig] = None,
    logger: Optional[ShellEnvLogger] = None,
) -> EnvironmentDescriptor:
    """
    Evaluate `spec` against `resolve` with a fresh EnvironmentEvaluator.
    """
    return EnvironmentEvaluator(config, logger).evaluate(spec, resolve)
