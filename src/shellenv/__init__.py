"""
This module exports the public API of shellenv: environment specs, resolvers
and the evaluator that turns them into an environment descriptor.
"""

from shellenv.environment_evaluator import EnvironmentEvaluator, evaluate
from shellenv.environment_models import (
    DependencyRole,
    EnvironmentDescriptor,
    EnvironmentSpec,
    ResolvedArtifact,
    load_default_environment,
)
from shellenv.resolvers import ChainResolver, PrefixResolver, StaticResolver
from shellenv.shellenv_config import ShellEnvConfig, load_config
from shellenv.shellenv_exceptions import (
    ArtifactNotFound,
    DependencyNotFound,
    InvalidSpec,
    ShellEnvException,
)
from shellenv.shellenv_logger import ShellEnvLogger

__all__ = [
    "ArtifactNotFound",
    "ChainResolver",
    "DependencyNotFound",
    "DependencyRole",
    "EnvironmentDescriptor",
    "EnvironmentEvaluator",
    "EnvironmentSpec",
    "InvalidSpec",
    "PrefixResolver",
    "ResolvedArtifact",
    "ShellEnvConfig",
    "ShellEnvException",
    "ShellEnvLogger",
    "StaticResolver",
    "evaluate",
    "load_config",
    "load_default_environment",
]
