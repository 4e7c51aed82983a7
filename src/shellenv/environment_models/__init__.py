"""
Environment models.

This package provides Pydantic data models for declarative environment
specs, the artifacts a resolver produces for each dependency, and the merged
environment descriptor.
"""

from .environment_spec import (
    DEFAULT_ENVIRONMENT_FILE,
    DependencyRef,
    DependencyRole,
    EnvironmentSpec,
    load_default_environment,
)
from .environment_descriptor import (
    EnvironmentDescriptor,
    ResolvedArtifact,
)

__all__ = [
    # Spec
    "DEFAULT_ENVIRONMENT_FILE",
    "DependencyRef",
    "DependencyRole",
    "EnvironmentSpec",
    "load_default_environment",
    # Output
    "EnvironmentDescriptor",
    "ResolvedArtifact",
]
