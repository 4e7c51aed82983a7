"""
Dependency resolvers.

The evaluator only needs a callable `resolve(name) -> ResolvedArtifact`.
This package provides resolvers backed by:
1. A static table of artifacts (in code or JSON)
2. Install prefixes under one or more store directories
3. A chain of other resolvers
"""

from .resolvers import (
    PREFIX_LAYOUT,
    ChainResolver,
    DependencyResolver,
    PrefixResolver,
    StaticResolver,
)

__all__ = [
    "PREFIX_LAYOUT",
    "ChainResolver",
    "DependencyResolver",
    "PrefixResolver",
    "StaticResolver",
]
