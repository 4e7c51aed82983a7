"""
This module contains the exceptions raised by the shellenv package.
"""

from typing import Optional


class ShellEnvException(Exception):
    """
    Base class for all exceptions raised by shellenv.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidSpec(ShellEnvException):
    """
    Raised when an environment spec or config is malformed: unknown role,
    empty dependency name, wrong value types.
    """

    def __init__(
        self,
        message: str,
        role: Optional[str] = None,
        name: Optional[str] = None,
    ):
        super().__init__(message)
        self.role = role
        self.name = name


class ArtifactNotFound(ShellEnvException):
    """
    Raised by a resolver when it has no artifact for the requested name.
    """

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"No artifact found for dependency '{name}'")
        self.name = name


class DependencyNotFound(ShellEnvException):
    """
    Raised by the evaluator when a dependency of an environment spec could not be resolved.
    """

    def __init__(self, name: str, role: str):
        super().__init__(f"Dependency '{name}' ({role}) could not be resolved")
        self.name = name
        self.role = role
