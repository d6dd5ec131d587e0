"""
Error types raised by the relock pipeline.

Structural errors abort the whole run: a partially relocked lock file would
be worse than none. Circular references are not errors; see
`relock.core.types.CircularReference`.
"""

from .types import LockPath, format_path


class RelockError(Exception):
    """
    Base class for all relock failures.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingRequiredModuleError(RelockError):
    """
    A `requires` entry could not be resolved to any lock entry.

    Attributes:
        name: The required dependency name.
        path: Lock-path of the requiring entry.
    """

    def __init__(self, name: str, path: LockPath):
        self.name = name
        self.path = path
        where = format_path(path) or "<root>"
        super().__init__(f"required module '{name}' not found in dependencies (required from '{where}')")


class UnresolvablePathError(RelockError):
    """
    A lookup by path into a tree did not find the expected node.

    Attributes:
        path: The offending path.
        reason: What was being looked up.
    """

    def __init__(self, path: LockPath, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot resolve '{format_path(path)}': {reason}")


class LockfileFormatError(RelockError):
    """The input document is not shaped like a package lock file."""


class ConfigError(RelockError):
    """The relock configuration is invalid."""
