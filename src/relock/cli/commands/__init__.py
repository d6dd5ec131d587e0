"""CLI command implementations."""

from . import bootstrap, run, tree

__all__ = ["bootstrap", "run", "tree"]
