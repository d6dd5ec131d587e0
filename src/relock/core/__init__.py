"""
Core modules for relock.

This package contains the relock pipeline:
- types: Canonical tree, placement and decision models
- signature: Subtree content hashing
- builder: Lock file -> canonical dependency tree
- differ: Previous + current tree -> mixed tree
- hoister: Mixed tree -> placement tree
- assembler: Placement tree -> lock document
"""

from .assembler import LockAssembler
from .builder import BuildResult, TreeBuilder
from .differ import DiffResult, RelockDiffer, is_patch_change
from .errors import (
    ConfigError,
    LockfileFormatError,
    MissingRequiredModuleError,
    RelockError,
    UnresolvablePathError,
)
from .hoister import Hoister, HoistResult
from .lockfile import LockDocument, LockEntry, VersionStore, bootstrap_snapshot
from .pipeline import RelockResult, RelockSession, relock
from .signature import SubtreeIndex, tree_signature
from .types import (
    CircularReference,
    DecisionAction,
    DependencyNode,
    Module,
    PlacementNode,
    PlacementTree,
    RelockDecision,
    RootNode,
)

__all__ = [
    # Types
    "RootNode", "DependencyNode", "Module", "PlacementNode", "PlacementTree",
    "CircularReference", "DecisionAction", "RelockDecision",
    # Pipeline
    "TreeBuilder", "BuildResult", "RelockDiffer", "DiffResult", "is_patch_change",
    "Hoister", "HoistResult", "LockAssembler", "RelockSession", "RelockResult", "relock",
    # Lock documents
    "LockDocument", "LockEntry", "VersionStore", "bootstrap_snapshot",
    "SubtreeIndex", "tree_signature",
    # Errors
    "RelockError", "MissingRequiredModuleError", "UnresolvablePathError",
    "LockfileFormatError", "ConfigError",
]
