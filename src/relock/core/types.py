"""
Core type definitions for relock.

Canonical trees (RootNode / DependencyNode) are immutable pydantic models so a
subtree can be carried from the previous tree into the mixed tree without any
risk of the two trees diverging later. Placement trees are built incrementally
by the hoister and are plain mutable dataclasses.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

# A path of dependency names from the root, e.g. ("a", "c").
LockPath = Tuple[str, ...]

PATH_SEPARATOR = "|"


def format_path(path: LockPath) -> str:
    """Render a path the way lock-paths are written in logs and errors."""
    return PATH_SEPARATOR.join(path)


class TreeNode(BaseModel):
    """
    Fields shared by every node of a canonical dependency tree.

    `dependencies` has one child per entry in `requires`, in `requires`
    iteration order. `signature` is a pure function of `dependencies`.
    """
    name: str
    version: str | None = None
    requires: Dict[str, str] = Field(default_factory=dict)
    dependencies: Tuple["DependencyNode", ...] = ()
    signature: str

    model_config = ConfigDict(frozen=True)

    def child(self, name: str) -> "DependencyNode | None":
        """Return the direct dependency with the given name, if any."""
        for dependency in self.dependencies:
            if dependency.name == name:
                return dependency
        return None


class RootNode(TreeNode):
    """The synthetic project root. Its name is always empty."""
    kind: Literal["root"] = "root"
    name: Literal[""] = ""


class DependencyNode(TreeNode):
    """
    A resolved package required by its parent.

    A `circular` node re-enters a lock-path that was still being expanded: it
    keeps its `requires` but has no dependencies.
    """
    kind: Literal["dependency"] = "dependency"
    version: str
    range: str = ""
    circular: bool = False

    @property
    def variant(self) -> str:
        """Identity of this structurally distinct resolution."""
        return f"{self.name}|{self.version}|{self.signature}"


class CircularReference(BaseModel):
    """A lock-path that was re-entered while it was still being expanded."""
    lock_path: LockPath
    stack: List[LockPath] = Field(default_factory=list)

    def __str__(self) -> str:
        return f'Circular reference "{format_path(self.lock_path)}"'


class DecisionAction(StrEnum):
    """What the differ did with one required edge."""
    ADDED = "added"            # new requirement, current subtree adopted
    UPDATED = "updated"        # minor/major range change, current subtree adopted
    REEXAMINED = "reexamined"  # patch change or project module, children compared
    KEPT = "kept"              # unchanged range, previous subtree kept


class RelockDecision(BaseModel):
    """One per-edge decision taken while mixing the previous and current trees."""
    path: LockPath
    name: str
    action: DecisionAction
    previous_range: str | None = None
    current_range: str
    previous_version: str | None = None
    current_version: str | None = None

    @property
    def locked_version(self) -> str | None:
        """The version that ends up in the relocked tree for this edge."""
        if self.action == DecisionAction.KEPT:
            return self.previous_version
        return self.current_version

    @property
    def changed(self) -> bool:
        return self.locked_version != self.previous_version


@dataclass
class Module:
    """
    One distinct variant found while indexing the mixed tree.

    `depth` is the shallowest nesting level at which the variant occurs;
    `paths` holds every path (ending with the module's own name) that
    requires exactly this variant.
    """
    name: str
    version: str
    signature: str
    depth: int
    paths: List[LockPath] = field(default_factory=list)

    @property
    def variant(self) -> str:
        return f"{self.name}|{self.version}|{self.signature}"

    def sort_key(self) -> Tuple[int, int, str]:
        first = self.paths[0] + (self.name,)
        return (self.depth, -len(self.paths), format_path(first))


@dataclass
class PlacementNode:
    """A hoisted package; children are keyed by name, one variant per slot."""
    name: str
    version: str
    variant: str
    children: Dict[str, "PlacementNode"] = field(default_factory=dict)


@dataclass
class PlacementTree:
    """Root of the hoisted layout."""
    version: str | None = None
    children: Dict[str, PlacementNode] = field(default_factory=dict)


TreeNode.model_rebuild()
RootNode.model_rebuild()
DependencyNode.model_rebuild()
