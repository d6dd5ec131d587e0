"""
Relock Differ - mix the previous and current canonical trees.

Walks the current tree from the root and decides, per required edge, whether
the previous or the current resolution wins:

1. New requirement                      -> current subtree
2. Range changed above patch level      -> current subtree
3. Patch-level change or project module -> compare the children one level down
4. Unchanged range                      -> previous subtree, verbatim

Nodes reached through rule 3 (and the root) take the current node's own
metadata with their dependency list rebuilt from these decisions, so any
subtree in the output is either wholly previous or wholly current below the
point where it was decided. Leaves cut at a circular reference are never
compared below; the current one is taken as-is.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Tuple, TypeVar

from .errors import UnresolvablePathError
from .signature import tree_signature
from .types import (
    DecisionAction,
    DependencyNode,
    LockPath,
    RelockDecision,
    RootNode,
    TreeNode,
    format_path,
)

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=TreeNode)


def clean_semver(semver: str) -> str:
    """Strip the leading `~` / `^` qualifier from a range."""
    return semver.strip().lstrip("~^")


def major_minor(semver: str) -> Tuple[str, str]:
    parts = clean_semver(semver).split(".")
    return parts[0], parts[1] if len(parts) > 1 else ""


def is_patch_change(previous: str, current: str) -> bool:
    """True when both ranges share the same major and minor components."""
    return major_minor(previous) == major_minor(current)


def _root_only(name: str) -> bool:
    return name == ""


@dataclass
class DiffResult:
    """The mixed tree plus the decision taken for every examined edge."""
    tree: RootNode
    decisions: List[RelockDecision] = field(default_factory=list)

    def count(self, action: DecisionAction) -> int:
        return sum(1 for decision in self.decisions if decision.action == action)

    def summary(self) -> dict:
        return {action.value: self.count(action) for action in DecisionAction}


class RelockDiffer:
    """
    Combines a previous and a current canonical tree.

    Args:
        is_project_module: Predicate for names that are always re-examined
            (local or path based packages that change without a version bump).
    """

    def __init__(self, is_project_module: Callable[[str], bool] | None = None):
        self.is_project_module = is_project_module or _root_only

    def diff(self, previous: RootNode, current: RootNode) -> DiffResult:
        decisions: List[RelockDecision] = []
        tree = self._mix(previous, current, (), decisions)
        result = DiffResult(tree=tree, decisions=decisions)
        logger.info(f"Relocked tree: {result.summary()}")
        return result

    def _mix(self, previous: N, current: N, path: LockPath, decisions: List[RelockDecision]) -> N:
        children: List[DependencyNode] = []

        for name, current_range in current.requires.items():
            current_child = self._child(current, name, path, "current")
            previous_range = previous.requires.get(name)
            previous_child = None

            if previous_range is None:
                action = DecisionAction.ADDED
                chosen = current_child
            elif not is_patch_change(previous_range, current_range):
                action = DecisionAction.UPDATED
                previous_child = previous.child(name)
                chosen = current_child
            elif previous_range != current_range or self.is_project_module(name):
                action = DecisionAction.REEXAMINED
                previous_child = self._child(previous, name, path, "previous")
                if previous_child.circular or current_child.circular:
                    # cut at a circular reference, nothing below to compare
                    chosen = current_child
                else:
                    chosen = self._mix(previous_child, current_child, path + (name,), decisions)
            else:
                action = DecisionAction.KEPT
                previous_child = self._child(previous, name, path, "previous")
                chosen = previous_child

            logger.debug(f"{format_path(path + (name,))}: {action.value} ({previous_range} -> {current_range})")
            decisions.append(RelockDecision(
                path=path,
                name=name,
                action=action,
                previous_range=previous_range,
                current_range=current_range,
                previous_version=previous_child.version if previous_child else None,
                current_version=current_child.version,
            ))
            children.append(chosen)

        return current.model_copy(update={
            "dependencies": tuple(children),
            "signature": tree_signature(children),
        })

    @staticmethod
    def _child(node: TreeNode, name: str, path: LockPath, side: str) -> DependencyNode:
        child = node.child(name)
        if child is None:
            raise UnresolvablePathError(path + (name,), f"not present in the {side} tree")
        return child
