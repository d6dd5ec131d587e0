"""
Hoister - flatten the mixed tree into a minimal nested placement.

Every distinct variant (name, version, signature) becomes one Module. Modules
are placed shallowest first; for each path that requires a module the walk
starts at the root and inserts the variant into the first free slot,
descending one path segment whenever the slot holds a different variant.
Occupied slots are never overwritten.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Deque, Dict, List, Tuple

from .errors import UnresolvablePathError
from .types import (
    LockPath,
    Module,
    PlacementNode,
    PlacementTree,
    RootNode,
    TreeNode,
    format_path,
)

logger = logging.getLogger(__name__)


class Placement(StrEnum):
    PLACED = "placed"
    PRESENT = "present"
    DEFERRED = "deferred"


@dataclass
class ModuleIndex:
    """Distinct variants in discovery order, and the variant found at each path."""
    modules: List[Module] = field(default_factory=list)
    variants: Dict[LockPath, str] = field(default_factory=dict)


def index_modules(tree: TreeNode) -> ModuleIndex:
    """Collect one Module per distinct variant with every path requiring it."""
    index = ModuleIndex()
    by_variant: Dict[str, Module] = {}

    def visit(node: TreeNode, path: LockPath) -> None:
        for dependency in node.dependencies:
            dep_path = path + (dependency.name,)
            module = by_variant.get(dependency.variant)
            if module is None:
                module = Module(
                    name=dependency.name,
                    version=dependency.version,
                    signature=dependency.signature,
                    depth=len(path),
                )
                by_variant[dependency.variant] = module
                index.modules.append(module)

            module.depth = min(module.depth, len(path))
            module.paths.append(dep_path)
            index.variants[dep_path] = dependency.variant
            visit(dependency, dep_path)

    visit(tree, ())
    return index


def sort_modules(modules: List[Module]) -> List[Module]:
    """
    Placement order: shallowest first, then most used, then by first path.

    The final key makes the order total and independent of traversal order.
    """
    return sorted(modules, key=Module.sort_key)


@dataclass
class HoistResult:
    tree: PlacementTree
    modules: List[Module] = field(default_factory=list)
    deferred: int = 0


class Hoister:
    """Computes the deduplicated placement tree for a mixed dependency tree."""

    def hoist(self, tree: RootNode) -> HoistResult:
        """
        Raises:
            UnresolvablePathError: A variant cannot be placed without
                overwriting a different variant.
        """
        index = index_modules(tree)
        modules = sort_modules(index.modules)
        placement = PlacementTree(version=tree.version)

        deferred: Deque[Tuple[Module, LockPath]] = deque()
        for module in modules:
            for path in module.paths:
                if self._place(placement, index, module, path) is Placement.DEFERRED:
                    deferred.append((module, path))

        retried = len(deferred)
        while deferred:
            progress = False
            for _ in range(len(deferred)):
                module, path = deferred.popleft()
                if self._place(placement, index, module, path) is Placement.DEFERRED:
                    deferred.append((module, path))
                else:
                    progress = True
            if not progress:
                _, path = deferred[0]
                raise UnresolvablePathError(path, "requiring package was never placed")

        logger.info(f"Hoisted {len(modules)} modules ({retried} deferred placements)")
        return HoistResult(tree=placement, modules=modules, deferred=retried)

    def _place(
        self,
        placement: PlacementTree,
        index: ModuleIndex,
        module: Module,
        path: LockPath,
    ) -> Placement:
        """
        Walk `path` from the root and put `module` into the first free slot.

        A free slot that the package at this level requires directly with a
        different variant is reserved for that variant and counts as a
        conflict. Each conflict consumes one segment of the path, so the walk
        ends within len(path) steps.
        """
        name = module.name
        trail: List[Dict[str, PlacementNode]] = [placement.children]
        slots = placement.children

        for depth in range(len(path)):
            occupant = slots.get(name)
            reserved = index.variants.get(path[:depth] + (name,), module.variant)
            if occupant is None and reserved == module.variant:
                slots[name] = PlacementNode(name=name, version=module.version, variant=module.variant)
                return Placement.PLACED
            if occupant is not None and occupant.variant == module.variant:
                return Placement.PRESENT

            if depth == len(path) - 1:
                held = f"{occupant.name}@{occupant.version}" if occupant else reserved
                raise UnresolvablePathError(path, f"slot already holds {held}")

            logger.debug(f"{module.variant} conflicts on {format_path(path)} at depth {depth}")
            consumer = self._find_consumer(trail, path[depth], index.variants[path[:depth + 1]])
            if consumer is None:
                return Placement.DEFERRED
            slots = consumer.children
            trail.append(slots)

        raise UnresolvablePathError(path, "empty path")

    @staticmethod
    def _find_consumer(
        trail: List[Dict[str, PlacementNode]],
        name: str,
        variant: str,
    ) -> PlacementNode | None:
        """The placed requiring package nearest to the current position."""
        for slots in reversed(trail):
            found = slots.get(name)
            if found is not None and found.variant == variant:
                return found
        return None
