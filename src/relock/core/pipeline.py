"""
Relock pipeline.

    previous lock --\
                     TreeBuilder -> RelockDiffer -> Hoister -> LockAssembler
    current lock  --/

Every cache used along the way is owned by one RelockSession and dropped with
it; nothing carries over between runs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping

from .assembler import LockAssembler
from .builder import TreeBuilder
from .differ import RelockDiffer
from .hoister import Hoister
from .lockfile import LockDocument, VersionStore, parse_lock_document
from .types import CircularReference, RelockDecision, RootNode, format_path

logger = logging.getLogger(__name__)


@dataclass
class RelockResult:
    """Final lock document plus what happened while producing it."""
    lock: Dict[str, Any]
    previous: RootNode
    current: RootNode
    mixed: RootNode
    decisions: List[RelockDecision] = field(default_factory=list)
    cycles: List[CircularReference] = field(default_factory=list)
    module_count: int = 0

    def summary(self) -> Dict[str, Any]:
        counts: Dict[str, int] = {}
        for decision in self.decisions:
            counts[decision.action.value] = counts.get(decision.action.value, 0) + 1
        return {
            "name": self.lock.get("name"),
            "version": self.lock.get("version"),
            "decisions": counts,
            "changed": [
                {
                    "path": format_path(d.path + (d.name,)),
                    "action": d.action.value,
                    "from": d.previous_version,
                    "to": d.locked_version,
                }
                for d in self.decisions
                if d.changed
            ],
            "circular_references": [format_path(c.lock_path) for c in self.cycles],
            "modules": self.module_count,
        }


class RelockSession:
    """
    State for exactly one relock run.

    The VersionStore is shared by both tree builds and the assembler: packages
    kept from the previous lock are only described by the previous document.
    """

    def __init__(self, is_project_module: Callable[[str], bool] | None = None):
        self.versions = VersionStore()
        self.builder = TreeBuilder(self.versions)
        self.differ = RelockDiffer(is_project_module)
        self.hoister = Hoister()
        self.assembler = LockAssembler(self.versions)

    def run(self, previous: Mapping[str, Any], current: Mapping[str, Any]) -> RelockResult:
        previous_doc = _as_document(previous)
        current_doc = _as_document(current)

        previous_build = self.builder.build(previous_doc)
        current_build = self.builder.build(current_doc)

        diff = self.differ.diff(previous_build.tree, current_build.tree)
        hoisted = self.hoister.hoist(diff.tree)
        lock = self.assembler.assemble(hoisted.tree, current_doc.name, current_doc.version)

        return RelockResult(
            lock=lock,
            previous=previous_build.tree,
            current=current_build.tree,
            mixed=diff.tree,
            decisions=diff.decisions,
            cycles=previous_build.cycles + current_build.cycles,
            module_count=len(hoisted.modules),
        )


def _as_document(document: Mapping[str, Any] | LockDocument) -> LockDocument:
    if isinstance(document, LockDocument):
        return document
    return parse_lock_document(document)


def relock(
    previous: Mapping[str, Any],
    current: Mapping[str, Any],
    is_project_module: Callable[[str], bool] | None = None,
) -> RelockResult:
    """
    Recompute the current lock so that only requirements that actually moved
    change their resolution.

    Raises:
        MissingRequiredModuleError: A lock file cannot satisfy its own requires.
        UnresolvablePathError: The trees cannot be combined or placed.
        LockfileFormatError: An input document is malformed.
    """
    return RelockSession(is_project_module).run(previous, current)
