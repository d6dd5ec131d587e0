"""
Tree Builder - turn a nested lock file into a canonical dependency tree.

Resolution mirrors Node's module lookup: a requirement for `name` made by the
entry at lock-path P is satisfied by the nearest `prefix|name` lock-path,
searching from P itself up to the root. Each resolved lock-path is expanded
once and the result reused by every requirer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from .errors import LockfileFormatError, MissingRequiredModuleError
from .lockfile import LockDocument, LockEntry, VersionStore, parse_lock_document
from .signature import Dependencies, SubtreeIndex
from .types import CircularReference, DependencyNode, LockPath, RootNode, format_path

logger = logging.getLogger(__name__)


def collect_lock_paths(root: LockEntry) -> Dict[LockPath, LockEntry]:
    """Map every lock-path in a nested lock file to its entry. The root is ()."""
    entries: Dict[LockPath, LockEntry] = {(): root}
    pending: List[Tuple[LockPath, LockEntry]] = [((), root)]
    while pending:
        path, entry = pending.pop()
        for name, child in entry.dependencies.items():
            child_path = path + (name,)
            entries[child_path] = child
            pending.append((child_path, child))
    return entries


@dataclass
class BuildResult:
    """Output of one tree build."""
    tree: RootNode
    subtrees: SubtreeIndex
    lock_paths: Dict[LockPath, LockEntry]
    cycles: List[CircularReference] = field(default_factory=list)


class TreeBuilder:
    """
    Builds canonical dependency trees.

    The VersionStore is owned by the caller so that the previous and current
    builds of one relock run feed the same side table. Every other cache
    lives only for the duration of a single `build()` call.
    """

    def __init__(self, versions: VersionStore | None = None):
        self.versions = versions if versions is not None else VersionStore()

    def build(self, document: LockDocument | Mapping[str, Any]) -> BuildResult:
        """
        Build the canonical tree for a lock document.

        Raises:
            MissingRequiredModuleError: A requirement has no matching entry.
            LockfileFormatError: The document is malformed.
        """
        if not isinstance(document, LockDocument):
            document = parse_lock_document(document)
        return _TreeBuild(document, self.versions).run()


class _TreeBuild:
    """State of a single build invocation."""

    def __init__(self, root: LockDocument, versions: VersionStore):
        self.root = root
        self.versions = versions
        self.entries = collect_lock_paths(root)
        self.subtrees = SubtreeIndex()
        self.cycles: List[CircularReference] = []
        self._processed: Dict[LockPath, Tuple[str, Dependencies]] = {}
        self._expanding: List[LockPath] = []

    def run(self) -> BuildResult:
        signature, dependencies = self._expand(())
        tree = RootNode(
            version=self.root.version,
            requires=dict(self.root.requires),
            dependencies=dependencies,
            signature=signature,
        )
        logger.info(
            f"Built dependency tree: {len(self.entries) - 1} lock entries, "
            f"{len(self.subtrees)} distinct subtrees, {len(self.cycles)} circular references"
        )
        return BuildResult(
            tree=tree,
            subtrees=self.subtrees,
            lock_paths=self.entries,
            cycles=self.cycles,
        )

    def resolve(self, path: LockPath, name: str) -> LockPath:
        """Find the lock-path that satisfies `name` when required from `path`."""
        for depth in range(len(path), -1, -1):
            candidate = path[:depth] + (name,)
            if candidate in self.entries:
                return candidate
        raise MissingRequiredModuleError(name, path)

    def _expand(self, lock_path: LockPath) -> Tuple[str, Dependencies]:
        """Build the dependency list of the entry at `lock_path`."""
        if lock_path in self._expanding:
            cycle = CircularReference(lock_path=lock_path, stack=list(self._expanding))
            logger.warning(f"{cycle}, stack: {[format_path(p) for p in cycle.stack]}")
            self.cycles.append(cycle)
            return self.subtrees.intern(())

        memo = self._processed.get(lock_path)
        if memo is not None:
            return memo

        entry = self.entries[lock_path]
        self._expanding.append(lock_path)
        try:
            children = [
                self._dependency(lock_path, name, semver)
                for name, semver in entry.requires.items()
            ]
        finally:
            self._expanding.pop()

        result = self.subtrees.intern(children)
        self._processed[lock_path] = result
        return result

    def _dependency(self, parent: LockPath, name: str, semver: str) -> DependencyNode:
        lock_path = self.resolve(parent, name)
        entry = self.entries[lock_path]
        if not entry.version:
            raise LockfileFormatError(f"Lock entry '{format_path(lock_path)}' has no version")

        logger.debug(f"{format_path(parent) or '<root>'} -> {name}@{semver} resolved at {format_path(lock_path)}")
        self.versions.record(name, entry)

        circular = lock_path in self._expanding
        signature, dependencies = self._expand(lock_path)
        return DependencyNode(
            name=name,
            version=entry.version,
            range=semver,
            requires=dict(entry.requires),
            dependencies=dependencies,
            signature=signature,
            circular=circular,
        )
