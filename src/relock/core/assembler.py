"""
Lock Assembler - render a placement tree as a lock file document.
"""

from typing import Any, Dict

from .errors import UnresolvablePathError
from .lockfile import LOCKFILE_VERSION, VersionStore
from .types import LockPath, PlacementNode, PlacementTree


class LockAssembler:
    """
    Rebuilds lock file entries from the VersionStore.

    Children are emitted sorted by name at every level so identical input
    gives byte-identical output.
    """

    def __init__(self, versions: VersionStore):
        self.versions = versions

    def assemble(self, placement: PlacementTree, name: str, version: str | None) -> Dict[str, Any]:
        return {
            "name": name,
            "version": version,
            "lockfileVersion": LOCKFILE_VERSION,
            "requires": True,
            "dependencies": self._entries(placement.children, ()),
        }

    def _entries(self, children: Dict[str, PlacementNode], path: LockPath) -> Dict[str, Any]:
        entries: Dict[str, Any] = {}
        for key in sorted(children):
            node = children[key]
            node_path = path + (key,)
            entry = self.versions.get(node.name, node.version)
            if entry is None:
                raise UnresolvablePathError(node_path, f"no recorded metadata for {node.name}@{node.version}")
            nested = self._entries(node.children, node_path)
            if nested:
                entry["dependencies"] = nested
            entries[node.name] = entry
        return entries
