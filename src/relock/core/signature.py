"""
Signature Engine.

The same package version does not necessarily have the same set of
dependencies, depending on how it has been locked. A signature identifies one
specific dependency subtree: it is the SHA-256 of a canonical JSON encoding of
the ordered dependency list, where each child contributes its name, version
and (recursively) its own signature.
"""

import hashlib
import json
from typing import Dict, Iterable, Sequence, Tuple

from .types import DependencyNode

Dependencies = Tuple[DependencyNode, ...]


def canonical_form(dependencies: Iterable[DependencyNode]) -> str:
    """Order-preserving, whitespace-free serialization of a dependency list."""
    payload = [[dep.name, dep.version, dep.signature] for dep in dependencies]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def tree_signature(dependencies: Sequence[DependencyNode]) -> str:
    """Content hash of a dependency list."""
    return hashlib.sha256(canonical_form(dependencies).encode("utf-8")).hexdigest()


def short_signature(signature: str, length: int = 8) -> str:
    return signature[:length]


class SubtreeIndex:
    """
    Signature -> dependency list index for one tree build.

    Identical subtrees found at different lock-paths are interned so every
    requirer references the same tuple.
    """

    def __init__(self):
        self._trees: Dict[str, Dependencies] = {}

    def intern(self, dependencies: Sequence[DependencyNode]) -> Tuple[str, Dependencies]:
        """Return the signature and the canonical instance of `dependencies`."""
        signature = tree_signature(dependencies)
        existing = self._trees.get(signature)
        if existing is None:
            existing = tuple(dependencies)
            self._trees[signature] = existing
        return signature, existing

    def __len__(self) -> int:
        return len(self._trees)
