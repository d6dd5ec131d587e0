"""
Lock document model and I/O.

Input documents are npm v1 style package lock files: a root with `name`,
`version`, a `requires` mapping synthesized from the manifest, and a nested
`dependencies` mapping where every entry may carry its own `requires` and
nested (locally overridden) `dependencies`.

All metadata other than `version`, `requires` and `dependencies` is kept as
pydantic extra fields, so `resolved`, `integrity`, `dev` and friends survive
the round trip untouched.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator, model_validator

from .errors import LockfileFormatError

logger = logging.getLogger(__name__)

LOCKFILE_VERSION = 1


class LockEntry(BaseModel):
    """One entry of a nested lock file."""
    version: str | None = None
    requires: Dict[str, str] = Field(default_factory=dict)
    dependencies: Dict[str, LockEntry] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    _key_order: List[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def _remember_key_order(cls, data: Any, handler) -> Any:
        entry = handler(data)
        if isinstance(data, Mapping):
            entry._key_order = [key for key in data if key != "dependencies"]
        return entry

    @field_validator("requires", mode="before")
    @classmethod
    def _requires_flag(cls, value: Any) -> Any:
        # npm writes `"requires": true` on the root of a v1 lock file
        if value is None or isinstance(value, bool):
            return {}
        return value

    @field_validator("dependencies", mode="before")
    @classmethod
    def _no_dependencies(cls, value: Any) -> Any:
        return {} if value is None else value

    def metadata(self) -> Dict[str, Any]:
        """Everything recorded for this entry except its dependency list."""
        data = self.model_dump(exclude={"dependencies"})
        for name in ("version", "requires"):
            if name not in self.model_fields_set:
                data.pop(name, None)
        ordered = {key: data.pop(key) for key in self._key_order if key in data}
        ordered.update(data)
        return ordered


class LockDocument(LockEntry):
    """The root of a lock file."""
    name: str = ""


def parse_lock_document(data: Any) -> LockDocument:
    """
    Validate a decoded JSON document as a lock file.

    Raises:
        LockfileFormatError: If the document is not lock-file shaped.
    """
    if not isinstance(data, Mapping):
        raise LockfileFormatError(f"Invalid lock document type: {type(data).__name__}")
    try:
        return LockDocument.model_validate(dict(data))
    except ValidationError as exc:
        raise LockfileFormatError(f"Invalid lock document: {exc}") from exc


class VersionStore:
    """
    Side table of package metadata keyed by `name@version`.

    It is the single source of truth when the final lock file is rendered.
    Later records for the same key replace earlier ones.
    """

    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def key(name: str, version: str) -> str:
        return f"{name}@{version}"

    def record(self, name: str, entry: LockEntry) -> str:
        key = self.key(name, entry.version or "")
        self._records[key] = entry.metadata()
        return key

    def get(self, name: str, version: str) -> Dict[str, Any] | None:
        """Return a private copy of the stored metadata, or None."""
        found = self._records.get(self.key(name, version))
        return copy.deepcopy(found) if found is not None else None

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)


def manifest_requires(manifest: Mapping[str, Any], include_dev: bool = True) -> Dict[str, str]:
    """Top-level requested ranges declared by a package.json manifest."""
    requires: Dict[str, str] = dict(manifest.get("dependencies") or {})
    if include_dev:
        requires.update(manifest.get("devDependencies") or {})
    return requires


def with_requires(lock: Mapping[str, Any], requires: Mapping[str, str]) -> Dict[str, Any]:
    """Copy of a raw lock document whose root `requires` is replaced."""
    result = copy.deepcopy(dict(lock))
    result["requires"] = dict(requires)
    return result


def bootstrap_snapshot(manifest: Mapping[str, Any], lock: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Seed the first relocked snapshot straight from the current lock file.

    There is nothing to compare against on the first run, so the raw lock is
    taken as-is with the manifest's runtime and dev ranges as root `requires`.
    """
    return with_requires(lock, manifest_requires(manifest))


def read_json(path: str | Path) -> Dict[str, Any]:
    """
    Load a JSON object from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        LockfileFormatError: If the content is not a JSON object.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LockfileFormatError(f"Failed to parse {file_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise LockfileFormatError(f"Expected a JSON object in {file_path}")
    return data


def dump_json(document: Mapping[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def write_json(path: str | Path, document: Mapping[str, Any]) -> Path:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(dump_json(document), encoding="utf-8")
    logger.debug(f"Wrote {file_path}")
    return file_path
