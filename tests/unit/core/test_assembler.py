"""Unit tests for the lock assembler."""

import pytest

from relock.core.assembler import LockAssembler
from relock.core.errors import UnresolvablePathError
from relock.core.lockfile import LockEntry, VersionStore
from relock.core.types import PlacementNode, PlacementTree


def placed(name, version, **children):
    return PlacementNode(name=name, version=version, variant=f"{name}|{version}|x", children=dict(children))


@pytest.fixture
def versions():
    store = VersionStore()
    store.record("a", LockEntry(version="1.0.0", resolved="https://registry/a-1.0.0.tgz", requires={"c": "^1.0.0"}))
    store.record("b", LockEntry(version="2.0.0", dev=True))
    store.record("c", LockEntry(version="1.0.0"))
    store.record("c", LockEntry(version="2.0.0"))
    return store


class TestLockAssembler:
    def test_document_header(self, versions):
        document = LockAssembler(versions).assemble(PlacementTree(version="3.1.0"), "app", "3.1.0")

        assert document == {
            "name": "app",
            "version": "3.1.0",
            "lockfileVersion": 1,
            "requires": True,
            "dependencies": {},
        }

    def test_entries_come_from_version_store(self, versions):
        placement = PlacementTree(children={"a": placed("a", "1.0.0")})

        document = LockAssembler(versions).assemble(placement, "app", "1.0.0")

        assert document["dependencies"]["a"] == {
            "version": "1.0.0",
            "resolved": "https://registry/a-1.0.0.tgz",
            "requires": {"c": "^1.0.0"},
        }

    def test_entries_sorted_by_name(self, versions):
        placement = PlacementTree(children={
            "c": placed("c", "1.0.0"),
            "a": placed("a", "1.0.0"),
            "b": placed("b", "2.0.0"),
        })

        document = LockAssembler(versions).assemble(placement, "app", "1.0.0")

        assert list(document["dependencies"]) == ["a", "b", "c"]

    def test_nested_dependencies(self, versions):
        placement = PlacementTree(children={
            "b": placed("b", "2.0.0", c=placed("c", "2.0.0")),
            "c": placed("c", "1.0.0"),
        })

        document = LockAssembler(versions).assemble(placement, "app", "1.0.0")

        b = document["dependencies"]["b"]
        assert b["dev"] is True
        assert b["dependencies"] == {"c": {"version": "2.0.0"}}
        assert "dependencies" not in document["dependencies"]["c"]

    def test_entries_are_copies(self, versions):
        placement = PlacementTree(children={"b": placed("b", "2.0.0", c=placed("c", "2.0.0"))})

        LockAssembler(versions).assemble(placement, "app", "1.0.0")

        assert "dependencies" not in versions.get("b", "2.0.0")

    def test_missing_metadata(self, versions):
        placement = PlacementTree(children={"a": placed("a", "1.0.0", z=placed("z", "9.0.0"))})

        with pytest.raises(UnresolvablePathError) as exc:
            LockAssembler(versions).assemble(placement, "app", "1.0.0")

        assert exc.value.path == ("a", "z")
        assert "z@9.0.0" in exc.value.message
