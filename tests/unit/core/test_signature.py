"""Unit tests for subtree signatures."""

import pytest

from relock.core.signature import SubtreeIndex, canonical_form, short_signature, tree_signature
from relock.core.types import DependencyNode

LEAF = tree_signature(())


def leaf(name, version):
    return DependencyNode(name=name, version=version, signature=LEAF)


class TestTreeSignature:
    def test_deterministic(self):
        deps = [leaf("a", "1.0.0"), leaf("b", "2.0.0")]
        assert tree_signature(deps) == tree_signature(list(deps))
        assert len(tree_signature(deps)) == 64

    def test_empty_list_has_fixed_signature(self):
        assert tree_signature(()) == tree_signature([])

    def test_version_changes_signature(self):
        assert tree_signature([leaf("a", "1.0.0")]) != tree_signature([leaf("a", "1.0.1")])

    def test_order_matters(self):
        a, b = leaf("a", "1.0.0"), leaf("b", "1.0.0")
        assert tree_signature([a, b]) != tree_signature([b, a])

    def test_nested_signature_propagates(self):
        inner_old = DependencyNode(name="c", version="1.0.0", signature=tree_signature([leaf("d", "1.0.0")]))
        inner_new = DependencyNode(name="c", version="1.0.0", signature=tree_signature([leaf("d", "1.0.1")]))
        assert tree_signature([inner_old]) != tree_signature([inner_new])

    def test_range_does_not_contribute(self):
        a = DependencyNode(name="a", version="1.0.0", range="^1.0.0", signature=LEAF)
        b = DependencyNode(name="a", version="1.0.0", range="~1.0.0", signature=LEAF)
        assert tree_signature([a]) == tree_signature([b])

    def test_canonical_form_is_compact(self):
        assert canonical_form([leaf("a", "1.0.0")]) == f'[["a","1.0.0","{LEAF}"]]'

    def test_short_signature(self):
        assert short_signature("abcdef0123456789") == "abcdef01"
        assert short_signature("abcdef0123456789", 4) == "abcd"


class TestSubtreeIndex:
    @pytest.fixture
    def index(self):
        return SubtreeIndex()

    def test_intern_returns_shared_instance(self, index):
        first_sig, first = index.intern([leaf("a", "1.0.0")])
        second_sig, second = index.intern([leaf("a", "1.0.0")])

        assert first_sig == second_sig
        assert first is second
        assert len(index) == 1

    def test_distinct_subtrees(self, index):
        sig_a, _ = index.intern([leaf("a", "1.0.0")])
        sig_b, deps_b = index.intern([leaf("b", "1.0.0")])

        assert sig_a != sig_b
        assert deps_b[0].name == "b"
        assert len(index) == 2
