"""Structural properties that hold for every constructed store.

Each property is checked over a spread of random trees, plus a couple of
non-binary shapes built from parent arrays.
"""

import random

import pytest

from treestore import NodeFilter, TraversalSource, TreeStore, random_binary_tree
from treestore.testing import InvariantChecker


def random_polytomy(num_nodes, seed):
    """A random tree where a node may have any number of children."""
    rng = random.Random(seed)
    parents = [-1] + [rng.randrange(i) for i in range(1, num_nodes)]
    return TraversalSource.from_parents(parents)


SOURCES = (
    [pytest.param(random_binary_tree(n, seed=s), id=f"binary-{n}-{s}")
     for n in (1, 2, 5, 10, 30) for s in range(5)]
    + [pytest.param(random_polytomy(n, seed=s), id=f"poly-{n}-{s}")
       for n in (3, 15, 40) for s in range(5)]
)


@pytest.fixture(params=SOURCES)
def store(request):
    return TreeStore.from_source(request.param)


def lcrs_reachable(store, start):
    """Ids reachable from start by chasing left_child and right_sib links."""
    reached = set()
    pending = [start]
    while pending:
        node = store.get_node(pending.pop())
        if node.id in reached:
            continue
        reached.add(node.id)
        for link in (node.left_child, node.right_sib):
            if link is not None:
                pending.append(link)
    return reached


def test_invariant_checker_is_clean(store):
    assert InvariantChecker(store).violations() == []


def test_every_node_reachable_from_its_root(store):
    for node in store.nodes():
        root = store.root_of(node.id)
        assert node.id in lcrs_reachable(store, root.id)


def test_children_match_edges(store):
    edges_by_parent = {}
    for edge in store.edges():
        edges_by_parent.setdefault(edge.parent, []).append(edge.child)

    for node in store.nodes():
        children = store.get_children(node.id)
        assert len(children) == len(edges_by_parent.get(node.id, []))
        assert {c.id for c in children} == set(edges_by_parent.get(node.id, []))
        for child in children:
            assert store.parent_of(child.id).id == node.id


def test_children_follow_sibling_chain(store):
    for node in store.nodes():
        children = store.get_children(node.id)
        if not children:
            continue
        assert children[0].id == node.left_child
        for left, right in zip(children, children[1:]):
            assert left.right_sib == right.id
        assert children[-1].right_sib is None


def test_leaf_iff_no_left_child(store):
    for node in store.nodes():
        assert node.is_leaf == (node.left_child is None)


def test_rank_decreases_towards_leaves(store):
    for edge in store.edges():
        assert store.get_node(edge.child).rank < store.get_node(edge.parent).rank


def test_root_has_unique_max_rank(store):
    root = store.roots()[0]
    others = [n.rank for n in store.nodes() if n.id != root.id]
    assert all(rank < root.rank for rank in others)


def test_descendants_of_root_are_all_leaves_once(store):
    root = store.roots()[0]
    leaves = [n.id for n in store.descendants_of(root.id)]
    assert len(leaves) == len(set(leaves))
    assert set(leaves) == {n.id for n in store.leaves()}


def test_descendants_of_root_with_all_filter_is_whole_tree(store):
    root = store.roots()[0]
    assert {n.id for n in store.descendants_of(root.id, NodeFilter.ALL)} == \
        {n.id for n in store.nodes()}


def test_get_children_idempotent(store):
    for node in store.nodes():
        assert store.get_children(node.id) == store.get_children(node.id)
