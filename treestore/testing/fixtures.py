"""Test fixtures for treestore consumers.

These helpers give test suites a known tree and a way to verify that a
built store is internally consistent without reaching into its private
state.
"""

from typing import List

from ..sources import TraversalSource
from ..store import TreeStore


def example_source() -> TraversalSource:
    """The 10-leaf binary tree used throughout the tutorials and tests.

    Structure (leaves 0-9, internal nodes 10-18, root 18)::

        18
        ├── 16
        │   ├── 15
        │   │   ├── 5
        │   │   └── 13
        │   │       ├── 3
        │   │       └── 4
        │   └── 14
        │       ├── 0
        │       └── 12
        │           ├── 8
        │           └── 11
        │               ├── 6
        │               └── 1
        └── 17
            ├── 2
            └── 10
                ├── 7
                └── 9

    The leaves under 16 in sibling-chain order are 5, 3, 4, 0, 8, 6, 1;
    leaves 2, 7 and 9 sit under 16's right sibling 17.
    """
    return TraversalSource.from_children(
        {
            18: [16, 17],
            16: [15, 14],
            15: [5, 13],
            13: [3, 4],
            14: [0, 12],
            12: [8, 11],
            11: [6, 1],
            17: [2, 10],
            10: [7, 9],
        },
        roots=[18],
    )


class InvariantChecker:
    """Checks the structural invariants of a built TreeStore.

    Example:
        checker = InvariantChecker(store)
        assert checker.violations() == []
    """

    def __init__(self, store: TreeStore):
        """Initialize with a built store.

        Args:
            store: The TreeStore to inspect
        """
        self._store = store

    def violations(self) -> List[str]:
        """Return a description of every violated invariant (empty if none)."""
        problems: List[str] = []
        problems.extend(self._check_leaf_flags())
        problems.extend(self._check_edges_match_links())
        problems.extend(self._check_ranks())
        problems.extend(self._check_roots())
        return problems

    def _check_leaf_flags(self) -> List[str]:
        return [
            f"node {node.id}: is_leaf={node.is_leaf} but left_child={node.left_child}"
            for node in self._store.nodes()
            if node.is_leaf != (node.left_child is None)
        ]

    def _check_edges_match_links(self) -> List[str]:
        problems = []
        edge_pairs = {(e.parent, e.child) for e in self._store.edges()}
        link_pairs = set()
        for node in self._store.nodes():
            for child in self._store.get_children(node.id):
                link_pairs.add((node.id, child.id))
        for parent, child in sorted(edge_pairs - link_pairs):
            problems.append(f"edge {parent}->{child} is not in the sibling chain of {parent}")
        for parent, child in sorted(link_pairs - edge_pairs):
            problems.append(f"link {parent}->{child} has no matching edge")

        children = [child for _, child in edge_pairs]
        for child in sorted({c for c in children if children.count(c) > 1}):
            problems.append(f"node {child} has more than one parent edge")
        return problems

    def _check_ranks(self) -> List[str]:
        problems = []
        for edge in self._store.edges():
            parent = self._store.get_node(edge.parent)
            child = self._store.get_node(edge.child)
            if not child.rank < parent.rank:
                problems.append(
                    f"rank does not decrease on edge {parent.id}->{child.id} "
                    f"({parent.rank} -> {child.rank})"
                )
        return problems

    def _check_roots(self) -> List[str]:
        problems = []
        for node in self._store.nodes():
            root = self._store.root_of(node.id)
            if node.id != root.id and not node.rank < root.rank:
                problems.append(
                    f"node {node.id} has rank {node.rank}, not below its root "
                    f"{root.id} ({root.rank})"
                )
        return problems
