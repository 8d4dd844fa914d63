"""Traversal sources for building a TreeStore.

A traversal source is the external representation of a forest that
TreeStore.construct() walks: one left-child array, one right-sibling array
and the list of roots, all indexed by node id. This is the shape ancestry
tree-sequence libraries hand out, where -1 marks an absent link.

The converters here exist so callers holding a parent array or nested child
lists don't have to build the sibling chains themselves. They reject ids
outside the declared range; structural checks (cycles, shared children) are
left to construct(). Both report problems as InvalidTreeError.
"""

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidTreeError

NULL = -1


def _normalize_link(value) -> Optional[int]:
    if value is None:
        return None
    value = int(value)
    return None if value == NULL else value


@dataclass(frozen=True)
class TraversalSource:
    """Left-child/right-sibling arrays plus the roots to start from.

    Any integer sequence (lists, tuples, numpy arrays) is accepted for the
    arrays; absent links may be given as -1 or None and are stored as None.
    """

    left_child: Tuple[Optional[int], ...]
    right_sib: Tuple[Optional[int], ...]
    roots: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "left_child",
                           tuple(_normalize_link(v) for v in self.left_child))
        object.__setattr__(self, "right_sib",
                           tuple(_normalize_link(v) for v in self.right_sib))
        object.__setattr__(self, "roots", tuple(int(r) for r in self.roots))

    @property
    def num_nodes(self) -> int:
        """Size of the declared id range ``[0, num_nodes)``."""
        return len(self.left_child)

    @property
    def root(self) -> int:
        """The first (left-most) root."""
        if not self.roots:
            raise ValueError("Traversal source has no roots")
        return self.roots[0]

    @classmethod
    def from_parents(cls, parents: Sequence[int]) -> 'TraversalSource':
        """Build a source from a parent array.

        ``parents[i]`` is the parent of node ``i`` or -1 for a root.
        Children of a node are ordered by ascending id.

        Example:
            >>> src = TraversalSource.from_parents([2, 2, -1])
            >>> src.left_child, src.right_sib, src.roots
            ((None, None, 0), (1, None, None), (2,))
        """
        children: Dict[int, List[int]] = {}
        roots = []
        for node_id, parent in enumerate(parents):
            parent = _normalize_link(parent)
            if parent is None:
                roots.append(node_id)
            else:
                children.setdefault(parent, []).append(node_id)
        return cls.from_children(children, roots=roots, num_nodes=len(parents))

    @classmethod
    def from_children(cls,
                      children: Mapping[int, Sequence[int]],
                      roots: Optional[Iterable[int]] = None,
                      num_nodes: Optional[int] = None) -> 'TraversalSource':
        """Build a source from a mapping of node id to ordered child ids.

        Args:
            children: Parent id -> child ids, left to right
            roots: Roots in left-to-right order. Defaults to every id that
                appears in ``children`` but is never a child, ascending.
            num_nodes: Size of the id range. Defaults to the largest id
                mentioned plus one.

        Returns:
            TraversalSource with the sibling chains filled in

        Raises:
            InvalidTreeError: If a parent or child id falls outside
                ``[0, num_nodes)``
        """
        mentioned = set(children)
        for kids in children.values():
            mentioned.update(kids)
        if roots is None:
            child_ids = {c for kids in children.values() for c in kids}
            roots = sorted(mentioned - child_ids)
        roots = list(roots)
        if num_nodes is None:
            num_nodes = max(mentioned | set(roots), default=-1) + 1

        # negative ids would wrap around list indexing below
        for node_id in sorted(mentioned):
            if not 0 <= node_id < num_nodes:
                raise InvalidTreeError(
                    f"Node id {node_id} is outside the declared id range [0, {num_nodes})")

        left_child: List[int] = [NULL] * num_nodes
        right_sib: List[int] = [NULL] * num_nodes
        for parent, kids in children.items():
            kids = list(kids)
            if not kids:
                continue
            left_child[parent] = kids[0]
            for left, right in zip(kids, kids[1:]):
                right_sib[left] = right

        return cls(left_child=tuple(left_child),
                   right_sib=tuple(right_sib),
                   roots=tuple(roots))


def random_binary_tree(num_leaves: int, seed: Optional[int] = None) -> TraversalSource:
    """Generate a random binary tree by repeatedly merging two lineages.

    Leaves are numbered ``0..num_leaves-1``; each merge creates the next
    internal id starting at ``num_leaves``, so the root is
    ``2 * num_leaves - 2``. The same seed always yields the same tree.

    Args:
        num_leaves: Number of leaves (at least 1)
        seed: Seed for the private random generator

    Returns:
        TraversalSource for the generated tree

    Raises:
        ValueError: If num_leaves is less than 1
    """
    if num_leaves < 1:
        raise ValueError(f"num_leaves must be at least 1, got {num_leaves}")

    rng = random.Random(seed)
    lineages = list(range(num_leaves))
    children: Dict[int, List[int]] = {}
    next_id = num_leaves

    while len(lineages) > 1:
        i, j = sorted(rng.sample(range(len(lineages)), 2))
        # pop the higher index first so the lower one stays valid
        right = lineages.pop(j)
        left = lineages.pop(i)
        children[next_id] = [left, right]
        lineages.append(next_id)
        next_id += 1

    return TraversalSource.from_children(children,
                                         roots=[lineages[0]],
                                         num_nodes=next_id)
