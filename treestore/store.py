"""The TreeStore: an immutable forest in left-child/right-sibling form.

A store starts out unbuilt. construct() walks a TraversalSource once,
assigns ranks, records one Edge per parent -> child relation and flips the
store to built. Nothing is mutated after that, so any number of readers
can query a built store without coordination.
"""

import logging
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple, Union

from .config import NodeFilter
from .core.node import Edge, Node
from .errors import (
    AlreadyBuiltError,
    InvalidTreeError,
    NodeNotFoundError,
    NotBuiltError,
)
from .sources import TraversalSource

logger = logging.getLogger(__name__)

NodePredicate = Callable[[Node], bool]


def _resolve_filter(node_filter: Union[NodeFilter, NodePredicate]) -> NodePredicate:
    if isinstance(node_filter, NodeFilter):
        return node_filter.matches
    if callable(node_filter):
        return node_filter
    raise TypeError(
        f"node_filter must be a NodeFilter or a callable, got {type(node_filter).__name__}"
    )


class TreeStore:
    """Forest of Node records connected by Edge records.

    Example:
        >>> store = TreeStore.from_source(TraversalSource.from_parents([2, 2, -1]))
        >>> [n.id for n in store.get_children(2)]
        [0, 1]
        >>> store.root_of(1).id
        2
    """

    def __init__(self):
        self._nodes: Dict[int, Node] = {}
        self._edges: Tuple[Edge, ...] = ()
        self._parents: Dict[int, int] = {}
        self._roots: Tuple[int, ...] = ()
        self._built = False

    @classmethod
    def from_source(cls, source: TraversalSource) -> 'TreeStore':
        """Create a store and construct it from ``source`` in one step."""
        return cls().construct(source)

    @property
    def is_built(self) -> bool:
        return self._built

    # Construction

    def construct(self, source: TraversalSource) -> 'TreeStore':
        """Build the store from a traversal source.

        Each root of the source is walked depth-first. A root's rank is the
        number of leaves in its tree minus one and every other node's rank is
        one less than its parent's. Nodes of the source arrays that no root
        reaches are not inserted. The right-sibling links of roots are not
        followed; roots are taken from ``source.roots`` only.

        Args:
            source: The forest to load

        Returns:
            This store, now built

        Raises:
            AlreadyBuiltError: If the store was already built
            InvalidTreeError: If the source is malformed or cyclic. The store
                stays unbuilt.
        """
        if self._built:
            raise AlreadyBuiltError("TreeStore is immutable once built")

        walk = _walk_source(source)

        nodes: Dict[int, Node] = {}
        edges: List[Edge] = []
        parents: Dict[int, int] = {}
        for root, visits in walk:
            root_rank = sum(1 for node_id, _, _ in visits
                            if source.left_child[node_id] is None) - 1
            for node_id, depth, parent in visits:
                left = source.left_child[node_id]
                nodes[node_id] = Node(
                    id=node_id,
                    is_leaf=left is None,
                    rank=root_rank - depth,
                    left_child=left,
                    right_sib=None if parent is None else source.right_sib[node_id],
                )
                if parent is not None:
                    edges.append(Edge(id=len(edges), parent=parent, child=node_id))
                    parents[node_id] = parent

        self._nodes = nodes
        self._edges = tuple(edges)
        self._parents = parents
        self._roots = tuple(root for root, _ in walk)
        self._built = True

        skipped = source.num_nodes - len(nodes)
        logger.debug(
            "Built tree store: %d nodes, %d edges, %d roots (%d unreachable ids skipped)",
            len(nodes), len(edges), len(self._roots), skipped,
        )
        return self

    # Lookups

    def _require_built(self) -> None:
        if not self._built:
            raise NotBuiltError("TreeStore has not been built; call construct() first")

    def get_node(self, node_id: int) -> Node:
        """Return the node record for ``node_id``.

        Raises:
            NotBuiltError: If the store is not built
            NodeNotFoundError: If the id is not in the store
        """
        self._require_built()
        try:
            return self._nodes[node_id]
        except (KeyError, TypeError):
            raise NodeNotFoundError(node_id) from None

    def get_children(self, node_id: int) -> Tuple[Node, ...]:
        """Return the children of a node, left to right.

        Follows ``left_child`` and then ``right_sib`` until the chain ends.
        A leaf has no children and yields an empty tuple.
        """
        node = self.get_node(node_id)
        children = []
        child_id = node.left_child
        while child_id is not None:
            child = self._nodes[child_id]
            children.append(child)
            child_id = child.right_sib
        return tuple(children)

    def descendants_of(self,
                       node_id: int,
                       node_filter: Union[NodeFilter, NodePredicate] = NodeFilter.LEAVES_ONLY
                       ) -> Iterator[Node]:
        """Lazily yield the nodes of the subtree rooted at ``node_id``.

        From every reached node the traversal expands ``left_child``; it
        expands ``right_sib`` from every reached node except the start node,
        so the start node's own right siblings and their subtrees are never
        entered. Nodes are yielded in the order first encountered: a node,
        then its left-child subtree, then its right sibling. The start node
        is yielded too if it matches the filter.

        Args:
            node_id: Start of the traversal
            node_filter: NodeFilter or predicate selecting yielded nodes
                (default: leaves only)

        Returns:
            Iterator of matching Node records

        Raises:
            NotBuiltError: If the store is not built
            NodeNotFoundError: If node_id is not in the store
            TypeError: If node_filter is neither a NodeFilter nor callable
        """
        start = self.get_node(node_id)
        predicate = _resolve_filter(node_filter)
        return self._iter_descendants(start, predicate)

    def _iter_descendants(self, start: Node, predicate: NodePredicate) -> Iterator[Node]:
        stack = [start.id]
        visited: Set[int] = set()
        while stack:
            current_id = stack.pop()
            if current_id in visited:
                continue
            visited.add(current_id)

            node = self._nodes[current_id]
            if predicate(node):
                yield node

            # right_sib is pushed first so the left-child subtree comes out first
            if current_id != start.id and node.right_sib is not None:
                stack.append(node.right_sib)
            if node.left_child is not None:
                stack.append(node.left_child)

    def parent_of(self, node_id: int) -> Optional[Node]:
        """Return the parent of a node, or None for a root."""
        self.get_node(node_id)
        parent_id = self._parents.get(node_id)
        return None if parent_id is None else self._nodes[parent_id]

    def ancestors_of(self, node_id: int) -> Tuple[Node, ...]:
        """Return the ancestors of a node, nearest first, ending at its root."""
        self.get_node(node_id)
        ancestors = []
        current = self._parents.get(node_id)
        while current is not None:
            ancestors.append(self._nodes[current])
            current = self._parents.get(current)
        return tuple(ancestors)

    def root_of(self, node_id: int) -> Node:
        """Return the root of the tree containing ``node_id``.

        Raises:
            NotBuiltError: If the store is not built
            NodeNotFoundError: If node_id is not in the store
        """
        node = self.get_node(node_id)
        current = node.id
        while current in self._parents:
            current = self._parents[current]
        return self._nodes[current]

    def roots(self) -> Tuple[Node, ...]:
        """Return every root, highest rank first (ties broken by id)."""
        self._require_built()
        return tuple(sorted((self._nodes[r] for r in self._roots),
                            key=lambda n: (-n.rank, n.id)))

    def leaves(self) -> Iterator[Node]:
        """Yield every leaf in construction order."""
        self._require_built()
        return (node for node in self._nodes.values() if node.is_leaf)

    def nodes(self) -> Iterator[Node]:
        """Yield every node in construction (pre-)order."""
        self._require_built()
        return iter(tuple(self._nodes.values()))

    def edges(self) -> Tuple[Edge, ...]:
        """Return every edge in discovery order."""
        self._require_built()
        return self._edges

    def __len__(self) -> int:
        self._require_built()
        return len(self._nodes)

    def __contains__(self, node_id) -> bool:
        self._require_built()
        try:
            return node_id in self._nodes
        except TypeError:
            return False

    def __repr__(self) -> str:
        if not self._built:
            return f"{self.__class__.__name__}(unbuilt)"
        return (f"{self.__class__.__name__}(nodes={len(self._nodes)}, "
                f"edges={len(self._edges)}, roots={list(self._roots)})")


def _walk_source(source: TraversalSource) -> List[Tuple[int, List[Tuple[int, Optional[int], Optional[int]]]]]:
    """Walk every root of a source depth-first and validate as we go.

    Returns:
        One ``(root, visits)`` pair per root, where ``visits`` lists
        ``(node_id, depth, parent)`` in pre-order

    Raises:
        InvalidTreeError: On any structural problem
    """
    num_nodes = source.num_nodes
    if len(source.right_sib) != num_nodes:
        raise InvalidTreeError(
            f"left_child has {num_nodes} entries but right_sib has {len(source.right_sib)}"
        )
    if not source.roots:
        raise InvalidTreeError("Traversal source declares no roots")

    def check_id(node_id: int, what: str) -> None:
        if not 0 <= node_id < num_nodes:
            raise InvalidTreeError(
                f"{what} {node_id} is outside the declared id range [0, {num_nodes})"
            )

    visited: Set[int] = set()
    walk = []

    for root in source.roots:
        check_id(root, "Root")
        if root in visited:
            raise InvalidTreeError(f"Root {root} is reachable from another root")

        visits: List[Tuple[int, Optional[int], Optional[int]]] = []
        on_path: Set[int] = set()
        # ("enter", node, depth, parent) / ("exit", node, None, None)
        stack = [("enter", root, 0, None)]

        while stack:
            action, node_id, depth, parent = stack.pop()
            if action == "exit":
                on_path.discard(node_id)
                continue

            if node_id in on_path:
                raise InvalidTreeError(
                    f"Cycle detected: node {node_id} is its own ancestor (via {parent})"
                )
            if node_id in visited:
                raise InvalidTreeError(
                    f"Node {node_id} is reachable from more than one parent"
                )
            visited.add(node_id)
            on_path.add(node_id)
            visits.append((node_id, depth, parent))

            children = _child_chain(source, node_id, check_id)
            stack.append(("exit", node_id, None, None))
            for child in reversed(children):
                stack.append(("enter", child, depth + 1, node_id))

        walk.append((root, visits))

    return walk


def _child_chain(source: TraversalSource, parent: int, check_id) -> List[int]:
    children = []
    seen: Set[int] = set()
    child = source.left_child[parent]
    while child is not None:
        check_id(child, f"Child of node {parent}")
        if child in seen:
            raise InvalidTreeError(
                f"Cycle detected in the sibling chain under node {parent} at node {child}"
            )
        seen.add(child)
        children.append(child)
        child = source.right_sib[child]
    return children
