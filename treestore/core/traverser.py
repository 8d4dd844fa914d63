"""Tree traversal strategies for treestore.

Traversers implement different algorithms for walking through trees.
They work with any TreeAdapter, so the same strategy walks the in-memory
store or the database.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Iterator, List, Optional, Set, Tuple
from .node import Node
from .adapter import TreeAdapter


class TreeTraverser(ABC):
    """Abstract base class for tree traversal strategies."""

    def __init__(self, adapter: TreeAdapter):
        """Initialize traverser with an adapter.

        Args:
            adapter: TreeAdapter for navigating the tree
        """
        self.adapter = adapter

    @abstractmethod
    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        """Traverse the subtree under ``root``.

        Args:
            root: Starting node for traversal
            max_depth: Maximum depth to traverse (None = unlimited)
            min_depth: Minimum depth before yielding nodes

        Yields:
            Tuples of (node, depth) where depth is relative to root
        """
        pass

    def _should_yield(self, depth: int, min_depth: int, max_depth: Optional[int]) -> bool:
        if depth < min_depth:
            return False
        if max_depth is not None and depth > max_depth:
            return False
        return True

    def _should_explore(self, depth: int, max_depth: Optional[int]) -> bool:
        if max_depth is None:
            return True
        return depth < max_depth


class BreadthFirstTraverser(TreeTraverser):
    """Breadth-first (level-order) traversal strategy.

    Visits all nodes at depth N before visiting nodes at depth N+1.
    """

    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        queue: Deque[Tuple[Node, int]] = deque([(root, 0)])
        visited: Set[int] = set()

        while queue:
            node, depth = queue.popleft()

            if node.id in visited:
                continue
            visited.add(node.id)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if self._should_explore(depth, max_depth) and not node.is_leaf:
                for child in self.adapter.get_children(node):
                    queue.append((child, depth + 1))


class DepthFirstPreOrderTraverser(TreeTraverser):
    """Depth-first pre-order traversal strategy.

    Visits parent before children. Uses an explicit stack so very deep
    (caterpillar-shaped) trees do not hit the recursion limit.
    """

    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        stack: List[Tuple[Node, int]] = [(root, 0)]
        visited: Set[int] = set()

        while stack:
            node, depth = stack.pop()
            if node.id in visited:
                continue
            visited.add(node.id)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if self._should_explore(depth, max_depth) and not node.is_leaf:
                children = list(self.adapter.get_children(node))
                for child in reversed(children):
                    stack.append((child, depth + 1))


class DepthFirstPostOrderTraverser(TreeTraverser):
    """Depth-first post-order traversal strategy.

    Visits children before parent. Good for aggregating values such as
    subtree leaf counts.
    """

    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        # (node, depth, expanded)
        stack: List[Tuple[Node, int, bool]] = [(root, 0, False)]
        visited: Set[int] = set()

        while stack:
            node, depth, expanded = stack.pop()
            if expanded:
                if self._should_yield(depth, min_depth, max_depth):
                    yield (node, depth)
                continue

            if node.id in visited:
                continue
            visited.add(node.id)

            stack.append((node, depth, True))
            if self._should_explore(depth, max_depth) and not node.is_leaf:
                children = list(self.adapter.get_children(node))
                for child in reversed(children):
                    stack.append((child, depth + 1, False))


class LevelOrderTraverser(TreeTraverser):
    """Level-order traversal with level grouping.

    Similar to breadth-first but collects a complete level before moving
    on to the next one.
    """

    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        current_level: List[Node] = [root]
        current_depth = 0
        visited: Set[int] = set()

        while current_level and (max_depth is None or current_depth <= max_depth):
            next_level: List[Node] = []

            for node in current_level:
                if node.id in visited:
                    continue
                visited.add(node.id)

                if self._should_yield(current_depth, min_depth, max_depth):
                    yield (node, current_depth)

                if self._should_explore(current_depth, max_depth) and not node.is_leaf:
                    next_level.extend(self.adapter.get_children(node))

            current_level = next_level
            current_depth += 1


class SiblingChainTraverser(TreeTraverser):
    """Traversal by chasing the left_child and right_sib links directly.

    This is the in-memory form of the recursive query

        t.id = p.left_child OR (t.id = p.right_sib AND p.id != start)

    Every reached node expands its left child; every reached node except
    the start expands its right sibling. Without the start guard the walk
    would leak into the start node's right siblings and their subtrees.
    Following a left child goes one level deeper, following a right
    sibling stays on the same level.
    """

    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        stack: List[Tuple[Node, int]] = [(root, 0)]
        visited: Set[int] = set()

        while stack:
            node, depth = stack.pop()
            if node.id in visited:
                continue
            visited.add(node.id)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if node.id != root.id and node.right_sib is not None:
                stack.append((self.adapter.get_node(node.right_sib), depth))
            if node.left_child is not None and self._should_explore(depth, max_depth):
                stack.append((self.adapter.get_node(node.left_child), depth + 1))


def create_traverser(strategy: str, adapter: TreeAdapter) -> TreeTraverser:
    """Create a traverser instance by strategy name.

    Args:
        strategy: Name of traversal strategy (bfs, dfs_pre, dfs_post, level, sibling)
        adapter: TreeAdapter for the tree

    Returns:
        TreeTraverser instance

    Raises:
        ValueError: If strategy name is not recognized
    """
    strategies = {
        'bfs': BreadthFirstTraverser,
        'breadth_first': BreadthFirstTraverser,
        'dfs_pre': DepthFirstPreOrderTraverser,
        'depth_first_pre': DepthFirstPreOrderTraverser,
        'dfs_post': DepthFirstPostOrderTraverser,
        'depth_first_post': DepthFirstPostOrderTraverser,
        'level': LevelOrderTraverser,
        'level_order': LevelOrderTraverser,
        'sibling': SiblingChainTraverser,
        'sibling_chain': SiblingChainTraverser,
    }

    strategy_lower = strategy.lower()
    if strategy_lower not in strategies:
        raise ValueError(
            f"Unknown traversal strategy: {strategy}. "
            f"Choose from: {', '.join(strategies.keys())}"
        )

    return strategies[strategy_lower](adapter)
