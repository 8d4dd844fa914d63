"""Data collection strategies for treestore.

DataCollectors define what information to extract from nodes during
traversal, so one traversal can produce ids, records, child counts or
root paths depending on what the caller asked for.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
from .node import Node
from .adapter import TreeAdapter


class DataCollector(ABC):
    """Abstract base class for data collection strategies."""

    def __init__(self, adapter: TreeAdapter):
        """Initialize collector with an adapter.

        Args:
            adapter: TreeAdapter for additional node operations
        """
        self.adapter = adapter

    @abstractmethod
    def collect(self, node: Node, depth: int) -> Any:
        """Collect data from a node.

        Args:
            node: The node to collect data from
            depth: Current depth in traversal

        Returns:
            Collected data (type depends on collector)
        """
        pass


class IdentifierCollector(DataCollector):
    """Collects only node ids."""

    def collect(self, node: Node, depth: int) -> int:
        return node.id


class MetadataCollector(DataCollector):
    """Collects the node record as a dictionary."""

    def collect(self, node: Node, depth: int) -> Dict[str, Any]:
        return node.metadata()


class FullNodeCollector(DataCollector):
    """Collects the Node records themselves."""

    def collect(self, node: Node, depth: int) -> Node:
        return node


class ChildCountCollector(DataCollector):
    """Collects nodes with child count information.

    Useful for tree structure analysis (branching factor, polytomies).
    """

    def collect(self, node: Node, depth: int) -> Dict[str, Any]:
        child_count = 0
        if not node.is_leaf:
            for _ in self.adapter.get_children(node):
                child_count += 1

        return {
            'id': node.id,
            'depth': depth,
            'rank': node.rank,
            'child_count': child_count,
            'is_leaf': node.is_leaf,
        }


class PathCollector(DataCollector):
    """Collects the ids from the root of the node's tree down to the node.

    Paths are cached per node, so siblings share the lookups of their
    common ancestors.
    """

    def __init__(self, adapter: TreeAdapter):
        super().__init__(adapter)
        self._path_cache: Dict[int, List[int]] = {}

    def collect(self, node: Node, depth: int) -> List[int]:
        if node.id in self._path_cache:
            return self._path_cache[node.id]

        # Walk up until the root or an ancestor whose path is already known
        upward = [node.id]
        prefix: List[int] = []
        current = self.adapter.get_parent(node)
        while current is not None:
            if current.id in self._path_cache:
                prefix = self._path_cache[current.id]
                break
            upward.append(current.id)
            current = self.adapter.get_parent(current)

        path = prefix + upward[::-1]
        self._path_cache[node.id] = path
        return path


class CustomCollector(DataCollector):
    """Collector that uses a user-provided function.

    Allows custom data collection logic without subclassing.
    """

    def __init__(self, adapter: TreeAdapter, collect_func):
        """Initialize with custom collection function.

        Args:
            adapter: TreeAdapter for tree navigation
            collect_func: Function(node, depth) -> Any
        """
        super().__init__(adapter)
        self.collect_func = collect_func

    def collect(self, node: Node, depth: int) -> Any:
        return self.collect_func(node, depth)
