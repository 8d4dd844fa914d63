"""TreeAdapter abstraction for treestore.

The TreeAdapter provides the navigation logic for a particular backing
store, decoupling the Node records from where they live. The same
traversers run unchanged over the in-memory TreeStore and over a
TreeDatabase.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional
from .node import Node


class TreeAdapter(ABC):
    """Abstract adapter for navigating a left-child/right-sibling forest.

    Node records carry the left_child / right_sib links themselves; the
    adapter knows how to turn an id into a record and how to find a
    node's parent, which the records do not store.
    """

    @abstractmethod
    def get_node(self, node_id: int) -> Node:
        """Look up a node record by id.

        Raises:
            NodeNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    def get_children(self, node: Node) -> Iterator[Node]:
        """Get an iterator of child nodes for the given node, left to right.

        Args:
            node: The parent node

        Returns:
            Iterator yielding child Node records
        """
        pass

    @abstractmethod
    def get_parent(self, node: Node) -> Optional[Node]:
        """Get the parent node of the given node.

        Args:
            node: The child node

        Returns:
            Parent Node or None if node is a root
        """
        pass

    def get_depth(self, node: Node) -> int:
        """Calculate the depth of a node in its tree.

        Default implementation walks up to the root.
        Adapters can override for more efficient implementations.

        Returns:
            Depth where root = 0
        """
        depth = 0
        current = node
        while True:
            parent = self.get_parent(current)
            if parent is None:
                break
            depth += 1
            current = parent
        return depth

    def get_siblings(self, node: Node) -> Iterator[Node]:
        """Get siblings of the given node (excluding the node itself).

        Default implementation uses the parent's children.
        """
        parent = self.get_parent(node)
        if parent is None:
            return  # Roots have no siblings

        for child in self.get_children(parent):
            if child.id != node.id:
                yield child
