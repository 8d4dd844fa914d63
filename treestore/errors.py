"""Exception hierarchy for treestore.

All errors raised by the library derive from TreeStoreError so callers can
catch everything from one place. None of them are transient; nothing is
retried internally.
"""

from typing import Any


class TreeStoreError(Exception):
    """Base class for all treestore errors."""
    pass


class InvalidTreeError(TreeStoreError):
    """Raised when a traversal source does not describe a valid forest.

    Covers cycles, out-of-range node ids, nodes reachable from two parents
    and malformed arrays. The store being constructed stays unbuilt.
    """
    pass


class NotBuiltError(TreeStoreError):
    """Raised when a query is issued against a store that was never built."""
    pass


class AlreadyBuiltError(TreeStoreError):
    """Raised when construct() is called on a store that is already built."""
    pass


class NodeNotFoundError(TreeStoreError, KeyError):
    """Raised when a query references a node id that is not in the store."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"Node {self.node_id!r} not found in store"


class ConfigurationError(TreeStoreError):
    """Raised when a traversal configuration is inconsistent."""
    pass
