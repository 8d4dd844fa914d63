"""Adapters that let the traversal framework walk a TreeStore or a TreeDatabase."""

from typing import Iterator, Optional

from ..core.adapter import TreeAdapter
from ..core.node import Node
from ..database import TreeDatabase
from ..store import TreeStore


class StoreAdapter(TreeAdapter):
    """Navigation over an in-memory TreeStore."""

    def __init__(self, store: TreeStore):
        self.store = store

    def get_node(self, node_id: int) -> Node:
        return self.store.get_node(node_id)

    def get_children(self, node: Node) -> Iterator[Node]:
        return iter(self.store.get_children(node.id))

    def get_parent(self, node: Node) -> Optional[Node]:
        return self.store.parent_of(node.id)

    def get_depth(self, node: Node) -> int:
        """Depth from the parent index, without re-fetching each ancestor."""
        return len(self.store.ancestors_of(node.id))


class DatabaseAdapter(TreeAdapter):
    """Navigation over a persisted forest, one SQL query per step.

    The database must stay open for as long as the adapter is used.
    """

    def __init__(self, database: TreeDatabase):
        self.database = database

    def get_node(self, node_id: int) -> Node:
        return self.database.get_node(node_id)

    def get_children(self, node: Node) -> Iterator[Node]:
        return iter(self.database.get_children(node.id))

    def get_parent(self, node: Node) -> Optional[Node]:
        return self.database.parent_of(node.id)
