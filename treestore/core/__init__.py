"""Core abstractions for treestore.

This module contains the record types and the abstract base classes that
the traversal framework is built on.
"""

from .node import Node, Edge
from .adapter import TreeAdapter
from .traverser import TreeTraverser
from .collector import DataCollector

__all__ = [
    "Node",
    "Edge",
    "TreeAdapter",
    "TreeTraverser",
    "DataCollector",
]
