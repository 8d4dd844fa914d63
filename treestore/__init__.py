"""treestore - left-child/right-sibling trees, in memory and in SQLite.

treestore holds a forest of rooted trees as immutable Node and Edge
records. Each node points at its left-most child and its next sibling,
so trees of any arity fit in two links per node; ranks decrease from
root to leaves, which makes roots easy to pick out.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from treestore import TreeStore, random_binary_tree

    store = TreeStore.from_source(random_binary_tree(10, seed=42))
    leaves = [n.id for n in store.descendants_of(16)]

Persisted:
    from treestore import TreeDatabase

    with TreeDatabase("tree.db") as db:
        db.save(store)
        db.descendants_of(16)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .errors import (
    TreeStoreError,
    InvalidTreeError,
    NotBuiltError,
    AlreadyBuiltError,
    NodeNotFoundError,
    ConfigurationError,
)
from .core.node import Node, Edge
from .core.adapter import TreeAdapter
from .core.traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
    DepthFirstPostOrderTraverser,
    LevelOrderTraverser,
    SiblingChainTraverser,
    create_traverser,
)
from .core.collector import (
    DataCollector,
    IdentifierCollector,
    MetadataCollector,
    FullNodeCollector,
    ChildCountCollector,
    PathCollector,
    CustomCollector,
)
from .sources import TraversalSource, random_binary_tree
from .store import TreeStore
from .database import TreeDatabase
from .adapters import StoreAdapter, DatabaseAdapter

# Configuration and planning
from .config import (
    TraversalConfig,
    TraversalStrategy,
    DataRequirement,
    NodeFilter,
    FilterConfig,
    DepthConfig,
)
from .planning import ExecutionPlan

# High-level API
from .api import (
    traverse_tree,
    collect_tree_data,
    count_nodes,
    find_nodes,
    get_leaf_nodes,
    get_tree_paths,
    get_tree_stats,
)

__all__ = [
    "__version__",
    # Errors
    'TreeStoreError',
    'InvalidTreeError',
    'NotBuiltError',
    'AlreadyBuiltError',
    'NodeNotFoundError',
    'ConfigurationError',
    # Records and stores
    'Node',
    'Edge',
    'TraversalSource',
    'random_binary_tree',
    'TreeStore',
    'TreeDatabase',
    # Traversal framework
    'TreeAdapter',
    'StoreAdapter',
    'DatabaseAdapter',
    'TreeTraverser',
    'BreadthFirstTraverser',
    'DepthFirstPreOrderTraverser',
    'DepthFirstPostOrderTraverser',
    'LevelOrderTraverser',
    'SiblingChainTraverser',
    'create_traverser',
    'DataCollector',
    'IdentifierCollector',
    'MetadataCollector',
    'FullNodeCollector',
    'ChildCountCollector',
    'PathCollector',
    'CustomCollector',
    # Config
    'TraversalConfig',
    'TraversalStrategy',
    'DataRequirement',
    'NodeFilter',
    'FilterConfig',
    'DepthConfig',
    'ExecutionPlan',
    # API
    'traverse_tree',
    'collect_tree_data',
    'count_nodes',
    'find_nodes',
    'get_leaf_nodes',
    'get_tree_paths',
    'get_tree_stats',
]
