"""High-level API for treestore.

Simple functional interfaces for the common traversal operations. They
accept a TreeStore, an open TreeDatabase or any TreeAdapter, and wrap the
config/plan machinery for the simple cases.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .adapters.store import DatabaseAdapter, StoreAdapter
from .config import (
    DataRequirement,
    DepthConfig,
    FilterConfig,
    NodeFilter,
    TraversalConfig,
    TraversalStrategy,
)
from .core.adapter import TreeAdapter
from .core.node import Node
from .database import TreeDatabase
from .planning import ExecutionPlan
from .store import TreeStore

Tree = Union[TreeStore, TreeDatabase, TreeAdapter]


def traverse_tree(
    tree: Tree,
    start: Union[Node, int],
    strategy: Union[TraversalStrategy, str] = TraversalStrategy.DEPTH_FIRST_PRE,
    max_depth: Optional[int] = None,
    min_depth: int = 0,
    node_filter: NodeFilter = NodeFilter.ALL,
    include_filter: Optional[Callable[[Node], bool]] = None,
    exclude_filter: Optional[Callable[[Node], bool]] = None,
    max_nodes: Optional[int] = None,
) -> Iterator[Node]:
    """Simple interface for tree traversal.

    Args:
        tree: TreeStore, open TreeDatabase or TreeAdapter
        start: Node or node id to start from
        strategy: Traversal strategy (bfs, dfs_pre, dfs_post, level, sibling)
        max_depth: Maximum depth below start to traverse
        min_depth: Minimum depth before yielding nodes
        node_filter: Restrict to leaves or internal nodes
        include_filter: Predicate a node must satisfy to be yielded
        exclude_filter: Predicate that drops a node from the output
        max_nodes: Stop after this many nodes

    Yields:
        Node records that match the criteria

    Example:
        >>> store = TreeStore.from_source(random_binary_tree(10, seed=1))
        >>> for node in traverse_tree(store, 18, max_depth=2):
        ...     print(node.id, node.rank)
    """
    config = TraversalConfig(
        strategy=_parse_strategy(strategy),
        depth=DepthConfig(min_depth=min_depth, max_depth=max_depth),
        filter=FilterConfig(
            node_filter=node_filter,
            include_filter=include_filter,
            exclude_filter=exclude_filter,
        ),
        data_requirements=DataRequirement.FULL_NODE,
        max_nodes=max_nodes,
    )
    plan = ExecutionPlan(config, _as_adapter(tree))

    for node, _ in plan.execute(start):
        yield node


def collect_tree_data(
    tree: Tree,
    start: Union[Node, int],
    data_requirement: DataRequirement = DataRequirement.METADATA,
    **kwargs
) -> Iterator[Tuple[Node, Any]]:
    """Traverse a tree and collect the requested data from each node.

    Args:
        tree: TreeStore, open TreeDatabase or TreeAdapter
        start: Node or node id to start from
        data_requirement: What data to collect
        **kwargs: Traversal options (see traverse_tree)

    Yields:
        Tuples of (node, collected_data)
    """
    config = _build_config_from_kwargs(data_requirement=data_requirement, **kwargs)
    plan = ExecutionPlan(config, _as_adapter(tree))
    yield from plan.execute(start)


def count_nodes(tree: Tree, start: Union[Node, int], **kwargs) -> int:
    """Count the nodes under ``start`` (inclusive) that match the criteria."""
    count = 0
    for _ in traverse_tree(tree, start, **kwargs):
        count += 1
    return count


def find_nodes(
    tree: Tree,
    start: Union[Node, int],
    predicate: Callable[[Node], bool],
    **kwargs
) -> Iterator[Node]:
    """Find nodes under ``start`` that match a predicate.

    Example:
        >>> deep = find_nodes(store, 18, lambda n: n.rank < 3)
    """
    kwargs['include_filter'] = predicate
    yield from traverse_tree(tree, start, **kwargs)


def get_leaf_nodes(tree: Tree, start: Union[Node, int], **kwargs) -> Iterator[Node]:
    """Get the leaves under ``start`` in sibling-chain order.

    Only the subtree of ``start`` is searched; its right siblings are not.
    """
    kwargs.setdefault('strategy', TraversalStrategy.SIBLING_CHAIN)
    kwargs['node_filter'] = NodeFilter.LEAVES_ONLY
    yield from traverse_tree(tree, start, **kwargs)


def get_tree_paths(tree: Tree, start: Union[Node, int], **kwargs) -> Iterator[List[int]]:
    """Get the id path from the tree root down to each visited node."""
    for _, path in collect_tree_data(tree, start, DataRequirement.PATH, **kwargs):
        yield path


def get_tree_stats(tree: Tree, start: Union[Node, int], **kwargs) -> Dict[str, Any]:
    """Get statistics about the subtree under ``start``.

    Returns:
        Dictionary with node counts, depth profile and branching figures

    Example:
        >>> stats = get_tree_stats(store, 18)
        >>> stats['leaf_nodes']
        10
    """
    stats: Dict[str, Any] = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'max_depth': 0,
        'max_children': 0,
        'depths': {},
    }
    child_total = 0

    for _, info in collect_tree_data(
        tree, start,
        data_requirement=DataRequirement.CHILDREN_COUNT,
        **kwargs
    ):
        depth = info['depth']
        stats['total_nodes'] += 1
        if info['is_leaf']:
            stats['leaf_nodes'] += 1
        child_total += info['child_count']
        stats['max_children'] = max(stats['max_children'], info['child_count'])
        stats['max_depth'] = max(stats['max_depth'], depth)
        stats['depths'][depth] = stats['depths'].get(depth, 0) + 1

    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']
    stats['average_branching'] = (
        child_total / stats['internal_nodes']
        if stats['internal_nodes'] > 0 else 0
    )

    return stats


# Helper functions

def _as_adapter(tree: Tree) -> TreeAdapter:
    if isinstance(tree, TreeAdapter):
        return tree
    if isinstance(tree, TreeStore):
        return StoreAdapter(tree)
    if isinstance(tree, TreeDatabase):
        return DatabaseAdapter(tree)
    raise TypeError(
        f"Expected a TreeStore, TreeDatabase or TreeAdapter, got {type(tree).__name__}"
    )


def _parse_strategy(strategy: Union[TraversalStrategy, str]) -> TraversalStrategy:
    if isinstance(strategy, TraversalStrategy):
        return strategy

    strategy_map = {
        'bfs': TraversalStrategy.BREADTH_FIRST,
        'breadth_first': TraversalStrategy.BREADTH_FIRST,
        'dfs': TraversalStrategy.DEPTH_FIRST_PRE,
        'dfs_pre': TraversalStrategy.DEPTH_FIRST_PRE,
        'depth_first_pre': TraversalStrategy.DEPTH_FIRST_PRE,
        'dfs_post': TraversalStrategy.DEPTH_FIRST_POST,
        'depth_first_post': TraversalStrategy.DEPTH_FIRST_POST,
        'level': TraversalStrategy.LEVEL_ORDER,
        'level_order': TraversalStrategy.LEVEL_ORDER,
        'sibling': TraversalStrategy.SIBLING_CHAIN,
        'sibling_chain': TraversalStrategy.SIBLING_CHAIN,
    }

    strategy_lower = strategy.lower() if isinstance(strategy, str) else str(strategy)
    if strategy_lower in strategy_map:
        return strategy_map[strategy_lower]

    raise ValueError(f"Unknown traversal strategy: {strategy}")


def _build_config_from_kwargs(**kwargs) -> TraversalConfig:
    config = TraversalConfig()

    if 'strategy' in kwargs:
        config.strategy = _parse_strategy(kwargs.pop('strategy'))
    if 'max_depth' in kwargs:
        config.depth.max_depth = kwargs.pop('max_depth')
    if 'min_depth' in kwargs:
        config.depth.min_depth = kwargs.pop('min_depth')
    if 'node_filter' in kwargs:
        config.filter.node_filter = kwargs.pop('node_filter')
    if 'include_filter' in kwargs:
        config.filter.include_filter = kwargs.pop('include_filter')
    if 'exclude_filter' in kwargs:
        config.filter.exclude_filter = kwargs.pop('exclude_filter')
    if 'data_requirement' in kwargs:
        config.data_requirements = kwargs.pop('data_requirement')

    # Remaining kwargs map straight onto config attributes
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise TypeError(f"Unknown traversal option: {key}")
        setattr(config, key, value)

    return config
