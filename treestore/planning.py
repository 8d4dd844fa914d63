"""Execution planning for treestore.

The ExecutionPlan validates a TraversalConfig up front and assembles the
traverser and collector that carry it out over a TreeAdapter.
"""

from typing import Any, Iterator, Tuple, Union

from .config import DataRequirement, TraversalConfig, TraversalStrategy
from .core.adapter import TreeAdapter
from .core.collector import (
    ChildCountCollector,
    DataCollector,
    FullNodeCollector,
    IdentifierCollector,
    MetadataCollector,
    PathCollector,
)
from .core.node import Node
from .core.traverser import TreeTraverser, create_traverser
from .errors import ConfigurationError


class ExecutionPlan:
    """Validated execution plan for tree traversal.

    The ExecutionPlan is the bridge between user intent (TraversalConfig)
    and execution. Configuration problems surface when the plan is built,
    before any node is visited.
    """

    def __init__(self, config: TraversalConfig, adapter: TreeAdapter):
        """Create and validate an execution plan.

        Args:
            config: User's traversal configuration
            adapter: Adapter for the backing store

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        self.config = config
        self.adapter = adapter

        config_errors = config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.traverser = self._select_traverser()
        self.collector = self._select_collector()

        self.nodes_processed = 0

    def _select_traverser(self) -> TreeTraverser:
        if self.config.strategy == TraversalStrategy.CUSTOM:
            return self.config.custom_traverser
        return create_traverser(self.config.strategy.value, self.adapter)

    def _select_collector(self) -> DataCollector:
        if self.config.data_requirements == DataRequirement.CUSTOM:
            return self.config.custom_collector

        collector_map = {
            DataRequirement.IDENTIFIER_ONLY: IdentifierCollector,
            DataRequirement.METADATA: MetadataCollector,
            DataRequirement.FULL_NODE: FullNodeCollector,
            DataRequirement.CHILDREN_COUNT: ChildCountCollector,
            DataRequirement.PATH: PathCollector,
        }

        collector_class = collector_map[self.config.data_requirements]
        return collector_class(self.adapter)

    def _limit_reached(self) -> bool:
        max_nodes = self.config.max_nodes
        return max_nodes is not None and self.nodes_processed >= max_nodes

    def execute(self, start: Union[Node, int]) -> Iterator[Tuple[Node, Any]]:
        """Execute the traversal plan.

        Args:
            start: Node (or node id) to start the traversal from

        Yields:
            Tuples of (node, collected_data)

        Raises:
            NodeNotFoundError: If start is an unknown id
        """
        if not isinstance(start, Node):
            start = self.adapter.get_node(start)

        self.nodes_processed = 0
        depth_config = self.config.depth

        for node, depth in self.traverser.traverse(
            start,
            max_depth=depth_config.explore_limit(),
            min_depth=depth_config.min_depth if depth_config.specific_depths is None else 0,
        ):
            if self._limit_reached():
                return

            if not depth_config.should_yield(depth):
                continue
            if not self.config.filter.should_include(node):
                continue

            data = self.collector.collect(node, depth)
            self.nodes_processed += 1
            yield node, data

    def get_execution_summary(self) -> dict:
        """Describe the assembled plan. Useful for debugging."""
        return {
            'strategy': self.config.strategy.value,
            'traverser': self.traverser.__class__.__name__,
            'collector': self.collector.__class__.__name__,
            'node_filter': self.config.filter.node_filter.value,
            'max_depth': self.config.depth.max_depth,
            'max_nodes': self.config.max_nodes,
            'nodes_processed': self.nodes_processed,
        }
