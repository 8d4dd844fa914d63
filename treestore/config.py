"""Configuration system for treestore.

This module defines how users specify their traversal requirements,
including which nodes they want back, how deep to go and what data to
collect from every node that is yielded.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Set


class NodeFilter(Enum):
    """Which kinds of nodes a descendant query yields."""
    LEAVES_ONLY = "leaves"
    INTERNAL_ONLY = "internal"
    ALL = "all"

    def matches(self, node) -> bool:
        """Check whether a node passes this filter."""
        if self is NodeFilter.LEAVES_ONLY:
            return node.is_leaf
        if self is NodeFilter.INTERNAL_ONLY:
            return not node.is_leaf
        return True


class DataRequirement(Enum):
    """Specifies what data is collected from each yielded node."""
    IDENTIFIER_ONLY = "identifier"      # Just node ids
    METADATA = "metadata"               # Node record as a dict
    CHILDREN_COUNT = "children_count"   # Number of immediate children
    FULL_NODE = "full"                  # Node records themselves
    PATH = "path"                       # Ids from the root down to the node
    CUSTOM = "custom"                   # User-defined collection


class TraversalStrategy(Enum):
    """How to traverse the tree."""
    BREADTH_FIRST = "bfs"           # Level by level
    DEPTH_FIRST_PRE = "dfs_pre"     # Parent before children
    DEPTH_FIRST_POST = "dfs_post"   # Children before parent
    LEVEL_ORDER = "level"           # Grouped by level
    SIBLING_CHAIN = "sibling"       # left_child / right_sib expansion
    CUSTOM = "custom"               # User-defined traverser


@dataclass
class FilterConfig:
    """Configuration for filtering nodes during traversal.

    Filters only decide what is yielded; excluded nodes are still
    traversed so their descendants can be reached.
    """

    node_filter: NodeFilter = NodeFilter.ALL
    include_filter: Optional[Callable[[Any], bool]] = None
    exclude_filter: Optional[Callable[[Any], bool]] = None

    def should_include(self, node) -> bool:
        """Check if a node should be yielded.

        Args:
            node: Node to check

        Returns:
            True if node passes all filters
        """
        if not self.node_filter.matches(node):
            return False

        # Exclusion takes precedence
        if self.exclude_filter and self.exclude_filter(node):
            return False

        if self.include_filter:
            return self.include_filter(node)

        return True


@dataclass
class DepthConfig:
    """Configuration for depth-based filtering."""

    min_depth: int = 0                          # Minimum depth to yield
    max_depth: Optional[int] = None             # Maximum depth to traverse
    specific_depths: Optional[Set[int]] = None  # Only these specific depths

    def should_yield(self, depth: int) -> bool:
        """Check if nodes at this depth should be yielded."""
        if self.specific_depths is not None:
            return depth in self.specific_depths

        if depth < self.min_depth:
            return False
        if self.max_depth is not None and depth > self.max_depth:
            return False

        return True

    def explore_limit(self) -> Optional[int]:
        """Deepest level the traverser needs to reach (None = unlimited)."""
        if self.specific_depths is not None:
            return max(self.specific_depths, default=0)
        return self.max_depth


@dataclass
class TraversalConfig:
    """Complete configuration for tree traversal.

    This is the primary way users specify what they want from a traversal.
    The ExecutionPlan validates it before any node is visited.
    """

    # Traversal algorithm
    strategy: TraversalStrategy = TraversalStrategy.DEPTH_FIRST_PRE
    custom_traverser: Optional[Any] = None

    # Depth control
    depth: DepthConfig = field(default_factory=DepthConfig)

    # Node filtering
    filter: FilterConfig = field(default_factory=FilterConfig)

    # Data collection
    data_requirements: DataRequirement = DataRequirement.FULL_NODE
    custom_collector: Optional[Any] = None

    # Stop after this many nodes have been yielded
    max_nodes: Optional[int] = None

    @classmethod
    def shallow_scan(cls, max_depth: int = 1) -> 'TraversalConfig':
        """Create config for visiting a node and its nearest descendants.

        Args:
            max_depth: How deep to scan (default 1 = immediate children only)
        """
        return cls(
            strategy=TraversalStrategy.BREADTH_FIRST,
            depth=DepthConfig(max_depth=max_depth),
        )

    @classmethod
    def leaves_only(cls,
                    data_requirement: DataRequirement = DataRequirement.IDENTIFIER_ONLY
                    ) -> 'TraversalConfig':
        """Create config that reports the leaves under the start node."""
        return cls(
            strategy=TraversalStrategy.SIBLING_CHAIN,
            filter=FilterConfig(node_filter=NodeFilter.LEAVES_ONLY),
            data_requirements=data_requirement,
        )

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.depth.min_depth < 0:
            errors.append("min_depth cannot be negative")

        if self.depth.max_depth is not None:
            if self.depth.max_depth < 0:
                errors.append("max_depth cannot be negative")
            if self.depth.max_depth < self.depth.min_depth:
                errors.append("max_depth cannot be less than min_depth")

        if self.depth.specific_depths is not None:
            if any(d < 0 for d in self.depth.specific_depths):
                errors.append("specific_depths cannot contain negative depths")

        if self.max_nodes is not None and self.max_nodes <= 0:
            errors.append("max_nodes must be positive")

        if self.strategy == TraversalStrategy.CUSTOM and self.custom_traverser is None:
            errors.append("custom_traverser required when strategy is CUSTOM")

        if self.data_requirements == DataRequirement.CUSTOM and self.custom_collector is None:
            errors.append("custom_collector required when data_requirements is CUSTOM")

        return errors
