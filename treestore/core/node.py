"""Node and Edge records for treestore.

Both records are intentionally kept simple - they are immutable data
containers. Navigation logic lives in the TreeStore and the TreeAdapter,
which is what lets the same records be traversed in memory or from a
database.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Node:
    """A node of a left-child/right-sibling encoded tree.

    Attributes:
        id: Unique, non-negative identifier
        is_leaf: True iff the node has no left child
        rank: Strictly smaller than the parent's rank; the root of a
            tree carries the maximum rank in that tree
        left_child: Id of the left-most child, None for leaves
        right_sib: Id of the next sibling to the right, None for the
            right-most child of a parent (and for roots)
    """

    id: int
    is_leaf: bool
    rank: int
    left_child: Optional[int] = None
    right_sib: Optional[int] = None

    def identifier(self) -> int:
        """Return the node id (used by traversers and collectors)."""
        return self.id

    def metadata(self) -> Dict[str, Any]:
        """Return the record as a plain dictionary."""
        return asdict(self)

    def __str__(self) -> str:
        return str(self.id)


@dataclass(frozen=True)
class Edge:
    """A parent -> child relation.

    The existence of an edge implies the child's parent is ``parent``.
    """

    id: int
    parent: int
    child: int

    def metadata(self) -> Dict[str, Any]:
        """Return the record as a plain dictionary."""
        return asdict(self)
