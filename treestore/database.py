"""SQLite persistence for treestore.

A TreeStore can be saved into two relations, ``nodes`` and ``edges``, and
queried there with recursive SQL: the descendant query below is the
relational twin of TreeStore.descendants_of(). A TreeDatabase owns one
connection for the duration of a ``with`` block and closes it on exit.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from .core.node import Node
from .errors import InvalidTreeError, NodeNotFoundError, NotBuiltError
from .sources import TraversalSource
from .store import TreeStore

logger = logging.getLogger(__name__)

_NODE_COLUMNS = "id, is_leaf, rank, left_child, right_sib"

# Recursive descent through left_child / right_sib. The start node's own
# right_sib must not be followed, or its siblings' subtrees leak in.
_DESCENDANTS_SQL = f"""
    WITH RECURSIVE descendants({_NODE_COLUMNS}) AS (
        SELECT {_NODE_COLUMNS} FROM nodes WHERE id = :start
        UNION
        SELECT t.id, t.is_leaf, t.rank, t.left_child, t.right_sib
        FROM nodes AS t
        JOIN descendants AS p
          ON t.id = p.left_child
          OR (t.id = p.right_sib AND p.id != :start)
    )
    SELECT {_NODE_COLUMNS} FROM descendants
"""

_CHILDREN_SQL = f"""
    WITH RECURSIVE chain({_NODE_COLUMNS}, pos) AS (
        SELECT c.id, c.is_leaf, c.rank, c.left_child, c.right_sib, 0
        FROM nodes AS p
        JOIN nodes AS c ON c.id = p.left_child
        WHERE p.id = :parent
        UNION ALL
        SELECT n.id, n.is_leaf, n.rank, n.left_child, n.right_sib, chain.pos + 1
        FROM nodes AS n
        JOIN chain ON n.id = chain.right_sib
    )
    SELECT {_NODE_COLUMNS} FROM chain ORDER BY pos
"""

_ROOT_SQL = """
    WITH RECURSIVE ancestry(id, depth) AS (
        SELECT :node, 0
        UNION ALL
        SELECT e.parent, a.depth + 1
        FROM edges AS e
        JOIN ancestry AS a ON e.child = a.id
    )
    SELECT id FROM ancestry ORDER BY depth DESC LIMIT 1
"""


def _row_to_node(row: sqlite3.Row) -> Node:
    return Node(
        id=row["id"],
        is_leaf=bool(row["is_leaf"]),
        rank=row["rank"],
        left_child=row["left_child"],
        right_sib=row["right_sib"],
    )


class TreeDatabase:
    """SQLite database holding one persisted forest.

    Example:
        >>> with TreeDatabase() as db:
        ...     db.save(store)
        ...     leaves = db.descendants_of(16)
    """

    def __init__(self, db_path: Union[str, Path] = ":memory:") -> None:
        """Remember where the database lives; nothing is opened yet."""
        self.db_path = str(db_path)
        self.conn: Optional[sqlite3.Connection] = None

    def __enter__(self) -> 'TreeDatabase':
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> 'TreeDatabase':
        """Open the connection and create the schema if needed."""
        if self.conn is not None:
            return self
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self._create_schema()
        logger.debug("Opened tree database at %s", self.db_path)
        return self

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            logger.debug("Closed tree database at %s", self.db_path)

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise RuntimeError("Database connection not established")
        return self.conn

    def _create_schema(self) -> None:
        cursor = self._connection().cursor()
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS nodes (
                id INTEGER PRIMARY KEY,
                is_leaf BOOLEAN,
                rank INTEGER,
                left_child INTEGER NULL,
                right_sib INTEGER NULL
            )
        """
        )
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS edges (
                id INTEGER PRIMARY KEY,
                parent INTEGER,
                child INTEGER,
                FOREIGN KEY (parent) REFERENCES nodes(id),
                FOREIGN KEY (child) REFERENCES nodes(id)
            )
        """
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_edges_child ON edges(child)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_edges_parent ON edges(parent)")
        self._connection().commit()

    # Writing

    def save(self, store: TreeStore) -> None:
        """Write a built store, replacing whatever the database held.

        Runs in a single transaction; nodes go in before edges so the
        foreign keys always resolve.

        Raises:
            NotBuiltError: If the store has not been built
        """
        if not store.is_built:
            raise NotBuiltError("Cannot save a TreeStore that has not been built")
        conn = self._connection()
        with conn:
            conn.execute("DELETE FROM edges")
            conn.execute("DELETE FROM nodes")
            conn.executemany(
                f"INSERT INTO nodes ({_NODE_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                [(n.id, int(n.is_leaf), n.rank, n.left_child, n.right_sib)
                 for n in store.nodes()],
            )
            conn.executemany(
                "INSERT INTO edges (id, parent, child) VALUES (?, ?, ?)",
                [(e.id, e.parent, e.child) for e in store.edges()],
            )
        logger.debug("Saved %d nodes and %d edges", len(store), len(store.edges()))

    # Reading

    def load(self) -> TreeStore:
        """Rebuild a TreeStore from the persisted relations.

        The store is reconstructed from the left_child / right_sib columns
        and the result is checked against the edges table.

        Raises:
            InvalidTreeError: If the relations are empty or disagree
        """
        conn = self._connection()
        rows = conn.execute(f"SELECT {_NODE_COLUMNS} FROM nodes ORDER BY id").fetchall()
        if not rows:
            raise InvalidTreeError("Database holds no nodes")

        num_nodes = rows[-1]["id"] + 1
        left_child: List[Optional[int]] = [None] * num_nodes
        right_sib: List[Optional[int]] = [None] * num_nodes
        for row in rows:
            left_child[row["id"]] = row["left_child"]
            right_sib[row["id"]] = row["right_sib"]

        roots = [row["id"] for row in conn.execute(
            """
            SELECT id FROM nodes
            WHERE id NOT IN (SELECT child FROM edges)
            ORDER BY rank DESC, id
            """
        )]
        store = TreeStore.from_source(TraversalSource(left_child, right_sib, roots))
        if len(store) != len(rows):
            raise InvalidTreeError(
                f"{len(rows) - len(store)} persisted nodes are unreachable from any root"
            )

        edge_count = 0
        for row in conn.execute("SELECT parent, child FROM edges"):
            edge_count += 1
            parent = store.parent_of(row["child"])
            if parent is None or parent.id != row["parent"]:
                raise InvalidTreeError(
                    f"Edge {row['parent']} -> {row['child']} disagrees with the "
                    f"left_child/right_sib columns"
                )
        if edge_count != len(store.edges()):
            raise InvalidTreeError(
                f"Edges table has {edge_count} rows but the links describe "
                f"{len(store.edges())} parent/child relations"
            )
        logger.debug("Loaded %d nodes from %s", len(store), self.db_path)
        return store

    def get_node(self, node_id: int) -> Node:
        """Fetch one node record.

        Raises:
            NodeNotFoundError: If the id is not in the database
        """
        row = self._connection().execute(
            f"SELECT {_NODE_COLUMNS} FROM nodes WHERE id = ?", (node_id,)
        ).fetchone()
        if row is None:
            raise NodeNotFoundError(node_id)
        return _row_to_node(row)

    def get_children(self, node_id: int) -> Tuple[Node, ...]:
        """Fetch the children of a node, left to right."""
        self.get_node(node_id)
        rows = self._connection().execute(_CHILDREN_SQL, {"parent": node_id})
        return tuple(_row_to_node(row) for row in rows)

    def parent_of(self, node_id: int) -> Optional[Node]:
        """Fetch the parent of a node, or None for a root."""
        self.get_node(node_id)
        row = self._connection().execute(
            "SELECT parent FROM edges WHERE child = ?", (node_id,)
        ).fetchone()
        return None if row is None else self.get_node(row["parent"])

    def descendants_of(self, node_id: int, leaves_only: bool = True) -> List[Node]:
        """Run the recursive descendant query rooted at ``node_id``.

        Returns the same set of nodes as TreeStore.descendants_of(); the
        order is whatever SQLite produces.

        Args:
            node_id: Start of the query
            leaves_only: Keep only rows without a left child
        """
        self.get_node(node_id)
        sql = _DESCENDANTS_SQL
        if leaves_only:
            sql += " WHERE left_child IS NULL"
        rows = self._connection().execute(sql, {"start": node_id})
        return [_row_to_node(row) for row in rows]

    def root_of(self, node_id: int) -> Node:
        """Follow the edges table upwards to the root of ``node_id``'s tree."""
        self.get_node(node_id)
        row = self._connection().execute(_ROOT_SQL, {"node": node_id}).fetchone()
        return self.get_node(row["id"])

    def iter_nodes(self) -> Iterator[Node]:
        """Yield every persisted node ordered by id."""
        rows = self._connection().execute(f"SELECT {_NODE_COLUMNS} FROM nodes ORDER BY id")
        for row in rows:
            yield _row_to_node(row)

    def __len__(self) -> int:
        return self._connection().execute("SELECT COUNT(*) FROM nodes").fetchone()[0]
