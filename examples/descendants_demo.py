#!/usr/bin/env python3
"""
Build a random ancestry-style tree, persist it and query its descendants.

This example demonstrates:
- Generating a seeded random binary tree
- Querying leaves below an internal node in memory
- Running the same query as recursive SQL against SQLite
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from treestore import TreeDatabase, TreeStore, get_tree_stats, random_binary_tree


def main():
    """Demonstrate in-memory and SQL descendant queries."""
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 42
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    store = TreeStore.from_source(random_binary_tree(10, seed=seed))
    root = store.roots()[0]

    print(f"Random tree (seed {seed}): {store}")
    print("-" * 50)
    for node in store.nodes():
        children = [c.id for c in store.get_children(node.id)]
        print(f"  node {node.id:>2}  rank {node.rank:>2}  children {children}")

    internal = [n for n in store.nodes() if not n.is_leaf and n.id != root.id]
    target = internal[0] if internal else root

    in_memory = [n.id for n in store.descendants_of(target.id)]
    print(f"\nLeaves below {target.id} (in memory): {in_memory}")

    with TreeDatabase() as db:
        db.save(store)
        from_sql = sorted(n.id for n in db.descendants_of(target.id))
        print(f"Leaves below {target.id} (SQL):       {from_sql}")

    stats = get_tree_stats(store, root.id)
    print(f"\nTree Summary:")
    print(f"  Nodes: {stats['total_nodes']}")
    print(f"  Leaves: {stats['leaf_nodes']}")
    print(f"  Max depth: {stats['max_depth']}")


if __name__ == "__main__":
    main()
