"""Adapters for the backing stores treestore can traverse."""

from .store import StoreAdapter, DatabaseAdapter

__all__ = [
    "StoreAdapter",
    "DatabaseAdapter",
]
