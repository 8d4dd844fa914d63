"""Testing utilities for treestore consumers."""

from .fixtures import InvariantChecker, example_source

__all__ = ['InvariantChecker', 'example_source']
