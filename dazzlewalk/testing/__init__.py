"""Testing utilities for DazzleWalk consumers."""

from .fixtures import DenyingFileSystemAdapter, make_tree

__all__ = ['DenyingFileSystemAdapter', 'make_tree']
