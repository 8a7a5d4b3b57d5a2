"""Core abstractions for async directory traversal.

This module defines the filesystem capability interface, the entry record
and the walker that composes them.
"""

from .entry import Entry, EntryKind
from .adapter import AsyncDirectoryAdapter
from .walker import AsyncDirectoryWalker

__all__ = [
    # Entries
    'Entry',
    'EntryKind',
    # Adapter
    'AsyncDirectoryAdapter',
    # Walker
    'AsyncDirectoryWalker',
]
