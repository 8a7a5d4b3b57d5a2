"""Asynchronous directory traversal for DazzleWalk.

This package contains the native async/await walker, the filesystem
adapter it reads through, and a high-level API built on traverse().
"""

# Core abstractions
from .core import (
    Entry,
    EntryKind,
    AsyncDirectoryAdapter,
    AsyncDirectoryWalker,
)

# Adapters
from .adapters import (
    AsyncFileSystemAdapter,
    DirectoryStream,
)

# High-level API
from .api import (
    traverse,
    find_files,
    count_files,
    calculate_size,
    get_largest_files,
    find_recent_files,
    build_tree,
    find_duplicate_names,
    search_in_files,
    find_empty_directories,
    group_by_extension,
    SizeResult,
    FileInfo,
    SearchMatch,
    SearchResult,
)

__all__ = [
    # Core abstractions
    'Entry',
    'EntryKind',
    'AsyncDirectoryAdapter',
    'AsyncDirectoryWalker',
    # Adapters
    'AsyncFileSystemAdapter',
    'DirectoryStream',
    # High-level API
    'traverse',
    'find_files',
    'count_files',
    'calculate_size',
    'get_largest_files',
    'find_recent_files',
    'build_tree',
    'find_duplicate_names',
    'search_in_files',
    'find_empty_directories',
    'group_by_extension',
    # Result types
    'SizeResult',
    'FileInfo',
    'SearchMatch',
    'SearchResult',
]
