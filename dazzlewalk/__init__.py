"""DazzleWalk - Async Directory Tree Traversal.

DazzleWalk lazily walks a directory tree as an async iterator, with depth
limits, include/exclude filters, symlink cycle detection, sibling sorting,
stats, progress callbacks, cancellation and error suppression.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzlewalk import traverse

    async for entry in traverse('src', max_depth=2, include='.py'):
        print(entry.depth, entry.path)
━━━━━━━━━━━━━━━━━━━━━━━━━━

Glob patterns compile to the same filter rules:

    from dazzlewalk import compile_glob
    traverse('src', include=compile_glob('*.py'))
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    ErrorKind,
    ConfigurationError,
    InvalidPatternError,
    WalkError,
    PermissionDeniedError,
    PathNotFoundError,
    InvalidPathError,
    SymlinkLoopError,
    AbortedError,
    MaxDepthExceededError,
    classify_error,
    should_suppress,
)

# Options
from .cancellation import CancellationToken
from .config import (
    SortMode,
    TraversalConfig,
    DEFAULT_OPTIONS,
    sanitize_options,
)

# Pattern matching
from .matching import (
    RuleKind,
    FilterRule,
    MATCH_ALL,
    make_rule,
    matches,
    apply_filters,
)
from .glob import (
    glob_to_regex,
    compile_glob,
    match_glob,
    create_glob_filter,
    PATTERNS,
)

# Async engine and API
from . import aio
from .aio import (
    Entry,
    EntryKind,
    AsyncDirectoryWalker,
    AsyncFileSystemAdapter,
    traverse,
)

__all__ = [
    "__version__",
    "aio",
    # Errors
    "ErrorKind",
    "ConfigurationError",
    "InvalidPatternError",
    "WalkError",
    "PermissionDeniedError",
    "PathNotFoundError",
    "InvalidPathError",
    "SymlinkLoopError",
    "AbortedError",
    "MaxDepthExceededError",
    "classify_error",
    "should_suppress",
    # Options
    "CancellationToken",
    "SortMode",
    "TraversalConfig",
    "DEFAULT_OPTIONS",
    "sanitize_options",
    # Pattern matching
    "RuleKind",
    "FilterRule",
    "MATCH_ALL",
    "make_rule",
    "matches",
    "apply_filters",
    "glob_to_regex",
    "compile_glob",
    "match_glob",
    "create_glob_filter",
    "PATTERNS",
    # Traversal
    "Entry",
    "EntryKind",
    "AsyncDirectoryWalker",
    "AsyncFileSystemAdapter",
    "traverse",
]
