"""High-level async API for DazzleWalk.

This module provides traverse(), the entry point for walking a directory
tree, plus simple helpers for common questions about a tree. The helpers
are plain folds over traverse() and own no traversal logic; they accept
the same options.
"""

import asyncio
import os
import re
from bisect import bisect_right
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Pattern, Union

from ..config import TraversalConfig, sanitize_options
from ..errors import classify_error
from .core import AsyncDirectoryAdapter, AsyncDirectoryWalker, Entry, EntryKind

NO_EXTENSION = '[no extension]'


def traverse(
    root: Union[str, os.PathLike],
    options: Optional[Any] = None,
    *,
    adapter: Optional[AsyncDirectoryAdapter] = None,
    **overrides: Any
) -> AsyncIterator[Entry]:
    """Lazily walk a directory tree.

    Options are validated immediately, so configuration errors raise here
    rather than on first iteration. Each call returns a fresh iterator;
    there is no resumable cursor.

    Args:
        root: Directory to walk
        options: Mapping of options or a TraversalConfig
        adapter: Filesystem adapter (defaults to AsyncFileSystemAdapter)
        **overrides: Individual options (max_depth, include, exclude,
            yield_directories, follow_symlinks, suppress_errors,
            cancellation_token, sort, on_progress, with_stats)

    Returns:
        Async iterator of Entry objects in pre-order depth-first sequence

    Raises:
        ConfigurationError: If any option is invalid

    Example:
        >>> async for entry in traverse('src', include=re.compile(r'\\.py$')):
        ...     print(entry.depth, entry.path)
    """
    config = sanitize_options(options, **overrides)
    walker = AsyncDirectoryWalker(config, adapter)
    return walker.walk(root)


def _with(options: Optional[Any], overrides: Dict[str, Any], **forced: Any) -> TraversalConfig:
    """Sanitize helper options, forcing some values."""
    config = sanitize_options(options, **overrides)
    return sanitize_options(config, **forced) if forced else config


@dataclass
class SizeResult:
    """Summary returned by calculate_size()."""
    total_size: int
    file_count: int
    average_size: int
    size_kb: str
    size_mb: str


@dataclass
class FileInfo:
    """Per-file summary returned by get_largest_files() and find_recent_files()."""
    path: Path
    size: int
    modified: datetime

    @property
    def size_kb(self) -> str:
        return f"{self.size / 1024:.2f}"


@dataclass
class SearchMatch:
    """One regex match inside a file."""
    text: str
    index: int      # Character offset in the file
    line: int       # 1-based line number


@dataclass
class SearchResult:
    """All matches found in one file."""
    path: Path
    matches: List[SearchMatch] = field(default_factory=list)


async def find_files(root: Union[str, os.PathLike], options: Optional[Any] = None,
                     *, adapter: Optional[AsyncDirectoryAdapter] = None,
                     **overrides: Any) -> List[Path]:
    """Collect the paths of every entry a traversal yields.

    Example:
        >>> py_files = await find_files('src', include=re.compile(r'\\.py$'))
    """
    return [entry.path async for entry in traverse(root, options, adapter=adapter, **overrides)]


async def count_files(
    root: Union[str, os.PathLike],
    options: Optional[Any] = None,
    *,
    by_extension: bool = False,
    adapter: Optional[AsyncDirectoryAdapter] = None,
    **overrides: Any
) -> Union[int, Dict[str, int]]:
    """Count entries, optionally broken down by extension.

    Args:
        root: Directory to walk
        options: Traversal options
        by_extension: Return a breakdown instead of a single count

    Returns:
        The count, or a dict mapping extension (or ``'[no extension]'``)
        to count with the overall count under ``'total'``
    """
    if not by_extension:
        count = 0
        async for _ in traverse(root, options, adapter=adapter, **overrides):
            count += 1
        return count

    counts: Dict[str, int] = {'total': 0}
    async for entry in traverse(root, options, adapter=adapter, **overrides):
        extension = entry.extension or NO_EXTENSION
        counts[extension] = counts.get(extension, 0) + 1
        counts['total'] += 1
    return counts


async def calculate_size(root: Union[str, os.PathLike], options: Optional[Any] = None,
                         *, adapter: Optional[AsyncDirectoryAdapter] = None,
                         **overrides: Any) -> SizeResult:
    """Total up the size of every file in a tree.

    Entries whose stats could not be read are left out of the totals.
    """
    config = _with(options, overrides, with_stats=True)
    total_size = 0
    file_count = 0

    async for entry in traverse(root, config, adapter=adapter):
        if entry.stats is not None:
            total_size += entry.stats.st_size
            file_count += 1

    return SizeResult(
        total_size=total_size,
        file_count=file_count,
        average_size=round(total_size / file_count) if file_count else 0,
        size_kb=f"{total_size / 1024:.2f}",
        size_mb=f"{total_size / 1024 / 1024:.2f}",
    )


def _file_info(entry: Entry) -> FileInfo:
    return FileInfo(
        path=entry.path,
        size=entry.stats.st_size,
        modified=datetime.fromtimestamp(entry.stats.st_mtime),
    )


async def get_largest_files(
    root: Union[str, os.PathLike],
    options: Optional[Any] = None,
    *,
    limit: int = 10,
    adapter: Optional[AsyncDirectoryAdapter] = None,
    **overrides: Any
) -> List[FileInfo]:
    """Get the largest files in a tree, biggest first."""
    config = _with(options, overrides, with_stats=True)
    files = [
        _file_info(entry)
        async for entry in traverse(root, config, adapter=adapter)
        if entry.stats is not None
    ]
    files.sort(key=lambda info: info.size, reverse=True)
    return files[:limit]


async def find_recent_files(
    root: Union[str, os.PathLike],
    since: Union[datetime, float, int],
    options: Optional[Any] = None,
    *,
    adapter: Optional[AsyncDirectoryAdapter] = None,
    **overrides: Any
) -> List[FileInfo]:
    """Find files modified after a point in time, newest first.

    Args:
        root: Directory to walk
        since: datetime or Unix timestamp
        options: Traversal options

    Returns:
        FileInfo records for files modified strictly after ``since``
    """
    timestamp = since.timestamp() if isinstance(since, datetime) else float(since)
    config = _with(options, overrides, with_stats=True)
    files = [
        _file_info(entry)
        async for entry in traverse(root, config, adapter=adapter)
        if entry.stats is not None and entry.stats.st_mtime > timestamp
    ]
    files.sort(key=lambda info: info.modified, reverse=True)
    return files


async def build_tree(root: Union[str, os.PathLike], options: Optional[Any] = None,
                     *, adapter: Optional[AsyncDirectoryAdapter] = None,
                     **overrides: Any) -> Dict[str, Any]:
    """Build a nested dict describing a tree.

    Directories map to dicts of their children, files map to None.

    Example:
        >>> await build_tree('project')
        {'README.md': None, 'src': {'app.py': None}}
    """
    config = _with(options, overrides, yield_directories=True)
    tree: Dict[str, Any] = {}
    root_path = Path(root)

    async for entry in traverse(root, config, adapter=adapter):
        parts = entry.path.relative_to(root_path).parts
        current = tree
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        if entry.is_dir:
            current.setdefault(parts[-1], {})
        else:
            current[parts[-1]] = None

    return tree


async def find_duplicate_names(root: Union[str, os.PathLike], options: Optional[Any] = None,
                               *, adapter: Optional[AsyncDirectoryAdapter] = None,
                               **overrides: Any) -> Dict[str, List[Path]]:
    """Find names that occur more than once anywhere in a tree.

    Returns:
        Mapping of name to every path carrying it, for repeated names only
    """
    by_name: Dict[str, List[Path]] = defaultdict(list)
    async for entry in traverse(root, options, adapter=adapter, **overrides):
        by_name[entry.name].append(entry.path)

    return {name: paths for name, paths in by_name.items() if len(paths) > 1}


async def group_by_extension(root: Union[str, os.PathLike], options: Optional[Any] = None,
                             *, adapter: Optional[AsyncDirectoryAdapter] = None,
                             **overrides: Any) -> Dict[str, List[Path]]:
    """Group entry paths by extension (``'[no extension]'`` for none)."""
    groups: Dict[str, List[Path]] = defaultdict(list)
    async for entry in traverse(root, options, adapter=adapter, **overrides):
        groups[entry.extension or NO_EXTENSION].append(entry.path)
    return dict(groups)


def _line_starts(content: str) -> List[int]:
    starts = [0]
    starts.extend(match.end() for match in re.finditer('\n', content))
    return starts


async def search_in_files(
    root: Union[str, os.PathLike],
    pattern: Union[str, Pattern],
    options: Optional[Any] = None,
    encoding: str = 'utf-8',
    *,
    adapter: Optional[AsyncDirectoryAdapter] = None,
    **overrides: Any
) -> List[SearchResult]:
    """Search the text of every file in a tree for a regex.

    Files are read whole, so this is meant for source-sized files. Files
    that cannot be read or decoded are skipped unless suppress_errors is
    False.

    Args:
        root: Directory to walk
        pattern: Regex string or compiled pattern
        options: Traversal options
        encoding: Text encoding used to read files

    Returns:
        One SearchResult per file with at least one match
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    config = sanitize_options(options, **overrides)
    results: List[SearchResult] = []

    async for entry in traverse(root, config, adapter=adapter):
        if entry.kind is EntryKind.DIRECTORY:
            continue
        try:
            content = await asyncio.to_thread(entry.path.read_text, encoding=encoding)
        except (OSError, UnicodeDecodeError) as err:
            if config.suppress_errors:
                continue
            if isinstance(err, OSError):
                raise classify_error(err, entry.path) from err
            raise

        found = list(regex.finditer(content))
        if not found:
            continue

        starts = _line_starts(content)
        results.append(SearchResult(
            path=entry.path,
            matches=[
                SearchMatch(text=match.group(0), index=match.start(),
                            line=bisect_right(starts, match.start()))
                for match in found
            ],
        ))

    return results


async def find_empty_directories(root: Union[str, os.PathLike], options: Optional[Any] = None,
                                 *, adapter: Optional[AsyncDirectoryAdapter] = None,
                                 **overrides: Any) -> List[Path]:
    """Find directories in a tree that contain nothing at all."""
    config = _with(options, overrides, yield_directories=True)
    empty: List[Path] = []

    async for entry in traverse(root, config, adapter=adapter):
        if not entry.is_dir:
            continue
        try:
            contents = await asyncio.to_thread(os.listdir, entry.path)
        except OSError as err:
            if config.suppress_errors:
                continue
            raise classify_error(err, entry.path) from err
        if not contents:
            empty.append(entry.path)

    return empty
