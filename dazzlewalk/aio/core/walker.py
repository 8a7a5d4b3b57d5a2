"""Async depth-first directory walker.

The walker is a recursive async generator: each directory is a frame that
checks cancellation and depth, registers its canonical identity when
following symlinks, opens the directory, and then filters, yields and
recurses into its entries one at a time. Output is strict pre-order: a
directory's own entry precedes its descendants, and a subtree is finished
before the parent moves on to the next sibling.
"""

import locale
import logging
import os
import stat as stat_module
from contextlib import AsyncExitStack
from functools import cmp_to_key
from pathlib import Path
from typing import Any, AsyncIterator, List, Optional, Set, Tuple

from ...config import SortMode, TraversalConfig
from ...errors import AbortedError, WalkError, classify_error, should_suppress
from ...matching import apply_filters
from .adapter import AsyncDirectoryAdapter, PathLike
from .entry import Entry, EntryKind

logger = logging.getLogger(__name__)


class AsyncDirectoryWalker:
    """Walks a directory tree according to a TraversalConfig.

    One walker may run several walks one after another; counters
    accumulate across them. Each walk() call gets its own visited set.

    Attributes:
        config: Sanitized traversal configuration
        adapter: Filesystem capability used for all I/O
        suppressed_errors: Errors skipped under the suppression policy
    """

    def __init__(
        self,
        config: Optional[TraversalConfig] = None,
        adapter: Optional[AsyncDirectoryAdapter] = None
    ):
        """Initialize the walker.

        Args:
            config: Sanitized configuration (defaults to TraversalConfig())
            adapter: Filesystem adapter (defaults to AsyncFileSystemAdapter)
        """
        if adapter is None:
            from ..adapters.filesystem import AsyncFileSystemAdapter
            adapter = AsyncFileSystemAdapter()

        self.config = config or TraversalConfig()
        self.adapter = adapter
        self.suppressed_errors: List[WalkError] = []
        self.directories_opened = 0
        self.entries_yielded = 0
        self.cycles_skipped = 0

    async def walk(self, root: PathLike) -> AsyncIterator[Entry]:
        """Walk the tree below root.

        The root itself is not yielded; its immediate children have
        depth 0.

        Args:
            root: Directory to start from

        Yields:
            Entry objects in pre-order depth-first sequence

        Raises:
            WalkError: On the first fault that is not suppressed
        """
        visited: Set[str] = set()
        frame = self._walk_directory(os.fspath(root), 0, visited)
        try:
            async for entry in frame:
                yield entry
        finally:
            await frame.aclose()

    def get_stats(self) -> dict:
        """Get traversal statistics.

        Returns:
            Dictionary of counters
        """
        return {
            'directories_opened': self.directories_opened,
            'entries_yielded': self.entries_yielded,
            'errors_suppressed': len(self.suppressed_errors),
            'cycles_skipped': self.cycles_skipped,
        }

    async def _walk_directory(
        self,
        dir_path: str,
        depth: int,
        visited: Set[str]
    ) -> AsyncIterator[Entry]:
        """Process one directory frame."""
        config = self.config

        if self._cancelled(dir_path):
            return
        if not config.allows_depth(depth):
            return

        try:
            if config.follow_symlinks and not await self._register_identity(dir_path, visited):
                return

            async with AsyncExitStack() as stack:
                try:
                    stream = await stack.enter_async_context(
                        self.adapter.open_directory(dir_path)
                    )
                except OSError as err:
                    self._fail_or_suppress(classify_error(err, dir_path), err)
                    return

                self.directories_opened += 1
                if self._cancelled(dir_path):
                    return

                entries = self._read_entries(stream, dir_path)
                stack.push_async_callback(entries.aclose)

                async for dir_entry in entries:
                    if self._cancelled(dir_path):
                        return

                    kind, is_link, resolved = await self._classify_kind(dir_entry)
                    is_dir = kind is EntryKind.DIRECTORY

                    if (not is_dir or config.yield_directories) and \
                            apply_filters(dir_entry.name, config.include, config.exclude):
                        stats = None
                        if config.with_stats:
                            stats = await self._fetch_stats(dir_entry, is_link and resolved)

                        entry = Entry(
                            path=Path(dir_entry.path),
                            name=dir_entry.name,
                            kind=kind,
                            depth=depth,
                            is_symlink=is_link,
                            stats=stats,
                        )
                        self.entries_yielded += 1
                        yield entry

                        if config.on_progress is not None:
                            config.on_progress(entry)

                    if is_dir:
                        child = self._walk_directory(dir_entry.path, depth + 1, visited)
                        try:
                            async for descendant in child:
                                yield descendant
                        finally:
                            await child.aclose()

        except WalkError as error:
            self._fail_or_suppress(error)

    async def _read_entries(self, stream: AsyncIterator[Any], dir_path: str) -> AsyncIterator[Any]:
        """Yield raw directory records, sorted when a sort mode is set.

        Unsorted directories are streamed straight from the handle; only a
        sorted sibling set is materialized.
        """
        try:
            if self.config.sort is SortMode.NONE:
                async for dir_entry in stream:
                    yield dir_entry
                return

            collected = []
            async for dir_entry in stream:
                if self._cancelled(dir_path):
                    break
                collected.append(dir_entry)
        except OSError as err:
            raise classify_error(err, dir_path) from err

        self._sort_entries(collected)
        for dir_entry in collected:
            yield dir_entry

    def _sort_entries(self, entries: List[Any]) -> None:
        config = self.config
        if config.sort is SortMode.CUSTOM:
            entries.sort(key=cmp_to_key(config.comparator))
        else:
            entries.sort(
                key=lambda dir_entry: locale.strxfrm(dir_entry.name),
                reverse=config.sort is SortMode.DESC
            )

    async def _classify_kind(self, dir_entry: Any) -> Tuple[EntryKind, bool, bool]:
        """Work out what a directory record refers to.

        Returns:
            Tuple of (kind, is_symlink, link_resolved)
        """
        try:
            if dir_entry.is_symlink():
                if not self.config.follow_symlinks:
                    return EntryKind.SYMLINK, True, False
                try:
                    target = await self.adapter.entry_stat(dir_entry, follow_symlinks=True)
                except OSError:
                    # Broken link
                    return EntryKind.FILE, True, False
                if stat_module.S_ISDIR(target.st_mode):
                    return EntryKind.DIRECTORY, True, True
                return EntryKind.FILE, True, True

            if dir_entry.is_dir(follow_symlinks=False):
                return EntryKind.DIRECTORY, False, False
            if dir_entry.is_file(follow_symlinks=False):
                return EntryKind.FILE, False, False
            return EntryKind.OTHER, False, False
        except OSError as err:
            raise classify_error(err, dir_entry.path) from err

    async def _fetch_stats(self, dir_entry: Any, follow_symlinks: bool) -> Optional[os.stat_result]:
        """Stat an entry about to be yielded; suppressed failures give None."""
        try:
            return await self.adapter.entry_stat(dir_entry, follow_symlinks=follow_symlinks)
        except OSError as err:
            self._fail_or_suppress(classify_error(err, dir_entry.path), err)
            return None

    async def _register_identity(self, dir_path: str, visited: Set[str]) -> bool:
        """Register a directory's canonical identity before opening it.

        If the path cannot be resolved, the literal path is registered
        instead, so an unresolvable link can still only be entered once.

        Returns:
            False if the directory was already visited in this walk
        """
        try:
            identity = await self.adapter.realpath(dir_path)
        except OSError as err:
            if dir_path in visited:
                return False
            visited.add(dir_path)
            self._fail_or_suppress(classify_error(err, dir_path), err)
            return True

        if identity in visited:
            self.cycles_skipped += 1
            logger.debug("Skipping already visited directory %s (%s)", dir_path, identity)
            return False
        visited.add(identity)
        return True

    def _cancelled(self, path: str) -> bool:
        """Poll the cancellation token.

        Raises:
            AbortedError: If cancelled and errors are not suppressed
        """
        token = self.config.cancellation_token
        if token is None or not token.cancelled:
            return False
        if not self.config.suppress_errors:
            raise AbortedError(path=path, reason=token.reason)
        return True

    def _fail_or_suppress(self, error: WalkError, cause: Optional[BaseException] = None) -> None:
        """Swallow a suppressible error, otherwise raise it."""
        if not should_suppress(error, self.config.suppress_errors):
            if cause is not None:
                raise error from cause
            raise error

        self.suppressed_errors.append(error)
        logger.debug("Skipping inaccessible path %s: %s", error.path, error)
