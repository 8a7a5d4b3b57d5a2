"""Async filesystem capability abstraction.

Defines the narrow interface the walker consumes to reach the filesystem:
open/read/close a directory stream, resolve a canonical path, and stat.
Key feature: directory contents are exposed as an async stream, so large
directories never have to be held in memory.
"""

import os
from abc import ABC, abstractmethod
from typing import Any, AsyncContextManager, AsyncIterator, Union

PathLike = Union[str, os.PathLike]


class AsyncDirectoryAdapter(ABC):
    """Abstract base class for filesystem adapters used by the walker.

    Implementations must raise OSError subclasses carrying POSIX errno
    values; the walker classifies them into WalkError kinds. Directory
    records yielded by open_directory() must behave like os.DirEntry
    (``name``, ``path``, ``is_dir()``, ``is_file()``, ``is_symlink()``).
    """

    @abstractmethod
    def open_directory(self, path: PathLike) -> AsyncContextManager[AsyncIterator[Any]]:
        """Open a directory for streaming.

        The returned async context manager must release the underlying
        handle on exit, whether iteration finished, was abandoned, or
        raised.

        Args:
            path: Directory to open

        Returns:
            Async context manager yielding an async iterator of entries
        """

    @abstractmethod
    async def realpath(self, path: PathLike) -> str:
        """Resolve a path to its canonical, symlink-free form.

        Args:
            path: Path to resolve

        Returns:
            Canonical path

        Raises:
            OSError: If the path cannot be resolved
        """

    @abstractmethod
    async def stat(self, path: PathLike, follow_symlinks: bool = True) -> os.stat_result:
        """Get stat information for a path.

        Args:
            path: Path to stat
            follow_symlinks: Stat the link target rather than the link

        Returns:
            stat result
        """

    async def entry_stat(self, entry: Any, follow_symlinks: bool = True) -> os.stat_result:
        """Get stat information for an entry from open_directory().

        Override to reuse information cached on the entry.

        Args:
            entry: Directory record
            follow_symlinks: Stat the link target rather than the link

        Returns:
            stat result
        """
        return await self.stat(entry.path, follow_symlinks=follow_symlinks)

    async def get_stats(self) -> dict:
        """Get adapter statistics.

        Returns:
            Dictionary of statistics (I/O counts, etc.)
        """
        return {}

    async def close(self):
        """Clean up adapter resources.

        Override if adapter needs cleanup.
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
