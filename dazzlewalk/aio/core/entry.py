"""Entries yielded by the async walker.

An Entry is an immutable record for one file or directory that passed the
traversal filters. Ownership passes to the caller when it is yielded.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class EntryKind(Enum):
    """What kind of filesystem object an entry refers to."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"      # Link that was not followed
    OTHER = "other"          # Sockets, FIFOs, devices


@dataclass(frozen=True)
class Entry:
    """One file or directory record produced by a traversal.

    Attributes:
        path: Path of the entry, joined onto the root as given
        name: Final path component
        kind: EntryKind of the entry (after following links, if enabled)
        depth: Depth of the directory that listed this entry (root is 0)
        is_symlink: Whether the entry itself is a symbolic link
        stats: stat result when the traversal collects stats, else None
    """

    path: Path
    name: str
    kind: EntryKind
    depth: int
    is_symlink: bool = False
    stats: Optional[os.stat_result] = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def size(self) -> Optional[int]:
        """Size in bytes, or None when stats were not collected."""
        return self.stats.st_size if self.stats is not None else None

    @property
    def mtime(self) -> Optional[float]:
        """Modification time as Unix timestamp, or None without stats."""
        return self.stats.st_mtime if self.stats is not None else None

    @property
    def extension(self) -> str:
        return self.path.suffix

    def __str__(self) -> str:
        return str(self.path)
