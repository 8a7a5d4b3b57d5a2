"""Test fixtures for DazzleWalk consumers.

These helpers build small directory trees and simulate filesystem faults
that are awkward to produce for real, such as permission errors when the
test suite runs as root.
"""

import errno
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Set, Union

from ..aio.adapters.filesystem import AsyncFileSystemAdapter
from ..aio.core.adapter import PathLike


def make_tree(root: Union[str, os.PathLike], layout: Dict[str, Any]) -> Path:
    """Create files and directories below root from a nested dict.

    Dict values become directories; str or bytes values become files with
    that content.

    Example:
        make_tree(tmp_path, {
            'src': {'app.py': 'print(1)', 'empty': {}},
            'README.md': '# Project',
        })

    Returns:
        root as a Path
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    for name, content in layout.items():
        path = root / name
        if isinstance(content, dict):
            make_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    return root


class DenyingFileSystemAdapter(AsyncFileSystemAdapter):
    """Filesystem adapter that fails on chosen paths.

    Opening a directory in ``denied`` raises an OSError with ``error_code``
    (EACCES by default). Stat calls for paths in ``denied_stats`` raise the
    same way. Everything else is delegated to the real filesystem.

    Example:
        adapter = DenyingFileSystemAdapter(denied=[tmp_path / 'secret'])
        entries = [e async for e in traverse(tmp_path, adapter=adapter)]
        assert adapter.denied_attempts == 1
    """

    def __init__(
        self,
        denied: Iterable[PathLike] = (),
        denied_stats: Iterable[PathLike] = (),
        error_code: int = errno.EACCES,
        batch_size: int = 256
    ):
        super().__init__(batch_size=batch_size)
        self.denied: Set[str] = {os.fspath(path) for path in denied}
        self.denied_stats: Set[str] = {os.fspath(path) for path in denied_stats}
        self.error_code = error_code
        self.denied_attempts = 0

    def _raise_for(self, path: PathLike, blocked: Set[str]) -> None:
        path = os.fspath(path)
        if path in blocked:
            self.denied_attempts += 1
            raise OSError(self.error_code, os.strerror(self.error_code), path)

    def open_directory(self, path: PathLike):
        self._raise_for(path, self.denied)
        return super().open_directory(path)

    async def stat(self, path: PathLike, follow_symlinks: bool = True) -> os.stat_result:
        self._raise_for(path, self.denied_stats)
        return await super().stat(path, follow_symlinks=follow_symlinks)

    async def entry_stat(self, entry: Any, follow_symlinks: bool = True) -> os.stat_result:
        self._raise_for(entry.path, self.denied_stats)
        return await super().entry_stat(entry, follow_symlinks=follow_symlinks)
