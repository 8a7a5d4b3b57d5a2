"""Async adapters that give the walker access to a filesystem."""

from .filesystem import (
    AsyncFileSystemAdapter,
    DirectoryStream,
)

__all__ = [
    'AsyncFileSystemAdapter',
    'DirectoryStream',
]
