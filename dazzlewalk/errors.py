"""
Error taxonomy and classification for DazzleWalk.

Raw filesystem failures (``OSError`` and friends) are mapped onto a closed
set of error kinds so callers can react to *what* went wrong without
inspecting errno values themselves. The suppression decision that the
traversal engine applies to every fault also lives here.
"""

import errno
from enum import Enum
from typing import Any, Optional


def _rebuild(cls, args, kwargs):
    """Recreate an error through its constructor when unpickling."""
    return cls(*args, **kwargs)


class ErrorKind(Enum):
    """Closed set of traversal failure kinds."""
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    INVALID_PATH = "invalid_path"
    SYMLINK_LOOP = "symlink_loop"
    ABORTED = "aborted"
    MAX_DEPTH_EXCEEDED = "max_depth_exceeded"
    UNKNOWN = "unknown"


class ConfigurationError(ValueError):
    """Raised when traversal options or filter rules are invalid.

    Configuration errors are never subject to the suppression policy.
    """


class InvalidPatternError(ConfigurationError, TypeError):
    """Raised when a filter rule has an unsupported shape."""


class WalkError(Exception):
    """Base class for all classified traversal errors.

    Instances of the base class carry ``ErrorKind.UNKNOWN``; subclasses
    pin a specific kind. Attributes are read-only once created.
    """

    kind = ErrorKind.UNKNOWN
    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        code: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        object.__setattr__(self, '_path', path)
        object.__setattr__(self, '_code', code if code is not None else self.default_code)
        object.__setattr__(self, '_cause', cause)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        # Python sets __traceback__, __cause__ and __context__ during raise.
        if getattr(self, '_frozen', False) and not name.startswith('__'):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    @property
    def path(self) -> Optional[str]:
        """Path that was being processed when the error occurred."""
        return self._path

    @property
    def code(self) -> Optional[str]:
        """Symbolic error code (e.g. ``'EACCES'``), if known."""
        return self._code

    @property
    def cause(self) -> Optional[BaseException]:
        """The raw exception this error was classified from."""
        return self._cause

    def __reduce__(self):
        return _rebuild, (
            type(self), (str(self),),
            {'path': self._path, 'code': self._code, 'cause': self._cause},
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, path={self._path!r}, code={self._code!r})"


class PermissionDeniedError(WalkError):
    kind = ErrorKind.PERMISSION_DENIED
    default_code = 'EACCES'


class PathNotFoundError(WalkError):
    kind = ErrorKind.NOT_FOUND
    default_code = 'ENOENT'


class InvalidPathError(WalkError):
    kind = ErrorKind.INVALID_PATH
    default_code = 'EINVAL'


class SymlinkLoopError(WalkError):
    kind = ErrorKind.SYMLINK_LOOP
    default_code = 'ELOOP'


class AbortedError(WalkError):
    """Raised when a cancelled traversal must surface the cancellation."""

    kind = ErrorKind.ABORTED
    default_code = 'ABORT_ERR'

    def __init__(
        self,
        message: str = "Operation was aborted",
        *,
        path: Optional[str] = None,
        reason: Any = None
    ):
        super().__init__(message, path=path)
        object.__setattr__(self, '_reason', reason)

    def __reduce__(self):
        return _rebuild, (type(self), (str(self),), {'path': self._path, 'reason': self._reason})

    @property
    def reason(self) -> Any:
        """Reason given to the cancellation token, if any."""
        return self._reason


class MaxDepthExceededError(WalkError):
    """Explicit depth-violation report, distinct from silent pruning."""

    kind = ErrorKind.MAX_DEPTH_EXCEEDED
    default_code = 'EMAXDEPTH'

    def __init__(self, depth: int, path: str):
        super().__init__(f"Maximum depth {depth} exceeded at {path}", path=path)
        object.__setattr__(self, '_depth', depth)

    def __reduce__(self):
        return type(self), (self._depth, self._path)

    @property
    def depth(self) -> int:
        return self._depth


_PERMISSION_ERRNOS = frozenset({errno.EACCES, errno.EPERM})


def _errno_symbol(err: BaseException) -> Optional[str]:
    """Get the symbolic errno name for an exception, if it has one."""
    number = getattr(err, 'errno', None)
    if number is None:
        return None
    return errno.errorcode.get(number, str(number))


def classify_error(err: BaseException, path: Any = None) -> WalkError:
    """Convert a raw error into a classified WalkError.

    Args:
        err: The exception raised by a filesystem operation
        path: Path being processed when the error occurred

    Returns:
        A WalkError subclass matching the failure. Already classified
        errors are returned unchanged.
    """
    if isinstance(err, WalkError):
        return err

    path = str(path) if path is not None else getattr(err, 'filename', None)
    number = getattr(err, 'errno', None)

    if number in _PERMISSION_ERRNOS or isinstance(err, PermissionError):
        return PermissionDeniedError(
            f"Permission denied: {path}", path=path,
            code=_errno_symbol(err) or 'EACCES', cause=err
        )
    if number == errno.ENOENT or isinstance(err, FileNotFoundError):
        return PathNotFoundError(f"Path not found: {path}", path=path, cause=err)
    if number == errno.ELOOP:
        return SymlinkLoopError(f"Too many symbolic links: {path}", path=path, cause=err)
    if number == errno.ENOTDIR or isinstance(err, NotADirectoryError):
        return InvalidPathError(
            f"Not a directory: {path}", path=path, code='ENOTDIR', cause=err
        )

    message = getattr(err, 'strerror', None) or str(err) or 'Unknown error'
    return WalkError(message, path=path, code=_errno_symbol(err), cause=err)


def should_suppress(err: BaseException, suppress_errors: bool = True) -> bool:
    """Decide whether an error may be silently skipped.

    Only permission noise is ever suppressed; every other failure must be
    handled explicitly by the caller.

    Args:
        err: Classified or raw error
        suppress_errors: The traversal's suppression policy

    Returns:
        True if the error should be swallowed
    """
    if not suppress_errors:
        return False

    if isinstance(err, WalkError):
        return err.kind is ErrorKind.PERMISSION_DENIED

    return isinstance(err, PermissionError) or getattr(err, 'errno', None) in _PERMISSION_ERRNOS
