"""Cooperative cancellation for traversals.

A CancellationToken is a write-once flag shared between the code that
drives a traversal and the code that wants to stop it. The walker polls
the token at frame entry, after opening a directory, and before each
sibling; it is never used to interrupt I/O that is already in flight.
"""

import threading
from typing import Any, Optional


class CancellationToken:
    """Write-once cancellation flag.

    Example:
        >>> token = CancellationToken()
        >>> async for entry in traverse(root, cancellation_token=token):
        ...     if entry.name == 'stop.txt':
        ...         token.cancel("found it")
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = False
        self._reason: Optional[Any] = None

    def cancel(self, reason: Any = None) -> bool:
        """Request cancellation.

        Only the first call has any effect; later calls keep the original
        reason.

        Args:
            reason: Optional reason reported by AbortedError

        Returns:
            True if this call cancelled the token
        """
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            self._reason = reason
            return True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[Any]:
        return self._reason

    def __repr__(self) -> str:
        state = f"cancelled, reason={self._reason!r}" if self._cancelled else "active"
        return f"CancellationToken({state})"
