"""Cancellation signal shared by the walker, workers and aggregator."""

import threading
import time
from typing import Optional


class CancelToken:
    """A cancel flag with an optional deadline.

    Args:
        timeout: Seconds from construction until the token cancels itself
            (None = no deadline)

    Example:
        >>> token = CancelToken(timeout=30)
        >>> summary = scan_project(".", options, token)
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._reason = "cancelled"

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel("deadline exceeded")
            return True
        return False

    @property
    def reason(self) -> str:
        return self._reason
